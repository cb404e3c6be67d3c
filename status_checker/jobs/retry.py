"""Fixed-delay retry policy around a single-attempt prober."""

import logging
import time
from dataclasses import replace
from typing import Callable, Protocol

from status_checker.network import AttemptOutcome

LOGGER = logging.getLogger(__name__)

RETRY_DELAY_SECONDS = 0.1


class Prober(Protocol):
    def probe(self, url: str, timeout: float) -> AttemptOutcome:
        ...


def attempt_with_retry(
    prober: Prober,
    url: str,
    timeout: float,
    max_retries: int,
    *,
    delay_seconds: float = RETRY_DELAY_SECONDS,
    sleep: Callable[[float], None] = time.sleep,
) -> AttemptOutcome:
    """Probe ``url`` until it answers or ``max_retries`` extra attempts are spent.

    Returns the outcome of the last attempt made, with ``attempt`` set to the
    number of probes issued. Earlier attempts' timings are dropped.
    """
    if max_retries < 0:
        raise ValueError("max_retries must be >= 0")

    total = max_retries + 1
    for attempt in range(1, total + 1):
        outcome = replace(prober.probe(url, timeout), attempt=attempt)
        if outcome.ok:
            return outcome

        if attempt == total:
            LOGGER.warning(
                "Giving up on %s after %s attempt(s): %s",
                url,
                total,
                outcome.error,
            )
            return outcome

        LOGGER.warning(
            "Probe failed for %s (attempt %s/%s): %s",
            url,
            attempt,
            total,
            outcome.error,
        )
        sleep(delay_seconds)

    raise AssertionError("unreachable")  # pragma: no cover


__all__ = ["attempt_with_retry", "Prober", "RETRY_DELAY_SECONDS"]
