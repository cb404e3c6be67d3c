"""Run orchestration: a bounded pool of workers checking a list of URLs."""

import logging
import queue
import time
import uuid
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, List, Optional, Sequence, Tuple

from status_checker.jobs.retry import RETRY_DELAY_SECONDS, Prober, attempt_with_retry
from status_checker.logging_utils import perf
from status_checker.network import HttpProber
from status_checker.results import Result, ResultCollector

LOGGER = logging.getLogger(__name__)

ProgressCallback = Callable[[Result], None]


class ConfigurationError(ValueError):
    """Raised for run settings that make a run impossible to start."""


@dataclass(frozen=True)
class RunConfig:
    worker_count: int
    timeout_seconds: float
    max_retries: int = 0
    retry_delay_seconds: float = RETRY_DELAY_SECONDS

    def __post_init__(self) -> None:
        if self.worker_count < 1:
            raise ConfigurationError(f"worker_count must be >= 1 (got {self.worker_count})")
        if not self.timeout_seconds > 0:
            raise ConfigurationError(f"timeout_seconds must be positive (got {self.timeout_seconds})")
        if self.max_retries < 0:
            raise ConfigurationError(f"max_retries must be >= 0 (got {self.max_retries})")
        if self.retry_delay_seconds < 0:
            raise ConfigurationError("retry_delay_seconds must be >= 0")


class WorkerPool:
    """Fixed-size pool of threads pulling URLs from one shared queue.

    Each worker takes the next URL as soon as it finishes the previous one, so
    a slow URL only holds up its own worker. Every URL ends as exactly one
    ``Result`` in the collector; ``on_result`` is called per URL right after it
    completes, in completion order.
    """

    def __init__(
        self,
        prober: Prober,
        config: RunConfig,
        on_result: Optional[ProgressCallback] = None,
        sleep: Optional[Callable[[float], None]] = None,
    ) -> None:
        self._prober = prober
        self._config = config
        self._on_result = on_result
        self._sleep = sleep or time.sleep

    def _check(self, url: str) -> Result:
        try:
            outcome = attempt_with_retry(
                self._prober,
                url,
                self._config.timeout_seconds,
                self._config.max_retries,
                delay_seconds=self._config.retry_delay_seconds,
                sleep=self._sleep,
            )
        except Exception as exc:  # noqa: BLE001
            LOGGER.error("Unhandled exception while checking %s: %s", url, exc, exc_info=True)
            return Result(
                url=url,
                status_code=None,
                error=f"worker failed: {exc}",
                time_ms=0,
                timestamp=datetime.now(timezone.utc),
            )
        return Result.from_outcome(outcome, timestamp=datetime.now(timezone.utc))

    def _notify(self, result: Result) -> None:
        if self._on_result is None:
            return
        try:
            self._on_result(result)
        except Exception as exc:  # noqa: BLE001
            LOGGER.error("Progress callback failed for %s: %s", result.url, exc, exc_info=True)

    def _worker(
        self,
        worker_id: int,
        tasks: "queue.Queue[Tuple[int, str]]",
        collector: ResultCollector,
    ) -> int:
        handled = 0
        while True:
            try:
                position, url = tasks.get_nowait()
            except queue.Empty:
                LOGGER.debug("worker=%s drained queue after %s url(s)", worker_id, handled)
                return handled

            result = self._check(url)
            collector.add(position, result)
            handled += 1
            LOGGER.debug(
                "worker=%s url=%s ok=%s time_ms=%s attempts=%s",
                worker_id,
                url,
                result.ok,
                result.time_ms,
                result.attempts,
            )
            self._notify(result)

    def run_into(self, urls: Sequence[str], collector: ResultCollector) -> ResultCollector:
        """Check every URL in ``urls`` and return once all have a result."""
        if not urls:
            LOGGER.info("No URLs to check")
            return collector

        tasks: "queue.Queue[Tuple[int, str]]" = queue.Queue()
        for position, url in enumerate(urls):
            tasks.put((position, url))

        workers = max(1, min(self._config.worker_count, len(urls)))
        LOGGER.info(
            "Starting %d worker(s) over %d url(s) (timeout=%ss retries=%s)",
            workers,
            len(urls),
            self._config.timeout_seconds,
            self._config.max_retries,
        )

        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="status-worker") as executor:
            futures = [
                executor.submit(self._worker, worker_id, tasks, collector)
                for worker_id in range(workers)
            ]
            for fut in futures:
                fut.result()

        if not collector.is_complete():
            LOGGER.error(
                "Run finished with %d result(s) for %d url(s); some urls were never checked",
                len(collector),
                len(urls),
            )
        return collector

    def run(self, urls: Sequence[str]) -> List[Result]:
        collector = ResultCollector(expected=len(urls))
        return self.run_into(urls, collector).collect()


@perf("jobs.run_checks", tags={"component": "jobs"})
def run_checks(
    urls: Sequence[str],
    config: RunConfig,
    *,
    prober: Optional[Prober] = None,
    on_result: Optional[ProgressCallback] = None,
) -> ResultCollector:
    """Check ``urls`` with ``config`` and return the populated collector.

    When no prober is given, an ``HttpProber`` is created for the run and
    closed afterwards.
    """
    check_run_id = str(uuid.uuid4())
    owned_prober = prober is None
    active_prober: Prober = HttpProber() if prober is None else prober

    LOGGER.info("Check run %s started for %d url(s)", check_run_id, len(urls))
    collector = ResultCollector(expected=len(urls))
    try:
        WorkerPool(active_prober, config, on_result=on_result).run_into(urls, collector)
    finally:
        if owned_prober:
            active_prober.close()  # type: ignore[attr-defined]

    summary = collector.summary()
    if summary["failed"]:
        LOGGER.warning(
            "Run summary: total=%s ok=%s failed=%s status=DEGRADED",
            summary["total"],
            summary["ok"],
            summary["failed"],
        )
    else:
        LOGGER.info(
            "Run summary: total=%s ok=%s failed=%s status=OK",
            summary["total"],
            summary["ok"],
            summary["failed"],
        )
    LOGGER.info("Check run %s completed", check_run_id)
    return collector


__all__ = ["ConfigurationError", "RunConfig", "WorkerPool", "run_checks"]
