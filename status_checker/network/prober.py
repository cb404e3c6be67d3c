"""Single-attempt HTTP reachability probes.

A probe issues exactly one request and reports what happened: the status code
when any HTTP status line came back (4xx/5xx included), or a short error
description when the transport failed. Probes never raise for per-URL
failures and never retry; see ``status_checker.jobs.retry`` for that.

Error strings start with a category followed by ``": "`` and the underlying
exception text, e.g. ``"timeout: HTTPSConnectionPool(...): Read timed out."``.
"""

import logging
import queue
import threading
import time
from dataclasses import dataclass
from typing import Dict, Mapping, Optional, Tuple

import requests

LOGGER = logging.getLogger(__name__)

HEADERS = {
    "User-Agent": "status-checker/1.0",
    "Accept": "*/*",
}


@dataclass(frozen=True)
class AttemptOutcome:
    """Result of one probe attempt against a URL.

    Attributes:
        url: The probed URL.
        status_code: HTTP status observed, or None when the attempt failed.
        error: Error description, or None when a status line was received.
        elapsed_ms: Wall time of this attempt in milliseconds.
        attempt: 1-based attempt number, filled in by the retry policy.
    """

    url: str
    status_code: Optional[int]
    error: Optional[str]
    elapsed_ms: int
    attempt: int = 1

    def __post_init__(self) -> None:
        if (self.status_code is None) == (self.error is None):
            raise ValueError("exactly one of status_code or error must be set")

    @property
    def ok(self) -> bool:
        return self.status_code is not None


def _elapsed_ms(start_ns: int) -> int:
    return max(0, (time.perf_counter_ns() - start_ns) // 1_000_000)


def describe_error(exc: BaseException) -> str:
    """Map a transport exception to ``"<category>: <detail>"``."""
    # Timeout before SSLError/ConnectionError: ConnectTimeout subclasses both.
    if isinstance(exc, requests.exceptions.Timeout):
        category = "timeout"
    elif isinstance(exc, requests.exceptions.SSLError):
        category = "tls error"
    elif isinstance(exc, requests.exceptions.ConnectionError):
        category = "connection error"
    elif isinstance(exc, requests.exceptions.TooManyRedirects):
        category = "too many redirects"
    elif isinstance(
        exc,
        (
            requests.exceptions.MissingSchema,
            requests.exceptions.InvalidSchema,
            requests.exceptions.InvalidURL,
        ),
    ):
        category = "invalid url"
    else:
        category = "request error"
    detail = str(exc) or exc.__class__.__name__
    return f"{category}: {detail}"


class DeadlineExceeded(requests.exceptions.Timeout):
    """No response head arrived before the attempt's overall deadline."""


class HttpProber:
    """Issue single reachability requests through a shared Requests session.

    ``requests.Session`` pools connections and is safe to share across worker
    threads for plain requests like these.
    """

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        *,
        headers: Mapping[str, str] = HEADERS,
        method: str = "GET",
    ) -> None:
        self._session = session or requests.Session()
        self._headers: Dict[str, str] = dict(headers)
        self._method = method.upper()

    def _send(self, url: str, timeout: float) -> requests.Response:
        """Send the request on a helper thread and stop waiting after ``timeout``.

        ``requests`` bounds the connect step and each socket read, not the whole
        wait for the response head, so a server trickling its headers would keep
        the attempt open. A response that lands after the deadline is closed by
        the helper thread.
        """
        box: "queue.Queue[Tuple[Optional[requests.Response], Optional[BaseException]]]" = queue.Queue(maxsize=1)
        lock = threading.Lock()
        abandoned = threading.Event()

        def _run() -> None:
            response: Optional[requests.Response] = None
            error: Optional[BaseException] = None
            try:
                response = self._session.request(
                    self._method,
                    url,
                    headers=self._headers,
                    timeout=timeout,
                    stream=True,
                    allow_redirects=True,
                )
            except Exception as exc:  # noqa: BLE001
                error = exc
            with lock:
                if abandoned.is_set():
                    if response is not None:
                        response.close()
                    return
                box.put((response, error))

        threading.Thread(target=_run, name="status-probe", daemon=True).start()
        try:
            response, error = box.get(timeout=timeout)
        except queue.Empty:
            with lock:
                if box.empty():
                    abandoned.set()
                    raise DeadlineExceeded(f"no response from {url} within {timeout:g}s")
            response, error = box.get_nowait()

        if error is not None:
            raise error
        return response

    def probe(self, url: str, timeout: float) -> AttemptOutcome:
        """Probe ``url`` once, waiting at most ``timeout`` seconds for a response.

        Only the status line and headers are awaited (``stream=True``); the body
        is never read.
        """
        start_ns = time.perf_counter_ns()
        try:
            response = self._send(url, timeout)
        except Exception as exc:  # noqa: BLE001
            elapsed_ms = _elapsed_ms(start_ns)
            error = describe_error(exc)
            LOGGER.debug("probe failed url=%s elapsed_ms=%s error=%s", url, elapsed_ms, error)
            return AttemptOutcome(url=url, status_code=None, error=error, elapsed_ms=elapsed_ms)

        elapsed_ms = _elapsed_ms(start_ns)
        status_code = int(response.status_code)
        response.close()
        LOGGER.debug("probe url=%s status=%s elapsed_ms=%s", url, status_code, elapsed_ms)
        return AttemptOutcome(url=url, status_code=status_code, error=None, elapsed_ms=elapsed_ms)

    def close(self) -> None:
        self._session.close()

    def __enter__(self) -> "HttpProber":
        return self

    def __exit__(self, exc_type, exc, exc_tb) -> None:
        self.close()


def probe_url(url: str, timeout: float) -> AttemptOutcome:
    """Probe ``url`` once with a throwaway session."""
    with HttpProber() as prober:
        return prober.probe(url, timeout)


__all__ = ["AttemptOutcome", "DeadlineExceeded", "HttpProber", "HEADERS", "describe_error", "probe_url"]
