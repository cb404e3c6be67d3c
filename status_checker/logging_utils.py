"""Logging setup for status-check runs.

``configure_logging`` points the root logger at ``<LOG_DIR>/<app>-<run>.log``
(plus stderr on request) and stamps every record with ``run=<id>`` so the
lines of one check run can be pulled out of a shared log directory.

Timings are written as single ``event=perf`` lines::

    event=perf name=jobs.run_checks duration_ms=812.004 success=true tags={urls=40}

``perf`` wraps a function, ``perf_span`` wraps a block and can collect tags
that are only known once the block has run (failed URL counts, output path).
"""

import functools
import logging
import sys
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, Mapping, Optional

from status_checker.config import AppConfig

DEFAULT_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s [run=%(run_id)s] %(message)s"
PERF_LINE = "event=perf name=%s duration_ms=%.3f success=%s tags=%s"

# urllib3 logs every connection it opens at DEBUG; one per URL drowns the run log.
NOISY_LOGGERS = ("urllib3", "urllib3.connectionpool")


class _RunIdFilter(logging.Filter):
    def __init__(self, run_id: str) -> None:
        super().__init__()
        self._run_id = run_id

    def filter(self, record: logging.LogRecord) -> bool:
        record.run_id = self._run_id
        return True


def _file_token(run_id: str) -> str:
    return "".join(ch if ch.isalnum() or ch in ("-", "_") else "-" for ch in run_id)


def generate_run_id() -> str:
    """UTC start time of the run, e.g. ``20260314T120500Z``."""
    return datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ")


def _reset_root(root_logger: logging.Logger) -> None:
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
        # Stream handlers may wrap stderr or a test capture; only files are ours to close.
        if isinstance(handler, logging.FileHandler):
            handler.close()


def configure_logging(
    config: AppConfig,
    run_id: Optional[str] = None,
    include_console: bool = True,
    fmt: str = DEFAULT_LOG_FORMAT,
    quiet: Iterable[str] = NOISY_LOGGERS,
) -> Path:
    """Route root logging into this check run's log file.

    Handlers from an earlier run in the same process are dropped first.
    Console output goes to stderr so it never mixes with the progress lines
    printed on stdout. Loggers named in ``quiet`` are held at WARNING unless
    the run itself logs at WARNING or above.

    Returns:
        Path of the log file for this run.
    """
    resolved_run_id = run_id or generate_run_id()

    config.log_directory.mkdir(parents=True, exist_ok=True)
    log_path = config.log_directory / f"{config.app_name}-{_file_token(resolved_run_id)}.log"

    root_logger = logging.getLogger()
    _reset_root(root_logger)

    handlers = [logging.FileHandler(log_path, encoding="utf-8")]
    if include_console:
        handlers.append(logging.StreamHandler(sys.stderr))

    run_filter = _RunIdFilter(resolved_run_id)
    for handler in handlers:
        handler.setFormatter(logging.Formatter(fmt))
        handler.addFilter(run_filter)
        root_logger.addHandler(handler)

    level = getattr(logging, config.log_level.upper(), logging.INFO)
    root_logger.setLevel(level)
    for name in quiet:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    return log_path


def _format_tags(tags: Optional[Mapping[str, Any]]) -> str:
    if not tags:
        return "{}"
    return "{" + ", ".join(f"{key}={tags[key]!r}" for key in sorted(tags)) + "}"


def _log_perf(
    logger: logging.Logger,
    level: int,
    name: str,
    start_ns: int,
    success: bool,
    tags: Optional[Mapping[str, Any]],
) -> None:
    duration_ms = (time.monotonic_ns() - start_ns) / 1_000_000.0
    logger.log(level, PERF_LINE, name, duration_ms, str(success).lower(), _format_tags(tags))


def perf(
    name: Optional[str] = None,
    *,
    tags: Optional[Mapping[str, Any]] = None,
    level: int = logging.INFO,
) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Time every call of the decorated function.

    The line is written to the function's module logger, named ``name`` or
    ``<module>.<qualname>``. A raising call is logged with ``success=false``
    and the exception propagates unchanged.
    """

    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        span_name = name or f"{func.__module__}.{func.__qualname__}"
        logger = logging.getLogger(func.__module__)

        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            start_ns = time.monotonic_ns()
            success = False
            try:
                result = func(*args, **kwargs)
                success = True
                return result
            finally:
                _log_perf(logger, level, span_name, start_ns, success, tags)

        return wrapper

    return decorator


class perf_span:
    """Time a block of a check run.

    Example:
        with perf_span("check.total", tags={"urls": len(urls)}) as span:
            collector = run_checks(urls, run_config)
            span.tag(failed=collector.summary()["failed"])
    """

    def __init__(
        self,
        name: str,
        *,
        tags: Optional[Mapping[str, Any]] = None,
        level: int = logging.INFO,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._name = name
        self._tags: Dict[str, Any] = dict(tags or {})
        self._level = level
        self._logger = logger or logging.getLogger(__name__)
        self._start_ns = 0

    def tag(self, **tags: Any) -> None:
        """Add tags to the line written when the block exits."""
        self._tags.update(tags)

    def __enter__(self) -> "perf_span":
        self._start_ns = time.monotonic_ns()
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        _log_perf(self._logger, self._level, self._name, self._start_ns, exc_type is None, self._tags)
        return False


__all__ = [
    "DEFAULT_LOG_FORMAT",
    "NOISY_LOGGERS",
    "configure_logging",
    "generate_run_id",
    "perf",
    "perf_span",
]
