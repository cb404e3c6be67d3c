"""Terminal progress lines for completed checks."""

import sys
from typing import Callable, Optional, TextIO

from status_checker.results import Result


def short_error(error: str) -> str:
    """Return the category part of an error string (text before the first ``:``)."""
    head = error.split(":", 1)[0].strip()
    return head or "Unknown error"


def format_progress_line(result: Result) -> str:
    stamp = result.timestamp.astimezone().strftime("%H:%M:%S")
    if result.ok:
        return f"[{stamp}] {result.url} => {result.status_code} ({result.time_ms} ms)"
    return f"[{stamp}] {result.url} => ERROR: {short_error(result.error or '')}"


def progress_printer(stream: Optional[TextIO] = None) -> Callable[[Result], None]:
    """Build an ``on_result`` callback that prints one line per completed URL."""

    def _print(result: Result) -> None:
        target = stream or sys.stdout
        print(format_progress_line(result), file=target, flush=True)

    return _print


__all__ = ["format_progress_line", "progress_printer", "short_error"]
