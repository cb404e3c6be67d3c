"""Per-URL result records and the thread-safe collector that aggregates them."""

import threading
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from status_checker.network import AttemptOutcome


@dataclass(frozen=True)
class Result:
    """Final outcome for one URL after retries.

    Exactly one of ``status_code`` and ``error`` is set. ``time_ms`` is the
    elapsed time of the attempt that produced the outcome, not a sum across
    attempts.
    """

    url: str
    status_code: Optional[int]
    error: Optional[str]
    time_ms: int
    timestamp: datetime
    attempts: int = 1

    def __post_init__(self) -> None:
        if (self.status_code is None) == (self.error is None):
            raise ValueError(f"result for {self.url} must carry exactly one of status_code or error")
        if self.time_ms < 0:
            raise ValueError("time_ms must be non-negative")

    @property
    def ok(self) -> bool:
        return self.status_code is not None

    @classmethod
    def from_outcome(cls, outcome: AttemptOutcome, timestamp: Optional[datetime] = None) -> "Result":
        return cls(
            url=outcome.url,
            status_code=outcome.status_code,
            error=outcome.error,
            time_ms=outcome.elapsed_ms,
            timestamp=timestamp or datetime.now(timezone.utc),
            attempts=outcome.attempt,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Return the persisted shape: ``url``, ``status`` or ``error``, ``time_ms``, ``timestamp``."""
        data: Dict[str, Any] = {"url": self.url}
        if self.status_code is not None:
            data["status"] = self.status_code
        else:
            data["error"] = self.error
        data["time_ms"] = self.time_ms
        data["timestamp"] = self.timestamp.isoformat(timespec="milliseconds")
        return data


class ResultCollector:
    """Append-only sink shared by the workers of one run.

    Results are keyed by the input position of their URL, so ``collect`` can
    return them in input order no matter which worker finished first.
    """

    def __init__(self, expected: Optional[int] = None) -> None:
        self._lock = threading.Lock()
        self._results: Dict[int, Result] = {}
        self._expected = expected

    def add(self, position: int, result: Result) -> None:
        with self._lock:
            if position in self._results:
                raise ValueError(f"duplicate result for input position {position}")
            self._results[position] = result

    def collect(self) -> List[Result]:
        """Return all results ordered by input position."""
        with self._lock:
            return [self._results[pos] for pos in sorted(self._results)]

    def to_persistable_form(self) -> List[Dict[str, Any]]:
        return [result.to_dict() for result in self.collect()]

    def summary(self) -> Dict[str, int]:
        results = self.collect()
        ok = sum(1 for r in results if r.ok)
        return {"total": len(results), "ok": ok, "failed": len(results) - ok}

    def is_complete(self) -> bool:
        """True when every expected input position has a result."""
        if self._expected is None:
            return True
        return len(self) == self._expected

    def __len__(self) -> int:
        with self._lock:
            return len(self._results)


__all__ = ["Result", "ResultCollector"]
