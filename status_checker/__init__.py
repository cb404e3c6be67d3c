"""Concurrent URL status checking with bounded workers, timeouts and retries."""

from status_checker.jobs import ConfigurationError, RunConfig, WorkerPool, attempt_with_retry, run_checks
from status_checker.network import AttemptOutcome, HttpProber, probe_url
from status_checker.results import Result, ResultCollector

__all__ = [
    "AttemptOutcome",
    "ConfigurationError",
    "HttpProber",
    "Result",
    "ResultCollector",
    "RunConfig",
    "WorkerPool",
    "attempt_with_retry",
    "probe_url",
    "run_checks",
]
