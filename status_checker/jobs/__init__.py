"""Concurrent check runs and the retry policy they apply per URL."""

from status_checker.jobs.retry import attempt_with_retry
from status_checker.jobs.runner import ConfigurationError, RunConfig, WorkerPool, run_checks

__all__ = ["ConfigurationError", "RunConfig", "WorkerPool", "attempt_with_retry", "run_checks"]
