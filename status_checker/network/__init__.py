"""Network utilities for outbound reachability checks.

Exports:
- ``AttemptOutcome``: what a single probe attempt observed.
- ``HttpProber``: one-request-per-call prober over a shared Requests session.
- ``probe_url``: convenience wrapper using a throwaway session.
- ``describe_error``: transport exception to ``"<category>: <detail>"``.
- ``DeadlineExceeded``: raised internally when a request overruns its deadline.
"""

from status_checker.network.prober import (
    AttemptOutcome,
    DeadlineExceeded,
    HEADERS,
    HttpProber,
    describe_error,
    probe_url,
)

__all__ = [
    "AttemptOutcome",
    "DeadlineExceeded",
    "HEADERS",
    "HttpProber",
    "describe_error",
    "probe_url",
]
