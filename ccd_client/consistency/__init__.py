"""Read-after-write consistency and full-collection retrieval."""

from .collector import PaginatedCollector
from .poller import ConsistencyPoller, cases_of, total_equals
from .reporting import cases_not_found
from .retry import Pause, PollOutcome, RetryPolicy, poll_until
from .search import SingleShotSearch

__all__ = [
    "PaginatedCollector",
    "ConsistencyPoller",
    "cases_of",
    "total_equals",
    "cases_not_found",
    "Pause",
    "PollOutcome",
    "RetryPolicy",
    "poll_until",
    "SingleShotSearch",
]
