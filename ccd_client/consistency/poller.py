"""Read-after-write polling of the search index.

The index trails the transactional store, so right after a write the poller re-runs
the same query until the index reports the expected number of matches.

The returned value is best effort: on exhaustion it is whatever the last attempt saw,
possibly ``None`` or with a mismatched ``total``. Callers re-check ``total`` before
trusting it.
"""

from __future__ import annotations

import logging
from typing import Callable, List, Mapping, Optional, Sequence

from ..models import CaseRecord, SearchResult
from .reporting import cases_not_found
from .retry import Pause, PollOutcome, RetryPolicy, poll_until
from .search import RecordFactory, SingleShotSearch


logger = logging.getLogger(__name__)


def total_equals(expected_count: int) -> Callable[[Optional[SearchResult]], bool]:
    """Convergence predicate: a non-null result whose ``total`` is ``expected_count``."""

    def _converged(result: Optional[SearchResult]) -> bool:
        return result is not None and result.total == expected_count

    return _converged


class ConsistencyPoller:
    """Poll a search until its reported total matches an expected cardinality."""

    def __init__(
        self,
        searcher: SingleShotSearch,
        policy: Optional[RetryPolicy] = None,
        pause: Optional[Callable[[float], Optional[bool]]] = None,
    ) -> None:
        self.searcher = searcher
        self.policy = policy or RetryPolicy()
        self.pause = pause or Pause()

    def poll(
        self,
        case_type_id: str,
        query: str,
        headers: Mapping[str, str],
        expected_count: int,
        record_factory: RecordFactory = CaseRecord.from_payload,
    ) -> PollOutcome[SearchResult]:
        def _fetch() -> Optional[SearchResult]:
            result = self.searcher.fetch(case_type_id, query, headers, record_factory)
            if result is not None:
                logger.info(
                    "ccd.poll.total_found",
                    extra={"total": result.total, "expected": expected_count},
                )
            return result

        return poll_until(_fetch, total_equals(expected_count), self.policy, self.pause)

    def poll_until_consistent(
        self,
        case_type_id: str,
        query: str,
        headers: Mapping[str, str],
        expected_count: int,
        record_factory: RecordFactory = CaseRecord.from_payload,
    ) -> Optional[SearchResult]:
        return self.poll(case_type_id, query, headers, expected_count, record_factory).result

    def poll_for_case_ids(
        self,
        case_type_id: str,
        query: str,
        headers: Mapping[str, str],
        case_ids: Sequence[str],
    ) -> Optional[SearchResult[CaseRecord]]:
        """Exact-count variant: wait until every requested reference is indexed.

        When a result is available the references still missing from it are logged.
        """

        result = self.poll_until_consistent(case_type_id, query, headers, len(case_ids))
        if result is not None:
            cases_not_found(case_ids, result)
        return result

    def poll_for_single(
        self,
        case_type_id: str,
        query: str,
        headers: Mapping[str, str],
        record_factory: RecordFactory = CaseRecord.from_payload,
    ) -> Optional[SearchResult]:
        """Singleton variant: wait until exactly one aggregate record matches."""

        return self.poll_until_consistent(case_type_id, query, headers, 1, record_factory)


def cases_of(result: Optional[SearchResult]) -> List:
    return list(result.cases) if result is not None else []
