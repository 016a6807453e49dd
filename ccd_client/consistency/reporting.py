"""Diagnostics comparing requested case references with what a search returned."""

from __future__ import annotations

import logging
from collections import Counter
from typing import Iterable, List, Optional

from ..models import CaseRecord, SearchResult


logger = logging.getLogger(__name__)


def cases_not_found(case_ids: Iterable[str], result: Optional[SearchResult[CaseRecord]]) -> List[str]:
    """Return the requested references absent from ``result``, in request order.

    The difference is a multiset one: a reference requested twice but found once is
    reported once. Purely informational; callers never branch on it.
    """

    found = Counter()
    if result is not None:
        found.update(case.ethos_case_reference for case in result.cases)

    missing: List[str] = []
    for case_id in case_ids:
        if found[case_id] > 0:
            found[case_id] -= 1
        else:
            missing.append(case_id)

    logger.info("ccd.search.cases_not_found", extra={"missing": missing, "count": len(missing)})
    return missing
