"""Single-shot search against the case data store index."""

from __future__ import annotations

import logging
from typing import Any, Callable, List, Mapping, Optional, TypeVar

from ..config import CcdClientConfig
from ..models import CaseRecord, SearchResult
from ..transport import HttpTransport


logger = logging.getLogger(__name__)

T = TypeVar("T")

RecordFactory = Callable[[Mapping[str, Any]], T]


class SingleShotSearch:
    """One request, one response, no consistency guarantee.

    Suitable for reporting queries where a slightly stale index is acceptable.
    """

    def __init__(self, transport: HttpTransport, config: CcdClientConfig) -> None:
        self.transport = transport
        self.config = config

    def fetch(
        self,
        case_type_id: str,
        query: str,
        headers: Mapping[str, str],
        record_factory: RecordFactory = CaseRecord.from_payload,
    ) -> Optional[SearchResult]:
        """Post ``query`` once and return the parsed result, or ``None`` for an empty body."""

        url = self.config.build_retrieve_cases_url_elastic_search(case_type_id)
        payload = self.transport.post(url, headers, query)
        return SearchResult.from_payload(payload, record_factory)

    def search(
        self,
        case_type_id: str,
        query: str,
        headers: Mapping[str, str],
        record_factory: RecordFactory = CaseRecord.from_payload,
    ) -> List:
        """Return the matching records; never ``None``."""

        logger.info("ccd.search.query", extra={"case_type_id": case_type_id, "query": query})
        result = self.fetch(case_type_id, query, headers, record_factory)
        if result is None:
            return []
        return list(result.cases)
