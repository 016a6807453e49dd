"""Facade over the case data store API.

Writes go to the transactional store; reads either go straight to the store, enumerate
it page by page, or query the search index. Index reads that follow a write use the
consistency poller, everything else is a single best-effort request.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

from ..auth import AuthTokenGenerator, HeaderBuilder, IdamUserService
from ..config import CcdClientConfig
from ..consistency import (
    ConsistencyPoller,
    PaginatedCollector,
    Pause,
    RetryPolicy,
    SingleShotSearch,
    cases_of,
)
from ..models import (
    CREATION_EVENT_SUMMARY,
    UPDATE_BULK_EVENT_SUMMARY,
    UPDATE_EVENT_SUMMARY,
    CCDRequest,
    CaseDataBuilder,
    CaseRecord,
    ResourceLocator,
)
from ..query import (
    bulk_search_query,
    date_window,
    labels_search_query,
    listing_query,
    report_range_date_query,
    schedule_search_query,
    search_query,
)
from ..transport import HttpTransport


logger = logging.getLogger(__name__)

MANUALLY_CREATED_POSITION = "Manually Created"

UrlBuilder = Callable[[str, str, str], str]
CaseUrlBuilder = Callable[[str, str, str, str], str]


class CcdClient:
    """Stateless client; one instance can serve concurrent callers.

    Each call builds its own headers and request state, so nothing is shared between
    invocations beyond the immutable collaborators given at construction.
    """

    def __init__(
        self,
        transport: HttpTransport,
        config: CcdClientConfig,
        token_generator: AuthTokenGenerator,
        user_service: Optional[IdamUserService] = None,
        case_data_builder: Optional[CaseDataBuilder] = None,
        pause: Optional[Callable[[float], Optional[bool]]] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> None:
        self.transport = transport
        self.config = config
        self.headers = HeaderBuilder(token_generator)
        self.user_service = user_service or IdamUserService(transport, config)
        self.case_data_builder = case_data_builder or CaseDataBuilder()
        self.searcher = SingleShotSearch(transport, config)
        self.collector = PaginatedCollector(transport, config)
        self.poller = ConsistencyPoller(
            self.searcher,
            policy=RetryPolicy(
                max_attempts=config.poll_max_attempts,
                interval_seconds=config.poll_interval_seconds,
            ),
            pause=pause or Pause(cancel_event=cancel_event),
        )

    @classmethod
    def from_env(cls, token_generator: AuthTokenGenerator, **kwargs: Any) -> "CcdClient":
        config = CcdClientConfig.from_env()
        return cls(HttpTransport(request_timeout=config.request_timeout), config, token_generator, **kwargs)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _uid(self, auth_token: str) -> str:
        return self.user_service.get_user_details(auth_token).uid

    def _start(self, auth_token: str, build_url: UrlBuilder, jurisdiction: str, case_type_id: str) -> Optional[CCDRequest]:
        headers = self.headers.build(auth_token)
        url = build_url(self._uid(auth_token), jurisdiction, case_type_id)
        return CCDRequest.from_payload(self.transport.get(url, headers))

    def _start_for_case(
        self, auth_token: str, build_url: CaseUrlBuilder, case_type_id: str, jurisdiction: str, cid: str
    ) -> Optional[CCDRequest]:
        headers = self.headers.build(auth_token)
        url = build_url(self._uid(auth_token), jurisdiction, case_type_id, cid)
        return CCDRequest.from_payload(self.transport.get(url, headers))

    def _submit_event(
        self,
        auth_token: str,
        content: Dict[str, Any],
        case_type_id: str,
        jurisdiction: str,
        cid: str,
    ) -> Optional[CaseRecord]:
        headers = self.headers.build(auth_token)
        url = self.config.build_submit_event_for_case_url(self._uid(auth_token), jurisdiction, case_type_id, cid)
        payload = self.transport.post(url, headers, content)
        return CaseRecord.from_payload(payload) if payload is not None else None

    def _collect(self, auth_token: str, case_type_id: str, jurisdiction: str) -> List[CaseRecord]:
        headers = self.headers.build(auth_token)
        locator = ResourceLocator(self._uid(auth_token), jurisdiction, case_type_id)
        return self.collector.collect(locator, headers)

    def _search(self, auth_token: str, case_type_id: str, query: str) -> List[CaseRecord]:
        headers = self.headers.build(auth_token)
        return self.searcher.search(case_type_id, query, headers)

    # ------------------------------------------------------------------
    # Case creation
    # ------------------------------------------------------------------
    def start_case_creation(self, auth_token: str, case_details: CaseRecord) -> Optional[CCDRequest]:
        return self._start(
            auth_token,
            self.config.build_start_case_creation_url,
            case_details.jurisdiction or "",
            case_details.case_type_id or "",
        )

    def start_case_creation_transfer(self, auth_token: str, case_details: CaseRecord) -> Optional[CCDRequest]:
        return self._start(
            auth_token,
            self.config.build_start_case_creation_transfer_url,
            case_details.jurisdiction or "",
            case_details.case_type_id or "",
        )

    def start_case_transfer(self, auth_token: str, case_type_id: str, jurisdiction: str) -> Optional[CCDRequest]:
        return self._start(auth_token, self.config.build_start_case_transfer_url, jurisdiction, case_type_id)

    def return_case_creation_transfer(
        self, auth_token: str, case_type_id: str, jurisdiction: str
    ) -> Optional[CCDRequest]:
        return self._start(auth_token, self.config.build_return_case_creation_transfer_url, jurisdiction, case_type_id)

    def start_case_multiple_creation(
        self, auth_token: str, case_type_id: str, jurisdiction: str
    ) -> Optional[CCDRequest]:
        return self._start(auth_token, self.config.build_start_case_multiple_creation_url, jurisdiction, case_type_id)

    def submit_case_creation(
        self, auth_token: str, case_details: CaseRecord, request: CCDRequest
    ) -> Optional[CaseRecord]:
        headers = self.headers.build(auth_token)
        content = self.case_data_builder.build_case_data_content(
            case_details.case_data, request, CREATION_EVENT_SUMMARY
        )
        url = self.config.build_submit_case_creation_url(
            self._uid(auth_token), case_details.jurisdiction or "", case_details.case_type_id or ""
        )
        payload = self.transport.post(url, headers, content)
        return CaseRecord.from_payload(payload) if payload is not None else None

    # ------------------------------------------------------------------
    # Direct store reads
    # ------------------------------------------------------------------
    def retrieve_case(self, auth_token: str, case_type_id: str, jurisdiction: str, cid: str) -> Optional[CaseRecord]:
        headers = self.headers.build(auth_token)
        url = self.config.build_retrieve_case_url(self._uid(auth_token), jurisdiction, case_type_id, cid)
        payload = self.transport.get(url, headers)
        return CaseRecord.from_payload(payload) if payload is not None else None

    def retrieve_cases(self, auth_token: str, case_type_id: str, jurisdiction: str) -> List[CaseRecord]:
        return self._collect(auth_token, case_type_id, jurisdiction)

    def retrieve_reference_data_cases(self, auth_token: str, case_type_id: str, jurisdiction: str) -> List[CaseRecord]:
        return self._collect(auth_token, case_type_id, jurisdiction)

    def retrieve_bulk_cases(self, auth_token: str, case_type_id: str, jurisdiction: str) -> List[CaseRecord]:
        return self._collect(auth_token, case_type_id, jurisdiction)

    # ------------------------------------------------------------------
    # Single-shot index reads
    # ------------------------------------------------------------------
    def retrieve_cases_venue_and_date_elastic_search(
        self,
        auth_token: str,
        case_type_id: str,
        date_from: str,
        date_to: str,
        venue: str,
        venue_mapping: str,
    ) -> List[CaseRecord]:
        start, end = date_window(date_from, date_to)
        query = listing_query(start, end, venue, venue_mapping)
        return self._search(auth_token, case_type_id, query)

    def retrieve_cases_generic_report_elastic_search(
        self,
        auth_token: str,
        case_type_id: str,
        date_from: str,
        date_to: str,
        report_type: str,
    ) -> List[CaseRecord]:
        start, end = date_window(date_from, date_to)
        logger.info("ccd.search.report", extra={"report_type": report_type, "from": start, "to": end})
        return self._search(auth_token, case_type_id, report_range_date_query(start, end, report_type))

    def retrieve_cases_elastic_search(
        self, auth_token: str, case_type_id: str, case_ids: Sequence[str]
    ) -> List[CaseRecord]:
        return self._search(auth_token, case_type_id, search_query(case_ids))

    def retrieve_cases_elastic_search_schedule(
        self, auth_token: str, case_type_id: str, case_ids: Sequence[str]
    ) -> List[CaseRecord]:
        return self._search(auth_token, case_type_id, schedule_search_query(case_ids))

    def retrieve_cases_elastic_search_labels(
        self, auth_token: str, case_type_id: str, case_ids: Sequence[str]
    ) -> List[CaseRecord]:
        return self._search(auth_token, case_type_id, labels_search_query(case_ids))

    def retrieve_bulk_cases_elastic_search(
        self, auth_token: str, case_type_id: str, multiple_reference: str
    ) -> List[CaseRecord]:
        return self._search(auth_token, case_type_id, bulk_search_query(multiple_reference))

    def retrieve_multiple_cases_elastic_search(
        self, auth_token: str, case_type_id: str, multiple_reference: str
    ) -> List[CaseRecord]:
        return self._search(auth_token, case_type_id, bulk_search_query(multiple_reference))

    # ------------------------------------------------------------------
    # Polled index reads (read-after-write)
    # ------------------------------------------------------------------
    def retrieve_cases_elastic_search_for_creation(
        self,
        auth_token: str,
        case_type_id: str,
        case_ids: Sequence[str],
        multiple_source: str,
    ) -> List[CaseRecord]:
        """Read cases back after a multiple was created.

        Manually created multiples reference cases that already exist, so one search is
        enough; other sources have just written the cases and wait for the index.
        """

        if multiple_source == MANUALLY_CREATED_POSITION:
            return self.retrieve_cases_elastic_search(auth_token, case_type_id, case_ids)
        return self.retrieve_cases_elastic_search_with_retries(auth_token, case_type_id, case_ids)

    def retrieve_cases_elastic_search_with_retries(
        self, auth_token: str, case_type_id: str, case_ids: Sequence[str]
    ) -> List[CaseRecord]:
        headers = self.headers.build(auth_token)
        query = search_query(case_ids)
        logger.info("ccd.search.query_with_retries", extra={"case_type_id": case_type_id, "query": query})
        return cases_of(self.poller.poll_for_case_ids(case_type_id, query, headers, case_ids))

    def retrieve_multiple_cases_elastic_search_with_retries(
        self, auth_token: str, case_type_id: str, multiple_reference: str
    ) -> List[CaseRecord]:
        headers = self.headers.build(auth_token)
        query = bulk_search_query(multiple_reference)
        logger.info("ccd.search.query_with_retries", extra={"case_type_id": case_type_id, "query": query})
        return cases_of(self.poller.poll_for_single(case_type_id, query, headers))

    # ------------------------------------------------------------------
    # Events on existing cases
    # ------------------------------------------------------------------
    def start_event_for_case(self, auth_token: str, case_type_id: str, jurisdiction: str, cid: str) -> Optional[CCDRequest]:
        return self._start_for_case(
            auth_token, self.config.build_start_event_for_case_url, case_type_id, jurisdiction, cid
        )

    def start_event_for_case_api_role(
        self, auth_token: str, case_type_id: str, jurisdiction: str, cid: str
    ) -> Optional[CCDRequest]:
        return self._start_for_case(
            auth_token, self.config.build_start_event_for_case_url_api_role, case_type_id, jurisdiction, cid
        )

    def start_event_for_case_bulk_single(
        self, auth_token: str, case_type_id: str, jurisdiction: str, cid: str
    ) -> Optional[CCDRequest]:
        return self._start_for_case(
            auth_token, self.config.build_start_event_for_case_url_bulk_single, case_type_id, jurisdiction, cid
        )

    def start_event_for_case_pre_accept_bulk_single(
        self, auth_token: str, case_type_id: str, jurisdiction: str, cid: str
    ) -> Optional[CCDRequest]:
        return self._start_for_case(
            auth_token,
            self.config.build_start_event_for_case_url_pre_accept_bulk_single,
            case_type_id,
            jurisdiction,
            cid,
        )

    def start_bulk_event_for_case(
        self, auth_token: str, case_type_id: str, jurisdiction: str, cid: str
    ) -> Optional[CCDRequest]:
        return self._start_for_case(
            auth_token, self.config.build_start_event_for_bulk_case_url, case_type_id, jurisdiction, cid
        )

    def start_bulk_amend_event_for_case(
        self, auth_token: str, case_type_id: str, jurisdiction: str, cid: str
    ) -> Optional[CCDRequest]:
        return self._start_for_case(
            auth_token, self.config.build_start_event_for_bulk_amend_case_url, case_type_id, jurisdiction, cid
        )

    def submit_event_for_case(
        self,
        auth_token: str,
        case_data: Mapping[str, Any],
        case_type_id: str,
        jurisdiction: str,
        request: CCDRequest,
        cid: str,
    ) -> Optional[CaseRecord]:
        content = self.case_data_builder.build_case_data_content(case_data, request, UPDATE_EVENT_SUMMARY)
        return self._submit_event(auth_token, content, case_type_id, jurisdiction, cid)

    def submit_bulk_event_for_case(
        self,
        auth_token: str,
        bulk_data: Mapping[str, Any],
        case_type_id: str,
        jurisdiction: str,
        request: CCDRequest,
        cid: str,
    ) -> Optional[CaseRecord]:
        content = self.case_data_builder.build_bulk_data_content(bulk_data, request, UPDATE_BULK_EVENT_SUMMARY)
        return self._submit_event(auth_token, content, case_type_id, jurisdiction, cid)

    def submit_multiple_event_for_case(
        self,
        auth_token: str,
        multiple_data: Mapping[str, Any],
        case_type_id: str,
        jurisdiction: str,
        request: CCDRequest,
        cid: str,
    ) -> Optional[CaseRecord]:
        content = self.case_data_builder.build_multiple_data_content(
            multiple_data, request, UPDATE_BULK_EVENT_SUMMARY
        )
        return self._submit_event(auth_token, content, case_type_id, jurisdiction, cid)
