"""Full enumeration of a paginated case listing.

The page count comes from a separate metadata request, so the enumeration is only as
stable as the backend's total between the metadata request and the last page: records written
during a collection can be skipped or returned twice.
"""

from __future__ import annotations

import logging
from typing import List, Mapping

from ..config import CcdClientConfig
from ..exceptions import CcdClientError
from ..models import CaseRecord, PageMetadata, ResourceLocator
from ..transport import HttpTransport
from .search import RecordFactory


logger = logging.getLogger(__name__)


class PaginatedCollector:
    """Fetch pages ``1..total_pages_count`` in order and concatenate them.

    Pages are fetched strictly one after another. A page that comes back empty
    (``None``) contributes nothing; transport errors propagate to the caller.
    """

    def __init__(self, transport: HttpTransport, config: CcdClientConfig) -> None:
        self.transport = transport
        self.config = config

    def page_metadata(self, locator: ResourceLocator, headers: Mapping[str, str]) -> PageMetadata:
        url = self.config.build_pagination_metadata_case_url(
            locator.uid, locator.jurisdiction, locator.case_type_id
        )
        return PageMetadata.from_payload(self.transport.get(url, headers))

    def collect(
        self,
        locator: ResourceLocator,
        headers: Mapping[str, str],
        record_factory: RecordFactory = CaseRecord.from_payload,
    ) -> List:
        total_pages = self.page_metadata(locator, headers).total_pages_count
        logger.info(
            "ccd.collect.start",
            extra={
                "case_type_id": locator.case_type_id,
                "jurisdiction": locator.jurisdiction,
                "total_pages": total_pages,
            },
        )

        records: List = []
        for page in range(1, total_pages + 1):
            url = self.config.build_retrieve_cases_url(
                locator.uid, locator.jurisdiction, locator.case_type_id, page
            )
            payload = self.transport.get(url, headers)
            if payload is None:
                logger.info("ccd.collect.empty_page", extra={"page": page})
                continue
            if not isinstance(payload, list):
                raise CcdClientError(f"Page {page} response is not a list of cases")
            if not all(isinstance(item, Mapping) for item in payload):
                raise CcdClientError(f"Page {page} response contains a case that is not an object")
            records.extend(record_factory(item) for item in payload)
            logger.info(
                "ccd.collect.page",
                extra={"page": page, "records": len(payload), "retrieved": len(records)},
            )

        logger.info("ccd.collect.complete", extra={"records": len(records)})
        return records
