"""Data transfer objects exchanged with the case data store."""

from .case_data_builder import (
    CREATION_EVENT_SUMMARY,
    UPDATE_BULK_EVENT_SUMMARY,
    UPDATE_EVENT_SUMMARY,
    CaseDataBuilder,
)
from .case_models import (
    CCDRequest,
    CaseRecord,
    PageMetadata,
    ResourceLocator,
    SearchResult,
)

__all__ = [
    "CREATION_EVENT_SUMMARY",
    "UPDATE_BULK_EVENT_SUMMARY",
    "UPDATE_EVENT_SUMMARY",
    "CaseDataBuilder",
    "CCDRequest",
    "CaseRecord",
    "PageMetadata",
    "ResourceLocator",
    "SearchResult",
]
