"""Top-level package exposing the case data store client and its consistency layer."""

from .auth import HeaderBuilder, IdamUserService, StaticAuthTokenGenerator, UserDetails
from .client import CcdClient
from .config import CcdClientConfig
from .consistency import (
    ConsistencyPoller,
    PaginatedCollector,
    Pause,
    RetryPolicy,
    SingleShotSearch,
    cases_not_found,
    poll_until,
)
from .exceptions import CcdClientError, FormattedInputError, PaginationContractError
from .models import CaseRecord, CCDRequest, PageMetadata, ResourceLocator, SearchResult
from .transport import HttpTransport

__all__ = [
    "HeaderBuilder",
    "IdamUserService",
    "StaticAuthTokenGenerator",
    "UserDetails",
    "CcdClient",
    "CcdClientConfig",
    "ConsistencyPoller",
    "PaginatedCollector",
    "Pause",
    "RetryPolicy",
    "SingleShotSearch",
    "cases_not_found",
    "poll_until",
    "CcdClientError",
    "FormattedInputError",
    "PaginationContractError",
    "CaseRecord",
    "CCDRequest",
    "PageMetadata",
    "ResourceLocator",
    "SearchResult",
    "HttpTransport",
]
