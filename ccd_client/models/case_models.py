"""Case records, search results and pagination metadata.

Every ``from_payload`` constructor accepts the decoded JSON produced by the case data
store; unknown keys are ignored.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Generic, List, Mapping, Optional, TypeVar

from ..exceptions import CcdClientError, PaginationContractError


T = TypeVar("T")


@dataclass(frozen=True)
class ResourceLocator:
    """Identifies one case type in one jurisdiction, scoped to a caseworker."""

    uid: str
    jurisdiction: str
    case_type_id: str


@dataclass
class CaseRecord:
    """A single case (or bulk/multiple aggregate) as returned by the data store."""

    id: Optional[str] = None
    state: Optional[str] = None
    case_type_id: Optional[str] = None
    jurisdiction: Optional[str] = None
    case_data: Dict[str, Any] = field(default_factory=dict)

    @property
    def ethos_case_reference(self) -> Optional[str]:
        return self.case_data.get("ethosCaseReference")

    @property
    def multiple_reference(self) -> Optional[str]:
        return self.case_data.get("multipleReference")

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "CaseRecord":
        case_id = payload.get("id", payload.get("case_id"))
        return cls(
            id=str(case_id) if case_id is not None else None,
            state=payload.get("state"),
            case_type_id=payload.get("case_type_id"),
            jurisdiction=payload.get("jurisdiction"),
            case_data=dict(payload.get("case_data") or payload.get("data") or {}),
        )


@dataclass(frozen=True)
class PageMetadata:
    """Result of the pagination metadata request."""

    total_pages_count: int

    @classmethod
    def from_payload(cls, payload: Any) -> "PageMetadata":
        """Validate the pagination metadata response.

        Raises:
            PaginationContractError: if the body is missing, carries no page count, or the
                count is not a non-negative integer.
        """

        if not isinstance(payload, Mapping):
            raise PaginationContractError("metadata response was empty", payload)
        count = payload.get("total_pages_count", payload.get("totalPagesCount"))
        if count is None:
            raise PaginationContractError("total_pages_count is absent", payload)
        if isinstance(count, bool) or not isinstance(count, int):
            raise PaginationContractError(f"total_pages_count is not an integer: {count!r}", payload)
        if count < 0:
            raise PaginationContractError(f"total_pages_count is negative: {count}", payload)
        return cls(total_pages_count=count)


@dataclass
class SearchResult(Generic[T]):
    """One response from the search endpoint.

    ``total`` is the index's own match count and may exceed ``len(cases)`` when the
    backend caps the page size.
    """

    total: int
    cases: List[T] = field(default_factory=list)

    @classmethod
    def from_payload(
        cls,
        payload: Any,
        record_factory: Callable[[Mapping[str, Any]], T],
    ) -> Optional["SearchResult[T]"]:
        """Parse a search response; ``None`` only for an empty body.

        Raises:
            CcdClientError: if the body is not an object, ``cases`` is not a list, or a case
                entry is not an object.
        """

        if payload is None:
            return None
        if not isinstance(payload, Mapping):
            raise CcdClientError(f"Search response is not an object: {type(payload).__name__}")
        raw_cases = payload.get("cases") or []
        if not isinstance(raw_cases, list):
            raise CcdClientError("Search response cases is not a list")
        if not all(isinstance(item, Mapping) for item in raw_cases):
            raise CcdClientError("Search response contains a case that is not an object")
        return cls(
            total=int(payload.get("total") or 0),
            cases=[record_factory(item) for item in raw_cases],
        )


@dataclass
class CCDRequest:
    """Event trigger token and the case snapshot returned when starting an event."""

    token: Optional[str] = None
    event_id: Optional[str] = None
    case_details: Optional[CaseRecord] = None

    @classmethod
    def from_payload(cls, payload: Any) -> Optional["CCDRequest"]:
        if not isinstance(payload, Mapping):
            return None
        details = payload.get("case_details")
        return cls(
            token=payload.get("token"),
            event_id=payload.get("event_id"),
            case_details=CaseRecord.from_payload(details) if isinstance(details, Mapping) else None,
        )
