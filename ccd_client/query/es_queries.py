"""Builders for the search payloads accepted by ``/searchCases``.

All builders are pure and return the JSON document as a string, ready to be posted.
"""

from __future__ import annotations

import datetime as dt
import json
from typing import Any, Dict, Iterable, List, Optional, Tuple


MAX_ES_SIZE = 10000
ALL_VENUES = "All"
DATE_TIME_FORMAT = "%Y-%m-%dT%H:%M:%S.000"

ETHOS_CASE_REFERENCE_KEYWORD = "data.ethosCaseReference.keyword"
MULTIPLE_REFERENCE_KEYWORD = "data.multipleReference.keyword"
HEARING_DATE_PREFIX = "data.hearingCollection.value.hearingDateCollection.value"
LISTING_DATE_FIELD = f"{HEARING_DATE_PREFIX}.listedDate"
DATE_ACCEPTED_FIELD = "data.preAcceptCase.dateAccepted"
RECEIPT_DATE_FIELD = "data.receiptDate"

SCHEDULE_SOURCE_FIELDS = [
    "data.ethosCaseReference",
    "data.claimant_TypeOfClaimant",
    "data.claimant_Company",
    "data.claimantIndType.*",
    "data.claimantType.*",
    "data.respondentCollection",
    "data.positionType",
]

LABELS_SOURCE_FIELDS = [
    "data.ethosCaseReference",
    "data.claimant_TypeOfClaimant",
    "data.claimant_Company",
    "data.claimantIndType.*",
    "data.claimantType.*",
    "data.representativeClaimantType.*",
    "data.respondentCollection",
    "data.repCollection",
]

# Report type -> date field the report is ranged over.
REPORT_DATE_FIELDS: Dict[str, str] = {
    "Claims Accepted": DATE_ACCEPTED_FIELD,
    "Live Caseload": DATE_ACCEPTED_FIELD,
    "Cases Completed": LISTING_DATE_FIELD,
    "Cases Awaiting Judgment": LISTING_DATE_FIELD,
    "Hearings to Judgments": LISTING_DATE_FIELD,
    "Time to first hearing": RECEIPT_DATE_FIELD,
    "Case Source Local Report": RECEIPT_DATE_FIELD,
}


def _dump(query: Dict[str, Any]) -> str:
    return json.dumps(query, separators=(",", ":"))


def _terms_body(case_ids: Iterable[str], source: Optional[List[str]] = None) -> Dict[str, Any]:
    body: Dict[str, Any] = {
        "size": MAX_ES_SIZE,
        "query": {"terms": {ETHOS_CASE_REFERENCE_KEYWORD: list(case_ids)}},
    }
    if source is not None:
        body["_source"] = list(source)
    return body


def _range(field: str, date_from: str, date_to: str) -> Dict[str, Any]:
    return {"range": {field: {"gte": date_from, "lte": date_to}}}


def search_query(case_ids: Iterable[str]) -> str:
    """Match every case whose ethos reference is in ``case_ids``."""

    return _dump(_terms_body(case_ids))


def schedule_search_query(case_ids: Iterable[str]) -> str:
    return _dump(_terms_body(case_ids, SCHEDULE_SOURCE_FIELDS))


def labels_search_query(case_ids: Iterable[str]) -> str:
    return _dump(_terms_body(case_ids, LABELS_SOURCE_FIELDS))


def bulk_search_query(multiple_reference: str) -> str:
    """Match the bulk or multiple aggregate identified by ``multiple_reference``."""

    return _dump(
        {
            "size": MAX_ES_SIZE,
            "query": {"term": {MULTIPLE_REFERENCE_KEYWORD: multiple_reference}},
        }
    )


def listing_range_date_query(date_from: str, date_to: str) -> str:
    return _dump(
        {
            "size": MAX_ES_SIZE,
            "query": {"bool": {"filter": [_range(LISTING_DATE_FIELD, date_from, date_to)]}},
        }
    )


def listing_venue_and_range_date_query(date_from: str, date_to: str, venue: str, mapping: str) -> str:
    """Listing range restricted to ``venue``, matched on the ``mapping`` venue field."""

    return _dump(
        {
            "size": MAX_ES_SIZE,
            "query": {
                "bool": {
                    "filter": [
                        _range(LISTING_DATE_FIELD, date_from, date_to),
                        {"term": {f"{HEARING_DATE_PREFIX}.{mapping}.keyword": venue}},
                    ]
                }
            },
        }
    )


def listing_query(date_from: str, date_to: str, venue: str, mapping: str) -> str:
    if venue == ALL_VENUES:
        return listing_range_date_query(date_from, date_to)
    return listing_venue_and_range_date_query(date_from, date_to, venue, mapping)


def report_range_date_query(date_from: str, date_to: str, report_type: str) -> str:
    field = REPORT_DATE_FIELDS.get(report_type, LISTING_DATE_FIELD)
    return _dump(
        {
            "size": MAX_ES_SIZE,
            "query": {"bool": {"filter": [_range(field, date_from, date_to)]}},
        }
    )


def date_window(date_from: str, date_to: str) -> Tuple[str, str]:
    """Turn ISO dates into the inclusive datetime window used by range queries.

    A single-day window ends at the last second of that day; otherwise the window ends
    at the start of ``date_to``.
    """

    start = dt.datetime.combine(dt.date.fromisoformat(date_from), dt.time.min)
    if date_to == date_from:
        end = start + dt.timedelta(days=1) - dt.timedelta(seconds=1)
    else:
        end = dt.datetime.combine(dt.date.fromisoformat(date_to), dt.time.min)
    return start.strftime(DATE_TIME_FORMAT), end.strftime(DATE_TIME_FORMAT)
