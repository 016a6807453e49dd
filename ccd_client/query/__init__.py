"""Elasticsearch query payloads sent to the case data store search endpoint."""

from .es_queries import (
    ALL_VENUES,
    MAX_ES_SIZE,
    bulk_search_query,
    date_window,
    labels_search_query,
    listing_query,
    listing_range_date_query,
    listing_venue_and_range_date_query,
    report_range_date_query,
    schedule_search_query,
    search_query,
)

__all__ = [
    "ALL_VENUES",
    "MAX_ES_SIZE",
    "bulk_search_query",
    "date_window",
    "labels_search_query",
    "listing_query",
    "listing_range_date_query",
    "listing_venue_and_range_date_query",
    "report_range_date_query",
    "schedule_search_query",
    "search_query",
]
