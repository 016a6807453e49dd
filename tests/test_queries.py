"""Tests for the search payload builders."""

import json

import pytest

from ccd_client.query import (
    bulk_search_query,
    date_window,
    labels_search_query,
    listing_query,
    report_range_date_query,
    schedule_search_query,
    search_query,
)
from ccd_client.query.es_queries import DATE_ACCEPTED_FIELD, LISTING_DATE_FIELD


def test_search_query_matches_references():
    query = json.loads(search_query(["2500001/2021", "2500002/2021"]))

    assert query["size"] == 10000
    assert query["query"]["terms"]["data.ethosCaseReference.keyword"] == ["2500001/2021", "2500002/2021"]
    assert "_source" not in query


@pytest.mark.parametrize("builder", [schedule_search_query, labels_search_query])
def test_schedule_and_labels_restrict_source(builder):
    query = json.loads(builder(["A"]))

    assert query["query"]["terms"]["data.ethosCaseReference.keyword"] == ["A"]
    assert "data.ethosCaseReference" in query["_source"]


def test_bulk_search_query():
    query = json.loads(bulk_search_query("2500123"))

    assert query["query"] == {"term": {"data.multipleReference.keyword": "2500123"}}


def test_listing_query_for_all_venues_only_ranges_dates():
    query = json.loads(listing_query("a", "b", "All", "hearingVenueDay"))

    assert query["query"]["bool"]["filter"] == [{"range": {LISTING_DATE_FIELD: {"gte": "a", "lte": "b"}}}]


def test_listing_query_for_venue_adds_term_on_mapping():
    query = json.loads(listing_query("a", "b", "Leeds", "hearingVenueDay"))

    filters = query["query"]["bool"]["filter"]
    assert filters[1] == {
        "term": {"data.hearingCollection.value.hearingDateCollection.value.hearingVenueDay.keyword": "Leeds"}
    }


def test_report_query_uses_report_date_field():
    query = json.loads(report_range_date_query("a", "b", "Claims Accepted"))
    fallback = json.loads(report_range_date_query("a", "b", "Unknown"))

    assert DATE_ACCEPTED_FIELD in query["query"]["bool"]["filter"][0]["range"]
    assert LISTING_DATE_FIELD in fallback["query"]["bool"]["filter"][0]["range"]


def test_single_day_window_ends_at_last_second():
    assert date_window("2021-03-04", "2021-03-04") == ("2021-03-04T00:00:00.000", "2021-03-04T23:59:59.000")


def test_multi_day_window_ends_at_start_of_last_day():
    assert date_window("2021-03-04", "2021-03-10") == ("2021-03-04T00:00:00.000", "2021-03-10T00:00:00.000")
