"""Tests for the read-after-write consistency poller."""

import pytest
import requests

from ccd_client.consistency import ConsistencyPoller, RetryPolicy, SingleShotSearch, cases_not_found
from ccd_client.exceptions import CcdClientError
from ccd_client.models import SearchResult, CaseRecord

from .conftest import FakeTransport, RecordingPause, search_payload

HEADERS = {"Authorization": "Bearer token"}
QUERY = '{"query":{}}'


def _poller(config, payloads, pause):
    remaining = list(payloads)

    def _respond(call):
        return remaining.pop(0) if len(remaining) > 1 else remaining[0]

    transport = FakeTransport(_respond)
    poller = ConsistencyPoller(SingleShotSearch(transport, config), RetryPolicy(7, 5), pause)
    return poller, transport


def test_exact_count_converges_on_first_attempt(config, recording_pause, caplog):
    poller, transport = _poller(config, [search_payload(3, ["A", "B", "C"])], recording_pause)

    with caplog.at_level("INFO"):
        result = poller.poll_for_case_ids("ET_EnglandWales", QUERY, HEADERS, ["A", "B", "C"])

    assert result.total == 3
    assert [case.ethos_case_reference for case in result.cases] == ["A", "B", "C"]
    assert len(transport.calls) == 1
    assert recording_pause.pauses == []
    missing = [r for r in caplog.records if r.getMessage() == "ccd.search.cases_not_found"]
    assert missing[-1].missing == []


def test_exact_count_converges_on_sixth_attempt(config, recording_pause):
    payloads = [search_payload(1, ["A"])] * 5 + [search_payload(2, ["A", "B"])]
    poller, transport = _poller(config, payloads, recording_pause)

    result = poller.poll_for_case_ids("ET_EnglandWales", QUERY, HEADERS, ["A", "B"])

    assert result.total == 2
    assert len(transport.calls) == 6
    assert len(recording_pause.pauses) == 5


def test_exact_count_exhaustion_returns_stale_result_and_reports_missing(config, recording_pause, caplog):
    poller, transport = _poller(config, [search_payload(1, ["A"])], recording_pause)

    with caplog.at_level("INFO"):
        result = poller.poll_for_case_ids("ET_EnglandWales", QUERY, HEADERS, ["A", "B"])

    assert result.total == 1
    assert len(transport.calls) == 6
    assert len(recording_pause.pauses) == len(transport.calls) - 1
    missing = [r for r in caplog.records if r.getMessage() == "ccd.search.cases_not_found"]
    assert missing[-1].missing == ["B"]


def test_exhaustion_returns_the_sixth_result_without_a_seventh_search(config, recording_pause):
    payloads = [search_payload(1, [f"attempt-{n}"]) for n in range(1, 8)]
    poller, transport = _poller(config, payloads, recording_pause)

    result = poller.poll_for_case_ids("ET_EnglandWales", QUERY, HEADERS, ["A", "B"])

    assert len(transport.calls) == 6
    assert len(recording_pause.pauses) == 5
    assert [case.ethos_case_reference for case in result.cases] == ["attempt-6"]


def test_exhaustion_with_only_null_results_returns_none(config, recording_pause):
    poller, transport = _poller(config, [None], recording_pause)

    assert poller.poll_for_case_ids("ET_EnglandWales", QUERY, HEADERS, ["A"]) is None
    assert len(transport.calls) == 6


@pytest.mark.parametrize("body", [[], ["A"], {"total": 1, "cases": {"id": "1"}}, {"total": 1, "cases": [None]}])
def test_malformed_search_body_is_not_retried_as_index_lag(config, recording_pause, body):
    poller, transport = _poller(config, [body], recording_pause)

    with pytest.raises(CcdClientError):
        poller.poll_for_single("ET_EnglandWales_Multiple", QUERY, HEADERS)

    assert len(transport.calls) == 1
    assert recording_pause.pauses == []


def test_singleton_expects_one_regardless_of_identifier_list(config, recording_pause):
    payloads = [search_payload(0), search_payload(2, ["M1", "M2"]), search_payload(1, ["M1"])]
    poller, transport = _poller(config, payloads, recording_pause)

    result = poller.poll_for_single("ET_EnglandWales_Multiple", QUERY, HEADERS)

    assert result.total == 1
    assert len(transport.calls) == 3
    assert recording_pause.pauses == [5, 5]


def test_total_is_compared_not_number_of_cases(config, recording_pause):
    # the index reports 3 matches but caps the returned page at 2 records
    poller, transport = _poller(config, [search_payload(3, ["A", "B"])], recording_pause)

    result = poller.poll_until_consistent("ET_EnglandWales", QUERY, HEADERS, 3)

    assert result.total == 3
    assert len(result.cases) == 2
    assert len(transport.calls) == 1


def test_transport_error_aborts_poll(config, recording_pause):
    def _respond(call):
        raise requests.ConnectionError("boom")

    transport = FakeTransport(_respond)
    poller = ConsistencyPoller(SingleShotSearch(transport, config), RetryPolicy(), recording_pause)

    with pytest.raises(requests.ConnectionError):
        poller.poll_for_single("ET_EnglandWales_Multiple", QUERY, HEADERS)

    assert len(transport.calls) == 1
    assert recording_pause.pauses == []


def test_poll_sends_query_to_search_endpoint(config, recording_pause):
    poller, transport = _poller(config, [search_payload(1, ["A"])], recording_pause)

    poller.poll_for_single("ET_Scotland", QUERY, HEADERS)

    call = transport.calls[0]
    assert call.method == "POST"
    assert call.url == "http://ccd.local/searchCases?ctid=ET_Scotland"
    assert call.body == QUERY
    assert call.headers == HEADERS


def test_cases_not_found_is_order_preserving_multiset_difference():
    result = SearchResult(
        total=2,
        cases=[
            CaseRecord(case_data={"ethosCaseReference": "B"}),
            CaseRecord(case_data={"ethosCaseReference": "A"}),
        ],
    )

    assert cases_not_found(["A", "C", "B", "A"], result) == ["C", "A"]
    assert cases_not_found(["A"], None) == ["A"]
