"""Tests for the bounded-retry combinator and the interruptible pause."""

import threading

import pytest

from ccd_client.consistency import Pause, RetryPolicy, poll_until

from .conftest import RecordingPause


def _scripted(results):
    calls = {"count": 0}

    def _fetch():
        value = results[min(calls["count"], len(results) - 1)]
        calls["count"] += 1
        return value

    return _fetch, calls


def test_first_attempt_converges_without_pausing():
    fetch, calls = _scripted([3])
    pause = RecordingPause()

    outcome = poll_until(fetch, lambda value: value == 3, RetryPolicy(), pause)

    assert outcome.result == 3
    assert outcome.converged is True
    assert outcome.attempts == 1
    assert calls["count"] == 1
    assert pause.pauses == []


def test_converges_on_last_allowed_attempt():
    fetch, calls = _scripted([1, 1, 1, 1, 1, 2])
    pause = RecordingPause()

    outcome = poll_until(fetch, lambda value: value == 2, RetryPolicy(max_attempts=7, interval_seconds=5), pause)

    assert outcome.converged is True
    assert outcome.attempts == 6
    assert calls["count"] == 6
    assert pause.pauses == [5] * 5


def test_budget_ends_before_a_seventh_call():
    fetch, calls = _scripted([1, 1, 1, 1, 1, 1, 2])
    pause = RecordingPause()

    outcome = poll_until(fetch, lambda value: value == 2, RetryPolicy(max_attempts=7, interval_seconds=5), pause)

    assert outcome.converged is False
    assert outcome.result == 1
    assert calls["count"] == 6


def test_exhaustion_returns_last_result_and_pauses_between_attempts_only():
    fetch, calls = _scripted([None, 1, 1, 1, 1, 4, 9])
    pause = RecordingPause()

    outcome = poll_until(fetch, lambda value: value == 2, RetryPolicy(max_attempts=7, interval_seconds=5), pause)

    assert outcome.converged is False
    assert outcome.result == 4
    assert outcome.attempts == 6
    assert calls["count"] == 6
    assert len(pause.pauses) == outcome.attempts - 1


def test_none_result_is_retried():
    fetch, calls = _scripted([None, None, "ready"])

    outcome = poll_until(fetch, lambda value: value == "ready", RetryPolicy(4, 0), RecordingPause())

    assert outcome.result == "ready"
    assert calls["count"] == 3


def test_fetch_exception_aborts_the_poll():
    calls = {"count": 0}

    def _fetch():
        calls["count"] += 1
        raise ConnectionError("index unavailable")

    with pytest.raises(ConnectionError):
        poll_until(_fetch, lambda value: True, RetryPolicy(), RecordingPause())

    assert calls["count"] == 1


def test_single_attempt_policy_never_pauses():
    fetch, calls = _scripted([0])
    pause = RecordingPause()

    outcome = poll_until(fetch, lambda value: value == 1, RetryPolicy(max_attempts=1), pause)

    assert outcome.attempts == 1
    assert calls["count"] == 1
    assert pause.pauses == []


@pytest.mark.parametrize("kwargs", [{"max_attempts": 0}, {"interval_seconds": -1}])
def test_policy_rejects_invalid_budgets(kwargs):
    with pytest.raises(ValueError):
        RetryPolicy(**kwargs)


def test_default_policy_allows_six_calls_and_twenty_five_seconds_of_pauses():
    policy = RetryPolicy()

    assert policy.max_attempts == 7
    assert policy.interval_seconds == 5
    assert policy.max_calls == 6
    assert policy.max_wait_seconds == 25
    assert RetryPolicy(max_attempts=1).max_calls == 1
    assert RetryPolicy(max_attempts=1).max_wait_seconds == 0


def test_interrupted_pause_keeps_event_set_and_poll_continues(caplog):
    event = threading.Event()
    event.set()
    sleeps = []
    pause = Pause(cancel_event=event, sleep=sleeps.append)
    fetch, calls = _scripted([0, 0, 1])

    with caplog.at_level("DEBUG"):
        outcome = poll_until(fetch, lambda value: value == 1, RetryPolicy(max_attempts=4, interval_seconds=60), pause)

    assert outcome.converged is True
    assert calls["count"] == 3
    assert event.is_set()
    assert sleeps == []
    interrupted = [record for record in caplog.records if record.getMessage() == "ccd.poll.sleep_interrupted"]
    assert [record.levelname for record in interrupted] == ["ERROR", "DEBUG"]


def test_each_poll_reports_its_own_first_interruption(caplog):
    event = threading.Event()
    event.set()
    pause = Pause(cancel_event=event)
    policy = RetryPolicy(max_attempts=3, interval_seconds=60)

    with caplog.at_level("ERROR"):
        poll_until(lambda: 0, lambda value: value == 1, policy, pause)
        poll_until(lambda: 0, lambda value: value == 1, policy, pause)

    errors = [record for record in caplog.records if record.getMessage() == "ccd.poll.sleep_interrupted"]
    assert len(errors) == 2


def test_pause_reports_interruption():
    event = threading.Event()
    event.set()

    assert Pause(cancel_event=event)(60) is True


def test_pause_without_event_uses_sleep():
    sleeps = []

    assert Pause(sleep=sleeps.append)(5) is False
    assert sleeps == [5]


def test_pause_with_unset_event_waits_full_interval():
    event = threading.Event()
    pause = Pause(cancel_event=event)

    assert pause(0.01) is False
    assert not event.is_set()
