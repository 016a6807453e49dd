"""Bounded-retry combinator shared by every read-after-write poll.

The attempt counter starts at 1. After a non-converging ``fetch`` the poll is exhausted
once the next attempt number would reach ``policy.max_attempts``, so at most
``max_attempts - 1`` calls are made (one when ``max_attempts`` is 1), with a pause of
``policy.interval_seconds`` between consecutive calls and none after the last. It stops as
soon as ``converged(result)`` holds. On exhaustion the last fetched result is handed back
unmodified; exceptions raised by ``fetch`` abort the poll.
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Generic, Optional, TypeVar


logger = logging.getLogger(__name__)

R = TypeVar("R")

DEFAULT_MAX_ATTEMPTS = 7
DEFAULT_INTERVAL_SECONDS = 5.0


@dataclass(frozen=True)
class RetryPolicy:
    """Attempt budget and fixed pause between attempts."""

    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    interval_seconds: float = DEFAULT_INTERVAL_SECONDS

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be at least 1, got {self.max_attempts}")
        if self.interval_seconds < 0:
            raise ValueError(f"interval_seconds must not be negative, got {self.interval_seconds}")

    @property
    def max_calls(self) -> int:
        return max(1, self.max_attempts - 1)

    @property
    def max_wait_seconds(self) -> float:
        return (self.max_calls - 1) * self.interval_seconds


class Pause:
    """Blocking pause that can be cut short by a cancellation event.

    When ``cancel_event`` fires the pause returns early and reports it by returning
    ``True``, leaving the event set so the surrounding code still sees the cancellation.
    The poll then moves straight on to its next attempt.
    """

    def __init__(
        self,
        cancel_event: Optional[threading.Event] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.cancel_event = cancel_event
        self.sleep = sleep

    def __call__(self, seconds: float) -> bool:
        if self.cancel_event is None:
            self.sleep(seconds)
            return False
        return self.cancel_event.wait(seconds)


@dataclass
class PollOutcome(Generic[R]):
    """What a poll ended with and how it got there."""

    result: Optional[R]
    attempts: int
    converged: bool


def poll_until(
    fetch: Callable[[], Optional[R]],
    converged: Callable[[Optional[R]], bool],
    policy: RetryPolicy = RetryPolicy(),
    pause: Optional[Callable[[float], Optional[bool]]] = None,
) -> PollOutcome[R]:
    """Call ``fetch`` until ``converged`` accepts its result or the budget runs out."""

    pause = pause or Pause()
    attempt = 1
    interrupted = False
    while True:
        logger.info(
            "ccd.poll.attempt",
            extra={"attempt": attempt, "max_attempts": policy.max_attempts},
        )
        result = fetch()
        if converged(result):
            logger.info("ccd.poll.converged", extra={"attempts": attempt})
            return PollOutcome(result=result, attempts=attempt, converged=True)
        if attempt + 1 >= policy.max_attempts:
            logger.warning(
                "ccd.poll.exhausted",
                extra={"attempts": attempt, "result_present": result is not None},
            )
            return PollOutcome(result=result, attempts=attempt, converged=False)
        if pause(policy.interval_seconds):
            # first interruption in this poll is an error, repeats only echo the set event
            logger.log(
                logging.DEBUG if interrupted else logging.ERROR,
                "ccd.poll.sleep_interrupted",
                extra={"attempt": attempt, "seconds": policy.interval_seconds},
            )
            interrupted = True
        attempt += 1
