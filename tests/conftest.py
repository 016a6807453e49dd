"""Shared fakes for the ccd_client tests. No test touches the network."""

from dataclasses import dataclass
from typing import Any, Callable, List, Optional

import pytest

from ccd_client.auth import StaticAuthTokenGenerator
from ccd_client.config import CcdClientConfig


@dataclass
class Call:
    method: str
    url: str
    headers: dict
    body: Any = None


class FakeTransport:
    """Stand-in for ``HttpTransport`` that records calls and delegates to ``responder``."""

    def __init__(self, responder: Callable[[Call], Any]):
        self.responder = responder
        self.calls: List[Call] = []

    def send(self, method, url, headers, body=None):
        call = Call(method, url, dict(headers), body)
        self.calls.append(call)
        return self.responder(call)

    def get(self, url, headers):
        return self.send("GET", url, headers)

    def post(self, url, headers, body=None):
        return self.send("POST", url, headers, body)

    def calls_to(self, fragment: str) -> List[Call]:
        return [call for call in self.calls if fragment in call.url]


class RecordingPause:
    def __init__(self):
        self.pauses: List[float] = []

    def __call__(self, seconds: float) -> None:
        self.pauses.append(seconds)


def search_payload(total: int, refs: Optional[List[str]] = None) -> dict:
    refs = refs or []
    return {
        "total": total,
        "cases": [
            {"id": str(1000 + index), "state": "Accepted", "case_data": {"ethosCaseReference": ref}}
            for index, ref in enumerate(refs)
        ],
    }


@pytest.fixture
def config():
    return CcdClientConfig(
        ccd_data_store_api_url="http://ccd.local",
        idam_api_url="http://idam.local",
    )


@pytest.fixture
def token_generator():
    return StaticAuthTokenGenerator(token="s2s-token")


@pytest.fixture
def recording_pause():
    return RecordingPause()
