"""Blocking HTTP transport backed by a shared ``requests.Session``.

The transport performs exactly one round trip per call. Retrying is the job of the
consistency layer, and timeouts are the only policy applied here.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Union

import requests


logger = logging.getLogger(__name__)

Body = Union[str, Mapping[str, Any], None]


@dataclass
class HttpTransport:
    """Send requests to the case data store and decode JSON responses.

    Non-2xx responses raise ``requests.HTTPError`` through ``raise_for_status``; connection
    failures and timeouts surface as the matching ``requests`` exceptions. Callers see
    those exceptions unmodified.
    """

    request_timeout: float = 30.0
    session: requests.Session = field(default_factory=requests.Session)

    def send(
        self,
        method: str,
        url: str,
        headers: Mapping[str, str],
        body: Body = None,
    ) -> Optional[Any]:
        """Issue a single request and return the decoded JSON body.

        Returns:
            The decoded payload, or ``None`` when the response body is empty.
        """

        data: Optional[str]
        if body is None or isinstance(body, str):
            data = body
        else:
            data = json.dumps(body)

        logger.debug(
            "ccd.request.start",
            extra={"url": url, "method": method, "headers": describe_headers(headers)},
        )
        response = self.session.request(
            method,
            url,
            headers=dict(headers),
            data=data.encode("utf-8") if data is not None else None,
            timeout=self.request_timeout,
        )
        logger.info(
            "ccd.request",
            extra={"url": url, "method": method, "status_code": response.status_code},
        )
        response.raise_for_status()

        if not response.content:
            return None
        return response.json()

    def get(self, url: str, headers: Mapping[str, str]) -> Optional[Any]:
        return self.send("GET", url, headers)

    def post(self, url: str, headers: Mapping[str, str], body: Body = None) -> Optional[Any]:
        return self.send("POST", url, headers, body)

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> "HttpTransport":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def describe_headers(headers: Mapping[str, str]) -> Dict[str, str]:
    """Return a copy of ``headers`` safe to log, with credentials masked."""

    masked = {}
    for name, value in headers.items():
        if name.lower() in {"authorization", "serviceauthorization"}:
            masked[name] = "***"
        else:
            masked[name] = value
    return masked
