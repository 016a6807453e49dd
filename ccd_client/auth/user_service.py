"""Resolve the caller's IDAM identity, needed to build caseworker-scoped URLs."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Mapping

from ..config import CcdClientConfig
from ..exceptions import CcdClientError
from ..transport import HttpTransport


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UserDetails:
    """Subset of the IDAM user profile the client relies on."""

    uid: str
    email: str = ""
    name: str = ""
    roles: List[str] = field(default_factory=list)

    @classmethod
    def from_payload(cls, payload: Mapping[str, object]) -> "UserDetails":
        uid = payload.get("uid") or payload.get("id")
        if not uid:
            raise CcdClientError("IDAM user details response carries no uid")
        forename = str(payload.get("forename") or "")
        surname = str(payload.get("surname") or "")
        name = str(payload.get("name") or " ".join(part for part in (forename, surname) if part))
        return cls(
            uid=str(uid),
            email=str(payload.get("email") or ""),
            name=name,
            roles=[str(role) for role in payload.get("roles") or []],
        )


class IdamUserService:
    """Look up user details for a bearer token."""

    def __init__(self, transport: HttpTransport, config: CcdClientConfig) -> None:
        self.transport = transport
        self.config = config

    def get_user_details(self, auth_token: str) -> UserDetails:
        payload = self.transport.get(
            self.config.build_user_details_url(),
            headers={"Authorization": auth_token},
        )
        if not isinstance(payload, Mapping):
            raise CcdClientError("IDAM user details response was empty")
        details = UserDetails.from_payload(payload)
        logger.debug("idam.user_details", extra={"uid": details.uid})
        return details
