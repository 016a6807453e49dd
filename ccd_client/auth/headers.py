"""Request header assembly for case data store calls."""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass
from typing import Dict, Optional, Protocol

from ..exceptions import FormattedInputError


logger = logging.getLogger(__name__)

AUTHORIZATION = "Authorization"
SERVICE_AUTHORIZATION = "ServiceAuthorization"
CONTENT_TYPE = "Content-Type"
APPLICATION_JSON_UTF8 = "application/json;charset=UTF-8"

# Underscores are accepted alongside letters, digits, dots and whitespace.
AUTH_TOKEN_PATTERN = re.compile(r"[A-Za-z0-9._\s]+")


class AuthTokenGenerator(Protocol):
    """Source of service-to-service tokens."""

    def generate(self) -> str:
        ...


@dataclass(frozen=True)
class StaticAuthTokenGenerator:
    """Hand out a fixed service token, typically injected by the deployment."""

    token: str

    @classmethod
    def from_env(cls, variable: str = "S2S_TOKEN") -> "StaticAuthTokenGenerator":
        token = os.getenv(variable)
        if not token:
            raise FormattedInputError(f"{variable} is not set")
        return cls(token=token)

    def generate(self) -> str:
        return self.token


class HeaderBuilder:
    """Validate the caller's bearer token and attach the standard request headers."""

    def __init__(self, token_generator: AuthTokenGenerator) -> None:
        self.token_generator = token_generator

    def build(self, auth_token: Optional[str]) -> Dict[str, str]:
        """Return the headers for one request.

        Raises:
            FormattedInputError: if ``auth_token`` is empty or contains characters other
                than letters, digits, ``.``, ``_`` and whitespace.
        """

        if not auth_token or AUTH_TOKEN_PATTERN.fullmatch(auth_token) is None:
            logger.warning("ccd.headers.invalid_token")
            raise FormattedInputError("authToken regex exception")

        return {
            AUTHORIZATION: auth_token,
            SERVICE_AUTHORIZATION: self.token_generator.generate(),
            CONTENT_TYPE: APPLICATION_JSON_UTF8,
        }
