"""Authentication collaborators: request headers, service tokens and user lookup."""

from .headers import (
    AuthTokenGenerator,
    HeaderBuilder,
    StaticAuthTokenGenerator,
)
from .user_service import IdamUserService, UserDetails

__all__ = [
    "AuthTokenGenerator",
    "HeaderBuilder",
    "StaticAuthTokenGenerator",
    "IdamUserService",
    "UserDetails",
]
