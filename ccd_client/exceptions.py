"""Error taxonomy for the case data store client.

Transport failures are not wrapped: ``requests.RequestException`` subclasses raised by
the HTTP layer reach callers unmodified.
"""

from __future__ import annotations


class CcdClientError(Exception):
    """Base exception for client-side failures."""


class FormattedInputError(CcdClientError, ValueError):
    """Raised when caller-supplied input (e.g. a bearer token) is malformed."""


class PaginationContractError(CcdClientError):
    """Raised when the pagination metadata request returns an unusable page count."""

    def __init__(self, detail: str, payload: object = None):
        super().__init__(f"Pagination metadata contract violated: {detail}")
        self.detail = detail
        self.payload = payload
