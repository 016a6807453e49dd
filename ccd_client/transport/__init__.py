"""Transport package wrapping the HTTP session used for every backend call."""

from .http_transport import HttpTransport

__all__ = ["HttpTransport"]
