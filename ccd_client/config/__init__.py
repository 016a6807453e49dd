"""Configuration package holding endpoint settings and URL builders."""

from .client_config import CcdClientConfig

__all__ = ["CcdClientConfig"]
