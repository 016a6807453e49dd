"""Client package exposing the case data store facade."""

from .ccd_client import MANUALLY_CREATED_POSITION, CcdClient

__all__ = ["CcdClient", "MANUALLY_CREATED_POSITION"]
