"""Endpoint settings and URL builders for the case data store API.

The config object is built once and shared by every collaborator. URL builders are pure
functions of their arguments and never fail.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional
from urllib.parse import quote


def _env_int(environ: Mapping[str, str], name: str, default: int) -> int:
    raw = environ.get(name)
    if raw is None or not raw.strip():
        return default
    return int(raw)


def _env_float(environ: Mapping[str, str], name: str, default: float) -> float:
    raw = environ.get(name)
    if raw is None or not raw.strip():
        return default
    return float(raw)


@dataclass(frozen=True)
class CcdClientConfig:
    """Settings for talking to the case data store and IDAM.

    ``poll_max_attempts`` and ``poll_interval_seconds`` drive the consistency poller;
    ``request_timeout`` is handed to the HTTP transport only.
    """

    ccd_data_store_api_url: str = "http://localhost:4452"
    idam_api_url: str = "http://localhost:5000"
    request_timeout: float = 30.0
    poll_max_attempts: int = 7
    poll_interval_seconds: float = 5.0

    # Event trigger ids configured on the case definitions.
    creation_event_id: str = "initiateCase"
    creation_transfer_event_id: str = "createCaseTransfer"
    case_transfer_event_id: str = "caseTransfer"
    return_transfer_event_id: str = "returnCaseTransfer"
    multiple_creation_event_id: str = "createMultiple"
    update_event_id: str = "amendCaseDetails"
    update_api_role_event_id: str = "amendCaseDetailsAPI"
    bulk_single_event_id: str = "amendCaseDetailsBulk"
    pre_accept_bulk_single_event_id: str = "preAcceptanceBulk"
    bulk_event_id: str = "updateBulkAction"
    bulk_amend_event_id: str = "amendBulk"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "CcdClientConfig":
        """Build a config from environment variables, falling back to the defaults."""

        env = os.environ if environ is None else environ
        defaults = cls()
        return cls(
            ccd_data_store_api_url=env.get("CCD_DATA_STORE_API_URL") or defaults.ccd_data_store_api_url,
            idam_api_url=env.get("IDAM_API_URL") or defaults.idam_api_url,
            request_timeout=_env_float(env, "CCD_REQUEST_TIMEOUT", defaults.request_timeout),
            poll_max_attempts=_env_int(env, "CCD_POLL_MAX_ATTEMPTS", defaults.poll_max_attempts),
            poll_interval_seconds=_env_float(
                env, "CCD_POLL_INTERVAL_SECONDS", defaults.poll_interval_seconds
            ),
        )

    # ------------------------------------------------------------------
    # Path helpers
    # ------------------------------------------------------------------
    @property
    def base_url(self) -> str:
        return self.ccd_data_store_api_url.rstrip("/")

    def _case_type_url(self, uid: str, jurisdiction: str, case_type_id: str) -> str:
        return (
            f"{self.base_url}/caseworkers/{quote(uid, safe='')}"
            f"/jurisdictions/{quote(jurisdiction, safe='')}"
            f"/case-types/{quote(case_type_id, safe='')}"
        )

    def _case_url(self, uid: str, jurisdiction: str, case_type_id: str, cid: str) -> str:
        return f"{self._case_type_url(uid, jurisdiction, case_type_id)}/cases/{quote(cid, safe='')}"

    def _case_type_trigger_url(self, uid: str, jurisdiction: str, case_type_id: str, event_id: str) -> str:
        return f"{self._case_type_url(uid, jurisdiction, case_type_id)}/event-triggers/{event_id}/token"

    def _case_trigger_url(
        self, uid: str, jurisdiction: str, case_type_id: str, cid: str, event_id: str
    ) -> str:
        return f"{self._case_url(uid, jurisdiction, case_type_id, cid)}/event-triggers/{event_id}/token"

    # ------------------------------------------------------------------
    # Case creation
    # ------------------------------------------------------------------
    def build_start_case_creation_url(self, uid: str, jurisdiction: str, case_type_id: str) -> str:
        return self._case_type_trigger_url(uid, jurisdiction, case_type_id, self.creation_event_id)

    def build_start_case_creation_transfer_url(self, uid: str, jurisdiction: str, case_type_id: str) -> str:
        return self._case_type_trigger_url(uid, jurisdiction, case_type_id, self.creation_transfer_event_id)

    def build_start_case_transfer_url(self, uid: str, jurisdiction: str, case_type_id: str) -> str:
        return self._case_type_trigger_url(uid, jurisdiction, case_type_id, self.case_transfer_event_id)

    def build_return_case_creation_transfer_url(self, uid: str, jurisdiction: str, case_type_id: str) -> str:
        return self._case_type_trigger_url(uid, jurisdiction, case_type_id, self.return_transfer_event_id)

    def build_start_case_multiple_creation_url(self, uid: str, jurisdiction: str, case_type_id: str) -> str:
        return self._case_type_trigger_url(uid, jurisdiction, case_type_id, self.multiple_creation_event_id)

    def build_submit_case_creation_url(self, uid: str, jurisdiction: str, case_type_id: str) -> str:
        return f"{self._case_type_url(uid, jurisdiction, case_type_id)}/cases"

    # ------------------------------------------------------------------
    # Retrieval
    # ------------------------------------------------------------------
    def build_retrieve_case_url(self, uid: str, jurisdiction: str, case_type_id: str, cid: str) -> str:
        return self._case_url(uid, jurisdiction, case_type_id, cid)

    def build_pagination_metadata_case_url(self, uid: str, jurisdiction: str, case_type_id: str) -> str:
        return f"{self._case_type_url(uid, jurisdiction, case_type_id)}/cases/pagination_metadata"

    def build_retrieve_cases_url(self, uid: str, jurisdiction: str, case_type_id: str, page: int) -> str:
        return f"{self._case_type_url(uid, jurisdiction, case_type_id)}/cases?page={int(page)}"

    def build_retrieve_cases_url_elastic_search(self, case_type_id: str) -> str:
        return f"{self.base_url}/searchCases?ctid={quote(case_type_id, safe='')}"

    # ------------------------------------------------------------------
    # Events on existing cases
    # ------------------------------------------------------------------
    def build_start_event_for_case_url(self, uid: str, jurisdiction: str, case_type_id: str, cid: str) -> str:
        return self._case_trigger_url(uid, jurisdiction, case_type_id, cid, self.update_event_id)

    def build_start_event_for_case_url_api_role(
        self, uid: str, jurisdiction: str, case_type_id: str, cid: str
    ) -> str:
        return self._case_trigger_url(uid, jurisdiction, case_type_id, cid, self.update_api_role_event_id)

    def build_start_event_for_case_url_bulk_single(
        self, uid: str, jurisdiction: str, case_type_id: str, cid: str
    ) -> str:
        return self._case_trigger_url(uid, jurisdiction, case_type_id, cid, self.bulk_single_event_id)

    def build_start_event_for_case_url_pre_accept_bulk_single(
        self, uid: str, jurisdiction: str, case_type_id: str, cid: str
    ) -> str:
        return self._case_trigger_url(
            uid, jurisdiction, case_type_id, cid, self.pre_accept_bulk_single_event_id
        )

    def build_start_event_for_bulk_case_url(self, uid: str, jurisdiction: str, case_type_id: str, cid: str) -> str:
        return self._case_trigger_url(uid, jurisdiction, case_type_id, cid, self.bulk_event_id)

    def build_start_event_for_bulk_amend_case_url(
        self, uid: str, jurisdiction: str, case_type_id: str, cid: str
    ) -> str:
        return self._case_trigger_url(uid, jurisdiction, case_type_id, cid, self.bulk_amend_event_id)

    def build_submit_event_for_case_url(self, uid: str, jurisdiction: str, case_type_id: str, cid: str) -> str:
        return f"{self._case_url(uid, jurisdiction, case_type_id, cid)}/events"

    # ------------------------------------------------------------------
    # IDAM
    # ------------------------------------------------------------------
    def build_user_details_url(self) -> str:
        return f"{self.idam_api_url.rstrip('/')}/details"
