"""Build event submission bodies for the case data store."""

from __future__ import annotations

from typing import Any, Dict, Mapping

from .case_models import CCDRequest


CREATION_EVENT_SUMMARY = "Case created automatically"
UPDATE_EVENT_SUMMARY = "Case updated by bulk"
UPDATE_BULK_EVENT_SUMMARY = "Bulk case updated by bulk"


class CaseDataBuilder:
    """Wrap case, bulk and multiple data in the event envelope expected on submit."""

    def build_case_data_content(
        self, case_data: Mapping[str, Any], request: CCDRequest, summary: str
    ) -> Dict[str, Any]:
        return self._content(case_data, request, summary)

    def build_bulk_data_content(
        self, bulk_data: Mapping[str, Any], request: CCDRequest, summary: str
    ) -> Dict[str, Any]:
        return self._content(bulk_data, request, summary)

    def build_multiple_data_content(
        self, multiple_data: Mapping[str, Any], request: CCDRequest, summary: str
    ) -> Dict[str, Any]:
        return self._content(multiple_data, request, summary)

    @staticmethod
    def _content(data: Mapping[str, Any], request: CCDRequest, summary: str) -> Dict[str, Any]:
        return {
            "data": dict(data),
            "event": {
                "id": request.event_id,
                "summary": summary,
                "description": summary,
            },
            "event_token": request.token,
            "ignore_warning": False,
        }
