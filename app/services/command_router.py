"""
app/services/command_router.py

Classifies device reports by their ``type`` field.

Unknown types are answered with an error payload and HTTP 200. Only an
unparsable body yields HTTP 400.
"""

from __future__ import annotations

import logging
from functools import lru_cache

from fastapi import status

from app.domain.report import ParsedReport, ReportType, parse_report
from app.schemas.report import ReportResponse

logger = logging.getLogger(__name__)

INVALID_JSON_RESPONSE = ReportResponse(type="error", status="failed", message="Invalid JSON format")
UNKNOWN_TYPE_RESPONSE = ReportResponse(type="error", status="failed", message="Unknown request type")

_RESPONSES_BY_TYPE: dict[ReportType, ReportResponse] = {
    ReportType.STATUS: ReportResponse(
        type="status_response",
        status="success",
        message="Device status updated",
    ),
    ReportType.FILE_TRANSFER: ReportResponse(
        type="file_transfer_response",
        status="success",
        message="Ready to receive file",
    ),
}


class CommandRouter:
    """
    Stateless report router. Never touches storage.
    """

    def route(self, raw_json: bytes | str) -> tuple[ReportResponse, int]:
        logger.debug("Received report body: %r", raw_json)

        result = parse_report(raw_json)
        if not isinstance(result, ParsedReport):
            logger.info("Rejected malformed report: %s", result.message)
            return INVALID_JSON_RESPONSE, status.HTTP_400_BAD_REQUEST

        report = result.report
        response = _RESPONSES_BY_TYPE.get(report.type)
        if response is None:
            logger.info("Unknown report type: %r", report.raw_type)
            return UNKNOWN_TYPE_RESPONSE, status.HTTP_200_OK
        return response, status.HTTP_200_OK


@lru_cache(maxsize=1)
def get_command_router() -> CommandRouter:
    return CommandRouter()
