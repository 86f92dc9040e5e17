"""
app/domain package marker.
"""

from app.domain.report import (
    IncomingReport,
    ParsedReport,
    ReportParseError,
    ReportParseResult,
    ReportType,
    parse_report,
)
from app.domain.upload import UploadOutcome, UploadRequest

__all__ = [
    "IncomingReport",
    "ParsedReport",
    "ReportParseError",
    "ReportParseResult",
    "ReportType",
    "UploadOutcome",
    "UploadRequest",
    "parse_report",
]
