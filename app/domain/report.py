"""
app/domain/report.py

Report classification and the explicit parse result consumed by CommandRouter.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, Union


class ReportType(str, Enum):
    """
    Report kinds recognised by the command router.
    """

    STATUS = "status"
    FILE_TRANSFER = "file_transfer"
    UNKNOWN = "unknown"

    @classmethod
    def from_raw(cls, raw_type: str) -> "ReportType":
        """
        Map a ``type`` field value to a report kind; unrecognised values are UNKNOWN.
        """

        if raw_type == cls.STATUS.value:
            return cls.STATUS
        if raw_type == cls.FILE_TRANSFER.value:
            return cls.FILE_TRANSFER
        return cls.UNKNOWN


@dataclass(frozen=True)
class IncomingReport:
    """
    One parsed JSON report from a device.
    """

    type: ReportType
    raw_type: str
    body: dict[str, Any]


@dataclass(frozen=True)
class ParsedReport:
    report: IncomingReport


@dataclass(frozen=True)
class ReportParseError:
    message: str


ReportParseResult = Union[ParsedReport, ReportParseError]


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not a JSON value")


def parse_report(raw_body: bytes | str) -> ReportParseResult:
    """
    Parse a raw request body into a report without raising.

    The body must decode as UTF-8, hold a JSON object, and carry a string
    ``type`` when the field is present. An absent ``type`` reads as "".
    """

    if isinstance(raw_body, bytes):
        try:
            raw_body = raw_body.decode("utf-8")
        except UnicodeDecodeError:
            return ReportParseError(message="body is not valid UTF-8")

    try:
        payload = json.loads(raw_body, parse_constant=_reject_constant)
    except ValueError as exc:
        return ReportParseError(message=f"body is not valid JSON: {exc}")

    if not isinstance(payload, dict):
        return ReportParseError(message="body must be a JSON object")

    raw_type = payload.get("type", "")
    if not isinstance(raw_type, str):
        return ReportParseError(message="'type' must be a string")

    return ParsedReport(
        report=IncomingReport(
            type=ReportType.from_raw(raw_type),
            raw_type=raw_type,
            body=payload,
        )
    )
