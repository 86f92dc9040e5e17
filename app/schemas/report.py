"""
app/schemas/report.py

Response schemas for the report endpoint.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel


class ReportResponse(BaseModel):
    """
    API response model returned for every ``/report`` request.
    """

    type: str
    status: Literal["success", "failed"]
    message: str
