"""
app/schemas package marker.
"""

from app.schemas.health import HealthResponse
from app.schemas.report import ReportResponse

__all__ = [
    "HealthResponse",
    "ReportResponse",
]
