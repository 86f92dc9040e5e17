"""
app/schemas/health.py

Response schema for the liveness probe.
"""

from __future__ import annotations

from pydantic import BaseModel


class HealthResponse(BaseModel):
    status: str = "ok"
