"""
app/api/routers/greeting_router.py

Greeting and liveness endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse

from app.schemas.health import HealthResponse
from app.services.sequence_counter import SequenceCounter, get_greeting_counter

router = APIRouter(tags=["meta"])


@router.get("/hi", response_class=PlainTextResponse)
def greet(counter: SequenceCounter = Depends(get_greeting_counter)) -> str:
    """
    Answer ``Hello World NN``. NN counts requests modulo ``GREETING_WRAP_AT``
    (default 100): it runs 01..99, then 00, 01, ...
    """

    return f"Hello World {counter.next():02}"


@router.get("/health")
def healthcheck() -> HealthResponse:
    return HealthResponse()
