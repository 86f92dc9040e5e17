"""
app/api/routers/report_router.py

Device report HTTP endpoint.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from app.schemas.report import ReportResponse
from app.services.command_router import CommandRouter, get_command_router

router = APIRouter(tags=["report"])


@router.post("/report", response_model=ReportResponse)
async def post_report(
    request: Request,
    command_router: CommandRouter = Depends(get_command_router),
) -> JSONResponse:
    """
    Classify one JSON report. Unknown types answer 200, malformed bodies 400.
    """

    raw_body = await request.body()
    response, status_code = command_router.route(raw_body)
    return JSONResponse(content=response.model_dump(), status_code=status_code)
