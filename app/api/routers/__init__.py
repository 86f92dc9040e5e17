"""
app/api/routers package marker.
"""

from app.api.routers.greeting_router import router as greeting_router
from app.api.routers.report_router import router as report_router
from app.api.routers.upload_router import router as upload_router

__all__ = [
    "greeting_router",
    "report_router",
    "upload_router",
]
