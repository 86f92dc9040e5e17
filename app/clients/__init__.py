"""
app/clients package marker.
"""

from app.clients.ingestion_client import IngestionClient, IngestionClientError
from app.clients.load_driver import LoadDriver, LoadMode, LoadReport, RequestFailure

__all__ = [
    "IngestionClient",
    "IngestionClientError",
    "LoadDriver",
    "LoadMode",
    "LoadReport",
    "RequestFailure",
]
