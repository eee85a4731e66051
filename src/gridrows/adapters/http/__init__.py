"""HTTP adapters: FastAPI server and httpx client transport."""

from __future__ import annotations

from .schema import ClientConfigPayload, ProcessRowsPayload, ResultEnvelopePayload
from .server import create_app
from .transport import HttpServerTransport

__all__ = [
    "ClientConfigPayload",
    "HttpServerTransport",
    "ProcessRowsPayload",
    "ResultEnvelopePayload",
    "create_app",
]
