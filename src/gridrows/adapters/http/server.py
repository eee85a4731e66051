"""FastAPI application exposing registered row-processing actions."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, Any

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse

from gridrows import __version__
from gridrows.adapters.http.schema import (
    ClientConfigPayload,
    ProcessRowsPayload,
    ResultEnvelopePayload,
)
from gridrows.adapters.sqlalchemy.unit_of_work import SqlAlchemyUnitOfWork
from gridrows.config.errors import ConfigurationError
from gridrows.domain.actions import render_client_config
from gridrows.domain.errors import SelectionPayloadError, UnknownActionError
from gridrows.domain.service import ProcessRequest, handle_process_request

if TYPE_CHECKING:
    from collections.abc import Callable

    from gridrows.domain.actions import ActionRegistry, ProcessRowsAction
    from gridrows.domain.ports import ProcessingUnitOfWork

log = getLogger(__name__)


def create_app(
    registry: ActionRegistry,
    *,
    unit_of_work_factory: Callable[[], ProcessingUnitOfWork] | None = None,
) -> FastAPI:
    """Build the HTTP application serving ``registry``."""

    uow_factory = unit_of_work_factory or SqlAlchemyUnitOfWork
    app = FastAPI(title="gridrows", version=__version__)

    def lookup(action_id: str) -> ProcessRowsAction:
        try:
            return registry.get(action_id)
        except UnknownActionError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc

    @app.exception_handler(ConfigurationError)
    async def configuration_error_handler(  # pyright: ignore[reportUnusedFunction]
        _request: Request, exc: ConfigurationError
    ) -> JSONResponse:
        log.error("Configuration error: %s", exc)
        return JSONResponse(status_code=500, content={"detail": str(exc)})

    @app.get(
        "/actions/{action_id}",
        response_model=ClientConfigPayload,
        response_model_by_alias=True,
    )
    def get_action_config(action_id: str) -> dict[str, Any]:  # pyright: ignore[reportUnusedFunction]
        return render_client_config(action_id, lookup(action_id)).to_payload()

    @app.post(
        "/actions/{action_id}/process",
        response_model=ResultEnvelopePayload,
        response_model_by_alias=True,
    )
    def process_action(  # pyright: ignore[reportUnusedFunction]
        action_id: str,
        payload: ProcessRowsPayload,
    ) -> ResultEnvelopePayload:
        action = lookup(action_id)
        request = ProcessRequest(selection_chunks=tuple(payload.f01), items=payload.page_items)
        try:
            envelope = handle_process_request(action, request, unit_of_work_factory=uow_factory)
        except SelectionPayloadError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        return ResultEnvelopePayload.from_envelope(envelope)

    return app
