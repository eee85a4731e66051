"""httpx transport used by the client to reach the processing server."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

import httpx
from pydantic import ValidationError

from gridrows.adapters.http.schema import (
    ClientConfigPayload,
    ProcessRowsPayload,
    ResultEnvelopePayload,
)
from gridrows.client.errors import TransportError
from gridrows.config.processing import get_client_config
from gridrows.domain.actions import ClientActionConfig

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence
    from types import TracebackType

    from gridrows.config.processing import ClientConfig
    from gridrows.domain.model import ResultEnvelope

log = getLogger(__name__)


def _error_detail(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    if isinstance(body, dict) and "detail" in body:
        return str(body["detail"])  # pyright: ignore[reportUnknownArgumentType]
    return response.text


class HttpServerTransport:
    """Posts processing requests to a gridrows server."""

    def __init__(self, client: httpx.AsyncClient) -> None:
        self._client = client

    @classmethod
    def from_config(cls, config: ClientConfig | None = None) -> HttpServerTransport:
        resolved = config or get_client_config()
        client = httpx.AsyncClient(base_url=resolved.server_url, timeout=resolved.timeout_seconds)
        return cls(client)

    async def __aenter__(self) -> HttpServerTransport:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def fetch_config(self, action_id: str) -> ClientActionConfig:
        response = await self._send("GET", f"/actions/{action_id}")
        try:
            payload = ClientConfigPayload.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            raise TransportError(f"Invalid action configuration: {exc}") from exc
        return ClientActionConfig.from_payload(payload.model_dump(by_alias=True))

    async def process(
        self,
        action_id: str,
        *,
        chunks: Sequence[str] = (),
        items: Mapping[str, str | None] | None = None,
    ) -> ResultEnvelope:
        body = ProcessRowsPayload(f01=list(chunks), page_items=dict(items or {}))
        response = await self._send(
            "POST",
            f"/actions/{action_id}/process",
            json=body.model_dump(by_alias=True),
        )
        try:
            payload = ResultEnvelopePayload.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            raise TransportError(f"Invalid processing response: {exc}") from exc
        return payload.to_envelope()

    async def _send(self, method: str, url: str, *, json: object = None) -> httpx.Response:
        try:
            response = await self._client.request(method, url, json=json)
        except httpx.HTTPError as exc:
            log.warning("%s %s failed: %s", method, url, exc)
            raise TransportError(f"Request to {url} failed: {exc}") from exc
        if response.is_error:
            detail = _error_detail(response)
            log.warning("%s %s returned %s: %s", method, url, response.status_code, detail)
            raise TransportError(detail, status_code=response.status_code)
        return response
