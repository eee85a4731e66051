from __future__ import annotations

import asyncio
import json

import httpx
import pytest

from gridrows.adapters.http import HttpServerTransport
from gridrows.client import TransportError
from gridrows.config.processing import ClientConfig
from gridrows.domain import MessageType, ProcessMode, Status


def _transport(handler: httpx.MockTransport) -> HttpServerTransport:
    return HttpServerTransport(httpx.AsyncClient(base_url="http://rows.test", transport=handler))


def test_process_posts_chunks_and_items() -> None:
    captured: dict[str, object] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["method"] = request.method
        captured["path"] = request.url.path
        captured["body"] = json.loads(request.content)
        return httpx.Response(
            200,
            json={
                "status": "success",
                "message": "Done",
                "messageType": "danger",
                "itemsToReturn": [{"name": "P1_TOTAL", "value": "2"}],
                "cancelActions": True,
                "eventName": "rows-processed",
            },
        )

    async def run() -> None:
        async with _transport(httpx.MockTransport(handler)) as transport:
            envelope = await transport.process(
                "raise",
                chunks=['{"recordKeys":', '[["7839"]]}'],
                items={"P1_PCT": "10"},
            )
        assert envelope.status is Status.SUCCESS
        assert envelope.message_type is MessageType.ERROR
        assert envelope.returned_values() == {"P1_TOTAL": "2"}
        assert envelope.cancel_actions is True
        assert envelope.event_name == "rows-processed"

    asyncio.run(run())

    assert captured["method"] == "POST"
    assert captured["path"] == "/actions/raise/process"
    assert captured["body"] == {
        "f01": ['{"recordKeys":', '[["7839"]]}'],
        "pageItems": {"P1_PCT": "10"},
    }


def test_fetch_config_builds_client_action_config() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/actions/raise"
        return httpx.Response(
            200,
            json={
                "ajaxId": "raise",
                "mode": "filtered",
                "itemsToSubmit": ["P1_PCT"],
                "refreshGrid": True,
                "dismissAfter": 10000,
            },
        )

    async def run() -> None:
        async with _transport(httpx.MockTransport(handler)) as transport:
            config = await transport.fetch_config("raise")
        assert config.ajax_id == "raise"
        assert config.mode is ProcessMode.FILTERED
        assert config.items_to_submit == ["P1_PCT"]
        assert config.refresh_grid is True
        assert config.dismiss_after == 10_000

    asyncio.run(run())


def test_error_status_becomes_transport_error() -> None:
    def handler(_request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, json={"detail": "dataset has no identifier"})

    async def run() -> None:
        async with _transport(httpx.MockTransport(handler)) as transport:
            await transport.process("raise")

    with pytest.raises(TransportError) as exc:
        asyncio.run(run())

    assert exc.value.status_code == 500
    assert str(exc.value) == "dataset has no identifier"


def test_connection_failure_becomes_transport_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    async def run() -> None:
        async with _transport(httpx.MockTransport(handler)) as transport:
            await transport.process("raise")

    with pytest.raises(TransportError) as exc:
        asyncio.run(run())

    assert exc.value.status_code is None


def test_unexpected_body_becomes_transport_error() -> None:
    def handler(_request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>proxy login</html>")

    async def run() -> None:
        async with _transport(httpx.MockTransport(handler)) as transport:
            await transport.process("raise")

    with pytest.raises(TransportError, match="Invalid processing response"):
        asyncio.run(run())


def test_from_config_uses_server_url() -> None:
    async def run() -> httpx.URL:
        transport = HttpServerTransport.from_config(
            ClientConfig(server_url="http://rows.example:9000", timeout_seconds=1.0)
        )
        async with transport:
            return transport._client.base_url  # noqa: SLF001  # pyright: ignore[reportPrivateUsage]

    base_url = asyncio.run(run())

    assert base_url.host == "rows.example"
    assert base_url.port == 9000
