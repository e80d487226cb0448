# -*- coding: utf-8 -*-
"""Unit tests for AsyncHttpClient and HyperliquidInfoClient against a local aiohttp server."""

from __future__ import annotations

from collections.abc import AsyncIterator
from typing import Any
from unittest.mock import AsyncMock

import pytest
from aiohttp import test_utils, web

from hyperliquid_trade_alerts.clients import AsyncHttpClient, HyperliquidInfoClient
from hyperliquid_trade_alerts.exceptions import EnrichmentLookupError, RateLimitError


async def _echo(request: web.Request) -> web.Response:
    return web.json_response({"received": await request.json()})


async def _rate_limited(request: web.Request) -> web.Response:
    return web.json_response({}, status=429, headers={"Retry-After": "3"})


async def _server_error(request: web.Request) -> web.Response:
    return web.Response(status=503, text="unavailable")


async def _not_json(request: web.Request) -> web.Response:
    return web.Response(text="<html>oops</html>")


@pytest.fixture
async def server() -> AsyncIterator[test_utils.TestServer]:
    app = web.Application()
    app.router.add_post("/echo", _echo)
    app.router.add_post("/limited", _rate_limited)
    app.router.add_post("/broken", _server_error)
    app.router.add_post("/html", _not_json)
    test_server = test_utils.TestServer(app)
    await test_server.start_server()
    yield test_server
    await test_server.close()


async def test_post_returns_parsed_json(server: test_utils.TestServer) -> None:
    async with AsyncHttpClient() as client:
        data = await client.post(str(server.make_url("/echo")), json={"type": "txDetails"})

    assert data == {"received": {"type": "txDetails"}}


async def test_429_raises_rate_limit_error(server: test_utils.TestServer) -> None:
    async with AsyncHttpClient() as client:
        with pytest.raises(RateLimitError) as exc_info:
            await client.post(str(server.make_url("/limited")))

    assert exc_info.value.status_code == 429
    assert exc_info.value.retry_after == 3.0


async def test_error_status_raises_lookup_error(server: test_utils.TestServer) -> None:
    async with AsyncHttpClient() as client:
        with pytest.raises(EnrichmentLookupError) as exc_info:
            await client.post(str(server.make_url("/broken")))

    assert exc_info.value.status_code == 503
    assert not isinstance(exc_info.value, RateLimitError)


async def test_invalid_json_raises_lookup_error(server: test_utils.TestServer) -> None:
    async with AsyncHttpClient() as client:
        with pytest.raises(EnrichmentLookupError):
            await client.post(str(server.make_url("/html")))


async def test_info_client_request_bodies() -> None:
    http = AsyncMock()
    http.post.return_value = {"tx": {}}
    client = HyperliquidInfoClient(http, explorer_url="https://explorer.test", info_url="https://info.test")

    await client.tx_details("0xabc")
    await client.clearinghouse_state("0xdef")

    assert http.post.await_args_list[0].args == ("https://explorer.test",)
    assert http.post.await_args_list[0].kwargs == {"json": {"type": "txDetails", "hash": "0xabc"}}
    assert http.post.await_args_list[1].kwargs == {
        "json": {"type": "clearinghouseState", "user": "0xdef"}
    }


@pytest.mark.parametrize("payload", [None, [], "null"])
async def test_info_client_rejects_non_object_response(payload: Any) -> None:
    http = AsyncMock()
    http.post.return_value = payload
    client = HyperliquidInfoClient(http)

    with pytest.raises(EnrichmentLookupError):
        await client.tx_details("0xabc")
