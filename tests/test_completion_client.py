"""Tests for the DeepSeek completion client against a local aiohttp server"""

import asyncio
import logging

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

from trade_legal_chat.utils.config import Settings
from trade_legal_chat.utils.llm import CompletionClient, CompletionError


def _client(server, **overrides) -> CompletionClient:
    settings = Settings(
        deepseek_base_url=str(server.make_url("/")),
        **{"deepseek_api_key": "sk-test", **overrides},
    )
    return CompletionClient(settings)


def _app(handler) -> web.Application:
    app = web.Application()
    app.router.add_post("/v1/chat/completions", handler)
    return app


@pytest.mark.asyncio
async def test_returns_reply_text():
    seen = {}

    async def handler(request):
        seen["auth"] = request.headers.get("Authorization")
        seen["payload"] = await request.json()
        return web.json_response({"choices": [{"message": {"content": "Use a B3 form."}}]})

    async with TestServer(_app(handler)) as server:
        text = await _client(server).complete("system text", "user text", 123, 0.2)

    assert text == "Use a B3 form."
    assert seen["auth"] == "Bearer sk-test"
    payload = seen["payload"]
    assert payload["model"] == "deepseek-chat"
    assert payload["messages"] == [
        {"role": "system", "content": "system text"},
        {"role": "user", "content": "user text"},
    ]
    assert payload["max_tokens"] == 123
    assert payload["temperature"] == 0.2


@pytest.mark.asyncio
async def test_non_2xx_raises():
    async def handler(request):
        return web.Response(status=503, text="overloaded")

    async with TestServer(_app(handler)) as server:
        with pytest.raises(CompletionError, match="503: overloaded"):
            await _client(server).complete("s", "u", 10, 0.3)


@pytest.mark.asyncio
async def test_invalid_json_raises():
    async def handler(request):
        return web.Response(text="<html>not json</html>")

    async with TestServer(_app(handler)) as server:
        with pytest.raises(CompletionError, match="invalid JSON"):
            await _client(server).complete("s", "u", 10, 0.3)


@pytest.mark.asyncio
@pytest.mark.parametrize("body", [
    {},
    {"choices": []},
    {"choices": [{"message": {}}]},
    {"choices": [{"message": {"content": ""}}]},
    {"choices": [{"message": {"content": None}}]},
])
async def test_missing_content_raises(body):
    async def handler(request):
        return web.json_response(body)

    async with TestServer(_app(handler)) as server:
        with pytest.raises(CompletionError):
            await _client(server).complete("s", "u", 10, 0.3)


@pytest.mark.asyncio
async def test_timeout_raises():
    async def handler(request):
        await asyncio.sleep(1)
        return web.json_response({"choices": [{"message": {"content": "late"}}]})

    async with TestServer(_app(handler)) as server:
        with pytest.raises(CompletionError, match="timed out"):
            await _client(server, llm_timeout=0.1).complete("s", "u", 10, 0.3)


@pytest.mark.asyncio
async def test_connection_refused_raises():
    async def handler(request):
        return web.json_response({})

    async with TestServer(_app(handler)) as server:
        client = _client(server)
    # server is closed now
    with pytest.raises(CompletionError, match="request failed"):
        await client.complete("s", "u", 10, 0.3)


@pytest.mark.asyncio
async def test_missing_key_sends_unauthenticated_and_warns_once(caplog):
    seen = []

    async def handler(request):
        seen.append(request.headers.get("Authorization"))
        return web.json_response({"choices": [{"message": {"content": "ok"}}]})

    async with TestServer(_app(handler)) as server:
        client = _client(server, deepseek_api_key=None)
        with caplog.at_level(logging.WARNING, logger="trade_legal_chat.utils.llm"):
            await client.complete("s", "u", 10, 0.3)
            await client.complete("s", "u", 10, 0.3)

    assert seen == [None, None]
    warnings = [r for r in caplog.records if "DEEPSEEK_API_KEY not set" in r.getMessage()]
    assert len(warnings) == 1


def test_url_joins_base_without_double_slash():
    client = CompletionClient(Settings(deepseek_base_url="https://api.deepseek.com/"))
    assert client.url == "https://api.deepseek.com/v1/chat/completions"
