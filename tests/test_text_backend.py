"""Tests for the HTTP text-completion backend, against a local aiohttp server."""

import pytest
from aiohttp import web
from aiohttp import test_utils

from tradejournal.errors import ChatBackendError
from tradejournal.services.text_backend import HttpTextBackend


def _app(handler) -> web.Application:
    app = web.Application()
    app.router.add_post("/complete", handler)
    return app


@pytest.mark.asyncio
async def test_complete_posts_prompt_and_returns_text():
    received = {}

    async def handler(request):
        received["body"] = await request.json()
        received["auth"] = request.headers.get("Authorization")
        return web.json_response({"text": "Stay disciplined."})

    async with test_utils.TestServer(_app(handler)) as server:
        backend = HttpTextBackend(str(server.make_url("/complete")), api_key="secret", max_tokens=50)
        reply = await backend.complete("How did I do?")

    assert reply == "Stay disciplined."
    assert received["body"] == {"prompt": "How did I do?", "temperature": 0.7, "max_tokens": 50}
    assert received["auth"] == "Bearer secret"


@pytest.mark.asyncio
async def test_complete_accepts_choices_shape_and_max_tokens_override():
    received = {}

    async def handler(request):
        received["body"] = await request.json()
        return web.json_response({"choices": [{"text": "Summary."}]})

    async with test_utils.TestServer(_app(handler)) as server:
        backend = HttpTextBackend(str(server.make_url("/complete")))
        reply = await backend.complete("Summarize", max_tokens=800)

    assert reply == "Summary."
    assert received["body"]["max_tokens"] == 800


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "response",
    [
        web.Response(status=500, text="upstream exploded"),
        web.Response(status=429, text="slow down"),
        web.Response(status=200, text="<html>not json</html>"),
        web.Response(
            status=200,
            body=b'{"text": "\xff\xfe bad"}',
            content_type="application/json",
            charset="utf-8",
        ),
    ],
    ids=["server-error", "rate-limited", "not-json", "invalid-utf8"],
)
async def test_complete_bad_responses_raise(response):
    async def handler(request):
        return response

    async with test_utils.TestServer(_app(handler)) as server:
        backend = HttpTextBackend(str(server.make_url("/complete")))
        with pytest.raises(ChatBackendError):
            await backend.complete("hi")


@pytest.mark.asyncio
@pytest.mark.parametrize("payload", [{}, {"text": ""}, {"choices": []}, ["text"]])
async def test_complete_missing_text_raises(payload):
    async def handler(request):
        return web.json_response(payload)

    async with test_utils.TestServer(_app(handler)) as server:
        backend = HttpTextBackend(str(server.make_url("/complete")))
        with pytest.raises(ChatBackendError):
            await backend.complete("hi")


@pytest.mark.asyncio
async def test_unreachable_backend_raises():
    backend = HttpTextBackend("http://127.0.0.1:1/complete", timeout=2)
    with pytest.raises(ChatBackendError):
        await backend.complete("hi")
