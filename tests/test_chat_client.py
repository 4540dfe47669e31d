"""Tests for the chat-completion client against a local aiohttp server."""

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer as GatewayServer

from romance_catalog.models import BookRecord, RecommendationCandidate
from romance_catalog.recommendations import (
    BlurbGenerator,
    ChatCompletionClient,
    ChatCompletionError,
    FALLBACK_BLURB,
)

COMPLETIONS_PATH = "/v1/chat/completions"


class Gateway:
    """Replies with a fixed status and body, recording every request"""

    def __init__(self, status=200, body=None):
        self.status = status
        self.body = body if body is not None else {"choices": [{"message": {"content": "  A slow-burn delight.  "}}]}
        self.requests = []

    async def handle(self, request):
        self.requests.append((request.headers.get("Authorization"), await request.json()))
        return web.json_response(self.body, status=self.status)

    def app(self):
        app = web.Application()
        app.router.add_post(COMPLETIONS_PATH, self.handle)
        return app


async def complete_against(gateway, **kwargs):
    async with GatewayServer(gateway.app()) as server:
        client = ChatCompletionClient(str(server.make_url(COMPLETIONS_PATH)), "test-key", "test-model")
        async with client.open_session() as session:
            return await client.complete(session, "system prompt", "user prompt", **kwargs)


async def blurbs_against(gateway):
    candidates = [RecommendationCandidate(book=BookRecord(id="b1", title="Icebreaker", author="Hannah Grace"))]
    async with GatewayServer(gateway.app()) as server:
        client = ChatCompletionClient(str(server.make_url(COMPLETIONS_PATH)), "test-key", "test-model")
        await BlurbGenerator(client).attach_blurbs(candidates, "category")
    return candidates


# ── Client ─────────────────────────────────────────


async def test_complete_returns_stripped_content():
    gateway = Gateway()

    assert await complete_against(gateway, max_tokens=50) == "A slow-burn delight."

    authorization, payload = gateway.requests[0]
    assert authorization == "Bearer test-key"
    assert payload["model"] == "test-model"
    assert payload["max_tokens"] == 50
    assert [m["role"] for m in payload["messages"]] == ["system", "user"]


async def test_non_200_raises():
    with pytest.raises(ChatCompletionError, match="429"):
        await complete_against(Gateway(status=429, body={"error": "rate limited"}))


@pytest.mark.parametrize("body", [
    {"choices": []},
    {"choices": [{"message": {"content": "   "}}]},
    {"choices": [{"message": None}]},
])
async def test_empty_completion_raises(body):
    with pytest.raises(ChatCompletionError):
        await complete_against(Gateway(body=body))


def test_disabled_without_key():
    assert not ChatCompletionClient("http://localhost", None, "m").enabled
    assert ChatCompletionClient("http://localhost", "k", "m").enabled


# ── Blurbs through the real client ─────────────────


async def test_gateway_error_falls_back():
    candidates = await blurbs_against(Gateway(status=500, body={"error": "down"}))
    assert candidates[0].blurb == FALLBACK_BLURB


async def test_empty_choices_fall_back():
    candidates = await blurbs_against(Gateway(body={"choices": []}))
    assert candidates[0].blurb == FALLBACK_BLURB


async def test_successful_completion_becomes_blurb():
    candidates = await blurbs_against(Gateway())
    assert candidates[0].blurb == "A slow-burn delight."
