from __future__ import annotations

import asyncio

import httpx
import pytest
from services.api.app.services.meeting_base import (
    MeetingCredentialsError,
    extract_contact_id,
    extract_insights,
    extract_summary,
)
from services.api.app.services.symbl_client import SymblProvider, TokenCache


class _Clock:
    def __init__(self) -> None:
        self.now = 1_000.0

    def __call__(self) -> float:
        return self.now


def test_token_cache_expires_with_margin() -> None:
    clock = _Clock()
    cache = TokenCache(clock=clock)
    assert cache.get() is None

    cache.put("t1", ttl_seconds=600)
    assert cache.get() == "t1"

    clock.now += 539
    assert cache.get() == "t1"

    clock.now += 2
    assert cache.get() is None


def test_provider_reuses_token_until_expiry() -> None:
    clock = _Clock()
    token_calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/oauth2/token:generate":
            token_calls.append(request)
            return httpx.Response(200, json={"accessToken": f"tok{len(token_calls)}"})
        assert request.headers["Authorization"] == f"Bearer tok{len(token_calls)}"
        return httpx.Response(200, json={"summary": [{"text": "Talked pricing."}]})

    provider = SymblProvider(
        app_id="app",
        app_secret="secret",
        token_cache=TokenCache(clock=clock),
        transport=httpx.MockTransport(handler),
    )

    assert asyncio.run(provider.get_summary("conv-1")) == "Talked pricing."
    assert asyncio.run(provider.get_summary("conv-1")) == "Talked pricing."
    assert len(token_calls) == 1

    clock.now += 15 * 60
    asyncio.run(provider.get_summary("conv-1"))
    assert len(token_calls) == 2


def test_rejected_credentials_raise() -> None:
    provider = SymblProvider(
        app_id="app",
        app_secret="bad",
        transport=httpx.MockTransport(lambda r: httpx.Response(401, text="unauthorized")),
    )
    with pytest.raises(MeetingCredentialsError, match="unauthorized"):
        asyncio.run(provider.get_token())


def test_extract_summary_prefers_summary_text() -> None:
    payload = {
        "type": "message_summary",
        "summary": {"text": "Short recap"},
        "insights": [{"text": "ignored"}],
    }
    assert extract_summary(payload) == "Short recap"


def test_extract_summary_falls_back_to_insights_then_default() -> None:
    payload = {"type": "conversation_completed", "insights": [{"text": "a"}, {"text": "b"}, {}]}
    assert extract_insights(payload) == ["a", "b"]
    assert extract_summary(payload) == "a\n\nb"
    assert extract_summary({"type": "conversation_completed"}) == "No summary available"


def test_extract_contact_id_reads_metadata() -> None:
    assert extract_contact_id({"metadata": {"contactId": " c9 "}}) == "c9"
    assert extract_contact_id({}) is None
