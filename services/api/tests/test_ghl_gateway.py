from __future__ import annotations

import asyncio
import json

import httpx
import pytest
from services.api.app.services.crm_base import CrmRequestError
from services.api.app.services.crm_ghl import GoHighLevelGateway


class _Recorder:
    """MockTransport handler that records requests and replies from a route table."""

    def __init__(self, routes: dict[tuple[str, str], httpx.Response]) -> None:
        self.routes = routes
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.routes.get(
            (request.method, request.url.path), httpx.Response(200, json={"ok": True})
        )


def _gateway(recorder: _Recorder) -> GoHighLevelGateway:
    return GoHighLevelGateway(api_key="k-123", transport=httpx.MockTransport(recorder))


def test_add_tag_posts_to_contact_tag_path() -> None:
    recorder = _Recorder({})

    result = asyncio.run(_gateway(recorder).add_tag("John123", "hotlead"))

    assert result.success is True
    [req] = recorder.requests
    assert req.method == "POST"
    assert req.url.path == "/v1/contacts/John123/tags/hotlead"
    assert req.headers["Authorization"] == "Bearer k-123"


@pytest.mark.parametrize(
    ("call", "method", "path", "body"),
    [
        (
            lambda g: g.launch_workflow("wf1", "John123"),
            "POST",
            "/v1/campaigns/start",
            {"contactId": "John123", "campaignId": "wf1"},
        ),
        (
            lambda g: g.move_pipeline_stage("opp456", "negotiation"),
            "PUT",
            "/v1/opportunities/opp456",
            {"stageId": "negotiation"},
        ),
        (
            lambda g: g.update_contact("John123", {"city": "Austin"}),
            "PUT",
            "/v1/contacts/John123",
            {"city": "Austin"},
        ),
    ],
)
def test_request_shapes(call, method: str, path: str, body: dict) -> None:
    recorder = _Recorder({})

    asyncio.run(call(_gateway(recorder)))

    [req] = recorder.requests
    assert req.method == method
    assert req.url.path == path
    assert json.loads(req.content) == body


def test_mark_no_show_error_status_is_unsuccessful_result() -> None:
    recorder = _Recorder(
        {("PUT", "/v1/appointments/appt456/noshow"): httpx.Response(422, json={"msg": "bad"})}
    )

    result = asyncio.run(_gateway(recorder).mark_no_show("appt456"))

    assert result.success is False
    assert result.error and "422" in result.error
    assert result.data == {"msg": "bad"}


def test_follow_up_sends_sms_and_note() -> None:
    recorder = _Recorder(
        {("GET", "/v1/contacts/John123"): httpx.Response(200, json={"contact": {"firstName": "J"}})}
    )

    result = asyncio.run(_gateway(recorder).send_follow_up("John123", "Thanks for your time"))

    assert result.success is True
    assert [(r.method, r.url.path) for r in recorder.requests] == [
        ("GET", "/v1/contacts/John123"),
        ("POST", "/v1/contacts/John123/sms"),
        ("POST", "/v1/contacts/John123/notes"),
    ]
    sms = json.loads(recorder.requests[1].content)
    assert sms == {"message": "Thanks for your time", "direction": "outgoing"}


def test_follow_up_without_message_uses_greeting() -> None:
    recorder = _Recorder(
        {("GET", "/v1/contacts/c1"): httpx.Response(200, json={"contact": {"firstName": "Ana"}})}
    )

    asyncio.run(_gateway(recorder).send_follow_up("c1", ""))

    sms = json.loads(recorder.requests[1].content)
    assert sms["message"].startswith("Hi Ana,")


def test_follow_up_unknown_contact_raises_request_error() -> None:
    recorder = _Recorder({("GET", "/v1/contacts/c1"): httpx.Response(404, text="not found")})

    with pytest.raises(CrmRequestError, match="404"):
        asyncio.run(_gateway(recorder).send_follow_up("c1", "hello"))

    assert len(recorder.requests) == 1
