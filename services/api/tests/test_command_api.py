from __future__ import annotations

from pathlib import Path

import httpx
import pytest
from fastapi.testclient import TestClient
from services.api.app.services.crm_mock import MockCrmGateway


@pytest.fixture()
def gateway() -> MockCrmGateway:
    return MockCrmGateway()


@pytest.fixture()
def client(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, gateway: MockCrmGateway
) -> TestClient:
    db_path = tmp_path / "jarvis_cmd.db"
    monkeypatch.setenv("DATABASE_URL", f"sqlite+pysqlite:///{db_path}")
    monkeypatch.setenv("JARVIS_DB_AUTO_CREATE", "true")
    monkeypatch.setenv("JARVIS_CRM_ADAPTER", "mock")

    import services.api.app.routers.command as command_router

    monkeypatch.setattr(command_router, "get_crm_gateway", lambda: gateway)

    from services.api.app.main import app

    with TestClient(app) as c:
        yield c


def _history(client: TestClient) -> list[dict]:
    resp = client.get("/v1/history")
    assert resp.status_code == 200
    return resp.json()


def test_parse_endpoint_returns_command_or_null(client: TestClient) -> None:
    resp = client.post(
        "/v1/command/parse", json={"text": "move opportunity opp456 to stage negotiation"}
    )
    assert resp.status_code == 200
    assert resp.json()["command"] == {
        "action": "move-pipeline",
        "opportunity_id": "opp456",
        "stage_id": "negotiation",
        "contact_id": "",
        "stage": "",
    }

    miss = client.post("/v1/command/parse", json={"text": "Tag John123 as hotlead"})
    assert miss.status_code == 200
    assert miss.json()["command"] is None


def test_voice_command_dispatches_and_records_history(
    client: TestClient, gateway: MockCrmGateway
) -> None:
    resp = client.post(
        "/v1/command",
        json={"text": "launch workflow welcome123 for contact John123", "source": "VOICE"},
    )
    assert resp.status_code == 200
    data = resp.json()

    assert data["outcome"]["status"] == "SUCCEEDED"
    assert data["notification"]["type"] == "SUCCESS"
    assert data["notification"]["message"] == "Workflow welcome123 launched for contact John123"
    assert gateway.calls == [
        ("launch_workflow", {"workflow_id": "welcome123", "contact_id": "John123"})
    ]

    history = _history(client)
    assert len(history) == 1
    assert history[0]["id"] == data["history_id"]
    assert history[0]["source"] == "VOICE"
    assert history[0]["action"] == "launch-workflow"


def test_failed_add_tag_gets_one_history_entry_with_reason(
    client: TestClient, monkeypatch: pytest.MonkeyPatch
) -> None:
    import services.api.app.routers.command as command_router

    failing = MockCrmGateway(fail_operations={"add_tag"})
    monkeypatch.setattr(command_router, "get_crm_gateway", lambda: failing)

    resp = client.post("/v1/command", json={"text": "add the tag hotlead to contact John123"})
    assert resp.status_code == 200
    data = resp.json()
    assert data["outcome"]["status"] == "FAILED"
    assert data["notification"]["type"] == "ERROR"

    history = _history(client)
    assert len(history) == 1
    assert history[0]["status"] == "FAILED"
    assert history[0]["result"]


def test_unrecognized_text_is_reported_as_skipped(
    client: TestClient, gateway: MockCrmGateway
) -> None:
    resp = client.post("/v1/command", json={"text": "Tag John123 as hotlead"})
    assert resp.status_code == 200
    data = resp.json()

    assert data["command"] is None
    assert data["outcome"] == {
        "status": "SKIPPED",
        "action": None,
        "message": "No valid command detected",
    }
    assert data["notification"]["type"] == "INFO"
    assert gateway.calls == []
    assert len(_history(client)) == 1


def test_direct_action_with_all_fields(client: TestClient, gateway: MockCrmGateway) -> None:
    resp = client.post(
        "/v1/actions",
        json={"action": "update-contact", "contact_id": "John123", "fields": {"city": "Austin"}},
    )
    assert resp.status_code == 200
    assert resp.json()["outcome"]["message"] == "Contact John123 updated with new fields"
    assert gateway.calls == [
        ("update_contact", {"contact_id": "John123", "fields": {"city": "Austin"}})
    ]

    history = _history(client)
    assert history[0]["source"] == "UI_ACTION"
    assert history[0]["command_text"] == "[UI Action] update-contact"


def test_direct_action_missing_fields_is_skipped(
    client: TestClient, gateway: MockCrmGateway
) -> None:
    resp = client.post("/v1/actions", json={"action": "send-followup", "contact_id": "John123"})
    assert resp.status_code == 200
    outcome = resp.json()["outcome"]
    assert outcome["status"] == "SKIPPED"
    assert "message" in outcome["message"]
    assert gateway.calls == []


def test_direct_action_unknown_is_skipped(client: TestClient) -> None:
    resp = client.post("/v1/actions", json={"action": "delete-everything"})
    assert resp.status_code == 200
    assert resp.json()["outcome"]["message"] == "unsupported action"
    assert len(_history(client)) == 1


def test_unreachable_crm_is_503_and_still_recorded(
    client: TestClient, monkeypatch: pytest.MonkeyPatch
) -> None:
    import services.api.app.routers.command as command_router

    down = MockCrmGateway(raise_operations={"mark_no_show": httpx.ConnectError("refused")})
    monkeypatch.setattr(command_router, "get_crm_gateway", lambda: down)

    resp = client.post("/v1/command", json={"text": "mark appointment appt456 as no-show"})
    assert resp.status_code == 503
    assert "CRM unreachable" in resp.json()["detail"]

    history = _history(client)
    assert len(history) == 1
    assert history[0]["status"] == "FAILED"


def test_bad_crm_config_is_500(client: TestClient, monkeypatch: pytest.MonkeyPatch) -> None:
    import services.api.app.routers.command as command_router
    from services.api.app.services.crm_factory import get_crm_gateway

    monkeypatch.setattr(command_router, "get_crm_gateway", get_crm_gateway)
    monkeypatch.setenv("JARVIS_CRM_ADAPTER", "ghl")
    monkeypatch.delenv("GHL_API_KEY", raising=False)

    resp = client.post("/v1/command", json={"text": "mark appointment appt456 as no-show"})
    assert resp.status_code == 500
    assert "GHL_API_KEY" in resp.json()["detail"]
