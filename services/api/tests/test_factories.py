import pytest
from services.api.app.llm.factory import get_llm_responder
from services.api.app.services.crm_factory import get_crm_gateway
from services.api.app.services.meeting_factory import get_meeting_provider


def test_get_crm_gateway_defaults_to_mock(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("JARVIS_CRM_ADAPTER", raising=False)
    gateway = get_crm_gateway()
    assert gateway.vendor == "CRM_MOCK"


def test_get_crm_gateway_ghl_requires_api_key(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("JARVIS_CRM_ADAPTER", "ghl")
    monkeypatch.delenv("GHL_API_KEY", raising=False)
    with pytest.raises(ValueError, match="GHL_API_KEY"):
        get_crm_gateway()


def test_get_crm_gateway_ghl_with_key(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("JARVIS_CRM_ADAPTER", "ghl")
    monkeypatch.setenv("GHL_API_KEY", "k-123")
    assert get_crm_gateway().vendor == "GOHIGHLEVEL"


def test_get_crm_gateway_rejects_unknown(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("JARVIS_CRM_ADAPTER", "nope")
    with pytest.raises(ValueError, match="Unknown JARVIS_CRM_ADAPTER"):
        get_crm_gateway()


def test_get_meeting_provider_defaults_to_mock(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("JARVIS_MEETING_PROVIDER", raising=False)
    assert get_meeting_provider().vendor == "MEETING_MOCK"


def test_get_meeting_provider_symbl_requires_credentials(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("JARVIS_MEETING_PROVIDER", "symbl")
    monkeypatch.delenv("SYMBL_APP_ID", raising=False)
    monkeypatch.delenv("SYMBL_APP_SECRET", raising=False)
    with pytest.raises(ValueError, match="SYMBL_APP_ID"):
        get_meeting_provider()


def test_get_llm_responder_openai_requires_key(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("JARVIS_LLM_PROVIDER", "openai")
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    with pytest.raises(ValueError, match="OPENAI_API_KEY"):
        get_llm_responder()


def test_get_llm_responder_rejects_unknown(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("JARVIS_LLM_PROVIDER", "nope")
    with pytest.raises(ValueError, match="Unknown JARVIS_LLM_PROVIDER"):
        get_llm_responder()


def test_get_llm_responder_openai_reads_model_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    from services.api.app.llm.openai_responder import OpenAIResponder

    monkeypatch.setenv("JARVIS_LLM_PROVIDER", "openai")
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    monkeypatch.setenv("JARVIS_LLM_MODEL", "gpt-test")

    responder = get_llm_responder()

    assert isinstance(responder, OpenAIResponder)
    assert responder._model == "gpt-test"
