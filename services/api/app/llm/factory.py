from __future__ import annotations

import os

from services.api.app.llm.base import LLMResponder
from services.api.app.llm.fake import FakeLLMResponder


def get_llm_responder() -> LLMResponder:
    """Pick the responder behind /v1/chat.

    Its reply is shown to the user and then parsed for a CRM command, so the fake
    (canned small talk, echoed commands) is the default for tests and local dev.
    """

    provider = os.getenv("JARVIS_LLM_PROVIDER", "fake").strip().lower()

    if provider in ("fake", "demo"):
        return FakeLLMResponder()

    if provider == "openai":
        from services.api.app.llm.openai_responder import OpenAIResponder

        return OpenAIResponder.from_env()

    raise ValueError(f"Unknown JARVIS_LLM_PROVIDER={provider!r}. Expected fake or openai.")
