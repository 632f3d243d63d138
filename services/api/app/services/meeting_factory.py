from __future__ import annotations

import os

from services.api.app.services.meeting_base import MeetingIntelligenceProvider
from services.api.app.services.meeting_mock import MockMeetingProvider


def get_meeting_provider() -> MeetingIntelligenceProvider:
    provider = os.getenv("JARVIS_MEETING_PROVIDER", "mock").strip().lower()

    if provider in ("mock", "demo"):
        return MockMeetingProvider()

    if provider == "symbl":
        from services.api.app.services.symbl_client import SymblProvider

        return SymblProvider.from_env()

    raise ValueError(f"Unknown JARVIS_MEETING_PROVIDER={provider!r}. Expected mock or symbl.")
