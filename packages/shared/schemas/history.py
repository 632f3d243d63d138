"""Shared command history schema (v1).

The backend keeps an append-only history of every dispatch outcome. Clients
render it as the command center's activity list.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel

from packages.shared.schemas.outcome import OutcomeStatusV1


class CommandSourceV1(str, Enum):
    CHAT = "CHAT"
    VOICE = "VOICE"
    MANUAL = "MANUAL"
    UI_ACTION = "UI_ACTION"
    AUTOMATION = "AUTOMATION"


class HistoryEntryV1(BaseModel):
    id: str
    source: CommandSourceV1

    command_text: str
    action: str | None = None

    status: OutcomeStatusV1
    result: str
    created_at: str
