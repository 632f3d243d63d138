from __future__ import annotations

from typing import Any, Literal

from packages.shared.schemas.command import CommandV1
from packages.shared.schemas.notification_v1 import NotificationV1
from packages.shared.schemas.outcome import OutcomeV1
from pydantic import BaseModel, Field


class CommandParseRequest(BaseModel):
    text: str


class CommandParseResponse(BaseModel):
    command: CommandV1 | None = None


class CommandSubmitRequest(BaseModel):
    text: str = Field(..., min_length=1)

    # Typed into the command box, or a finalized voice transcript.
    source: Literal["MANUAL", "VOICE"] = "MANUAL"


class DirectActionRequest(BaseModel):
    """Fields of the command center's direct action form. Any of them may be blank."""

    action: str
    contact_id: str = ""
    tag_id: str = ""
    workflow_id: str = ""
    opportunity_id: str = ""
    stage_id: str = ""
    appointment_id: str = ""
    campaign_name: str = ""
    message: str = ""
    fields: dict[str, Any] = Field(default_factory=dict)


class CommandResultResponse(BaseModel):
    history_id: str
    command: CommandV1 | None = None
    outcome: OutcomeV1
    notification: NotificationV1


class ChatRequest(BaseModel):
    message: str = Field(..., min_length=1)


class ChatResponse(BaseModel):
    response: str
    command: CommandV1 | None = None
    outcome: OutcomeV1 | None = None
    notification: NotificationV1 | None = None
    history_id: str | None = None
