from __future__ import annotations

from packages.shared.schemas.notification_v1 import NotificationV1
from packages.shared.schemas.outcome import OutcomeV1
from pydantic import BaseModel, Field


class MeetingWebhookResponse(BaseModel):
    success: bool = True
    meeting_id: str | None = None
    ignored: bool = False


class AudioSubmitRequest(BaseModel):
    url: str = Field(..., min_length=1)
    webhook_url: str | None = None


class MeetingSummaryResponse(BaseModel):
    summary: str
    meeting_id: str | None = None
    title: str | None = None
    date: str | None = None


class AutomationResult(BaseModel):
    history_id: str
    outcome: OutcomeV1
    notification: NotificationV1


class MeetingAutomationResponse(BaseModel):
    meeting_id: str
    contact_id: str | None = None
    results: list[AutomationResult] = Field(default_factory=list)
