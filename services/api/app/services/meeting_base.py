from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol


class MeetingProviderError(Exception):
    """Base class for meeting intelligence provider errors."""


class MeetingCredentialsError(MeetingProviderError):
    def __init__(self, detail: str) -> None:
        super().__init__(f"Meeting provider credentials rejected: {detail}")


@dataclass(frozen=True, slots=True)
class MeetingRecord:
    meeting_id: str
    contact_id: str | None
    summary: str
    insights: list[str] = field(default_factory=list)


class MeetingIntelligenceProvider(Protocol):
    vendor: str

    async def get_summary(self, conversation_id: str) -> str: ...

    async def submit_audio(self, url: str, *, webhook_url: str | None = None) -> dict: ...


def extract_summary(payload: dict[str, Any]) -> str:
    """Summary text from a meeting webhook payload."""

    summary = payload.get("summary")
    if payload.get("type") == "message_summary" and isinstance(summary, dict):
        text = summary.get("text")
        if text:
            return str(text)

    insights = extract_insights(payload)
    if insights:
        return "\n\n".join(insights)

    return "No summary available"


def extract_insights(payload: dict[str, Any]) -> list[str]:
    raw = payload.get("insights")
    if not isinstance(raw, list):
        return []

    out: list[str] = []
    for insight in raw:
        if isinstance(insight, dict) and insight.get("text"):
            out.append(str(insight["text"]))
    return out


def extract_contact_id(payload: dict[str, Any]) -> str | None:
    contact_id = payload.get("contactId")
    if not contact_id and isinstance(payload.get("metadata"), dict):
        contact_id = payload["metadata"].get("contactId")
    contact_id = str(contact_id or "").strip()
    return contact_id or None
