from __future__ import annotations

from uuid import uuid4


class MockMeetingProvider:
    vendor = "MEETING_MOCK"

    def __init__(self, summaries: dict[str, str] | None = None) -> None:
        self._summaries = dict(summaries or {})

    async def get_summary(self, conversation_id: str) -> str:
        return self._summaries.get(
            conversation_id, f"Mock summary for conversation {conversation_id}."
        )

    async def submit_audio(self, url: str, *, webhook_url: str | None = None) -> dict:
        return {
            "conversationId": f"conv_{uuid4().hex[:10]}",
            "jobId": f"job_{uuid4().hex[:10]}",
            "url": url,
            "webhookUrl": webhook_url,
        }
