from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

import httpx
from fastapi import APIRouter, Body, Depends, HTTPException
from packages.shared.schemas.history import CommandSourceV1
from packages.shared.schemas.notification_v1 import notification_for
from services.api.app.commands.scanner import scan_meeting
from services.api.app.db.database import get_db
from services.api.app.db.models import Meeting
from services.api.app.models.meeting import (
    AudioSubmitRequest,
    AutomationResult,
    MeetingAutomationResponse,
    MeetingSummaryResponse,
    MeetingWebhookResponse,
)
from services.api.app.services.crm_factory import get_crm_gateway
from services.api.app.services.history import record_outcome
from services.api.app.services.meeting_base import (
    MeetingCredentialsError,
    MeetingProviderError,
    MeetingRecord,
    extract_contact_id,
    extract_insights,
    extract_summary,
)
from services.api.app.services.meeting_factory import get_meeting_provider
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)

router = APIRouter()

_STORED_EVENT_TYPES = {"message_summary", "conversation_completed"}


@router.post("/v1/meetings/webhook", response_model=MeetingWebhookResponse)
def meeting_webhook(
    payload: dict[str, Any] = Body(...), db: Session = Depends(get_db)
) -> MeetingWebhookResponse:
    event_type = payload.get("type")
    if event_type not in _STORED_EVENT_TYPES:
        logger.info("Ignoring meeting webhook of type %r", event_type)
        return MeetingWebhookResponse(ignored=True)

    conversation_id = str(payload.get("conversationId") or "").strip() or None

    meeting = None
    if conversation_id:
        meeting = (
            db.query(Meeting).filter(Meeting.symbl_conversation_id == conversation_id).first()
        )
    if meeting is None:
        meeting = Meeting(id=uuid4().hex, symbl_conversation_id=conversation_id)
        db.add(meeting)

    meeting.title = payload.get("name") or "Untitled Meeting"
    meeting.status = "completed" if event_type == "conversation_completed" else "processing"
    meeting.summary = extract_summary(payload)
    meeting.insights_json = extract_insights(payload)
    meeting.contact_id = extract_contact_id(payload) or meeting.contact_id
    meeting.raw_data_json = payload
    meeting.date = datetime.now(timezone.utc)

    db.commit()
    logger.info("Stored meeting %s (conversation %s)", meeting.id, conversation_id)

    return MeetingWebhookResponse(meeting_id=meeting.id)


@router.post("/v1/meetings/audio")
async def submit_meeting_audio(payload: AudioSubmitRequest) -> dict:
    try:
        provider = get_meeting_provider()
    except ValueError as e:
        raise HTTPException(status_code=500, detail=str(e)) from e

    try:
        return await provider.submit_audio(payload.url, webhook_url=payload.webhook_url)
    except Exception as e:
        _raise_provider_http_error(e)


@router.get("/v1/meetings/latest/summary", response_model=MeetingSummaryResponse)
async def latest_meeting_summary(db: Session = Depends(get_db)) -> MeetingSummaryResponse:
    meeting = (
        db.query(Meeting)
        .filter(Meeting.status == "completed")
        .order_by(Meeting.date.desc())
        .first()
    )
    if meeting is None:
        return MeetingSummaryResponse(summary="No meeting summaries found.")

    if not meeting.summary and meeting.symbl_conversation_id:
        try:
            provider = get_meeting_provider()
            meeting.summary = await provider.get_summary(meeting.symbl_conversation_id)
            db.commit()
        except (ValueError, MeetingProviderError, httpx.TransportError) as e:
            # The stored record is still useful without a summary.
            logger.error("Could not backfill summary for meeting %s: %s", meeting.id, e)

    return MeetingSummaryResponse(
        summary=meeting.summary or "No summary available for this meeting.",
        meeting_id=meeting.id,
        title=meeting.title,
        date=meeting.date.isoformat(),
    )


@router.post("/v1/meetings/{meeting_id}/automations", response_model=MeetingAutomationResponse)
async def run_meeting_automations(
    meeting_id: str, db: Session = Depends(get_db)
) -> MeetingAutomationResponse:
    meeting = db.get(Meeting, meeting_id)
    if meeting is None:
        meeting = db.query(Meeting).filter(Meeting.symbl_conversation_id == meeting_id).first()
    if meeting is None:
        raise HTTPException(status_code=404, detail="Meeting not found")

    try:
        gateway = get_crm_gateway()
    except ValueError as e:
        raise HTTPException(status_code=500, detail=str(e)) from e

    record = MeetingRecord(
        meeting_id=meeting.id,
        contact_id=meeting.contact_id,
        summary=meeting.summary or "",
        insights=list(meeting.insights_json or []),
    )
    outcomes = await scan_meeting(record, gateway)

    results: list[AutomationResult] = []
    for outcome in outcomes:
        row = record_outcome(
            db,
            source=CommandSourceV1.AUTOMATION,
            command_text=f"[Meeting] {meeting.title}",
            outcome=outcome,
            meeting_id=meeting.id,
        )
        results.append(
            AutomationResult(
                history_id=row.id,
                outcome=outcome,
                notification=notification_for(outcome),
            )
        )

    return MeetingAutomationResponse(
        meeting_id=meeting.id,
        contact_id=meeting.contact_id,
        results=results,
    )


def _raise_provider_http_error(e: Exception) -> None:
    if isinstance(e, MeetingCredentialsError):
        raise HTTPException(status_code=401, detail=str(e)) from e

    if isinstance(e, MeetingProviderError):
        raise HTTPException(status_code=502, detail=str(e)) from e

    raise HTTPException(status_code=500, detail="Internal Server Error") from e
