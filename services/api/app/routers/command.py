from __future__ import annotations

import logging

import httpx
from fastapi import APIRouter, Depends, HTTPException
from packages.shared.schemas.command import (
    ActionV1,
    AddTagCommandV1,
    LaunchWorkflowCommandV1,
    MarkNoShowCommandV1,
    MovePipelineCommandV1,
    SendFollowUpCommandV1,
    StartCampaignCommandV1,
    UpdateContactCommandV1,
)
from packages.shared.schemas.history import CommandSourceV1
from packages.shared.schemas.notification_v1 import notification_for
from packages.shared.schemas.outcome import failed, skipped
from pydantic import BaseModel
from services.api.app.commands.dispatcher import DispatchContext, dispatch
from services.api.app.commands.parser import parse_command
from services.api.app.db.database import get_db
from services.api.app.models.command import (
    CommandParseRequest,
    CommandParseResponse,
    CommandResultResponse,
    CommandSubmitRequest,
    DirectActionRequest,
)
from services.api.app.services.crm_factory import get_crm_gateway
from services.api.app.services.history import record_outcome
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/v1/command/parse", response_model=CommandParseResponse)
def parse(payload: CommandParseRequest) -> CommandParseResponse:
    return CommandParseResponse(command=parse_command(payload.text))


@router.post("/v1/command", response_model=CommandResultResponse)
async def submit_command(
    payload: CommandSubmitRequest, db: Session = Depends(get_db)
) -> CommandResultResponse:
    source = CommandSourceV1(payload.source)
    command = parse_command(payload.text)

    if command is None:
        outcome = skipped(None, "No valid command detected")
        row = record_outcome(db, source=source, command_text=payload.text, outcome=outcome)
        return CommandResultResponse(
            history_id=row.id,
            command=None,
            outcome=outcome,
            notification=notification_for(outcome),
        )

    return await run_command(
        db,
        command,
        source=source,
        command_text=payload.text,
        context=DispatchContext.FULL,
    )


@router.post("/v1/actions", response_model=CommandResultResponse)
async def direct_action(
    payload: DirectActionRequest, db: Session = Depends(get_db)
) -> CommandResultResponse:
    command = command_from_form(payload)
    command_text = f"[UI Action] {payload.action}"

    if command is None:
        outcome = skipped(payload.action, "unsupported action")
        row = record_outcome(
            db, source=CommandSourceV1.UI_ACTION, command_text=command_text, outcome=outcome
        )
        return CommandResultResponse(
            history_id=row.id,
            command=None,
            outcome=outcome,
            notification=notification_for(outcome),
        )

    return await run_command(
        db,
        command,
        source=CommandSourceV1.UI_ACTION,
        command_text=command_text,
        context=DispatchContext.PARTIAL_UI,
    )


async def run_command(
    db: Session,
    command: BaseModel,
    *,
    source: CommandSourceV1,
    command_text: str,
    context: DispatchContext,
) -> CommandResultResponse:
    """Dispatch one command and record exactly one history entry for the outcome."""

    try:
        gateway = get_crm_gateway()
    except ValueError as e:
        raise HTTPException(status_code=500, detail=str(e)) from e

    try:
        outcome = await dispatch(command, gateway, context=context)
    except httpx.TransportError as e:
        logger.error("CRM unreachable while dispatching %s: %s", command_text, e)
        outcome = failed(getattr(command, "action", None), f"CRM unreachable: {e}")
        record_outcome(
            db, source=source, command_text=command_text, outcome=outcome, command=command
        )
        raise HTTPException(status_code=503, detail=outcome.message) from e

    row = record_outcome(
        db, source=source, command_text=command_text, outcome=outcome, command=command
    )
    return CommandResultResponse(
        history_id=row.id,
        command=command,
        outcome=outcome,
        notification=notification_for(outcome),
    )


def command_from_form(payload: DirectActionRequest) -> BaseModel | None:
    """Build a command from direct action form fields. Blank fields stay blank."""

    contact_id = payload.contact_id.strip()
    action = payload.action.strip().lower()

    if action == ActionV1.ADD_TAG.value:
        return AddTagCommandV1(contact_id=contact_id, tag_id=payload.tag_id.strip())

    if action == ActionV1.LAUNCH_WORKFLOW.value:
        return LaunchWorkflowCommandV1(
            workflow_id=payload.workflow_id.strip(), contact_id=contact_id
        )

    if action == ActionV1.MOVE_PIPELINE.value:
        return MovePipelineCommandV1(
            opportunity_id=payload.opportunity_id.strip(), stage_id=payload.stage_id.strip()
        )

    if action == ActionV1.MARK_NOSHOW.value:
        return MarkNoShowCommandV1(appointment_id=payload.appointment_id.strip())

    if action == ActionV1.SEND_FOLLOWUP.value:
        return SendFollowUpCommandV1(contact_id=contact_id, message=payload.message.strip())

    if action == ActionV1.START_CAMPAIGN.value:
        return StartCampaignCommandV1(
            contact_id=contact_id, campaign_name=payload.campaign_name.strip()
        )

    if action == ActionV1.UPDATE_CONTACT.value:
        return UpdateContactCommandV1(contact_id=contact_id, fields=payload.fields)

    return None
