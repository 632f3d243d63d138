from __future__ import annotations

import logging
from enum import Enum
from typing import Any

from packages.shared.schemas.command import ActionV1
from packages.shared.schemas.outcome import OutcomeV1, failed, skipped, succeeded
from services.api.app.services.crm_base import CrmAdapterError, CrmGateway, CrmResult

logger = logging.getLogger(__name__)


class DispatchContext(str, Enum):
    # Text commands from chat, voice and the manual command box.
    FULL = "FULL"
    # The direct action form, which may be submitted with only some fields filled in.
    PARTIAL_UI = "PARTIAL_UI"


_REQUIRED: dict[str, tuple[str, ...]] = {
    ActionV1.SEND_FOLLOWUP.value: ("contact_id",),
    ActionV1.ADD_TAG.value: ("contact_id", "tag_id"),
    ActionV1.MOVE_PIPELINE.value: ("opportunity_id", "stage_id"),
    ActionV1.LAUNCH_WORKFLOW.value: ("workflow_id", "contact_id"),
    ActionV1.MARK_NOSHOW.value: ("appointment_id",),
    ActionV1.START_CAMPAIGN.value: ("contact_id", "campaign_name"),
    ActionV1.UPDATE_CONTACT.value: ("contact_id", "fields"),
}

# Extra fields the direct action form must supply on top of the structural ones.
_UI_REQUIRED: dict[str, tuple[str, ...]] = {
    ActionV1.SEND_FOLLOWUP.value: ("message",),
}


async def dispatch(
    command: Any,
    gateway: CrmGateway,
    *,
    context: DispatchContext = DispatchContext.FULL,
) -> OutcomeV1:
    """Execute one command against the CRM gateway.

    Business failures come back as outcomes: missing fields and unknown actions are
    SKIPPED, gateway rejections are FAILED. Transport errors from the gateway are
    not caught here.
    """

    action = _action_of(command)
    if action not in _REQUIRED:
        logger.warning("Skipping unsupported action %r", action)
        return skipped(action, "unsupported action")

    values = _resolved_fields(action, command)

    required = _REQUIRED[action]
    if context == DispatchContext.PARTIAL_UI:
        required = required + _UI_REQUIRED.get(action, ())

    missing = [name for name in required if not values.get(name)]
    if missing:
        logger.info(
            "Skipping %s: missing %s (context=%s)", action, ", ".join(missing), context.value
        )
        return skipped(action, f"missing required fields: {', '.join(missing)}")

    try:
        result = await _invoke(action, values, gateway)
    except CrmAdapterError as e:
        logger.error("CRM %s raised: %s", action, e)
        return failed(action, str(e))

    if not result.success:
        reason = result.error or "CRM action failed"
        logger.error("CRM %s failed: %s", action, reason)
        return failed(action, reason)

    message = _confirmation(action, values, command)
    logger.info("Dispatched %s: %s", action, message)
    return succeeded(action, message)


def _action_of(command: Any) -> str | None:
    action = getattr(command, "action", None)
    if isinstance(action, Enum):
        action = action.value
    return action if isinstance(action, str) else None


def _resolved_fields(action: str, command: Any) -> dict[str, Any]:
    """Field values the gateway call needs, with alternate field names folded in."""

    def get(name: str) -> Any:
        return getattr(command, name, "")

    if action == ActionV1.SEND_FOLLOWUP.value:
        return {"contact_id": get("contact_id"), "message": get("message")}

    if action == ActionV1.ADD_TAG.value:
        return {"contact_id": get("contact_id"), "tag_id": get("tag_id") or get("tag")}

    if action == ActionV1.MOVE_PIPELINE.value:
        return {
            "opportunity_id": get("opportunity_id") or get("contact_id"),
            "stage_id": get("stage_id") or get("stage"),
        }

    if action == ActionV1.LAUNCH_WORKFLOW.value:
        return {"workflow_id": get("workflow_id"), "contact_id": get("contact_id")}

    if action == ActionV1.MARK_NOSHOW.value:
        return {"appointment_id": get("appointment_id")}

    if action == ActionV1.START_CAMPAIGN.value:
        return {"contact_id": get("contact_id"), "campaign_name": get("campaign_name")}

    return {"contact_id": get("contact_id"), "fields": get("fields") or {}}


async def _invoke(action: str, values: dict[str, Any], gateway: CrmGateway) -> CrmResult:
    if action == ActionV1.SEND_FOLLOWUP.value:
        return await gateway.send_follow_up(values["contact_id"], values["message"])

    if action == ActionV1.ADD_TAG.value:
        return await gateway.add_tag(values["contact_id"], values["tag_id"])

    if action == ActionV1.MOVE_PIPELINE.value:
        return await gateway.move_pipeline_stage(values["opportunity_id"], values["stage_id"])

    if action == ActionV1.LAUNCH_WORKFLOW.value:
        return await gateway.launch_workflow(values["workflow_id"], values["contact_id"])

    if action == ActionV1.MARK_NOSHOW.value:
        return await gateway.mark_no_show(values["appointment_id"])

    if action == ActionV1.START_CAMPAIGN.value:
        return await gateway.launch_workflow(values["campaign_name"], values["contact_id"])

    return await gateway.update_contact(values["contact_id"], values["fields"])


def _confirmation(action: str, values: dict[str, Any], command: Any) -> str:
    if action == ActionV1.SEND_FOLLOWUP.value:
        return f"Follow-up sent to contact {values['contact_id']}"

    if action == ActionV1.ADD_TAG.value:
        if not getattr(command, "tag_id", ""):
            return f"Tagged contact {values['contact_id']} as {values['tag_id']}"
        return f"Tag {values['tag_id']} added to contact {values['contact_id']}"

    if action == ActionV1.MOVE_PIPELINE.value:
        if not getattr(command, "opportunity_id", ""):
            return f"Moved contact {values['opportunity_id']} to stage {values['stage_id']}"
        return f"Opportunity {values['opportunity_id']} moved to stage {values['stage_id']}"

    if action == ActionV1.LAUNCH_WORKFLOW.value:
        return f"Workflow {values['workflow_id']} launched for contact {values['contact_id']}"

    if action == ActionV1.MARK_NOSHOW.value:
        return f"Appointment {values['appointment_id']} marked as no-show"

    if action == ActionV1.START_CAMPAIGN.value:
        return f'Campaign "{values["campaign_name"]}" started for contact {values["contact_id"]}'

    return f"Contact {values['contact_id']} updated with new fields"
