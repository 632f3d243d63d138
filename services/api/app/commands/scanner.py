from __future__ import annotations

import asyncio
import logging
import os
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from packages.shared.schemas.command import (
    ActionV1,
    AddTagCommandV1,
    CommandV1,
    LaunchWorkflowCommandV1,
    SendFollowUpCommandV1,
)
from packages.shared.schemas.outcome import OutcomeV1, failed
from services.api.app.commands.dispatcher import dispatch
from services.api.app.services.crm_base import CrmGateway
from services.api.app.services.meeting_base import MeetingRecord

logger = logging.getLogger(__name__)


_RULE_ACTIONS = (ActionV1.ADD_TAG, ActionV1.LAUNCH_WORKFLOW, ActionV1.SEND_FOLLOWUP)


@dataclass(frozen=True, slots=True)
class TriggerRule:
    keyword: str
    action: ActionV1
    target_id: str

    def __post_init__(self) -> None:
        if self.action not in _RULE_ACTIONS:
            raise ValueError(f"Trigger rules do not support action {self.action.value!r}")


def default_trigger_rules() -> list[TriggerRule]:
    """Keyword table applied to meeting text, in evaluation order."""

    return [
        TriggerRule(
            keyword="pricing",
            action=ActionV1.ADD_TAG,
            target_id=os.getenv("JARVIS_TRIGGER_PRICING_TAG_ID", "pricing-request"),
        ),
        TriggerRule(
            keyword="interested",
            action=ActionV1.LAUNCH_WORKFLOW,
            target_id=os.getenv("JARVIS_TRIGGER_INTERESTED_WORKFLOW_ID", "interested-nurture"),
        ),
        TriggerRule(
            keyword="demo",
            action=ActionV1.ADD_TAG,
            target_id=os.getenv("JARVIS_TRIGGER_DEMO_TAG_ID", "demo-requested"),
        ),
    ]


def meeting_scan_text(summary: str, insights: Iterable[str]) -> str:
    parts = [summary or "", *[i for i in insights if i]]
    return " ".join(parts).lower()


async def scan_and_dispatch(
    contact_id: str | None,
    text: str,
    gateway: CrmGateway,
    *,
    rules: Sequence[TriggerRule] | None = None,
) -> list[OutcomeV1]:
    """Fire every rule whose keyword appears in `text`.

    Unlike the parser this is not first-match: all matching rules fire, concurrently,
    and one failing action never stops the others. Outcomes are returned in rule order.
    """

    if not contact_id or not contact_id.strip():
        logger.error("Meeting automation skipped: no contact id")
        return [failed(None, "meeting has no contact id")]

    rules = default_trigger_rules() if rules is None else rules
    haystack = (text or "").lower()

    triggered = [r for r in rules if r.keyword.lower() in haystack]
    if not triggered:
        logger.info("No meeting triggers matched for contact %s", contact_id)
        return []

    logger.info(
        "Meeting triggers matched for contact %s: %s",
        contact_id,
        ", ".join(r.keyword for r in triggered),
    )

    results = await asyncio.gather(
        *(dispatch(_command_for(r, contact_id, text), gateway) for r in triggered),
        return_exceptions=True,
    )

    outcomes: list[OutcomeV1] = []
    for rule, result in zip(triggered, results):
        if isinstance(result, BaseException):
            logger.error("Trigger %r raised: %s", rule.keyword, result)
            outcomes.append(failed(rule.action.value, f"{type(result).__name__}: {result}"))
        else:
            outcomes.append(result)

    return outcomes


async def scan_meeting(meeting: MeetingRecord, gateway: CrmGateway) -> list[OutcomeV1]:
    if not meeting.contact_id:
        logger.error("Meeting %s has no contact id", meeting.meeting_id)
        return [failed(None, "meeting has no contact id")]

    text = meeting_scan_text(meeting.summary, meeting.insights)
    return await scan_and_dispatch(meeting.contact_id, text, gateway)


def _command_for(rule: TriggerRule, contact_id: str, text: str) -> CommandV1:
    if rule.action == ActionV1.ADD_TAG:
        return AddTagCommandV1(contact_id=contact_id, tag_id=rule.target_id)

    if rule.action == ActionV1.LAUNCH_WORKFLOW:
        return LaunchWorkflowCommandV1(workflow_id=rule.target_id, contact_id=contact_id)

    return SendFollowUpCommandV1(contact_id=contact_id, message=text)
