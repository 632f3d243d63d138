"""Shared command schema (v1).

A command is the structured form of a CRM automation the user asked for. The
`action` field discriminates the variant; each variant carries only the fields
that its action needs.
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class ActionV1(str, Enum):
    SEND_FOLLOWUP = "send-followup"
    ADD_TAG = "add-tag"
    MOVE_PIPELINE = "move-pipeline"
    LAUNCH_WORKFLOW = "launch-workflow"
    MARK_NOSHOW = "mark-noshow"
    START_CAMPAIGN = "start-campaign"
    UPDATE_CONTACT = "update-contact"


class _CommandBase(BaseModel):
    # Commands are created once per input and never mutated.
    model_config = ConfigDict(frozen=True)


class SendFollowUpCommandV1(_CommandBase):
    action: Literal["send-followup"] = "send-followup"
    contact_id: str = ""
    message: str = ""


class AddTagCommandV1(_CommandBase):
    action: Literal["add-tag"] = "add-tag"
    contact_id: str = ""
    tag_id: str = ""

    # Human tag name, used when no tag id is known.
    tag: str = ""


class MovePipelineCommandV1(_CommandBase):
    action: Literal["move-pipeline"] = "move-pipeline"
    opportunity_id: str = ""
    stage_id: str = ""

    # Contact/stage-name form, used when no opportunity id is known.
    contact_id: str = ""
    stage: str = ""


class LaunchWorkflowCommandV1(_CommandBase):
    action: Literal["launch-workflow"] = "launch-workflow"
    workflow_id: str = ""
    contact_id: str = ""


class MarkNoShowCommandV1(_CommandBase):
    action: Literal["mark-noshow"] = "mark-noshow"
    appointment_id: str = ""


class StartCampaignCommandV1(_CommandBase):
    action: Literal["start-campaign"] = "start-campaign"
    contact_id: str = ""
    campaign_name: str = ""


class UpdateContactCommandV1(_CommandBase):
    action: Literal["update-contact"] = "update-contact"
    contact_id: str = ""
    fields: dict[str, Any] = Field(default_factory=dict)


CommandV1 = Annotated[
    Union[
        SendFollowUpCommandV1,
        AddTagCommandV1,
        MovePipelineCommandV1,
        LaunchWorkflowCommandV1,
        MarkNoShowCommandV1,
        StartCampaignCommandV1,
        UpdateContactCommandV1,
    ],
    Field(discriminator="action"),
]
