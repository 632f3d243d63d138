"""Shared notification payload schema (v1).

Chat, voice and the command center render these as toasts. One notification is
produced per dispatch outcome.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel

from packages.shared.schemas.outcome import OutcomeStatusV1, OutcomeV1


class NotificationTypeV1(str, Enum):
    SUCCESS = "SUCCESS"
    ERROR = "ERROR"
    INFO = "INFO"


class NotificationV1(BaseModel):
    version: str = "1"
    type: NotificationTypeV1

    title: str
    message: str


def notification_for(outcome: OutcomeV1) -> NotificationV1:
    if outcome.status == OutcomeStatusV1.SUCCEEDED:
        return NotificationV1(
            type=NotificationTypeV1.SUCCESS,
            title="Action completed",
            message=outcome.message,
        )

    if outcome.status == OutcomeStatusV1.FAILED:
        return NotificationV1(
            type=NotificationTypeV1.ERROR,
            title="Failed to execute action",
            message=outcome.message,
        )

    return NotificationV1(
        type=NotificationTypeV1.INFO,
        title="Nothing to execute",
        message=outcome.message,
    )
