"""Shared dispatch outcome schema (v1).

Every dispatch produces exactly one outcome. Failures and skips are values, not
exceptions, so callers can render them without special handling.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class OutcomeStatusV1(str, Enum):
    SUCCEEDED = "SUCCEEDED"
    FAILED = "FAILED"
    SKIPPED = "SKIPPED"


class OutcomeV1(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: OutcomeStatusV1
    action: str | None = None

    # Confirmation text on success, otherwise the reason.
    message: str = Field(..., min_length=1)

    @property
    def ok(self) -> bool:
        return self.status == OutcomeStatusV1.SUCCEEDED


def succeeded(action: str | None, message: str) -> OutcomeV1:
    return OutcomeV1(status=OutcomeStatusV1.SUCCEEDED, action=action, message=message)


def failed(action: str | None, reason: str) -> OutcomeV1:
    return OutcomeV1(
        status=OutcomeStatusV1.FAILED,
        action=action,
        message=reason or "CRM action failed",
    )


def skipped(action: str | None, reason: str) -> OutcomeV1:
    return OutcomeV1(status=OutcomeStatusV1.SKIPPED, action=action, message=reason)
