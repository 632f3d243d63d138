from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol


class CrmAdapterError(Exception):
    """Base class for CRM adapter errors."""


class CrmRequestError(CrmAdapterError):
    def __init__(self, operation: str, status_code: int, body: str) -> None:
        super().__init__(f"CRM {operation} failed with HTTP {status_code}: {body}")
        self.operation = operation
        self.status_code = status_code
        self.body = body


@dataclass(frozen=True, slots=True)
class CrmResult:
    success: bool
    data: dict[str, Any] = field(default_factory=dict)
    error: str | None = None


class CrmGateway(Protocol):
    vendor: str

    async def add_tag(self, contact_id: str, tag_id: str) -> CrmResult: ...

    async def launch_workflow(self, workflow_id: str, contact_id: str) -> CrmResult: ...

    async def update_contact(self, contact_id: str, fields: dict[str, Any]) -> CrmResult: ...

    async def move_pipeline_stage(self, opportunity_id: str, stage_id: str) -> CrmResult: ...

    async def mark_no_show(self, appointment_id: str) -> CrmResult: ...

    async def send_follow_up(self, contact_id: str, message: str) -> CrmResult: ...
