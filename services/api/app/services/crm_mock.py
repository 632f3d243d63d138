from __future__ import annotations

from typing import Any

from services.api.app.services.crm_base import CrmResult


class MockCrmGateway:
    """Deterministic CRM gateway for tests and local dev.

    Every call is recorded in `calls` as (operation, kwargs). Operations named in
    `fail_operations` return a failure result; those in `raise_operations` raise.
    """

    vendor = "CRM_MOCK"

    def __init__(
        self,
        *,
        fail_operations: set[str] | None = None,
        raise_operations: dict[str, Exception] | None = None,
    ) -> None:
        self.calls: list[tuple[str, dict[str, Any]]] = []
        self._fail = set(fail_operations or ())
        self._raise = dict(raise_operations or {})

    async def add_tag(self, contact_id: str, tag_id: str) -> CrmResult:
        return self._record("add_tag", contact_id=contact_id, tag_id=tag_id)

    async def launch_workflow(self, workflow_id: str, contact_id: str) -> CrmResult:
        return self._record("launch_workflow", workflow_id=workflow_id, contact_id=contact_id)

    async def update_contact(self, contact_id: str, fields: dict[str, Any]) -> CrmResult:
        return self._record("update_contact", contact_id=contact_id, fields=dict(fields))

    async def move_pipeline_stage(self, opportunity_id: str, stage_id: str) -> CrmResult:
        return self._record(
            "move_pipeline_stage", opportunity_id=opportunity_id, stage_id=stage_id
        )

    async def mark_no_show(self, appointment_id: str) -> CrmResult:
        return self._record("mark_no_show", appointment_id=appointment_id)

    async def send_follow_up(self, contact_id: str, message: str) -> CrmResult:
        return self._record("send_follow_up", contact_id=contact_id, message=message)

    def _record(self, operation: str, **kwargs: Any) -> CrmResult:
        self.calls.append((operation, kwargs))

        exc = self._raise.get(operation)
        if exc is not None:
            raise exc

        if operation in self._fail:
            return CrmResult(success=False, data={}, error=f"Mock CRM rejected {operation}")

        return CrmResult(success=True, data={"operation": operation, **kwargs})
