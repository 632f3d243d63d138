from __future__ import annotations

import logging
import os
from datetime import date
from typing import Any

import httpx
from services.api.app.services.crm_base import CrmRequestError, CrmResult

logger = logging.getLogger(__name__)

GHL_API_BASE = "https://rest.gohighlevel.com/v1"

_DEFAULT_FOLLOW_UP = (
    "Hi {first_name},\n\n"
    "Thank you for our meeting. I wanted to follow up with you about our discussion.\n\n"
    "Best regards,\nYour Team"
)


class GoHighLevelGateway:
    """CRM gateway backed by the GoHighLevel REST API.

    Each call opens its own client; nothing is pooled between dispatches. HTTP error
    statuses are reported as unsuccessful results. Transport errors propagate.
    """

    vendor = "GOHIGHLEVEL"

    def __init__(
        self,
        *,
        api_key: str,
        base_url: str = GHL_API_BASE,
        timeout_seconds: float = 20.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout_seconds
        self._transport = transport

    @classmethod
    def from_env(cls) -> GoHighLevelGateway:
        api_key = os.getenv("GHL_API_KEY", "").strip()
        if not api_key:
            raise ValueError("GHL_API_KEY is required when JARVIS_CRM_ADAPTER=ghl")

        return cls(
            api_key=api_key,
            base_url=os.getenv("GHL_API_BASE", GHL_API_BASE).strip() or GHL_API_BASE,
            timeout_seconds=float(os.getenv("JARVIS_CRM_TIMEOUT_SECONDS", "20")),
        )

    async def add_tag(self, contact_id: str, tag_id: str) -> CrmResult:
        return await self._call("addTagToContact", "POST", f"/contacts/{contact_id}/tags/{tag_id}")

    async def launch_workflow(self, workflow_id: str, contact_id: str) -> CrmResult:
        return await self._call(
            "launchWorkflow",
            "POST",
            "/campaigns/start",
            json={"contactId": contact_id, "campaignId": workflow_id},
        )

    async def update_contact(self, contact_id: str, fields: dict[str, Any]) -> CrmResult:
        return await self._call("updateContact", "PUT", f"/contacts/{contact_id}", json=fields)

    async def move_pipeline_stage(self, opportunity_id: str, stage_id: str) -> CrmResult:
        return await self._call(
            "movePipelineStage",
            "PUT",
            f"/opportunities/{opportunity_id}",
            json={"stageId": stage_id},
        )

    async def mark_no_show(self, appointment_id: str) -> CrmResult:
        return await self._call(
            "markAppointmentNoShow", "PUT", f"/appointments/{appointment_id}/noshow"
        )

    async def send_follow_up(self, contact_id: str, message: str) -> CrmResult:
        async with self._client() as client:
            contact_resp = await client.get(f"/contacts/{contact_id}")
            if not contact_resp.is_success:
                raise CrmRequestError("fetchContact", contact_resp.status_code, contact_resp.text)

            contact = _json_or_empty(contact_resp).get("contact") or {}
            body = message or _DEFAULT_FOLLOW_UP.format(
                first_name=contact.get("firstName") or "there"
            )

            sms_resp = await client.post(
                f"/contacts/{contact_id}/sms",
                json={"message": body, "direction": "outgoing"},
            )

            note_resp = await client.post(
                f"/contacts/{contact_id}/notes",
                json={
                    "note": f"Follow-up sent on {date.today().isoformat()}:\n\n"
                    f"{message or 'No content provided.'}"
                },
            )
            if not note_resp.is_success:
                logger.warning(
                    "Follow-up note for contact %s failed with HTTP %d",
                    contact_id,
                    note_resp.status_code,
                )

        logger.info("Executed GHL action sendFollowUp status=%d", sms_resp.status_code)
        return _to_result(sms_resp)

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self._base_url,
            headers={
                "Authorization": f"Bearer {self._api_key}",
                "Content-Type": "application/json",
            },
            timeout=self._timeout,
            transport=self._transport,
        )

    async def _call(
        self,
        operation: str,
        method: str,
        path: str,
        *,
        json: dict[str, Any] | None = None,
    ) -> CrmResult:
        async with self._client() as client:
            resp = await client.request(method, path, json=json)

        logger.info("Executed GHL action %s status=%d", operation, resp.status_code)
        return _to_result(resp)


def _json_or_empty(resp: httpx.Response) -> dict[str, Any]:
    try:
        data = resp.json()
    except ValueError:
        return {}
    return data if isinstance(data, dict) else {"data": data}


def _to_result(resp: httpx.Response) -> CrmResult:
    data = _json_or_empty(resp)
    if resp.is_success:
        return CrmResult(success=True, data=data)

    return CrmResult(
        success=False,
        data=data,
        error=f"GoHighLevel HTTP {resp.status_code}: {resp.text}",
    )
