from __future__ import annotations

import logging
import os
import time
from collections.abc import Callable

import httpx
from services.api.app.services.meeting_base import MeetingCredentialsError, MeetingProviderError

logger = logging.getLogger(__name__)

SYMBL_API_BASE = "https://api.symbl.ai"

# Tokens are valid for 15 minutes; refresh a little before that.
TOKEN_LIFETIME_SECONDS = 14 * 60
TOKEN_REFRESH_MARGIN_SECONDS = 60


class TokenCache:
    """Bearer token plus its expiry, scoped to one client.

    The clock is injectable so tests can move time forward.
    """

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self._clock = clock
        self._token: str | None = None
        self._expires_at = 0.0

    def get(self) -> str | None:
        if self._token and self._clock() < self._expires_at - TOKEN_REFRESH_MARGIN_SECONDS:
            return self._token
        return None

    def put(self, token: str, *, ttl_seconds: float = TOKEN_LIFETIME_SECONDS) -> None:
        self._token = token
        self._expires_at = self._clock() + ttl_seconds

    def clear(self) -> None:
        self._token = None
        self._expires_at = 0.0


class SymblProvider:
    vendor = "SYMBL"

    def __init__(
        self,
        *,
        app_id: str,
        app_secret: str,
        token_cache: TokenCache | None = None,
        base_url: str = SYMBL_API_BASE,
        timeout_seconds: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._app_id = app_id
        self._app_secret = app_secret
        self._tokens = token_cache or TokenCache()
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout_seconds
        self._transport = transport

    @classmethod
    def from_env(cls) -> SymblProvider:
        app_id = os.getenv("SYMBL_APP_ID", "").strip()
        app_secret = os.getenv("SYMBL_APP_SECRET", "").strip()
        if not app_id or not app_secret:
            raise ValueError(
                "SYMBL_APP_ID and SYMBL_APP_SECRET are required when JARVIS_MEETING_PROVIDER=symbl"
            )
        return cls(app_id=app_id, app_secret=app_secret)

    async def get_token(self) -> str:
        token = self._tokens.get()
        if token:
            return token

        async with self._client() as client:
            resp = await client.post(
                "/oauth2/token:generate",
                json={"type": "application", "appId": self._app_id, "appSecret": self._app_secret},
            )

        if not resp.is_success:
            raise MeetingCredentialsError(resp.text)

        token = resp.json().get("accessToken")
        if not token:
            raise MeetingProviderError(f"Unexpected Symbl token response: {resp.text}")

        self._tokens.put(token)
        logger.debug("Fetched new Symbl access token")
        return token

    async def get_summary(self, conversation_id: str) -> str:
        token = await self.get_token()
        async with self._client() as client:
            resp = await client.get(
                f"/v1/conversations/{conversation_id}/summary",
                headers={"Authorization": f"Bearer {token}"},
            )

        if not resp.is_success:
            raise MeetingProviderError(f"Failed to get summary from Symbl: {resp.text}")

        summary = resp.json().get("summary")
        if isinstance(summary, list):
            summary = " ".join(str(s.get("text", "")) for s in summary if isinstance(s, dict))
        return str(summary or "No summary available from Symbl API.")

    async def submit_audio(self, url: str, *, webhook_url: str | None = None) -> dict:
        token = await self.get_token()
        body: dict[str, str] = {"url": url, "name": "Jarvis Auto Meeting Upload"}
        if webhook_url:
            body["webhookUrl"] = webhook_url

        async with self._client() as client:
            resp = await client.post(
                "/v1/process/audio/url",
                json=body,
                headers={"Authorization": f"Bearer {token}"},
            )

        if not resp.is_success:
            raise MeetingProviderError(f"Symbl API error: {resp.text}")

        logger.info("Symbl audio upload accepted for %s", url)
        return resp.json()

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self._base_url,
            headers={"Content-Type": "application/json"},
            timeout=self._timeout,
            transport=self._transport,
        )
