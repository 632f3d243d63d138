from __future__ import annotations

import os

from services.api.app.services.crm_base import CrmGateway
from services.api.app.services.crm_mock import MockCrmGateway


def get_crm_gateway() -> CrmGateway:
    """Select the CRM gateway based on env vars.

    Defaults to the mock gateway so tests and local dev never hit the real CRM unless
    explicitly configured otherwise.
    """

    mode = os.getenv("JARVIS_CRM_ADAPTER", "mock").strip().lower()

    if mode == "mock":
        return MockCrmGateway()

    if mode in ("ghl", "gohighlevel"):
        from services.api.app.services.crm_ghl import GoHighLevelGateway

        return GoHighLevelGateway.from_env()

    raise ValueError(f"Unknown JARVIS_CRM_ADAPTER={mode!r}. Expected mock or ghl.")
