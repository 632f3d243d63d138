from __future__ import annotations

import logging
import os

from services.api.app.db.database import database_url, get_engine
from services.api.app.db.models import Base
from sqlalchemy import make_url

logger = logging.getLogger(__name__)


def init_db() -> None:
    """Create the history, meeting and chat log tables unless auto-create is disabled."""

    flag = os.getenv("JARVIS_DB_AUTO_CREATE", "true").strip().lower()
    if flag not in {"1", "true", "yes", "y"}:
        logger.info("JARVIS_DB_AUTO_CREATE=%s; skipping table creation", flag)
        return

    Base.metadata.create_all(bind=get_engine())
    url = make_url(database_url()).render_as_string(hide_password=True)
    logger.info("Database tables ready at %s", url)
