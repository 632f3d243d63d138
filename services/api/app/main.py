"""Jarvis API service entrypoint."""

import logging
import os

from fastapi import FastAPI

from services.api.app.db.init_db import init_db
from services.api.app.routers.chat import router as chat_router
from services.api.app.routers.command import router as command_router
from services.api.app.routers.history import router as history_router
from services.api.app.routers.meetings import router as meetings_router

logging.basicConfig(
    level=os.getenv("JARVIS_LOG_LEVEL", "INFO").strip().upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

app = FastAPI(title="Jarvis API")

app.include_router(command_router)
app.include_router(chat_router)
app.include_router(meetings_router)
app.include_router(history_router)


@app.on_event("startup")
def _startup() -> None:
    init_db()


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}
