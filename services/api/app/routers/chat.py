from __future__ import annotations

import asyncio
import logging
from uuid import uuid4

from fastapi import APIRouter, Depends, HTTPException
from packages.shared.schemas.history import CommandSourceV1
from services.api.app.commands.dispatcher import DispatchContext
from services.api.app.commands.parser import parse_command
from services.api.app.db.database import get_db
from services.api.app.db.models import ChatLog
from services.api.app.llm.factory import get_llm_responder
from services.api.app.models.command import ChatRequest, ChatResponse
from services.api.app.routers.command import run_command
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/v1/chat", response_model=ChatResponse)
async def chat(payload: ChatRequest, db: Session = Depends(get_db)) -> ChatResponse:
    try:
        responder = get_llm_responder()
    except ValueError as e:
        raise HTTPException(status_code=500, detail=str(e)) from e

    try:
        reply = await asyncio.to_thread(responder.reply, message=payload.message)
    except RuntimeError as e:
        logger.error("Chat responder failed: %s", e)
        raise HTTPException(status_code=502, detail="Error processing your request") from e

    db.add(ChatLog(id=uuid4().hex, prompt=payload.message, response=reply))
    db.commit()

    # Commands are read from the assistant's reply, not from the user's message.
    command = parse_command(reply)
    if command is None:
        return ChatResponse(response=reply)

    result = await run_command(
        db,
        command,
        source=CommandSourceV1.CHAT,
        command_text=reply,
        context=DispatchContext.FULL,
    )
    return ChatResponse(
        response=reply,
        command=result.command,
        outcome=result.outcome,
        notification=result.notification,
        history_id=result.history_id,
    )
