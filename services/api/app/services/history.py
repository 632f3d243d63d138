from __future__ import annotations

from uuid import uuid4

from packages.shared.schemas.history import CommandSourceV1, HistoryEntryV1
from packages.shared.schemas.outcome import OutcomeStatusV1, OutcomeV1
from pydantic import BaseModel
from services.api.app.db.models import CommandHistory
from sqlalchemy.orm import Session


def record_outcome(
    db: Session,
    *,
    source: CommandSourceV1,
    command_text: str,
    outcome: OutcomeV1,
    command: BaseModel | None = None,
    meeting_id: str | None = None,
) -> CommandHistory:
    """Append one history row for a dispatch outcome and commit it."""

    row = CommandHistory(
        id=uuid4().hex,
        source=source.value,
        command_text=command_text,
        action=outcome.action,
        command_json=command.model_dump(mode="json") if command is not None else {},
        status=outcome.status.value,
        result=outcome.message,
        meeting_id=meeting_id,
    )
    db.add(row)
    db.commit()
    return row


def list_history(
    db: Session, *, limit: int = 50, source: str | None = None
) -> list[CommandHistory]:
    query = db.query(CommandHistory)
    if source:
        query = query.filter(CommandHistory.source == source)

    return query.order_by(CommandHistory.created_at.desc()).limit(max(1, min(limit, 200))).all()


def to_entry(row: CommandHistory) -> HistoryEntryV1:
    return HistoryEntryV1(
        id=row.id,
        source=CommandSourceV1(row.source),
        command_text=row.command_text,
        action=row.action,
        status=OutcomeStatusV1(row.status),
        result=row.result,
        created_at=row.created_at.isoformat(),
    )
