from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from packages.shared.schemas.history import CommandSourceV1, HistoryEntryV1
from services.api.app.db.database import get_db
from services.api.app.db.models import CommandHistory
from services.api.app.services.history import list_history, to_entry
from sqlalchemy.orm import Session

router = APIRouter()


@router.get("/v1/history", response_model=list[HistoryEntryV1])
def get_history(
    limit: int = 50,
    source: CommandSourceV1 | None = None,
    db: Session = Depends(get_db),
) -> list[HistoryEntryV1]:
    rows = list_history(db, limit=limit, source=source.value if source else None)
    return [to_entry(r) for r in rows]


@router.get("/v1/history/{entry_id}", response_model=HistoryEntryV1)
def get_history_entry(entry_id: str, db: Session = Depends(get_db)) -> HistoryEntryV1:
    row = db.get(CommandHistory, entry_id)
    if row is None:
        raise HTTPException(status_code=404, detail="History entry not found")
    return to_entry(row)
