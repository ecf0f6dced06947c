from typing import Optional

from fastapi import APIRouter, Depends
from sqlmodel.ext.asyncio.session import AsyncSession

from app.dependencies import get_db_session, require_admin
from app.schemas import AdminActionRead, GameStateRead, UndoRequest
from app.services.game_state import game

router = APIRouter(prefix="/admin-actions", tags=["admin-actions"], dependencies=[Depends(require_admin)])


@router.get("/last", response_model=Optional[AdminActionRead])
async def last_action(db: AsyncSession = Depends(get_db_session)):
    return await game.last_action(db)


@router.post("/undo")
async def undo_action(payload: UndoRequest, db: AsyncSession = Depends(get_db_session)):
    state = await game.undo(db, payload.action_id)
    return {"success": True, "state": GameStateRead.model_validate(state)}
