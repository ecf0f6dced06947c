from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import func, select
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core import messages
from app.dependencies import get_db_session, require_admin
from app.models import Answer, Participant, ParticipantSession, Question
from app.schemas import DataStats
from app.services.game_state import game

router = APIRouter(prefix="/data-management", tags=["data-management"], dependencies=[Depends(require_admin)])


async def _count(db: AsyncSession, model) -> int:
    result = await db.execute(select(func.count()).select_from(model))
    return result.scalar_one()


@router.get("", response_model=DataStats)
async def data_stats(db: AsyncSession = Depends(get_db_session)):
    return DataStats(
        participants=await _count(db, Participant),
        questions=await _count(db, Question),
        answers=await _count(db, Answer),
        sessions=await _count(db, ParticipantSession),
    )


@router.delete("")
async def reset_data(confirm: bool = False, db: AsyncSession = Depends(get_db_session)):
    if not confirm:
        raise HTTPException(status_code=400, detail=messages.CONFIRM_REQUIRED)
    await game.reset(db)
    return {"success": True, "message": messages.RESET_DONE}
