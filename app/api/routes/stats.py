from typing import List

from fastapi import APIRouter, Depends, Query
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.config import settings
from app.dependencies import get_current_participant, get_db_session
from app.models import Participant
from app.schemas import AnswerStats, CountRead, LeaderboardEntry, RankingRead
from app.services import leaderboard as board
from app.services.questions import load_question

router = APIRouter(prefix="/stats", tags=["stats"])


@router.get("/leaderboard", response_model=List[LeaderboardEntry])
async def get_leaderboard(limit: int = Query(default=10, ge=0), db: AsyncSession = Depends(get_db_session)):
    return await board.leaderboard(db, limit)


@router.get("/ranking", response_model=RankingRead)
async def get_ranking(
    participant: Participant = Depends(get_current_participant),
    db: AsyncSession = Depends(get_db_session),
):
    return await board.participant_rank(db, participant.id)


@router.get("/answers", response_model=AnswerStats)
async def get_answer_stats(question_id: str, db: AsyncSession = Depends(get_db_session)):
    question = await load_question(db, question_id)
    return await board.answer_breakdown(db, question)


@router.get("/participants", response_model=CountRead)
async def get_active_participants(db: AsyncSession = Depends(get_db_session)):
    count = await board.active_participant_count(db, settings.active_window_minutes)
    return CountRead(count=count)
