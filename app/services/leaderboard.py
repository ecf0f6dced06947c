import logging
from dataclasses import dataclass
from datetime import timedelta
from typing import Dict, Iterable, List, Optional, Sequence

from sqlalchemy import distinct, func, select
from sqlalchemy.orm import selectinload
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.time import utc_now
from app.models import Answer, Participant, ParticipantSession, Question, QuestionType
from app.services.scoring import effective_score

logger = logging.getLogger("game")


@dataclass
class ParticipantTotal:
    participant: Participant
    total_score: int = 0
    correct_count: int = 0
    answer_count: int = 0


def tally(
    participants: Sequence[Participant],
    answers: Iterable[Answer],
    questions: Dict[str, Question],
) -> List[ParticipantTotal]:
    """Sum every participant's answers, re-scoring multi-select ones."""
    totals = {p.id: ParticipantTotal(participant=p) for p in participants}
    for answer in answers:
        entry = totals.get(answer.participant_id)
        question = questions.get(answer.question_id)
        if entry is None or question is None:
            continue
        score = effective_score(question, question.choices, answer)
        entry.total_score += score.points_earned
        entry.answer_count += 1
        if score.is_correct:
            entry.correct_count += 1
    ordered = list(totals.values())
    # Stable sort keeps creation order among ties
    ordered.sort(key=lambda t: t.total_score, reverse=True)
    return ordered


def competition_ranks(scores: Sequence[int]) -> List[int]:
    """Standard competition ("1224") ranks for scores sorted descending."""
    ranks: List[int] = []
    previous: Optional[int] = None
    current_rank = 0
    for position, score in enumerate(scores, start=1):
        if score != previous:
            current_rank = position
            previous = score
        ranks.append(current_rank)
    return ranks


def rank_of(participant_id: str, ordered: Sequence[ParticipantTotal]) -> tuple[int, int]:
    """Return ``(rank, total_score)`` for one participant."""
    own = next((t for t in ordered if t.participant.id == participant_id), None)
    own_score = own.total_score if own else 0
    if own_score <= 0:
        # Unscored participants sit just below everyone who has points
        return sum(1 for t in ordered if t.total_score > 0) + 1, 0
    ranks = competition_ranks([t.total_score for t in ordered])
    for entry, rank in zip(ordered, ranks):
        if entry.participant.id == participant_id:
            return rank, own_score
    return len(ordered) + 1, own_score


async def load_totals(db: AsyncSession) -> List[ParticipantTotal]:
    participants = (
        await db.execute(select(Participant).order_by(Participant.created_at))
    ).scalars().all()
    answers = (await db.execute(select(Answer))).scalars().all()
    questions = (
        await db.execute(select(Question).options(selectinload(Question.choices)))
    ).scalars().unique().all()
    return tally(participants, answers, {q.id: q for q in questions})


async def leaderboard(db: AsyncSession, limit: int = 10) -> List[dict]:
    ordered = await load_totals(db)
    ranks = competition_ranks([t.total_score for t in ordered])
    rows = [
        {
            "user_id": t.participant.id,
            "name": t.participant.name,
            "nickname": t.participant.nickname,
            "group_type": t.participant.group_type,
            "total_score": t.total_score,
            "correct_count": t.correct_count,
            "rank": rank,
        }
        for t, rank in zip(ordered, ranks)
    ]
    return rows[: max(0, limit)]


async def participant_rank(db: AsyncSession, participant_id: str) -> dict:
    ordered = await load_totals(db)
    rank, total = rank_of(participant_id, ordered)
    logger.debug("Rank participant=%s rank=%s score=%s", participant_id, rank, total)
    return {"rank": rank, "total_score": total}


async def answer_breakdown(db: AsyncSession, question: Question) -> dict:
    """Per-choice pick counts; multi-select answers count once per picked choice."""
    answers = (
        await db.execute(select(Answer).where(Answer.question_id == question.id))
    ).scalars().all()
    total = len(answers)
    counts = {c.id: 0 for c in question.choices}
    for answer in answers:
        picked = answer.choice_ids if question.question_type == QuestionType.MULTI_SELECT.value else [answer.choice_id]
        for choice_id in picked or []:
            if choice_id in counts:
                counts[choice_id] += 1
    stats = [
        {
            "choice_id": c.id,
            "choice_text": c.choice_text,
            "count": counts[c.id],
            "percentage": (counts[c.id] / total) * 100 if total else 0.0,
        }
        for c in question.choices
    ]
    return {"stats": stats, "total": total}


async def active_participant_count(db: AsyncSession, window_minutes: int) -> int:
    cutoff = utc_now() - timedelta(minutes=window_minutes)
    result = await db.execute(
        select(func.count(distinct(ParticipantSession.participant_id))).where(
            ParticipantSession.last_active >= cutoff
        )
    )
    return result.scalar_one() or 0
