import logging
from typing import List, Optional, Sequence

from fastapi import HTTPException
from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import selectinload
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core import messages
from app.core.config import settings
from app.core.time import utc_now
from app.models import Answer, Choice, Question, QuestionType
from app.schemas import ChoiceCreate, QuestionCreate, QuestionUpdate

logger = logging.getLogger("admin")


async def load_question(db: AsyncSession, question_id: str) -> Question:
    result = await db.execute(
        select(Question)
        .options(selectinload(Question.choices))
        .where(Question.id == question_id)
        .execution_options(populate_existing=True)
    )
    question = result.scalars().first()
    if not question:
        raise HTTPException(status_code=404, detail=messages.QUESTION_NOT_FOUND)
    return question


async def load_question_by_number(db: AsyncSession, number: int) -> Question:
    result = await db.execute(
        select(Question).options(selectinload(Question.choices)).where(Question.question_number == number)
    )
    question = result.scalars().first()
    if not question:
        raise HTTPException(status_code=404, detail=messages.QUESTION_NOT_FOUND)
    return question


async def list_questions(db: AsyncSession) -> List[Question]:
    result = await db.execute(
        select(Question).options(selectinload(Question.choices)).order_by(Question.question_number)
    )
    return list(result.scalars().unique().all())


def validate_choices(question_type: QuestionType, choices: Sequence[ChoiceCreate]):
    if not question_type.has_choices:
        return
    if not choices:
        raise HTTPException(status_code=400, detail=messages.QUESTION_NEEDS_CHOICES)
    if not any(c.is_correct for c in choices):
        raise HTTPException(status_code=400, detail=messages.QUESTION_NEEDS_CORRECT_CHOICE)


def build_choices(question_type: QuestionType, choices: Sequence[ChoiceCreate]) -> List[Choice]:
    if not question_type.has_choices:
        return []
    # Display order is always 1..n in submission order
    return [
        Choice(choice_text=c.text, is_correct=c.is_correct, points=c.points, display_order=idx)
        for idx, c in enumerate(choices, start=1)
    ]


def merge_choices(question: Question, question_type: QuestionType, choices: Sequence[ChoiceCreate]) -> List[Choice]:
    """Apply a submitted choice list to the question's current choices.

    Entries carrying the id of an existing choice update that row in place so
    stored answers keep referencing it. Entries without a known id become new
    choices, and existing choices left out of the list are dropped.
    """
    if not question_type.has_choices:
        return []
    existing = {c.id: c for c in question.choices}
    merged = []
    for idx, data in enumerate(choices, start=1):
        choice = existing.pop(data.id, None) if data.id else None
        if choice is None:
            choice = Choice(choice_text=data.text, is_correct=data.is_correct, points=data.points)
        else:
            choice.choice_text = data.text
            choice.is_correct = data.is_correct
            choice.points = data.points
        choice.display_order = idx
        merged.append(choice)
    return merged


async def _ensure_number_free(db: AsyncSession, number: int, exclude_id: Optional[str] = None):
    stmt = select(Question.id).where(Question.question_number == number)
    if exclude_id:
        stmt = stmt.where(Question.id != exclude_id)
    if (await db.execute(stmt)).first() is not None:
        raise HTTPException(status_code=400, detail=messages.QUESTION_NUMBER_TAKEN)


async def _commit_or_conflict(db: AsyncSession):
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise HTTPException(status_code=400, detail=messages.QUESTION_NUMBER_TAKEN)


async def create_question(db: AsyncSession, payload: QuestionCreate) -> Question:
    validate_choices(payload.question_type, payload.choices)
    await _ensure_number_free(db, payload.question_number)
    question = Question(
        question_number=payload.question_number,
        question_text=payload.question_text,
        question_type=payload.question_type.value,
        image_url=payload.image_url,
        time_limit_seconds=payload.time_limit_seconds,
        points=payload.points if payload.points is not None else settings.default_question_points,
        explanation_text=payload.explanation_text,
        explanation_image_url=payload.explanation_image_url,
    )
    question.choices = build_choices(payload.question_type, payload.choices)
    db.add(question)
    await _commit_or_conflict(db)
    logger.info(
        "Question created id=%s number=%s type=%s choices=%s",
        question.id,
        question.question_number,
        question.question_type,
        len(payload.choices),
    )
    return await load_question(db, question.id)


async def update_question(db: AsyncSession, question_id: str, payload: QuestionUpdate) -> Question:
    question = await load_question(db, question_id)
    if payload.question_number is not None and payload.question_number != question.question_number:
        await _ensure_number_free(db, payload.question_number, exclude_id=question.id)

    for field in (
        "question_number",
        "question_text",
        "image_url",
        "time_limit_seconds",
        "points",
        "explanation_text",
        "explanation_image_url",
    ):
        value = getattr(payload, field)
        if value is not None:
            setattr(question, field, value)

    question_type = payload.question_type or QuestionType(question.question_type)
    question.question_type = question_type.value
    if payload.choices is not None:
        validate_choices(question_type, payload.choices)
        # delete-orphan removes choices left out of the list in the same flush
        question.choices = merge_choices(question, question_type, payload.choices)
    elif not question_type.has_choices:
        question.choices = []
    elif payload.question_type is not None and not any(c.is_correct for c in question.choices):
        raise HTTPException(status_code=400, detail=messages.QUESTION_NEEDS_CORRECT_CHOICE)
    question.updated_at = utc_now()

    await _commit_or_conflict(db)
    logger.info("Question updated id=%s number=%s", question_id, payload.question_number)
    return await load_question(db, question_id)


async def delete_question(db: AsyncSession, question_id: str) -> None:
    question = await load_question(db, question_id)
    await db.execute(delete(Answer).where(Answer.question_id == question_id))
    await db.delete(question)
    await db.commit()
    logger.info("Question deleted id=%s", question_id)
