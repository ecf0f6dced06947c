import logging
from typing import Optional

from fastapi import APIRouter, Cookie, Depends, HTTPException
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core import messages
from app.dependencies import get_current_participant, get_db_session
from app.models import Answer, Participant, QuestionType
from app.schemas import (
    AnswerCreate,
    AnswerRead,
    AnswerResult,
    ChoiceRead,
    CountRead,
    LatestAnswer,
    LatestAnswerDetail,
    LatestAnswerQuestion,
)
from app.services.auth import resolve_participant
from app.services.questions import load_question
from app.services.realtime import ANSWERS, ChangeEvent, feed
from app.services.scoring import effective_score, normalize_selection, score_submission

router = APIRouter(prefix="/answers", tags=["answers"])
logger = logging.getLogger("game")


@router.post("", response_model=AnswerResult)
async def submit_answer(
    payload: AnswerCreate,
    participant: Participant = Depends(get_current_participant),
    db: AsyncSession = Depends(get_db_session),
):
    if not payload.question_id:
        raise HTTPException(status_code=400, detail=messages.QUESTION_ID_REQUIRED)
    question = await load_question(db, payload.question_id)
    choice_id, choice_ids = normalize_selection(question, question.choices, payload.choice_id, payload.choice_ids)
    score = score_submission(question, question.choices, choice_id, choice_ids)
    participant_id, question_id = participant.id, question.id

    db.add(
        Answer(
            participant_id=participant_id,
            question_id=question_id,
            choice_id=choice_id,
            choice_ids=choice_ids,
            answer_text=payload.answer_text,
            is_correct=score.is_correct,
            points_earned=score.points_earned,
        )
    )
    try:
        await db.commit()
    except IntegrityError:
        # (participant, question) is unique; the first answer stands
        await db.rollback()
        logger.info("Duplicate answer rejected participant=%s question=%s", participant_id, question_id)
        raise HTTPException(status_code=400, detail=messages.ALREADY_ANSWERED)

    logger.info(
        "Answer recorded participant=%s question=%s type=%s is_correct=%s points=%s",
        participant_id,
        question_id,
        question.question_type,
        score.is_correct,
        score.points_earned,
    )
    await feed.publish(
        ChangeEvent(ANSWERS, "INSERT", {"question_id": question_id, "participant_id": participant_id})
    )
    return AnswerResult(is_correct=score.is_correct, points_earned=score.points_earned)


@router.get("")
async def list_answers(
    question_id: Optional[str] = None,
    count: bool = False,
    participant_session: Optional[str] = Cookie(default=None),
    db: AsyncSession = Depends(get_db_session),
):
    if count and question_id:
        result = await db.execute(
            select(func.count()).select_from(Answer).where(Answer.question_id == question_id)
        )
        return CountRead(count=result.scalar_one())

    participant = await resolve_participant(db, participant_session)
    if not participant:
        raise HTTPException(status_code=401, detail=messages.LOGIN_REQUIRED)

    if question_id:
        result = await db.execute(
            select(Answer).where(Answer.participant_id == participant.id, Answer.question_id == question_id)
        )
        answer = result.scalars().first()
        return AnswerRead.model_validate(answer) if answer else None

    result = await db.execute(
        select(Answer).where(Answer.participant_id == participant.id).order_by(Answer.answered_at.desc())
    )
    return [AnswerRead.model_validate(a) for a in result.scalars().all()]


@router.get("/latest", response_model=Optional[LatestAnswer])
async def latest_answer(
    participant: Participant = Depends(get_current_participant),
    db: AsyncSession = Depends(get_db_session),
):
    result = await db.execute(
        select(Answer)
        .where(Answer.participant_id == participant.id)
        .order_by(Answer.answered_at.desc())
        .limit(1)
    )
    answer = result.scalars().first()
    if not answer:
        return None

    question = await load_question(db, answer.question_id)
    score = effective_score(question, question.choices, answer)
    correct_ids = [c.id for c in question.choices if c.is_correct]
    return LatestAnswer(
        answer=LatestAnswerDetail(
            is_correct=score.is_correct,
            points_earned=score.points_earned,
            selected_choice_id=answer.choice_id,
            selected_choice_ids=answer.choice_ids or ([answer.choice_id] if answer.choice_id else []),
            answer_text=answer.answer_text,
            answered_at=answer.answered_at,
        ),
        question=LatestAnswerQuestion(
            question_number=question.question_number,
            question_text=question.question_text,
            question_type=QuestionType(question.question_type),
            image_url=question.image_url,
            explanation_text=question.explanation_text,
            explanation_image_url=question.explanation_image_url,
        ),
        choices=[ChoiceRead.model_validate(c) for c in question.choices],
        correct_choice_id=correct_ids[0] if correct_ids else None,
        correct_choice_ids=correct_ids,
    )
