import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core import messages
from app.core.time import utc_now
from app.models import AdminAction, Answer, GamePhase, GameState, Participant, ParticipantSession, Question
from app.schemas import GameStateRead, GameStateSnapshot, TransitionRequest
from app.services.realtime import ANSWERS, GAME_STATE, USER_SESSIONS, ChangeEvent, ChangeFeed, feed


def serialize_state(state: GameState) -> dict:
    return GameStateRead.model_validate(state).model_dump(mode="json")


def snapshot_of(state: GameState) -> dict:
    return GameStateSnapshot(
        current_state=state.current_state,
        current_question_id=state.current_question_id,
        current_question_number=state.current_question_number,
        answers_closed_at=state.answers_closed_at,
        results_shown_at=state.results_shown_at,
    ).model_dump(mode="json")


class GameStateController:
    """Owns every write to the singleton game state row."""

    def __init__(self, change_feed: ChangeFeed):
        self.logger = logging.getLogger("game")
        self.feed = change_feed

    async def current(self, db: AsyncSession) -> GameState:
        result = await db.execute(select(GameState).order_by(GameState.created_at.desc()).limit(1))
        state = result.scalars().first()
        if state:
            return state
        state = GameState(current_state=GamePhase.WAITING.value, current_question_number=0)
        db.add(state)
        await db.commit()
        await db.refresh(state)
        self.logger.info("Initialised game state id=%s", state.id)
        return state

    async def transition(self, db: AsyncSession, request: TransitionRequest) -> tuple[GameState, Optional[str]]:
        state = await self.current(db)
        state_id, version = state.id, state.version
        if request.expected_version is not None and request.expected_version != version:
            raise HTTPException(status_code=409, detail=messages.STATE_CONFLICT)

        phase = GamePhase(request.current_state)
        now = utc_now()
        values: dict = {"current_state": phase.value, "updated_at": now, "version": version + 1}

        question: Optional[Question] = None
        if request.current_question_number is not None:
            question = await self._question_by_number(db, request.current_question_number)
        elif request.current_question_id is not None:
            question = await db.get(Question, request.current_question_id)
        if (request.current_question_number is not None or request.current_question_id is not None) and not question:
            raise HTTPException(status_code=404, detail=messages.QUESTION_NOT_FOUND)
        if question:
            values["current_question_id"] = question.id
            values["current_question_number"] = question.question_number

        if phase is GamePhase.ACCEPTING_ANSWERS:
            values["answers_closed_at"] = None
            values["results_shown_at"] = None
        elif phase is GamePhase.SHOWING_RESULTS:
            values["answers_closed_at"] = now
            values["results_shown_at"] = now

        action_id = await self._log_action(
            db,
            action_type=f"change_state_to_{phase.value}",
            previous_state=snapshot_of(state),
            new_state=request.model_dump(mode="json", exclude_none=True),
        )

        result = await db.execute(
            update(GameState)
            .where(GameState.id == state_id, GameState.version == version)
            .values(**values)
        )
        if result.rowcount == 0:
            await db.rollback()
            self.logger.warning("Transition to %s lost a race on version=%s", phase.value, version)
            raise HTTPException(status_code=409, detail=messages.STATE_CONFLICT)
        await db.commit()
        await db.refresh(state)
        self.logger.info(
            "Transition state=%s question=%s number=%s version=%s action=%s",
            state.current_state,
            state.current_question_id,
            state.current_question_number,
            state.version,
            action_id,
        )
        await self._publish_state(state)
        return state, action_id

    async def start(self, db: AsyncSession) -> tuple[GameState, Optional[str]]:
        first = await db.execute(select(func.min(Question.question_number)))
        number = first.scalar_one_or_none()
        if number is None:
            raise HTTPException(status_code=400, detail=messages.NO_QUESTIONS)
        return await self.transition(
            db,
            TransitionRequest(current_state=GamePhase.ACCEPTING_ANSWERS, current_question_number=number),
        )

    async def reveal(self, db: AsyncSession) -> tuple[GameState, Optional[str]]:
        state = await self.current(db)
        if state.current_state not in (GamePhase.SHOWING_QUESTION.value, GamePhase.ACCEPTING_ANSWERS.value):
            raise HTTPException(status_code=400, detail=messages.CANNOT_REVEAL)
        return await self.transition(
            db,
            TransitionRequest(current_state=GamePhase.SHOWING_RESULTS, expected_version=state.version),
        )

    async def advance(self, db: AsyncSession) -> tuple[GameState, Optional[str]]:
        """Open the question at ordinal + 1, or finish when there is none."""
        state = await self.current(db)
        next_number = (state.current_question_number or 0) + 1
        upcoming = await self._question_by_number(db, next_number)
        if upcoming is None:
            return await self.transition(
                db,
                TransitionRequest(current_state=GamePhase.FINISHED, expected_version=state.version),
            )
        return await self.transition(
            db,
            TransitionRequest(
                current_state=GamePhase.ACCEPTING_ANSWERS,
                current_question_number=next_number,
                expected_version=state.version,
            ),
        )

    async def last_action(self, db: AsyncSession) -> Optional[AdminAction]:
        result = await db.execute(
            select(AdminAction)
            .where(AdminAction.undone == False)  # noqa: E712
            .order_by(AdminAction.performed_at.desc())
            .limit(1)
        )
        return result.scalars().first()

    async def undo(self, db: AsyncSession, action_id: Optional[str]) -> GameState:
        if not action_id:
            raise HTTPException(status_code=400, detail=messages.ACTION_ID_REQUIRED)
        action = await db.get(AdminAction, action_id)
        if not action:
            raise HTTPException(status_code=404, detail=messages.ACTION_NOT_FOUND)
        if action.undone:
            raise HTTPException(status_code=400, detail=messages.ACTION_ALREADY_UNDONE)

        state = await self.current(db)
        if action.previous_state:
            snapshot = GameStateSnapshot.model_validate(action.previous_state)
            state.current_state = snapshot.current_state.value
            state.current_question_id = snapshot.current_question_id
            state.current_question_number = snapshot.current_question_number
            state.answers_closed_at = snapshot.answers_closed_at
            state.results_shown_at = snapshot.results_shown_at
            state.version = state.version + 1
            state.updated_at = utc_now()
        action.undone = True
        await db.commit()
        await db.refresh(state)
        self.logger.info(
            "Undo action=%s type=%s restored state=%s number=%s",
            action.id,
            action.action_type,
            state.current_state,
            state.current_question_number,
        )
        await self._publish_state(state)
        return state

    async def reset(self, db: AsyncSession) -> None:
        """Wipe answers, sessions and nicknames and send the game back to waiting.

        Every step shares one transaction; a failure rolls all of them back.
        """
        try:
            await db.execute(delete(Answer))
            await db.execute(delete(ParticipantSession))
            await db.execute(update(Participant).values(nickname=None, updated_at=utc_now()))
            await db.execute(
                update(GameState).values(
                    current_state=GamePhase.WAITING.value,
                    current_question_id=None,
                    current_question_number=0,
                    answers_closed_at=None,
                    results_shown_at=None,
                    version=GameState.version + 1,
                    updated_at=utc_now(),
                )
            )
            await db.commit()
        except SQLAlchemyError:
            await db.rollback()
            self.logger.exception("Data reset failed, rolled back")
            raise
        self.logger.info("Answers, sessions and nicknames reset; game state back to waiting")
        state = await self.current(db)
        await db.refresh(state)
        await self._publish_state(state)
        await self.feed.publish(ChangeEvent(ANSWERS, "DELETE"))
        await self.feed.publish(ChangeEvent(USER_SESSIONS, "DELETE"))

    async def _question_by_number(self, db: AsyncSession, number: int) -> Optional[Question]:
        result = await db.execute(select(Question).where(Question.question_number == number))
        return result.scalars().first()

    async def _log_action(self, db: AsyncSession, action_type: str, previous_state: dict, new_state: dict) -> Optional[str]:
        """Best effort: a failed audit write never blocks the transition."""
        action = AdminAction(action_type=action_type, previous_state=previous_state, new_state=new_state)
        db.add(action)
        try:
            await db.flush()
        except SQLAlchemyError:
            self.logger.exception("Admin action logging failed type=%s", action_type)
            await db.rollback()
            return None
        return action.id

    async def _publish_state(self, state: GameState):
        await self.feed.publish(ChangeEvent(GAME_STATE, "UPDATE", serialize_state(state)))


game = GameStateController(feed)
