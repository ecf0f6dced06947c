import uuid
from datetime import datetime
from enum import Enum
from typing import Optional

from sqlalchemy import Column, DateTime, UniqueConstraint
from sqlmodel import Field, SQLModel

from app.core.time import utc_now
from app.models.quiz import JSONType


class GamePhase(str, Enum):
    WAITING = "waiting"
    SHOWING_QUESTION = "showing_question"
    ACCEPTING_ANSWERS = "accepting_answers"
    SHOWING_RESULTS = "showing_results"
    FINISHED = "finished"


class GameState(SQLModel, table=True):
    __tablename__ = "game_state"

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    current_state: str = Field(default=GamePhase.WAITING.value)
    current_question_id: Optional[str] = None
    current_question_number: int = Field(default=0)
    answers_closed_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime(timezone=True), nullable=True))
    results_shown_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime(timezone=True), nullable=True))
    # Bumped on every write; transitions compare-and-swap against it
    version: int = Field(default=1)
    created_at: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime(timezone=True)))
    updated_at: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime(timezone=True)))


class AdminAction(SQLModel, table=True):
    __tablename__ = "admin_actions"

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    action_type: str
    previous_state: Optional[dict] = Field(default=None, sa_column=Column(JSONType, nullable=True))
    new_state: Optional[dict] = Field(default=None, sa_column=Column(JSONType, nullable=True))
    performed_at: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime(timezone=True), index=True))
    undone: bool = Field(default=False)


class Answer(SQLModel, table=True):
    __tablename__ = "answers"
    __table_args__ = (
        UniqueConstraint("participant_id", "question_id", name="uq_answers_participant_question"),
    )

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    participant_id: str = Field(foreign_key="participants.id", index=True)
    question_id: str = Field(foreign_key="questions.id", index=True)
    choice_id: Optional[str] = None
    choice_ids: Optional[list[str]] = Field(default=None, sa_column=Column(JSONType, nullable=True))
    answer_text: Optional[str] = None
    is_correct: bool = Field(default=False)
    points_earned: int = Field(default=0)
    answered_at: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime(timezone=True), index=True))
