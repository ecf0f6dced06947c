import uuid
from datetime import datetime
from enum import Enum
from typing import List, Optional

from sqlalchemy import JSON, Column, DateTime, Integer
from sqlalchemy.dialects.postgresql import JSONB
from sqlmodel import Field, Relationship, SQLModel

from app.core.time import utc_now

# JSONB on PostgreSQL, plain JSON elsewhere (SQLite in tests)
JSONType = JSON().with_variant(JSONB(), "postgresql")


class QuestionType(str, Enum):
    SINGLE_CHOICE = "single_choice"
    MULTI_SELECT = "multi_select"
    FREE_TEXT = "free_text"

    @property
    def has_choices(self) -> bool:
        return self is not QuestionType.FREE_TEXT


class Question(SQLModel, table=True):
    __tablename__ = "questions"

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    question_number: int = Field(sa_column=Column(Integer, unique=True, nullable=False, index=True))
    question_text: str
    question_type: str = Field(default=QuestionType.SINGLE_CHOICE.value)
    image_url: Optional[str] = None
    time_limit_seconds: int = Field(default=30, ge=5)
    points: int = Field(default=10)
    explanation_text: Optional[str] = None
    explanation_image_url: Optional[str] = None
    created_at: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime(timezone=True)))
    updated_at: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime(timezone=True)))

    choices: List["Choice"] = Relationship(
        back_populates="question",
        sa_relationship_kwargs={
            "order_by": "Choice.display_order",
            "cascade": "all, delete-orphan",
        },
    )


class Choice(SQLModel, table=True):
    __tablename__ = "choices"

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    question_id: str = Field(foreign_key="questions.id", index=True)
    choice_text: str
    is_correct: bool = Field(default=False)
    # Signed: negative values penalise wrong picks in multi-select questions
    points: int = Field(default=0)
    display_order: int = Field(sa_column=Column(Integer, nullable=False), default=1)

    question: Optional[Question] = Relationship(back_populates="choices")
