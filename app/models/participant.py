import uuid
from datetime import datetime
from enum import Enum
from typing import Optional

from sqlalchemy import Column, DateTime, String
from sqlmodel import Field, SQLModel

from app.core.time import utc_now


class GroupType(str, Enum):
    BRIDE = "bride"
    GROOM = "groom"
    OTHER = "other"


class Participant(SQLModel, table=True):
    __tablename__ = "participants"

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    code: str = Field(sa_column=Column(String(8), unique=True, nullable=False, index=True))
    name: str
    nickname: Optional[str] = Field(default=None, sa_column=Column(String(20), unique=True, nullable=True))
    group_type: str = Field(default=GroupType.OTHER.value)
    seat_number: Optional[str] = None
    message: Optional[str] = None
    message_image_url: Optional[str] = None
    created_at: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime(timezone=True)))
    updated_at: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime(timezone=True)))


class ParticipantSession(SQLModel, table=True):
    __tablename__ = "user_sessions"

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    participant_id: str = Field(foreign_key="participants.id", index=True)
    session_token: str = Field(sa_column=Column(String(128), unique=True, nullable=False, index=True))
    last_active: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime(timezone=True), index=True))
    created_at: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime(timezone=True)))
