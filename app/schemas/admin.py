from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from app.models import GroupType, QuestionType


class ChoiceCreate(BaseModel):
    # Set when editing an existing choice; answers keep pointing at it
    id: Optional[str] = None
    text: str
    is_correct: bool = False
    points: int = 0


class ChoiceRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    question_id: str
    choice_text: str
    is_correct: bool
    points: int
    display_order: int


class QuestionCreate(BaseModel):
    question_number: int = Field(ge=1)
    question_text: str
    question_type: QuestionType = QuestionType.SINGLE_CHOICE
    image_url: Optional[str] = None
    time_limit_seconds: int = 30
    points: Optional[int] = None
    explanation_text: Optional[str] = None
    explanation_image_url: Optional[str] = None
    choices: List[ChoiceCreate] = Field(default_factory=list)


class QuestionUpdate(BaseModel):
    question_number: Optional[int] = Field(default=None, ge=1)
    question_text: Optional[str] = None
    question_type: Optional[QuestionType] = None
    image_url: Optional[str] = None
    time_limit_seconds: Optional[int] = None
    points: Optional[int] = None
    explanation_text: Optional[str] = None
    explanation_image_url: Optional[str] = None
    # When present this becomes the full choice set, matched to existing choices by id
    choices: Optional[List[ChoiceCreate]] = None


class QuestionRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    question_number: int
    question_text: str
    question_type: QuestionType
    image_url: Optional[str]
    time_limit_seconds: int
    points: int
    explanation_text: Optional[str]
    explanation_image_url: Optional[str]
    choices: List[ChoiceRead] = Field(default_factory=list)


class ParticipantCreate(BaseModel):
    name: Optional[str] = None
    group_type: Optional[GroupType] = None
    seat_number: Optional[str] = None
    message: Optional[str] = None
    message_image_url: Optional[str] = None


class ParticipantUpdate(BaseModel):
    id: Optional[str] = None
    name: Optional[str] = None
    group_type: Optional[GroupType] = None
    seat_number: Optional[str] = None
    message: Optional[str] = None
    message_image_url: Optional[str] = None


class ParticipantGenerate(BaseModel):
    count: int = Field(ge=1, le=500)
    group_type: GroupType = GroupType.OTHER
    name_prefix: str = "Guest"


class ParticipantRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    code: str
    name: str
    nickname: Optional[str]
    group_type: GroupType
    seat_number: Optional[str]
    message: Optional[str]
    message_image_url: Optional[str]
    created_at: datetime


class ParticipantQRCode(BaseModel):
    id: str
    name: str
    code: str
    qr_code_image: str
    seat_number: Optional[str]
    group_type: GroupType


class DataStats(BaseModel):
    participants: int
    questions: int
    answers: int
    sessions: int
