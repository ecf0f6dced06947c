from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from app.models import GamePhase, GroupType, QuestionType
from app.schemas.admin import ChoiceRead


class GameStateRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    current_state: GamePhase
    current_question_id: Optional[str] = None
    current_question_number: int = 0
    answers_closed_at: Optional[datetime] = None
    results_shown_at: Optional[datetime] = None
    version: int = 1
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class GameStateSnapshot(BaseModel):
    """Fields captured before an admin transition and restored by undo."""

    current_state: GamePhase
    current_question_id: Optional[str] = None
    current_question_number: int = 0
    answers_closed_at: Optional[datetime] = None
    results_shown_at: Optional[datetime] = None


class GameStateTransition(GameStateRead):
    admin_action_id: Optional[str] = None


class TransitionRequest(BaseModel):
    current_state: GamePhase
    current_question_number: Optional[int] = None
    current_question_id: Optional[str] = None
    expected_version: Optional[int] = None


class AdminActionRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    action_type: str
    previous_state: Optional[dict]
    new_state: Optional[dict]
    performed_at: datetime
    undone: bool


class UndoRequest(BaseModel):
    action_id: Optional[str] = None


class AnswerCreate(BaseModel):
    question_id: Optional[str] = None
    choice_id: Optional[str] = None
    choice_ids: Optional[List[str]] = None
    answer_text: Optional[str] = None


class AnswerResult(BaseModel):
    success: bool = True
    is_correct: bool
    points_earned: int


class AnswerRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    participant_id: str
    question_id: str
    choice_id: Optional[str]
    choice_ids: Optional[List[str]]
    answer_text: Optional[str]
    is_correct: bool
    points_earned: int
    answered_at: datetime


class LatestAnswerDetail(BaseModel):
    is_correct: bool
    points_earned: int
    selected_choice_id: Optional[str]
    selected_choice_ids: List[str] = Field(default_factory=list)
    answer_text: Optional[str]
    answered_at: datetime


class LatestAnswerQuestion(BaseModel):
    question_number: int
    question_text: str
    question_type: QuestionType
    image_url: Optional[str]
    explanation_text: Optional[str]
    explanation_image_url: Optional[str]


class LatestAnswer(BaseModel):
    answer: LatestAnswerDetail
    question: LatestAnswerQuestion
    choices: List[ChoiceRead]
    correct_choice_id: Optional[str]
    correct_choice_ids: List[str]


class CountRead(BaseModel):
    count: int


class LeaderboardEntry(BaseModel):
    user_id: str
    name: str
    nickname: Optional[str]
    group_type: GroupType
    total_score: int
    correct_count: int
    rank: int


class RankingRead(BaseModel):
    rank: int
    total_score: int


class ChoiceStat(BaseModel):
    choice_id: str
    choice_text: str
    count: int
    percentage: float


class AnswerStats(BaseModel):
    stats: List[ChoiceStat]
    total: int
