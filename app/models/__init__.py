from app.models.participant import GroupType, Participant, ParticipantSession
from app.models.quiz import Choice, Question, QuestionType
from app.models.state import AdminAction, Answer, GamePhase, GameState

__all__ = [
    "AdminAction",
    "Answer",
    "Choice",
    "GamePhase",
    "GameState",
    "GroupType",
    "Participant",
    "ParticipantSession",
    "Question",
    "QuestionType",
]
