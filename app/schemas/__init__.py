from app.schemas.admin import (
    ChoiceCreate,
    ChoiceRead,
    DataStats,
    ParticipantCreate,
    ParticipantGenerate,
    ParticipantQRCode,
    ParticipantRead,
    ParticipantUpdate,
    QuestionCreate,
    QuestionRead,
    QuestionUpdate,
)
from app.schemas.auth import (
    AdminLogin,
    NicknameUpdate,
    ParticipantLogin,
    ParticipantLoginResult,
    UserRead,
)
from app.schemas.game import (
    AdminActionRead,
    AnswerCreate,
    AnswerRead,
    AnswerResult,
    AnswerStats,
    ChoiceStat,
    CountRead,
    GameStateRead,
    GameStateSnapshot,
    GameStateTransition,
    LatestAnswer,
    LatestAnswerDetail,
    LatestAnswerQuestion,
    LeaderboardEntry,
    RankingRead,
    TransitionRequest,
    UndoRequest,
)

__all__ = [
    "ChoiceCreate",
    "ChoiceRead",
    "DataStats",
    "ParticipantCreate",
    "ParticipantGenerate",
    "ParticipantQRCode",
    "ParticipantRead",
    "ParticipantUpdate",
    "QuestionCreate",
    "QuestionRead",
    "QuestionUpdate",
    "AdminLogin",
    "NicknameUpdate",
    "ParticipantLogin",
    "ParticipantLoginResult",
    "UserRead",
    "AdminActionRead",
    "AnswerCreate",
    "AnswerRead",
    "AnswerResult",
    "AnswerStats",
    "ChoiceStat",
    "CountRead",
    "GameStateRead",
    "GameStateSnapshot",
    "GameStateTransition",
    "LatestAnswer",
    "LatestAnswerDetail",
    "LatestAnswerQuestion",
    "LeaderboardEntry",
    "RankingRead",
    "TransitionRequest",
    "UndoRequest",
]
