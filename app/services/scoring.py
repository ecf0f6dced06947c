"""Answer scoring.

Single choice answers earn the question's flat points when the picked choice
is correct. Multi-select answers earn the sum of every picked choice's own
(signed) points, floored at zero; their correctness flag is informational and
only true when the picked set equals the correct set. Free text is never
auto-scored.

Read paths call :func:`effective_score`, which re-scores multi-select answers
against the current choice points while trusting the stored result for the
other types.
"""
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

from fastapi import HTTPException

from app.core import messages
from app.models import Answer, Choice, Question, QuestionType


@dataclass(frozen=True)
class ScoreResult:
    is_correct: bool
    points_earned: int


NOT_SCORED = ScoreResult(is_correct=False, points_earned=0)


def score_single_choice(question: Question, choice: Optional[Choice]) -> ScoreResult:
    if choice is None or not choice.is_correct:
        return NOT_SCORED
    return ScoreResult(is_correct=True, points_earned=question.points or 0)


def score_multi_select(choices: Sequence[Choice], selected_ids: Iterable[str]) -> ScoreResult:
    selected = set(selected_ids)
    correct = {c.id for c in choices if c.is_correct}
    total = sum(c.points or 0 for c in choices if c.id in selected)
    return ScoreResult(is_correct=bool(selected) and selected == correct, points_earned=max(0, total))


def normalize_selection(
    question: Question,
    choices: Sequence[Choice],
    choice_id: Optional[str],
    choice_ids: Optional[Sequence[str]],
) -> tuple[Optional[str], Optional[list[str]]]:
    """Validate the submitted selection against the question's choices.

    Returns the ``(choice_id, choice_ids)`` pair to persist.
    """
    qtype = QuestionType(question.question_type)
    if not qtype.has_choices:
        return None, None

    known = {c.id for c in choices}
    if qtype is QuestionType.SINGLE_CHOICE:
        if not choice_id:
            raise HTTPException(status_code=400, detail=messages.CHOICE_REQUIRED)
        if choice_id not in known:
            raise HTTPException(status_code=400, detail=messages.CHOICE_NOT_IN_QUESTION)
        return choice_id, None

    picked = list(choice_ids or [])
    if not picked and choice_id:
        picked = [choice_id]
    if not picked:
        raise HTTPException(status_code=400, detail=messages.CHOICE_REQUIRED)
    if any(cid not in known for cid in picked):
        raise HTTPException(status_code=400, detail=messages.CHOICE_NOT_IN_QUESTION)
    # Keep submission order, drop repeats
    return None, list(dict.fromkeys(picked))


def score_submission(
    question: Question,
    choices: Sequence[Choice],
    choice_id: Optional[str],
    choice_ids: Optional[Sequence[str]],
) -> ScoreResult:
    qtype = QuestionType(question.question_type)
    if qtype is QuestionType.SINGLE_CHOICE:
        picked = next((c for c in choices if c.id == choice_id), None)
        return score_single_choice(question, picked)
    if qtype is QuestionType.MULTI_SELECT:
        return score_multi_select(choices, choice_ids or [])
    return NOT_SCORED


def effective_score(question: Question, choices: Sequence[Choice], answer: Answer) -> ScoreResult:
    if question.question_type == QuestionType.MULTI_SELECT.value:
        return score_multi_select(choices, answer.choice_ids or [])
    return ScoreResult(is_correct=bool(answer.is_correct), points_earned=answer.points_earned or 0)
