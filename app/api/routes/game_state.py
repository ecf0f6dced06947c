from fastapi import APIRouter, Depends
from sqlmodel.ext.asyncio.session import AsyncSession

from app.dependencies import get_db_session, require_admin
from app.models import GameState
from app.schemas import GameStateRead, GameStateTransition, TransitionRequest
from app.services.game_state import game

router = APIRouter(prefix="/game-state", tags=["game-state"])


def serialize_transition(state: GameState, action_id: str | None) -> GameStateTransition:
    return GameStateTransition(
        **GameStateRead.model_validate(state).model_dump(),
        admin_action_id=action_id,
    )


@router.get("", response_model=GameStateRead)
async def read_game_state(db: AsyncSession = Depends(get_db_session)):
    return await game.current(db)


@router.put("", response_model=GameStateTransition, dependencies=[Depends(require_admin)])
async def update_game_state(payload: TransitionRequest, db: AsyncSession = Depends(get_db_session)):
    state, action_id = await game.transition(db, payload)
    return serialize_transition(state, action_id)


@router.post("/start", response_model=GameStateTransition, dependencies=[Depends(require_admin)])
async def start_quiz(db: AsyncSession = Depends(get_db_session)):
    state, action_id = await game.start(db)
    return serialize_transition(state, action_id)


@router.post("/reveal", response_model=GameStateTransition, dependencies=[Depends(require_admin)])
async def reveal_results(db: AsyncSession = Depends(get_db_session)):
    state, action_id = await game.reveal(db)
    return serialize_transition(state, action_id)


@router.post("/next", response_model=GameStateTransition, dependencies=[Depends(require_admin)])
async def next_question(db: AsyncSession = Depends(get_db_session)):
    state, action_id = await game.advance(db)
    return serialize_transition(state, action_id)
