import logging
from contextlib import aclosing

from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from sqlalchemy import func, select

from app.core.config import settings
from app.db import get_session
from app.models import Answer
from app.services.game_state import game, serialize_state
from app.services.leaderboard import active_participant_count
from app.services.realtime import (
    ANSWERS,
    GAME_STATE,
    USER_SESSIONS,
    ChangeEvent,
    FallbackNotifier,
    PollingBackend,
    PushBackend,
    StateChangeNotifier,
    feed,
)

router = APIRouter()
logger = logging.getLogger("game")


async def fetch_game_state() -> dict:
    async with get_session() as db:
        return serialize_state(await game.current(db))


def answer_count_fetcher(question_id: str):
    async def fetch() -> dict:
        async with get_session() as db:
            result = await db.execute(
                select(func.count()).select_from(Answer).where(Answer.question_id == question_id)
            )
            return {"question_id": question_id, "count": result.scalar_one()}

    return fetch


async def fetch_active_participants() -> dict:
    async with get_session() as db:
        return {"count": await active_participant_count(db, settings.active_window_minutes)}


def notifier_for(table: str, fetch, predicate=None) -> StateChangeNotifier:
    return FallbackNotifier(
        PushBackend(feed, table, predicate),
        PollingBackend(table, fetch, settings.poll_interval_seconds),
        settings.reconnect_delay_seconds,
    )


async def stream(websocket: WebSocket, table: str, notifier: StateChangeNotifier, fetch):
    """Send the current snapshot, then every change the notifier yields."""
    await websocket.accept()
    try:
        await websocket.send_json(ChangeEvent(table, "SNAPSHOT", await fetch()).as_message())
        async with aclosing(notifier.events()) as events:
            async for event in events:
                await websocket.send_json(event.as_message())
    except WebSocketDisconnect:
        logger.debug("Client left %s stream", table)


@router.websocket("/ws/game-state")
async def game_state_socket(websocket: WebSocket):
    await stream(websocket, GAME_STATE, notifier_for(GAME_STATE, fetch_game_state), fetch_game_state)


@router.websocket("/ws/answers/{question_id}")
async def answers_socket(websocket: WebSocket, question_id: str):
    fetch = answer_count_fetcher(question_id)
    notifier = notifier_for(
        ANSWERS,
        fetch,
        # Deletes carry no question id and affect every counter
        lambda event: event.record.get("question_id") in (None, question_id),
    )
    await stream(websocket, ANSWERS, notifier, fetch)


@router.websocket("/ws/participants")
async def participants_socket(websocket: WebSocket):
    await stream(
        websocket, USER_SESSIONS, notifier_for(USER_SESSIONS, fetch_active_participants), fetch_active_participants
    )
