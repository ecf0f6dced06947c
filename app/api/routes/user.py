import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlmodel.ext.asyncio.session import AsyncSession

from app.api.routes.auth import serialize_user
from app.core import messages
from app.core.time import utc_now
from app.dependencies import get_current_participant, get_db_session
from app.models import Participant
from app.schemas import NicknameUpdate, UserRead
from app.services.participants import validate_nickname

router = APIRouter(prefix="/user", tags=["user"])
logger = logging.getLogger("admin")


@router.get("/me", response_model=UserRead)
async def read_me(participant: Participant = Depends(get_current_participant)):
    return serialize_user(participant)


@router.put("/nickname", response_model=UserRead)
async def set_nickname(
    payload: NicknameUpdate,
    participant: Participant = Depends(get_current_participant),
    db: AsyncSession = Depends(get_db_session),
):
    nickname = validate_nickname(payload.nickname)
    clash = await db.execute(
        select(Participant.id).where(Participant.nickname == nickname, Participant.id != participant.id)
    )
    if clash.first() is not None:
        raise HTTPException(status_code=400, detail=messages.NICKNAME_TAKEN)

    participant_id = participant.id
    participant.nickname = nickname
    participant.updated_at = utc_now()
    try:
        await db.commit()
    except IntegrityError:
        # Lost a race with another participant claiming the same nickname
        await db.rollback()
        raise HTTPException(status_code=400, detail=messages.NICKNAME_TAKEN)
    logger.info("Nickname set participant=%s nickname=%s", participant_id, nickname)
    return serialize_user(participant)


@router.delete("/nickname", response_model=UserRead)
async def clear_nickname(
    participant: Participant = Depends(get_current_participant),
    db: AsyncSession = Depends(get_db_session),
):
    participant.nickname = None
    participant.updated_at = utc_now()
    await db.commit()
    logger.info("Nickname cleared participant=%s", participant.id)
    return serialize_user(participant)
