from typing import Optional

from fastapi import APIRouter, Cookie, Depends, Response
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.config import settings
from app.dependencies import get_db_session
from app.models import Participant
from app.schemas import AdminLogin, ParticipantLogin, ParticipantLoginResult, UserRead
from app.services.auth import (
    ADMIN_COOKIE,
    PARTICIPANT_COOKIE,
    check_admin_password,
    login_participant,
    logout_participant,
)

router = APIRouter(prefix="/auth", tags=["auth"])


def serialize_user(participant: Participant) -> UserRead:
    return UserRead(
        id=participant.id,
        name=participant.name,
        nickname=participant.nickname,
        code=participant.code,
        group_type=participant.group_type,
        seat_number=participant.seat_number,
    )


def set_session_cookie(response: Response, name: str, value: str, max_age: int):
    response.set_cookie(
        key=name,
        value=value,
        max_age=max_age,
        httponly=True,
        secure=settings.cookie_secure,
        samesite="lax",
        path="/",
    )


@router.post("/admin")
async def admin_login(payload: AdminLogin, response: Response):
    token = check_admin_password(payload.password)
    set_session_cookie(response, ADMIN_COOKIE, token, settings.admin_session_days * 24 * 3600)
    return {"success": True}


@router.delete("/admin")
async def admin_logout(response: Response):
    response.delete_cookie(ADMIN_COOKIE, path="/")
    return {"success": True}


@router.post("/participant", response_model=ParticipantLoginResult)
async def participant_login(
    payload: ParticipantLogin,
    response: Response,
    db: AsyncSession = Depends(get_db_session),
):
    participant, token = await login_participant(db, payload.code)
    set_session_cookie(response, PARTICIPANT_COOKIE, token, settings.participant_session_hours * 3600)
    return ParticipantLoginResult(
        user=serialize_user(participant),
        should_setup_profile=not participant.nickname,
    )


@router.delete("/participant")
async def participant_logout(
    response: Response,
    participant_session: Optional[str] = Cookie(default=None),
    db: AsyncSession = Depends(get_db_session),
):
    await logout_participant(db, participant_session)
    response.delete_cookie(PARTICIPANT_COOKIE, path="/")
    return {"success": True}
