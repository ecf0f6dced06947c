from typing import Optional

from fastapi import Cookie, Depends, HTTPException
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core import messages
from app.core.config import settings
from app.db import get_session
from app.models import Participant
from app.services.auth import resolve_participant, verify_admin_token


async def get_db_session():
    async with get_session() as session:
        yield session


async def require_admin(admin_session: Optional[str] = Cookie(default=None)) -> None:
    if not verify_admin_token(admin_session, settings.secret_key):
        raise HTTPException(status_code=401, detail=messages.ADMIN_REQUIRED)


async def get_current_participant(
    participant_session: Optional[str] = Cookie(default=None),
    db: AsyncSession = Depends(get_db_session),
) -> Participant:
    participant = await resolve_participant(db, participant_session)
    if not participant:
        raise HTTPException(status_code=401, detail=messages.LOGIN_REQUIRED)
    return participant
