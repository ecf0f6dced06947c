import hashlib
import hmac
import logging
import secrets
import time
from datetime import timedelta
from typing import Optional

from fastapi import HTTPException
from sqlalchemy import delete, select
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core import messages
from app.core.config import settings
from app.core.time import as_utc, utc_now
from app.models import Participant, ParticipantSession
from app.services.realtime import USER_SESSIONS, ChangeEvent, feed

ADMIN_COOKIE = "admin_session"
PARTICIPANT_COOKIE = "participant_session"

logger = logging.getLogger("admin")


def _sign(payload: str, secret: str) -> str:
    return hmac.new(secret.encode("utf-8"), payload.encode("utf-8"), hashlib.sha256).hexdigest()


def issue_admin_token(secret: str, ttl_seconds: int, now: Optional[float] = None) -> str:
    expires = int((now if now is not None else time.time()) + ttl_seconds)
    payload = f"{secrets.token_hex(16)}.{expires}"
    return f"{payload}.{_sign(payload, secret)}"


def verify_admin_token(token: Optional[str], secret: str, now: Optional[float] = None) -> bool:
    if not token:
        return False
    try:
        nonce, expires, signature = token.split(".")
        expires_at = int(expires)
    except ValueError:
        return False
    if not hmac.compare_digest(_sign(f"{nonce}.{expires}", secret), signature):
        return False
    return expires_at > (now if now is not None else time.time())


def check_admin_password(password: Optional[str]) -> str:
    """Validate the password and return a fresh admin token."""
    if not password:
        raise HTTPException(status_code=400, detail=messages.PASSWORD_REQUIRED)
    if not settings.admin_password:
        logger.error("QUIZ_ADMIN_PASSWORD is not set")
        raise HTTPException(status_code=500, detail=messages.SERVER_CONFIG_ERROR)
    if not hmac.compare_digest(password, settings.admin_password):
        logger.warning("Rejected admin login")
        raise HTTPException(status_code=401, detail=messages.INVALID_PASSWORD)
    logger.info("Admin logged in")
    return issue_admin_token(settings.secret_key, settings.admin_session_days * 24 * 3600)


async def login_participant(db: AsyncSession, code: Optional[str]) -> tuple[Participant, str]:
    if not code:
        raise HTTPException(status_code=400, detail=messages.CODE_REQUIRED)
    result = await db.execute(select(Participant).where(Participant.code == code.strip().upper()))
    participant = result.scalars().first()
    if not participant:
        raise HTTPException(status_code=401, detail=messages.INVALID_CODE)

    token = secrets.token_hex(32)
    db.add(ParticipantSession(participant_id=participant.id, session_token=token))
    await db.commit()
    logger.info("Participant login participant=%s code=%s", participant.id, participant.code)
    await feed.publish(ChangeEvent(USER_SESSIONS, "INSERT", {"participant_id": participant.id}))
    return participant, token


async def resolve_participant(db: AsyncSession, token: Optional[str]) -> Optional[Participant]:
    """Map a session token to its participant and mark the session active."""
    if not token:
        return None
    result = await db.execute(select(ParticipantSession).where(ParticipantSession.session_token == token))
    session = result.scalars().first()
    if not session:
        return None
    now = utc_now()
    if as_utc(session.last_active) < now - timedelta(hours=settings.participant_session_hours):
        return None
    participant = await db.get(Participant, session.participant_id)
    if not participant:
        return None
    session.last_active = now
    await db.commit()
    await feed.publish(ChangeEvent(USER_SESSIONS, "UPDATE", {"participant_id": participant.id}))
    return participant


async def logout_participant(db: AsyncSession, token: Optional[str]) -> None:
    if not token:
        return
    await db.execute(delete(ParticipantSession).where(ParticipantSession.session_token == token))
    await db.commit()
    await feed.publish(ChangeEvent(USER_SESSIONS, "DELETE"))
