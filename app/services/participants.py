import base64
import io
import logging
import re
import secrets
from typing import Optional

import qrcode
import qrcode.image.svg
from fastapi import HTTPException
from sqlalchemy import select
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core import messages
from app.core.config import settings
from app.models import Participant

logger = logging.getLogger("admin")

CODE_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789"
CODE_LENGTH = 4
NICKNAME_MAX_LENGTH = 20

EMOJI_PATTERN = re.compile(
    "[\U0001F600-\U0001F64F"
    "\U0001F300-\U0001F5FF"
    "\U0001F680-\U0001F6FF"
    "\U0001F1E0-\U0001F1FF"
    "\u2600-\u26FF"
    "\u2700-\u27BF]"
)


def random_code(length: int = CODE_LENGTH) -> str:
    return "".join(secrets.choice(CODE_ALPHABET) for _ in range(length))


async def generate_unique_code(db: AsyncSession, max_retries: int = 100, taken: Optional[set] = None) -> str:
    """Pick a code not used by any stored participant (nor in ``taken``)."""
    taken = taken if taken is not None else set()
    for _ in range(max_retries):
        code = random_code()
        if code in taken:
            continue
        existing = await db.execute(select(Participant.id).where(Participant.code == code))
        if existing.first() is None:
            taken.add(code)
            return code
    logger.error("Participant code space exhausted after %s attempts", max_retries)
    raise HTTPException(status_code=500, detail=messages.CODE_GENERATION_FAILED)


def validate_nickname(nickname: Optional[str]) -> str:
    if not nickname or not nickname.strip():
        raise HTTPException(status_code=400, detail=messages.NICKNAME_REQUIRED)
    if len(nickname) > NICKNAME_MAX_LENGTH:
        raise HTTPException(status_code=400, detail=messages.NICKNAME_TOO_LONG)
    if EMOJI_PATTERN.search(nickname):
        raise HTTPException(status_code=400, detail=messages.NICKNAME_EMOJI)
    return nickname


def join_url(participant: Participant) -> str:
    return f"{settings.join_url_base}/participant?qr={participant.code}"


def _qr(data: str) -> qrcode.QRCode:
    qr = qrcode.QRCode(
        version=None,
        error_correction=qrcode.constants.ERROR_CORRECT_M,
        box_size=8,
        border=1,
    )
    qr.add_data(data)
    qr.make(fit=True)
    return qr


def qr_png(data: str) -> bytes:
    img = _qr(data).make_image(fill_color="black", back_color="white")
    buffered = io.BytesIO()
    img.save(buffered, format="PNG")
    return buffered.getvalue()


def qr_data_url(data: str) -> str:
    return "data:image/png;base64," + base64.b64encode(qr_png(data)).decode("utf-8")


def qr_svg(data: str) -> str:
    img = _qr(data).make_image(image_factory=qrcode.image.svg.SvgPathImage)
    buffered = io.BytesIO()
    img.save(buffered)
    return buffered.getvalue().decode("utf-8")
