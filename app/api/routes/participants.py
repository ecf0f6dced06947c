import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import Response
from sqlalchemy import delete, select
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core import messages
from app.core.time import utc_now
from app.dependencies import get_db_session, require_admin
from app.models import Answer, Participant, ParticipantSession
from app.schemas import (
    ParticipantCreate,
    ParticipantGenerate,
    ParticipantQRCode,
    ParticipantRead,
    ParticipantUpdate,
)
from app.services.participants import generate_unique_code, join_url, qr_data_url, qr_png, qr_svg
from app.services.realtime import USER_SESSIONS, ChangeEvent, feed

router = APIRouter(prefix="/participants", tags=["participants"], dependencies=[Depends(require_admin)])
logger = logging.getLogger("admin")


def serialize_qr(participant: Participant) -> ParticipantQRCode:
    return ParticipantQRCode(
        id=participant.id,
        name=participant.name,
        code=participant.code,
        qr_code_image=qr_data_url(join_url(participant)),
        seat_number=participant.seat_number,
        group_type=participant.group_type,
    )


async def get_participant(db: AsyncSession, participant_id: Optional[str]) -> Participant:
    if not participant_id:
        raise HTTPException(status_code=400, detail=messages.PARTICIPANT_ID_REQUIRED)
    participant = await db.get(Participant, participant_id)
    if not participant:
        raise HTTPException(status_code=404, detail=messages.PARTICIPANT_NOT_FOUND)
    return participant


@router.get("", response_model=List[ParticipantRead])
async def list_participants(db: AsyncSession = Depends(get_db_session)):
    result = await db.execute(select(Participant).order_by(Participant.created_at))
    return result.scalars().all()


@router.post("", response_model=ParticipantRead)
async def create_participant(payload: ParticipantCreate, db: AsyncSession = Depends(get_db_session)):
    if not payload.name or not payload.name.strip() or not payload.group_type:
        raise HTTPException(status_code=400, detail=messages.PARTICIPANT_FIELDS_REQUIRED)
    participant = Participant(
        code=await generate_unique_code(db),
        name=payload.name.strip(),
        group_type=payload.group_type.value,
        seat_number=payload.seat_number,
        message=payload.message,
        message_image_url=payload.message_image_url,
    )
    db.add(participant)
    await db.commit()
    await db.refresh(participant)
    logger.info("Participant created id=%s code=%s", participant.id, participant.code)
    return participant


@router.post("/generate", response_model=List[ParticipantRead])
async def generate_participants(payload: ParticipantGenerate, db: AsyncSession = Depends(get_db_session)):
    existing = await db.execute(select(Participant.id))
    offset = len(existing.all())
    taken: set = set()
    created = []
    for idx in range(1, payload.count + 1):
        participant = Participant(
            code=await generate_unique_code(db, taken=taken),
            name=f"{payload.name_prefix} {offset + idx}",
            group_type=payload.group_type.value,
        )
        db.add(participant)
        created.append(participant)
    await db.commit()
    logger.info("Generated %s participants group=%s", payload.count, payload.group_type.value)
    return created


@router.put("", response_model=ParticipantRead)
async def update_participant(payload: ParticipantUpdate, db: AsyncSession = Depends(get_db_session)):
    participant = await get_participant(db, payload.id)
    for field in ("name", "seat_number", "message", "message_image_url"):
        value = getattr(payload, field)
        if value is not None:
            setattr(participant, field, value)
    if payload.group_type is not None:
        participant.group_type = payload.group_type.value
    participant.updated_at = utc_now()
    await db.commit()
    await db.refresh(participant)
    logger.info("Participant updated id=%s", participant.id)
    return participant


@router.delete("")
async def delete_participant(id: Optional[str] = None, db: AsyncSession = Depends(get_db_session)):
    participant = await get_participant(db, id)
    await db.execute(delete(Answer).where(Answer.participant_id == participant.id))
    await db.execute(delete(ParticipantSession).where(ParticipantSession.participant_id == participant.id))
    await db.delete(participant)
    await db.commit()
    logger.info("Participant deleted id=%s", id)
    await feed.publish(ChangeEvent(USER_SESSIONS, "DELETE", {"participant_id": id}))
    return {"success": True}


@router.post("/bulk-delete")
async def bulk_delete_participants(db: AsyncSession = Depends(get_db_session)):
    await db.execute(delete(Answer))
    await db.execute(delete(ParticipantSession))
    result = await db.execute(delete(Participant))
    await db.commit()
    logger.warning("Deleted all participants count=%s", result.rowcount)
    await feed.publish(ChangeEvent(USER_SESSIONS, "DELETE"))
    return {"success": True, "deleted": result.rowcount}


@router.get("/qr-codes")
async def participant_qr_code(
    id: Optional[str] = None,
    format: str = Query(default="dataUrl", pattern="^(dataUrl|png|svg)$"),
    db: AsyncSession = Depends(get_db_session),
):
    participant = await get_participant(db, id)
    url = join_url(participant)
    if format == "png":
        return Response(
            content=qr_png(url),
            media_type="image/png",
            headers={"Content-Disposition": f'attachment; filename="qr-{participant.code}.png"'},
        )
    if format == "svg":
        return Response(
            content=qr_svg(url),
            media_type="image/svg+xml",
            headers={"Content-Disposition": f'attachment; filename="qr-{participant.code}.svg"'},
        )
    return serialize_qr(participant)


@router.post("/qr-codes", response_model=List[ParticipantQRCode])
async def all_qr_codes(db: AsyncSession = Depends(get_db_session)):
    result = await db.execute(select(Participant).order_by(Participant.created_at))
    return [serialize_qr(p) for p in result.scalars().all()]
