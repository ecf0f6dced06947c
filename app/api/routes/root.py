from fastapi import APIRouter
from sqlalchemy import text

from app.db import get_session

router = APIRouter()


@router.get("/")
async def root():
    return {"name": "Wedding Quiz", "status": "ok"}


@router.get("/health")
async def health():
    async with get_session() as db:
        await db.execute(text("SELECT 1"))
    return {"status": "ok"}
