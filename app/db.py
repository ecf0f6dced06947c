from contextlib import asynccontextmanager

from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.config import settings
from app import models  # noqa: F401


def _engine_kwargs(url: str) -> dict:
    if url.startswith("sqlite"):
        # Single shared connection so an in-memory database survives across sessions
        return {"connect_args": {"check_same_thread": False}, "poolclass": StaticPool}
    return {}


engine: AsyncEngine = create_async_engine(
    settings.assembled_db_url,
    echo=False,
    future=True,
    **_engine_kwargs(settings.assembled_db_url),
)


async def init_db() -> None:
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)


@asynccontextmanager
async def get_session():
    async_session = AsyncSession(engine, expire_on_commit=False)
    try:
        yield async_session
    finally:
        await async_session.close()
