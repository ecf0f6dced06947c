import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy.exc import SQLAlchemyError

from app.api.routes import (
    admin_actions,
    answers,
    auth,
    data_management,
    game_state,
    participants,
    questions,
    root,
    stats,
    upload,
    user,
)
from app.api.ws.routes import router as ws_router
from app.core import messages
from app.core.config import settings
from app.core.logging import configure_logging
from app.db import init_db

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    # Ensure media directory exists before serving uploads
    settings.media_root.mkdir(parents=True, exist_ok=True)
    await init_db()
    logger.info("Wedding quiz started")
    yield

app = FastAPI(title="Wedding Quiz", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.mount("/media", StaticFiles(directory=settings.media_root, check_dir=False), name="media")


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError):
    logger.exception("Database error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"detail": messages.SERVER_ERROR})


# HTTP routes
app.include_router(root.router)
app.include_router(auth.router)
app.include_router(user.router)
app.include_router(questions.router)
app.include_router(game_state.router)
app.include_router(admin_actions.router)
app.include_router(answers.router)
app.include_router(stats.router)
app.include_router(participants.router)
app.include_router(data_management.router)
app.include_router(upload.router)

# WebSocket routes
app.include_router(ws_router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app.main:app", host="0.0.0.0", port=8000, reload=True)
