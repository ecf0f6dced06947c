import os
import tempfile

os.environ["QUIZ_DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["QUIZ_ADMIN_PASSWORD"] = "letmein"
os.environ["QUIZ_SECRET_KEY"] = "test-secret"
os.environ["QUIZ_APP_URL"] = "https://quiz.example.com/"
os.environ["QUIZ_MEDIA_ROOT"] = tempfile.mkdtemp(prefix="quiz-media-")

import pytest
from httpx import ASGITransport, AsyncClient
from sqlmodel import SQLModel

from app.db import engine, get_session
from app.main import app


@pytest.fixture(autouse=True)
async def database():
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def db():
    async with get_session() as session:
        yield session


@pytest.fixture
async def client():
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


def cookie_header(response, name: str) -> dict:
    for header in response.headers.get_list("set-cookie"):
        key, _, rest = header.partition("=")
        if key.strip() == name:
            return {"Cookie": f"{name}={rest.split(';', 1)[0]}"}
    raise AssertionError(f"{name} cookie not set")


@pytest.fixture
async def admin(client) -> dict:
    response = await client.post("/auth/admin", json={"password": "letmein"})
    assert response.status_code == 200
    client.cookies.clear()
    return cookie_header(response, "admin_session")


async def login(client, code: str) -> dict:
    response = await client.post("/auth/participant", json={"code": code})
    assert response.status_code == 200, response.text
    client.cookies.clear()
    return cookie_header(response, "participant_session")


async def add_participant(client, admin: dict, name: str = "Alice", group_type: str = "bride") -> dict:
    response = await client.post("/participants", json={"name": name, "group_type": group_type}, headers=admin)
    assert response.status_code == 200, response.text
    return response.json()


async def add_question(
    client,
    admin: dict,
    number: int,
    choices=None,
    question_type: str = "single_choice",
    points=None,
) -> dict:
    if choices is None and question_type != "free_text":
        choices = [
            {"text": "Paris", "is_correct": True},
            {"text": "Rome", "is_correct": False},
        ]
    payload = {
        "question_number": number,
        "question_text": f"Question {number}",
        "question_type": question_type,
        "choices": choices or [],
    }
    if points is not None:
        payload["points"] = points
    response = await client.post("/questions", json=payload, headers=admin)
    assert response.status_code == 200, response.text
    return response.json()


@pytest.fixture
async def player(client, admin):
    """A logged-in participant: ``(participant_json, headers)``."""
    participant = await add_participant(client, admin)
    return participant, await login(client, participant["code"])
