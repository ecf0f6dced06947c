import pytest
from sqlalchemy.exc import OperationalError

from app.models import GameState
from app.services.game_state import game
from conftest import add_participant, add_question, login


async def test_reset_keeps_participants_and_questions(client, admin):
    question = await add_question(client, admin, 1)
    participant = await add_participant(client, admin)
    headers = await login(client, participant["code"])
    await client.put("/user/nickname", json={"nickname": "Ace"}, headers=headers)
    await client.post("/answers", json={"question_id": question["id"], "choice_id": question["choices"][0]["id"]}, headers=headers)
    await client.post("/game-state/start", headers=admin)

    before = (await client.get("/data-management", headers=admin)).json()
    assert before == {"participants": 1, "questions": 1, "answers": 1, "sessions": 1}

    refused = await client.delete("/data-management", headers=admin)
    assert refused.status_code == 400

    response = await client.delete("/data-management", params={"confirm": "true"}, headers=admin)
    assert response.status_code == 200
    assert response.json()["success"] is True

    after = (await client.get("/data-management", headers=admin)).json()
    assert after == {"participants": 1, "questions": 1, "answers": 0, "sessions": 0}

    state = (await client.get("/game-state")).json()
    assert state["current_state"] == "waiting"
    assert state["current_question_id"] is None
    assert state["current_question_number"] == 0

    listed = (await client.get("/participants", headers=admin)).json()
    assert listed[0]["nickname"] is None


async def test_reset_requires_admin(client):
    assert (await client.delete("/data-management", params={"confirm": "true"})).status_code == 401


async def test_reset_rolls_back_when_a_step_fails(client, admin, db, monkeypatch):
    question = await add_question(client, admin, 1)
    participant = await add_participant(client, admin)
    headers = await login(client, participant["code"])
    await client.put("/user/nickname", json={"nickname": "Ace"}, headers=headers)
    await client.post("/answers", json={"question_id": question["id"], "choice_id": question["choices"][0]["id"]}, headers=headers)
    await client.post("/game-state/start", headers=admin)

    real_execute = db.execute

    async def failing_execute(statement, *args, **kwargs):
        if getattr(statement, "is_update", False) and statement.table is GameState.__table__:
            raise OperationalError("UPDATE game_state", None, Exception("database is locked"))
        return await real_execute(statement, *args, **kwargs)

    monkeypatch.setattr(db, "execute", failing_execute)
    with pytest.raises(OperationalError):
        await game.reset(db)

    after = (await client.get("/data-management", headers=admin)).json()
    assert after["answers"] == 1
    assert after["sessions"] == 1
    assert (await client.get("/user/me", headers=headers)).json()["nickname"] == "Ace"
    assert (await client.get("/game-state")).json()["current_state"] == "accepting_answers"
