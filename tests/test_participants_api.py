import re

import pytest
from fastapi import HTTPException

from app.models import Participant
from app.services.participants import join_url, validate_nickname
from conftest import add_participant, add_question, login


def test_join_url_uses_app_url():
    participant = Participant(code="AB12", name="Ann")
    assert join_url(participant) == "https://quiz.example.com/participant?qr=AB12"


@pytest.mark.parametrize(
    "nickname",
    ["", "   ", None, "x" * 21, "Party \U0001F389", "Sun ☀"],
)
def test_invalid_nicknames(nickname):
    with pytest.raises(HTTPException) as exc:
        validate_nickname(nickname)
    assert exc.value.status_code == 400


def test_valid_nickname_is_kept():
    assert validate_nickname("Best Man") == "Best Man"
    assert validate_nickname("x" * 20) == "x" * 20


async def test_participant_admin_requires_login(client):
    assert (await client.get("/participants")).status_code == 401


async def test_create_and_update_participant(client, admin):
    missing = await client.post("/participants", json={"name": "Ann"}, headers=admin)
    assert missing.status_code == 400

    created = await add_participant(client, admin, name="Ann", group_type="groom")
    assert re.fullmatch(r"[A-Z0-9]{4}", created["code"])
    assert created["group_type"] == "groom"
    assert created["nickname"] is None

    updated = await client.put(
        "/participants", json={"id": created["id"], "seat_number": "T4", "group_type": "other"}, headers=admin
    )
    assert updated.status_code == 200
    assert updated.json()["seat_number"] == "T4"
    assert updated.json()["group_type"] == "other"
    assert updated.json()["name"] == "Ann"

    unknown = await client.put("/participants", json={"id": "nope", "name": "X"}, headers=admin)
    assert unknown.status_code == 404


async def test_generate_participants(client, admin):
    await add_participant(client, admin)
    response = await client.post(
        "/participants/generate", json={"count": 3, "group_type": "bride", "name_prefix": "Table"}, headers=admin
    )
    assert response.status_code == 200
    generated = response.json()
    assert [p["name"] for p in generated] == ["Table 2", "Table 3", "Table 4"]
    codes = {p["code"] for p in generated}
    assert len(codes) == 3

    listed = (await client.get("/participants", headers=admin)).json()
    assert len(listed) == 4


async def test_delete_participant_removes_answers(client, admin):
    question = await add_question(client, admin, 1)
    participant = await add_participant(client, admin)
    headers = await login(client, participant["code"])
    await client.post("/answers", json={"question_id": question["id"], "choice_id": question["choices"][0]["id"]}, headers=headers)

    response = await client.delete("/participants", params={"id": participant["id"]}, headers=admin)
    assert response.status_code == 200
    stats = (await client.get("/data-management", headers=admin)).json()
    assert stats["participants"] == 0
    assert stats["answers"] == 0
    assert stats["sessions"] == 0
    assert (await client.get("/user/me", headers=headers)).status_code == 401


async def test_bulk_delete(client, admin):
    await add_participant(client, admin, name="Ann")
    await add_participant(client, admin, name="Bob")
    response = await client.post("/participants/bulk-delete", headers=admin)
    assert response.json() == {"success": True, "deleted": 2}
    assert (await client.get("/participants", headers=admin)).json() == []


async def test_qr_codes(client, admin):
    participant = await add_participant(client, admin)

    single = (await client.get("/participants/qr-codes", params={"id": participant["id"]}, headers=admin)).json()
    assert single["code"] == participant["code"]
    assert single["qr_code_image"].startswith("data:image/png;base64,")

    png = await client.get("/participants/qr-codes", params={"id": participant["id"], "format": "png"}, headers=admin)
    assert png.headers["content-type"] == "image/png"
    assert png.content.startswith(b"\x89PNG")

    svg = await client.get("/participants/qr-codes", params={"id": participant["id"], "format": "svg"}, headers=admin)
    assert svg.headers["content-type"].startswith("image/svg+xml")

    everyone = (await client.post("/participants/qr-codes", headers=admin)).json()
    assert [p["id"] for p in everyone] == [participant["id"]]


async def test_login_and_nickname_flow(client, admin):
    participant = await add_participant(client, admin, name="Ann")
    other = await add_participant(client, admin, name="Bob")

    unknown = await client.post("/auth/participant", json={"code": "ZZZZZ"})
    assert unknown.status_code == 401

    first = await client.post("/auth/participant", json={"code": participant["code"].lower()})
    assert first.json()["should_setup_profile"] is True
    client.cookies.clear()
    headers = await login(client, participant["code"])
    other_headers = await login(client, other["code"])

    assert (await client.put("/user/nickname", json={"nickname": "Dancer"}, headers=headers)).status_code == 200
    taken = await client.put("/user/nickname", json={"nickname": "Dancer"}, headers=other_headers)
    assert taken.status_code == 400
    # Setting your own nickname again is not a clash
    assert (await client.put("/user/nickname", json={"nickname": "Dancer"}, headers=headers)).status_code == 200

    me = (await client.get("/user/me", headers=headers)).json()
    assert me["nickname"] == "Dancer"
    relogin = await client.post("/auth/participant", json={"code": participant["code"]})
    assert relogin.json()["should_setup_profile"] is False
    client.cookies.clear()

    cleared = await client.delete("/user/nickname", headers=headers)
    assert cleared.json()["nickname"] is None

    await client.delete("/auth/participant", headers=headers)
    assert (await client.get("/user/me", headers=headers)).status_code == 401
