from conftest import add_participant, add_question, login

MULTI_CHOICES = [
    {"text": "A", "is_correct": True, "points": 5},
    {"text": "B", "is_correct": True, "points": 5},
    {"text": "C", "is_correct": False, "points": -5},
]


async def test_create_assigns_display_order_and_default_points(client, admin):
    question = await add_question(
        client,
        admin,
        1,
        choices=[
            {"text": "Red", "is_correct": False},
            {"text": "Blue", "is_correct": True},
            {"text": "Green", "is_correct": False},
        ],
    )
    assert question["points"] == 10
    assert [(c["choice_text"], c["display_order"]) for c in question["choices"]] == [
        ("Red", 1),
        ("Blue", 2),
        ("Green", 3),
    ]


async def test_create_validation(client, admin):
    no_correct = await client.post(
        "/questions",
        json={"question_number": 1, "question_text": "?", "choices": [{"text": "A", "is_correct": False}]},
        headers=admin,
    )
    assert no_correct.status_code == 400

    await add_question(client, admin, 1)
    duplicate = await client.post(
        "/questions",
        json={"question_number": 1, "question_text": "?", "choices": [{"text": "A", "is_correct": True}]},
        headers=admin,
    )
    assert duplicate.status_code == 400

    anonymous = await client.post("/questions", json={"question_number": 2, "question_text": "?"})
    assert anonymous.status_code == 401


async def test_read_questions(client, admin):
    q2 = await add_question(client, admin, 2)
    q1 = await add_question(client, admin, 1)

    listed = (await client.get("/questions")).json()
    assert [q["id"] for q in listed] == [q1["id"], q2["id"]]
    assert (await client.get("/questions", params={"id": q2["id"]})).json()["question_number"] == 2
    assert (await client.get("/questions", params={"number": 1})).json()["id"] == q1["id"]
    assert (await client.get("/questions", params={"number": 7})).status_code == 404


async def test_update_matches_choices_by_id(client, admin):
    question = await add_question(client, admin, 1)
    paris, rome = question["choices"]
    response = await client.put(
        "/questions",
        params={"id": question["id"]},
        json={
            "question_text": "Pick both",
            "question_type": "multi_select",
            "choices": [
                {"id": rome["id"], "text": "Roma", "is_correct": True, "points": 4},
                {"text": "Oslo", "is_correct": True, "points": 3},
            ],
        },
        headers=admin,
    )
    assert response.status_code == 200
    body = response.json()
    assert body["question_text"] == "Pick both"
    assert body["question_type"] == "multi_select"
    assert [(c["choice_text"], c["display_order"]) for c in body["choices"]] == [("Roma", 1), ("Oslo", 2)]
    kept, added = body["choices"]
    assert kept["id"] == rome["id"]
    assert kept["points"] == 4
    assert added["id"] not in (paris["id"], rome["id"])

    other = await add_question(client, admin, 2)
    clash = await client.put(
        "/questions", params={"id": other["id"]}, json={"question_number": 1}, headers=admin
    )
    assert clash.status_code == 400


async def test_edited_points_flow_into_recorded_answers(client, admin):
    question = await add_question(client, admin, 3, choices=MULTI_CHOICES, question_type="multi_select")
    a, b, c = question["choices"]
    participant = await add_participant(client, admin)
    headers = await login(client, participant["code"])
    submitted = await client.post(
        "/answers", json={"question_id": question["id"], "choice_ids": [a["id"], b["id"]]}, headers=headers
    )
    assert submitted.json()["points_earned"] == 10

    edited = [
        {"id": a["id"], "text": "A", "is_correct": True, "points": 7},
        {"id": b["id"], "text": "B", "is_correct": True, "points": 5},
        {"id": c["id"], "text": "C", "is_correct": False, "points": -5},
    ]
    response = await client.put("/questions", params={"id": question["id"]}, json={"choices": edited}, headers=admin)
    assert response.status_code == 200
    assert [ch["id"] for ch in response.json()["choices"]] == [a["id"], b["id"], c["id"]]

    board = (await client.get("/stats/leaderboard")).json()
    assert board[0]["total_score"] == 12
    latest = (await client.get("/answers/latest", headers=headers)).json()
    assert latest["answer"]["points_earned"] == 12
    assert latest["answer"]["is_correct"] is True
    breakdown = (await client.get("/stats/answers", params={"question_id": question["id"]})).json()
    assert [s["count"] for s in breakdown["stats"]] == [1, 1, 0]


async def test_delete_question_drops_answers(client, admin):
    question = await add_question(client, admin, 1)
    participant = await add_participant(client, admin)
    headers = await login(client, participant["code"])
    await client.post("/answers", json={"question_id": question["id"], "choice_id": question["choices"][0]["id"]}, headers=headers)

    response = await client.delete("/questions", params={"id": question["id"]}, headers=admin)
    assert response.status_code == 200
    assert (await client.get("/questions", params={"id": question["id"]})).status_code == 404
    stats = (await client.get("/data-management", headers=admin)).json()
    assert stats["questions"] == 0
    assert stats["answers"] == 0
