from conftest import add_participant, add_question, login

MULTI_CHOICES = [
    {"text": "A", "is_correct": True, "points": 5},
    {"text": "B", "is_correct": True, "points": 5},
    {"text": "C", "is_correct": False, "points": -5},
]


async def test_single_choice_answer_and_duplicate(client, admin, player):
    _, headers = player
    question = await add_question(client, admin, 1)
    right, wrong = question["choices"]
    assert question["points"] == 10

    first = await client.post("/answers", json={"question_id": question["id"], "choice_id": right["id"]}, headers=headers)
    assert first.status_code == 200
    assert first.json() == {"success": True, "is_correct": True, "points_earned": 10}

    duplicate = await client.post(
        "/answers", json={"question_id": question["id"], "choice_id": wrong["id"]}, headers=headers
    )
    assert duplicate.status_code == 400

    own = (await client.get("/answers", params={"question_id": question["id"]}, headers=headers)).json()
    assert own["choice_id"] == right["id"]
    assert own["points_earned"] == 10

    count = await client.get("/answers", params={"question_id": question["id"], "count": "true"})
    assert count.json() == {"count": 1}


async def test_multi_select_scoring(client, admin):
    question = await add_question(client, admin, 3, choices=MULTI_CHOICES, question_type="multi_select")
    a, b, c = (choice["id"] for choice in question["choices"])

    cases = [([a, c], 0, False), ([a, b], 10, True), ([a], 5, False)]
    for idx, (selected, points, is_correct) in enumerate(cases):
        participant = await add_participant(client, admin, name=f"Guest {idx}")
        headers = await login(client, participant["code"])
        response = await client.post(
            "/answers", json={"question_id": question["id"], "choice_ids": selected}, headers=headers
        )
        assert response.status_code == 200
        assert response.json()["points_earned"] == points
        assert response.json()["is_correct"] is is_correct


async def test_free_text_is_recorded_unscored(client, admin, player):
    _, headers = player
    question = await add_question(client, admin, 1, question_type="free_text")
    response = await client.post(
        "/answers", json={"question_id": question["id"], "answer_text": "Lisbon"}, headers=headers
    )
    assert response.json() == {"success": True, "is_correct": False, "points_earned": 0}


async def test_answer_validation(client, admin, player):
    _, headers = player
    question = await add_question(client, admin, 1)
    other = await add_question(client, admin, 2)

    assert (await client.post("/answers", json={"choice_id": "x"}, headers=headers)).status_code == 400
    assert (await client.post("/answers", json={"question_id": "nope"}, headers=headers)).status_code == 404
    assert (await client.post("/answers", json={"question_id": question["id"]}, headers=headers)).status_code == 400
    foreign = await client.post(
        "/answers",
        json={"question_id": question["id"], "choice_id": other["choices"][0]["id"]},
        headers=headers,
    )
    assert foreign.status_code == 400


async def test_answers_need_login(client, admin):
    question = await add_question(client, admin, 1)
    response = await client.post("/answers", json={"question_id": question["id"], "choice_id": "x"})
    assert response.status_code == 401
    assert (await client.get("/answers")).status_code == 401


async def test_latest_answer_and_history(client, admin, player):
    _, headers = player
    assert (await client.get("/answers/latest", headers=headers)).json() is None

    q1 = await add_question(client, admin, 1)
    q2 = await add_question(client, admin, 2, choices=MULTI_CHOICES, question_type="multi_select")
    await client.post("/answers", json={"question_id": q1["id"], "choice_id": q1["choices"][1]["id"]}, headers=headers)
    picked = [q2["choices"][0]["id"], q2["choices"][1]["id"]]
    await client.post("/answers", json={"question_id": q2["id"], "choice_ids": picked}, headers=headers)

    latest = (await client.get("/answers/latest", headers=headers)).json()
    assert latest["question"]["question_number"] == 2
    assert latest["answer"]["points_earned"] == 10
    assert latest["answer"]["selected_choice_ids"] == picked
    assert sorted(latest["correct_choice_ids"]) == sorted(picked)

    history = (await client.get("/answers", headers=headers)).json()
    assert [a["question_id"] for a in history] == [q2["id"], q1["id"]]
