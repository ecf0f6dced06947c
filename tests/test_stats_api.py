from conftest import add_participant, add_question, login


async def answer(client, headers, question, index):
    response = await client.post(
        "/answers",
        json={"question_id": question["id"], "choice_id": question["choices"][index]["id"]},
        headers=headers,
    )
    assert response.status_code == 200


async def test_leaderboard_and_ranking(client, admin):
    q1 = await add_question(client, admin, 1, points=20)
    q2 = await add_question(client, admin, 2, points=10)
    people = {}
    for name in ("Ann", "Bob", "Cid", "Dan"):
        participant = await add_participant(client, admin, name=name)
        people[name] = await login(client, participant["code"])

    await answer(client, people["Ann"], q1, 0)
    await answer(client, people["Bob"], q2, 0)
    await answer(client, people["Cid"], q2, 0)
    await answer(client, people["Dan"], q1, 1)

    board = (await client.get("/stats/leaderboard")).json()
    assert [(row["name"], row["total_score"], row["rank"]) for row in board] == [
        ("Ann", 20, 1),
        ("Bob", 10, 2),
        ("Cid", 10, 2),
        ("Dan", 0, 4),
    ]
    assert board[0]["correct_count"] == 1
    assert len((await client.get("/stats/leaderboard", params={"limit": 2})).json()) == 2

    assert (await client.get("/stats/ranking", headers=people["Cid"])).json() == {"rank": 2, "total_score": 10}
    assert (await client.get("/stats/ranking", headers=people["Dan"])).json() == {"rank": 4, "total_score": 0}


async def test_answer_breakdown(client, admin):
    question = await add_question(client, admin, 1)
    for idx, pick in enumerate((0, 0, 0, 1)):
        participant = await add_participant(client, admin, name=f"Guest {idx}")
        await answer(client, await login(client, participant["code"]), question, pick)

    stats = (await client.get("/stats/answers", params={"question_id": question["id"]})).json()
    assert stats["total"] == 4
    assert [(s["count"], s["percentage"]) for s in stats["stats"]] == [(3, 75.0), (1, 25.0)]


async def test_active_participants(client, admin):
    assert (await client.get("/stats/participants")).json() == {"count": 0}
    participant = await add_participant(client, admin)
    await login(client, participant["code"])
    await login(client, participant["code"])
    assert (await client.get("/stats/participants")).json() == {"count": 1}
