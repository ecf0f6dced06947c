from app.core.config import settings

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


async def test_upload_and_delete_image(client, admin):
    response = await client.post(
        "/upload",
        data={"kind": "explanation"},
        files={"file": ("cake.png", PNG_BYTES, "image/png")},
        headers=admin,
    )
    assert response.status_code == 200
    body = response.json()
    assert body["url"].startswith("/media/quiz-images/explanation-")
    stored = settings.media_root / "quiz-images" / body["filename"]
    assert stored.read_bytes() == PNG_BYTES

    deleted = await client.delete("/upload", params={"url": body["url"]}, headers=admin)
    assert deleted.status_code == 200
    assert not stored.exists()
    assert (await client.delete("/upload", params={"url": body["url"]}, headers=admin)).status_code == 404


async def test_upload_rejects_non_images(client, admin):
    response = await client.post(
        "/upload",
        data={"kind": "question"},
        files={"file": ("notes.txt", b"hello", "text/plain")},
        headers=admin,
    )
    assert response.status_code == 400


async def test_upload_rejects_large_files(client, admin):
    payload = b"\x00" * (settings.max_upload_bytes + 1)
    response = await client.post(
        "/upload",
        data={"kind": "message"},
        files={"file": ("big.jpg", payload, "image/jpeg")},
        headers=admin,
    )
    assert response.status_code == 400


async def test_upload_requires_admin(client):
    response = await client.post("/upload", files={"file": ("cake.png", PNG_BYTES, "image/png")})
    assert response.status_code == 401


async def test_upload_at_the_size_limit_is_stored_whole(client, admin):
    payload = b"\xff\xd8" + b"\x00" * (settings.max_upload_bytes - 2)
    response = await client.post(
        "/upload",
        data={"kind": "message"},
        files={"file": ("edge.jpg", payload, "image/jpeg")},
        headers=admin,
    )
    assert response.status_code == 200
    stored = settings.media_root / "quiz-images" / response.json()["filename"]
    assert stored.stat().st_size == settings.max_upload_bytes
