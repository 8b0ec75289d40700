def test_add_list_remove(client, seed_clips):
    (clip_id,) = seed_clips({"title": "Keeper"})

    created = client.post("/api/favorites", json={"userId": "user-1", "audioId": clip_id})
    assert created.status_code == 201
    assert created.json()["data"]["audioId"] == clip_id

    again = client.post("/api/favorites", json={"userId": "user-1", "audioId": clip_id})
    assert again.status_code == 200
    assert again.json()["data"]["id"] == created.json()["data"]["id"]

    listed = client.get("/api/favorites", params={"userId": "user-1"}).json()
    assert listed["success"] is True
    assert len(listed["data"]) == 1
    assert listed["data"][0]["audio"]["title"] == "Keeper"

    assert client.get("/api/favorites", params={"userId": "user-2"}).json()["data"] == []

    removed = client.delete(f"/api/favorites/{clip_id}", params={"userId": "user-1"})
    assert removed.status_code == 200
    assert removed.json()["success"] is True

    missing = client.delete(f"/api/favorites/{clip_id}", params={"userId": "user-1"})
    assert missing.status_code == 404


def test_favorites_newest_first(client, seed_clips):
    first, second = seed_clips({"title": "First"}, {"title": "Second"})
    client.post("/api/favorites", json={"userId": "u", "audioId": first})
    client.post("/api/favorites", json={"userId": "u", "audioId": second})
    titles = [fav["audio"]["title"] for fav in client.get("/api/favorites", params={"userId": "u"}).json()["data"]]
    assert titles == ["Second", "First"]


def test_add_unknown_clip_is_404(client):
    response = client.post("/api/favorites", json={"userId": "u", "audioId": "b" * 24})
    assert response.status_code == 404
    assert response.json() == {"success": False, "error": "Audio not found"}


def test_malformed_audio_id_is_400(client):
    response = client.post("/api/favorites", json={"userId": "u", "audioId": "nope"})
    assert response.status_code == 400
    assert client.delete("/api/favorites/nope", params={"userId": "u"}).status_code == 400


def test_user_id_required(client):
    response = client.get("/api/favorites")
    assert response.status_code == 400
    assert response.json()["success"] is False
    assert client.post("/api/favorites", json={"audioId": "a" * 24}).status_code == 400
