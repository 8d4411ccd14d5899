import pytest

from parla.config import TTS_SPEED_OPTIONS


pytestmark = pytest.mark.asyncio


async def test_get_and_update_settings(client, create_user, auth_header_factory):
    user, password = await create_user()
    headers = await auth_header_factory(user.email, password)

    resp = await client.get("/api/v1/settings", headers=headers)
    data = resp.json()["data"]
    assert data["ttsSpeed"] == 0.85
    assert data["ttsSpeedOptions"] == TTS_SPEED_OPTIONS
    assert data["personality"] == "maria"

    update = await client.post(
        "/api/v1/settings",
        json={"ttsSpeed": 1.1, "personality": "giuseppe"},
        headers=headers,
    )
    assert update.status_code == 200
    assert update.json()["data"]["ttsSpeed"] == 1.1
    assert update.json()["data"]["personality"] == "giuseppe"

    partial = await client.post("/api/v1/settings", json={"ttsSpeed": 0.7}, headers=headers)
    assert partial.json()["data"]["personality"] == "giuseppe"

    again = await client.get("/api/v1/settings", headers=headers)
    assert again.json()["data"]["ttsSpeed"] == 0.7
    assert again.json()["data"]["personality"] == "giuseppe"


async def test_invalid_settings_rejected(client, create_user, auth_header_factory):
    user, password = await create_user()
    headers = await auth_header_factory(user.email, password)

    bad_speed = await client.post("/api/v1/settings", json={"ttsSpeed": 0.75}, headers=headers)
    assert bad_speed.status_code == 400
    assert bad_speed.json()["detail"]["message"] == "Invalid speed setting"

    bad_personality = await client.post("/api/v1/settings", json={"personality": "dante"}, headers=headers)
    assert bad_personality.status_code == 400

    unchanged = await client.get("/api/v1/settings", headers=headers)
    assert unchanged.json()["data"]["ttsSpeed"] == 0.85


async def test_list_personalities(client):
    resp = await client.get("/api/v1/personalities")
    items = resp.json()["data"]["items"]
    assert [p["id"] for p in items] == ["maria", "giuseppe", "sofia", "marco", "lucia"]
    assert all(p["voice"] for p in items)
