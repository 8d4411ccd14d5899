import pytest

from parla.core.errors import UpstreamError
from parla.services.context_retriever import FIRST_SESSION_MARKER, RELEVANT_HEADER
from parla.services.prompts import GREETING_PROMPT


pytestmark = pytest.mark.asyncio


async def _login(create_user, auth_header_factory, **fields):
    user, password = await create_user(**fields)
    headers = await auth_header_factory(user.email, password)
    return user, headers


async def test_greeting_for_first_session(client, create_user, auth_header_factory, fake_generator, fake_embedder):
    _, headers = await _login(create_user, auth_header_factory, personality="lucia")
    fake_generator.queue("Ciao! Di cosa vuoi parlare oggi?")

    resp = await client.post("/api/v1/chat", json={"isGreeting": True}, headers=headers)

    assert resp.status_code == 200, resp.text
    assert resp.json()["data"]["response"] == "Ciao! Di cosa vuoi parlare oggi?"
    call = fake_generator.calls[0]
    assert call["messages"] == [{"role": "user", "content": GREETING_PROMPT}]
    assert "named Lucia" in call["system"]
    assert FIRST_SESSION_MARKER in call["system"]
    assert fake_embedder.calls == []


async def test_chat_turn_uses_relevant_history(
    client, create_user, auth_header_factory, services, fake_generator, fake_embedder
):
    user, headers = await _login(create_user, auth_header_factory)
    related = await services.store.create_session(user.id, "User: La carbonara", "Cooked carbonara", "Food words", 60)
    unrelated = await services.store.create_session(user.id, "User: Il calcio", "Talked about football", "Sports", 60)
    await services.store.store_session_embedding(related.id, user.id, [1.0, 0.0, 0.0], "related")
    await services.store.store_session_embedding(unrelated.id, user.id, [0.0, 1.0, 0.0], "unrelated")
    fake_embedder.default = [1.0, 0.0, 0.0]

    resp = await client.post(
        "/api/v1/chat",
        json={
            "message": "Stasera cucino la pasta",
            "history": [{"role": "assistant", "content": "Ciao! Cosa fai stasera?"}],
        },
        headers=headers,
    )

    assert resp.status_code == 200, resp.text
    call = fake_generator.calls[0]
    assert call["messages"][-1] == {"role": "user", "content": "Stasera cucino la pasta"}
    system = call["system"]
    assert "This user has completed 2 previous session(s)." in system
    relevant = system.split(RELEVANT_HEADER, 1)[1]
    assert "Cooked carbonara" in relevant
    assert "Talked about football" not in relevant
    assert fake_embedder.calls == ["Ciao! Cosa fai stasera?\nStasera cucino la pasta"]


async def test_chat_degrades_when_embeddings_fail(
    client, create_user, auth_header_factory, services, fake_generator, fake_embedder
):
    user, headers = await _login(create_user, auth_header_factory)
    await services.store.create_session(user.id, "User: Ciao", "Earlier chat", "Notes", 60)
    fake_embedder.error = UpstreamError("embeddings down")

    resp = await client.post("/api/v1/chat", json={"message": "Ciao"}, headers=headers)

    assert resp.status_code == 200
    assert "Earlier chat" in fake_generator.calls[0]["system"]
    assert RELEVANT_HEADER not in fake_generator.calls[0]["system"]


async def test_chat_requires_message(client, create_user, auth_header_factory, fake_generator):
    _, headers = await _login(create_user, auth_header_factory)
    resp = await client.post("/api/v1/chat", json={"message": "  "}, headers=headers)
    assert resp.status_code == 400
    assert fake_generator.calls == []


async def test_chat_upstream_failure(client, create_user, auth_header_factory, fake_generator):
    _, headers = await _login(create_user, auth_header_factory)
    fake_generator.queue(UpstreamError("rate limited"))
    resp = await client.post("/api/v1/chat", json={"message": "Ciao"}, headers=headers)
    assert resp.status_code == 502
    assert resp.json()["detail"]["code"] == "UPSTREAM_FAILED"


async def test_chat_requires_auth(client, fake_generator):
    client.cookies.clear()
    resp = await client.post("/api/v1/chat", json={"message": "Ciao"})
    assert resp.status_code == 401
    assert fake_generator.calls == []
