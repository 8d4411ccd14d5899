import os
import uuid

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from tortoise import Tortoise

from parla.config import settings
from parla.core import db as db_module
from parla.core.bootstrap import assemble_services
from parla.core.security import hash_password
from parla.main import app
from parla.models.user import User
from parla.services import (
    ASRService,
    EmbeddingService,
    SessionStore,
    TextGenerationService,
    TranscriptionResult,
    TTSService,
)


TEST_DB_URL = "sqlite://:memory:?cache=shared"
os.environ["DATABASE_URL"] = TEST_DB_URL
db_module.DB_URL = TEST_DB_URL
db_module.TORTOISE_ORM["connections"]["default"] = TEST_DB_URL


class FakeGenerator(TextGenerationService):
    """
    Scripted text generation.
    Replies are consumed in order; an Exception instance in the queue is raised.
    Once the queue is empty every call returns `default`.
    """

    def __init__(self, replies=None, default: str = "Ciao! Come stai oggi?"):
        self.replies = list(replies or [])
        self.default = default
        self.calls = []

    def queue(self, *replies):
        self.replies.extend(replies)

    async def generate(self, messages, *, system=None, max_tokens=1024):
        self.calls.append({"messages": list(messages), "system": system, "max_tokens": max_tokens})
        if self.replies:
            reply = self.replies.pop(0)
            if isinstance(reply, Exception):
                raise reply
            return reply
        return self.default


class FakeEmbedder(EmbeddingService):
    """Returns `vectors[text]` when present, else `default`; can be told to fail."""

    def __init__(self, default=None):
        self.default = default or [1.0, 0.0, 0.0]
        self.vectors = {}
        self.error = None
        self.calls = []

    async def embed(self, text):
        self.calls.append(text)
        if self.error is not None:
            raise self.error
        return list(self.vectors.get(text, self.default))


class FakeASR(ASRService):
    def __init__(self, text: str = "Ciao, oggi ho parlato con mia sorella."):
        self.text = text
        self.calls = []

    async def transcribe(self, audio, filename="audio.webm", language=None):
        self.calls.append({"audio": audio, "filename": filename, "language": language})
        return TranscriptionResult(full_text=self.text, language=language, duration_sec=2.0)

    def is_available(self):
        return True


class FakeTTS(TTSService):
    def __init__(self, audio: bytes = b"ID3-fake-mp3-bytes"):
        self.audio = audio
        self.calls = []

    async def synthesize(self, text, voice, speed):
        self.calls.append({"text": text, "voice": voice, "speed": speed})
        return self.audio

    def is_available(self):
        return True


async def _init_test_db() -> None:
    """
    Initialize a clean in-memory SQLite database for every test.
    Ensures tables are recreated from scratch.
    """
    if Tortoise._inited:
        await Tortoise.close_connections()
    await Tortoise.init(config=db_module.TORTOISE_ORM)
    await Tortoise.generate_schemas()


@pytest_asyncio.fixture
async def db():
    """Fresh in-memory database for tests that use the ORM without HTTP."""
    await _init_test_db()
    yield
    await Tortoise.close_connections()


@pytest.fixture
def fake_generator():
    return FakeGenerator()


@pytest.fixture
def fake_embedder():
    return FakeEmbedder()


@pytest.fixture
def fake_asr():
    return FakeASR()


@pytest.fixture
def fake_tts():
    return FakeTTS()


@pytest.fixture
def services(fake_generator, fake_embedder, fake_asr, fake_tts):
    """Real store and pipeline wired to fake providers."""
    return assemble_services(
        store=SessionStore(),
        generator=fake_generator,
        embedder=fake_embedder,
        asr=fake_asr,
        tts=fake_tts,
        settings=settings,
    )


@pytest_asyncio.fixture
async def client(db, services):
    """
    Provide an HTTPX AsyncClient bound to the FastAPI app with a fresh DB
    and fake provider services.
    """
    original = app.state.services
    app.state.services = services
    # Use ASGITransport without lifespan parameter (not supported in all httpx versions)
    try:
        transport = ASGITransport(app=app, lifespan="off")
    except TypeError:
        # Fallback for httpx versions that don't support lifespan parameter
        transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as async_client:
        yield async_client
    app.state.services = original


@pytest_asyncio.fixture
async def create_user():
    """
    Factory fixture to create learners directly via the ORM.
    """

    async def _create_user(password: str = "UserPass!23", name: str = "Giulia", **fields) -> tuple[User, str]:
        user = await User.create(
            email=f"{uuid.uuid4().hex[:8]}@example.com",
            name=name,
            password_hash=hash_password(password),
            **fields,
        )
        return user, password

    return _create_user


@pytest_asyncio.fixture
async def auth_header_factory(client):
    """
    Helper fixture to obtain Authorization headers via the login endpoint.
    """

    async def _get_headers(email: str, password: str) -> dict[str, str]:
        resp = await client.post(
            "/api/v1/auth/login",
            json={"email": email, "password": password},
        )
        assert resp.status_code == 200, resp.text
        token = resp.json()["data"]["accessToken"]
        return {"Authorization": f"Bearer {token}"}

    return _get_headers
