"""
Shared fixtures: a throwaway SQLite database, fake Spotify / Imgur clients,
and helpers that register and sign in users through the API.
"""

import asyncio
import os
import tempfile

import pytest

_tmpdir = tempfile.mkdtemp(prefix="ranker-tests-")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{os.path.join(_tmpdir, 'test.db')}"

from fastapi.testclient import TestClient  # noqa: E402

from ranker.database import Base, async_session, engine  # noqa: E402
from ranker.errors import UpstreamError  # noqa: E402
from ranker.main import app  # noqa: E402
from ranker.models.user import User  # noqa: E402
from ranker.services.imgur import get_image_host  # noqa: E402
from ranker.services.spotify import get_catalog  # noqa: E402

PASSWORD = "Sup3rSecret"


def spotify_album(spotify_id: str, name: str, artist: str, tracks: int = 3) -> dict:
    return {
        "id": spotify_id,
        "name": name,
        "artists": [{"name": artist}],
        "images": [{"url": f"https://i.scdn.co/image/{spotify_id}"}],
        "release_date": "2020-01-01",
        "tracks": {
            "items": [
                {"name": f"{name} {n}", "duration_ms": 180000 + n, "track_number": n}
                for n in range(1, tracks + 1)
            ]
        },
    }


class FakeCatalog:
    """Stands in for ``SpotifyCatalog``; knows a handful of albums."""

    def __init__(self):
        self.albums = {
            "sp-kid-a": spotify_album("sp-kid-a", "Kid A", "Radiohead"),
            "sp-ok": spotify_album("sp-ok", "OK Computer", "Radiohead"),
            "sp-blonde": spotify_album("sp-blonde", "Blonde", "Frank Ocean", tracks=2),
            "sp-igor": spotify_album("sp-igor", "IGOR", "Tyler, The Creator"),
        }

    async def search(self, query: str):
        q = query.lower()
        return [a for a in self.albums.values() if q in a["name"].lower()][:10]

    async def fetch_album(self, spotify_id: str):
        if spotify_id not in self.albums:
            raise UpstreamError("Failed to fetch album")
        return self.albums[spotify_id]


class FakeImageHost:
    async def upload(self, base64_image: str) -> str:
        if base64_image == "not-an-image":
            raise UpstreamError("Invalid image")
        return "https://i.imgur.com/avatar.png"


async def _reset_schema():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def client():
    asyncio.run(_reset_schema())
    app.dependency_overrides[get_catalog] = FakeCatalog
    app.dependency_overrides[get_image_host] = FakeImageHost
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def register(client: TestClient, name: str, email: str = None, **extra) -> dict:
    email = email or f"{name.lower()}@ranker.dev"
    resp = client.post(
        "/auth/register",
        json={"name": name, "email": email, "password": PASSWORD, **extra},
    )
    assert resp.status_code == 201, resp.text
    return resp.json()


def login(client: TestClient, email: str) -> dict:
    resp = client.post("/auth/login", json={"email": email, "password": PASSWORD})
    assert resp.status_code == 200, resp.text
    return {"Authorization": f"Bearer {resp.json()['access_token']}"}


@pytest.fixture
def make_user(client):
    """Register + sign in; returns ``(user, auth_headers)``."""

    def _make(name: str):
        user = register(client, name)
        headers = login(client, user["email"])
        # Cookie auth is exercised separately; keep requests header-only.
        client.cookies.clear()
        return user, headers

    return _make


@pytest.fixture
def add_album(client):
    """Import a fake-catalog album as the given user; returns the album JSON."""

    def _add(headers: dict, spotify_id: str = "sp-kid-a"):
        resp = client.post("/albums", json={"spotify_id": spotify_id}, headers=headers)
        assert resp.status_code == 201, resp.text
        return resp.json()

    return _add


async def _promote(user_id: int):
    async with async_session() as session:
        user = await session.get(User, user_id)
        user.is_admin = True
        await session.commit()


@pytest.fixture
def make_admin(make_user):
    """Like ``make_user`` but the account is flagged as admin."""

    def _make(name: str):
        user, headers = make_user(name)
        asyncio.run(_promote(user["id"]))
        return user, headers

    return _make
