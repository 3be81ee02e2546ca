"""Admin overrides and the seeded admin account."""

import asyncio

import seed_db
from ranker.config import settings


def test_admin_deletes_someone_elses_album(client, make_user, make_admin, add_album):
    _, ada = make_user("Ada")
    _, root = make_admin("Root")
    album = add_album(ada)
    client.get("/albums")

    resp = client.delete(f"/albums/{album['id']}", headers=root)
    assert resp.status_code == 200
    assert client.get("/albums").json() == []


def test_admin_hides_someone_elses_comment(client, make_user, make_admin, add_album):
    _, ada = make_user("Ada")
    _, root = make_admin("Root")
    album = add_album(ada)
    comment = client.post("/comments", json={"album_id": album["id"], "content": "spam"}, headers=ada).json()

    resp = client.put(f"/comments/{comment['id']}", headers=root)
    assert resp.status_code == 200
    assert resp.json()["status"] == "hidden"
    assert client.get(f"/albums/{album['id']}", headers=root).json()["comments"] == []


def test_admin_deletes_someone_elses_user_rating(client, make_user, make_admin):
    ada, ada_h = make_user("Ada")
    _, bob_h = make_user("Bob")
    _, root = make_admin("Root")
    rating = client.post("/users/ratings", json={"user_id": ada["id"], "score": 2}, headers=bob_h).json()

    resp = client.delete(f"/users/ratings/{rating['id']}", headers=root)
    assert resp.status_code == 200
    assert client.get("/users/ratings", params={"userId": ada["id"]}).json()["ratings"] == []


def test_seeded_admin_can_sign_in(client, monkeypatch):
    monkeypatch.setattr(settings, "ADMIN_PASSWORD", "Adm1nSecret")
    asyncio.run(seed_db.async_main())

    resp = client.post("/auth/login", json={"email": settings.ADMIN_EMAIL, "password": "Adm1nSecret"})
    assert resp.status_code == 200
    client.cookies.clear()

    me = client.get("/users/me", headers={"Authorization": f"Bearer {resp.json()['access_token']}"})
    assert me.json()["is_admin"] is True


def test_seed_refuses_without_password(client, monkeypatch):
    monkeypatch.setattr(settings, "ADMIN_PASSWORD", "")
    asyncio.run(seed_db.async_main())

    resp = client.post("/auth/login", json={"email": settings.ADMIN_EMAIL, "password": ""})
    assert resp.status_code == 401
