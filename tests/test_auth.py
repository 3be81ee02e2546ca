from tests.conftest import PASSWORD, register


def test_register_login_and_me(client):
    user = register(client, "Ada")
    assert user["email"] == "ada@ranker.dev"
    assert user["image"] is None
    assert "password_hash" not in user

    resp = client.post("/auth/login", json={"email": "ADA@ranker.dev", "password": PASSWORD})
    assert resp.status_code == 200
    token = resp.json()["access_token"]
    assert resp.json()["token_type"] == "bearer"

    me = client.get("/users/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200
    assert me.json()["id"] == user["id"]


def test_login_sets_cookie_that_authenticates(client):
    register(client, "Cookie")
    client.post("/auth/login", json={"email": "cookie@ranker.dev", "password": PASSWORD})
    assert client.get("/users/me").status_code == 200

    client.get("/auth/logout")
    client.cookies.clear()
    assert client.get("/users/me").status_code == 401


def test_register_rejects_duplicates(client):
    register(client, "Ada")

    same_email = client.post(
        "/auth/register",
        json={"name": "Other", "email": "ada@ranker.dev", "password": PASSWORD},
    )
    assert same_email.status_code == 400
    assert same_email.json()["detail"] == "User with this email already exists"

    same_name = client.post(
        "/auth/register",
        json={"name": "Ada", "email": "ada2@ranker.dev", "password": PASSWORD},
    )
    assert same_name.status_code == 400
    assert same_name.json()["detail"] == "User with this name already exists"


def test_register_validates_password(client):
    resp = client.post(
        "/auth/register",
        json={"name": "Weak", "email": "weak@ranker.dev", "password": "alllowercase1"},
    )
    assert resp.status_code == 400
    assert "uppercase" in resp.json()["detail"]


def test_register_uploads_profile_image(client):
    user = register(client, "Pic", profile_image="data:image/png;base64,aGVsbG8=")
    assert user["image"] == "https://i.imgur.com/avatar.png"


def test_failed_image_upload_creates_no_user(client):
    resp = client.post(
        "/auth/register",
        json={
            "name": "Broken",
            "email": "broken@ranker.dev",
            "password": PASSWORD,
            "profile_image": "not-an-image",
        },
    )
    assert resp.status_code == 502
    assert resp.json()["detail"] == "Image upload failed: Invalid image"

    login = client.post("/auth/login", json={"email": "broken@ranker.dev", "password": PASSWORD})
    assert login.status_code == 401


def test_wrong_password_is_rejected(client):
    register(client, "Ada")
    resp = client.post("/auth/login", json={"email": "ada@ranker.dev", "password": "Nope12345"})
    assert resp.status_code == 401


def test_public_profile_lookup(client):
    user = register(client, "Ada")
    resp = client.get(f"/users/{user['id']}")
    assert resp.status_code == 200
    assert resp.json() == {"id": user["id"], "name": "Ada", "image": None}
    assert client.get("/users/999").status_code == 404
