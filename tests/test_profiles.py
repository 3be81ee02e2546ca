"""Profile ratings, profile comments, upvotes, avatar and flairs."""


def _comments(client, user_id):
    resp = client.get("/users/comments", params={"userId": user_id})
    assert resp.status_code == 200
    return resp.json()["comments"]


def _comment(client, headers, user_id, content):
    resp = client.post("/users/comments", json={"user_id": user_id, "content": content}, headers=headers)
    assert resp.status_code == 200, resp.text
    return resp.json()


def _upvote(client, headers, comment_id, remove=False):
    resp = client.post(
        f"/users/comments/{comment_id}/upvote", json={"remove": remove}, headers=headers
    )
    assert resp.status_code == 200, resp.text
    return resp.json()


# ── Profile ratings ──

def test_user_rating_upsert_and_delete(client, make_user):
    ada, ada_h = make_user("Ada")
    bob, bob_h = make_user("Bob")

    first = client.post("/users/ratings", json={"user_id": ada["id"], "score": 4}, headers=bob_h)
    assert first.status_code == 200
    client.post("/users/ratings", json={"user_id": ada["id"], "score": 7}, headers=bob_h)

    ratings = client.get("/users/ratings", params={"userId": ada["id"]}).json()["ratings"]
    assert [(r["rater_user_id"], r["score"]) for r in ratings] == [(bob["id"], 7)]

    rating_id = ratings[0]["id"]
    resp = client.delete(f"/users/ratings/{rating_id}", headers=ada_h)
    assert resp.status_code == 403
    assert resp.json()["detail"] == "You can only delete your own ratings"

    assert client.delete(f"/users/ratings/{rating_id}", headers=bob_h).status_code == 200
    assert client.get("/users/ratings", params={"userId": ada["id"]}).json()["ratings"] == []


def test_user_rating_validation_and_missing_target(client, make_user):
    ada, headers = make_user("Ada")
    bad = client.post("/users/ratings", json={"user_id": ada["id"], "score": 11}, headers=headers)
    assert bad.status_code == 400
    missing = client.post("/users/ratings", json={"user_id": 999, "score": 5}, headers=headers)
    assert missing.status_code == 404


# ── Profile comments + votes ──

def test_comment_length_limit(client, make_user):
    ada, headers = make_user("Ada")
    resp = client.post(
        "/users/comments", json={"user_id": ada["id"], "content": "x" * 21}, headers=headers
    )
    assert resp.status_code == 400
    assert resp.json()["detail"] == "content: Comment content must be 20 characters or less"

    ok = _comment(client, headers, ada["id"], "  " + "y" * 20 + "  ")
    assert ok["content"] == "y" * 20


def test_comments_on_unknown_user_is_404(client):
    assert client.get("/users/comments", params={"userId": 404}).status_code == 404


def test_vote_count_tracks_voters(client, make_user):
    ada, ada_h = make_user("Ada")
    bob, bob_h = make_user("Bob")
    cy, cy_h = make_user("Cy")
    comment = _comment(client, bob_h, ada["id"], "solid taste")
    assert comment["votes"] == 0
    assert comment["upvoted_by"] == []

    after = _upvote(client, ada_h, comment["id"])
    assert after["votes"] == 1
    assert after["upvoted_by"] == [ada["id"]]

    # A second upvote by the same user changes nothing.
    assert _upvote(client, ada_h, comment["id"])["votes"] == 1

    after = _upvote(client, cy_h, comment["id"])
    assert after["votes"] == 2
    assert sorted(after["upvoted_by"]) == sorted([ada["id"], cy["id"]])

    after = _upvote(client, ada_h, comment["id"], remove=True)
    assert after["votes"] == 1
    assert after["upvoted_by"] == [cy["id"]]

    # Removing a vote that is not there changes nothing either.
    assert _upvote(client, bob_h, comment["id"], remove=True)["votes"] == 1

    listed = _comments(client, ada["id"])
    assert [(c["votes"], c["upvoted_by"]) for c in listed] == [(1, [cy["id"]])]


def test_upvote_without_body_adds_a_vote(client, make_user):
    ada, ada_h = make_user("Ada")
    _, bob_h = make_user("Bob")
    comment = _comment(client, bob_h, ada["id"], "hi")
    resp = client.post(f"/users/comments/{comment['id']}/upvote", headers=ada_h)
    assert resp.status_code == 200
    assert resp.json()["votes"] == 1


def test_resubmitting_a_comment_resets_its_votes(client, make_user):
    ada, ada_h = make_user("Ada")
    _, bob_h = make_user("Bob")
    original = _comment(client, bob_h, ada["id"], "first take")
    _upvote(client, ada_h, original["id"])

    replaced = _comment(client, bob_h, ada["id"], "second take")
    assert replaced["id"] == original["id"]
    assert replaced["content"] == "second take"
    assert replaced["votes"] == 0
    assert replaced["upvoted_by"] == []

    assert [c["content"] for c in _comments(client, ada["id"])] == ["second take"]


def test_only_author_deletes_profile_comment(client, make_user):
    ada, ada_h = make_user("Ada")
    _, bob_h = make_user("Bob")
    comment = _comment(client, bob_h, ada["id"], "bye")
    _upvote(client, ada_h, comment["id"])

    assert client.delete(f"/users/comments/{comment['id']}", headers=ada_h).status_code == 403
    assert client.delete(f"/users/comments/{comment['id']}", headers=bob_h).status_code == 200
    assert _comments(client, ada["id"]) == []
    assert client.delete(f"/users/comments/{comment['id']}", headers=bob_h).status_code == 404


# ── Avatar + flairs ──

def test_avatar_for_quiet_user(client, make_user):
    ada, headers = make_user("Ada")
    avatar = client.get("/users/avatar", params={"userId": ada["id"]}).json()
    assert avatar["name"] == "Ada"
    assert avatar["average_rating"] is None
    assert avatar["rating_count"] == 0
    assert avatar["flairs"] == ["Fan Nane"]

    assert client.get("/users/avatar", headers=headers).json()["id"] == ada["id"]
    assert client.get("/users/avatar").status_code == 401
    assert client.get("/users/avatar", params={"userId": 999}).status_code == 404


def test_flairs_follow_received_ratings_comments_and_votes(client, make_user):
    ada, ada_h = make_user("Ada")
    _, bob_h = make_user("Bob")
    _, cy_h = make_user("Cy")

    def avatar():
        return client.get("/users/avatar", params={"userId": ada["id"]}).json()

    client.post("/users/ratings", json={"user_id": ada["id"], "score": 10}, headers=ada_h)
    client.post("/users/ratings", json={"user_id": ada["id"], "score": 7}, headers=bob_h)
    assert avatar()["flairs"] == ["Echo Warrior"]
    assert avatar()["average_rating"] == 8.5
    assert avatar()["rating_count"] == 2

    bobs = _comment(client, bob_h, ada["id"], "great ears")
    own = _comment(client, ada_h, ada["id"], "me me me")
    _upvote(client, cy_h, bobs["id"])
    assert avatar()["flairs"] == ["Echo Warrior", "great ears", "Dubios"]

    _upvote(client, bob_h, own["id"])
    _upvote(client, cy_h, own["id"])
    assert avatar()["flairs"] == ["Echo Warrior", "me me me", "Shukar"]


def test_ratings_of_unknown_user_is_404(client):
    assert client.get("/users/ratings", params={"userId": 404}).status_code == 404
