from datetime import timedelta

from bson import ObjectId

from api.security import create_access_token

POST_TEXT = {"text": "Shipping a new side project today"}
PROFILE = {"handle": "alice", "status": "Developer", "skills": "js,go,rust"}


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_private_routes_require_a_token(client):
    response = client.post("/api/posts", json=POST_TEXT)

    assert response.status_code == 401
    assert response.json() == {"unauthorized": "Not authenticated"}


def test_bad_and_expired_tokens_are_rejected(client, make_user):
    alice = make_user("Alice")
    expired = create_access_token({"id": alice["id"]}, expires_delta=timedelta(seconds=-30))

    for token in ("garbage", expired):
        response = client.get("/api/profile", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401
        assert "unauthorized" in response.json()


def test_token_for_unknown_user_is_rejected(client):
    token = create_access_token({"id": str(ObjectId()), "name": "Ghost"})

    response = client.get("/api/profile", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401
    assert response.json() == {"unauthorized": "User no longer exists"}


def test_post_lifecycle(client, make_user):
    alice = make_user("Alice")
    bob = make_user("Bob")

    assert client.get("/api/posts").status_code == 404

    short = client.post("/api/posts", json={"text": "short"}, headers=alice["headers"])
    assert short.status_code == 400
    assert set(short.json()) == {"text"}

    created = client.post("/api/posts", json=POST_TEXT, headers=alice["headers"])
    assert created.status_code == 200
    post = created.json()
    assert post["name"] == "Alice"
    assert post["user"] == alice["id"]

    listed = client.get("/api/posts")
    assert listed.status_code == 200
    assert [item["id"] for item in listed.json()] == [post["id"]]

    forbidden = client.delete(f"/api/posts/{post['id']}", headers=bob["headers"])
    assert forbidden.status_code == 401
    assert forbidden.json() == {"notauthorized": "User not authorized"}

    deleted = client.delete(f"/api/posts/{post['id']}", headers=alice["headers"])
    assert deleted.status_code == 200
    assert deleted.json() == {"success": True}

    assert client.get(f"/api/posts/{post['id']}").status_code == 404
    assert client.delete(f"/api/posts/{post['id']}", headers=alice["headers"]).status_code == 404


def test_like_and_unlike_status_codes(client, make_user):
    alice = make_user("Alice")
    post = client.post("/api/posts", json=POST_TEXT, headers=alice["headers"]).json()

    first = client.post(f"/api/posts/like/{post['id']}", headers=alice["headers"])
    assert first.status_code == 200
    assert first.json()["likes"] == [{"user": alice["id"]}]

    again = client.post(f"/api/posts/like/{post['id']}", headers=alice["headers"])
    assert again.status_code == 400
    assert again.json() == {"alreadyliked": "User already liked this post"}

    assert client.post(f"/api/posts/unlike/{post['id']}", headers=alice["headers"]).status_code == 200
    not_liked = client.post(f"/api/posts/unlike/{post['id']}", headers=alice["headers"])
    assert not_liked.status_code == 400
    assert "notliked" in not_liked.json()

    missing = client.post(f"/api/posts/like/{ObjectId()}", headers=alice["headers"])
    assert missing.status_code == 400
    assert missing.json() == {"nopost": "That post does not exist"}


def test_comments_over_http(client, make_user):
    alice = make_user("Alice")
    bob = make_user("Bob")
    post = client.post("/api/posts", json=POST_TEXT, headers=alice["headers"]).json()

    invalid = client.post(f"/api/posts/comment/{post['id']}", json={"text": ""}, headers=bob["headers"])
    assert invalid.status_code == 400
    assert invalid.json() == {"text": "Text must be between 10 and 300 characters"}

    missing_post = client.post(f"/api/posts/comment/{ObjectId()}", json=POST_TEXT, headers=bob["headers"])
    assert missing_post.status_code == 400

    commented = client.post(
        f"/api/posts/comment/{post['id']}",
        json={"text": "Congrats, looks great!"},
        headers=bob["headers"],
    )
    assert commented.status_code == 200
    comment = commented.json()["comments"][0]
    assert comment["name"] == "Bob"

    unknown = client.delete(f"/api/posts/comment/{post['id']}/{ObjectId()}", headers=bob["headers"])
    assert unknown.status_code == 400
    assert unknown.json() == {"nocomment": "That comment does not exist"}

    removed = client.delete(f"/api/posts/comment/{post['id']}/{comment['id']}", headers=bob["headers"])
    assert removed.status_code == 200
    assert removed.json()["comments"] == []


def test_profile_routes(client, make_user):
    alice = make_user("Alice")
    bob = make_user("Bob")

    assert client.get("/api/profile", headers=alice["headers"]).status_code == 404
    assert client.get("/api/profile/all").status_code == 404

    invalid = client.post("/api/profile", json={"handle": "alice"}, headers=alice["headers"])
    assert invalid.status_code == 400
    assert set(invalid.json()) == {"status", "skills"}

    created = client.post("/api/profile", json=PROFILE, headers=alice["headers"])
    assert created.status_code == 200
    assert created.json()["skills"] == ["js", "go", "rust"]
    assert created.json()["user"]["name"] == "Alice"

    taken = client.post("/api/profile", json=PROFILE, headers=bob["headers"])
    assert taken.status_code == 400
    assert taken.json() == {"handle": "That handle already exists"}

    assert client.get("/api/profile/handle/alice").json()["user"]["id"] == alice["id"]
    assert client.get(f"/api/profile/user/{alice['id']}").json()["handle"] == "alice"
    assert client.get("/api/profile/handle/nobody").status_code == 404
    assert len(client.get("/api/profile/all").json()) == 1


def test_experience_and_education_routes(client, make_user):
    alice = make_user("Alice")

    no_profile = client.post(
        "/api/profile/experience",
        json={"title": "Dev", "company": "Acme", "from": "2020-01-01T00:00:00"},
        headers=alice["headers"],
    )
    assert no_profile.status_code == 404

    client.post("/api/profile", json=PROFILE, headers=alice["headers"])

    added = client.post(
        "/api/profile/experience",
        json={"title": "Dev", "company": "Acme", "from": "2020-01-01T00:00:00", "current": True},
        headers=alice["headers"],
    )
    assert added.status_code == 200
    experience = added.json()["experience"][0]
    assert experience["title"] == "Dev"
    assert experience["from"].startswith("2020-01-01")

    missing_fields = client.post("/api/profile/education", json={"school": "MIT"}, headers=alice["headers"])
    assert missing_fields.status_code == 400
    assert set(missing_fields.json()) == {"degree", "fieldofstudy", "from"}

    removed = client.delete(f"/api/profile/experience/{experience['id']}", headers=alice["headers"])
    assert removed.status_code == 200
    assert removed.json()["experience"] == []

    again = client.delete(f"/api/profile/experience/{experience['id']}", headers=alice["headers"])
    assert again.status_code == 400
    assert again.json() == {"experience": "Experience not found"}

    unknown_edu = client.delete(f"/api/profile/education/{ObjectId()}", headers=alice["headers"])
    assert unknown_edu.status_code == 400
    assert unknown_edu.json() == {"education": "Education not found"}


def test_delete_profile_removes_the_account(client, make_user):
    alice = make_user("Alice")
    client.post("/api/profile", json=PROFILE, headers=alice["headers"])

    response = client.delete("/api/profile", headers=alice["headers"])

    assert response.status_code == 200
    assert response.json() == {"success": True}
    assert client.get("/api/profile", headers=alice["headers"]).status_code == 401
    assert client.get("/api/profile/handle/alice").status_code == 404
