import pytest
from bson import ObjectId

from embedded_collection import COMMENTS, EXPERIENCE, LIKES, mutate, persist
from errors import (
    AlreadyLikedError,
    ConcurrentUpdateError,
    NotFoundError,
    NotLikedError,
    ProfileNotFoundError,
)


def _profile(*titles):
    return {
        "_id": ObjectId(),
        "user": "u1",
        "experience": [{"_id": str(ObjectId()), "title": title} for title in titles],
        "version": 0,
    }


def test_insert_prepends_with_fresh_identity_and_leaves_parent_alone():
    parent = _profile("old")

    updated = EXPERIENCE.insert(parent, {"title": "new"})

    assert [entry["title"] for entry in updated["experience"]] == ["new", "old"]
    assert updated["experience"][0]["_id"] != parent["experience"][0]["_id"]
    assert [entry["title"] for entry in parent["experience"]] == ["old"]


def test_find_by_identity():
    parent = _profile("a", "b")
    wanted = parent["experience"][1]

    assert EXPERIENCE.find(parent, wanted["_id"]) == wanted
    assert EXPERIENCE.find(parent, str(ObjectId())) is None


def test_remove_keeps_order_of_remaining_entries():
    parent = _profile("a", "b", "c")

    updated = EXPERIENCE.remove(parent, parent["experience"][1]["_id"])

    assert [entry["title"] for entry in updated["experience"]] == ["a", "c"]


def test_remove_unknown_identity_fails_without_mutation():
    parent = _profile("a", "b")
    before = [dict(entry) for entry in parent["experience"]]

    with pytest.raises(NotFoundError) as excinfo:
        EXPERIENCE.remove(parent, str(ObjectId()))

    assert excinfo.value.errors == {"experience": "Experience not found"}
    assert parent["experience"] == before


def test_comment_remove_unknown_reports_nocomment():
    post = {"_id": ObjectId(), "comments": [{"_id": "c1", "text": "hello there"}]}

    with pytest.raises(NotFoundError) as excinfo:
        COMMENTS.remove(post, "c2")

    assert "nocomment" in excinfo.value.errors
    assert post["comments"] == [{"_id": "c1", "text": "hello there"}]


def test_likes_are_keyed_by_user_and_toggle_guarded():
    post = {"_id": ObjectId(), "likes": [{"user": "u2"}]}

    liked = LIKES.insert(post, {"user": "u1"})
    assert liked["likes"] == [{"user": "u1"}, {"user": "u2"}]

    with pytest.raises(AlreadyLikedError):
        LIKES.insert(liked, {"user": "u1"})

    unliked = LIKES.remove(liked, "u1")
    assert unliked["likes"] == post["likes"]

    with pytest.raises(NotLikedError):
        LIKES.remove(unliked, "u1")


def test_persist_bumps_version_and_rejects_stale_writes(mongo):
    collection = mongo["profiles"]
    parent = _profile("a")
    collection.insert_one(parent)

    saved = persist(collection, EXPERIENCE.insert(parent, {"title": "b"}))
    assert saved["version"] == 1
    assert collection.find_one({"_id": parent["_id"]})["version"] == 1

    with pytest.raises(ConcurrentUpdateError):
        persist(collection, EXPERIENCE.insert(parent, {"title": "stale"}))
    assert len(collection.find_one({"_id": parent["_id"]})["experience"]) == 2


def test_mutate_retries_after_a_concurrent_write(mongo):
    collection = mongo["profiles"]
    parent = _profile("a")
    collection.insert_one(parent)
    calls = []

    def change(doc):
        calls.append(doc["version"])
        if len(calls) == 1:
            # Someone else saves the document between our read and write.
            collection.update_one({"_id": doc["_id"]}, {"$inc": {"version": 1}})
        return EXPERIENCE.insert(doc, {"title": "b"})

    saved = mutate(collection, {"user": "u1"}, change, ProfileNotFoundError)

    assert calls == [0, 1]
    assert saved["version"] == 2
    assert [entry["title"] for entry in saved["experience"]] == ["b", "a"]


def test_mutate_gives_up_after_configured_attempts(mongo, monkeypatch):
    monkeypatch.setenv("CONFLICT_RETRIES", "2")
    collection = mongo["profiles"]
    parent = _profile("a")
    collection.insert_one(parent)

    def always_conflicting(doc):
        collection.update_one({"_id": doc["_id"]}, {"$inc": {"version": 1}})
        return EXPERIENCE.insert(doc, {"title": "b"})

    with pytest.raises(ConcurrentUpdateError):
        mutate(collection, {"user": "u1"}, always_conflicting, ProfileNotFoundError)

    assert [entry["title"] for entry in collection.find_one({"user": "u1"})["experience"]] == ["a"]


def test_mutate_raises_not_found_for_missing_parent(mongo):
    with pytest.raises(ProfileNotFoundError):
        mutate(mongo["profiles"], {"user": "nobody"}, lambda doc: doc, ProfileNotFoundError)
