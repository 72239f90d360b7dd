import logging
from typing import Any

from pymongo import DESCENDING
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from database import POSTS, get_collection
from errors import PersistenceError
from utils import to_object_id

logger = logging.getLogger(__name__)


def posts_collection() -> Collection:
    return get_collection(POSTS)


def post_query(post_id: str) -> dict[str, Any] | None:
    """Query matching ``post_id``, or None when the id cannot be an ObjectId."""
    object_id = to_object_id(post_id)
    if object_id is None:
        return None
    return {"_id": object_id}


def find_posts_newest_first() -> list[dict]:
    try:
        return list(posts_collection().find().sort("date", DESCENDING))
    except PyMongoError as exc:
        logger.exception("Listing posts failed")
        raise PersistenceError() from exc


def find_post(post_id: str) -> dict | None:
    query = post_query(post_id)
    if query is None:
        return None
    try:
        return posts_collection().find_one(query)
    except PyMongoError as exc:
        logger.exception("Post lookup failed id=%s", post_id)
        raise PersistenceError() from exc


def insert_post(post_data: dict[str, Any]) -> dict:
    payload = dict(post_data)
    payload.setdefault("likes", [])
    payload.setdefault("comments", [])
    payload.setdefault("version", 0)
    try:
        result = posts_collection().insert_one(payload)
    except PyMongoError as exc:
        logger.exception("Creating post failed user=%s", payload.get("user"))
        raise PersistenceError() from exc
    payload["_id"] = result.inserted_id
    return payload


def remove_post(post_id: str) -> bool:
    query = post_query(post_id)
    if query is None:
        return False
    try:
        result = posts_collection().delete_one(query)
    except PyMongoError as exc:
        logger.exception("Deleting post failed id=%s", post_id)
        raise PersistenceError() from exc
    return result.deleted_count > 0
