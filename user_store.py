"""Identity records referenced by profiles and posts.

Registration and password handling live outside this service; the API only
needs to resolve a user id to its display name and avatar, and to remove the
record when its owner deletes their account.
"""

import logging
from typing import Any

from pymongo.errors import PyMongoError

from database import USERS, get_collection
from errors import PersistenceError
from utils import to_object_id

logger = logging.getLogger(__name__)

_PUBLIC_FIELDS = {"name": 1, "avatar": 1}


def find_user(user_id: str) -> dict | None:
    object_id = to_object_id(user_id)
    if object_id is None:
        return None
    try:
        return get_collection(USERS).find_one({"_id": object_id})
    except PyMongoError as exc:
        logger.exception("User lookup failed id=%s", user_id)
        raise PersistenceError() from exc


def find_public_users(user_ids: list[str]) -> dict[str, dict]:
    object_ids = [oid for oid in (to_object_id(user_id) for user_id in user_ids) if oid is not None]
    if not object_ids:
        return {}
    try:
        rows = get_collection(USERS).find({"_id": {"$in": object_ids}}, _PUBLIC_FIELDS)
        return {str(row["_id"]): row for row in rows}
    except PyMongoError as exc:
        logger.exception("User lookup failed ids=%s", user_ids)
        raise PersistenceError() from exc


def create_user(user_data: dict[str, Any]) -> dict:
    payload = dict(user_data)
    try:
        result = get_collection(USERS).insert_one(payload)
    except PyMongoError as exc:
        logger.exception("Creating user failed")
        raise PersistenceError() from exc
    payload["_id"] = result.inserted_id
    return payload


def delete_user(user_id: str) -> bool:
    object_id = to_object_id(user_id)
    if object_id is None:
        return False
    try:
        result = get_collection(USERS).delete_one({"_id": object_id})
    except PyMongoError as exc:
        logger.exception("Deleting user failed id=%s", user_id)
        raise PersistenceError() from exc
    return result.deleted_count > 0
