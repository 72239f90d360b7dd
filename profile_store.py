import logging
from datetime import datetime, timezone
from typing import Any

from pymongo import ReturnDocument
from pymongo.collection import Collection
from pymongo.errors import DuplicateKeyError, PyMongoError

from database import PROFILES, get_collection
from errors import ConcurrentUpdateError, DuplicateHandleError, PersistenceError

logger = logging.getLogger(__name__)


def profiles_collection() -> Collection:
    return get_collection(PROFILES)


def _duplicate_error(exc: DuplicateKeyError) -> Exception:
    key_pattern = (exc.details or {}).get("keyPattern") or {}
    if "user" in key_pattern:
        # Another request created this user's profile first.
        return ConcurrentUpdateError()
    return DuplicateHandleError()


def find_profile_by_user(user_id: str) -> dict | None:
    try:
        return profiles_collection().find_one({"user": user_id})
    except PyMongoError as exc:
        logger.exception("Profile lookup failed user=%s", user_id)
        raise PersistenceError() from exc


def find_profile_by_handle(handle: str) -> dict | None:
    try:
        return profiles_collection().find_one({"handle": handle})
    except PyMongoError as exc:
        logger.exception("Profile lookup failed handle=%s", handle)
        raise PersistenceError() from exc


def find_all_profiles() -> list[dict]:
    try:
        return list(profiles_collection().find())
    except PyMongoError as exc:
        logger.exception("Listing profiles failed")
        raise PersistenceError() from exc


def create_profile(profile_data: dict[str, Any]) -> dict:
    payload = dict(profile_data)
    payload.setdefault("skills", [])
    payload.setdefault("social", {})
    payload["experience"] = []
    payload["education"] = []
    payload["version"] = 0
    payload["created_at"] = datetime.now(timezone.utc)
    payload["updated_at"] = payload["created_at"]

    try:
        result = profiles_collection().insert_one(payload)
    except DuplicateKeyError as exc:
        raise _duplicate_error(exc) from exc
    except PyMongoError as exc:
        logger.exception("Creating profile failed user=%s", payload.get("user"))
        raise PersistenceError() from exc

    payload["_id"] = result.inserted_id
    return payload


def update_profile(user_id: str, fields: dict[str, Any]) -> dict | None:
    """Apply a partial ``$set`` to the user's profile and return the new document.

    ``fields`` may use dotted keys such as ``social.twitter`` so that a single
    social link can change without replacing the others.
    """
    changes = dict(fields)
    changes["updated_at"] = datetime.now(timezone.utc)

    try:
        return profiles_collection().find_one_and_update(
            {"user": user_id},
            {"$set": changes, "$inc": {"version": 1}},
            return_document=ReturnDocument.AFTER,
        )
    except DuplicateKeyError as exc:
        raise _duplicate_error(exc) from exc
    except PyMongoError as exc:
        logger.exception("Updating profile failed user=%s", user_id)
        raise PersistenceError() from exc


def delete_profile(user_id: str) -> bool:
    try:
        result = profiles_collection().delete_one({"user": user_id})
    except PyMongoError as exc:
        logger.exception("Deleting profile failed user=%s", user_id)
        raise PersistenceError() from exc
    return result.deleted_count > 0
