import logging
from datetime import datetime, timezone
from typing import Any

from embedded_collection import COMMENTS, LIKES, mutate
from errors import NotAuthorizedError, NotFoundError, ValidationError
from post_store import (
    find_post,
    find_posts_newest_first,
    insert_post,
    post_query,
    posts_collection,
    remove_post,
)
from utils import empty_list_not_found, serialize_document
from validation import validate_post_input

logger = logging.getLogger(__name__)


def _post_missing() -> NotFoundError:
    return NotFoundError("That post does not exist", field="nopost")


def _validated_text(text: str | None) -> str:
    result = validate_post_input({"text": text})
    if not result.is_valid:
        raise ValidationError(result.errors)
    return text or ""


def _mutate_post(post_id: str, change) -> dict[str, Any]:
    query = post_query(post_id)
    if query is None:
        raise _post_missing()
    return serialize_document(mutate(posts_collection(), query, change, _post_missing))


def list_posts() -> list[dict[str, Any]]:
    posts = find_posts_newest_first()
    if not posts and empty_list_not_found():
        raise NotFoundError("There are no posts to show", field="noposts")
    return [serialize_document(post) for post in posts]


def get_post(post_id: str) -> dict[str, Any]:
    post = find_post(post_id)
    if not post:
        raise _post_missing()
    return serialize_document(post)


def create_post(caller_id: str, caller_name: str, caller_avatar: str | None, text: str | None) -> dict[str, Any]:
    # name and avatar are a snapshot of the author at posting time.
    post = insert_post(
        {
            "user": caller_id,
            "name": caller_name,
            "avatar": caller_avatar,
            "text": _validated_text(text),
            "date": datetime.now(timezone.utc),
        }
    )
    logger.info("User %s created post %s", caller_id, post["_id"])
    return serialize_document(post)


def delete_post(caller_id: str, post_id: str) -> dict[str, bool]:
    post = find_post(post_id)
    if not post:
        raise _post_missing()
    if str(post["user"]) != caller_id:
        logger.warning("User %s tried to delete post %s owned by %s", caller_id, post_id, post["user"])
        raise NotAuthorizedError()
    if not remove_post(post_id):
        raise _post_missing()
    logger.info("User %s deleted post %s", caller_id, post_id)
    return {"success": True}


def like_post(caller_id: str, post_id: str) -> dict[str, Any]:
    post = _mutate_post(post_id, lambda parent: LIKES.insert(parent, {"user": caller_id}))
    logger.info("User %s liked post %s", caller_id, post_id)
    return post


def unlike_post(caller_id: str, post_id: str) -> dict[str, Any]:
    post = _mutate_post(post_id, lambda parent: LIKES.remove(parent, caller_id))
    logger.info("User %s unliked post %s", caller_id, post_id)
    return post


def add_comment(
    caller_id: str,
    caller_name: str,
    caller_avatar: str | None,
    post_id: str,
    text: str | None,
) -> dict[str, Any]:
    comment = {
        "text": _validated_text(text),
        "name": caller_name,
        "avatar": caller_avatar,
        "user": caller_id,
        "date": datetime.now(timezone.utc),
    }
    post = _mutate_post(post_id, lambda parent: COMMENTS.insert(parent, comment))
    logger.info("User %s commented on post %s", caller_id, post_id)
    return post


def remove_comment(post_id: str, comment_id: str) -> dict[str, Any]:
    post = _mutate_post(post_id, lambda parent: COMMENTS.remove(parent, comment_id))
    logger.info("Removed comment %s from post %s", comment_id, post_id)
    return post
