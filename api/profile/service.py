import logging
from typing import Any

from embedded_collection import EDUCATION, EXPERIENCE, mutate
from errors import (
    DuplicateHandleError,
    NotFoundError,
    PartialDeleteError,
    PersistenceError,
    ProfileNotFoundError,
    ValidationError,
)
from profile_store import (
    create_profile,
    delete_profile,
    find_all_profiles,
    find_profile_by_handle,
    find_profile_by_user,
    profiles_collection,
    update_profile,
)
from user_store import delete_user, find_public_users
from utils import _clean_optional_text, empty_list_not_found, is_empty, parse_skills, serialize_document
from validation import (
    SOCIAL_FIELDS,
    ValidationResult,
    parse_date,
    validate_education_input,
    validate_experience_input,
    validate_profile_input,
)

logger = logging.getLogger(__name__)

PROFILE_FIELDS = ("handle", "company", "website", "location", "bio", "status", "githubusername")


def _raise_if_invalid(result: ValidationResult) -> None:
    if not result.is_valid:
        raise ValidationError(result.errors)


def _present(profiles: list[dict]) -> list[dict[str, Any]]:
    # Owner name and avatar are read live from the user record on every read.
    owners = find_public_users([profile["user"] for profile in profiles])
    presented = []
    for profile in profiles:
        data = serialize_document(profile)
        owner = owners.get(profile["user"]) or {}
        data["user"] = {
            "id": profile["user"],
            "name": owner.get("name") or "",
            "avatar": owner.get("avatar"),
        }
        presented.append(data)
    return presented


def get_own_profile(caller_id: str) -> dict[str, Any]:
    profile = find_profile_by_user(caller_id)
    if not profile:
        raise ProfileNotFoundError()
    return _present([profile])[0]


def get_all_profiles() -> list[dict[str, Any]]:
    profiles = find_all_profiles()
    if not profiles and empty_list_not_found():
        raise NotFoundError("There are no profiles to show", field="noprofile")
    return _present(profiles)


def get_profile_by_user_id(user_id: str) -> dict[str, Any]:
    profile = find_profile_by_user(user_id)
    if not profile:
        raise NotFoundError("There is no profile for this user", field="noprofile")
    return _present([profile])[0]


def get_profile_by_handle(handle: str) -> dict[str, Any]:
    profile = find_profile_by_handle(handle)
    if not profile:
        raise NotFoundError("There is no profile for this handle", field="noprofile")
    return _present([profile])[0]


def _profile_fields(data: dict[str, Any]) -> tuple[dict[str, Any], dict[str, str]]:
    fields: dict[str, Any] = {}
    for key in PROFILE_FIELDS:
        value = _clean_optional_text(data.get(key))
        if value:
            fields[key] = value
    if not is_empty(data.get("skills")):
        fields["skills"] = parse_skills(data["skills"])

    social: dict[str, str] = {}
    for key in SOCIAL_FIELDS:
        value = _clean_optional_text(data.get(key))
        if value:
            social[key] = value
    return fields, social


def upsert_profile(caller_id: str, data: dict[str, Any]) -> dict[str, Any]:
    """Create the caller's profile, or update the fields they supplied.

    Fields left out of ``data`` keep their stored values.  A handle may only
    be used by one profile; claiming another user's handle fails without
    writing anything.
    """
    _raise_if_invalid(validate_profile_input(data))
    fields, social = _profile_fields(data)

    handle_owner = find_profile_by_handle(fields["handle"])
    if handle_owner and handle_owner["user"] != caller_id:
        logger.info("Handle %s requested by user=%s is taken", fields["handle"], caller_id)
        raise DuplicateHandleError()

    if find_profile_by_user(caller_id):
        changes = {**fields, **{f"social.{key}": value for key, value in social.items()}}
        profile = update_profile(caller_id, changes)
        if profile is None:
            raise ProfileNotFoundError()
        logger.info("Updated profile user=%s fields=%s", caller_id, sorted(changes))
    else:
        profile = create_profile({"user": caller_id, **fields, "social": social})
        logger.info("Created profile user=%s handle=%s", caller_id, fields["handle"])

    return _present([profile])[0]


def add_experience(caller_id: str, data: dict[str, Any]) -> dict[str, Any]:
    _raise_if_invalid(validate_experience_input(data))
    entry = {
        "title": data["title"],
        "company": data["company"],
        "location": data.get("location"),
        "from": parse_date(data["from"]),
        "to": parse_date(data.get("to")),
        "current": bool(data.get("current")),
        "description": data.get("description"),
    }
    profile = mutate(
        profiles_collection(),
        {"user": caller_id},
        lambda parent: EXPERIENCE.insert(parent, entry),
        ProfileNotFoundError,
    )
    logger.info("Added experience to profile user=%s", caller_id)
    return _present([profile])[0]


def remove_experience(caller_id: str, entry_id: str) -> dict[str, Any]:
    profile = mutate(
        profiles_collection(),
        {"user": caller_id},
        lambda parent: EXPERIENCE.remove(parent, entry_id),
        ProfileNotFoundError,
    )
    logger.info("Removed experience %s from profile user=%s", entry_id, caller_id)
    return _present([profile])[0]


def add_education(caller_id: str, data: dict[str, Any]) -> dict[str, Any]:
    _raise_if_invalid(validate_education_input(data))
    entry = {
        "school": data["school"],
        "degree": data["degree"],
        "fieldofstudy": data["fieldofstudy"],
        "from": parse_date(data["from"]),
        "to": parse_date(data.get("to")),
        "current": bool(data.get("current")),
        "description": data.get("description"),
    }
    profile = mutate(
        profiles_collection(),
        {"user": caller_id},
        lambda parent: EDUCATION.insert(parent, entry),
        ProfileNotFoundError,
    )
    logger.info("Added education to profile user=%s", caller_id)
    return _present([profile])[0]


def remove_education(caller_id: str, entry_id: str) -> dict[str, Any]:
    profile = mutate(
        profiles_collection(),
        {"user": caller_id},
        lambda parent: EDUCATION.remove(parent, entry_id),
        ProfileNotFoundError,
    )
    logger.info("Removed education %s from profile user=%s", entry_id, caller_id)
    return _present([profile])[0]


def delete_profile_and_user(caller_id: str) -> dict[str, bool]:
    """Delete the caller's profile, then their user record.

    The two deletes are not transactional.  If the user cannot be removed
    after the profile is gone, ``PartialDeleteError`` reports what was
    already deleted.
    """
    completed: list[str] = []

    try:
        profile_removed = delete_profile(caller_id)
    except PersistenceError as exc:
        logger.error("Removing profile user=%s failed, nothing deleted", caller_id)
        raise PartialDeleteError("profile", completed) from exc
    if profile_removed:
        completed.append("profile")
    logger.info("Deleted profile user=%s existed=%s", caller_id, bool(completed))

    try:
        user_removed = delete_user(caller_id)
    except PersistenceError as exc:
        logger.error("Removing user=%s failed after steps %s", caller_id, completed)
        raise PartialDeleteError("user", completed) from exc
    if not user_removed:
        logger.error("User=%s was not found for removal after steps %s", caller_id, completed)
        raise PartialDeleteError("user", completed)

    logger.info("Deleted user=%s", caller_id)
    return {"success": True}
