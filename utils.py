import os
from typing import Any

from bson import ObjectId
from bson.errors import InvalidId
from dotenv import load_dotenv
from fastapi import HTTPException

from errors import DevConnectorError


def empty_list_not_found() -> bool:
    load_dotenv()
    return os.getenv("EMPTY_LIST_NOT_FOUND", "true").lower() in {"1", "true", "yes"}


def error_response(exc: DevConnectorError, status_code: int | None = None) -> HTTPException:
    return HTTPException(status_code=status_code or exc.status_code, detail=exc.errors)


def is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (dict, list, tuple, set)):
        return len(value) == 0
    return False


def _clean_optional_text(value: str | None) -> str:
    if value is None:
        return ""
    return value.strip()


def parse_skills(value: str | list[str] | None) -> list[str]:
    if value is None:
        return []
    tokens = value if isinstance(value, list) else value.split(",")
    return [token.strip() for token in tokens if token and token.strip()]


def to_object_id(value: str) -> ObjectId | None:
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        return None


def new_identity() -> str:
    return str(ObjectId())


def serialize_document(doc: dict[str, Any]) -> dict[str, Any]:
    """Turn a stored document into its API shape.

    ``_id`` becomes ``id`` (as a string) at every level and the internal
    ``version`` counter is dropped.
    """
    out: dict[str, Any] = {}
    for key, value in doc.items():
        if key == "version":
            continue
        if key == "_id":
            out["id"] = str(value)
        elif isinstance(value, dict):
            out[key] = serialize_document(value)
        elif isinstance(value, list):
            out[key] = [serialize_document(item) if isinstance(item, dict) else item for item in value]
        elif isinstance(value, ObjectId):
            out[key] = str(value)
        else:
            out[key] = value
    return out
