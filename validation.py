"""Input validators for posts, profiles, experience and education entries.

Each validator takes a flat record (usually a dumped request model), never
mutates it and returns a ``ValidationResult``.  Missing keys are treated as
empty values, so the validators are total over any mapping.
"""

import re
from datetime import datetime
from typing import Any, Mapping, NamedTuple

from pydantic import HttpUrl, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from utils import is_empty, parse_skills

TEXT_MIN_LENGTH = 10
TEXT_MAX_LENGTH = 300
HANDLE_MIN_LENGTH = 2
HANDLE_MAX_LENGTH = 40

SOCIAL_FIELDS = ("youtube", "twitter", "facebook", "linkedin", "instagram")

_url_adapter = TypeAdapter(HttpUrl)
_datetime_adapter = TypeAdapter(datetime)
_NUMERIC = re.compile(r"[+-]?\d+(\.\d*)?")


class ValidationResult(NamedTuple):
    errors: dict[str, str]
    is_valid: bool


def _result(errors: dict[str, str]) -> ValidationResult:
    return ValidationResult(errors=errors, is_valid=not errors)


def _text(data: Mapping[str, Any], key: str) -> str:
    value = data.get(key)
    if is_empty(value):
        return ""
    return value if isinstance(value, str) else str(value)


def is_valid_url(value: str) -> bool:
    try:
        _url_adapter.validate_python(value)
        return True
    except PydanticValidationError:
        return False


def parse_date(value: Any) -> datetime | None:
    if is_empty(value):
        return None
    if isinstance(value, datetime):
        return value
    # Only date strings; numbers would otherwise be read as Unix timestamps.
    if not isinstance(value, str) or _NUMERIC.fullmatch(value.strip()):
        return None
    try:
        return _datetime_adapter.validate_python(value)
    except PydanticValidationError:
        return None


def validate_post_input(data: Mapping[str, Any]) -> ValidationResult:
    text = _text(data, "text")
    errors: dict[str, str] = {}
    if not TEXT_MIN_LENGTH <= len(text) <= TEXT_MAX_LENGTH:
        errors["text"] = f"Text must be between {TEXT_MIN_LENGTH} and {TEXT_MAX_LENGTH} characters"
    return _result(errors)


def validate_profile_input(data: Mapping[str, Any]) -> ValidationResult:
    errors: dict[str, str] = {}

    # Measured as stored: surrounding whitespace is stripped before saving.
    handle = _text(data, "handle").strip()
    if not handle:
        errors["handle"] = "Profile handle is required"
    elif not HANDLE_MIN_LENGTH <= len(handle) <= HANDLE_MAX_LENGTH:
        errors["handle"] = f"Handle needs to be between {HANDLE_MIN_LENGTH} and {HANDLE_MAX_LENGTH} characters"

    if not _text(data, "status"):
        errors["status"] = "Status field is required"

    skills = data.get("skills")
    if is_empty(skills) or not parse_skills(skills):
        errors["skills"] = "Skills field is required"

    website = _text(data, "website")
    if website and not is_valid_url(website):
        errors["website"] = "Not a valid URL"

    for field in SOCIAL_FIELDS:
        link = _text(data, field)
        if link and not is_valid_url(link):
            errors[field] = "Not a valid URL"

    return _result(errors)


def _validate_dates(data: Mapping[str, Any], errors: dict[str, str]) -> None:
    if not _text(data, "from"):
        errors["from"] = "From date field is required"
    elif parse_date(data.get("from")) is None:
        errors["from"] = "From date is not a valid date"

    if _text(data, "to") and parse_date(data.get("to")) is None:
        errors["to"] = "To date is not a valid date"


def validate_experience_input(data: Mapping[str, Any]) -> ValidationResult:
    errors: dict[str, str] = {}
    if not _text(data, "title"):
        errors["title"] = "Job title field is required"
    if not _text(data, "company"):
        errors["company"] = "Company field is required"
    _validate_dates(data, errors)
    return _result(errors)


def validate_education_input(data: Mapping[str, Any]) -> ValidationResult:
    errors: dict[str, str] = {}
    if not _text(data, "school"):
        errors["school"] = "School field is required"
    if not _text(data, "degree"):
        errors["degree"] = "Degree field is required"
    if not _text(data, "fieldofstudy"):
        errors["fieldofstudy"] = "Field of study field is required"
    _validate_dates(data, errors)
    return _result(errors)
