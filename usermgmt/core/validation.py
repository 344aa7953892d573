"""Field rules for user documents.

Two layers use these rules. Handlers reject incomplete requests early with
the helpers at the bottom of this module. The repository runs every document
through ``validate_user_document`` before it is written, which reports all
failing fields at once as a ``SchemaValidationError``.
"""

from __future__ import annotations

import re
from typing import Any, Dict, Iterable, Mapping, Optional

from bson import ObjectId
from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from usermgmt.core.exceptions import InputError, SchemaValidationError
from usermgmt.models.base import is_valid_object_id
from usermgmt.models.user import DEFAULT_ROLE, ROLES

EMAIL_REGEX = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
# Indian mobile: optional +91, 91 or 0, then 10 digits starting with 6-9
PHONE_REGEX = re.compile(r"^(?:\+91|91|0)?[6-9]\d{9}$")

ROLE_MESSAGE = 'Role must be either "user" or "admin"'
INVALID_ID_MESSAGE = "Invalid user id"

REQUIRED_MESSAGES = {
    "name": "Name is required",
    "email": "Email is required",
    "phone": "Phone is required",
    "password": "Password is required",
}


def _trimmed(value: Any) -> Optional[str]:
    if not isinstance(value, str):
        return None
    value = value.strip()
    return value or None


class UserDocumentSchema(BaseModel):
    """Schema a user document must satisfy before it is persisted."""

    model_config = ConfigDict(extra="ignore")

    name: str
    email: str
    phone: str
    password: str
    role: str = DEFAULT_ROLE

    @field_validator("name", mode="before")
    @classmethod
    def _check_name(cls, value: Any) -> str:
        name = _trimmed(value)
        if name is None:
            raise ValueError(REQUIRED_MESSAGES["name"])
        return name

    @field_validator("email", mode="before")
    @classmethod
    def _check_email(cls, value: Any) -> str:
        email = _trimmed(value)
        if email is None:
            raise ValueError(REQUIRED_MESSAGES["email"])
        email = email.lower()
        if not EMAIL_REGEX.match(email):
            raise ValueError("Please fill a valid email address")
        return email

    @field_validator("phone", mode="before")
    @classmethod
    def _check_phone(cls, value: Any) -> str:
        phone = _trimmed(value)
        if phone is None:
            raise ValueError(REQUIRED_MESSAGES["phone"])
        if not PHONE_REGEX.match(phone):
            raise ValueError("Please fill a valid Indian phone number")
        return phone

    @field_validator("password", mode="before")
    @classmethod
    def _check_password(cls, value: Any) -> str:
        if not isinstance(value, str) or value == "":
            raise ValueError(REQUIRED_MESSAGES["password"])
        return value

    @field_validator("role", mode="before")
    @classmethod
    def _check_role(cls, value: Any) -> str:
        if value is None:
            return DEFAULT_ROLE
        if value not in ROLES:
            raise ValueError(ROLE_MESSAGE)
        return value


def _error_message(error: Mapping[str, Any]) -> str:
    field = str(error["loc"][0]) if error.get("loc") else ""
    if error.get("type") == "missing":
        return REQUIRED_MESSAGES.get(field, f"{field} is required")
    ctx = error.get("ctx") or {}
    if error.get("type") == "value_error" and "error" in ctx:
        return str(ctx["error"])
    return error.get("msg", "Invalid value")


def validate_user_document(document: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Validate and normalise a user document.

    Returns a copy with trimmed/lowercased values and the default role
    applied; keys outside the schema (_id, timestamps) pass through.
    Raises SchemaValidationError listing every failing field.
    """
    try:
        parsed = UserDocumentSchema.model_validate(dict(document))
    except ValidationError as exc:
        errors: Dict[str, str] = {}
        for error in exc.errors():
            field = str(error["loc"][0]) if error.get("loc") else "document"
            errors.setdefault(field, _error_message(error))
        raise SchemaValidationError(errors) from exc
    normalized = dict(document)
    normalized.update(parsed.model_dump())
    return normalized


def normalize_email(value: Any) -> Optional[str]:
    email = _trimmed(value)
    return email.lower() if email else None


def is_valid_role(value: Any) -> bool:
    return value in ROLES


def require_fields(payload: Mapping[str, Any], fields: Iterable[str], message: str):
    """Raise InputError unless every field is present and non-empty."""
    for field in fields:
        if not payload.get(field):
            raise InputError(message)


def parse_user_id(value: Any) -> ObjectId:
    if not is_valid_object_id(value):
        raise InputError(INVALID_ID_MESSAGE)
    return ObjectId(value)
