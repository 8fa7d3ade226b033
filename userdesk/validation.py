"""Schema validation for user payloads."""
from __future__ import annotations

import re
from typing import Any, Dict, Mapping

from email_validator import EmailNotValidError, validate_email
from pydantic import BaseModel, ConfigDict, ValidationInfo, field_validator
from pydantic import ValidationError as SchemaError
from pydantic_core import PydanticCustomError

from .errors import ValidationError

USERNAME_MIN_LENGTH = 3
USERNAME_MAX_LENGTH = 30
EMAIL_MIN_LENGTH = 7
EMAIL_MAX_LENGTH = 254
PASSWORD_MIN_LENGTH = 8
PASSWORD_MAX_LENGTH = 72

_ALPHANUMERIC = re.compile(r"[A-Za-z0-9]+")

_MESSAGES = {
    "missing": '"{field}" is a required field.',
    "string_type": '"{field}" must be a string.',
    "extra_forbidden": '"{field}" is not allowed.',
    "model_type": "User data must be an object.",
    "model_attributes_type": "User data must be an object.",
    "dict_type": "User data must be an object.",
}


def _check_length(field: str, value: str, minimum: int, maximum: int) -> str:
    if len(value) < minimum:
        raise PydanticCustomError(
            "string_min",
            '"{field}" must contain at least {limit} characters.',
            {"field": field, "limit": minimum},
        )
    if len(value) > maximum:
        raise PydanticCustomError(
            "string_max",
            '"{field}" must contain at most {limit} characters.',
            {"field": field, "limit": maximum},
        )
    return value


class UserCreate(BaseModel):
    """Shape accepted when registering a new user."""

    model_config = ConfigDict(strict=True, extra="forbid")

    username: str
    email: str
    password: str

    @field_validator("username", "email", "password")
    @classmethod
    def _not_blank(cls, value: str, info: ValidationInfo) -> str:
        if value == "":
            raise PydanticCustomError(
                "string_empty",
                '"{field}" must not be blank.',
                {"field": info.field_name},
            )
        return value

    @field_validator("username")
    @classmethod
    def _check_username(cls, value: str) -> str:
        if not _ALPHANUMERIC.fullmatch(value):
            raise PydanticCustomError(
                "string_alphanum",
                '"username" must only contain alphanumeric characters.',
            )
        return _check_length("username", value, USERNAME_MIN_LENGTH, USERNAME_MAX_LENGTH)

    @field_validator("email")
    @classmethod
    def _check_email(cls, value: str) -> str:
        try:
            validate_email(value, check_deliverability=False)
        except EmailNotValidError:
            raise PydanticCustomError(
                "string_email",
                '"email" must be a valid email address.',
            ) from None
        return _check_length("email", value, EMAIL_MIN_LENGTH, EMAIL_MAX_LENGTH)

    @field_validator("password")
    @classmethod
    def _check_password(cls, value: str) -> str:
        return _check_length("password", value, PASSWORD_MIN_LENGTH, PASSWORD_MAX_LENGTH)


def _first_violation(exc: SchemaError) -> str:
    errors = exc.errors()
    if not errors:
        return "User data is invalid."
    first = errors[0]
    loc = first.get("loc") or ()
    field = str(loc[0]) if loc else "user"
    template = _MESSAGES.get(first.get("type", ""))
    if template is None:
        return str(first.get("msg", "User data is invalid."))
    return template.format(field=field)


def validate_new_user(user_data: Mapping[str, Any]) -> Dict[str, str]:
    """Validate a registration payload and return its fields.

    Raises :class:`~userdesk.errors.ValidationError` carrying the message of
    the first violation found.
    """

    if isinstance(user_data, Mapping):
        user_data = dict(user_data)
    try:
        model = UserCreate.model_validate(user_data)
    except SchemaError as exc:
        raise ValidationError(_first_violation(exc)) from None
    return model.model_dump()


__all__ = [
    "EMAIL_MAX_LENGTH",
    "EMAIL_MIN_LENGTH",
    "PASSWORD_MAX_LENGTH",
    "PASSWORD_MIN_LENGTH",
    "USERNAME_MAX_LENGTH",
    "USERNAME_MIN_LENGTH",
    "UserCreate",
    "validate_new_user",
]
