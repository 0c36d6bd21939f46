"""
Author handle and password rules
"""

import re

from pydantic import field_validator

from app.core.errors import ValidationFailed

HANDLE_PATTERN = re.compile(r"^[A-Za-z0-9]+$")
MAX_HANDLE_LENGTH = 32
MIN_PASSWORD_LENGTH = 8


def handle_is_valid(handle) -> bool:
    return (
        isinstance(handle, str)
        and len(handle) <= MAX_HANDLE_LENGTH
        and HANDLE_PATTERN.fullmatch(handle) is not None
    )


def check_handle(handle) -> str:
    if not handle_is_valid(handle):
        raise ValidationFailed(
            f"Handle must be 1-{MAX_HANDLE_LENGTH} letters or digits",
            details={"field": "handle"},
        )
    return handle


def check_password(password) -> str:
    if not isinstance(password, str) or len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationFailed(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters",
            details={"field": "password"},
        )
    return password


class AuthorValidatorMixin:
    @field_validator("handle", check_fields=False)
    @classmethod
    def handle_valid(cls, v):
        if v is not None and not handle_is_valid(v):
            raise ValueError(f"Handle must be 1-{MAX_HANDLE_LENGTH} letters or digits")
        return v
