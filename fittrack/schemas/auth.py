"""认证/密码相关 schema."""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

from pydantic import Field, StrictStr, field_validator, model_validator

from fittrack.schemas.base import PayloadSchema
from fittrack.schemas.validation import SchemaMessageKeyError

USER_PASSWORD_MIN_LENGTH = 6
_EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def _ensure_mapping(data: Any, message: str) -> Mapping[str, Any]:
    if not isinstance(data, Mapping):
        raise SchemaMessageKeyError(message, message_key="VALIDATION_ERROR")
    return data


def _require_fields(data: Mapping[str, Any], fields: tuple[str, ...], message: str) -> None:
    for field in fields:
        value = data.get(field)
        if value is None or (isinstance(value, str) and not value.strip()):
            raise SchemaMessageKeyError(message, message_key="VALIDATION_ERROR")


def normalize_email(value: str) -> str:
    """规范化邮箱并校验格式."""
    cleaned = value.strip().lower()
    if not _EMAIL_PATTERN.match(cleaned):
        raise SchemaMessageKeyError("Invalid email address", message_key="VALIDATION_ERROR")
    return cleaned


def validate_password(value: str) -> str:
    """校验密码长度."""
    if len(value) < USER_PASSWORD_MIN_LENGTH:
        msg = f"Password must be at least {USER_PASSWORD_MIN_LENGTH} characters"
        raise SchemaMessageKeyError(msg, message_key="VALIDATION_ERROR")
    return value


class RegisterPayload(PayloadSchema):
    """注册 payload."""

    username: StrictStr
    email: StrictStr
    password: StrictStr
    profile: dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def _validate_required_fields(cls, data: Any) -> Any:
        message = "Username, email and password are required"
        mapping = _ensure_mapping(data, message)
        _require_fields(mapping, ("username", "email", "password"), message)
        return data

    @field_validator("username")
    @classmethod
    def _strip_username(cls, value: str) -> str:
        return value.strip()

    @field_validator("email")
    @classmethod
    def _validate_email(cls, value: str) -> str:
        return normalize_email(value)

    @field_validator("password")
    @classmethod
    def _validate_password(cls, value: str) -> str:
        return validate_password(value)

    @field_validator("profile", mode="before")
    @classmethod
    def _default_profile(cls, value: Any) -> Any:
        return {} if value is None else value


class LoginPayload(PayloadSchema):
    """登录 payload."""

    email: StrictStr
    password: StrictStr

    @model_validator(mode="before")
    @classmethod
    def _validate_required_fields(cls, data: Any) -> Any:
        message = "Email and password are required"
        mapping = _ensure_mapping(data, message)
        _require_fields(mapping, ("email", "password"), message)
        return data

    @field_validator("email")
    @classmethod
    def _normalize_email(cls, value: str) -> str:
        return value.strip().lower()


class ForgetPasswordPayload(PayloadSchema):
    """忘记密码 payload."""

    email: StrictStr

    @model_validator(mode="before")
    @classmethod
    def _validate_required_fields(cls, data: Any) -> Any:
        message = "Email is required"
        mapping = _ensure_mapping(data, message)
        _require_fields(mapping, ("email",), message)
        return data

    @field_validator("email")
    @classmethod
    def _validate_email(cls, value: str) -> str:
        return normalize_email(value)


class ResetPasswordPayload(PayloadSchema):
    """重置密码 payload."""

    password: StrictStr

    @model_validator(mode="before")
    @classmethod
    def _validate_required_fields(cls, data: Any) -> Any:
        message = "Password is required"
        mapping = _ensure_mapping(data, message)
        _require_fields(mapping, ("password",), message)
        return data

    @field_validator("password")
    @classmethod
    def _validate_password(cls, value: str) -> str:
        return validate_password(value)
