"""FitTrack 业务异常.

异常类以类属性声明 HTTP 状态码、分类与严重度,统一错误信封直接读取.
与某一资源类型相关的异常携带 ``resource``,错误日志与信封都会带上它.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from fittrack.constants import HttpStatus
from fittrack.constants.system_constants import ErrorCategory, ErrorMessages, ErrorSeverity

if TYPE_CHECKING:
    from collections.abc import Mapping

    from fittrack.core.resources import ResourceDefinition
    from fittrack.types import LoggerExtra


class AppError(Exception):
    """FitTrack 异常基类.

    Args:
        message: 对外文案,为空时按 ``message_key`` 从 `ErrorMessages` 取.
        message_key: 消息键,同时作为信封中的 ``message_code``.
        extra: 仅写入日志的附加字段.
        status_code: 覆盖类上声明的 HTTP 状态码.
        resource: 相关的资源类型名.

    """

    http_status: int = HttpStatus.INTERNAL_SERVER_ERROR
    category: ErrorCategory = ErrorCategory.SYSTEM
    severity: ErrorSeverity = ErrorSeverity.HIGH
    default_message_key: str = "INTERNAL_ERROR"

    def __init__(
        self,
        message: str | None = None,
        *,
        message_key: str | None = None,
        extra: LoggerExtra | None = None,
        status_code: int | None = None,
        resource: str | None = None,
    ) -> None:
        self.message_key = message_key or self.default_message_key
        self.message = message or getattr(ErrorMessages, self.message_key, ErrorMessages.INTERNAL_ERROR)
        self.extra = dict(extra or {})
        self.status_code = status_code or self.http_status
        self.resource = resource
        super().__init__(self.message)

    @property
    def recoverable(self) -> bool:
        """客户端修正输入或重新登录后可以重试."""
        return self.severity is not ErrorSeverity.HIGH


class ValidationError(AppError):
    """请求体或查询参数不合法,返回 400.

    ``field_errors`` 是点分字段路径到文案的映射(例如 ``meals.0.mealType``),
    ``message`` 缺省时取其中第一条.
    """

    http_status = HttpStatus.BAD_REQUEST
    category = ErrorCategory.VALIDATION
    severity = ErrorSeverity.LOW
    default_message_key = "VALIDATION_ERROR"

    def __init__(
        self,
        message: str | None = None,
        *,
        field_errors: Mapping[str, str] | None = None,
        message_key: str | None = None,
        extra: LoggerExtra | None = None,
        status_code: int | None = None,
        resource: str | None = None,
    ) -> None:
        self.field_errors = dict(field_errors or {})
        first = next(iter(self.field_errors.values()), None)
        super().__init__(
            message or first,
            message_key=message_key,
            extra=extra,
            status_code=status_code,
            resource=resource,
        )


class AuthenticationError(AppError):
    """令牌缺失、过期或凭据错误,返回 401.

    登录失败沿用原有约定返回 400,由调用方传入 ``status_code``.
    """

    http_status = HttpStatus.UNAUTHORIZED
    category = ErrorCategory.AUTHENTICATION
    severity = ErrorSeverity.MEDIUM
    default_message_key = "INVALID_CREDENTIALS"


class NotFoundError(AppError):
    http_status = HttpStatus.NOT_FOUND
    category = ErrorCategory.BUSINESS
    severity = ErrorSeverity.LOW
    default_message_key = "RESOURCE_NOT_FOUND"


class ResourceNotFoundError(NotFoundError):
    """资源记录不存在或不属于当前用户.

    文案由资源的单数标签生成,例如 ``Workout not found``.

    Args:
        definition: 资源定义.
        record_id: 请求中的记录 ID,只写入日志.

    """

    def __init__(self, definition: ResourceDefinition, record_id: str | None = None) -> None:
        label = definition.item_label
        super().__init__(
            f"{label[:1].upper()}{label[1:]} not found",
            extra={"record_id": record_id} if record_id is not None else None,
            resource=definition.name,
        )


class DatabaseError(AppError):
    category = ErrorCategory.DATABASE
    default_message_key = "DATABASE_QUERY_ERROR"


class SystemError(AppError):  # noqa: A001
    """无法归类的异常,由 ``safe_route_call`` 包装后返回 500."""


__all__ = [
    "AppError",
    "AuthenticationError",
    "DatabaseError",
    "NotFoundError",
    "ResourceNotFoundError",
    "SystemError",
    "ValidationError",
]
