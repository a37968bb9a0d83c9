"""把异常归一为错误信封与错误日志共用的元数据."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any
from uuid import uuid4

from flask import has_request_context, request
from werkzeug.exceptions import HTTPException

from fittrack.constants import HttpStatus
from fittrack.constants.system_constants import ErrorCategory, ErrorMessages, ErrorSeverity
from fittrack.errors import AppError, ValidationError
from fittrack.utils.logging.context_vars import request_id_var, user_id_var
from fittrack.utils.time_utils import time_utils


@dataclass(slots=True)
class ErrorContext:
    """一次失败请求的追踪信息.

    ``request_id`` 与 ``user_id`` 取自请求钩子写入的上下文变量,``request``
    缺省时在请求上下文内自动获取.
    """

    error: Exception
    request: Any | None = None
    error_id: str = field(default_factory=lambda: uuid4().hex)
    timestamp: datetime = field(default_factory=time_utils.now)
    request_id: str | None = field(default_factory=request_id_var.get)
    user_id: str | None = field(default_factory=user_id_var.get)

    def public(self) -> dict[str, str | None]:
        """返回可以写入错误信封的 ``context`` 字段."""
        source = self.request
        if source is None and has_request_context():
            source = request
        payload: dict[str, str | None] = {"request_id": self.request_id, "user_id": self.user_id}
        if source is not None:
            payload["method"] = getattr(source, "method", None)
            payload["path"] = getattr(source, "path", None)
        return payload


@dataclass(slots=True)
class ErrorMetadata:
    """错误信封所需的分类信息."""

    status_code: int
    category: ErrorCategory
    severity: ErrorSeverity
    message_key: str
    message: str
    recoverable: bool
    resource: str | None = None
    field_errors: dict[str, str] = field(default_factory=dict)


def derive_error_metadata(error: Exception) -> ErrorMetadata:
    """识别业务异常、werkzeug HTTP 异常与未知异常.

    未知异常一律按 500 处理,文案固定为 ``ErrorMessages.INTERNAL_ERROR``,
    原始异常文本只进日志.
    """
    if isinstance(error, AppError):
        return ErrorMetadata(
            status_code=error.status_code,
            category=error.category,
            severity=error.severity,
            message_key=error.message_key,
            message=error.message,
            recoverable=error.recoverable,
            resource=error.resource,
            field_errors=dict(error.field_errors) if isinstance(error, ValidationError) else {},
        )

    if isinstance(error, HTTPException) and error.code and error.code < HttpStatus.INTERNAL_SERVER_ERROR:
        # 未注册的路由、方法不允许等
        return ErrorMetadata(
            status_code=error.code,
            category=ErrorCategory.BUSINESS,
            severity=ErrorSeverity.MEDIUM,
            message_key="INVALID_REQUEST",
            message=error.description or ErrorMessages.INVALID_REQUEST,
            recoverable=True,
        )

    return ErrorMetadata(
        status_code=HttpStatus.INTERNAL_SERVER_ERROR,
        category=ErrorCategory.SYSTEM,
        severity=ErrorSeverity.HIGH,
        message_key="INTERNAL_ERROR",
        message=ErrorMessages.INTERNAL_ERROR,
        recoverable=False,
    )


__all__ = [
    "ErrorContext",
    "ErrorMetadata",
    "derive_error_metadata",
]
