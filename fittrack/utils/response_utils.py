"""FitTrack 统一响应信封.

成功: ``{success, error, message, timestamp, data?}``.
失败: ``{success, error, message, message_code, timestamp, ...}``,校验失败时附带
``errors``(字段路径到文案),资源相关错误附带 ``resource``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, cast

from flask import Response, jsonify

from fittrack.constants import HttpStatus
from fittrack.constants.system_constants import ErrorSeverity, SuccessMessages
from fittrack.errors import AppError
from fittrack.utils.logging.error_adapter import ErrorContext, ErrorMetadata, derive_error_metadata
from fittrack.utils.structlog_config import get_logger
from fittrack.utils.time_utils import time_utils

if TYPE_CHECKING:
    from fittrack.types import JsonDict, JsonValue


def unified_success_response(
    data: object | None = None,
    message: object | None = None,
    *,
    status: int = HttpStatus.OK,
) -> tuple[JsonDict, int]:
    """生成成功信封.

    Args:
        data: 响应数据.为 None 时信封中不出现 ``data``,删除接口依赖这一点.
        message: 提示文案,默认 ``SuccessMessages.OPERATION_SUCCESS``.
        status: HTTP 状态码.

    Returns:
        ``(payload, status)``.

    """
    payload: JsonDict = {
        "success": True,
        "error": False,
        "message": str(message) if message is not None else SuccessMessages.OPERATION_SUCCESS,
        "timestamp": time_utils.to_json_timestamp(time_utils.now()),
    }
    if data is not None:
        payload["data"] = cast("JsonValue | JsonDict | list[JsonDict]", data)
    return payload, status


def unified_error_response(
    error: BaseException,
    *,
    status_code: int | None = None,
    context: ErrorContext | None = None,
) -> tuple[JsonDict, int]:
    """生成错误信封并按严重度记录错误日志.

    Args:
        error: 异常对象.
        status_code: 覆盖由异常推导出的状态码,JWT 回调用它固定返回 401.
        context: 请求追踪信息,缺省时按当前上下文创建.

    Returns:
        ``(payload, status)``.

    """
    safe_error = error if isinstance(error, Exception) else Exception(str(error))
    context = context or ErrorContext(safe_error)
    metadata = derive_error_metadata(safe_error)

    payload: JsonDict = {
        "success": False,
        "error": True,
        "message": metadata.message,
        "message_code": metadata.message_key,
        "category": metadata.category.value,
        "severity": metadata.severity.value,
        "recoverable": metadata.recoverable,
        "error_id": context.error_id,
        "timestamp": time_utils.to_json_timestamp(context.timestamp),
        "context": cast("JsonDict", context.public()),
    }
    if metadata.resource:
        payload["resource"] = metadata.resource
    if metadata.field_errors:
        payload["errors"] = cast("JsonDict", dict(metadata.field_errors))

    _log_error_response(safe_error, metadata, context)
    return payload, status_code or metadata.status_code


def _log_error_response(error: Exception, metadata: ErrorMetadata, context: ErrorContext) -> None:
    logger = get_logger("app")
    fields: dict[str, object] = {
        "module": "error_handler",
        "error_id": context.error_id,
        "category": metadata.category.value,
        "message_code": metadata.message_key,
        "resource": metadata.resource,
    }
    if isinstance(error, AppError) and error.extra:
        fields["extra"] = dict(error.extra)
    if metadata.severity is ErrorSeverity.HIGH:
        logger.error(metadata.message, exc_info=error, error=str(error), **fields)
    else:
        logger.warning(metadata.message, error=str(error), **fields)


def jsonify_unified_success(
    data: object | None = None,
    message: object | None = None,
    *,
    status: int = HttpStatus.OK,
) -> tuple[Response, int]:
    payload, status_code = unified_success_response(data, message, status=status)
    return jsonify(payload), status_code
