"""路由安全执行与结构化日志助手.

提供 `log_with_context` 与 `safe_route_call` 两个 helper,用于复用结构化日志字段,
并集中处理视图层的异常捕获.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Literal, TypeVar

from flask_jwt_extended import get_jwt_identity
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException

from fittrack import db
from fittrack.errors import AppError, SystemError
from fittrack.utils.structlog_config import get_logger

if TYPE_CHECKING:
    from collections.abc import Callable

    from fittrack.types import JsonValue, LoggerExtra

R = TypeVar("R")
LogLevel = Literal["debug", "info", "warning", "error", "critical"]
DEFAULT_EXPECTED_EXCEPTIONS: tuple[type[BaseException], ...] = (AppError, HTTPException)


def _current_actor_id() -> str | None:
    try:
        identity = get_jwt_identity()
    except RuntimeError:
        return None
    return str(identity) if identity is not None else None


def log_with_context(
    level: LogLevel,
    event: str,
    *,
    module: str,
    action: str,
    context: LoggerExtra | None = None,
    extra: LoggerExtra | None = None,
    include_actor: bool = True,
) -> None:
    """记录带有统一上下文字段的结构化日志.

    Args:
        level: 日志级别,使用 structlog 的方法名,例如 "info"、"error".
        event: 日志事件描述,建议使用动词短语.
        module: 所属模块或领域,用于快速过滤.
        action: 当前操作名称,通常对应视图函数名.
        context: 业务上下文字段.
        extra: 额外字段,例如异常类型.
        include_actor: 是否附带当前 JWT 身份.

    """
    logger = get_logger("app")
    payload: dict[str, JsonValue] = {"module": module, "action": action}

    if include_actor:
        actor_id = _current_actor_id()
        if actor_id is not None:
            payload.setdefault("actor_id", actor_id)

    if context:
        payload.update(context)
    if extra:
        payload.update(extra)

    log_method = getattr(logger, level, logger.error)
    log_method(event, **payload)


def safe_route_call(
    func: Callable[[], R],
    *,
    module: str,
    action: str,
    public_error: str,
    context: LoggerExtra | None = None,
    expected_exceptions: tuple[type[BaseException], ...] | None = None,
) -> R:
    """安全执行视图逻辑,集中处理日志与异常转换.

    已知业务异常记录 warning 后原样抛出,交由全局错误处理器生成响应;
    未知异常记录 error 并包装为 ``SystemError(public_error)``.成功时提交事务,任一失败路径回滚.

    Args:
        func: 真实的业务函数,建议为局部闭包以捕获参数.
        module: 记录日志用的模块名称.
        action: 业务动作名称,例如 "list_resources".
        public_error: 暴露给客户端的统一错误文案.
        context: 附加到日志的上下文.
        expected_exceptions: 额外视为已知异常的类型.

    Returns:
        业务函数的执行结果,通常是 Flask 的响应对象.

    Raises:
        AppError: 当业务逻辑主动抛出或包装未知异常时.

    """
    handled_exceptions = DEFAULT_EXPECTED_EXCEPTIONS
    if expected_exceptions:
        handled_exceptions += expected_exceptions

    event = f"{action}执行失败"
    context_payload = dict(context or {})

    try:
        result = func()
    except handled_exceptions as exc:
        db.session.rollback()
        log_with_context(
            "warning",
            event,
            module=module,
            action=action,
            context=context_payload,
            extra={"error_type": exc.__class__.__name__, "error_message": str(exc)},
        )
        raise
    except Exception as exc:
        db.session.rollback()
        log_with_context(
            "error",
            event,
            module=module,
            action=action,
            context=context_payload,
            extra={"error_type": exc.__class__.__name__, "unexpected": True},
        )
        raise SystemError(public_error) from exc
    else:
        try:
            db.session.commit()
        except SQLAlchemyError as exc:
            db.session.rollback()
            log_with_context(
                "error",
                event,
                module=module,
                action=action,
                context=context_payload,
                extra={"error_type": exc.__class__.__name__, "unexpected": True, "commit_failed": True},
            )
            raise SystemError(public_error) from exc
        return result


__all__ = ["log_with_context", "safe_route_call"]
