"""FitTrack 结构化日志.

服务端与客户端状态层共用一套 structlog 处理器链.客户端代码运行在 Flask 上下文之外,
此时请求相关字段被省略,应用名与版本取 `settings` 中的常量.
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING, cast

import structlog
from flask import Flask, current_app, has_app_context, has_request_context

from fittrack.settings import APP_NAME, APP_VERSION
from fittrack.types import JsonValue, LoggerExtra, StructlogEventDict
from fittrack.utils.logging.context_vars import request_id_var, user_id_var

if TYPE_CHECKING:
    from structlog.typing import BindableLogger, Processor

LogField = JsonValue | LoggerExtra

SYSTEM_LOGGER = "system"
AUTH_LOGGER = "auth"
CLIENT_LOGGER = "client"


def _add_request_context(
    _logger: BindableLogger,
    _method_name: str,
    event_dict: StructlogEventDict,
) -> StructlogEventDict:
    if has_request_context():
        event_dict["request_id"] = request_id_var.get()
        event_dict["user_id"] = user_id_var.get()
    return event_dict


def _add_app_context(
    logger: BindableLogger,
    _method_name: str,
    event_dict: StructlogEventDict,
) -> StructlogEventDict:
    if has_app_context():
        event_dict["app_name"] = current_app.config.get("APP_NAME", APP_NAME)
        event_dict["app_version"] = current_app.config.get("APP_VERSION", APP_VERSION)
        event_dict["environment"] = current_app.config.get("ENV", "development")
    else:
        event_dict["app_name"] = APP_NAME
        event_dict["app_version"] = APP_VERSION
    event_dict["logger_name"] = getattr(logger, "name", "unknown")
    return event_dict


class StructlogConfig:
    """structlog 的一次性配置.

    ``configure`` 可重复调用:处理器链只装配一次,传入应用时按其 ``LOG_LEVEL``
    调整 root logger 级别.
    """

    def __init__(self) -> None:
        self.configured = False

    def configure(self, app: Flask | None = None) -> None:
        if not self.configured:
            processors = [
                structlog.stdlib.filter_by_level,
                structlog.processors.TimeStamper(fmt="iso"),
                structlog.stdlib.add_log_level,
                structlog.processors.StackInfoRenderer(),
                structlog.processors.format_exc_info,
                _add_request_context,
                _add_app_context,
                structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty()),
            ]
            structlog.configure(
                processors=cast("list[Processor]", processors),
                context_class=dict,
                logger_factory=structlog.stdlib.LoggerFactory(),
                wrapper_class=structlog.stdlib.BoundLogger,
                cache_logger_on_first_use=True,
            )
            self.configured = True

        if app is not None:
            level_name = str(app.config.get("LOG_LEVEL", "INFO"))
            logging.getLogger().setLevel(getattr(logging, level_name, logging.INFO))


structlog_config = StructlogConfig()


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """返回指定名称的 logger,首次调用时完成配置."""
    structlog_config.configure()
    return structlog.get_logger(name)


def configure_structlog(app: Flask) -> None:
    """按应用配置日志级别,并记录请求结束时未处理的异常."""
    structlog_config.configure(app)

    @app.teardown_appcontext
    def log_teardown_error(exception: BaseException | None) -> None:
        if exception:
            get_system_logger().error("应用请求处理异常", module="system", exception=str(exception))


def log_info(message: str, module: str = "app", **kwargs: LogField) -> None:
    """记录信息级别日志.

    Example:
        >>> log_info('资源文档已保存', module='resources', resource='workout')

    """
    get_logger("app").info(message, module=module, **kwargs)


def log_error(
    message: str,
    module: str = "app",
    exception: Exception | None = None,
    **kwargs: LogField,
) -> None:
    """记录错误级别日志,传入异常时附带堆栈."""
    logger = get_logger("app")
    if exception:
        logger.exception(message, module=module, error=str(exception), **kwargs)
    else:
        logger.error(message, module=module, **kwargs)


def log_debug(message: str, module: str = "app", **kwargs: LogField) -> None:
    """记录调试级别日志,root logger 未开启 DEBUG 时直接返回."""
    if not logging.getLogger().isEnabledFor(logging.DEBUG):
        return
    get_logger("app").debug(message, module=module, **kwargs)


def get_system_logger() -> structlog.stdlib.BoundLogger:
    return get_logger(SYSTEM_LOGGER)


def get_auth_logger() -> structlog.stdlib.BoundLogger:
    return get_logger(AUTH_LOGGER)


def get_client_logger(component: str, **bindings: JsonValue) -> structlog.stdlib.BoundLogger:
    """返回客户端状态层 logger,预先绑定组件名与附加字段.

    Args:
        component: 组件名,例如 ``store``、``transport``.
        **bindings: 每条事件都携带的字段,例如 ``store="workout"``.

    Returns:
        已绑定上下文的 logger.

    """
    return get_logger(CLIENT_LOGGER).bind(component=component, **bindings)


__all__ = [
    "configure_structlog",
    "get_auth_logger",
    "get_client_logger",
    "get_logger",
    "get_system_logger",
    "log_debug",
    "log_error",
    "log_info",
]
