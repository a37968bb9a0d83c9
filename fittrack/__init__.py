"""FitTrack - Flask 应用初始化.

基于 Flask 的健身记录 REST 后端,以及配套的客户端状态层(`fittrack.client`).
"""

from __future__ import annotations

from importlib import import_module
from uuid import uuid4

from flask import Blueprint, Flask, Response, jsonify, request
from flask.typing import ResponseReturnValue
from flask_bcrypt import Bcrypt
from flask_cors import CORS
from flask_jwt_extended import JWTManager
from flask_sqlalchemy import SQLAlchemy

from fittrack.constants import HttpHeaders, HttpStatus
from fittrack.constants.system_constants import ErrorMessages
from fittrack.errors import AuthenticationError
from fittrack.settings import Settings
from fittrack.utils.logging.context_vars import request_id_var, user_id_var
from fittrack.utils.logging.error_adapter import ErrorContext
from fittrack.utils.response_utils import unified_error_response
from fittrack.utils.structlog_config import configure_structlog, get_system_logger

# 初始化扩展
db = SQLAlchemy()
jwt = JWTManager()
bcrypt = Bcrypt()
cors = CORS()


def create_app(settings: Settings | None = None) -> Flask:
    """创建 Flask 应用实例.

    Args:
        settings: 可选的配置对象,用于测试或多环境启动.

    Returns:
        Flask: Flask 应用实例.

    """
    resolved_settings = settings or Settings.load()
    app = Flask(__name__)

    # 配置应用
    configure_app(app, resolved_settings)

    # 初始化扩展
    initialize_extensions(app, resolved_settings)

    # 注册蓝图
    configure_blueprints(app)

    # 配置统一日志系统
    configure_structlog(app)

    # 注册全局错误处理器
    @app.errorhandler(Exception)
    def handle_global_exception(error: Exception) -> ResponseReturnValue:
        """全局错误处理."""
        payload, status_code = unified_error_response(error, context=ErrorContext(error, request))
        return jsonify(payload), status_code

    get_system_logger().info("FitTrack 应用初始化完成", module="system", environment=resolved_settings.environment)
    return app


def configure_app(app: Flask, settings: Settings) -> None:
    """写入 Settings 提供的配置并注册基础钩子.

    Args:
        app: Flask 应用实例.
        settings: 统一配置对象,包含环境变量解析、默认值与校验结果.

    Returns:
        None: 写入 `app.config` 后返回.

    """
    app.config.from_mapping(settings.to_flask_config())
    app.json.sort_keys = False  # type: ignore[attr-defined]
    _register_request_context(app)


def _register_request_context(app: Flask) -> None:
    """注册请求 ID 钩子,供结构化日志关联同一请求的事件."""

    @app.before_request
    def bind_request_id() -> None:
        request_id = request.headers.get(HttpHeaders.X_REQUEST_ID) or uuid4().hex
        request_id_var.set(request_id)
        user_id_var.set(None)

    @app.after_request
    def expose_request_id(response: Response) -> Response:
        request_id = request_id_var.get()
        if request_id:
            response.headers[HttpHeaders.X_REQUEST_ID] = request_id
        return response


def initialize_extensions(app: Flask, settings: Settings) -> None:
    """初始化数据库、JWT、密码加密与 CORS 扩展.

    Args:
        app: Flask 应用实例.
        settings: 统一配置对象,用于扩展初始化参数注入.

    Returns:
        None: 所有扩展完成初始化后返回.

    """
    # 初始化数据库
    db.init_app(app)

    # 初始化JWT
    jwt.init_app(app)
    _register_jwt_handlers()

    # 初始化密码加密
    bcrypt.init_app(app)

    # 初始化CORS
    cors.init_app(
        app,
        resources={
            r"/api/*": {
                "origins": list(settings.cors_origins),
                "methods": ["GET", "POST", "PUT", "DELETE", "OPTIONS"],
                "allow_headers": [HttpHeaders.CONTENT_TYPE, HttpHeaders.AUTHORIZATION],
            },
        },
    )


def _jwt_error_response(message: str, message_key: str) -> ResponseReturnValue:
    error = AuthenticationError(message, message_key=message_key)
    payload, status_code = unified_error_response(error, status_code=HttpStatus.UNAUTHORIZED)
    return jsonify(payload), status_code


def _register_jwt_handlers() -> None:
    """将 JWT 校验失败统一映射为 401 错误信封."""

    @jwt.unauthorized_loader
    def handle_missing_token(_reason: str) -> ResponseReturnValue:
        return _jwt_error_response(ErrorMessages.TOKEN_MISSING, "TOKEN_MISSING")

    @jwt.expired_token_loader
    def handle_expired_token(_header: dict, _payload: dict) -> ResponseReturnValue:
        return _jwt_error_response(ErrorMessages.TOKEN_EXPIRED, "TOKEN_EXPIRED")

    @jwt.invalid_token_loader
    def handle_invalid_token(_reason: str) -> ResponseReturnValue:
        return _jwt_error_response(ErrorMessages.TOKEN_INVALID, "TOKEN_INVALID")


def init_database(app: Flask) -> None:
    """按模型定义创建缺失的数据表.

    已存在的表不会被修改,适用于本地开发与单机部署.
    """
    with app.app_context():
        db.create_all()
    get_system_logger().info("数据库表结构已就绪", module="system")


def configure_blueprints(app: Flask) -> None:
    """注册所有蓝图以暴露路由.

    资源蓝图按注册表动态生成,其余蓝图按模块路径延迟导入.

    Args:
        app: Flask 应用实例.

    Returns:
        None: 蓝图全部注册后返回.

    """
    blueprint_specs: list[tuple[str, str, str | None]] = [
        ("fittrack.routes.health", "health_bp", None),
        ("fittrack.routes.auth", "auth_bp", "/api"),
        ("fittrack.routes.users", "users_bp", "/api"),
    ]

    blueprints: list[tuple[Blueprint, str | None]] = []
    for module_path, attr_name, prefix in blueprint_specs:
        module = import_module(module_path)
        blueprint = getattr(module, attr_name)
        blueprints.append((blueprint, prefix))

    resources_module = import_module("fittrack.routes.resources")
    blueprints.extend((blueprint, "/api") for blueprint in resources_module.build_resource_blueprints())

    for blueprint, prefix in blueprints:
        if prefix:
            app.register_blueprint(blueprint, url_prefix=prefix)
        else:
            app.register_blueprint(blueprint)


from fittrack.models import ResourceDocument, User  # noqa: E402, F401
