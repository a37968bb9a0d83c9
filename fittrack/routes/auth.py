"""FitTrack - 用户认证路由."""

from __future__ import annotations

from flask import Blueprint, request
from flask.typing import ResponseReturnValue
from flask_jwt_extended import get_jwt_identity, jwt_required

from fittrack.constants import HttpStatus
from fittrack.constants.system_constants import SuccessMessages
from fittrack.services.auth.auth_service import AuthService
from fittrack.utils.response_utils import jsonify_unified_success
from fittrack.utils.route_safety import safe_route_call

# 创建蓝图
auth_bp = Blueprint("auth", __name__)
_auth_service = AuthService()


def _request_payload() -> object:
    return request.get_json(silent=True)


@auth_bp.route("/register", methods=["POST"])
def register() -> ResponseReturnValue:
    """注册新用户.

    Returns:
        201 响应,``data.token`` 为访问令牌.

    """
    payload = _request_payload()

    def _execute() -> ResponseReturnValue:
        return jsonify_unified_success(
            data=_auth_service.register_from_payload(payload),
            message=SuccessMessages.REGISTER_SUCCESS,
            status=HttpStatus.CREATED,
        )

    return safe_route_call(
        _execute,
        module="auth",
        action="register",
        public_error="Registration failed",
    )


@auth_bp.route("/login", methods=["POST"])
def login() -> ResponseReturnValue:
    """邮箱密码登录.

    Returns:
        ``data`` 包含 token、refreshToken 与 user.

    """
    payload = _request_payload()

    def _execute() -> ResponseReturnValue:
        result = _auth_service.login_from_payload(payload)
        return jsonify_unified_success(data=result.to_payload(), message=SuccessMessages.LOGIN_SUCCESS)

    return safe_route_call(
        _execute,
        module="auth",
        action="login",
        public_error="Login failed",
    )


@auth_bp.route("/auth/refresh", methods=["POST"])
@jwt_required(refresh=True)
def refresh() -> ResponseReturnValue:
    """使用刷新令牌换取新的访问令牌."""
    identity = str(get_jwt_identity())
    return safe_route_call(
        lambda: jsonify_unified_success(data=_auth_service.refresh(identity), message=SuccessMessages.TOKEN_REFRESHED),
        module="auth",
        action="refresh",
        public_error="Token refresh failed",
    )


@auth_bp.route("/forget-password", methods=["POST"])
def forget_password() -> ResponseReturnValue:
    """申请密码重置令牌."""
    payload = _request_payload()

    def _execute() -> ResponseReturnValue:
        _auth_service.forget_password_from_payload(payload)
        return jsonify_unified_success(message=SuccessMessages.RESET_LINK_SENT)

    return safe_route_call(
        _execute,
        module="auth",
        action="forget_password",
        public_error="Failed to send reset link",
    )


@auth_bp.route("/reset-password/<token>", methods=["POST"])
def reset_password(token: str) -> ResponseReturnValue:
    """使用重置令牌设置新密码.

    Args:
        token: 重置令牌.

    """
    payload = _request_payload()

    def _execute() -> ResponseReturnValue:
        _auth_service.reset_password_from_payload(token, payload)
        return jsonify_unified_success(message=SuccessMessages.PASSWORD_RESET)

    return safe_route_call(
        _execute,
        module="auth",
        action="reset_password",
        public_error="Failed to reset password",
    )
