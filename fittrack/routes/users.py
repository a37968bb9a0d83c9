"""FitTrack - 个人资料与用户路由."""

from __future__ import annotations

from flask import Blueprint, request
from flask.typing import ResponseReturnValue
from flask_jwt_extended import get_jwt_identity, jwt_required

from fittrack.constants.system_constants import SuccessMessages
from fittrack.services.users.profile_service import ProfileService
from fittrack.utils.response_utils import jsonify_unified_success
from fittrack.utils.route_safety import safe_route_call

# 创建蓝图
users_bp = Blueprint("users", __name__)
_profile_service = ProfileService()


@users_bp.route("/my-profile")
@jwt_required()
def my_profile() -> ResponseReturnValue:
    """获取当前用户资料."""
    identity = str(get_jwt_identity())
    return safe_route_call(
        lambda: jsonify_unified_success(data=_profile_service.get_profile(identity)),
        module="users",
        action="my_profile",
        public_error="Failed to fetch profile",
    )


@users_bp.route("/edit-profile", methods=["PUT"])
@jwt_required()
def edit_profile() -> ResponseReturnValue:
    """局部更新当前用户资料与健身目标."""
    identity = str(get_jwt_identity())
    payload = request.get_json(silent=True)

    def _execute() -> ResponseReturnValue:
        return jsonify_unified_success(
            data=_profile_service.update_profile(identity, payload),
            message=SuccessMessages.PROFILE_UPDATED,
        )

    return safe_route_call(
        _execute,
        module="users",
        action="edit_profile",
        public_error="Failed to update profile",
        context={"user_id": identity},
    )


@users_bp.route("/users")
@jwt_required()
def list_users() -> ResponseReturnValue:
    """列出全部用户."""
    return safe_route_call(
        lambda: jsonify_unified_success(data={"users": _profile_service.list_users()}),
        module="users",
        action="list_users",
        public_error="Failed to fetch users",
    )
