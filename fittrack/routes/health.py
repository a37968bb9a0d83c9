"""FitTrack - 健康检查路由."""

from __future__ import annotations

from flask import Blueprint, current_app
from flask.typing import ResponseReturnValue

from fittrack.utils.response_utils import jsonify_unified_success
from fittrack.utils.route_safety import safe_route_call
from fittrack.utils.time_utils import time_utils

# 创建蓝图
health_bp = Blueprint("health", __name__)


@health_bp.route("/health-check")
def health_check() -> ResponseReturnValue:
    """基础健康检查.

    Returns:
        JSON 响应,包含服务状态和版本信息.

    """
    return safe_route_call(
        lambda: jsonify_unified_success(
            data={
                "status": "healthy",
                "timestamp": time_utils.to_json_timestamp(time_utils.now()),
                "version": current_app.config.get("APP_VERSION"),
            },
            message="Server is running",
        ),
        module="health",
        action="health_check",
        public_error="Health check failed",
    )
