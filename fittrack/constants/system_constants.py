"""FitTrack - 常量定义模块

错误分类与严重度决定错误日志级别;对外文案沿用前端已展示的英文措辞.
"""

from enum import Enum


class ErrorCategory(Enum):
    """错误分类枚举."""

    VALIDATION = "validation"
    BUSINESS = "business"
    AUTHENTICATION = "authentication"
    DATABASE = "database"
    SYSTEM = "system"


class ErrorSeverity(Enum):
    """错误严重程度枚举."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ErrorMessages:
    """错误消息常量."""

    # 通用错误
    INTERNAL_ERROR = "Server error"
    VALIDATION_ERROR = "Validation failed"
    RESOURCE_NOT_FOUND = "Resource not found"
    INVALID_REQUEST = "Invalid request"

    # 认证错误
    INVALID_CREDENTIALS = "Invalid email or password"
    EMAIL_EXISTS = "Email already exists"
    EMAIL_NOT_FOUND = "User with this email does not exist"
    RESET_TOKEN_INVALID = "Invalid or expired token"
    TOKEN_MISSING = "Access token is missing"
    TOKEN_EXPIRED = "Access token has expired"
    TOKEN_INVALID = "Invalid or expired token"
    USER_NOT_FOUND = "User not found"

    # 数据库错误
    DATABASE_QUERY_ERROR = "Database error"


class SuccessMessages:
    """成功消息常量."""

    OPERATION_SUCCESS = "Operation succeeded"
    DATA_SAVED = "Saved successfully"
    DATA_DELETED = "Deleted successfully"
    DATA_UPDATED = "Updated successfully"

    REGISTER_SUCCESS = "User registered successfully"
    LOGIN_SUCCESS = "Login successful"
    TOKEN_REFRESHED = "Token refreshed"
    RESET_LINK_SENT = "Password reset link sent successfully"
    PASSWORD_RESET = "Password reset successfully"
    PROFILE_UPDATED = "Profile updated successfully"


__all__ = [
    "ErrorCategory",
    "ErrorMessages",
    "ErrorSeverity",
    "SuccessMessages",
]
