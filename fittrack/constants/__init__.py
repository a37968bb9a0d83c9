"""常量模块。

集中管理系统常量，包括错误分类、消息文案、HTTP 相关常量等。
"""

# 导入HTTP状态码常量（使用Python标准库）
from http import HTTPStatus as HttpStatus

from .http_headers import HttpHeaders
from .system_constants import ErrorCategory, ErrorMessages, ErrorSeverity, SuccessMessages

# 列表排序方向
SORT_ORDER_ASC = "asc"
SORT_ORDER_DESC = "desc"
SORT_ORDERS = (SORT_ORDER_ASC, SORT_ORDER_DESC)

__all__ = [
    "SORT_ORDERS",
    "SORT_ORDER_ASC",
    "SORT_ORDER_DESC",
    "ErrorCategory",
    "ErrorMessages",
    "ErrorSeverity",
    "HttpHeaders",
    "HttpStatus",
    "SuccessMessages",
]
