"""工具模块.

包含服务端与客户端共用的实用工具和辅助函数.

主要工具:
- structlog_config: 结构化日志配置
- response_utils: 统一响应封装
- route_safety: 视图层异常与日志包装
- pagination_utils: 分页页数计算
- time_utils: 时间处理工具
"""
