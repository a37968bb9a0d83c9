"""客户端状态层.

主要模块:
- transport: 基于 requests 的 REST 调用与会话过期处理
- envelope: 单次后端调用的结果封套
- store: 通用资源 Store
- list_controller / form_controller: 列表页与表单页交互逻辑
- auth_store / profile_store: 认证与个人资料
- app_store: 组合根,启动时构造一次并注入
"""

from fittrack.client.app_store import AppStore
from fittrack.client.envelope import RequestEnvelope, RequestStatus, invoke
from fittrack.client.store import ResourceState, ResourceStore

__all__ = [
    "AppStore",
    "RequestEnvelope",
    "RequestStatus",
    "ResourceState",
    "ResourceStore",
    "invoke",
]
