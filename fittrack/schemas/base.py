"""Schema 基础设施."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class PayloadSchema(BaseModel):
    """写路径 payload 与列表 query 的基础 schema.

    约定:
    - 默认忽略未知字段, 资源负载字段对服务端不透明.
    - schema 负责校验与对外错误文案, 路由层只负责读取原始参数.
    """

    model_config = ConfigDict(extra="ignore")
