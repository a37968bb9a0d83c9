"""数据模型模块.

主要模型:
- User: 用户模型,包含资料与健身目标
- ResourceDocument: 通用资源文档模型,承载所有业务资源的不透明负载
"""

from fittrack.models.resource_document import ResourceDocument
from fittrack.models.user import User

__all__ = ["ResourceDocument", "User"]
