"""FitTrack - 通用资源文档模型."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fittrack import db
from fittrack.utils.time_utils import time_utils

if TYPE_CHECKING:
    from fittrack.types import ResourceRecord


class ResourceDocument(db.Model):
    """通用资源文档.

    所有业务资源(训练、动作、饮食计划等)共用一张表,业务字段整体保存在
    ``payload`` JSON 中,由 ``resource`` 列区分资源类型.

    Attributes:
        id: 文档 ID,主键.
        resource: 资源类型标识,对应注册表中的 ``name``.
        owner_id: 归属用户 ID,仅对按用户隔离的资源填写.
        payload: 业务字段.
        created_at: 创建时间.
        updated_at: 更新时间.

    """

    __tablename__ = "resource_documents"

    id = db.Column(db.Integer, primary_key=True)
    resource = db.Column(db.String(64), nullable=False, index=True)
    owner_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=True, index=True)
    payload = db.Column(db.JSON, nullable=False, default=dict)
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=time_utils.now)
    updated_at = db.Column(db.DateTime(timezone=True), nullable=False, default=time_utils.now, onupdate=time_utils.now)

    __table_args__ = (db.Index("ix_resource_documents_resource_owner", "resource", "owner_id"),)

    def to_dict(self) -> ResourceRecord:
        """序列化为对外记录.

        负载字段在前,``_id`` 与时间戳字段总是以服务端为准.

        Returns:
            包含 ``_id``、负载字段、``createdAt``、``updatedAt`` 的字典.

        """
        record: ResourceRecord = {"_id": str(self.id)}
        record.update(dict(self.payload or {}))
        record["_id"] = str(self.id)
        record["createdAt"] = time_utils.to_json_timestamp(self.created_at)
        record["updatedAt"] = time_utils.to_json_timestamp(self.updated_at)
        return record

    def __repr__(self) -> str:
        return f"<ResourceDocument {self.resource}:{self.id}>"
