"""资源文档 Repository.

职责:
- 负责 Query 组装与数据库读取(read)
- 负责写操作的数据落库(delete/flush)(write)
- 不做序列化、不返回 Response、不 commit
"""

from __future__ import annotations

from typing import Any, cast

from sqlalchemy.orm import Query
from sqlalchemy.sql.elements import ColumnElement

from fittrack import db
from fittrack.models.resource_document import ResourceDocument
from fittrack.types.listing import PaginatedResult


class ResourceDocumentsRepository:
    """资源文档查询 Repository."""

    def _scoped_query(self, resource: str, *, owner_id: int | None) -> Query[Any]:
        query: Query[Any] = cast(Query[Any], ResourceDocument.query)
        query = query.filter(ResourceDocument.resource == resource)
        if owner_id is not None:
            query = query.filter(ResourceDocument.owner_id == owner_id)
        return query

    def list_documents(self, resource: str, *, owner_id: int | None = None) -> list[ResourceDocument]:
        """返回指定资源类型的全部文档,按 ID 升序.

        仅用于需要在内存中按 JSON 负载字段搜索或排序的列表查询.

        Args:
            resource: 资源类型标识.
            owner_id: 归属用户 ID,为 None 时不按用户过滤.

        Returns:
            文档列表.

        """
        query = self._scoped_query(resource, owner_id=owner_id)
        return cast("list[ResourceDocument]", query.order_by(ResourceDocument.id.asc()).all())

    def paginate_documents(
        self,
        resource: str,
        *,
        owner_id: int | None = None,
        sort_field: str = "createdAt",
        descending: bool = False,
        page: int = 1,
        limit: int = 10,
    ) -> PaginatedResult[ResourceDocument]:
        """按时间戳列排序并在数据库侧分页.

        Args:
            resource: 资源类型标识.
            owner_id: 归属用户 ID,为 None 时不按用户过滤.
            sort_field: ``createdAt`` 或 ``updatedAt``,其他值按 ``createdAt`` 处理.
            descending: 是否降序.
            page: 页码,从 1 开始.
            limit: 每页条数.

        Returns:
            分页结果,同一时间戳的文档按 ID 同向排序.

        """
        sortable_fields: dict[str, ColumnElement[Any]] = {
            "createdAt": cast(ColumnElement[Any], ResourceDocument.created_at),
            "updatedAt": cast(ColumnElement[Any], ResourceDocument.updated_at),
        }
        order_column = sortable_fields.get(sort_field, sortable_fields["createdAt"])
        query = self._scoped_query(resource, owner_id=owner_id).order_by(
            order_column.desc() if descending else order_column.asc(),
            ResourceDocument.id.desc() if descending else ResourceDocument.id.asc(),
        )

        pagination = cast(Any, query).paginate(page=page, per_page=limit, error_out=False)
        return PaginatedResult(
            items=list(pagination.items),
            total=pagination.total,
            page=pagination.page,
            pages=pagination.pages,
            limit=pagination.per_page,
        )

    def get_document(
        self,
        resource: str,
        document_id: int,
        *,
        owner_id: int | None = None,
    ) -> ResourceDocument | None:
        query = self._scoped_query(resource, owner_id=owner_id).filter(ResourceDocument.id == document_id)
        return cast("ResourceDocument | None", query.first())

    def delete(self, document: ResourceDocument) -> None:
        db.session.delete(document)
        db.session.flush()
