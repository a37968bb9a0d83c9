"""通用资源文档 Service.

职责:
- 列表查询的搜索、排序与分页编排
- 单条读取与归属校验
- 创建/更新/删除编排,调用表单服务与 repository 执行 add/delete/flush
- 不返回 Response、不 commit
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, cast

from sqlalchemy.exc import SQLAlchemyError

from fittrack.core.resources import TIMESTAMP_FIELDS
from fittrack.errors import DatabaseError, ResourceNotFoundError, ValidationError
from fittrack.repositories.resource_documents_repository import ResourceDocumentsRepository
from fittrack.services.form_service.resource_document_form_service import ResourceDocumentFormService
from fittrack.types.listing import PaginatedResult
from fittrack.utils.pagination_utils import compute_page_count
from fittrack.utils.structlog_config import log_debug, log_info
from fittrack.utils.time_utils import time_utils

if TYPE_CHECKING:
    from fittrack.core.resources import ResourceDefinition
    from fittrack.models.resource_document import ResourceDocument
    from fittrack.services.form_service.resource_service import ServiceResult
    from fittrack.types import PayloadMapping, ResourceRecord
    from fittrack.types.resources import ResourceListFilters

_TIMESTAMP_ATTRS = {"createdAt": "created_at", "updatedAt": "updated_at"}


class ResourceDocumentService:
    """单个资源类型的读写服务."""

    def __init__(
        self,
        definition: ResourceDefinition,
        repository: ResourceDocumentsRepository | None = None,
    ) -> None:
        self.definition = definition
        self._repository = repository or ResourceDocumentsRepository()

    # --------------------------------------------------------------------- #
    # 读
    # --------------------------------------------------------------------- #
    def list_records(
        self,
        filters: ResourceListFilters,
        *,
        owner_id: int | None = None,
    ) -> PaginatedResult[ResourceRecord]:
        """分页列出记录.

        无搜索词且按 ``createdAt``/``updatedAt`` 排序时,过滤、排序与分页都在数据库完成.
        其余情况需要读取 JSON 负载,在内存中处理:搜索对 ``search_fields`` 做不区分大小写的
        子串匹配,排序字段缺失的记录无论升降序都排在最后.

        Args:
            filters: 列表查询条件.
            owner_id: 当前用户 ID,仅对按用户隔离的资源生效.

        Returns:
            分页结果,``total`` 为过滤后的总数.

        """
        descending = filters.order == "desc"
        if not filters.search.strip() and filters.sort in TIMESTAMP_FIELDS:
            page = self._repository.paginate_documents(
                self.definition.name,
                owner_id=self._scope(owner_id),
                sort_field=filters.sort,
                descending=descending,
                page=filters.page,
                limit=filters.limit,
            )
            self._log_listed(filters, total=page.total, paged_in="database")
            return PaginatedResult(
                items=[document.to_dict() for document in page.items],
                total=page.total,
                page=filters.page,
                pages=compute_page_count(page.total, filters.limit),
                limit=filters.limit,
            )

        documents = self._repository.list_documents(self.definition.name, owner_id=self._scope(owner_id))
        matched = [document for document in documents if self._matches(document, filters.search)]
        ordered = self._sort(matched, filters.sort, descending=descending)

        total = len(ordered)
        self._log_listed(filters, total=total, paged_in="memory")
        start = (filters.page - 1) * filters.limit
        page_items = ordered[start : start + filters.limit]
        return PaginatedResult(
            items=[document.to_dict() for document in page_items],
            total=total,
            page=filters.page,
            pages=compute_page_count(total, filters.limit),
            limit=filters.limit,
        )

    def get_record(self, record_id: str, *, owner_id: int | None = None) -> ResourceRecord:
        """读取单条记录."""
        return self._load(record_id, owner_id=owner_id).to_dict()

    # --------------------------------------------------------------------- #
    # 写
    # --------------------------------------------------------------------- #
    def create_record(self, payload: PayloadMapping, *, owner_id: int | None = None) -> ResourceRecord:
        """创建记录.

        Raises:
            ValidationError: 负载校验失败时抛出,文案为第一条字段错误.

        """
        form_service = ResourceDocumentFormService(self.definition, owner_id=self._scope(owner_id))
        result = form_service.upsert(payload)
        if not result.success or result.data is None:
            raise self._invalid(result)
        return result.data.to_dict()

    def update_record(
        self,
        record_id: str,
        payload: PayloadMapping,
        *,
        owner_id: int | None = None,
    ) -> ResourceRecord:
        """更新记录,负载与已有字段合并后整体校验."""
        document = self._load(record_id, owner_id=owner_id)
        form_service = ResourceDocumentFormService(self.definition, owner_id=document.owner_id)
        result = form_service.upsert(payload, document)
        if not result.success or result.data is None:
            raise self._invalid(result)
        return result.data.to_dict()

    def delete_record(self, record_id: str, *, owner_id: int | None = None) -> None:
        """删除记录."""
        document = self._load(record_id, owner_id=owner_id)
        try:
            self._repository.delete(document)
        except SQLAlchemyError as exc:
            raise DatabaseError(resource=self.definition.name, extra={"record_id": record_id}) from exc

        log_info(
            "资源文档已删除",
            module="resources",
            resource=self.definition.name,
            document_id=record_id,
            owner_id=owner_id,
        )

    # --------------------------------------------------------------------- #
    # Helpers
    # --------------------------------------------------------------------- #
    def _log_listed(self, filters: ResourceListFilters, *, total: int, paged_in: str) -> None:
        log_debug(
            "资源列表已查询",
            module="resources",
            resource=self.definition.name,
            total=total,
            page=filters.page,
            search=filters.search,
            paged_in=paged_in,
        )

    def _scope(self, owner_id: int | None) -> int | None:
        return owner_id if self.definition.owned else None

    def _invalid(self, result: ServiceResult[ResourceDocument]) -> ValidationError:
        errors = result.extra.get("errors")
        return ValidationError(
            result.message,
            field_errors=cast("dict[str, str]", errors) if isinstance(errors, dict) else None,
            message_key=result.message_key,
            resource=self.definition.name,
        )

    def _load(self, record_id: str, *, owner_id: int | None) -> ResourceDocument:
        try:
            document_id = int(str(record_id).strip())
        except ValueError:
            raise ResourceNotFoundError(self.definition, record_id) from None

        document = self._repository.get_document(
            self.definition.name,
            document_id,
            owner_id=self._scope(owner_id),
        )
        if document is None:
            raise ResourceNotFoundError(self.definition, record_id)
        return document

    def _matches(self, document: ResourceDocument, search: str) -> bool:
        needle = search.strip().casefold()
        if not needle:
            return True
        payload = document.payload or {}
        for field_name in self.definition.search_fields:
            value = payload.get(field_name)
            if value is None or isinstance(value, (dict, list)):
                continue
            if needle in str(value).casefold():
                return True
        return False

    def _sort(self, documents: list[ResourceDocument], field_name: str, *, descending: bool) -> list[ResourceDocument]:
        # 数字组始终在字符串组之前,缺失值最后;方向只作用于组内
        numbers: list[tuple[Any, ResourceDocument]] = []
        strings: list[tuple[Any, ResourceDocument]] = []
        missing: list[ResourceDocument] = []
        for document in documents:
            value = self._sort_value(document, field_name)
            if value is None:
                missing.append(document)
            elif value[0] == 0:
                numbers.append((value[1], document))
            else:
                strings.append((value[1], document))

        numbers.sort(key=lambda pair: pair[0], reverse=descending)
        strings.sort(key=lambda pair: pair[0], reverse=descending)
        return [document for _, document in numbers] + [document for _, document in strings] + missing

    @staticmethod
    def _sort_value(document: ResourceDocument, field_name: str) -> tuple[int, Any] | None:
        if field_name in TIMESTAMP_FIELDS:
            timestamp = getattr(document, _TIMESTAMP_ATTRS[field_name])
            if timestamp is None:
                return None
            # 同一时间戳按 ID 同向排序,与数据库分页的顺序一致
            return (0, (time_utils.ensure_utc(timestamp).timestamp(), document.id))

        value = (document.payload or {}).get(field_name)
        if value is None or isinstance(value, (dict, list)):
            return None
        if isinstance(value, bool):
            return (0, int(value))
        if isinstance(value, (int, float)):
            return (0, value)
        # 字符串按不区分大小写排序
        return (1, str(value).casefold())
