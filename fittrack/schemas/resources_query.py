"""资源列表 query schema.

目标:
- 将列表接口的 page/limit/search/sort/order 规范化、默认值与边界处理下沉到 schema 单入口
- 缺省值来自资源注册表,不同资源可以拥有不同的默认排序与分页大小
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from pydantic import field_validator

from fittrack.constants import SORT_ORDERS
from fittrack.schemas.base import PayloadSchema
from fittrack.schemas.query_parsers import parse_int, parse_text
from fittrack.schemas.validation import SchemaMessageKeyError, validate_or_raise
from fittrack.types.resources import ResourceListFilters

if TYPE_CHECKING:
    from fittrack.core.resources import ResourceDefinition

_DEFAULT_PAGE = 1
_DEFAULT_LIMIT = 10
_MAX_LIMIT = 100
_QUERY_KEYS = ("page", "limit", "search", "sort", "order")


class ResourceListQuery(PayloadSchema):
    """资源列表 query 参数 schema."""

    page: int = _DEFAULT_PAGE
    limit: int = _DEFAULT_LIMIT
    search: str = ""
    sort: str = "createdAt"
    order: str = "desc"

    @field_validator("page", mode="before")
    @classmethod
    def _parse_page(cls, value: Any) -> int:
        parsed = parse_int(value, default=_DEFAULT_PAGE)
        return max(parsed, 1)

    @field_validator("limit", mode="before")
    @classmethod
    def _parse_limit(cls, value: Any) -> int:
        parsed = parse_int(value, default=_DEFAULT_LIMIT)
        return max(min(parsed, _MAX_LIMIT), 1)

    @field_validator("search", "sort", mode="before")
    @classmethod
    def _parse_strings(cls, value: Any) -> str:
        return parse_text(value)

    @field_validator("order", mode="before")
    @classmethod
    def _parse_order(cls, value: Any) -> str:
        cleaned = parse_text(value).lower()
        if cleaned not in SORT_ORDERS:
            raise SchemaMessageKeyError("order must be 'asc' or 'desc'", message_key="INVALID_REQUEST")
        return cleaned

    @classmethod
    def from_args(cls, args: Mapping[str, Any], definition: ResourceDefinition) -> ResourceListQuery:
        """按资源默认值解析请求参数.

        空白参数视为未传入,回退到资源注册表中的默认值.

        Args:
            args: 请求 query 参数映射.
            definition: 资源定义.

        Returns:
            规范化后的 query 对象.

        Raises:
            ValidationError: 当参数非法时抛出.

        """
        payload: dict[str, Any] = {
            "limit": definition.page_size,
            "sort": definition.default_sort,
            "order": definition.default_order,
        }
        for key in _QUERY_KEYS:
            value = args.get(key)
            if value is None or (isinstance(value, str) and not value.strip()):
                continue
            payload[key] = value
        return validate_or_raise(cls, payload, message_key="INVALID_REQUEST")

    def to_filters(self) -> ResourceListFilters:
        """转换为资源列表 filters 对象."""
        return ResourceListFilters(
            page=self.page,
            limit=self.limit,
            search=self.search,
            sort=self.sort,
            order=self.order,
        )
