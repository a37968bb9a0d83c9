"""资源列表相关类型."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class ResourceListFilters:
    """资源列表查询条件.

    Attributes:
        page: 页码,从 1 开始.
        limit: 每页数量.
        search: 关键字,空字符串表示不过滤.
        sort: 排序字段.
        order: 排序方向,``asc`` 或 ``desc``.

    """

    page: int
    limit: int
    search: str
    sort: str
    order: str
