"""分页计算工具.

服务端列表接口与客户端列表控制器共用同一套页数计算.
"""

from __future__ import annotations

from math import ceil


def compute_page_count(total: int, per_page: int) -> int:
    """根据总数和每页数量计算总页数.

    Args:
        total: 记录总数.
        per_page: 每页数量,非正数时视为无分页.

    Returns:
        总页数,记录为空时返回 0.

    """
    if total <= 0 or per_page <= 0:
        return 0
    return ceil(total / per_page)


def clamp_page_index(page_index: int, total: int, per_page: int) -> int:
    """将 0 起始的页下标限制在现有页范围内.

    删除记录后当前页可能已不存在,此时回退到最后一页.

    Args:
        page_index: 0 起始的页下标.
        total: 记录总数.
        per_page: 每页数量.

    Returns:
        合法的页下标,没有记录时返回 0.

    """
    page_count = compute_page_count(total, per_page)
    if page_count == 0:
        return 0
    return max(0, min(page_index, page_count - 1))


__all__ = ["clamp_page_index", "compute_page_count"]
