"""Query 参数解析 helper.

说明:
- 这些函数只做"类型转换 + 去空白 + 默认值"的稳定 canonicalization.
"""

from __future__ import annotations

from typing import Any


def parse_int(value: Any, *, default: int) -> int:
    """Parse int with default (strip strings; reject bool)."""
    if value is None:
        return default
    # bool 是 int 的子类,分页参数不应接受 bool.
    if isinstance(value, bool):
        raise ValueError("must be an integer")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        stripped = value.strip()
        if not stripped:
            return default
        try:
            return int(stripped, 10)
        except ValueError as exc:
            raise ValueError("must be an integer") from exc
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise ValueError("must be an integer") from exc


def parse_text(value: Any) -> str:
    """Parse text as stripped string; None -> ''."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value.strip()
    return str(value).strip()


__all__ = ["parse_int", "parse_text"]
