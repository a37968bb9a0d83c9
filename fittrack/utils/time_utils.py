"""统一时间处理工具模块.

所有持久化时间均使用 UTC,对外序列化为带 ``Z`` 后缀的 ISO 8601 字符串.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta


class TimeUtils:
    """统一时间处理工具类."""

    @staticmethod
    def now() -> datetime:
        """获取当前 UTC 时间.

        Returns:
            带 UTC 时区信息的当前时间.

        """
        return datetime.now(UTC)

    @staticmethod
    def ensure_utc(dt: datetime) -> datetime:
        """将 naive 时间视为 UTC,aware 时间转换为 UTC."""
        if dt.tzinfo is None:
            return dt.replace(tzinfo=UTC)
        return dt.astimezone(UTC)

    def to_json_timestamp(self, dt: datetime | None) -> str | None:
        """序列化为毫秒精度的 ISO 字符串.

        Args:
            dt: 待序列化的时间,None 时直接返回 None.

        Returns:
            形如 ``2024-01-01T08:00:00.000Z`` 的字符串.

        """
        if dt is None:
            return None
        normalized = self.ensure_utc(dt)
        return normalized.strftime("%Y-%m-%dT%H:%M:%S.") + f"{normalized.microsecond // 1000:03d}Z"

    def expires_in(self, seconds: int) -> datetime:
        """返回当前时间之后 ``seconds`` 秒的 UTC 时间点."""
        return self.now() + timedelta(seconds=seconds)

    def is_expired(self, dt: datetime | None) -> bool:
        """判断给定时间点是否已过期,None 视为已过期."""
        if dt is None:
            return True
        return self.ensure_utc(dt) <= self.now()


time_utils = TimeUtils()
