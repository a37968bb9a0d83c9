"""请求封套.

一次后端调用对应一个 `RequestEnvelope`,状态只会从 pending 迁移到
fulfilled 或 rejected 一次.`invoke` 立即返回 ``asyncio.Task``,阻塞的 HTTP 调用
在线程中执行,任务结果总是已结算的封套,不会抛出异常.
"""

from __future__ import annotations

import asyncio
import json
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

from fittrack.client.transport import ApiError, SessionExpiredError, TransportError
from fittrack.utils.structlog_config import get_client_logger

T = TypeVar("T")

logger = get_client_logger("envelope")


class RequestStatus(str, Enum):
    """封套状态."""

    IDLE = "idle"
    PENDING = "pending"
    FULFILLED = "fulfilled"
    REJECTED = "rejected"


class EnvelopeStateError(RuntimeError):
    """封套状态迁移非法(例如重复结算)."""


@dataclass(slots=True)
class RequestEnvelope(Generic[T]):
    """单次后端调用的结果封套.

    Attributes:
        operation: 操作名,例如 ``fetch_list``.
        sequence: 发起时分配的序号,用于丢弃过期结果.
        status: 当前状态.
        payload: 仅 fulfilled 时存在.
        error_reason: 仅 rejected 时存在.
        session_expired: rejected 是否源于会话过期(由全局处理,不向调用方展示).

    """

    operation: str
    sequence: int = 0
    status: RequestStatus = RequestStatus.IDLE
    payload: T | None = None
    error_reason: str | None = None
    session_expired: bool = False

    @property
    def is_pending(self) -> bool:
        return self.status == RequestStatus.PENDING

    @property
    def is_fulfilled(self) -> bool:
        return self.status == RequestStatus.FULFILLED

    @property
    def is_rejected(self) -> bool:
        return self.status == RequestStatus.REJECTED

    def start(self) -> None:
        if self.status != RequestStatus.IDLE:
            raise EnvelopeStateError(f"{self.operation} 已经发起过")
        self.status = RequestStatus.PENDING

    def fulfill(self, payload: T) -> None:
        self._ensure_pending()
        self.status = RequestStatus.FULFILLED
        self.payload = payload

    def reject(self, reason: str, *, session_expired: bool = False) -> None:
        self._ensure_pending()
        self.status = RequestStatus.REJECTED
        self.error_reason = reason
        self.session_expired = session_expired

    def _ensure_pending(self) -> None:
        if self.status != RequestStatus.PENDING:
            raise EnvelopeStateError(f"{self.operation} 只能结算一次,当前状态 {self.status.value}")


def extract_error_reason(error: BaseException, fallback: str) -> str:
    """从失败中提取可读原因.

    优先级: 响应体中的 ``message`` 字段 > 整个响应体 > 兜底文案.

    Args:
        error: 捕获到的异常.
        fallback: 兜底文案,例如 ``Failed to fetch workouts``.

    Returns:
        非空的原因字符串.

    """
    body = error.body if isinstance(error, ApiError) else None
    if body is None:
        return fallback

    if isinstance(body, Mapping):
        message = body.get("message")
        if message is not None and str(message).strip():
            return str(message)
        if not body:
            return fallback
        return json.dumps(body, ensure_ascii=False, default=str)

    if isinstance(body, str):
        return body if body.strip() else fallback

    return json.dumps(body, ensure_ascii=False, default=str)


def invoke(
    operation: Callable[..., T],
    *args: object,
    fallback: str,
    name: str | None = None,
    sequence: int = 0,
) -> asyncio.Task[RequestEnvelope[T]]:
    """发起一次后端调用并立即返回.

    必须在事件循环线程中调用.返回的任务完成时封套已结算;失败不会以异常形式抛出,
    也不会自动重试.

    Args:
        operation: 同步的后端调用,在线程池中执行.
        *args: 传给 ``operation`` 的参数.
        fallback: 无法从失败中提取原因时使用的兜底文案.
        name: 操作名,默认取函数名.
        sequence: 调用方分配的序号.

    Returns:
        解析为已结算封套的任务.

    """
    envelope: RequestEnvelope[T] = RequestEnvelope(
        operation=name or getattr(operation, "__name__", "operation"),
        sequence=sequence,
    )
    envelope.start()
    logger.debug("请求已发起", operation=envelope.operation, sequence=sequence)

    async def _run() -> RequestEnvelope[T]:
        try:
            payload = await asyncio.to_thread(operation, *args)
        except SessionExpiredError as exc:
            envelope.reject(extract_error_reason(exc, fallback), session_expired=True)
        except (ApiError, TransportError) as exc:
            envelope.reject(extract_error_reason(exc, fallback))
        except Exception as exc:
            logger.exception("请求出现未预期异常", operation=envelope.operation, error=str(exc))
            envelope.reject(fallback)
        else:
            envelope.fulfill(payload)

        logger.debug(
            "请求已结算",
            operation=envelope.operation,
            sequence=sequence,
            status=envelope.status.value,
        )
        return envelope

    return asyncio.get_running_loop().create_task(_run())


__all__ = [
    "EnvelopeStateError",
    "RequestEnvelope",
    "RequestStatus",
    "extract_error_reason",
    "invoke",
]
