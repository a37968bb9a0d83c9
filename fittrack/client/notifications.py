"""短暂提示(toast)."""

from __future__ import annotations

from collections import deque
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from fittrack.settings import DEFAULT_TOAST_HISTORY
from fittrack.utils.time_utils import time_utils


class ToastLevel(str, Enum):
    """提示级别."""

    SUCCESS = "success"
    ERROR = "error"
    INFO = "info"


@dataclass(frozen=True, slots=True)
class Toast:
    level: ToastLevel
    message: str
    created_at: datetime = field(default_factory=time_utils.now)


class Notifier:
    """保存最近的提示并通知订阅者.

    Args:
        history: 保留的最大提示数量,超出后丢弃最早的提示.

    """

    def __init__(self, history: int = DEFAULT_TOAST_HISTORY) -> None:
        self._toasts: deque[Toast] = deque(maxlen=history)
        self._listeners: list[Callable[[Toast], None]] = []

    @property
    def toasts(self) -> list[Toast]:
        return list(self._toasts)

    @property
    def latest(self) -> Toast | None:
        return self._toasts[-1] if self._toasts else None

    def subscribe(self, listener: Callable[[Toast], None]) -> Callable[[], None]:
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def notify(self, level: ToastLevel, message: str) -> Toast:
        toast = Toast(level=level, message=message)
        self._toasts.append(toast)
        for listener in list(self._listeners):
            listener(toast)
        return toast

    def success(self, message: str) -> Toast:
        return self.notify(ToastLevel.SUCCESS, message)

    def error(self, message: str) -> Toast:
        return self.notify(ToastLevel.ERROR, message)

    def info(self, message: str) -> Toast:
        return self.notify(ToastLevel.INFO, message)

    def clear(self) -> None:
        self._toasts.clear()
