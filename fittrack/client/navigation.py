"""客户端导航记录.

状态层不渲染页面,只记录当前位置,供编辑跳转与登录重定向使用.
"""

from __future__ import annotations

from collections.abc import Callable


class Navigator:
    """记录当前路径与历史."""

    def __init__(self, initial: str = "/") -> None:
        self.history: list[str] = [initial]
        self._listeners: list[Callable[[str], None]] = []

    @property
    def location(self) -> str:
        return self.history[-1]

    def navigate(self, path: str) -> None:
        """跳转到 ``path``;与当前位置相同时不重复记录."""
        if path == self.location:
            return
        self.history.append(path)
        for listener in list(self._listeners):
            listener(path)

    def subscribe(self, listener: Callable[[str], None]) -> Callable[[], None]:
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe
