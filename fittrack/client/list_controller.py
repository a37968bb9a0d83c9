"""列表控制器.

把列表页的交互(搜索框、可排序表头、分页、编辑/删除按钮)翻译为 `ResourceStore`
调用.页码在控制器内从 0 开始,发送给后端时加一.
"""

from __future__ import annotations

import asyncio
import inspect
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING

from fittrack.forms.definitions import get_form_definition
from fittrack.settings import DEFAULT_SEARCH_DEBOUNCE_SECONDS
from fittrack.utils.pagination_utils import clamp_page_index, compute_page_count

if TYPE_CHECKING:
    from fittrack.client.envelope import RequestEnvelope
    from fittrack.client.navigation import Navigator
    from fittrack.client.notifications import Notifier
    from fittrack.client.store import ResourceStore

ConfirmCallback = Callable[[str], bool | Awaitable[bool]]
FetchTask = asyncio.Task["RequestEnvelope"]


class ListController:
    """资源列表页的交互逻辑.

    挂载时以及 (去抖后的搜索词、页码、每页数量、排序字段、排序方向) 任一变化时,
    恰好发起一次 ``fetch_list``.

    Args:
        store: 资源 Store.
        notifier: 提示通道,用于删除结果.
        navigator: 导航,用于编辑跳转.
        confirm: 删除确认回调,返回 True 才会真正删除;可以是协程函数.
        rows_per_page: 初始每页数量,默认取资源定义.
        search_debounce: 搜索去抖时长(秒).

    """

    def __init__(
        self,
        store: ResourceStore,
        *,
        notifier: Notifier,
        navigator: Navigator,
        confirm: ConfirmCallback,
        rows_per_page: int | None = None,
        search_debounce: float = DEFAULT_SEARCH_DEBOUNCE_SECONDS,
    ) -> None:
        self.store = store
        self.notifier = notifier
        self.navigator = navigator
        self.confirm = confirm
        self.page = 0
        self.rows_per_page = rows_per_page or store.definition.page_size
        self.search_text = store.state.search
        self.search_debounce = search_debounce
        self.last_fetch: FetchTask | None = None
        self._debounce_handle: asyncio.TimerHandle | None = None

    @property
    def page_count(self) -> int:
        return compute_page_count(self.store.state.total_count, self.rows_per_page)

    # ------------------------------------------------------------------ #
    # 拉取
    # ------------------------------------------------------------------ #
    def mount(self) -> FetchTask:
        return self.fetch()

    def fetch(self) -> FetchTask:
        """按当前参数元组发起一次列表拉取."""
        state = self.store.state
        self.last_fetch = self.store.fetch_list(
            page=self.page + 1,
            limit=self.rows_per_page,
            search=state.search,
            sort=state.sort,
            order=state.order,
        )
        return self.last_fetch

    # ------------------------------------------------------------------ #
    # 交互
    # ------------------------------------------------------------------ #
    def on_sort(self, field_name: str) -> FetchTask:
        """切换排序后用新的 sort/order 重新拉取."""
        self.store.update_sort(field_name)
        return self.fetch()

    def on_page_change(self, page: int) -> FetchTask | None:
        if page == self.page:
            return None
        self.page = max(0, page)
        return self.fetch()

    def on_rows_per_page_change(self, rows_per_page: int) -> FetchTask | None:
        if rows_per_page <= 0:
            raise ValueError("rows_per_page 必须为正整数")
        if rows_per_page == self.rows_per_page and self.page == 0:
            return None
        self.rows_per_page = rows_per_page
        self.page = 0
        return self.fetch()

    def on_search(self, text: str) -> None:
        """记录输入并重新计时;去抖结束后才更新 Store 并拉取."""
        self.search_text = text
        self._cancel_debounce()
        loop = asyncio.get_running_loop()
        self._debounce_handle = loop.call_later(self.search_debounce, self._apply_search)

    def _apply_search(self) -> None:
        self._debounce_handle = None
        if self.search_text == self.store.state.search:
            return
        self.store.update_search(self.search_text)
        self.page = 0
        self.fetch()

    def on_edit(self, record_id: str) -> str:
        """跳转到编辑页并返回目标路径."""
        form_definition = get_form_definition(self.store.definition.name)
        path = form_definition.build_edit_path(str(record_id)) or f"/{self.store.definition.path}/edit/{record_id}"
        self.navigator.navigate(path)
        return path

    async def on_delete(self, record_id: str) -> bool:
        """确认后删除,提示结果,成功后重新拉取当前页.

        当前页因删除而不存在时回退一页.

        Returns:
            是否删除成功;用户取消时返回 False.

        """
        label = self.store.definition.item_label
        answer = self.confirm(f"Are you sure you want to delete this {label}?")
        confirmed = await answer if inspect.isawaitable(answer) else answer
        if not confirmed:
            return False

        envelope = await self.store.delete(record_id)
        if envelope.is_rejected:
            if not envelope.session_expired:
                self.notifier.error(envelope.error_reason or f"Failed to delete {label}")
            return False

        self.notifier.success(f"{label[:1].upper()}{label[1:]} deleted successfully")
        self.page = clamp_page_index(self.page, self.store.state.total_count, self.rows_per_page)
        await self.fetch()
        return True

    def dispose(self) -> None:
        """取消未触发的搜索去抖."""
        self._cancel_debounce()

    def _cancel_debounce(self) -> None:
        if self._debounce_handle is not None:
            self._debounce_handle.cancel()
            self._debounce_handle = None


__all__ = ["ListController"]
