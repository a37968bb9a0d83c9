"""通用资源 Store.

每种资源一个 `ResourceStore` 实例,持有当前页记录、当前编辑记录、加载/错误状态以及
列表控制状态(page/limit/sort/order/search).所有状态变更都在事件循环线程的结算
回调中同步完成,订阅者拿到的是同一个状态对象.

读操作(fetch_list、fetch_by_id)按类型维护递增序号,只有最新一次发起的请求的结果会被
应用,较早发起但较晚结算的结果直接丢弃.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Generic, TypeVar

from fittrack.client.envelope import RequestEnvelope, invoke
from fittrack.constants import SORT_ORDER_ASC, SORT_ORDER_DESC
from fittrack.utils.structlog_config import get_client_logger

if TYPE_CHECKING:
    from fittrack.client.transport import ResourceApi
    from fittrack.core.resources import ResourceDefinition
    from fittrack.types import PayloadMapping, ResourceRecord
    from fittrack.types.listing import PaginatedResult

StateT = TypeVar("StateT")
T = TypeVar("T")

Listener = Callable[[StateT], None]

FETCH_LIST = "fetch_list"
FETCH_BY_ID = "fetch_by_id"
CREATE = "create"
UPDATE = "update"
DELETE = "delete"


class ObservableStore(Generic[StateT]):
    """可订阅的状态容器基类.

    子类通过 `_dispatch` 发起封套调用,结算后在事件循环线程中执行 handler 并通知订阅者.
    """

    def __init__(self, state: StateT, *, name: str) -> None:
        self.state = state
        self.name = name
        self.envelopes: dict[str, RequestEnvelope] = {}
        self._listeners: list[Listener[StateT]] = []
        self._logger = get_client_logger("store", store=name)

    def subscribe(self, listener: Listener[StateT]) -> Callable[[], None]:
        """注册订阅者,返回取消订阅函数."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self.state)

    def _dispatch(
        self,
        kind: str,
        operation: Callable[..., T],
        *args: object,
        fallback: str,
        handler: Callable[[RequestEnvelope[T]], None],
        sequence: int = 0,
    ) -> asyncio.Task[RequestEnvelope[T]]:
        task = invoke(operation, *args, fallback=fallback, name=kind, sequence=sequence)

        async def _settle() -> RequestEnvelope[T]:
            envelope = await task
            self.envelopes[kind] = envelope
            handler(envelope)
            if envelope.is_rejected and not envelope.session_expired:
                self._logger.warning(
                    "请求失败",
                    operation=kind,
                    reason=envelope.error_reason,
                )
            return envelope

        return asyncio.get_running_loop().create_task(_settle())


@dataclass(slots=True)
class ResourceState:
    """资源 Store 的状态快照(同一对象,原地更新)."""

    items: list[ResourceRecord] = field(default_factory=list)
    current_item: ResourceRecord | None = None
    total_count: int = 0
    loading: bool = False
    error: str | None = None
    page: int = 1
    limit: int = 10
    sort: str = ""
    order: str = SORT_ORDER_ASC
    search: str = ""


def record_identifier(record: ResourceRecord | None, id_field: str = "_id") -> str | None:
    """读取记录标识,兼容 ``_id`` 与 ``id``."""
    if not record:
        return None
    value = record.get(id_field)
    if value is None:
        value = record.get("id")
    return None if value is None else str(value)


class ResourceStore(ObservableStore[ResourceState]):
    """单个资源类型的客户端状态容器.

    Args:
        definition: 资源定义,提供默认排序与分页大小.
        api: 绑定该资源的 REST 调用.

    """

    def __init__(self, definition: ResourceDefinition, api: ResourceApi) -> None:
        super().__init__(
            ResourceState(
                limit=definition.page_size,
                sort=definition.default_sort,
                order=definition.default_order,
            ),
            name=definition.name,
        )
        self.definition = definition
        self._api = api
        self._sequences: dict[str, int] = {FETCH_LIST: 0, FETCH_BY_ID: 0}

    # ------------------------------------------------------------------ #
    # 序号
    # ------------------------------------------------------------------ #
    def _next_sequence(self, kind: str) -> int:
        self._sequences[kind] += 1
        return self._sequences[kind]

    def _is_stale(self, envelope: RequestEnvelope) -> bool:
        stale = envelope.sequence != self._sequences[envelope.operation]
        if stale:
            self._logger.debug(
                "丢弃过期结果",
                operation=envelope.operation,
                sequence=envelope.sequence,
                latest=self._sequences[envelope.operation],
            )
        return stale

    def _begin(self) -> None:
        self.state.error = None

    def _id_of(self, record: ResourceRecord | None) -> str | None:
        return record_identifier(record, self.definition.id_field)

    # ------------------------------------------------------------------ #
    # 读
    # ------------------------------------------------------------------ #
    def fetch_list(
        self,
        page: int | None = None,
        limit: int | None = None,
        search: str | None = None,
        sort: str | None = None,
        order: str | None = None,
    ) -> asyncio.Task[RequestEnvelope[PaginatedResult[ResourceRecord]]]:
        """拉取一页记录.

        未传入的参数取当前状态中的值.发起时 ``loading=True`` 并清空错误;成功时替换
        ``items`` 与 ``total_count``;失败时保留已有数据,只写入 ``error``.
        """
        state = self.state
        state.page = state.page if page is None else page
        state.limit = state.limit if limit is None else limit
        state.search = state.search if search is None else search
        state.sort = state.sort if sort is None else sort
        state.order = state.order if order is None else order

        sequence = self._next_sequence(FETCH_LIST)
        self._begin()
        state.loading = True
        self._notify()

        return self._dispatch(
            FETCH_LIST,
            self._api.list,
            state.page,
            state.limit,
            state.search,
            state.sort,
            state.order,
            fallback=f"Failed to fetch {self.definition.label}",
            handler=self._apply_fetch_list,
            sequence=sequence,
        )

    def _apply_fetch_list(self, envelope: RequestEnvelope[PaginatedResult[ResourceRecord]]) -> None:
        if self._is_stale(envelope):
            return
        state = self.state
        state.loading = False
        if envelope.is_fulfilled and envelope.payload is not None:
            state.items = list(envelope.payload.items)
            state.total_count = envelope.payload.total
            state.error = None
        elif envelope.is_rejected and not envelope.session_expired:
            state.error = envelope.error_reason
        self._notify()

    def fetch_by_id(self, record_id: str) -> asyncio.Task[RequestEnvelope[ResourceRecord]]:
        """读取单条记录到 ``current_item``;失败时不清空已有的 ``current_item``."""
        sequence = self._next_sequence(FETCH_BY_ID)
        self._begin()
        self._notify()
        return self._dispatch(
            FETCH_BY_ID,
            self._api.get,
            str(record_id),
            fallback=f"Failed to fetch {self.definition.item_label}",
            handler=self._apply_fetch_by_id,
            sequence=sequence,
        )

    def _apply_fetch_by_id(self, envelope: RequestEnvelope[ResourceRecord]) -> None:
        if self._is_stale(envelope):
            return
        if envelope.is_fulfilled:
            self.state.current_item = envelope.payload
        elif envelope.is_rejected and not envelope.session_expired:
            self.state.error = envelope.error_reason
        self._notify()

    # ------------------------------------------------------------------ #
    # 写
    # ------------------------------------------------------------------ #
    def create(self, record: PayloadMapping) -> asyncio.Task[RequestEnvelope[ResourceRecord]]:
        """创建记录,成功后追加到 ``items`` 并令 ``total_count`` 加一."""
        self._begin()
        self._notify()
        return self._dispatch(
            CREATE,
            self._api.create,
            dict(record),
            fallback=f"Failed to create {self.definition.item_label}",
            handler=self._apply_create,
        )

    def _apply_create(self, envelope: RequestEnvelope[ResourceRecord]) -> None:
        if envelope.is_fulfilled and envelope.payload is not None:
            self.state.items = [*self.state.items, envelope.payload]
            self.state.total_count += 1
        elif envelope.is_rejected and not envelope.session_expired:
            self.state.error = envelope.error_reason
        self._notify()

    def update(self, record_id: str, record: PayloadMapping) -> asyncio.Task[RequestEnvelope[ResourceRecord]]:
        """更新记录,成功后按位置替换 ``items`` 中同 ID 的条目;不在当前页时不做处理."""
        self._begin()
        self._notify()
        target = str(record_id)

        def _apply(envelope: RequestEnvelope[ResourceRecord]) -> None:
            if envelope.is_fulfilled and envelope.payload is not None:
                self.state.items = [
                    envelope.payload if self._id_of(item) == target else item for item in self.state.items
                ]
            elif envelope.is_rejected and not envelope.session_expired:
                self.state.error = envelope.error_reason
            self._notify()

        return self._dispatch(
            UPDATE,
            self._api.update,
            target,
            dict(record),
            fallback=f"Failed to update {self.definition.item_label}",
            handler=_apply,
        )

    def delete(self, record_id: str) -> asyncio.Task[RequestEnvelope[None]]:
        """删除记录,成功后移除同 ID 条目并令 ``total_count`` 减一(不小于 0)."""
        self._begin()
        self._notify()
        target = str(record_id)

        def _apply(envelope: RequestEnvelope[None]) -> None:
            if envelope.is_fulfilled:
                self.state.items = [item for item in self.state.items if self._id_of(item) != target]
                self.state.total_count = max(0, self.state.total_count - 1)
            elif envelope.is_rejected and not envelope.session_expired:
                self.state.error = envelope.error_reason
            self._notify()

        return self._dispatch(
            DELETE,
            self._api.delete,
            target,
            fallback=f"Failed to delete {self.definition.item_label}",
            handler=_apply,
        )

    # ------------------------------------------------------------------ #
    # 同步状态操作
    # ------------------------------------------------------------------ #
    def reset_current(self, value: ResourceRecord | None = None) -> None:
        """无条件重置 ``current_item``."""
        self.state.current_item = value
        self._notify()

    def update_sort(self, field_name: str) -> None:
        """同一字段翻转排序方向;新字段从升序开始."""
        state = self.state
        if field_name == state.sort:
            state.order = SORT_ORDER_DESC if state.order == SORT_ORDER_ASC else SORT_ORDER_ASC
        else:
            state.sort = field_name
            state.order = SORT_ORDER_ASC
        self._notify()

    def update_search(self, text: str) -> None:
        """只更新搜索词,不触发请求."""
        self.state.search = text
        self._notify()


__all__ = [
    "ObservableStore",
    "ResourceState",
    "ResourceStore",
    "record_identifier",
]
