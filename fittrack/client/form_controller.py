"""表单控制器.

控制器独占一份草稿值,嵌套列表只能通过 `add_item` / `remove_item` / `update_item`
按点分路径修改(例如 ``meals.0.foodItems``),不直接暴露可变的嵌套对象.

状态机: ``idle -> loading -> ready -> submitting -> closed | ready``;
编辑记录加载失败时 ``loading -> failed``,``failed`` 可重新 ``load``.
"""

from __future__ import annotations

import copy
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

from fittrack.client.store import ObservableStore, record_identifier
from fittrack.forms.validation import coerce_values, validate_path, validate_values
from fittrack.types import JsonValue, MutablePayloadDict

if TYPE_CHECKING:
    from fittrack.client.navigation import Navigator
    from fittrack.client.notifications import Notifier
    from fittrack.client.store import ResourceStore
    from fittrack.forms.definitions.base import ResourceFormDefinition, ResourceFormField
    from fittrack.types import ResourceRecord


class FormPhase(str, Enum):
    """表单阶段."""

    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    SUBMITTING = "submitting"
    CLOSED = "closed"
    FAILED = "failed"


@dataclass(slots=True)
class FormState:
    """表单状态.

    Attributes:
        phase: 当前阶段.
        values: 草稿值,只能通过控制器方法修改.
        errors: 字段路径到错误文案的映射.
        touched: 已失焦过的字段路径.
        submit_error: 加载或提交失败的原因,内联展示.

    """

    phase: FormPhase = FormPhase.IDLE
    values: MutablePayloadDict = field(default_factory=dict)
    errors: dict[str, str] = field(default_factory=dict)
    touched: set[str] = field(default_factory=set)
    submit_error: str | None = None


def _split(path: str) -> list[str]:
    parts = [part for part in path.split(".") if part]
    if not parts:
        raise ValueError("字段路径不能为空")
    return parts


def _step(container: JsonValue, part: str) -> JsonValue:
    if isinstance(container, list):
        return container[int(part)]
    if isinstance(container, dict):
        return container[part]
    raise KeyError(part)


class FormController(ObservableStore[FormState]):
    """资源创建/编辑表单的交互逻辑.

    Args:
        store: 资源 Store.
        definition: 表单定义.
        record_id: 编辑场景的记录 ID,为空表示新建.
        notifier: 提示通道.
        navigator: 导航,保存成功后回到列表页.
        on_complete: 保存成功后的回调,参数为后端返回的记录.

    """

    def __init__(
        self,
        store: ResourceStore,
        definition: ResourceFormDefinition,
        *,
        record_id: str | None = None,
        notifier: Notifier | None = None,
        navigator: Navigator | None = None,
        on_complete: Callable[[ResourceRecord], None] | None = None,
    ) -> None:
        super().__init__(FormState(), name=f"{definition.name}_form")
        self.store = store
        self.definition = definition
        self.record_id = None if record_id is None else str(record_id)
        self.notifier = notifier
        self.navigator = navigator
        self.on_complete = on_complete

    # ------------------------------------------------------------------ #
    # 只读视图
    # ------------------------------------------------------------------ #
    @property
    def phase(self) -> FormPhase:
        return self.state.phase

    @property
    def values(self) -> MutablePayloadDict:
        """草稿的深拷贝."""
        return copy.deepcopy(self.state.values)

    @property
    def errors(self) -> dict[str, str]:
        return dict(self.state.errors)

    @property
    def submitting(self) -> bool:
        return self.state.phase == FormPhase.SUBMITTING

    @property
    def is_edit(self) -> bool:
        return self.record_id is not None

    # ------------------------------------------------------------------ #
    # 加载
    # ------------------------------------------------------------------ #
    async def load(self) -> None:
        """初始化草稿.

        编辑场景下 ``current_item`` 缺失或不是目标记录时先拉取.拉取失败时表单进入 ``failed``,
        原因写入 ``submit_error``,此时 ``submit`` 不会发起请求,可再次调用 ``load`` 重试.
        """
        if self.state.phase not in (FormPhase.IDLE, FormPhase.FAILED):
            return
        if self.record_id is None:
            self.state.values = self.definition.initial_values()
            self.state.phase = FormPhase.READY
            self._notify()
            return

        self.state.phase = FormPhase.LOADING
        self.state.submit_error = None
        self._notify()

        record = self.store.state.current_item
        if record_identifier(record, self.store.definition.id_field) != self.record_id:
            envelope = await self.store.fetch_by_id(self.record_id)
            if envelope.is_rejected:
                self.state.values = self.definition.initial_values()
                self.state.phase = FormPhase.FAILED
                if not envelope.session_expired:
                    self.state.submit_error = envelope.error_reason
                self._notify()
                return
            record = envelope.payload

        self.state.values = (
            self.definition.values_from_record(record) if record is not None else self.definition.initial_values()
        )
        self.state.phase = FormPhase.READY
        self._notify()

    # ------------------------------------------------------------------ #
    # 草稿编辑
    # ------------------------------------------------------------------ #
    def set_field(self, path: str, value: JsonValue) -> None:
        """设置字段值;已失焦的字段会立即重新校验."""
        parts = _split(path)
        parent = self._resolve(parts[:-1])
        key = parts[-1]
        if isinstance(parent, list):
            parent[int(key)] = copy.deepcopy(value)
        elif isinstance(parent, dict):
            parent[key] = copy.deepcopy(value)
        else:
            raise KeyError(path)

        if path in self.state.touched:
            self._revalidate(path)
        self._notify()

    def add_item(self, path: str, item: JsonValue | None = None) -> None:
        """在数组字段末尾追加元素,未提供时按字段定义生成空白元素."""
        target = self._list_at(path)
        if item is None:
            form_field = self._field_at(path)
            item = form_field.new_item() if form_field is not None else {}
        target.append(copy.deepcopy(item))
        self._drop_errors(path)
        self._notify()

    def remove_item(self, path: str, index: int) -> None:
        target = self._list_at(path)
        del target[index]
        self._drop_errors(path)
        self._notify()

    def update_item(self, path: str, index: int, changes: JsonValue) -> None:
        """更新数组元素;对象元素按键合并,标量元素整体替换."""
        target = self._list_at(path)
        current = target[index]
        if isinstance(current, dict) and isinstance(changes, Mapping):
            current.update(copy.deepcopy(dict(changes)))
        else:
            target[index] = copy.deepcopy(changes)
        item_path = f"{path}.{index}"
        if any(touched == item_path or touched.startswith(f"{item_path}.") for touched in self.state.touched):
            self._revalidate(item_path)
        self._notify()

    # ------------------------------------------------------------------ #
    # 校验与提交
    # ------------------------------------------------------------------ #
    def blur(self, path: str) -> str | None:
        """字段失焦校验,返回该字段的错误文案."""
        self.state.touched.add(path)
        self._revalidate(path)
        self._notify()
        return self.state.errors.get(path)

    def validate(self) -> bool:
        self.state.errors = validate_values(self.definition.fields, self.state.values)
        self._notify()
        return not self.state.errors

    async def submit(self) -> bool:
        """校验并提交草稿.

        编辑场景调用 ``update``,被清空的可选字段以 None 提交;否则调用 ``create``.
        非 ``ready`` 阶段直接返回 False,包括编辑记录加载失败后;
        校验失败时不发起请求.

        Returns:
            是否保存成功.

        """
        if self.state.phase != FormPhase.READY:
            return False
        if not self.validate():
            return False

        self.state.phase = FormPhase.SUBMITTING
        self.state.submit_error = None
        self._notify()

        payload = coerce_values(self.definition.fields, self.state.values, keep_cleared=self.is_edit)
        if self.record_id is not None:
            envelope = await self.store.update(self.record_id, payload)
        else:
            envelope = await self.store.create(payload)

        if envelope.is_rejected:
            self.state.phase = FormPhase.READY
            if not envelope.session_expired:
                self.state.submit_error = envelope.error_reason
            self._notify()
            return False

        self.state.phase = FormPhase.CLOSED
        self._notify()
        self.store.reset_current()
        if self.notifier is not None:
            self.notifier.success(self.definition.success_message)
        if self.navigator is not None and self.definition.list_path:
            self.navigator.navigate(self.definition.list_path)
        if self.on_complete is not None and envelope.payload is not None:
            self.on_complete(envelope.payload)
        return True

    # ------------------------------------------------------------------ #
    # Helpers
    # ------------------------------------------------------------------ #
    def _resolve(self, parts: list[str]) -> JsonValue:
        node: JsonValue = self.state.values
        for part in parts:
            node = _step(node, part)
        return node

    def _list_at(self, path: str) -> list[JsonValue]:
        target = self._resolve(_split(path))
        if not isinstance(target, list):
            raise TypeError(f"{path} 不是数组字段")
        return target

    def _field_at(self, path: str) -> ResourceFormField | None:
        fields = self.definition.fields
        form_field: ResourceFormField | None = None
        for part in _split(path):
            if part.isdigit():
                continue
            form_field = next((candidate for candidate in fields if candidate.name == part), None)
            if form_field is None:
                return None
            fields = form_field.item_fields
        return form_field

    def _revalidate(self, path: str) -> None:
        self._drop_errors(path)
        self.state.errors.update(validate_path(self.definition.fields, self.state.values, path))

    def _drop_errors(self, path: str) -> None:
        prefix = f"{path}."
        self.state.errors = {
            error_path: message
            for error_path, message in self.state.errors.items()
            if error_path != path and not error_path.startswith(prefix)
        }


__all__ = ["FormController", "FormPhase", "FormState"]
