"""基础的资源表单定义模型.

这些定义会被服务层校验与客户端表单控制器共享,确保字段描述只有唯一来源.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from enum import Enum

from fittrack.types import JsonValue, MutablePayloadDict


class FieldKind(str, Enum):
    """字段值类型."""

    STRING = "string"
    TEXT = "text"
    NUMBER = "number"
    DATE = "date"
    ENUM = "enum"
    EMAIL = "email"
    BOOLEAN = "boolean"
    OBJECT = "object"
    ARRAY = "array"


@dataclass(slots=True)
class FieldOption:
    """枚举字段的可选项描述."""

    value: str
    label: str


@dataclass(slots=True)
class ResourceFormField:
    """单个字段的元数据.

    Attributes:
        name: 字段名,与资源负载中的键一致.
        label: 展示名称,同时用于校验错误文案.
        kind: 字段值类型.
        required: 是否必填.
        default: 新建表单时的默认值.
        min_length: 字符串最小长度.
        positive: 数值是否必须大于 0.
        minimum: 数值下限(含).
        options: 枚举可选项.
        item_fields: ARRAY/OBJECT 的子字段定义;ARRAY 未设置时元素视为标量.
        item_kind: ARRAY 标量元素的类型.
        min_items: ARRAY 的最少元素数.
        help_text: 帮助说明.

    """

    name: str
    label: str
    kind: FieldKind = FieldKind.STRING
    required: bool = False
    default: JsonValue = None
    min_length: int | None = None
    positive: bool = False
    minimum: float | None = None
    options: list[FieldOption] = field(default_factory=list)
    item_fields: list[ResourceFormField] = field(default_factory=list)
    item_kind: FieldKind = FieldKind.STRING
    min_items: int | None = None
    help_text: str | None = None

    @property
    def option_values(self) -> tuple[str, ...]:
        """枚举可选值."""
        return tuple(option.value for option in self.options)

    def initial_value(self) -> JsonValue:
        """返回新建表单时该字段的初始值(深拷贝,避免共享可变默认值)."""
        if self.default is not None:
            return copy.deepcopy(self.default)
        if self.kind == FieldKind.ARRAY:
            return []
        if self.kind == FieldKind.OBJECT:
            return build_initial_values(self.item_fields)
        if self.kind == FieldKind.BOOLEAN:
            return False
        return ""

    def new_item(self) -> JsonValue:
        """返回 ARRAY 字段新增元素时的空白元素."""
        if self.item_fields:
            return build_initial_values(self.item_fields)
        return ""


def build_initial_values(fields: list[ResourceFormField]) -> MutablePayloadDict:
    """根据字段列表构造初始值字典."""
    return {form_field.name: form_field.initial_value() for form_field in fields}


@dataclass(slots=True)
class ResourceFormDefinition:
    """描述某个资源表单的基础配置.

    Attributes:
        name: 资源英文名(与资源注册表一致,如 workout、meal_plan)
        fields: 字段定义列表
        success_message: 保存成功后的提示语
        list_path: 保存成功后返回的列表路径
        edit_path: 编辑页路径模板,``{id}`` 会被替换为记录 ID
        extra_config: 其他自定义配置

    """

    name: str
    fields: list[ResourceFormField] = field(default_factory=list)
    success_message: str = "Saved successfully"
    list_path: str | None = None
    edit_path: str | None = None
    extra_config: MutablePayloadDict = field(default_factory=dict)

    def initial_values(self) -> MutablePayloadDict:
        """新建场景的初始值."""
        return build_initial_values(self.fields)

    def values_from_record(self, record: MutablePayloadDict) -> MutablePayloadDict:
        """从已有记录派生编辑场景的初始值.

        只保留定义中的字段,记录缺失的字段回退到初始值;日期字段截取为 ``YYYY-MM-DD``.
        """
        values = self.initial_values()
        for form_field in self.fields:
            raw = record.get(form_field.name)
            if raw is None:
                continue
            if form_field.kind == FieldKind.DATE and isinstance(raw, str):
                values[form_field.name] = raw.split("T", 1)[0]
                continue
            values[form_field.name] = copy.deepcopy(raw)
        return values

    def get_field(self, name: str) -> ResourceFormField | None:
        """按名称查找顶层字段."""
        for form_field in self.fields:
            if form_field.name == name:
                return form_field
        return None

    def build_edit_path(self, record_id: str) -> str | None:
        """生成编辑页路径."""
        if not self.edit_path:
            return None
        return self.edit_path.format(id=record_id)
