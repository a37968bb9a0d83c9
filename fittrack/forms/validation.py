"""声明式表单校验.

根据 `ResourceFormField` 描述递归校验表单值,错误以点分路径为键,
例如 ``meals.0.foodItems.1.quantity``.服务层写入前与客户端表单控制器共用.
"""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from datetime import date, datetime

from fittrack.forms.definitions.base import FieldKind, ResourceFormField
from fittrack.types import JsonValue, MutablePayloadDict

_EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

FieldErrors = dict[str, str]


def validate_values(fields: Sequence[ResourceFormField], values: Mapping[str, JsonValue]) -> FieldErrors:
    """校验整张表单.

    Args:
        fields: 字段定义列表.
        values: 表单值.

    Returns:
        路径到错误文案的映射,为空表示全部通过.

    """
    errors: FieldErrors = {}
    _validate_fields(fields, values, prefix="", errors=errors)
    return errors


def validate_path(
    fields: Sequence[ResourceFormField],
    values: Mapping[str, JsonValue],
    path: str,
) -> FieldErrors:
    """只返回指定路径(及其子路径)的错误,用于失焦校验."""
    prefix = f"{path}."
    return {
        error_path: message
        for error_path, message in validate_values(fields, values).items()
        if error_path == path or error_path.startswith(prefix)
    }


def first_error(errors: FieldErrors) -> str | None:
    """返回第一条错误文案."""
    for message in errors.values():
        return message
    return None


def coerce_values(
    fields: Sequence[ResourceFormField],
    values: Mapping[str, JsonValue],
    *,
    keep_cleared: bool = False,
) -> MutablePayloadDict:
    """将表单输入规范化为提交负载.

    数值字段的数字字符串转换为 int/float,空白的可选字段被移除,嵌套结构递归处理;
    未在定义中的键原样保留.

    编辑提交时服务端会把负载合并到已存储的文档上,被移除的键会保留旧值.
    因此 ``keep_cleared=True`` 时,顶层空白的可选字段以 ``None`` 显式提交,
    由服务端在合并后删除该键.

    Args:
        fields: 字段定义列表.
        values: 表单值.
        keep_cleared: 是否以 None 保留被清空的顶层可选字段.

    Returns:
        新的负载字典,不修改入参.

    """
    result: MutablePayloadDict = dict(values)
    for form_field in fields:
        if form_field.name not in result:
            continue
        raw = result[form_field.name]
        if _is_blank(form_field, raw) and not form_field.required:
            if keep_cleared:
                result[form_field.name] = None
            else:
                result.pop(form_field.name)
            continue
        result[form_field.name] = _coerce_value(form_field, raw)
    return result


def _coerce_value(form_field: ResourceFormField, raw: JsonValue) -> JsonValue:
    if form_field.kind == FieldKind.NUMBER:
        number = _parse_number(raw)
        return raw if number is None else number
    if form_field.kind == FieldKind.STRING and isinstance(raw, str):
        return raw.strip()
    if form_field.kind == FieldKind.OBJECT and isinstance(raw, Mapping):
        return coerce_values(form_field.item_fields, raw)
    if form_field.kind == FieldKind.ARRAY and isinstance(raw, list) and form_field.item_fields:
        return [coerce_values(form_field.item_fields, item) if isinstance(item, Mapping) else item for item in raw]
    return raw


def _validate_fields(
    fields: Sequence[ResourceFormField],
    values: Mapping[str, JsonValue] | JsonValue,
    *,
    prefix: str,
    errors: FieldErrors,
) -> None:
    mapping = values if isinstance(values, Mapping) else {}
    for form_field in fields:
        path = f"{prefix}{form_field.name}"
        value = mapping.get(form_field.name)
        message = _check_value(form_field, value)
        if message:
            errors[path] = message
            continue

        if form_field.kind == FieldKind.OBJECT and isinstance(value, Mapping):
            _validate_fields(form_field.item_fields, value, prefix=f"{path}.", errors=errors)
        elif form_field.kind == FieldKind.ARRAY and isinstance(value, list) and form_field.item_fields:
            for index, item in enumerate(value):
                item_path = f"{path}.{index}"
                if not isinstance(item, Mapping):
                    errors[item_path] = f"{form_field.label} entries must be objects"
                    continue
                _validate_fields(form_field.item_fields, item, prefix=f"{item_path}.", errors=errors)


def _is_blank(form_field: ResourceFormField, value: JsonValue) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if form_field.kind == FieldKind.OBJECT and isinstance(value, Mapping):
        return not value
    return False


def _check_value(form_field: ResourceFormField, value: JsonValue) -> str | None:
    label = form_field.label
    if _is_blank(form_field, value):
        return f"{label} is required" if form_field.required else None

    checker = _CHECKERS.get(form_field.kind)
    if checker is None:
        return None
    return checker(form_field, value)


def _check_string(form_field: ResourceFormField, value: JsonValue) -> str | None:
    if not isinstance(value, str):
        return f"{form_field.label} must be a string"
    if form_field.min_length is not None and len(value.strip()) < form_field.min_length:
        return f"{form_field.label} must be at least {form_field.min_length} characters"
    return None


def _parse_number(value: JsonValue) -> int | float | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, str):
        stripped = value.strip()
        try:
            return int(stripped)
        except ValueError:
            pass
        try:
            return float(stripped)
        except ValueError:
            return None
    return None


def _check_number(form_field: ResourceFormField, value: JsonValue) -> str | None:
    number = _parse_number(value)
    if number is None:
        return f"{form_field.label} must be a number"
    if form_field.positive and number <= 0:
        return f"{form_field.label} must be positive"
    if form_field.minimum is not None and number < form_field.minimum:
        return f"{form_field.label} must be at least {form_field.minimum:g}"
    return None


def _parse_date(value: str) -> date | None:
    text = value.strip()
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        pass
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        return None


def _check_date(form_field: ResourceFormField, value: JsonValue) -> str | None:
    if not isinstance(value, str) or _parse_date(value) is None:
        return f"{form_field.label} must be a valid date"
    return None


def _check_email(form_field: ResourceFormField, value: JsonValue) -> str | None:
    if not isinstance(value, str) or not _EMAIL_PATTERN.match(value.strip()):
        return f"{form_field.label} must be a valid email"
    return None


def _check_enum(form_field: ResourceFormField, value: JsonValue) -> str | None:
    allowed = form_field.option_values
    if value not in allowed:
        return f"{form_field.label} must be one of: {', '.join(allowed)}"
    return None


def _check_boolean(form_field: ResourceFormField, value: JsonValue) -> str | None:
    if not isinstance(value, bool):
        return f"{form_field.label} must be true or false"
    return None


def _check_object(form_field: ResourceFormField, value: JsonValue) -> str | None:
    if not isinstance(value, Mapping):
        return f"{form_field.label} must be an object"
    return None


def _check_array(form_field: ResourceFormField, value: JsonValue) -> str | None:
    if not isinstance(value, list):
        return f"{form_field.label} must be a list"
    if form_field.min_items is not None and len(value) < form_field.min_items:
        suffix = "item" if form_field.min_items == 1 else "items"
        return f"{form_field.label} must contain at least {form_field.min_items} {suffix}"
    return None


_CHECKERS = {
    FieldKind.STRING: _check_string,
    FieldKind.TEXT: _check_string,
    FieldKind.NUMBER: _check_number,
    FieldKind.DATE: _check_date,
    FieldKind.EMAIL: _check_email,
    FieldKind.ENUM: _check_enum,
    FieldKind.BOOLEAN: _check_boolean,
    FieldKind.OBJECT: _check_object,
    FieldKind.ARRAY: _check_array,
}


__all__ = [
    "FieldErrors",
    "coerce_values",
    "first_error",
    "validate_path",
    "validate_values",
]
