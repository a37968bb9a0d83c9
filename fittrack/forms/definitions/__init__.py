"""资源表单定义集合,按需惰性导入避免循环依赖."""

from __future__ import annotations

from importlib import import_module
from typing import Any

from .base import FieldKind, FieldOption, ResourceFormDefinition, ResourceFormField

_LAZY_ATTRS: dict[str, str] = {
    "WORKOUT_FORM_DEFINITION": "fittrack.forms.definitions.training",
    "EXERCISE_FORM_DEFINITION": "fittrack.forms.definitions.training",
    "WORKOUT_EXERCISE_FORM_DEFINITION": "fittrack.forms.definitions.training",
    "WORKOUT_PLAN_FORM_DEFINITION": "fittrack.forms.definitions.training",
    "FOOD_ITEM_FORM_DEFINITION": "fittrack.forms.definitions.nutrition",
    "MEAL_PLAN_FORM_DEFINITION": "fittrack.forms.definitions.nutrition",
    "NUTRITION_FORM_DEFINITION": "fittrack.forms.definitions.nutrition",
    "NUTRITION_MEAL_FORM_DEFINITION": "fittrack.forms.definitions.nutrition",
    "CHALLENGE_FORM_DEFINITION": "fittrack.forms.definitions.tracking",
    "PROGRESS_TRACKING_FORM_DEFINITION": "fittrack.forms.definitions.tracking",
    "NOTIFICATION_FORM_DEFINITION": "fittrack.forms.definitions.tracking",
    "PROFILE_FORM_DEFINITION": "fittrack.forms.definitions.profile",
}

__all__ = [
    "FieldKind",
    "FieldOption",
    "ResourceFormDefinition",
    "ResourceFormField",
    "get_form_definition",
    *_LAZY_ATTRS.keys(),
]


def __getattr__(name: str) -> Any:
    """在首次访问时加载具体表单定义,规避导入环."""
    if name not in _LAZY_ATTRS:
        raise AttributeError(f"module 'fittrack.forms.definitions' has no attribute {name}")

    module = import_module(_LAZY_ATTRS[name])
    value = getattr(module, name)
    globals()[name] = value
    return value


def get_form_definition(resource_name: str) -> ResourceFormDefinition:
    """按资源名获取表单定义.

    Args:
        resource_name: 资源名,例如 ``meal_plan``.

    Returns:
        对应的表单定义.

    Raises:
        KeyError: 当资源没有表单定义时抛出.

    """
    attr_name = f"{resource_name.upper()}_FORM_DEFINITION"
    if attr_name not in _LAZY_ATTRS:
        msg = f"资源 {resource_name} 没有表单定义"
        raise KeyError(msg)
    return __getattr__(attr_name)
