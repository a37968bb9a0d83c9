"""FitTrack - 资源注册表.

每种资源由一个 `ResourceDefinition` 描述,服务端蓝图、客户端 `ResourceStore`
与 `ResourceApi` 均从这里读取路径、默认排序与分页配置.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from fittrack.constants import SORT_ORDER_ASC, SORT_ORDER_DESC, SORT_ORDERS

DEFAULT_PAGE_SIZE = 10
TIMESTAMP_FIELDS = ("createdAt", "updatedAt")


@dataclass(frozen=True, slots=True)
class ResourceDefinition:
    """单个资源类型的元数据.

    Attributes:
        name: 资源标识,例如 ``workout``.
        path: 挂载在 ``/api`` 下的路径片段,例如 ``workouts``.
        list_key: 列表响应中承载记录数组的键名.
        label: 人类可读的复数名称,用于列表相关的兜底文案.
        item_label: 人类可读的单数名称,用于单条记录相关的兜底文案与提示.
        default_sort: 默认排序字段.
        default_order: 默认排序方向.
        page_size: 默认每页数量.
        search_fields: 参与关键字搜索的负载字段.
        owned: 是否按当前登录用户隔离数据.
        id_field: 记录标识字段名.

    """

    name: str
    path: str
    list_key: str
    label: str
    item_label: str
    default_sort: str
    default_order: str = SORT_ORDER_ASC
    page_size: int = DEFAULT_PAGE_SIZE
    search_fields: tuple[str, ...] = field(default_factory=tuple)
    owned: bool = False
    id_field: str = "_id"

    def __post_init__(self) -> None:
        if self.default_order not in SORT_ORDERS:
            msg = f"资源 {self.name} 的默认排序方向非法: {self.default_order}"
            raise ValueError(msg)
        if self.page_size <= 0:
            msg = f"资源 {self.name} 的 page_size 必须为正整数"
            raise ValueError(msg)


RESOURCE_DEFINITIONS: tuple[ResourceDefinition, ...] = (
    ResourceDefinition(
        name="workout",
        path="workouts",
        list_key="workouts",
        label="workouts",
        item_label="workout",
        default_sort="date",
        default_order=SORT_ORDER_DESC,
        search_fields=("notes", "duration"),
        owned=True,
    ),
    ResourceDefinition(
        name="exercise",
        path="exercises",
        list_key="exercises",
        label="exercises",
        item_label="exercise",
        default_sort="name",
        search_fields=("name",),
    ),
    ResourceDefinition(
        name="workout_exercise",
        path="workout-exercise",
        list_key="workoutExercises",
        label="workout exercises",
        item_label="workout exercise",
        default_sort="createdAt",
        search_fields=("notes",),
    ),
    ResourceDefinition(
        name="workout_plan",
        path="workout-plan",
        list_key="workoutPlans",
        label="workout plans",
        item_label="workout plan",
        default_sort="createdAt",
        default_order=SORT_ORDER_DESC,
        search_fields=("title", "description"),
        owned=True,
    ),
    ResourceDefinition(
        name="challenge",
        path="challenges",
        list_key="challenges",
        label="challenges",
        item_label="challenge",
        default_sort="startDate",
        search_fields=("title", "description"),
    ),
    ResourceDefinition(
        name="food_item",
        path="food-items",
        list_key="foodItems",
        label="food items",
        item_label="food item",
        default_sort="name",
        search_fields=("name",),
    ),
    ResourceDefinition(
        name="meal_plan",
        path="meal-plans",
        list_key="mealPlans",
        label="meal plans",
        item_label="meal plan",
        default_sort="createdAt",
        default_order=SORT_ORDER_DESC,
        search_fields=("title", "description"),
        owned=True,
    ),
    ResourceDefinition(
        name="nutrition",
        path="nutrition",
        list_key="nutritionEntries",
        label="nutrition entries",
        item_label="nutrition entry",
        default_sort="date",
        default_order=SORT_ORDER_DESC,
        search_fields=("notes",),
        owned=True,
    ),
    ResourceDefinition(
        name="nutrition_meal",
        path="nutrition-meals",
        list_key="nutritionMeals",
        label="nutrition meals",
        item_label="nutrition meal",
        default_sort="createdAt",
        default_order=SORT_ORDER_DESC,
        search_fields=("mealType",),
    ),
    ResourceDefinition(
        name="progress_tracking",
        path="progress-tracking",
        list_key="progressTrackings",
        label="progress trackings",
        item_label="progress tracking",
        default_sort="createdAt",
        default_order=SORT_ORDER_DESC,
        search_fields=("notes",),
        owned=True,
    ),
    ResourceDefinition(
        name="notification",
        path="notifications",
        list_key="notifications",
        label="notifications",
        item_label="notification",
        default_sort="createdAt",
        default_order=SORT_ORDER_DESC,
        search_fields=("message",),
        owned=True,
    ),
)

_BY_NAME: dict[str, ResourceDefinition] = {definition.name: definition for definition in RESOURCE_DEFINITIONS}


def get_resource(name: str) -> ResourceDefinition:
    """按名称获取资源定义.

    Args:
        name: 资源标识.

    Returns:
        对应的资源定义.

    Raises:
        KeyError: 当资源未注册时抛出.

    """
    try:
        return _BY_NAME[name]
    except KeyError as exc:
        msg = f"未注册的资源类型: {name}"
        raise KeyError(msg) from exc


def iter_resources() -> tuple[ResourceDefinition, ...]:
    """返回全部已注册资源(按声明顺序)."""
    return RESOURCE_DEFINITIONS


__all__ = [
    "DEFAULT_PAGE_SIZE",
    "RESOURCE_DEFINITIONS",
    "TIMESTAMP_FIELDS",
    "ResourceDefinition",
    "get_resource",
    "iter_resources",
]
