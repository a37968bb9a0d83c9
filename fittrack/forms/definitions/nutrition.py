"""饮食相关表单定义: 食物、饮食计划、营养记录、营养餐次."""

from fittrack.forms.definitions.base import FieldKind, FieldOption, ResourceFormDefinition, ResourceFormField

MEAL_TYPE_OPTIONS = [
    FieldOption(value="breakfast", label="Breakfast"),
    FieldOption(value="lunch", label="Lunch"),
    FieldOption(value="dinner", label="Dinner"),
    FieldOption(value="snack", label="Snack"),
]


def _food_item_fields() -> list[ResourceFormField]:
    return [
        ResourceFormField(name="foodId", label="Food Item", required=True),
        ResourceFormField(name="quantity", label="Quantity", kind=FieldKind.NUMBER, required=True, minimum=1),
    ]


FOOD_ITEM_FORM_DEFINITION = ResourceFormDefinition(
    name="food_item",
    success_message="Food item saved successfully",
    list_path="/food-items",
    edit_path="/food-items/edit/{id}",
    fields=[
        ResourceFormField(name="name", label="Name", required=True),
        ResourceFormField(name="calories", label="Calories", kind=FieldKind.NUMBER, required=True, minimum=0),
        ResourceFormField(
            name="macronutrients",
            label="Macronutrients",
            kind=FieldKind.OBJECT,
            required=True,
            item_fields=[
                ResourceFormField(name="carbohydrates", label="Carbohydrates", kind=FieldKind.NUMBER, required=True, minimum=0),
                ResourceFormField(name="proteins", label="Proteins", kind=FieldKind.NUMBER, required=True, minimum=0),
                ResourceFormField(name="fats", label="Fats", kind=FieldKind.NUMBER, required=True, minimum=0),
            ],
        ),
    ],
)

MEAL_PLAN_FORM_DEFINITION = ResourceFormDefinition(
    name="meal_plan",
    success_message="Meal plan saved successfully",
    list_path="/meal-plans",
    edit_path="/meal-plans/edit/{id}",
    fields=[
        ResourceFormField(name="title", label="Title", required=True),
        ResourceFormField(name="description", label="Description", kind=FieldKind.TEXT, required=True),
        ResourceFormField(name="duration", label="Duration", kind=FieldKind.NUMBER, required=True, positive=True),
        ResourceFormField(
            name="meals",
            label="Meals",
            kind=FieldKind.ARRAY,
            min_items=1,
            default=[{"mealType": "", "foodItems": [{"foodId": "", "quantity": 0}]}],
            item_fields=[
                ResourceFormField(name="mealType", label="Meal type", required=True),
                ResourceFormField(
                    name="foodItems",
                    label="Food items",
                    kind=FieldKind.ARRAY,
                    min_items=1,
                    default=[{"foodId": "", "quantity": 0}],
                    item_fields=_food_item_fields(),
                ),
            ],
        ),
    ],
)

NUTRITION_FORM_DEFINITION = ResourceFormDefinition(
    name="nutrition",
    success_message="Nutrition entry saved successfully",
    list_path="/nutrition",
    edit_path="/nutrition/edit/{id}",
    fields=[
        ResourceFormField(name="date", label="Date", kind=FieldKind.DATE, required=True),
        ResourceFormField(name="notes", label="Notes", kind=FieldKind.TEXT),
    ],
)

NUTRITION_MEAL_FORM_DEFINITION = ResourceFormDefinition(
    name="nutrition_meal",
    success_message="Nutrition meal saved successfully",
    list_path="/nutrition-meals",
    edit_path="/nutrition-meals/edit/{id}",
    fields=[
        ResourceFormField(name="nutritionId", label="Nutrition entry", required=True),
        ResourceFormField(
            name="mealType",
            label="Meal type",
            kind=FieldKind.ENUM,
            required=True,
            options=MEAL_TYPE_OPTIONS,
        ),
        ResourceFormField(
            name="foodItems",
            label="Food items",
            kind=FieldKind.ARRAY,
            min_items=1,
            default=[{"foodId": "", "quantity": 0}],
            item_fields=_food_item_fields(),
        ),
        ResourceFormField(name="totalCalories", label="Total calories", kind=FieldKind.NUMBER, required=True, minimum=0),
    ],
)
