import pytest

from fittrack.forms.definitions import get_form_definition
from fittrack.forms.validation import coerce_values, first_error, validate_path, validate_values


def _fields(name: str):
    return get_form_definition(name).fields


@pytest.mark.unit
def test_validate_values_reports_top_level_errors() -> None:
    errors = validate_values(_fields("workout"), {"date": "nope", "duration": "0"})

    assert errors == {
        "date": "Date must be a valid date",
        "duration": "Duration must be at least 1",
    }


@pytest.mark.unit
def test_validate_values_accepts_numeric_strings_and_iso_dates() -> None:
    errors = validate_values(_fields("workout"), {"date": "2024-03-05T08:00:00.000Z", "duration": " 45 "})

    assert errors == {}


@pytest.mark.unit
def test_validate_values_walks_nested_arrays_with_dotted_paths() -> None:
    values = {
        "title": "Cut",
        "description": "Two weeks",
        "duration": 14,
        "meals": [
            {"mealType": "breakfast", "foodItems": [{"foodId": "f1", "quantity": 0}]},
            {"mealType": "", "foodItems": []},
        ],
    }

    errors = validate_values(_fields("meal_plan"), values)

    assert errors == {
        "meals.0.foodItems.0.quantity": "Quantity must be at least 1",
        "meals.1.mealType": "Meal type is required",
        "meals.1.foodItems": "Food items must contain at least 1 item",
    }
    assert first_error(errors) == "Quantity must be at least 1"


@pytest.mark.unit
def test_validate_values_checks_objects_enums_and_booleans() -> None:
    food = validate_values(_fields("food_item"), {"name": "Oats", "calories": 380, "macronutrients": {"fats": "x"}})
    meal = validate_values(
        _fields("nutrition_meal"),
        {"nutritionId": "n1", "mealType": "brunch", "foodItems": [{"foodId": "f", "quantity": 1}], "totalCalories": 0},
    )
    notification = validate_values(_fields("notification"), {"message": "Hi", "isRead": "yes"})

    assert food == {
        "macronutrients.carbohydrates": "Carbohydrates is required",
        "macronutrients.proteins": "Proteins is required",
        "macronutrients.fats": "Fats must be a number",
    }
    assert meal == {"mealType": "Meal type must be one of: breakfast, lunch, dinner, snack"}
    assert notification == {"isRead": "Read must be true or false"}


@pytest.mark.unit
def test_validate_path_limits_errors_to_subtree() -> None:
    values = {"title": "", "description": "", "duration": 1, "meals": [{"mealType": "", "foodItems": [{}]}]}

    errors = validate_path(_fields("meal_plan"), values, "meals.0.foodItems")

    assert set(errors) == {"meals.0.foodItems.0.foodId", "meals.0.foodItems.0.quantity"}


@pytest.mark.unit
def test_first_error_of_empty_mapping() -> None:
    assert first_error({}) is None


@pytest.mark.unit
def test_coerce_values_converts_numbers_and_drops_blank_optionals() -> None:
    payload = coerce_values(
        _fields("workout"),
        {"date": "2024-03-05", "duration": " 45 ", "notes": "   ", "extra": "kept"},
    )

    assert payload == {"date": "2024-03-05", "duration": 45, "extra": "kept"}


@pytest.mark.unit
def test_coerce_values_recurses_into_nested_items() -> None:
    values = {
        "title": " Cut ",
        "description": "d",
        "duration": "7",
        "meals": [{"mealType": "lunch", "foodItems": [{"foodId": "f1", "quantity": "2.5"}]}],
    }

    payload = coerce_values(_fields("meal_plan"), values)

    assert payload["title"] == "Cut"
    assert payload["duration"] == 7
    assert payload["meals"][0]["foodItems"][0]["quantity"] == 2.5
    assert values["duration"] == "7"


@pytest.mark.unit
def test_coerce_values_keeps_cleared_optionals_as_none_for_edits() -> None:
    payload = coerce_values(
        _fields("workout"),
        {"date": "2024-03-05", "duration": "30", "notes": ""},
        keep_cleared=True,
    )

    assert payload == {"date": "2024-03-05", "duration": 30, "notes": None}
