import pytest

from fittrack.core.resources import iter_resources
from fittrack.forms.definitions import PROFILE_FORM_DEFINITION, FieldKind, get_form_definition


@pytest.mark.unit
@pytest.mark.parametrize("definition", iter_resources(), ids=lambda definition: definition.name)
def test_every_resource_has_a_form_definition(definition) -> None:
    form = get_form_definition(definition.name)

    assert form.name == definition.name
    assert form.list_path == f"/{definition.path}"


@pytest.mark.unit
def test_unknown_form_definition_raises() -> None:
    with pytest.raises(KeyError):
        get_form_definition("unknown")


@pytest.mark.unit
def test_initial_values_are_independent_copies() -> None:
    definition = get_form_definition("meal_plan")

    first = definition.initial_values()
    first["meals"][0]["foodItems"].append({"foodId": "x", "quantity": 1})
    second = definition.initial_values()

    assert second["meals"] == [{"mealType": "", "foodItems": [{"foodId": "", "quantity": 0}]}]
    assert second["title"] == ""


@pytest.mark.unit
def test_initial_values_per_field_kind() -> None:
    assert get_form_definition("notification").initial_values() == {"message": "", "isRead": False}
    assert get_form_definition("food_item").initial_values()["macronutrients"] == {
        "carbohydrates": "",
        "proteins": "",
        "fats": "",
    }


@pytest.mark.unit
def test_values_from_record_keeps_known_fields_and_truncates_dates() -> None:
    definition = get_form_definition("challenge")

    values = definition.values_from_record({
        "_id": "c1",
        "title": "Spring 10k",
        "startDate": "2024-04-01T00:00:00.000Z",
        "participants": ["u1"],
    })

    assert values == {
        "title": "Spring 10k",
        "description": "",
        "startDate": "2024-04-01",
        "endDate": "",
        "participants": ["u1"],
    }


@pytest.mark.unit
def test_edit_path_and_field_lookup() -> None:
    definition = get_form_definition("workout")

    assert definition.build_edit_path("42") == "/workouts/edit/42"
    assert PROFILE_FORM_DEFINITION.build_edit_path("1") is None
    assert definition.get_field("duration").kind == FieldKind.NUMBER
    assert definition.get_field("missing") is None
