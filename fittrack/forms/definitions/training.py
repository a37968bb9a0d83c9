"""训练相关表单定义: 训练记录、动作、训练动作、训练计划."""

from fittrack.forms.definitions.base import FieldKind, ResourceFormDefinition, ResourceFormField

WORKOUT_FORM_DEFINITION = ResourceFormDefinition(
    name="workout",
    success_message="Workout saved successfully",
    list_path="/workouts",
    edit_path="/workouts/edit/{id}",
    fields=[
        ResourceFormField(name="date", label="Date", kind=FieldKind.DATE, required=True),
        ResourceFormField(name="duration", label="Duration", kind=FieldKind.NUMBER, required=True, minimum=1),
        ResourceFormField(name="notes", label="Notes", kind=FieldKind.TEXT),
    ],
)

EXERCISE_FORM_DEFINITION = ResourceFormDefinition(
    name="exercise",
    success_message="Exercise saved successfully",
    list_path="/exercises",
    edit_path="/exercises/edit/{id}",
    fields=[
        ResourceFormField(name="name", label="Name", required=True, min_length=2),
        ResourceFormField(name="type", label="Type", required=True),
        ResourceFormField(name="description", label="Description", kind=FieldKind.TEXT, required=True),
        ResourceFormField(name="category", label="Category", required=True),
    ],
)

WORKOUT_EXERCISE_FORM_DEFINITION = ResourceFormDefinition(
    name="workout_exercise",
    success_message="Workout exercise saved successfully",
    list_path="/workout-exercise",
    edit_path="/workout-exercise/edit/{id}",
    fields=[
        ResourceFormField(name="workoutId", label="Workout", required=True),
        ResourceFormField(name="exerciseId", label="Exercise", required=True),
        ResourceFormField(name="sets", label="Sets", kind=FieldKind.NUMBER, required=True, positive=True),
        ResourceFormField(name="reps", label="Reps", kind=FieldKind.NUMBER, required=True, positive=True),
        ResourceFormField(name="weight", label="Weight", kind=FieldKind.NUMBER, required=True, minimum=0),
    ],
)

WORKOUT_PLAN_FORM_DEFINITION = ResourceFormDefinition(
    name="workout_plan",
    success_message="Workout plan saved successfully",
    list_path="/workout-plan",
    edit_path="/workout-plan/edit/{id}",
    fields=[
        ResourceFormField(name="title", label="Title", required=True),
        ResourceFormField(name="description", label="Description", kind=FieldKind.TEXT),
        ResourceFormField(name="duration", label="Duration", kind=FieldKind.NUMBER, required=True, positive=True),
        ResourceFormField(
            name="exercises",
            label="Exercises",
            kind=FieldKind.ARRAY,
            min_items=1,
            default=[{"exerciseId": "", "sets": "", "reps": ""}],
            item_fields=[
                ResourceFormField(name="exerciseId", label="Exercise", required=True),
                ResourceFormField(name="sets", label="Sets", kind=FieldKind.NUMBER, required=True, positive=True),
                ResourceFormField(name="reps", label="Reps", kind=FieldKind.NUMBER, required=True, positive=True),
            ],
        ),
    ],
)
