"""个人资料表单定义."""

from fittrack.forms.definitions.base import FieldKind, FieldOption, ResourceFormDefinition, ResourceFormField

GENDER_OPTIONS = [
    FieldOption(value="Male", label="Male"),
    FieldOption(value="Female", label="Female"),
]

PROFILE_FORM_DEFINITION = ResourceFormDefinition(
    name="profile",
    success_message="Profile updated successfully",
    list_path="/my-profile",
    fields=[
        ResourceFormField(name="firstName", label="First name", required=True),
        ResourceFormField(name="lastName", label="Last name", required=True),
        ResourceFormField(name="dob", label="Date of birth", kind=FieldKind.DATE),
        ResourceFormField(name="age", label="Age", kind=FieldKind.NUMBER, positive=True),
        ResourceFormField(name="gender", label="Gender", kind=FieldKind.ENUM, options=GENDER_OPTIONS),
        ResourceFormField(name="height", label="Height", kind=FieldKind.NUMBER, positive=True),
        ResourceFormField(name="weight", label="Weight", kind=FieldKind.NUMBER, positive=True),
        ResourceFormField(
            name="fitnessGoals",
            label="Fitness goals",
            kind=FieldKind.ARRAY,
            item_fields=[
                ResourceFormField(name="goalType", label="Goal type", required=True),
                ResourceFormField(name="targetValue", label="Target value", kind=FieldKind.NUMBER, minimum=0),
                ResourceFormField(name="currentValue", label="Current value", kind=FieldKind.NUMBER, minimum=0),
                ResourceFormField(name="targetDate", label="Target date", kind=FieldKind.DATE),
            ],
        ),
    ],
)
