"""挑战、进度与通知表单定义."""

from fittrack.forms.definitions.base import FieldKind, ResourceFormDefinition, ResourceFormField

CHALLENGE_FORM_DEFINITION = ResourceFormDefinition(
    name="challenge",
    success_message="Challenge saved successfully",
    list_path="/challenges",
    edit_path="/challenges/edit/{id}",
    fields=[
        ResourceFormField(name="title", label="Title", required=True),
        ResourceFormField(name="description", label="Description", kind=FieldKind.TEXT, required=True),
        ResourceFormField(name="startDate", label="Start date", kind=FieldKind.DATE, required=True),
        ResourceFormField(name="endDate", label="End date", kind=FieldKind.DATE, required=True),
        ResourceFormField(name="participants", label="Participants", kind=FieldKind.ARRAY),
    ],
)

PROGRESS_TRACKING_FORM_DEFINITION = ResourceFormDefinition(
    name="progress_tracking",
    success_message="Progress saved successfully",
    list_path="/progress-tracking",
    edit_path="/progress-tracking/edit/{id}",
    fields=[
        ResourceFormField(name="date", label="Date", kind=FieldKind.DATE, required=True),
        ResourceFormField(name="weight", label="Weight", kind=FieldKind.NUMBER, required=True, positive=True),
        ResourceFormField(name="bodyFatPercentage", label="Body fat percentage", kind=FieldKind.NUMBER, minimum=0),
        ResourceFormField(name="muscleMass", label="Muscle mass", kind=FieldKind.NUMBER, minimum=0),
        ResourceFormField(name="notes", label="Notes", kind=FieldKind.TEXT),
    ],
)

NOTIFICATION_FORM_DEFINITION = ResourceFormDefinition(
    name="notification",
    success_message="Notification saved successfully",
    list_path="/notifications",
    fields=[
        ResourceFormField(name="message", label="Message", kind=FieldKind.TEXT, required=True),
        ResourceFormField(name="isRead", label="Read", kind=FieldKind.BOOLEAN, default=False),
    ],
)
