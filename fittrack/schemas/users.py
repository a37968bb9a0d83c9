"""用户资料写路径 schema."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, StrictStr, field_validator

from fittrack.models.user import PROFILE_FIELDS
from fittrack.schemas.base import PayloadSchema


class FitnessGoalPayload(BaseModel):
    """单个健身目标."""

    model_config = ConfigDict(extra="ignore")

    goalType: StrictStr  # noqa: N815
    targetValue: float | None = None  # noqa: N815
    currentValue: float | None = None  # noqa: N815
    targetDate: StrictStr | None = None  # noqa: N815

    @field_validator("goalType")
    @classmethod
    def _validate_goal_type(cls, value: str) -> str:
        cleaned = value.strip()
        if not cleaned:
            raise ValueError("goalType must not be empty")
        return cleaned


class ProfileUpdatePayload(PayloadSchema):
    """编辑资料 payload.

    所有字段可选,只更新请求中显式给出的字段.
    """

    firstName: StrictStr | None = None  # noqa: N815
    lastName: StrictStr | None = None  # noqa: N815
    dob: StrictStr | None = None
    age: int | None = None
    gender: StrictStr | None = None
    height: float | None = None
    weight: float | None = None
    fitnessGoals: list[FitnessGoalPayload] | None = None  # noqa: N815

    @field_validator("age", "height", "weight")
    @classmethod
    def _validate_positive(cls, value: float | None) -> float | None:
        if value is not None and value <= 0:
            raise ValueError("must be a positive number")
        return value

    def profile_changes(self) -> dict[str, Any]:
        """返回资料字段中显式设置的部分."""
        provided = self.model_dump(exclude_unset=True)
        return {key: provided[key] for key in PROFILE_FIELDS if key in provided}

    def goals_changes(self) -> list[dict[str, Any]] | None:
        """返回健身目标更新,未提供时返回 None."""
        if "fitnessGoals" not in self.model_fields_set or self.fitnessGoals is None:
            return None
        return [goal.model_dump(exclude_none=True) for goal in self.fitnessGoals]
