"""个人资料 Store."""

from __future__ import annotations

import asyncio
from collections.abc import Mapping
from dataclasses import dataclass, field
from functools import partial
from typing import TYPE_CHECKING

from fittrack.client.store import ObservableStore
from fittrack.client.transport import unwrap_data
from fittrack.forms.definitions import PROFILE_FORM_DEFINITION
from fittrack.forms.validation import coerce_values, first_error, validate_values

if TYPE_CHECKING:
    from fittrack.client.envelope import RequestEnvelope
    from fittrack.client.transport import ApiClient
    from fittrack.types import JsonDict, JsonValue, MutablePayloadDict, PayloadMapping

GET_PROFILE = "get_profile"
UPDATE_PROFILE = "update_profile"
GET_ALL_USERS = "get_all_users"


@dataclass(slots=True)
class ProfileState:
    data: JsonDict | None = None
    users: list[JsonDict] = field(default_factory=list)
    loading: bool = False
    error: str | None = None


def profile_form_values(user: Mapping[str, JsonValue] | None) -> MutablePayloadDict:
    """把用户字典展开为资料表单值(资料字段 + fitnessGoals)."""
    if not user:
        return PROFILE_FORM_DEFINITION.initial_values()
    profile = user.get("profile")
    record: MutablePayloadDict = dict(profile) if isinstance(profile, Mapping) else {}
    record["fitnessGoals"] = user.get("fitnessGoals") or []
    return PROFILE_FORM_DEFINITION.values_from_record(record)


class ProfileStore(ObservableStore[ProfileState]):
    """当前用户资料与用户列表."""

    def __init__(self, client: ApiClient) -> None:
        super().__init__(ProfileState(), name="profile")
        self._client = client

    def _begin(self) -> None:
        self.state.loading = True
        self.state.error = None
        self._notify()

    def _settle(self, envelope: RequestEnvelope) -> bool:
        self.state.loading = False
        if envelope.is_rejected and not envelope.session_expired:
            self.state.error = envelope.error_reason
        return envelope.is_fulfilled

    def get_profile(self) -> asyncio.Task[RequestEnvelope[JsonValue]]:
        self._begin()

        def _apply(envelope: RequestEnvelope[JsonValue]) -> None:
            if self._settle(envelope):
                data = unwrap_data(envelope.payload)
                self.state.data = dict(data) if isinstance(data, Mapping) else None
            self._notify()

        return self._dispatch(
            GET_PROFILE,
            partial(self._client.get, "/my-profile"),
            fallback="Failed to fetch profile",
            handler=_apply,
        )

    def update_profile(self, changes: PayloadMapping) -> asyncio.Task[RequestEnvelope[JsonValue]] | None:
        """局部更新资料.

        只校验 ``changes`` 中出现的字段;校验失败时写入 ``error`` 并返回 None,不发起请求.
        """
        fields = [form_field for form_field in PROFILE_FORM_DEFINITION.fields if form_field.name in changes]
        errors = validate_values(fields, changes)
        if errors:
            self.state.error = first_error(errors)
            self._notify()
            return None

        payload = coerce_values(fields, changes)
        self._begin()

        def _apply(envelope: RequestEnvelope[JsonValue]) -> None:
            if self._settle(envelope):
                data = unwrap_data(envelope.payload)
                if isinstance(data, Mapping):
                    self.state.data = dict(data)
            self._notify()

        return self._dispatch(
            UPDATE_PROFILE,
            partial(self._client.put, "/edit-profile", json=payload),
            fallback="Failed to update profile",
            handler=_apply,
        )

    def get_all_users(self) -> asyncio.Task[RequestEnvelope[JsonValue]]:
        self._begin()

        def _apply(envelope: RequestEnvelope[JsonValue]) -> None:
            if self._settle(envelope):
                data = unwrap_data(envelope.payload)
                users = data.get("users") if isinstance(data, Mapping) else data
                self.state.users = [dict(user) for user in users or [] if isinstance(user, Mapping)]
            self._notify()

        return self._dispatch(
            GET_ALL_USERS,
            partial(self._client.get, "/users"),
            fallback="Failed to fetch users",
            handler=_apply,
        )


__all__ = ["ProfileState", "ProfileStore", "profile_form_values"]
