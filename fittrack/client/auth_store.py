"""认证 Store.

登录成功后把访问令牌与刷新令牌写入 `CredentialStore`,`ApiClient` 随后的请求会自动携带.
会话过期由传输层统一处理,这里只负责把状态复位.
"""

from __future__ import annotations

import asyncio
from collections.abc import Mapping
from dataclasses import dataclass
from functools import partial
from typing import TYPE_CHECKING

from fittrack.client.store import ObservableStore
from fittrack.client.transport import unwrap_data
from fittrack.settings import DEFAULT_LOGIN_PATH

if TYPE_CHECKING:
    from fittrack.client.envelope import RequestEnvelope
    from fittrack.client.navigation import Navigator
    from fittrack.client.transport import ApiClient, CredentialStore
    from fittrack.types import JsonDict, JsonValue, PayloadMapping

REGISTER = "register"
LOGIN = "login"
FORGET_PASSWORD = "forget_password"
RESET_PASSWORD = "reset_password"


@dataclass(slots=True)
class AuthState:
    is_authenticated: bool = False
    token: str | None = None
    user: JsonDict | None = None
    loading: bool = False
    error: str | None = None


class AuthStore(ObservableStore[AuthState]):
    """注册、登录与密码重置.

    Args:
        client: 后端客户端,令牌写入其 ``credentials``.
        navigator: 注销后跳转登录页.
        login_path: 登录页路径.
        loop: 凭据变更回调调度到的事件循环,为空时直接执行.

    """

    def __init__(
        self,
        client: ApiClient,
        *,
        navigator: Navigator | None = None,
        login_path: str = DEFAULT_LOGIN_PATH,
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> None:
        super().__init__(AuthState(), name="auth")
        self._client = client
        self._navigator = navigator
        self._login_path = login_path
        self._loop = loop
        client.credentials.subscribe(self._on_credentials_changed)

    @property
    def credentials(self) -> CredentialStore:
        return self._client.credentials

    def _on_credentials_changed(self, credentials: CredentialStore) -> None:
        # 静默刷新发生在传输线程中,令牌同步交回事件循环线程执行
        if self._loop is None:
            self._sync_token(credentials.token)
        else:
            self._loop.call_soon_threadsafe(self._sync_token, credentials.token)

    def _sync_token(self, token: str | None) -> None:
        """已登录时跟随凭据中的新访问令牌;清除凭据由会话过期流程处理."""
        if not token or not self.state.is_authenticated or token == self.state.token:
            return
        self.state.token = token
        self._notify()

    def initialize(self) -> None:
        """按已保存的凭据恢复登录状态."""
        token = self.credentials.token
        self.state.token = token
        self.state.is_authenticated = bool(token)
        self._notify()

    def _begin(self) -> None:
        self.state.loading = True
        self.state.error = None
        self._notify()

    def _settle_error(self, envelope: RequestEnvelope) -> None:
        self.state.loading = False
        if envelope.is_rejected and not envelope.session_expired:
            self.state.error = envelope.error_reason

    # ------------------------------------------------------------------ #
    # 远程调用
    # ------------------------------------------------------------------ #
    def register(self, payload: PayloadMapping) -> asyncio.Task[RequestEnvelope[JsonValue]]:
        """注册;成功后直接处于登录状态."""
        self._begin()

        def _apply(envelope: RequestEnvelope[JsonValue]) -> None:
            self._settle_error(envelope)
            if envelope.is_fulfilled:
                self._store_tokens(unwrap_data(envelope.payload))
            self._notify()

        return self._dispatch(
            REGISTER,
            partial(self._client.post, "/register", json=dict(payload)),
            fallback="Registration failed",
            handler=_apply,
        )

    def login(self, email: str, password: str) -> asyncio.Task[RequestEnvelope[JsonValue]]:
        self._begin()

        def _apply(envelope: RequestEnvelope[JsonValue]) -> None:
            self._settle_error(envelope)
            if envelope.is_fulfilled:
                data = unwrap_data(envelope.payload)
                self._store_tokens(data)
                if isinstance(data, Mapping) and isinstance(data.get("user"), Mapping):
                    self.state.user = dict(data["user"])
            self._notify()

        return self._dispatch(
            LOGIN,
            partial(self._client.post, "/login", json={"email": email, "password": password}),
            fallback="Login failed",
            handler=_apply,
        )

    def forget_password(self, email: str) -> asyncio.Task[RequestEnvelope[JsonValue]]:
        self._begin()

        def _apply(envelope: RequestEnvelope[JsonValue]) -> None:
            self._settle_error(envelope)
            self._notify()

        return self._dispatch(
            FORGET_PASSWORD,
            partial(self._client.post, "/forget-password", json={"email": email}),
            fallback="Failed to send reset link",
            handler=_apply,
        )

    def reset_password(self, token: str, password: str) -> asyncio.Task[RequestEnvelope[JsonValue]]:
        self._begin()

        def _apply(envelope: RequestEnvelope[JsonValue]) -> None:
            self._settle_error(envelope)
            self._notify()

        return self._dispatch(
            RESET_PASSWORD,
            partial(self._client.post, f"/reset-password/{token}", json={"password": password}),
            fallback="Failed to reset password",
            handler=_apply,
        )

    # ------------------------------------------------------------------ #
    # 本地状态
    # ------------------------------------------------------------------ #
    def logout(self) -> None:
        """清除凭据并跳转登录页."""
        self.credentials.clear()
        self.handle_session_expired()
        if self._navigator is not None:
            self._navigator.navigate(self._login_path)

    def handle_session_expired(self) -> None:
        """会话过期后复位状态,不设置错误."""
        self.state.is_authenticated = False
        self.state.token = None
        self.state.user = None
        self.state.loading = False
        self._notify()

    def _store_tokens(self, data: JsonValue) -> None:
        if not isinstance(data, Mapping):
            return
        token = data.get("token")
        if not isinstance(token, str) or not token:
            return
        refresh_token = data.get("refreshToken")
        self.credentials.set(token, refresh_token if isinstance(refresh_token, str) else None)
        self.state.token = token
        self.state.is_authenticated = True


__all__ = ["AuthState", "AuthStore"]
