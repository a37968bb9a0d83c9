"""客户端组合根.

`AppStore.create()` 只在应用启动时调用一次,组装凭据、传输、提示、导航以及每种资源
一个 `ResourceStore`,然后显式注入给各个控制器.不提供模块级单例.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from fittrack.client.auth_store import AuthStore
from fittrack.client.form_controller import FormController
from fittrack.client.list_controller import ConfirmCallback, ListController
from fittrack.client.navigation import Navigator
from fittrack.client.notifications import Notifier
from fittrack.client.profile_store import ProfileStore
from fittrack.client.store import ResourceStore
from fittrack.client.transport import ApiClient, CredentialStore, ResourceApi
from fittrack.core.resources import get_resource, iter_resources
from fittrack.forms.definitions import get_form_definition
from fittrack.settings import ClientSettings
from fittrack.utils.structlog_config import get_client_logger

if TYPE_CHECKING:
    import requests

    from fittrack.types import ResourceRecord

SESSION_EXPIRED_MESSAGE = "Session expired, please log in again"


def _running_loop() -> asyncio.AbstractEventLoop | None:
    try:
        return asyncio.get_running_loop()
    except RuntimeError:
        return None


@dataclass(slots=True)
class AppStore:
    """客户端全部状态的持有者.

    Attributes:
        settings: 客户端配置.
        client: 后端客户端.
        notifier: 提示通道.
        navigator: 导航记录.
        auth: 认证 Store.
        profile: 个人资料 Store.
        resources: 资源名到 `ResourceStore` 的映射.

    """

    settings: ClientSettings
    client: ApiClient
    notifier: Notifier
    navigator: Navigator
    auth: AuthStore
    profile: ProfileStore
    resources: dict[str, ResourceStore]

    @classmethod
    def create(
        cls,
        settings: ClientSettings | None = None,
        *,
        session: requests.Session | None = None,
    ) -> AppStore:
        """组装客户端状态层.

        应在事件循环中调用,会话过期回调会被调度回该循环.

        Args:
            settings: 客户端配置,默认从环境变量读取.
            session: 可注入的 ``requests.Session``.

        Returns:
            新的 `AppStore`.

        """
        resolved = settings or ClientSettings.load()
        notifier = Notifier(history=resolved.toast_history)
        navigator = Navigator()
        credentials = CredentialStore()
        client = ApiClient(
            resolved.api_base_url,
            credentials=credentials,
            timeout=resolved.request_timeout,
            session=session,
        )
        loop = _running_loop()
        auth = AuthStore(client, navigator=navigator, login_path=resolved.login_path, loop=loop)

        def _handle_session_expired() -> None:
            auth.handle_session_expired()
            notifier.info(SESSION_EXPIRED_MESSAGE)
            navigator.navigate(resolved.login_path)

        def _on_session_expired() -> None:
            # 回调在传输线程中触发,状态变更交回事件循环线程执行
            if loop is None:
                _handle_session_expired()
            else:
                loop.call_soon_threadsafe(_handle_session_expired)

        client.on_session_expired = _on_session_expired
        auth.initialize()

        resources = {
            definition.name: ResourceStore(definition, ResourceApi(client, definition))
            for definition in iter_resources()
        }
        get_client_logger("app_store").info(
            "客户端状态层初始化完成",
            api_base_url=resolved.api_base_url,
            resources=sorted(resources),
        )
        return cls(
            settings=resolved,
            client=client,
            notifier=notifier,
            navigator=navigator,
            auth=auth,
            profile=ProfileStore(client),
            resources=resources,
        )

    def resource(self, name: str) -> ResourceStore:
        """按资源名获取 Store,未注册时抛出 KeyError."""
        return self.resources[get_resource(name).name]

    def list_controller(self, name: str, *, confirm: ConfirmCallback) -> ListController:
        return ListController(
            self.resource(name),
            notifier=self.notifier,
            navigator=self.navigator,
            confirm=confirm,
            rows_per_page=self.settings.rows_per_page,
            search_debounce=self.settings.search_debounce,
        )

    def form_controller(
        self,
        name: str,
        record_id: str | None = None,
        *,
        on_complete: Callable[[ResourceRecord], None] | None = None,
    ) -> FormController:
        return FormController(
            self.resource(name),
            get_form_definition(name),
            record_id=record_id,
            notifier=self.notifier,
            navigator=self.navigator,
            on_complete=on_complete,
        )

    def close(self) -> None:
        self.client.close()


__all__ = ["AppStore", "SESSION_EXPIRED_MESSAGE"]
