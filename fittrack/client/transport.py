"""客户端 HTTP 传输层.

基于 ``requests.Session`` 封装后端 REST 调用:

- 自动附带 Bearer 令牌
- 非 2xx 响应抛出 `ApiError`,连接失败抛出 `TransportError`
- 401 时尝试一次令牌刷新,失败则清除凭据并触发会话过期回调
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import requests

from fittrack.constants import HttpHeaders, HttpStatus
from fittrack.settings import DEFAULT_REQUEST_TIMEOUT_SECONDS
from fittrack.types import JsonDict, JsonValue, PayloadMapping, ResourceRecord
from fittrack.types.listing import PaginatedResult
from fittrack.utils.pagination_utils import compute_page_count
from fittrack.utils.structlog_config import get_client_logger

if TYPE_CHECKING:
    from fittrack.core.resources import ResourceDefinition

REFRESH_PATH = "/auth/refresh"
_JSON_MIME = "application/json"


class TransportError(Exception):
    """请求未拿到任何响应(连接失败、超时等)."""


class ApiError(Exception):
    """后端返回了非 2xx 响应.

    Attributes:
        status: HTTP 状态码.
        body: 解码后的响应体,可能是字典、字符串或 None.

    """

    def __init__(self, status: int, body: JsonValue = None) -> None:
        self.status = status
        self.body = body
        super().__init__(f"HTTP {status}")


class SessionExpiredError(ApiError):
    """401 且刷新令牌失败,会话已失效."""

    def __init__(self, body: JsonValue = None) -> None:
        super().__init__(HttpStatus.UNAUTHORIZED, body)


@dataclass(slots=True)
class CredentialStore:
    """内存中的访问令牌与刷新令牌."""

    token: str | None = None
    refresh_token: str | None = None
    _listeners: list[Callable[[CredentialStore], None]] = field(default_factory=list)

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)

    def set(self, token: str, refresh_token: str | None = None) -> None:
        """保存令牌;未提供刷新令牌时保留原值."""
        self.token = token
        if refresh_token is not None:
            self.refresh_token = refresh_token
        self._emit()

    def clear(self) -> None:
        self.token = None
        self.refresh_token = None
        self._emit()

    def subscribe(self, listener: Callable[[CredentialStore], None]) -> None:
        self._listeners.append(listener)

    def _emit(self) -> None:
        for listener in list(self._listeners):
            listener(self)


def unwrap_data(body: JsonValue) -> JsonValue:
    """取出统一响应封套中的 ``data``,没有封套时原样返回."""
    if isinstance(body, Mapping) and "data" in body:
        return body["data"]
    return body


class ApiClient:
    """后端 REST API 客户端.

    Args:
        base_url: API 根地址,例如 ``http://127.0.0.1:5001/api``.
        credentials: 令牌存储.
        timeout: 单次请求超时(秒).
        session: 可注入的 ``requests.Session``,测试时可替换.
        on_session_expired: 会话过期时的回调.

    """

    def __init__(
        self,
        base_url: str,
        *,
        credentials: CredentialStore | None = None,
        timeout: float = DEFAULT_REQUEST_TIMEOUT_SECONDS,
        session: requests.Session | None = None,
        on_session_expired: Callable[[], None] | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.credentials = credentials or CredentialStore()
        self.timeout = timeout
        self.on_session_expired = on_session_expired
        self._session = session or requests.Session()
        self._logger = get_client_logger("transport", base_url=self.base_url)

    def close(self) -> None:
        self._session.close()

    # ------------------------------------------------------------------ #
    # HTTP 动词
    # ------------------------------------------------------------------ #
    def get(self, path: str, *, params: Mapping[str, object] | None = None) -> JsonValue:
        return self.request("GET", path, params=params)

    def post(self, path: str, *, json: PayloadMapping | None = None) -> JsonValue:
        return self.request("POST", path, json=json)

    def put(self, path: str, *, json: PayloadMapping | None = None) -> JsonValue:
        return self.request("PUT", path, json=json)

    def delete(self, path: str) -> JsonValue:
        return self.request("DELETE", path)

    def request(
        self,
        method: str,
        path: str,
        *,
        params: Mapping[str, object] | None = None,
        json: PayloadMapping | None = None,
    ) -> JsonValue:
        """发送请求并返回解码后的响应体.

        Raises:
            TransportError: 未收到响应.
            SessionExpiredError: 401 且刷新失败.
            ApiError: 其他非 2xx 响应.

        """
        response = self._send(method, path, params=params, json=json, token=self.credentials.token)

        if response.status_code == HttpStatus.UNAUTHORIZED:
            if self._refresh_access_token():
                response = self._send(method, path, params=params, json=json, token=self.credentials.token)
            if response.status_code == HttpStatus.UNAUTHORIZED:
                self._expire_session(method, path)
                raise SessionExpiredError(self._decode(response))

        body = self._decode(response)
        if not response.ok:
            raise ApiError(response.status_code, body)
        return body

    # ------------------------------------------------------------------ #
    # Helpers
    # ------------------------------------------------------------------ #
    def _url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def _send(
        self,
        method: str,
        path: str,
        *,
        params: Mapping[str, object] | None,
        json: PayloadMapping | None,
        token: str | None,
    ) -> requests.Response:
        headers = {HttpHeaders.ACCEPT: _JSON_MIME}
        if token:
            headers[HttpHeaders.AUTHORIZATION] = f"Bearer {token}"
        try:
            return self._session.request(
                method,
                self._url(path),
                params=dict(params) if params else None,
                json=dict(json) if json is not None else None,
                headers=headers,
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            self._logger.warning("请求未收到响应", method=method, path=path, error=str(exc))
            raise TransportError(str(exc)) from exc

    @staticmethod
    def _decode(response: requests.Response) -> JsonValue:
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return response.text

    def _refresh_access_token(self) -> bool:
        refresh_token = self.credentials.refresh_token
        if not refresh_token:
            return False
        try:
            response = self._send("POST", REFRESH_PATH, params=None, json=None, token=refresh_token)
        except TransportError:
            return False
        if not response.ok:
            return False

        data = unwrap_data(self._decode(response))
        token = data.get("token") if isinstance(data, Mapping) else None
        if not isinstance(token, str) or not token:
            return False
        self.credentials.set(token)
        self._logger.debug("访问令牌已刷新")
        return True

    def _expire_session(self, method: str, path: str) -> None:
        self._logger.warning("会话已过期", method=method, path=path)
        self.credentials.clear()
        if self.on_session_expired is not None:
            self.on_session_expired()


class ResourceApi:
    """绑定到单个资源的 REST 调用集合."""

    def __init__(self, client: ApiClient, definition: ResourceDefinition) -> None:
        self.client = client
        self.definition = definition

    @property
    def _collection(self) -> str:
        return f"/{self.definition.path}"

    def _item(self, record_id: str) -> str:
        return f"/{self.definition.path}/{record_id}"

    def list(
        self,
        page: int,
        limit: int,
        search: str,
        sort: str,
        order: str,
    ) -> PaginatedResult[ResourceRecord]:
        """拉取一页记录."""
        params: JsonDict = {"page": page, "limit": limit, "sort": sort, "order": order}
        if search:
            params["search"] = search
        data = unwrap_data(self.client.get(self._collection, params=params))
        if not isinstance(data, Mapping):
            data = {}

        raw_items = data.get(self.definition.list_key)
        if raw_items is None:
            raw_items = data.get("items", [])
        items = [dict(item) for item in raw_items or [] if isinstance(item, Mapping)]
        total = int(data.get("total", len(items)) or 0)
        return PaginatedResult(
            items=items,
            total=total,
            page=int(data.get("page", page) or page),
            pages=int(data.get("totalPages", compute_page_count(total, limit)) or 0),
            limit=int(data.get("limit", limit) or limit),
        )

    def get(self, record_id: str) -> ResourceRecord:
        return _as_record(unwrap_data(self.client.get(self._item(record_id))))

    def create(self, record: PayloadMapping) -> ResourceRecord:
        return _as_record(unwrap_data(self.client.post(self._collection, json=record)))

    def update(self, record_id: str, record: PayloadMapping) -> ResourceRecord:
        return _as_record(unwrap_data(self.client.put(self._item(record_id), json=record)))

    def delete(self, record_id: str) -> None:
        self.client.delete(self._item(record_id))


def _as_record(data: JsonValue) -> ResourceRecord:
    return dict(data) if isinstance(data, Mapping) else {}


__all__ = [
    "ApiClient",
    "ApiError",
    "CredentialStore",
    "ResourceApi",
    "SessionExpiredError",
    "TransportError",
    "unwrap_data",
]
