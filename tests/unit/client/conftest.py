"""客户端状态层测试共用的假传输."""

from __future__ import annotations

import json
import threading
from dataclasses import dataclass, field

import pytest

from fittrack.client.navigation import Navigator
from fittrack.client.notifications import Notifier
from fittrack.client.store import ResourceStore
from fittrack.core.resources import get_resource
from fittrack.types.listing import PaginatedResult


@dataclass
class Gate:
    """在 ``release()`` 之前阻塞假调用,用于构造乱序结算."""

    value: object = None
    event: threading.Event = field(default_factory=threading.Event)

    def release(self) -> None:
        self.event.set()


class FakeResourceApi:
    """按调用名排队返回值或异常的 `ResourceApi` 替身."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, tuple[object, ...]]] = []
        self.responses: dict[str, list[object]] = {}

    def queue(self, name: str, *results: object) -> None:
        self.responses.setdefault(name, []).extend(results)

    def queue_page(self, *items: dict, total: int | None = None, page: int = 1, limit: int = 10) -> None:
        self.queue("list", page_of(*items, total=total, page=page, limit=limit))

    def gate(self, name: str, value: object = None) -> Gate:
        """排入一个阻塞结果,调用 ``release()`` 后才返回 ``value``."""
        gate = Gate(value=value)
        self.queue(name, gate)
        return gate

    def _respond(self, name: str, *args: object) -> object:
        self.calls.append((name, args))
        pending = self.responses.get(name) or []
        result = pending.pop(0) if pending else None
        if isinstance(result, Gate):
            result.event.wait(timeout=5)
            result = result.value
        if isinstance(result, BaseException):
            raise result
        return result

    def list(self, page, limit, search, sort, order):
        result = self._respond("list", page, limit, search, sort, order)
        if result is None:
            return PaginatedResult(items=[], total=0, page=page, pages=0, limit=limit)
        return result

    def get(self, record_id):
        return self._respond("get", record_id)

    def create(self, record):
        return self._respond("create", record)

    def update(self, record_id, record):
        return self._respond("update", record_id, record)

    def delete(self, record_id):
        return self._respond("delete", record_id)


def page_of(*items: dict, total: int | None = None, page: int = 1, limit: int = 10) -> PaginatedResult:
    count = len(items) if total is None else total
    pages = (count + limit - 1) // limit
    return PaginatedResult(items=list(items), total=count, page=page, pages=pages, limit=limit)


@pytest.fixture()
def fake_api() -> FakeResourceApi:
    return FakeResourceApi()


@pytest.fixture()
def workout_store(fake_api) -> ResourceStore:
    return ResourceStore(get_resource("workout"), fake_api)


@pytest.fixture()
def notifier() -> Notifier:
    return Notifier()


@pytest.fixture()
def navigator() -> Navigator:
    return Navigator()


class FakeResponse:
    """只实现 `ApiClient` 用到的 ``requests.Response`` 属性."""

    def __init__(self, status_code: int, body: object = None) -> None:
        self.status_code = status_code
        self._body = body

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 400

    @property
    def content(self) -> bytes:
        if self._body is None:
            return b""
        return json.dumps(self._body).encode() if not isinstance(self._body, str) else self._body.encode()

    @property
    def text(self) -> str:
        return self._body if isinstance(self._body, str) else json.dumps(self._body)

    def json(self) -> object:
        if isinstance(self._body, str):
            raise ValueError("not json")
        return self._body


class FakeSession:
    """按 (method, path) 路由的 ``requests.Session`` 替身."""

    def __init__(self) -> None:
        self.requests: list[dict[str, object]] = []
        self.routes: dict[tuple[str, str], list[object]] = {}
        self.closed = False

    def route(self, method: str, path: str, *responses: object) -> None:
        self.routes.setdefault((method, path), []).extend(responses)

    def request(self, method, url, *, params=None, json=None, headers=None, timeout=None):
        path = "/" + url.split("/api/", 1)[-1]
        self.requests.append({"method": method, "path": path, "params": params, "json": json, "headers": headers})
        pending = self.routes.get((method, path)) or []
        result = pending.pop(0) if pending else FakeResponse(404, {"message": "Not found"})
        if isinstance(result, BaseException):
            raise result
        return result

    def close(self) -> None:
        self.closed = True


@pytest.fixture()
def fake_session() -> FakeSession:
    return FakeSession()


@pytest.fixture()
def respond():
    return FakeResponse
