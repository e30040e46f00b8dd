"""Tests for roost.server.handler — the ASGI front controller."""

from typing import Any

from roost._internal.invoke import invoke
from roost.app import App
from roost.config import AppConfig
from roost.context import get_request
from roost.http.request import Request
from roost.http.response import Response
from roost.server.handler import build_chain


class EchoController:
    def show(self, *params):
        request = get_request()
        return {"path": request.path, "params": list(request.path_params)}


async def _call(app: App, scope: dict[str, Any]) -> list[dict[str, Any]]:
    messages: list[dict[str, Any]] = []

    async def receive() -> dict[str, Any]:
        return {"type": "http.request", "body": b"", "more_body": False}

    async def send(message: dict[str, Any]) -> None:
        messages.append(message)

    await app(scope, receive, send)
    return messages


def _scope(path: str, method: str = "GET") -> dict[str, Any]:
    return {
        "type": "http",
        "method": method,
        "path": path,
        "query_string": b"",
        "headers": [],
        "client": ("127.0.0.1", 1),
    }


class TestHandleRequest:
    async def test_raw_asgi_round_trip(self) -> None:
        app = App(AppConfig(template_dir="does-not-exist"))
        app.controllers.register(EchoController)
        app.routes(lambda r: r.get("echo/{a}/{b}", "EchoController", "show"))

        start, body = await _call(app, _scope("/echo/x/y"))
        assert start["status"] == 200
        assert body["body"] == b'{"path": "/echo/x/y", "params": ["x", "y"]}'

    async def test_fallback_params_visible_on_request(self) -> None:
        app = App(AppConfig(template_dir="does-not-exist"))
        app.controllers.register(EchoController)

        _, body = await _call(app, _scope("/echo/show/1/2"))
        assert body["body"] == b'{"path": "/echo/show/1/2", "params": ["1", "2"]}'

    async def test_exactly_one_response_on_error(self) -> None:
        app = App(AppConfig(template_dir="does-not-exist", fallback_routing=False))
        messages = await _call(app, _scope("/nope"))
        assert [m["type"] for m in messages] == ["http.response.start", "http.response.body"]
        assert messages[0]["status"] == 404

    async def test_non_http_scope_ignored(self) -> None:
        app = App(AppConfig(template_dir="does-not-exist"))
        assert await _call(app, {"type": "websocket", "path": "/"}) == []


class TestBuildChain:
    async def test_no_middleware(self) -> None:
        async def endpoint(request: Request) -> Response:
            return Response("done")

        chain = build_chain([], endpoint)
        assert (await chain(Request(method="GET", path="/"))).text == "done"

    async def test_short_circuit(self) -> None:
        reached: list[str] = []

        async def endpoint(request: Request) -> Response:
            reached.append("endpoint")
            return Response("done")

        async def blocker(request: Request, next) -> Response:
            return Response("blocked", status=401)

        response = await build_chain([blocker], endpoint)(Request(method="GET", path="/"))
        assert response.status == 401
        assert reached == []


class TestInvoke:
    async def test_sync(self) -> None:
        assert await invoke(lambda x: x + 1, 1) == 2

    async def test_async(self) -> None:
        async def double(x: int) -> int:
            return x * 2

        assert await invoke(double, 4) == 8
