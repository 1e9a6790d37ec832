"""Tests for InertiaMiddleware applying the protocol to full request cycles."""

from typing import Any

from litestar import Request, get, post
from litestar.middleware import DefineMiddleware
from litestar.response import Redirect, Response
from litestar.testing import create_test_client  # pyright: ignore[reportUnknownVariableType]

from litestar_inertia import InertiaHeaders, InertiaMiddleware, InertiaPlugin
from litestar_inertia.version import StaticVersionProvider


def test_version_mismatch_returns_409_with_location_header(inertia_plugin: InertiaPlugin) -> None:
    calls: "list[str]" = []

    @get("/", component="Home")
    async def handler() -> "dict[str, Any]":
        calls.append("handler")
        return {"data": "value"}

    with create_test_client(route_handlers=[handler], plugins=[inertia_plugin]) as client:
        response = client.get(
            "/?tab=2",
            headers={InertiaHeaders.ENABLED.value: "true", InertiaHeaders.VERSION.value: "wrong-version"},
        )
        assert response.status_code == 409
        assert response.headers[InertiaHeaders.LOCATION.value] == "/?tab=2"
        assert response.json() == {"message": "Asset version mismatch"}
        assert "x-inertia" not in response.headers
        assert calls == ["handler"]


def test_version_mismatch_ignores_handler_status(inertia_plugin: InertiaPlugin) -> None:
    @post("/items", status_code=201)
    async def handler() -> "dict[str, Any]":
        return {"created": True}

    with create_test_client(route_handlers=[handler], plugins=[inertia_plugin]) as client:
        response = client.post(
            "/items", headers={InertiaHeaders.ENABLED.value: "true", InertiaHeaders.VERSION.value: "stale"}
        )
        assert response.status_code == 409


def test_version_match_proceeds_normally(inertia_plugin: InertiaPlugin) -> None:
    @get("/", component="Home")
    async def handler() -> "dict[str, Any]":
        return {"data": "value"}

    with create_test_client(route_handlers=[handler], plugins=[inertia_plugin]) as client:
        initial_response = client.get("/", headers={InertiaHeaders.ENABLED.value: "true"})
        current_version = initial_response.json()["version"]
        assert current_version == "1.0.0"

        response = client.get(
            "/", headers={InertiaHeaders.ENABLED.value: "true", InertiaHeaders.VERSION.value: current_version}
        )
        assert response.status_code == 200
        assert response.headers[InertiaHeaders.VERSION.value] == "1.0.0"
        data = response.json()
        assert data["component"] == "Home"
        assert data["props"]["data"] == "value"


def test_non_inertia_request_bypasses_version_check(inertia_plugin: InertiaPlugin) -> None:
    @get("/", component="Home")
    async def handler() -> "dict[str, Any]":
        return {"data": "value"}

    with create_test_client(route_handlers=[handler], plugins=[inertia_plugin]) as client:
        response = client.get("/", headers={InertiaHeaders.VERSION.value: "wrong-version"})
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/html")


def test_found_redirect_becomes_see_other(inertia_plugin: InertiaPlugin) -> None:
    @post("/users")
    async def handler() -> Redirect:
        return Redirect(path="/users/1", status_code=302)

    with create_test_client(route_handlers=[handler], plugins=[inertia_plugin]) as client:
        response = client.post("/users", headers={InertiaHeaders.ENABLED.value: "true"}, follow_redirects=False)
        assert response.status_code == 303
        assert response.headers["location"] == "/users/1"

        response = client.post("/users", follow_redirects=False)
        assert response.status_code == 302


def test_redirect_with_stale_version_is_not_replaced(inertia_plugin: InertiaPlugin) -> None:
    @post("/users")
    async def handler() -> Redirect:
        return Redirect(path="/users/1", status_code=302)

    with create_test_client(route_handlers=[handler], plugins=[inertia_plugin]) as client:
        response = client.post(
            "/users",
            headers={InertiaHeaders.ENABLED.value: "true", InertiaHeaders.VERSION.value: "stale"},
            follow_redirects=False,
        )
        assert response.status_code == 303


def test_plain_json_response_is_marked(inertia_plugin: InertiaPlugin) -> None:
    @get("/api/ping")
    async def handler() -> "dict[str, str]":
        return {"ping": "pong"}

    with create_test_client(route_handlers=[handler], plugins=[inertia_plugin]) as client:
        response = client.get("/api/ping", headers={InertiaHeaders.ENABLED.value: "true"})
        assert response.json() == {"ping": "pong"}
        assert response.headers[InertiaHeaders.ENABLED.value] == "true"
        assert response.headers[InertiaHeaders.VERSION.value] == "1.0.0"
        assert response.headers["vary"] == "X-Inertia"

        response = client.get("/api/ping")
        assert InertiaHeaders.ENABLED.value not in response.headers


def test_text_response_is_not_marked(inertia_plugin: InertiaPlugin) -> None:
    @get("/health", media_type="text/plain")
    async def handler() -> str:
        return "healthy"

    with create_test_client(route_handlers=[handler], plugins=[inertia_plugin]) as client:
        response = client.get("/health", headers={InertiaHeaders.ENABLED.value: "true"})
        assert response.text == "healthy"
        assert InertiaHeaders.ENABLED.value not in response.headers


def test_middleware_without_plugin() -> None:
    @get("/")
    async def handler(request: Request[Any, Any, Any]) -> Response[Any]:
        return Response(content={"ok": True})

    middleware = DefineMiddleware(InertiaMiddleware, version_provider=StaticVersionProvider("build-9"))
    with create_test_client(route_handlers=[handler], middleware=[middleware]) as client:
        response = client.get("/", headers={InertiaHeaders.ENABLED.value: "true"})
        assert response.headers[InertiaHeaders.VERSION.value] == "build-9"

        response = client.get("/", headers={InertiaHeaders.ENABLED.value: "true", InertiaHeaders.VERSION.value: "1"})
        assert response.status_code == 409
