"""Tests for roost.app — mounting handler trees and serving them over ASGI."""

import pytest

from roost.app import App
from roost.config import RoostConfig
from roost.errors import ConfigurationError, LoadError
from roost.testing import TestClient

# Middleware that records its label on a response header chain
TRACE = """
    async def handler(request, next):
        response = await next(request)
        return response.with_header("X-Trace", "{label}")
"""


def _trace(label: str) -> str:
    return TRACE.replace("{label}", label)


class TestAppSetup:
    def test_default_config(self) -> None:
        app = App()
        assert app.config.api_dir == "api"
        assert app.config.prefix == ""

    def test_mount_returns_tree(self, write_tree) -> None:
        root = write_tree({"get.py": "def handler(request):\n    return 'hi'\n"})
        app = App()
        tree = app.mount(root)
        assert tree.leaf("get") is not None
        assert app.trees == (tree,)

    def test_mount_uses_config_directory(self, write_tree) -> None:
        root = write_tree({"get.py": "def handler(request):\n    return 'hi'\n"})
        app = App(RoostConfig(api_dir=root, prefix="/api"))
        app.mount()
        assert [route.path for route in app.router.routes] == ["/api"]

    def test_mount_propagates_build_errors(self, write_tree) -> None:
        root = write_tree({"get.py": "raise ValueError('broken')\n"})
        with pytest.raises(LoadError):
            App().mount(root)

    def test_tolerant_config(self, write_tree) -> None:
        root = write_tree(
            {
                "get.py": "raise ValueError('broken')\n",
                "post.py": "def handler(request):\n    return 'ok'\n",
            }
        )
        app = App(RoostConfig(tolerant=True))
        app.mount(root)
        assert [sorted(route.methods) for route in app.router.routes] == [["POST"]]

    def test_register_route_needs_handler(self) -> None:
        with pytest.raises(ConfigurationError):
            App().register_route("GET", "/")

    def test_frozen_after_first_request(self, write_tree) -> None:
        app = App()
        app.mount(write_tree({"get.py": "def handler(request):\n    return 'hi'\n"}))
        app._ensure_frozen()
        with pytest.raises(ConfigurationError):
            app.register_route("GET", "/late", lambda request: "late")


class TestAppE2E:
    """End-to-end tests using TestClient."""

    async def test_method_routes(self, write_tree) -> None:
        root = write_tree(
            {
                "get.py": "def handler(request):\n    return 'listing'\n",
                "post.py": "def handler(request):\n    return ('created', 201)\n",
            }
        )
        app = App()
        app.mount(root)

        async with TestClient(app) as client:
            get_resp = await client.get("/")
            assert get_resp.status == 200
            assert get_resp.text == "listing"

            post_resp = await client.post("/")
            assert post_resp.status == 201

            put_resp = await client.put("/")
            assert put_resp.status == 405
            assert put_resp.header("Allow") == "GET, POST"

    async def test_path_params(self, write_tree) -> None:
        root = write_tree(
            {
                "users": {
                    "[id]": {
                        "get.py": """
                            def handler(request, id):
                                return {"id": id, "from_request": request.path_params["id"]}
                        """,
                    },
                },
            }
        )
        app = App()
        app.mount(root, prefix="/api")

        async with TestClient(app) as client:
            response = await client.get("/api/users/42")
            assert response.status == 200
            assert "application/json" in response.content_type
            assert '"id": "42"' in response.text
            assert '"from_request": "42"' in response.text

    async def test_middleware_order(self, write_tree) -> None:
        root = write_tree(
            {
                "0-cors.py": _trace("cors"),
                "1-logger.py": _trace("logger"),
                "auth.py": _trace("auth"),
                "get.py": "def handler(request):\n    return 'ok'\n",
            }
        )
        app = App()
        app.mount(root)

        async with TestClient(app) as client:
            response = await client.get("/")
            traces = [value for name, value in response.headers if name == "x-trace"]
            # innermost middleware decorates the response first
            assert traces == ["auth", "logger", "cors"]

    async def test_parent_middleware_runs_for_children(self, write_tree) -> None:
        root = write_tree(
            {
                "0-root.py": _trace("root"),
                "users": {
                    "0-users.py": _trace("users"),
                    "get.py": "def handler(request):\n    return 'users'\n",
                },
            }
        )
        app = App()
        app.mount(root)

        async with TestClient(app) as client:
            response = await client.get("/users")
            traces = [value for name, value in response.headers if name == "x-trace"]
            assert traces == ["users", "root"]

    async def test_middleware_short_circuit(self, write_tree) -> None:
        root = write_tree(
            {
                "0-auth.py": """
                    def handler(request, next):
                        if "authorization" not in request.headers:
                            return ("unauthorized", 401)
                        return next(request)
                """,
                "get.py": "def handler(request):\n    return 'secret'\n",
            }
        )
        app = App()
        app.mount(root)

        async with TestClient(app) as client:
            denied = await client.get("/")
            assert denied.status == 401

            allowed = await client.get("/", headers={"Authorization": "Bearer x"})
            assert allowed.status == 200
            assert allowed.text == "secret"

    async def test_not_found_handler(self, write_tree) -> None:
        root = write_tree(
            {
                "404.py": "def handler(request):\n    return f'no {request.path}'\n",
                "get.py": "def handler(request):\n    return 'home'\n",
            }
        )
        app = App()
        app.mount(root)

        async with TestClient(app) as client:
            response = await client.get("/missing")
            assert response.status == 404
            assert response.text == "no /missing"

    async def test_empty_special_handlers_keep_their_status(self, write_tree) -> None:
        root = write_tree(
            {
                "404.py": "def handler(request):\n    return None\n",
                "error.py": "def handler(request, exc):\n    return None\n",
                "get.py": "def handler(request):\n    raise RuntimeError('x')\n",
                "users": {
                    "[id]": {
                        "get.py": """
                            from roost import NotFound

                            def handler(id):
                                raise NotFound(f"user {id}")
                        """,
                    },
                },
            }
        )
        app = App()
        app.mount(root)

        async with TestClient(app) as client:
            assert (await client.get("/missing")).status == 404
            assert (await client.get("/users/7")).status == 404
            assert (await client.get("/")).status == 500

    async def test_default_not_found(self, write_tree) -> None:
        app = App()
        app.mount(write_tree({"get.py": "def handler(request):\n    return 'home'\n"}))

        async with TestClient(app) as client:
            response = await client.get("/missing")
            assert response.status == 404

    async def test_error_handler(self, write_tree) -> None:
        root = write_tree(
            {
                "error.py": """
                    def handler(request, exc):
                        return f"failed: {exc}"
                """,
                "get.py": """
                    def handler(request):
                        raise RuntimeError("kaboom")
                """,
            }
        )
        app = App()
        app.mount(root)

        async with TestClient(app) as client:
            response = await client.get("/")
            assert response.status == 500
            assert response.text == "failed: kaboom"

    async def test_default_error(self, write_tree) -> None:
        root = write_tree({"get.py": "def handler(request):\n    raise RuntimeError('x')\n"})
        app = App()
        app.mount(root)

        async with TestClient(app) as client:
            response = await client.get("/")
            assert response.status == 500
            assert response.text == "Internal Server Error"

    async def test_debug_error_shows_traceback(self, write_tree) -> None:
        root = write_tree({"get.py": "def handler(request):\n    raise RuntimeError('x')\n"})
        app = App(RoostConfig(debug=True))
        app.mount(root)

        async with TestClient(app) as client:
            response = await client.get("/")
            assert response.status == 500
            assert "RuntimeError" in response.text

    async def test_none_is_no_content(self, write_tree) -> None:
        root = write_tree(
            {
                "delete.py": """
                    async def handler(request):
                        return None
                """,
            }
        )
        app = App()
        app.mount(root)

        async with TestClient(app) as client:
            response = await client.delete("/")
            assert response.status == 204

    async def test_json_body(self, write_tree) -> None:
        root = write_tree(
            {
                "post.py": """
                    async def handler(request):
                        data = await request.json()
                        return {"echo": data["name"]}
                """,
            }
        )
        app = App()
        app.mount(root)

        async with TestClient(app) as client:
            response = await client.post("/", json={"name": "roost"})
            assert response.status == 200
            assert '"echo": "roost"' in response.text
