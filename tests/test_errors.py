"""Tests for roost.errors — exception hierarchy and messages."""

from pathlib import Path

from roost.errors import (
    BuildError,
    ConfigurationError,
    DirectoryReadError,
    HTTPError,
    InvalidLeafNameError,
    LoadError,
    MethodNotAllowed,
    MiddlewareOrdinalCollisionError,
    NotFound,
    RoostError,
)


class TestHierarchy:
    def test_build_errors(self) -> None:
        for exc_type in (
            DirectoryReadError,
            LoadError,
            InvalidLeafNameError,
            MiddlewareOrdinalCollisionError,
        ):
            assert issubclass(exc_type, BuildError)
            assert issubclass(exc_type, RoostError)

    def test_configuration_error(self) -> None:
        assert issubclass(ConfigurationError, RoostError)
        assert not issubclass(ConfigurationError, BuildError)

    def test_http_errors(self) -> None:
        assert issubclass(NotFound, HTTPError)
        assert issubclass(MethodNotAllowed, HTTPError)


class TestBuildError:
    def test_path_is_string(self) -> None:
        exc = LoadError("cannot load", path=Path("/api/get.py"))
        assert exc.path == "/api/get.py"
        assert str(exc) == "cannot load"

    def test_path_optional(self) -> None:
        assert DirectoryReadError("nope").path is None

    def test_collision_message(self) -> None:
        exc = MiddlewareOrdinalCollisionError(0, existing="0-cors", incoming="0-auth", path="/users")
        assert exc.ordinal == 0
        assert "0-cors" in str(exc)
        assert "0-auth" in str(exc)
        assert "/users" in str(exc)


class TestHTTPError:
    def test_not_found(self) -> None:
        exc = NotFound()
        assert exc.status == 404
        assert str(exc) == "404: Not Found"

    def test_method_not_allowed_allow_header(self) -> None:
        exc = MethodNotAllowed(frozenset({"POST", "GET"}))
        assert exc.status == 405
        assert exc.headers == (("Allow", "GET, POST"),)
