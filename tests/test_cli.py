"""Tests for roost.cli — CLI entrypoint and subcommands."""

import json

import pytest

from roost.cli import main

TREE = {
    "get.py": "def handler(request):\n    return 'root'\n",
    "0-cors.py": "async def handler(request, next):\n    return await next(request)\n",
    "404.py": "def handler(request):\n    return 'missing'\n",
    "users": {
        "[id]": {
            "get.py": "def handler(id):\n    return id\n",
        },
    },
}


class TestCLIHelp:
    def test_help_exits_zero(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["--help"])
        assert exc_info.value.code == 0

    @pytest.mark.parametrize("command", ["tree", "routes", "run"])
    def test_subcommand_help_exits_zero(self, command: str) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main([command, "--help"])
        assert exc_info.value.code == 0

    def test_no_command_exits_zero(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main([])
        assert exc_info.value.code == 0
        assert "roost" in capsys.readouterr().out


class TestTreeCommand:
    def test_prints_tree(self, write_tree, capsys: pytest.CaptureFixture[str]) -> None:
        root = write_tree(TREE)
        main(["tree", str(root)])
        out = capsys.readouterr().out
        assert "get  (method)" in out
        assert "0-cors  (middleware #0 cors)" in out
        assert "404  (special)" in out
        assert "[id]/" in out

    def test_json(self, write_tree, capsys: pytest.CaptureFixture[str]) -> None:
        root = write_tree(TREE)
        main(["tree", str(root), "--json"])
        data = json.loads(capsys.readouterr().out)
        assert data["path"] == "/"
        assert data["children"]["users"]["children"]["id"]["dynamic"] is True

    def test_build_error_exits_one(self, write_tree, capsys: pytest.CaptureFixture[str]) -> None:
        root = write_tree({"0-a.py": TREE["0-cors.py"], "0-b.py": TREE["0-cors.py"]})
        with pytest.raises(SystemExit) as exc_info:
            main(["tree", str(root)])
        assert exc_info.value.code == 1
        assert "Error:" in capsys.readouterr().err

    def test_missing_directory(self, tmp_path, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["tree", str(tmp_path / "nowhere")])
        assert exc_info.value.code == 1
        assert "not found" in capsys.readouterr().err

    def test_tolerant(self, write_tree, capsys: pytest.CaptureFixture[str]) -> None:
        root = write_tree({"get.py": "raise ValueError('broken')\n", "post.py": TREE["get.py"]})
        main(["tree", str(root), "--tolerant"])
        out = capsys.readouterr().out
        assert "post  (method)" in out
        assert "get  (method)" not in out


class TestRoutesCommand:
    def test_route_table(self, write_tree, capsys: pytest.CaptureFixture[str]) -> None:
        root = write_tree(TREE)
        main(["routes", str(root), "--prefix", "/api"])
        out = capsys.readouterr().out
        assert "METHOD" in out
        assert "/api/users/:id" in out
        assert "0-cors.py -> get.py" in out
        assert "users/[id]/get.py" in out
        assert "Path-scoped middleware:" in out

    def test_unroutable_directory_exits_one(
        self, write_tree, capsys: pytest.CaptureFixture[str]
    ) -> None:
        root = write_tree({"{id}": {"get.py": TREE["get.py"]}})
        with pytest.raises(SystemExit) as exc_info:
            main(["routes", str(root)])
        assert exc_info.value.code == 1
        assert ":param" in capsys.readouterr().err

    def test_empty_tree(self, write_tree, capsys: pytest.CaptureFixture[str]) -> None:
        root = write_tree({})
        main(["routes", str(root)])
        assert "No routes registered." in capsys.readouterr().out

    def test_custom_attr(self, write_tree, capsys: pytest.CaptureFixture[str]) -> None:
        root = write_tree({"get.py": "def main(request):\n    return 'x'\n"})
        main(["routes", str(root), "--attr", "main"])
        assert "get.py" in capsys.readouterr().out


class TestRunCommand:
    def test_serves_mounted_app(self, write_tree, monkeypatch: pytest.MonkeyPatch) -> None:
        calls = []

        def fake_run_dev_server(app, host, port, *, reload=False):
            calls.append((app, host, port))

        monkeypatch.setattr("roost.server.dev.run_dev_server", fake_run_dev_server)
        root = write_tree(TREE)
        main(["run", str(root), "--host", "0.0.0.0", "--port", "9001"])

        app, host, port = calls[0]
        assert app.config.api_dir == str(root)
        assert (host, port) == ("0.0.0.0", 9001)
        assert [route.path for route in app.router.routes] == ["/", "/users/:id"]

    def test_missing_server_exits_one(
        self, write_tree, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
    ) -> None:
        from roost.errors import ConfigurationError

        def no_server(app, host, port, *, reload=False):
            raise ConfigurationError("Serving requires the pounce ASGI server.")

        monkeypatch.setattr("roost.server.dev.run_dev_server", no_server)
        with pytest.raises(SystemExit) as exc_info:
            main(["run", str(write_tree(TREE))])
        assert exc_info.value.code == 1
        assert "pounce" in capsys.readouterr().err
