"""CLI tests for the credential, cache and configuration commands."""

from __future__ import annotations

import json

import pytest

from ngakit import __version__
from ngakit.app import app
from ngakit.config import global_config_path, load_global_config


@pytest.fixture()
def env(isolated_config):
    return isolated_config


def _json(result):
    assert result.exit_code == 0, result.output
    return json.loads(result.stdout)


class TestVersion:
    def test_version(self, cli_runner) -> None:
        result = cli_runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert f"ngakit {__version__}" in result.stdout


# ------------------------------------------------------------------ #
# auth
# ------------------------------------------------------------------ #


class TestAuthCommands:
    def test_login_status_logout(self, cli_runner, env) -> None:
        result = cli_runner.invoke(app, ["auth", "login", "--uid", "42", "--token", "t0ps3cret"])
        assert result.exit_code == 0, result.output
        assert load_global_config().auth.uid == 42

        status = cli_runner.invoke(app, ["--json", "-q", "auth", "status"])
        assert _json(status) == {"authenticated": True, "uid": "42", "source": "config"}
        assert "t0ps3cret" not in status.output

        result = cli_runner.invoke(app, ["auth", "logout"])
        assert result.exit_code == 0, result.output
        assert load_global_config().auth is None

    def test_login_prompts_for_missing_values(self, cli_runner, env) -> None:
        result = cli_runner.invoke(app, ["auth", "login"], input="7\nhidden\n")
        assert result.exit_code == 0, result.output
        assert load_global_config().auth.token == "hidden"

    def test_login_rejects_bad_uid(self, cli_runner, env) -> None:
        result = cli_runner.invoke(app, ["auth", "login", "--uid", "0", "--token", "t"])
        assert result.exit_code == 2
        assert not global_config_path().exists()

    def test_status_from_environment(self, cli_runner, env, monkeypatch) -> None:
        monkeypatch.setenv("NGAKIT_TOKEN", "envtoken")
        monkeypatch.setenv("NGAKIT_UID", "99")
        status = cli_runner.invoke(app, ["--json", "-q", "auth", "status"])
        assert _json(status) == {"authenticated": True, "uid": "99", "source": "environment"}

    def test_status_logged_out(self, cli_runner, env) -> None:
        status = cli_runner.invoke(app, ["--json", "-q", "auth", "status"])
        assert _json(status)["authenticated"] is False


# ------------------------------------------------------------------ #
# cache
# ------------------------------------------------------------------ #


class TestCacheCommands:
    def test_stats(self, cli_runner, env) -> None:
        data = _json(cli_runner.invoke(app, ["--json", "-q", "cache", "stats"]))
        assert data["enabled"] is True
        assert data["backend"] == "disk"
        assert data["size"] == 0

    def test_stats_disabled(self, cli_runner, env) -> None:
        cli_runner.invoke(app, ["config", "set", "cache.enabled", "false"])
        data = _json(cli_runner.invoke(app, ["--json", "-q", "cache", "stats"]))
        assert data == {"enabled": False}

    def test_clear(self, cli_runner, env) -> None:
        result = cli_runner.invoke(app, ["cache", "clear"])
        assert result.exit_code == 0, result.output
        assert "Cache cleared." in result.output


# ------------------------------------------------------------------ #
# config
# ------------------------------------------------------------------ #


class TestConfigCommands:
    def test_show_masks_token(self, cli_runner, env) -> None:
        cli_runner.invoke(app, ["auth", "login", "--uid", "42", "--token", "t0ps3cret"])
        result = cli_runner.invoke(app, ["--json", "-q", "config", "show"])
        data = _json(result)
        assert data["auth"] == {"token": "********", "uid": 42}
        assert "t0ps3cret" not in result.output

    def test_set_string(self, cli_runner, env) -> None:
        result = cli_runner.invoke(app, ["config", "set", "cache.backend", "memory"])
        assert result.exit_code == 0, result.output
        assert load_global_config().cache.backend == "memory"

    def test_set_int(self, cli_runner, env) -> None:
        result = cli_runner.invoke(app, ["config", "set", "cache.ttl_recent_seconds", "10"])
        assert result.exit_code == 0, result.output
        assert load_global_config().cache.ttl_recent_seconds == 10

    def test_set_bad_number(self, cli_runner, env) -> None:
        result = cli_runner.invoke(app, ["config", "set", "cache.ttl_recent_seconds", "soon"])
        assert result.exit_code == 2

    def test_set_auth_refused(self, cli_runner, env) -> None:
        result = cli_runner.invoke(app, ["config", "set", "auth.token", "x"])
        assert result.exit_code == 2

    @pytest.mark.parametrize("key", ["cache.nope", "nope.backend"])
    def test_set_unknown_key(self, cli_runner, env, key: str) -> None:
        result = cli_runner.invoke(app, ["config", "set", key, "x"])
        assert result.exit_code == 2

    def test_reset_keeps_credential(self, cli_runner, env) -> None:
        cli_runner.invoke(app, ["auth", "login", "--uid", "42", "--token", "t"])
        cli_runner.invoke(app, ["config", "set", "cache.backend", "memory"])
        result = cli_runner.invoke(app, ["config", "reset", "--force"])
        assert result.exit_code == 0, result.output
        config = load_global_config()
        assert config.cache.backend == "disk"
        assert config.auth.uid == 42
