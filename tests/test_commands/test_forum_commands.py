"""CLI tests for the forum-facing command groups.

Commands run through Typer's CliRunner against a respx-mocked forum at
``NGAKIT_BASE_URL``, with configuration isolated to a temp directory.
"""

from __future__ import annotations

import json

import httpx
import pytest
import respx

from ngakit.app import app
from ngakit.exit_codes import EXIT_API_ERROR, EXIT_AUTH_REQUIRED, EXIT_DECODE_ERROR, EXIT_NETWORK_ERROR

HOST = "nga.test"


@pytest.fixture()
def cli_env(isolated_config, monkeypatch):
    monkeypatch.setenv("NGAKIT_BASE_URL", f"https://{HOST}/")
    return isolated_config


@pytest.fixture()
def logged_in(cli_env, monkeypatch):
    monkeypatch.setenv("NGAKIT_TOKEN", "secret-token")
    monkeypatch.setenv("NGAKIT_UID", "42")
    return cli_env


@pytest.fixture()
def forum():
    with respx.mock(assert_all_called=False) as mock:
        yield mock


def _route(mock, script: str, body: bytes, status: int = 200):
    return mock.post(host=HOST, path=f"/{script}").mock(return_value=httpx.Response(status, content=body))


# ------------------------------------------------------------------ #
# Reads
# ------------------------------------------------------------------ #


class TestForumCommands:
    def test_forum_list_json(self, cli_runner, cli_env, forum, payload) -> None:
        _route(forum, "app_api.php", payload("categories"))
        result = cli_runner.invoke(app, ["--json", "-q", "forum", "list"])
        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert data[0]["name"] == "综合讨论"
        assert data[0]["forums"][0]["id"] == {"kind": "fid", "value": "-7"}

    def test_forum_list_plain(self, cli_runner, cli_env, forum, payload) -> None:
        _route(forum, "app_api.php", payload("categories"))
        result = cli_runner.invoke(app, ["--plain", "forum", "list"])
        assert result.exit_code == 0, result.output
        lines = result.stdout.splitlines()
        assert lines[0] == "Category\tForum ID\tName\tInfo"
        assert "综合讨论\tfid:-7\t网事杂谈\t灌水专用" in lines

    def test_second_run_served_from_disk_cache(self, cli_runner, cli_env, forum, payload) -> None:
        route = _route(forum, "app_api.php", payload("categories"))
        for _ in range(2):
            result = cli_runner.invoke(app, ["--json", "forum", "list"])
            assert result.exit_code == 0, result.output
        assert route.call_count == 1

    def test_no_cache_flag(self, cli_runner, cli_env, forum, payload) -> None:
        route = _route(forum, "app_api.php", payload("categories"))
        for _ in range(2):
            cli_runner.invoke(app, ["--json", "--no-cache", "forum", "list"])
        assert route.call_count == 2


class TestTopicCommands:
    def test_topic_list_with_negative_fid(self, cli_runner, cli_env, forum, payload) -> None:
        route = _route(forum, "thread.php", payload("topic_list"))
        result = cli_runner.invoke(app, ["--json", "topic", "list", "fid:-7", "--order", "postdate"])
        assert result.exit_code == 0, result.output
        params = route.calls.last.request.url.params
        assert params["fid"] == "-7"
        assert params["order_by"] == "postdate"

    def test_bad_order_is_usage_error(self, cli_runner, cli_env, forum) -> None:
        result = cli_runner.invoke(app, ["topic", "list", "fid:-7", "--order", "hottest"])
        assert result.exit_code == 2

    def test_topic_show_json(self, cli_runner, cli_env, forum, payload) -> None:
        _route(forum, "read.php", payload("topic_details"))
        result = cli_runner.invoke(app, ["--json", "-q", "topic", "show", "27455825"])
        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert data["topic"]["subject"]["content"] == "测试主题"
        assert len(data["posts"]) == 2


# ------------------------------------------------------------------ #
# Auth gating and failures
# ------------------------------------------------------------------ #


class TestFailures:
    @pytest.mark.parametrize(
        "args",
        [
            ["notification", "counts"],
            ["message", "list"],
            ["user", "me"],
            ["post", "reply", "1", "-c", "hi"],
            ["forum", "favorites"],
        ],
    )
    def test_gated_commands_exit_3_without_request(self, cli_runner, cli_env, forum, args) -> None:
        result = cli_runner.invoke(app, args)
        assert result.exit_code == EXIT_AUTH_REQUIRED
        assert "requires authentication" in result.output
        assert not forum.calls

    def test_api_error_exit_code(self, cli_runner, logged_in, forum, payload) -> None:
        _route(forum, "nuke.php", payload("error"))
        result = cli_runner.invoke(app, ["notification", "counts"])
        assert result.exit_code == EXIT_API_ERROR
        assert "auth login" in result.output

    def test_decode_error_exit_code(self, cli_runner, cli_env, forum) -> None:
        _route(forum, "app_api.php", b"<root><unclosed></root>")
        result = cli_runner.invoke(app, ["forum", "list"])
        assert result.exit_code == EXIT_DECODE_ERROR

    def test_network_error_exit_code(self, cli_runner, cli_env, forum) -> None:
        forum.post(host=HOST, path="/app_api.php").mock(side_effect=httpx.ConnectError("refused"))
        result = cli_runner.invoke(app, ["forum", "list"])
        assert result.exit_code == EXIT_NETWORK_ERROR
        assert "retried" in result.output


# ------------------------------------------------------------------ #
# Authenticated commands
# ------------------------------------------------------------------ #


class TestAuthenticatedCommands:
    def test_notification_counts(self, cli_runner, logged_in, forum, payload) -> None:
        route = _route(forum, "nuke.php", payload("notification_counts"))
        result = cli_runner.invoke(app, ["--json", "-q", "notification", "counts"])
        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout)["reply"] == 2
        assert "ngaPassportUid=42" in route.calls.last.request.headers["Cookie"]

    def test_post_reply(self, cli_runner, logged_in, forum, payload) -> None:
        route = _route(forum, "post.php", payload("reply"))
        result = cli_runner.invoke(app, ["post", "reply", "27455825", "-c", "+1", "--anonymous"])
        assert result.exit_code == 0, result.output
        assert "612345999" in result.output
        assert b"anony=1" in route.calls.last.request.content

    def test_post_vote_rejects_unknown_direction(self, cli_runner, logged_in, forum) -> None:
        result = cli_runner.invoke(app, ["post", "vote", "1", "2", "sideways"])
        assert result.exit_code == 2
        assert not forum.calls

    def test_message_send(self, cli_runner, logged_in, forum, payload) -> None:
        route = _route(forum, "nuke.php", payload("ack"))
        result = cli_runner.invoke(app, ["message", "send", "--to", "张三", "-c", "在吗"])
        assert result.exit_code == 0, result.output
        assert route.calls.last.request.url.params["__act"] == "send"
        assert "操作成功" in result.output
