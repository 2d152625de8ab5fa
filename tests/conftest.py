"""Shared test fixtures for ngakit.

Provides reusable fixtures for loading forum payloads, building clients
against a fake transport, creating isolated config environments, managing
output state, and running CLI commands. These fixtures are automatically
discovered by pytest and available to all test modules without explicit
imports.
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Optional

import httpx
import pytest
from pydantic import SecretStr

from ngakit.client import NGAClient
from ngakit.cache import MemoryCache
from ngakit.models import ClientConfig, Credential
from ngakit.output import OutputFormat, OutputManager, reset_output, set_output


FIXTURES_DIR = Path(__file__).parent / "fixtures"

BASE_URL = "https://nga.test/"


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time.  When Typer's CliRunner redirects those streams during
    a test and the test finishes, the cached references become stale
    ("I/O operation on closed file").  Resetting forces a fresh manager
    to be created on next use.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Forum payloads
# ---------------------------------------------------------------------------


def load_payload(name: str, encoding: str = "gb18030") -> bytes:
    """Read ``fixtures/<name>.xml`` and encode it the way the forum does."""
    text = (FIXTURES_DIR / f"{name}.xml").read_text(encoding="utf-8")
    return text.encode(encoding)


@pytest.fixture
def payload() -> Callable[..., bytes]:
    """Return the :func:`load_payload` helper."""
    return load_payload


# ---------------------------------------------------------------------------
# Fake forum transport
# ---------------------------------------------------------------------------


class FakeForum:
    """Routes requests by script path to canned payloads and records them.

    A route is a fixture name, raw bytes, an :class:`httpx.Response` or a
    handler callable.

    Usage::

        forum = FakeForum({"thread.php": "topic_list"})
        client = NGAClient(config, transport=forum.transport())
    """

    def __init__(self, routes: Optional[dict[str, object]] = None) -> None:
        self.routes: dict[str, object] = dict(routes or {})
        self.requests: list[httpx.Request] = []

    @property
    def calls(self) -> int:
        return len(self.requests)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        script = request.url.path.rsplit("/", 1)[-1]
        route = self.routes.get(script)
        if route is None:
            return httpx.Response(404, content=b"")
        if isinstance(route, httpx.Response):
            return route
        if callable(route):
            return route(request)
        if isinstance(route, str):
            route = load_payload(route)
        return httpx.Response(200, content=route, headers={"content-type": "text/xml; charset=GBK"})

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture
def fake_forum() -> Callable[..., FakeForum]:
    """Return a factory ``(routes) -> FakeForum``."""
    return FakeForum


@pytest.fixture
def credential() -> Credential:
    return Credential(token=SecretStr("secret-token"), uid=42)


@pytest.fixture
def anon_config() -> ClientConfig:
    return ClientConfig(base_url=BASE_URL)


@pytest.fixture
def auth_config(credential: Credential) -> ClientConfig:
    return ClientConfig(base_url=BASE_URL, credential=credential)


@pytest.fixture
def make_client() -> Callable[..., NGAClient]:
    """Build an :class:`NGAClient` on top of a :class:`FakeForum`.

    Returns a factory ``(config, forum, cache=None) -> NGAClient``.
    """

    def _make(config: ClientConfig, forum: FakeForum, cache: Optional[MemoryCache] = None) -> NGAClient:
        return NGAClient(config, cache=cache, transport=forum.transport())

    return _make


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Sets XDG_CONFIG_HOME, XDG_CACHE_HOME, and XDG_DATA_HOME to
    subdirectories of tmp_path so that tests never touch real user
    config, and clears all NGAKIT_* environment variables.

    Returns:
        The tmp_path root directory for additional file creation.
    """
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_CACHE_HOME", str(tmp_path / "cache"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    # Config paths only follow XDG on Linux/BSD.
    monkeypatch.setattr("ngakit.config._is_xdg_platform", lambda: True)

    for var in ["NGAKIT_TOKEN", "NGAKIT_UID", "NGAKIT_BASE_URL", "NGAKIT_CACHE_DIR"]:
        monkeypatch.delenv(var, raising=False)

    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def quiet_output() -> OutputManager:
    """Install a quiet PLAIN-format OutputManager for tests that don't care about output."""
    output = OutputManager(format=OutputFormat.PLAIN, quiet=True)
    set_output(output)
    yield output
    reset_output()


@pytest.fixture
def json_output() -> OutputManager:
    """Install a JSON-format OutputManager for tests that check JSON output."""
    output = OutputManager(format=OutputFormat.JSON)
    set_output(output)
    yield output
    reset_output()


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
