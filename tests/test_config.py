"""Tests for ngakit.config -- XDG paths, atomic writes, resolution and cache selection."""

from __future__ import annotations

import json
import os
import stat
from pathlib import Path

import pytest

from ngakit.cache import DiskCache, MemoryCache
from ngakit.config import (
    _atomic_write,
    _env_auth,
    get_cache_dir,
    get_config_dir,
    get_data_dir,
    global_config_path,
    load_global_config,
    make_cache,
    resolve_client_config,
    save_global_config,
)
from ngakit.exceptions import ConfigError
from ngakit.models import AuthConfig, CacheConfig, GlobalConfig


# ------------------------------------------------------------------ #
# XDG paths
# ------------------------------------------------------------------ #


class TestPaths:
    def test_xdg_dirs(self, isolated_config: Path) -> None:
        assert get_config_dir() == isolated_config / "config" / "ngakit"
        assert get_cache_dir() == isolated_config / "cache" / "ngakit"
        assert get_data_dir() == isolated_config / "data" / "ngakit"
        assert get_config_dir().is_dir()

    def test_cache_dir_override(self, isolated_config: Path, monkeypatch) -> None:
        target = isolated_config / "elsewhere"
        monkeypatch.setenv("NGAKIT_CACHE_DIR", str(target))
        assert get_cache_dir() == target
        assert target.is_dir()

    def test_fallback_dir_on_non_xdg_platform(self, isolated_config: Path, monkeypatch) -> None:
        monkeypatch.setattr("ngakit.config._is_xdg_platform", lambda: False)
        monkeypatch.setenv("HOME", str(isolated_config / "home"))
        assert get_config_dir() == isolated_config / "home" / ".ngakit"
        assert get_cache_dir() == isolated_config / "home" / ".ngakit" / "cache"


# ------------------------------------------------------------------ #
# Atomic writes and the global config file
# ------------------------------------------------------------------ #


class TestGlobalConfigFile:
    def test_atomic_write_is_private(self, tmp_path: Path) -> None:
        target = tmp_path / "nested" / "config.json"
        _atomic_write(target, "{}\n")
        assert target.read_text() == "{}\n"
        assert stat.S_IMODE(os.stat(target).st_mode) == 0o600
        assert [p.name for p in target.parent.iterdir()] == ["config.json"]

    def test_missing_file_gives_defaults(self, isolated_config: Path) -> None:
        assert load_global_config() == GlobalConfig()

    def test_round_trip(self, isolated_config: Path) -> None:
        config = GlobalConfig(
            auth=AuthConfig(token="t0k", uid=42),
            cache=CacheConfig(backend="memory", ttl_recent_seconds=5),
        )
        save_global_config(config)
        assert load_global_config() == config
        assert json.loads(global_config_path().read_text())["auth"]["uid"] == 42

    def test_invalid_json_raises(self, isolated_config: Path) -> None:
        global_config_path().write_text("{not json")
        with pytest.raises(ConfigError, match="Invalid global config"):
            load_global_config()

    def test_invalid_values_raise(self, isolated_config: Path) -> None:
        global_config_path().write_text(json.dumps({"cache": {"ttl_static_seconds": -1}}))
        with pytest.raises(ConfigError):
            load_global_config()


# ------------------------------------------------------------------ #
# Resolution
# ------------------------------------------------------------------ #


class TestEnvAuth:
    def test_absent(self, isolated_config: Path) -> None:
        assert _env_auth() is None

    def test_both_set(self, isolated_config: Path, monkeypatch) -> None:
        monkeypatch.setenv("NGAKIT_TOKEN", "abc")
        monkeypatch.setenv("NGAKIT_UID", "7")
        assert _env_auth() == AuthConfig(token="abc", uid=7)

    @pytest.mark.parametrize("var", ["NGAKIT_TOKEN", "NGAKIT_UID"])
    def test_half_set_raises(self, isolated_config: Path, monkeypatch, var: str) -> None:
        monkeypatch.setenv(var, "7")
        with pytest.raises(ConfigError, match="set together"):
            _env_auth()

    def test_non_numeric_uid(self, isolated_config: Path, monkeypatch) -> None:
        monkeypatch.setenv("NGAKIT_TOKEN", "abc")
        monkeypatch.setenv("NGAKIT_UID", "alice")
        with pytest.raises(ConfigError, match="numeric"):
            _env_auth()


class TestResolveClientConfig:
    def test_defaults(self, isolated_config: Path) -> None:
        config = resolve_client_config(GlobalConfig())
        assert config.credential is None
        assert config.base_url.endswith("/")
        assert config.cache.enabled is True

    def test_file_credential(self, isolated_config: Path) -> None:
        config = resolve_client_config(GlobalConfig(auth=AuthConfig(token="file", uid=1)))
        assert config.credential.uid == 1
        assert config.credential.token.get_secret_value() == "file"

    def test_environment_wins(self, isolated_config: Path, monkeypatch) -> None:
        monkeypatch.setenv("NGAKIT_TOKEN", "env")
        monkeypatch.setenv("NGAKIT_UID", "2")
        monkeypatch.setenv("NGAKIT_BASE_URL", "https://mirror.test")
        config = resolve_client_config(GlobalConfig(auth=AuthConfig(token="file", uid=1)))
        assert config.credential.uid == 2
        assert config.base_url == "https://mirror.test/"

    def test_no_cache(self, isolated_config: Path) -> None:
        assert resolve_client_config(GlobalConfig(), no_cache=True).cache.enabled is False

    def test_invalid_stored_credential(self, isolated_config: Path) -> None:
        with pytest.raises(ConfigError):
            resolve_client_config(GlobalConfig(auth=AuthConfig(token="t", uid=0)))

    def test_reads_file_when_not_given(self, isolated_config: Path) -> None:
        save_global_config(GlobalConfig(auth=AuthConfig(token="t", uid=9)))
        assert resolve_client_config().credential.uid == 9


class TestMakeCache:
    def test_disabled(self, isolated_config: Path) -> None:
        assert make_cache(CacheConfig(enabled=False)) is None

    def test_disk(self, isolated_config: Path) -> None:
        cache = make_cache(CacheConfig(backend="disk"))
        try:
            assert isinstance(cache, DiskCache)
            assert cache.stats()["directory"] == str(get_cache_dir() / "responses")
        finally:
            cache.close()

    def test_memory(self, isolated_config: Path) -> None:
        assert isinstance(make_cache(CacheConfig(backend="memory")), MemoryCache)

    def test_unknown_backend(self, isolated_config: Path) -> None:
        with pytest.raises(ConfigError, match="Unknown cache backend"):
            make_cache(CacheConfig(backend="redis"))
