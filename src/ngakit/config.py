"""CLI configuration: XDG paths, atomic writes and environment overrides.

This module handles the persistent configuration of the ``ngakit`` CLI:

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.ngakit/`` on macOS and Windows. See :func:`get_config_dir`,
  :func:`get_cache_dir`, :func:`get_data_dir`.
* **Global config** -- A single :class:`~ngakit.models.GlobalConfig`
  JSON file storing the credential, base URL and cache/output defaults.
* **Resolution** -- :func:`resolve_client_config` layers environment
  variables over the file and produces the immutable
  :class:`~ngakit.models.ClientConfig` the client is built with.

The library itself never reads any of this; only the CLI does.
"""

from __future__ import annotations

import json
import os
import platform
import tempfile
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from ngakit.cache import CacheStorage, DiskCache, MemoryCache
from ngakit.exceptions import ConfigError
from ngakit.models import AuthConfig, CacheConfig, ClientConfig, GlobalConfig

_APP_NAME = "ngakit"
_CONFIG_FILENAME = "config.json"

ENV_TOKEN = "NGAKIT_TOKEN"
ENV_UID = "NGAKIT_UID"
ENV_BASE_URL = "NGAKIT_BASE_URL"
ENV_CACHE_DIR = "NGAKIT_CACHE_DIR"


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform supports XDG Base Directory spec (Linux/FreeBSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def _fallback_base_dir() -> Path:
    return Path.home() / f".{_APP_NAME}"


def _xdg_base(env_var: str, default_segments: tuple[str, ...]) -> Path:
    """Resolve an XDG base directory from an env var with fallback segments under $HOME."""
    env_value = os.environ.get(env_var, "")
    if env_value:
        return Path(env_value)
    base = Path.home()
    for seg in default_segments:
        base = base / seg
    return base


def get_config_dir() -> Path:
    """Return the configuration directory, creating it if necessary.

    On Linux/BSD: ``$XDG_CONFIG_HOME/ngakit/`` (default ``~/.config/ngakit/``).
    On macOS/Windows: ``~/.ngakit/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_CONFIG_HOME", (".config",)) / _APP_NAME
    else:
        path = _fallback_base_dir()
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_cache_dir() -> Path:
    """Return the response cache directory, creating it if necessary.

    ``NGAKIT_CACHE_DIR`` wins when set. Otherwise on Linux/BSD:
    ``$XDG_CACHE_HOME/ngakit/`` (default ``~/.cache/ngakit/``), and
    ``~/.ngakit/cache/`` on macOS/Windows. Its contents can be deleted at
    any time.
    """
    override = os.environ.get(ENV_CACHE_DIR, "")
    if override:
        path = Path(override).expanduser()
    elif _is_xdg_platform():
        path = _xdg_base("XDG_CACHE_HOME", (".cache",)) / _APP_NAME
    else:
        path = _fallback_base_dir() / "cache"
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_data_dir() -> Path:
    """Return the data directory (crash logs), creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/ngakit/`` (default ``~/.local/share/ngakit/``).
    On macOS/Windows: ``~/.ngakit/logs/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_DATA_HOME", (".local", "share")) / _APP_NAME
    else:
        path = _fallback_base_dir() / "logs"
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- Atomic file writes ---


def _atomic_write(path: Path, data: str) -> None:
    """Write data to file atomically using temp file + rename.

    The temporary file is created in the same directory as *path* so that
    ``os.replace`` is an atomic rename on POSIX systems. On any failure the
    temp file is cleaned up.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    fd = None
    tmp_path: Optional[str] = None
    try:
        fd = tempfile.NamedTemporaryFile(
            mode="w",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
        )
        tmp_path = fd.name
        fd.write(data)
        fd.flush()
        os.fsync(fd.fileno())
        fd.close()
        fd = None
        # The file holds the access token.
        os.chmod(tmp_path, 0o600)
        os.replace(tmp_path, path)
    except BaseException:
        if fd is not None:
            fd.close()
        if tmp_path is not None:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
        raise


# --- Global config ---


def global_config_path() -> Path:
    return get_config_dir() / _CONFIG_FILENAME


def load_global_config() -> GlobalConfig:
    """Load the global configuration from the XDG config directory.

    Returns:
        The deserialised :class:`~ngakit.models.GlobalConfig`, or a default
        instance when the file does not exist.

    Raises:
        ConfigError: If the file exists but contains invalid JSON or fails
            Pydantic validation.
    """
    path = global_config_path()
    if not path.is_file():
        return GlobalConfig()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        return GlobalConfig.model_validate(data)
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid global config at {path}: {exc}") from exc


def save_global_config(config: GlobalConfig) -> None:
    """Persist the global configuration atomically to disk."""
    data = config.model_dump(mode="json")
    _atomic_write(global_config_path(), json.dumps(data, indent=2) + "\n")


# --- Resolution ---


def _env_auth() -> Optional[AuthConfig]:
    token = os.environ.get(ENV_TOKEN, "")
    uid = os.environ.get(ENV_UID, "")
    if not token and not uid:
        return None
    if not token or not uid:
        raise ConfigError(f"{ENV_TOKEN} and {ENV_UID} must be set together")
    try:
        return AuthConfig(token=token, uid=int(uid))
    except ValueError as exc:
        raise ConfigError(f"{ENV_UID} must be a numeric user id, got {uid!r}") from exc


def resolve_client_config(
    global_config: Optional[GlobalConfig] = None,
    no_cache: bool = False,
) -> ClientConfig:
    """Build the :class:`~ngakit.models.ClientConfig` the CLI runs with.

    Precedence (high to low):
        1. ``--no-cache`` (disables caching)
        2. Environment variables (``NGAKIT_TOKEN`` + ``NGAKIT_UID``,
           ``NGAKIT_BASE_URL``)
        3. The global config file
        4. Defaults

    Raises:
        ConfigError: If the environment credential is incomplete or the
            stored credential is invalid.
    """
    cfg = global_config if global_config is not None else load_global_config()

    auth = _env_auth() or cfg.auth
    base_url = os.environ.get(ENV_BASE_URL) or cfg.base_url
    cache = cfg.cache
    if no_cache:
        cache = cache.model_copy(update={"enabled": False})

    try:
        return ClientConfig(
            base_url=base_url,
            credential=auth.to_credential() if auth is not None else None,
            request=cfg.request,
            cache=cache,
        )
    except ValidationError as exc:
        raise ConfigError(f"Invalid client configuration: {exc}") from exc


def make_cache(config: CacheConfig) -> Optional[CacheStorage]:
    """Create the cache backend named by *config*, or ``None`` when disabled."""
    if not config.enabled:
        return None
    if config.backend == "disk":
        return DiskCache(get_cache_dir())
    if config.backend == "memory":
        return MemoryCache()
    raise ConfigError(f"Unknown cache backend '{config.backend}'; expected 'disk' or 'memory'")
