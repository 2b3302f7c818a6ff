"""Configuration management with XDG paths, atomic writes, and precedence resolution.

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.cloudtargets/`` on macOS and Windows. See :func:`get_config_dir`
  and :func:`get_data_dir`.
* **User settings** -- a single :class:`~cloudtargets.models.ClientSettings`
  JSON file (``config.json``) holding the token, API version, poll interval
  and endpoint defaults.
* **Project settings** -- an optional ``./cloudtargets.json`` with the same
  keys, so a repository can pin e.g. the API version.
* **Precedence resolution** -- :func:`resolve_settings` merges CLI flags,
  environment variables, project settings, and user settings.

File writes use an atomic temp-file-then-rename strategy
(:func:`_atomic_write`).
"""

from __future__ import annotations

import json
import os
import platform
import tempfile
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from cloudtargets.exceptions import ConfigError
from cloudtargets.models import ClientSettings

_APP_NAME = "cloudtargets"
_CONFIG_FILENAME = "config.json"
_PROJECT_CONFIG_FILENAME = "cloudtargets.json"

ENV_TOKEN = "CLOUDTARGETS_TOKEN"
ENV_VERSION = "CLOUDTARGETS_VERSION"
ENV_POLL_INTERVAL = "CLOUDTARGETS_POLL_INTERVAL"
ENV_BASE_URL = "CLOUDTARGETS_BASE_URL"

_ENV_KEYS = {
    ENV_TOKEN: "token",
    ENV_VERSION: "version",
    ENV_POLL_INTERVAL: "poll_interval",
    ENV_BASE_URL: "base_url",
}


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

    On Linux/BSD: ``$XDG_CONFIG_HOME/cloudtargets/`` (default
    ``~/.config/cloudtargets/``). On macOS/Windows: ``~/.cloudtargets/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_CONFIG_HOME", (".config",)) / _APP_NAME
    else:
        path = _fallback_base_dir()
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_data_dir() -> Path:
    """Return the data directory (crash logs), creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/cloudtargets/`` (default
    ``~/.local/share/cloudtargets/``). On macOS/Windows:
    ``~/.cloudtargets/``. Crash logs go to its ``logs`` subdirectory.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_DATA_HOME", (".local", "share")) / _APP_NAME
    else:
        path = _fallback_base_dir()
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- Atomic file writes ---


def _atomic_write(path: Path, data: str) -> None:
    """Write data to file atomically using temp file + rename.

    The temporary file is created in the same directory as *path* so that
    ``os.replace`` is an atomic rename on POSIX systems. On any failure the
    temp file is removed.
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


# --- Settings files ---


def _user_config_path() -> Path:
    return get_config_dir() / _CONFIG_FILENAME


def _read_json_file(path: Path, label: str) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, OSError) as exc:
        raise ConfigError(f"Invalid {label} at {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid {label} at {path}: expected a JSON object")
    return data


def load_user_settings() -> ClientSettings:
    """Load the user settings file, or defaults when it does not exist.

    Raises:
        ConfigError: If the file contains invalid JSON or fails validation.
    """
    path = _user_config_path()
    if not path.is_file():
        return ClientSettings()
    data = _read_json_file(path, "user config")
    try:
        return ClientSettings.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid user config at {path}: {exc}") from exc


def save_user_settings(settings: ClientSettings, include_token: bool = False) -> Path:
    """Persist *settings* atomically to the user settings file.

    The token is left out unless *include_token* is set, so a shared
    config file does not leak credentials by accident.

    Returns:
        The path written to.
    """
    exclude = None if include_token else {"token"}
    data = settings.model_dump(mode="json", exclude=exclude, exclude_none=True)
    path = _user_config_path()
    _atomic_write(path, json.dumps(data, indent=2) + "\n")
    return path


def load_project_config() -> Optional[dict[str, Any]]:
    """Load project-local settings from ``./cloudtargets.json``.

    Returns:
        The parsed JSON object, or ``None`` if the file does not exist.

    Raises:
        ConfigError: If the file exists but is not a JSON object.
    """
    path = Path.cwd() / _PROJECT_CONFIG_FILENAME
    if not path.is_file():
        return None
    return _read_json_file(path, "project config")


def _env_overrides() -> dict[str, Any]:
    overrides: dict[str, Any] = {}
    for var, key in _ENV_KEYS.items():
        value = os.environ.get(var)
        if value:
            overrides[key] = value
    return overrides


# --- Precedence resolution ---


def resolve_settings(
    cli_token: Optional[str] = None,
    cli_version: Optional[str] = None,
    cli_poll_interval: Optional[int] = None,
    cli_base_url: Optional[str] = None,
) -> ClientSettings:
    """Resolve settings with the full precedence chain.

    Precedence (high to low):
        1. CLI flags
        2. Environment variables (``CLOUDTARGETS_TOKEN``,
           ``CLOUDTARGETS_VERSION``, ``CLOUDTARGETS_POLL_INTERVAL``,
           ``CLOUDTARGETS_BASE_URL``)
        3. Project config (``./cloudtargets.json``)
        4. User config (``~/.config/cloudtargets/config.json``)
        5. Defaults

    The result may still lack a token or version; that is reported when a
    client is built from it (see
    :meth:`~cloudtargets.manager.TargetsManager.from_settings`), so that
    commands like ``config show`` work without credentials.

    Raises:
        ConfigError: If a config file is invalid or a merged value fails
            validation (e.g. a non-numeric poll interval).
    """
    data = load_user_settings().model_dump(exclude_unset=True)

    project = load_project_config()
    if project is not None:
        data.update(project)

    data.update(_env_overrides())

    cli = {
        "token": cli_token,
        "version": cli_version,
        "poll_interval": cli_poll_interval,
        "base_url": cli_base_url,
    }
    data.update({k: v for k, v in cli.items() if v is not None})

    try:
        return ClientSettings.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid settings: {exc}") from exc
