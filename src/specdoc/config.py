"""Configuration management with XDG paths, atomic writes, and precedence resolution.

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.specdoc/`` on macOS and Windows.  See :func:`get_config_dir` and
  :func:`get_data_dir`.
* **Global config** -- a single :class:`~specdoc.models.SpecdocConfig`
  JSON file holding the user's defaults.
* **Project config** -- an optional ``./specdoc.json`` with the same shape,
  usually committed next to the API description it documents.
* **Precedence resolution** -- :func:`resolve_config` merges CLI flags,
  environment variables, project config, and global config into the
  effective configuration.

All file writes use an atomic temp-file-then-rename strategy
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

from specdoc.exceptions import ConfigError
from specdoc.models import SpecdocConfig

_APP_NAME = "specdoc"
_CONFIG_FILENAME = "config.json"
_PROJECT_CONFIG_FILENAME = "specdoc.json"

ENV_STRICT_REFS = "SPECDOC_STRICT_REFS"
ENV_DEREFERENCE = "SPECDOC_DEREFERENCE"
ENV_TEMPLATES = "SPECDOC_TEMPLATES"

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off", ""})


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True on platforms following the XDG Base Directory spec (Linux/BSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def _fallback_base_dir() -> Path:
    return Path.home() / f".{_APP_NAME}"


def _xdg_base(env_var: str, default_segments: tuple[str, ...]) -> Path:
    env_value = os.environ.get(env_var, "")
    if env_value:
        return Path(env_value)
    return Path.home().joinpath(*default_segments)


def get_config_dir() -> Path:
    """Return the configuration directory, creating it if necessary.

    On Linux/BSD: ``$XDG_CONFIG_HOME/specdoc/`` (default ``~/.config/specdoc/``).
    On macOS/Windows: ``~/.specdoc/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_CONFIG_HOME", (".config",)) / _APP_NAME
    else:
        path = _fallback_base_dir()
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_data_dir() -> Path:
    """Return the data directory (crash logs), creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/specdoc/`` (default ``~/.local/share/specdoc/``).
    On macOS/Windows: ``~/.specdoc/data/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_DATA_HOME", (".local", "share")) / _APP_NAME
    else:
        path = _fallback_base_dir() / "data"
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- Atomic file writes ---


def _atomic_write(path: Path, data: str) -> None:
    """Write *data* to *path* atomically using a temp file and rename.

    The temporary file lives in the same directory as *path* so that
    ``os.replace`` is an atomic rename on POSIX.  On any failure the temp
    file is removed and the exception re-raised.
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


# --- Global config ---


def global_config_path() -> Path:
    """Path to the user's config file."""
    return get_config_dir() / _CONFIG_FILENAME


def load_global_config() -> SpecdocConfig:
    """Load the user's configuration.

    Returns:
        The stored :class:`~specdoc.models.SpecdocConfig`, or the defaults
        when no file exists yet.

    Raises:
        ConfigError: If the file is not valid JSON or fails validation.
    """
    path = global_config_path()
    if not path.is_file():
        return SpecdocConfig()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        return SpecdocConfig.model_validate(data)
    except (json.JSONDecodeError, ValidationError) as exc:
        raise ConfigError(f"Invalid global config at {path}: {exc}") from exc


def save_global_config(config: SpecdocConfig) -> None:
    """Persist *config* atomically as the user's configuration."""
    data = config.model_dump(mode="json")
    _atomic_write(global_config_path(), json.dumps(data, indent=2) + "\n")


# --- Project-local config ---


def load_project_config() -> Optional[dict[str, Any]]:
    """Load project-local configuration from ``./specdoc.json``.

    Returns:
        The parsed JSON object, or ``None`` if the file does not exist.

    Raises:
        ConfigError: If the file is not a valid JSON object.
    """
    path = Path.cwd() / _PROJECT_CONFIG_FILENAME
    if not path.is_file():
        return None
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Invalid project config at {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid project config at {path}: expected a JSON object")
    return data


# --- Precedence resolution ---


def resolve_config(
    cli_strict_refs: Optional[bool] = None,
    cli_dereference: Optional[bool] = None,
    cli_templates: Optional[str] = None,
) -> SpecdocConfig:
    """Resolve the effective configuration.

    Precedence (high to low):
        1. CLI flags (``None`` means "not given")
        2. Environment variables (``SPECDOC_STRICT_REFS``,
           ``SPECDOC_DEREFERENCE``, ``SPECDOC_TEMPLATES``)
        3. Project config (``./specdoc.json``)
        4. User config (``~/.config/specdoc/config.json``)
        5. Defaults

    Raises:
        ConfigError: If a config file or environment value is invalid.
    """
    # 5 + 4
    data = load_global_config().model_dump(mode="json")

    # 3
    project = load_project_config()
    if project is not None:
        _deep_merge(data, project)

    # 2
    env_strict = _env_flag(ENV_STRICT_REFS)
    if env_strict is not None:
        data["transform"]["strict_refs"] = env_strict
    env_deref = _env_flag(ENV_DEREFERENCE)
    if env_deref is not None:
        data["transform"]["dereference"] = env_deref
    env_templates = os.environ.get(ENV_TEMPLATES)
    if env_templates:
        data["render"]["templates"] = env_templates

    # 1
    if cli_strict_refs is not None:
        data["transform"]["strict_refs"] = cli_strict_refs
    if cli_dereference is not None:
        data["transform"]["dereference"] = cli_dereference
    if cli_templates is not None:
        data["render"]["templates"] = cli_templates

    try:
        return SpecdocConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> None:
    """Recursively merge *override* into *base* in place."""
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            _deep_merge(base[key], value)
        else:
            base[key] = value


def _env_flag(name: str) -> Optional[bool]:
    """Read a boolean environment variable; ``None`` when unset."""
    raw = os.environ.get(name)
    if raw is None:
        return None
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ConfigError(f"Invalid boolean for {name}: {raw!r}")
