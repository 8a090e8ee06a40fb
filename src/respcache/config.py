"""Configuration resolution for respcache.

* **Default directory** -- :func:`get_default_cache_dir` returns
  ``<app root>/cache``, where the app root is three levels above the
  ``respcache/cache`` package (the checkout root in a src layout).
* **Project config** -- an optional ``./respcache.json`` holding
  :class:`~respcache.models.CacheConfig` fields. Read by
  :func:`load_project_config`, written atomically by
  :func:`save_project_config`.
* **Precedence resolution** -- :func:`resolve_config` layers explicit
  overrides over ``RESPCACHE_*`` environment variables over the project
  file over model defaults.
"""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from respcache.exceptions import ConfigError
from respcache.models import CacheConfig

_PROJECT_CONFIG_FILENAME = "respcache.json"

_ENV_DIR = "RESPCACHE_DIR"
_ENV_DURATION = "RESPCACHE_DURATION"
_ENV_BYPASS_PARAM = "RESPCACHE_BYPASS_PARAM"

_CACHE_PACKAGE_DIR = Path(__file__).resolve().parent / "cache"


def get_default_cache_dir() -> Path:
    """Return ``<app root>/cache``. The directory is not created here."""
    return _CACHE_PACKAGE_DIR.parents[2] / "cache"


# --- Atomic file writes ---


def _atomic_write(path: Path, data: str) -> None:
    """Write data to file atomically using temp file + rename.

    The temporary file lives in the same directory as *path* so that
    ``os.replace`` is an atomic rename on POSIX systems.
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
        fd = None  # prevent double-close in finally
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


# --- Project-local config ---


def _project_config_path(path: Optional[Path] = None) -> Path:
    return path if path is not None else Path.cwd() / _PROJECT_CONFIG_FILENAME


def load_project_config(path: Optional[Path] = None) -> Optional[dict[str, Any]]:
    """Load project-local configuration, by default from ``./respcache.json``.

    Returns:
        The parsed JSON object, or ``None`` if the file does not exist.

    Raises:
        ConfigError: If the file is not valid JSON or not a JSON object.
    """
    path = _project_config_path(path)
    if not path.is_file():
        return None
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid project config at {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid project config at {path}: expected a JSON object")
    return data


def save_project_config(config: CacheConfig, path: Optional[Path] = None) -> Path:
    """Persist *config* atomically and return the file path."""
    path = _project_config_path(path)
    data = config.model_dump(mode="json")
    _atomic_write(path, json.dumps(data, indent=2) + "\n")
    return path


# --- Precedence resolution ---


def _env_overrides() -> dict[str, Any]:
    overrides: dict[str, Any] = {}
    env_dir = os.environ.get(_ENV_DIR)
    if env_dir:
        overrides["directory"] = env_dir
    env_duration = os.environ.get(_ENV_DURATION)
    if env_duration:
        try:
            overrides["duration_seconds"] = int(env_duration)
        except ValueError:
            raise ConfigError(
                f"{_ENV_DURATION} must be an integer number of seconds, got: {env_duration}"
            ) from None
    env_bypass = os.environ.get(_ENV_BYPASS_PARAM)
    if env_bypass:
        overrides["bypass_param"] = env_bypass
    return overrides


def resolve_config(
    cli_directory: Optional[str] = None,
    cli_duration: Optional[int] = None,
    project_path: Optional[Path] = None,
) -> CacheConfig:
    """Resolve the effective cache configuration.

    Precedence (high to low):
        1. Explicit arguments (``cli_directory``, ``cli_duration``)
        2. Environment variables (``RESPCACHE_DIR``, ``RESPCACHE_DURATION``,
           ``RESPCACHE_BYPASS_PARAM``)
        3. Project config (``./respcache.json``)
        4. Defaults

    Raises:
        ConfigError: If any layer supplies an invalid value.
    """
    data: dict[str, Any] = {}

    project = load_project_config(project_path)
    if project is not None:
        data.update(project)

    data.update(_env_overrides())

    if cli_directory is not None:
        data["directory"] = cli_directory
    if cli_duration is not None:
        data["duration_seconds"] = cli_duration

    try:
        config = CacheConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid cache configuration: {exc}") from exc

    if config.directory is None:
        config.directory = str(get_default_cache_dir())
    return config
