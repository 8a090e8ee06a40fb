"""Tests for respcache.config -- default paths, project config, precedence."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

import respcache
from respcache.config import (
    _atomic_write,
    get_default_cache_dir,
    load_project_config,
    resolve_config,
    save_project_config,
)
from respcache.exceptions import ConfigError
from respcache.models import CacheConfig


def _write_json(path: Path, data: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")


# ---------------------------------------------------------------------------
# Default directory
# ---------------------------------------------------------------------------


class TestDefaultCacheDir:
    def test_three_levels_above_cache_package(self) -> None:
        cache_pkg = Path(respcache.__file__).resolve().parent / "cache"
        assert get_default_cache_dir() == cache_pkg.parent.parent.parent / "cache"


# ---------------------------------------------------------------------------
# Atomic writes
# ---------------------------------------------------------------------------


class TestAtomicWrite:
    def test_writes_and_creates_parent(self, tmp_path: Path) -> None:
        target = tmp_path / "nested" / "respcache.json"
        _atomic_write(target, "{}\n")
        assert target.read_text() == "{}\n"

    def test_no_temp_files_left(self, tmp_path: Path) -> None:
        target = tmp_path / "respcache.json"
        _atomic_write(target, "a")
        _atomic_write(target, "b")
        assert [p.name for p in tmp_path.iterdir()] == ["respcache.json"]
        assert target.read_text() == "b"


# ---------------------------------------------------------------------------
# Project config
# ---------------------------------------------------------------------------


class TestProjectConfig:
    def test_missing_returns_none(self, isolated_config: Path) -> None:
        assert load_project_config() is None

    def test_loads_from_cwd(self, isolated_config: Path) -> None:
        _write_json(isolated_config / "respcache.json", {"duration_seconds": 60})
        assert load_project_config() == {"duration_seconds": 60}

    def test_invalid_json(self, isolated_config: Path) -> None:
        (isolated_config / "respcache.json").write_text("{not json")
        with pytest.raises(ConfigError, match="Invalid project config"):
            load_project_config()

    def test_non_object_rejected(self, isolated_config: Path) -> None:
        _write_json(isolated_config / "respcache.json", [1, 2])
        with pytest.raises(ConfigError, match="expected a JSON object"):
            load_project_config()

    def test_save_round_trip(self, isolated_config: Path) -> None:
        config = CacheConfig(duration_seconds=30, directory="/tmp/x")
        path = save_project_config(config)
        assert path == isolated_config / "respcache.json"
        assert load_project_config() == config.model_dump(mode="json")


# ---------------------------------------------------------------------------
# Precedence
# ---------------------------------------------------------------------------


class TestResolveConfig:
    def test_defaults(self, isolated_config: Path) -> None:
        config = resolve_config()
        assert config.duration_seconds == 300
        assert config.bypass_param == "nocache"
        assert config.directory == str(get_default_cache_dir())

    def test_project_over_defaults(self, isolated_config: Path) -> None:
        _write_json(
            isolated_config / "respcache.json",
            {"duration_seconds": 60, "directory": "/srv/cache"},
        )
        config = resolve_config()
        assert config.duration_seconds == 60
        assert config.directory == "/srv/cache"

    def test_env_over_project(
        self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        _write_json(isolated_config / "respcache.json", {"duration_seconds": 60})
        monkeypatch.setenv("RESPCACHE_DURATION", "15")
        monkeypatch.setenv("RESPCACHE_DIR", "/env/cache")
        monkeypatch.setenv("RESPCACHE_BYPASS_PARAM", "refresh")
        config = resolve_config()
        assert config.duration_seconds == 15
        assert config.directory == "/env/cache"
        assert config.bypass_param == "refresh"

    def test_cli_over_env(
        self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("RESPCACHE_DURATION", "15")
        monkeypatch.setenv("RESPCACHE_DIR", "/env/cache")
        config = resolve_config(cli_directory="/cli/cache", cli_duration=0)
        assert config.duration_seconds == 0
        assert config.directory == "/cli/cache"

    def test_bad_env_duration(
        self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("RESPCACHE_DURATION", "five minutes")
        with pytest.raises(ConfigError, match="RESPCACHE_DURATION"):
            resolve_config()

    def test_negative_duration_rejected(self, isolated_config: Path) -> None:
        _write_json(isolated_config / "respcache.json", {"duration_seconds": -5})
        with pytest.raises(ConfigError, match="Invalid cache configuration"):
            resolve_config()

    def test_explicit_project_path(self, tmp_path: Path, isolated_config: Path) -> None:
        other = tmp_path / "elsewhere" / "cfg.json"
        _write_json(other, {"lock_timeout": 0.5})
        assert resolve_config(project_path=other).lock_timeout == 0.5
