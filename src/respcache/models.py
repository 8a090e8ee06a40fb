"""Pydantic models shared across respcache modules.

**Configuration** -- :class:`CacheConfig` is resolved by
:func:`~respcache.config.resolve_config` and persisted as
``./respcache.json`` by :func:`~respcache.config.save_project_config`.

**Directory listings** -- :class:`CacheEntry` and :class:`CacheStats` are
produced by :class:`~respcache.cache.store.CacheStore` and rendered by the
CLI.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class CacheConfig(BaseModel):
    """Settings for a :class:`~respcache.cache.ResponseCache`.

    Example::

        CacheConfig(duration_seconds=60, directory="/var/cache/app")
    """

    duration_seconds: int = Field(
        default=300, ge=0, description="Freshness window in seconds; 0 disables caching"
    )
    directory: Optional[str] = Field(
        default=None, description="Storage directory (defaults to <app root>/cache)"
    )
    bypass_param: str = Field(
        default="nocache",
        min_length=1,
        description="Query parameter that forces a miss and clears the entry",
    )
    lock_timeout: float = Field(
        default=1.0, ge=0, description="Seconds to wait for a file lock"
    )


class CacheEntry(BaseModel):
    """One cache file as seen by a directory scan."""

    key: str
    path: str
    size: int = Field(description="File size in bytes")
    modified: datetime
    age_seconds: float
    expired: bool


class CacheStats(BaseModel):
    """Summary of a cache directory."""

    directory: str
    entries: int = 0
    expired: int = 0
    total_bytes: int = 0
    duration_seconds: int
