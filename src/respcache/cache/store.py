"""Directory-wide view of a cache directory.

:class:`ResponseCache` only ever touches the one entry its request maps to.
:class:`CacheStore` is the operator's side: it lists every entry, reports
totals, and purges expired files that no request has come back for.
Only files named ``<32 hex chars>.json`` are considered entries; anything
else in the directory is left alone.
"""

from __future__ import annotations

import logging
import os
import re
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Union

from respcache.cache.cache import ENTRY_SUFFIX
from respcache.models import CacheEntry, CacheStats

logger = logging.getLogger(__name__)

_ENTRY_RE = re.compile(r"^[0-9a-f]{32}\.json$")


def is_expired(age_seconds: float, duration: int) -> bool:
    """An entry is expired once its age reaches *duration*; ``0`` expires everything."""
    return duration == 0 or age_seconds >= duration


class CacheStore:
    """Inspect and maintain the entries of one cache directory.

    Args:
        directory: The cache directory. It is not created; a missing
            directory simply has no entries.
    """

    def __init__(self, directory: Union[str, os.PathLike]) -> None:
        self._directory = Path(directory)

    @property
    def directory(self) -> Path:
        return self._directory

    def _paths(self) -> list[Path]:
        if not self._directory.is_dir():
            return []
        return sorted(
            p for p in self._directory.iterdir() if _ENTRY_RE.match(p.name) and p.is_file()
        )

    def entries(self, duration: int) -> list[CacheEntry]:
        """List every entry, sorted by key, with its age and expiry status."""
        now = time.time()
        result: list[CacheEntry] = []
        for path in self._paths():
            try:
                st = path.stat()
            except OSError:
                # Removed by a concurrent request since the directory scan.
                continue
            age = max(0.0, now - st.st_mtime)
            result.append(
                CacheEntry(
                    key=path.name[: -len(ENTRY_SUFFIX)],
                    path=str(path),
                    size=st.st_size,
                    modified=datetime.fromtimestamp(st.st_mtime, tz=timezone.utc),
                    age_seconds=round(age, 3),
                    expired=is_expired(age, duration),
                )
            )
        return result

    def stats(self, duration: int) -> CacheStats:
        """Summarise the directory for a given freshness window."""
        entries = self.entries(duration)
        return CacheStats(
            directory=str(self._directory),
            entries=len(entries),
            expired=sum(1 for e in entries if e.expired),
            total_bytes=sum(e.size for e in entries),
            duration_seconds=duration,
        )

    def purge_expired(self, duration: int) -> int:
        """Delete expired entries and return how many were removed."""
        removed = 0
        for entry in self.entries(duration):
            if entry.expired and self._unlink(Path(entry.path)):
                removed += 1
        logger.debug("Purged %d expired entries from %s", removed, self._directory)
        return removed

    def remove(self, key: str) -> bool:
        """Delete the entry stored under *key*. Returns ``True`` if removed."""
        name = f"{key}{ENTRY_SUFFIX}"
        if not _ENTRY_RE.match(name):
            return False
        return self._unlink(self._directory / name)

    def wipe(self) -> int:
        """Delete every entry and return how many were removed."""
        return sum(1 for path in self._paths() if self._unlink(path))

    @staticmethod
    def _unlink(path: Path) -> bool:
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        except OSError as exc:
            logger.error("Failed to delete cache file: %s (%s)", path, exc)
            return False
        return True
