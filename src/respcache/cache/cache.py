"""File-backed response cache for a single request.

One :class:`ResponseCache` is built per incoming request. It hashes the
controller identity, the request parameters and an optional discriminator
into a key, and stores the controller's output as ``<directory>/<key>.json``.
Freshness is judged from the file's modification time; there is no
stale-while-revalidate, an expired entry is deleted on the next check.

Reads take a shared :func:`fcntl.flock` lock and writes an exclusive one, so
concurrent requests for the same key never see a half-written file.

See Also:
    :mod:`respcache.cache.keys` -- how keys are derived.
    :class:`~respcache.models.CacheConfig` -- the settings model accepted by
    :meth:`ResponseCache.from_config`.
"""

from __future__ import annotations

import logging
import os
import tempfile
import time
from collections.abc import Mapping
from pathlib import Path
from typing import IO, Any, Optional, Union

from respcache.cache.keys import IdentitySource, collect_params, derive_identity, make_keys
from respcache.cache.locking import LockTimeout, locked
from respcache.exceptions import CacheDirectoryError, CacheLockError, CacheWriteError
from respcache.models import CacheConfig

DEFAULT_DURATION = 300
DEFAULT_BYPASS_PARAM = "nocache"
ENTRY_SUFFIX = ".json"


class ResponseCache:
    """Memoize one controller's output for one set of request parameters.

    Args:
        identity: The controller's name, or a path (typically ``__file__``)
            whose stem is used as the name.
        duration: Seconds an entry stays fresh. ``0`` disables caching:
            :meth:`is_valid` is always ``False``.
        directory: Where entries are stored. Defaults to
            :func:`~respcache.config.get_default_cache_dir`. Created with
            parents if missing.
        discriminator: Extra namespace string, e.g. a locale, so that two
            caches with the same identity and parameters do not collide.
        query: Query-string parameters of the request. Presence of
            *bypass_param* here forces a miss and clears stored entries.
        body: Body (form) parameters of the request.
        bypass_param: Name of the bypass query parameter.
        lock_timeout: Seconds to wait for a file lock before giving up.
        logger: Receives failure reports for deletions and read locks.
            Defaults to this module's logger.

    Raises:
        CacheDirectoryError: If *directory* cannot be created.
        ValueError: If *duration* is negative.

    Example::

        cache = ResponseCache(__file__, 60, query={"page": "2"})
        body = cache.get()
        if body is None:
            body = expensive_render()
            cache.set(body)
    """

    def __init__(
        self,
        identity: IdentitySource = __file__,
        duration: int = DEFAULT_DURATION,
        directory: Optional[Union[str, os.PathLike]] = None,
        discriminator: str = "",
        *,
        query: Optional[Mapping[str, Any]] = None,
        body: Optional[Mapping[str, Any]] = None,
        bypass_param: str = DEFAULT_BYPASS_PARAM,
        lock_timeout: float = 1.0,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        if duration < 0:
            raise ValueError(f"duration must be >= 0, got {duration}")

        self._logger = logger if logger is not None else logging.getLogger(__name__)
        self._duration = int(duration)
        self._lock_timeout = lock_timeout
        self._bypass_requested = bypass_param in (query or {})

        if directory is None:
            from respcache.config import get_default_cache_dir

            directory = get_default_cache_dir()
        self._directory = Path(directory)

        self._identity = derive_identity(identity)
        params = collect_params(query, body, bypass_param)
        self._base_key, self._key = make_keys(self._identity, params, discriminator)
        self._path = self._directory / f"{self._key}{ENTRY_SUFFIX}"
        self._base_path = self._directory / f"{self._base_key}{ENTRY_SUFFIX}"

        try:
            self._directory.mkdir(mode=0o755, parents=True, exist_ok=True)
        except OSError as exc:
            raise CacheDirectoryError(
                f"Failed to create cache directory: {self._directory}: {exc}"
            ) from exc

    @classmethod
    def from_config(
        cls,
        config: CacheConfig,
        identity: IdentitySource,
        discriminator: str = "",
        *,
        query: Optional[Mapping[str, Any]] = None,
        body: Optional[Mapping[str, Any]] = None,
        logger: Optional[logging.Logger] = None,
    ) -> ResponseCache:
        """Build a cache from a resolved :class:`~respcache.models.CacheConfig`."""
        return cls(
            identity,
            config.duration_seconds,
            config.directory,
            discriminator,
            query=query,
            body=body,
            bypass_param=config.bypass_param,
            lock_timeout=config.lock_timeout,
            logger=logger,
        )

    # ------------------------------------------------------------------ #
    # Properties
    # ------------------------------------------------------------------ #

    @property
    def identity(self) -> str:
        return self._identity

    @property
    def key(self) -> str:
        """Full key: identity, serialized parameters and discriminator."""
        return self._key

    @property
    def base_key(self) -> str:
        """Key of the parameter-less variant of this endpoint."""
        return self._base_key

    @property
    def path(self) -> Path:
        return self._path

    @property
    def base_path(self) -> Path:
        return self._base_path

    @property
    def directory(self) -> Path:
        return self._directory

    @property
    def duration(self) -> int:
        return self._duration

    @property
    def bypass_requested(self) -> bool:
        return self._bypass_requested

    # ------------------------------------------------------------------ #
    # Cache operations
    # ------------------------------------------------------------------ #

    def is_valid(self) -> bool:
        """Return ``True`` if a fresh entry exists for this request.

        A bypass request deletes the entry (and the base entry when it is a
        different file) and always reports a miss. An expired entry is
        deleted on the way out.
        """
        if self._bypass_requested:
            self.clear()
            if self._key != self._base_key:
                self._clear_base_cache()
            self._logger.debug("Cache bypass requested for %s", self._identity)
            return False

        if self._duration == 0:
            return False

        try:
            modified = self._path.stat().st_mtime
        except OSError:
            return False

        if time.time() - modified < self._duration:
            return True

        self._unlink(self._path, "expired cache file")
        return False

    def get(self) -> Optional[bytes]:
        """Return the cached payload, or ``None`` on any kind of miss.

        Missing, expired and bypassed entries are misses, and so is an entry
        whose shared lock cannot be taken within ``lock_timeout``.
        """
        if not self.is_valid():
            self._logger.debug("Cache miss: %s (%s)", self._identity, self._key)
            return None

        try:
            with open(self._path, "rb") as fp:
                with locked(fp, exclusive=False, timeout=self._lock_timeout):
                    contents = fp.read()
        except LockTimeout as exc:
            self._logger.warning("Cache read skipped: %s", exc)
            return None
        except FileNotFoundError:
            return None
        except OSError as exc:
            self._logger.warning("Failed to read cache file %s: %s", self._path, exc)
            return None

        self._logger.debug("Cache hit: %s (%s)", self._identity, self._key)
        return contents

    def get_text(self, encoding: str = "utf-8") -> Optional[str]:
        """Like :meth:`get`, decoded with *encoding*."""
        contents = self.get()
        if contents is None:
            return None
        return contents.decode(encoding)

    def set(self, payload: Union[bytes, str]) -> bool:
        """Store *payload* as this request's entry, replacing any old one.

        ``str`` payloads are encoded as UTF-8. A new entry is written to a
        temporary file and renamed into place, so it never exists empty. An
        existing entry is truncated only after the exclusive lock is held.

        Raises:
            TypeError: If *payload* is neither ``str`` nor bytes-like.
            CacheLockError: If the exclusive lock cannot be acquired.
            CacheWriteError: If the file cannot be opened or written.
        """
        if isinstance(payload, str):
            data = payload.encode("utf-8")
        elif isinstance(payload, (bytes, bytearray, memoryview)):
            data = bytes(payload)
        else:
            raise TypeError(
                f"Cache payload must be str or bytes, not {type(payload).__name__}"
            )

        try:
            fd = os.open(self._path, os.O_WRONLY)
        except FileNotFoundError:
            self._write_new(data)
        except OSError as exc:
            raise CacheWriteError(f"Failed to open cache file: {self._path}: {exc}") from exc
        else:
            self._overwrite(os.fdopen(fd, "wb"), data)

        self._logger.debug("Cached %d bytes for %s (%s)", len(data), self._identity, self._key)
        return True

    def _write_new(self, data: bytes) -> None:
        """Create the entry atomically using temp file + rename."""
        tmp_path: Optional[str] = None
        try:
            with tempfile.NamedTemporaryFile(
                mode="wb",
                dir=self._directory,
                prefix=f".{self._path.name}.",
                suffix=".tmp",
                delete=False,
            ) as tmp:
                tmp_path = tmp.name
                tmp.write(data)
                tmp.flush()
                os.fsync(tmp.fileno())
            os.chmod(tmp_path, 0o644)
            os.replace(tmp_path, self._path)
        except OSError as exc:
            if tmp_path is not None:
                try:
                    os.unlink(tmp_path)
                except OSError:
                    pass
            raise CacheWriteError(f"Failed to write cache file: {self._path}: {exc}") from exc

    def _overwrite(self, fp: IO[bytes], data: bytes) -> None:
        """Replace the contents of an existing entry under an exclusive lock."""
        with fp:
            try:
                with locked(fp, exclusive=True, timeout=self._lock_timeout):
                    try:
                        fp.truncate(0)
                        fp.write(data)
                        fp.flush()
                        os.fsync(fp.fileno())
                    except OSError as exc:
                        raise CacheWriteError(
                            f"Failed to write cache file: {self._path}: {exc}"
                        ) from exc
            except LockTimeout as exc:
                raise CacheLockError(
                    f"Failed to acquire lock for cache file: {self._path}"
                ) from exc

    def clear(self) -> bool:
        """Delete this request's entry. Returns ``True`` if a file was removed."""
        return self._unlink(self._path, "cache file")

    def _clear_base_cache(self) -> bool:
        return self._unlink(self._base_path, "base cache file")

    def _unlink(self, path: Path, label: str) -> bool:
        """Remove *path*, logging (never raising) on failure."""
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        except OSError as exc:
            self._logger.error("Failed to delete %s: %s (%s)", label, path, exc)
            return False
        return True

    def __repr__(self) -> str:
        return (
            f"ResponseCache(identity={self._identity!r}, key={self._key!r}, "
            f"duration={self._duration})"
        )
