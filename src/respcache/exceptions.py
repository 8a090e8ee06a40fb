"""Exception hierarchy for respcache.

All exceptions inherit from :class:`RespcacheError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`respcache.exit_codes`.
The CLI entry point in :func:`respcache.app.main` catches ``RespcacheError``
and exits with the matching code.

Only the fatal conditions raise. Failed deletions and failed read locks are
reported through the cache's logger and degrade to a cache miss.

Subclass hierarchy::

    RespcacheError (exit 1)
    +-- ConfigError           (exit 1)
    +-- CacheDirectoryError   (exit 8)
    +-- CacheWriteError       (exit 9)
        +-- CacheLockError    (exit 9)
"""

from respcache.exit_codes import (
    EXIT_DIRECTORY_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_WRITE_ERROR,
)


class RespcacheError(Exception):
    """Base exception for all respcache errors.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class ConfigError(RespcacheError):
    """Raised for configuration problems (invalid JSON, out-of-range values)."""

    exit_code = EXIT_GENERIC_FAILURE


class CacheDirectoryError(RespcacheError):
    """Raised when the cache directory does not exist and cannot be created."""

    exit_code = EXIT_DIRECTORY_ERROR


class CacheWriteError(RespcacheError):
    """Raised when a cache entry cannot be written."""

    exit_code = EXIT_WRITE_ERROR


class CacheLockError(CacheWriteError):
    """Raised when the exclusive lock for a write cannot be acquired."""
