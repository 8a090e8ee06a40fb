"""Numeric process exit codes for the ``respcache`` CLI.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~respcache.exceptions.RespcacheError` subclass.
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred, including configuration problems."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments."""

EXIT_DIRECTORY_ERROR = 8
"""The cache directory could not be created."""

EXIT_WRITE_ERROR = 9
"""A cache entry could not be locked or written."""
