"""File-backed response caching for respcache.

This package provides :class:`ResponseCache`, built once per request to
memoize a controller's output on disk, and :class:`CacheStore`, which lists
and purges a whole cache directory for operators.

Entries are flat files named ``<md5>.json`` whose modification time decides
freshness. See :mod:`respcache.cache.keys` for how the MD5 key is derived
from the controller identity and the request parameters.
"""

from respcache.cache.cache import ResponseCache
from respcache.cache.store import CacheStore

__all__ = ["CacheStore", "ResponseCache"]
