"""Cache key derivation.

A key is the MD5 hex digest of ``identity + serialized_params +
discriminator``. The *base* key leaves the parameters out so that every
parameter variant of one endpoint shares a coarse invalidation target.

Parameters are merged from the query string and the request body (body wins
on duplicate names), the bypass parameter is dropped, every string scalar is
HTML-escaped, and the result is serialised as compact JSON with sorted keys
so that insertion order never changes the key.
"""

from __future__ import annotations

import hashlib
import json
import os
from collections.abc import Mapping
from pathlib import PurePath
from typing import Any, Optional, Union

IdentitySource = Union[str, os.PathLike]

_ESCAPES = (
    ("&", "&amp;"),
    ('"', "&quot;"),
    ("'", "&#039;"),
    ("<", "&lt;"),
    (">", "&gt;"),
)


def derive_identity(source: IdentitySource) -> str:
    """Return the stable identity string for *source*.

    Path-like objects, and strings that look like a path (contain a
    separator or end in ``.py``), are reduced to their file stem, so a
    controller can simply pass its own ``__file__``. Any other string is
    returned unchanged.

    Example::

        >>> derive_identity("/srv/app/controllers/ReportController.py")
        'ReportController'
        >>> derive_identity("ReportController")
        'ReportController'
    """
    if isinstance(source, os.PathLike):
        return PurePath(os.fspath(source)).stem
    text = str(source)
    if "/" in text or os.sep in text or text.endswith(".py"):
        return PurePath(text).stem
    return text


def hash_key(raw: str) -> str:
    """MD5 hex digest (32 lowercase hex characters) of *raw*."""
    return hashlib.md5(raw.encode("utf-8")).hexdigest()


def collect_params(
    query: Optional[Mapping[str, Any]],
    body: Optional[Mapping[str, Any]],
    bypass_param: str,
) -> dict[str, Any]:
    """Merge query and body parameters and drop the bypass flag."""
    params: dict[str, Any] = {}
    if query:
        params.update(query)
    if body:
        params.update(body)
    params.pop(bypass_param, None)
    return params


def escape_value(value: str) -> str:
    """HTML-escape ampersands, angle brackets and both quote characters."""
    for char, entity in _ESCAPES:
        value = value.replace(char, entity)
    return value


def sanitize_params(value: Any) -> Any:  # noqa: ANN401
    """Recursively escape every string scalar inside *value*.

    Mappings and sequences are rebuilt; numbers, booleans and ``None`` pass
    through untouched.
    """
    if isinstance(value, str):
        return escape_value(value)
    if isinstance(value, Mapping):
        return {str(k): sanitize_params(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [sanitize_params(v) for v in value]
    return value


def serialize_params(params: Mapping[str, Any]) -> str:
    """Canonical JSON for *params*: sanitised, sorted, compact.

    Returns an empty string when there are no parameters.
    """
    if not params:
        return ""
    return json.dumps(
        sanitize_params(params),
        sort_keys=True,
        separators=(",", ":"),
        default=str,
    )


def make_keys(
    identity: str,
    params: Mapping[str, Any],
    discriminator: str = "",
) -> tuple[str, str]:
    """Return ``(base_key, full_key)`` for the given inputs.

    With no parameters the two keys are identical.
    """
    base_key = hash_key(identity + discriminator)
    serialized = serialize_params(params)
    if not serialized:
        return base_key, base_key
    return base_key, hash_key(identity + serialized + discriminator)
