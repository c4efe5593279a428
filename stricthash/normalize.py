"""
Key normalization and truthiness for StrictHash.

Every access boundary (constructor overrides, item access, merge, membership)
goes through ``normalize_key`` so that the accepted spellings of a key are
decided in exactly one place.

Accepted spellings:
    str  : the canonical form (subclasses are reduced to plain ``str``)
    bytes: ASCII spelling of the same name

Anything else is "not a key" and normalizes to ``None``.
"""

from __future__ import annotations

import keyword
from typing import Any, Optional


def normalize_key(key: Any) -> Optional[str]:
    """Return the canonical name for ``key``, or None if it is not textual."""
    if isinstance(key, str):
        return str.__str__(key)
    if isinstance(key, bytes):
        try:
            return key.decode("ascii")
        except UnicodeDecodeError:
            return None
    return None


def is_public_identifier(name: str) -> bool:
    """True if ``name`` can be used as a declared attribute name."""
    return (
        name.isidentifier()
        and not keyword.iskeyword(name)
        and not name.startswith("_")
    )


def is_truthy(value: Any) -> bool:
    """
    Classify a value the way a predicate accessor reports it.

    Only ``None`` and ``False`` are falsy. Zero, empty strings and empty
    containers are all truthy; this is not Python's ``bool()``.
    """
    return not (value is None or value is False)
