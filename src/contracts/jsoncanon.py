"""Canonical JSON encoding for reproducibility digests.

Daily puzzles are compared across runs and machines by hashing their
canonical form: keys sorted, no insignificant whitespace, UTF-8 output.
Tuples encode as arrays, enums by value and dates in ISO format.  Floats are
rejected because no digested payload carries one.
"""

from __future__ import annotations

import datetime as _dt
import hashlib
import json
from enum import Enum
from typing import Any

__all__ = ["canonical_dump", "canonical_digest"]


def _canonicalize(obj: Any) -> Any:
    if obj is None or isinstance(obj, (bool, int, str)):
        if isinstance(obj, Enum):
            return obj.value
        return obj
    if isinstance(obj, Enum):
        return _canonicalize(obj.value)
    if isinstance(obj, (_dt.date, _dt.datetime)):
        return obj.isoformat()
    if isinstance(obj, (list, tuple)):
        return [_canonicalize(item) for item in obj]
    if isinstance(obj, dict):
        return {str(key): _canonicalize(obj[key]) for key in sorted(obj.keys(), key=str)}
    raise TypeError(f"Unsupported type for canonical JSON: {type(obj)!r}")


def canonical_dump(obj: Any) -> bytes:
    """Return canonical UTF-8 JSON bytes for ``obj``."""

    dumped = json.dumps(
        _canonicalize(obj),
        sort_keys=True,
        ensure_ascii=False,
        separators=(",", ":"),
        allow_nan=False,
    )
    return dumped.encode("utf-8")


def canonical_digest(obj: Any) -> str:
    """Return ``sha256-<hex>`` over the canonical form of ``obj``."""

    return f"sha256-{hashlib.sha256(canonical_dump(obj)).hexdigest()}"
