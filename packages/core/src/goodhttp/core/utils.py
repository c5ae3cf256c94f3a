"""Utility helpers: wall-clock time, record field access, cycle-safe JSON."""

from __future__ import annotations

import dataclasses
import json
import time as _time
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel

CIRCULAR_MARKER = "[Circular]"

# ---------------------------------------------------------------------------
# Timing
# ---------------------------------------------------------------------------


def now_ms() -> int:
    """Return the current wall-clock time in epoch milliseconds."""
    return int(_time.time() * 1000)


# ---------------------------------------------------------------------------
# Record access
# ---------------------------------------------------------------------------


def get_field(record: Any, name: str, default: Any = None) -> Any:
    """Read ``name`` from a mapping or an attribute-bearing record."""
    if record is None:
        return default
    if isinstance(record, Mapping):
        return record.get(name, default)
    return getattr(record, name, default)


# ---------------------------------------------------------------------------
# Safe JSON (insertion key order, cycle-safe, total)
# ---------------------------------------------------------------------------

# Containers nested deeper than this are cut off with DEPTH_MARKER.
MAX_DEPTH = 64
DEPTH_MARKER = "[Depth]"
UNSERIALIZABLE_MARKER = "[Unserializable]"


def safe_stringify(v: Any) -> str:
    """JSON-stringify ``v`` compactly; never raises.

    Any container that is already on the current ancestor path is replaced by
    ``"[Circular]"``. Shared but acyclic references are rendered in full.
    Dataclasses and plain objects are rendered from their fields. Values that
    cannot be rendered at all become ``"[Unserializable]"``, and nesting past
    ``MAX_DEPTH`` becomes ``"[Depth]"``.
    """
    ancestors: set[int] = set()

    def _enter(x: Any, build) -> Any:
        obj_id = id(x)
        if obj_id in ancestors:
            return CIRCULAR_MARKER
        ancestors.add(obj_id)
        try:
            return build()
        finally:
            ancestors.discard(obj_id)

    def _norm(x: Any, depth: int) -> Any:
        if x is None or isinstance(x, (str, bool, int, float)):
            return x
        if depth >= MAX_DEPTH:
            return DEPTH_MARKER
        d = depth + 1
        try:
            if isinstance(x, BaseModel):
                return _enter(
                    x, lambda: {_field_key(x, k): _norm(getattr(x, k), d) for k in type(x).model_fields}
                )
            if isinstance(x, Mapping):
                return _enter(x, lambda: {_key(k): _norm(val, d) for k, val in x.items()})
            if isinstance(x, (list, tuple, set, frozenset)):
                return _enter(x, lambda: [_norm(i, d) for i in x])
            if dataclasses.is_dataclass(x) and not isinstance(x, type):
                return _enter(
                    x, lambda: {f.name: _norm(getattr(x, f.name), d) for f in dataclasses.fields(x)}
                )
            if hasattr(x, "isoformat"):
                return x.isoformat()
            attrs = _public_attrs(x)
            if attrs:
                return _enter(x, lambda: {k: _norm(val, d) for k, val in attrs.items()})
            return str(x)
        except Exception:
            return UNSERIALIZABLE_MARKER

    try:
        return json.dumps(_norm(v, 0), separators=(",", ":"))
    except Exception:
        return json.dumps(UNSERIALIZABLE_MARKER)


def _key(k: Any) -> Any:
    if k is None or isinstance(k, (str, bool, int, float)):
        return k
    return str(k)


def _field_key(model: BaseModel, name: str) -> str:
    info = type(model).model_fields[name]
    return info.alias or name


def _public_attrs(x: Any) -> dict[str, Any]:
    if isinstance(x, type) or not hasattr(x, "__dict__"):
        return {}
    return {k: val for k, val in vars(x).items() if not k.startswith("_")}
