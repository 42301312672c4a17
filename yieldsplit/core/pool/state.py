"""Record serialization for pool states.

Round-trip property (tested): `state_from_dict(state_to_dict(s)) == s` for all valid states.
"""

from __future__ import annotations

from typing import Any, Mapping

from .types import PoolState, PoolStatus

# Auto-derived from PoolState field definitions (single source of truth).
STATE_VAR_NAMES: tuple[str, ...] = tuple(PoolState.__dataclass_fields__)

_STR_FIELDS = frozenset(
    {"pool_id", "authority", "underlying_asset_id", "custody_id", "principal_claim_id", "yield_claim_id"}
)


def state_to_dict(state: PoolState) -> dict[str, Any]:
    """Serialize a PoolState to a plain dict (JSON-safe, no floats)."""
    out: dict[str, Any] = {name: getattr(state, name) for name in STATE_VAR_NAMES}
    out["status"] = state.status.value
    return out


def state_from_dict(d: Mapping[str, Any]) -> PoolState:
    """Deserialize a dict to a PoolState. Raises KeyError on missing fields."""
    kwargs: dict[str, Any] = {}
    for name in STATE_VAR_NAMES:
        val = d[name]
        if name == "status":
            kwargs[name] = PoolStatus(val)
        elif name in _STR_FIELDS:
            if not isinstance(val, str):
                raise TypeError(f"state var {name!r} must be str, got {type(val).__name__}")
            kwargs[name] = val
        elif isinstance(val, int) and not isinstance(val, bool):
            kwargs[name] = int(val)
        else:
            raise TypeError(f"state var {name!r} must be int, got {type(val).__name__}")
    return PoolState(**kwargs)
