"""Invariant checkers for the pool state machine.

Each `inv_*` function returns True when the invariant holds. `check_all()`
returns the list of violated invariant IDs for a single state (empty = all
pass); `check_transition()` adds the ones that compare PRE and POST.
"""

from __future__ import annotations

from typing import Callable

from ..fixed_point import BPS_DENOM, U64_MAX
from .types import PoolState

_U64_FIELDS = (
    "maturity",
    "principal_reserve",
    "yield_claim_reserve",
    "total_underlying_deposited",
    "total_principal_redeemed",
    "total_yield_accrued",
    "last_update_time",
)


def inv_fields_u64(s: PoolState) -> bool:
    return all(0 <= getattr(s, name) <= U64_MAX for name in _U64_FIELDS)


def inv_fee_bounded(s: PoolState) -> bool:
    return 0 <= s.fee_rate_bps <= BPS_DENOM


def inv_redeemed_le_deposited(s: PoolState) -> bool:
    return s.total_principal_redeemed <= s.total_underlying_deposited


def inv_nothing_redeemed_before_maturity(s: PoolState) -> bool:
    if s.matured:
        return True
    return s.total_principal_redeemed == 0


def inv_matured_after_maturity(s: PoolState) -> bool:
    if not s.matured:
        return True
    return s.last_update_time >= s.maturity


_ALL: list[tuple[str, Callable[[PoolState], bool]]] = [
    ("fields_u64", inv_fields_u64),
    ("fee_bounded", inv_fee_bounded),
    ("redeemed_le_deposited", inv_redeemed_le_deposited),
    ("nothing_redeemed_before_maturity", inv_nothing_redeemed_before_maturity),
    ("matured_after_maturity", inv_matured_after_maturity),
]


def check_all(s: PoolState) -> list[str]:
    """Return the IDs of all violated invariants."""
    return [name for name, fn in _ALL if not fn(s)]


def inv_matured_latch(pre: PoolState, post: PoolState) -> bool:
    return post.matured or not pre.matured


def inv_deposits_monotone(pre: PoolState, post: PoolState) -> bool:
    return post.total_underlying_deposited >= pre.total_underlying_deposited


def inv_time_monotone(pre: PoolState, post: PoolState) -> bool:
    return post.last_update_time >= pre.last_update_time


def inv_identity_fixed(pre: PoolState, post: PoolState) -> bool:
    return (
        pre.pool_id,
        pre.authority,
        pre.underlying_asset_id,
        pre.custody_id,
        pre.principal_claim_id,
        pre.yield_claim_id,
        pre.maturity,
        pre.fee_rate_bps,
    ) == (
        post.pool_id,
        post.authority,
        post.underlying_asset_id,
        post.custody_id,
        post.principal_claim_id,
        post.yield_claim_id,
        post.maturity,
        post.fee_rate_bps,
    )


_TRANSITION: list[tuple[str, Callable[[PoolState, PoolState], bool]]] = [
    ("matured_latch", inv_matured_latch),
    ("deposits_monotone", inv_deposits_monotone),
    ("time_monotone", inv_time_monotone),
    ("identity_fixed", inv_identity_fixed),
]


def check_transition(pre: PoolState, post: PoolState) -> list[str]:
    """Single-state invariants on POST plus the PRE->POST invariants."""
    return check_all(post) + [name for name, fn in _TRANSITION if not fn(pre, post)]
