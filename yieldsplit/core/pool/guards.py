"""Guard functions for the pool state machine.

One pure function per action. Each returns None when the action is allowed in
the given PRE-state, or the rejection code of the first failed precondition.
Failures that depend on arithmetic (curve, yield share) are raised from
`updates.py` instead.
"""

from __future__ import annotations

from ..errors import (
    AlreadyMatured,
    InsufficientLiquidity,
    InvalidAmount,
    NoYtBalance,
    NotMatured,
    PoolMatured,
    Unauthorized,
)
from .types import ActionParams, PoolState


def guard_tokenize(state: PoolState, params: ActionParams) -> str | None:
    if state.matured:
        return PoolMatured.code
    if params.amount <= 0:
        return InvalidAmount.code
    if not params.auth_ok:
        return Unauthorized.code
    return None


def guard_swap(state: PoolState, params: ActionParams) -> str | None:
    if state.matured:
        return PoolMatured.code
    if params.amount <= 0 or params.min_amount_out < 0:
        return InvalidAmount.code
    if not params.auth_ok:
        return Unauthorized.code
    if state.principal_reserve == 0 or state.yield_claim_reserve == 0:
        return InsufficientLiquidity.code
    return None


def guard_add_liquidity(state: PoolState, params: ActionParams) -> str | None:
    if state.matured:
        return PoolMatured.code
    if params.pt_amount <= 0 or params.yt_amount <= 0:
        return InvalidAmount.code
    if not params.auth_ok:
        return Unauthorized.code
    return None


def guard_mark_matured(state: PoolState, params: ActionParams) -> str | None:
    # No authority check: any caller may flip the latch once time allows.
    if state.matured:
        return AlreadyMatured.code
    if params.now < state.maturity:
        return NotMatured.code
    return None


def guard_redeem(state: PoolState, params: ActionParams) -> str | None:
    if not state.matured:
        return NotMatured.code
    if params.amount <= 0:
        return InvalidAmount.code
    if not params.auth_ok:
        return Unauthorized.code
    return None


def guard_claim_yield(state: PoolState, params: ActionParams) -> str | None:
    if params.amount <= 0:
        return InvalidAmount.code
    if not params.auth_ok:
        return Unauthorized.code
    if params.caller_yt_balance <= 0:
        return NoYtBalance.code
    return None


def guard_deposit_yield(state: PoolState, params: ActionParams) -> str | None:
    if params.amount <= 0:
        return InvalidAmount.code
    if not params.auth_ok or params.caller != state.authority:
        return Unauthorized.code
    return None
