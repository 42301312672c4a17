"""State transition functions for the pool state machine.

One pure function per action. Each returns a new `PoolState` with the action's
updates applied.

Semantics:
- updates evaluate against the PRE-state,
- every new field value is computed (checked) before the record is rebuilt,
  so a failing step never yields a half-updated state,
- arithmetic failures raise `YieldSplitterError` subclasses; `engine.step`
  turns them into rejections.
"""

from __future__ import annotations

from dataclasses import replace

from ..errors import InsufficientYield
from ..fixed_point import checked_add, checked_sub, mul_div
from ..time_weighted_amm import SwapQuote, swap_exact_in
from .types import ActionParams, PoolState, PoolStatus, SwapDirection


def quote_for(state: PoolState, params: ActionParams) -> SwapQuote:
    """Curve quote for a swap step (slippage floor included)."""
    reserve_in, reserve_out = state.reserves_for(params.direction)
    return swap_exact_in(
        reserve_in=reserve_in,
        reserve_out=reserve_out,
        amount_in=params.amount,
        min_amount_out=params.min_amount_out,
        time_to_maturity=state.maturity - params.now,
        fee_bps=state.fee_rate_bps,
    )


def yield_share(state: PoolState, params: ActionParams) -> int:
    """``amount * caller_yt_balance / yield_claim_reserve`` (floor)."""
    return mul_div(params.amount, params.caller_yt_balance, state.yield_claim_reserve)


def apply_tokenize(state: PoolState, params: ActionParams) -> PoolState:
    return replace(
        state,
        total_underlying_deposited=checked_add(state.total_underlying_deposited, params.amount),
        last_update_time=params.now,
    )


def apply_swap(state: PoolState, params: ActionParams) -> PoolState:
    quote = quote_for(state, params)
    if params.direction is SwapDirection.PT_TO_YT:
        pt_reserve, yt_reserve = quote.new_reserve_in, quote.new_reserve_out
    else:
        yt_reserve, pt_reserve = quote.new_reserve_in, quote.new_reserve_out
    return replace(
        state,
        principal_reserve=pt_reserve,
        yield_claim_reserve=yt_reserve,
        last_update_time=params.now,
    )


def apply_add_liquidity(state: PoolState, params: ActionParams) -> PoolState:
    return replace(
        state,
        principal_reserve=checked_add(state.principal_reserve, params.pt_amount),
        yield_claim_reserve=checked_add(state.yield_claim_reserve, params.yt_amount),
        last_update_time=params.now,
    )


def apply_mark_matured(state: PoolState, params: ActionParams) -> PoolState:
    return replace(state, status=PoolStatus.MATURED, last_update_time=params.now)


def apply_redeem(state: PoolState, params: ActionParams) -> PoolState:
    return replace(
        state,
        total_principal_redeemed=checked_add(state.total_principal_redeemed, params.amount),
        last_update_time=params.now,
    )


def apply_claim_yield(state: PoolState, params: ActionParams) -> PoolState:
    share = yield_share(state, params)
    if share == 0 or share > state.total_yield_accrued:
        raise InsufficientYield(f"share {share} not payable from total_yield_accrued {state.total_yield_accrued}")
    return replace(
        state,
        total_yield_accrued=checked_sub(state.total_yield_accrued, share),
        last_update_time=params.now,
    )


def apply_deposit_yield(state: PoolState, params: ActionParams) -> PoolState:
    return replace(
        state,
        total_yield_accrued=checked_add(state.total_yield_accrued, params.amount),
        last_update_time=params.now,
    )
