"""Dispatch-table engine for the pool state machine.

``initialize_pool(...)`` creates a pool record; ``step(state, params)`` is the
single entry point for every later operation. ``step``:

1. Dispatches to the action's guard / update / effect functions.
2. Rejects on the first failed guard (rejection = error code).
3. Applies the update; arithmetic and curve failures become rejections.
4. Checks all invariants on the post-state (and the transition).
5. Returns a ``StepResult`` (accepted, or rejected with a reason).

A rejected step has no post-state: the caller keeps its PRE-state, so a
failed operation never mutates anything.
"""

from __future__ import annotations

from typing import Callable, Optional

from ..errors import InvalidMaturity, YieldSplitterError, error_for_code
from ..fixed_point import BPS_DENOM, U64_MAX
from .effects import (
    effect_add_liquidity,
    effect_claim_yield,
    effect_deposit_yield,
    effect_mark_matured,
    effect_redeem,
    effect_swap,
    effect_tokenize,
)
from .guards import (
    guard_add_liquidity,
    guard_claim_yield,
    guard_deposit_yield,
    guard_mark_matured,
    guard_redeem,
    guard_swap,
    guard_tokenize,
)
from .invariants import check_transition
from .types import DEFAULT_FEE_BPS, Action, ActionParams, Effect, PoolState, PoolStatus, StepResult
from .updates import (
    apply_add_liquidity,
    apply_claim_yield,
    apply_deposit_yield,
    apply_mark_matured,
    apply_redeem,
    apply_swap,
    apply_tokenize,
)

GuardFn = Callable[[PoolState, ActionParams], Optional[str]]
UpdateFn = Callable[[PoolState, ActionParams], PoolState]
EffectFn = Callable[[PoolState, PoolState, ActionParams], Effect]

_DISPATCH: dict[Action, tuple[GuardFn, UpdateFn, EffectFn]] = {
    Action.TOKENIZE: (guard_tokenize, apply_tokenize, effect_tokenize),
    Action.SWAP: (guard_swap, apply_swap, effect_swap),
    Action.ADD_LIQUIDITY: (guard_add_liquidity, apply_add_liquidity, effect_add_liquidity),
    Action.MARK_MATURED: (guard_mark_matured, apply_mark_matured, effect_mark_matured),
    Action.REDEEM: (guard_redeem, apply_redeem, effect_redeem),
    Action.CLAIM_YIELD: (guard_claim_yield, apply_claim_yield, effect_claim_yield),
    Action.DEPOSIT_YIELD: (guard_deposit_yield, apply_deposit_yield, effect_deposit_yield),
}


def initialize_pool(
    *,
    pool_id: str,
    authority: str,
    underlying_asset_id: str,
    custody_id: str,
    principal_claim_id: str,
    yield_claim_id: str,
    maturity: int,
    now: int,
    fee_bps: int = DEFAULT_FEE_BPS,
) -> PoolState:
    """Create a fresh ACTIVE pool with empty reserves.

    Raises:
        InvalidMaturity: ``maturity <= now`` or maturity outside the u64 range.
    """
    if maturity <= now:
        raise InvalidMaturity(f"maturity {maturity} must be after now {now}")
    if maturity > U64_MAX or now < 0:
        raise InvalidMaturity(f"maturity out of range: {maturity}")
    if not (0 <= fee_bps <= BPS_DENOM):
        raise ValueError(f"fee_bps must be in [0, {BPS_DENOM}]: {fee_bps}")
    return PoolState(
        pool_id=pool_id,
        authority=authority,
        underlying_asset_id=underlying_asset_id,
        custody_id=custody_id,
        principal_claim_id=principal_claim_id,
        yield_claim_id=yield_claim_id,
        maturity=maturity,
        fee_rate_bps=fee_bps,
        last_update_time=now,
        status=PoolStatus.ACTIVE,
    )


def step(state: PoolState, params: ActionParams) -> StepResult:
    """Execute one action against the given state.

    Returns ``StepResult`` with ``accepted=True`` on success,
    or ``accepted=False`` with a ``rejection`` code.
    """
    entry = _DISPATCH.get(params.action)
    if entry is None:
        return StepResult(accepted=False, rejection=f"unknown_action:{params.action}")

    guard_fn, update_fn, effect_fn = entry

    rejection = guard_fn(state, params)
    if rejection is not None:
        return StepResult(accepted=False, rejection=rejection)

    try:
        new_state = update_fn(state, params)
    except YieldSplitterError as exc:
        return StepResult(accepted=False, rejection=exc.code, detail=exc.message)

    violations = check_transition(state, new_state)
    if violations:
        return StepResult(accepted=False, rejection=f"invariant:{','.join(violations)}")

    effect = effect_fn(state, new_state, params)
    return StepResult(accepted=True, state=new_state, effect=effect)


def step_or_raise(state: PoolState, params: ActionParams) -> StepResult:
    """Like ``step()`` but raises the typed error instead of returning a rejection.

    Raises:
        YieldSplitterError: the subclass named by the rejection code.
    """
    result = step(state, params)
    if result.accepted:
        return result
    raise error_for_code(result.rejection or "", result.detail)
