"""Effect functions for the pool state machine.

One pure function per action. Each computes the ``Effect`` from the PRE- and
POST-state: the event, the ordered ledger operations the host applies, and the
post-state observables.
"""

from __future__ import annotations

from .types import ActionParams, Effect, Event, LedgerOp, PoolState, SwapDirection
from .updates import quote_for


def _common_effects(post: PoolState) -> dict[str, int]:
    return dict(
        principal_reserve_after=post.principal_reserve,
        yield_claim_reserve_after=post.yield_claim_reserve,
        total_yield_accrued_after=post.total_yield_accrued,
    )


def _claim_ids(state: PoolState, direction: SwapDirection) -> tuple[str, str]:
    if direction is SwapDirection.PT_TO_YT:
        return state.principal_claim_id, state.yield_claim_id
    return state.yield_claim_id, state.principal_claim_id


def effect_tokenize(pre: PoolState, post: PoolState, params: ActionParams) -> Effect:
    ops = (
        LedgerOp("transfer", pre.underlying_asset_id, params.amount, source=params.caller, destination=pre.custody_id),
        LedgerOp("mint", pre.principal_claim_id, params.amount, destination=params.caller),
        LedgerOp("mint", pre.yield_claim_id, params.amount, destination=params.caller),
    )
    return Effect(event=Event.TOKENIZED, ledger_ops=ops, amount_in=params.amount, **_common_effects(post))


def effect_swap(pre: PoolState, post: PoolState, params: ActionParams) -> Effect:
    quote = quote_for(pre, params)
    asset_in, asset_out = _claim_ids(pre, params.direction)
    ops = (
        LedgerOp("transfer", asset_in, params.amount, source=params.caller, destination=pre.custody_id),
        LedgerOp("transfer", asset_out, quote.amount_out_net, source=pre.custody_id, destination=params.caller),
    )
    return Effect(
        event=Event.SWAPPED,
        ledger_ops=ops,
        amount_in=params.amount,
        amount_out=quote.amount_out_net,
        fee=quote.fee,
        **_common_effects(post),
    )


def effect_add_liquidity(pre: PoolState, post: PoolState, params: ActionParams) -> Effect:
    ops = (
        LedgerOp("transfer", pre.principal_claim_id, params.pt_amount, source=params.caller, destination=pre.custody_id),
        LedgerOp("transfer", pre.yield_claim_id, params.yt_amount, source=params.caller, destination=pre.custody_id),
    )
    return Effect(event=Event.LIQUIDITY_ADDED, ledger_ops=ops, **_common_effects(post))


def effect_mark_matured(pre: PoolState, post: PoolState, params: ActionParams) -> Effect:
    return Effect(event=Event.MATURED, **_common_effects(post))


def effect_redeem(pre: PoolState, post: PoolState, params: ActionParams) -> Effect:
    ops = (
        LedgerOp("burn", pre.principal_claim_id, params.amount, source=params.caller),
        LedgerOp("transfer", pre.underlying_asset_id, params.amount, source=pre.custody_id, destination=params.caller),
    )
    return Effect(
        event=Event.REDEEMED,
        ledger_ops=ops,
        amount_in=params.amount,
        amount_out=params.amount,
        **_common_effects(post),
    )


def effect_claim_yield(pre: PoolState, post: PoolState, params: ActionParams) -> Effect:
    share = pre.total_yield_accrued - post.total_yield_accrued
    ops = (LedgerOp("transfer", pre.underlying_asset_id, share, source=pre.custody_id, destination=params.caller),)
    return Effect(event=Event.YIELD_CLAIMED, ledger_ops=ops, amount_out=share, **_common_effects(post))


def effect_deposit_yield(pre: PoolState, post: PoolState, params: ActionParams) -> Effect:
    ops = (
        LedgerOp("transfer", pre.underlying_asset_id, params.amount, source=params.caller, destination=pre.custody_id),
    )
    return Effect(event=Event.YIELD_DEPOSITED, ledger_ops=ops, amount_in=params.amount, **_common_effects(post))
