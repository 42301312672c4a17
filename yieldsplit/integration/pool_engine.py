"""
Pool execution engine (imperative shell around the functional core).

Each operation runs as one unit of work:

1. Load the pool record and read the time source.
2. Fill in host-derived parameters (now, ledger balances, authorization).
3. Run the pure `step()`; a rejection ends the operation with no effect.
4. Apply the step's ledger operations inside `ledger.transaction()`; any
   ledger failure rolls all of them back and the record is not written.
5. Commit the new pool record (and the caller's nonce, if one was used).

The engine holds no locks: the host must not run two operations against the
same pool concurrently.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Dict, Optional

from ..core.errors import Unauthorized, YieldSplitterError, error_for_code
from ..core.pool import (
    Action,
    ActionParams,
    Effect,
    LedgerOp,
    PoolState,
    StepResult,
    SwapDirection,
    initialize_pool,
    step,
)
from ..core.time_weighted_amm import SwapQuote, quote_swap
from ..state.nonces import NonceTable
from ..state.pools import ROLE_PT_MINT, ROLE_VAULT, ROLE_YT_MINT, PoolStore, compute_pool_id, derive
from .auth import BlsAuthorizer, TxSenderAuthorizer
from .config import ConfigError, EngineConfig
from .ports import Authorizer, Clock, Ledger

log = logging.getLogger(__name__)

# Actions whose caller must be authorized (signature or host-verified sender).
# Each one debits or credits the caller, so the caller must be the position owner.
_AUTH_ACTIONS = frozenset(set(Action) - {Action.MARK_MATURED})


def operation_payload(pool_id: str, params: ActionParams, *, nonce: int) -> Dict[str, Any]:
    """Canonical dict a principal signs to authorize `params` on `pool_id`."""
    return {
        "action": params.action.value,
        "pool_id": pool_id,
        "caller": params.caller,
        "amount": params.amount,
        "min_amount_out": params.min_amount_out,
        "direction": params.direction.value,
        "pt_amount": params.pt_amount,
        "yt_amount": params.yt_amount,
        "nonce": nonce,
    }


def initialize_payload(
    *, authority: str, underlying_asset_id: str, maturity: int, fee_bps: int, nonce: int
) -> Dict[str, Any]:
    return {
        "action": "initialize",
        "authority": authority,
        "underlying_asset_id": underlying_asset_id,
        "maturity": maturity,
        "fee_bps": fee_bps,
        "nonce": nonce,
    }


def _apply_ledger_op(ledger: Ledger, op: LedgerOp) -> None:
    if op.kind == "mint":
        ledger.mint(op.asset_id, op.destination, op.amount)
    elif op.kind == "burn":
        ledger.burn(op.asset_id, op.source, op.amount)
    elif op.kind == "transfer":
        ledger.transfer(op.asset_id, op.source, op.destination, op.amount)
    else:
        raise ValueError(f"unknown ledger op: {op.kind!r}")


class PoolEngine:
    """
    Runs pool operations against a ledger, a clock and a pool store.

    Entry points raise the typed `YieldSplitterError` on failure; `apply()` is
    the non-raising variant returning the `StepResult`.

    A supplied `authorizer` must agree with `config.require_signatures`; other
    `Authorizer` implementations are taken as given.
    """

    def __init__(
        self,
        *,
        ledger: Ledger,
        clock: Clock,
        authorizer: Optional[Authorizer] = None,
        store: Optional[PoolStore] = None,
        nonces: Optional[NonceTable] = None,
        config: Optional[EngineConfig] = None,
    ) -> None:
        self.config = config or EngineConfig()
        if authorizer is None:
            if not self.config.require_signatures:
                raise ConfigError("an authorizer must be supplied when require_signatures is False")
            authorizer = BlsAuthorizer(chain_id=self.config.chain_id)
        elif self.config.require_signatures and isinstance(authorizer, TxSenderAuthorizer):
            raise ConfigError("require_signatures is True but the authorizer is tx-sender based")
        elif not self.config.require_signatures and isinstance(authorizer, BlsAuthorizer):
            raise ConfigError("require_signatures is False but the authorizer checks BLS signatures")
        self.ledger = ledger
        self.clock = clock
        self.authorizer = authorizer
        self.store = store if store is not None else PoolStore()
        self.nonces = nonces if nonces is not None else NonceTable()

    # -- Queries --------------------------------------------------------------

    def get_pool(self, pool_id: str) -> PoolState:
        return self.store.get(pool_id)

    def next_nonce(self, principal: str) -> int:
        return self.nonces.next_nonce(principal)

    def quote(self, pool_id: str, *, amount_in: int, pt_to_yt: bool) -> SwapQuote:
        """Preview a swap at the current time without executing it."""
        pool = self.store.get(pool_id)
        reserve_in, reserve_out = pool.reserves_for(SwapDirection.from_flag(pt_to_yt))
        return quote_swap(
            reserve_in=reserve_in,
            reserve_out=reserve_out,
            amount_in=amount_in,
            time_to_maturity=pool.maturity - self.clock.now(),
            fee_bps=pool.fee_rate_bps,
        )

    # -- Authorization ----------------------------------------------------------

    def _authorized(self, principal: str, payload: Dict[str, Any], signature: Optional[str]) -> bool:
        if not principal or not self.nonces.is_next(principal, payload.get("nonce")):
            return False
        return self.authorizer.authorize(principal, payload, signature)

    # -- Operations -------------------------------------------------------------

    def initialize(
        self,
        *,
        authority: str,
        underlying_asset_id: str,
        maturity: int,
        signature: Optional[str] = None,
        nonce: Optional[int] = None,
        fee_bps: Optional[int] = None,
    ) -> PoolState:
        fee = self.config.default_fee_bps if fee_bps is None else fee_bps
        pool_id = compute_pool_id(underlying_asset_id, maturity)
        state = initialize_pool(
            pool_id=pool_id,
            authority=authority,
            underlying_asset_id=underlying_asset_id,
            custody_id=derive(pool_id, ROLE_VAULT),
            principal_claim_id=derive(pool_id, ROLE_PT_MINT),
            yield_claim_id=derive(pool_id, ROLE_YT_MINT),
            maturity=maturity,
            now=self.clock.now(),
            fee_bps=fee,
        )
        payload = initialize_payload(
            authority=authority,
            underlying_asset_id=underlying_asset_id,
            maturity=maturity,
            fee_bps=fee,
            nonce=-1 if nonce is None else nonce,
        )
        if not self._authorized(authority, payload, signature):
            raise Unauthorized(f"initialize not authorized by {authority}")
        self.store.create(state)
        self.nonces.set_last(authority, payload["nonce"])
        log.info("Pool %s initialized (maturity=%d, fee_bps=%d)", pool_id, maturity, fee)
        return state

    def apply(
        self,
        pool_id: str,
        params: ActionParams,
        *,
        signature: Optional[str] = None,
        nonce: Optional[int] = None,
    ) -> StepResult:
        """Run one operation atomically. Never raises for domain failures."""
        try:
            pool = self.store.get(pool_id)
        except YieldSplitterError as exc:
            return StepResult(accepted=False, rejection=exc.code, detail=exc.message)

        params = replace(params, now=self.clock.now(), auth_ok=False)
        if params.action is Action.CLAIM_YIELD:
            params = replace(params, caller_yt_balance=self.ledger.balance_of(pool.yield_claim_id, params.caller))

        nonce_used = False
        if params.action in _AUTH_ACTIONS and nonce is not None:
            payload = operation_payload(pool_id, params, nonce=nonce)
            if self._authorized(params.caller, payload, signature):
                params = replace(params, auth_ok=True)
                nonce_used = True

        result = step(pool, params)
        if not result.accepted:
            log.debug("%s rejected on pool %s: %s", params.action.value, pool_id, result.rejection)
            return result

        assert result.state is not None and result.effect is not None
        try:
            with self.ledger.transaction():
                for op in result.effect.ledger_ops:
                    _apply_ledger_op(self.ledger, op)
        except YieldSplitterError as exc:
            log.debug("%s rolled back on pool %s: %s", params.action.value, pool_id, exc.code)
            return StepResult(accepted=False, rejection=exc.code, detail=exc.message)

        self.store.put(result.state)
        if nonce_used:
            self.nonces.set_last(params.caller, nonce)
        log.info(
            "%s on pool %s: in=%d out=%d fee=%d reserves=(%d, %d)",
            result.effect.event.value,
            pool_id,
            result.effect.amount_in,
            result.effect.amount_out,
            result.effect.fee,
            result.state.principal_reserve,
            result.state.yield_claim_reserve,
        )
        return result

    def _run(self, pool_id: str, params: ActionParams, **auth: Any) -> Effect:
        result = self.apply(pool_id, params, **auth)
        if not result.accepted:
            raise error_for_code(result.rejection or "", result.detail)
        assert result.effect is not None
        return result.effect

    def tokenize(
        self,
        pool_id: str,
        *,
        depositor: str,
        amount: int,
        signature: Optional[str] = None,
        nonce: Optional[int] = None,
    ) -> Effect:
        """Deposit underlying; mint PT and YT 1:1 to the depositor."""
        params = ActionParams(action=Action.TOKENIZE, caller=depositor, amount=amount)
        return self._run(pool_id, params, signature=signature, nonce=nonce)

    def swap(
        self,
        pool_id: str,
        *,
        trader: str,
        amount_in: int,
        min_amount_out: int,
        pt_to_yt: bool,
        signature: Optional[str] = None,
        nonce: Optional[int] = None,
    ) -> Effect:
        params = ActionParams(
            action=Action.SWAP,
            caller=trader,
            amount=amount_in,
            min_amount_out=min_amount_out,
            direction=SwapDirection.from_flag(pt_to_yt),
        )
        return self._run(pool_id, params, signature=signature, nonce=nonce)

    def add_liquidity(
        self,
        pool_id: str,
        *,
        provider: str,
        pt_amount: int,
        yt_amount: int,
        signature: Optional[str] = None,
        nonce: Optional[int] = None,
    ) -> Effect:
        params = ActionParams(action=Action.ADD_LIQUIDITY, caller=provider, pt_amount=pt_amount, yt_amount=yt_amount)
        return self._run(pool_id, params, signature=signature, nonce=nonce)

    def mark_matured(self, pool_id: str, *, caller: str = "") -> Effect:
        return self._run(pool_id, ActionParams(action=Action.MARK_MATURED, caller=caller))

    def redeem(
        self,
        pool_id: str,
        *,
        holder: str,
        amount: int,
        signature: Optional[str] = None,
        nonce: Optional[int] = None,
    ) -> Effect:
        """Burn PT and release the same amount of underlying (after maturity)."""
        params = ActionParams(action=Action.REDEEM, caller=holder, amount=amount)
        return self._run(pool_id, params, signature=signature, nonce=nonce)

    def claim_yield(
        self,
        pool_id: str,
        *,
        holder: str,
        amount: int,
        signature: Optional[str] = None,
        nonce: Optional[int] = None,
    ) -> Effect:
        params = ActionParams(action=Action.CLAIM_YIELD, caller=holder, amount=amount)
        return self._run(pool_id, params, signature=signature, nonce=nonce)

    def deposit_yield(
        self,
        pool_id: str,
        *,
        depositor: str,
        amount: int,
        signature: Optional[str] = None,
        nonce: Optional[int] = None,
    ) -> Effect:
        """Authority funds the claimable yield pool with underlying."""
        params = ActionParams(action=Action.DEPOSIT_YIELD, caller=depositor, amount=amount)
        return self._run(pool_id, params, signature=signature, nonce=nonce)
