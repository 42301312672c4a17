"""Data types for the pool lifecycle state machine.

All types are frozen dataclasses (immutable).

Units/conventions:
- amounts and reserves are raw token units (u64),
- timestamps are unix seconds,
- `*_bps` rates are basis points (1/10_000).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, unique
from typing import Literal

DEFAULT_FEE_BPS = 30


@unique
class PoolStatus(Enum):
    ACTIVE = "ACTIVE"
    MATURED = "MATURED"


@unique
class Action(Enum):
    TOKENIZE = "tokenize"
    SWAP = "swap"
    ADD_LIQUIDITY = "add_liquidity"
    MARK_MATURED = "mark_matured"
    REDEEM = "redeem"
    CLAIM_YIELD = "claim_yield"
    DEPOSIT_YIELD = "deposit_yield"


@unique
class Event(Enum):
    TOKENIZED = "Tokenized"
    SWAPPED = "Swapped"
    LIQUIDITY_ADDED = "LiquidityAdded"
    MATURED = "Matured"
    REDEEMED = "Redeemed"
    YIELD_CLAIMED = "YieldClaimed"
    YIELD_DEPOSITED = "YieldDeposited"


@unique
class SwapDirection(Enum):
    PT_TO_YT = "pt_to_yt"
    YT_TO_PT = "yt_to_pt"

    @classmethod
    def from_flag(cls, pt_to_yt: bool) -> "SwapDirection":
        return cls.PT_TO_YT if pt_to_yt else cls.YT_TO_PT


@dataclass(frozen=True)
class PoolState:
    """One pool record (underlying asset + maturity pair)."""

    pool_id: str
    authority: str
    underlying_asset_id: str
    custody_id: str
    principal_claim_id: str
    yield_claim_id: str
    maturity: int

    principal_reserve: int = 0
    yield_claim_reserve: int = 0
    total_underlying_deposited: int = 0
    total_principal_redeemed: int = 0
    total_yield_accrued: int = 0
    fee_rate_bps: int = DEFAULT_FEE_BPS
    last_update_time: int = 0
    status: PoolStatus = PoolStatus.ACTIVE

    @property
    def matured(self) -> bool:
        return self.status is PoolStatus.MATURED

    @property
    def outstanding_principal(self) -> int:
        """Principal claims issued and not yet redeemed."""
        return self.total_underlying_deposited - self.total_principal_redeemed

    def reserves_for(self, direction: SwapDirection) -> tuple[int, int]:
        """(reserve_in, reserve_out) for a trade in `direction`."""
        if direction is SwapDirection.PT_TO_YT:
            return self.principal_reserve, self.yield_claim_reserve
        return self.yield_claim_reserve, self.principal_reserve


@dataclass(frozen=True)
class ActionParams:
    """Parameters for an action. Unused fields default to 0/False/None.

    `now` comes from the host time source; `caller_yt_balance` and `auth_ok` are
    filled in by the shell from the ledger and the authorizer.
    """

    action: Action
    caller: str = ""
    now: int = 0
    amount: int = 0                            # tokenize / redeem / claim_yield / deposit_yield / swap(in)
    min_amount_out: int = 0                    # swap
    direction: SwapDirection = SwapDirection.PT_TO_YT  # swap
    pt_amount: int = 0                         # add_liquidity
    yt_amount: int = 0                         # add_liquidity
    caller_yt_balance: int = 0                 # claim_yield
    auth_ok: bool = False                      # every action but mark_matured


@dataclass(frozen=True)
class LedgerOp:
    """One custody movement the host must apply through the Ledger Adapter."""

    kind: Literal["mint", "burn", "transfer"]
    asset_id: str
    amount: int
    source: str | None = None
    destination: str | None = None


@dataclass(frozen=True)
class Effect:
    """Post-state observables emitted after a successful step."""

    event: Event
    ledger_ops: tuple[LedgerOp, ...] = ()
    amount_in: int = 0
    amount_out: int = 0
    fee: int = 0
    principal_reserve_after: int = 0
    yield_claim_reserve_after: int = 0
    total_yield_accrued_after: int = 0


@dataclass(frozen=True)
class StepResult:
    """Result of a single engine step."""

    accepted: bool
    state: PoolState | None = None
    effect: Effect | None = None
    rejection: str | None = None
    detail: str | None = None
