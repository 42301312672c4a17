"""Pool lifecycle state machine (tokenize -> trade -> mature -> redeem/claim).

Pure functional core:
- deterministic, integer-only transitions,
- immutable state (frozen dataclasses),
- fail-closed guards and invariant checks.

Ledger movements are not performed here; each accepted step returns them as
`Effect.ledger_ops` for the host to apply in the same atomic unit.

Public API:
- `initialize_pool(...) -> PoolState`
- `step(state, params) -> StepResult`
- `step_or_raise(state, params) -> StepResult` (raises on rejection)
"""

from .engine import initialize_pool, step, step_or_raise
from .state import state_from_dict, state_to_dict
from .types import (
    DEFAULT_FEE_BPS,
    Action,
    ActionParams,
    Effect,
    Event,
    LedgerOp,
    PoolState,
    PoolStatus,
    StepResult,
    SwapDirection,
)

__all__ = [
    "initialize_pool",
    "step",
    "step_or_raise",
    "state_from_dict",
    "state_to_dict",
    "DEFAULT_FEE_BPS",
    "Action",
    "ActionParams",
    "Effect",
    "Event",
    "LedgerOp",
    "PoolState",
    "PoolStatus",
    "StepResult",
    "SwapDirection",
]
