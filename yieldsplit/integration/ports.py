"""
Adapter contracts the engine consumes: ledger, time source, authorization.

Hosts supply their own implementations; `InMemoryLedger`, `SystemClock` and
`ManualClock` cover local use and tests.
"""

from __future__ import annotations

import time
from typing import Any, ContextManager, Mapping, Optional, Protocol, runtime_checkable


@runtime_checkable
class Ledger(Protocol):
    def mint(self, asset_id: str, to: str, amount: int) -> None: ...

    def burn(self, asset_id: str, from_: str, amount: int) -> None: ...

    def transfer(self, asset_id: str, from_: str, to: str, amount: int) -> None: ...

    def balance_of(self, asset_id: str, holder: str) -> int: ...

    def transaction(self) -> ContextManager[Any]:
        """All ledger calls inside the block apply together or not at all."""
        ...


@runtime_checkable
class Clock(Protocol):
    def now(self) -> int:
        """Current unix time in seconds; monotonic within a transaction."""
        ...


@runtime_checkable
class Authorizer(Protocol):
    def authorize(self, principal: str, operation: Mapping[str, Any], signature: Optional[str]) -> bool:
        """True iff `operation` is authorized by `principal`."""
        ...


class SystemClock:
    def now(self) -> int:
        return int(time.time())


class ManualClock:
    """Host-driven clock. Time only moves forward."""

    def __init__(self, start: int = 0) -> None:
        if start < 0:
            raise ValueError(f"start must be non-negative: {start}")
        self._now = int(start)

    def now(self) -> int:
        return self._now

    def set(self, timestamp: int) -> None:
        if timestamp < self._now:
            raise ValueError(f"clock cannot move backwards: {timestamp} < {self._now}")
        self._now = int(timestamp)

    def advance(self, seconds: int) -> int:
        if seconds < 0:
            raise ValueError(f"seconds must be non-negative: {seconds}")
        self._now += int(seconds)
        return self._now
