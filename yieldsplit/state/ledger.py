"""
In-memory Ledger Adapter: claim/underlying balances per holder.

Implements balance_of[holder, asset] -> amount plus mint / burn / transfer.
The pool core never touches this table directly; it emits ledger operations
that the engine applies inside `transaction()`.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Dict, Iterator, Tuple

from ..core.errors import InsufficientBalance, InvalidAmount
from ..core.fixed_point import U64_MAX, FixedPointOverflow

# Type aliases
Holder = str
AssetId = str
Amount = int


class InMemoryLedger:
    """
    Balance table mapping (holder, asset) -> amount with all-or-nothing transactions.

    Zero balances are dropped to keep the table sparse. Supplies are tracked per
    asset so mint/burn can be checked against them.
    """

    def __init__(self) -> None:
        self._balances: Dict[Tuple[Holder, AssetId], Amount] = {}
        self._supply: Dict[AssetId, Amount] = {}
        self._depth = 0

    def balance_of(self, asset_id: AssetId, holder: Holder) -> Amount:
        """Balance for (holder, asset). Returns 0 if not found."""
        return self._balances.get((holder, asset_id), 0)

    def total_supply(self, asset_id: AssetId) -> Amount:
        return self._supply.get(asset_id, 0)

    def _set(self, holder: Holder, asset_id: AssetId, amount: Amount) -> None:
        if amount == 0:
            self._balances.pop((holder, asset_id), None)
        else:
            self._balances[(holder, asset_id)] = amount

    @staticmethod
    def _require_amount(amount: Amount) -> None:
        if not isinstance(amount, int) or isinstance(amount, bool) or amount < 0:
            raise InvalidAmount(f"ledger amount must be a non-negative int: {amount!r}")

    def _credit(self, holder: Holder, asset_id: AssetId, amount: Amount) -> None:
        new_balance = self.balance_of(asset_id, holder) + amount
        if new_balance > U64_MAX:
            raise FixedPointOverflow(f"balance overflow for {holder} in {asset_id}")
        self._set(holder, asset_id, new_balance)

    def _debit(self, holder: Holder, asset_id: AssetId, amount: Amount) -> None:
        current = self.balance_of(asset_id, holder)
        if amount > current:
            raise InsufficientBalance(
                f"insufficient {asset_id} balance for {holder}: {current} < {amount}"
            )
        self._set(holder, asset_id, current - amount)

    def mint(self, asset_id: AssetId, to: Holder, amount: Amount) -> None:
        self._require_amount(amount)
        self._credit(to, asset_id, amount)
        self._supply[asset_id] = self.total_supply(asset_id) + amount

    def burn(self, asset_id: AssetId, from_: Holder, amount: Amount) -> None:
        self._require_amount(amount)
        self._debit(from_, asset_id, amount)
        self._supply[asset_id] = self.total_supply(asset_id) - amount

    def transfer(self, asset_id: AssetId, from_: Holder, to: Holder, amount: Amount) -> None:
        self._require_amount(amount)
        self._debit(from_, asset_id, amount)
        self._credit(to, asset_id, amount)

    @contextmanager
    def transaction(self) -> Iterator["InMemoryLedger"]:
        """
        Apply everything inside the block, or nothing.

        Nested blocks join the outermost one; only the outermost restores the
        snapshot when an exception escapes.
        """
        if self._depth > 0:
            self._depth += 1
            try:
                yield self
            finally:
                self._depth -= 1
            return

        balances = dict(self._balances)
        supply = dict(self._supply)
        self._depth = 1
        try:
            yield self
        except BaseException:
            self._balances = balances
            self._supply = supply
            raise
        finally:
            self._depth = 0

    def get_balances_for_asset(self, asset_id: AssetId) -> Dict[Holder, Amount]:
        """All non-zero holders of `asset_id`."""
        return {holder: amount for (holder, a), amount in self._balances.items() if a == asset_id}

    def __repr__(self) -> str:
        return f"InMemoryLedger({len(self._balances)} entries)"
