"""
Nonce table for replay protection of authorized operations.

We track, per principal, the last accepted nonce. Policy is strict sequential
nonces: the next signed operation must carry `last + 1`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Mapping

U32_MAX = 0xFFFFFFFF


def _normalize(principal: str) -> str:
    if not isinstance(principal, str) or not principal:
        raise ValueError("principal must be a non-empty string")
    return principal.lower() if principal.startswith("0x") else principal


@dataclass
class NonceTable:
    """Mutable mapping: principal -> last_used_nonce."""

    _last: Dict[str, int] = field(default_factory=dict)

    def get_last(self, principal: str) -> int:
        return self._last.get(_normalize(principal), 0)

    def next_nonce(self, principal: str) -> int:
        return self.get_last(principal) + 1

    def is_next(self, principal: str, nonce: object) -> bool:
        if not isinstance(nonce, int) or isinstance(nonce, bool):
            return False
        return nonce == self.next_nonce(principal)

    def set_last(self, principal: str, last_nonce: int) -> None:
        if not isinstance(last_nonce, int) or isinstance(last_nonce, bool) or last_nonce < 0:
            raise TypeError("last_nonce must be a non-negative int")
        if last_nonce > U32_MAX:
            raise TypeError("last_nonce must fit in u32")
        self._last[_normalize(principal)] = int(last_nonce)

    def get_all(self) -> Mapping[str, int]:
        return dict(self._last)
