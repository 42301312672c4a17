"""
Operation authorization.

Two policies, mirroring how a host can prove "this transaction is authorized by
principal X":

- `TxSenderAuthorizer`: the host already verified the outer transaction
  signature; the principal must be that sender.
- `BlsAuthorizer`: the principal is a BLS12-381 public key (48-byte hex) and
  must have signed the operation.

Signing scheme:
    sig = G2Basic.Sign(sk, SHA256(domain_sep(f"pool_op_sig:{chain_id}", v1) || canonical_json(operation)))
"""

from __future__ import annotations

import hashlib
import re
from typing import Any, Mapping, Optional

from py_ecc.bls import G2Basic

from ..state.canonical import canonical_json_bytes, domain_sep_bytes

_HEX_CHARS_RE = re.compile(r"^[0-9a-fA-F]+$")


def _hex_to_bytes_allow_0x(hex_str: str, *, name: str, expected_nbytes: int) -> bytes:
    if not isinstance(hex_str, str):
        raise TypeError(f"{name} must be a string")
    s = hex_str[2:] if hex_str.startswith("0x") else hex_str
    if len(s) != 2 * expected_nbytes:
        raise ValueError(f"{name} must be {expected_nbytes} bytes (hex length {2 * expected_nbytes})")
    if not _HEX_CHARS_RE.fullmatch(s):
        raise ValueError(f"{name} must be valid hex")
    return bytes.fromhex(s)


def operation_digest(operation: Mapping[str, Any], *, chain_id: str) -> bytes:
    msg = domain_sep_bytes(f"pool_op_sig:{chain_id}", version=1) + canonical_json_bytes(dict(operation))
    return hashlib.sha256(msg).digest()


def pubkey_hex(secret_key: int) -> str:
    return "0x" + G2Basic.SkToPk(secret_key).hex()


def sign_operation(secret_key: int, operation: Mapping[str, Any], *, chain_id: str) -> str:
    """Client-side helper: signature hex for `operation`."""
    return "0x" + G2Basic.Sign(secret_key, operation_digest(operation, chain_id=chain_id)).hex()


class TxSenderAuthorizer:
    def __init__(self, tx_sender: Optional[str]) -> None:
        self.tx_sender = tx_sender

    def authorize(self, principal: str, operation: Mapping[str, Any], signature: Optional[str]) -> bool:
        return self.tx_sender is not None and principal == self.tx_sender


class BlsAuthorizer:
    def __init__(self, *, chain_id: str) -> None:
        if not isinstance(chain_id, str) or not chain_id:
            raise ValueError("chain_id must be a non-empty string")
        self.chain_id = chain_id

    def authorize(self, principal: str, operation: Mapping[str, Any], signature: Optional[str]) -> bool:
        if signature is None:
            return False
        try:
            pk = _hex_to_bytes_allow_0x(principal, name="principal", expected_nbytes=48)
            sig = _hex_to_bytes_allow_0x(signature, name="signature", expected_nbytes=96)
        except (TypeError, ValueError):
            return False
        return bool(G2Basic.Verify(pk, operation_digest(operation, chain_id=self.chain_id), sig))
