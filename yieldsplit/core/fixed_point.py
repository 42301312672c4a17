"""Checked fixed-point arithmetic for pool quantities.

Every function is stateless and operates on plain Python ints. Python ints do
not wrap, so the u64/u128 widths of the persisted record are enforced
explicitly: a result outside ``[0, bound]`` raises instead of being returned.

Rounding is floor (truncate toward zero; all operands are non-negative).

The pool itself only uses the checked operations, `mul_div` and `bps_of`.
`to_scaled` / `from_scaled` and `amount_to_value` / `value_to_amount` are
host-side helpers for valuing positions against an external exponent-scaled
price feed; they share the same overflow and rounding rules.
"""

from __future__ import annotations

from .errors import DivisionByZero, FixedPointOverflow, FixedPointUnderflow

PRECISION: int = 1_000_000_000  # 1e9
BPS_DENOM: int = 10_000
U64_MAX: int = 2**64 - 1
U128_MAX: int = 2**128 - 1


def _require_uint(name: str, value: int) -> None:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int")
    if value < 0:
        raise FixedPointUnderflow(f"{name} must be non-negative: {value}")


def _bounded(op: str, value: int, bound: int) -> int:
    if value > bound:
        raise FixedPointOverflow(f"{op} overflow: {value} > {bound}")
    return value


# -- Basic checked operations -------------------------------------------------

def checked_add(a: int, b: int, *, bound: int = U64_MAX) -> int:
    _require_uint("a", a)
    _require_uint("b", b)
    return _bounded("add", a + b, bound)


def checked_sub(a: int, b: int) -> int:
    """``a - b``; fails instead of going negative."""
    _require_uint("a", a)
    _require_uint("b", b)
    if b > a:
        raise FixedPointUnderflow(f"sub underflow: {a} - {b}")
    return a - b


def checked_mul(a: int, b: int, *, bound: int = U64_MAX) -> int:
    _require_uint("a", a)
    _require_uint("b", b)
    return _bounded("mul", a * b, bound)


def checked_div(a: int, b: int) -> int:
    """Floor division ``a // b``."""
    _require_uint("a", a)
    _require_uint("b", b)
    if b == 0:
        raise DivisionByZero(f"div by zero: {a} / 0")
    return a // b


def mul_div(a: int, b: int, c: int, *, bound: int = U64_MAX) -> int:
    """``floor(a * b / c)`` with a u128 intermediate and a u64 result.

    Scaling the product before the division keeps the significant digits that
    ``a // c * b`` would drop.
    """
    product = checked_mul(a, b, bound=U128_MAX)
    return _bounded("mul_div", checked_div(product, c), bound)


# -- Scaled values ------------------------------------------------------------

def to_scaled(amount: int) -> int:
    """Raw amount -> PRECISION-scaled value (u128)."""
    return checked_mul(amount, PRECISION, bound=U128_MAX)


def from_scaled(value: int) -> int:
    """PRECISION-scaled value -> raw amount, truncating the fraction."""
    return _bounded("from_scaled", checked_div(value, PRECISION), U64_MAX)


def _pow10(expo: int) -> int:
    if not isinstance(expo, int) or isinstance(expo, bool):
        raise TypeError("expo must be an int")
    return 10 ** abs(expo)


def amount_to_value(amount: int, price: int, expo: int) -> int:
    """Value of ``amount`` at ``price * 10**expo`` (floor).

    ``expo`` is typically negative (e.g. ``price=2_512_345_678, expo=-8`` is
    25.12345678 per unit).
    """
    scale = _pow10(expo)
    if expo < 0:
        return mul_div(amount, price, scale)
    return checked_mul(checked_mul(amount, price), scale)


def value_to_amount(value: int, price: int, expo: int) -> int:
    """Inverse of ``amount_to_value`` (floor); a zero price is a division by zero."""
    scale = _pow10(expo)
    if expo < 0:
        return mul_div(value, scale, price)
    return checked_div(value, checked_mul(price, scale))


def bps_of(amount: int, bps: int) -> int:
    """``floor(amount * bps / 10_000)``."""
    if not isinstance(bps, int) or isinstance(bps, bool) or not (0 <= bps <= BPS_DENOM):
        raise ValueError(f"bps must be in [0, {BPS_DENOM}]: {bps}")
    return mul_div(amount, bps, BPS_DENOM)
