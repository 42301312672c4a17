"""
Time-weighted PT/YT bonding curve.

The invariant is sum-based and scaled by the fraction of a year left until
maturity:

    time_ratio = max(time_to_maturity, MIN_TIME_TO_MATURITY) * PRECISION / SECONDS_PER_YEAR
    k          = (reserve_in + reserve_out) * time_ratio / PRECISION
    new_in     = reserve_in + amount_in              (must be <= k)
    new_out    = k - new_in
    gross_out  = reserve_out - new_out               (must be >= 0 and < reserve_out)
    fee        = floor(gross_out * fee_bps / 10_000)
    net_out    = gross_out - fee

With one year left (time_ratio == PRECISION) the curve is a flat 1:1 exchange.
Away from that point `k` moves relative to the reserve sum, and the
`new_in <= k` requirement is the curve's sharpest edge: balanced pools with
less than a year left reject almost every trade, and pools with more than a
year left produce a negative gross output for small trades. Both surface as
InsufficientLiquidity.

All arithmetic goes through `fixed_point` (checked, floor rounding).
"""

from __future__ import annotations

from dataclasses import dataclass

from .errors import InsufficientLiquidity, InvalidAmount, SlippageExceeded
from .fixed_point import BPS_DENOM, PRECISION, bps_of, checked_add, checked_sub, mul_div

SECONDS_PER_YEAR = 31_536_000
MIN_TIME_TO_MATURITY = 86_400  # one day


@dataclass(frozen=True)
class SwapQuote:
    amount_in: int
    amount_out_gross: int
    fee: int
    amount_out_net: int
    time_ratio: int
    k: int
    # Curve-side reserves (before the fee is returned to the output side).
    curve_reserve_in: int
    curve_reserve_out: int
    # Reserves to persist: the fee stays in the output reserve.
    new_reserve_in: int
    new_reserve_out: int


def time_ratio(time_to_maturity: int) -> int:
    """Fraction of a year remaining, scaled by PRECISION, floored at one day."""
    if not isinstance(time_to_maturity, int) or isinstance(time_to_maturity, bool):
        raise TypeError("time_to_maturity must be an int")
    clamped = max(time_to_maturity, MIN_TIME_TO_MATURITY)
    return mul_div(clamped, PRECISION, SECONDS_PER_YEAR)


def compute_fee(amount_out_gross: int, fee_bps: int) -> int:
    """Fee charged on the gross output (floor rounding)."""
    return bps_of(amount_out_gross, fee_bps)


def quote_swap(
    *,
    reserve_in: int,
    reserve_out: int,
    amount_in: int,
    time_to_maturity: int,
    fee_bps: int,
) -> SwapQuote:
    """
    Exact-in quote + post-trade reserves.

    Raises:
        InvalidAmount: amount_in is zero.
        InsufficientLiquidity: a reserve is empty, or the curve cannot absorb the trade.
        ArithmeticOverflow: a checked step overflowed.
    """
    if amount_in <= 0:
        raise InvalidAmount(f"amount_in must be positive: {amount_in}")
    if reserve_in <= 0 or reserve_out <= 0:
        raise InsufficientLiquidity(f"empty reserve: ({reserve_in}, {reserve_out})")
    if not (0 <= fee_bps <= BPS_DENOM):
        raise ValueError(f"fee_bps must be in [0, {BPS_DENOM}]: {fee_bps}")

    ratio = time_ratio(time_to_maturity)
    k = mul_div(checked_add(reserve_in, reserve_out), ratio, PRECISION)

    curve_in = checked_add(reserve_in, amount_in)
    if curve_in > k:
        raise InsufficientLiquidity(f"trade exceeds curve invariant: {curve_in} > k={k}")
    curve_out = k - curve_in
    if curve_out > reserve_out:
        raise InsufficientLiquidity(f"negative output: curve reserve_out {curve_out} > {reserve_out}")

    gross = reserve_out - curve_out
    if gross >= reserve_out:
        raise InsufficientLiquidity(f"trade would drain reserve_out ({reserve_out})")

    fee = compute_fee(gross, fee_bps)
    net = checked_sub(gross, fee)

    return SwapQuote(
        amount_in=amount_in,
        amount_out_gross=gross,
        fee=fee,
        amount_out_net=net,
        time_ratio=ratio,
        k=k,
        curve_reserve_in=curve_in,
        curve_reserve_out=curve_out,
        new_reserve_in=curve_in,
        new_reserve_out=checked_sub(reserve_out, net),
    )


def swap_exact_in(
    *,
    reserve_in: int,
    reserve_out: int,
    amount_in: int,
    min_amount_out: int,
    time_to_maturity: int,
    fee_bps: int,
) -> SwapQuote:
    """`quote_swap` plus the caller's slippage floor on the net output."""
    if min_amount_out < 0:
        raise InvalidAmount(f"min_amount_out must be non-negative: {min_amount_out}")
    quote = quote_swap(
        reserve_in=reserve_in,
        reserve_out=reserve_out,
        amount_in=amount_in,
        time_to_maturity=time_to_maturity,
        fee_bps=fee_bps,
    )
    if quote.amount_out_net < min_amount_out:
        raise SlippageExceeded(f"amount_out {quote.amount_out_net} < min_amount_out {min_amount_out}")
    return quote
