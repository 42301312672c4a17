"""Exception types for the yield-splitter pool.

Every domain error carries a stable ``code`` equal to its class name. The
functional core reports rejections by code (``StepResult.rejection``); callers
that prefer exceptions use ``step_or_raise()`` or the engine entry points,
which map the code back to the class via ``error_for_code()``.
"""

from __future__ import annotations


class YieldSplitterError(Exception):
    """Base class for all pool errors."""

    code: str = "YieldSplitterError"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.code
        super().__init__(self.message)


class InvalidAmount(YieldSplitterError):
    code = "InvalidAmount"


class InvalidMaturity(YieldSplitterError):
    code = "InvalidMaturity"


class PoolMatured(YieldSplitterError):
    code = "PoolMatured"


class NotMatured(YieldSplitterError):
    code = "NotMatured"


class AlreadyMatured(YieldSplitterError):
    code = "AlreadyMatured"


class InsufficientLiquidity(YieldSplitterError):
    code = "InsufficientLiquidity"


class SlippageExceeded(YieldSplitterError):
    code = "SlippageExceeded"


class NoYtBalance(YieldSplitterError):
    code = "NoYtBalance"


class InsufficientYield(YieldSplitterError):
    code = "InsufficientYield"


class Unauthorized(YieldSplitterError):
    code = "Unauthorized"


class ArithmeticOverflow(YieldSplitterError):
    """A checked arithmetic step overflowed, underflowed or divided by zero."""

    code = "ArithmeticOverflow"


class FixedPointOverflow(ArithmeticOverflow):
    pass


class FixedPointUnderflow(ArithmeticOverflow):
    pass


class DivisionByZero(ArithmeticOverflow):
    pass


class InvariantViolation(YieldSplitterError):
    """Raised when a post-state violates one or more invariants."""

    code = "InvariantViolation"

    def __init__(self, violations: list[str]) -> None:
        self.violations = violations
        super().__init__(f"invariant violations: {', '.join(violations)}")


class PoolNotFound(YieldSplitterError):
    code = "PoolNotFound"


class PoolAlreadyExists(YieldSplitterError):
    code = "PoolAlreadyExists"


class LedgerError(YieldSplitterError):
    """Raised by a ledger adapter when a mint/burn/transfer cannot be applied."""

    code = "LedgerError"


class InsufficientBalance(LedgerError):
    code = "InsufficientBalance"


_BY_CODE: dict[str, type[YieldSplitterError]] = {
    cls.code: cls
    for cls in (
        InvalidAmount,
        InvalidMaturity,
        PoolMatured,
        NotMatured,
        AlreadyMatured,
        InsufficientLiquidity,
        SlippageExceeded,
        NoYtBalance,
        InsufficientYield,
        Unauthorized,
        ArithmeticOverflow,
        PoolNotFound,
        PoolAlreadyExists,
        LedgerError,
        InsufficientBalance,
    )
}


def error_for_code(code: str, detail: str | None = None) -> YieldSplitterError:
    """Build the exception instance for a rejection code."""
    if code.startswith("invariant:"):
        return InvariantViolation(code.removeprefix("invariant:").split(","))
    cls = _BY_CODE.get(code)
    if cls is None:
        return YieldSplitterError(detail or code)
    return cls(detail)
