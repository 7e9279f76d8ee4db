"""StableSwap engine error classes.

Every failure raised by the engine derives from StableSwapError. All of them
are terminal to the requested operation: the engine never retries, and
callers are expected to reject the triggering request as a whole.
"""


class StableSwapError(Exception):
    """Base error for StableSwap engine operations."""

    pass


# -----------------------------------------------------------------------------
# Arithmetic
# -----------------------------------------------------------------------------


class ArithmeticOverflow(StableSwapError, ArithmeticError):
    """Result does not fit in the checked unsigned range."""

    pass


class Underflow(ArithmeticOverflow):
    """Subtraction would produce a negative result."""

    pass


class DivisionByZero(StableSwapError, ArithmeticError):
    """Division or modulo by zero."""

    pass


# -----------------------------------------------------------------------------
# Solver
# -----------------------------------------------------------------------------


class ConvergenceFailure(StableSwapError):
    """Newton-Raphson iteration did not stabilize within the bound."""

    pass


class InvariantDidNotConverge(ConvergenceFailure):
    """Iteration for the invariant D did not converge."""

    pass


class GetBalanceDidNotConverge(ConvergenceFailure):
    """Iteration for the balance y did not converge."""

    pass


# -----------------------------------------------------------------------------
# Amplification
# -----------------------------------------------------------------------------


class InvalidRampWindow(StableSwapError):
    """Ramp window is zero-length, inverted or too short."""

    pass


class InvalidAmplification(StableSwapError):
    """Amplification is out of bounds or changes too much in one ramp."""

    pass


# -----------------------------------------------------------------------------
# Pool / request
# -----------------------------------------------------------------------------


class InsufficientLiquidity(StableSwapError):
    """Output exceeds the available reserve, or burn exceeds supply."""

    pass


class ZeroBalance(InsufficientLiquidity):
    """A reserve is empty while the other is not."""

    pass


class ZeroAmount(StableSwapError):
    """Degenerate zero-sized request."""

    pass


class SlippageExceeded(StableSwapError):
    """Computed amount is worse than the caller's limit."""

    pass


class InvalidFee(StableSwapError):
    """Fee fraction must satisfy 0 <= numerator <= denominator, denominator > 0."""

    pass


class InvalidScalingFactor(StableSwapError):
    """Scaling factor must be positive."""

    pass


class InvalidTokenIndex(StableSwapError, IndexError):
    """Reserve index is out of range or input equals output."""

    pass


class InvalidPoolState(StableSwapError):
    """External pool state failed validation."""

    pass
