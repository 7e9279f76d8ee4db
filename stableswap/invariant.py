"""StableSwap invariant solvers.

Integer Newton-Raphson solvers for the invariant

    A * n^n * sum(x_i) + D = A * D * n^n + D^(n+1) / (n^n * prod(x_i))

and for a single balance given D and every other balance.

Both solvers work on any number of reserves; the pool layer is what limits
pools to two. All divisions truncate. Both iterations stop once two
successive values differ by at most one unit and fail with a
ConvergenceFailure if the step bound is reached first; they never return a
stale estimate.

IMPORTANT: All intermediate arithmetic uses SafeInt, so overflow and
division by zero raise typed errors.
"""

from __future__ import annotations

from collections.abc import Sequence

import structlog

from stableswap.config import MAX_ITERATIONS
from stableswap.errors import (
    GetBalanceDidNotConverge,
    InvalidAmplification,
    InvalidTokenIndex,
    InvariantDidNotConverge,
    ZeroBalance,
)
from stableswap.math.fixed_point import Rounding, checked_pow, within_tolerance
from stableswap.safe_int import S, SafeInt

logger = structlog.get_logger()


def _amp_times_n_pow_n(amp: int, n_coins: int) -> SafeInt:
    """Ann = A * n^n, the whitepaper parameterization."""
    if amp <= 0:
        raise InvalidAmplification(f"Amplification must be positive, got {amp}")
    return S(amp) * checked_pow(n_coins, n_coins)


def _div(numerator: SafeInt, denominator: SafeInt, rounding: Rounding) -> SafeInt:
    if rounding is Rounding.UP:
        return numerator.ceiling_div(denominator)
    return numerator // denominator


def compute_d_next(ann: SafeInt, d: SafeInt, d_p: SafeInt, sum_balances: SafeInt, n_coins: int) -> SafeInt:
    """One Newton step for D.

    D' = (Ann * S + n * D_p) * D / ((Ann - 1) * D + (n + 1) * D_p)
    """
    numerator = (ann * sum_balances + d_p * n_coins) * d
    denominator = (ann - 1) * d + d_p * (n_coins + 1)
    return numerator // denominator


def compute_y_next(
    y: SafeInt, b: SafeInt, c: SafeInt, d: SafeInt, rounding: Rounding = Rounding.DOWN
) -> SafeInt:
    """One Newton step for y on y^2 + (b - D) * y = c.

    y' = (y^2 + c) / (2 * y + b - D), truncated or rounded up per `rounding`.

    Raises:
        GetBalanceDidNotConverge: If the denominator is not positive
    """
    denominator = y * 2 + b
    if denominator <= d:
        raise GetBalanceDidNotConverge(
            f"Non-positive denominator in y iteration: 2y + b = {denominator}, D = {d}"
        )
    if rounding is Rounding.UP:
        return (y * y + c).ceiling_div(denominator - d)
    return (y * y + c) // (denominator - d)


def compute_d(amp: int, balances: Sequence[int], max_iterations: int = MAX_ITERATIONS) -> int:
    """Calculate the invariant D using Newton-Raphson iteration.

    Algorithm:
        1. Initial guess: D = sum(balances)
        2. D_p = D^(n+1) / (n^n * prod(balances)), built up one balance at a time
        3. Iterate compute_d_next until |D_new - D_old| <= 1
        4. Give up after max_iterations

    Args:
        amp: Effective amplification coefficient A (unscaled)
        balances: Reserve balances, already normalized to a common precision
        max_iterations: Newton step bound

    Returns:
        The invariant D. Zero for an empty pool (every balance zero).

    Raises:
        InvariantDidNotConverge: If iteration doesn't converge
        ZeroBalance: If some but not all balances are zero
        InvalidAmplification: If amp <= 0
    """
    n_coins = len(balances)
    if n_coins == 0:
        return 0

    sum_balances = S(0)
    for bal in balances:
        sum_balances = sum_balances + bal
    if sum_balances == 0:
        return 0

    for i, bal in enumerate(balances):
        if bal == 0:
            raise ZeroBalance(f"Balance at index {i} is zero in a non-empty pool")

    ann = _amp_times_n_pow_n(amp, n_coins)
    d = sum_balances

    for _ in range(max_iterations):
        d_p = d
        for bal in balances:
            d_p = (d_p * d) // (S(bal) * n_coins)

        d_prev = d
        d = compute_d_next(ann, d, d_p, sum_balances, n_coins)

        if within_tolerance(d, d_prev):
            return d.value

    logger.debug(
        "stable_invariant_did_not_converge",
        amp=amp,
        balances=list(balances),
        iterations=max_iterations,
    )
    raise InvariantDidNotConverge(f"Invariant did not converge after {max_iterations} iterations")


def compute_y(
    amp: int,
    balances: Sequence[int],
    d: int,
    token_index: int,
    max_iterations: int = MAX_ITERATIONS,
    rounding: Rounding = Rounding.DOWN,
) -> int:
    """Solve for balances[token_index] given D and all other balances.

    The invariant rearranges to a quadratic in the unknown balance y:

        y^2 + (S' + D / Ann - D) * y = D^(n+1) / (n^n * P' * Ann)

    where S' and P' are the sum and product of the other balances. It is
    solved with compute_y_next starting from y = D.

    With Rounding.UP every division that raises the root rounds up, so the
    result is never below the exact balance. Swaps solve this way so that
    truncation cannot shrink the invariant.

    Args:
        amp: Effective amplification coefficient A (unscaled)
        balances: Reserve balances; the value at token_index is ignored
        d: Invariant to hold
        token_index: Index of the balance to solve for
        max_iterations: Newton step bound
        rounding: Direction for the divisions in c and in each Newton step

    Returns:
        The balance at token_index that keeps the invariant at d

    Raises:
        GetBalanceDidNotConverge: If iteration doesn't converge
        InvalidTokenIndex: If token_index is out of range
        ZeroBalance: If another balance is zero
    """
    n_coins = len(balances)
    if token_index < 0 or token_index >= n_coins:
        raise InvalidTokenIndex(f"token_index {token_index} out of range for {n_coins} tokens")

    ann = _amp_times_n_pow_n(amp, n_coins)
    sd = S(d)

    # c = D^(n+1) / (n^n * P' * Ann), b = S' + D / Ann
    c = sd
    sum_others = S(0)
    for k, bal in enumerate(balances):
        if k == token_index:
            continue
        if bal == 0:
            raise ZeroBalance(f"Balance at index {k} is zero")
        sum_others = sum_others + bal
        c = _div(c * sd, S(bal) * n_coins, rounding)
    c = _div(c * sd, ann * n_coins, rounding)
    b = sum_others + sd // ann

    y = sd
    for _ in range(max_iterations):
        y_prev = y
        y = compute_y_next(y, b, c, sd, rounding)

        if within_tolerance(y, y_prev):
            return y.value

    logger.debug(
        "stable_get_balance_did_not_converge",
        amp=amp,
        balances=list(balances),
        invariant=d,
        token_index=token_index,
        iterations=max_iterations,
    )
    raise GetBalanceDidNotConverge(f"Balance did not converge after {max_iterations} iterations")
