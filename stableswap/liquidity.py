"""Liquidity calculators.

Pool-share issuance and redemption for a pool snapshot:
- calc_deposit: mint shares for deposited amounts, sized by invariant growth
- calc_deposit_for_shares: amounts required to mint an exact share count
- calc_withdraw: balanced redemption, withdraw fee on the amounts removed
- calc_withdraw_one: redemption concentrated into a single reserve
- virtual_price: invariant per share

Imbalanced multi-asset withdrawal is not provided.

All amounts in and out are native token units. Invariants are computed on
balances normalized to the pool's common precision, which is also the unit
of pool shares minted by the first deposit.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

import structlog

from stableswap.config import DEFAULT_ENGINE_CONFIG, EngineConfig
from stableswap.errors import (
    InsufficientLiquidity,
    InvalidPoolState,
    SlippageExceeded,
    ZeroAmount,
)
from stableswap.invariant import compute_d, compute_y
from stableswap.math.fixed_point import Fp, Rounding, mul_div
from stableswap.pool import PoolSnapshot, scale_down_down, scale_up
from stableswap.safe_int import S

logger = structlog.get_logger()


# =============================================================================
# Result types
# =============================================================================


@dataclass(frozen=True)
class DepositQuote:
    """Result of a deposit calculation.

    Attributes:
        pool_tokens_minted: Shares to mint to the depositor
        amounts: Deposited amounts per reserve
        fees: Imbalance fee per reserve (zero for a balanced deposit)
        admin_fees: Admin share of each imbalance fee
        new_balances: Reserves after the deposit, admin fees removed
        invariant_before: D before the deposit
        invariant_after: D after the deposit, net of imbalance fees
        amp: Effective amplification used
    """

    pool_tokens_minted: int
    amounts: tuple[int, ...]
    fees: tuple[int, ...]
    admin_fees: tuple[int, ...]
    new_balances: tuple[int, ...]
    invariant_before: int
    invariant_after: int
    amp: int


@dataclass(frozen=True)
class SharesDepositQuote:
    """Amounts required to mint an exact number of shares."""

    pool_token_amount: int
    amounts: tuple[int, ...]
    new_balances: tuple[int, ...]


@dataclass(frozen=True)
class WithdrawQuote:
    """Result of a balanced withdrawal.

    Attributes:
        pool_token_amount: Shares burned
        amounts: Net amounts paid out per reserve
        fees: Withdraw fee per reserve, admin share included
        admin_fees: Admin share of each withdraw fee
        new_balances: Reserves after paying amounts and admin fees
    """

    pool_token_amount: int
    amounts: tuple[int, ...]
    fees: tuple[int, ...]
    admin_fees: tuple[int, ...]
    new_balances: tuple[int, ...]


@dataclass(frozen=True)
class WithdrawOneQuote:
    """Result of a single-sided withdrawal.

    Attributes:
        pool_token_amount: Shares burned
        token_index: Reserve paid out
        amount: Net amount paid out
        withdraw_fee: Withdraw fee charged on the pre-fee amount
        imbalance_fee: Swap-equivalent fee for skewing the pool
        admin_fee: Admin share of both fees
        new_balance: Paid-out reserve after paying amount and admin_fee
        amp: Effective amplification used
    """

    pool_token_amount: int
    token_index: int
    amount: int
    withdraw_fee: int
    imbalance_fee: int
    admin_fee: int
    new_balance: int
    amp: int


# =============================================================================
# Validation helpers
# =============================================================================


def _check_amounts_length(pool: PoolSnapshot, amounts: Sequence[int], what: str) -> None:
    if len(amounts) != pool.n_coins:
        raise InvalidPoolState(f"Expected {pool.n_coins} {what}, got {len(amounts)}")


def _check_burn(pool: PoolSnapshot, pool_token_amount: int) -> None:
    if pool_token_amount <= 0:
        raise ZeroAmount("Pool token amount must be positive")
    if pool_token_amount > pool.pool_token_supply:
        raise InsufficientLiquidity(
            f"Burn {pool_token_amount} exceeds pool token supply {pool.pool_token_supply}"
        )


# =============================================================================
# Deposits
# =============================================================================


def calc_deposit(
    pool: PoolSnapshot,
    amounts: Sequence[int],
    now: int,
    minimum_mint_amount: int = 0,
    config: EngineConfig = DEFAULT_ENGINE_CONFIG,
) -> DepositQuote:
    """Calculate shares minted for depositing `amounts`.

    The first deposit (zero supply) mints D directly, establishing the
    initial exchange rate. Later deposits mint supply * (D2 - D0) / D0, where
    D2 is the invariant after charging each reserve the normalized trade fee
    on its deviation from a perfectly proportional deposit. A balanced
    deposit pays no fee.

    Raises:
        ZeroAmount: If every amount is zero, or an initial deposit leaves a
            reserve empty
        InsufficientLiquidity: If shares exist but the pool invariant is zero
        SlippageExceeded: If minted shares < minimum_mint_amount
    """
    _check_amounts_length(pool, amounts, "deposit amounts")
    if all(a == 0 for a in amounts):
        raise ZeroAmount("Deposit amounts are all zero")

    supply = pool.pool_token_supply
    if supply == 0 and any(a == 0 for a in amounts):
        raise ZeroAmount("Initial deposit must fund every reserve")

    amp = pool.amp.effective_amp(now)
    n_coins = pool.n_coins
    old_xp = pool.normalized_balances()
    new_xp = [
        (S(x) + scale_up(S(a).value, r.scaling_factor)).value
        for x, a, r in zip(old_xp, amounts, pool.reserves)
    ]

    d0 = compute_d(amp, old_xp, config.max_iterations)
    d1 = compute_d(amp, new_xp, config.max_iterations)
    if d1 <= d0:
        raise ZeroAmount(f"Deposit does not grow the invariant: D0={d0}, D1={d1}")

    fees = [0] * n_coins
    admin_fees = [0] * n_coins

    if supply == 0:
        d2 = d1
        mint_amount = d1
    else:
        if d0 == 0:
            raise InsufficientLiquidity("Pool has outstanding shares but no reserves")
        reduced_xp = []
        for i, reserve in enumerate(pool.reserves):
            ideal_balance = mul_div(d1, old_xp[i], d0)
            difference = S(ideal_balance).abs_diff(new_xp[i]).value
            fee_xp = pool.fees.normalized_trade_fee(n_coins, difference)
            reduced_xp.append((S(new_xp[i]) - fee_xp).value)
            fees[i] = scale_down_down(fee_xp, reserve.scaling_factor)
            admin_fees[i] = pool.fees.admin_trade_fee_amount(fees[i])
        d2 = compute_d(amp, reduced_xp, config.max_iterations)
        mint_amount = mul_div(supply, S(d2).saturating_sub(d0), d0)

    if mint_amount < minimum_mint_amount:
        raise SlippageExceeded(f"Minted {mint_amount} below minimum {minimum_mint_amount}")

    new_balances = tuple(
        (S(r.balance) + a - admin).value for r, a, admin in zip(pool.reserves, amounts, admin_fees)
    )

    logger.debug(
        "deposit_calculated",
        amounts=list(amounts),
        pool_tokens_minted=mint_amount,
        invariant_before=d0,
        invariant_after=d2,
    )
    return DepositQuote(
        pool_tokens_minted=mint_amount,
        amounts=tuple(amounts),
        fees=tuple(fees),
        admin_fees=tuple(admin_fees),
        new_balances=new_balances,
        invariant_before=d0,
        invariant_after=d2,
        amp=amp,
    )


def calc_deposit_for_shares(
    pool: PoolSnapshot,
    pool_token_amount: int,
    maximum_amounts: Sequence[int] | None = None,
) -> SharesDepositQuote:
    """Calculate the proportional amounts needed to mint exactly pool_token_amount.

    Amounts round up so the depositor never gets shares for free.

    Raises:
        ZeroAmount: If pool_token_amount is zero
        InsufficientLiquidity: If the pool has no shares yet
        SlippageExceeded: If a required amount exceeds its maximum
    """
    if pool_token_amount <= 0:
        raise ZeroAmount("Pool token amount must be positive")
    supply = pool.pool_token_supply
    if supply == 0:
        raise InsufficientLiquidity("Cannot price shares in a pool with no supply")
    if maximum_amounts is not None:
        _check_amounts_length(pool, maximum_amounts, "maximum amounts")

    amounts = tuple(
        mul_div(r.balance, pool_token_amount, supply, Rounding.UP) for r in pool.reserves
    )
    if maximum_amounts is not None:
        for i, (amount, maximum) in enumerate(zip(amounts, maximum_amounts)):
            if amount > maximum:
                raise SlippageExceeded(f"Deposit of token {i} needs {amount}, maximum {maximum}")

    return SharesDepositQuote(
        pool_token_amount=pool_token_amount,
        amounts=amounts,
        new_balances=tuple(r.balance + a for r, a in zip(pool.reserves, amounts)),
    )


# =============================================================================
# Withdrawals
# =============================================================================


def calc_withdraw(
    pool: PoolSnapshot,
    pool_token_amount: int,
    minimum_amounts: Sequence[int] | None = None,
) -> WithdrawQuote:
    """Calculate a balanced withdrawal for burning pool_token_amount shares.

    Each reserve pays balance * burn / supply (rounded down), less the
    withdraw fee on that amount (rounded up).

    Raises:
        ZeroAmount: If pool_token_amount is zero
        InsufficientLiquidity: If pool_token_amount exceeds supply
        SlippageExceeded: If a net amount falls below its minimum
    """
    _check_burn(pool, pool_token_amount)
    if minimum_amounts is not None:
        _check_amounts_length(pool, minimum_amounts, "minimum amounts")

    supply = pool.pool_token_supply
    amounts, fees, admin_fees, new_balances = [], [], [], []
    for i, reserve in enumerate(pool.reserves):
        value = mul_div(reserve.balance, pool_token_amount, supply)
        fee = pool.fees.withdraw_fee_amount(value)
        admin_fee = pool.fees.admin_withdraw_fee_amount(fee)
        amount = value - fee
        if minimum_amounts is not None and amount < minimum_amounts[i]:
            raise SlippageExceeded(
                f"Withdrawal of token {i} is {amount}, minimum {minimum_amounts[i]}"
            )
        amounts.append(amount)
        fees.append(fee)
        admin_fees.append(admin_fee)
        new_balances.append((S(reserve.balance) - amount - admin_fee).value)

    return WithdrawQuote(
        pool_token_amount=pool_token_amount,
        amounts=tuple(amounts),
        fees=tuple(fees),
        admin_fees=tuple(admin_fees),
        new_balances=tuple(new_balances),
    )


def calc_withdraw_one(
    pool: PoolSnapshot,
    pool_token_amount: int,
    token_index: int,
    now: int,
    minimum_amount: int = 0,
    config: EngineConfig = DEFAULT_ENGINE_CONFIG,
) -> WithdrawOneQuote:
    """Calculate a withdrawal of burned shares paid entirely in one reserve.

    Algorithm:
        1. D0 = current invariant, D1 = D0 - burn * D0 / supply
        2. new_y = balance of token_index that holds D1, others unchanged
        3. Each reserve's deviation from a proportional withdrawal is charged
           the normalized trade fee, giving reduced balances
        4. dy = reduced[i] - y(reduced, D1) - 1, dy_0 = xp[i] - new_y
        5. imbalance_fee = dy_0 - dy, withdraw_fee = dy * withdraw_fee
        6. amount = dy - withdraw_fee

    dy never exceeds xp[i] - 1, so the payout stays below the reserve
    balance. Burning the whole supply is rejected: it would leave the other
    reserve in a pool with no shares.

    Raises:
        ZeroAmount: If pool_token_amount is zero
        InvalidTokenIndex: If token_index is out of range
        InsufficientLiquidity: If burn is not strictly less than supply
        SlippageExceeded: If amount < minimum_amount
        ConvergenceFailure: If a solver fails to converge
    """
    reserve = pool.reserve(token_index)
    _check_burn(pool, pool_token_amount)
    if pool_token_amount == pool.pool_token_supply:
        raise InsufficientLiquidity(
            "Cannot burn the entire supply into one reserve; use calc_withdraw"
        )

    amp = pool.amp.effective_amp(now)
    n_coins = pool.n_coins
    supply = pool.pool_token_supply
    xp = pool.normalized_balances()

    d0 = compute_d(amp, xp, config.max_iterations)
    if d0 == 0:
        raise InsufficientLiquidity("Pool has outstanding shares but no reserves")
    d1 = (S(d0) - mul_div(pool_token_amount, d0, supply)).value
    new_y = compute_y(amp, xp, d1, token_index, config.max_iterations)

    reduced_xp = []
    for j, x in enumerate(xp):
        if j == token_index:
            expected = S(mul_div(x, d1, d0)).saturating_sub(new_y)
        else:
            expected = S(x) - mul_div(x, d1, d0)
        reduced_xp.append((S(x) - pool.fees.normalized_trade_fee(n_coins, expected.value)).value)

    reduced_y = compute_y(amp, reduced_xp, d1, token_index, config.max_iterations)
    dy_xp = S(reduced_xp[token_index]).saturating_sub(S(reduced_y) + 1)
    dy_0_xp = S(xp[token_index]) - new_y

    dy = scale_down_down(dy_xp.value, reserve.scaling_factor)
    dy_0 = scale_down_down(dy_0_xp.value, reserve.scaling_factor)

    imbalance_fee = S(dy_0).saturating_sub(dy).value
    withdraw_fee = pool.fees.withdraw_fee_amount(dy)
    amount = dy - withdraw_fee
    admin_fee = pool.fees.admin_trade_fee_amount(imbalance_fee) + pool.fees.admin_withdraw_fee_amount(
        withdraw_fee
    )

    if amount < minimum_amount:
        raise SlippageExceeded(f"Single-token withdrawal {amount} below minimum {minimum_amount}")

    logger.debug(
        "withdraw_one_calculated",
        pool_token_amount=pool_token_amount,
        token_index=token_index,
        amount=amount,
        imbalance_fee=imbalance_fee,
        withdraw_fee=withdraw_fee,
    )
    return WithdrawOneQuote(
        pool_token_amount=pool_token_amount,
        token_index=token_index,
        amount=amount,
        withdraw_fee=withdraw_fee,
        imbalance_fee=imbalance_fee,
        admin_fee=admin_fee,
        new_balance=(S(reserve.balance) - amount - admin_fee).value,
        amp=amp,
    )


def virtual_price(pool: PoolSnapshot, now: int, config: EngineConfig = DEFAULT_ENGINE_CONFIG) -> Fp:
    """Invariant per pool share, as an 18-decimal fixed-point value.

    Raises:
        InsufficientLiquidity: If the pool has no shares
    """
    if pool.pool_token_supply == 0:
        raise InsufficientLiquidity("Virtual price is undefined with zero supply")
    amp = pool.amp.effective_amp(now)
    d = compute_d(amp, pool.normalized_balances(), config.max_iterations)
    return Fp.from_ratio(d, pool.pool_token_supply)
