"""Pool snapshot dataclasses and precision scaling.

A PoolSnapshot is the immutable input every calculator works on: reserve
balances in native token units, the amplification ramp, the fee schedule
and the outstanding pool-share supply. Calculators never mutate it; callers
apply the returned deltas to their own state.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field, replace

from stableswap.amplification import AmplificationRamp
from stableswap.errors import InvalidPoolState, InvalidScalingFactor, InvalidTokenIndex
from stableswap.fees import Fees

# Number of reserves supported by the pool layer
N_COINS = 2

# Common internal precision balances are normalized to
DEFAULT_PRECISION = 18


def scale_up(amount: int, scaling_factor: int) -> int:
    """Scale a native amount to the common internal precision.

    Raises:
        InvalidScalingFactor: If scaling_factor <= 0
    """
    if scaling_factor <= 0:
        raise InvalidScalingFactor(f"Scaling factor must be positive, got {scaling_factor}")
    return amount * scaling_factor


def scale_down_down(amount: int, scaling_factor: int) -> int:
    """Scale a normalized amount back to native units, rounding down.

    Raises:
        InvalidScalingFactor: If scaling_factor <= 0
    """
    if scaling_factor <= 0:
        raise InvalidScalingFactor(f"Scaling factor must be positive, got {scaling_factor}")
    return amount // scaling_factor


@dataclass(frozen=True)
class Reserve:
    """One side of the pool.

    Attributes:
        balance: Balance in the token's native decimals
        scaling_factor: Multiplier to the common precision. For a 6-decimal
            token in an 18-decimal pool this is 10^12.
    """

    balance: int
    scaling_factor: int = 1

    def __post_init__(self) -> None:
        if self.balance < 0:
            raise InvalidPoolState(f"Reserve balance cannot be negative: {self.balance}")
        if self.scaling_factor <= 0:
            raise InvalidScalingFactor(f"Scaling factor must be positive, got {self.scaling_factor}")

    @classmethod
    def from_decimals(cls, balance: int, decimals: int, precision: int = DEFAULT_PRECISION) -> Reserve:
        """Create a reserve whose token uses `decimals` decimals."""
        if decimals > precision:
            raise InvalidScalingFactor(
                f"Token decimals {decimals} exceed pool precision {precision}"
            )
        return cls(balance=balance, scaling_factor=10 ** (precision - decimals))

    def normalized(self) -> int:
        """Balance at the common internal precision."""
        return scale_up(self.balance, self.scaling_factor)


@dataclass(frozen=True)
class PoolSnapshot:
    """Everything the calculators need to price an operation.

    Attributes:
        reserves: Exactly N_COINS reserves
        amp: Amplification ramp state
        fees: Fee schedule
        pool_token_supply: Outstanding pool shares
    """

    reserves: tuple[Reserve, ...]
    amp: AmplificationRamp
    fees: Fees = field(default_factory=Fees)
    pool_token_supply: int = 0

    def __post_init__(self) -> None:
        if len(self.reserves) != N_COINS:
            raise InvalidPoolState(f"Pool must have exactly {N_COINS} reserves, got {len(self.reserves)}")
        if self.pool_token_supply < 0:
            raise InvalidPoolState(f"Pool token supply cannot be negative: {self.pool_token_supply}")

    @property
    def n_coins(self) -> int:
        return len(self.reserves)

    @property
    def balances(self) -> list[int]:
        """Native balances."""
        return [r.balance for r in self.reserves]

    def normalized_balances(self) -> list[int]:
        """Balances at the common internal precision."""
        return [r.normalized() for r in self.reserves]

    def reserve(self, index: int) -> Reserve:
        """Get reserve by index.

        Raises:
            InvalidTokenIndex: If index is out of range
        """
        if index < 0 or index >= self.n_coins:
            raise InvalidTokenIndex(f"token index {index} out of range for {self.n_coins} tokens")
        return self.reserves[index]

    def with_balances(self, balances: Sequence[int], pool_token_supply: int | None = None) -> PoolSnapshot:
        """Return a copy with new native balances (and optionally supply)."""
        if len(balances) != self.n_coins:
            raise InvalidPoolState(f"Expected {self.n_coins} balances, got {len(balances)}")
        reserves = tuple(
            Reserve(balance=b, scaling_factor=r.scaling_factor)
            for b, r in zip(balances, self.reserves)
        )
        supply = self.pool_token_supply if pool_token_supply is None else pool_token_supply
        return replace(self, reserves=reserves, pool_token_supply=supply)
