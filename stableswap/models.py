"""Pydantic models for pool state supplied by the external state layer.

The state layer hands the engine plain integers and timestamps, typically
as JSON with uint values encoded as decimal strings. These models validate
that input and convert it into the immutable PoolSnapshot the calculators
consume.
"""

from __future__ import annotations

from typing import Annotated, Any

import structlog
from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, ValidationError

from stableswap.amplification import AmplificationRamp
from stableswap.errors import InvalidPoolState, StableSwapError
from stableswap.fees import FEE_DENOMINATOR, FeeFraction, Fees
from stableswap.pool import DEFAULT_PRECISION, PoolSnapshot, Reserve
from stableswap.safe_int import UINT256_MAX

logger = structlog.get_logger()


def validate_uint(value: Any) -> int:
    """Validate a non-negative integer given as int or decimal string.

    Raises:
        ValueError: If value is not a valid integer within uint256 range
    """
    if isinstance(value, bool):
        raise ValueError("Uint must be an integer, got bool")
    if isinstance(value, str):
        try:
            value = int(value)
        except ValueError as err:
            raise ValueError(f"Uint must be a decimal integer string: '{value}'") from err
    if not isinstance(value, int):
        raise ValueError(f"Uint must be string or int, got {type(value).__name__}")
    if value < 0:
        raise ValueError(f"Uint cannot be negative: {value}")
    if value > UINT256_MAX:
        raise ValueError(f"Uint overflow: {value} > 2^256-1")
    return value


# Unsigned integer, accepted as int or decimal string
Uint = Annotated[int, BeforeValidator(validate_uint)]


class ReserveModel(BaseModel):
    """One reserve: native balance plus its token's decimals."""

    model_config = ConfigDict(frozen=True)

    balance: Uint
    decimals: int = Field(default=DEFAULT_PRECISION, ge=0, le=DEFAULT_PRECISION)


class AmplificationModel(BaseModel):
    """Ramp state as persisted by the state layer."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    initial_amp: Uint = Field(alias="initialAmp")
    target_amp: Uint = Field(alias="targetAmp")
    ramp_start_ts: Uint = Field(default=0, alias="rampStartTs")
    ramp_stop_ts: Uint = Field(default=0, alias="rampStopTs")


class FeeFractionModel(BaseModel):
    model_config = ConfigDict(frozen=True)

    numerator: Uint = 0
    denominator: Uint = FEE_DENOMINATOR


class FeeModel(BaseModel):
    """Fee schedule as persisted by the state layer."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    trade_fee: FeeFractionModel = Field(default_factory=FeeFractionModel, alias="tradeFee")
    withdraw_fee: FeeFractionModel = Field(default_factory=FeeFractionModel, alias="withdrawFee")
    admin_trade_fee: FeeFractionModel = Field(default_factory=FeeFractionModel, alias="adminTradeFee")
    admin_withdraw_fee: FeeFractionModel = Field(
        default_factory=FeeFractionModel, alias="adminWithdrawFee"
    )


class PoolStateModel(BaseModel):
    """Complete pool state input."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    reserves: list[ReserveModel] = Field(min_length=2, max_length=2)
    amplification: AmplificationModel
    fees: FeeModel = Field(default_factory=FeeModel)
    pool_token_supply: Uint = Field(default=0, alias="poolTokenSupply")
    precision: int = Field(default=DEFAULT_PRECISION, ge=0, le=36)

    def to_snapshot(self) -> PoolSnapshot:
        """Convert into the engine's immutable PoolSnapshot.

        Raises:
            StableSwapError: If the values violate engine invariants
                (fee numerator > denominator, inverted ramp window, ...)
        """

        def fraction(model: FeeFractionModel) -> FeeFraction:
            return FeeFraction(numerator=model.numerator, denominator=model.denominator)

        amp = self.amplification
        return PoolSnapshot(
            reserves=tuple(
                Reserve.from_decimals(r.balance, r.decimals, self.precision) for r in self.reserves
            ),
            amp=AmplificationRamp(
                initial_amp=amp.initial_amp,
                target_amp=amp.target_amp,
                ramp_start_ts=amp.ramp_start_ts,
                ramp_stop_ts=amp.ramp_stop_ts,
            ),
            fees=Fees(
                trade_fee=fraction(self.fees.trade_fee),
                withdraw_fee=fraction(self.fees.withdraw_fee),
                admin_trade_fee=fraction(self.fees.admin_trade_fee),
                admin_withdraw_fee=fraction(self.fees.admin_withdraw_fee),
            ),
            pool_token_supply=self.pool_token_supply,
        )


def parse_pool_state(data: dict[str, Any]) -> PoolSnapshot:
    """Validate raw pool state and build a PoolSnapshot.

    Raises:
        InvalidPoolState: If the data fails schema validation
        StableSwapError: If the data is well-formed but violates an engine
            invariant (the specific subclass is preserved)
    """
    try:
        model = PoolStateModel.model_validate(data)
    except ValidationError as err:
        logger.warning("pool_state_invalid", errors=err.error_count())
        raise InvalidPoolState(f"Invalid pool state: {err}") from err

    try:
        return model.to_snapshot()
    except StableSwapError as err:
        logger.warning("pool_state_rejected", error=str(err), error_type=type(err).__name__)
        raise
