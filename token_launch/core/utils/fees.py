"""Fee policy -> (hook module, encoded poolData).

Fee hooks take fees in millionths, so a bps value is scaled by 100 before it is
encoded (1% = 100 bps = 10_000 hook units).
"""

from __future__ import annotations

from dataclasses import dataclass

from eth_abi import encode as abi_encode

from token_launch.core.constants import BPS_DENOMINATOR
from token_launch.core.constants.base import FEE_HOOK_UNITS_PER_BPS
from token_launch.core.errors import ValidationError
from token_launch.core.types import FeeModule
from token_launch.core.utils.allocation import is_valid_bps

STATIC_FEE_TYPES = ["uint24", "uint24"]
DYNAMIC_FEE_TYPES = [
    "uint24",  # baseFee
    "uint24",  # maxLpFee
    "uint256",  # referenceTickFilterPeriod
    "uint256",  # resetPeriod
    "int24",  # resetTickFilter
    "uint256",  # feeControlNumerator
    "uint24",  # decayFilterBps
]


@dataclass(frozen=True)
class FlatFee:
    """Same fee on every swap. ``paired_fee_bps`` defaults to ``fee_bps``."""

    fee_bps: int
    paired_fee_bps: int | None = None


@dataclass(frozen=True)
class AdaptiveFee:
    """Volatility-adaptive fee between ``base_fee_bps`` and ``max_fee_bps``."""

    base_fee_bps: int
    max_fee_bps: int
    decay_bps: int
    reference_window_seconds: int
    reset_window_seconds: int
    reset_threshold_bps: int
    control_numerator: int


FeePolicy = FlatFee | AdaptiveFee


@dataclass(frozen=True)
class EncodedFeePolicy:
    module: FeeModule
    pool_data: bytes


def to_hook_units(bps: int) -> int:
    return bps * FEE_HOOK_UNITS_PER_BPS


def _check_bps(value: int, field: str) -> int:
    if not is_valid_bps(value):
        raise ValidationError(
            field, f"must be an integer in [0, {BPS_DENOMINATOR}], got {value!r}"
        )
    return value


def _check_non_negative(value: int, field: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ValidationError(field, f"must be a non-negative integer, got {value!r}")
    return value


def encode_fee_policy(policy: FeePolicy, *, field: str = "fees") -> EncodedFeePolicy:
    if isinstance(policy, FlatFee):
        token_fee = _check_bps(policy.fee_bps, f"{field}.fee_bps")
        paired_fee = (
            token_fee
            if policy.paired_fee_bps is None
            else _check_bps(policy.paired_fee_bps, f"{field}.paired_fee_bps")
        )
        data = abi_encode(
            STATIC_FEE_TYPES, [to_hook_units(token_fee), to_hook_units(paired_fee)]
        )
        return EncodedFeePolicy(module=FeeModule.STATIC, pool_data=data)

    if isinstance(policy, AdaptiveFee):
        base = _check_bps(policy.base_fee_bps, f"{field}.base_fee_bps")
        max_fee = _check_bps(policy.max_fee_bps, f"{field}.max_fee_bps")
        if base > max_fee:
            raise ValidationError(
                f"{field}.base_fee_bps",
                f"base fee {base} bps exceeds max fee {max_fee} bps",
            )
        decay = _check_bps(policy.decay_bps, f"{field}.decay_bps")
        reset_threshold = _check_bps(
            policy.reset_threshold_bps, f"{field}.reset_threshold_bps"
        )
        reference_window = _check_non_negative(
            policy.reference_window_seconds, f"{field}.reference_window_seconds"
        )
        reset_window = _check_non_negative(
            policy.reset_window_seconds, f"{field}.reset_window_seconds"
        )
        numerator = _check_non_negative(
            policy.control_numerator, f"{field}.control_numerator"
        )
        data = abi_encode(
            DYNAMIC_FEE_TYPES,
            [
                to_hook_units(base),
                to_hook_units(max_fee),
                reference_window,
                reset_window,
                reset_threshold,
                numerator,
                decay,
            ],
        )
        return EncodedFeePolicy(module=FeeModule.DYNAMIC, pool_data=data)

    raise ValidationError(field, f"unsupported fee policy {type(policy).__name__}")
