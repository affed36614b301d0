from __future__ import annotations

from token_launch.core.types import Position
from token_launch.core.utils.fees import AdaptiveFee, FlatFee

# Liquidity layouts. Both assume the default starting tick of -230400.
POOL_POSITIONS: dict[str, tuple[Position, ...]] = {
    "Standard": (Position(tick_lower=-230_400, tick_upper=-120_000, position_bps=10_000),),
    "Project": (
        Position(tick_lower=-230_400, tick_upper=-214_000, position_bps=1_000),
        Position(tick_lower=-214_000, tick_upper=-155_000, position_bps=5_000),
        Position(tick_lower=-202_000, tick_upper=-155_000, position_bps=1_500),
        Position(tick_lower=-155_000, tick_upper=-120_000, position_bps=2_000),
        Position(tick_lower=-141_000, tick_upper=-120_000, position_bps=500),
    ),
}

FEE_CONFIGS: dict[str, FlatFee | AdaptiveFee] = {
    "StaticBasic": FlatFee(fee_bps=100, paired_fee_bps=100),
    "DynamicBasic": AdaptiveFee(
        base_fee_bps=100,
        max_fee_bps=500,
        decay_bps=7_500,
        reference_window_seconds=30,
        reset_window_seconds=120,
        reset_threshold_bps=200,
        control_numerator=500_000_000,
    ),
    # Higher floor, faster reset
    "Dynamic3": AdaptiveFee(
        base_fee_bps=100,
        max_fee_bps=300,
        decay_bps=9_500,
        reference_window_seconds=60,
        reset_window_seconds=360,
        reset_threshold_bps=200,
        control_numerator=500_000_000,
    ),
}
