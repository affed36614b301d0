"""Human-authored launch configs.

Each factory generation has its own model; ``LaunchConfig`` is the tagged union
over them, keyed by ``generation``. Field names are snake_case; camelCase
aliases are accepted as well.
"""

from __future__ import annotations

import re
from decimal import Decimal
from typing import Annotated, Any, Literal

import pydantic
from pydantic import BaseModel, ConfigDict, Field, TypeAdapter
from pydantic.alias_generators import to_camel

from token_launch.core.constants.base import DEFAULT_TICK_SPACING, DEFAULT_VANITY_SUFFIX
from token_launch.core.constants.chains import CHAIN_ID_BASE
from token_launch.core.errors import ValidationError

# Per-side fee cap enforced by the fee hooks
MAX_HOOK_FEE_BPS = 2_000


class _ConfigModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
        frozen=True,
    )


class PositionSpec(_ConfigModel):
    tick_lower: int
    tick_upper: int
    position_bps: int = Field(..., ge=0, le=10_000)


class MarketCapRangeSpec(_ConfigModel):
    """Liquidity range expressed in market cap of the paired token."""

    start_market_cap: float
    end_market_cap: float
    position_bps: int = Field(..., ge=0, le=10_000)


class PoolSpec(_ConfigModel):
    paired_token: str | None = Field(
        default=None, description="Defaults to the chain's WETH"
    )
    paired_token_decimals: int | None = Field(
        default=None,
        ge=0,
        description="Looked up for well-known tokens; falls back to 18",
    )
    tick_if_token0: int | None = Field(
        default=None, description="Explicit starting tick. Mutually exclusive with starting_market_cap"
    )
    starting_market_cap: float | None = None
    tick_spacing: int = Field(default=DEFAULT_TICK_SPACING, gt=0)
    positions: list[PositionSpec] | None = None
    position_preset: str | None = Field(default=None, description="Standard or Project")
    position_ranges: list[MarketCapRangeSpec] | None = None


class StaticFeeSpec(_ConfigModel):
    type: Literal["static"] = "static"
    fee_bps: int = Field(..., ge=0, le=MAX_HOOK_FEE_BPS)
    paired_fee_bps: int | None = Field(default=None, ge=0, le=MAX_HOOK_FEE_BPS)


class DynamicFeeSpec(_ConfigModel):
    type: Literal["dynamic"] = "dynamic"
    base_fee_bps: int = Field(..., ge=0, le=MAX_HOOK_FEE_BPS)
    max_fee_bps: int = Field(..., ge=0, le=MAX_HOOK_FEE_BPS)
    decay_bps: int
    reference_window_seconds: int
    reset_window_seconds: int
    reset_threshold_bps: int
    control_numerator: int


FeeSpec = Annotated[StaticFeeSpec | DynamicFeeSpec, Field(discriminator="type")]


class RewardRecipientSpec(_ConfigModel):
    recipient: str
    admin: str
    bps: int = Field(..., ge=0, le=10_000)
    token: Literal["Both", "Paired", "Token"] = "Both"


class VaultSpec(_ConfigModel):
    percentage: int = Field(..., ge=0, le=100)
    lockup_duration: int = Field(..., description="Seconds")
    vesting_duration: int = Field(default=0, ge=0, description="Seconds")
    recipient: str | None = Field(default=None, description="Defaults to the token admin")


class AirdropEntrySpec(_ConfigModel):
    account: str
    amount: Decimal = Field(..., description="Whole tokens")


class AirdropSpec(_ConfigModel):
    entries: list[AirdropEntrySpec] | None = None
    merkle_root: str | None = Field(
        default=None, description="Precomputed root; requires amount"
    )
    amount: Decimal | None = Field(default=None, description="Whole tokens")
    lockup_duration: int = Field(..., description="Seconds")
    vesting_duration: int = Field(default=0, ge=0)
    allow_multiple_entries: bool = False


class PoolKeySpec(_ConfigModel):
    currency0: str
    currency1: str
    fee: int = Field(..., ge=0)
    tick_spacing: int
    hooks: str


class DevBuySpec(_ConfigModel):
    eth_amount: Decimal
    pool_key: PoolKeySpec | None = Field(
        default=None, description="WETH -> paired token pool, required for non-WETH pairs"
    )
    amount_out_min: Decimal = Field(default=Decimal(0), ge=0)
    recipient: str | None = None


class _TokenFields(_ConfigModel):
    name: str = Field(..., min_length=1)
    symbol: str = Field(..., min_length=1)
    image: str = ""
    chain_id: int = CHAIN_ID_BASE
    metadata: dict[str, Any] | None = None
    context: dict[str, Any] | None = Field(
        default=None, description='Defaults to {"interface": "SDK"}'
    )
    vanity: bool = False
    vanity_suffix: str = DEFAULT_VANITY_SUFFIX
    salt: str | None = Field(default=None, description="Custom bytes32 salt")
    expected_address: str | None = Field(
        default=None, description="Address the caller expects; verified after derivation"
    )


class V4LaunchConfig(_TokenFields):
    generation: Literal["v4"] = "v4"
    token_admin: str
    pool: PoolSpec = Field(default_factory=PoolSpec)
    fees: FeeSpec | None = None
    fee_preset: str | None = Field(
        default=None, description="StaticBasic, DynamicBasic or Dynamic3"
    )
    rewards: list[RewardRecipientSpec] | None = None
    vault: VaultSpec | None = None
    airdrop: AirdropSpec | None = None
    dev_buy: DevBuySpec | None = None


class V31PoolSpec(_ConfigModel):
    paired_token: str | None = None
    paired_token_decimals: int | None = Field(default=None, ge=0)
    initial_market_cap: float = 10


class V31VaultSpec(_ConfigModel):
    percentage: int = Field(default=0, ge=0, le=100)
    duration_in_days: int = Field(default=0, ge=0)


class V31DevBuySpec(_ConfigModel):
    eth_amount: Decimal = Field(default=Decimal(0), ge=0)
    amount_out_min: Decimal = Field(default=Decimal(0), ge=0)


class V31RewardsSpec(_ConfigModel):
    creator_reward: int = Field(default=40, ge=0, le=100, description="Percent")
    interface_reward: int | None = Field(
        default=None, ge=0, le=100, description="Percent; defaults to the remainder"
    )
    creator_admin: str | None = None
    creator_reward_recipient: str | None = None
    interface_admin: str | None = None
    interface_reward_recipient: str | None = None


class V31LaunchConfig(_TokenFields):
    generation: Literal["v3_1"] = "v3_1"
    pool: V31PoolSpec = Field(default_factory=V31PoolSpec)
    vault: V31VaultSpec = Field(default_factory=V31VaultSpec)
    dev_buy: V31DevBuySpec = Field(default_factory=V31DevBuySpec)
    rewards: V31RewardsSpec = Field(default_factory=V31RewardsSpec)


LaunchConfig = Annotated[V4LaunchConfig | V31LaunchConfig, Field(discriminator="generation")]

_LAUNCH_CONFIG_ADAPTER: TypeAdapter[V4LaunchConfig | V31LaunchConfig] = TypeAdapter(
    LaunchConfig
)
_GENERATION_TAGS = {"v4", "v3_1"}
_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


def _dotted(loc: tuple[Any, ...]) -> str:
    parts = list(loc)
    if parts and parts[0] in _GENERATION_TAGS:
        parts = parts[1:]
    # error locations carry the camelCase alias
    return ".".join(
        _CAMEL_BOUNDARY.sub("_", p).lower() if isinstance(p, str) else str(p)
        for p in parts
    ) or "generation"


def parse_launch_config(
    config: V4LaunchConfig | V31LaunchConfig | dict[str, Any],
) -> V4LaunchConfig | V31LaunchConfig:
    """Parse once into the generation's model; the first error keeps its field path."""
    if isinstance(config, V4LaunchConfig | V31LaunchConfig):
        return config
    try:
        return _LAUNCH_CONFIG_ADAPTER.validate_python(config)
    except pydantic.ValidationError as exc:
        first = exc.errors()[0]
        raise ValidationError(_dotted(first.get("loc", ())), first.get("msg", "invalid")) from exc
