"""v4 factory: hook-based pools, multi-position locker and extensions."""

from __future__ import annotations

from eth_abi import encode as abi_encode
from loguru import logger

from token_launch.core.constants import BPS_DENOMINATOR, DEFAULT_SUPPLY
from token_launch.core.constants.base import (
    DEFAULT_STARTING_TICK,
    MAX_TICK,
    MIN_AIRDROP_LOCKUP_SECONDS,
    MIN_VAULT_LOCKUP_SECONDS,
)
from token_launch.core.constants.deployments import ContractSchema
from token_launch.core.constants.launch_abi import (
    DEVBUY_EXTENSION_TYPES,
    LOCKER_FEE_PREFERENCE_TYPES,
    VAULT_EXTENSION_TYPES,
)
from token_launch.core.constants.presets import FEE_CONFIGS, POOL_POSITIONS
from token_launch.core.constants.tokens import WETH_ADDRESSES, is_weth
from token_launch.core.deployment.common import (
    require_admin,
    resolve_address,
    resolve_paired_token,
    resolve_salt,
    token_constructor_args,
)
from token_launch.core.deployment.models import (
    AirdropSpec,
    DevBuySpec,
    DynamicFeeSpec,
    PoolSpec,
    StaticFeeSpec,
    V4LaunchConfig,
    VaultSpec,
)
from token_launch.core.deployment.plan import DeploymentPlan
from token_launch.core.errors import InvalidValuation, ValidationError
from token_launch.core.resolver import DeploymentAddressResolver
from token_launch.core.types import (
    ExtensionAllocation,
    FeeModule,
    Position,
    RewardToken,
    SplitEntry,
)
from token_launch.core.utils.addresses import checksum
from token_launch.core.utils.allocation import (
    SumPolicy,
    check_bps_shares,
    validate_position_set,
    validate_split_set,
)
from token_launch.core.utils.create2 import to_bytes32
from token_launch.core.utils.fees import (
    AdaptiveFee,
    EncodedFeePolicy,
    FlatFee,
    encode_fee_policy,
)
from token_launch.core.utils.merkle import AllocationTree, encode_airdrop_extension_data
from token_launch.core.utils.pool_key import ZERO_POOL_KEY, PoolKeyTuple, build_pool_key
from token_launch.core.utils.tick_math import (
    check_tick_bounds,
    positions_from_market_cap_ranges,
    round_tick_down,
    tick_from_market_cap,
)
from token_launch.core.utils.units import to_base_units, to_wei_eth

_REWARD_TOKENS = {
    "Both": RewardToken.BOTH,
    "Paired": RewardToken.PAIRED,
    "Token": RewardToken.TOKEN,
}


def starting_tick(pool: PoolSpec, paired_decimals: int) -> int:
    if pool.tick_if_token0 is not None and pool.starting_market_cap is not None:
        raise ValidationError(
            "pool", "set either tick_if_token0 or starting_market_cap, not both"
        )
    if pool.tick_if_token0 is not None:
        tick = check_tick_bounds(pool.tick_if_token0, "pool.tick_if_token0")
        if tick % pool.tick_spacing:
            raise ValidationError(
                "pool.tick_if_token0",
                f"tick {tick} is not a multiple of tick spacing {pool.tick_spacing}",
            )
        return tick
    if pool.starting_market_cap is not None:
        try:
            return tick_from_market_cap(
                pool.starting_market_cap,
                paired_decimals=paired_decimals,
                tick_spacing=pool.tick_spacing,
            ).tick
        except InvalidValuation as exc:
            raise InvalidValuation(exc.value, "pool.starting_market_cap") from exc
        except ValidationError as exc:
            raise ValidationError("pool.starting_market_cap", exc.message) from exc
    return DEFAULT_STARTING_TICK


def pool_positions(pool: PoolSpec, tick: int, paired_decimals: int) -> list[Position]:
    chosen = [
        name
        for name, value in (
            ("positions", pool.positions),
            ("position_preset", pool.position_preset),
            ("position_ranges", pool.position_ranges),
        )
        if value is not None
    ]
    if len(chosen) > 1:
        raise ValidationError("pool", f"set only one of {', '.join(chosen)}")

    if pool.positions is not None:
        positions = [
            Position(p.tick_lower, p.tick_upper, p.position_bps) for p in pool.positions
        ]
    elif pool.position_ranges is not None:
        try:
            positions = positions_from_market_cap_ranges(
                [
                    (r.start_market_cap, r.end_market_cap, r.position_bps)
                    for r in pool.position_ranges
                ],
                paired_decimals=paired_decimals,
                tick_spacing=pool.tick_spacing,
            )
        except ValidationError as exc:
            field = (exc.field or "ranges").replace("ranges", "pool.position_ranges", 1)
            raise ValidationError(field, exc.message) from exc
    elif pool.position_preset is not None or tick == DEFAULT_STARTING_TICK:
        name = pool.position_preset or "Standard"
        if name not in POOL_POSITIONS:
            raise ValidationError(
                "pool.position_preset",
                f"unknown preset {name!r}; expected one of {sorted(POOL_POSITIONS)}",
            )
        if tick != DEFAULT_STARTING_TICK:
            raise ValidationError(
                "pool.position_preset",
                f"presets assume starting tick {DEFAULT_STARTING_TICK}, got {tick}",
            )
        positions = list(POOL_POSITIONS[name])
    else:
        # single range from the custom starting tick to the top of the grid
        top = round_tick_down(MAX_TICK, pool.tick_spacing)
        positions = [Position(tick, top, BPS_DENOMINATOR)]

    validate_position_set(positions, tick_spacing=pool.tick_spacing, field="pool.positions")
    if not any(p.tick_lower == tick for p in positions):
        raise ValidationError(
            "pool.positions", f"one position must start at the starting tick {tick}"
        )
    for i, p in enumerate(positions):
        if p.tick_lower < tick:
            raise ValidationError(
                f"pool.positions.{i}",
                f"tick_lower {p.tick_lower} is below the starting tick {tick}",
            )
    return positions


def fee_policy(config: V4LaunchConfig) -> FlatFee | AdaptiveFee:
    if config.fees is not None and config.fee_preset is not None:
        raise ValidationError("fees", "set either fees or fee_preset, not both")
    spec = config.fees
    if isinstance(spec, StaticFeeSpec):
        return FlatFee(fee_bps=spec.fee_bps, paired_fee_bps=spec.paired_fee_bps)
    if isinstance(spec, DynamicFeeSpec):
        return AdaptiveFee(
            base_fee_bps=spec.base_fee_bps,
            max_fee_bps=spec.max_fee_bps,
            decay_bps=spec.decay_bps,
            reference_window_seconds=spec.reference_window_seconds,
            reset_window_seconds=spec.reset_window_seconds,
            reset_threshold_bps=spec.reset_threshold_bps,
            control_numerator=spec.control_numerator,
        )
    name = config.fee_preset or "StaticBasic"
    if name not in FEE_CONFIGS:
        raise ValidationError(
            "fee_preset", f"unknown preset {name!r}; expected one of {sorted(FEE_CONFIGS)}"
        )
    return FEE_CONFIGS[name]


def fee_hook(schema: ContractSchema, encoded: EncodedFeePolicy) -> str:
    hook = (
        schema.fee_static_hook
        if encoded.module is FeeModule.STATIC
        else schema.fee_dynamic_hook
    )
    if hook is None:
        raise ValidationError("fees", f"{encoded.module.value} fees are not available")
    return hook


def reward_split(
    config: V4LaunchConfig, schema: ContractSchema, token_admin: str
) -> list[SplitEntry]:
    if config.rewards is None:
        entries = [SplitEntry(recipient=token_admin, admin=token_admin, bps=BPS_DENOMINATOR)]
    else:
        entries = [
            SplitEntry(
                recipient=r.recipient,
                admin=r.admin,
                bps=r.bps,
                preference=_REWARD_TOKENS[r.token],
            )
            for r in config.rewards
        ]
    return validate_split_set(
        entries,
        policy=SumPolicy.EXACT,
        allow_duplicates=schema.allow_duplicate_rewards,
        field="rewards",
    )


def locker_data(rewards: list[SplitEntry]) -> bytes:
    return abi_encode(
        LOCKER_FEE_PREFERENCE_TYPES, [([int(r.preference) for r in rewards],)]
    )


def _require_module(address: str | None, field: str) -> str:
    if address is None:
        raise ValidationError(field, "extension is not deployed on this chain")
    return address


def vault_extension(
    vault: VaultSpec, schema: ContractSchema, token_admin: str
) -> ExtensionAllocation:
    if vault.percentage <= 0 or vault.percentage > schema.max_vault_percentage:
        raise ValidationError(
            "vault.percentage",
            f"must be between 1 and {schema.max_vault_percentage}, got {vault.percentage}",
        )
    if vault.lockup_duration < MIN_VAULT_LOCKUP_SECONDS:
        raise ValidationError(
            "vault.lockup_duration",
            f"must be at least {MIN_VAULT_LOCKUP_SECONDS} seconds (7 days)",
        )
    recipient = (
        checksum(vault.recipient, "vault.recipient") if vault.recipient else token_admin
    )
    return ExtensionAllocation(
        name="vault",
        extension=_require_module(schema.vault, "vault"),
        bps=vault.percentage * 100,
        msg_value=0,
        data=abi_encode(
            VAULT_EXTENSION_TYPES,
            [recipient, vault.lockup_duration, vault.vesting_duration],
        ),
    )


def airdrop_bps(amount: int, *, supply: int = DEFAULT_SUPPLY, field: str = "airdrop.amount") -> int:
    """Share of supply for an airdrop of ``amount`` base units, which must be exact."""
    if amount <= 0:
        raise ValidationError(field, "airdrop amount must be positive")
    bps = -(-amount * BPS_DENOMINATOR // supply)
    allocated = bps * supply // BPS_DENOMINATOR
    if amount * BPS_DENOMINATOR != bps * supply:
        raise ValidationError(
            field,
            f"precision error: {amount} requested but {allocated} would be allocated; "
            f"airdrops must be a multiple of {supply // BPS_DENOMINATOR} base units",
        )
    return bps


def airdrop_extension(
    airdrop: AirdropSpec, schema: ContractSchema
) -> tuple[ExtensionAllocation, str, AllocationTree | None]:
    if airdrop.lockup_duration < MIN_AIRDROP_LOCKUP_SECONDS:
        raise ValidationError(
            "airdrop.lockup_duration",
            f"must be at least {MIN_AIRDROP_LOCKUP_SECONDS} seconds (1 day)",
        )

    tree: AllocationTree | None = None
    if airdrop.entries is not None:
        if airdrop.merkle_root is not None or airdrop.amount is not None:
            raise ValidationError(
                "airdrop", "set either entries or merkle_root and amount, not both"
            )
        tree = AllocationTree(allow_multiple_entries=airdrop.allow_multiple_entries)
        tree.build(
            [(e.account, e.amount) for e in airdrop.entries], field="airdrop.entries"
        )
        root, amount = tree.root, tree.total_amount
    else:
        if airdrop.merkle_root is None or airdrop.amount is None:
            raise ValidationError(
                "airdrop", "entries, or merkle_root together with amount, are required"
            )
        try:
            amount = to_base_units(airdrop.amount)
        except ValueError as exc:
            raise ValidationError("airdrop.amount", str(exc)) from exc
        root = "0x" + to_bytes32(airdrop.merkle_root, "airdrop.merkle_root").hex()

    data = encode_airdrop_extension_data(
        root, airdrop.lockup_duration, airdrop.vesting_duration
    )
    extension = ExtensionAllocation(
        name="airdrop",
        extension=_require_module(schema.airdrop, "airdrop"),
        bps=airdrop_bps(amount),
        msg_value=0,
        data=data,
    )
    return extension, root, tree


def dev_buy_pool_key(
    dev_buy: DevBuySpec, chain_id: int, paired_token: str
) -> PoolKeyTuple:
    if is_weth(chain_id, paired_token):
        return ZERO_POOL_KEY
    if dev_buy.pool_key is None:
        raise ValidationError(
            "dev_buy.pool_key", "required when the paired token is not WETH"
        )
    key = build_pool_key(
        currency_a=dev_buy.pool_key.currency0,
        currency_b=dev_buy.pool_key.currency1,
        fee=dev_buy.pool_key.fee,
        tick_spacing=dev_buy.pool_key.tick_spacing,
        hooks=dev_buy.pool_key.hooks,
    )
    weth = WETH_ADDRESSES.get(chain_id, "").lower()
    if {key[0].lower(), key[1].lower()} != {weth, paired_token.lower()}:
        raise ValidationError(
            "dev_buy.pool_key", "pool key must pair WETH with the paired token"
        )
    return key


def dev_buy_extension(
    dev_buy: DevBuySpec, schema: ContractSchema, paired_token: str, token_admin: str
) -> ExtensionAllocation:
    if dev_buy.eth_amount <= 0:
        raise ValidationError("dev_buy.eth_amount", "dev buy amount must be positive")
    recipient = (
        checksum(dev_buy.recipient, "dev_buy.recipient") if dev_buy.recipient else token_admin
    )
    pool_key = dev_buy_pool_key(dev_buy, schema.chain_id, paired_token)
    return ExtensionAllocation(
        name="dev_buy",
        extension=_require_module(schema.devbuy, "dev_buy"),
        bps=0,
        msg_value=to_wei_eth(dev_buy.eth_amount),
        data=abi_encode(
            DEVBUY_EXTENSION_TYPES,
            [pool_key, to_wei_eth(dev_buy.amount_out_min), recipient],
        ),
    )


async def compile_v4(
    config: V4LaunchConfig,
    schema: ContractSchema,
    resolver: DeploymentAddressResolver,
) -> DeploymentPlan:
    token_admin = require_admin(config.token_admin, "token_admin")
    paired, paired_decimals = resolve_paired_token(
        config.pool.paired_token, config.pool.paired_token_decimals, config.chain_id
    )

    tick = starting_tick(config.pool, paired_decimals)
    positions = pool_positions(config.pool, tick, paired_decimals)

    encoded_fees = encode_fee_policy(fee_policy(config), field="fees")
    hook = fee_hook(schema, encoded_fees)

    rewards = reward_split(config, schema, token_admin)

    extensions: list[ExtensionAllocation] = []
    merkle_root: str | None = None
    tree: AllocationTree | None = None
    if config.vault is not None:
        extensions.append(vault_extension(config.vault, schema, token_admin))
    if config.airdrop is not None:
        airdrop, merkle_root, tree = airdrop_extension(config.airdrop, schema)
        extensions.append(airdrop)
    if config.dev_buy is not None:
        extensions.append(dev_buy_extension(config.dev_buy, schema, paired, token_admin))
    check_bps_shares(
        [e.bps for e in extensions],
        policy=SumPolicy.AT_MOST,
        total=schema.extension_cap_bps,
        field="extensions",
    )

    constructor_args = token_constructor_args(config, token_admin)
    salt, code_hash, resolved = await resolve_address(
        resolver,
        schema,
        config,
        token_admin=token_admin,
        constructor_args=constructor_args,
        salt=resolve_salt(config),
    )

    deployment_config = (
        (
            token_admin,
            config.name,
            config.symbol,
            bytes.fromhex(salt.removeprefix("0x")),
            config.image,
            constructor_args[5],
            constructor_args[6],
            int(config.chain_id),
        ),
        (hook, paired, tick, config.pool.tick_spacing, encoded_fees.pool_data),
        (
            schema.locker,
            [r.admin for r in rewards],
            [r.recipient for r in rewards],
            [r.bps for r in rewards],
            [p.tick_lower for p in positions],
            [p.tick_upper for p in positions],
            [p.position_bps for p in positions],
            locker_data(rewards),
        ),
        (_require_module(schema.mev_module, "mev_module"), b""),
        [e.as_abi_tuple() for e in extensions],
    )

    plan = DeploymentPlan(
        generation=schema.generation,
        chain_id=schema.chain_id,
        factory=schema.factory,
        function_name=schema.deploy_function,
        abi=schema.factory_abi,
        args=(deployment_config,),
        value=sum(e.msg_value for e in extensions),
        token_admin=token_admin,
        starting_tick=tick,
        tick_spacing=config.pool.tick_spacing,
        paired_token=paired,
        positions=tuple(positions),
        rewards=tuple(rewards),
        salt=salt,
        constructor_args=constructor_args,
        fee_policy=encoded_fees,
        extensions=tuple(extensions),
        merkle_root=merkle_root,
        init_code_hash=code_hash,
        predicted_address=resolved.address if resolved else None,
        airdrop_tree=tree,
    )
    logger.info(
        f"Compiled v4 launch of {config.symbol} on chain {schema.chain_id}: "
        f"tick {tick}, {len(positions)} positions, "
        f"{len(extensions)} extensions, address {plan.predicted_address}"
    )
    return plan
