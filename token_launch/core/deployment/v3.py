"""v3.1 factory: single full-range position and a fixed creator/interface split."""

from __future__ import annotations

from loguru import logger

from token_launch.core.constants import BPS_DENOMINATOR
from token_launch.core.constants.base import DEFAULT_TICK_SPACING, MAX_TICK, SECONDS_PER_DAY
from token_launch.core.constants.deployments import ContractSchema
from token_launch.core.constants.tokens import is_weth
from token_launch.core.deployment.common import (
    require_admin,
    resolve_address,
    resolve_paired_token,
    resolve_salt,
    token_constructor_args,
)
from token_launch.core.deployment.models import V31LaunchConfig
from token_launch.core.deployment.plan import DeploymentPlan
from token_launch.core.errors import InvalidValuation, ValidationError
from token_launch.core.resolver import DeploymentAddressResolver
from token_launch.core.types import Position, SplitEntry
from token_launch.core.utils.addresses import checksum
from token_launch.core.utils.allocation import (
    SumPolicy,
    check_bps_shares,
    percentage_to_bps,
    validate_position_set,
)
from token_launch.core.utils.tick_math import (
    round_tick_down,
    tick_from_market_cap,
    tick_from_market_cap_legacy,
)
from token_launch.core.utils.units import to_wei_eth

# Swap fee tier used for the initial buy; fixed for this generation
INITIAL_BUY_POOL_FEE = 10_000


def legacy_starting_tick(
    market_cap: float, *, chain_id: int, paired_token: str, paired_decimals: int
) -> int:
    try:
        if is_weth(chain_id, paired_token):
            return tick_from_market_cap_legacy(market_cap).tick
        return tick_from_market_cap(
            market_cap,
            paired_decimals=paired_decimals,
            tick_spacing=DEFAULT_TICK_SPACING,
        ).tick
    except InvalidValuation as exc:
        raise InvalidValuation(exc.value, "pool.initial_market_cap") from exc
    except ValidationError as exc:
        raise ValidationError("pool.initial_market_cap", exc.message) from exc


def reward_split(
    config: V31LaunchConfig, token_admin: str, requestor: str
) -> list[SplitEntry]:
    rewards = config.rewards
    interface_reward = (
        100 - rewards.creator_reward
        if rewards.interface_reward is None
        else rewards.interface_reward
    )
    entries = [
        SplitEntry(
            recipient=checksum(
                rewards.creator_reward_recipient or requestor,
                "rewards.creator_reward_recipient",
            ),
            admin=token_admin,
            bps=percentage_to_bps(rewards.creator_reward),
        ),
        SplitEntry(
            recipient=checksum(
                rewards.interface_reward_recipient or requestor,
                "rewards.interface_reward_recipient",
            ),
            admin=checksum(rewards.interface_admin or requestor, "rewards.interface_admin"),
            bps=percentage_to_bps(interface_reward),
        ),
    ]
    check_bps_shares([e.bps for e in entries], policy=SumPolicy.EXACT, field="rewards")
    return entries


def vault_config(config: V31LaunchConfig, schema: ContractSchema) -> tuple[int, int]:
    vault = config.vault
    if vault.percentage > schema.max_vault_percentage:
        raise ValidationError(
            "vault.percentage",
            f"must be at most {schema.max_vault_percentage}, got {vault.percentage}",
        )
    if vault.percentage and not vault.duration_in_days:
        raise ValidationError("vault.duration_in_days", "a vaulted supply needs a duration")
    if not vault.percentage:
        return 0, 0
    return vault.percentage, vault.duration_in_days * SECONDS_PER_DAY


async def compile_v3_1(
    config: V31LaunchConfig,
    schema: ContractSchema,
    resolver: DeploymentAddressResolver,
    requestor_address: str | None,
) -> DeploymentPlan:
    requestor = require_admin(requestor_address, "requestor_address")
    token_admin = require_admin(
        config.rewards.creator_admin or requestor, "rewards.creator_admin"
    )
    paired, paired_decimals = resolve_paired_token(
        config.pool.paired_token, config.pool.paired_token_decimals, config.chain_id
    )

    tick = legacy_starting_tick(
        config.pool.initial_market_cap,
        chain_id=config.chain_id,
        paired_token=paired,
        paired_decimals=paired_decimals,
    )
    position = Position(
        tick, round_tick_down(MAX_TICK, DEFAULT_TICK_SPACING), BPS_DENOMINATOR
    )
    try:
        validate_position_set([position], tick_spacing=DEFAULT_TICK_SPACING)
    except ValidationError as exc:
        raise ValidationError("pool.initial_market_cap", exc.message) from exc
    rewards = reward_split(config, token_admin, requestor)
    vault_percentage, vault_duration = vault_config(config, schema)
    if config.dev_buy.eth_amount < 0:
        raise ValidationError("dev_buy.eth_amount", "must be non-negative")

    constructor_args = token_constructor_args(config, token_admin)
    salt, code_hash, resolved = await resolve_address(
        resolver,
        schema,
        config,
        token_admin=token_admin,
        constructor_args=constructor_args,
        salt=resolve_salt(config),
    )

    creator, interface = rewards
    deployment_config = (
        (
            config.name,
            config.symbol,
            bytes.fromhex(salt.removeprefix("0x")),
            config.image,
            constructor_args[5],
            constructor_args[6],
            int(config.chain_id),
        ),
        (vault_percentage, vault_duration),
        (paired, tick),
        (INITIAL_BUY_POOL_FEE, to_wei_eth(config.dev_buy.amount_out_min)),
        (
            config.rewards.creator_reward,
            token_admin,
            creator.recipient,
            interface.admin,
            interface.recipient,
        ),
    )

    plan = DeploymentPlan(
        generation=schema.generation,
        chain_id=schema.chain_id,
        factory=schema.factory,
        function_name=schema.deploy_function,
        abi=schema.factory_abi,
        args=(deployment_config,),
        value=to_wei_eth(config.dev_buy.eth_amount),
        token_admin=token_admin,
        starting_tick=tick,
        tick_spacing=DEFAULT_TICK_SPACING,
        paired_token=paired,
        positions=(position,),
        rewards=tuple(rewards),
        salt=salt,
        constructor_args=constructor_args,
        init_code_hash=code_hash,
        predicted_address=resolved.address if resolved else None,
    )
    logger.info(
        f"Compiled v3.1 launch of {config.symbol} on chain {schema.chain_id}: "
        f"tick {tick}, creator reward {config.rewards.creator_reward}%, "
        f"address {plan.predicted_address}"
    )
    return plan
