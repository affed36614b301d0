from __future__ import annotations

import json
from typing import Any

from token_launch.core.constants import DEFAULT_SUPPLY, TOKEN_DECIMALS, ZERO_HASH
from token_launch.core.constants.deployments import ContractSchema
from token_launch.core.constants.tokens import WETH_ADDRESSES, get_known_token_decimals
from token_launch.core.deployment.models import V4LaunchConfig, V31LaunchConfig
from token_launch.core.errors import ValidationError
from token_launch.core.resolver import DeploymentAddressResolver, ResolvedAddress
from token_launch.core.utils.addresses import checksum, is_zero_address
from token_launch.core.utils.create2 import normalize_suffix, to_bytes32

DEFAULT_CONTEXT = {"interface": "SDK"}


def json_field(value: dict[str, Any] | None) -> str:
    if not value:
        return ""
    return json.dumps(value, separators=(",", ":"))


def require_admin(value: str | None, field: str) -> str:
    if not value:
        raise ValidationError(field, "address is required")
    address = checksum(value, field)
    if is_zero_address(address):
        raise ValidationError(field, "admin cannot be the zero address")
    return address


def resolve_paired_token(
    paired_token: str | None, paired_decimals: int | None, chain_id: int
) -> tuple[str, int]:
    if paired_token is None:
        weth = WETH_ADDRESSES.get(chain_id)
        if weth is None:
            raise ValidationError(
                "pool.paired_token", f"no default paired token for chain {chain_id}"
            )
        paired = checksum(weth, "pool.paired_token")
    else:
        paired = checksum(paired_token, "pool.paired_token")
    if paired_decimals is None:
        paired_decimals = get_known_token_decimals(chain_id, paired)
    return paired, TOKEN_DECIMALS if paired_decimals is None else paired_decimals


def token_constructor_args(
    config: V4LaunchConfig | V31LaunchConfig, token_admin: str
) -> tuple[Any, ...]:
    return (
        config.name,
        config.symbol,
        DEFAULT_SUPPLY,
        token_admin,
        config.image,
        json_field(config.metadata),
        json_field(config.context or DEFAULT_CONTEXT),
        int(config.chain_id),
    )


def resolve_salt(config: V4LaunchConfig | V31LaunchConfig) -> str:
    if config.salt is None:
        return ZERO_HASH
    if config.vanity:
        raise ValidationError("salt", "a custom salt cannot be combined with vanity")
    return "0x" + to_bytes32(config.salt, "salt").hex()


async def resolve_address(
    resolver: DeploymentAddressResolver,
    schema: ContractSchema,
    config: V4LaunchConfig | V31LaunchConfig,
    *,
    token_admin: str,
    constructor_args: tuple[Any, ...],
    salt: str,
) -> tuple[str, str | None, ResolvedAddress | None]:
    """(salt, init code hash, resolved address) for the token."""
    if config.vanity:
        normalize_suffix(config.vanity_suffix)
    if config.expected_address is not None:
        checksum(config.expected_address, "expected_address")

    code_hash = None
    if schema.token_bytecode is not None:
        code_hash = resolver.code_hash(
            schema.token_bytecode, schema.token_constructor_inputs, constructor_args
        )
    resolved = await resolver.resolve(
        deployer=schema.factory,
        token_admin=token_admin,
        code_hash=code_hash,
        salt=salt,
        vanity=config.vanity,
        suffix=config.vanity_suffix,
        expected_address=config.expected_address,
    )
    if resolved is not None:
        salt = resolved.salt
    return salt, code_hash, resolved
