"""Factory generations and their per-chain contract addresses.

Generations are not ABI compatible with each other. The token creation
bytecode is not bundled; supply it through ``artifacts.token_bytecode`` in the
config (see ``load_catalogue``) to enable address prediction.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

from eth_utils import decode_hex
from loguru import logger

from token_launch.core.config import get_token_bytecode_paths
from token_launch.core.constants.base import DEFAULT_TICK_SPACING
from token_launch.core.constants.chains import CHAIN_ID_BASE, CHAIN_ID_BASE_SEPOLIA
from token_launch.core.constants.launch_abi import (
    FACTORY_V3_1_ABI,
    FACTORY_V4_ABI,
    TOKEN_CONSTRUCTOR_INPUTS,
)
from token_launch.core.errors import SchemaNotFound, ValidationError


class Generation(str, Enum):
    V3_1 = "v3_1"
    V4 = "v4"


@dataclass(frozen=True)
class ContractSchema:
    generation: Generation
    chain_id: int
    factory: str
    factory_abi: list[dict[str, Any]]
    locker: str
    vault: str | None = None
    airdrop: str | None = None
    devbuy: str | None = None
    mev_module: str | None = None
    fee_locker: str | None = None
    fee_static_hook: str | None = None
    fee_dynamic_hook: str | None = None
    token_constructor_inputs: list[dict[str, Any]] = field(
        default_factory=lambda: list(TOKEN_CONSTRUCTOR_INPUTS)
    )
    token_bytecode: bytes | None = None
    deploy_function: str = "deployToken"
    tick_spacing: int = DEFAULT_TICK_SPACING
    # Max share of supply the extensions may take together
    extension_cap_bps: int = 0
    max_vault_percentage: int = 30
    allow_duplicate_rewards: bool = False


V4_SCHEMAS = [
    ContractSchema(
        generation=Generation.V4,
        chain_id=CHAIN_ID_BASE,
        factory="0xE85A59c628F7d27878ACeB4bf3b35733630083a9",
        factory_abi=FACTORY_V4_ABI,
        locker="0x29d17C1A8D851d7d4cA97FAe97AcAdb398D9cCE0",
        vault="0x8E845EAd15737bF71904A30BdDD3aEE76d6ADF6C",
        airdrop="0x56Fa0Da89eD94822e46734e736d34Cab72dF344F",
        devbuy="0x1331f0788F9c08C8F38D52c7a1152250A9dE00be",
        mev_module="0xE143f9872A33c955F23cF442BB4B1EFB3A7402A2",
        fee_locker="0xF3622742b1E446D92e45E22923Ef11C2fcD55D68",
        fee_static_hook="0xDd5EeaFf7BD481AD55Db083062b13a3cdf0A68CC",
        fee_dynamic_hook="0x34a45c6B61876d739400Bd71228CbcbD4F53E8cC",
        extension_cap_bps=9_000,
        max_vault_percentage=90,
        allow_duplicate_rewards=True,
    ),
    ContractSchema(
        generation=Generation.V4,
        chain_id=CHAIN_ID_BASE_SEPOLIA,
        factory="0xE85A59c628F7d27878ACeB4bf3b35733630083a9",
        factory_abi=FACTORY_V4_ABI,
        locker="0x33e2Eda238edcF470309b8c6D228986A1204c8f9",
        vault="0xcC80d1226F899a78fC2E459a1500A13C373CE0A5",
        airdrop="0x29d17C1A8D851d7d4cA97FAe97AcAdb398D9cCE0",
        devbuy="0x691f97752E91feAcD7933F32a1FEdCeDae7bB59c",
        mev_module="0x71DB365E93e170ba3B053339A917c11024e7a9d4",
        fee_locker="0x42A95190B4088C88Dd904d930c79deC1158bF09D",
        fee_static_hook="0x3eC2a26b6eF16c288561692AE8D9681fa773A8cc",
        fee_dynamic_hook="0xE63b0A59100698f379F9B577441A561bAF9828cc",
        extension_cap_bps=9_000,
        max_vault_percentage=90,
        allow_duplicate_rewards=True,
    ),
]

V3_1_SCHEMAS = [
    ContractSchema(
        generation=Generation.V3_1,
        chain_id=CHAIN_ID_BASE,
        factory="0x2A787b2362021cC3eEa3C24C4748a6cD5B687382",
        factory_abi=FACTORY_V3_1_ABI,
        locker="0x33e2Eda238edcF470309b8c6D228986A1204c8f9",
        vault="0x42A95190B4088C88Dd904d930c79deC1158bF09D",
        max_vault_percentage=30,
    ),
]


class ContractCatalogue:
    """Read-only (generation, chain id) -> ContractSchema table."""

    def __init__(self, schemas: list[ContractSchema]):
        self._schemas: dict[tuple[Generation, int], ContractSchema] = {
            (s.generation, s.chain_id): s for s in schemas
        }

    def __iter__(self):
        return iter(self._schemas.values())

    def __len__(self) -> int:
        return len(self._schemas)

    def get(self, generation: Generation | str, chain_id: int) -> ContractSchema:
        try:
            gen = Generation(generation)
        except ValueError as exc:
            raise SchemaNotFound(str(generation), int(chain_id)) from exc
        schema = self._schemas.get((gen, int(chain_id)))
        if schema is None:
            raise SchemaNotFound(gen.value, int(chain_id))
        return schema

    def chains(self, generation: Generation | str) -> list[int]:
        gen = Generation(generation)
        return sorted(cid for g, cid in self._schemas if g == gen)

    def with_token_bytecode(
        self, generation: Generation | str, bytecode: str | bytes
    ) -> ContractCatalogue:
        """Copy of the catalogue with creation bytecode set for every chain of a generation."""
        gen = Generation(generation)
        code = bytecode if isinstance(bytecode, bytes) else decode_hex(bytecode.strip())
        if not code:
            raise ValidationError("bytecode", "creation bytecode is empty")
        return ContractCatalogue(
            [
                dataclasses.replace(s, token_bytecode=code) if s.generation == gen else s
                for s in self
            ]
        )


CATALOGUE = ContractCatalogue([*V4_SCHEMAS, *V3_1_SCHEMAS])


def load_catalogue(base: ContractCatalogue = CATALOGUE) -> ContractCatalogue:
    """Base catalogue plus any token bytecode artifacts named in the config."""
    catalogue = base
    for generation, path in get_token_bytecode_paths().items():
        p = Path(path)
        if not p.exists():
            logger.warning(f"Token bytecode for {generation} not found at {p}")
            continue
        catalogue = catalogue.with_token_bytecode(generation, p.read_text())
        logger.debug(f"Loaded {generation} token bytecode from {p}")
    return catalogue
