from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from token_launch.core.constants.deployments import Generation
from token_launch.core.types import ExtensionAllocation, Position, SplitEntry
from token_launch.core.utils.fees import EncodedFeePolicy
from token_launch.core.utils.merkle import AllocationTree


@dataclass(frozen=True)
class DeploymentPlan:
    """Fully resolved factory call for one launch attempt.

    ``args`` is ready for ``contract.encode_abi(function_name, args)``.
    ``predicted_address`` is None only when the catalogue has no token
    creation bytecode for the generation.
    """

    generation: Generation
    chain_id: int
    factory: str
    function_name: str
    abi: list[dict[str, Any]]
    args: tuple[Any, ...]
    value: int
    token_admin: str
    starting_tick: int
    tick_spacing: int
    paired_token: str
    positions: tuple[Position, ...]
    rewards: tuple[SplitEntry, ...]
    salt: str
    constructor_args: tuple[Any, ...]
    fee_policy: EncodedFeePolicy | None = None
    extensions: tuple[ExtensionAllocation, ...] = ()
    merkle_root: str | None = None
    init_code_hash: str | None = None
    predicted_address: str | None = None
    # Kept off-chain to serve proofs after launch; not part of the call
    airdrop_tree: AllocationTree | None = field(default=None, compare=False, repr=False)

    @property
    def extension_bps(self) -> int:
        return sum(e.bps for e in self.extensions)

    def summary(self) -> dict[str, Any]:
        return {
            "generation": self.generation.value,
            "chain_id": self.chain_id,
            "factory": self.factory,
            "function": self.function_name,
            "value": self.value,
            "token_admin": self.token_admin,
            "starting_tick": self.starting_tick,
            "paired_token": self.paired_token,
            "positions": [
                [p.tick_lower, p.tick_upper, p.position_bps] for p in self.positions
            ],
            "rewards": [[r.recipient, r.admin, r.bps] for r in self.rewards],
            "fee_module": self.fee_policy.module.value if self.fee_policy else None,
            "extensions": {e.name: e.bps for e in self.extensions},
            "merkle_root": self.merkle_root,
            "salt": self.salt,
            "predicted_address": self.predicted_address,
        }
