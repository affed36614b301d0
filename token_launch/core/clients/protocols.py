from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, TypedDict

if TYPE_CHECKING:
    from token_launch.core.deployment.plan import DeploymentPlan


class SaltSearchResult(TypedDict):
    address: str
    salt: str


class SaltSearchClientProtocol(Protocol):
    async def find(
        self,
        *,
        deployer: str,
        init_code_hash: str,
        admin: str,
        suffix: str,
    ) -> SaltSearchResult: ...


class AllocationRegistryClientProtocol(Protocol):
    async def register(
        self,
        *,
        token_address: str,
        merkle_root: str,
        tree: dict[str, Any],
    ) -> bool: ...


class DeploymentExecutorProtocol(Protocol):
    """Sends a compiled plan to the chain and returns the transaction hash."""

    async def submit(self, plan: DeploymentPlan) -> str: ...
