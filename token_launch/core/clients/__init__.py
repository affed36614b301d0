from token_launch.core.clients.AllocationRegistryClient import (
    AllocationRegistryClient,
    register_allocation_tree,
)
from token_launch.core.clients.protocols import (
    AllocationRegistryClientProtocol,
    DeploymentExecutorProtocol,
    SaltSearchClientProtocol,
    SaltSearchResult,
)
from token_launch.core.clients.SaltSearchClient import SaltSearchClient

__all__ = [
    "AllocationRegistryClient",
    "AllocationRegistryClientProtocol",
    "DeploymentExecutorProtocol",
    "SaltSearchClient",
    "SaltSearchClientProtocol",
    "SaltSearchResult",
    "register_allocation_tree",
]
