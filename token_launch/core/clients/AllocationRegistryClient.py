from __future__ import annotations

from typing import Any

import httpx
from loguru import logger

from token_launch.core.clients._http import request_json
from token_launch.core.clients.protocols import AllocationRegistryClientProtocol
from token_launch.core.config import get_allocation_registry_url, get_http_timeout
from token_launch.core.utils.merkle import AllocationTree

SERVICE = "allocation-registry"


class AllocationRegistryClient:
    """Off-chain index that serves airdrop proofs once a token is live."""

    def __init__(
        self,
        *,
        base_url: str | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.base_url = str(base_url or get_allocation_registry_url()).rstrip("/")
        self.client = client or httpx.AsyncClient(
            timeout=httpx.Timeout(get_http_timeout())
        )

    async def register(
        self,
        *,
        token_address: str,
        merkle_root: str,
        tree: dict[str, Any],
    ) -> bool:
        payload = {
            "tokenAddress": token_address,
            "merkleRoot": merkle_root,
            "tree": tree,
        }
        data = await request_json(
            self.client, SERVICE, "POST", f"{self.base_url}/airdrops", json=payload
        )
        if isinstance(data, dict) and "success" in data:
            return bool(data["success"])
        return True


async def register_allocation_tree(
    registry: AllocationRegistryClientProtocol,
    *,
    token_address: str,
    tree: AllocationTree,
) -> bool:
    """Best-effort registration. Failures are logged, never raised."""
    try:
        ok = await registry.register(
            token_address=token_address,
            merkle_root=tree.root,
            tree=tree.dump(),
        )
    except Exception as exc:
        logger.warning(f"Allocation tree registration failed for {token_address}: {exc}")
        return False
    if not ok:
        logger.warning(f"Allocation registry rejected tree for {token_address}")
    return ok
