from __future__ import annotations

import httpx

from token_launch.core.clients._http import request_json
from token_launch.core.clients.protocols import SaltSearchResult
from token_launch.core.config import get_http_timeout, get_salt_search_url
from token_launch.core.errors import CollaboratorError

SERVICE = "salt-search"


class SaltSearchClient:
    """HTTP client for the remote vanity salt solver.

    The answer is untrusted; callers re-derive the address from the salt.
    """

    def __init__(
        self,
        *,
        base_url: str | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.base_url = str(base_url or get_salt_search_url()).rstrip("/")
        self.client = client or httpx.AsyncClient(
            timeout=httpx.Timeout(get_http_timeout())
        )

    async def find(
        self,
        *,
        deployer: str,
        init_code_hash: str,
        admin: str,
        suffix: str,
    ) -> SaltSearchResult:
        params = {
            "admin": admin,
            "deployer": deployer,
            "init_code_hash": init_code_hash,
            "suffix": suffix,
        }
        data = await request_json(
            self.client, SERVICE, "GET", f"{self.base_url}/find", params=params
        )
        if not isinstance(data, dict):
            raise CollaboratorError(
                SERVICE, "unexpected response type", retryable=False
            )
        address, salt = data.get("address"), data.get("salt")
        if not isinstance(address, str) or not isinstance(salt, str):
            raise CollaboratorError(
                SERVICE, "response is missing address or salt", retryable=False
            )
        return SaltSearchResult(address=address, salt=salt)
