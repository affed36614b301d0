from __future__ import annotations

import asyncio
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from loguru import logger

from token_launch.core.clients.protocols import SaltSearchClientProtocol
from token_launch.core.config import get_salt_search_timeout
from token_launch.core.constants.base import DEFAULT_VANITY_SUFFIX
from token_launch.core.errors import (
    AddressMismatch,
    CollaboratorError,
    StateError,
    ValidationError,
    VanitySuffixMismatch,
)
from token_launch.core.utils.addresses import checksum
from token_launch.core.utils.create2 import (
    address_has_suffix,
    admin_scoped_salt,
    compute_create2_address,
    encode_deploy_data,
    init_code_hash,
    normalize_suffix,
)


@dataclass(frozen=True)
class ResolvedAddress:
    address: str
    salt: str
    init_code_hash: str


class DeploymentAddressResolver:
    """Predicts factory CREATE2 addresses and checks anyone who claims one.

    ``predict`` is verification mode (salt known). ``search`` asks the salt
    solver for a salt giving a vanity suffix and re-derives the address before
    accepting it.
    """

    def __init__(
        self,
        salt_search: SaltSearchClientProtocol | None = None,
        *,
        timeout: float | None = None,
    ):
        self._salt_search = salt_search
        self.timeout = timeout

    @property
    def salt_search(self) -> SaltSearchClientProtocol:
        if self._salt_search is None:
            from token_launch.core.clients.SaltSearchClient import SaltSearchClient

            self._salt_search = SaltSearchClient()
        return self._salt_search

    @staticmethod
    def code_hash(
        bytecode: str | bytes,
        constructor_inputs: Sequence[dict[str, Any]],
        constructor_args: Sequence[Any],
    ) -> str:
        return init_code_hash(
            encode_deploy_data(bytecode, constructor_inputs, constructor_args)
        )

    def predict(
        self,
        *,
        deployer: str,
        token_admin: str,
        salt: str,
        code_hash: str,
        expected_address: str | None = None,
    ) -> ResolvedAddress:
        address = compute_create2_address(
            deployer, admin_scoped_salt(token_admin, salt), code_hash
        )
        if expected_address is not None:
            claimed = checksum(expected_address, "expected_address")
            if claimed != address:
                raise AddressMismatch(claimed, address)
        logger.debug(f"Predicted token address {address} for salt {salt}")
        return ResolvedAddress(address=address, salt=salt, init_code_hash=code_hash)

    async def search(
        self,
        *,
        deployer: str,
        token_admin: str,
        code_hash: str,
        suffix: str = DEFAULT_VANITY_SUFFIX,
        expected_address: str | None = None,
    ) -> ResolvedAddress:
        normalize_suffix(suffix)
        timeout = self.timeout if self.timeout is not None else get_salt_search_timeout()
        try:
            answer = await asyncio.wait_for(
                self.salt_search.find(
                    deployer=deployer,
                    init_code_hash=code_hash,
                    admin=token_admin,
                    suffix=suffix,
                ),
                timeout=timeout,
            )
        except TimeoutError as exc:
            raise CollaboratorError(
                "salt-search", f"no answer within {timeout:.0f}s"
            ) from exc

        salt = answer.get("salt")
        if not isinstance(salt, str):
            raise CollaboratorError("salt-search", "answer has no salt", retryable=False)
        try:
            resolved = self.predict(
                deployer=deployer,
                token_admin=token_admin,
                salt=salt,
                code_hash=code_hash,
            )
        except ValidationError as exc:
            raise CollaboratorError(
                "salt-search", f"answer has a malformed salt: {exc}", retryable=False
            ) from exc

        if not address_has_suffix(resolved.address, suffix):
            raise VanitySuffixMismatch(resolved.address, suffix)

        claimed = answer.get("address")
        if not claimed or str(claimed).lower() != resolved.address.lower():
            raise AddressMismatch(str(claimed), resolved.address)
        if expected_address is not None and (
            checksum(expected_address, "expected_address") != resolved.address
        ):
            raise AddressMismatch(expected_address, resolved.address)

        logger.debug(f"Salt search returned {resolved.address} (salt {salt})")
        return resolved

    async def resolve(
        self,
        *,
        deployer: str,
        token_admin: str,
        code_hash: str | None,
        salt: str,
        vanity: bool = False,
        suffix: str = DEFAULT_VANITY_SUFFIX,
        expected_address: str | None = None,
    ) -> ResolvedAddress | None:
        """Pick search or verification mode. Returns None when no bytecode is known."""
        if code_hash is None:
            if vanity:
                raise StateError(
                    "Vanity search needs the token creation bytecode for this generation"
                )
            if expected_address is not None:
                raise StateError(
                    "Cannot verify expected_address without the token creation bytecode"
                )
            return None
        if vanity:
            return await self.search(
                deployer=deployer,
                token_admin=token_admin,
                code_hash=code_hash,
                suffix=suffix,
                expected_address=expected_address,
            )
        return self.predict(
            deployer=deployer,
            token_admin=token_admin,
            salt=salt,
            code_hash=code_hash,
            expected_address=expected_address,
        )
