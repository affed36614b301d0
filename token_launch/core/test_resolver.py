from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock

import pytest

from token_launch.core.clients.protocols import SaltSearchResult
from token_launch.core.constants import ZERO_HASH
from token_launch.core.errors import (
    AddressMismatch,
    CollaboratorError,
    ConsistencyError,
    StateError,
    VanitySuffixMismatch,
)
from token_launch.core.resolver import DeploymentAddressResolver
from token_launch.core.utils.create2 import admin_scoped_salt, compute_create2_address

DEPLOYER = "0xE85A59c628F7d27878ACeB4bf3b35733630083a9"
ADMIN = "0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed"
CODE_HASH = "0x" + "ab" * 32


def _address_for(salt: str) -> str:
    return compute_create2_address(DEPLOYER, admin_scoped_salt(ADMIN, salt), CODE_HASH)


def _find_salt(suffix: str) -> tuple[str, str]:
    for i in range(10_000):
        salt = "0x" + i.to_bytes(32, "big").hex()
        address = _address_for(salt)
        if address.lower().endswith(suffix):
            return salt, address
    raise AssertionError("no salt found")


class FakeSaltSearch:
    """Returns a canned answer, optionally lying about the address."""

    def __init__(self, answer: SaltSearchResult, delay: float = 0.0):
        self.answer = answer
        self.delay = delay
        self.calls: list[dict[str, str]] = []

    async def find(self, *, deployer, init_code_hash, admin, suffix) -> SaltSearchResult:
        self.calls.append(
            {"deployer": deployer, "init_code_hash": init_code_hash, "admin": admin, "suffix": suffix}
        )
        if self.delay:
            await asyncio.sleep(self.delay)
        return self.answer


class TestPredict:
    def test_matches_formula(self):
        resolver = DeploymentAddressResolver()
        out = resolver.predict(
            deployer=DEPLOYER, token_admin=ADMIN, salt=ZERO_HASH, code_hash=CODE_HASH
        )
        assert out.address == _address_for(ZERO_HASH)
        assert out.salt == ZERO_HASH
        assert out.init_code_hash == CODE_HASH

    def test_deterministic(self):
        resolver = DeploymentAddressResolver()
        kwargs = {"deployer": DEPLOYER, "token_admin": ADMIN, "salt": ZERO_HASH, "code_hash": CODE_HASH}
        assert resolver.predict(**kwargs) == resolver.predict(**kwargs)

    def test_claimed_address_accepted(self):
        resolver = DeploymentAddressResolver()
        expected = _address_for(ZERO_HASH)
        out = resolver.predict(
            deployer=DEPLOYER,
            token_admin=ADMIN,
            salt=ZERO_HASH,
            code_hash=CODE_HASH,
            expected_address=expected.lower(),
        )
        assert out.address == expected

    def test_claimed_address_mismatch(self):
        resolver = DeploymentAddressResolver()
        with pytest.raises(AddressMismatch):
            resolver.predict(
                deployer=DEPLOYER,
                token_admin=ADMIN,
                salt=ZERO_HASH,
                code_hash=CODE_HASH,
                expected_address="0x" + "11" * 20,
            )


class TestSearch:
    @pytest.mark.asyncio
    async def test_accepts_verified_answer(self):
        salt, address = _find_salt("7")
        fake = FakeSaltSearch({"address": address, "salt": salt})
        resolver = DeploymentAddressResolver(fake)

        out = await resolver.search(
            deployer=DEPLOYER, token_admin=ADMIN, code_hash=CODE_HASH, suffix="0x7"
        )
        assert out.address == address
        assert out.salt == salt
        assert fake.calls == [
            {"deployer": DEPLOYER, "init_code_hash": CODE_HASH, "admin": ADMIN, "suffix": "0x7"}
        ]

    @pytest.mark.asyncio
    async def test_rejects_answer_without_suffix(self):
        address = _address_for(ZERO_HASH)
        wrong_suffix = "0" if not address.lower().endswith("0") else "1"
        # the solver claims success with a salt whose address does not match
        fake = FakeSaltSearch({"address": address, "salt": ZERO_HASH})
        resolver = DeploymentAddressResolver(fake)

        with pytest.raises(ConsistencyError) as exc_info:
            await resolver.search(
                deployer=DEPLOYER, token_admin=ADMIN, code_hash=CODE_HASH, suffix=wrong_suffix
            )
        assert isinstance(exc_info.value, VanitySuffixMismatch)

    @pytest.mark.asyncio
    async def test_rejects_wrong_claimed_address(self):
        salt, _address = _find_salt("7")
        fake = FakeSaltSearch({"address": "0x" + "22" * 19 + "27", "salt": salt})
        resolver = DeploymentAddressResolver(fake)

        with pytest.raises(AddressMismatch):
            await resolver.search(
                deployer=DEPLOYER, token_admin=ADMIN, code_hash=CODE_HASH, suffix="7"
            )

    @pytest.mark.asyncio
    async def test_timeout_is_collaborator_error(self):
        salt, address = _find_salt("7")
        fake = FakeSaltSearch({"address": address, "salt": salt}, delay=1.0)
        resolver = DeploymentAddressResolver(fake, timeout=0.01)

        with pytest.raises(CollaboratorError, match="no answer"):
            await resolver.search(
                deployer=DEPLOYER, token_admin=ADMIN, code_hash=CODE_HASH, suffix="7"
            )

    @pytest.mark.asyncio
    async def test_transport_error_not_retried(self):
        client = AsyncMock()
        client.find = AsyncMock(side_effect=CollaboratorError("salt-search", "boom"))
        resolver = DeploymentAddressResolver(client)

        with pytest.raises(CollaboratorError):
            await resolver.search(
                deployer=DEPLOYER, token_admin=ADMIN, code_hash=CODE_HASH, suffix="7"
            )
        assert client.find.await_count == 1

    @pytest.mark.asyncio
    async def test_malformed_salt(self):
        fake = FakeSaltSearch({"address": "0x" + "22" * 20, "salt": "0x1234"})
        resolver = DeploymentAddressResolver(fake)
        with pytest.raises(CollaboratorError, match="malformed"):
            await resolver.search(
                deployer=DEPLOYER, token_admin=ADMIN, code_hash=CODE_HASH, suffix="7"
            )


class TestResolve:
    @pytest.mark.asyncio
    async def test_without_bytecode_returns_none(self):
        resolver = DeploymentAddressResolver()
        out = await resolver.resolve(
            deployer=DEPLOYER, token_admin=ADMIN, code_hash=None, salt=ZERO_HASH
        )
        assert out is None

    @pytest.mark.asyncio
    async def test_vanity_without_bytecode_is_state_error(self):
        resolver = DeploymentAddressResolver(FakeSaltSearch({"address": "", "salt": ""}))
        with pytest.raises(StateError):
            await resolver.resolve(
                deployer=DEPLOYER, token_admin=ADMIN, code_hash=None, salt=ZERO_HASH, vanity=True
            )

    @pytest.mark.asyncio
    async def test_verification_mode(self):
        resolver = DeploymentAddressResolver()
        out = await resolver.resolve(
            deployer=DEPLOYER, token_admin=ADMIN, code_hash=CODE_HASH, salt=ZERO_HASH
        )
        assert out is not None
        assert out.address == _address_for(ZERO_HASH)
