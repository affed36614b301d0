"""CREATE2 address derivation for factory-deployed tokens.

The factory does not pass the caller's salt straight to CREATE2; it scopes it
to the token admin first (``keccak256(abi.encode(tokenAdmin, salt))``), so the
same salt yields different addresses for different admins.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from eth_abi import encode as abi_encode
from eth_utils import decode_hex, keccak, to_checksum_address

from token_launch.core.errors import ValidationError
from token_launch.core.utils.addresses import checksum


def _hex_bytes(value: str | bytes, field: str) -> bytes:
    if isinstance(value, bytes | bytearray):
        return bytes(value)
    try:
        return decode_hex(value)
    except ValueError as exc:
        raise ValidationError(field, f"invalid hex string {value!r}") from exc


def to_bytes32(value: str | bytes, field: str) -> bytes:
    raw = _hex_bytes(value, field)
    if len(raw) != 32:
        raise ValidationError(field, f"expected 32 bytes, got {len(raw)}")
    return raw


def encode_deploy_data(
    bytecode: str | bytes,
    constructor_inputs: Sequence[dict[str, Any]],
    args: Sequence[Any],
) -> bytes:
    """Creation bytecode followed by the ABI-encoded constructor arguments."""
    code = _hex_bytes(bytecode, "bytecode")
    if not code:
        raise ValidationError("bytecode", "creation bytecode is empty")
    types = [inp["type"] for inp in constructor_inputs]
    if len(types) != len(args):
        raise ValidationError(
            "constructor_args",
            f"expected {len(types)} constructor arguments, got {len(args)}",
        )
    return code + abi_encode(types, list(args))


def init_code_hash(deploy_data: str | bytes) -> str:
    return "0x" + keccak(_hex_bytes(deploy_data, "deploy_data")).hex()


def admin_scoped_salt(token_admin: str, salt: str | bytes) -> str:
    admin = checksum(token_admin, "token_admin")
    encoded = abi_encode(["address", "bytes32"], [admin, to_bytes32(salt, "salt")])
    return "0x" + keccak(encoded).hex()


def compute_create2_address(
    deployer: str, salt: str | bytes, code_hash: str | bytes
) -> str:
    deployer_bytes = decode_hex(checksum(deployer, "deployer"))
    digest = keccak(
        b"\xff"
        + deployer_bytes
        + to_bytes32(salt, "salt")
        + to_bytes32(code_hash, "init_code_hash")
    )
    return to_checksum_address(digest[12:])


def normalize_suffix(suffix: str) -> str:
    s = suffix.lower().removeprefix("0x")
    if not s or len(s) > 40 or any(c not in "0123456789abcdef" for c in s):
        raise ValidationError("suffix", f"invalid address suffix {suffix!r}")
    return s


def address_has_suffix(address: str, suffix: str) -> bool:
    return address.lower().endswith(normalize_suffix(suffix))
