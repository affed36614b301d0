from __future__ import annotations

from eth_utils import is_address, to_checksum_address

from token_launch.core.constants import ZERO_ADDRESS
from token_launch.core.errors import InvalidAddress


def checksum(value: object, field: str | None = None) -> str:
    """Validate a 20-byte hex address and return its EIP-55 form."""
    if not isinstance(value, str) or not is_address(value):
        raise InvalidAddress(field, value)
    return to_checksum_address(value)


def is_zero_address(address: str) -> bool:
    return str(address).lower() == ZERO_ADDRESS
