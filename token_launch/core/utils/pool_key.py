from __future__ import annotations

from token_launch.core.constants import ZERO_ADDRESS
from token_launch.core.utils.addresses import checksum

PoolKeyTuple = tuple[str, str, int, int, str]

# Dev buys on a WETH pair swap directly and carry an empty key
ZERO_POOL_KEY: PoolKeyTuple = (ZERO_ADDRESS, ZERO_ADDRESS, 0, 0, ZERO_ADDRESS)


def sort_currencies(currency_a: str, currency_b: str) -> tuple[str, str]:
    a = checksum(currency_a, "currency0")
    b = checksum(currency_b, "currency1")
    return (a, b) if int(a, 16) < int(b, 16) else (b, a)


def build_pool_key(
    *,
    currency_a: str,
    currency_b: str,
    fee: int,
    tick_spacing: int,
    hooks: str,
) -> PoolKeyTuple:
    c0, c1 = sort_currencies(currency_a, currency_b)
    return (c0, c1, int(fee), int(tick_spacing), checksum(hooks, "hooks"))
