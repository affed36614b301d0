from __future__ import annotations

from token_launch.core.constants.chains import (
    CHAIN_ID_ARBITRUM,
    CHAIN_ID_BASE,
    CHAIN_ID_BASE_SEPOLIA,
    CHAIN_ID_BSC,
    CHAIN_ID_ETHEREUM,
    CHAIN_ID_UNICHAIN,
)

WETH_ADDRESSES: dict[int, str] = {
    CHAIN_ID_ETHEREUM: "0xC02aaA39b223FE8D0A0e5C4F27eAD9083C756Cc2",
    CHAIN_ID_BASE: "0x4200000000000000000000000000000000000006",
    CHAIN_ID_BASE_SEPOLIA: "0x4200000000000000000000000000000000000006",
    CHAIN_ID_ARBITRUM: "0x82aF49447D8a07e3bd95BD0d56f35241523fBab1",
    CHAIN_ID_UNICHAIN: "0x4200000000000000000000000000000000000006",
    # WBNB
    CHAIN_ID_BSC: "0xbb4CdB9CBd36B01bD1cBaEBF2De08d9173bc095c",
}

# Avoids an RPC round trip for the common paired tokens.
KNOWN_TOKEN_DECIMALS: dict[int, dict[str, int]] = {
    CHAIN_ID_ARBITRUM: {
        "0x2f2a2543b76a4166549f7aab2e75bef0aefc5b0f": 8,  # WBTC
        "0x82af49447d8a07e3bd95bd0d56f35241523fbab1": 18,  # WETH
        "0xaf88d065e77c8cc2239327c5edb3a432268e5831": 6,  # USDC
        "0xfd086bc7cd5c481dcc9c85ebe478a1c0b69fcbb9": 6,  # USDT
    },
    CHAIN_ID_BASE: {
        "0x4200000000000000000000000000000000000006": 18,  # WETH
        "0xcbb7c0000ab88b473b1f5afd9ef808440eed33bf": 8,  # cbBTC
        "0x833589fcd6edb6e08f4c7c32d4f71b54bda02913": 6,  # USDC
    },
    CHAIN_ID_BASE_SEPOLIA: {
        "0x4200000000000000000000000000000000000006": 18,  # WETH
    },
    CHAIN_ID_BSC: {
        "0xbb4cdb9cbd36b01bd1cbaebf2de08d9173bc095c": 18,  # WBNB
        "0x55d398326f99059ff775485246999027b3197955": 18,  # USDT (BSC-peg)
    },
}


def get_known_token_decimals(chain_id: int, token_address: str) -> int | None:
    return KNOWN_TOKEN_DECIMALS.get(int(chain_id), {}).get(str(token_address).lower())


def is_weth(chain_id: int, token_address: str) -> bool:
    weth = WETH_ADDRESSES.get(int(chain_id))
    return weth is not None and weth.lower() == str(token_address).lower()
