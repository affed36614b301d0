CHAIN_ID_ETHEREUM = 1
CHAIN_ID_BASE = 8453
CHAIN_ID_BASE_SEPOLIA = 84532
CHAIN_ID_ARBITRUM = 42161
CHAIN_ID_BSC = 56
CHAIN_ID_UNICHAIN = 130
CHAIN_ID_ABSTRACT = 2741
CHAIN_ID_MONAD_TESTNET = 10143

CHAIN_CODE_TO_ID = {
    "base": CHAIN_ID_BASE,
    "base-sepolia": CHAIN_ID_BASE_SEPOLIA,
    "arbitrum": CHAIN_ID_ARBITRUM,
    "arbitrum-one": CHAIN_ID_ARBITRUM,
    "bsc": CHAIN_ID_BSC,
    "ethereum": CHAIN_ID_ETHEREUM,
    "mainnet": CHAIN_ID_ETHEREUM,
    "unichain": CHAIN_ID_UNICHAIN,
    "abstract": CHAIN_ID_ABSTRACT,
    "monad-testnet": CHAIN_ID_MONAD_TESTNET,
}

CHAIN_ID_TO_CODE: dict[int, str] = {
    v: k for k, v in CHAIN_CODE_TO_ID.items() if k not in ("arbitrum-one", "mainnet")
}
