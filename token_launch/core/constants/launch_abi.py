# Minimal ABIs for the token factory generations (deployToken only) and the
# token constructor shared by every generation.

TOKEN_CONSTRUCTOR_INPUTS = [
    {"name": "name_", "type": "string"},
    {"name": "symbol_", "type": "string"},
    {"name": "maxSupply_", "type": "uint256"},
    {"name": "admin_", "type": "address"},
    {"name": "image_", "type": "string"},
    {"name": "metadata_", "type": "string"},
    {"name": "context_", "type": "string"},
    {"name": "originatingChainId_", "type": "uint256"},
]

_V4_DEPLOYMENT_CONFIG_COMPONENTS = [
    {
        "name": "tokenConfig",
        "type": "tuple",
        "components": [
            {"name": "tokenAdmin", "type": "address"},
            {"name": "name", "type": "string"},
            {"name": "symbol", "type": "string"},
            {"name": "salt", "type": "bytes32"},
            {"name": "image", "type": "string"},
            {"name": "metadata", "type": "string"},
            {"name": "context", "type": "string"},
            {"name": "originatingChainId", "type": "uint256"},
        ],
    },
    {
        "name": "poolConfig",
        "type": "tuple",
        "components": [
            {"name": "hook", "type": "address"},
            {"name": "pairedToken", "type": "address"},
            {"name": "tickIfToken0IsClanker", "type": "int24"},
            {"name": "tickSpacing", "type": "int24"},
            {"name": "poolData", "type": "bytes"},
        ],
    },
    {
        "name": "lockerConfig",
        "type": "tuple",
        "components": [
            {"name": "locker", "type": "address"},
            {"name": "rewardAdmins", "type": "address[]"},
            {"name": "rewardRecipients", "type": "address[]"},
            {"name": "rewardBps", "type": "uint16[]"},
            {"name": "tickLower", "type": "int24[]"},
            {"name": "tickUpper", "type": "int24[]"},
            {"name": "positionBps", "type": "uint16[]"},
            {"name": "lockerData", "type": "bytes"},
        ],
    },
    {
        "name": "mevModuleConfig",
        "type": "tuple",
        "components": [
            {"name": "mevModule", "type": "address"},
            {"name": "mevModuleData", "type": "bytes"},
        ],
    },
    {
        "name": "extensionConfigs",
        "type": "tuple[]",
        "components": [
            {"name": "extension", "type": "address"},
            {"name": "msgValue", "type": "uint256"},
            {"name": "extensionBps", "type": "uint16"},
            {"name": "extensionData", "type": "bytes"},
        ],
    },
]

FACTORY_V4_ABI = [
    {
        "name": "deployToken",
        "type": "function",
        "stateMutability": "payable",
        "inputs": [
            {
                "name": "deploymentConfig",
                "type": "tuple",
                "components": _V4_DEPLOYMENT_CONFIG_COMPONENTS,
            }
        ],
        "outputs": [{"name": "tokenAddress", "type": "address"}],
    }
]

_V3_1_DEPLOYMENT_CONFIG_COMPONENTS = [
    {
        "name": "tokenConfig",
        "type": "tuple",
        "components": [
            {"name": "name", "type": "string"},
            {"name": "symbol", "type": "string"},
            {"name": "salt", "type": "bytes32"},
            {"name": "image", "type": "string"},
            {"name": "metadata", "type": "string"},
            {"name": "context", "type": "string"},
            {"name": "originatingChainId", "type": "uint256"},
        ],
    },
    {
        "name": "vaultConfig",
        "type": "tuple",
        "components": [
            {"name": "vaultPercentage", "type": "uint8"},
            {"name": "vaultDuration", "type": "uint256"},
        ],
    },
    {
        "name": "poolConfig",
        "type": "tuple",
        "components": [
            {"name": "pairedToken", "type": "address"},
            {"name": "tickIfToken0IsNewToken", "type": "int24"},
        ],
    },
    {
        "name": "initialBuyConfig",
        "type": "tuple",
        "components": [
            {"name": "pairedTokenPoolFee", "type": "uint24"},
            {"name": "pairedTokenSwapAmountOutMinimum", "type": "uint256"},
        ],
    },
    {
        "name": "rewardsConfig",
        "type": "tuple",
        "components": [
            {"name": "creatorReward", "type": "uint256"},
            {"name": "creatorAdmin", "type": "address"},
            {"name": "creatorRewardRecipient", "type": "address"},
            {"name": "interfaceAdmin", "type": "address"},
            {"name": "interfaceRewardRecipient", "type": "address"},
        ],
    },
]

FACTORY_V3_1_ABI = [
    {
        "name": "deployToken",
        "type": "function",
        "stateMutability": "payable",
        "inputs": [
            {
                "name": "deploymentConfig",
                "type": "tuple",
                "components": _V3_1_DEPLOYMENT_CONFIG_COMPONENTS,
            }
        ],
        "outputs": [
            {"name": "tokenAddress", "type": "address"},
            {"name": "positionId", "type": "uint256"},
        ],
    }
]

# Extension payloads (abi.encode argument lists).
VAULT_EXTENSION_TYPES = ["address", "uint256", "uint256"]
AIRDROP_EXTENSION_TYPES = ["bytes32", "uint256", "uint256"]
DEVBUY_EXTENSION_TYPES = ["(address,address,uint24,int24,address)", "uint128", "address"]
LOCKER_FEE_PREFERENCE_TYPES = ["(uint8[])"]
