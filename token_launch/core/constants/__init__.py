ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"
ZERO_HASH = "0x" + "00" * 32

BPS_DENOMINATOR = 10_000
TOKEN_DECIMALS = 18
# 100B tokens with 18 decimals
DEFAULT_SUPPLY = 100_000_000_000 * 10**TOKEN_DECIMALS
