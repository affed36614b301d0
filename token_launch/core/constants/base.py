# Timeout constants (seconds)
DEFAULT_HTTP_TIMEOUT = 30.0
# The salt search brute-forces a suffix remotely and can take a while.
DEFAULT_SALT_SEARCH_TIMEOUT = 60.0

DEFAULT_SALT_SEARCH_URL = "https://vanity-v79d.onrender.com"
DEFAULT_ALLOCATION_REGISTRY_URL = "https://www.clanker.world/api"

DEFAULT_VANITY_SUFFIX = "0x4b07"

TICK_BASE = 1.0001
MIN_TICK = -887272
MAX_TICK = 887272
DEFAULT_TICK_SPACING = 200
DEFAULT_STARTING_TICK = -230_400

# Price per token (in paired units) for a market cap of 1 with a 100B supply.
MARKET_CAP_PRICE_FACTOR = 0.00000000001

# Fee hooks express fees in millionths (1_000_000 = 100%).
FEE_HOOK_UNITS_PER_BPS = 100

SECONDS_PER_DAY = 24 * 60 * 60
MIN_VAULT_LOCKUP_SECONDS = 7 * SECONDS_PER_DAY
MIN_AIRDROP_LOCKUP_SECONDS = SECONDS_PER_DAY

MANTISSA = 10**18
MAX_UINT256 = 2**256 - 1
