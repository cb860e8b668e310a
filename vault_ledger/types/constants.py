# vault_ledger/types/constants.py

from decimal import Decimal

from .new import EvmAddress


ZERO_ADDRESS = EvmAddress("0x0000000000000000000000000000000000000000")
VAULT_ADDRESS = EvmAddress("0xba12222222228d8ba445958a75a0704d566bf2c8")

# Singleton aggregate holding protocol-wide counters
VAULT_ID = "2"

ZERO_BD = Decimal(0)
ONE_BD = Decimal(1)

SHARE_TOKEN_DECIMALS = 18
DEFAULT_TOKEN_DECIMALS = 18
DEFAULT_FX_ORACLE_DECIMALS = 8
FX_PRICE_DECIMALS = 8

SECONDS_PER_DAY = 24 * 60 * 60

# XAU/USD feeds quote per troy ounce; the tracked gold token is priced per gram
PRECIOUS_METAL_TOKEN = EvmAddress("0xc8bb8eda94931ca2f20ef43ea7dbd58e68400400")
TROY_OUNCE_IN_GRAMS = 3110347680  # 31.1034768 * 1e8
TROY_OUNCE_MULTIPLIER = 100000000  # 1 * 1e8

# keccak256 of the curated signal function names
SET_SWAP_ENABLED_SIGNAL = "0xe84220e19c54dd2a96deb4cb59ea58e10e36ae2e5c0887f3af0a1ac8e04b0e29"
SET_POOL_TYPE_SIGNAL = "0x23462a935a3b72f9098a1e3b21d6506d4a63139cb3b4c372a5df6fdde64cf80d"
