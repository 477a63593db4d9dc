"""
Application constants.

Centralized constants for the indexer.
"""

# ========================================================================
# TOKEN CONSTANTS
# ========================================================================

USDT_DECIMALS = 6
HELP_DECIMALS = 18
HELP_PRICE_DECIMALS = 8  # Price oracle value returned by getHelpPrice()

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"

# ========================================================================
# BLOCKCHAIN CONSTANTS
# ========================================================================

SEPOLIA_CHAIN_ID = 11155111

# Blockchain operation timeouts (in seconds)
BLOCKCHAIN_RPC_TIMEOUT = 30  # RPC provider HTTP timeout
TX_RECEIPT_TIMEOUT = 180.0  # Wait for admin transaction receipt
TX_SEND_TIMEOUT = 30.0  # send_raw_transaction

# ========================================================================
# SYNC CONSTANTS
# ========================================================================

MAX_BLOCK_RANGE = 500  # Max blocks per eth_getLogs call
COUNTER_LOOKBACK_BLOCKS = 100_000  # Cold start counter replay cap
SYNC_POLL_INTERVAL_SECONDS = 50

# Event whose fetch failure aborts a scan
FATAL_EVENT_FILTERS = frozenset({"UserRegistered"})

# ========================================================================
# API CONSTANTS
# ========================================================================

REQUESTER_HEADER = "x-requester"
