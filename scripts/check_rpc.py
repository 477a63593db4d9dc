#!/usr/bin/env python3
"""Check both RPC endpoints and the contract views."""

import asyncio
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from loguru import logger  # noqa: E402

from helpnet.config.settings import settings  # noqa: E402
from helpnet.services.blockchain import (  # noqa: E402
    ContractReader,
    RpcEndpointSelector,
)

logger.remove()
logger.add(sys.stderr, level="INFO")


async def check_rpc() -> None:
    """Acquire a verified connection and read a few contract values."""
    selector = RpcEndpointSelector(
        settings.rpc_url,
        settings.rpc_url_alternative,
        settings.expected_chain_id,
    )
    reader = ContractReader(selector, settings.contract_address)

    logger.info(f"Block: {await reader.block_number()}")
    logger.info(f"Using fallback: {selector.using_fallback}")
    logger.info(f"Entry fee: {await reader.entry_fee()} USDT")
    logger.info(f"HELP price: {await reader.help_price()}")
    tokens = await reader.token_addresses()
    logger.info(f"USDT: {tokens.usdt}, HELP: {tokens.help}")


if __name__ == "__main__":
    asyncio.run(check_rpc())
