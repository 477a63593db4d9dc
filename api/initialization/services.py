"""
API Initialization - Services Module.

Builds the RPC selector, contract reader, synchronizer and read services
from settings.
"""

import redis.asyncio as redis
from loguru import logger

from api.container import Services
from helpnet.config.database import async_session_maker
from helpnet.config.settings import settings
from helpnet.services.blockchain import ContractReader, RpcEndpointSelector
from helpnet.services.blockchain.admin_operations import AdminOperations
from helpnet.services.queries import (
    ContractStatsService,
    TransactionQueryService,
    UserInfoService,
)
from helpnet.services.sync import BlockRangeScanner, CounterCache, Synchronizer
from helpnet.utils.redis_utils import get_redis_client, get_redis_url_masked
from helpnet.utils.security import mask_address


def validate_environment() -> None:
    """Log configuration that is set but looks like a placeholder."""
    if "your_" in settings.database_url.lower():
        logger.error("DATABASE_URL is not properly configured")
    if "your_" in settings.rpc_url.lower() or "your_" in settings.rpc_url_alternative.lower():
        logger.error("RPC_URL / RPC_URL_ALTERNATIVE are not properly configured")


async def initialize_all_services() -> tuple[Services, redis.Redis]:
    """
    Construct all services.

    Returns:
        Tuple of (Services, redis client)
    """
    validate_environment()

    selector = RpcEndpointSelector(
        settings.rpc_url,
        settings.rpc_url_alternative,
        settings.expected_chain_id,
    )
    reader = ContractReader(selector, settings.contract_address)
    logger.info(f"Contract initialized at address: {mask_address(settings.contract_address)}")
    logger.info(f"Owner wallet: {mask_address(settings.owner_address)}")

    redis_client = await get_redis_client()
    logger.info(f"Counter cache: {get_redis_url_masked()}")

    synchronizer = Synchronizer(
        reader=reader,
        scanner=BlockRangeScanner(reader, max_block_range=settings.max_block_range),
        counter_cache=CounterCache(redis_client, prefix=settings.counter_cache_prefix),
        session_factory=async_session_maker,
        deployment_block=settings.contract_deployment_block,
        owner_address=settings.owner_address,
        counter_lookback_blocks=settings.counter_lookback_blocks,
    )

    services = Services(
        users=UserInfoService(async_session_maker, reader),
        transactions=TransactionQueryService(async_session_maker),
        stats=ContractStatsService(reader, synchronizer, settings.owner_address),
        admin=AdminOperations(reader, settings.owner_private_key, async_session_maker),
        synchronizer=synchronizer,
    )
    logger.info("Services initialized successfully")
    return services, redis_client
