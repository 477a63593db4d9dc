"""
API Initialization - Shutdown Module.

Stops the scheduler and closes Redis and database connections.
"""

import redis.asyncio as redis
from loguru import logger


async def shutdown_handler(redis_client: redis.Redis | None = None) -> None:
    """Handle graceful shutdown."""
    logger.info("Graceful shutdown initiated...")

    # Stop scheduler if running
    try:
        from jobs.scheduler import scheduler_instance
        if scheduler_instance and scheduler_instance.running:
            scheduler_instance.shutdown(wait=False)
            logger.info("Scheduler stopped")
    except Exception as e:
        logger.warning(f"Error stopping scheduler: {e}")

    if redis_client is not None:
        try:
            await redis_client.aclose()
            logger.info("Redis connection closed")
        except Exception as e:
            logger.warning(f"Error closing Redis: {e}")

    # Close database connections
    try:
        from helpnet.config.database import engine
        await engine.dispose()
        logger.info("Database connections closed")
    except Exception as e:
        logger.warning(f"Error closing database: {e}")

    logger.info("Graceful shutdown complete")
