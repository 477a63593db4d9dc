"""
Counter cache.

Stores the four aggregate totals in Redis without expiry so that a restart
resumes from the last checkpoint instead of replaying history.
"""

from decimal import Decimal, InvalidOperation

import redis.asyncio as redis
from loguru import logger

from helpnet.services.sync.counters import AggregateCounters

TOTAL_USERS_KEY = "totalUsers"
TOTAL_DONATIONS_KEY = "totalDonations"
TOTAL_VOLUNTARY_DONATIONS_KEY = "totalVoluntaryDonations"
TOTAL_INCENTIVES_KEY = "totalIncentives"

COUNTER_KEYS = (
    TOTAL_USERS_KEY,
    TOTAL_DONATIONS_KEY,
    TOTAL_VOLUNTARY_DONATIONS_KEY,
    TOTAL_INCENTIVES_KEY,
)


class CounterCache:
    """Redis-backed store of AggregateCounters."""

    def __init__(self, redis_client: redis.Redis, prefix: str = "") -> None:
        """
        Initialize cache.

        Args:
            redis_client: Redis client (decode_responses=True)
            prefix: Optional key prefix
        """
        self.redis = redis_client
        self.prefix = prefix

    def _key(self, name: str) -> str:
        return f"{self.prefix}{name}"

    async def load(self) -> AggregateCounters | None:
        """
        Load counters.

        Returns:
            Counters, or None unless all four keys are present and valid
        """
        values = await self.redis.mget([self._key(name) for name in COUNTER_KEYS])
        if any(value is None for value in values):
            return None

        users, donations, voluntary, incentives = values
        try:
            return AggregateCounters(
                total_users=int(Decimal(users)),
                total_donations=Decimal(donations),
                total_voluntary_donations=Decimal(voluntary),
                total_incentives=Decimal(incentives),
            )
        except (InvalidOperation, ValueError) as e:
            logger.warning(f"[CounterCache] Ignoring corrupt cached counters: {e}")
            return None

    async def store(self, counters: AggregateCounters) -> None:
        """Persist counters (no TTL)."""
        await self.redis.mset(
            {
                self._key(TOTAL_USERS_KEY): str(counters.total_users),
                self._key(TOTAL_DONATIONS_KEY): str(counters.total_donations),
                self._key(TOTAL_VOLUNTARY_DONATIONS_KEY): str(
                    counters.total_voluntary_donations
                ),
                self._key(TOTAL_INCENTIVES_KEY): str(counters.total_incentives),
            }
        )
