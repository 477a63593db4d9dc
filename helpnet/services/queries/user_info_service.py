"""
User info service.

Read-through view of a participant: the stored row is created lazily and
refreshed from live contract state on every query.
"""

from collections.abc import Callable
from typing import Any

from loguru import logger
from sqlalchemy.exc import IntegrityError

from helpnet.config.constants import ZERO_ADDRESS
from helpnet.repositories.user_repository import UserRepository
from helpnet.services.blockchain.contract_reader import ContractReader
from helpnet.services.queries.serializers import serialize_user
from helpnet.utils.security import mask_address
from helpnet.validators.common import require_address


class UserInfoService:
    """User info and user listing."""

    def __init__(self, session_factory: Callable[[], Any], reader: ContractReader) -> None:
        self.session_factory = session_factory
        self.reader = reader

    async def get_user_info(self, address: str | None) -> dict[str, Any]:
        """
        Get user info, creating an unregistered row on first query.

        Args:
            address: Wallet address

        Returns:
            User DTO

        Raises:
            InvalidInputError: address is malformed
        """
        address = require_address(address)

        async with self.session_factory() as session:
            repo = UserRepository(session)
            user = await repo.get_by_address(address)

            if user is None:
                logger.info(f"[Users] Creating unregistered user {mask_address(address)}")
                entry_fee = await self.reader.entry_fee()
                try:
                    user = await repo.create_user(
                        address,
                        is_registered=False,
                        sponsor=ZERO_ADDRESS,
                        entry_fee=entry_fee,
                        current_level=0,
                    )
                    await session.commit()
                except IntegrityError:
                    # Created concurrently by the synchronizer
                    await session.rollback()
                    user = await repo.get_by_address(address)

            queue_info = await self.reader.queue_and_incentive_info(address)
            user.is_in_queue = queue_info.is_in_queue
            user.locked_amount = queue_info.locked_amount
            user.unlock_timestamp = queue_info.unlock_timestamp
            user.help_balance = await self.reader.help_balance(address)
            user.queue_position = (
                await repo.queue_rank(address) if user.is_in_queue else 0
            )
            user.referrals = await repo.count_referrals(address)

            await repo.save(user)
            await session.commit()

            return serialize_user(user)

    async def list_user_addresses(self) -> list[str]:
        """All stored addresses."""
        async with self.session_factory() as session:
            return await UserRepository(session).list_addresses()
