"""
User repository.

Data access layer for User model. Addresses are compared lowercase.
"""

from typing import Any

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from helpnet.models.user import User
from helpnet.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """User repository with address-keyed lookups."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize user repository."""
        super().__init__(User, session)

    async def get_by_address(self, address: str) -> User | None:
        """
        Get user by wallet address (case-insensitive).

        Args:
            address: Wallet address

        Returns:
            User or None
        """
        return await self.get_by(address=address.lower())

    async def create_user(self, address: str, **data: Any) -> User:
        """
        Create user with a normalized address.

        Args:
            address: Wallet address
            **data: Remaining column values

        Returns:
            Created user
        """
        if "sponsor" in data and data["sponsor"]:
            data["sponsor"] = data["sponsor"].lower()
        return await self.create(address=address.lower(), **data)

    async def count_referrals(self, address: str) -> int:
        """
        Count users sponsored by address.

        Args:
            address: Sponsor wallet address

        Returns:
            Number of referred users
        """
        stmt = select(func.count(User.id)).where(
            func.lower(User.sponsor) == address.lower()
        )
        result = await self.session.execute(stmt)
        return result.scalar() or 0

    async def queue_rank(self, address: str) -> int:
        """
        1-based position of address among stored users (by insertion).

        Args:
            address: Wallet address

        Returns:
            Rank, or 0 if the address is not stored
        """
        addresses = await self.list_addresses()
        try:
            return addresses.index(address.lower()) + 1
        except ValueError:
            return 0

    async def list_addresses(self) -> list[str]:
        """
        List all stored addresses in insertion order.

        Returns:
            List of lowercase addresses
        """
        stmt = select(User.address).order_by(User.id)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def reset_queue_flags(self) -> int:
        """
        Clear queue membership for every user.

        Returns:
            Number of rows updated
        """
        stmt = update(User).values(is_in_queue=False, queue_position=0)
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount or 0
