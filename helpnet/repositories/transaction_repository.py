"""
Transaction repository.

Data access layer for recorded contract events.
"""

from collections.abc import Iterable

from sqlalchemy import and_, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from helpnet.models.enums import TransactionMethod
from helpnet.models.transaction import Transaction
from helpnet.repositories.base import BaseRepository


def normalize_tx_hash(tx_hash: str) -> str:
    """Lowercase hash with 0x prefix."""
    normalized = tx_hash.lower()
    if not normalized.startswith("0x"):
        normalized = f"0x{normalized}"
    return normalized


class TransactionRepository(BaseRepository[Transaction]):
    """Repository for recorded transactions."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository."""
        super().__init__(Transaction, session)

    async def exists_by_hash(self, tx_hash: str) -> bool:
        """
        Check if a row with this hash is already recorded.

        Args:
            tx_hash: Transaction hash

        Returns:
            True if recorded
        """
        return await self.exists(transaction_hash=normalize_tx_hash(tx_hash))

    async def has_donation_for(self, tx_hash: str, address: str) -> bool:
        """
        Check if a DonationReceived row for this recipient is recorded.

        Args:
            tx_hash: Transaction hash
            address: Donation recipient

        Returns:
            True if recorded
        """
        return await self.exists(
            transaction_hash=normalize_tx_hash(tx_hash),
            method=TransactionMethod.DONATION_RECEIVED.value,
            from_address=address.lower(),
        )


    async def list_transactions(
        self,
        address: str | None = None,
        token: str | None = None,
        methods: Iterable[str] | None = None,
        sender_only: bool = False,
    ) -> list[Transaction]:
        """
        List transactions ordered by date (newest first).

        Args:
            address: Match from/to address (only from if sender_only)
            token: Filter by token symbol
            methods: Filter by any of these methods
            sender_only: Match address against the sender only

        Returns:
            List of transactions
        """
        conditions = []

        if address:
            addr = address.lower()
            if sender_only:
                conditions.append(Transaction.from_address == addr)
            else:
                conditions.append(
                    or_(
                        Transaction.from_address == addr,
                        Transaction.to_address == addr,
                    )
                )
        if token:
            conditions.append(Transaction.token == token)
        if methods:
            conditions.append(Transaction.method.in_(list(methods)))

        query = select(Transaction).order_by(
            Transaction.date.desc(), Transaction.id.desc()
        )
        if conditions:
            query = query.where(and_(*conditions))

        result = await self.session.execute(query)
        return list(result.scalars().all())
