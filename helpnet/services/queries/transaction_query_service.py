"""
Transaction history queries.
"""

from collections.abc import Callable
from typing import Any

from helpnet.models.enums import TokenSymbol, TransactionMethod
from helpnet.repositories.transaction_repository import TransactionRepository
from helpnet.services.queries.serializers import (
    DONATION_FIELDS,
    HELP_TRANSACTION_FIELDS,
    TRANSACTION_FIELDS,
    VOLUNTARY_DONATION_FIELDS,
    serialize_transaction,
)
from helpnet.validators.common import require_address


class TransactionQueryService:
    """Ordered (newest first) transaction listings."""

    def __init__(self, session_factory: Callable[[], Any]) -> None:
        self.session_factory = session_factory

    async def _list(
        self,
        fields: tuple[str, ...] = TRANSACTION_FIELDS,
        **filters: Any,
    ) -> list[dict[str, Any]]:
        async with self.session_factory() as session:
            rows = await TransactionRepository(session).list_transactions(**filters)
        return [serialize_transaction(tx, fields) for tx in rows]

    async def all_transactions(
        self, token: str | None = None, method: str | None = None
    ) -> list[dict[str, Any]]:
        """Every recorded transaction, optionally filtered by token/method."""
        return await self._list(token=token, methods=[method] if method else None)

    async def transactions_for(
        self,
        address: str | None,
        token: str | None = None,
        method: str | None = None,
    ) -> list[dict[str, Any]]:
        """Transactions sent from or to an address."""
        return await self._list(
            address=require_address(address),
            token=token,
            methods=[method] if method else None,
        )

    async def help_transactions(self, address: str | None) -> list[dict[str, Any]]:
        """HELP-denominated transactions of an address."""
        return await self._list(
            HELP_TRANSACTION_FIELDS,
            address=require_address(address, field="user address"),
            token=TokenSymbol.HELP.value,
        )

    async def user_donations(self, address: str | None) -> list[dict[str, Any]]:
        """Donations made by an address."""
        return await self._list(
            DONATION_FIELDS,
            address=require_address(address, field="user address"),
            methods=[TransactionMethod.DONATION_RECEIVED.value],
            sender_only=True,
        )

    async def voluntary_donations(self, address: str | None) -> list[dict[str, Any]]:
        """Voluntary donations made by an address."""
        return await self._list(
            VOLUNTARY_DONATION_FIELDS,
            address=require_address(address, field="user address"),
            methods=[TransactionMethod.VOLUNTARY_DONATION.value],
            sender_only=True,
        )
