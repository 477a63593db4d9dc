"""
Event reconciler.

Applies one decoded event to the relational store: create-or-update of the
affected user, then an idempotent insert of the transaction row keyed by
transaction hash. User fields are overwritten from the event payload, never
accumulated.
"""

from collections.abc import Awaitable, Callable
from datetime import UTC, datetime
from decimal import Decimal
from enum import StrEnum
from typing import Any

from loguru import logger
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from helpnet.models.enums import TokenSymbol, TransactionMethod
from helpnet.models.user import User
from helpnet.repositories.transaction_repository import TransactionRepository
from helpnet.repositories.user_repository import UserRepository
from helpnet.services.blockchain.contract_reader import ContractReader
from helpnet.services.sync.events import (
    ContractEvent,
    DonationReceived,
    IncentiveClaimed,
    IncentiveGranted,
    LevelUp,
    UserRegistered,
    VoluntaryDonation,
    Withdrawal,
)
from helpnet.utils.security import mask_address, mask_tx_hash


class ReconcileOutcome(StrEnum):
    """Result of reconciling one event."""

    APPLIED = "applied"  # transaction row written
    DUPLICATE = "duplicate"  # row with this hash already recorded
    SKIPPED = "skipped"  # block not visible, event ignored for this pass


class EventReconciler:
    """
    Reconcile contract events against users and transactions.

    Each user write and each transaction write is committed on its own.
    """

    def __init__(
        self,
        session: AsyncSession,
        reader: ContractReader,
        contract_address: str,
        user_repo: UserRepository | None = None,
        tx_repo: TransactionRepository | None = None,
    ) -> None:
        """
        Initialize reconciler.

        Args:
            session: Database session
            reader: Contract reader (block timestamps, entry fee, HELP balance)
            contract_address: HelpNet contract address
            user_repo: User repository (defaults to one on session)
            tx_repo: Transaction repository (defaults to one on session)
        """
        self.session = session
        self.reader = reader
        self.contract_address = contract_address.lower()
        self.user_repo = user_repo or UserRepository(session)
        self.tx_repo = tx_repo or TransactionRepository(session)

        self._handlers: dict[
            type[ContractEvent],
            Callable[[Any, datetime], Awaitable[ReconcileOutcome]],
        ] = {
            UserRegistered: self._on_user_registered,
            DonationReceived: self._on_donation_received,
            VoluntaryDonation: self._on_voluntary_donation,
            Withdrawal: self._on_withdrawal,
            IncentiveGranted: self._on_incentive_granted,
            IncentiveClaimed: self._on_incentive_claimed,
            LevelUp: self._on_level_up,
        }

    async def reconcile(self, event: ContractEvent) -> ReconcileOutcome:
        """
        Apply one event.

        Args:
            event: Decoded contract event

        Returns:
            ReconcileOutcome
        """
        handler = self._handlers.get(type(event))
        if handler is None:
            raise ValueError(f"No handler for event type {type(event).__name__}")

        timestamp = await self.reader.get_block_timestamp(event.block_number)
        if timestamp is None:
            logger.warning(
                f"[Reconciler] Block {event.block_number} not found for "
                f"{event.name} {mask_tx_hash(event.tx_hash)}, skipping"
            )
            return ReconcileOutcome.SKIPPED

        date = datetime.fromtimestamp(timestamp, UTC)
        return await handler(event, date)

    # ------------------------------------------------------------------
    # Handlers
    # ------------------------------------------------------------------

    async def _on_user_registered(
        self, event: UserRegistered, date: datetime
    ) -> ReconcileOutcome:
        entry_fee = await self.reader.entry_fee()

        user = await self.user_repo.get_by_address(event.user)
        if user is None:
            logger.info(f"[Reconciler] Creating user {mask_address(event.user)}")
            try:
                await self.user_repo.create_user(
                    event.user,
                    sponsor=event.sponsor,
                    is_registered=True,
                    registration_date=date,
                    entry_fee=entry_fee,
                    current_level=1,
                )
                await self.session.commit()
            except IntegrityError:
                # Created concurrently by a read-through query
                await self.session.rollback()
                user = await self.user_repo.get_by_address(event.user)

        if user is not None:
            user.sponsor = event.sponsor
            user.is_registered = True
            user.registration_date = date
            await self._save_user(user)

        return await self._record(
            event,
            TransactionMethod.REGISTER,
            date,
            from_address=event.user,
            to_address=self.contract_address,
            amount=entry_fee,
            token=TokenSymbol.USDT,
            level=1,
        )

    async def _on_donation_received(
        self, event: DonationReceived, date: datetime
    ) -> ReconcileOutcome:
        user = await self.user_repo.get_by_address(event.user)
        if user is not None:
            # Counted once per recorded donation row for this recipient
            if not await self.tx_repo.has_donation_for(event.tx_hash, event.user):
                user.donations_received = (user.donations_received or 0) + 1
            user.has_donated = True
            user.current_level = event.level
            user.balance = event.new_balance
            await self._save_user(user)

        return await self._record(
            event,
            TransactionMethod.DONATION_RECEIVED,
            date,
            from_address=event.user,
            to_address=self.contract_address,
            amount=event.amount,
            token=TokenSymbol.USDT,
            level=event.level,
        )

    async def _on_voluntary_donation(
        self, event: VoluntaryDonation, date: datetime
    ) -> ReconcileOutcome:
        user = await self.user_repo.get_by_address(event.user)
        if user is not None:
            await self._save_user(user)

        return await self._record(
            event,
            TransactionMethod.VOLUNTARY_DONATION,
            date,
            from_address=event.user,
            to_address=self.contract_address,
            amount=event.amount,
            token=TokenSymbol.USDT,
            level=_level_of(user),
            reserve_pool=event.reserve_pool,
        )

    async def _on_withdrawal(
        self, event: Withdrawal, date: datetime
    ) -> ReconcileOutcome:
        user = await self.user_repo.get_by_address(event.user)
        if user is not None:
            user.balance = event.remaining_balance
            user.help_balance = await self.reader.help_balance(event.user)
            await self._save_user(user)

        return await self._record(
            event,
            TransactionMethod.WITHDRAWAL,
            date,
            from_address=self.contract_address,
            to_address=event.user,
            amount=event.amount_usdt,
            token=TokenSymbol.USDT,
            level=_level_of(user),
        )

    async def _on_incentive_granted(
        self, event: IncentiveGranted, date: datetime
    ) -> ReconcileOutcome:
        user = await self.user_repo.get_by_address(event.user)
        if user is not None:
            user.locked_amount = event.amount
            user.unlock_timestamp = event.unlock_timestamp
            await self._save_user(user)

        return await self._record(
            event,
            TransactionMethod.INCENTIVE_GRANTED,
            date,
            from_address=self.contract_address,
            to_address=event.user,
            amount=event.amount,
            token=TokenSymbol.HELP,
            level=_level_of(user),
        )

    async def _on_incentive_claimed(
        self, event: IncentiveClaimed, date: datetime
    ) -> ReconcileOutcome:
        user = await self.user_repo.get_by_address(event.user)
        if user is not None:
            user.locked_amount = Decimal("0")
            user.unlock_timestamp = 0
            user.help_balance = await self.reader.help_balance(event.user)
            await self._save_user(user)

        return await self._record(
            event,
            TransactionMethod.INCENTIVE_CLAIMED,
            date,
            from_address=self.contract_address,
            to_address=event.user,
            amount=event.amount,
            token=TokenSymbol.HELP,
            level=_level_of(user),
        )

    async def _on_level_up(self, event: LevelUp, date: datetime) -> ReconcileOutcome:
        user = await self.user_repo.get_by_address(event.user)
        if user is not None:
            user.current_level = event.new_level
            user.balance = event.remaining_balance
            await self._save_user(user)

        return await self._record(
            event,
            TransactionMethod.LEVEL_UP,
            date,
            from_address=event.user,
            to_address=self.contract_address,
            amount=Decimal("0"),
            token=TokenSymbol.NONE,
            level=event.new_level,
        )

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    async def _save_user(self, user: User) -> None:
        await self.user_repo.save(user)
        await self.session.commit()

    async def _record(
        self,
        event: ContractEvent,
        method: TransactionMethod,
        date: datetime,
        **fields: Any,
    ) -> ReconcileOutcome:
        """Insert the transaction row unless its hash is already recorded."""
        if await self.tx_repo.exists_by_hash(event.tx_hash):
            logger.debug(
                f"[Reconciler] Transaction {mask_tx_hash(event.tx_hash)} "
                f"already exists, skipping {method}"
            )
            return ReconcileOutcome.DUPLICATE

        try:
            await self.tx_repo.create(
                transaction_hash=event.tx_hash,
                method=method.value,
                block=event.block_number,
                date=date,
                **fields,
            )
            await self.session.commit()
        except IntegrityError:
            await self.session.rollback()
            logger.debug(
                f"[Reconciler] Transaction {mask_tx_hash(event.tx_hash)} "
                f"recorded concurrently, skipping {method}"
            )
            return ReconcileOutcome.DUPLICATE

        logger.info(
            f"[Reconciler] Saved transaction {mask_tx_hash(event.tx_hash)} ({method})"
        )
        return ReconcileOutcome.APPLIED


def _level_of(user: User | None) -> int:
    return user.current_level if user is not None and user.current_level else 0
