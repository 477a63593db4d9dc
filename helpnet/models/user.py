"""
User model.

One row per on-chain participant address.
"""

from datetime import UTC, datetime
from decimal import Decimal

from sqlalchemy import DECIMAL, BigInteger, Boolean, DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from helpnet.config.constants import ZERO_ADDRESS
from helpnet.models.base import Base


class User(Base):
    """
    Participant of the HelpNet contract.

    Created lazily on the first observed event or the first info query.
    Fields mirror on-chain state and are overwritten by each event that
    references the address, never merged.
    """

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)

    # Address (normalized to lowercase)
    address: Mapped[str] = mapped_column(
        String(42), nullable=False, unique=True, index=True
    )
    sponsor: Mapped[str] = mapped_column(
        String(42), nullable=False, default=ZERO_ADDRESS, index=True
    )

    # Registration
    is_registered: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False
    )
    registration_date: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    entry_fee: Mapped[Decimal] = mapped_column(
        DECIMAL(18, 6), nullable=False, default=Decimal("0")
    )

    # Progress
    current_level: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0
    )
    referrals: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    balance: Mapped[Decimal] = mapped_column(
        DECIMAL(18, 6), nullable=False, default=Decimal("0")
    )  # USDT
    donations_received: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0
    )
    has_donated: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False
    )

    # Queue
    queue_position: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0
    )
    is_in_queue: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False
    )

    # Incentives (HELP)
    locked_amount: Mapped[Decimal] = mapped_column(
        DECIMAL(36, 18), nullable=False, default=Decimal("0")
    )
    unlock_timestamp: Mapped[int] = mapped_column(
        BigInteger, nullable=False, default=0
    )
    help_balance: Mapped[Decimal] = mapped_column(
        DECIMAL(36, 18), nullable=False, default=Decimal("0")
    )

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
        nullable=False,
    )

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<User(address={self.address}, level={self.current_level}, "
            f"registered={self.is_registered})>"
        )
