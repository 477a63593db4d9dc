"""
Transaction model.

Immutable record of a contract event, one row per transaction hash.
"""

from datetime import UTC, datetime
from decimal import Decimal

from sqlalchemy import DECIMAL, BigInteger, DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from helpnet.models.base import Base


class Transaction(Base):
    """
    Recorded contract event.

    Amounts are stored in human-readable token units. Rows are written
    once and never updated.
    """

    __tablename__ = "transactions"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)

    # Dedup key
    transaction_hash: Mapped[str] = mapped_column(
        String(66), nullable=False, unique=True, index=True
    )
    method: Mapped[str] = mapped_column(
        String(32), nullable=False, index=True
    )  # TransactionMethod

    # Block info
    block: Mapped[int] = mapped_column(BigInteger, nullable=False, index=True)
    date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, index=True
    )

    # Addresses (normalized to lowercase)
    from_address: Mapped[str] = mapped_column(
        String(42), nullable=False, index=True
    )
    to_address: Mapped[str] = mapped_column(
        String(42), nullable=False, index=True
    )

    amount: Mapped[Decimal] = mapped_column(DECIMAL(36, 18), nullable=False)
    token: Mapped[str] = mapped_column(
        String(10), nullable=False, index=True
    )  # USDT, HELP, N/A
    level: Mapped[int | None] = mapped_column(Integer, nullable=True)
    reserve_pool: Mapped[Decimal | None] = mapped_column(
        DECIMAL(18, 6), nullable=True
    )  # VoluntaryDonation only

    # Insert time, rows are never updated
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
    )

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<Transaction(hash={self.transaction_hash[:16]}..., "
            f"method={self.method}, amount={self.amount} {self.token})>"
        )
