"""
DTO serializers.

camelCase field names, ISO-8601 dates, amounts as JSON numbers.
"""

from decimal import Decimal
from typing import Any

from helpnet.models.transaction import Transaction
from helpnet.models.user import User

TRANSACTION_FIELDS = (
    "transactionHash",
    "method",
    "block",
    "date",
    "from",
    "to",
    "amount",
    "token",
    "level",
    "reservePool",
)
HELP_TRANSACTION_FIELDS = TRANSACTION_FIELDS[:-1]
DONATION_FIELDS = ("transactionHash", "method", "block", "date", "amount", "level")
VOLUNTARY_DONATION_FIELDS = (
    "transactionHash",
    "method",
    "block",
    "date",
    "from",
    "amount",
    "reservePool",
)


def as_number(value: Decimal | None) -> float | None:
    """Decimal to JSON number (None preserved)."""
    return float(value) if value is not None else None


def serialize_transaction(
    tx: Transaction, fields: tuple[str, ...] = TRANSACTION_FIELDS
) -> dict[str, Any]:
    """
    Serialize a transaction row.

    Args:
        tx: Transaction
        fields: Output fields to include

    Returns:
        DTO dict
    """
    full = {
        "transactionHash": tx.transaction_hash,
        "method": str(tx.method),
        "block": tx.block,
        "date": tx.date.isoformat(),
        "from": tx.from_address,
        "to": tx.to_address,
        "amount": as_number(tx.amount),
        "token": str(tx.token),
        "level": tx.level if tx.level is not None else 0,
        "reservePool": as_number(tx.reserve_pool),
    }
    return {name: full[name] for name in fields}


def serialize_user(user: User) -> dict[str, Any]:
    """Serialize a user row."""
    return {
        "address": user.address,
        "isRegistered": user.is_registered,
        "currentLevel": user.current_level,
        "sponsor": user.sponsor,
        "referrals": user.referrals,
        "balance": as_number(user.balance),
        "donationsReceived": user.donations_received,
        "hasDonated": user.has_donated,
        "queuePosition": user.queue_position,
        "registrationDate": (
            user.registration_date.isoformat() if user.registration_date else ""
        ),
        "entryFee": as_number(user.entry_fee),
        "helpBalance": as_number(user.help_balance),
        "isInQueue": user.is_in_queue,
        "lockedAmount": as_number(user.locked_amount),
        "unlockTimestamp": user.unlock_timestamp,
    }
