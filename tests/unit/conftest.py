"""
Shared fixtures for unit tests.

This module provides common fixtures used across multiple test modules:
- In-memory user and transaction repositories
- Session factory yielding the mock session
- Recording scanner for synchronizer tests
"""

from decimal import Decimal
from typing import Any

import pytest
from sqlalchemy.exc import IntegrityError

from helpnet.models.enums import TransactionMethod
from helpnet.models.transaction import Transaction
from helpnet.models.user import User


class InMemoryUserRepository:
    """Dict-backed stand-in for UserRepository."""

    def __init__(self) -> None:
        self.users: dict[str, User] = {}
        self.saved = 0

    async def get_by_address(self, address: str) -> User | None:
        return self.users.get(address.lower())

    async def create_user(self, address: str, **data: Any) -> User:
        values = {
            "sponsor": "0x" + "0" * 40,
            "is_registered": False,
            "entry_fee": Decimal("0"),
            "current_level": 0,
            "referrals": 0,
            "balance": Decimal("0"),
            "donations_received": 0,
            "has_donated": False,
            "queue_position": 0,
            "is_in_queue": False,
            "locked_amount": Decimal("0"),
            "unlock_timestamp": 0,
            "help_balance": Decimal("0"),
        }
        values.update(data)
        user = User(address=address.lower(), **values)
        user.id = len(self.users) + 1
        self.users[user.address] = user
        return user

    async def save(self, user: User) -> User:
        self.saved += 1
        return user

    async def list_addresses(self) -> list[str]:
        return list(self.users)

    async def queue_rank(self, address: str) -> int:
        addresses = await self.list_addresses()
        return addresses.index(address.lower()) + 1 if address.lower() in addresses else 0

    async def count_referrals(self, address: str) -> int:
        return sum(1 for user in self.users.values() if user.sponsor == address.lower())


class InMemoryTransactionRepository:
    """Dict-backed stand-in for TransactionRepository."""

    def __init__(self) -> None:
        self.rows: dict[str, Transaction] = {}
        self.fail_with_integrity_error = False

    async def exists_by_hash(self, tx_hash: str) -> bool:
        return tx_hash.lower() in self.rows

    async def has_donation_for(self, tx_hash: str, address: str) -> bool:
        tx = self.rows.get(tx_hash.lower())
        return (
            tx is not None
            and tx.method == TransactionMethod.DONATION_RECEIVED.value
            and tx.from_address == address.lower()
        )

    async def create(self, **data: Any) -> Transaction:
        if self.fail_with_integrity_error:
            raise IntegrityError("INSERT INTO transactions", {}, Exception("duplicate key"))
        tx = Transaction(**data)
        self.rows[tx.transaction_hash.lower()] = tx
        return tx


class FakeSessionFactory:
    """async_sessionmaker stand-in that always yields the same session."""

    def __init__(self, session) -> None:
        self.session = session
        self.opened = 0

    def __call__(self) -> "FakeSessionFactory":
        self.opened += 1
        return self

    async def __aenter__(self):
        return self.session

    async def __aexit__(self, exc_type, exc, tb) -> bool:
        return False


class RecordingScanner:
    """
    Scanner stand-in.

    Records every scan call and yields the queued events for each call in
    order. An optional gate blocks the scan until it is set.
    """

    def __init__(self, batches: list[list] | None = None, gate=None) -> None:
        self.calls: list[tuple[int, int, tuple[str, ...]]] = []
        self.strict_calls: list[bool] = []
        self.batches = list(batches or [])
        self.gate = gate

    async def scan(self, from_block, to_block, filters, strict=False):
        self.calls.append((from_block, to_block, tuple(filters)))
        self.strict_calls.append(strict)
        if self.gate is not None:
            await self.gate.wait()
        events = self.batches.pop(0) if self.batches else []
        for event in events:
            yield event.name, event


@pytest.fixture
def user_repo():
    """In-memory user repository."""
    return InMemoryUserRepository()


@pytest.fixture
def tx_repo():
    """In-memory transaction repository."""
    return InMemoryTransactionRepository()


@pytest.fixture
def session_factory(mock_session):
    """Session factory yielding mock_session."""
    return FakeSessionFactory(mock_session)


@pytest.fixture
def tx_hash_factory():
    """Build distinct transaction hashes: tx_hash_factory(7) -> 0x00..07."""

    def build(n: int) -> str:
        return "0x" + f"{n:064x}"

    return build


@pytest.fixture
def scanner_factory():
    """Build a RecordingScanner: scanner_factory(batches, gate=None)."""
    return RecordingScanner
