"""
Database models.

Exports all SQLAlchemy models for easy imports.
"""

from helpnet.models.base import Base
from helpnet.models.enums import TokenSymbol, TransactionMethod
from helpnet.models.transaction import Transaction
from helpnet.models.user import User

__all__ = [
    "Base",
    "TokenSymbol",
    "Transaction",
    "TransactionMethod",
    "User",
]
