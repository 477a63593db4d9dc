"""
Typed contract events.

Raw web3 logs are decoded once at the boundary into one frozen dataclass per
event type, with addresses lowercased and token amounts already converted to
decimal units.
"""

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, ClassVar

from web3 import Web3

from helpnet.config.constants import HELP_DECIMALS, USDT_DECIMALS
from helpnet.utils.token_units import from_units


@dataclass(frozen=True)
class ContractEvent:
    """Fields shared by every decoded event."""

    name: ClassVar[str] = ""

    tx_hash: str
    block_number: int
    log_index: int
    user: str

    @property
    def sort_key(self) -> tuple[int, int]:
        """Chain order of the event."""
        return self.block_number, self.log_index


@dataclass(frozen=True)
class UserRegistered(ContractEvent):
    name: ClassVar[str] = "UserRegistered"

    sponsor: str


@dataclass(frozen=True)
class DonationReceived(ContractEvent):
    name: ClassVar[str] = "DonationReceived"

    amount: Decimal  # USDT
    level: int
    new_balance: Decimal  # USDT


@dataclass(frozen=True)
class VoluntaryDonation(ContractEvent):
    name: ClassVar[str] = "VoluntaryDonation"

    amount: Decimal  # USDT
    reserve_pool: Decimal  # USDT


@dataclass(frozen=True)
class Withdrawal(ContractEvent):
    name: ClassVar[str] = "Withdrawal"

    amount_usdt: Decimal
    amount_help: Decimal
    remaining_balance: Decimal  # USDT


@dataclass(frozen=True)
class IncentiveGranted(ContractEvent):
    name: ClassVar[str] = "IncentiveGranted"

    amount: Decimal  # HELP
    unlock_timestamp: int


@dataclass(frozen=True)
class IncentiveClaimed(ContractEvent):
    name: ClassVar[str] = "IncentiveClaimed"

    amount: Decimal  # HELP


@dataclass(frozen=True)
class LevelUp(ContractEvent):
    name: ClassVar[str] = "LevelUp"

    new_level: int
    remaining_balance: Decimal  # USDT


def _hex(value: Any) -> str:
    if isinstance(value, str):
        value = value.lower()
        return value if value.startswith("0x") else f"0x{value}"
    return Web3.to_hex(value)


def _usdt(raw: int) -> Decimal:
    return from_units(raw, USDT_DECIMALS)


def _help(raw: int) -> Decimal:
    return from_units(raw, HELP_DECIMALS)


# event name -> (event class, args -> specific fields)
_DECODERS: dict[str, tuple[type[ContractEvent], Callable[[Mapping[str, Any]], dict[str, Any]]]] = {
    "UserRegistered": (
        UserRegistered,
        lambda a: {"sponsor": a["sponsor"].lower()},
    ),
    "DonationReceived": (
        DonationReceived,
        lambda a: {
            "amount": _usdt(a["amount"]),
            "level": int(a["level"]),
            "new_balance": _usdt(a["newBalance"]),
        },
    ),
    "VoluntaryDonation": (
        VoluntaryDonation,
        lambda a: {
            "amount": _usdt(a["amount"]),
            "reserve_pool": _usdt(a["reservePool"]),
        },
    ),
    "Withdrawal": (
        Withdrawal,
        lambda a: {
            "amount_usdt": _usdt(a["amountUsdt"]),
            "amount_help": _help(a["amountHelp"]),
            "remaining_balance": _usdt(a["remainingBalance"]),
        },
    ),
    "IncentiveGranted": (
        IncentiveGranted,
        lambda a: {
            "amount": _help(a["amount"]),
            "unlock_timestamp": int(a["unlockTimestamp"]),
        },
    ),
    "IncentiveClaimed": (
        IncentiveClaimed,
        lambda a: {"amount": _help(a["amount"])},
    ),
    "LevelUp": (
        LevelUp,
        lambda a: {
            "new_level": int(a["newLevel"]),
            "remaining_balance": _usdt(a["remainingBalance"]),
        },
    ),
}


def decode_event(event_name: str, log: Mapping[str, Any]) -> ContractEvent:
    """
    Decode a web3 EventData into its typed event.

    Args:
        event_name: Contract event name
        log: EventData (args, transactionHash, blockNumber, logIndex)

    Returns:
        Typed event instance

    Raises:
        ValueError: Unknown event name
    """
    try:
        event_cls, decode_args = _DECODERS[event_name]
    except KeyError as exc:
        raise ValueError(f"Unknown event: {event_name}") from exc

    args = log["args"]
    return event_cls(
        tx_hash=_hex(log["transactionHash"]),
        block_number=int(log["blockNumber"]),
        log_index=int(log.get("logIndex", 0) or 0),
        user=args["user"].lower(),
        **decode_args(args),
    )
