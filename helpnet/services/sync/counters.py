"""
Aggregate counters.
"""

from dataclasses import dataclass, field
from decimal import Decimal

from helpnet.services.sync.events import (
    ContractEvent,
    DonationReceived,
    IncentiveGranted,
    UserRegistered,
    VoluntaryDonation,
)

# Events that contribute to the counters
COUNTED_EVENTS = (
    UserRegistered.name,
    DonationReceived.name,
    VoluntaryDonation.name,
    IncentiveGranted.name,
)


@dataclass
class AggregateCounters:
    """Running totals over scanned events."""

    total_users: int = 0
    total_donations: Decimal = field(default_factory=lambda: Decimal("0"))
    total_voluntary_donations: Decimal = field(default_factory=lambda: Decimal("0"))
    total_incentives: Decimal = field(default_factory=lambda: Decimal("0"))

    def apply(self, event: ContractEvent) -> bool:
        """
        Add one event to the totals.

        Returns:
            True if the event type is counted
        """
        if isinstance(event, UserRegistered):
            self.total_users += 1
        elif isinstance(event, DonationReceived):
            self.total_donations += event.amount
        elif isinstance(event, VoluntaryDonation):
            self.total_voluntary_donations += event.amount
        elif isinstance(event, IncentiveGranted):
            self.total_incentives += event.amount
        else:
            return False
        return True

    def merged(self, delta: "AggregateCounters") -> "AggregateCounters":
        """New counters equal to self + delta."""
        return AggregateCounters(
            total_users=self.total_users + delta.total_users,
            total_donations=self.total_donations + delta.total_donations,
            total_voluntary_donations=(
                self.total_voluntary_donations + delta.total_voluntary_donations
            ),
            total_incentives=self.total_incentives + delta.total_incentives,
        )

    def to_dict(self) -> dict[str, float | int]:
        """API representation (camelCase, JSON numbers)."""
        return {
            "totalUsers": self.total_users,
            "totalDonations": float(self.total_donations),
            "totalVoluntaryDonations": float(self.total_voluntary_donations),
            "totalIncentives": float(self.total_incentives),
        }
