"""Unit tests for contract event decoding and aggregate counters."""

from decimal import Decimal

import pytest
from hexbytes import HexBytes

from helpnet.services.sync.counters import COUNTED_EVENTS, AggregateCounters
from helpnet.services.sync.events import (
    DonationReceived,
    IncentiveGranted,
    LevelUp,
    UserRegistered,
    VoluntaryDonation,
    Withdrawal,
    decode_event,
)

USER = "0x742d35Cc6634C0532925a3b844Bc9e7595f0bEb0"
SPONSOR = "0xAbCdEf0123456789aBcDeF0123456789AbCdEf01"
TX_HASH = "0x" + "ab" * 32


def make_log(args, block=100, log_index=0, tx_hash=TX_HASH):
    """EventData-shaped dict as returned by web3 get_logs."""
    return {
        "args": args,
        "transactionHash": HexBytes(tx_hash),
        "blockNumber": block,
        "logIndex": log_index,
    }


class TestDecodeEvent:
    """Tests for decode_event."""

    def test_user_registered_lowercases_addresses(self):
        """User and sponsor addresses are lowercased."""
        event = decode_event(
            "UserRegistered", make_log({"user": USER, "sponsor": SPONSOR})
        )

        assert isinstance(event, UserRegistered)
        assert event.user == USER.lower()
        assert event.sponsor == SPONSOR.lower()
        assert event.tx_hash == TX_HASH
        assert event.block_number == 100

    def test_donation_amounts_use_usdt_decimals(self):
        """USDT amounts are divided by 10**6."""
        event = decode_event(
            "DonationReceived",
            make_log(
                {"user": USER, "amount": 20_000_000, "level": 2, "newBalance": 50_500_000}
            ),
        )

        assert isinstance(event, DonationReceived)
        assert event.amount == Decimal("20")
        assert event.level == 2
        assert event.new_balance == Decimal("50.5")

    def test_withdrawal_mixes_usdt_and_help(self):
        """amountHelp uses 18 decimals, the rest 6."""
        event = decode_event(
            "Withdrawal",
            make_log(
                {
                    "user": USER,
                    "amountUsdt": 10_000_000,
                    "amountHelp": 3 * 10**18,
                    "remainingBalance": 0,
                }
            ),
        )

        assert isinstance(event, Withdrawal)
        assert event.amount_usdt == Decimal("10")
        assert event.amount_help == Decimal("3")
        assert event.remaining_balance == Decimal("0")

    def test_incentive_granted(self):
        """HELP amount and unlock timestamp are decoded."""
        event = decode_event(
            "IncentiveGranted",
            make_log(
                {"user": USER, "amount": 5 * 10**17, "unlockTimestamp": 1_800_000_000}
            ),
        )

        assert isinstance(event, IncentiveGranted)
        assert event.amount == Decimal("0.5")
        assert event.unlock_timestamp == 1_800_000_000

    def test_string_tx_hash_is_normalized(self):
        """A hex string hash is lowercased and keeps its 0x prefix."""
        log = make_log({"user": USER, "newLevel": 3, "remainingBalance": 0})
        log["transactionHash"] = "0x" + "AB" * 32

        event = decode_event("LevelUp", log)

        assert isinstance(event, LevelUp)
        assert event.tx_hash == TX_HASH

    def test_sort_key_is_chain_order(self):
        """sort_key is (blockNumber, logIndex)."""
        event = decode_event(
            "VoluntaryDonation",
            make_log(
                {"user": USER, "amount": 1, "reservePool": 2}, block=7, log_index=4
            ),
        )

        assert isinstance(event, VoluntaryDonation)
        assert event.sort_key == (7, 4)

    def test_unknown_event_rejected(self):
        """Unknown event names raise ValueError."""
        with pytest.raises(ValueError, match="Unknown event"):
            decode_event("Transfer", make_log({"user": USER}))


class TestAggregateCounters:
    """Tests for AggregateCounters."""

    def _event(self, cls, **fields):
        return cls(tx_hash=TX_HASH, block_number=1, log_index=0, user=USER.lower(), **fields)

    def test_counted_events(self):
        """Four event types feed the counters."""
        assert set(COUNTED_EVENTS) == {
            "UserRegistered",
            "DonationReceived",
            "VoluntaryDonation",
            "IncentiveGranted",
        }

    def test_apply_accumulates(self):
        """Each counted event adds to its total; others are ignored."""
        counters = AggregateCounters()

        assert counters.apply(self._event(UserRegistered, sponsor=SPONSOR.lower()))
        assert counters.apply(
            self._event(
                DonationReceived, amount=Decimal("20"), level=1, new_balance=Decimal("20")
            )
        )
        assert counters.apply(
            self._event(VoluntaryDonation, amount=Decimal("5"), reserve_pool=Decimal("5"))
        )
        assert counters.apply(
            self._event(IncentiveGranted, amount=Decimal("1.5"), unlock_timestamp=0)
        )
        assert not counters.apply(
            self._event(LevelUp, new_level=2, remaining_balance=Decimal("0"))
        )

        assert counters.to_dict() == {
            "totalUsers": 1,
            "totalDonations": 20.0,
            "totalVoluntaryDonations": 5.0,
            "totalIncentives": 1.5,
        }

    def test_merged_returns_new_instance(self):
        """merged() adds the delta without mutating either side."""
        base = AggregateCounters(total_users=3, total_donations=Decimal("10"))
        delta = AggregateCounters(total_users=1, total_incentives=Decimal("2"))

        merged = base.merged(delta)

        assert merged.total_users == 4
        assert merged.total_donations == Decimal("10")
        assert merged.total_incentives == Decimal("2")
        assert base.total_users == 3
