"""
Model enums.
"""

from enum import StrEnum


class TransactionMethod(StrEnum):
    """Contract event a transaction row was recorded from."""

    REGISTER = "Register"
    DONATION_RECEIVED = "DonationReceived"
    VOLUNTARY_DONATION = "VoluntaryDonation"
    WITHDRAWAL = "Withdrawal"
    INCENTIVE_GRANTED = "IncentiveGranted"
    INCENTIVE_CLAIMED = "IncentiveClaimed"
    LEVEL_UP = "LevelUp"


class TokenSymbol(StrEnum):
    """Token an amount is denominated in."""

    USDT = "USDT"
    HELP = "HELP"
    NONE = "N/A"
