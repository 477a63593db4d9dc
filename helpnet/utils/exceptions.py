"""
Exception handling utilities.

Defines categorized exception types for proper error handling.
"""

from sqlalchemy.exc import OperationalError
from web3.exceptions import Web3Exception


class HelpnetError(Exception):
    """Base class for indexer errors."""


class ConfigurationError(HelpnetError):
    """Required configuration is missing or invalid. Halts startup."""


class ConnectivityError(HelpnetError):
    """RPC endpoint unreachable or unusable."""


class WrongChainError(ConnectivityError):
    """RPC endpoint reports an unexpected chain id."""

    def __init__(self, expected: int, actual: int) -> None:
        super().__init__(
            f"Invalid network: expected chainId {expected}, got {actual}"
        )
        self.expected = expected
        self.actual = actual


class EndpointUnavailable(ConnectivityError):
    """Both primary and fallback RPC endpoints failed."""


class ScanError(HelpnetError):
    """Log fetch for a required event filter failed; the scan is aborted."""

    def __init__(self, filter_name: str, from_block: int, to_block: int, cause: BaseException) -> None:
        super().__init__(
            f"Failed to query {filter_name} events in [{from_block}, {to_block}]: {cause}"
        )
        self.filter_name = filter_name
        self.from_block = from_block
        self.to_block = to_block


class AuthorizationError(HelpnetError):
    """Requester is not allowed to perform a privileged operation."""


class SyncInProgress(HelpnetError):
    """A synchronization pass is already running."""

    def __init__(self) -> None:
        super().__init__("Synchronization already in progress")


class InvalidInputError(HelpnetError, ValueError):
    """Malformed input (bad address, bad amount)."""


class AdminOperationFailed(HelpnetError):
    """Owner transaction reverted or timed out."""


# Exception categories based on handling strategy

# Must log but can continue - the next scheduled pass retries
MUST_LOG = (
    OperationalError,  # Database errors
    Web3Exception,     # Blockchain RPC errors
    ConnectivityError,
    ScanError,
)


def must_log(exc: Exception) -> bool:
    """
    Check if exception is recoverable and must only be logged.

    Args:
        exc: Exception to check

    Returns:
        True if exception must be logged
    """
    return isinstance(exc, MUST_LOG)

