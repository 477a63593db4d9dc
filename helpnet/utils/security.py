"""
Security utilities.

Masking of addresses and hashes for logs, and the owner check for
privileged operations.
"""

from helpnet.utils.exceptions import AuthorizationError
from helpnet.validators.common import require_address


def mask_address(address: str | None) -> str:
    """
    Mask wallet address for logging: 0x1234...5678

    Args:
        address: Wallet address to mask

    Returns:
        Masked address showing first 6 and last 4 characters

    Examples:
        >>> mask_address("0x1234567890abcdef1234567890abcdef12345678")
        '0x1234...5678'
        >>> mask_address(None)
        '***'
    """
    if not address or len(address) < 10:
        return "***"
    return f"{address[:6]}...{address[-4:]}"


def mask_tx_hash(tx_hash: str | None) -> str:
    """Mask transaction hash for logging: first 10 and last 6 characters."""
    if not tx_hash or len(tx_hash) < 20:
        return "***"
    return f"{tx_hash[:10]}...{tx_hash[-6:]}"


def ensure_owner(requester: str | None, owner_address: str, action: str) -> str:
    """
    Reject requesters other than the owner wallet.

    Args:
        requester: Address claimed by the caller
        owner_address: Owner wallet address
        action: Human-readable action for the error message

    Returns:
        Normalized requester address

    Raises:
        InvalidInputError: requester is not an address
        AuthorizationError: requester is not the owner
    """
    normalized = require_address(requester, field="requester")
    if normalized != owner_address.lower():
        raise AuthorizationError(f"Only the owner can {action}")
    return normalized
