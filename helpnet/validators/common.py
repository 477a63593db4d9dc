"""
Common validators for request input.

Each validator returns a tuple of (is_valid, parsed_value, error_message).
The require_* wrappers raise InvalidInputError instead, so malformed input is
rejected before any network call.
"""

from decimal import Decimal, InvalidOperation

from eth_utils import is_address

from helpnet.models.enums import TokenSymbol, TransactionMethod
from helpnet.utils.exceptions import InvalidInputError


def validate_wallet_address(
    value: str | None,
) -> tuple[bool, str | None, str | None]:
    """
    Validate EVM wallet address.

    Args:
        value: String to validate as wallet address

    Returns:
        Tuple of (is_valid, normalized_address, error_message)

    Examples:
        >>> validate_wallet_address("0x1234567890123456789012345678901234567890")
        (True, "0x1234567890123456789012345678901234567890", None)
        >>> validate_wallet_address("0x123")
        (False, None, "Invalid address")
    """
    if not value or not isinstance(value, str):
        return False, None, "Address cannot be empty"

    value = value.strip()
    if not is_address(value):
        return False, None, "Invalid address"

    return True, value.lower(), None


def validate_amount(value: str | None) -> tuple[bool, Decimal | None, str | None]:
    """
    Validate positive decimal amount.

    Args:
        value: Amount string such as "10.5"

    Returns:
        Tuple of (is_valid, parsed_amount, error_message)
    """
    if value is None or not str(value).strip():
        return False, None, "Amount cannot be empty"

    try:
        amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return False, None, "Amount must be a number"

    if not amount.is_finite() or amount <= 0:
        return False, None, "Amount must be positive"

    return True, amount, None


def validate_level(value: str | int | None) -> tuple[bool, int | None, str | None]:
    """
    Validate level number (1-based).

    Returns:
        Tuple of (is_valid, level, error_message)
    """
    try:
        level = int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return False, None, "Level must be an integer"

    if level < 1:
        return False, None, "Level must be at least 1"

    return True, level, None


def require_address(value: str | None, field: str = "address") -> str:
    """Return normalized address or raise InvalidInputError."""
    is_valid, address, error = validate_wallet_address(value)
    if not is_valid:
        raise InvalidInputError(f"Invalid {field}: {error}")
    return address  # type: ignore[return-value]


def require_amount(value: str | None) -> str:
    """Return the stripped amount string or raise InvalidInputError."""
    is_valid, _, error = validate_amount(value)
    if not is_valid:
        raise InvalidInputError(error or "Invalid amount")
    return str(value).strip()


def require_level(value: str | int | None) -> int:
    """Return level or raise InvalidInputError."""
    is_valid, level, error = validate_level(value)
    if not is_valid:
        raise InvalidInputError(error or "Invalid level")
    return level  # type: ignore[return-value]


def parse_token(value: str | None) -> str | None:
    """Optional token filter (USDT, HELP, N/A)."""
    if not value:
        return None
    try:
        return TokenSymbol(value.strip().upper()).value
    except ValueError as exc:
        raise InvalidInputError(f"Unknown token: {value}") from exc


def parse_method(value: str | None) -> str | None:
    """Optional method filter (Register, DonationReceived, ...)."""
    if not value:
        return None
    try:
        return TransactionMethod(value.strip()).value
    except ValueError as exc:
        raise InvalidInputError(f"Unknown method: {value}") from exc
