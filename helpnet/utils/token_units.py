"""
Fixed-point token unit conversion.

On-chain amounts are integers scaled by 10**decimals; everything stored or
returned by the API is in human-readable decimal units.
"""

from decimal import Decimal, InvalidOperation

from helpnet.utils.exceptions import InvalidInputError


def from_units(raw: int, decimals: int) -> Decimal:
    """
    Convert raw on-chain integer to decimal token units.

    Args:
        raw: Integer amount as emitted by the contract
        decimals: Token decimal scale

    Returns:
        Exact Decimal value (from_units(1_000_000, 6) == Decimal(1))
    """
    return Decimal(int(raw)) / Decimal(10**decimals)


def to_units(amount: str | int | Decimal, decimals: int) -> int:
    """
    Convert human-readable amount to raw on-chain integer.

    Args:
        amount: Amount such as "12.5"
        decimals: Token decimal scale

    Returns:
        Integer amount scaled by 10**decimals

    Raises:
        InvalidInputError: non-numeric, negative, or more precise than
            the token allows
    """
    try:
        value = Decimal(str(amount).strip())
    except (InvalidOperation, ValueError) as exc:
        raise InvalidInputError(f"Invalid amount: {amount!r}") from exc

    if not value.is_finite() or value < 0:
        raise InvalidInputError(f"Invalid amount: {amount!r}")

    scaled = value * Decimal(10**decimals)
    if scaled != scaled.to_integral_value():
        raise InvalidInputError(
            f"Amount {amount} has more than {decimals} decimal places"
        )
    return int(scaled)
