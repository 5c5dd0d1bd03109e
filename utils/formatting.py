"""
Formatting utilities.
"""

from typing import Optional


def clean_token(value: object) -> str:
    """
    Normalise an untrusted enum-like value for comparison.

    Args:
        value: Anything - query param, header, database column.

    Returns:
        The trimmed, lowercased string, or "" for non-strings.
    """
    if not isinstance(value, str):
        return ""
    return value.strip().lower()


def format_currency(amount_minor: int, currency: str = "NGN") -> str:
    """
    Format an amount held in minor units (kobo, pence, cents) as currency.

    Args:
        amount_minor: The amount in minor units.
        currency: Currency code (default NGN).

    Returns:
        Formatted currency string.
    """
    symbols = {
        "NGN": "₦",
        "GBP": "£",
        "USD": "$",
        "EUR": "€",
    }
    symbol = symbols.get(currency, currency + " ")
    major = amount_minor / 100
    return f"{symbol}{major:,.2f}"


def format_count(count: int, singular: str, plural: Optional[str] = None) -> str:
    """Format a count with the right noun form, e.g. '2 no-shows'."""
    noun = singular if count == 1 else (plural or f"{singular}s")
    return f"{count} {noun}"
