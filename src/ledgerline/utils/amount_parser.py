"""Amount parsing utilities."""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
import re

CENT = Decimal("0.01")

# Amounts are stored as NUMERIC(12, 2)
MAX_INTEGER_DIGITS = 10

_CURRENCY_SYMBOLS = re.compile(r"[$€£¥]")


def parse_amount(amount_str: str) -> Decimal:
    """Parse an amount string into a Decimal.

    Handles various formats:
    - "123.45"
    - "$123.45"
    - "-123.45"
    - "-$123.45"
    - "1,234.56"
    - "(123.45)" (negative in parentheses)

    Args:
        amount_str: Amount string

    Returns:
        Decimal amount

    Raises:
        ValueError: If amount string cannot be parsed or has more than
            MAX_INTEGER_DIGITS integer digits
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    cleaned = amount_str.strip()

    is_negative = False
    if cleaned.startswith("(") and cleaned.endswith(")"):
        is_negative = True
        cleaned = cleaned[1:-1]

    cleaned = _CURRENCY_SYMBOLS.sub("", cleaned).replace(",", "").strip()

    try:
        amount = Decimal(cleaned)
    except InvalidOperation:
        raise ValueError(f"Could not parse amount '{amount_str}'")

    if not amount.is_finite():
        raise ValueError(f"Could not parse amount '{amount_str}'")
    if amount and amount.adjusted() >= MAX_INTEGER_DIGITS:
        raise ValueError(f"Amount out of range '{amount_str}'")
    return -amount if is_negative else amount


def parse_amount_or_zero(amount_str: str) -> Decimal:
    """Parse an amount, treating anything unparseable as zero."""
    try:
        return parse_amount(amount_str)
    except ValueError:
        return Decimal("0")


def to_cents(amount: Decimal) -> Decimal:
    """Round an amount to whole cents."""
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def format_money(amount: Decimal) -> str:
    """Render an amount as ``$1,234.56`` / ``-$1,234.56``."""
    sign = "-" if amount < 0 else ""
    return f"{sign}${abs(amount):,.2f}"
