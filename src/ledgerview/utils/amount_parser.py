"""Amount parsing utilities."""

from decimal import Decimal, InvalidOperation
import re


def parse_amount(amount_str: str) -> Decimal:
    """Parse an amount string into a Decimal.

    Handles various formats:
    - "123.45"
    - "$123.45"
    - "-123.45"
    - "1,234.56"
    - "(123.45)" (negative in parentheses)

    Args:
        amount_str: Amount string

    Returns:
        Decimal amount

    Raises:
        ValueError: If amount string cannot be parsed
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    amount_str = amount_str.strip()

    is_negative = False
    if amount_str.startswith("(") and amount_str.endswith(")"):
        is_negative = True
        amount_str = amount_str[1:-1]

    amount_str = re.sub(r"[$€£¥]", "", amount_str).replace(",", "").strip()

    try:
        amount = Decimal(amount_str)
    except InvalidOperation:
        raise ValueError(f"Could not parse amount '{amount_str}'")
    if not amount.is_finite():
        raise ValueError(f"Amount must be finite, got '{amount_str}'")
    return -amount if is_negative else amount


def parse_amount_assignment(value: str) -> tuple[int, Decimal]:
    """Parse a "TRANSACTION_ID=AMOUNT" pair.

    Raises:
        ValueError: If the pair is malformed or the amount is negative
    """
    txn_part, sep, amount_part = value.partition("=")
    if not sep:
        raise ValueError(f"Expected TRANSACTION_ID=AMOUNT, got '{value}'")
    try:
        transaction_id = int(txn_part.strip())
    except ValueError:
        raise ValueError(f"Invalid transaction ID '{txn_part.strip()}'")
    amount = parse_amount(amount_part)
    if amount < 0:
        raise ValueError(f"Amount cannot be negative, got '{amount_part.strip()}'")
    return transaction_id, amount
