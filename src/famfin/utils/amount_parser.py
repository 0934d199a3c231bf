"""Amount parsing and formatting utilities."""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
import re


def parse_amount(amount_str: str) -> Decimal:
    """Parse an amount string into a Decimal.

    Handles Brazilian and plain formats:
    - "1.234,56"
    - "R$ 1.234,56"
    - "-123,45" / "+123,45"
    - "1234.56"
    - "(123,45)" (negative in parentheses)

    A comma marks the Brazilian layout: dots are thousands separators and the
    comma is the decimal separator. Without a comma the string is read as a
    plain decimal.

    Args:
        amount_str: Amount string

    Returns:
        Decimal amount

    Raises:
        ValueError: If amount string cannot be parsed
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Valor vazio")

    amount_str = amount_str.strip()

    is_negative = False
    if amount_str.startswith("(") and amount_str.endswith(")"):
        is_negative = True
        amount_str = amount_str[1:-1]

    amount_str = re.sub(r"R\$|\s", "", amount_str)

    if amount_str.startswith("-"):
        is_negative = not is_negative
        amount_str = amount_str[1:]
    elif amount_str.startswith("+"):
        amount_str = amount_str[1:]

    if "," in amount_str:
        amount_str = amount_str.replace(".", "").replace(",", ".")

    try:
        amount = Decimal(amount_str)
    except InvalidOperation as e:
        raise ValueError(f"Não foi possível interpretar o valor '{amount_str}'") from e
    if not amount.is_finite():
        raise ValueError(f"Não foi possível interpretar o valor '{amount_str}'")
    return -amount if is_negative else amount


def format_number(amount: Decimal) -> str:
    """Format a number with Brazilian separators, e.g. ``1.234,56``."""
    quantized = Decimal(amount).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    formatted = f"{abs(quantized):,.2f}"
    # swap US separators for Brazilian ones
    formatted = formatted.replace(",", "_").replace(".", ",").replace("_", ".")
    return f"-{formatted}" if quantized < 0 else formatted


def format_currency(amount: Decimal) -> str:
    """Format a number as Brazilian currency, e.g. ``R$ 1.234,56``."""
    formatted = format_number(amount)
    if formatted.startswith("-"):
        return f"-R$ {formatted[1:]}"
    return f"R$ {formatted}"
