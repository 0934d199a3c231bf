"""Utility functions for famfin."""

from famfin.utils.date_parser import parse_date, normalize_date, add_months
from famfin.utils.amount_parser import parse_amount, format_currency

__all__ = ["parse_date", "normalize_date", "add_months", "parse_amount", "format_currency"]
