"""Utility functions for ledgerview."""

from ledgerview.utils.date_parser import parse_date, format_period
from ledgerview.utils.amount_parser import parse_amount, parse_amount_assignment
from ledgerview.utils.account_resolver import resolve_bank_account

__all__ = [
    "parse_date",
    "format_period",
    "parse_amount",
    "parse_amount_assignment",
    "resolve_bank_account",
]
