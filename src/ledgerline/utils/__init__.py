"""Utility functions for ledgerline."""

from ledgerline.utils.date_parser import parse_date
from ledgerline.utils.amount_parser import parse_amount

__all__ = ["parse_date", "parse_amount"]
