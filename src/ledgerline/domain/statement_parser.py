"""Bank statement CSV parser.

Turns the raw text of a bank statement export into normalized
``ParsedTransaction`` rows. Banks disagree on column names, date formats and
sign conventions, so columns are located by synonym and each row is
normalized independently. Rows that cannot be understood are skipped; the
parser never raises on malformed content.
"""

import csv
import re
from datetime import date
from decimal import Decimal
from typing import Optional, Sequence

from ledgerline.domain.entities import ParsedTransaction, ParseResult, StatementMetadata
from ledgerline.utils.amount_parser import parse_amount_or_zero

DATE_COLUMNS = ("date", "posting date", "trans date")
DESCRIPTION_COLUMNS = ("description", "memo", "details", "name", "payee")
AMOUNT_COLUMNS = ("amount", "transaction amount")
DEBIT_COLUMNS = ("debit", "withdrawal")
CREDIT_COLUMNS = ("credit", "deposit")

DEFAULT_DESCRIPTION = "Unknown"
DELIMITERS = ",;\t|"

_ISO_PREFIX = re.compile(r"^(\d{4})-(\d{2})-(\d{2})")
_US_SLASH = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{4})$")
_YEAR_FIRST_SLASH = re.compile(r"^(\d{4})/(\d{1,2})/(\d{1,2})$")
_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def normalize_date(value: str) -> str:
    """Normalize a statement date cell to ``YYYY-MM-DD``.

    Recognized forms are an ISO date prefix (``2024-01-05T00:00``),
    ``M/D/YYYY`` and ``YYYY/M/D``. Anything else is returned trimmed but
    otherwise unchanged.
    """
    text = value.strip()
    if not text:
        return ""

    match = _ISO_PREFIX.match(text)
    if match:
        return "-".join(match.groups())

    match = _US_SLASH.match(text)
    if match:
        month, day, year = match.groups()
        return f"{year}-{month.zfill(2)}-{day.zfill(2)}"

    match = _YEAR_FIRST_SLASH.match(text)
    if match:
        year, month, day = match.groups()
        return f"{year}-{month.zfill(2)}-{day.zfill(2)}"

    return text


def find_column(headers: Sequence[str], names: Sequence[str], exclude: Sequence[int] = ()) -> int:
    """Index of the first header containing one of ``names``, or -1.

    Synonyms are tried in order, so an earlier synonym wins over a header
    that appears further left but only matches a later synonym.
    """
    for name in names:
        for index, header in enumerate(headers):
            if index not in exclude and name in header:
                return index
    return -1


def _sniff_delimiter(lines: list[str]) -> str:
    sample = "\n".join(lines[:5])
    try:
        return csv.Sniffer().sniff(sample, delimiters=DELIMITERS).delimiter
    except csv.Error:
        return ","


def _split_line(line: str, delimiter: str) -> Optional[list[str]]:
    """Split one physical line into cells, or None if csv rejects it."""
    try:
        return next(csv.reader([line], delimiter=delimiter), [])
    except csv.Error:
        return None


def _cell(row: list[str], index: int) -> str:
    if index < 0 or index >= len(row):
        return ""
    return row[index].strip()


def _parse_row_date(value: str) -> Optional[date]:
    normalized = normalize_date(value)
    if not _ISO_DATE.match(normalized):
        return None
    try:
        return date.fromisoformat(normalized)
    except ValueError:
        return None


def parse_statement(content: str) -> ParseResult:
    """Parse CSV statement text into normalized transactions.

    The first non-blank line is the header. A statement without a
    recognizable date column, or without any data lines, yields an empty
    result rather than an error.

    Args:
        content: Raw CSV text

    Returns:
        ParseResult with one ParsedTransaction per usable row and the
        covered date range (None when no rows were parsed)
    """
    if content.startswith("\ufeff"):
        content = content[1:]

    lines = [line for line in content.splitlines() if line.strip()]
    if len(lines) < 2:
        return ParseResult()

    delimiter = _sniff_delimiter(lines)
    header_row = _split_line(lines[0], delimiter)
    if header_row is None:
        return ParseResult()
    headers = [h.strip().lower() for h in header_row]

    date_idx = find_column(headers, DATE_COLUMNS)
    if date_idx < 0:
        return ParseResult()

    desc_idx = find_column(headers, DESCRIPTION_COLUMNS)
    debit_idx = find_column(headers, DEBIT_COLUMNS)
    credit_idx = find_column(headers, CREDIT_COLUMNS)
    amount_idx = find_column(headers, AMOUNT_COLUMNS, exclude=(debit_idx, credit_idx))

    transactions = []
    for line in lines[1:]:
        # Each line is split on its own so a broken quote stays in its row
        row = _split_line(line, delimiter)
        if row is None:
            continue

        txn_date = _parse_row_date(_cell(row, date_idx))
        if txn_date is None:
            continue

        description = _cell(row, desc_idx) or DEFAULT_DESCRIPTION

        amount = Decimal("0")
        txn_type = "expense"
        if amount_idx >= 0:
            value = parse_amount_or_zero(_cell(row, amount_idx))
            amount = abs(value)
            txn_type = "expense" if value < 0 else "income"
        elif debit_idx >= 0 or credit_idx >= 0:
            debit = parse_amount_or_zero(_cell(row, debit_idx)) if debit_idx >= 0 else Decimal("0")
            credit = parse_amount_or_zero(_cell(row, credit_idx)) if credit_idx >= 0 else Decimal("0")
            if debit > 0:
                amount, txn_type = debit, "expense"
            elif credit > 0:
                amount, txn_type = credit, "income"

        if amount <= 0:
            continue

        transactions.append(
            ParsedTransaction(date=txn_date, description=description, amount=amount, type=txn_type)
        )

    metadata = None
    if transactions:
        dates = [t.date for t in transactions]
        metadata = StatementMetadata(start_date=min(dates), end_date=max(dates))

    return ParseResult(transactions=transactions, metadata=metadata)
