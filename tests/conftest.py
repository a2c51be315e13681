"""Shared pytest fixtures for ledgerline tests."""

import tempfile
import os
from datetime import date
from decimal import Decimal
import pytest

from ledgerline.database.factories import create_sqlite_database
from ledgerline.domain.account import AccountService
from ledgerline.domain.invoice import InvoiceService
from ledgerline.domain.reconciliation import ReconciliationService
from ledgerline.domain.rules import CategoryRuleService
from ledgerline.domain.statement import StatementService
from ledgerline.domain.statement_import import StatementImportService
from ledgerline.domain.transaction import TransactionService


SAMPLE_STATEMENT_CSV = """Date,Description,Amount
01/05/2024,COFFEE SHOP,-4.50
01/06/2024,PAYCHECK,2000.00
01/07/2024,,0.00
"""


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    db = create_sqlite_database(database_path=db_path)
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def account_service(temp_db):
    """Create an AccountService with a temporary database."""
    return AccountService(temp_db)


@pytest.fixture
def transaction_service(temp_db):
    """Create a TransactionService with a temporary database."""
    return TransactionService(temp_db)


@pytest.fixture
def rule_service(temp_db):
    """Create a CategoryRuleService with a temporary database."""
    return CategoryRuleService(temp_db)


@pytest.fixture
def statement_service(temp_db):
    """Create a StatementService with a temporary database."""
    return StatementService(temp_db)


@pytest.fixture
def reconciliation_service(temp_db):
    """Create a ReconciliationService with a temporary database."""
    return ReconciliationService(temp_db)


@pytest.fixture
def invoice_service(temp_db):
    """Create an InvoiceService with a temporary database."""
    return InvoiceService(temp_db)


@pytest.fixture
def import_service(temp_db):
    """Create a StatementImportService with a temporary database."""
    return StatementImportService(temp_db)


@pytest.fixture
def sample_account(account_service):
    """Create a sample bank account for testing."""
    account_id = account_service.create_account(name="Test Account", bank_name="Test Bank")
    return account_service.get_account(account_id)


@pytest.fixture
def sample_statement(statement_service, transaction_service):
    """A January statement (1000 -> 1150) with two tagged transactions."""
    statement_id = statement_service.create_statement(
        start_date=date(2024, 1, 1),
        end_date=date(2024, 1, 31),
        starting_balance=Decimal("1000.00"),
        ending_balance=Decimal("1150.00"),
    )
    transaction_service.create_transaction(
        date=date(2024, 1, 5),
        amount=Decimal("200.00"),
        type="income",
        description="Client payment",
        statement_id=statement_id,
    )
    transaction_service.create_transaction(
        date=date(2024, 1, 10),
        amount=Decimal("50.00"),
        type="expense",
        vendor="Hardware Store",
        statement_id=statement_id,
    )
    return statement_service.get_statement(statement_id)


@pytest.fixture
def sample_invoice(invoice_service):
    """A sent invoice for 500.00."""
    invoice_id = invoice_service.create_invoice("INV-1001", Decimal("500.00"), status="sent")
    return invoice_service.get_invoice(invoice_id)


@pytest.fixture
def statement_file(tmp_path):
    """Write the sample statement CSV to a temporary file."""
    path = tmp_path / "january.csv"
    path.write_text(SAMPLE_STATEMENT_CSV, encoding="utf-8")
    return path


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
