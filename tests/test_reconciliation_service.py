"""Tests for ReconciliationService and StatementService."""

from datetime import date, datetime
from decimal import Decimal

import pytest

from ledgerline.domain.errors import ConflictError, NotFoundError, ValidationError


class TestStatementService:
    """Tests for declaring and updating statements."""

    def test_create_and_get(self, statement_service, sample_account):
        statement_id = statement_service.create_statement(
            bank_account_id=sample_account.id,
            start_date=date(2024, 1, 1),
            end_date=date(2024, 1, 31),
            starting_balance=Decimal("10.00"),
        )

        statement = statement_service.get_statement(statement_id)
        assert statement.bank_account_id == sample_account.id
        assert statement.starting_balance == Decimal("10.00")
        assert statement.ending_balance is None
        assert statement.reconciled is False
        assert statement.reconciled_date is None

    def test_unknown_account(self, statement_service):
        with pytest.raises(NotFoundError):
            statement_service.create_statement(bank_account_id=42)

    def test_period_must_be_ordered(self, statement_service):
        with pytest.raises(ValidationError):
            statement_service.create_statement(start_date=date(2024, 2, 1), end_date=date(2024, 1, 1))

    def test_list_statements_by_account(self, statement_service, sample_account):
        statement_service.create_statement(bank_account_id=sample_account.id)
        statement_service.create_statement()

        assert len(statement_service.list_statements()) == 2
        assert len(statement_service.list_statements(bank_account_id=sample_account.id)) == 1

    def test_list_statements_newest_first(self, statement_service):
        first = statement_service.create_statement()
        second = statement_service.create_statement()

        assert [s.id for s in statement_service.list_statements()] == [second, first]

    def test_single_day_period(self, statement_service):
        statement_id = statement_service.create_statement(start_date=date(2024, 2, 1), end_date=date(2024, 2, 1))

        assert statement_service.get_statement(statement_id).end_date == date(2024, 2, 1)

    def test_update_balances_unknown_statement(self, statement_service):
        with pytest.raises(NotFoundError):
            statement_service.update_balances(5, starting_balance=Decimal("1"))

    def test_update_balances(self, statement_service, sample_statement):
        statement_service.update_balances(sample_statement.id, ending_balance=Decimal("1149.99"))

        statement = statement_service.get_statement(sample_statement.id)
        assert statement.starting_balance == Decimal("1000.00")
        assert statement.ending_balance == Decimal("1149.99")

    def test_update_balances_of_reconciled_statement_conflicts(
        self, statement_service, reconciliation_service, sample_statement
    ):
        reconciliation_service.complete(sample_statement.id)
        with pytest.raises(ConflictError):
            statement_service.update_balances(sample_statement.id, ending_balance=Decimal("0"))


class TestGetReport:
    """Tests for building a reconciliation report from stored data."""

    def test_report_balances(self, reconciliation_service, sample_statement):
        report = reconciliation_service.get_report(sample_statement.id)

        assert report.statement.id == sample_statement.id
        assert len(report.statement_transactions) == 2
        assert report.summary.book_ending_balance == Decimal("1150.00")
        assert report.summary.difference == Decimal("0")
        assert report.summary.can_complete is False

    def test_report_can_complete_after_marking(
        self, reconciliation_service, transaction_service, sample_statement
    ):
        for t in transaction_service.list_transactions(statement_id=sample_statement.id):
            reconciliation_service.mark_transaction(t.id)

        report = reconciliation_service.get_report(sample_statement.id)
        assert report.summary.can_complete is True

    def test_book_transactions_window_and_exclusions(
        self, reconciliation_service, transaction_service, statement_service, sample_statement
    ):
        inside_id = transaction_service.create_transaction(
            date=date(2024, 1, 15), amount=Decimal("9.99"), type="expense", vendor="Inside"
        )
        transaction_service.create_transaction(
            date=date(2024, 2, 15), amount=Decimal("9.99"), type="expense", vendor="Outside"
        )
        reconciled_id = transaction_service.create_transaction(
            date=date(2024, 1, 16), amount=Decimal("1.00"), type="expense", vendor="Done"
        )
        reconciliation_service.mark_transaction(reconciled_id)
        other_statement = statement_service.create_statement()
        transaction_service.create_transaction(
            date=date(2024, 1, 17),
            amount=Decimal("3.00"),
            type="expense",
            vendor="Other statement",
            statement_id=other_statement,
        )

        report = reconciliation_service.get_report(sample_statement.id)

        assert [t.vendor for t in report.book_transactions] == ["Other statement", "Inside"]
        assert inside_id in [t.id for t in report.book_transactions]

    def test_undated_statement_uses_open_window(
        self, reconciliation_service, transaction_service, statement_service
    ):
        statement_id = statement_service.create_statement()
        transaction_service.create_transaction(
            date=date(1999, 12, 31), amount=Decimal("5"), type="expense", vendor="Old"
        )

        report = reconciliation_service.get_report(statement_id)

        assert [t.vendor for t in report.book_transactions] == ["Old"]

    def test_suggestions_from_stored_transactions(
        self, reconciliation_service, transaction_service, sample_statement
    ):
        book_id = transaction_service.create_transaction(
            date=date(2024, 1, 11), amount=Decimal("50.00"), type="expense", vendor="Hardware"
        )

        report = reconciliation_service.get_report(sample_statement.id)

        assert len(report.summary.suggestions) == 1
        assert report.summary.suggestions[0].book_transaction.id == book_id

    def test_unknown_statement(self, reconciliation_service):
        with pytest.raises(NotFoundError):
            reconciliation_service.get_report(999)


class TestReconciliationActions:
    """Tests for marking, applying suggestions and completing."""

    def test_mark_and_unmark(self, reconciliation_service, transaction_service, sample_statement):
        txn = transaction_service.list_transactions(statement_id=sample_statement.id)[0]

        reconciliation_service.mark_transaction(txn.id, on=date(2024, 2, 1))
        marked = transaction_service.get_transaction(txn.id)
        assert marked.is_reconciled is True
        assert marked.reconciled_date == date(2024, 2, 1)

        reconciliation_service.mark_transaction(txn.id, reconciled=False)
        cleared = transaction_service.get_transaction(txn.id)
        assert cleared.is_reconciled is False
        assert cleared.reconciled_date is None

    def test_mark_defaults_to_today(self, reconciliation_service, transaction_service, sample_statement):
        txn = transaction_service.list_transactions(statement_id=sample_statement.id)[0]
        reconciliation_service.mark_transaction(txn.id)
        assert transaction_service.get_transaction(txn.id).reconciled_date == date.today()

    def test_mark_unknown_transaction(self, reconciliation_service):
        with pytest.raises(NotFoundError):
            reconciliation_service.mark_transaction(999)

    def test_apply_suggestions_marks_book_side_only(
        self, reconciliation_service, transaction_service, sample_statement
    ):
        book_id = transaction_service.create_transaction(
            date=date(2024, 1, 11), amount=Decimal("50.00"), type="expense", vendor="Hardware"
        )

        count = reconciliation_service.apply_suggestions(sample_statement.id)

        assert count == 1
        assert transaction_service.get_transaction(book_id).is_reconciled is True
        statement_rows = transaction_service.list_transactions(statement_id=sample_statement.id)
        assert all(not t.is_reconciled for t in statement_rows)

    def test_complete(self, reconciliation_service, statement_service, sample_statement):
        now = datetime(2024, 2, 1, 12, 0, 0)

        reconciliation_service.complete(sample_statement.id, now=now)

        statement = statement_service.get_statement(sample_statement.id)
        assert statement.reconciled is True
        assert statement.reconciled_date == now

    def test_complete_is_unconditional(self, reconciliation_service, statement_service, sample_statement):
        assert reconciliation_service.get_report(sample_statement.id).summary.can_complete is False
        reconciliation_service.complete(sample_statement.id)
        assert statement_service.get_statement(sample_statement.id).reconciled is True

    def test_complete_unknown_statement(self, reconciliation_service):
        with pytest.raises(NotFoundError):
            reconciliation_service.complete(999)
