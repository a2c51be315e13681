"""Mapper functions to convert SQLAlchemy models into domain entities.

Keeping the conversion here means the domain layer never sees ORM rows and
schema changes stay local to the database package.
"""

from decimal import Decimal

from ledgerline.domain import entities as domain
from ledgerline.database.models import (
    BankAccount as ORMBankAccount,
    BankStatement as ORMBankStatement,
    Transaction as ORMTransaction,
    CategoryRule as ORMCategoryRule,
    Invoice as ORMInvoice,
    InvoicePayment as ORMInvoicePayment,
)


def _money(value) -> Decimal | None:
    if value is None:
        return None
    return Decimal(value)


def account_to_domain(orm_account: ORMBankAccount) -> domain.BankAccount:
    """Convert SQLAlchemy BankAccount model to domain BankAccount entity."""
    return domain.BankAccount(
        id=orm_account.id,
        name=orm_account.name,
        bank_name=orm_account.bank_name,
        last_four=orm_account.last_four,
        created_at=orm_account.created_at,
    )


def transaction_to_domain(orm_transaction: ORMTransaction) -> domain.Transaction:
    """Convert SQLAlchemy Transaction model to domain Transaction entity."""
    return domain.Transaction(
        id=orm_transaction.id,
        date=orm_transaction.date,
        amount=_money(orm_transaction.amount),
        type=orm_transaction.type,
        vendor=orm_transaction.vendor,
        description=orm_transaction.description,
        category=orm_transaction.category,
        is_reconciled=bool(orm_transaction.is_reconciled),
        reconciled_date=orm_transaction.reconciled_date,
        statement_id=orm_transaction.statement_id,
        bank_account_id=orm_transaction.bank_account_id,
        notes=orm_transaction.notes,
        created_at=orm_transaction.created_at,
    )


def statement_to_domain(orm_statement: ORMBankStatement) -> domain.BankStatement:
    """Convert SQLAlchemy BankStatement model to domain BankStatement entity."""
    return domain.BankStatement(
        id=orm_statement.id,
        bank_account_id=orm_statement.bank_account_id,
        filename=orm_statement.filename,
        start_date=orm_statement.start_date,
        end_date=orm_statement.end_date,
        starting_balance=_money(orm_statement.starting_balance),
        ending_balance=_money(orm_statement.ending_balance),
        total_deposits=_money(orm_statement.total_deposits),
        total_withdrawals=_money(orm_statement.total_withdrawals),
        transaction_count=orm_statement.transaction_count or 0,
        reconciled=bool(orm_statement.reconciled),
        reconciled_date=orm_statement.reconciled_date,
        created_at=orm_statement.created_at,
    )


def rule_to_domain(orm_rule: ORMCategoryRule) -> domain.CategoryRule:
    """Convert SQLAlchemy CategoryRule model to domain CategoryRule entity."""
    return domain.CategoryRule(
        id=orm_rule.id,
        match_type=orm_rule.match_type,
        match_value=orm_rule.match_value,
        category=orm_rule.category,
        applies_to=orm_rule.applies_to,
        priority=orm_rule.priority,
        is_active=bool(orm_rule.is_active),
        confidence_source=orm_rule.confidence_source,
        created_at=orm_rule.created_at,
        updated_at=orm_rule.updated_at,
    )


def invoice_to_domain(orm_invoice: ORMInvoice) -> domain.Invoice:
    """Convert SQLAlchemy Invoice model to domain Invoice entity."""
    return domain.Invoice(
        id=orm_invoice.id,
        invoice_number=orm_invoice.invoice_number,
        total=_money(orm_invoice.total),
        amount_paid=_money(orm_invoice.amount_paid),
        balance_due=_money(orm_invoice.balance_due),
        status=orm_invoice.status,
        due_date=orm_invoice.due_date,
        paid_date=orm_invoice.paid_date,
        version=orm_invoice.version,
        created_at=orm_invoice.created_at,
    )


def payment_to_domain(orm_payment: ORMInvoicePayment) -> domain.InvoicePayment:
    """Convert SQLAlchemy InvoicePayment model to domain InvoicePayment entity."""
    return domain.InvoicePayment(
        id=orm_payment.id,
        invoice_id=orm_payment.invoice_id,
        amount=_money(orm_payment.amount),
        date=orm_payment.date,
        payment_method=orm_payment.payment_method,
        reference=orm_payment.reference,
        notes=orm_payment.notes,
        created_at=orm_payment.created_at,
    )
