"""SQLAlchemy models for the ledgerline database."""

from datetime import datetime, UTC
from sqlalchemy import (
    Column,
    Integer,
    String,
    ForeignKey,
    DateTime,
    Date,
    Numeric,
    Boolean,
    create_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

Base = declarative_base()

MONEY = Numeric(12, 2)


class BankAccount(Base):
    """Bank account model."""

    __tablename__ = "bank_accounts"

    id = Column(Integer, primary_key=True)
    name = Column(String, unique=True, nullable=False)
    bank_name = Column(String, nullable=False)
    last_four = Column(String, nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    statements = relationship("BankStatement", back_populates="account")


class BankStatement(Base):
    """Bank statement model."""

    __tablename__ = "bank_statements"

    id = Column(Integer, primary_key=True)
    bank_account_id = Column(Integer, ForeignKey("bank_accounts.id"), nullable=True)
    filename = Column(String, nullable=True)
    start_date = Column(Date, nullable=True)
    end_date = Column(Date, nullable=True)
    starting_balance = Column(MONEY, nullable=True)
    ending_balance = Column(MONEY, nullable=True)
    total_deposits = Column(MONEY, nullable=True)
    total_withdrawals = Column(MONEY, nullable=True)
    transaction_count = Column(Integer, default=0, nullable=False)
    reconciled = Column(Boolean, default=False, nullable=False)
    reconciled_date = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    account = relationship("BankAccount", back_populates="statements")
    transactions = relationship("Transaction", back_populates="statement")


class Transaction(Base):
    """Transaction model. Amounts are stored signed."""

    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True)
    date = Column(Date, nullable=False)
    amount = Column(MONEY, nullable=False)
    type = Column(String, nullable=False)
    vendor = Column(String, nullable=True)
    description = Column(String, nullable=True)
    category = Column(String, nullable=True)
    is_reconciled = Column(Boolean, default=False, nullable=False)
    reconciled_date = Column(Date, nullable=True)
    statement_id = Column(Integer, ForeignKey("bank_statements.id"), nullable=True)
    bank_account_id = Column(Integer, ForeignKey("bank_accounts.id"), nullable=True)
    notes = Column(String, nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    statement = relationship("BankStatement", back_populates="transactions")


class CategoryRule(Base):
    """Category rule model."""

    __tablename__ = "category_rules"

    id = Column(Integer, primary_key=True)
    match_type = Column(String, nullable=False)
    match_value = Column(String, nullable=False)
    category = Column(String, nullable=False)
    applies_to = Column(String, default="both", nullable=False)
    confidence_source = Column(String, default="user", nullable=False)
    priority = Column(Integer, default=100, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)
    updated_at = Column(DateTime, nullable=True)


class Invoice(Base):
    """Invoice model (payment tracking columns)."""

    __tablename__ = "invoices"

    id = Column(Integer, primary_key=True)
    invoice_number = Column(String, unique=True, nullable=False)
    total = Column(MONEY, nullable=False)
    amount_paid = Column(MONEY, default=0, nullable=False)
    balance_due = Column(MONEY, nullable=False)
    status = Column(String, default="draft", nullable=False)
    due_date = Column(Date, nullable=True)
    paid_date = Column(Date, nullable=True)
    version = Column(Integer, default=1, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    payments = relationship(
        "InvoicePayment", back_populates="invoice", cascade="all, delete-orphan"
    )


class InvoicePayment(Base):
    """Payment recorded against an invoice."""

    __tablename__ = "invoice_payments"

    id = Column(Integer, primary_key=True)
    invoice_id = Column(Integer, ForeignKey("invoices.id"), nullable=False)
    amount = Column(MONEY, nullable=False)
    date = Column(Date, nullable=False)
    payment_method = Column(String, nullable=True)
    reference = Column(String, nullable=True)
    notes = Column(String, nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    invoice = relationship("Invoice", back_populates="payments")


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
