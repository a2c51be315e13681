"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations or a concurrent update."""


def account_not_found(account_id: int) -> str:
    """Return message for missing bank account."""
    return f"Account {account_id} not found"


def transaction_not_found(transaction_id: int) -> str:
    """Return message for missing transaction."""
    return f"Transaction {transaction_id} not found"


def statement_not_found(statement_id: int) -> str:
    """Return message for missing bank statement."""
    return f"Statement {statement_id} not found"


def statement_already_reconciled(statement_id: int) -> str:
    """Return message when a reconciled statement would be modified."""
    return f"Statement {statement_id} is already reconciled"


def rule_not_found(rule_id: int) -> str:
    """Return message for missing category rule."""
    return f"Rule {rule_id} not found"


def invoice_not_found(invoice_id: int) -> str:
    """Return message for missing invoice."""
    return f"Invoice {invoice_id} not found"


def unknown_category(category: str) -> str:
    """Return message for a category outside the vocabulary."""
    return f"Unknown category '{category}'"


def invalid_choice(field_name: str, value: str, choices: tuple[str, ...]) -> str:
    """Return message for a value outside a closed set."""
    return f"Invalid {field_name} '{value}'. Must be one of: {', '.join(choices)}"


def payment_not_positive(amount) -> str:
    """Return message for a zero or negative payment."""
    return f"Payment amount must be greater than zero (got {amount})"


def payment_exceeds_balance(amount, balance_due) -> str:
    """Return message for a payment larger than the outstanding balance."""
    return f"Payment amount {amount} exceeds balance due {balance_due}"


def payment_conflict(invoice_id: int, attempts: int) -> str:
    """Return message when concurrent updates keep winning the race."""
    return (
        f"Invoice {invoice_id} was modified concurrently; "
        f"payment not recorded after {attempts} attempt{'s' if attempts != 1 else ''}"
    )
