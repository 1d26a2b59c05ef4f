"""Shared domain error messages and error types."""

from decimal import Decimal


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
    """Domain conflict, such as editing a row that can no longer change."""


class DependencyError(DomainError):
    """Operation blocked due to missing or dependent domain data."""


class LockedTransactionError(ConflictError):
    """Transaction belongs to a confirmed statement and cannot be modified."""


class UnbalancedStatementError(DomainError):
    """Statement cannot be confirmed while its ledger does not balance."""


class FetchError(DomainError):
    """Loading data from storage failed."""


def bank_account_not_found(bank_account_id: int) -> str:
    """Return message for missing bank account."""
    return f"Bank account {bank_account_id} not found"


def statement_not_found(statement_id: int) -> str:
    """Return message for missing statement import."""
    return f"Statement {statement_id} not found"


def transaction_not_found(transaction_id: int) -> str:
    """Return message for missing transaction."""
    return f"Transaction {transaction_id} not found"


def transaction_locked(transaction_id: int) -> str:
    """Return message for an edit attempt on a locked transaction."""
    return f"Transaction {transaction_id} is locked by a confirmed statement"


def statement_already_confirmed(statement_id: int) -> str:
    """Return message when confirming a statement twice."""
    return f"Statement {statement_id} is already confirmed"


def statement_not_confirmable(statement_id: int, status: str) -> str:
    """Return message when a statement is not awaiting review."""
    return f"Statement {statement_id} cannot be confirmed while its status is '{status}'"


def statement_unbalanced(difference: Decimal) -> str:
    """Return message when the projected closing balance is off."""
    return (
        f"Statement must be balanced before confirming: "
        f"off by ${abs(difference):,.2f}"
    )


def statement_has_unsaved_changes(dirty_count: int) -> str:
    """Return message when confirming with pending edits."""
    return (
        f"Save or reset {dirty_count} unsaved "
        f"change{'s' if dirty_count != 1 else ''} before confirming"
    )


def no_statement_selected() -> str:
    """Return message for operations that need a selected statement."""
    return "No statement selected"
