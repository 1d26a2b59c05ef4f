"""Mapper functions to convert SQLAlchemy models into domain entities."""

from ledgerview.domain import entities as domain
from ledgerview.database.models import (
    BankAccount as ORMBankAccount,
    Category as ORMCategory,
    StatementImport as ORMStatementImport,
    Transaction as ORMTransaction,
)


def bank_account_to_domain(orm_account: ORMBankAccount) -> domain.BankAccount:
    """Convert SQLAlchemy BankAccount model to domain BankAccount entity."""
    return domain.BankAccount(
        id=orm_account.id,
        name=orm_account.name,
        bank_name=orm_account.bank_name,
        currency=orm_account.currency,
        balance_type=orm_account.balance_type,
        created_at=orm_account.created_at,
        account_type=orm_account.account_type,
        account_number_last4=orm_account.account_number_last4,
        is_active=orm_account.is_active,
    )


def statement_to_domain(orm_statement: ORMStatementImport) -> domain.StatementImport:
    """Convert SQLAlchemy StatementImport model to domain StatementImport entity."""
    return domain.StatementImport(
        id=orm_statement.id,
        bank_account_id=orm_statement.bank_account_id,
        statement_period_start=orm_statement.statement_period_start,
        statement_period_end=orm_statement.statement_period_end,
        opening_balance=orm_statement.opening_balance,
        closing_balance=orm_statement.closing_balance,
        total_transactions=orm_statement.total_transactions,
        total_credits=orm_statement.total_credits,
        total_debits=orm_statement.total_debits,
        file_name=orm_statement.file_name,
        imported_at=orm_statement.imported_at,
        import_status=orm_statement.import_status,
        confirmed_at=orm_statement.confirmed_at,
        confirmed_by=orm_statement.confirmed_by,
    )


def category_to_domain(orm_category: ORMCategory) -> domain.Category:
    """Convert SQLAlchemy Category model to domain Category entity."""
    return domain.Category(
        id=orm_category.id,
        code=orm_category.code,
        name=orm_category.name,
        category_type=orm_category.category_type,
        is_active=orm_category.is_active,
    )


def transaction_to_domain(orm_transaction: ORMTransaction) -> domain.Transaction:
    """Convert SQLAlchemy Transaction model to domain Transaction entity."""
    return domain.Transaction(
        id=orm_transaction.id,
        statement_import_id=orm_transaction.statement_import_id,
        bank_account_id=orm_transaction.bank_account_id,
        transaction_date=orm_transaction.transaction_date,
        description=orm_transaction.description,
        amount=orm_transaction.amount,
        total_amount=orm_transaction.total_amount,
        transaction_type=domain.normalize_direction(orm_transaction.transaction_type),
        posting_date=orm_transaction.posting_date,
        payee_name=orm_transaction.payee_name,
        running_balance=orm_transaction.running_balance,
        category_id=orm_transaction.category_id,
        needs_review=orm_transaction.needs_review,
        is_edited=orm_transaction.is_edited,
        edited_at=orm_transaction.edited_at,
        is_locked=orm_transaction.is_locked,
    )
