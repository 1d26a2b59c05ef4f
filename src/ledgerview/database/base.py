"""Abstract database interface."""

from abc import ABC, abstractmethod
from typing import Optional
from datetime import date, datetime
from decimal import Decimal

# Import entities directly to avoid circular import through domain services
from ledgerview.domain.entities import (
    BankAccount,
    Category,
    StatementImport,
    Transaction,
)


class Database(ABC):
    """Abstract data-access interface for ledgerview.

    The reconciliation core receives an instance explicitly; nothing in the
    domain layer reaches for a global client.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # Bank account operations
    @abstractmethod
    def create_bank_account(
        self,
        name: str,
        bank_name: str,
        balance_type: str = "asset",
        currency: str = "CAD",
        account_type: Optional[str] = None,
        account_number_last4: Optional[str] = None,
        is_active: bool = True,
    ) -> int:
        """Create a bank account. Returns bank account ID."""
        pass

    @abstractmethod
    def get_bank_account(self, bank_account_id: int) -> Optional[BankAccount]:
        """Get bank account by ID."""
        pass

    @abstractmethod
    def list_bank_accounts(self, active_only: bool = True) -> list[BankAccount]:
        """List bank accounts ordered by name."""
        pass

    # Statement operations
    @abstractmethod
    def create_statement(
        self,
        bank_account_id: int,
        statement_period_start: date,
        statement_period_end: date,
        opening_balance: Decimal,
        closing_balance: Decimal,
        total_transactions: int = 0,
        total_credits: Decimal = Decimal("0"),
        total_debits: Decimal = Decimal("0"),
        file_name: Optional[str] = None,
        import_status: str = "pending_review",
    ) -> int:
        """Create a statement import. Returns statement ID."""
        pass

    @abstractmethod
    def get_statement(self, statement_id: int) -> Optional[StatementImport]:
        """Get statement import by ID."""
        pass

    @abstractmethod
    def list_statements(self, bank_account_id: int) -> list[StatementImport]:
        """List statements for a bank account, newest period end first."""
        pass

    @abstractmethod
    def confirm_statement(
        self,
        statement_id: int,
        confirmed_by: Optional[str] = None,
        confirmed_at: Optional[datetime] = None,
    ) -> None:
        """Mark a statement confirmed and lock all of its transactions."""
        pass

    @abstractmethod
    def delete_statement(self, statement_id: int) -> None:
        """Delete a statement and its transactions (transactions first)."""
        pass

    # Category operations
    @abstractmethod
    def create_category(
        self,
        name: str,
        code: Optional[str] = None,
        category_type: Optional[str] = None,
        is_active: bool = True,
    ) -> int:
        """Create a category. Returns category ID."""
        pass

    @abstractmethod
    def list_categories(self, active_only: bool = True) -> list[Category]:
        """List categories ordered by name."""
        pass

    # Transaction operations
    @abstractmethod
    def create_transaction(
        self,
        statement_import_id: int,
        transaction_date: date,
        description: str,
        amount: Decimal,
        transaction_type: str,
        total_amount: Optional[Decimal] = None,
        posting_date: Optional[date] = None,
        payee_name: Optional[str] = None,
        running_balance: Optional[Decimal] = None,
        category_id: Optional[int] = None,
        needs_review: bool = False,
    ) -> int:
        """Create a transaction on a statement. Returns transaction ID."""
        pass

    @abstractmethod
    def get_transaction(self, transaction_id: int) -> Optional[Transaction]:
        """Get transaction by ID."""
        pass

    @abstractmethod
    def list_transactions(self, statement_import_id: int) -> list[Transaction]:
        """List a statement's transactions by transaction date, then ID."""
        pass

    @abstractmethod
    def update_transaction(
        self,
        transaction_id: int,
        transaction_type: str,
        total_amount: Decimal,
        amount: Decimal,
        is_edited: bool,
        edited_at: datetime,
    ) -> None:
        """Write a reviewed direction/amount back to a transaction.

        Raises:
            NotFoundError: If the transaction does not exist
            LockedTransactionError: If the transaction is locked
        """
        pass
