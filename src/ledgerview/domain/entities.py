"""Domain model entities for ledgerview.

These are pure data classes representing business concepts, independent of
database schema. The reconciliation core only ever sees these, so the storage
backend can change without touching balance logic.
"""

from dataclasses import dataclass
from datetime import datetime, date
from decimal import Decimal
from typing import Optional

CREDIT = "credit"
DEBIT = "debit"
DIRECTIONS = (CREDIT, DEBIT)

BALANCE_TYPE_ASSET = "asset"
BALANCE_TYPE_LIABILITY = "liability"

STATUS_PROCESSING = "processing"
STATUS_PENDING_REVIEW = "pending_review"
STATUS_CONFIRMED = "confirmed"
STATUS_COMPLETED = "completed"
STATUS_ERROR = "error"
IMPORT_STATUSES = (
    STATUS_PROCESSING,
    STATUS_PENDING_REVIEW,
    STATUS_CONFIRMED,
    STATUS_COMPLETED,
    STATUS_ERROR,
)


def opposite_direction(direction: str) -> str:
    """Return the other transaction direction."""
    return DEBIT if direction == CREDIT else CREDIT


def normalize_direction(value: Optional[str]) -> str:
    """Coerce a stored transaction type to "credit" or "debit".

    Imports do not always agree on case or spacing. Anything that is not a
    credit is read as a debit.
    """
    if value is not None and value.strip().lower() == CREDIT:
        return CREDIT
    return DEBIT


@dataclass(frozen=True)
class BankAccount:
    """Bank account domain entity."""

    id: int
    name: str
    bank_name: str
    currency: str
    balance_type: str
    created_at: datetime
    account_type: Optional[str] = None
    account_number_last4: Optional[str] = None
    is_active: bool = True

    @property
    def is_liability(self) -> bool:
        """Credit cards and lines of credit grow with debits."""
        return self.balance_type == BALANCE_TYPE_LIABILITY


@dataclass(frozen=True)
class StatementImport:
    """One imported statement period for a bank account."""

    id: int
    bank_account_id: int
    statement_period_start: date
    statement_period_end: date
    opening_balance: Decimal
    closing_balance: Decimal
    total_transactions: int
    total_credits: Decimal
    total_debits: Decimal
    file_name: Optional[str]
    imported_at: datetime
    import_status: str = STATUS_PENDING_REVIEW
    confirmed_at: Optional[datetime] = None
    confirmed_by: Optional[str] = None

    @property
    def is_confirmed(self) -> bool:
        return self.import_status == STATUS_CONFIRMED


@dataclass(frozen=True)
class Category:
    """Category domain entity."""

    id: int
    code: Optional[str]
    name: str
    category_type: Optional[str]
    is_active: bool = True


@dataclass(frozen=True)
class Transaction:
    """Transaction domain entity as fetched from storage."""

    id: int
    statement_import_id: int
    bank_account_id: int
    transaction_date: date
    description: str
    amount: Decimal
    total_amount: Optional[Decimal]
    transaction_type: str
    posting_date: Optional[date] = None
    payee_name: Optional[str] = None
    running_balance: Optional[Decimal] = None
    category_id: Optional[int] = None
    needs_review: bool = False
    is_edited: bool = False
    edited_at: Optional[datetime] = None
    is_locked: bool = False

    @property
    def unsigned_amount(self) -> Decimal:
        """Amount without sign, preferring the stored total."""
        if self.total_amount:
            return abs(self.total_amount)
        if self.amount:
            return abs(self.amount)
        return Decimal("0")


@dataclass(frozen=True)
class BalanceCheck:
    """Projected closing balance compared against the statement's."""

    calculated_balance: Decimal
    difference: Decimal
    is_balanced: bool
