"""Display filters over a balance-annotated ledger.

Balances are computed over the full ledger before any filter runs; filters
only choose which rows are shown.
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional

from ledgerview.domain.entities import CREDIT, DEBIT
from ledgerview.domain.errors import ValidationError
from ledgerview.domain.ledger import BalanceProjection
from ledgerview.domain.overlay import EditableTransaction

DIRECTION_ALL = "all"
DIRECTION_CHOICES = (DIRECTION_ALL, CREDIT, DEBIT)

STATUS_ALL = "all"
STATUS_CHANGED = "changed"
STATUS_NEEDS_REVIEW = "needs_review"
STATUS_EDITED = "edited"
STATUS_CHOICES = (STATUS_ALL, STATUS_CHANGED, STATUS_NEEDS_REVIEW, STATUS_EDITED)


@dataclass(frozen=True)
class LedgerRow:
    """An overlay row with its running balance and ledger position."""

    row: EditableTransaction
    calculated_balance: Decimal
    index: int

    @property
    def id(self) -> int:
        return self.row.id

    @property
    def transaction(self):
        return self.row.baseline

    @property
    def changed(self) -> bool:
        return self.row.changed


def annotate(rows: Iterable[EditableTransaction], projection: BalanceProjection) -> list[LedgerRow]:
    """Pair each overlay row with the balance computed for it."""
    return [
        LedgerRow(row=row, calculated_balance=projected.balance, index=index)
        for index, (row, projected) in enumerate(zip(rows, projection.rows))
    ]


@dataclass(frozen=True)
class TransactionFilter:
    """Active display filters; every set filter must match."""

    date_from: Optional[date] = None
    date_to: Optional[date] = None
    direction: str = DIRECTION_ALL
    text: Optional[str] = None
    amount_min: Optional[Decimal] = None
    amount_max: Optional[Decimal] = None
    status: str = STATUS_ALL

    def __post_init__(self):
        if self.direction not in DIRECTION_CHOICES:
            raise ValidationError(
                f"Unknown direction filter '{self.direction}'. "
                f"Choose from: {', '.join(DIRECTION_CHOICES)}"
            )
        if self.status not in STATUS_CHOICES:
            raise ValidationError(
                f"Unknown status filter '{self.status}'. "
                f"Choose from: {', '.join(STATUS_CHOICES)}"
            )

    @property
    def active_count(self) -> int:
        return sum(
            [
                self.date_from is not None,
                self.date_to is not None,
                self.direction != DIRECTION_ALL,
                bool(self.text and self.text.strip()),
                self.amount_min is not None,
                self.amount_max is not None,
                self.status != STATUS_ALL,
            ]
        )

    def matches(self, ledger_row: LedgerRow) -> bool:
        row = ledger_row.row
        txn = row.baseline

        if self.date_from is not None and txn.transaction_date < self.date_from:
            return False
        if self.date_to is not None and txn.transaction_date > self.date_to:
            return False

        if self.direction != DIRECTION_ALL and row.edited_type != self.direction:
            return False

        if self.text and self.text.strip():
            term = self.text.strip().lower()
            description = (txn.description or "").lower()
            payee = (txn.payee_name or "").lower()
            if term not in description and term not in payee:
                return False

        if self.amount_min is not None and row.edited_amount < self.amount_min:
            return False
        if self.amount_max is not None and row.edited_amount > self.amount_max:
            return False

        if self.status == STATUS_CHANGED:
            return row.changed
        if self.status == STATUS_NEEDS_REVIEW:
            return row.needs_review
        if self.status == STATUS_EDITED:
            # Persisted edit that is not being re-edited right now
            return row.is_edited and not row.changed
        return True


def apply_filters(
    rows: Iterable[LedgerRow], filters: Optional[TransactionFilter] = None
) -> list[LedgerRow]:
    """Return the rows that pass every active filter, in ledger order."""
    rows = list(rows)
    if filters is None:
        return rows
    return [row for row in rows if filters.matches(row)]
