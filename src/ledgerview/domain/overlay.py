"""Provisional, unsaved edits layered over fetched transactions.

The overlay owns two snapshot pairs per row: the last saved direction/amount
and the working direction/amount. Whether a row is dirty is always derived
from those pairs. Rows are addressed by transaction id; list positions only
matter at the presentation boundary.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, UTC
from decimal import Decimal, InvalidOperation
from typing import Iterable, Optional

from ledgerview.database.base import Database
from ledgerview.domain.entities import CREDIT, Transaction, opposite_direction
from ledgerview.domain.errors import NotFoundError, ValidationError, transaction_not_found
from ledgerview.domain.ledger import Number, to_decimal

LOGGER = logging.getLogger(__name__)


@dataclass
class EditableTransaction:
    """A fetched transaction plus its working direction and amount."""

    baseline: Transaction
    original_type: str
    original_amount: Decimal
    edited_type: str
    edited_amount: Decimal

    @classmethod
    def from_transaction(cls, txn: Transaction) -> "EditableTransaction":
        amount = txn.unsigned_amount
        return cls(
            baseline=txn,
            original_type=txn.transaction_type,
            original_amount=amount,
            edited_type=txn.transaction_type,
            edited_amount=amount,
        )

    @property
    def id(self) -> int:
        return self.baseline.id

    @property
    def changed(self) -> bool:
        return (
            self.edited_type != self.original_type
            or self.edited_amount != self.original_amount
        )

    @property
    def is_locked(self) -> bool:
        return self.baseline.is_locked

    @property
    def is_edited(self) -> bool:
        return self.baseline.is_edited

    @property
    def needs_review(self) -> bool:
        return self.baseline.needs_review

    @property
    def signed_amount(self) -> Decimal:
        """Working amount with the storage sign convention (credits positive)."""
        return self.edited_amount if self.edited_type == CREDIT else -self.edited_amount


def parse_edit_amount(value: Number) -> Decimal:
    """Validate a replacement amount for a transaction.

    Raises:
        ValidationError: If the value is not a finite, non-negative number
    """
    try:
        amount = to_decimal(value.strip() if isinstance(value, str) else value)
    except (InvalidOperation, ValueError, TypeError):
        raise ValidationError(f"Invalid amount '{value}'")
    if not amount.is_finite():
        raise ValidationError(f"Amount must be a finite number, got '{value}'")
    if amount < 0:
        raise ValidationError(f"Amount cannot be negative, got '{value}'")
    return amount


class EditOverlay:
    """Ordered set of editable rows for one statement."""

    def __init__(self, transactions: Iterable[Transaction] = ()):
        self._rows: list[EditableTransaction] = []
        self._by_id: dict[int, EditableTransaction] = {}
        for txn in transactions:
            if txn.id in self._by_id:
                raise ValidationError(f"Duplicate transaction id {txn.id} in overlay")
            row = EditableTransaction.from_transaction(txn)
            self._rows.append(row)
            self._by_id[txn.id] = row
        self.revision = 0
        self.frozen = False

    def __len__(self) -> int:
        return len(self._rows)

    def __iter__(self):
        return iter(self._rows)

    @property
    def rows(self) -> tuple[EditableTransaction, ...]:
        return tuple(self._rows)

    def get(self, transaction_id: int) -> EditableTransaction:
        try:
            return self._by_id[transaction_id]
        except KeyError:
            raise NotFoundError(transaction_not_found(transaction_id))

    def row_id_at(self, index: int) -> int:
        """Resolve a ledger position to a transaction id."""
        return self._rows[index].id

    def index_of(self, transaction_id: int) -> int:
        return self._rows.index(self.get(transaction_id))

    def _editable(self, row: EditableTransaction) -> bool:
        if self.frozen:
            LOGGER.debug("Ignoring edit on transaction %s while saving", row.id)
            return False
        if row.is_locked:
            LOGGER.debug("Ignoring edit on locked transaction %s", row.id)
            return False
        return True

    def toggle_direction(self, transaction_id: int) -> bool:
        """Flip credit/debit on a row. Returns False if the row cannot change."""
        row = self.get(transaction_id)
        if not self._editable(row):
            return False
        row.edited_type = opposite_direction(row.edited_type)
        self.revision += 1
        return True

    def set_amount(self, transaction_id: int, amount: Number) -> bool:
        """Replace a row's working amount.

        Invalid amounts (negative, NaN, infinite, unparseable) leave the row
        untouched, as do locked rows.

        Returns:
            True if the working amount was updated
        """
        row = self.get(transaction_id)
        if not self._editable(row):
            return False
        try:
            new_amount = parse_edit_amount(amount)
        except ValidationError as e:
            LOGGER.debug("Rejected amount for transaction %s: %s", transaction_id, e)
            return False
        row.edited_amount = new_amount
        self.revision += 1
        return True

    def reset(self) -> None:
        """Discard every working edit."""
        if self.frozen:
            return
        for row in self._rows:
            row.edited_type = row.original_type
            row.edited_amount = row.original_amount
        self.revision += 1

    def dirty_rows(self) -> list[EditableTransaction]:
        return [row for row in self._rows if row.changed]

    @property
    def dirty_count(self) -> int:
        return sum(1 for row in self._rows if row.changed)

    @property
    def has_changes(self) -> bool:
        return any(row.changed for row in self._rows)

    def mark_committed(self, transaction_ids: Iterable[int]) -> None:
        """Make the working values of saved rows their new baseline."""
        for transaction_id in transaction_ids:
            row = self.get(transaction_id)
            row.original_type = row.edited_type
            row.original_amount = row.edited_amount
        self.revision += 1


@dataclass(frozen=True)
class CommitFailure:
    """A row that could not be saved."""

    transaction_id: int
    error: str


@dataclass
class CommitResult:
    """Outcome of saving dirty rows, reported per row."""

    updated: list[int] = field(default_factory=list)
    failed: list[CommitFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed

    @property
    def failed_ids(self) -> list[int]:
        return [failure.transaction_id for failure in self.failed]


def commit_overlay(
    db: Database, overlay: EditOverlay, now: Optional[datetime] = None
) -> CommitResult:
    """Write every dirty row back to storage.

    Each row is an independent update; a failing row does not stop or roll
    back the others. Saved rows become clean, failed rows keep their edits.

    Args:
        db: Database instance
        overlay: Overlay holding the working edits
        now: Edit timestamp, defaults to the current UTC time

    Returns:
        CommitResult listing saved and failed transaction ids
    """
    edited_at = now or datetime.now(UTC)
    result = CommitResult()
    for row in overlay.dirty_rows():
        if row.is_locked:
            LOGGER.warning("Skipping locked transaction %s in commit", row.id)
            continue
        try:
            db.update_transaction(
                transaction_id=row.id,
                transaction_type=row.edited_type,
                total_amount=row.edited_amount,
                amount=row.signed_amount,
                is_edited=True,
                edited_at=edited_at,
            )
        except Exception as e:
            LOGGER.error("Failed to save transaction %s: %s", row.id, e)
            result.failed.append(CommitFailure(transaction_id=row.id, error=str(e)))
        else:
            result.updated.append(row.id)

    if result.updated:
        overlay.mark_committed(result.updated)
    LOGGER.info(
        "Saved %d transaction(s), %d failed", len(result.updated), len(result.failed)
    )
    return result
