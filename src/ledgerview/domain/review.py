"""Statement review domain service.

Drives one review session: choose a bank account and statement, load its
transactions into an edit overlay, project running balances, check them
against the statement, and save or confirm.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ledgerview.database.base import Database
from ledgerview.domain.entities import (
    BalanceCheck,
    BankAccount,
    Category,
    StatementImport,
    STATUS_PENDING_REVIEW,
    STATUS_PROCESSING,
)
from ledgerview.domain.errors import (
    ConflictError,
    DependencyError,
    FetchError,
    NotFoundError,
    UnbalancedStatementError,
    bank_account_not_found,
    no_statement_selected,
    statement_already_confirmed,
    statement_has_unsaved_changes,
    statement_not_confirmable,
    statement_not_found,
    statement_unbalanced,
)
from ledgerview.domain.filters import LedgerRow, TransactionFilter, annotate, apply_filters
from ledgerview.domain.ledger import (
    BalanceProjection,
    LedgerTotals,
    Number,
    check_balance,
    project_running_balances,
    summarize_rows,
)
from ledgerview.domain.overlay import CommitResult, EditOverlay, commit_overlay

LOGGER = logging.getLogger(__name__)

CONFIRMABLE_STATUSES = (STATUS_PENDING_REVIEW, STATUS_PROCESSING)


@dataclass(frozen=True)
class FetchTicket:
    """Identifies the selection a fetch was issued for."""

    generation: int
    statement_id: int


class StatementReviewService:
    """Service for reviewing and reconciling one statement at a time."""

    def __init__(self, db: Database):
        """Initialize statement review service.

        Args:
            db: Database instance
        """
        self.db = db
        self.bank_account: Optional[BankAccount] = None
        self.statement: Optional[StatementImport] = None
        self.overlay = EditOverlay()
        self.saving = False
        self._generation = 0
        self._overlay_serial = 0
        self._projection_key = None
        self._projection: Optional[BalanceProjection] = None

    # Listings
    def list_bank_accounts(self, active_only: bool = True) -> list[BankAccount]:
        """List bank accounts available for review.

        Raises:
            FetchError: If storage could not be read
        """
        try:
            return self.db.list_bank_accounts(active_only=active_only)
        except Exception as e:
            LOGGER.error("Failed to load bank accounts: %s", e)
            raise FetchError("Failed to load bank accounts") from e

    def list_statements(self, bank_account_id: int) -> list[StatementImport]:
        """List statements for a bank account, newest first.

        Raises:
            FetchError: If storage could not be read
        """
        try:
            return self.db.list_statements(bank_account_id)
        except Exception as e:
            LOGGER.error("Failed to load statements for account %s: %s", bank_account_id, e)
            raise FetchError("Failed to load statements") from e

    def list_categories(self, active_only: bool = True) -> list[Category]:
        """List categories.

        Raises:
            FetchError: If storage could not be read
        """
        try:
            return self.db.list_categories(active_only=active_only)
        except Exception as e:
            LOGGER.error("Failed to load categories: %s", e)
            raise FetchError("Failed to load categories") from e

    # Selection
    def _replace_overlay(self, overlay: EditOverlay) -> None:
        self.overlay = overlay
        self._overlay_serial += 1
        self._projection_key = None
        self._projection = None

    def _bump_generation(self) -> None:
        self._generation += 1
        self._replace_overlay(EditOverlay())

    def select_bank_account(self, bank_account_id: int) -> BankAccount:
        """Select a bank account, clearing any selected statement.

        Raises:
            NotFoundError: If the bank account doesn't exist
        """
        account = self.db.get_bank_account(bank_account_id)
        if account is None:
            raise NotFoundError(bank_account_not_found(bank_account_id))
        self.bank_account = account
        self.statement = None
        self._bump_generation()
        return account

    def select_statement(self, statement_id: int) -> StatementImport:
        """Select a statement; its bank account becomes the selected account.

        Transactions are not loaded until load_transactions() is called.

        Raises:
            NotFoundError: If the statement or its bank account doesn't exist
        """
        statement = self.db.get_statement(statement_id)
        if statement is None:
            raise NotFoundError(statement_not_found(statement_id))
        if self.bank_account is None or self.bank_account.id != statement.bank_account_id:
            account = self.db.get_bank_account(statement.bank_account_id)
            if account is None:
                raise NotFoundError(bank_account_not_found(statement.bank_account_id))
            self.bank_account = account
        self.statement = statement
        self._bump_generation()
        return statement

    def _require_statement(self) -> StatementImport:
        if self.statement is None:
            raise DependencyError(no_statement_selected())
        return self.statement

    # Loading
    def begin_fetch(self) -> FetchTicket:
        """Capture the current selection before issuing a fetch."""
        statement = self._require_statement()
        return FetchTicket(generation=self._generation, statement_id=statement.id)

    def is_current(self, ticket: FetchTicket) -> bool:
        return (
            self.statement is not None
            and ticket.generation == self._generation
            and ticket.statement_id == self.statement.id
        )

    def apply_transactions(self, ticket: FetchTicket, transactions) -> bool:
        """Install fetched transactions if the selection hasn't moved on.

        Returns:
            False if the response was stale and discarded
        """
        if not self.is_current(ticket):
            LOGGER.debug(
                "Discarding stale transactions for statement %s", ticket.statement_id
            )
            return False
        self._replace_overlay(EditOverlay(transactions))
        return True

    def load_transactions(self) -> EditOverlay:
        """Fetch the selected statement's transactions into a fresh overlay.

        Raises:
            FetchError: If storage could not be read; the overlay is left empty
        """
        ticket = self.begin_fetch()
        try:
            statement = self.db.get_statement(ticket.statement_id)
            transactions = self.db.list_transactions(ticket.statement_id)
        except Exception as e:
            LOGGER.error("Failed to load transactions for statement %s: %s", ticket.statement_id, e)
            if self.is_current(ticket):
                self._replace_overlay(EditOverlay())
            raise FetchError("Failed to load transactions") from e

        if statement is not None and self.is_current(ticket):
            self.statement = statement
        if self.apply_transactions(ticket, transactions):
            LOGGER.info(
                "Loaded %d transaction(s) for statement %s", len(transactions), ticket.statement_id
            )
        return self.overlay

    # Balances
    @property
    def is_liability(self) -> bool:
        return self.bank_account is not None and self.bank_account.is_liability

    def projection(self) -> BalanceProjection:
        """Running balances over the full ledger with current edits applied."""
        statement = self._require_statement()
        key = (
            statement.id,
            statement.opening_balance,
            self.is_liability,
            self._overlay_serial,
            self.overlay.revision,
        )
        if self._projection is None or self._projection_key != key:
            self._projection = project_running_balances(
                statement.opening_balance, self.overlay, self.is_liability
            )
            self._projection_key = key
        return self._projection

    def ledger(self, filters: Optional[TransactionFilter] = None) -> list[LedgerRow]:
        """Balance-annotated rows, optionally filtered for display."""
        rows = annotate(self.overlay, self.projection())
        return apply_filters(rows, filters)

    def balance_check(self) -> BalanceCheck:
        statement = self._require_statement()
        return check_balance(statement.closing_balance, self.projection().final_balance)

    def ledger_totals(self) -> LedgerTotals:
        """Count and credit/debit sums of the working ledger, edits included."""
        self._require_statement()
        return summarize_rows(self.overlay)

    def category_labels(self) -> dict[int, str]:
        """Map category ids to display labels.

        Inactive categories are included since older transactions may still
        reference them.

        Raises:
            FetchError: If storage could not be read
        """
        return {
            category.id: f"{category.code} {category.name}" if category.code else category.name
            for category in self.list_categories(active_only=False)
        }

    # Editing
    def toggle_direction(self, transaction_id: int) -> bool:
        if self.saving:
            return False
        return self.overlay.toggle_direction(transaction_id)

    def set_amount(self, transaction_id: int, amount: Number) -> bool:
        if self.saving:
            return False
        return self.overlay.set_amount(transaction_id, amount)

    def reset(self) -> None:
        if self.saving:
            return
        self.overlay.reset()

    @property
    def dirty_count(self) -> int:
        return self.overlay.dirty_count

    def save_changes(self, now: Optional[datetime] = None) -> CommitResult:
        """Save every dirty row, then reload authoritative state.

        Rows that failed to save keep their working edits after the reload so
        they can be retried.
        """
        self._require_statement()
        if not self.overlay.has_changes:
            LOGGER.info("No changes to save")
            return CommitResult()

        self.saving = True
        self.overlay.frozen = True
        try:
            result = commit_overlay(self.db, self.overlay, now=now)
        finally:
            self.overlay.frozen = False
            self.saving = False

        pending = {
            row.id: (row.edited_type, row.edited_amount)
            for row in self.overlay.dirty_rows()
            if row.id in result.failed_ids
        }
        try:
            self.load_transactions()
        except FetchError:
            LOGGER.warning("Keeping local state; reload after save failed")
            return result

        for transaction_id, (edited_type, edited_amount) in pending.items():
            try:
                row = self.overlay.get(transaction_id)
            except NotFoundError:
                continue
            if row.edited_type != edited_type:
                self.overlay.toggle_direction(transaction_id)
            self.overlay.set_amount(transaction_id, edited_amount)
        return result

    # Statement lifecycle
    def confirm_statement(self, confirmed_by: Optional[str] = None) -> StatementImport:
        """Confirm the selected statement and lock its transactions.

        Refused before any storage write while the ledger is unbalanced or
        while unsaved edits exist.

        Raises:
            ConflictError: If the statement is not awaiting review
            DependencyError: If there are unsaved edits
            UnbalancedStatementError: If the projected closing balance is off
        """
        statement = self._require_statement()
        if statement.is_confirmed:
            raise ConflictError(statement_already_confirmed(statement.id))
        if statement.import_status not in CONFIRMABLE_STATUSES:
            raise ConflictError(statement_not_confirmable(statement.id, statement.import_status))
        if self.overlay.has_changes:
            raise DependencyError(statement_has_unsaved_changes(self.overlay.dirty_count))

        check = self.balance_check()
        if not check.is_balanced:
            LOGGER.warning(
                "Refusing to confirm statement %s: off by %s", statement.id, check.difference
            )
            raise UnbalancedStatementError(statement_unbalanced(check.difference))

        self.db.confirm_statement(statement.id, confirmed_by=confirmed_by)
        self.load_transactions()
        return self.statement

    def delete_statement(self) -> None:
        """Delete the selected statement and its transactions."""
        statement = self._require_statement()
        self.db.delete_statement(statement.id)
        self.statement = None
        self._bump_generation()
