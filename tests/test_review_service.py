"""Tests for the statement review service."""

from datetime import date, datetime
from decimal import Decimal

import pytest

from ledgerview.domain.errors import (
    ConflictError,
    DependencyError,
    FetchError,
    NotFoundError,
    UnbalancedStatementError,
)
from ledgerview.domain.filters import TransactionFilter


def _open(service, statement):
    service.select_statement(statement.id)
    service.load_transactions()
    return service


class TestListings:
    """Tests for account, statement and category listings."""

    def test_list_bank_accounts_active_only(self, review_service, temp_db, asset_account):
        temp_db.create_bank_account(name="Old Savings", bank_name="Test Bank", is_active=False)

        active = review_service.list_bank_accounts()
        everything = review_service.list_bank_accounts(active_only=False)

        assert [a.name for a in active] == ["Chequing"]
        assert sorted(a.name for a in everything) == ["Chequing", "Old Savings"]

    def test_list_statements_newest_first(self, review_service, temp_db, asset_account, sample_statement):
        later = temp_db.create_statement(
            bank_account_id=asset_account.id,
            statement_period_start=date(2024, 2, 1),
            statement_period_end=date(2024, 2, 29),
            opening_balance=Decimal("764.50"),
            closing_balance=Decimal("764.50"),
        )

        statements = review_service.list_statements(asset_account.id)

        assert [s.id for s in statements] == [later, sample_statement.id]

    def test_list_categories(self, review_service, temp_db):
        temp_db.create_category(name="Rent", code="5000", category_type="expense")
        temp_db.create_category(name="Retired", is_active=False)

        assert [c.name for c in review_service.list_categories()] == ["Rent"]
        assert len(review_service.list_categories(active_only=False)) == 2

    def test_listing_failure_becomes_fetch_error(self, review_service, temp_db, monkeypatch):
        def broken(*args, **kwargs):
            raise RuntimeError("database is locked")

        monkeypatch.setattr(temp_db, "list_bank_accounts", broken)

        with pytest.raises(FetchError):
            review_service.list_bank_accounts()


class TestSelectionAndLoading:
    """Tests for selection and stale-response handling."""

    def test_select_statement_selects_its_account(self, review_service, sample_statement, asset_account):
        review_service.select_statement(sample_statement.id)

        assert review_service.bank_account.id == asset_account.id
        assert len(review_service.overlay) == 0

    def test_select_missing_statement(self, review_service):
        with pytest.raises(NotFoundError):
            review_service.select_statement(999)

    def test_select_missing_account(self, review_service):
        with pytest.raises(NotFoundError):
            review_service.select_bank_account(999)

    def test_select_account_clears_statement(self, review_service, sample_statement, liability_account):
        _open(review_service, sample_statement)

        review_service.select_bank_account(liability_account.id)

        assert review_service.statement is None
        assert len(review_service.overlay) == 0

    def test_load_transactions(self, review_service, sample_statement):
        overlay = _open(review_service, sample_statement).overlay

        assert [row.baseline.description for row in overlay] == [
            "Client payment",
            "Office rent",
            "Hardware store",
        ]
        assert review_service.dirty_count == 0

    def test_stale_response_is_discarded(self, review_service, temp_db, sample_statement, liability_statement):
        review_service.select_statement(sample_statement.id)
        ticket = review_service.begin_fetch()
        stale = temp_db.list_transactions(sample_statement.id)

        review_service.select_statement(liability_statement.id)

        assert review_service.apply_transactions(ticket, stale) is False
        assert len(review_service.overlay) == 0

    def test_reselecting_same_statement_invalidates_ticket(self, review_service, temp_db, sample_statement):
        review_service.select_statement(sample_statement.id)
        ticket = review_service.begin_fetch()
        review_service.select_statement(sample_statement.id)

        assert review_service.is_current(ticket) is False
        assert review_service.is_current(review_service.begin_fetch()) is True

    def test_load_failure_leaves_empty_overlay(self, review_service, temp_db, sample_statement, monkeypatch):
        _open(review_service, sample_statement)

        def broken(statement_import_id):
            raise RuntimeError("timeout")

        monkeypatch.setattr(temp_db, "list_transactions", broken)

        with pytest.raises(FetchError):
            review_service.load_transactions()
        assert len(review_service.overlay) == 0

    def test_requires_selected_statement(self, review_service):
        with pytest.raises(DependencyError):
            review_service.load_transactions()
        with pytest.raises(DependencyError):
            review_service.balance_check()


class TestBalances:
    """Tests for projection and balance check through the service."""

    def test_asset_statement_balances(self, review_service, sample_statement):
        _open(review_service, sample_statement)

        assert review_service.projection().balances == [
            Decimal("1100.00"),
            Decimal("900.00"),
            Decimal("764.50"),
        ]
        check = review_service.balance_check()
        assert check.is_balanced
        assert check.difference == Decimal("0.00")

    def test_liability_statement_balances(self, review_service, liability_statement):
        _open(review_service, liability_statement)

        assert review_service.projection().balances == [Decimal("560.00"), Decimal("360.00")]
        assert review_service.balance_check().is_balanced

    def test_edit_recomputes_live(self, review_service, sample_statement, sample_transaction_ids):
        _open(review_service, sample_statement)

        review_service.toggle_direction(sample_transaction_ids[0])

        assert review_service.projection().final_balance == Decimal("564.50")
        check = review_service.balance_check()
        assert not check.is_balanced
        assert check.difference == Decimal("200.00")

    def test_projection_is_memoized(self, review_service, sample_statement, sample_transaction_ids):
        _open(review_service, sample_statement)

        first = review_service.projection()
        assert review_service.projection() is first

        review_service.set_amount(sample_transaction_ids[2], "135.00")
        second = review_service.projection()
        assert second is not first
        assert second.final_balance == Decimal("765.00")

    def test_ledger_filters_do_not_change_balances(self, review_service, sample_statement):
        _open(review_service, sample_statement)

        full = review_service.ledger()
        debits = review_service.ledger(TransactionFilter(direction="debit"))

        assert [row.calculated_balance for row in debits] == [Decimal("900.00"), Decimal("764.50")]
        assert [row.index for row in debits] == [1, 2]
        assert len(full) == 3


class TestSaveChanges:
    """Tests for saving edits."""

    def test_save_writes_and_reloads(self, review_service, temp_db, sample_statement, sample_transaction_ids):
        _open(review_service, sample_statement)
        target = sample_transaction_ids[1]
        review_service.set_amount(target, "210.00")

        result = review_service.save_changes(now=datetime(2024, 2, 1, 9, 30))

        assert result.updated == [target]
        assert result.ok
        assert review_service.dirty_count == 0
        row = review_service.overlay.get(target)
        assert row.original_amount == Decimal("210.00")
        assert row.is_edited
        assert temp_db.get_transaction(target).amount == Decimal("-210.00")

    def test_save_without_changes(self, review_service, sample_statement):
        _open(review_service, sample_statement)

        result = review_service.save_changes()

        assert result.updated == []
        assert result.failed == []

    def test_failed_rows_keep_edits_after_reload(
        self, review_service, temp_db, sample_statement, sample_transaction_ids, monkeypatch
    ):
        row_a, row_b, row_c = sample_transaction_ids
        _open(review_service, sample_statement)
        review_service.set_amount(row_a, "101.00")
        review_service.toggle_direction(row_b)
        review_service.set_amount(row_b, "150.00")
        review_service.set_amount(row_c, "136.00")

        real_update = temp_db.update_transaction

        def flaky_update(transaction_id, **kwargs):
            if transaction_id == row_b:
                raise RuntimeError("row version conflict")
            return real_update(transaction_id=transaction_id, **kwargs)

        monkeypatch.setattr(temp_db, "update_transaction", flaky_update)

        result = review_service.save_changes()

        assert sorted(result.updated) == [row_a, row_c]
        assert result.failed_ids == [row_b]
        assert review_service.dirty_count == 1

        failed = review_service.overlay.get(row_b)
        assert failed.changed
        assert failed.edited_type == "credit"
        assert failed.edited_amount == Decimal("150.00")
        assert failed.original_type == "debit"

        for transaction_id in (row_a, row_c):
            row = review_service.overlay.get(transaction_id)
            assert not row.changed
            assert row.is_edited

    def test_edits_refused_while_saving(self, review_service, sample_statement, sample_transaction_ids):
        _open(review_service, sample_statement)
        review_service.saving = True

        assert review_service.toggle_direction(sample_transaction_ids[0]) is False
        assert review_service.set_amount(sample_transaction_ids[0], "1") is False
        assert review_service.dirty_count == 0

    def test_reset(self, review_service, sample_statement, sample_transaction_ids):
        _open(review_service, sample_statement)
        review_service.toggle_direction(sample_transaction_ids[0])
        review_service.set_amount(sample_transaction_ids[1], "1")

        review_service.reset()

        assert review_service.dirty_count == 0
        assert review_service.balance_check().is_balanced


class TestConfirmStatement:
    """Tests for confirming statements."""

    def test_confirm_balanced_statement_locks_rows(
        self, review_service, temp_db, sample_statement, sample_transaction_ids
    ):
        _open(review_service, sample_statement)

        statement = review_service.confirm_statement(confirmed_by="reviewer@example.com")

        assert statement.is_confirmed
        assert statement.confirmed_by == "reviewer@example.com"
        assert statement.confirmed_at is not None
        assert all(row.is_locked for row in review_service.overlay)
        assert review_service.toggle_direction(sample_transaction_ids[0]) is False
        assert review_service.dirty_count == 0

    def test_unbalanced_statement_is_refused_before_writing(
        self, review_service, temp_db, sample_statement, sample_transaction_ids, monkeypatch
    ):
        _open(review_service, sample_statement)
        review_service.set_amount(sample_transaction_ids[0], "90.00")
        review_service.save_changes()

        calls = []
        monkeypatch.setattr(temp_db, "confirm_statement", lambda *a, **kw: calls.append(a))

        with pytest.raises(UnbalancedStatementError) as excinfo:
            review_service.confirm_statement()

        assert "$10.00" in str(excinfo.value)
        assert calls == []

    def test_unsaved_changes_are_refused(self, review_service, sample_statement, sample_transaction_ids):
        _open(review_service, sample_statement)
        review_service.toggle_direction(sample_transaction_ids[0])
        review_service.toggle_direction(sample_transaction_ids[0])
        review_service.set_amount(sample_transaction_ids[1], "200.01")

        with pytest.raises(DependencyError):
            review_service.confirm_statement()

    def test_confirm_twice_conflicts(self, review_service, sample_statement):
        _open(review_service, sample_statement)
        review_service.confirm_statement()

        with pytest.raises(ConflictError):
            review_service.confirm_statement()


class TestDeleteStatement:
    """Tests for deleting statements."""

    def test_delete_removes_statement_and_transactions(
        self, review_service, temp_db, sample_statement, sample_transaction_ids
    ):
        _open(review_service, sample_statement)

        review_service.delete_statement()

        assert temp_db.get_statement(sample_statement.id) is None
        assert temp_db.list_transactions(sample_statement.id) == []
        assert review_service.statement is None
        assert len(review_service.overlay) == 0


class TestConfirmableStatuses:
    """Tests for statuses that cannot be confirmed."""

    @pytest.mark.parametrize("status", ["error", "completed"])
    def test_status_not_awaiting_review(self, review_service, temp_db, asset_account, status):
        statement_id = temp_db.create_statement(
            bank_account_id=asset_account.id,
            statement_period_start=date(2024, 3, 1),
            statement_period_end=date(2024, 3, 31),
            opening_balance=Decimal("0"),
            closing_balance=Decimal("0"),
            import_status=status,
        )
        review_service.select_statement(statement_id)
        review_service.load_transactions()

        with pytest.raises(ConflictError) as excinfo:
            review_service.confirm_statement()

        message = str(excinfo.value)
        assert "already confirmed" not in message
        assert f"while its status is '{status}'" in message

    def test_processing_statement_can_be_confirmed(self, review_service, temp_db, asset_account):
        statement_id = temp_db.create_statement(
            bank_account_id=asset_account.id,
            statement_period_start=date(2024, 3, 1),
            statement_period_end=date(2024, 3, 31),
            opening_balance=Decimal("0"),
            closing_balance=Decimal("0"),
            import_status="processing",
        )
        review_service.select_statement(statement_id)
        review_service.load_transactions()

        assert review_service.confirm_statement().is_confirmed


class TestReloadAndTotals:
    """Tests for reload invalidation, ledger totals and category labels."""

    def test_reload_recomputes_projection(
        self, review_service, temp_db, sample_statement, sample_transaction_ids
    ):
        _open(review_service, sample_statement)
        before = review_service.projection()

        temp_db.update_transaction(
            transaction_id=sample_transaction_ids[2],
            transaction_type="debit",
            total_amount=Decimal("35.50"),
            amount=Decimal("-35.50"),
            is_edited=True,
            edited_at=datetime(2024, 2, 1),
        )
        review_service.load_transactions()
        review_service.load_transactions()

        after = review_service.projection()
        assert after is not before
        assert review_service.overlay.revision == 0
        assert after.final_balance == Decimal("864.50")

    def test_stale_projection_dropped_when_overlay_replaced(
        self, review_service, sample_statement, make_transaction
    ):
        _open(review_service, sample_statement)
        review_service.projection()

        ticket = review_service.begin_fetch()
        review_service.apply_transactions(ticket, [make_transaction(99, "credit", 5)])

        assert review_service.projection().final_balance == Decimal("1005.00")

    def test_ledger_totals_use_edits(self, review_service, sample_statement, sample_transaction_ids):
        _open(review_service, sample_statement)
        review_service.toggle_direction(sample_transaction_ids[1])

        totals = review_service.ledger_totals()

        assert totals.count == 3
        assert totals.credits == Decimal("300.00")
        assert totals.debits == Decimal("135.50")

    def test_category_labels(self, review_service, temp_db):
        coded = temp_db.create_category(name="Rent", code="5000")
        plain = temp_db.create_category(name="Misc", is_active=False)

        assert review_service.category_labels() == {coded: "5000 Rent", plain: "Misc"}
