"""Shared pytest fixtures for ledgerview tests."""

import tempfile
import os
from datetime import date
from decimal import Decimal
import pytest

from ledgerview.database.factories import create_sqlite_database
from ledgerview.domain.entities import Transaction
from ledgerview.domain.review import StatementReviewService


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    # Create database
    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def review_service(temp_db):
    """Create a StatementReviewService with a temporary database."""
    return StatementReviewService(temp_db)


@pytest.fixture
def asset_account(temp_db):
    """Create a chequing (asset-like) bank account."""
    account_id = temp_db.create_bank_account(
        name="Chequing", bank_name="Test Bank", balance_type="asset"
    )
    return temp_db.get_bank_account(account_id)


@pytest.fixture
def liability_account(temp_db):
    """Create a credit card (liability-like) bank account."""
    account_id = temp_db.create_bank_account(
        name="Visa", bank_name="Test Bank", balance_type="liability"
    )
    return temp_db.get_bank_account(account_id)


def _add_transactions(db, statement_id, rows):
    ids = []
    for txn_date, description, direction, amount in rows:
        amount = Decimal(amount)
        ids.append(
            db.create_transaction(
                statement_import_id=statement_id,
                transaction_date=txn_date,
                description=description,
                amount=amount if direction == "credit" else -amount,
                total_amount=amount,
                transaction_type=direction,
            )
        )
    return ids


@pytest.fixture
def sample_statement(temp_db, asset_account):
    """A balanced chequing statement: 1000.00 opening, net -235.50."""
    statement_id = temp_db.create_statement(
        bank_account_id=asset_account.id,
        statement_period_start=date(2024, 1, 1),
        statement_period_end=date(2024, 1, 31),
        opening_balance=Decimal("1000.00"),
        closing_balance=Decimal("764.50"),
        total_transactions=3,
        total_credits=Decimal("100.00"),
        total_debits=Decimal("335.50"),
    )
    _add_transactions(
        temp_db,
        statement_id,
        [
            (date(2024, 1, 5), "Client payment", "credit", "100.00"),
            (date(2024, 1, 10), "Office rent", "debit", "200.00"),
            (date(2024, 1, 15), "Hardware store", "debit", "135.50"),
        ],
    )
    return temp_db.get_statement(statement_id)


@pytest.fixture
def sample_transaction_ids(temp_db, sample_statement):
    """IDs of the sample statement's transactions in ledger order."""
    return [t.id for t in temp_db.list_transactions(sample_statement.id)]


@pytest.fixture
def liability_statement(temp_db, liability_account):
    """A balanced credit card statement: 500.00 owing, debits grow it."""
    statement_id = temp_db.create_statement(
        bank_account_id=liability_account.id,
        statement_period_start=date(2024, 2, 1),
        statement_period_end=date(2024, 2, 29),
        opening_balance=Decimal("500.00"),
        closing_balance=Decimal("360.00"),
    )
    _add_transactions(
        temp_db,
        statement_id,
        [
            (date(2024, 2, 3), "Restaurant", "debit", "60.00"),
            (date(2024, 2, 15), "Payment - thank you", "credit", "200.00"),
        ],
    )
    return temp_db.get_statement(statement_id)


@pytest.fixture
def make_transaction():
    """Build in-memory Transaction entities for pure overlay/ledger tests."""

    def _make(
        id,
        direction,
        amount,
        transaction_date=date(2024, 1, 1),
        description="Transaction",
        **kwargs,
    ):
        amount = Decimal(str(amount))
        return Transaction(
            id=id,
            statement_import_id=1,
            bank_account_id=1,
            transaction_date=transaction_date,
            description=description,
            amount=amount if direction == "credit" else -amount,
            total_amount=amount,
            transaction_type=direction,
            **kwargs,
        )

    return _make


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
