"""Demo data command."""

from datetime import date
from decimal import Decimal

import click
from ledgerview.domain.entities import BALANCE_TYPE_ASSET, BALANCE_TYPE_LIABILITY, CREDIT, DEBIT
from ledgerview.domain.ledger import balance_effect, round_cents

DEMO_CATEGORIES = [
    ("4000", "Sales Revenue", "revenue"),
    ("5100", "Office Supplies", "expense"),
    ("5200", "Meals & Entertainment", "expense"),
    ("5300", "Software Subscriptions", "expense"),
    ("1900", "Transfers", "transfer"),
]

# (date, description, payee, direction, amount, needs_review, category code)
DEMO_CHEQUING = [
    (date(2024, 1, 3), "E-TRANSFER RECEIVED", "Northwind Traders", CREDIT, "2500.00", False, "4000"),
    (date(2024, 1, 5), "POS PURCHASE STAPLES #221", "Staples", DEBIT, "84.37", False, "5100"),
    (date(2024, 1, 12), "PREAUTH DEBIT ADOBE", "Adobe", DEBIT, "29.99", True, None),
    (date(2024, 1, 12), "ONLINE PAYMENT VISA", None, DEBIT, "600.00", False, "1900"),
    (date(2024, 1, 20), "DEPOSIT", "Contoso Ltd", CREDIT, "1200.00", False, "4000"),
    # Imported with the wrong direction; fixing it balances the statement
    (date(2024, 1, 28), "POS PURCHASE TIM HORTONS", "Tim Hortons", CREDIT, "12.45", True, "5200"),
]

DEMO_VISA = [
    (date(2024, 1, 4), "AMAZON.CA", "Amazon", DEBIT, "145.20", False, "5100"),
    (date(2024, 1, 9), "UBER EATS", "Uber Eats", DEBIT, "38.60", False, "5200"),
    (date(2024, 1, 15), "PAYMENT - THANK YOU", None, CREDIT, "600.00", False, "1900"),
    (date(2024, 1, 22), "GITHUB INC", "GitHub", DEBIT, "21.00", True, "5300"),
]


def _create_statement(db, bank_account_id, opening, rows, is_liability, closing_offset, category_ids):
    """Create a statement whose closing balance is the true ledger result."""
    opening = Decimal(opening)
    credits = Decimal("0")
    debits = Decimal("0")
    true_balance = opening
    for _, _, _, direction, amount, _, _ in rows:
        true_balance = round_cents(true_balance + balance_effect(direction, amount, is_liability))
        if direction == CREDIT:
            credits += Decimal(amount)
        else:
            debits += Decimal(amount)

    statement_id = db.create_statement(
        bank_account_id=bank_account_id,
        statement_period_start=date(2024, 1, 1),
        statement_period_end=date(2024, 1, 31),
        opening_balance=opening,
        closing_balance=true_balance + closing_offset,
        total_transactions=len(rows),
        total_credits=credits,
        total_debits=debits,
        file_name="demo-2024-01.pdf",
    )

    # Persisted running balances follow the rows as imported
    running = opening
    for txn_date, description, payee, direction, amount, needs_review, code in rows:
        amount = Decimal(amount)
        running = round_cents(running + balance_effect(direction, amount, is_liability))
        db.create_transaction(
            statement_import_id=statement_id,
            transaction_date=txn_date,
            description=description,
            payee_name=payee,
            amount=amount if direction == CREDIT else -amount,
            total_amount=amount,
            transaction_type=direction,
            running_balance=running,
            category_id=category_ids.get(code),
            needs_review=needs_review,
        )
    return statement_id


@click.command("seed-demo")
@click.pass_context
def seed_demo(ctx):
    """Load a demo chequing account and credit card with one statement each.

    The chequing statement contains one transaction imported with the wrong
    direction, so it does not balance until that row is flipped.
    """
    db = ctx.obj["db"]

    category_ids = {
        code: db.create_category(name=name, code=code, category_type=category_type)
        for code, name, category_type in DEMO_CATEGORIES
    }

    chequing_id = db.create_bank_account(
        name="Business Chequing",
        bank_name="Demo Bank",
        balance_type=BALANCE_TYPE_ASSET,
        account_type="chequing",
        account_number_last4="4821",
    )
    visa_id = db.create_bank_account(
        name="Business Visa",
        bank_name="Demo Bank",
        balance_type=BALANCE_TYPE_LIABILITY,
        account_type="credit_card",
        account_number_last4="9034",
    )

    # The wrongly-credited coffee is off by twice its amount
    chequing_statement = _create_statement(
        db, chequing_id, "1000.00", DEMO_CHEQUING, False, Decimal("-24.90"), category_ids
    )
    visa_statement = _create_statement(
        db, visa_id, "310.75", DEMO_VISA, True, Decimal("0"), category_ids
    )

    click.echo(f"Created bank account 'Business Chequing' (ID: {chequing_id}) with statement {chequing_statement}")
    click.echo(f"Created bank account 'Business Visa' (ID: {visa_id}) with statement {visa_statement}")


def register_commands(cli):
    """Register seed command with main CLI."""
    cli.add_command(seed_demo)
