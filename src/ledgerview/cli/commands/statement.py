"""Statement review commands."""

import click
from ledgerview.domain.entities import CREDIT
from ledgerview.domain.errors import DomainError
from ledgerview.domain.filters import DIRECTION_CHOICES, STATUS_CHOICES, TransactionFilter
from ledgerview.domain.review import StatementReviewService
from ledgerview.cli.error_handling import handle_domain_error, report_commit_result
from ledgerview.utils.account_resolver import resolve_bank_account
from ledgerview.utils.amount_parser import parse_amount, parse_amount_assignment
from ledgerview.utils.date_parser import format_period, parse_date


def _money(value) -> str:
    sign = "-" if value < 0 else ""
    return f"{sign}${abs(value):,.2f}"


def _open_statement(ctx, statement_id: int) -> StatementReviewService:
    """Select a statement and load its ledger, or exit with an error."""
    service = StatementReviewService(ctx.obj["db"])
    try:
        service.select_statement(statement_id)
        service.load_transactions()
    except DomainError as e:
        handle_domain_error(ctx, e)
    return service


def _resolve_row(service: StatementReviewService, token: str) -> int:
    """Resolve a transaction ID, or '#N' for the N-th ledger row, to an ID."""
    token = token.strip()
    try:
        if token.startswith("#"):
            position = int(token[1:])
            if position < 1:
                raise IndexError(position)
            return service.overlay.row_id_at(position - 1)
        transaction_id = int(token)
    except (ValueError, IndexError):
        raise click.BadParameter(f"'{token}' is not a transaction ID or ledger row (#N)")
    service.overlay.get(transaction_id)
    return transaction_id


def _row_flags(ledger_row) -> str:
    flags = ""
    flags += "*" if ledger_row.changed else " "
    flags += "R" if ledger_row.row.needs_review else " "
    flags += "E" if ledger_row.row.is_edited and not ledger_row.changed else " "
    flags += "L" if ledger_row.row.is_locked else " "
    return flags


def _print_totals(statement, totals) -> None:
    declared_count = statement.total_transactions or totals.count
    for label, count, credits, debits in (
        ("Declared totals:", declared_count, statement.total_credits or 0, statement.total_debits or 0),
        ("Ledger totals:", totals.count, totals.credits, totals.debits),
    ):
        click.echo(
            f"{label:<19} {count:>5} transaction(s) | "
            f"Credits {'+' + _money(credits):<15} | Debits {'-' + _money(debits):<15}"
        )


def _print_ledger(service: StatementReviewService, filters: TransactionFilter) -> None:
    statement = service.statement
    account = service.bank_account
    rows = service.ledger(filters)
    categories = service.category_labels()
    total = len(service.overlay)

    click.echo(
        f"\n{account.name} ({account.bank_name}) | "
        f"{format_period(statement.statement_period_start, statement.statement_period_end)} | "
        f"Status: {statement.import_status}"
    )
    if filters.active_count:
        click.echo(f"Showing {len(rows)} of {total} transaction(s) ({filters.active_count} filter(s) active)")
    else:
        click.echo(f"{total} transaction(s)")
    click.echo("-" * 124)
    click.echo(
        f"{'#':>4} {'ID':<6} {'Date':<12} {'Description':<32} {'Category':<19} {'Dir':<4} "
        f"{'Amount':>13} {'Balance':>15}  {'Flags':<4}"
    )
    click.echo("-" * 124)

    for ledger_row in rows:
        txn = ledger_row.transaction
        row = ledger_row.row
        direction = "IN" if row.edited_type == CREDIT else "OUT"
        description = (txn.description or "")[:32]
        category = categories.get(txn.category_id, "")[:19]
        click.echo(
            f"{ledger_row.index + 1:>4} {txn.id:<6} {str(txn.transaction_date):<12} "
            f"{description:<32} {category:<19} {direction:<4} {_money(row.edited_amount):>13} "
            f"{_money(ledger_row.calculated_balance):>15}  {_row_flags(ledger_row)}"
        )

    check = service.balance_check()
    click.echo("-" * 124)
    _print_totals(statement, service.ledger_totals())
    click.echo(f"Opening balance:    {_money(statement.opening_balance):>15}")
    click.echo(f"Closing balance:    {_money(statement.closing_balance):>15}")
    click.echo(f"Calculated balance: {_money(check.calculated_balance):>15}")
    if check.is_balanced:
        click.echo("Balanced")
    else:
        click.echo(f"Off by {_money(abs(check.difference))} (difference {_money(check.difference)})")
    if service.dirty_count:
        click.echo(f"{service.dirty_count} unsaved change(s). Use --save to write them.")
    click.echo("Flags: * unsaved change, R needs review, E edited, L locked")


@click.group()
def statement_group():
    """Review and reconcile statements."""
    pass


@statement_group.command("list")
@click.argument("account", metavar="ACCOUNT")
@click.pass_context
def list_statements(ctx, account: str):
    """List statements for a bank account, newest first.

    ACCOUNT can be a bank account name or ID.
    """
    db = ctx.obj["db"]
    service = StatementReviewService(db)

    try:
        account_id = resolve_bank_account(db, account)
        statements = service.list_statements(account_id)
    except ValueError as e:
        handle_domain_error(ctx, e)

    if not statements:
        click.echo("No statements found.")
        return

    click.echo("\nStatements:")
    click.echo("-" * 100)
    for s in statements:
        period = format_period(s.statement_period_start, s.statement_period_end)
        click.echo(
            f"ID: {s.id:3d} | {period:<28} | Opening {_money(s.opening_balance):>12} | "
            f"Closing {_money(s.closing_balance):>12} | {s.import_status}"
        )


@statement_group.command("view")
@click.argument("statement_id", type=int)
@click.option("--from", "date_from", help="Only show transactions on or after this date")
@click.option("--to", "date_to", help="Only show transactions on or before this date")
@click.option("--direction", type=click.Choice(DIRECTION_CHOICES), default="all", help="Credit or debit")
@click.option("--search", help="Text to find in description or payee")
@click.option("--min", "amount_min", help="Minimum amount")
@click.option("--max", "amount_max", help="Maximum amount")
@click.option("--status", type=click.Choice(STATUS_CHOICES), default="all", help="Row status")
@click.option("--flip", multiple=True, metavar="TXN", help="Flip credit/debit (transaction ID or #ROW)")
@click.option("--amount", "amounts", multiple=True, metavar="TXN=AMOUNT", help="Set a transaction's amount")
@click.option("--save", is_flag=True, help="Save the edits made by --flip and --amount")
@click.pass_context
def view_statement(
    ctx,
    statement_id: int,
    date_from: str | None,
    date_to: str | None,
    direction: str,
    search: str | None,
    amount_min: str | None,
    amount_max: str | None,
    status: str,
    flip: tuple[str, ...],
    amounts: tuple[str, ...],
    save: bool,
):
    """Show a statement's ledger with running balances.

    Edits given with --flip and --amount are applied provisionally and the
    balances are recomputed; nothing is written unless --save is given.
    Filters only change which rows are shown, never the balances.

    Examples:
        ledgerview statement view 3
        ledgerview statement view 3 --direction debit --search coffee
        ledgerview statement view 3 --flip 41 --amount 42=19.99 --save
        ledgerview statement view 3 --flip '#2'
    """
    try:
        filters = TransactionFilter(
            date_from=parse_date(date_from) if date_from else None,
            date_to=parse_date(date_to) if date_to else None,
            direction=direction,
            text=search,
            amount_min=parse_amount(amount_min) if amount_min else None,
            amount_max=parse_amount(amount_max) if amount_max else None,
            status=status,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)

    service = _open_statement(ctx, statement_id)

    try:
        for token in flip:
            transaction_id = _resolve_row(service, token)
            if not service.toggle_direction(transaction_id):
                click.echo(f"Warning: Transaction {transaction_id} is locked; flip ignored", err=True)
        for assignment in amounts:
            transaction_id, amount = parse_amount_assignment(assignment)
            service.overlay.get(transaction_id)
            if not service.set_amount(transaction_id, amount):
                click.echo(f"Warning: Transaction {transaction_id} is locked; amount ignored", err=True)
    except ValueError as e:
        handle_domain_error(ctx, e)

    result = service.save_changes() if save else None
    try:
        _print_ledger(service, filters)
    except DomainError as e:
        handle_domain_error(ctx, e)
    if result is not None:
        report_commit_result(ctx, result)


@statement_group.command("confirm")
@click.argument("statement_id", type=int)
@click.option("--by", "confirmed_by", help="Name recorded as the confirming reviewer")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def confirm_statement(ctx, statement_id: int, confirmed_by: str | None, yes: bool):
    """Confirm a balanced statement and lock its transactions."""
    service = _open_statement(ctx, statement_id)
    statement = service.statement
    period = format_period(statement.statement_period_start, statement.statement_period_end)

    if not yes and not click.confirm(
        f"Confirm statement {statement_id} ({period})? "
        f"Its {len(service.overlay)} transaction(s) will be locked"
    ):
        click.echo("Confirmation cancelled.")
        return

    try:
        service.confirm_statement(confirmed_by=confirmed_by)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Confirmed statement {statement_id} ({period})")


@statement_group.command("delete")
@click.argument("statement_id", type=int)
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_statement(ctx, statement_id: int, yes: bool):
    """Delete a statement and all of its transactions."""
    service = _open_statement(ctx, statement_id)
    count = len(service.overlay)

    if not yes and not click.confirm(
        f"Delete statement {statement_id} and its {count} transaction(s)?"
    ):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_statement()
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted statement {statement_id} and {count} transaction(s)")


def register_commands(cli):
    """Register statement commands with main CLI."""
    cli.add_command(statement_group, name="statement")
