"""Bank account commands."""

import click
from ledgerview.domain.errors import DomainError
from ledgerview.domain.review import StatementReviewService
from ledgerview.cli.error_handling import handle_domain_error


@click.group()
def account_group():
    """Browse bank accounts."""
    pass


@account_group.command("list")
@click.option("--all", "include_inactive", is_flag=True, help="Include inactive accounts")
@click.pass_context
def list_accounts(ctx, include_inactive: bool):
    """List bank accounts."""
    service = StatementReviewService(ctx.obj["db"])

    try:
        accounts = service.list_bank_accounts(active_only=not include_inactive)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not accounts:
        click.echo("No bank accounts found.")
        return

    click.echo("\nBank accounts:")
    click.echo("-" * 80)
    for acc in accounts:
        last4 = f" ****{acc.account_number_last4}" if acc.account_number_last4 else ""
        kind = "liability" if acc.is_liability else "asset"
        inactive = " (inactive)" if not acc.is_active else ""
        click.echo(
            f"ID: {acc.id:3d} | {acc.name:20s} | {acc.bank_name}{last4} | "
            f"{acc.currency} | {kind}{inactive}"
        )


def register_commands(cli):
    """Register account commands with main CLI."""
    cli.add_command(account_group, name="account")
