"""CLI error handling helpers."""

import click

from ledgerview.domain.errors import DomainError
from ledgerview.domain.overlay import CommitResult


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Render a domain error and exit with failure."""
    click.echo(f"Error: {error}", err=True)
    ctx.exit(1)


def report_commit_result(ctx: click.Context, result: CommitResult) -> None:
    """Print per-row save outcome; exit with failure if any row failed."""
    if not result.updated and not result.failed:
        click.echo("No changes to save.")
        return
    if result.updated:
        click.echo(f"Saved {len(result.updated)} transaction(s).")
    if result.failed:
        for failure in result.failed:
            click.echo(
                f"Error: Transaction {failure.transaction_id} failed to save: {failure.error}",
                err=True,
            )
        click.echo(f"{len(result.failed)} transaction(s) failed to save.", err=True)
        ctx.exit(1)
