"""Category commands."""

import click
from ledgerview.domain.errors import DomainError
from ledgerview.domain.review import StatementReviewService
from ledgerview.cli.error_handling import handle_domain_error


@click.group()
def category_group():
    """Browse categories."""
    pass


@category_group.command("list")
@click.option("--all", "include_inactive", is_flag=True, help="Include inactive categories")
@click.pass_context
def list_categories(ctx, include_inactive: bool):
    """List categories."""
    service = StatementReviewService(ctx.obj["db"])

    try:
        categories = service.list_categories(active_only=not include_inactive)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not categories:
        click.echo("No categories found.")
        return

    click.echo("\nCategories:")
    for cat in categories:
        code = f"[{cat.code}] " if cat.code else ""
        kind = f" ({cat.category_type})" if cat.category_type else ""
        click.echo(f"  {code}{cat.name}{kind} (ID: {cat.id})")


def register_commands(cli):
    """Register category commands with main CLI."""
    cli.add_command(category_group, name="category")
