"""Utility for resolving bank account names to IDs."""

from ledgerview.database.base import Database


def resolve_bank_account(db: Database, account: str | int) -> int:
    """Resolve bank account name or ID to bank account ID.

    Inactive accounts are included so old statements stay reachable.

    Args:
        db: Database instance
        account: Account name (str) or ID (int or string representation of int)

    Returns:
        Bank account ID

    Raises:
        ValueError: If account is not found
    """
    if isinstance(account, int):
        if db.get_bank_account(account) is None:
            raise ValueError(f"Bank account ID {account} not found")
        return account

    try:
        account_id = int(account)
    except (ValueError, TypeError):
        account_id = None

    if account_id is not None:
        if db.get_bank_account(account_id) is None:
            raise ValueError(f"Bank account ID {account_id} not found")
        return account_id

    for acc in db.list_bank_accounts(active_only=False):
        if acc.name == account:
            return acc.id

    raise ValueError(f"Bank account '{account}' not found")
