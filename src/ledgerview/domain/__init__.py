"""Domain layer for ledgerview application.

Services are imported from their modules directly; this package only
re-exports the entities so storage code can import them without pulling in
the services.
"""

from ledgerview.domain.entities import (
    BankAccount,
    BalanceCheck,
    Category,
    StatementImport,
    Transaction,
)

__all__ = [
    "BankAccount",
    "BalanceCheck",
    "Category",
    "StatementImport",
    "Transaction",
]
