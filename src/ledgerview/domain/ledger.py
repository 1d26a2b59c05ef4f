"""Running-balance projection and statement balance checks.

Everything here is pure: no storage access and no mutation of the rows that
are passed in. The review service recomputes a projection whenever the edit
overlay changes, so these functions must stay cheap and deterministic.
"""

from dataclasses import dataclass, field
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Union

from ledgerview.domain.entities import BalanceCheck, CREDIT, DEBIT
from ledgerview.domain.errors import ValidationError

CENT = Decimal("0.01")

# Fixed policy: absorbs single-cent artifacts from upstream statement import.
BALANCE_TOLERANCE = Decimal("0.02")

Number = Union[Decimal, int, float, str]


def to_decimal(value: Number) -> Decimal:
    """Convert a numeric value to Decimal without binary float noise."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


def round_cents(value: Number) -> Decimal:
    """Round a value to two decimal places, halves away from zero."""
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def balance_effect(direction: str, amount: Number, is_liability: bool) -> Decimal:
    """Return the signed change a transaction makes to the running balance.

    Asset-like accounts (chequing, savings) grow with credits. Liability-like
    accounts (credit cards, lines of credit) grow with debits.

    Args:
        direction: "credit" or "debit"
        amount: Transaction amount; its sign is ignored
        is_liability: True for liability-like accounts

    Returns:
        Signed balance delta

    Raises:
        ValidationError: If direction is not recognized
    """
    magnitude = abs(to_decimal(amount))
    if direction == CREDIT:
        return -magnitude if is_liability else magnitude
    if direction == DEBIT:
        return magnitude if is_liability else -magnitude
    raise ValidationError(f"Unknown transaction direction '{direction}'")


@dataclass(frozen=True)
class ProjectedRow:
    """Running balance after one transaction."""

    transaction_id: int
    balance: Decimal


@dataclass(frozen=True)
class BalanceProjection:
    """Result of folding a ledger over an opening balance."""

    opening_balance: Decimal
    rows: tuple[ProjectedRow, ...] = field(default_factory=tuple)

    @property
    def final_balance(self) -> Decimal:
        if not self.rows:
            return self.opening_balance
        return self.rows[-1].balance

    @property
    def balances(self) -> list[Decimal]:
        return [row.balance for row in self.rows]

    def balance_for(self, transaction_id: int) -> Decimal:
        """Look up the running balance computed for a transaction."""
        for row in self.rows:
            if row.transaction_id == transaction_id:
                return row.balance
        raise KeyError(transaction_id)


def project_running_balances(
    opening_balance: Number, rows: Iterable, is_liability: bool
) -> BalanceProjection:
    """Compute per-row running balances from an opening balance.

    Rows are consumed in the order given; callers pass the full ledger in
    transaction date order. Each row must expose ``id``, ``edited_type`` and
    ``edited_amount``, so provisional edits are always reflected.

    The accumulator is rounded to cents after every step.
    """
    opening = round_cents(opening_balance)
    running = opening
    projected = []
    for row in rows:
        running = round_cents(
            running + balance_effect(row.edited_type, row.edited_amount, is_liability)
        )
        projected.append(ProjectedRow(transaction_id=row.id, balance=running))
    return BalanceProjection(opening_balance=opening, rows=tuple(projected))


def check_balance(closing_balance: Number, projected_balance: Number) -> BalanceCheck:
    """Compare a projected closing balance with the statement's declared one."""
    calculated = round_cents(projected_balance)
    difference = round_cents(to_decimal(closing_balance) - calculated)
    return BalanceCheck(
        calculated_balance=calculated,
        difference=difference,
        is_balanced=abs(difference) < BALANCE_TOLERANCE,
    )


@dataclass(frozen=True)
class LedgerTotals:
    """Transaction count and credit/debit sums for a statement."""

    count: int
    credits: Decimal
    debits: Decimal


def summarize_rows(rows: Iterable) -> LedgerTotals:
    """Total the working amounts of overlay rows by their edited direction."""
    count = 0
    credits = Decimal("0")
    debits = Decimal("0")
    for row in rows:
        count += 1
        if row.edited_type == CREDIT:
            credits = round_cents(credits + abs(to_decimal(row.edited_amount)))
        else:
            debits = round_cents(debits + abs(to_decimal(row.edited_amount)))
    return LedgerTotals(count=count, credits=round_cents(credits), debits=round_cents(debits))
