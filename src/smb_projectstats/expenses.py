# SMB ProjectStats - Project financial reconciliation for small service businesses
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Expense attribution for SMB ProjectStats.

Expenses are never recorded against a project directly. The bookkeeping
screen lets the user link an expense to an invoice number instead, and the
invoice in turn identifies the client (and, through its title, the project).

For a project P with client key K and mode M:

1. resolve each expense's ``linked_ledger_number`` to a ledger entry and
   drop expenses whose link does not resolve (or that are not expenses),
2. keep the resolved expenses whose ledger entry's client normalizes to K,
3. SINGLE: sum all of them,
4. MULTI:  sum those whose ledger entry title matches P's name.

The linked ledger entry does not need to be paid: spending on a project is
independent of what has been collected for it.
"""

from collections.abc import Iterable, Mapping

from .grouping import DisambiguationMode
from .matching import matcher_for
from .normalize import normalize
from .records import EXPENSE, ExpenseTransaction, LedgerEntry, Project

LinkedExpense = tuple[ExpenseTransaction, LedgerEntry]


def index_ledger_by_number(
    ledger_entries: Iterable[LedgerEntry],
) -> dict[str, LedgerEntry]:
    """Index ledger entries by number.

    Numbers are expected to be unique; if an export contains duplicates,
    the first occurrence wins.
    """
    by_number: dict[str, LedgerEntry] = {}
    for entry in ledger_entries:
        number = str(entry.number).strip()
        if number and number not in by_number:
            by_number[number] = entry
    return by_number


def resolve_linked_expenses(
    transactions: Iterable[ExpenseTransaction],
    ledger_by_number: Mapping[str, LedgerEntry],
) -> list[LinkedExpense]:
    """Pair each linked expense with the ledger entry it references.

    Income transactions, unlinked expenses and expenses referencing an
    unknown ledger number are dropped.
    """
    resolved: list[LinkedExpense] = []
    for tx in transactions:
        if tx.kind != EXPENSE or not tx.linked_ledger_number:
            continue
        entry = ledger_by_number.get(str(tx.linked_ledger_number).strip())
        if entry is None:
            continue
        resolved.append((tx, entry))
    return resolved


def index_by_client(
    linked: Iterable[LinkedExpense],
) -> dict[str, list[LinkedExpense]]:
    """Group linked expenses by the normalized client name of their entry."""
    by_client: dict[str, list[LinkedExpense]] = {}
    for tx, entry in linked:
        key = normalize(entry.client_display_name)
        by_client.setdefault(key, []).append((tx, entry))
    return by_client


def spent_amount_for_project(
    project: Project,
    client_key: str,
    mode: DisambiguationMode,
    expenses_by_client: Mapping[str, list[LinkedExpense]],
) -> float:
    """Sum the linked expenses attributed to ``project``.

    Exports are not consistent about the sign of expenses, so amounts are
    taken as absolute values; the result is never negative.
    """
    matcher = matcher_for(mode)
    total = 0.0
    for tx, entry in expenses_by_client.get(client_key, []):
        if matcher.matches(project, entry.title):
            total += abs(tx.amount)
    return total
