# SMB ProjectStats - Project financial reconciliation for small service businesses
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Revenue attribution for SMB ProjectStats.

Paid invoices carry the client's plain name and a free-text title, but no
project reference. For a project P with client key K and mode M:

1. keep the paid invoices whose normalized client name equals K,
2. SINGLE: P collects all of them,
3. MULTI:  P collects those whose title matches its name (see
   ``matching.title_matches``). Invoices matching no project of the client
   are excluded from every project.

An invoice whose title matches several projects is counted toward each of
them. This over-count is a known limitation kept until the product decides
on a split policy.
"""

from collections.abc import Iterable, Mapping

from .grouping import DisambiguationMode
from .matching import matcher_for
from .normalize import normalize
from .records import LedgerEntry, Project


def paid_entries(ledger_entries: Iterable[LedgerEntry]) -> list[LedgerEntry]:
    """Return the entries counting as collected revenue (paid invoices)."""
    return [e for e in ledger_entries if e.is_collected]


def index_by_client(entries: Iterable[LedgerEntry]) -> dict[str, list[LedgerEntry]]:
    """Group ledger entries by normalized client name, preserving order."""
    by_client: dict[str, list[LedgerEntry]] = {}
    for entry in entries:
        key = normalize(entry.client_display_name)
        by_client.setdefault(key, []).append(entry)
    return by_client


def paid_amount_for_project(
    project: Project,
    client_key: str,
    mode: DisambiguationMode,
    paid_by_client: Mapping[str, list[LedgerEntry]],
) -> float:
    """Sum the paid invoice totals attributed to ``project``.

    Args:
        project: Project to compute revenue for.
        client_key: Canonical key of the project's client.
        mode: Disambiguation mode of the project.
        paid_by_client: Paid invoices indexed by normalized client name
            (as returned by ``index_by_client(paid_entries(...))``).

    Returns:
        The collected amount, 0.0 when nothing matches.
    """
    matcher = matcher_for(mode)
    total = 0.0
    for entry in paid_by_client.get(client_key, []):
        if matcher.matches(project, entry.title):
            total += entry.total_amount
    return total
