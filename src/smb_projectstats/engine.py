# SMB ProjectStats - Project financial reconciliation for small service businesses
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Project stats engine for SMB ProjectStats.

This module derives, for every project, the amount collected, the amount
spent and the time tracked, together with global totals. It orchestrates
the lower-level building blocks:

1. Shared preparation (once per build)
   ------------------------------------
   - paid invoices, indexed by normalized client name (revenue.py),
   - ledger entries indexed by number, linked expenses resolved and
     indexed by client (expenses.py),
   - client/project grouping and disambiguation modes (grouping.py),
   - tracked time per project id (time_tracking.py).

   Each preparation step is a single pass over its collection, so a build
   stays linear in the size of the inputs.

2. Per-project assembly
   ---------------------
   For each project, in input order:
   - paid_amount  = revenue attributed with the project's mode,
   - spent_amount = linked expenses attributed with the project's mode,
   - time_tracked_seconds = tracked time, 0 when the project has none.

   A project id seen twice keeps the stat of its last occurrence. Totals
   are summed over the resulting map, so they always equal the sum of the
   returned stats. The map is returned as a read-only view.

3. Memoization
   ------------
   ``ProjectStatsCache`` keys the last result on a content fingerprint of
   the five inputs. Any change to any input triggers a full rebuild; reads
   without change return the cached result.

Failure semantics
-----------------
The engine never raises on messy data and does not correct it. Dangling
expense links and unmatched invoices contribute nothing; empty names and
client keys are compared like any other value.
"""

import hashlib
from collections.abc import Iterable, Mapping, Sequence
from types import MappingProxyType
from typing import Optional

from .expenses import (
    index_by_client as index_expenses_by_client,
)
from .expenses import (
    index_ledger_by_number,
    resolve_linked_expenses,
    spent_amount_for_project,
)
from .grouping import ProjectGrouping
from .logging_utils import get_logger
from .records import (
    Client,
    ExpenseTransaction,
    GlobalTotals,
    LedgerEntry,
    Project,
    ProjectStat,
    WorkSession,
)
from .revenue import index_by_client as index_paid_by_client
from .revenue import paid_amount_for_project, paid_entries
from .time_tracking import aggregate_time

logger = get_logger(__name__)

StatsResult = tuple[Mapping[str, ProjectStat], GlobalTotals]


def build_project_stats(
    clients: Iterable[Client],
    projects: Iterable[Project],
    ledger_entries: Iterable[LedgerEntry],
    expense_transactions: Iterable[ExpenseTransaction],
    work_sessions: Iterable[WorkSession],
) -> StatsResult:
    """Build per-project stats and global totals from source snapshots.

    Args:
        clients: Client records (used to resolve projects without label).
        projects: Projects to compute stats for.
        ledger_entries: Invoices and quotes.
        expense_transactions: Expense and income transactions.
        work_sessions: Timer work sessions.

    Returns:
        A tuple ``(stats_by_project_id, totals)``. The read-only mapping
        preserves the order of ``projects``.
    """
    projects = list(projects)
    ledger_entries = list(ledger_entries)

    # 1) Shared preparation
    paid_by_client = index_paid_by_client(paid_entries(ledger_entries))
    ledger_by_number = index_ledger_by_number(ledger_entries)
    expenses_by_client = index_expenses_by_client(
        resolve_linked_expenses(expense_transactions, ledger_by_number)
    )
    grouping = ProjectGrouping.build(projects, clients)
    time_by_project = aggregate_time(work_sessions)

    # 2) Per-project assembly
    stats: dict[str, ProjectStat] = {}

    for project in projects:
        key = grouping.key_for(project)
        mode = grouping.mode_for(project)

        stat = ProjectStat(
            project_id=project.id,
            paid_amount=paid_amount_for_project(project, key, mode, paid_by_client),
            spent_amount=spent_amount_for_project(
                project, key, mode, expenses_by_client
            ),
            time_tracked_seconds=time_by_project.get(project.id, 0),
        )
        stats[project.id] = stat

    # 3) Totals over the final map: a duplicated project id keeps its last stat.
    totals = GlobalTotals(
        total_paid_amount=sum(s.paid_amount for s in stats.values()),
        total_time_tracked_seconds=sum(
            s.time_tracked_seconds for s in stats.values()
        ),
    )
    return MappingProxyType(stats), totals


def fingerprint_inputs(*collections: Iterable[object]) -> str:
    """Return a content fingerprint of the given record collections.

    Records are frozen dataclasses whose ``repr`` covers every field, so two
    snapshots with the same content produce the same fingerprint.
    """
    digest = hashlib.sha256()
    for collection in collections:
        digest.update(b"\x1e")
        for record in collection:
            digest.update(repr(record).encode("utf-8"))
            digest.update(b"\x1f")
    return digest.hexdigest()


class ProjectStatsCache:
    """
    Memoized access to ``build_project_stats``.

    The cache holds a single result, keyed by the fingerprint of the inputs
    it was computed from. Callers pass the current snapshots on every read;
    a full rebuild only happens when the fingerprint changes.
    """

    def __init__(self) -> None:
        self._key: Optional[str] = None
        self._result: Optional[StatsResult] = None
        self.rebuild_count = 0

    def get(
        self,
        clients: Sequence[Client],
        projects: Sequence[Project],
        ledger_entries: Sequence[LedgerEntry],
        expense_transactions: Sequence[ExpenseTransaction],
        work_sessions: Sequence[WorkSession],
    ) -> StatsResult:
        inputs = (
            tuple(clients),
            tuple(projects),
            tuple(ledger_entries),
            tuple(expense_transactions),
            tuple(work_sessions),
        )
        key = fingerprint_inputs(*inputs)
        if self._result is not None and key == self._key:
            return self._result

        self._result = build_project_stats(*inputs)
        self._key = key
        self.rebuild_count += 1
        logger.debug(
            "Rebuilt stats for %d projects (rebuild #%d)",
            len(inputs[1]),
            self.rebuild_count,
        )
        return self._result

    def invalidate(self) -> None:
        """Drop the cached result; the next read rebuilds."""
        self._key = None
        self._result = None
