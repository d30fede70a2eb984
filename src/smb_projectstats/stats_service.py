# SMB ProjectStats - Project financial reconciliation for small service businesses
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.


"""
High-level service exposing project stats to presentation code.

This module sits between:
- the engine (``engine.py``) and the work-session feed (``sessions.py``),
- and user-facing layers such as the CLI or a web dashboard.

Responsibilities
----------------
1) Hold the current snapshots of the four business collections (clients,
   projects, ledger entries, expense transactions). Their owners push new
   snapshots with ``update_sources``; this service never loads or retries
   anything on their behalf.

2) Pull the current work sessions from the injected ``SessionFeed`` on each
   read, so timer updates become visible after the next poll.

3) Serve per-project stats and global totals through the memoized
   ``ProjectStatsCache``: repeated reads without change are free, and any
   change in any input triggers a full rebuild.

Lookups never fail: an unknown project id returns an all-zero stat.
"""

from collections.abc import Iterable, Mapping
from typing import Optional

from .config import AppConfig
from .db import init_database
from .engine import ProjectStatsCache, StatsResult
from .io import (
    read_clients,
    read_expense_transactions,
    read_ledger_entries,
    read_projects,
)
from .records import (
    Client,
    ExpenseTransaction,
    GlobalTotals,
    LedgerEntry,
    Project,
    ProjectStat,
)
from .sessions import SessionFeed, WorkSessionStore


class ProjectStatsService:
    """
    Current project stats for a set of source snapshots.

    Parameters
    ----------
    feed:
        Work-session feed (state handle of the timer sessions).
    clients, projects, ledger_entries, expense_transactions:
        Initial snapshots of the business collections.
    """

    def __init__(
        self,
        feed: SessionFeed,
        clients: Iterable[Client] = (),
        projects: Iterable[Project] = (),
        ledger_entries: Iterable[LedgerEntry] = (),
        expense_transactions: Iterable[ExpenseTransaction] = (),
    ) -> None:
        self.feed = feed
        self.cache = ProjectStatsCache()
        self._clients = tuple(clients)
        self._projects = tuple(projects)
        self._ledger_entries = tuple(ledger_entries)
        self._expense_transactions = tuple(expense_transactions)

    @property
    def projects(self) -> tuple[Project, ...]:
        return self._projects

    @property
    def clients(self) -> tuple[Client, ...]:
        return self._clients

    def update_sources(
        self,
        *,
        clients: Optional[Iterable[Client]] = None,
        projects: Optional[Iterable[Project]] = None,
        ledger_entries: Optional[Iterable[LedgerEntry]] = None,
        expense_transactions: Optional[Iterable[ExpenseTransaction]] = None,
    ) -> None:
        """Replace one or more source snapshots (None keeps the current one)."""
        if clients is not None:
            self._clients = tuple(clients)
        if projects is not None:
            self._projects = tuple(projects)
        if ledger_entries is not None:
            self._ledger_entries = tuple(ledger_entries)
        if expense_transactions is not None:
            self._expense_transactions = tuple(expense_transactions)

    def current(self) -> StatsResult:
        """Return ``(stats_by_project_id, totals)`` for the current inputs."""
        return self.cache.get(
            self._clients,
            self._projects,
            self._ledger_entries,
            self._expense_transactions,
            self.feed.sessions(),
        )

    def project_stats(self) -> Mapping[str, ProjectStat]:
        stats, _ = self.current()
        return stats

    def stat_for(self, project_id: str) -> ProjectStat:
        """Stats of one project; all zero if the project is unknown."""
        stats, _ = self.current()
        return stats.get(project_id, ProjectStat(project_id=project_id))

    def totals(self) -> GlobalTotals:
        _, totals = self.current()
        return totals


def build_service(
    app_config: AppConfig,
    *,
    clients_path: Optional[str] = None,
    projects_path: Optional[str] = None,
    ledger_path: Optional[str] = None,
    expenses_path: Optional[str] = None,
) -> ProjectStatsService:
    """
    Build a ProjectStatsService from the configuration.

    Source paths given as arguments override those of the ``[sources]``
    section. A collection without any path is empty.

    Raises
    ------
    FileNotFoundError, ValueError
        If a configured source file is missing or malformed.
    """
    init_database(app_config.database)

    store = WorkSessionStore(app_config.database, app_config.sessions.namespace)
    feed = SessionFeed(store, poll_interval=app_config.sessions.poll_interval_seconds)

    sources = app_config.sources
    clients_file = clients_path or sources.clients
    projects_file = projects_path or sources.projects
    ledger_file = ledger_path or sources.ledger
    expenses_file = expenses_path or sources.expenses

    return ProjectStatsService(
        feed,
        clients=read_clients(clients_file) if clients_file else (),
        projects=read_projects(projects_file) if projects_file else (),
        ledger_entries=read_ledger_entries(ledger_file) if ledger_file else (),
        expense_transactions=(
            read_expense_transactions(expenses_file) if expenses_file else ()
        ),
    )
