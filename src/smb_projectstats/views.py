# SMB ProjectStats - Project financial reconciliation for small service businesses
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
View utilities for SMB ProjectStats.

This module turns the engine output (per-project stats and global totals)
into pandas DataFrames ready for console display or CSV export. It does not
compute any attribution itself.
"""

from collections.abc import Iterable, Mapping

import pandas as pd

from .normalize import client_name_segment
from .records import GlobalTotals, Project, ProjectStat, WorkSession
from .time_tracking import format_duration

STATS_COLUMNS = [
    "project_id",
    "project",
    "client",
    "paid_amount",
    "spent_amount",
    "balance",
    "budget",
    "budget_used_pct",
    "time_tracked_seconds",
    "time_tracked",
]


def stats_to_dataframe(
    projects: Iterable[Project],
    stats: Mapping[str, ProjectStat],
    decimals: int = 2,
) -> pd.DataFrame:
    """Return one row per project with its derived figures.

    Columns:
        project_id, project, client, paid_amount, spent_amount,
        balance (paid - spent), budget, budget_used_pct (spent / budget,
        empty when the project has no budget), time_tracked_seconds,
        time_tracked (formatted, e.g. "2h05").

    Projects missing from ``stats`` are shown with zero figures.
    """
    rows = []
    for project in projects:
        stat = stats.get(project.id, ProjectStat(project_id=project.id))
        if project.budget > 0:
            used_pct = round(stat.spent_amount / project.budget * 100, 1)
        else:
            used_pct = None

        rows.append(
            {
                "project_id": project.id,
                "project": project.display_name,
                "client": client_name_segment(project.client_display_label).strip(),
                "paid_amount": round(stat.paid_amount, decimals),
                "spent_amount": round(stat.spent_amount, decimals),
                "balance": round(stat.paid_amount - stat.spent_amount, decimals),
                "budget": round(project.budget, decimals),
                "budget_used_pct": used_pct,
                "time_tracked_seconds": stat.time_tracked_seconds,
                "time_tracked": format_duration(stat.time_tracked_seconds),
            }
        )

    return pd.DataFrame(rows, columns=STATS_COLUMNS)


def totals_to_dataframe(totals: GlobalTotals, decimals: int = 2) -> pd.DataFrame:
    """Return the global totals as a two-column (measure, value) DataFrame."""
    return pd.DataFrame(
        [
            {
                "measure": "total_paid_amount",
                "value": round(totals.total_paid_amount, decimals),
            },
            {
                "measure": "total_time_tracked",
                "value": format_duration(totals.total_time_tracked_seconds),
            },
        ],
        columns=["measure", "value"],
    )


def sessions_to_dataframe(sessions: Iterable[WorkSession]) -> pd.DataFrame:
    """Return work sessions as a DataFrame sorted by date (most recent first)."""
    df = pd.DataFrame(
        [
            {
                "id": s.id,
                "date": s.date,
                "project_id": s.project_id,
                "project_name": s.project_name,
                "duration_seconds": s.duration_seconds,
                "duration": format_duration(s.duration_seconds),
            }
            for s in sessions
        ],
        columns=[
            "id",
            "date",
            "project_id",
            "project_name",
            "duration_seconds",
            "duration",
        ],
    )
    if not df.empty:
        df = df.sort_values("date", ascending=False, kind="stable").reset_index(
            drop=True
        )
    return df
