# SMB ProjectStats - Project financial reconciliation for small service businesses
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Time aggregation for SMB ProjectStats.

Work sessions recorded by the dashboard timer reference their project by id,
so no name matching is needed: durations are summed per exact project id in
a single pass.
"""

from collections.abc import Iterable

from .records import WorkSession


def _duration(session: WorkSession) -> int:
    try:
        seconds = int(session.duration_seconds)
    except (TypeError, ValueError):
        return 0
    return max(seconds, 0)


def aggregate_time(sessions: Iterable[WorkSession]) -> dict[str, int]:
    """Return total tracked seconds per project id.

    Sessions with a missing or empty project id are ignored. Invalid or
    negative durations contribute nothing.
    """
    time_by_project: dict[str, int] = {}
    for session in sessions:
        project_id = session.project_id
        if not project_id:
            continue
        time_by_project[project_id] = time_by_project.get(project_id, 0) + _duration(
            session
        )
    return time_by_project


def format_duration(seconds: float) -> str:
    """Format a duration for display.

    Examples:
        0     → "0min"
        2700  → "45min"
        7500  → "2h05"
    """
    if not seconds or seconds <= 0:
        return "0min"
    seconds = int(seconds)
    hours = seconds // 3600
    minutes = (seconds % 3600) // 60
    if hours == 0:
        return f"{minutes}min"
    return f"{hours}h{minutes:02d}"
