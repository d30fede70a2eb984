from smb_projectstats.records import WorkSession
from smb_projectstats.time_tracking import aggregate_time, format_duration


def session(project_id: str, seconds: int) -> WorkSession:
    return WorkSession(
        id=f"{project_id}-{seconds}",
        project_id=project_id,
        duration_seconds=seconds,
        date="2025-03-01",
    )


def test_aggregate_time_sums_per_project() -> None:
    """Durations are summed per project id."""
    sessions = [session("P1", 1800), session("P1", 3600), session("P2", 60)]
    assert aggregate_time(sessions) == {"P1": 5400, "P2": 60}


def test_sessions_without_project_are_excluded() -> None:
    """Sessions without project id are ignored."""
    sessions = [session("", 1800), session("P1", 120)]
    assert aggregate_time(sessions) == {"P1": 120}


def test_negative_durations_contribute_nothing() -> None:
    """Negative durations count as zero."""
    assert aggregate_time([session("P1", -50), session("P1", 10)]) == {"P1": 10}


def test_aggregate_time_empty() -> None:
    assert aggregate_time([]) == {}


def test_format_duration() -> None:
    """Durations render as minutes below an hour and as XhMM above."""
    assert format_duration(0) == "0min"
    assert format_duration(-10) == "0min"
    assert format_duration(2700) == "45min"
    assert format_duration(7500) == "2h05"
    assert format_duration(36000) == "10h00"
