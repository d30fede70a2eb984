# SMB ProjectStats - Project financial reconciliation for small service businesses
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Work-session state for SMB ProjectStats.

The dashboard timer writes work sessions to a process-wide store, and the
stats engine reads them. Two objects make that relationship explicit:

1) WorkSessionStore
   -----------------
   The state handle: a JSON list of sessions stored in the ``app_state``
   table (see ``db.py``) under a fixed namespace key (``"timer-sessions"``
   by default). It is created at startup from the configuration and passed
   to whoever needs it. Any writer (CLI, timer, import) goes through
   ``save`` / ``append``; local writes are announced to subscribers.

2) SessionFeed
   ------------
   The engine's view of the store: a snapshot of the sessions that is
   refreshed
   - when the poll interval has elapsed (absorbs writes made by another
     process), and
   - immediately after ``notify_changed`` (called by the store on local
     writes, or by any external change notification).

   A refresh first compares the namespace version and only reloads the
   payload when it changed. This is best-effort eventual consistency: a
   session written by another process may stay invisible until the next
   poll.

Everything is synchronous and pull-based; no background thread is started.
"""

import json
import time
from collections.abc import Callable, Iterable
from typing import Any, Optional

from .db import DatabaseConfig, get_state_version, read_state, write_state
from .logging_utils import get_logger
from .records import WorkSession

logger = get_logger(__name__)

TIMER_SESSIONS_NAMESPACE = "timer-sessions"
DEFAULT_POLL_INTERVAL_SECONDS = 10.0


# ---------------------------------------------------------------------------
# Serialization
# ---------------------------------------------------------------------------


def session_to_dict(session: WorkSession) -> dict[str, Any]:
    return {
        "id": session.id,
        "project_id": session.project_id,
        "project_name": session.project_name,
        "duration_seconds": session.duration_seconds,
        "date": session.date,
    }


def session_from_dict(data: dict[str, Any]) -> WorkSession:
    """Build a WorkSession from a stored dict.

    Both the snake_case layout written by this package and the camelCase
    layout of the original timer (``projectId``, ``projectName``,
    ``duration``) are accepted.
    """
    project_id = data.get("project_id", data.get("projectId"))
    duration = data.get("duration_seconds", data.get("duration", 0))
    try:
        duration_seconds = int(duration or 0)
    except (TypeError, ValueError):
        duration_seconds = 0

    return WorkSession(
        id=str(data.get("id") or ""),
        project_id=str(project_id) if project_id else "",
        duration_seconds=duration_seconds,
        date=str(data.get("date") or ""),
        project_name=str(data.get("project_name", data.get("projectName")) or ""),
    )


def parse_sessions_payload(payload: str) -> list[WorkSession]:
    """
    Parse a JSON list of sessions.

    Raises
    ------
    ValueError
        If the payload is not valid JSON or not a list of objects.
    """
    try:
        data = json.loads(payload)
    except json.JSONDecodeError as exc:
        raise ValueError("Work-session payload is not valid JSON.") from exc

    if not isinstance(data, list):
        raise ValueError("Work-session payload must be a JSON list.")

    sessions = []
    for item in data:
        if not isinstance(item, dict):
            raise ValueError("Work-session payload items must be JSON objects.")
        sessions.append(session_from_dict(item))
    return sessions


def dump_sessions_payload(sessions: Iterable[WorkSession]) -> str:
    return json.dumps([session_to_dict(s) for s in sessions], ensure_ascii=False)


# ---------------------------------------------------------------------------
# Store
# ---------------------------------------------------------------------------


class WorkSessionStore:
    """
    Process-wide store of timer work sessions.

    Parameters
    ----------
    cfg:
        Database configuration (where the sessions are persisted).
    namespace:
        Key of the sessions document in the ``app_state`` table.
    """

    def __init__(
        self,
        cfg: DatabaseConfig,
        namespace: str = TIMER_SESSIONS_NAMESPACE,
    ) -> None:
        self.cfg = cfg
        self.namespace = namespace
        self._subscribers: list[Callable[[], None]] = []

    def version(self) -> int:
        """Current write counter of the sessions namespace (0 if empty)."""
        return get_state_version(self.cfg, self.namespace)

    def load(self) -> tuple[list[WorkSession], int]:
        """
        Return the stored sessions and the version they were read at.

        A corrupt payload is logged and read as an empty list: the timer
        must keep working even if the stored document was damaged.
        """
        record = read_state(self.cfg, self.namespace)
        if record is None:
            return [], 0

        try:
            sessions = parse_sessions_payload(record.payload)
        except ValueError as exc:
            logger.warning(
                "Ignoring unreadable work sessions in %r: %s", self.namespace, exc
            )
            sessions = []
        return sessions, record.version

    def save(self, sessions: Iterable[WorkSession]) -> int:
        """Replace all stored sessions and notify subscribers."""
        version = write_state(
            self.cfg, self.namespace, dump_sessions_payload(sessions)
        )
        logger.debug("Saved work sessions in %r (version %d)", self.namespace, version)
        self._notify()
        return version

    def append(self, session: WorkSession) -> int:
        """Add one session to the stored list."""
        sessions, _ = self.load()
        sessions.append(session)
        return self.save(sessions)

    def subscribe(self, callback: Callable[[], None]) -> None:
        """Register a callback invoked after every local write."""
        self._subscribers.append(callback)

    def _notify(self) -> None:
        for callback in list(self._subscribers):
            callback()


class SessionFeed:
    """
    Polling snapshot of a WorkSessionStore.

    Parameters
    ----------
    store:
        The store to read from. The feed subscribes to its local writes.
    poll_interval:
        Minimum number of seconds between two version checks.
    clock:
        Monotonic clock, injectable for tests.
    """

    def __init__(
        self,
        store: WorkSessionStore,
        poll_interval: float = DEFAULT_POLL_INTERVAL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if poll_interval <= 0:
            raise ValueError("poll_interval must be a positive number of seconds.")

        self.store = store
        self.poll_interval = poll_interval
        self._clock = clock
        self._sessions: tuple[WorkSession, ...] = ()
        self._version: Optional[int] = None
        self._last_poll: Optional[float] = None
        self._dirty = True
        store.subscribe(self.notify_changed)

    def notify_changed(self) -> None:
        """Force a refresh on the next read."""
        self._dirty = True

    def refresh(self) -> bool:
        """
        Check the store now and reload the sessions if they changed.

        Returns
        -------
        bool
            True if a new snapshot was loaded.
        """
        self._last_poll = self._clock()
        self._dirty = False

        if self._version is not None and self.store.version() == self._version:
            return False

        sessions, version = self.store.load()
        self._sessions = tuple(sessions)
        self._version = version
        logger.debug(
            "Loaded %d work sessions (version %d)", len(self._sessions), version
        )
        return True

    def refresh_if_due(self) -> bool:
        """Refresh if notified or if the poll interval has elapsed."""
        due = (
            self._dirty
            or self._last_poll is None
            or self._clock() - self._last_poll >= self.poll_interval
        )
        if not due:
            return False
        return self.refresh()

    def sessions(self) -> tuple[WorkSession, ...]:
        """Return the current snapshot, refreshing it first when due."""
        self.refresh_if_due()
        return self._sessions
