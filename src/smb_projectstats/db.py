# SMB ProjectStats - Project financial reconciliation for small service businesses
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.


"""
Database layer for SMB ProjectStats.

The business records (clients, projects, invoices, transactions) are owned
by the dashboard's remote store and only reach this package as exported
snapshots. The one piece of state this package persists itself is the
timer's list of work sessions, which the original dashboard kept in the
browser's local storage under the key ``"timer-sessions"``.

This module provides a small namespaced key/value store on SQLite that plays
the same role for the Python side.

------------------------------------------------------------------------------
Schema Overview
------------------------------------------------------------------------------

1) app_state
   One row per namespace.

   Columns:
   - namespace   TEXT    PRIMARY KEY   -- e.g. "timer-sessions"
   - payload     TEXT    NOT NULL      -- JSON document
   - version     INTEGER NOT NULL      -- incremented on every write
   - updated_at  TEXT    NOT NULL      -- ISO datetime, UTC

   The version counter lets readers detect that a namespace changed without
   deserializing its payload.

------------------------------------------------------------------------------
SQLite Notes
------------------------------------------------------------------------------

- All timestamps are stored as ISO-8601 text (UTC).
- Every public function opens and closes its own connection, so several
  processes can share the same database file.
"""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path

# ---------------------------------------------------------------------------
# Dataclasses
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class DatabaseConfig:
    """
    Database configuration for SMB ProjectStats.

    Attributes
    ----------
    engine:
        Database engine identifier. Only "sqlite" is supported.
    path:
        Path to the SQLite database file.
    """

    engine: str
    path: Path


@dataclass(frozen=True)
class StateRecord:
    """
    Raw content of a namespace in ``app_state``.

    Attributes
    ----------
    namespace:
        Namespace key.
    payload:
        JSON document as stored (not parsed).
    version:
        Write counter of the namespace (1 after the first write).
    updated_at:
        UTC timestamp of the last write.
    """

    namespace: str
    payload: str
    version: int
    updated_at: datetime


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _ensure_sqlite(cfg: DatabaseConfig) -> None:
    """Raise if the configuration does not refer to a supported engine."""
    if cfg.engine.lower() != "sqlite":
        msg = (
            f"Unsupported database engine: {cfg.engine!r}. "
            "Only 'sqlite' is supported for now."
        )
        raise ValueError(msg)


def _connect(cfg: DatabaseConfig) -> sqlite3.Connection:
    """
    Open a SQLite connection.

    The caller is responsible for closing the connection.
    """
    _ensure_sqlite(cfg)
    return sqlite3.connect(cfg.path)


def _create_schema_if_needed(conn: sqlite3.Connection) -> None:
    """Create the ``app_state`` table if it does not exist yet (idempotent)."""
    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS app_state (
            namespace   TEXT    PRIMARY KEY,
            payload     TEXT    NOT NULL,
            version     INTEGER NOT NULL DEFAULT 0,
            updated_at  TEXT    NOT NULL
        );
        """
    )
    conn.commit()


def _now_utc_iso() -> str:
    """Return the current UTC datetime as ISO string."""
    return datetime.now(timezone.utc).isoformat(timespec="seconds")


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def init_database(cfg: DatabaseConfig) -> None:
    """
    Initialize the database schema if needed.

    - Creates the parent directory and the SQLite file if they do not exist.
    - Creates the ``app_state`` table if it is missing.
    - This function is idempotent: calling it multiple times is safe.

    Raises
    ------
    ValueError
        If cfg.engine is not supported.
    sqlite3.Error
        If schema creation fails.
    """
    _ensure_sqlite(cfg)
    cfg.path.parent.mkdir(parents=True, exist_ok=True)

    conn = _connect(cfg)
    try:
        _create_schema_if_needed(conn)
    finally:
        conn.close()


def read_state(cfg: DatabaseConfig, namespace: str) -> StateRecord | None:
    """
    Return the stored content of a namespace, or None if it was never written.
    """
    init_database(cfg)

    conn = _connect(cfg)
    try:
        cur = conn.execute(
            """
            SELECT namespace, payload, version, updated_at
            FROM app_state
            WHERE namespace = ?;
            """,
            (namespace,),
        )
        row = cur.fetchone()
    finally:
        conn.close()

    if row is None:
        return None

    return StateRecord(
        namespace=row[0],
        payload=row[1],
        version=int(row[2]),
        updated_at=datetime.fromisoformat(row[3]),
    )


def get_state_version(cfg: DatabaseConfig, namespace: str) -> int:
    """
    Return the write counter of a namespace (0 if it was never written).

    This is a cheap query used by pollers to decide whether a reload is
    needed.
    """
    init_database(cfg)

    conn = _connect(cfg)
    try:
        cur = conn.execute(
            "SELECT version FROM app_state WHERE namespace = ?;",
            (namespace,),
        )
        row = cur.fetchone()
    finally:
        conn.close()

    return int(row[0]) if row is not None else 0


def write_state(cfg: DatabaseConfig, namespace: str, payload: str) -> int:
    """
    Replace the payload of a namespace and bump its version.

    Returns
    -------
    int
        The new version of the namespace.
    """
    init_database(cfg)

    conn = _connect(cfg)
    try:
        conn.execute(
            """
            INSERT INTO app_state (namespace, payload, version, updated_at)
            VALUES (?, ?, 1, ?)
            ON CONFLICT(namespace) DO UPDATE SET
                payload = excluded.payload,
                version = app_state.version + 1,
                updated_at = excluded.updated_at;
            """,
            (namespace, payload, _now_utc_iso()),
        )
        conn.commit()
        cur = conn.execute(
            "SELECT version FROM app_state WHERE namespace = ?;",
            (namespace,),
        )
        version = int(cur.fetchone()[0])
    finally:
        conn.close()

    return version
