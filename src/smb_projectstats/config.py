# SMB ProjectStats - Project financial reconciliation for small service businesses
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Configuration helpers for SMB ProjectStats.

This module is responsible for:
- loading the application configuration from a TOML file,
- resolving every path relative to the directory of that file,
- exposing typed dataclasses used by the rest of the application.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

try:
    import tomllib  # Python 3.11+
except ModuleNotFoundError:  # pragma: no cover - fallback for older Python
    import tomli as tomllib  # type: ignore[import]

from .db import DatabaseConfig
from .sessions import DEFAULT_POLL_INTERVAL_SECONDS, TIMER_SESSIONS_NAMESPACE

DEFAULT_CONFIG_FILE = "smb_projectstats_config.toml"
DISPLAY_MODES = {"table", "csv", "both"}


@dataclass(frozen=True)
class SessionsConfig:
    """Where timer work sessions are stored and how often they are polled."""

    namespace: str
    poll_interval_seconds: float


@dataclass(frozen=True)
class SourcesConfig:
    """
    Paths of the exported source collections (CSV or JSON).

    Any path may be None; the corresponding collection is then empty unless
    it is provided on the command line.
    """

    clients: Optional[Path]
    projects: Optional[Path]
    ledger: Optional[Path]
    expenses: Optional[Path]


@dataclass(frozen=True)
class AppConfig:
    """
    Application-wide configuration for SMB ProjectStats.

    This aggregates:
    - the database configuration (where work sessions are stored),
    - the work-session store options,
    - the source export paths,
    - display options for tables and CSV output,
    - the log level.
    """

    database: DatabaseConfig
    sessions: SessionsConfig
    sources: SourcesConfig
    display_mode: str
    currency: str
    amount_decimals: int
    log_level: str


def _load_toml(path: Path) -> dict[str, Any]:
    """
    Load a TOML file and return its content as a dictionary.

    Raises:
        FileNotFoundError: if the file does not exist.
        ValueError: if the TOML content cannot be parsed or is not a table.
    """
    if not path.is_file():
        raise FileNotFoundError(f"Config file not found: {path}")

    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except Exception as exc:  # noqa: BLE001
        raise ValueError(f"Failed to parse TOML config file: {path}") from exc

    if not isinstance(data, dict):
        raise ValueError(f"Invalid TOML root type in {path}, expected a table.")

    return data


def _section(raw: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    """Return a table of the TOML root, or an empty mapping if absent/invalid."""
    section = raw.get(name) or {}
    if not isinstance(section, Mapping):
        return {}
    return section


def _parse_sessions(section: Mapping[str, Any]) -> SessionsConfig:
    """
    Extract the work-session store options.

    Raises:
        ValueError: if the poll interval is not a positive number.
    """
    namespace = str(section.get("namespace") or TIMER_SESSIONS_NAMESPACE)

    raw_interval = section.get("poll_interval_seconds", DEFAULT_POLL_INTERVAL_SECONDS)
    try:
        interval = float(raw_interval)
    except (TypeError, ValueError) as exc:
        raise ValueError(
            "Invalid value for 'sessions.poll_interval_seconds' in the "
            "configuration. Expected a number."
        ) from exc

    if interval <= 0:
        raise ValueError("'sessions.poll_interval_seconds' must be greater than 0.")

    return SessionsConfig(namespace=namespace, poll_interval_seconds=interval)


def _parse_sources(section: Mapping[str, Any], base_dir: Path) -> SourcesConfig:
    def _resolve_optional(rel: Optional[str]) -> Optional[Path]:
        if not rel:
            return None
        return (base_dir / str(rel)).resolve()

    return SourcesConfig(
        clients=_resolve_optional(section.get("clients")),
        projects=_resolve_optional(section.get("projects")),
        ledger=_resolve_optional(section.get("ledger")),
        expenses=_resolve_optional(section.get("expenses")),
    )


def default_app_config(base_dir: Optional[Path] = None) -> AppConfig:
    """
    Build the configuration used when no TOML file exists.

    The database lives under ``data/db`` relative to ``base_dir`` (the
    current directory by default) and no source exports are configured.
    """
    base = (base_dir or Path.cwd()).resolve()
    return AppConfig(
        database=DatabaseConfig(
            engine="sqlite",
            path=base / "data" / "db" / "smb_projectstats.sqlite",
        ),
        sessions=SessionsConfig(
            namespace=TIMER_SESSIONS_NAMESPACE,
            poll_interval_seconds=DEFAULT_POLL_INTERVAL_SECONDS,
        ),
        sources=SourcesConfig(clients=None, projects=None, ledger=None, expenses=None),
        display_mode="table",
        currency="XOF",
        amount_decimals=2,
        log_level="WARNING",
    )


def load_app_config(config_path: Optional[str] = None) -> AppConfig:
    """
    Load the SMB ProjectStats configuration from a TOML file.

    Expected top-level sections in the TOML file
    --------------------------------------------
    [database]
        Database engine ("sqlite") and SQLite file path. The database only
        holds the timer's work sessions.

    [sessions]
        ``namespace`` of the sessions document (default "timer-sessions")
        and ``poll_interval_seconds`` (default 10).

    [sources]
        Optional paths to the exported ``clients``, ``projects``,
        ``ledger`` and ``expenses`` collections (CSV or JSON).

    [display]
        ``mode`` ("table", "csv" or "both"), ``currency`` and
        ``amount_decimals``.

    [logging]
        ``level`` of the package loggers (default "WARNING").

    All file paths in the TOML are resolved relative to the directory of the
    TOML file itself.

    Parameters
    ----------
    config_path:
        Path to the TOML configuration file. Defaults to
        ``smb_projectstats_config.toml`` in the current directory.

    Returns
    -------
    AppConfig
        Parsed and validated application configuration.
    """
    if config_path is None:
        config_file = Path(DEFAULT_CONFIG_FILE).resolve()
    else:
        config_file = Path(config_path).resolve()

    raw = _load_toml(config_file)
    base_dir = config_file.parent

    # 1) Database section
    database_section = _section(raw, "database")
    db_engine = str(database_section.get("engine") or "sqlite")
    db_path_raw = database_section.get("path") or "data/db/smb_projectstats.sqlite"
    database_config = DatabaseConfig(
        engine=db_engine,
        path=(base_dir / str(db_path_raw)).resolve(),
    )

    # 2) Work sessions
    sessions_config = _parse_sessions(_section(raw, "sessions"))

    # 3) Source exports
    sources_config = _parse_sources(_section(raw, "sources"), base_dir)

    # 4) Display options
    display_section = _section(raw, "display")

    display_mode = str(display_section.get("mode", "table"))
    if display_mode not in DISPLAY_MODES:
        raise ValueError(
            f"Invalid display.mode {display_mode!r}. "
            f"Expected one of: {', '.join(sorted(DISPLAY_MODES))}."
        )

    currency = str(display_section.get("currency") or "XOF")
    try:
        amount_decimals = int(display_section.get("amount_decimals", 2))
    except (TypeError, ValueError):
        amount_decimals = 2

    # 5) Logging
    logging_section = _section(raw, "logging")
    log_level = str(logging_section.get("level") or "WARNING").upper()

    return AppConfig(
        database=database_config,
        sessions=sessions_config,
        sources=sources_config,
        display_mode=display_mode,
        currency=currency,
        amount_decimals=amount_decimals,
        log_level=log_level,
    )
