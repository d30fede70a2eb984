# SMB ProjectStats - Project financial reconciliation for small service businesses
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Command-Line Interface (CLI) for SMB ProjectStats.

This module wires together the main building blocks of SMB ProjectStats:

- application configuration (database, sessions, sources, display options),
- source exports (clients, projects, ledger entries, expense transactions),
- the work-session store and its polling feed,
- the stats engine,
- view helpers (tabular rendering).

The CLI is intentionally thin: it does not implement any attribution logic
itself. It orchestrates the underlying modules based on command-line
arguments and the configuration file.


High-level pipeline
-------------------

1) Load the TOML configuration (``smb_projectstats_config.toml`` by default,
   or ``--config PATH``). If the default file does not exist, built-in
   defaults are used.

2) Initialize the database holding the timer work sessions.

3) Read the source exports, with optional CLI overrides:
   ``--clients``, ``--projects``, ``--ledger``, ``--expenses``.

4) Build per-project stats and global totals.

5) Render them as console tables and/or CSV files depending on the display
   mode (``--display-mode`` overrides ``display.mode``).


Subcommands
-----------

``sessions list``
    List the stored work sessions.

``sessions add --project-id ID --duration SECONDS [--date YYYY-MM-DD]``
    Record a work session (as the dashboard timer does).

``sessions import PATH``
    Append the sessions of a CSV/JSON export to the store.
"""

import argparse
import uuid
from datetime import date, datetime
from pathlib import Path
from typing import Optional

from . import __version__
from .config import DEFAULT_CONFIG_FILE, AppConfig, default_app_config, load_app_config
from .db import init_database
from .io import read_work_sessions
from .logging_utils import configure_logging
from .records import WorkSession
from .sessions import WorkSessionStore
from .stats_service import build_service
from .views import sessions_to_dataframe, stats_to_dataframe, totals_to_dataframe


def _build_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser for the CLI."""
    ap = argparse.ArgumentParser(
        prog="python -m smb_projectstats.cli",
        description=(
            "SMB ProjectStats - Project financial reconciliation for small "
            "service businesses. Attributes paid invoices, linked expenses and "
            "tracked time to projects and renders per-project stats."
        ),
    )

    # Generic options
    ap.add_argument(
        "--version",
        action="store_true",
        help="Show the installed version of smb_projectstats and exit.",
    )

    ap.add_argument(
        "--config",
        dest="config_path",
        help=(
            "Path to the TOML configuration file. If omitted, "
            f"'{DEFAULT_CONFIG_FILE}' in the current directory is used when present."
        ),
    )

    # Source overrides
    ap.add_argument(
        "--clients",
        dest="clients_path",
        help="Clients export (CSV or JSON). Overrides sources.clients.",
    )
    ap.add_argument(
        "--projects",
        dest="projects_path",
        help="Projects export (CSV or JSON). Overrides sources.projects.",
    )
    ap.add_argument(
        "--ledger",
        dest="ledger_path",
        help="Invoices/quotes export (CSV or JSON). Overrides sources.ledger.",
    )
    ap.add_argument(
        "--expenses",
        dest="expenses_path",
        help="Transactions export (CSV or JSON). Overrides sources.expenses.",
    )

    # Display options
    ap.add_argument(
        "--display-mode",
        dest="display_mode",
        choices=["table", "csv", "both"],
        help=(
            "Override the display.mode setting from the configuration file. "
            "'table' prints results to stdout, "
            "'csv' writes CSV files only, "
            "'both' does both."
        ),
    )
    ap.add_argument(
        "--output",
        dest="output_dir",
        help=(
            "Output directory where CSV files will be written when display "
            "mode includes 'csv'. If omitted, 'data/output' is used."
        ),
    )

    # ------------------------------------------------------------------
    # Subcommands: sessions
    # ------------------------------------------------------------------
    subparsers = ap.add_subparsers(
        dest="command",
        metavar="command",
        help="Optional subcommands (e.g. 'sessions') for managing timer data.",
    )

    sessions_parser = subparsers.add_parser(
        "sessions",
        help="Inspect and record timer work sessions.",
    )
    sessions_subparsers = sessions_parser.add_subparsers(
        dest="sessions_command",
        metavar="sessions-command",
        help="Sessions subcommands ('list', 'add', 'import').",
    )

    sessions_subparsers.add_parser("list", help="List stored work sessions.")

    sessions_add = sessions_subparsers.add_parser(
        "add",
        help="Record a work session for a project.",
    )
    sessions_add.add_argument(
        "--project-id",
        dest="project_id",
        required=True,
        help="Identifier of the project the session belongs to.",
    )
    sessions_add.add_argument(
        "--duration",
        dest="duration",
        type=int,
        required=True,
        help="Duration of the session in seconds.",
    )
    sessions_add.add_argument(
        "--date",
        dest="session_date",
        help="Date of the session (YYYY-MM-DD). Defaults to today.",
    )
    sessions_add.add_argument(
        "--project-name",
        dest="project_name",
        default="",
        help="Project name stored alongside the session (display only).",
    )

    sessions_import = sessions_subparsers.add_parser(
        "import",
        help="Append work sessions from a CSV/JSON export.",
    )
    sessions_import.add_argument(
        "path",
        metavar="PATH",
        help="CSV or JSON file containing work sessions.",
    )

    return ap


def _parse_optional_date(value: Optional[str]) -> Optional[date]:
    """
    Parse an optional CLI date argument (YYYY-MM-DD).

    Raises
    ------
    SystemExit
        If the date format is invalid.
    """
    if value is None:
        return None

    try:
        return date.fromisoformat(value)
    except ValueError as exc:
        msg = f"Invalid date format: {value!r}. Expected YYYY-MM-DD."
        raise SystemExit(msg) from exc


def _load_config(args: argparse.Namespace, parser: argparse.ArgumentParser) -> AppConfig:
    """Load the configuration, falling back to defaults without a config file."""
    if args.config_path:
        try:
            return load_app_config(args.config_path)
        except (FileNotFoundError, ValueError) as exc:
            parser.error(str(exc))

    if Path(DEFAULT_CONFIG_FILE).is_file():
        try:
            return load_app_config()
        except ValueError as exc:
            parser.error(str(exc))
    return default_app_config()


def _handle_sessions_list(store: WorkSessionStore) -> None:
    sessions, version = store.load()
    if not sessions:
        print("No work sessions recorded.")
        return

    df = sessions_to_dataframe(sessions)
    print(df.to_string(index=False))
    print()
    print(f"Total sessions: {len(sessions)} | Store version: {version}")


def _handle_sessions_add(args: argparse.Namespace, store: WorkSessionStore) -> None:
    if args.duration < 0:
        raise SystemExit("Session duration cannot be negative.")

    session_date = _parse_optional_date(args.session_date) or date.today()
    session = WorkSession(
        id=uuid.uuid4().hex,
        project_id=args.project_id,
        duration_seconds=args.duration,
        date=session_date.isoformat(),
        project_name=args.project_name,
    )
    version = store.append(session)
    print(
        f"Recorded session {session.id} for project {session.project_id} "
        f"({session.duration_seconds}s, store version {version})."
    )


def _handle_sessions_import(args: argparse.Namespace, store: WorkSessionStore) -> None:
    path = Path(args.path)
    if not path.is_file():
        raise SystemExit(f"Sessions file not found: {path}")

    try:
        imported = read_work_sessions(path)
    except ValueError as exc:
        raise SystemExit(f"Invalid sessions file {path}: {exc}") from exc
    sessions, _ = store.load()
    version = store.save([*sessions, *imported])
    print(
        f"Imported {len(imported)} work sessions from {path} "
        f"(store version {version})."
    )


def _handle_sessions_command(args: argparse.Namespace, config: AppConfig) -> None:
    """Dispatch the 'sessions' subcommands."""
    store = WorkSessionStore(config.database, config.sessions.namespace)
    subcmd = getattr(args, "sessions_command", None)

    if subcmd == "list":
        _handle_sessions_list(store)
    elif subcmd == "add":
        _handle_sessions_add(args, store)
    elif subcmd == "import":
        _handle_sessions_import(args, store)
    else:
        print(
            "No sessions subcommand specified. "
            "Available subcommands are: 'list', 'add', 'import'."
        )


def main(argv: Optional[list[str]] = None) -> None:
    """Entry point for the SMB ProjectStats CLI.

    This function parses command-line arguments, loads the configuration,
    initializes the work-session database, dispatches the 'sessions'
    subcommands, or reads the source exports, builds per-project stats and
    renders them as console tables and/or CSV files.
    """
    parser = _build_parser()
    args = parser.parse_args(argv)

    # --version: short-circuit and exit early.
    if args.version:
        print(f"smb_projectstats version {__version__}")
        return

    # 1) Load configuration and set up logging
    config = _load_config(args, parser)
    configure_logging(config.log_level)

    # 2) Initialize the database (create file and schema if needed)
    init_database(config.database)

    if getattr(args, "command", None) == "sessions":
        _handle_sessions_command(args, config)
        return

    # 3) Read sources and build the service
    try:
        service = build_service(
            config,
            clients_path=args.clients_path,
            projects_path=args.projects_path,
            ledger_path=args.ledger_path,
            expenses_path=args.expenses_path,
        )
    except (FileNotFoundError, ValueError) as exc:
        parser.error(str(exc))

    if not service.projects:
        print(
            "Warning: no projects loaded, use --projects or configure "
            "sources.projects."
        )

    # 4) Compute stats
    stats, totals = service.current()
    stats_df = stats_to_dataframe(
        service.projects, stats, decimals=config.amount_decimals
    )
    totals_df = totals_to_dataframe(totals, decimals=config.amount_decimals)

    # 5) Resolve display mode: config value overridden by CLI if provided.
    display_mode = args.display_mode or config.display_mode

    if display_mode in {"table", "both"}:
        print()
        print(f"=== Project stats ({config.currency}) ===")
        print(stats_df.to_string(index=False))
        print()
        print("=== Totals ===")
        print(totals_df.to_string(index=False))

    if display_mode in {"csv", "both"}:
        output_dir = Path(args.output_dir) if args.output_dir else Path("data/output")
        output_dir.mkdir(parents=True, exist_ok=True)

        timestamp = datetime.now().strftime("%Y-%m-%d-%H-%M-%S")

        path = output_dir / f"project_stats_{timestamp}.csv"
        stats_df.to_csv(path, index=False)
        print(f"Wrote {path} ({len(stats_df)} rows)")

        path = output_dir / f"project_totals_{timestamp}.csv"
        totals_df.to_csv(path, index=False)
        print(f"Wrote {path} ({len(totals_df)} rows)")


if __name__ == "__main__":
    main()
