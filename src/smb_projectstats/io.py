# SMB ProjectStats - Project financial reconciliation for small service businesses
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
I/O module for SMB ProjectStats.

This module reads the source collections exported from the dashboard
(clients, projects, ledger entries, expense transactions, work sessions)
and turns them into the immutable records used by the engine.

Input formats
-------------
Each collection can be provided as:

- a CSV file (``.csv``), read with every column as text, or
- a JSON file (``.json``) holding a list of objects, as produced by the
  dashboard's export or by its remote store.

Column names are case-insensitive and surrounding spaces are ignored. Each
field accepts a few aliases so that raw exports can be used directly:

    clients       id, display_name (name, client_name)
    projects      id, display_name (name), client_id (clientid),
                  client_display_label (client_name, clientname),
                  budget (optional), status (optional)
    ledger        number, kind (type), client_display_name (client_name,
                  clientname), title, status, total_amount (total)
    expenses      kind (type), amount (montant),
                  linked_ledger_number (facture, invoice_number, optional),
                  id, date, description (optional)
    sessions      id, project_id (projectid), duration_seconds (duration),
                  date, project_name (projectname, optional)

Kinds and statuses are canonicalized (see ``records.py``), so French labels
from the original dashboard ('facture', 'Payé', 'depense', ...) are
understood.

If a required column is missing, or if a numeric column contains values
that cannot be parsed, a clear ValueError is raised.
"""

import os
from collections.abc import Sequence
from pathlib import Path
from typing import Any, Optional, Union

import pandas as pd

from .records import (
    Client,
    ExpenseTransaction,
    LedgerEntry,
    Project,
    WorkSession,
    canonical_ledger_kind,
    canonical_ledger_status,
    canonical_transaction_kind,
)

PathLike = Union[str, "os.PathLike[str]"]


def _read_table(path: PathLike) -> pd.DataFrame:
    """Read a CSV or JSON export into a DataFrame with normalized column names."""
    p = Path(path)
    if not p.is_file():
        raise FileNotFoundError(f"Source file not found: {p}")

    if p.suffix.lower() == ".json":
        try:
            df = pd.read_json(p, orient="records", dtype=False)
        except ValueError as exc:
            raise ValueError(f"Invalid JSON export: {p}") from exc
    else:
        df = pd.read_csv(p, dtype=str, keep_default_na=False)

    df.columns = [str(c).lower().strip() for c in df.columns]
    return df


def _pick_column(
    df: pd.DataFrame,
    candidates: Sequence[str],
    what: str,
    required: bool = True,
) -> Optional[str]:
    """Return the first candidate column present in ``df``."""
    for cand in candidates:
        if cand in df.columns:
            return cand
    if required:
        raise ValueError(
            f"Could not find a {what} column. "
            f"Expected one of: {', '.join(repr(c) for c in candidates)}."
        )
    return None


def _text(value: Any) -> str:
    """Convert a cell to text, mapping missing values to an empty string."""
    if value is None:
        return ""
    try:
        if pd.isna(value):
            return ""
    except (TypeError, ValueError):
        # Non-scalar cell (list, dict): keep its string form.
        pass
    return str(value)


def _numeric(df: pd.DataFrame, col: str, what: str) -> pd.Series:
    """Parse a required numeric column, raising on any invalid value."""
    values = pd.to_numeric(df[col], errors="coerce")
    if values.isna().any():
        raise ValueError(f"Invalid numeric values in '{col}' column ({what}).")
    return values


def _optional_numeric(df: pd.DataFrame, col: Optional[str]) -> pd.Series:
    """Parse an optional numeric column; missing or invalid values become 0."""
    if col is None:
        return pd.Series(0.0, index=df.index)
    values = pd.to_numeric(df[col], errors="coerce")
    return values.fillna(0.0)


def read_clients(path: PathLike) -> list[Client]:
    """Read the clients export."""
    df = _read_table(path)
    id_col = _pick_column(df, ["id", "client_id"], "client id")
    name_col = _pick_column(
        df, ["display_name", "name", "client_name", "clientname"], "client name"
    )

    return [
        Client(id=_text(row[id_col]).strip(), display_name=_text(row[name_col]))
        for _, row in df.iterrows()
    ]


def read_projects(path: PathLike) -> list[Project]:
    """Read the projects export."""
    df = _read_table(path)
    id_col = _pick_column(df, ["id", "project_id"], "project id")
    name_col = _pick_column(
        df, ["display_name", "name", "project_name"], "project name"
    )
    client_id_col = _pick_column(
        df, ["client_id", "clientid"], "client id", required=False
    )
    label_col = _pick_column(
        df,
        ["client_display_label", "client_name", "clientname", "client"],
        "client label",
    )
    budget_col = _pick_column(df, ["budget"], "budget", required=False)
    status_col = _pick_column(df, ["status"], "status", required=False)

    budgets = _optional_numeric(df, budget_col)

    projects = []
    for idx, row in df.iterrows():
        projects.append(
            Project(
                id=_text(row[id_col]).strip(),
                display_name=_text(row[name_col]),
                client_id=_text(row[client_id_col]).strip() if client_id_col else "",
                client_display_label=_text(row[label_col]),
                budget=float(budgets[idx]),
                status=_text(row[status_col]) if status_col else "",
            )
        )
    return projects


def read_ledger_entries(path: PathLike) -> list[LedgerEntry]:
    """Read the invoices/quotes export."""
    df = _read_table(path)
    number_col = _pick_column(
        df, ["number", "invoice_number", "numero"], "ledger number"
    )
    kind_col = _pick_column(df, ["kind", "type"], "ledger kind")
    client_col = _pick_column(
        df,
        ["client_display_name", "client_name", "clientname", "client"],
        "client name",
    )
    title_col = _pick_column(df, ["title", "titre"], "title")
    status_col = _pick_column(df, ["status", "statut"], "status")
    total_col = _pick_column(df, ["total_amount", "total"], "total amount")

    totals = _numeric(df, total_col, "ledger total")

    entries = []
    for idx, row in df.iterrows():
        entries.append(
            LedgerEntry(
                number=_text(row[number_col]).strip(),
                kind=canonical_ledger_kind(_text(row[kind_col])),
                client_display_name=_text(row[client_col]),
                title=_text(row[title_col]),
                status=canonical_ledger_status(_text(row[status_col])),
                total_amount=float(totals[idx]),
            )
        )
    return entries


def read_expense_transactions(path: PathLike) -> list[ExpenseTransaction]:
    """Read the bookkeeping transactions export."""
    df = _read_table(path)
    kind_col = _pick_column(df, ["kind", "type"], "transaction kind")
    amount_col = _pick_column(df, ["amount", "montant"], "amount")
    linked_col = _pick_column(
        df,
        ["linked_ledger_number", "facture", "invoice_number", "invoice"],
        "linked ledger number",
        required=False,
    )
    id_col = _pick_column(df, ["id"], "transaction id", required=False)
    date_col = _pick_column(df, ["date"], "date", required=False)
    desc_col = _pick_column(
        df, ["description", "label"], "description", required=False
    )

    amounts = _numeric(df, amount_col, "transaction amount")
    if date_col is not None:
        dates = pd.to_datetime(df[date_col], errors="coerce")
    else:
        dates = pd.Series(pd.NaT, index=df.index)

    transactions = []
    for idx, row in df.iterrows():
        linked = _text(row[linked_col]).strip() if linked_col else ""
        tx_date = dates[idx]
        transactions.append(
            ExpenseTransaction(
                kind=canonical_transaction_kind(_text(row[kind_col])),
                amount=float(amounts[idx]),
                linked_ledger_number=linked or None,
                id=_text(row[id_col]).strip() if id_col else "",
                date=None if pd.isna(tx_date) else tx_date.date(),
                description=_text(row[desc_col]) if desc_col else "",
            )
        )
    return transactions


def read_work_sessions(path: PathLike) -> list[WorkSession]:
    """Read a work-session export (e.g. the timer's saved sessions)."""
    df = _read_table(path)
    id_col = _pick_column(df, ["id", "session_id"], "session id", required=False)
    project_col = _pick_column(df, ["project_id", "projectid"], "project id")
    duration_col = _pick_column(df, ["duration_seconds", "duration"], "duration")
    date_col = _pick_column(df, ["date"], "date", required=False)
    name_col = _pick_column(
        df, ["project_name", "projectname"], "project name", required=False
    )

    durations = _numeric(df, duration_col, "session duration")

    sessions = []
    for idx, row in df.iterrows():
        sessions.append(
            WorkSession(
                id=_text(row[id_col]).strip() if id_col else str(idx),
                project_id=_text(row[project_col]).strip(),
                duration_seconds=int(durations[idx]),
                date=_text(row[date_col]) if date_col else "",
                project_name=_text(row[name_col]) if name_col else "",
            )
        )
    return sessions
