# SMB ProjectStats - Project financial reconciliation for small service businesses
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Record types for SMB ProjectStats.

This module defines the immutable snapshots the reconciliation engine reads
(clients, projects, ledger entries, expense transactions, work sessions) and
the derived values it produces (per-project stats, global totals).

Source records are owned by external collaborators (the dashboard's CRUD
screens and its remote store). The engine never mutates them: all dataclasses
are frozen, and derived values are rebuilt rather than updated in place.

Canonical values
----------------
Exports from the original dashboard use French labels for kinds and
statuses. They are canonicalized when records are read (see ``io.py``) with
``canonical_ledger_kind``, ``canonical_ledger_status`` and
``canonical_transaction_kind`` so that the engine only ever compares against
the English constants defined here.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Literal, Optional

from .normalize import normalize

LedgerKind = Literal["quote", "invoice"]
TransactionKind = Literal["expense", "income"]

INVOICE = "invoice"
QUOTE = "quote"
PAID = "paid"
EXPENSE = "expense"
INCOME = "income"

_LEDGER_KIND_ALIASES = {
    "invoice": INVOICE,
    "facture": INVOICE,
    "quote": QUOTE,
    "devis": QUOTE,
}

_LEDGER_STATUS_ALIASES = {
    "draft": "draft",
    "brouillon": "draft",
    "sent": "sent",
    "envoyé": "sent",
    "envoye": "sent",
    "paid": PAID,
    "payé": PAID,
    "paye": PAID,
    "overdue": "overdue",
    "en retard": "overdue",
    "validated": "validated",
    "validé": "validated",
    "valide": "validated",
}

_TRANSACTION_KIND_ALIASES = {
    "expense": EXPENSE,
    "depense": EXPENSE,
    "dépense": EXPENSE,
    "income": INCOME,
    "recette": INCOME,
}


def canonical_ledger_kind(raw: Optional[str]) -> str:
    """Map a raw ledger kind ('facture', 'Invoice', ...) to its canonical value."""
    key = normalize(raw)
    return _LEDGER_KIND_ALIASES.get(key, key)


def canonical_ledger_status(raw: Optional[str]) -> str:
    """Map a raw ledger status ('Payé', 'En retard', ...) to its canonical value.

    Unknown statuses are kept (normalized) so that they can still be
    displayed; they simply never count as collected revenue.
    """
    key = normalize(raw)
    return _LEDGER_STATUS_ALIASES.get(key, key)


def canonical_transaction_kind(raw: Optional[str]) -> str:
    """Map a raw transaction kind ('depense', 'recette', ...) to its canonical value."""
    key = normalize(raw)
    return _TRANSACTION_KIND_ALIASES.get(key, key)


# ---------------------------------------------------------------------------
# Source records
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Client:
    """A client of the business."""

    id: str
    display_name: str


@dataclass(frozen=True)
class Project:
    """
    A project owned by a client.

    Attributes
    ----------
    id:
        Project identifier (also the key used by work sessions).
    display_name:
        Human-entered project name, matched against invoice titles when the
        owning client has several projects.
    client_id:
        Identifier of the owning client. May be empty for legacy projects.
    client_display_label:
        Composite label of the form ``"<name> - <company>"``. For invoices
        and expenses it is the only link back to the client's plain name.
    budget:
        Planned budget of the project (0.0 when unknown).
    status:
        Free-form lifecycle status, kept for display only.
    """

    id: str
    display_name: str
    client_id: str
    client_display_label: str
    budget: float = 0.0
    status: str = ""


@dataclass(frozen=True)
class LedgerEntry:
    """
    An invoice or quote.

    ``number`` is unique across the ledger and is what expense transactions
    reference. ``client_display_name`` is the client's plain name (without
    the company suffix found in project labels).
    """

    number: str
    kind: str
    client_display_name: str
    title: str
    status: str
    total_amount: float

    @property
    def is_collected(self) -> bool:
        """True when this entry counts as collected revenue (paid invoice)."""
        return self.kind == INVOICE and self.status == PAID


@dataclass(frozen=True)
class ExpenseTransaction:
    """
    A bookkeeping transaction (expense or income).

    Only expenses whose ``linked_ledger_number`` resolves to an existing
    ledger entry can be attributed to a project.
    """

    kind: str
    amount: float
    linked_ledger_number: Optional[str] = None
    id: str = ""
    date: Optional[date] = None
    description: str = ""


@dataclass(frozen=True)
class WorkSession:
    """A timed work session recorded by the dashboard timer."""

    id: str
    project_id: str
    duration_seconds: int
    date: str
    project_name: str = ""


# ---------------------------------------------------------------------------
# Derived values
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ProjectStat:
    """Derived financial and time figures for one project."""

    project_id: str
    paid_amount: float = 0.0
    spent_amount: float = 0.0
    time_tracked_seconds: int = 0


@dataclass(frozen=True)
class GlobalTotals:
    """
    Totals across all projects.

    ``total_paid_amount`` is the sum of per-project paid amounts. When an
    invoice is attributed to several projects of the same client it is
    counted once per project, so this total may exceed the client's invoice
    total.
    """

    total_paid_amount: float = 0.0
    total_time_tracked_seconds: int = 0
