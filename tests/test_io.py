import json

import pytest

from smb_projectstats.io import (
    read_clients,
    read_expense_transactions,
    read_ledger_entries,
    read_projects,
    read_work_sessions,
)


def write(tmp_path, name: str, content: str):
    path = tmp_path / name
    path.write_text(content, encoding="utf-8")
    return path


def test_read_projects_csv_with_aliases(tmp_path):
    """Project exports are read with column aliases and optional budget."""
    path = write(
        tmp_path,
        "projects.csv",
        "ID,Name,Client_Id,Client_Name,Budget,Status\n"
        "p1,Website,c1,Acme - Acme SARL,1500,En cours\n"
        "p2,Logo,,Acme - Acme SARL,,\n",
    )

    projects = read_projects(path)

    assert [p.id for p in projects] == ["p1", "p2"]
    assert projects[0].client_display_label == "Acme - Acme SARL"
    assert projects[0].budget == 1500.0
    assert projects[0].status == "En cours"
    assert projects[1].client_id == ""
    assert projects[1].budget == 0.0


def test_read_ledger_entries_canonicalizes_french_labels(tmp_path):
    """French kinds and statuses map to canonical values."""
    path = write(
        tmp_path,
        "invoices.csv",
        "number,type,client_name,title,status,total\n"
        "F-001,facture,Acme,Website,Payé,1000\n"
        "D-001,devis,Acme,Logo,Validé,500.5\n"
        "0042,facture,Acme,Logo,En retard,10\n",
    )

    entries = read_ledger_entries(path)

    assert [(e.kind, e.status) for e in entries] == [
        ("invoice", "paid"),
        ("quote", "validated"),
        ("invoice", "overdue"),
    ]
    assert entries[0].is_collected
    assert entries[1].total_amount == 500.5
    # Numbers are kept as text (leading zeros preserved).
    assert entries[2].number == "0042"


def test_read_ledger_entries_rejects_invalid_totals(tmp_path):
    """Non-numeric totals raise a ValueError."""
    path = write(
        tmp_path,
        "invoices.csv",
        "number,kind,client_display_name,title,status,total_amount\n"
        "F-001,invoice,Acme,Website,paid,abc\n",
    )
    with pytest.raises(ValueError, match="Invalid numeric values"):
        read_ledger_entries(path)


def test_read_ledger_entries_missing_column(tmp_path):
    """A missing required column is reported by name."""
    path = write(tmp_path, "invoices.csv", "number,kind,title,status,total\n")
    with pytest.raises(ValueError, match="client name"):
        read_ledger_entries(path)


def test_read_expense_transactions_json(tmp_path):
    """Transactions are read from a JSON list of objects."""
    path = write(
        tmp_path,
        "transactions.json",
        json.dumps(
            [
                {
                    "id": "t1",
                    "date": "2025-02-01",
                    "description": "Hosting",
                    "type": "depense",
                    "montant": 45,
                    "facture": "F-001",
                },
                {"id": "t2", "type": "recette", "montant": 1000},
            ]
        ),
    )

    transactions = read_expense_transactions(path)

    assert transactions[0].kind == "expense"
    assert transactions[0].amount == 45.0
    assert transactions[0].linked_ledger_number == "F-001"
    assert transactions[0].date.isoformat() == "2025-02-01"
    assert transactions[1].kind == "income"
    assert transactions[1].linked_ledger_number is None
    assert transactions[1].date is None


def test_read_clients_and_sessions(tmp_path):
    """Clients and work sessions are read from CSV exports."""
    clients = read_clients(write(tmp_path, "clients.csv", "id,name\nc1,Acme\n"))
    assert clients[0].display_name == "Acme"

    sessions = read_work_sessions(
        write(
            tmp_path,
            "sessions.csv",
            "id,projectId,duration,date\ns1,P1,1800,2025-03-01\ns2,P1,3600,2025-03-02\n",
        )
    )
    assert [(s.project_id, s.duration_seconds) for s in sessions] == [
        ("P1", 1800),
        ("P1", 3600),
    ]


def test_missing_file_raises(tmp_path):
    """A missing config file raises FileNotFoundError."""
    with pytest.raises(FileNotFoundError):
        read_projects(tmp_path / "nope.csv")
