from smb_projectstats.grouping import DisambiguationMode
from smb_projectstats.records import LedgerEntry, Project
from smb_projectstats.revenue import (
    index_by_client,
    paid_amount_for_project,
    paid_entries,
)


def invoice(number: str, client: str, title: str, total: float, **kwargs) -> LedgerEntry:
    """Helper: a ledger entry, paid invoice by default."""
    return LedgerEntry(
        number=number,
        kind=kwargs.get("kind", "invoice"),
        client_display_name=client,
        title=title,
        status=kwargs.get("status", "paid"),
        total_amount=total,
    )


def project(pid: str, name: str) -> Project:
    return Project(
        id=pid, display_name=name, client_id="c1", client_display_label="Acme - Acme SARL"
    )


def test_paid_entries_keeps_only_paid_invoices() -> None:
    """Only paid invoices count as collected revenue."""
    entries = [
        invoice("F1", "Acme", "A", 100.0),
        invoice("F2", "Acme", "B", 200.0, status="sent"),
        invoice("D1", "Acme", "C", 300.0, kind="quote"),
        invoice("F3", "Acme", "D", 400.0, status="overdue"),
    ]
    assert [e.number for e in paid_entries(entries)] == ["F1"]


def test_index_by_client_normalizes_and_keeps_empty_names() -> None:
    """Client names are normalized; entries without a name form their own group."""
    entries = [
        invoice("F1", " ACME ", "A", 100.0),
        invoice("F2", "acme", "B", 200.0),
        invoice("F3", "", "C", 300.0),
    ]
    by_client = index_by_client(entries)
    assert list(by_client) == ["acme", ""]
    assert [e.number for e in by_client[""]] == ["F3"]
    assert [e.number for e in by_client["acme"]] == ["F1", "F2"]


def test_single_mode_collects_everything_for_the_client() -> None:
    """SINGLE mode collects every paid invoice of the client."""
    paid = index_by_client(
        [
            invoice("F1", "Acme", "Anything", 1000.0),
            invoice("F2", "Acme", "Other work", 250.0),
            invoice("F3", "Globex", "Website", 999.0),
        ]
    )
    amount = paid_amount_for_project(
        project("p1", "Website"), "acme", DisambiguationMode.SINGLE, paid
    )
    assert amount == 1250.0


def test_multi_mode_matches_on_title() -> None:
    """MULTI mode collects invoices whose title names the project."""
    paid = index_by_client(
        [
            invoice("F1", "Acme", "Website redesign phase 2", 500.0),
            invoice("F2", "Acme", "Maintenance", 80.0),
        ]
    )
    website = paid_amount_for_project(
        project("p1", "Website"), "acme", DisambiguationMode.MULTI, paid
    )
    logo = paid_amount_for_project(
        project("p2", "Logo"), "acme", DisambiguationMode.MULTI, paid
    )
    assert website == 500.0
    assert logo == 0.0


def test_empty_client_key_collects_invoices_without_client_name() -> None:
    """An empty client key is matched like any other key."""
    paid = index_by_client(
        [invoice("F1", "Acme", "Website", 500.0), invoice("F2", "", "Misc", 100.0)]
    )
    amount = paid_amount_for_project(
        project("p1", "Website"), "", DisambiguationMode.SINGLE, paid
    )
    assert amount == 100.0


def test_empty_project_name_in_multi_mode_collects_all_client_invoices() -> None:
    """A nameless project of a multi-project client matches every title."""
    paid = index_by_client([invoice("F1", "Acme", "Website v2", 100.0)])
    website = paid_amount_for_project(
        project("p1", "Website"), "acme", DisambiguationMode.MULTI, paid
    )
    nameless = paid_amount_for_project(
        project("p2", ""), "acme", DisambiguationMode.MULTI, paid
    )
    assert website == 100.0
    assert nameless == 100.0
