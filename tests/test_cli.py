import pytest

from smb_projectstats import __version__
from smb_projectstats.cli import main
from smb_projectstats.config import load_app_config
from smb_projectstats.sessions import WorkSessionStore


def write_sources(tmp_path) -> None:
    """Helper to write small source exports and a config file in tmp_path."""
    (tmp_path / "clients.csv").write_text("id,name\nc1,Acme\n", encoding="utf-8")
    (tmp_path / "projects.csv").write_text(
        "id,name,client_id,client_name\n"
        "p1,Website,c1,Acme - Acme SARL\n"
        "p2,Logo,c1,Acme - Acme SARL\n",
        encoding="utf-8",
    )
    (tmp_path / "invoices.csv").write_text(
        "number,type,client_name,title,status,total\n"
        "F-001,facture,Acme,Website redesign,Payé,500\n",
        encoding="utf-8",
    )
    (tmp_path / "transactions.csv").write_text(
        "id,type,montant,facture\nt1,depense,45,F-001\n",
        encoding="utf-8",
    )
    (tmp_path / "smb_projectstats_config.toml").write_text(
        """
[database]
path = "db/test.sqlite"

[sources]
clients = "clients.csv"
projects = "projects.csv"
ledger = "invoices.csv"
expenses = "transactions.csv"
""",
        encoding="utf-8",
    )


def test_version_flag(capsys):
    """--version prints the package version and exits early."""
    main(["--version"])
    assert __version__ in capsys.readouterr().out


def test_stats_table_output(tmp_path, monkeypatch, capsys):
    """Default run prints the stats and totals tables."""
    write_sources(tmp_path)
    monkeypatch.chdir(tmp_path)

    main(["sessions", "add", "--project-id", "p1", "--duration", "1800"])
    main([])

    out = capsys.readouterr().out
    assert "=== Project stats (XOF) ===" in out
    assert "Website" in out
    assert "30min" in out
    assert "total_paid_amount" in out


def test_sessions_add_then_list(tmp_path, monkeypatch, capsys):
    """A recorded session is listed and persisted with its date."""
    write_sources(tmp_path)
    monkeypatch.chdir(tmp_path)

    main(["sessions", "add", "--project-id", "p1", "--duration", "60", "--date", "2025-03-01"])
    main(["sessions", "list"])

    out = capsys.readouterr().out
    assert "Recorded session" in out
    assert "Total sessions: 1" in out

    cfg = load_app_config(str(tmp_path / "smb_projectstats_config.toml"))
    sessions, _ = WorkSessionStore(cfg.database, cfg.sessions.namespace).load()
    assert sessions[0].date == "2025-03-01"


def test_csv_output(tmp_path, monkeypatch, capsys):
    """CSV display mode writes one stats file and one totals file."""
    write_sources(tmp_path)
    monkeypatch.chdir(tmp_path)

    out_dir = tmp_path / "out"
    main(["--display-mode", "csv", "--output", str(out_dir)])

    files = sorted(p.name for p in out_dir.iterdir())
    assert len(files) == 2
    assert files[0].startswith("project_stats_")
    assert files[1].startswith("project_totals_")


def test_malformed_config_is_reported_as_usage_error(tmp_path, capsys):
    """An unparsable TOML file exits with a message instead of a traceback."""
    config_path = tmp_path / "broken.toml"
    config_path.write_text("[database\npath = ", encoding="utf-8")

    with pytest.raises(SystemExit) as excinfo:
        main(["--config", str(config_path)])

    assert excinfo.value.code == 2
    assert "Failed to parse TOML config file" in capsys.readouterr().err


def test_invalid_sessions_import_exits_with_message(tmp_path, monkeypatch):
    """A sessions file with invalid durations is rejected cleanly."""
    write_sources(tmp_path)
    monkeypatch.chdir(tmp_path)
    (tmp_path / "sessions.csv").write_text(
        "id,project_id,duration\ns1,p1,abc\n", encoding="utf-8"
    )

    with pytest.raises(SystemExit) as excinfo:
        main(["sessions", "import", "sessions.csv"])

    assert "Invalid sessions file" in str(excinfo.value.code)


def test_warning_when_no_projects_are_loaded(tmp_path, monkeypatch, capsys):
    """Without any project source a warning is printed."""
    monkeypatch.chdir(tmp_path)

    main([])

    assert "Warning: no projects loaded, use --projects" in capsys.readouterr().out
