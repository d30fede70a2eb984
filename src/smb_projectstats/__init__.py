# SMB ProjectStats - Project financial reconciliation for small service businesses
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
SMB ProjectStats
----------------

A Python-based reconciliation library for the business dashboard of small
service businesses (freelancers, agencies, studios). For every project it
derives how much has been collected, how much has been spent and how much
time has been logged against it.

Main capabilities:
- canonical client keys derived from human-entered display names,
- client/project grouping with a per-project disambiguation mode
  (SINGLE / MULTI),
- revenue attribution of paid invoices to projects,
- expense attribution through the invoice an expense is linked to,
- time aggregation from timer work sessions,
- a memoized stats builder producing per-project stats and global totals,
- a process-wide work-session store (SQLite) with a polling feed,
- CSV/JSON readers for dashboard exports and a command-line interface.

SMB ProjectStats separates computation (engine), configuration (TOML), and
presentation (CLI / views), so the same engine can back a web dashboard.

Version: 0.2.0

Usage:
    python -m smb_projectstats.cli --help
"""

__all__ = ["engine", "grouping", "matching", "normalize", "records", "views"]

__version__ = "0.2.0"
