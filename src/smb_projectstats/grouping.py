# SMB ProjectStats - Project financial reconciliation for small service businesses
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Client/project grouping for SMB ProjectStats.

Invoices and expenses only know the client's plain name, not the project.
Before attributing them, projects are grouped by the canonical key of their
owning client, and each project receives a disambiguation mode:

- SINGLE: the client owns exactly one project. Every paid invoice of the
  client unambiguously belongs to it.
- MULTI:  the client owns two or more projects. Invoice titles must be
  matched against project names to avoid misattribution.

The grouping is computed once per rebuild and shared by all matchers.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .normalize import client_key_from_label, normalize
from .records import Client, Project


class DisambiguationMode(Enum):
    """How strictly ledger records must match a project."""

    SINGLE = "single"
    MULTI = "multi"


def client_key_for_project(
    project: Project,
    clients_by_id: Optional[Mapping[str, Client]] = None,
) -> str:
    """Return the canonical client key of a project.

    The key comes from the name segment of ``client_display_label``. When
    that segment is empty (legacy projects created without a label), the
    display name of the owning client is used instead, if it can be found
    through ``client_id``. An unresolvable key is an empty string.
    """
    key = client_key_from_label(project.client_display_label)
    if key or not clients_by_id:
        return key

    client = clients_by_id.get(project.client_id)
    if client is None:
        return ""
    return normalize(client.display_name)


def group_projects(
    projects: Iterable[Project],
    clients: Optional[Iterable[Client]] = None,
) -> dict[str, list[Project]]:
    """Group projects by canonical client key, preserving input order."""
    clients_by_id = {c.id: c for c in clients} if clients is not None else None

    groups: dict[str, list[Project]] = {}
    for project in projects:
        key = client_key_for_project(project, clients_by_id)
        groups.setdefault(key, []).append(project)
    return groups


@dataclass(frozen=True)
class ProjectGrouping:
    """
    Result of grouping projects by client.

    Attributes
    ----------
    groups:
        Canonical client key -> projects of that client.
    clients_by_id:
        Client id -> client, used to resolve projects without a label.

    Keys are derived from each project record, so two projects sharing an
    id still resolve to their own client.
    """

    groups: dict[str, list[Project]]
    clients_by_id: Optional[dict[str, Client]] = None

    @classmethod
    def build(
        cls,
        projects: Iterable[Project],
        clients: Optional[Iterable[Client]] = None,
    ) -> "ProjectGrouping":
        clients = list(clients) if clients is not None else None
        groups = group_projects(projects, clients)
        clients_by_id = {c.id: c for c in clients} if clients is not None else None
        return cls(groups=groups, clients_by_id=clients_by_id)

    def key_for(self, project: Project) -> str:
        return client_key_for_project(project, self.clients_by_id)

    def siblings(self, project: Project) -> list[Project]:
        """Projects sharing the client key of ``project`` (itself included)."""
        return self.groups.get(self.key_for(project), [])

    def mode_for(self, project: Project) -> DisambiguationMode:
        if len(self.siblings(project)) == 1:
            return DisambiguationMode.SINGLE
        return DisambiguationMode.MULTI
