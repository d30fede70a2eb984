# SMB ProjectStats - Project financial reconciliation for small service businesses
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Matching policies for SMB ProjectStats.

A matcher decides whether a ledger record already known to belong to a
project's client also belongs to the project itself. There are two
variants, selected by the project's disambiguation mode:

- ``SingleProjectMatcher``: the client has one project, everything matches.
- ``MultiProjectMatcher``: the client has several projects; the record's
  title must contain the project name (case-insensitive, trimmed substring
  match, no typo tolerance).

A title containing the names of several projects matches all of them. The
revenue and expense matchers count such a record once per matching project.
"""

from typing import Optional

from .grouping import DisambiguationMode
from .normalize import normalize
from .records import Project


def title_matches(title: Optional[str], project_name: Optional[str]) -> bool:
    """Return True if a ledger title refers to the given project name.

    An empty project name is a substring of every title and matches all of
    them.
    """
    name = normalize(project_name)
    text = normalize(title)
    return name in text or text == name


class Matcher:
    """Base class for project matching policies."""

    mode: DisambiguationMode

    def matches(self, project: Project, title: Optional[str]) -> bool:
        raise NotImplementedError


class SingleProjectMatcher(Matcher):
    mode = DisambiguationMode.SINGLE

    def matches(self, project: Project, title: Optional[str]) -> bool:
        return True


class MultiProjectMatcher(Matcher):
    mode = DisambiguationMode.MULTI

    def matches(self, project: Project, title: Optional[str]) -> bool:
        return title_matches(title, project.display_name)


_MATCHERS: dict[DisambiguationMode, Matcher] = {
    DisambiguationMode.SINGLE: SingleProjectMatcher(),
    DisambiguationMode.MULTI: MultiProjectMatcher(),
}


def matcher_for(mode: DisambiguationMode) -> Matcher:
    """Return the shared matcher instance for a disambiguation mode."""
    return _MATCHERS[mode]
