from smb_projectstats.grouping import DisambiguationMode
from smb_projectstats.matching import (
    MultiProjectMatcher,
    SingleProjectMatcher,
    matcher_for,
    title_matches,
)
from smb_projectstats.records import Project

WEBSITE = Project(
    id="p1", display_name="Website", client_id="c1", client_display_label="Acme"
)


def test_title_matches_substring_case_insensitive() -> None:
    """Matching is a trimmed, case-insensitive substring test."""
    assert title_matches("Website redesign phase 2", "website")
    assert title_matches("  WEBSITE ", "Website")
    assert not title_matches("Logo refresh", "Website")


def test_title_matching_has_no_typo_tolerance() -> None:
    assert not title_matches("Webiste redesign", "Website")


def test_empty_project_name_matches_every_title() -> None:
    """An empty project name is a substring of any title."""
    assert title_matches("Anything", "")
    assert title_matches("", "  ")


def test_matcher_for_mode() -> None:
    """Each mode has its shared matcher instance."""
    assert isinstance(matcher_for(DisambiguationMode.SINGLE), SingleProjectMatcher)
    assert isinstance(matcher_for(DisambiguationMode.MULTI), MultiProjectMatcher)


def test_single_matcher_ignores_title() -> None:
    """The SINGLE matcher accepts any title."""
    matcher = matcher_for(DisambiguationMode.SINGLE)
    assert matcher.matches(WEBSITE, "Unrelated title")
    assert matcher.matches(WEBSITE, "")


def test_multi_matcher_requires_project_name_in_title() -> None:
    """The MULTI matcher needs the project name in the title."""
    matcher = matcher_for(DisambiguationMode.MULTI)
    assert matcher.matches(WEBSITE, "Website and Logo bundle")
    assert not matcher.matches(WEBSITE, "Logo only")
