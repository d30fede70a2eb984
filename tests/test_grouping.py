from smb_projectstats.grouping import (
    DisambiguationMode,
    ProjectGrouping,
    client_key_for_project,
    group_projects,
)
from smb_projectstats.records import Client, Project


def make_project(pid: str, name: str, label: str, client_id: str = "") -> Project:
    return Project(
        id=pid, display_name=name, client_id=client_id, client_display_label=label
    )


def test_group_projects_by_client_key() -> None:
    """Projects are grouped on the normalized name segment of their label."""
    projects = [
        make_project("p1", "Website", "Acme - Acme SARL"),
        make_project("p2", "Logo", " acme - Acme SARL"),
        make_project("p3", "App", "Globex - Globex Inc"),
    ]

    groups = group_projects(projects)

    assert set(groups) == {"acme", "globex"}
    assert [p.id for p in groups["acme"]] == ["p1", "p2"]
    assert [p.id for p in groups["globex"]] == ["p3"]


def test_modes_single_and_multi() -> None:
    """Mode is SINGLE for a lone project and MULTI for siblings."""
    projects = [
        make_project("p1", "Website", "Acme - Acme SARL"),
        make_project("p2", "Logo", "Acme - Acme SARL"),
        make_project("p3", "App", "Globex - Globex Inc"),
    ]

    grouping = ProjectGrouping.build(projects)

    assert grouping.mode_for(projects[0]) is DisambiguationMode.MULTI
    assert grouping.mode_for(projects[1]) is DisambiguationMode.MULTI
    assert grouping.mode_for(projects[2]) is DisambiguationMode.SINGLE
    assert grouping.key_for(projects[2]) == "globex"
    assert [p.id for p in grouping.siblings(projects[0])] == ["p1", "p2"]


def test_empty_label_falls_back_to_client_display_name() -> None:
    """An empty label falls back to the client's display name."""
    clients = {"c1": Client(id="c1", display_name=" Acme ")}
    project = make_project("p1", "Website", "", client_id="c1")

    assert client_key_for_project(project, clients) == "acme"
    assert client_key_for_project(project) == ""


def test_unknown_client_gives_empty_key() -> None:
    project = make_project("p1", "Website", "", client_id="missing")
    assert client_key_for_project(project, {}) == ""


def test_key_for_uses_the_project_record_not_its_id() -> None:
    """Two projects sharing an id still resolve to their own client."""
    acme = make_project("p1", "Website", "Acme - Acme SARL")
    globex = make_project("p1", "App", "Globex - Globex Inc")

    grouping = ProjectGrouping.build([acme, globex])

    assert grouping.key_for(acme) == "acme"
    assert grouping.key_for(globex) == "globex"
    assert grouping.mode_for(acme) is DisambiguationMode.SINGLE
    assert grouping.mode_for(globex) is DisambiguationMode.SINGLE
