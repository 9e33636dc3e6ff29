"""Tests for project and organization commands."""

from __future__ import annotations

from tests.helpers import FakeApi, run_cli

PROJECT_RECORD = {
    "name": "demo",
    "spec": {"description": "Demo project"},
    "status": {
        "projectStatus": {
            "statusIndicator": "STATUS_INDICATION_IDLE",
            "message": "Project demo CREATE is complete",
            "uid": "4c2a",
        }
    },
}


def test_list_projects(api: FakeApi) -> None:
    api.add("GET", "/v1/projects", json=[PROJECT_RECORD, {"name": "bare"}])

    result = run_cli(api, ["list", "projects"], project=None)

    assert result.exit_code == 0, result.output
    lines = result.stdout.splitlines()
    assert lines[0].split() == ["Name", "Status"]
    assert lines[1].split() == ["demo", "STATUS_INDICATION_IDLE"]
    assert lines[2].split() == ["bare", "Unknown"]


def test_list_projects_verbose_adds_description(api: FakeApi) -> None:
    api.add("GET", "/v1/projects", json=[PROJECT_RECORD])

    result = run_cli(api, ["-v", "list", "projects"], project=None)

    assert result.exit_code == 0, result.output
    assert "Description" in result.stdout.splitlines()[0]
    assert "Demo project" in result.stdout


def test_list_organizations_empty(api: FakeApi) -> None:
    api.add("GET", "/v1/orgs", json=[])

    result = run_cli(api, ["list", "organizations"], project=None)

    assert result.exit_code == 0, result.output
    assert result.stdout == "No organizations found\n"


def test_get_project(api: FakeApi) -> None:
    api.add("GET", "/v1/projects/demo", json=PROJECT_RECORD)

    result = run_cli(api, ["get", "project", "demo"], project=None)

    assert result.exit_code == 0, result.output
    assert "Name: demo" in result.stdout
    assert "Status message: Project demo CREATE is complete" in result.stdout
    assert "UID: 4c2a" in result.stdout


def test_get_organization_without_status(api: FakeApi) -> None:
    api.add("GET", "/v1/orgs/acme", json={"name": "acme"})

    result = run_cli(api, ["get", "organization", "acme"], project=None)

    assert result.exit_code == 0, result.output
    assert "Description: N/A" in result.stdout
    assert "Status: Unknown" in result.stdout


def test_create_project_description_defaults_to_name(api: FakeApi) -> None:
    api.add("PUT", "/v1/projects/edge", json={})

    result = run_cli(api, ["create", "project", "edge"], project=None)

    assert result.exit_code == 0, result.output
    assert "Project 'edge' created successfully" in result.stdout
    assert api.body("PUT", "/v1/projects/edge") == {"description": "edge"}


def test_create_organization_with_description(api: FakeApi) -> None:
    api.add("PUT", "/v1/orgs/acme", json={})

    result = run_cli(
        api, ["create", "organization", "acme", "--description", "Acme Corp"], project=None
    )

    assert result.exit_code == 0, result.output
    assert api.body("PUT", "/v1/orgs/acme") == {"description": "Acme Corp"}


def test_create_project_unauthenticated(api: FakeApi) -> None:
    api.add("PUT", "/v1/projects/edge", status=401)

    result = run_cli(api, ["create", "project", "edge"], project=None)

    assert result.exit_code == 1
    assert result.stderr.strip() == "Error: Unauthenticated. Please login"


def test_delete_organization(api: FakeApi) -> None:
    api.add("DELETE", "/v1/orgs/acme", json={})

    result = run_cli(api, ["delete", "organization", "acme"], project=None)

    assert result.exit_code == 0, result.output
    assert "Organization 'acme' deleted successfully" in result.stdout
