"""Tests for application and deployment package commands."""

from __future__ import annotations

from tests.helpers import FakeApi, run_cli

APPS = "/v3/projects/demo/catalog/applications"
PACKAGES = "/v3/projects/demo/catalog/deployment_packages"

NGINX = {
    "name": "nginx",
    "version": "1.0.0",
    "kind": "KIND_NORMAL",
    "displayName": "Nginx",
    "chartName": "nginx",
    "chartVersion": "15.0.0",
    "helmRegistryName": "bitnami",
    "profiles": [{"name": "default"}],
    "defaultProfileName": "default",
    "createTime": "2024-05-01T12:30:00Z",
}


def test_list_applications(api: FakeApi) -> None:
    api.add("GET", APPS, json={"applications": [NGINX], "totalElements": 1})

    result = run_cli(api, ["list", "applications", "--kind", "addon", "--page-size", "5"])

    assert result.exit_code == 0, result.output
    assert "Helm Registry Name" in result.stdout.splitlines()[0]
    assert "bitnami" in result.stdout
    params = api.sent("GET", APPS)[-1].url.params
    assert params.get_list("kinds") == ["KIND_ADDON"]
    assert params["pageSize"] == "5"


def test_get_application_verbose_uses_time_format(api: FakeApi) -> None:
    api.add("GET", f"{APPS}/nginx/versions/1.0.0", json={"application": NGINX})

    result = run_cli(
        api, ["--verbose", "--time-format", "iso8601", "get", "application", "nginx", "1.0.0"]
    )

    assert result.exit_code == 0, result.output
    assert "Kind: normal" in result.stdout
    assert "Profiles: [default]" in result.stdout
    assert "Create Time: 2024-05-01T12:30:00Z" in result.stdout
    assert "Update Time: N/A" in result.stdout


def test_get_application_all_versions(api: FakeApi) -> None:
    newer = {**NGINX, "version": "1.1.0"}
    api.add("GET", f"{APPS}/nginx/versions", json={"application": [NGINX, newer]})

    result = run_cli(api, ["get", "application", "nginx"])

    assert result.exit_code == 0, result.output
    assert "1.0.0" in result.stdout
    assert "1.1.0" in result.stdout


def test_get_application_without_versions(api: FakeApi) -> None:
    api.add("GET", f"{APPS}/nginx/versions", json={"application": []})

    result = run_cli(api, ["get", "application", "nginx"])

    assert result.exit_code == 1
    assert "no versions of application nginx found" in result.stderr


def test_get_application_server_error(api: FakeApi) -> None:
    api.add(
        "GET", f"{APPS}/nginx/versions/1.0.0", status=500, json={"message": "catalog offline"}
    )

    result = run_cli(api, ["get", "application", "nginx", "1.0.0"])

    assert result.exit_code == 1
    assert result.stderr == (
        "Error: error getting application nginx:1.0.0:[Internal Server Error]\n"
        '"catalog offline"\n'
    )


def test_create_application(api: FakeApi) -> None:
    api.add("POST", APPS, json={})

    result = run_cli(
        api,
        [
            "create", "application", "nginx", "1.0.0",
            "--chart-name", "nginx",
            "--chart-version", "15.0.0",
            "--chart-registry", "bitnami",
            "--kind", "extension",
        ],
    )

    assert result.exit_code == 0, result.output
    assert "Application 'nginx:1.0.0' created successfully" in result.stdout
    body = api.body("POST", APPS)
    assert body == {
        "name": "nginx",
        "version": "1.0.0",
        "kind": "KIND_EXTENSION",
        "chartName": "nginx",
        "chartVersion": "15.0.0",
        "helmRegistryName": "bitnami",
        "profiles": [],
    }


def test_create_application_requires_chart_flags(api: FakeApi) -> None:
    result = run_cli(api, ["create", "application", "nginx", "1.0.0"])

    assert result.exit_code == 2
    assert "Missing option '--chart-name'" in result.stderr


def test_set_application_merges_fields(api: FakeApi) -> None:
    api.add("GET", f"{APPS}/nginx/versions/1.0.0", json={"application": NGINX})
    api.add("PUT", f"{APPS}/nginx/versions/1.0.0", json={})

    result = run_cli(
        api, ["set", "application", "nginx", "1.0.0", "--chart-version", "15.1.0"]
    )

    assert result.exit_code == 0, result.output
    body = api.body("PUT", f"{APPS}/nginx/versions/1.0.0")
    assert body["chartVersion"] == "15.1.0"
    assert body["displayName"] == "Nginx"
    assert "createTime" not in body


def test_delete_application_all_versions(api: FakeApi) -> None:
    newer = {**NGINX, "version": "1.1.0"}
    api.add("GET", f"{APPS}/nginx/versions", json={"application": [NGINX, newer]})
    api.add("DELETE", f"{APPS}/nginx/versions/1.0.0", json={})
    api.add("DELETE", f"{APPS}/nginx/versions/1.1.0", json={})

    result = run_cli(api, ["delete", "application", "nginx"])

    assert result.exit_code == 0, result.output
    assert "Application 'nginx:1.0.0' deleted successfully" in result.stdout
    assert "Application 'nginx:1.1.0' deleted successfully" in result.stdout


def test_delete_missing_application_version(api: FakeApi) -> None:
    api.add("GET", f"{APPS}/nginx/versions/9.9.9", status=404)

    result = run_cli(api, ["delete", "application", "nginx", "9.9.9"])

    assert result.exit_code == 1
    assert "Error: application nginx:9.9.9 not found" in result.stderr
    assert not api.sent("DELETE", f"{APPS}/nginx/versions/9.9.9")


def test_list_deployment_packages(api: FakeApi) -> None:
    api.add(
        "GET",
        PACKAGES,
        json={
            "deploymentPackages": [
                {
                    "name": "wordpress",
                    "version": "0.1.0",
                    "isDeployed": True,
                    "applicationReferences": [
                        {"name": "wordpress", "version": "1.0.0"},
                        {"name": "mysql", "version": "8.0.0"},
                    ],
                }
            ]
        },
    )

    result = run_cli(api, ["list", "deployment-packages"])

    assert result.exit_code == 0, result.output
    row = result.stdout.splitlines()[1].split()
    assert row[0] == "wordpress"
    assert row[-3:] == ["true", "false", "2"]


def test_get_deployment_package_verbose(api: FakeApi) -> None:
    api.add(
        "GET",
        f"{PACKAGES}/wordpress/versions/0.1.0",
        json={
            "deploymentPackage": {
                "name": "wordpress",
                "version": "0.1.0",
                "applicationReferences": [{"name": "mysql", "version": "8.0.0"}],
                "applicationDependencies": [{"name": "wordpress", "requires": "mysql"}],
            }
        },
    )

    result = run_cli(api, ["-v", "get", "deployment-package", "wordpress", "0.1.0"])

    assert result.exit_code == 0, result.output
    assert "Applications: [mysql:8.0.0]" in result.stdout
    assert "Application Dependencies: [wordpress->mysql]" in result.stdout


def test_delete_deployment_package(api: FakeApi) -> None:
    path = f"{PACKAGES}/wordpress/versions/0.1.0"
    api.add("GET", path, json={"deploymentPackage": {"name": "wordpress", "version": "0.1.0"}})
    api.add("DELETE", path, json={})

    result = run_cli(api, ["delete", "deployment-package", "wordpress", "0.1.0"])

    assert result.exit_code == 0, result.output
    assert "Deployment package 'wordpress:0.1.0' deleted successfully" in result.stdout
