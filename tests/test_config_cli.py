"""Tests for the config commands and global option resolution."""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from orchcli import __version__
from tests.helpers import FakeApi, run_cli


def test_config_set_get_unset(config_file: Path) -> None:
    result = run_cli(None, ["config", "set", "project", "edge"], project=None)
    assert result.exit_code == 0, result.output
    assert result.stdout.strip() == f"Set project in {config_file}"
    assert yaml.safe_load(config_file.read_text()) == {"project": "edge"}

    result = run_cli(None, ["config", "get", "project"], project=None)
    assert result.stdout == "edge\n"

    result = run_cli(None, ["config", "unset", "project"], project=None)
    assert result.exit_code == 0, result.output
    assert yaml.safe_load(config_file.read_text()) == {}

    result = run_cli(None, ["config", "get", "project"], project=None)
    assert result.exit_code == 1
    assert "configuration key project is not set" in result.stderr


def test_config_set_coerces_booleans(config_file: Path) -> None:
    result = run_cli(None, ["config", "set", "verbose", "true"], project=None)

    assert result.exit_code == 0, result.output
    assert yaml.safe_load(config_file.read_text()) == {"verbose": True}


@pytest.mark.parametrize(
    ("key", "value", "message"),
    [
        ("colour", "blue", "unknown configuration key: colour"),
        ("noauth", "perhaps", "invalid boolean value for noauth"),
    ],
)
def test_config_set_rejects_bad_input(key: str, value: str, message: str) -> None:
    result = run_cli(None, ["config", "set", key, value], project=None)

    assert result.exit_code == 1
    assert message in result.stderr


def test_config_show_text(config_file: Path) -> None:
    config_file.parent.mkdir(parents=True)
    config_file.write_text("project: edge\napi-endpoint: https://api.example.com/\n")

    result = run_cli(None, ["config", "show", "--format", "text"], project=None)

    assert result.exit_code == 0, result.output
    assert result.stdout == "api-endpoint: https://api.example.com/\nproject: edge\n"


def test_explicit_config_path(tmp_path: Path) -> None:
    other = tmp_path / "alt.yaml"

    result = run_cli(
        None, ["--config", str(other), "config", "set", "project", "alt"], project=None
    )

    assert result.exit_code == 0, result.output
    assert yaml.safe_load(other.read_text()) == {"project": "alt"}


def test_project_from_config_file(config_file: Path) -> None:
    config_file.parent.mkdir(parents=True)
    config_file.write_text("project: demo\n")
    api = FakeApi()
    api.add("GET", "/v1/projects/demo/appdeployment/deployments", json={"deployments": []})

    result = run_cli(api, ["list", "deployments"], project=None)

    assert result.exit_code == 0, result.output
    assert api.sent("GET", "/v1/projects/demo/appdeployment/deployments")


def test_flag_overrides_environment_and_file(
    config_file: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    config_file.parent.mkdir(parents=True)
    config_file.write_text("api-endpoint: https://file.example.com/\n")
    monkeypatch.setenv("ORCH_API_ENDPOINT", "https://env.example.com/")
    api = FakeApi()

    result = run_cli(api, ["get", "project", "demo"], project=None)
    assert api.requests[-1].url.host == "env.example.com"

    result = run_cli(
        api, ["--api-endpoint", "https://flag.example.com/", "get", "project", "demo"],
        project=None,
    )
    assert result.exit_code == 0, result.output
    assert api.requests[-1].url.host == "flag.example.com"


def test_noauth_flag_drops_token() -> None:
    api = FakeApi()

    result = run_cli(api, ["--noauth", "get", "project", "demo"], project=None)

    assert result.exit_code == 0, result.output
    assert "Authorization" not in api.requests[-1].headers


def test_list_features(config_file: Path) -> None:
    config_file.parent.mkdir(parents=True)
    config_file.write_text(
        "orchestrator.features.cluster-orchestration: false\n"
        "orchestrator.features.application-orchestration: true\n"
    )

    result = run_cli(None, ["list", "features"], project=None)

    assert result.exit_code == 0, result.output
    assert result.stdout == (
        "Edge Orchestrator Features:\n"
        "  application-orchestration: enabled\n"
        "  cluster-orchestration: disabled\n"
    )


def test_list_features_empty() -> None:
    result = run_cli(None, ["list", "features"], project=None)

    assert result.stdout == "No features configured\n"


def test_version() -> None:
    result = run_cli(None, ["version"], project=None)

    assert result.exit_code == 0
    assert result.stdout == f"Orch CLI (orch-cli) version {__version__}\n"


def test_help_lists_verbs_first() -> None:
    result = run_cli(None, ["--help"], project=None)

    assert result.exit_code == 0
    section = result.stdout.split("Commands:")[1]
    names = [line.split()[0] for line in section.splitlines() if line.strip()]
    assert names[:6] == ["list", "get", "create", "set", "delete", "upgrade"]
    assert {"config", "version"} <= set(names)


def test_unparsable_config_file_is_reported(config_file: Path) -> None:
    config_file.parent.mkdir(parents=True)
    config_file.write_text("project: [unclosed\n")

    result = run_cli(None, ["config", "show"], project=None)

    assert result.exit_code == 1
    assert result.stderr.startswith(f"Error: invalid configuration file {config_file}")


@pytest.mark.parametrize(
    "content",
    [
        "orchestrator:\n  features:\n    application-orchestration: false\n",
        'orchestrator.features.application-orchestration: "false"\n',
    ],
)
def test_disabled_feature_blocks_command(config_file: Path, content: str) -> None:
    config_file.parent.mkdir(parents=True)
    config_file.write_text(content)
    api = FakeApi()

    result = run_cli(api, ["list", "deployments"])

    assert result.exit_code == 1
    assert "command disabled: feature orchestrator.features.application-orchestration" in (
        result.stderr
    )
    assert api.requests == []


def test_list_features_nested(config_file: Path) -> None:
    config_file.parent.mkdir(parents=True)
    config_file.write_text(
        "orchestrator:\n"
        "  features:\n"
        "    cluster-orchestration: false\n"
        "    application-orchestration: true\n"
    )

    result = run_cli(None, ["list", "features"], project=None)

    assert result.exit_code == 0, result.output
    assert result.stdout == (
        "Edge Orchestrator Features:\n"
        "  application-orchestration: enabled\n"
        "  cluster-orchestration: disabled\n"
    )
