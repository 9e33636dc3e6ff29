"""Tests for the persistent configuration file."""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from orchcli.core.errors import ValidationError
from orchcli.utils.config import (
    DEFAULT_API_ENDPOINT,
    CLIConfig,
    coerce_value,
    config_from_mapping,
    feature_flags,
    load_raw_config,
    render_config,
    save_raw_config,
)
from orchcli.utils.state import resolve_config_path


def test_resolve_config_path_prefers_explicit_path(tmp_path: Path, config_file: Path) -> None:
    explicit = tmp_path / "other.yaml"
    assert resolve_config_path(explicit) == explicit
    assert resolve_config_path() == config_file


def test_missing_file_loads_empty(config_file: Path) -> None:
    assert not config_file.exists()
    assert load_raw_config() == {}


def test_save_then_load(config_file: Path) -> None:
    path = save_raw_config({"project": "demo", "verbose": True})
    assert path == config_file
    assert yaml.safe_load(config_file.read_text()) == {"project": "demo", "verbose": True}
    assert load_raw_config() == {"project": "demo", "verbose": True}


def test_non_mapping_file_is_rejected(config_file: Path) -> None:
    config_file.parent.mkdir(parents=True)
    config_file.write_text("- just\n- a list\n")
    with pytest.raises(ValidationError, match="expected a mapping"):
        load_raw_config()


def test_unparsable_file_is_rejected(config_file: Path) -> None:
    config_file.parent.mkdir(parents=True)
    config_file.write_text("project: [unclosed\n")
    with pytest.raises(ValidationError, match="invalid configuration file"):
        load_raw_config()


def test_coerce_value() -> None:
    assert coerce_value("verbose", "yes") is True
    assert coerce_value("noauth", "False") is False
    assert coerce_value("project", "demo") == "demo"
    assert coerce_value("orchestrator.features.cluster-orchestration", "off") is False


@pytest.mark.parametrize(
    ("key", "raw", "message"),
    [
        ("colour", "blue", "unknown configuration key: colour"),
        ("verbose", "maybe", "invalid boolean value for verbose"),
        ("time-format", "rfc822", "invalid time-format rfc822"),
    ],
)
def test_coerce_value_errors(key: str, raw: str, message: str) -> None:
    with pytest.raises(ValidationError, match=message):
        coerce_value(key, raw)


def test_config_from_mapping_defaults() -> None:
    config = config_from_mapping({})
    assert config == CLIConfig()
    assert config.api_endpoint == DEFAULT_API_ENDPOINT
    assert config.time_format == "human"


def test_features_default_to_enabled() -> None:
    config = config_from_mapping(
        {
            "orchestrator.features.cluster-orchestration": False,
            "unrelated": "ignored",
        }
    )
    assert config.features == {"orchestrator.features.cluster-orchestration": False}
    assert not config.feature_enabled("orchestrator.features.cluster-orchestration")
    assert config.feature_enabled("orchestrator.features.application-orchestration")


def test_render_config() -> None:
    payload = {"project": "demo", "api-endpoint": "https://api.example.com/"}
    assert render_config(payload, "text") == (
        "api-endpoint: https://api.example.com/\nproject: demo"
    )
    assert yaml.safe_load(render_config(payload, "yaml")) == payload


def test_nested_feature_flags() -> None:
    payload = {
        "orchestrator": {
            "features": {
                "application-orchestration": False,
                "cluster-orchestration": "true",
            }
        }
    }
    assert feature_flags(payload) == {
        "orchestrator.features.application-orchestration": False,
        "orchestrator.features.cluster-orchestration": True,
    }


def test_dotted_feature_flag_wins_over_nested() -> None:
    payload = {
        "orchestrator": {"features": {"cluster-orchestration": True}},
        "orchestrator.features.cluster-orchestration": False,
    }
    config = config_from_mapping(payload)
    assert not config.feature_enabled("orchestrator.features.cluster-orchestration")


@pytest.mark.parametrize(
    ("value", "expected"),
    [("false", False), ("Off", False), ("yes", True), (0, False), (True, True)],
)
def test_quoted_booleans_are_parsed(value: object, expected: bool) -> None:
    config = config_from_mapping(
        {
            "verbose": value,
            "noauth": value,
            "orchestrator.features.application-orchestration": value,
        }
    )
    assert config.verbose is expected
    assert config.noauth is expected
    assert config.feature_enabled("orchestrator.features.application-orchestration") is expected


def test_unreadable_boolean_is_rejected() -> None:
    with pytest.raises(ValidationError, match="invalid boolean value for debug-headers"):
        config_from_mapping({"debug-headers": "sometimes"})


def test_non_mapping_features_are_rejected() -> None:
    with pytest.raises(ValidationError, match="must be a mapping"):
        feature_flags({"orchestrator": {"features": ["application-orchestration"]}})
