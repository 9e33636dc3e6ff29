"""Tests for override value trees and target cluster builders."""

from __future__ import annotations

import pytest

from orchcli.core.errors import InvalidFormatError, ValidationError
from orchcli.core.overrides import (
    Node,
    build_overrides,
    build_target_cluster_ids,
    build_target_labels,
    parse_scalar,
    resolve_target_clusters,
    validate_application_names,
)
from orchcli.models.deployment import DeploymentType


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("true", True),
        ("FALSE", False),
        ("42", 42),
        ("-7", -7),
        ("2147483647", 2147483647),
        ("1.5", 1.5),
        ("1e3", 1000.0),
        ("blue", "blue"),
        ("", ""),
        ("yes", "yes"),
        ("1.2.3", "1.2.3"),
        ("123", 123),
        ("123.5", 123.5),
        ("abc", "abc"),
        ("5\n", "5\n"),
        ("1.5\n", "1.5\n"),
        (" 7", " 7"),
    ],
)
def test_parse_scalar(raw: str, expected: object) -> None:
    value = parse_scalar(raw)
    assert value == expected
    assert type(value) is type(expected)


def test_parse_scalar_large_integer_becomes_float() -> None:
    assert parse_scalar("2147483648") == 2147483648.0
    assert isinstance(parse_scalar("2147483648"), float)


def test_parse_scalar_keeps_inf_and_nan_as_strings() -> None:
    assert parse_scalar("inf") == "inf"
    assert parse_scalar("nan") == "nan"


def test_node_nests_dotted_paths() -> None:
    root = Node()
    root.assign("service.type", "NodePort")
    root.assign("service.port", "8080")
    root.assign("replicas", "2")
    assert root.to_plain() == {"service": {"type": "NodePort", "port": 8080}, "replicas": 2}


def test_node_last_assignment_wins_across_shapes() -> None:
    root = Node()
    root.assign("a", "1")
    root.assign("a.b", "2")
    assert root.to_plain() == {"a": {"b": 2}}

    root.assign("a", "flat")
    assert root.to_plain() == {"a": "flat"}


def test_build_overrides_merges_namespaces_and_values() -> None:
    overrides = build_overrides(
        {"wordpress": "apps", "mysql": "db"},
        {"wordpress.service.type": "NodePort", "redis.enabled": "true"},
    )

    assert [o.app_name for o in overrides] == ["mysql", "redis", "wordpress"]
    by_app = {o.app_name: o for o in overrides}
    assert by_app["mysql"].target_namespace == "db"
    assert by_app["mysql"].values == {}
    assert by_app["redis"].target_namespace is None
    assert by_app["redis"].values == {"enabled": True}
    assert by_app["wordpress"].values == {"service": {"type": "NodePort"}}


@pytest.mark.parametrize(
    ("namespaces", "assignments", "app", "namespace", "values"),
    [
        (
            {"foo": "ns1"},
            {
                "foo.property.string": "string1",
                "foo.property.int": "123",
                "foo.property.bool": "true",
            },
            "foo",
            "ns1",
            {"property": {"string": "string1", "int": 123, "bool": True}},
        ),
        ({}, {"bar.a.b.c": "42"}, "bar", None, {"a": {"b": {"c": 42}}}),
        ({}, {"bar.ratio": "123.5"}, "bar", None, {"ratio": 123.5}),
    ],
)
def test_build_overrides_single_app(
    namespaces: dict[str, str],
    assignments: dict[str, str],
    app: str,
    namespace: str | None,
    values: dict[str, object],
) -> None:
    (override,) = build_overrides(namespaces, assignments)

    assert override.app_name == app
    assert override.target_namespace == namespace
    assert override.values == values


def test_build_overrides_is_repeatable() -> None:
    namespaces = {"web": "apps", "db": "data"}
    assignments = {
        "web.service.port": "8080",
        "web.service.type": "NodePort",
        "db.auth.enabled": "false",
        "cache.size.max": "1.5",
    }

    first = build_overrides(namespaces, assignments)
    second = build_overrides(namespaces, assignments)

    assert [o.model_dump() for o in first] == [o.model_dump() for o in second]


def test_build_overrides_empty() -> None:
    assert build_overrides({}, {}) == []


def test_build_overrides_rejects_key_without_app() -> None:
    with pytest.raises(InvalidFormatError, match="property replicas not in format"):
        build_overrides({}, {"replicas": "3"})


def test_build_target_labels_groups_by_app() -> None:
    targets = build_target_labels({"web.color": "blue", "web.zone": "a", "db.color": "red"})
    assert [(t.app_name, t.labels) for t in targets] == [
        ("db", {"color": "red"}),
        ("web", {"color": "blue", "zone": "a"}),
    ]
    assert all(t.cluster_id is None for t in targets)


def test_build_target_labels_rejects_bad_key() -> None:
    with pytest.raises(InvalidFormatError, match="label color not in format"):
        build_target_labels({"color": "blue"})


def test_build_target_cluster_ids() -> None:
    targets = build_target_cluster_ids({"web": "cluster-1"})
    assert targets[0].app_name == "web"
    assert targets[0].cluster_id == "cluster-1"
    assert targets[0].labels is None


def test_resolve_target_clusters_picks_deployment_type() -> None:
    _, auto = resolve_target_clusters({"web.color": "blue"}, {}, allow_empty=False)
    _, targeted = resolve_target_clusters({}, {"web": "c-1"}, allow_empty=False)
    assert auto is DeploymentType.AUTO_SCALING
    assert targeted is DeploymentType.TARGETED


def test_resolve_target_clusters_rejects_both_kinds() -> None:
    with pytest.raises(ValidationError, match="cannot specify both"):
        resolve_target_clusters({"web.color": "blue"}, {"web": "c-1"}, allow_empty=True)


def test_resolve_target_clusters_empty() -> None:
    assert resolve_target_clusters({}, {}, allow_empty=True) == ([], None)
    with pytest.raises(ValidationError, match="no target clusters specified"):
        resolve_target_clusters({}, {}, allow_empty=False)


def test_validate_application_names() -> None:
    validate_application_names(["web"], {"web", "db"}, "application-set")
    with pytest.raises(ValidationError) as excinfo:
        validate_application_names(["cache", "web", "cache"], {"web", "db"}, "application-set")
    assert str(excinfo.value) == (
        "invalid application name(s) in --application-set: [cache]. Valid names: [db web]"
    )
