"""Build deployment override values and target clusters from CLI flags.

Flags arrive as flat string mappings, already split on ``=``:

* ``--application-namespace <app>=<namespace>``
* ``--application-set <app>.<prop>[.<prop>...]=<value>``
* ``--application-label <app>.<label>=<value>``
* ``--application-cluster-id <app>=<cluster-id>``

Property paths are folded into a per-application tree of :class:`Node`
and :class:`Leaf` values, which is rendered to plain mappings only when
the request body is built.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from orchcli.core.errors import InvalidFormatError, ValidationError
from orchcli.models.deployment import DeploymentType, OverrideValues, TargetClusters

Scalar = bool | int | float | str

_INT32_MIN = -(2**31)
_INT32_MAX = 2**31 - 1
_INT_RE = re.compile(r"[+-]?[0-9]+")
_FLOAT_RE = re.compile(r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")


def parse_scalar(value: str) -> Scalar:
    """Coerce a flag value: boolean, then 32-bit integer, then float, else string."""
    lowered = value.lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    if _INT_RE.fullmatch(value):
        number = int(value)
        if _INT32_MIN <= number <= _INT32_MAX:
            return number
    if _FLOAT_RE.fullmatch(value):
        return float(value)
    return value


# ---------------------------------------------------------------------------
# Value tree
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Leaf:
    """A scalar at the end of a property path."""

    value: Scalar


@dataclass
class Node:
    """An intermediate mapping keyed by property path segment."""

    children: dict[str, Leaf | Node] = field(default_factory=dict)

    def assign(self, path: str, value: str) -> None:
        """Place ``value`` at the dotted ``path`` below this node.

        The last assignment to a key wins, including when a scalar is
        replaced by a nested mapping or the other way round.
        """
        head, sep, rest = path.partition(".")
        if not sep:
            self.children[head] = Leaf(parse_scalar(value))
            return
        child = self.children.get(head)
        if not isinstance(child, Node):
            child = Node()
            self.children[head] = child
        child.assign(rest, value)

    def to_plain(self) -> dict[str, Any]:
        """Render as nested dicts of scalars, ready for JSON."""
        plain: dict[str, Any] = {}
        for key, child in self.children.items():
            plain[key] = child.to_plain() if isinstance(child, Node) else child.value
        return plain


def _split_app_key(key: str, kind: str) -> tuple[str, str]:
    app, sep, rest = key.partition(".")
    if not sep:
        raise InvalidFormatError(f"{kind} {key} not in format <app-name>.<{kind}-name>")
    return app, rest


# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------


def build_overrides(
    namespaces: Mapping[str, str],
    assignments: Mapping[str, str],
) -> list[OverrideValues]:
    """Fold namespace and property flags into per-application overrides.

    Returns one :class:`OverrideValues` per application, sorted by name.
    Raises :class:`InvalidFormatError` when a property key has no
    ``<app>.`` prefix.
    """
    target_namespaces: dict[str, str | None] = {}
    trees: dict[str, Node] = {}

    for app, namespace in namespaces.items():
        target_namespaces[app] = namespace
        trees[app] = Node()

    for key, value in assignments.items():
        app, prop = _split_app_key(key, "property")
        if app not in trees:
            target_namespaces[app] = None
            trees[app] = Node()
        trees[app].assign(prop, value)

    return [
        OverrideValues(
            app_name=app,
            target_namespace=target_namespaces[app],
            values=trees[app].to_plain(),
        )
        for app in sorted(trees)
    ]


def build_target_labels(assignments: Mapping[str, str]) -> list[TargetClusters]:
    """Group ``<app>.<label>=<value>`` flags into one label set per application."""
    labels: dict[str, dict[str, str]] = {}
    for key, value in assignments.items():
        app, label = _split_app_key(key, "label")
        labels.setdefault(app, {})[label] = value
    return [TargetClusters(app_name=app, labels=labels[app]) for app in sorted(labels)]


def build_target_cluster_ids(cluster_ids: Mapping[str, str]) -> list[TargetClusters]:
    """One manual cluster target per ``<app>=<cluster-id>`` flag."""
    return [
        TargetClusters(app_name=app, cluster_id=cluster_ids[app])
        for app in sorted(cluster_ids)
    ]


def resolve_target_clusters(
    labels: Mapping[str, str],
    cluster_ids: Mapping[str, str],
    *,
    allow_empty: bool,
) -> tuple[list[TargetClusters], DeploymentType | None]:
    """Pick automatic (label) or manual (cluster id) targeting.

    A deployment cannot be both automatic and manual, so supplying both
    flag kinds is an error.  With neither, an empty list is returned when
    ``allow_empty`` is set.
    """
    by_label = build_target_labels(labels)
    by_id = build_target_cluster_ids(cluster_ids)

    if by_label:
        if by_id:
            raise ValidationError(
                "cannot specify both application-label and application-cluster-id flags"
            )
        return by_label, DeploymentType.AUTO_SCALING
    if by_id:
        return by_id, DeploymentType.TARGETED
    if not allow_empty:
        raise ValidationError(
            "no target clusters specified, use either --application-label or "
            "--application-cluster-id"
        )
    return [], None


def validate_application_names(
    names: Iterable[str],
    valid_names: Iterable[str],
    flag_name: str,
) -> None:
    """Reject application names that are not part of the deployment package."""
    valid = set(valid_names)
    invalid: list[str] = []
    for name in names:
        if name not in valid and name not in invalid:
            invalid.append(name)
    if invalid:
        raise ValidationError(
            f"invalid application name(s) in --{flag_name}: {_bracketed(invalid)}. "
            f"Valid names: {_bracketed(sorted(valid))}"
        )


def _bracketed(items: Iterable[str]) -> str:
    return "[" + " ".join(items) + "]"
