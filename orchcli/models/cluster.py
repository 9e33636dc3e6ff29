"""Cluster orchestration records."""

from __future__ import annotations

from enum import StrEnum

from pydantic import Field

from orchcli.models.base import ApiModel


class StatusIndicator(StrEnum):
    UNSPECIFIED = "STATUS_INDICATION_UNSPECIFIED"
    ERROR = "STATUS_INDICATION_ERROR"
    IN_PROGRESS = "STATUS_INDICATION_IN_PROGRESS"
    IDLE = "STATUS_INDICATION_IDLE"


class GenericStatus(ApiModel):
    indicator: str | None = None
    message: str | None = None
    timestamp: int | None = None

    @property
    def idle(self) -> bool:
        return self.indicator == StatusIndicator.IDLE


class NodeSpec(ApiModel):
    id: str
    role: str


class NodeInfo(ApiModel):
    id: str | None = None
    role: str | None = None


class ClusterInfo(ApiModel):
    """Summary of a cluster as returned by the list endpoint."""

    name: str | None = None
    kubernetes_version: str | None = None
    lifecycle_phase: GenericStatus | None = None
    provider_status: GenericStatus | None = None
    control_plane_ready: GenericStatus | None = None
    infrastructure_ready: GenericStatus | None = None
    node_health: GenericStatus | None = None
    node_quantity: int | None = None
    labels: dict[str, str] | None = None

    def _conditions(self) -> tuple[GenericStatus | None, ...]:
        # Order matters for status_message: the first non-idle condition wins.
        return (
            self.provider_status,
            self.control_plane_ready,
            self.infrastructure_ready,
            self.node_health,
            self.lifecycle_phase,
        )

    def is_ready(self) -> bool:
        return all(c is not None and c.idle for c in self._conditions())

    def status_message(self) -> str:
        for condition in self._conditions():
            if condition is None:
                return "<unknown>"
            if not condition.idle:
                return condition.message or "<unknown>"
        return "active"


class ClusterDetailInfo(ClusterInfo):
    template: str | None = None
    nodes: list[NodeInfo] = Field(default_factory=list)


class ClusterSpec(ApiModel):
    """Request body for creating a cluster."""

    name: str
    nodes: list[NodeSpec] = Field(default_factory=list)
    template: str | None = None
    labels: dict[str, str] = Field(default_factory=dict)


class ListClustersResponse(ApiModel):
    clusters: list[ClusterInfo] = Field(default_factory=list)
    total_elements: int = 0
