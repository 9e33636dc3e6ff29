"""Deployment service records."""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum
from typing import Any

from pydantic import Field

from orchcli.models.base import ApiModel


class DeploymentType(StrEnum):
    """How target clusters are selected for a deployment."""

    AUTO_SCALING = "auto-scaling"
    TARGETED = "targeted"


class OverrideValues(ApiModel):
    """Per-application value overrides and target namespace."""

    app_name: str
    target_namespace: str | None = None
    values: dict[str, Any] = Field(default_factory=dict)


class TargetClusters(ApiModel):
    """Per-application cluster selection: by labels or by cluster id."""

    app_name: str | None = None
    labels: dict[str, str] | None = None
    cluster_id: str | None = None


class DeploymentStatus(ApiModel):
    state: str | None = None
    message: str | None = None


class Deployment(ApiModel):
    """A deployment of a deployment package to edge clusters."""

    deploy_id: str | None = None
    name: str | None = None
    display_name: str | None = None
    app_name: str = ""
    app_version: str = ""
    profile_name: str | None = None
    override_values: list[OverrideValues] | None = None
    target_clusters: list[TargetClusters] | None = None
    deployment_type: str | None = None
    status: DeploymentStatus | None = None
    create_time: datetime | None = None


class CreateDeploymentResponse(ApiModel):
    deployment_id: str = ""


class ListDeploymentsResponse(ApiModel):
    deployments: list[Deployment] = Field(default_factory=list)
    total_elements: int = 0


class GetDeploymentResponse(ApiModel):
    deployment: Deployment
