"""Pydantic records for the platform REST services."""

from orchcli.models.base import ApiModel
from orchcli.models.catalog import (
    Application,
    ApplicationKind,
    ApplicationReference,
    DeploymentPackage,
    ParameterTemplate,
    Profile,
)
from orchcli.models.cluster import ClusterDetailInfo, ClusterInfo, ClusterSpec, NodeSpec
from orchcli.models.deployment import (
    Deployment,
    DeploymentType,
    OverrideValues,
    TargetClusters,
)
from orchcli.models.infra import Host, Instance, LocalAccount, MetadataItem, Region, Site
from orchcli.models.rps import AmtDomain
from orchcli.models.tenancy import Tenant

__all__ = [
    "ApiModel",
    # Catalog
    "Application",
    "ApplicationKind",
    "ApplicationReference",
    "DeploymentPackage",
    "ParameterTemplate",
    "Profile",
    # Cluster
    "ClusterDetailInfo",
    "ClusterInfo",
    "ClusterSpec",
    "NodeSpec",
    # Deployment
    "Deployment",
    "DeploymentType",
    "OverrideValues",
    "TargetClusters",
    # Infra
    "Host",
    "Instance",
    "LocalAccount",
    "MetadataItem",
    "Region",
    "Site",
    # RPS
    "AmtDomain",
    # Tenancy
    "Tenant",
]
