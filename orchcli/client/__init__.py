"""HTTP access to the platform REST services."""

from orchcli.client.http import ApiResponse, OrchClient
from orchcli.client.services import (
    CatalogService,
    ClusterService,
    DeploymentService,
    InfraService,
    RpsService,
    TenancyService,
)

__all__ = [
    "ApiResponse",
    "CatalogService",
    "ClusterService",
    "DeploymentService",
    "InfraService",
    "OrchClient",
    "RpsService",
    "TenancyService",
]
