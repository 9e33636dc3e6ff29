"""Per-service REST interfaces and their httpx-backed implementations.

Each service method performs exactly one request and returns the raw
:class:`ApiResponse`; command handlers classify it.  The ``Protocol``
types let tests and callers substitute any object with the same shape.
"""

from __future__ import annotations

import logging
from typing import Any, Protocol
from urllib.parse import quote

from orchcli.client.http import ApiResponse, OrchClient
from orchcli.core.errors import ValidationError

logger = logging.getLogger(__name__)

Payload = dict[str, Any]

# Region path segment for sites addressed by id or listed across regions.
SITE_LOOKUP_REGION = "region"


def _seg(value: str) -> str:
    """Quote one path segment."""
    return quote(value, safe="")


# ---------------------------------------------------------------------------
# Interfaces
# ---------------------------------------------------------------------------


class CatalogService(Protocol):
    def list_applications(
        self,
        project: str,
        *,
        order_by: str | None = None,
        filter: str | None = None,
        page_size: int | None = None,
        offset: int | None = None,
        kinds: list[str] | None = None,
    ) -> ApiResponse: ...

    def get_application(self, project: str, name: str, version: str) -> ApiResponse: ...

    def get_application_versions(self, project: str, name: str) -> ApiResponse: ...

    def create_application(self, project: str, application: Payload) -> ApiResponse: ...

    def update_application(
        self, project: str, name: str, version: str, application: Payload
    ) -> ApiResponse: ...

    def delete_application(self, project: str, name: str, version: str) -> ApiResponse: ...

    def list_deployment_packages(
        self,
        project: str,
        *,
        order_by: str | None = None,
        filter: str | None = None,
        page_size: int | None = None,
        offset: int | None = None,
    ) -> ApiResponse: ...

    def get_deployment_package(self, project: str, name: str, version: str) -> ApiResponse: ...

    def get_deployment_package_versions(self, project: str, name: str) -> ApiResponse: ...

    def delete_deployment_package(self, project: str, name: str, version: str) -> ApiResponse: ...


class DeploymentService(Protocol):
    def list_deployments(
        self,
        project: str,
        *,
        order_by: str | None = None,
        filter: str | None = None,
        page_size: int | None = None,
        offset: int | None = None,
    ) -> ApiResponse: ...

    def get_deployment(self, project: str, deployment_id: str) -> ApiResponse: ...

    def create_deployment(self, project: str, deployment: Payload) -> ApiResponse: ...

    def update_deployment(
        self, project: str, deployment_id: str, deployment: Payload
    ) -> ApiResponse: ...

    def delete_deployment(self, project: str, deployment_id: str) -> ApiResponse: ...


class InfraService(Protocol):
    def list_regions(self, project: str, *, filter: str | None = None) -> ApiResponse: ...

    def get_region(self, project: str, region_id: str) -> ApiResponse: ...

    def create_region(self, project: str, region: Payload) -> ApiResponse: ...

    def delete_region(self, project: str, region_id: str) -> ApiResponse: ...

    def list_sites(
        self,
        project: str,
        region_id: str,
        *,
        filter: str | None = None,
        offset: int | None = None,
    ) -> ApiResponse: ...

    def get_site(self, project: str, site_id: str) -> ApiResponse: ...

    def create_site(self, project: str, region_id: str, site: Payload) -> ApiResponse: ...

    def delete_site(self, project: str, site_id: str) -> ApiResponse: ...

    def list_hosts(
        self,
        project: str,
        *,
        filter: str | None = None,
        page_size: int | None = None,
        offset: int | None = None,
    ) -> ApiResponse: ...

    def get_host(self, project: str, host_id: str) -> ApiResponse: ...

    def patch_host(self, project: str, host_id: str, patch: Payload) -> ApiResponse: ...

    def delete_host(self, project: str, host_id: str) -> ApiResponse: ...

    def get_instance(self, project: str, instance_id: str) -> ApiResponse: ...

    def patch_instance(self, project: str, instance_id: str, patch: Payload) -> ApiResponse: ...

    def delete_instance(self, project: str, instance_id: str) -> ApiResponse: ...

    def list_local_accounts(self, project: str) -> ApiResponse: ...

    def create_local_account(self, project: str, account: Payload) -> ApiResponse: ...

    def delete_local_account(self, project: str, account_id: str) -> ApiResponse: ...


class ClusterService(Protocol):
    def list_clusters(
        self, project: str, *, page_size: int, offset: int, filter: str | None = None
    ) -> ApiResponse: ...

    def get_cluster(self, project: str, name: str) -> ApiResponse: ...

    def create_cluster(self, project: str, cluster: Payload) -> ApiResponse: ...

    def delete_cluster(self, project: str, name: str) -> ApiResponse: ...

    def delete_cluster_node(
        self, project: str, name: str, node_id: str, *, force: bool = False
    ) -> ApiResponse: ...


class TenancyService(Protocol):
    def list_tenants(self, kind: str) -> ApiResponse: ...

    def get_tenant(self, kind: str, name: str) -> ApiResponse: ...

    def create_tenant(self, kind: str, name: str, description: str) -> ApiResponse: ...

    def delete_tenant(self, kind: str, name: str) -> ApiResponse: ...


class RpsService(Protocol):
    def list_domains(self, project: str) -> ApiResponse: ...

    def get_domain(self, project: str, name: str) -> ApiResponse: ...

    def delete_domain(self, project: str, name: str) -> ApiResponse: ...


# ---------------------------------------------------------------------------
# httpx implementations
# ---------------------------------------------------------------------------


class HttpCatalogService:
    """Application catalog, API v3."""

    def __init__(self, client: OrchClient) -> None:
        self._client = client

    def _apps(self, project: str) -> str:
        return f"/v3/projects/{_seg(project)}/catalog/applications"

    def _packages(self, project: str) -> str:
        return f"/v3/projects/{_seg(project)}/catalog/deployment_packages"

    def list_applications(
        self,
        project: str,
        *,
        order_by: str | None = None,
        filter: str | None = None,
        page_size: int | None = None,
        offset: int | None = None,
        kinds: list[str] | None = None,
    ) -> ApiResponse:
        return self._client.get(
            self._apps(project),
            orderBy=order_by,
            filter=filter,
            pageSize=page_size,
            offset=offset,
            kinds=kinds,
        )

    def get_application(self, project: str, name: str, version: str) -> ApiResponse:
        return self._client.get(f"{self._apps(project)}/{_seg(name)}/versions/{_seg(version)}")

    def get_application_versions(self, project: str, name: str) -> ApiResponse:
        return self._client.get(f"{self._apps(project)}/{_seg(name)}/versions")

    def create_application(self, project: str, application: Payload) -> ApiResponse:
        return self._client.post(self._apps(project), application)

    def update_application(
        self, project: str, name: str, version: str, application: Payload
    ) -> ApiResponse:
        return self._client.put(
            f"{self._apps(project)}/{_seg(name)}/versions/{_seg(version)}", application
        )

    def delete_application(self, project: str, name: str, version: str) -> ApiResponse:
        return self._client.delete(f"{self._apps(project)}/{_seg(name)}/versions/{_seg(version)}")

    def list_deployment_packages(
        self,
        project: str,
        *,
        order_by: str | None = None,
        filter: str | None = None,
        page_size: int | None = None,
        offset: int | None = None,
    ) -> ApiResponse:
        return self._client.get(
            self._packages(project),
            orderBy=order_by,
            filter=filter,
            pageSize=page_size,
            offset=offset,
        )

    def get_deployment_package(self, project: str, name: str, version: str) -> ApiResponse:
        return self._client.get(
            f"{self._packages(project)}/{_seg(name)}/versions/{_seg(version)}"
        )

    def get_deployment_package_versions(self, project: str, name: str) -> ApiResponse:
        return self._client.get(f"{self._packages(project)}/{_seg(name)}/versions")

    def delete_deployment_package(self, project: str, name: str, version: str) -> ApiResponse:
        return self._client.delete(
            f"{self._packages(project)}/{_seg(name)}/versions/{_seg(version)}"
        )


class HttpDeploymentService:
    """Application deployment manager."""

    def __init__(self, client: OrchClient) -> None:
        self._client = client

    def _base(self, project: str) -> str:
        return f"/v1/projects/{_seg(project)}/appdeployment/deployments"

    def list_deployments(
        self,
        project: str,
        *,
        order_by: str | None = None,
        filter: str | None = None,
        page_size: int | None = None,
        offset: int | None = None,
    ) -> ApiResponse:
        return self._client.get(
            self._base(project),
            orderBy=order_by,
            filter=filter,
            pageSize=page_size,
            offset=offset,
        )

    def get_deployment(self, project: str, deployment_id: str) -> ApiResponse:
        return self._client.get(f"{self._base(project)}/{_seg(deployment_id)}")

    def create_deployment(self, project: str, deployment: Payload) -> ApiResponse:
        return self._client.post(self._base(project), deployment)

    def update_deployment(
        self, project: str, deployment_id: str, deployment: Payload
    ) -> ApiResponse:
        return self._client.put(f"{self._base(project)}/{_seg(deployment_id)}", deployment)

    def delete_deployment(self, project: str, deployment_id: str) -> ApiResponse:
        return self._client.delete(f"{self._base(project)}/{_seg(deployment_id)}")


class HttpInfraService:
    """Infrastructure manager: regions, sites, hosts and SSH keys."""

    def __init__(self, client: OrchClient) -> None:
        self._client = client

    def _regions(self, project: str) -> str:
        return f"/v1/projects/{_seg(project)}/regions"

    def _hosts(self, project: str) -> str:
        return f"/v1/projects/{_seg(project)}/compute/hosts"

    def _instances(self, project: str) -> str:
        return f"/v1/projects/{_seg(project)}/compute/instances"

    def _accounts(self, project: str) -> str:
        return f"/v1/projects/{_seg(project)}/localAccounts"

    def _site(self, project: str, site_id: str) -> str:
        return f"{self._regions(project)}/{SITE_LOOKUP_REGION}/sites/{_seg(site_id)}"

    def list_regions(self, project: str, *, filter: str | None = None) -> ApiResponse:
        return self._client.get(self._regions(project), showTotalSites=True, filter=filter)

    def get_region(self, project: str, region_id: str) -> ApiResponse:
        return self._client.get(f"{self._regions(project)}/{_seg(region_id)}")

    def create_region(self, project: str, region: Payload) -> ApiResponse:
        return self._client.post(self._regions(project), region)

    def delete_region(self, project: str, region_id: str) -> ApiResponse:
        return self._client.delete(f"{self._regions(project)}/{_seg(region_id)}")

    def list_sites(
        self,
        project: str,
        region_id: str,
        *,
        filter: str | None = None,
        offset: int | None = None,
    ) -> ApiResponse:
        return self._client.get(
            f"{self._regions(project)}/{_seg(region_id)}/sites", filter=filter, offset=offset
        )

    def get_site(self, project: str, site_id: str) -> ApiResponse:
        return self._client.get(self._site(project, site_id))

    def create_site(self, project: str, region_id: str, site: Payload) -> ApiResponse:
        return self._client.post(f"{self._regions(project)}/{_seg(region_id)}/sites", site)

    def delete_site(self, project: str, site_id: str) -> ApiResponse:
        return self._client.delete(self._site(project, site_id))

    def list_hosts(
        self,
        project: str,
        *,
        filter: str | None = None,
        page_size: int | None = None,
        offset: int | None = None,
    ) -> ApiResponse:
        return self._client.get(
            self._hosts(project), filter=filter, pageSize=page_size, offset=offset
        )

    def get_host(self, project: str, host_id: str) -> ApiResponse:
        return self._client.get(f"{self._hosts(project)}/{_seg(host_id)}")

    def patch_host(self, project: str, host_id: str, patch: Payload) -> ApiResponse:
        return self._client.patch(f"{self._hosts(project)}/{_seg(host_id)}", patch)

    def delete_host(self, project: str, host_id: str) -> ApiResponse:
        return self._client.delete(f"{self._hosts(project)}/{_seg(host_id)}")

    def get_instance(self, project: str, instance_id: str) -> ApiResponse:
        return self._client.get(f"{self._instances(project)}/{_seg(instance_id)}")

    def patch_instance(self, project: str, instance_id: str, patch: Payload) -> ApiResponse:
        return self._client.patch(f"{self._instances(project)}/{_seg(instance_id)}", patch)

    def delete_instance(self, project: str, instance_id: str) -> ApiResponse:
        return self._client.delete(f"{self._instances(project)}/{_seg(instance_id)}")

    def list_local_accounts(self, project: str) -> ApiResponse:
        return self._client.get(self._accounts(project))

    def create_local_account(self, project: str, account: Payload) -> ApiResponse:
        return self._client.post(self._accounts(project), account)

    def delete_local_account(self, project: str, account_id: str) -> ApiResponse:
        return self._client.delete(f"{self._accounts(project)}/{_seg(account_id)}")


class HttpClusterService:
    """Cluster orchestrator, API v2."""

    def __init__(self, client: OrchClient) -> None:
        self._client = client

    def _base(self, project: str) -> str:
        return f"/v2/projects/{_seg(project)}/clusters"

    def list_clusters(
        self, project: str, *, page_size: int, offset: int, filter: str | None = None
    ) -> ApiResponse:
        return self._client.get(
            self._base(project), pageSize=page_size, offset=offset, filter=filter
        )

    def get_cluster(self, project: str, name: str) -> ApiResponse:
        return self._client.get(f"{self._base(project)}/{_seg(name)}")

    def create_cluster(self, project: str, cluster: Payload) -> ApiResponse:
        return self._client.post(self._base(project), cluster)

    def delete_cluster(self, project: str, name: str) -> ApiResponse:
        return self._client.delete(f"{self._base(project)}/{_seg(name)}")

    def delete_cluster_node(
        self, project: str, name: str, node_id: str, *, force: bool = False
    ) -> ApiResponse:
        return self._client.delete(
            f"{self._base(project)}/{_seg(name)}/nodes/{_seg(node_id)}",
            force=str(force).lower(),
        )


class HttpTenancyService:
    """Tenancy API.  ``kind`` is ``projects`` or ``orgs``."""

    KINDS = ("projects", "orgs")

    def __init__(self, client: OrchClient) -> None:
        self._client = client

    def _base(self, kind: str) -> str:
        if kind not in self.KINDS:
            raise ValueError(f"unknown tenant kind: {kind}")
        return f"/v1/{kind}"

    def list_tenants(self, kind: str) -> ApiResponse:
        return self._client.get(self._base(kind))

    def get_tenant(self, kind: str, name: str) -> ApiResponse:
        return self._client.get(f"{self._base(kind)}/{_seg(name)}")

    def create_tenant(self, kind: str, name: str, description: str) -> ApiResponse:
        return self._client.put(f"{self._base(kind)}/{_seg(name)}", {"description": description})

    def delete_tenant(self, kind: str, name: str) -> ApiResponse:
        return self._client.delete(f"{self._base(kind)}/{_seg(name)}")


class HttpRpsService:
    """Remote provisioning server: AMT domain profiles."""

    def __init__(self, client: OrchClient) -> None:
        self._client = client

    def _base(self, project: str) -> str:
        return f"/v1/projects/{_seg(project)}/dm/amt/admin/domains"

    def list_domains(self, project: str) -> ApiResponse:
        return self._client.get(self._base(project))

    def get_domain(self, project: str, name: str) -> ApiResponse:
        return self._client.get(f"{self._base(project)}/{_seg(name)}")

    def delete_domain(self, project: str, name: str) -> ApiResponse:
        return self._client.delete(f"{self._base(project)}/{_seg(name)}")


# ---------------------------------------------------------------------------
# Project scoping
# ---------------------------------------------------------------------------


def require_project(tenancy: TenancyService, project: str) -> str:
    """Ensure ``project`` is set and visible to the caller; return it."""
    if not project:
        raise ValidationError('required flag "project" not set')
    response = tenancy.get_tenant("projects", project)
    if not response.ok:
        logger.debug("project lookup for %s returned %d", project, response.status_code)
        raise ValidationError(
            f"project {project} does not exist or you do not have access to it"
        )
    return project
