"""Cluster commands for the cluster orchestrator."""

from __future__ import annotations

import logging
from collections.abc import Iterable

import click

from orchcli.cli.common import (
    CLUSTER_ORCH_FEATURE,
    VerbGroups,
    get_config,
    project_scope,
    require_feature,
)
from orchcli.cli.params import KEY_VALUE, to_mapping
from orchcli.client.services import (
    ClusterService,
    HttpClusterService,
    HttpInfraService,
    InfraService,
)
from orchcli.core.errors import InvalidFormatError, ValidationError
from orchcli.core.response import check_response, process_response
from orchcli.models.cluster import (
    ClusterDetailInfo,
    ClusterInfo,
    ClusterSpec,
    GenericStatus,
    ListClustersResponse,
    NodeSpec,
)
from orchcli.models.infra import Host
from orchcli.ui.tables import print_table, value_or_none

logger = logging.getLogger(__name__)

PAGE_SIZE = 100
CLUSTER_HEADERS = ("Name", "Kubernetes Version", "Nodes", "Status")
STATUS_UNKNOWN = "<unknown>"


def parse_node_specs(values: Iterable[str]) -> list[NodeSpec]:
    """Parse ``<id>:<role>`` node flags; comma-separated lists are allowed."""
    nodes: list[NodeSpec] = []
    for value in values:
        for item in value.split(","):
            if not item:
                continue
            parts = item.split(":")
            if len(parts) != 2:
                raise InvalidFormatError(f"invalid node format: {item}, expected <id>:<role>")
            nodes.append(NodeSpec(id=parts[0], role=parts[1]))
    return nodes


def _condition_message(status: GenericStatus | None) -> str:
    if status is None or not status.message:
        return STATUS_UNKNOWN
    return status.message


def print_cluster(project: str, cluster: ClusterDetailInfo) -> None:
    click.echo(f"Project: {project}")
    click.echo(f"Name: {value_or_none(cluster.name)}")
    click.echo(f"Kubernetes Version: {value_or_none(cluster.kubernetes_version)}")
    click.echo(f"Template: {value_or_none(cluster.template)}")
    click.echo("Nodes:")
    for node in cluster.nodes:
        click.echo(f"- ID: {node.id or ''}, Role: {node.role or ''}")
    click.echo("Status:")
    click.echo(f"- LifecyclePhase: {_condition_message(cluster.lifecycle_phase)}")
    click.echo(f"- Provider: {_condition_message(cluster.provider_status)}")
    click.echo(f"- ControlPlaneReady: {_condition_message(cluster.control_plane_ready)}")
    click.echo(f"- InfrastructureReady: {_condition_message(cluster.infrastructure_ready)}")
    click.echo(f"- NodeHealth: {_condition_message(cluster.node_health)}")
    if cluster.labels:
        click.echo("Labels:")
        for key in sorted(cluster.labels):
            click.echo(f"- {key}: {cluster.labels[key]}")
    else:
        click.echo("Labels: None")


def host_uuid(infra: InfraService, project: str, host_id: str) -> str:
    response = infra.get_host(project, host_id)
    check_response(
        response.status_code, response.reason, response.body,
        f"error while retrieving host {host_id}",
    )
    uuid = response.parse(Host).uuid
    if not uuid:
        raise ValidationError(f"host {host_id} does not have a UUID")
    return uuid


def force_delete_nodes(
    clusters: ClusterService, infra: InfraService, project: str, name: str
) -> None:
    """Force-remove every node of a cluster, addressed by host UUID."""
    response = clusters.get_cluster(project, name)
    check_response(
        response.status_code, response.reason, response.body,
        f"failed to get cluster details for force delete of {name}",
    )
    for node in response.parse(ClusterDetailInfo).nodes:
        if not node.id:
            raise ValidationError(f"node ID is missing for node in cluster {name}")
        uuid = host_uuid(infra, project, node.id)
        click.echo(f"Force deleting node {uuid} from cluster {name}")
        response = clusters.delete_cluster_node(project, name, uuid, force=True)
        check_response(
            response.status_code, response.reason, response.body,
            f"error deleting node {uuid} from cluster {name}",
        )
        click.echo(f"Node {uuid} deleted successfully from cluster {name}")


def register_cluster_commands(*, verbs: VerbGroups) -> None:
    """Register cluster commands."""

    @verbs.list.command("clusters")
    @click.option("--not-ready", is_flag=True, help="Show only clusters that are not ready")
    @click.pass_context
    def list_clusters(ctx: click.Context, not_ready: bool) -> None:
        """List clusters in the project."""
        require_feature(ctx, CLUSTER_ORCH_FEATURE)
        config = get_config(ctx)
        clusters: list[ClusterInfo] = []
        with project_scope(ctx) as (client, project):
            service = HttpClusterService(client)
            offset = 0
            while True:
                logger.debug(
                    "fetching clusters for project %s, page size %d, offset %d",
                    project, PAGE_SIZE, offset,
                )
                response = service.list_clusters(project, page_size=PAGE_SIZE, offset=offset)
                if not process_response(
                    response.status_code, response.reason, response.body,
                    "error listing clusters", verbose=config.verbose,
                ):
                    return
                page = response.parse(ListClustersResponse)
                logger.debug(
                    "received %d clusters out of %d", len(page.clusters), page.total_elements
                )
                clusters.extend(page.clusters)
                if len(page.clusters) < PAGE_SIZE:
                    break
                offset += PAGE_SIZE

        click.echo(f"Found {len(clusters)} clusters in project '{project}'")
        shown = [c for c in clusters if not (not_ready and c.is_ready())]
        if not_ready:
            click.echo(f"Found {len(shown)} clusters that are not ready in project '{project}'")
        print_table(
            CLUSTER_HEADERS,
            [
                (
                    value_or_none(c.name),
                    value_or_none(c.kubernetes_version),
                    value_or_none(c.node_quantity),
                    c.status_message(),
                )
                for c in shown
            ],
            debug_headers=config.debug_headers,
        )

    @verbs.get.command("cluster")
    @click.argument("name")
    @click.pass_context
    def get_cluster(ctx: click.Context, name: str) -> None:
        """Show details of a cluster."""
        require_feature(ctx, CLUSTER_ORCH_FEATURE)
        config = get_config(ctx)
        with project_scope(ctx) as (client, project):
            response = HttpClusterService(client).get_cluster(project, name)
        if not process_response(
            response.status_code, response.reason, response.body,
            f"error getting cluster {name}", verbose=config.verbose,
        ):
            return
        print_cluster(project, response.parse(ClusterDetailInfo))

    @verbs.create.command("cluster")
    @click.argument("name")
    @click.option(
        "--nodes",
        multiple=True,
        required=True,
        help="Node in the format <id>:<role> (repeatable or comma-separated)",
    )
    @click.option("--template", help="Cluster template to use")
    @click.option("--labels", type=KEY_VALUE, multiple=True, help="Label key=value (repeatable)")
    @click.pass_context
    def create_cluster(
        ctx: click.Context,
        name: str,
        nodes: tuple[str, ...],
        template: str | None,
        labels: tuple[tuple[str, str], ...],
    ) -> None:
        """Create a cluster from a template on the given nodes."""
        require_feature(ctx, CLUSTER_ORCH_FEATURE)
        spec = ClusterSpec(
            name=name,
            nodes=parse_node_specs(nodes),
            template=template,
            labels=to_mapping(labels),
        )
        logger.debug("creating cluster %s", spec.to_payload())
        with project_scope(ctx) as (client, project):
            response = HttpClusterService(client).create_cluster(project, spec.to_payload())
        check_response(
            response.status_code, response.reason, response.body,
            f"error creating cluster {name}",
        )
        click.echo(f"Cluster '{name}' created successfully.")

    @verbs.delete.command("cluster")
    @click.argument("name")
    @click.option(
        "--force",
        is_flag=True,
        help="Force delete the cluster without waiting for the host cleanup",
    )
    @click.pass_context
    def delete_cluster(ctx: click.Context, name: str, force: bool) -> None:
        """Delete a cluster."""
        require_feature(ctx, CLUSTER_ORCH_FEATURE)
        with project_scope(ctx) as (client, project):
            click.echo(f"Deleting cluster '{name}' in project '{project}'")
            clusters = HttpClusterService(client)
            if force:
                force_delete_nodes(clusters, HttpInfraService(client), project, name)
            else:
                response = clusters.delete_cluster(project, name)
                check_response(
                    response.status_code, response.reason, response.body,
                    f"error deleting cluster {name}",
                )
        click.echo(f"Cluster '{name}' deletion initiated successfully.")
