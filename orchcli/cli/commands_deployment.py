"""Deployment commands: list, get, create, set, upgrade and delete."""

from __future__ import annotations

import click

from orchcli.cli.common import (
    APP_ORCH_FEATURE,
    VerbGroups,
    echo_fields,
    get_config,
    project_scope,
    require_feature,
)
from orchcli.cli.params import KEY_VALUE, to_mapping
from orchcli.client.services import CatalogService, HttpCatalogService, HttpDeploymentService
from orchcli.core.errors import ValidationError
from orchcli.core.inputs import validate_version
from orchcli.core.overrides import (
    build_overrides,
    resolve_target_clusters,
    validate_application_names,
)
from orchcli.core.response import check_response, process_response
from orchcli.models.catalog import GetDeploymentPackageResponse
from orchcli.models.deployment import (
    CreateDeploymentResponse,
    Deployment,
    GetDeploymentResponse,
    ListDeploymentsResponse,
)
from orchcli.ui.tables import print_table, value_or_none
from orchcli.ui.timefmt import format_timestamp
from orchcli.utils.config import CLIConfig

DEPLOYMENT_HEADERS = ("Deployment ID", "Name", "Display Name", "Profile", "State")
TARGET_FLAGS = "application-cluster-id or --application-label"


def print_deployments(deployments: list[Deployment], config: CLIConfig) -> None:
    if not config.verbose:
        print_table(
            DEPLOYMENT_HEADERS,
            [
                (
                    value_or_none(d.deploy_id),
                    value_or_none(d.name),
                    value_or_none(d.display_name),
                    value_or_none(d.profile_name),
                    value_or_none(d.status.state if d.status else None),
                )
                for d in deployments
            ],
            debug_headers=config.debug_headers,
        )
        return

    for d in deployments:
        echo_fields(
            [
                ("Deployment ID", value_or_none(d.deploy_id)),
                ("Name", value_or_none(d.name)),
                ("Display Name", value_or_none(d.display_name)),
                ("Package", f"{d.app_name}:{d.app_version}"),
                ("Profile", value_or_none(d.profile_name)),
                ("Deployment Type", value_or_none(d.deployment_type)),
                ("State", value_or_none(d.status.state if d.status else None)),
                ("Status Message", value_or_none(d.status.message if d.status else None)),
                ("Create Time", format_timestamp(d.create_time, config.time_format)),
            ]
        )
        for override in d.override_values or []:
            click.echo(f"Override Values ({override.app_name}): {override.values}")
        for target in d.target_clusters or []:
            selector = target.cluster_id or target.labels
            click.echo(f"Target Clusters ({value_or_none(target.app_name)}): {selector}")
        click.echo()


def package_application_names(
    catalog: CatalogService,
    project: str,
    package_name: str,
    package_version: str,
) -> set[str]:
    """Return the application names referenced by a deployment package."""
    response = catalog.get_deployment_package(project, package_name, package_version)
    if response.status_code != 200:
        raise ValidationError(
            f"failed to fetch deployment package {package_name}:{package_version} "
            f"(status {response.status_code})"
        )
    package = response.parse(GetDeploymentPackageResponse).deployment_package
    names = {ref.name for ref in package.application_references}
    if not names:
        raise ValidationError(
            f"deployment package {package_name}:{package_version} has no applications"
        )
    return names


def _application_options(func):
    func = click.option(
        "--application-cluster-id",
        "cluster_ids",
        type=KEY_VALUE,
        multiple=True,
        help="Manual deployment to a cluster, '<app>=<cluster-id>' (repeatable)",
    )(func)
    func = click.option(
        "--application-label",
        "labels",
        type=KEY_VALUE,
        multiple=True,
        help="Automatic deployment to clusters matching '<app>.<label>=<value>' (repeatable)",
    )(func)
    func = click.option(
        "--application-set",
        "sets",
        type=KEY_VALUE,
        multiple=True,
        help="Value override in the form '<app>.<prop>=<value>' (repeatable)",
    )(func)
    func = click.option(
        "--application-namespace",
        "namespaces",
        type=KEY_VALUE,
        multiple=True,
        help="Target namespace in the form '<app>=<namespace>' (repeatable)",
    )(func)
    return func


def register_deployment_commands(*, verbs: VerbGroups) -> None:
    """Register deployment commands on the verb groups."""

    @verbs.list.command("deployments")
    @click.option("--order-by", help="Sort order, e.g. 'name desc'")
    @click.option("--filter", "filter_", help="Filter expression")
    @click.pass_context
    def list_deployments(ctx: click.Context, order_by: str | None, filter_: str | None) -> None:
        """List all deployments in the project."""
        require_feature(ctx, APP_ORCH_FEATURE)
        config = get_config(ctx)
        with project_scope(ctx) as (client, project):
            response = HttpDeploymentService(client).list_deployments(
                project, order_by=order_by, filter=filter_
            )
        if not process_response(
            response.status_code, response.reason, response.body,
            "error getting deployments", verbose=config.verbose,
        ):
            return
        print_deployments(response.parse(ListDeploymentsResponse).deployments, config)

    @verbs.get.command("deployment")
    @click.argument("deployment_id")
    @click.pass_context
    def get_deployment(ctx: click.Context, deployment_id: str) -> None:
        """Show one deployment."""
        require_feature(ctx, APP_ORCH_FEATURE)
        config = get_config(ctx)
        with project_scope(ctx) as (client, project):
            response = HttpDeploymentService(client).get_deployment(project, deployment_id)
        if not process_response(
            response.status_code, response.reason, response.body,
            f"error getting deployment {deployment_id}", verbose=config.verbose,
        ):
            return
        print_deployments([response.parse(GetDeploymentResponse).deployment], config)

    @verbs.create.command("deployment")
    @click.argument("package_name")
    @click.argument("package_version")
    @click.option("--display-name", help="Deployment display name")
    @click.option("--profile", help="Deployment profile to use")
    @_application_options
    @click.pass_context
    def create_deployment(
        ctx: click.Context,
        package_name: str,
        package_version: str,
        display_name: str | None,
        profile: str | None,
        namespaces: tuple[tuple[str, str], ...],
        sets: tuple[tuple[str, str], ...],
        labels: tuple[tuple[str, str], ...],
        cluster_ids: tuple[tuple[str, str], ...],
    ) -> None:
        """Deploy PACKAGE_NAME at PACKAGE_VERSION to edge clusters.

        \b
        Examples:
          orch-cli create deployment wordpress 0.1.0 \\
            --application-label wordpress.color=blue \\
            --application-set wordpress.service.type=NodePort
        """
        require_feature(ctx, APP_ORCH_FEATURE)
        validate_version(package_version)

        with project_scope(ctx) as (client, project):
            valid_names = package_application_names(
                HttpCatalogService(client), project, package_name, package_version
            )
            overrides = build_overrides(to_mapping(namespaces), to_mapping(sets))
            validate_application_names(
                [o.app_name for o in overrides], valid_names, "application-set"
            )
            targets, deployment_type = resolve_target_clusters(
                to_mapping(labels), to_mapping(cluster_ids), allow_empty=False
            )
            validate_application_names(
                [t.app_name for t in targets if t.app_name], valid_names, TARGET_FLAGS
            )

            request = Deployment(
                display_name=display_name,
                app_name=package_name,
                app_version=package_version,
                profile_name=profile,
                override_values=overrides,
                target_clusters=targets,
                deployment_type=deployment_type,
            )
            response = HttpDeploymentService(client).create_deployment(
                project, request.to_payload()
            )

        check_response(
            response.status_code, response.reason, response.body,
            f"error creating deployment for application {package_name}:{package_version}",
        )
        created = response.parse(CreateDeploymentResponse)
        if created.deployment_id:
            click.echo(f"Deployment created successfully (ID: {created.deployment_id})")
        else:
            click.echo(f"Deployment for '{package_name}:{package_version}' created successfully")

    @verbs.set.command("deployment")
    @click.argument("deployment_id")
    @click.option("--name", help="Deployment name")
    @click.option("--display-name", help="Deployment display name")
    @click.option("--package-name", help="Deployment package name")
    @click.option("--package-version", help="Deployment package version")
    @click.option("--profile", help="Deployment profile to use")
    @_application_options
    @click.pass_context
    def set_deployment(
        ctx: click.Context,
        deployment_id: str,
        name: str | None,
        display_name: str | None,
        package_name: str | None,
        package_version: str | None,
        profile: str | None,
        namespaces: tuple[tuple[str, str], ...],
        sets: tuple[tuple[str, str], ...],
        labels: tuple[tuple[str, str], ...],
        cluster_ids: tuple[tuple[str, str], ...],
    ) -> None:
        """Update a deployment; unspecified fields keep their current values."""
        require_feature(ctx, APP_ORCH_FEATURE)
        overrides = build_overrides(to_mapping(namespaces), to_mapping(sets))
        targets, deployment_type = resolve_target_clusters(
            to_mapping(labels), to_mapping(cluster_ids), allow_empty=True
        )

        with project_scope(ctx) as (client, project):
            service = HttpDeploymentService(client)
            current_response = service.get_deployment(project, deployment_id)
            check_response(
                current_response.status_code, current_response.reason, current_response.body,
                f"error getting deployment {deployment_id}",
            )
            current = current_response.parse(GetDeploymentResponse).deployment

            request = Deployment(
                deploy_id=deployment_id,
                name=name or current.name,
                app_name=package_name or current.app_name,
                app_version=package_version or current.app_version,
                display_name=display_name or current.display_name,
                profile_name=profile or current.profile_name,
                override_values=overrides or current.override_values,
                target_clusters=targets or current.target_clusters,
                deployment_type=deployment_type or current.deployment_type,
            )
            response = service.update_deployment(project, deployment_id, request.to_payload())

        check_response(
            response.status_code, response.reason, response.body,
            f"error updating deployment {deployment_id}",
        )
        click.echo(f"Deployment '{deployment_id}' updated successfully")

    @verbs.upgrade.command("deployment")
    @click.argument("deployment_id")
    @click.option(
        "--package-version",
        required=True,
        help="New deployment package version to upgrade to",
    )
    @click.pass_context
    def upgrade_deployment(ctx: click.Context, deployment_id: str, package_version: str) -> None:
        """Upgrade a deployment to a new package version."""
        require_feature(ctx, APP_ORCH_FEATURE)
        validate_version(package_version)

        with project_scope(ctx) as (client, project):
            service = HttpDeploymentService(client)
            current_response = service.get_deployment(project, deployment_id)
            check_response(
                current_response.status_code, current_response.reason, current_response.body,
                f"error getting deployment {deployment_id}",
            )
            current = current_response.parse(GetDeploymentResponse).deployment
            request = current.model_copy(
                update={
                    "deploy_id": deployment_id,
                    "app_version": package_version,
                    "status": None,
                    "create_time": None,
                }
            )
            response = service.update_deployment(project, deployment_id, request.to_payload())

        check_response(
            response.status_code, response.reason, response.body,
            f"error upgrading deployment {deployment_id} to version {package_version}",
        )
        click.echo(
            f"Deployment '{deployment_id}' upgraded successfully to version '{package_version}'"
        )

    @verbs.delete.command("deployment")
    @click.argument("deployment_id")
    @click.pass_context
    def delete_deployment(ctx: click.Context, deployment_id: str) -> None:
        """Delete a deployment."""
        require_feature(ctx, APP_ORCH_FEATURE)
        with project_scope(ctx) as (client, project):
            response = HttpDeploymentService(client).delete_deployment(project, deployment_id)
        check_response(
            response.status_code, response.reason, response.body,
            f"error deleting deployment {deployment_id}",
        )
        click.echo(f"Deployment '{deployment_id}' deleted successfully")
