"""Catalog commands for applications and deployment packages."""

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
from orchcli.client.http import ApiResponse
from orchcli.client.services import HttpCatalogService
from orchcli.core.errors import NotFoundError
from orchcli.core.response import check_response, process_response
from orchcli.models.catalog import (
    Application,
    ApplicationKind,
    DeploymentPackage,
    GetApplicationResponse,
    GetApplicationVersionsResponse,
    GetDeploymentPackageResponse,
    GetDeploymentPackageVersionsResponse,
    ListApplicationsResponse,
    ListDeploymentPackagesResponse,
)
from orchcli.ui.tables import print_table, value_or_none
from orchcli.ui.timefmt import format_timestamp
from orchcli.utils.config import CLIConfig

APPLICATION_HEADERS = (
    "Name",
    "Display Name",
    "Version",
    "Kind",
    "Chart Name",
    "Chart Version",
    "Helm Registry Name",
    "Default Profile",
)
PACKAGE_HEADERS = (
    "Name",
    "Display Name",
    "Version",
    "Kind",
    "Default Profile",
    "Is Deployed",
    "Is Visible",
    "Application Count",
)
KIND_CHOICES = ("normal", "addon", "extension")
TIMESTAMP_FIELDS = {"create_time", "update_time"}


def _kind_label(kind: str | None) -> str:
    if not kind:
        return "normal"
    return kind.removeprefix("KIND_").lower()


def _bool_label(value: bool | None) -> str:
    return "true" if value else "false"


def _bracketed(items: list[str]) -> str:
    return "[" + " ".join(items) + "]"


def print_applications(applications: list[Application], config: CLIConfig) -> None:
    if not config.verbose:
        print_table(
            APPLICATION_HEADERS,
            [
                (
                    app.name,
                    value_or_none(app.display_name),
                    app.version,
                    _kind_label(app.kind),
                    app.chart_name,
                    app.chart_version,
                    app.helm_registry_name,
                    value_or_none(app.default_profile_name),
                )
                for app in applications
            ],
            debug_headers=config.debug_headers,
        )
        return

    for app in applications:
        echo_fields(
            [
                ("Name", app.name),
                ("Display Name", value_or_none(app.display_name)),
                ("Description", value_or_none(app.description)),
                ("Version", app.version),
                ("Kind", _kind_label(app.kind)),
                ("Helm Registry Name", app.helm_registry_name),
                ("Image Registry Name", value_or_none(app.image_registry_name)),
                ("Chart Name", app.chart_name),
                ("Chart Version", app.chart_version),
                ("Create Time", format_timestamp(app.create_time, config.time_format)),
                ("Update Time", format_timestamp(app.update_time, config.time_format)),
                ("Profiles", _bracketed([p.name for p in app.profiles])),
                ("Default Profile", value_or_none(app.default_profile_name)),
            ]
        )
        click.echo()


def print_deployment_packages(packages: list[DeploymentPackage], config: CLIConfig) -> None:
    if not config.verbose:
        print_table(
            PACKAGE_HEADERS,
            [
                (
                    pkg.name,
                    value_or_none(pkg.display_name),
                    pkg.version,
                    _kind_label(pkg.kind),
                    value_or_none(pkg.default_profile_name),
                    _bool_label(pkg.is_deployed),
                    _bool_label(pkg.is_visible),
                    len(pkg.application_references),
                )
                for pkg in packages
            ],
            debug_headers=config.debug_headers,
        )
        return

    for pkg in packages:
        echo_fields(
            [
                ("Name", pkg.name),
                ("Display Name", value_or_none(pkg.display_name)),
                ("Description", value_or_none(pkg.description)),
                ("Version", pkg.version),
                ("Kind", _kind_label(pkg.kind)),
                ("Is Deployed", _bool_label(pkg.is_deployed)),
                ("Is Visible", _bool_label(pkg.is_visible)),
                (
                    "Applications",
                    _bracketed([f"{r.name}:{r.version}" for r in pkg.application_references]),
                ),
                (
                    "Application Dependencies",
                    _bracketed([f"{d.name}->{d.requires}" for d in pkg.application_dependencies]),
                ),
                ("Profiles", _bracketed([p.name for p in pkg.profiles])),
                ("Default Profile", value_or_none(pkg.default_profile_name)),
                ("Create Time", format_timestamp(pkg.create_time, config.time_format)),
                ("Update Time", format_timestamp(pkg.update_time, config.time_format)),
            ]
        )
        click.echo()


def fetch_application(
    catalog: HttpCatalogService,
    project: str,
    name: str,
    version: str,
) -> Application:
    """Get one application version, raising when it cannot be read."""
    response = catalog.get_application(project, name, version)
    check_response(
        response.status_code, response.reason, response.body,
        f"application {name}:{version} not found",
    )
    return response.parse(GetApplicationResponse).application


def update_application(
    catalog: HttpCatalogService,
    project: str,
    application: Application,
) -> ApiResponse:
    """Write back a full application record."""
    return catalog.update_application(
        project,
        application.name,
        application.version,
        application.to_payload(exclude=TIMESTAMP_FIELDS),
    )


def _paging_options(func):
    func = click.option("--offset", type=int, help="Index of the first item to return")(func)
    func = click.option("--page-size", type=int, help="Maximum number of items to return")(func)
    func = click.option("--filter", "filter_", help="Filter expression")(func)
    func = click.option("--order-by", help="Sort order, e.g. 'name desc'")(func)
    return func


def register_catalog_commands(*, verbs: VerbGroups) -> None:
    """Register application and deployment package commands."""

    # -----------------------------------------------------------------------
    # Applications
    # -----------------------------------------------------------------------

    @verbs.list.command("applications")
    @_paging_options
    @click.option(
        "--kind",
        "kinds",
        type=click.Choice(KIND_CHOICES),
        multiple=True,
        help="Only list applications of this kind (repeatable)",
    )
    @click.pass_context
    def list_applications(
        ctx: click.Context,
        order_by: str | None,
        filter_: str | None,
        page_size: int | None,
        offset: int | None,
        kinds: tuple[str, ...],
    ) -> None:
        """List applications in the catalog."""
        require_feature(ctx, APP_ORCH_FEATURE)
        config = get_config(ctx)
        with project_scope(ctx) as (client, project):
            response = HttpCatalogService(client).list_applications(
                project,
                order_by=order_by,
                filter=filter_,
                page_size=page_size,
                offset=offset,
                kinds=[ApplicationKind.from_flag(k).value for k in kinds],
            )
        if not process_response(
            response.status_code, response.reason, response.body,
            "error listing applications", verbose=config.verbose,
        ):
            return
        print_applications(response.parse(ListApplicationsResponse).applications, config)

    @verbs.get.command("application")
    @click.argument("name")
    @click.argument("version", required=False)
    @click.pass_context
    def get_application(ctx: click.Context, name: str, version: str | None) -> None:
        """Show an application version, or every version when VERSION is omitted."""
        require_feature(ctx, APP_ORCH_FEATURE)
        config = get_config(ctx)
        with project_scope(ctx) as (client, project):
            catalog = HttpCatalogService(client)
            if version:
                response = catalog.get_application(project, name, version)
                message = f"error getting application {name}:{version}"
            else:
                response = catalog.get_application_versions(project, name)
                message = f"error getting application versions {name}"
        if not process_response(
            response.status_code, response.reason, response.body,
            message, verbose=config.verbose,
        ):
            return
        if version:
            applications = [response.parse(GetApplicationResponse).application]
        else:
            applications = response.parse(GetApplicationVersionsResponse).application
            if not applications:
                raise NotFoundError(f"no versions of application {name} found")
        print_applications(applications, config)

    @verbs.create.command("application")
    @click.argument("name")
    @click.argument("version")
    @click.option("--display-name", help="Application display name")
    @click.option("--description", help="Application description")
    @click.option("--chart-name", required=True, help="Helm chart name for deploying the application")
    @click.option("--chart-version", required=True, help="Helm chart version")
    @click.option("--chart-registry", required=True, help="Helm chart registry")
    @click.option("--image-registry", help="Image registry")
    @click.option(
        "--kind",
        type=click.Choice(KIND_CHOICES),
        default="normal",
        show_default=True,
        help="Application kind",
    )
    @click.pass_context
    def create_application(
        ctx: click.Context,
        name: str,
        version: str,
        display_name: str | None,
        description: str | None,
        chart_name: str,
        chart_version: str,
        chart_registry: str,
        image_registry: str | None,
        kind: str,
    ) -> None:
        """Create an application backed by a Helm chart."""
        require_feature(ctx, APP_ORCH_FEATURE)
        application = Application(
            name=name,
            version=version,
            kind=ApplicationKind.from_flag(kind).value,
            display_name=display_name,
            description=description,
            chart_name=chart_name,
            chart_version=chart_version,
            helm_registry_name=chart_registry,
            image_registry_name=image_registry,
        )
        with project_scope(ctx) as (client, project):
            response = HttpCatalogService(client).create_application(
                project, application.to_payload()
            )
        check_response(
            response.status_code, response.reason, response.body,
            f"error while creating application {name}",
        )
        click.echo(f"Application '{name}:{version}' created successfully")

    @verbs.set.command("application")
    @click.argument("name")
    @click.argument("version")
    @click.option("--display-name", help="Application display name")
    @click.option("--description", help="Application description")
    @click.option("--chart-name", help="Helm chart name")
    @click.option("--chart-version", help="Helm chart version")
    @click.option("--chart-registry", help="Helm chart registry")
    @click.option("--image-registry", help="Image registry")
    @click.option("--default-profile", help="Default profile name")
    @click.pass_context
    def set_application(
        ctx: click.Context,
        name: str,
        version: str,
        display_name: str | None,
        description: str | None,
        chart_name: str | None,
        chart_version: str | None,
        chart_registry: str | None,
        image_registry: str | None,
        default_profile: str | None,
    ) -> None:
        """Update fields of an existing application version."""
        require_feature(ctx, APP_ORCH_FEATURE)
        with project_scope(ctx) as (client, project):
            catalog = HttpCatalogService(client)
            current = fetch_application(catalog, project, name, version)
            changes = {
                "display_name": display_name,
                "description": description,
                "chart_name": chart_name,
                "chart_version": chart_version,
                "helm_registry_name": chart_registry,
                "image_registry_name": image_registry,
                "default_profile_name": default_profile,
            }
            updated = current.model_copy(
                update={k: v for k, v in changes.items() if v is not None}
            )
            response = update_application(catalog, project, updated)
        check_response(
            response.status_code, response.reason, response.body,
            f"error while updating application {name}:{version}",
        )
        click.echo(f"Application '{name}:{version}' updated successfully")

    @verbs.delete.command("application")
    @click.argument("name")
    @click.argument("version", required=False)
    @click.pass_context
    def delete_application(ctx: click.Context, name: str, version: str | None) -> None:
        """Delete one application version, or all versions when VERSION is omitted."""
        require_feature(ctx, APP_ORCH_FEATURE)
        with project_scope(ctx) as (client, project):
            catalog = HttpCatalogService(client)
            if version:
                fetch_application(catalog, project, name, version)
                targets = [version]
            else:
                response = catalog.get_application_versions(project, name)
                check_response(
                    response.status_code, response.reason, response.body,
                    f"error getting application versions {name}",
                )
                versions = response.parse(GetApplicationVersionsResponse).application
                if not versions:
                    raise NotFoundError(f"application {name} has no versions")
                targets = [app.version for app in versions]

            for target in targets:
                response = catalog.delete_application(project, name, target)
                check_response(
                    response.status_code, response.reason, response.body,
                    f"error deleting application {name}:{target}",
                )
                click.echo(f"Application '{name}:{target}' deleted successfully")

    # -----------------------------------------------------------------------
    # Deployment packages
    # -----------------------------------------------------------------------

    @verbs.list.command("deployment-packages")
    @_paging_options
    @click.pass_context
    def list_deployment_packages(
        ctx: click.Context,
        order_by: str | None,
        filter_: str | None,
        page_size: int | None,
        offset: int | None,
    ) -> None:
        """List deployment packages in the catalog."""
        require_feature(ctx, APP_ORCH_FEATURE)
        config = get_config(ctx)
        with project_scope(ctx) as (client, project):
            response = HttpCatalogService(client).list_deployment_packages(
                project,
                order_by=order_by,
                filter=filter_,
                page_size=page_size,
                offset=offset,
            )
        if not process_response(
            response.status_code, response.reason, response.body,
            "error listing deployment packages", verbose=config.verbose,
        ):
            return
        print_deployment_packages(
            response.parse(ListDeploymentPackagesResponse).deployment_packages, config
        )

    @verbs.get.command("deployment-package")
    @click.argument("name")
    @click.argument("version", required=False)
    @click.pass_context
    def get_deployment_package(ctx: click.Context, name: str, version: str | None) -> None:
        """Show a deployment package version, or every version when VERSION is omitted."""
        require_feature(ctx, APP_ORCH_FEATURE)
        config = get_config(ctx)
        with project_scope(ctx) as (client, project):
            catalog = HttpCatalogService(client)
            if version:
                response = catalog.get_deployment_package(project, name, version)
                message = f"error getting deployment package {name}:{version}"
            else:
                response = catalog.get_deployment_package_versions(project, name)
                message = f"error getting deployment package versions {name}"
        if not process_response(
            response.status_code, response.reason, response.body,
            message, verbose=config.verbose,
        ):
            return
        if version:
            packages = [response.parse(GetDeploymentPackageResponse).deployment_package]
        else:
            packages = response.parse(GetDeploymentPackageVersionsResponse).deployment_packages
            if not packages:
                raise NotFoundError(f"no versions of deployment package {name} found")
        print_deployment_packages(packages, config)

    @verbs.delete.command("deployment-package")
    @click.argument("name")
    @click.argument("version", required=False)
    @click.pass_context
    def delete_deployment_package(ctx: click.Context, name: str, version: str | None) -> None:
        """Delete one deployment package version, or all versions when VERSION is omitted."""
        require_feature(ctx, APP_ORCH_FEATURE)
        with project_scope(ctx) as (client, project):
            catalog = HttpCatalogService(client)
            if version:
                response = catalog.get_deployment_package(project, name, version)
                check_response(
                    response.status_code, response.reason, response.body,
                    f"deployment package {name}:{version} not found",
                )
                targets = [version]
            else:
                response = catalog.get_deployment_package_versions(project, name)
                check_response(
                    response.status_code, response.reason, response.body,
                    f"error getting deployment package versions {name}",
                )
                packages = response.parse(GetDeploymentPackageVersionsResponse).deployment_packages
                if not packages:
                    raise NotFoundError(f"deployment package {name} has no versions")
                targets = [pkg.version for pkg in packages]

            for target in targets:
                response = catalog.delete_deployment_package(project, name, target)
                check_response(
                    response.status_code, response.reason, response.body,
                    f"error deleting deployment package {name}:{target}",
                )
                click.echo(f"Deployment package '{name}:{target}' deleted successfully")
