"""Project and organization commands.

Both resources live in the tenancy API and share one record shape, so a
single set of handlers is registered once per resource kind.
"""

from __future__ import annotations

from dataclasses import dataclass

import click

from orchcli.cli.common import VerbGroups, echo_fields, get_config, open_client
from orchcli.client.services import HttpTenancyService
from orchcli.core.response import check_response, process_response
from orchcli.models.tenancy import Tenant
from orchcli.ui.tables import print_table
from orchcli.utils.config import CLIConfig

NOT_AVAILABLE = "N/A"
STATUS_UNKNOWN = "Unknown"


@dataclass(frozen=True)
class TenantKind:
    """Naming for one tenancy resource."""

    path: str
    singular: str
    plural: str
    title: str


PROJECTS = TenantKind(path="projects", singular="project", plural="projects", title="Project")
ORGANIZATIONS = TenantKind(
    path="orgs", singular="organization", plural="organizations", title="Organization"
)


def _status(tenant: Tenant) -> str:
    detail = tenant.status_detail
    if detail is None or not detail.status_indicator:
        return STATUS_UNKNOWN
    return detail.status_indicator


def print_tenants(tenants: list[Tenant], kind: TenantKind, config: CLIConfig) -> None:
    if not tenants:
        click.echo(f"No {kind.plural} found")
        return
    if config.verbose:
        print_table(
            ("Name", "Status", "Description"),
            [(t.name or NOT_AVAILABLE, _status(t), t.description or NOT_AVAILABLE) for t in tenants],
            debug_headers=config.debug_headers,
        )
    else:
        print_table(
            ("Name", "Status"),
            [(t.name or NOT_AVAILABLE, _status(t)) for t in tenants],
            debug_headers=config.debug_headers,
        )


def print_tenant(name: str, tenant: Tenant) -> None:
    detail = tenant.status_detail
    echo_fields(
        [
            ("Name", name),
            ("Description", tenant.description or NOT_AVAILABLE),
            ("Status", _status(tenant)),
            ("Status message", (detail.message if detail else None) or NOT_AVAILABLE),
            ("UID", (detail.uid if detail else None) or NOT_AVAILABLE),
        ]
    )
    click.echo()


def _register_kind(verbs: VerbGroups, kind: TenantKind) -> None:
    @verbs.list.command(kind.plural, help=f"List {kind.plural}.")
    @click.pass_context
    def list_tenants(ctx: click.Context) -> None:
        config = get_config(ctx)
        with open_client(ctx) as client:
            response = HttpTenancyService(client).list_tenants(kind.path)
        if not process_response(
            response.status_code, response.reason, response.body,
            f"error getting {kind.plural}", verbose=config.verbose,
        ):
            return
        payload = response.json() or []
        print_tenants([Tenant.model_validate(item) for item in payload], kind, config)

    @verbs.get.command(kind.singular, help=f"Show one {kind.singular}.")
    @click.argument("name")
    @click.pass_context
    def get_tenant(ctx: click.Context, name: str) -> None:
        config = get_config(ctx)
        with open_client(ctx) as client:
            response = HttpTenancyService(client).get_tenant(kind.path, name)
        if not process_response(
            response.status_code, response.reason, response.body,
            f"error getting {kind.singular} {name}", verbose=config.verbose,
        ):
            return
        print_tenant(name, response.parse(Tenant))

    @verbs.create.command(kind.singular, help=f"Create a {kind.singular}.")
    @click.argument("name")
    @click.option("--description", help="Description (defaults to the name)")
    @click.pass_context
    def create_tenant(ctx: click.Context, name: str, description: str | None) -> None:
        with open_client(ctx) as client:
            response = HttpTenancyService(client).create_tenant(
                kind.path, name, description or name
            )
        check_response(
            response.status_code, response.reason, response.body,
            f"error while creating {kind.singular}",
        )
        click.echo(f"{kind.title} '{name}' created successfully")

    @verbs.delete.command(kind.singular, help=f"Delete a {kind.singular}.")
    @click.argument("name")
    @click.pass_context
    def delete_tenant(ctx: click.Context, name: str) -> None:
        with open_client(ctx) as client:
            response = HttpTenancyService(client).delete_tenant(kind.path, name)
        check_response(
            response.status_code, response.reason, response.body,
            f"error deleting {kind.singular} {name}",
        )
        click.echo(f"{kind.title} '{name}' deleted successfully")


def register_tenancy_commands(*, verbs: VerbGroups) -> None:
    """Register project and organization commands."""
    _register_kind(verbs, PROJECTS)
    _register_kind(verbs, ORGANIZATIONS)
