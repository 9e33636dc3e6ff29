"""Host commands for the infrastructure manager."""

from __future__ import annotations

import json
import logging

import click

from orchcli.cli.commands_infra import (
    check_region_filter,
    check_site_filter,
    fetch_sites,
    sites_below_region_filter,
)
from orchcli.cli.common import VerbGroups, echo_fields, get_config, project_scope
from orchcli.client.services import HttpInfraService
from orchcli.core.errors import InvalidFormatError, NotFoundError, ValidationError
from orchcli.core.response import check_response, process_response
from orchcli.models.infra import (
    AmtState,
    CveEntry,
    Host,
    HostPatch,
    Instance,
    InstancePatch,
    ListHostsResponse,
    PowerCommandPolicy,
    PowerState,
)
from orchcli.ui.tables import print_table, value_or_none
from orchcli.utils.config import CLIConfig

logger = logging.getLogger(__name__)

PAGE_SIZE = 20
HOST_HEADERS = (
    "Resource ID",
    "Name",
    "Host Status",
    "Provisioning Status",
    "Serial Number",
    "Operating System",
    "Site ID",
    "Site Name",
    "Workload",
)
HOST_DETAIL_HEADERS = ("UUID", "Processor")
NOT_PROVISIONED = "Not provisioned"
NOT_ASSIGNED = "Not assigned"

# Shorthands accepted by ``list hosts --filter``.
HOST_FILTERS = {
    "onboarded": "hostStatus='onboarded'",
    "registered": "hostStatus='registered'",
    "provisioned": "hostStatus='provisioned'",
    "deauthorized": "hostStatus='invalidated'",
    "not connected": "hostStatus=''",
    "error": "hostStatus='error'",
}

POWER_STATES = {
    "on": PowerState.ON,
    "off": PowerState.OFF,
    "cycle": PowerState.CYCLE,
    "hibernate": PowerState.HIBERNATE,
    "reset": PowerState.RESET,
    "sleep": PowerState.SLEEP,
}
POWER_POLICIES = {
    "immediate": PowerCommandPolicy.IMMEDIATE,
    "ordered": PowerCommandPolicy.ORDERED,
}
AMT_STATES = {
    "provisioned": AmtState.PROVISIONED,
    "unprovisioned": AmtState.UNPROVISIONED,
}


def host_filter(expression: str | None, site_ids: list[str] | None = None) -> str | None:
    """Expand a ``--filter`` shorthand and restrict it to ``site_ids``."""
    base = HOST_FILTERS.get(expression, expression) if expression else None
    if site_ids is None:
        return base
    sites = " OR ".join(f"site.resourceId='{site_id}'" for site_id in site_ids)
    if base:
        return f"{base} AND ({sites})"
    return sites


def host_row(host: Host, verbose: bool) -> list[str]:
    instance = host.instance
    os_name = NOT_PROVISIONED
    provisioning = NOT_PROVISIONED
    workload = NOT_ASSIGNED
    if instance is not None:
        if instance.current_os and instance.current_os.name:
            os_name = instance.current_os.name
        provisioning = instance.provisioning_status or NOT_PROVISIONED
        workload = instance.workload_name() or NOT_ASSIGNED
    row = [
        value_or_none(host.resource_id),
        host.name,
        host.status_label(),
        provisioning,
        value_or_none(host.serial_number),
        os_name,
        host.site_id or NOT_PROVISIONED,
        (host.site.name if host.site else None) or NOT_PROVISIONED,
        workload,
    ]
    if verbose:
        row += [value_or_none(host.uuid), value_or_none(host.cpu_model)]
    return row


def print_hosts(hosts: list[Host], config: CLIConfig) -> None:
    headers = HOST_HEADERS + HOST_DETAIL_HEADERS if config.verbose else HOST_HEADERS
    print_table(
        headers,
        [host_row(host, config.verbose) for host in hosts],
        debug_headers=config.debug_headers,
    )


def parse_cves(raw: str | None) -> list[CveEntry]:
    """Decode the JSON list of CVEs an instance reports."""
    if not raw:
        return []
    try:
        return [CveEntry.model_validate(item) for item in json.loads(raw)]
    except (TypeError, ValueError) as exc:
        raise InvalidFormatError(f"invalid existing CVE entries: {exc}") from exc


def _nic_addresses(host: Host) -> str:
    pairs = [
        f"{nic.device_name} {nic.ipaddresses[0].address}"
        for nic in host.host_nics
        if nic.device_name and nic.ipaddresses and nic.ipaddresses[0].address
    ]
    return "; ".join(pairs)


def print_host(host: Host) -> None:
    """Print the detailed host view, one section per concern."""
    instance = host.instance or Instance()
    bullet = "- "

    click.echo("Host Info:\n")
    echo_fields(
        [
            ("Host Resource ID", value_or_none(host.resource_id)),
            ("Name", host.name),
            ("OS Profile", value_or_none(instance.os.name if instance.os else None)),
            ("NIC Name and IP Address", value_or_none(_nic_addresses(host))),
            (
                "LVM Size",
                f"{host.user_lvm_size} GB" if host.user_lvm_size is not None else "<none>",
            ),
        ],
        indent=bullet,
    )

    click.echo("\nStatus details:\n")
    echo_fields(
        [
            ("Host Status", host.status_label()),
            ("Host Status Details", value_or_none(instance.instance_status_detail)),
            ("Provisioning Status", instance.provisioning_status or NOT_PROVISIONED),
            ("Update Status", value_or_none(instance.update_status)),
        ],
        indent=bullet,
    )

    click.echo("\nSpecification:\n")
    echo_fields(
        [
            ("Serial Number", value_or_none(host.serial_number)),
            ("UUID", value_or_none(host.uuid)),
            ("OS", value_or_none(instance.current_os.name if instance.current_os else None)),
            ("BIOS Vendor", value_or_none(host.bios_vendor)),
            ("Product Name", value_or_none(host.product_name)),
        ],
        indent=bullet,
    )

    click.echo("\nCustomizations:\n")
    configs = " ".join(c.name for c in instance.custom_config if c.name)
    echo_fields([("Custom configs", value_or_none(configs))], indent=bullet)

    click.echo("\nCPU Info:\n")
    echo_fields(
        [
            ("CPU Model", value_or_none(host.cpu_model)),
            ("CPU Cores", value_or_none(host.cpu_cores)),
            ("CPU Architecture", value_or_none(host.cpu_architecture)),
            ("CPU Threads", value_or_none(host.cpu_threads)),
            ("CPU Sockets", value_or_none(host.cpu_sockets)),
        ],
        indent=bullet,
    )

    cves = parse_cves(instance.existing_cves)
    if cves:
        click.echo("\nCVE Info (existing CVEs):\n")
        for cve in cves:
            echo_fields(
                [
                    ("CVE ID", cve.cve_id),
                    ("Priority", cve.priority),
                    ("Affected Packages", ", ".join(cve.affected_packages)),
                ],
                indent=bullet,
            )
            click.echo()

    if host.current_amt_state == AmtState.PROVISIONED:
        click.echo("\nAMT Info:\n")
        echo_fields(
            [
                ("AMT Status", host.current_amt_state),
                ("Current Power Status", value_or_none(host.current_power_state)),
                ("Desired Power Status", value_or_none(host.desired_power_state)),
                ("Power Command Policy", value_or_none(host.power_command_policy)),
                ("PowerOn Time", value_or_none(host.power_on_time)),
                ("Desired AMT State", value_or_none(host.desired_amt_state)),
            ],
            indent=bullet,
        )
    elif host.current_amt_state:
        click.echo("\nAMT not active and/or not supported: No info available")


def register_host_commands(*, verbs: VerbGroups) -> None:
    """Register host commands."""

    @verbs.list.command("hosts")
    @click.option(
        "--filter", "-f", "filter_",
        help="Filter expression, or one of: " + ", ".join(HOST_FILTERS),
    )
    @click.option("--site", "-s", "site_id", help="Only show hosts assigned to this site")
    @click.option(
        "--region", "-r", "region_id",
        help="Only show hosts on sites in this region and its sub-regions",
    )
    @click.pass_context
    def list_hosts(
        ctx: click.Context,
        filter_: str | None,
        site_id: str | None,
        region_id: str | None,
    ) -> None:
        """List hosts in the project."""
        config = get_config(ctx)
        if site_id:
            check_site_filter(site_id)
        if region_id:
            check_region_filter(region_id)
            if site_id:
                click.echo("--region flag ignored, using --site as it is more precise", err=True)

        hosts: list[Host] = []
        with project_scope(ctx) as (client, project):
            infra = HttpInfraService(client)
            site_ids: list[str] | None = None
            if site_id:
                site_ids = [site_id]
            elif region_id:
                sites = fetch_sites(infra, project, sites_below_region_filter(region_id))
                site_ids = [site.resource_id for site in sites if site.resource_id]
                if not site_ids:
                    raise NotFoundError("no site was found in provided region")
            query = host_filter(filter_, site_ids)

            offset = 0
            while True:
                logger.debug("fetching hosts, filter %s, offset %d", query, offset)
                response = infra.list_hosts(
                    project, filter=query, page_size=PAGE_SIZE, offset=offset
                )
                check_response(
                    response.status_code, response.reason, response.body,
                    "error while retrieving hosts",
                )
                page = response.parse(ListHostsResponse)
                hosts.extend(page.hosts)
                if not page.has_next or not page.hosts:
                    break
                offset += PAGE_SIZE

        print_hosts(hosts, config)
        if config.verbose:
            scope = f" (filter: {query})" if query else ""
            click.echo(f"\nTotal Hosts{scope}: {len(hosts)}")

    @verbs.get.command("host")
    @click.argument("host_id")
    @click.pass_context
    def get_host(ctx: click.Context, host_id: str) -> None:
        """Show detailed information about a host."""
        config = get_config(ctx)
        with project_scope(ctx) as (client, project):
            infra = HttpInfraService(client)
            response = infra.get_host(project, host_id)
            if not process_response(
                response.status_code, response.reason, response.body,
                "error getting host", verbose=config.verbose,
            ):
                return
            host = response.parse(Host)
            if host.instance and host.instance.instance_id:
                instance_response = infra.get_instance(project, host.instance.instance_id)
                if not process_response(
                    instance_response.status_code, instance_response.reason,
                    instance_response.body,
                    "error getting instance of a host", verbose=config.verbose,
                ):
                    return
                host.instance = instance_response.parse(Instance)
        print_host(host)

    @verbs.set.command("host")
    @click.argument("host_id")
    @click.option("--power", type=click.Choice(list(POWER_STATES)), help="Power action")
    @click.option(
        "--power-policy",
        type=click.Choice(list(POWER_POLICIES)),
        help="How power commands are applied",
    )
    @click.option("--amt-state", type=click.Choice(list(AMT_STATES)), help="Desired AMT state")
    @click.option("--osupdatepolicy", "os_update_policy", help="OS update policy resource id")
    @click.pass_context
    def set_host(
        ctx: click.Context,
        host_id: str,
        power: str | None,
        power_policy: str | None,
        amt_state: str | None,
        os_update_policy: str | None,
    ) -> None:
        """Change the power state, AMT state or OS update policy of a host."""
        if not (power or power_policy or amt_state or os_update_policy):
            raise ValidationError("a flag must be provided with the set host command")

        with project_scope(ctx) as (client, project):
            infra = HttpInfraService(client)
            response = infra.get_host(project, host_id)
            check_response(
                response.status_code, response.reason, response.body,
                "error while retrieving host",
            )
            host = response.parse(Host)
            if host.instance is None:
                raise ValidationError(f"host {host_id} has no instance, it cannot be updated")

            if power or power_policy or amt_state:
                patch = HostPatch(
                    name=host.name,
                    desired_power_state=POWER_STATES[power] if power else None,
                    power_command_policy=POWER_POLICIES[power_policy] if power_policy else None,
                    desired_amt_state=AMT_STATES[amt_state] if amt_state else None,
                )
                response = infra.patch_host(project, host_id, patch.to_payload())
                check_response(
                    response.status_code, response.reason, response.body,
                    "error while updating host",
                )

            if os_update_policy:
                if not host.instance.instance_id:
                    raise ValidationError(f"host {host_id} has no instance, it cannot be updated")
                policy = InstancePatch(os_update_policy_id=os_update_policy)
                response = infra.patch_instance(
                    project, host.instance.instance_id, policy.to_payload()
                )
                check_response(
                    response.status_code, response.reason, response.body,
                    "error while setting host OS update policy",
                )
        click.echo(f"Host {host_id} updated successfully")

    @verbs.delete.command("host")
    @click.argument("host_id")
    @click.pass_context
    def delete_host(ctx: click.Context, host_id: str) -> None:
        """Delete a host, removing its instance first."""
        with project_scope(ctx) as (client, project):
            infra = HttpInfraService(client)
            response = infra.get_host(project, host_id)
            check_response(
                response.status_code, response.reason, response.body,
                "error while retrieving host",
            )
            host = response.parse(Host)
            if host.instance and host.instance.instance_id:
                logger.debug("deleting instance %s of host %s", host.instance.instance_id, host_id)
                response = infra.delete_instance(project, host.instance.instance_id)
                check_response(
                    response.status_code, response.reason, response.body,
                    "error while deleting instance",
                )
            response = infra.delete_host(project, host_id)
            check_response(
                response.status_code, response.reason, response.body,
                "error while deleting host",
            )
        click.echo(f"Host {host_id} deleted successfully")
