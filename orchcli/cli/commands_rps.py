"""AMT profile commands backed by the remote provisioning server."""

from __future__ import annotations

from dataclasses import replace

import click

from orchcli.cli.common import VerbGroups, echo_fields, get_config, project_scope
from orchcli.client.services import HttpRpsService
from orchcli.core.response import check_response, process_response
from orchcli.models.rps import AmtDomain
from orchcli.ui.tables import print_table, value_or_none
from orchcli.utils.config import CLIConfig

AMT_HEADERS = ("AMT Profile Name", "Domain Suffix", "Cert Format", "Expiration Date")


def print_amt_profiles(domains: list[AmtDomain], config: CLIConfig) -> None:
    if not config.verbose:
        print_table(
            AMT_HEADERS,
            [
                (
                    d.profile_name,
                    value_or_none(d.domain_suffix),
                    value_or_none(d.provisioning_cert_storage_format),
                    value_or_none(d.expiration_date),
                )
                for d in domains
            ],
            debug_headers=config.debug_headers,
        )
        return
    for d in domains:
        echo_fields(
            [
                ("AMT Profile Name", d.profile_name),
                ("Domain Suffix", value_or_none(d.domain_suffix)),
                ("Cert Format", value_or_none(d.provisioning_cert_storage_format)),
                ("Expiration Date", value_or_none(d.expiration_date)),
                ("Tenant ID", value_or_none(d.tenant_id)),
            ]
        )
        click.echo()


def register_rps_commands(*, verbs: VerbGroups) -> None:
    """Register AMT profile commands."""

    @verbs.list.command("amtprofiles")
    @click.pass_context
    def list_amt_profiles(ctx: click.Context) -> None:
        """List AMT provisioning profiles."""
        config = get_config(ctx)
        with project_scope(ctx) as (client, project):
            response = HttpRpsService(client).list_domains(project)
        if not process_response(
            response.status_code, response.reason, response.body,
            "error getting AMT profiles", verbose=config.verbose,
        ):
            return
        payload = response.json() or []
        # Paged responses wrap the list in a "data" field.
        if isinstance(payload, dict):
            payload = payload.get("data") or []
        print_amt_profiles([AmtDomain.model_validate(item) for item in payload], config)

    @verbs.get.command("amtprofile")
    @click.argument("name")
    @click.pass_context
    def get_amt_profile(ctx: click.Context, name: str) -> None:
        """Show one AMT provisioning profile."""
        config = get_config(ctx)
        with project_scope(ctx) as (client, project):
            response = HttpRpsService(client).get_domain(project, name)
        if not process_response(
            response.status_code, response.reason, response.body,
            f"error getting AMT profile {name}", verbose=config.verbose,
        ):
            return
        print_amt_profiles([response.parse(AmtDomain)], replace(config, verbose=True))

    @verbs.delete.command("amtprofile")
    @click.argument("name")
    @click.pass_context
    def delete_amt_profile(ctx: click.Context, name: str) -> None:
        """Delete an AMT provisioning profile."""
        with project_scope(ctx) as (client, project):
            response = HttpRpsService(client).delete_domain(project, name)
        check_response(
            response.status_code, response.reason, response.body,
            f"error deleting AMT profile {name}",
        )
        click.echo(f"AMT profile '{name}' deleted successfully")
