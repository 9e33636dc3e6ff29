"""Main CLI entry point for orch-cli."""

from __future__ import annotations

import sys

import click

from orchcli import __version__
from orchcli.branding import CLI_PRIMARY_COMMAND, PRODUCT_NAME
from orchcli.cli.commands_catalog import register_catalog_commands
from orchcli.cli.commands_cluster import register_cluster_commands
from orchcli.cli.commands_deployment import register_deployment_commands
from orchcli.cli.commands_host import register_host_commands
from orchcli.cli.commands_infra import register_infra_commands
from orchcli.cli.commands_profile import register_profile_commands
from orchcli.cli.commands_rps import register_rps_commands
from orchcli.cli.commands_sshkey import register_sshkey_commands
from orchcli.cli.commands_tenancy import register_tenancy_commands
from orchcli.cli.common import VerbGroups, build_client
from orchcli.cli.config import register_config_commands
from orchcli.core.errors import OrchError
from orchcli.utils.config import TIME_FORMATS, config_from_mapping, load_raw_config
from orchcli.utils.logs import configure_logging

# Verb groups shown in help, in this order.
VERB_COMMANDS = ["list", "get", "create", "set", "delete", "upgrade"]


class OrchGroup(click.Group):
    """Root group: verb-first help ordering and uniform error reporting."""

    def list_commands(self, ctx: click.Context) -> list[str]:
        names = super().list_commands(ctx)
        verbs = [n for n in VERB_COMMANDS if n in names]
        return verbs + sorted(n for n in names if n not in VERB_COMMANDS)

    def invoke(self, ctx: click.Context) -> None:
        """Report :class:`OrchError` as ``Error: <message>`` and exit non-zero."""
        try:
            super().invoke(ctx)
        except OrchError as exc:
            click.echo(f"Error: {exc}", err=True)
            sys.exit(exc.exit_code)


@click.group(cls=OrchGroup)
@click.version_option(version=__version__, prog_name=CLI_PRIMARY_COMMAND)
@click.option(
    "--api-endpoint",
    envvar="ORCH_API_ENDPOINT",
    help="API service endpoint (default from config file)",
)
@click.option(
    "--project", "-p",
    envvar="ORCH_PROJECT",
    help="Active project name",
)
@click.option("--verbose", "-v", is_flag=True, help="Produce verbose output and debug logs")
@click.option("--debug-headers", is_flag=True, help="Show table column separators")
@click.option("--noauth", "-n", is_flag=True, help="Send requests without an access token")
@click.option(
    "--time-format",
    type=click.Choice(TIME_FORMATS),
    help="How timestamps are displayed",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False),
    help="Configuration file (default ~/.orch-cli/orch-cli.yaml, or $ORCH_CLI_CONFIG)",
)
@click.pass_context
def cli(
    ctx: click.Context,
    api_endpoint: str | None,
    project: str | None,
    verbose: bool,
    debug_headers: bool,
    noauth: bool,
    time_format: str | None,
    config_path: str | None,
) -> None:
    """Command-line client for the edge orchestrator."""
    ctx.ensure_object(dict)
    config = config_from_mapping(load_raw_config(config_path))

    # Flags (and their environment variables) win over the config file.
    config.api_endpoint = api_endpoint or config.api_endpoint
    config.project = project or config.project
    config.verbose = verbose or config.verbose
    config.debug_headers = debug_headers or config.debug_headers
    config.noauth = noauth or config.noauth
    config.time_format = time_format or config.time_format

    configure_logging(config.verbose)
    ctx.obj["config"] = config
    ctx.obj["config_path"] = config_path
    ctx.obj.setdefault("client_factory", build_client)


# ---------------------------------------------------------------------------
# Verb groups
# ---------------------------------------------------------------------------


@cli.group("list")
def list_group() -> None:
    """List resources."""


@cli.group("get")
def get_group() -> None:
    """Show one resource."""


@cli.group("create")
def create_group() -> None:
    """Create a resource."""


@cli.group("set")
def set_group() -> None:
    """Update a resource."""


@cli.group("delete")
def delete_group() -> None:
    """Delete a resource."""


@cli.group("upgrade")
def upgrade_group() -> None:
    """Upgrade a resource."""


@cli.command("version")
def version_cmd() -> None:
    """Print the client version."""
    click.echo(f"{PRODUCT_NAME} ({CLI_PRIMARY_COMMAND}) version {__version__}")


VERBS = VerbGroups(
    list=list_group,
    get=get_group,
    create=create_group,
    set=set_group,
    delete=delete_group,
    upgrade=upgrade_group,
)

register_deployment_commands(verbs=VERBS)
register_catalog_commands(verbs=VERBS)
register_profile_commands(verbs=VERBS)
register_infra_commands(verbs=VERBS)
register_host_commands(verbs=VERBS)
register_sshkey_commands(verbs=VERBS)
register_cluster_commands(verbs=VERBS)
register_tenancy_commands(verbs=VERBS)
register_rps_commands(verbs=VERBS)
register_config_commands(cli=cli, verbs=VERBS)


if __name__ == "__main__":
    cli()
