"""``config`` commands for the persistent CLI settings file."""

from __future__ import annotations

import click

from orchcli.cli.common import VerbGroups, get_config
from orchcli.core.errors import NotFoundError
from orchcli.utils.config import (
    FEATURE_PREFIX,
    coerce_value,
    load_raw_config,
    render_config,
    save_raw_config,
)


def _config_path(ctx: click.Context) -> str | None:
    obj = ctx.find_object(dict) or {}
    return obj.get("config_path")


def register_config_commands(*, cli: click.Group, verbs: VerbGroups) -> None:
    """Register the ``config`` group and ``list features``."""

    @cli.group("config")
    def config_group() -> None:
        """Show and edit the CLI configuration file."""

    @config_group.command("show")
    @click.option(
        "--format", "fmt",
        type=click.Choice(["yaml", "text"]),
        default="yaml",
        show_default=True,
        help="Output format",
    )
    @click.pass_context
    def show_config(ctx: click.Context, fmt: str) -> None:
        """Print every stored setting."""
        click.echo(render_config(load_raw_config(_config_path(ctx)), fmt).rstrip("\n"))

    @config_group.command("get")
    @click.argument("key")
    @click.pass_context
    def get_config_value(ctx: click.Context, key: str) -> None:
        """Print one stored setting."""
        payload = load_raw_config(_config_path(ctx))
        if key not in payload:
            raise NotFoundError(f"configuration key {key} is not set")
        click.echo(payload[key])

    @config_group.command("set")
    @click.argument("key")
    @click.argument("value")
    @click.pass_context
    def set_config_value(ctx: click.Context, key: str, value: str) -> None:
        """Store a setting, e.g. ``config set project my-project``."""
        payload = load_raw_config(_config_path(ctx))
        payload[key] = coerce_value(key, value)
        path = save_raw_config(payload, _config_path(ctx))
        click.echo(f"Set {key} in {path}")

    @config_group.command("unset")
    @click.argument("key")
    @click.pass_context
    def unset_config_value(ctx: click.Context, key: str) -> None:
        """Remove a stored setting."""
        payload = load_raw_config(_config_path(ctx))
        if key not in payload:
            raise NotFoundError(f"configuration key {key} is not set")
        del payload[key]
        path = save_raw_config(payload, _config_path(ctx))
        click.echo(f"Unset {key} in {path}")

    @verbs.list.command("features")
    @click.pass_context
    def list_features(ctx: click.Context) -> None:
        """List orchestrator features recorded in the configuration."""
        features = get_config(ctx).features
        if not features:
            click.echo("No features configured")
            return
        click.echo("Edge Orchestrator Features:")
        for key in sorted(features):
            state = "enabled" if features[key] else "disabled"
            click.echo(f"  {key.removeprefix(FEATURE_PREFIX)}: {state}")
