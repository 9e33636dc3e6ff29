"""Shared plumbing for command handlers: config, clients, verb groups."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass

import click

from orchcli.client.http import OrchClient
from orchcli.client.services import HttpTenancyService, require_project
from orchcli.core.errors import ValidationError
from orchcli.utils.config import CLIConfig

ClientFactory = Callable[[CLIConfig], OrchClient]

APP_ORCH_FEATURE = "orchestrator.features.application-orchestration"
CLUSTER_ORCH_FEATURE = "orchestrator.features.cluster-orchestration"


@dataclass(frozen=True)
class VerbGroups:
    """The top-level verb groups resource commands attach to."""

    list: click.Group
    get: click.Group
    create: click.Group
    set: click.Group
    delete: click.Group
    upgrade: click.Group


def get_config(ctx: click.Context) -> CLIConfig:
    """Return the :class:`CLIConfig` resolved by the root command."""
    obj = ctx.find_object(dict) or {}
    config = obj.get("config")
    if config is None:
        return CLIConfig()
    return config


def require_feature(ctx: click.Context, feature: str) -> None:
    """Refuse to run a command whose orchestrator feature is disabled."""
    if not get_config(ctx).feature_enabled(feature):
        raise ValidationError(
            f"command disabled: feature {feature} is not enabled in the configuration"
        )


def build_client(config: CLIConfig) -> OrchClient:
    """Default client factory: endpoint and auth from the resolved config."""
    return OrchClient.from_environment(
        config.api_endpoint,
        noauth=config.noauth,
        verbose=config.verbose,
    )


@contextmanager
def open_client(ctx: click.Context) -> Iterator[OrchClient]:
    """Open one HTTP client for the duration of a command."""
    obj = ctx.find_object(dict) or {}
    factory: ClientFactory = obj.get("client_factory") or build_client
    with factory(get_config(ctx)) as client:
        yield client


@contextmanager
def project_scope(ctx: click.Context) -> Iterator[tuple[OrchClient, str]]:
    """Open a client and verify the configured project is accessible."""
    config = get_config(ctx)
    with open_client(ctx) as client:
        project = require_project(HttpTenancyService(client), config.project)
        yield client, project


def echo_fields(fields: list[tuple[str, object]], *, indent: str = "") -> None:
    """Print a ``Key: value`` detail block."""
    for label, value in fields:
        click.echo(f"{indent}{label}: {value}")
