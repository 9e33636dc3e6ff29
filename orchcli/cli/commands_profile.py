"""Profile commands.

Profiles live inside an application version, so every mutation reads
the application, edits its profile list and writes the whole record
back.
"""

from __future__ import annotations

import click

from orchcli.cli.commands_catalog import fetch_application, update_application
from orchcli.cli.common import (
    APP_ORCH_FEATURE,
    VerbGroups,
    echo_fields,
    get_config,
    project_scope,
    require_feature,
)
from orchcli.client.services import HttpCatalogService
from orchcli.core.errors import NotFoundError, ValidationError
from orchcli.core.inputs import read_input_with_limit
from orchcli.core.profiles import (
    decode_chart_values,
    parse_parameter_templates,
    validate_values_yaml,
)
from orchcli.core.response import check_response, process_response
from orchcli.models.catalog import GetApplicationResponse, Profile
from orchcli.ui.tables import print_table, value_or_none
from orchcli.ui.timefmt import format_timestamp
from orchcli.utils.config import CLIConfig

PROFILE_HEADERS = ("Name", "Display Name", "Description")


def read_chart_values(path: str) -> str:
    """Read and validate a values.yaml file (``-`` for stdin)."""
    try:
        data = read_input_with_limit(path)
    except (OSError, ValidationError) as exc:
        raise ValidationError(f"error reading values.yaml content: {exc}") from exc
    validate_values_yaml(data)
    return data.decode("utf-8")


def print_profiles(profiles: list[Profile], config: CLIConfig) -> None:
    if not config.verbose:
        print_table(
            PROFILE_HEADERS,
            [
                (p.name, value_or_none(p.display_name), value_or_none(p.description))
                for p in profiles
            ],
            debug_headers=config.debug_headers,
        )
        return

    for p in profiles:
        fields: list[tuple[str, object]] = [
            ("Name", p.name),
            ("Display Name", value_or_none(p.display_name)),
            ("Description", value_or_none(p.description)),
        ]
        if p.deployment_requirement:
            requirements = " ".join(f"{r.name}:{r.version}" for r in p.deployment_requirement)
            fields.append(("Deployment Requirements", f"[{requirements}]"))
        fields.extend(
            [
                ("Create Time", format_timestamp(p.create_time, config.time_format)),
                ("Update Time", format_timestamp(p.update_time, config.time_format)),
            ]
        )
        echo_fields(fields)
        click.echo()

        if p.parameter_templates:
            click.echo("Parameter templates:")
            for template in p.parameter_templates:
                echo_fields(
                    [
                        ("Name", template.name),
                        ("Type", template.type),
                        ("Display Name", value_or_none(template.display_name)),
                        ("Default", value_or_none(template.default)),
                        ("Suggested values", ",".join(template.suggested_values)),
                    ],
                    indent="   ",
                )
                click.echo()

        if p.chart_values:
            click.echo("Chart Values:")
            for line in decode_chart_values(p.chart_values).split("\n"):
                click.echo(f"  {line}")
            click.echo()


def _find_profile(profiles: list[Profile], name: str) -> int | None:
    for index, profile in enumerate(profiles):
        if profile.name == name:
            return index
    return None


def _profile_options(func):
    func = click.option(
        "--parameter-template",
        "parameter_templates",
        multiple=True,
        help="Parameter template 'name=type:display-name:default' (repeatable)",
    )(func)
    func = click.option(
        "--chart-values",
        help="Path to a values.yaml file, or '-' for stdin",
    )(func)
    func = click.option("--description", help="Profile description")(func)
    func = click.option("--display-name", help="Profile display name")(func)
    return func


def register_profile_commands(*, verbs: VerbGroups) -> None:
    """Register application profile commands."""

    @verbs.list.command("profiles")
    @click.argument("application")
    @click.argument("version")
    @click.pass_context
    def list_profiles(ctx: click.Context, application: str, version: str) -> None:
        """List the profiles of an application version."""
        require_feature(ctx, APP_ORCH_FEATURE)
        config = get_config(ctx)
        with project_scope(ctx) as (client, project):
            response = HttpCatalogService(client).get_application(project, application, version)
        if not process_response(
            response.status_code, response.reason, response.body,
            f"error listing profiles for application {application}:{version}",
            verbose=config.verbose,
        ):
            return
        print_profiles(response.parse(GetApplicationResponse).application.profiles, config)

    @verbs.get.command("profile")
    @click.argument("application")
    @click.argument("version")
    @click.argument("profile")
    @click.pass_context
    def get_profile(ctx: click.Context, application: str, version: str, profile: str) -> None:
        """Show one profile of an application version."""
        require_feature(ctx, APP_ORCH_FEATURE)
        config = get_config(ctx)
        with project_scope(ctx) as (client, project):
            response = HttpCatalogService(client).get_application(project, application, version)
        if not process_response(
            response.status_code, response.reason, response.body,
            f"error listing profiles for application {application}:{version}",
            verbose=config.verbose,
        ):
            return
        profiles = response.parse(GetApplicationResponse).application.profiles
        index = _find_profile(profiles, profile)
        if index is None:
            raise NotFoundError(
                f"profile {profile} for application {application}:{version} not found"
            )
        print_profiles([profiles[index]], config)

    @verbs.create.command("profile")
    @click.argument("application")
    @click.argument("version")
    @click.argument("profile")
    @_profile_options
    @click.pass_context
    def create_profile(
        ctx: click.Context,
        application: str,
        version: str,
        profile: str,
        display_name: str | None,
        description: str | None,
        chart_values: str | None,
        parameter_templates: tuple[str, ...],
    ) -> None:
        """Add a profile to an application version.

        The first profile of an application also becomes its default.
        """
        require_feature(ctx, APP_ORCH_FEATURE)
        values = read_chart_values(chart_values) if chart_values else None
        templates = parse_parameter_templates(parameter_templates)

        with project_scope(ctx) as (client, project):
            catalog = HttpCatalogService(client)
            app = fetch_application(catalog, project, application, version)
            new_profile = Profile(
                name=profile,
                display_name=display_name or "",
                description=description or "",
                chart_values=values,
                parameter_templates=templates,
            )
            updated = app.model_copy(
                update={
                    "profiles": [*app.profiles, new_profile],
                    "default_profile_name": app.default_profile_name or profile,
                }
            )
            response = update_application(catalog, project, updated)

        check_response(
            response.status_code, response.reason, response.body,
            f"error creating profile {profile} of application {application}:{version}",
        )
        click.echo(
            f"Profile '{profile}' created successfully for application '{application}:{version}'"
        )

    @verbs.set.command("profile")
    @click.argument("application")
    @click.argument("version")
    @click.argument("profile")
    @_profile_options
    @click.pass_context
    def set_profile(
        ctx: click.Context,
        application: str,
        version: str,
        profile: str,
        display_name: str | None,
        description: str | None,
        chart_values: str | None,
        parameter_templates: tuple[str, ...],
    ) -> None:
        """Update a profile; unspecified fields keep their current values."""
        require_feature(ctx, APP_ORCH_FEATURE)
        templates = parse_parameter_templates(parameter_templates)
        values = read_chart_values(chart_values) if chart_values else None

        with project_scope(ctx) as (client, project):
            catalog = HttpCatalogService(client)
            app = fetch_application(catalog, project, application, version)
            profiles = list(app.profiles)
            index = _find_profile(profiles, profile)
            if index is None:
                raise NotFoundError(
                    f"profile {profile} for application {application}:{version} not found"
                )

            changes: dict[str, object] = {}
            if display_name is not None:
                changes["display_name"] = display_name
            if description is not None:
                changes["description"] = description
            if templates:
                changes["parameter_templates"] = templates
            if values is not None:
                changes["chart_values"] = values
            profiles[index] = profiles[index].model_copy(update=changes)

            default_name = profile if len(profiles) == 1 else app.default_profile_name
            updated = app.model_copy(
                update={"profiles": profiles, "default_profile_name": default_name}
            )
            response = update_application(catalog, project, updated)

        check_response(
            response.status_code, response.reason, response.body,
            f"error updating profile {profile} of application {application}:{version}",
        )
        click.echo(
            f"Profile '{profile}' updated successfully for application '{application}:{version}'"
        )

    @verbs.delete.command("profile")
    @click.argument("application")
    @click.argument("version")
    @click.argument("profile")
    @click.pass_context
    def delete_profile(ctx: click.Context, application: str, version: str, profile: str) -> None:
        """Remove a profile from an application version."""
        require_feature(ctx, APP_ORCH_FEATURE)
        with project_scope(ctx) as (client, project):
            catalog = HttpCatalogService(client)
            app = fetch_application(catalog, project, application, version)
            index = _find_profile(app.profiles, profile)
            if index is None:
                raise NotFoundError(
                    f"profile {profile} for application {application}:{version} not found"
                )
            profiles = [p for p in app.profiles if p.name != profile]

            default_name = app.default_profile_name
            if default_name == profile:
                default_name = profiles[0].name if profiles else None
            updated = app.model_copy(
                update={"profiles": profiles, "default_profile_name": default_name}
            )
            response = update_application(catalog, project, updated)

        check_response(
            response.status_code, response.reason, response.body,
            f"error deleting profile {profile} of application {application}:{version}",
        )
        click.echo(
            f"Profile '{profile}' deleted successfully from application '{application}:{version}'"
        )
