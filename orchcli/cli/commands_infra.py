"""Region and site commands for the infrastructure manager."""

from __future__ import annotations

import re

import click

from orchcli.cli.common import VerbGroups, echo_fields, get_config, project_scope
from orchcli.client.services import SITE_LOOKUP_REGION, HttpInfraService
from orchcli.core.errors import NotFoundError, OrchError, ValidationError
from orchcli.core.response import body_mentions, check_response, process_response
from orchcli.models.infra import ListRegionsResponse, ListSitesResponse, MetadataItem, Region, Site
from orchcli.ui.tables import print_table, value_or_none
from orchcli.utils.config import CLIConfig

REGION_TYPES = ("country", "state", "county", "region", "city")

_NAME_RE = re.compile(r"[a-zA-Z\-_0-9./: ]+")
_REGION_ID_RE = re.compile(r"region-[0-9a-f]{8}")
_REGION_FILTER_RE = re.compile(r"region-[a-zA-Z0-9]{8}")
_SITE_FILTER_RE = re.compile(r"site-[a-zA-Z0-9]{8}")
_INDENT = "       "

SITE_HEADERS = ("Site ID", "Site Name", "Region (Name)")
SITE_LOCATION_HEADERS = ("Longitude", "Latitude")


def check_region_name(name: str) -> None:
    # The API accepts spaces, but region metadata is derived from the name.
    if " " in name or not _NAME_RE.fullmatch(name):
        raise ValidationError("invalid region name")


def check_region_id(region_id: str) -> None:
    if not _REGION_ID_RE.fullmatch(region_id):
        raise ValidationError("invalid region id")


def check_site_name(name: str) -> None:
    if not _NAME_RE.fullmatch(name):
        raise ValidationError("invalid site name")


def check_region_filter(region_id: str) -> None:
    if not _REGION_FILTER_RE.fullmatch(region_id):
        raise ValidationError(
            f"invalid region id {region_id} --region expects region-abcd1234 format"
        )


def check_site_filter(site_id: str) -> None:
    if not _SITE_FILTER_RE.fullmatch(site_id):
        raise ValidationError(f"invalid site id {site_id} --site expects site-abcd1234 format")


def sites_below_region_filter(region_id: str) -> str:
    """Filter matching sites in a region or up to three levels of sub-regions."""
    paths = [
        "region.resource_id",
        "region.parent_region.resource_id",
        "region.parent_region.parent_region.resource_id",
        "region.parent_region.parent_region.parent_region.resource_id",
    ]
    return " OR ".join(f"{path}='{region_id}'" for path in paths)


def region_type_metadata(name: str, region_type: str | None) -> list[MetadataItem]:
    """Metadata tagging a region with its location type."""
    if not region_type:
        raise ValidationError("--type flag not provided")
    if region_type not in REGION_TYPES:
        raise ValidationError(
            "invalid type provided must be one of: " + "/".join(REGION_TYPES)
        )
    return [MetadataItem(key=region_type, value=name.lower())]


def _metadata_label(metadata: list[MetadataItem]) -> str:
    return "[" + " ".join(f"{m.key}={m.value}" for m in metadata) + "]"


def _echo_sites(sites: list[Site], pad: str) -> None:
    for site in sites:
        click.echo(f"  {pad}└───── Site: {site.resource_id} ({site.name})")


def _echo_subregions(
    regions: list[Region],
    sites: dict[str, list[Site]],
    parent_id: str,
    verbose: bool,
    depth: int,
) -> None:
    pad = _INDENT * depth
    for region in regions:
        if region.parent_id != parent_id:
            continue
        total = f"\n         {pad}- Total Sites: {value_or_none(region.total_sites)}" if verbose else ""
        click.echo(f"\n  {pad}└───── Region: {region.resource_id} ({region.name}){total}")
        region_sites = sites.get(region.resource_id or "", [])
        if region_sites:
            click.echo(f"  {pad}{_INDENT}|")
        _echo_sites(region_sites, pad + _INDENT)
        _echo_subregions(regions, sites, region.resource_id or "", verbose, depth + 1)


def print_region_tree(
    regions: list[Region],
    sites: dict[str, list[Site]],
    verbose: bool,
    root_parent: str | None = None,
) -> None:
    """Print regions as a tree with their sites, starting at ``root_parent``."""
    click.echo("Printing regions tree\n")
    for region in regions:
        is_root = not region.parent_id or (
            root_parent is not None and region.parent_id == root_parent
        )
        if not is_root:
            continue
        if verbose:
            click.echo(
                f"Region: {region.resource_id} ({region.name})\n"
                f"- Total Sites: {value_or_none(region.total_sites)}"
            )
        else:
            click.echo(f"Region: {region.resource_id} ({region.name})")
        click.echo("  |")
        _echo_sites(sites.get(region.resource_id or "", []), "")
        _echo_subregions(regions, sites, region.resource_id or "", verbose, 0)
        click.echo()


def print_region(region: Region) -> None:
    parent_name = region.parent_region.name if region.parent_region else None
    echo_fields(
        [
            ("Name", value_or_none(region.name)),
            ("Resource ID", value_or_none(region.resource_id)),
            ("Parent region", f"{value_or_none(region.parent_id)} {value_or_none(parent_name)}"),
            ("Metadata", _metadata_label(region.metadata)),
            ("TotalSites", value_or_none(region.total_sites)),
        ]
    )


def fetch_sites(infra: HttpInfraService, project: str, site_filter: str | None) -> list[Site]:
    """Collect every page of sites matching ``site_filter`` across regions."""
    sites: list[Site] = []
    offset = 0
    while True:
        response = infra.list_sites(
            project, SITE_LOOKUP_REGION, filter=site_filter, offset=offset
        )
        check_response(
            response.status_code, response.reason, response.body,
            "error while retrieving sites",
        )
        page = response.parse(ListSitesResponse)
        sites.extend(page.sites)
        if not page.has_next or not page.sites:
            return sites
        offset += len(page.sites)


def _print_site_table(sites: list[Site], config: CLIConfig) -> None:
    headers = SITE_HEADERS + SITE_LOCATION_HEADERS if config.verbose else SITE_HEADERS
    rows = []
    for site in sites:
        row = [value_or_none(site.resource_id), value_or_none(site.name), site.region_label()]
        if config.verbose:
            row += [value_or_none(site.site_lng), value_or_none(site.site_lat)]
        rows.append(row)
    print_table(headers, rows, debug_headers=config.debug_headers)


def print_sites(sites: list[Site], config: CLIConfig, region_id: str | None = None) -> None:
    """Print sites ordered by region; sites of ``region_id`` itself come first."""
    ordered = sorted(sites, key=lambda s: s.region_id or "")
    direct = [s for s in ordered if not region_id or s.region_id == region_id]
    nested = [s for s in ordered if region_id and s.region_id != region_id]
    _print_site_table(direct, config)
    if nested:
        click.echo("\nSites in sub-regions:\n")
        _print_site_table(nested, config)


def print_site(site: Site) -> None:
    region_name = site.region.name if site.region else None
    echo_fields(
        [
            ("Name", value_or_none(site.name)),
            ("Resource ID", value_or_none(site.resource_id)),
            ("Region", f"{value_or_none(region_name)} {value_or_none(site.region_id)}"),
            ("Longitude", value_or_none(site.site_lng)),
            ("Latitude", value_or_none(site.site_lat)),
        ]
    )


def register_infra_commands(*, verbs: VerbGroups) -> None:
    """Register region and site commands."""

    @verbs.list.command("regions")
    @click.option("--region", "parent", help="Only show regions below this region id")
    @click.pass_context
    def list_regions(ctx: click.Context, parent: str | None) -> None:
        """List regions and their sites as a tree."""
        config = get_config(ctx)
        if parent:
            check_region_id(parent)

        with project_scope(ctx) as (client, project):
            infra = HttpInfraService(client)
            region_filter = f"parent_region.resource_id='{parent}'" if parent else None
            response = infra.list_regions(project, filter=region_filter)
            if not process_response(
                response.status_code, response.reason, response.body,
                "error getting regions", verbose=config.verbose,
            ):
                return
            regions = response.parse(ListRegionsResponse).regions

            sites: dict[str, list[Site]] = {}
            for region in regions:
                if not region.resource_id:
                    continue
                site_response = infra.list_sites(
                    project,
                    region.resource_id,
                    filter=f"region.resource_id='{region.resource_id}'",
                )
                check_response(
                    site_response.status_code, site_response.reason, site_response.body,
                    f"error getting sites of region {region.resource_id}",
                )
                sites[region.resource_id] = site_response.parse(ListSitesResponse).sites

        print_region_tree(regions, sites, config.verbose, root_parent=parent)

    @verbs.get.command("region")
    @click.argument("region_id")
    @click.pass_context
    def get_region(ctx: click.Context, region_id: str) -> None:
        """Show one region."""
        config = get_config(ctx)
        with project_scope(ctx) as (client, project):
            response = HttpInfraService(client).get_region(project, region_id)
        if not process_response(
            response.status_code, response.reason, response.body,
            "error getting region", verbose=config.verbose,
        ):
            return
        print_region(response.parse(Region))

    @verbs.create.command("region")
    @click.argument("name")
    @click.option(
        "--type",
        "region_type",
        help="Location type: " + ", ".join(REGION_TYPES),
    )
    @click.option("--parent", help="Parent region id")
    @click.pass_context
    def create_region(
        ctx: click.Context,
        name: str,
        region_type: str | None,
        parent: str | None,
    ) -> None:
        """Create a region, optionally nested below a parent region."""
        check_region_name(name)
        metadata = region_type_metadata(name, region_type)
        if parent:
            check_region_id(parent)

        with project_scope(ctx) as (client, project):
            infra = HttpInfraService(client)
            if parent:
                parent_response = infra.get_region(project, parent)
                check_response(
                    parent_response.status_code, parent_response.reason, parent_response.body,
                    "error while creating region - parent region not found",
                )
            request = Region(name=name, parent_id=parent, metadata=metadata)
            response = infra.create_region(project, request.to_payload())

        check_response(
            response.status_code, response.reason, response.body,
            "error while creating region",
        )
        created = response.parse(Region)
        click.echo(f"Region '{name}' created successfully ({value_or_none(created.resource_id)})")

    @verbs.delete.command("region")
    @click.argument("region_id")
    @click.pass_context
    def delete_region(ctx: click.Context, region_id: str) -> None:
        """Delete a region."""
        check_region_id(region_id)
        with project_scope(ctx) as (client, project):
            response = HttpInfraService(client).delete_region(project, region_id)
        try:
            check_response(
                response.status_code, response.reason, response.body,
                "error while deleting region",
            )
        except OrchError as exc:
            if body_mentions(response.body, "region_resource not found"):
                raise NotFoundError("region does not exist") from exc
            raise
        click.echo(f"Region '{region_id}' deleted successfully")

    @verbs.list.command("sites")
    @click.option(
        "--region", "-r", "region_id",
        help="Only show sites in this region and its sub-regions",
    )
    @click.pass_context
    def list_sites(ctx: click.Context, region_id: str | None) -> None:
        """List sites, optionally below a region."""
        config = get_config(ctx)
        if region_id:
            check_region_filter(region_id)
        site_filter = sites_below_region_filter(region_id) if region_id else None
        with project_scope(ctx) as (client, project):
            sites = fetch_sites(HttpInfraService(client), project, site_filter)
        print_sites(sites, config, region_id)

    @verbs.get.command("site")
    @click.argument("site_id")
    @click.pass_context
    def get_site(ctx: click.Context, site_id: str) -> None:
        """Show one site."""
        config = get_config(ctx)
        with project_scope(ctx) as (client, project):
            response = HttpInfraService(client).get_site(project, site_id)
        if not process_response(
            response.status_code, response.reason, response.body,
            "error getting site", verbose=config.verbose,
        ):
            return
        print_site(response.parse(Site))

    @verbs.create.command("site")
    @click.argument("name")
    @click.option("--region", "-r", "region_id", help="Region the site is created in")
    @click.option(
        "--latitude", "-l",
        type=click.IntRange(-(2**31), 2**31 - 1),
        default=0,
        show_default=True,
        help="Site latitude",
    )
    @click.option(
        "--longitude", "-g",
        type=click.IntRange(-(2**31), 2**31 - 1),
        default=0,
        show_default=True,
        help="Site longitude",
    )
    @click.pass_context
    def create_site(
        ctx: click.Context,
        name: str,
        region_id: str | None,
        latitude: int,
        longitude: int,
    ) -> None:
        """Create a site in a region."""
        if not region_id:
            raise ValidationError("region flag required")
        check_region_filter(region_id)
        check_site_name(name)

        request = Site(name=name, site_lat=latitude, site_lng=longitude)
        with project_scope(ctx) as (client, project):
            response = HttpInfraService(client).create_site(
                project, region_id, request.to_payload()
            )
        check_response(
            response.status_code, response.reason, response.body,
            "error while creating site",
        )
        created = response.parse(Site)
        click.echo(f"Site '{name}' created successfully ({value_or_none(created.resource_id)})")

    @verbs.delete.command("site")
    @click.argument("site_id")
    @click.pass_context
    def delete_site(ctx: click.Context, site_id: str) -> None:
        """Delete a site."""
        with project_scope(ctx) as (client, project):
            response = HttpInfraService(client).delete_site(project, site_id)
        try:
            check_response(
                response.status_code, response.reason, response.body,
                "error while deleting site",
            )
        except OrchError as exc:
            if body_mentions(response.body, "site_resource not found"):
                raise NotFoundError("site does not exist") from exc
            raise
        click.echo(f"Site '{site_id}' deleted successfully")
