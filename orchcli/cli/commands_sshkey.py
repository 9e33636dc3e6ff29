"""SSH key (local account) commands for the infrastructure manager."""

from __future__ import annotations

import re

import click

from orchcli.cli.common import VerbGroups, echo_fields, get_config, project_scope
from orchcli.client.services import HttpInfraService
from orchcli.core.errors import NotFoundError, ValidationError
from orchcli.core.inputs import read_input
from orchcli.core.response import check_response, process_response
from orchcli.models.infra import ListLocalAccountsResponse, LocalAccount
from orchcli.ui.tables import print_table, value_or_none

SSH_KEY_HEADERS = ("Remote User", "Resource ID")
MAX_SSH_KEY_LENGTH = 800

_USERNAME_RE = re.compile(r"[a-z][a-z0-9-]{0,31}")
_SSH_KEY_RE = re.compile(r"(ssh-ed25519|ecdsa-sha2-nistp521) ([A-Za-z0-9+/=]+) ?(.*)")


def check_ssh_username(name: str) -> None:
    if not _USERNAME_RE.fullmatch(name):
        raise ValidationError("input is not a valid SSH username")


def read_ssh_key(path: str) -> str:
    """Read a public key file, accepting only ed25519 and nistp521 keys."""
    try:
        key = read_input(path).decode("utf-8").strip()
    except (OSError, UnicodeDecodeError) as exc:
        raise ValidationError(f"failed to read ssh key file: {exc}") from exc
    if len(key) > MAX_SSH_KEY_LENGTH:
        raise ValidationError(
            f"ssh key exceeds maximum length of {MAX_SSH_KEY_LENGTH} characters"
        )
    if not _SSH_KEY_RE.fullmatch(key):
        raise ValidationError("invalid ssh key format: must be ssh-ed25519 or ecdsa-sha2-nistp521")
    return key


def find_ssh_key(accounts: list[LocalAccount], name: str) -> LocalAccount:
    for account in accounts:
        if account.username == name:
            return account
    raise NotFoundError("no SSH key matches the given name")


def fetch_accounts(ctx: click.Context, message: str) -> list[LocalAccount] | None:
    """List local accounts; ``None`` when there is nothing to show."""
    config = get_config(ctx)
    with project_scope(ctx) as (client, project):
        response = HttpInfraService(client).list_local_accounts(project)
    if not process_response(
        response.status_code, response.reason, response.body,
        message, verbose=config.verbose,
    ):
        return None
    return response.parse(ListLocalAccountsResponse).local_accounts


def register_sshkey_commands(*, verbs: VerbGroups) -> None:
    """Register SSH key commands."""

    @verbs.list.command("sshkeys")
    @click.pass_context
    def list_ssh_keys(ctx: click.Context) -> None:
        """List SSH key remote users."""
        accounts = fetch_accounts(ctx, "error getting SSH key configurations")
        if accounts is None:
            return
        print_table(
            SSH_KEY_HEADERS,
            [(a.username, value_or_none(a.resource_id)) for a in accounts],
            debug_headers=get_config(ctx).debug_headers,
        )

    @verbs.get.command("sshkey")
    @click.argument("name")
    @click.pass_context
    def get_ssh_key(ctx: click.Context, name: str) -> None:
        """Show one SSH key remote user by name."""
        accounts = fetch_accounts(ctx, "error getting SSH key configuration")
        if accounts is None:
            return
        account = find_ssh_key(accounts, name)
        echo_fields(
            [
                ("Remote User Name", account.username),
                ("Resource ID", value_or_none(account.resource_id)),
                ("Key", account.ssh_key),
            ]
        )

    @verbs.create.command("sshkey")
    @click.argument("name")
    @click.argument("key_path")
    @click.pass_context
    def create_ssh_key(ctx: click.Context, name: str, key_path: str) -> None:
        """Create an SSH key remote user from a public key file."""
        check_ssh_username(name)
        account = LocalAccount(username=name, ssh_key=read_ssh_key(key_path))
        with project_scope(ctx) as (client, project):
            response = HttpInfraService(client).create_local_account(
                project, account.to_payload()
            )
        check_response(
            response.status_code, response.reason, response.body,
            f"error while creating SSH key from {key_path}",
        )
        click.echo(f"SSH key '{name}' created successfully")

    @verbs.delete.command("sshkey")
    @click.argument("name")
    @click.pass_context
    def delete_ssh_key(ctx: click.Context, name: str) -> None:
        """Delete an SSH key remote user by name."""
        with project_scope(ctx) as (client, project):
            infra = HttpInfraService(client)
            response = infra.list_local_accounts(project)
            check_response(
                response.status_code, response.reason, response.body,
                "error getting SSH keys",
            )
            account = find_ssh_key(
                response.parse(ListLocalAccountsResponse).local_accounts, name
            )
            response = infra.delete_local_account(project, account.resource_id or "")
        check_response(
            response.status_code, response.reason, response.body,
            f"error deleting SSH key {name}",
        )
        click.echo(f"SSH key '{name}' deleted successfully")
