"""Test helpers: an in-memory orchestrator API behind ``httpx.MockTransport``."""

from __future__ import annotations

import json
from collections.abc import Callable
from typing import Any

import httpx
from click.testing import CliRunner, Result

from orchcli.cli.main import cli
from orchcli.client.http import OrchClient
from orchcli.utils.config import CLIConfig

PROJECT = "demo"

Handler = Callable[[httpx.Request], httpx.Response]


class FakeApi:
    """Route table keyed by ``(method, path)`` that records every request.

    Unrouted requests get a 404.  The project lookup every project-scoped
    command performs is routed by default.
    """

    def __init__(self, project: str = PROJECT) -> None:
        self.routes: dict[tuple[str, str], Handler] = {}
        self.requests: list[httpx.Request] = []
        self.add("GET", f"/v1/projects/{project}", json={"name": project})

    def add(
        self,
        method: str,
        path: str,
        *,
        status: int = 200,
        json: Any = None,
        text: str | None = None,
    ) -> FakeApi:
        def respond(request: httpx.Request) -> httpx.Response:
            if text is not None:
                return httpx.Response(status, text=text)
            if json is None:
                return httpx.Response(status)
            return httpx.Response(status, json=json)

        self.routes[(method, path)] = respond
        return self

    def route(self, method: str, path: str, handler: Handler) -> FakeApi:
        self.routes[(method, path)] = handler
        return self

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        handler = self.routes.get((request.method, request.url.path))
        if handler is None:
            return httpx.Response(404, json={"message": "no route"})
        return handler(request)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    def client_factory(self, config: CLIConfig) -> OrchClient:
        """Build the command client the usual way, routed to this table."""
        return OrchClient.from_environment(
            config.api_endpoint,
            noauth=config.noauth,
            verbose=config.verbose,
            transport=self.transport,
        )

    def sent(self, method: str, path: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.method == method and r.url.path == path]

    def body(self, method: str, path: str) -> Any:
        """JSON body of the last matching request."""
        matches = self.sent(method, path)
        assert matches, f"no {method} {path} request was sent"
        return json.loads(matches[-1].content)


def run_cli(api: FakeApi | None, args: list[str], *, project: str | None = PROJECT) -> Result:
    """Invoke the CLI against ``api`` with ``--project`` set."""
    argv = ["--project", project, *args] if project else list(args)
    obj: dict[str, Any] = {}
    if api is not None:
        obj["client_factory"] = api.client_factory
    return CliRunner().invoke(cli, argv, obj=obj)
