"""Tests for the httpx client wrapper and service paths."""

from __future__ import annotations

import httpx
import pytest

from orchcli.client.http import ApiResponse, OrchClient
from orchcli.client.services import (
    HttpCatalogService,
    HttpInfraService,
    HttpTenancyService,
    require_project,
)
from orchcli.core.errors import (
    InvalidFormatError,
    NoResponseError,
    UnauthenticatedError,
    ValidationError,
)
from orchcli.models.catalog import GetApplicationResponse
from tests.helpers import FakeApi


def _client(api: FakeApi, **kwargs: object) -> OrchClient:
    return OrchClient("https://api.example.com/", transport=api.transport, **kwargs)


def test_token_from_environment_is_sent(api: FakeApi) -> None:
    with OrchClient.from_environment("https://api.example.com/", transport=api.transport) as client:
        client.get("/v1/projects/demo")
    request = api.requests[-1]
    assert request.headers["Authorization"] == "Bearer test-token"
    assert request.headers["User-Agent"].startswith("orch-cli/")


def test_noauth_sends_no_token(api: FakeApi) -> None:
    with OrchClient.from_environment(
        "https://api.example.com/", noauth=True, transport=api.transport
    ) as client:
        client.get("/v1/projects/demo")
    assert "Authorization" not in api.requests[-1].headers


def test_empty_params_are_dropped(api: FakeApi) -> None:
    with _client(api) as client:
        HttpCatalogService(client).list_applications(
            "demo", order_by="name", filter=None, kinds=["KIND_NORMAL", "KIND_ADDON"]
        )
    params = api.requests[-1].url.params
    assert params["orderBy"] == "name"
    assert params.get_list("kinds") == ["KIND_NORMAL", "KIND_ADDON"]
    assert "filter" not in params


def test_path_segments_are_quoted(api: FakeApi) -> None:
    with _client(api) as client:
        HttpInfraService(client).get_region("demo", "region/1")
    assert api.requests[-1].url.raw_path == b"/v1/projects/demo/regions/region%2F1"


def test_non_success_status_is_returned_not_raised(api: FakeApi) -> None:
    api.add("GET", "/v1/orgs", status=500, json={"message": "boom"})
    with _client(api) as client:
        response = HttpTenancyService(client).list_tenants("orgs")
    assert response.status_code == 500
    assert response.reason == "Internal Server Error"
    assert not response.ok


def test_connection_failure_is_no_response() -> None:
    def refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = OrchClient("https://api.example.com/", transport=httpx.MockTransport(refuse))
    with client, pytest.raises(NoResponseError) as excinfo:
        client.get("/v1/orgs")
    assert "connection refused" not in str(excinfo.value)


def test_connection_failure_detail_when_verbose() -> None:
    def refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = OrchClient(
        "https://api.example.com/", verbose=True, transport=httpx.MockTransport(refuse)
    )
    with client, pytest.raises(NoResponseError, match="connection refused"):
        client.get("/v1/orgs")


def test_dns_failure_means_expired_token() -> None:
    def gateway(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("504 DNS look up failed", request=request)

    client = OrchClient("https://api.example.com/", transport=httpx.MockTransport(gateway))
    with client, pytest.raises(UnauthenticatedError, match="token expired"):
        client.get("/v1/orgs")


def test_api_response_parsing() -> None:
    response = ApiResponse(
        200,
        "OK",
        b'{"application": {"name": "web", "version": "1.0.0", "chartName": "web"}}',
    )
    app = response.parse(GetApplicationResponse).application
    assert (app.name, app.chart_name) == ("web", "web")
    assert ApiResponse(204, "No Content", b"").json() is None
    with pytest.raises(InvalidFormatError, match="invalid JSON"):
        ApiResponse(200, "OK", b"{not json").json()


def test_require_project(api: FakeApi) -> None:
    with _client(api) as client:
        tenancy = HttpTenancyService(client)
        assert require_project(tenancy, "demo") == "demo"
        with pytest.raises(ValidationError, match='required flag "project" not set'):
            require_project(tenancy, "")
        with pytest.raises(ValidationError, match="project other does not exist"):
            require_project(tenancy, "other")
