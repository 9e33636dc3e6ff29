"""Thin synchronous wrapper over ``httpx.Client``.

Responses are handed back as :class:`ApiResponse` records whatever their
status; deciding what a status means is left to
:mod:`orchcli.core.response`.  Only transport failures raise here.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from typing import Any, TypeVar

import httpx
from pydantic import BaseModel

from orchcli import __version__
from orchcli.branding import CLI_PRIMARY_COMMAND
from orchcli.core.errors import InvalidFormatError, NoResponseError
from orchcli.core.response import transport_error

logger = logging.getLogger(__name__)

TOKEN_ENV_VAR = "MT_GW_TOKEN"
DEFAULT_TIMEOUT = 30.0

ModelT = TypeVar("ModelT", bound=BaseModel)


@dataclass(frozen=True)
class ApiResponse:
    """Status, reason phrase and raw body of one HTTP exchange."""

    status_code: int
    reason: str
    body: bytes

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code <= 299

    def json(self) -> Any:
        if not self.body:
            return None
        try:
            return json.loads(self.body)
        except ValueError as exc:
            raise InvalidFormatError(f"invalid JSON in response body: {exc}") from exc

    def parse(self, model: type[ModelT]) -> ModelT:
        """Validate the JSON body into ``model``."""
        return model.model_validate(self.json() or {})


class OrchClient:
    """One HTTP session against the orchestrator API gateway."""

    def __init__(
        self,
        api_endpoint: str,
        *,
        token: str | None = None,
        verbose: bool = False,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        headers = {"User-Agent": f"{CLI_PRIMARY_COMMAND}/{__version__}"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self.verbose = verbose
        try:
            self._client = httpx.Client(
                base_url=api_endpoint,
                headers=headers,
                timeout=timeout,
                transport=transport,
            )
        except (httpx.InvalidURL, httpx.UnsupportedProtocol) as exc:
            raise InvalidFormatError(f"invalid api-endpoint {api_endpoint}: {exc}") from exc

    @classmethod
    def from_environment(
        cls,
        api_endpoint: str,
        *,
        noauth: bool = False,
        verbose: bool = False,
        transport: httpx.BaseTransport | None = None,
    ) -> OrchClient:
        """Build a client, picking the access token up from the environment."""
        token = None if noauth else os.environ.get(TOKEN_ENV_VAR)
        if not noauth and not token:
            logger.debug("%s not set, sending requests without a token", TOKEN_ENV_VAR)
        return cls(api_endpoint, token=token, verbose=verbose, transport=transport)

    def __enter__(self) -> OrchClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json_body: Any = None,
    ) -> ApiResponse:
        """Send a request and return its response, whatever the status."""
        clean_params = {k: v for k, v in (params or {}).items() if v not in (None, "", [])}
        logger.debug("%s %s params=%s", method, path, clean_params)
        try:
            response = self._client.request(
                method,
                path.lstrip("/"),
                params=clean_params or None,
                json=json_body,
            )
        except httpx.InvalidURL as exc:
            raise InvalidFormatError(f"invalid request URL: {exc}") from exc
        except httpx.HTTPError as exc:
            error = transport_error(exc)
            if self.verbose and isinstance(error, NoResponseError):
                error = NoResponseError(f"{error.message}: {exc}")
            raise error from exc

        logger.debug("%s %s -> %d", method, path, response.status_code)
        return ApiResponse(
            status_code=response.status_code,
            reason=response.reason_phrase,
            body=response.content,
        )

    def get(self, path: str, **params: Any) -> ApiResponse:
        return self.request("GET", path, params=params)

    def post(self, path: str, body: Any) -> ApiResponse:
        return self.request("POST", path, json_body=body)

    def put(self, path: str, body: Any) -> ApiResponse:
        return self.request("PUT", path, json_body=body)

    def patch(self, path: str, body: Any) -> ApiResponse:
        return self.request("PATCH", path, json_body=body)

    def delete(self, path: str, **params: Any) -> ApiResponse:
        return self.request("DELETE", path, params=params)
