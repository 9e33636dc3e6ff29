"""Shared base for REST request/response records."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    """Record exchanged with a platform REST service.

    Fields are snake_case in Python and camelCase on the wire.  Unknown
    fields returned by the backend are ignored.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    def to_payload(self, *, exclude: set[str] | None = None) -> dict[str, Any]:
        """Serialize for a request body, dropping unset optional fields."""
        return self.model_dump(by_alias=True, exclude_none=True, exclude=exclude, mode="json")
