"""Remote provisioning (AMT) records."""

from __future__ import annotations

from orchcli.models.base import ApiModel


class AmtDomain(ApiModel):
    """An AMT provisioning domain profile."""

    profile_name: str
    domain_suffix: str | None = None
    provisioning_cert_storage_format: str | None = None
    expiration_date: str | None = None
    tenant_id: str | None = None
