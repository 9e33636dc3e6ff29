"""Organization and project (tenancy) records."""

from __future__ import annotations

from orchcli.models.base import ApiModel


class TenantSpec(ApiModel):
    description: str | None = None


class TenantStatusDetail(ApiModel):
    status_indicator: str | None = None
    message: str | None = None
    uid: str | None = None


class TenantStatus(ApiModel):
    project_status: TenantStatusDetail | None = None
    org_status: TenantStatusDetail | None = None

    @property
    def detail(self) -> TenantStatusDetail | None:
        return self.project_status or self.org_status


class Tenant(ApiModel):
    """A project or an organization.

    Both resources share a shape; only the key of the nested status block
    differs on the wire.
    """

    name: str | None = None
    spec: TenantSpec | None = None
    status: TenantStatus | None = None

    @property
    def description(self) -> str | None:
        return self.spec.description if self.spec else None

    @property
    def status_detail(self) -> TenantStatusDetail | None:
        return self.status.detail if self.status else None
