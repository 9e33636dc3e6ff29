"""Application catalog records."""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum

from pydantic import Field

from orchcli.models.base import ApiModel


class ApplicationKind(StrEnum):
    """Catalog application kinds as named on the wire."""

    NORMAL = "KIND_NORMAL"
    ADDON = "KIND_ADDON"
    EXTENSION = "KIND_EXTENSION"

    @classmethod
    def from_flag(cls, value: str) -> ApplicationKind:
        """Parse the CLI spelling (``normal``, ``addon``, ``extension``)."""
        return cls(f"KIND_{value.strip().upper()}")

    def to_flag(self) -> str:
        return self.value.removeprefix("KIND_").lower()


class ParameterTemplate(ApiModel):
    """A value users are prompted for when deploying with a profile."""

    name: str
    type: str
    display_name: str | None = None
    default: str | None = None
    suggested_values: list[str] = Field(default_factory=list)


class DeploymentRequirement(ApiModel):
    name: str
    version: str


class Profile(ApiModel):
    """A named set of chart values for an application."""

    name: str
    display_name: str | None = None
    description: str | None = None
    chart_values: str | None = None
    parameter_templates: list[ParameterTemplate] = Field(default_factory=list)
    deployment_requirement: list[DeploymentRequirement] = Field(default_factory=list)
    create_time: datetime | None = None
    update_time: datetime | None = None


class Application(ApiModel):
    """A Helm-chart based application in the catalog."""

    name: str
    version: str
    kind: str | None = None
    display_name: str | None = None
    description: str | None = None
    chart_name: str = ""
    chart_version: str = ""
    helm_registry_name: str = ""
    image_registry_name: str | None = None
    profiles: list[Profile] = Field(default_factory=list)
    default_profile_name: str | None = None
    create_time: datetime | None = None
    update_time: datetime | None = None


class ListApplicationsResponse(ApiModel):
    applications: list[Application] = Field(default_factory=list)
    total_elements: int = 0


class GetApplicationResponse(ApiModel):
    application: Application


class GetApplicationVersionsResponse(ApiModel):
    application: list[Application] = Field(default_factory=list)


class ApplicationReference(ApiModel):
    name: str
    version: str


class ApplicationDependency(ApiModel):
    name: str
    requires: str


class DeploymentPackage(ApiModel):
    """A versioned bundle of application references."""

    name: str
    version: str
    display_name: str | None = None
    description: str | None = None
    kind: str | None = None
    application_references: list[ApplicationReference] = Field(default_factory=list)
    application_dependencies: list[ApplicationDependency] = Field(default_factory=list)
    profiles: list[Profile] = Field(default_factory=list)
    default_profile_name: str | None = None
    is_deployed: bool | None = None
    is_visible: bool | None = None
    create_time: datetime | None = None
    update_time: datetime | None = None


class ListDeploymentPackagesResponse(ApiModel):
    deployment_packages: list[DeploymentPackage] = Field(default_factory=list)
    total_elements: int = 0


class GetDeploymentPackageResponse(ApiModel):
    deployment_package: DeploymentPackage


class GetDeploymentPackageVersionsResponse(ApiModel):
    deployment_packages: list[DeploymentPackage] = Field(default_factory=list)
