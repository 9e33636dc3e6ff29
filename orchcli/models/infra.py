"""Infrastructure manager records: regions, sites, hosts and SSH keys."""

from __future__ import annotations

from enum import StrEnum

from pydantic import Field

from orchcli.models.base import ApiModel

HOST_NOT_CONNECTED = "Not connected"
HOST_WAITING_ON_AGENTS = "Waiting on node agents"


class MetadataItem(ApiModel):
    key: str
    value: str


class RegionRef(ApiModel):
    resource_id: str | None = None
    name: str | None = None


class Region(ApiModel):
    """A node in the location hierarchy (country, state, city...)."""

    resource_id: str | None = None
    name: str | None = None
    parent_id: str | None = None
    parent_region: RegionRef | None = None
    metadata: list[MetadataItem] = Field(default_factory=list)
    total_sites: int | None = None


class Site(ApiModel):
    """A physical location inside a region that hosts are assigned to."""

    resource_id: str | None = None
    name: str | None = None
    region_id: str | None = None
    region: RegionRef | None = None
    site_lat: int | None = None
    site_lng: int | None = None

    def region_label(self) -> str:
        region_name = self.region.name if self.region else None
        return f"{self.region_id or ''} ({region_name or ''})"


class ListRegionsResponse(ApiModel):
    regions: list[Region] = Field(default_factory=list)
    total_elements: int = 0


class ListSitesResponse(ApiModel):
    sites: list[Site] = Field(default_factory=list)
    total_elements: int = 0
    has_next: bool = False


# ---------------------------------------------------------------------------
# Hosts
# ---------------------------------------------------------------------------


class PowerState(StrEnum):
    ON = "POWER_STATE_ON"
    OFF = "POWER_STATE_OFF"
    CYCLE = "POWER_STATE_POWER_CYCLE"
    HIBERNATE = "POWER_STATE_HIBERNATE"
    RESET = "POWER_STATE_RESET"
    SLEEP = "POWER_STATE_SLEEP"


class PowerCommandPolicy(StrEnum):
    IMMEDIATE = "POWER_COMMAND_POLICY_IMMEDIATE"
    ORDERED = "POWER_COMMAND_POLICY_ORDERED"


class AmtState(StrEnum):
    PROVISIONED = "AMT_STATE_PROVISIONED"
    UNPROVISIONED = "AMT_STATE_UNPROVISIONED"


class NamedRef(ApiModel):
    name: str | None = None


class Workload(ApiModel):
    name: str | None = None


class WorkloadMember(ApiModel):
    workload: Workload | None = None


class OsRef(ApiModel):
    name: str | None = None
    fixed_cves: str | None = None


class Instance(ApiModel):
    """The operating system instance provisioned on a host."""

    instance_id: str | None = Field(default=None, alias="instanceID")
    host_id: str | None = Field(default=None, alias="hostID")
    os: OsRef | None = None
    current_os: OsRef | None = None
    provisioning_status: str | None = None
    instance_status_detail: str | None = None
    update_status: str | None = None
    existing_cves: str | None = None
    custom_config: list[NamedRef] = Field(default_factory=list)
    workload_members: list[WorkloadMember] = Field(default_factory=list)

    def workload_name(self) -> str | None:
        for member in self.workload_members:
            if member.workload and member.workload.name:
                return member.workload.name
        return None


class IpAddress(ApiModel):
    address: str | None = None


class HostNic(ApiModel):
    device_name: str | None = None
    ipaddresses: list[IpAddress] = Field(default_factory=list)


class Host(ApiModel):
    """An edge node known to the infrastructure manager."""

    resource_id: str | None = None
    name: str = ""
    host_status: str | None = None
    serial_number: str | None = None
    uuid: str | None = None
    bios_vendor: str | None = None
    product_name: str | None = None
    cpu_model: str | None = None
    cpu_cores: int | None = None
    cpu_architecture: str | None = None
    cpu_threads: int | None = None
    cpu_sockets: int | None = None
    site_id: str | None = None
    site: NamedRef | None = None
    instance: Instance | None = None
    host_nics: list[HostNic] = Field(default_factory=list)
    user_lvm_size: int | None = None
    current_amt_state: str | None = None
    desired_amt_state: str | None = None
    current_power_state: str | None = None
    desired_power_state: str | None = None
    power_command_policy: str | None = None
    power_on_time: int | None = None

    def status_label(self) -> str:
        """Host status, or the agent start-up state an ``error`` really means."""
        if not self.host_status:
            return HOST_NOT_CONNECTED
        detail = self.instance.instance_status_detail if self.instance else None
        if self.host_status.lower() == "error" and detail and "of 10 components running" in detail:
            return HOST_WAITING_ON_AGENTS
        return self.host_status


class ListHostsResponse(ApiModel):
    hosts: list[Host] = Field(default_factory=list)
    total_elements: int = 0
    has_next: bool = False


class HostPatch(ApiModel):
    """Body of a host update; the backend requires the current name."""

    name: str
    desired_power_state: PowerState | None = None
    power_command_policy: PowerCommandPolicy | None = None
    desired_amt_state: AmtState | None = None


class InstancePatch(ApiModel):
    os_update_policy_id: str = Field(alias="osUpdatePolicyID")


class CveEntry(ApiModel):
    cve_id: str = Field(default="", alias="cve_id")
    priority: str = ""
    affected_packages: list[str] = Field(default_factory=list, alias="affected_packages")


# ---------------------------------------------------------------------------
# SSH keys
# ---------------------------------------------------------------------------


class LocalAccount(ApiModel):
    """A remote user with the SSH public key installed on provisioned hosts."""

    resource_id: str | None = None
    username: str
    ssh_key: str


class ListLocalAccountsResponse(ApiModel):
    local_accounts: list[LocalAccount] = Field(default_factory=list)
    total_elements: int = 0
