# hnc_core/models/switch_profile.py
from typing import List, Optional, Union

from pydantic import Field

from hnc_core.models.base import FabricModel

# A port range descriptor: "E1/49-56", a literal "E1/10", or a pre-expanded list
PortRangeDescriptor = Union[str, List[str]]


class PortProfile(FabricModel):
    """Speed profile applied to one port role."""

    port_profile: Optional[str] = None
    speed_gbps: float = 0


class ProfilePorts(FabricModel):
    endpoint_assignable: List[PortRangeDescriptor] = Field(default_factory=list)
    fabric_assignable: List[PortRangeDescriptor] = Field(default_factory=list)


class ProfileProfiles(FabricModel):
    endpoint: PortProfile = Field(default_factory=PortProfile)
    uplink: PortProfile = Field(default_factory=PortProfile)


class ProfileMeta(FabricModel):
    source: str = "fixture"
    version: str = "1.0"


class SwitchProfile(FabricModel):
    """Port inventory of one switch model, as handed over by the profile catalog."""

    model_id: str
    roles: List[str] = Field(min_length=1)
    ports: ProfilePorts = Field(default_factory=ProfilePorts)
    profiles: ProfileProfiles = Field(default_factory=ProfileProfiles)
    meta: ProfileMeta = Field(default_factory=ProfileMeta)

    @property
    def has_fabric_ports(self) -> bool:
        return len(self.ports.fabric_assignable) > 0
