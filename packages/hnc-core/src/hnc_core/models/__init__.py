from .allocation import (
    AllocationIssue,
    AllocationResult,
    AllocationSpec,
    ClassAllocation,
    LeafAllocation,
    MultiClassAllocationResult,
    UplinkAssignment,
)
from .fabric import EndpointProfile, FabricSpec, LeafClass
from .sizing_policy import SizingPolicy
from .switch_profile import SwitchProfile
from .topology import DerivedTopology, ESLagGuard, FabricGuard, MCLagGuard

__all__ = [
    "AllocationIssue",
    "AllocationResult",
    "AllocationSpec",
    "ClassAllocation",
    "DerivedTopology",
    "ESLagGuard",
    "EndpointProfile",
    "FabricGuard",
    "FabricSpec",
    "LeafAllocation",
    "LeafClass",
    "MCLagGuard",
    "MultiClassAllocationResult",
    "SizingPolicy",
    "SwitchProfile",
    "UplinkAssignment",
]
