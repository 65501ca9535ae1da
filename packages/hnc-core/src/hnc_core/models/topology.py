"""
Derived topology and structural guard records.

Guards are a tagged union keyed on ``guardType``; each variant carries its own
typed ``details`` payload. Field names and message text are part of the wire
contract with downstream consumers and must not change.
"""

from typing import Annotated, List, Literal, Union

from pydantic import Field

from hnc_core.models.base import FabricModel


class MCLagGuardDetails(FabricModel):
    class_id: str
    leaf_count: int
    mc_lag_enabled: Literal[True] = True


class MCLagGuard(FabricModel):
    """MC-LAG pairs leaves, so a class with it enabled needs an even count >= 2."""

    guard_type: Literal["MC_LAG_ODD_LEAF_COUNT"] = "MC_LAG_ODD_LEAF_COUNT"
    message: str
    details: MCLagGuardDetails

    @classmethod
    def for_class(cls, class_id: str, leaf_count: int) -> "MCLagGuard":
        return cls(
            message=f"MC-LAG requires even leaf count >= 2, but class '{class_id}' has {leaf_count} leaves",
            details=MCLagGuardDetails(class_id=class_id, leaf_count=leaf_count),
        )


class ESLagGuardDetails(FabricModel):
    leaf_class_id: str
    profile_name: str
    required_nics: int = 2
    actual_nics: int


class ESLagGuard(FabricModel):
    """ES-LAG multihoming needs at least two NICs per endpoint."""

    guard_type: Literal["ES_LAG_INVALID"] = "ES_LAG_INVALID"
    message: str
    details: ESLagGuardDetails

    @classmethod
    def for_profile(cls, class_id: str, profile_name: str, actual_nics: int) -> "ESLagGuard":
        return cls(
            message=(
                f"ES-LAG requires at least 2 NICs but profile '{profile_name}' "
                f"in class '{class_id}' has {actual_nics}"
            ),
            details=ESLagGuardDetails(leaf_class_id=class_id, profile_name=profile_name, actual_nics=actual_nics),
        )


FabricGuard = Annotated[Union[MCLagGuard, ESLagGuard], Field(discriminator="guard_type")]


class DerivedTopology(FabricModel):
    """Sizing and validation outcome for one FabricSpec."""

    leaves_needed: int
    spines_needed: int
    total_ports: int
    used_ports: int
    oversubscription_ratio: float
    is_valid: bool
    validation_errors: List[str] = Field(default_factory=list)
    guards: List[FabricGuard] = Field(default_factory=list)
