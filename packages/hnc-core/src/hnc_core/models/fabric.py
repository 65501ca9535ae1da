# hnc_core/models/fabric.py
from typing import Any, Dict, List, Literal, Optional

from pydantic import Field, model_validator

from hnc_core.models.base import FabricModel

EndpointType = Literal["server", "storage", "compute", "network"]
LeafRole = Literal["standard", "border"]


class EndpointProfile(FabricModel):
    """A population of identical endpoints attached to a leaf class."""

    name: str
    ports_per_endpoint: int = Field(default=1, ge=1)
    type: Optional[EndpointType] = None
    count: Optional[int] = Field(default=None, ge=0)
    bandwidth: Optional[float] = Field(default=None, gt=0)
    redundancy: bool = False
    # ES-LAG intent flag; needs nics >= 2 to be satisfiable
    es_lag: bool = False
    nics: int = Field(default=1, ge=1)


class LeafClass(FabricModel):
    """A named, independently sized group of leaves."""

    id: str = Field(min_length=1)
    name: Optional[str] = None
    role: LeafRole = "standard"
    leaf_model_id: Optional[str] = None  # defaults to the fabric leaf model
    uplinks_per_leaf: int
    endpoint_profiles: List[EndpointProfile] = Field(default_factory=list)
    count: Optional[int] = Field(default=None, ge=0)  # explicit leaf count
    mc_lag: Optional[bool] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)

    @property
    def endpoint_count(self) -> int:
        return sum(profile.count or 0 for profile in self.endpoint_profiles)


class FabricSpec(FabricModel):
    """Demand description of one fabric.

    Either the legacy single-group fields (``uplinks_per_leaf``,
    ``endpoint_count``, ``endpoint_profile``) or ``leaf_classes`` are used,
    never both.
    """

    name: str
    spine_model_id: str
    leaf_model_id: str

    # legacy single-group shape
    uplinks_per_leaf: Optional[int] = None
    endpoint_count: Optional[int] = None
    endpoint_profile: Optional[EndpointProfile] = None

    # multi-class shape
    leaf_classes: Optional[List[LeafClass]] = None

    @model_validator(mode="after")
    def _check_shape(self) -> "FabricSpec":
        if not self.leaf_classes:
            return self
        if self.uplinks_per_leaf is not None or self.endpoint_count is not None:
            raise ValueError("leafClasses cannot be combined with legacy uplinksPerLeaf/endpointCount")
        seen: set[str] = set()
        duplicates: set[str] = set()
        for leaf_class in self.leaf_classes:
            if leaf_class.id in seen:
                duplicates.add(leaf_class.id)
            seen.add(leaf_class.id)
        if duplicates:
            raise ValueError(f"duplicate leaf class ids: {', '.join(sorted(duplicates))}")
        return self

    @property
    def is_multi_class(self) -> bool:
        return bool(self.leaf_classes)

    @property
    def has_legacy_fields(self) -> bool:
        return self.uplinks_per_leaf is not None and self.endpoint_count is not None

    @property
    def sorted_leaf_classes(self) -> List[LeafClass]:
        """Leaf classes in allocation order: case-insensitive id, raw id breaking ties."""
        return sorted(self.leaf_classes or [], key=lambda lc: (lc.id.casefold(), lc.id))
