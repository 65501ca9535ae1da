# hnc_core/models/allocation.py
from typing import Any, Dict, Iterable, List, Literal, Optional

from pydantic import Field, field_serializer

from hnc_core.models.base import FabricModel

IssueKind = Literal[
    "CONSTRAINT_VIOLATION",
    "CAPACITY_EXCEEDED",
    "RESOURCE_EXHAUSTION",
    "PROFILE_RESOLUTION",
]


class AllocationIssue(FabricModel):
    """A single allocation failure with its kind, message, and context."""

    kind: IssueKind
    message: str
    context: Dict[str, Any] = Field(default_factory=dict)

    def __str__(self) -> str:
        return self.message


def issue_messages(issues: Iterable[AllocationIssue]) -> List[str]:
    return [issue.message for issue in issues]


class AllocationSpec(FabricModel):
    """Normalized sizing input to the single-class allocator."""

    uplinks_per_leaf: int
    leaves_needed: int
    spines_needed: int
    endpoint_count: int = 0

    @property
    def total_uplinks(self) -> int:
        return self.leaves_needed * self.uplinks_per_leaf


class UplinkAssignment(FabricModel):
    port: str
    to_spine: int


class LeafAllocation(FabricModel):
    leaf_id: int
    uplinks: List[UplinkAssignment]


class AllocationResult(FabricModel):
    """Single-class allocation outcome.

    On failure ``leaf_maps`` is empty and ``spine_utilization`` is all zeros.
    Issues serialize as their plain message strings.
    """

    leaf_maps: List[LeafAllocation] = Field(default_factory=list)
    spine_utilization: List[int] = Field(default_factory=list)
    issues: List[AllocationIssue] = Field(default_factory=list)

    @field_serializer("issues")
    def _issues_as_messages(self, issues: List[AllocationIssue]) -> List[str]:
        return issue_messages(issues)

    @classmethod
    def failed(cls, spine_count: int, issues: Iterable[AllocationIssue]) -> "AllocationResult":
        return cls(leaf_maps=[], spine_utilization=[0] * spine_count, issues=list(issues))

    @property
    def ok(self) -> bool:
        return not self.issues

    @property
    def messages(self) -> List[str]:
        return issue_messages(self.issues)


class ClassAllocation(FabricModel):
    """Allocation of one leaf class inside a multi-class fabric."""

    class_id: str
    leaf_maps: List[LeafAllocation]
    total_endpoints: int
    leaves_allocated: int
    issues: List[AllocationIssue] = Field(default_factory=list)

    @field_serializer("issues")
    def _issues_as_messages(self, issues: List[AllocationIssue]) -> List[str]:
        return issue_messages(issues)


class MultiClassAllocationResult(FabricModel):
    """Outcome of allocating every leaf class against one shared spine pool.

    ``class_allocations`` commit together or not at all. ``legacy`` is set
    only when a single-group fabric was delegated to the single-class allocator.
    """

    class_allocations: List[ClassAllocation] = Field(default_factory=list)
    spine_utilization: List[int] = Field(default_factory=list)
    total_leaves_allocated: int = 0
    overall_issues: List[AllocationIssue] = Field(default_factory=list)
    legacy: Optional[AllocationResult] = None

    @field_serializer("overall_issues")
    def _issues_as_messages(self, issues: List[AllocationIssue]) -> List[str]:
        return issue_messages(issues)

    @classmethod
    def failed(cls, spine_count: int, issues: Iterable[AllocationIssue]) -> "MultiClassAllocationResult":
        return cls(spine_utilization=[0] * spine_count, overall_issues=list(issues))

    @property
    def ok(self) -> bool:
        return not self.overall_issues

    @property
    def messages(self) -> List[str]:
        return issue_messages(self.overall_issues)
