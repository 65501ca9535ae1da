"""
Multi-class uplink allocation.

Every leaf class is sized from its own endpoint demand and leaf model, but all
classes land on one shared spine tier: a single global spine count, one
used-port tracker per spine, and one leaf id counter spanning the classes in
id order. The batch commits as a whole or not at all.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Mapping, Optional

from hnc_core.codebase.debug import spy_trace
from hnc_core.models.allocation import (
    AllocationIssue,
    AllocationSpec,
    ClassAllocation,
    MultiClassAllocationResult,
)
from hnc_core.models.fabric import FabricSpec, LeafClass
from hnc_core.models.sizing_policy import SizingPolicy
from hnc_core.models.switch_profile import SwitchProfile
from hnc_core.sizing import leaves_for_endpoints, spines_for_uplinks

from .ports import expand_port_ranges
from .uplinks import (
    SpineExhausted,
    SpinePool,
    allocate_uplinks,
    assign_leaves,
    leaf_capacity_issue,
    validate_allocation_constraints,
)

logger = logging.getLogger("hnc.allocator")


@dataclass(frozen=True)
class _ClassPlan:
    leaf_class: LeafClass
    leaf_profile: SwitchProfile
    endpoints: int
    leaves: int

    @property
    def uplinks(self) -> int:
        return self.leaves * self.leaf_class.uplinks_per_leaf


@spy_trace
def allocate_multi_class_uplinks(
    fabric_spec: FabricSpec,
    switch_profiles: Mapping[str, SwitchProfile],
    spine_profile: SwitchProfile,
    policy: Optional[SizingPolicy] = None,
) -> MultiClassAllocationResult:
    """Allocate uplinks for every leaf class against one shared spine pool.

    A fabric without leaf classes but with the legacy single-group fields is
    delegated to :func:`allocate_uplinks` and returned under ``legacy``.
    """
    policy = policy or SizingPolicy()
    if not fabric_spec.leaf_classes:
        return _allocate_legacy(fabric_spec, switch_profiles, spine_profile, policy)

    plans: List[_ClassPlan] = []
    issues: List[AllocationIssue] = []

    for leaf_class in fabric_spec.sorted_leaf_classes:
        model_id = leaf_class.leaf_model_id or fabric_spec.leaf_model_id
        leaf_profile = switch_profiles.get(model_id)
        if leaf_profile is None:
            issues.append(
                AllocationIssue(
                    kind="PROFILE_RESOLUTION",
                    message=f"Leaf profile not found for class {leaf_class.id} model: {model_id}",
                    context={"classId": leaf_class.id, "modelId": model_id},
                )
            )
            continue

        endpoints = leaf_class.endpoint_count
        downlinks = policy.downlinks_for(model_id, leaf_class.uplinks_per_leaf)
        plans.append(_ClassPlan(leaf_class, leaf_profile, endpoints, leaves_for_endpoints(endpoints, downlinks)))

    spines = spines_for_uplinks(sum(plan.uplinks for plan in plans), policy.spine_fabric_port_budget)

    # One spine tier for every class, so each class must split evenly across it
    for plan in plans:
        uplinks_per_leaf = plan.leaf_class.uplinks_per_leaf
        if uplinks_per_leaf % spines != 0:
            issues.append(
                AllocationIssue(
                    kind="CONSTRAINT_VIOLATION",
                    message=f"Class {plan.leaf_class.id}: uplinksPerLeaf ({uplinks_per_leaf}) must be divisible by spines ({spines})",
                    context={"classId": plan.leaf_class.id, "uplinksPerLeaf": uplinks_per_leaf, "spinesNeeded": spines},
                )
            )

    if issues:
        logger.debug("Multi-class allocation for %s rejected: %d issues", fabric_spec.name, len(issues))
        return MultiClassAllocationResult.failed(spines, issues)

    pool = SpinePool(expand_port_ranges(spine_profile.ports.fabric_assignable), spines)
    allocations: List[ClassAllocation] = []
    next_leaf_id = 0

    for plan in plans:
        class_spec = AllocationSpec(
            uplinks_per_leaf=plan.leaf_class.uplinks_per_leaf,
            leaves_needed=plan.leaves,
            spines_needed=spines,
            endpoint_count=plan.endpoints,
        )
        leaf_ports = expand_port_ranges(plan.leaf_profile.ports.fabric_assignable)

        class_issues = validate_allocation_constraints(class_spec, plan.leaf_profile, spine_profile)
        if not class_issues:
            capacity = leaf_capacity_issue(leaf_ports, class_spec.uplinks_per_leaf)
            class_issues = [capacity] if capacity else []
        if class_issues:
            logger.debug("Class %s rejected: %s", plan.leaf_class.id, "; ".join(i.message for i in class_issues))
            return MultiClassAllocationResult.failed(spines, _with_class(class_issues, plan.leaf_class.id))

        try:
            leaf_maps = assign_leaves(leaf_ports, class_spec.uplinks_per_leaf, plan.leaves, pool, next_leaf_id)
        except SpineExhausted as exc:
            logger.warning("Multi-class allocation for %s aborted in class %s: %s", fabric_spec.name, plan.leaf_class.id, exc)
            return MultiClassAllocationResult.failed(spines, _with_class([exc.to_issue()], plan.leaf_class.id))

        allocations.append(
            ClassAllocation(
                class_id=plan.leaf_class.id,
                leaf_maps=leaf_maps,
                total_endpoints=plan.endpoints,
                leaves_allocated=len(leaf_maps),
            )
        )
        next_leaf_id += len(leaf_maps)

    logger.debug(
        "Allocated %s: %d classes, %d leaves, %d spines",
        fabric_spec.name,
        len(allocations),
        next_leaf_id,
        spines,
    )
    return MultiClassAllocationResult(
        class_allocations=allocations,
        spine_utilization=pool.utilization,
        total_leaves_allocated=next_leaf_id,
        overall_issues=[],
    )


def _with_class(issues: List[AllocationIssue], class_id: str) -> List[AllocationIssue]:
    return [issue.model_copy(update={"context": {**issue.context, "classId": class_id}}) for issue in issues]


def _allocate_legacy(
    fabric_spec: FabricSpec,
    switch_profiles: Mapping[str, SwitchProfile],
    spine_profile: SwitchProfile,
    policy: SizingPolicy,
) -> MultiClassAllocationResult:
    if not fabric_spec.has_legacy_fields:
        return MultiClassAllocationResult.failed(
            0, [AllocationIssue(kind="CONSTRAINT_VIOLATION", message="No leaf classes defined")]
        )

    leaf_profile = switch_profiles.get(fabric_spec.leaf_model_id)
    if leaf_profile is None:
        return MultiClassAllocationResult.failed(
            0,
            [
                AllocationIssue(
                    kind="PROFILE_RESOLUTION",
                    message=f"Leaf profile not found for model: {fabric_spec.leaf_model_id}",
                    context={"modelId": fabric_spec.leaf_model_id},
                )
            ],
        )

    result = allocate_uplinks(legacy_allocation_spec(fabric_spec, policy), leaf_profile, spine_profile)

    return MultiClassAllocationResult(
        class_allocations=[],
        spine_utilization=list(result.spine_utilization),
        total_leaves_allocated=len(result.leaf_maps),
        overall_issues=list(result.issues),
        legacy=result,
    )


def legacy_allocation_spec(fabric_spec: FabricSpec, policy: Optional[SizingPolicy] = None) -> AllocationSpec:
    """Single-group sizing of a fabric that uses the legacy uplinks/endpoint fields."""
    policy = policy or SizingPolicy()
    uplinks_per_leaf = fabric_spec.uplinks_per_leaf or 0
    endpoint_count = fabric_spec.endpoint_count or 0
    downlinks = policy.downlinks_for(fabric_spec.leaf_model_id, uplinks_per_leaf)
    leaves = leaves_for_endpoints(endpoint_count, downlinks)
    return AllocationSpec(
        uplinks_per_leaf=uplinks_per_leaf,
        leaves_needed=leaves,
        spines_needed=spines_for_uplinks(leaves * uplinks_per_leaf, policy.spine_fabric_port_budget),
        endpoint_count=endpoint_count,
    )
