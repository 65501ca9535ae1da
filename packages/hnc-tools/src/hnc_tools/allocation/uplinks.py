"""
Counts-first uplink allocator.

Computes a deterministic leaf -> spine uplink port map for a single group of
identical leaves. Preconditions are checked in full before any port is
touched; any failure yields an empty ``leaf_maps`` and a zero-filled
``spine_utilization`` alongside the typed issues.

Round robin: each leaf walks its own sorted fabric port list from the start,
giving ``uplinks_per_leaf / spines_needed`` consecutive ports to each spine in
ascending spine order. Spine ports form one shared pool per spine, so every
uplink consumes a distinct spine port.
"""

from __future__ import annotations

import logging
import math
from typing import List, Sequence

from hnc_core.codebase.debug import spy_trace
from hnc_core.models.allocation import (
    AllocationIssue,
    AllocationResult,
    AllocationSpec,
    LeafAllocation,
    UplinkAssignment,
)
from hnc_core.models.switch_profile import SwitchProfile

from .ports import expand_port_ranges

logger = logging.getLogger("hnc.allocator")


class SpineExhausted(Exception):
    """A spine ran out of fabric ports partway through an allocation."""

    def __init__(self, spine_id: int):
        super().__init__(f"Ran out of spine fabric ports for spine {spine_id}")
        self.spine_id = spine_id

    def to_issue(self) -> AllocationIssue:
        return AllocationIssue(kind="RESOURCE_EXHAUSTION", message=str(self), context={"spineId": self.spine_id})


class SpinePool:
    """Per-call tracker of consumed spine ports and per-spine uplink counts.

    Ports are handed out lowest first and never returned, so each spine only
    needs a cursor into the sorted port list.
    """

    def __init__(self, spine_ports: Sequence[str], spine_count: int):
        self.spine_ports = list(spine_ports)
        self.utilization: List[int] = [0] * spine_count

    @property
    def spine_count(self) -> int:
        return len(self.utilization)

    def take(self, spine_id: int) -> str:
        cursor = self.utilization[spine_id]
        if cursor >= len(self.spine_ports):
            raise SpineExhausted(spine_id)
        self.utilization[spine_id] = cursor + 1
        return self.spine_ports[cursor]


def assign_leaves(
    leaf_ports: Sequence[str],
    uplinks_per_leaf: int,
    leaf_count: int,
    pool: SpinePool,
    first_leaf_id: int = 0,
) -> List[LeafAllocation]:
    """Round-robin ``leaf_count`` leaves onto ``pool``. Raises SpineExhausted."""
    per_spine = uplinks_per_leaf // pool.spine_count
    leaf_maps: List[LeafAllocation] = []

    for offset in range(leaf_count):
        uplinks: List[UplinkAssignment] = []
        port_index = 0
        for spine_id in range(pool.spine_count):
            for _ in range(per_spine):
                pool.take(spine_id)
                uplinks.append(UplinkAssignment(port=leaf_ports[port_index], to_spine=spine_id))
                port_index += 1
        leaf_maps.append(LeafAllocation(leaf_id=first_leaf_id + offset, uplinks=uplinks))

    return leaf_maps


def validate_allocation_constraints(
    spec: AllocationSpec, leaf_profile: SwitchProfile, spine_profile: SwitchProfile
) -> List[AllocationIssue]:
    """Every numeric and profile precondition violation, in a fixed order."""
    issues: List[AllocationIssue] = []

    def violation(message: str, **context) -> None:
        issues.append(AllocationIssue(kind="CONSTRAINT_VIOLATION", message=message, context=context))

    if spec.spines_needed > 0 and spec.uplinks_per_leaf % spec.spines_needed != 0:
        violation(
            f"Uplinks per leaf ({spec.uplinks_per_leaf}) must be divisible by number of spines ({spec.spines_needed})",
            uplinksPerLeaf=spec.uplinks_per_leaf,
            spinesNeeded=spec.spines_needed,
        )
    if spec.uplinks_per_leaf <= 0:
        violation("Uplinks per leaf must be positive", uplinksPerLeaf=spec.uplinks_per_leaf)
    if spec.leaves_needed <= 0:
        violation("Leaves needed must be positive", leavesNeeded=spec.leaves_needed)
    if spec.spines_needed <= 0:
        violation("Spines needed must be positive", spinesNeeded=spec.spines_needed)
    if not leaf_profile.has_fabric_ports:
        violation("Leaf profile has no fabric ports available", modelId=leaf_profile.model_id)
    if not spine_profile.has_fabric_ports:
        violation("Spine profile has no fabric ports available", modelId=spine_profile.model_id)

    return issues


def leaf_capacity_issue(leaf_ports: Sequence[str], uplinks_per_leaf: int) -> AllocationIssue | None:
    if len(leaf_ports) >= uplinks_per_leaf:
        return None
    return AllocationIssue(
        kind="CAPACITY_EXCEEDED",
        message=f"Leaf has only {len(leaf_ports)} fabric ports, need {uplinks_per_leaf}",
        context={"available": len(leaf_ports), "required": uplinks_per_leaf},
    )


def spine_capacity_issue(spine_ports: Sequence[str], spec: AllocationSpec) -> AllocationIssue | None:
    ports_per_spine = math.ceil(spec.total_uplinks / spec.spines_needed)
    if len(spine_ports) >= ports_per_spine:
        return None
    return AllocationIssue(
        kind="CAPACITY_EXCEEDED",
        message=f"Spine capacity exceeded: need {ports_per_spine} ports, spine has {len(spine_ports)} fabricAssignable",
        context={"available": len(spine_ports), "required": ports_per_spine},
    )


@spy_trace
def allocate_uplinks(spec: AllocationSpec, leaf_profile: SwitchProfile, spine_profile: SwitchProfile) -> AllocationResult:
    """Allocate uplinks for ``spec.leaves_needed`` identical leaves."""
    failed_width = max(1, spec.spines_needed)

    issues = validate_allocation_constraints(spec, leaf_profile, spine_profile)
    if issues:
        logger.debug("Allocation rejected: %s", "; ".join(i.message for i in issues))
        return AllocationResult.failed(failed_width, issues)

    leaf_ports = expand_port_ranges(leaf_profile.ports.fabric_assignable)
    spine_ports = expand_port_ranges(spine_profile.ports.fabric_assignable)

    capacity = [
        issue
        for issue in (leaf_capacity_issue(leaf_ports, spec.uplinks_per_leaf), spine_capacity_issue(spine_ports, spec))
        if issue is not None
    ]
    if capacity:
        logger.debug("Allocation over capacity: %s", "; ".join(i.message for i in capacity))
        return AllocationResult.failed(failed_width, capacity)

    pool = SpinePool(spine_ports, spec.spines_needed)
    try:
        leaf_maps = assign_leaves(leaf_ports, spec.uplinks_per_leaf, spec.leaves_needed, pool)
    except SpineExhausted as exc:
        logger.warning("Allocation aborted: %s", exc)
        return AllocationResult.failed(spec.spines_needed, [exc.to_issue()])

    logger.debug(
        "Allocated %d leaves x %d uplinks across %d spines",
        spec.leaves_needed,
        spec.uplinks_per_leaf,
        spec.spines_needed,
    )
    return AllocationResult(leaf_maps=leaf_maps, spine_utilization=pool.utilization, issues=[])


def validate_allocation_result(result: AllocationResult, spec: AllocationSpec) -> List[str]:
    """Independent audit of a successful allocation; empty list means consistent."""
    if result.issues:
        return []

    problems: List[str] = []

    if len(result.leaf_maps) != spec.leaves_needed:
        problems.append(f"Expected {spec.leaves_needed} leaves, got {len(result.leaf_maps)}")

    for leaf_map in result.leaf_maps:
        if len(leaf_map.uplinks) != spec.uplinks_per_leaf:
            problems.append(
                f"Leaf {leaf_map.leaf_id} has {len(leaf_map.uplinks)} uplinks, expected {spec.uplinks_per_leaf}"
            )

    if len(result.spine_utilization) != spec.spines_needed:
        problems.append(
            f"Expected {spec.spines_needed} spine utilization entries, got {len(result.spine_utilization)}"
        )

    if spec.spines_needed > 0:
        expected = spec.total_uplinks // spec.spines_needed
        for spine_id, used in enumerate(result.spine_utilization):
            if used != expected:
                problems.append(f"Spine {spine_id} utilization is {used}, expected {expected}")

    return problems

