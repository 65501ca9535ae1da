"""
Topology derivation for leaf-spine fabrics.

Sizes a FabricSpec into leaf and spine counts, computes port totals and the
oversubscription ratio, and validates the result. Capacity and structural
problems land in ``validation_errors``; semantic constraints (MC-LAG pairing,
ES-LAG multihoming) are reported separately as structured guards. Both flip
``is_valid`` to False. Pure function: no I/O, no caching.
"""

from __future__ import annotations

import logging

from hnc_core.codebase.debug import spy_trace
from hnc_core.models.fabric import FabricSpec, LeafClass
from hnc_core.models.sizing_policy import SizingPolicy
from hnc_core.models.topology import DerivedTopology, ESLagGuard, FabricGuard, MCLagGuard
from hnc_core.sizing import leaves_for_endpoints, oversubscription, spines_for_uplinks

logger = logging.getLogger("hnc.deriver")


@spy_trace
def derive_topology(spec: FabricSpec, policy: SizingPolicy | None = None) -> DerivedTopology:
    """Size and validate a fabric; multi-class when leaf classes are present."""
    policy = policy or SizingPolicy()
    if spec.leaf_classes:
        return _derive_multi_class(spec, policy)
    return _derive_legacy(spec, policy)


def class_leaf_count(leaf_class: LeafClass, leaf_ports: int) -> int:
    """Explicit class count when set, otherwise computed from endpoint demand."""
    if leaf_class.count:
        return leaf_class.count
    return leaves_for_endpoints(leaf_class.endpoint_count, leaf_ports - leaf_class.uplinks_per_leaf)


def validate_guards(leaf_class: LeafClass, leaf_count: int) -> list[FabricGuard]:
    """Semantic guard checks for one leaf class."""
    guards: list[FabricGuard] = []

    for profile in leaf_class.endpoint_profiles:
        if profile.es_lag and profile.nics < 2:
            guards.append(ESLagGuard.for_profile(leaf_class.id, profile.name, profile.nics))

    if leaf_class.mc_lag is True and (leaf_count % 2 != 0 or leaf_count < 2):
        guards.append(MCLagGuard.for_class(leaf_class.id, leaf_count))

    return guards


def _spines_needed(total_leaves: int, total_uplinks: int, policy: SizingPolicy) -> int:
    if total_leaves <= 0 or total_uplinks <= 0:
        return 0
    return spines_for_uplinks(total_uplinks, policy.spine_fabric_port_budget)


def _derive_multi_class(spec: FabricSpec, policy: SizingPolicy) -> DerivedTopology:
    # Sort classes by id so errors and guards come out in a stable order
    sorted_classes = spec.sorted_leaf_classes

    total_leaves = 0
    total_endpoints = 0
    total_uplinks = 0
    leaf_port_total = 0
    per_class_errors: list[str] = []
    guards: list[FabricGuard] = []

    for leaf_class in sorted_classes:
        leaf_ports = policy.leaf_ports_for(leaf_class.leaf_model_id or spec.leaf_model_id)
        class_endpoints = leaf_class.endpoint_count
        class_leaves = class_leaf_count(leaf_class, leaf_ports)

        total_leaves += class_leaves
        total_endpoints += class_endpoints
        total_uplinks += class_leaves * leaf_class.uplinks_per_leaf
        leaf_port_total += class_leaves * leaf_ports

        if leaf_class.uplinks_per_leaf > leaf_ports / 2:
            per_class_errors.append(f"Class {leaf_class.id}: Too many uplinks per leaf ({leaf_class.uplinks_per_leaf})")
        if class_leaves == 0 and class_endpoints > 0:
            per_class_errors.append(f"Class {leaf_class.id}: No leaves computed")

        guards.extend(validate_guards(leaf_class, class_leaves))

    spines = _spines_needed(total_leaves, total_uplinks, policy)
    ratio = oversubscription(total_endpoints, total_uplinks)

    validation_errors = list(per_class_errors)
    if total_leaves == 0:
        validation_errors.append("No leaves computed")
    if spines == 0:
        validation_errors.append("No spines computed")
    if ratio > policy.max_oversubscription_ratio:
        validation_errors.append(f"Oversubscription too high: {ratio:.2f}:1")

    # All classes share one spine tier, so every class must split evenly across it
    for leaf_class in sorted_classes:
        if spines > 1 and leaf_class.uplinks_per_leaf % spines != 0:
            validation_errors.append(
                f"Class {leaf_class.id}: uplinksPerLeaf ({leaf_class.uplinks_per_leaf}) must be divisible by spines ({spines})"
            )

    logger.debug(
        "Derived %s: %d classes, %d leaves, %d spines, %d guards",
        spec.name,
        len(sorted_classes),
        total_leaves,
        spines,
        len(guards),
    )

    return DerivedTopology(
        leaves_needed=total_leaves,
        spines_needed=spines,
        total_ports=leaf_port_total + spines * policy.spine_fabric_port_budget,
        used_ports=total_endpoints + total_uplinks * 2,
        oversubscription_ratio=ratio,
        is_valid=not validation_errors and not guards,
        validation_errors=validation_errors,
        guards=guards,
    )


def _derive_legacy(spec: FabricSpec, policy: SizingPolicy) -> DerivedTopology:
    uplinks_per_leaf = spec.uplinks_per_leaf or 0
    endpoint_count = spec.endpoint_count or 0
    leaf_ports = policy.leaf_ports_for(spec.leaf_model_id)

    leaves = leaves_for_endpoints(endpoint_count, leaf_ports - uplinks_per_leaf)
    total_uplinks = leaves * uplinks_per_leaf
    spines = _spines_needed(leaves, total_uplinks, policy)
    ratio = oversubscription(endpoint_count, total_uplinks)

    validation_errors: list[str] = []
    if leaves == 0:
        validation_errors.append("No leaves computed")
    if spines == 0:
        validation_errors.append("No spines computed")
    if uplinks_per_leaf > leaf_ports / 2:
        validation_errors.append("Too many uplinks per leaf")
    if ratio > policy.max_oversubscription_ratio:
        validation_errors.append(f"Oversubscription too high: {ratio:.2f}:1")

    logger.debug("Derived %s (legacy): %d leaves, %d spines", spec.name, leaves, spines)

    return DerivedTopology(
        leaves_needed=leaves,
        spines_needed=spines,
        total_ports=leaves * leaf_ports + spines * policy.spine_fabric_port_budget,
        used_ports=endpoint_count + total_uplinks * 2,
        oversubscription_ratio=ratio,
        is_valid=not validation_errors,
        validation_errors=validation_errors,
        guards=[],
    )
