"""Leaf/spine count arithmetic shared by the topology deriver and the allocators."""

import math


def leaves_for_endpoints(endpoint_count: int, downlink_ports: int) -> int:
    """Leaves needed to land ``endpoint_count`` endpoints; 0 when nothing fits."""
    if downlink_ports <= 0 or endpoint_count <= 0:
        return 0
    return math.ceil(endpoint_count / downlink_ports)


def spines_for_uplinks(total_uplinks: int, spine_port_budget: int) -> int:
    """At least one spine, enough to terminate every uplink."""
    return max(1, math.ceil(total_uplinks / spine_port_budget))


def oversubscription(downlinks: int, uplinks: int) -> float:
    return 0.0 if uplinks <= 0 else downlinks / uplinks
