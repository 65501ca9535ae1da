"""Port range parsing utilities for fabric port allocation.

Supported descriptor formats:
    - Range:          "E1/49-56"  -> ["E1/49", "E1/50", ..., "E1/56"]
    - Literal port:   "E1/10"     -> ["E1/10"]
    - Discrete list:  ["E1/5", "E1/1"] -> ["E1/1", "E1/5"] (sorted, not expanded)

A backwards range ("E1/56-49") expands to an empty list rather than raising.
"""

import re
from typing import AbstractSet, Iterable, List, Optional, Sequence, Tuple

from hnc_core.models.switch_profile import PortRangeDescriptor

_RANGE_RE = re.compile(r"^(?P<prefix>.+)/(?P<start>\d+)-(?P<end>\d+)$")
_PORT_RE = re.compile(r"^(?P<prefix>.+)/(?P<number>\d+)$")


def port_sort_key(port: str) -> Tuple[str, int, str]:
    """Sort by non-numeric prefix, then numeric suffix, so ".../9" precedes ".../10"."""
    match = _PORT_RE.match(port)
    if match:
        return match.group("prefix"), int(match.group("number")), port
    return port, 0, port


def parse_port_range(descriptor: PortRangeDescriptor) -> List[str]:
    """Expand one port range descriptor into individual port names."""
    if isinstance(descriptor, (list, tuple)):
        return sorted(descriptor, key=port_sort_key)

    if not isinstance(descriptor, str):
        raise TypeError(f"port range must be a string or list of strings, got {type(descriptor).__name__}")

    match = _RANGE_RE.match(descriptor)
    if match:
        prefix = match.group("prefix")
        start, end = int(match.group("start")), int(match.group("end"))
        # start > end yields an empty range
        return [f"{prefix}/{n}" for n in range(start, end + 1)]

    return [descriptor]


def expand_port_ranges(descriptors: Iterable[PortRangeDescriptor]) -> List[str]:
    """Expand every descriptor, drop duplicates, and sort ascending."""
    ports: set[str] = set()
    for descriptor in descriptors:
        ports.update(parse_port_range(descriptor))
    return sorted(ports, key=port_sort_key)


def get_next_available_port(used_ports: AbstractSet[str], available_ports: Sequence[str]) -> Optional[str]:
    """First port in ``available_ports`` not yet in ``used_ports``; None when exhausted."""
    for port in available_ports:
        if port not in used_ports:
            return port
    return None


def is_valid_port(port: str, available_ports: Sequence[str]) -> bool:
    return port in available_ports
