"""Uplink allocation package."""

from .multi_class import allocate_multi_class_uplinks, legacy_allocation_spec
from .ports import expand_port_ranges, get_next_available_port, is_valid_port, parse_port_range, port_sort_key
from .uplinks import allocate_uplinks, validate_allocation_result

__all__ = [
    "allocate_multi_class_uplinks",
    "allocate_uplinks",
    "expand_port_ranges",
    "get_next_available_port",
    "is_valid_port",
    "legacy_allocation_spec",
    "parse_port_range",
    "port_sort_key",
    "validate_allocation_result",
]
