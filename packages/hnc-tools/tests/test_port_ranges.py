"""Tests for port range expansion."""

import pytest
from hnc_tools.allocation import (
    expand_port_ranges,
    get_next_available_port,
    is_valid_port,
    parse_port_range,
    port_sort_key,
)


class TestParsePortRange:
    """Single descriptor parsing."""

    def test_inclusive_range(self):
        ports = parse_port_range("E1/49-56")

        assert len(ports) == 8
        assert ports[0] == "E1/49"
        assert ports[-1] == "E1/56"

    def test_backwards_range_is_empty(self):
        assert parse_port_range("E1/56-49") == []

    def test_single_port_range(self):
        assert parse_port_range("E1/5-5") == ["E1/5"]

    def test_literal(self):
        assert parse_port_range("E1/10") == ["E1/10"]
        assert parse_port_range("mgmt0") == ["mgmt0"]

    def test_list_sorted_not_expanded(self):
        """Lists are copied and sorted; range-looking entries stay literal."""
        descriptor = ["E1/10", "E1/9", "E1/1-2"]

        assert parse_port_range(descriptor) == ["E1/9", "E1/10", "E1/1-2"]
        assert descriptor == ["E1/10", "E1/9", "E1/1-2"]

    def test_multi_segment_prefix(self):
        assert parse_port_range("Ethernet1/1/1-3") == ["Ethernet1/1/1", "Ethernet1/1/2", "Ethernet1/1/3"]

    def test_malformed_shape(self):
        with pytest.raises(TypeError):
            parse_port_range(42)


class TestExpandPortRanges:
    """Multi-descriptor expansion."""

    def test_numeric_ordering(self):
        """E1/9 sorts before E1/10."""
        assert expand_port_ranges(["E1/10-11", "E1/8-9"]) == ["E1/8", "E1/9", "E1/10", "E1/11"]

    def test_deduplicates(self):
        assert expand_port_ranges(["E1/1-4", "E1/3-6", "E1/2"]) == [f"E1/{n}" for n in range(1, 7)]

    def test_prefix_is_primary_key(self):
        assert expand_port_ranges(["E2/1", "E1/20"]) == ["E1/20", "E2/1"]

    def test_empty(self):
        assert expand_port_ranges([]) == []

    def test_sort_key(self):
        assert port_sort_key("E1/9") < port_sort_key("E1/10")


class TestPortLookup:
    def test_next_available(self):
        ports = ["E1/1", "E1/2", "E1/3"]

        assert get_next_available_port(set(), ports) == "E1/1"
        assert get_next_available_port({"E1/1"}, ports) == "E1/2"

    def test_exhausted(self):
        assert get_next_available_port({"E1/1"}, ["E1/1"]) is None

    def test_is_valid_port(self):
        assert is_valid_port("E1/50", expand_port_ranges(["E1/49-56"]))
        assert not is_valid_port("E1/57", expand_port_ranges(["E1/49-56"]))
