"""Tests for the single-class uplink allocator."""

import time

import pytest
from hnc_core.models import AllocationResult, AllocationSpec, LeafAllocation, SwitchProfile, UplinkAssignment
from hnc_tools.allocation import allocate_uplinks, validate_allocation_result
from hnc_tools.allocation.uplinks import SpineExhausted, SpinePool


def make_spec(uplinks: int, leaves: int, spines: int) -> AllocationSpec:
    return AllocationSpec(uplinks_per_leaf=uplinks, leaves_needed=leaves, spines_needed=spines)


@pytest.fixture
def bare_profile():
    """A profile with no fabric ports."""
    return SwitchProfile.model_validate({"modelId": "BARE", "roles": ["leaf"]})


class TestRoundRobin:
    """Successful allocations."""

    def test_lowest_port_first(self, ds2000, ds3000):
        """Each spine gets consecutive leaf ports, lowest first."""
        result = allocate_uplinks(make_spec(4, 2, 2), ds2000, ds3000)

        assert result.ok
        assert result.leaf_maps[0].uplinks == [
            UplinkAssignment(port="E1/49", to_spine=0),
            UplinkAssignment(port="E1/50", to_spine=0),
            UplinkAssignment(port="E1/51", to_spine=1),
            UplinkAssignment(port="E1/52", to_spine=1),
        ]

    def test_every_leaf_reuses_port_names(self, ds2000, ds3000):
        """Leaves are separate devices, so each starts from its first fabric port."""
        result = allocate_uplinks(make_spec(4, 3, 2), ds2000, ds3000)

        assert [leaf.leaf_id for leaf in result.leaf_maps] == [0, 1, 2]
        assert result.leaf_maps[2].uplinks == result.leaf_maps[0].uplinks

    def test_conservation_and_even_distribution(self, ds2000, ds3000):
        """Spine usage sums to total uplinks and is perfectly even."""
        spec = make_spec(4, 10, 2)

        result = allocate_uplinks(spec, ds2000, ds3000)

        assert result.spine_utilization == [20, 20]
        assert sum(result.spine_utilization) == spec.leaves_needed * spec.uplinks_per_leaf
        assert all(len(leaf.uplinks) == 4 for leaf in result.leaf_maps)
        assert validate_allocation_result(result, spec) == []

    def test_single_spine(self, ds2000, ds3000):
        result = allocate_uplinks(make_spec(2, 16, 1), ds2000, ds3000)

        assert result.spine_utilization == [32]
        assert {u.to_spine for leaf in result.leaf_maps for u in leaf.uplinks} == {0}

    def test_wire_format(self, ds2000, ds3000):
        dumped = allocate_uplinks(make_spec(2, 1, 2), ds2000, ds3000).model_dump(by_alias=True)

        assert dumped == {
            "leafMaps": [
                {
                    "leafId": 0,
                    "uplinks": [{"port": "E1/49", "toSpine": 0}, {"port": "E1/50", "toSpine": 1}],
                }
            ],
            "spineUtilization": [1, 1],
            "issues": [],
        }

    def test_repeatable(self, ds2000, ds3000):
        spec = make_spec(4, 6, 4)

        first = allocate_uplinks(spec, ds2000, ds3000)
        second = allocate_uplinks(spec, ds2000, ds3000)

        assert first.model_dump() == second.model_dump()


class TestPreconditions:
    """Constraint violations abort before any port is assigned."""

    def test_divisibility_gate(self, ds2000, ds3000):
        result = allocate_uplinks(make_spec(3, 4, 2), ds2000, ds3000)

        assert result.messages == ["Uplinks per leaf (3) must be divisible by number of spines (2)"]
        assert result.issues[0].kind == "CONSTRAINT_VIOLATION"
        assert result.leaf_maps == []
        assert result.spine_utilization == [0, 0]

    def test_all_violations_accumulate(self, bare_profile):
        """Every violated precondition is reported, in order."""
        result = allocate_uplinks(make_spec(0, 0, 0), bare_profile, bare_profile)

        assert result.messages == [
            "Uplinks per leaf must be positive",
            "Leaves needed must be positive",
            "Spines needed must be positive",
            "Leaf profile has no fabric ports available",
            "Spine profile has no fabric ports available",
        ]
        assert result.spine_utilization == [0]

    def test_divisibility_reported_with_others(self, ds2000, bare_profile):
        result = allocate_uplinks(make_spec(3, -1, 2), ds2000, bare_profile)

        assert result.messages == [
            "Uplinks per leaf (3) must be divisible by number of spines (2)",
            "Leaves needed must be positive",
            "Spine profile has no fabric ports available",
        ]

    def test_negative_spines_zero_fill_width(self, ds2000, ds3000):
        result = allocate_uplinks(make_spec(4, 2, -3), ds2000, ds3000)

        assert "Spines needed must be positive" in result.messages
        assert result.spine_utilization == [0]


class TestCapacity:
    """Port capacity checks after expansion."""

    def test_spine_capacity_boundary(self, ds2000, ds3000):
        """80 uplinks over 2 spines needs 40 ports per 32-port spine."""
        result = allocate_uplinks(make_spec(4, 20, 2), ds2000, ds3000)

        assert result.messages == ["Spine capacity exceeded: need 40 ports, spine has 32 fabricAssignable"]
        assert result.issues[0].kind == "CAPACITY_EXCEEDED"
        assert result.leaf_maps == []
        assert result.spine_utilization == [0, 0]

    def test_spine_exactly_full(self, ds2000, ds3000):
        result = allocate_uplinks(make_spec(4, 16, 2), ds2000, ds3000)

        assert result.ok
        assert result.spine_utilization == [32, 32]

    def test_leaf_capacity(self, ds2000, ds3000):
        result = allocate_uplinks(make_spec(16, 1, 2), ds2000, ds3000)

        assert result.messages == ["Leaf has only 8 fabric ports, need 16"]
        assert result.spine_utilization == [0, 0]

    def test_backwards_range_leaves_no_ports(self, ds3000):
        """A backwards range passes the profile check but expands to nothing."""
        reversed_leaf = SwitchProfile.model_validate(
            {"modelId": "DS2000", "roles": ["leaf"], "ports": {"fabricAssignable": ["E1/56-49"]}}
        )

        result = allocate_uplinks(make_spec(4, 2, 2), reversed_leaf, ds3000)

        assert result.messages == ["Leaf has only 0 fabric ports, need 4"]
        assert result.issues[0].kind == "CAPACITY_EXCEEDED"
        assert result.leaf_maps == []
        assert result.spine_utilization == [0, 0]


class TestSpinePool:
    """Shared spine port tracking."""

    def test_distinct_ports_per_spine(self):
        pool = SpinePool(["E1/1", "E1/2"], 2)

        assert pool.take(0) == "E1/1"
        assert pool.take(0) == "E1/2"
        assert pool.take(1) == "E1/1"
        assert pool.utilization == [2, 1]

    def test_exhaustion(self):
        pool = SpinePool(["E1/1"], 2)
        pool.take(1)

        with pytest.raises(SpineExhausted) as excinfo:
            pool.take(1)

        issue = excinfo.value.to_issue()
        assert issue.kind == "RESOURCE_EXHAUSTION"
        assert issue.message == "Ran out of spine fabric ports for spine 1"
        assert issue.context == {"spineId": 1}

    def test_ports_follow_sorted_order(self):
        pool = SpinePool(["E1/1", "E1/2", "E1/10"], 1)

        assert [pool.take(0) for _ in range(3)] == ["E1/1", "E1/2", "E1/10"]
        with pytest.raises(SpineExhausted):
            pool.take(0)
        assert pool.utilization == [3]


def wide_profiles(spine_ports: int):
    leaf = SwitchProfile.model_validate({"modelId": "WIDE-LEAF", "roles": ["leaf"], "ports": {"fabricAssignable": ["E1/1-8"]}})
    spine = SwitchProfile.model_validate(
        {"modelId": "WIDE-SPINE", "roles": ["spine"], "ports": {"fabricAssignable": [f"E1/1-{spine_ports}"]}}
    )
    return leaf, spine


def best_of(runs: int, fn) -> float:
    timings = []
    for _ in range(runs):
        start = time.perf_counter()
        fn()
        timings.append(time.perf_counter() - start)
    return min(timings)


class TestScale:
    """Large fabrics allocate in time linear in the number of uplinks."""

    def test_twenty_thousand_uplinks(self):
        leaf, spine = wide_profiles(2500)
        spec = make_spec(8, 2500, 8)

        start = time.perf_counter()
        result = allocate_uplinks(spec, leaf, spine)
        elapsed = time.perf_counter() - start

        assert result.ok
        assert result.spine_utilization == [2500] * 8
        assert result.leaf_maps[-1].uplinks[-1] == UplinkAssignment(port="E1/8", to_spine=7)
        assert elapsed < 1.0

    def test_doubling_does_not_quadruple(self):
        def fill(total: int) -> None:
            pool = SpinePool([f"E1/{n}" for n in range(1, total // 8 + 1)], 8)
            for _ in range(total // 8):
                for spine_id in range(8):
                    pool.take(spine_id)

        small = best_of(3, lambda: fill(20_000))
        large = best_of(3, lambda: fill(40_000))

        assert large < max(3 * small, 0.05)


class TestValidateAllocationResult:
    """Post-hoc audit."""

    def test_failed_results_are_not_audited(self, ds2000, ds3000):
        spec = make_spec(3, 4, 2)

        assert validate_allocation_result(allocate_uplinks(spec, ds2000, ds3000), spec) == []

    def test_detects_inconsistencies(self):
        spec = make_spec(2, 2, 2)
        result = AllocationResult(
            leaf_maps=[LeafAllocation(leaf_id=0, uplinks=[UplinkAssignment(port="E1/49", to_spine=0)])],
            spine_utilization=[1],
        )

        assert validate_allocation_result(result, spec) == [
            "Expected 2 leaves, got 1",
            "Leaf 0 has 1 uplinks, expected 2",
            "Expected 2 spine utilization entries, got 1",
            "Spine 0 utilization is 1, expected 2",
        ]
