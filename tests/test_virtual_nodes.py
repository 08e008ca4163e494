"""
Tests for virtual node placement and collision handling.
"""

import pytest

from hash_functions import md5_hash
from ring_errors import CollisionExhaustedError
from virtual_nodes import VirtualNodeMapper


class TestVirtualNodeMapper:

    def test_replica_positions(self):
        mapper = VirtualNodeMapper(replicas=3)

        assert mapper.positions_for("node1") == [
            md5_hash("node1#0"),
            md5_hash("node1#1"),
            md5_hash("node1#2"),
        ]

    def test_deterministic(self):
        mapper = VirtualNodeMapper(replicas=100)
        assert mapper.positions_for("node1") == mapper.positions_for("node1")

    def test_all_positions_distinct(self):
        positions = VirtualNodeMapper(replicas=200).positions_for("node1")
        assert len(set(positions)) == 200

    def test_collision_with_ring_is_rehashed(self):
        mapper = VirtualNodeMapper(replicas=2)
        taken = {md5_hash("node1#0")}

        positions = mapper.positions_for("node1", taken)

        assert positions == [md5_hash("node1#0#1"), md5_hash("node1#1")]

    def test_collision_within_node_is_rehashed(self):
        def clashing_hash(key):
            # Both replicas of "x" land on the same spot
            return 7 if key in ("x#0", "x#1") else md5_hash(key)

        mapper = VirtualNodeMapper(replicas=2, hash_function=clashing_hash)

        assert mapper.positions_for("x") == [7, md5_hash("x#1#1")]

    def test_collision_exhausted(self):
        mapper = VirtualNodeMapper(replicas=2, hash_function=lambda key: 42, max_probes=5)

        with pytest.raises(CollisionExhaustedError) as exc_info:
            mapper.positions_for("node1")

        assert exc_info.value.node_id == "node1"
        assert exc_info.value.replica == 1
        assert exc_info.value.attempts == 5

    @pytest.mark.parametrize("replicas,max_probes", [(0, 10), (-1, 10), (10, 0)])
    def test_invalid_settings(self, replicas, max_probes):
        with pytest.raises(ValueError):
            VirtualNodeMapper(replicas=replicas, max_probes=max_probes)
