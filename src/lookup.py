"""
Lookup Engine

Finds which node owns a key:
1. Hash the key to get a position on the ring
2. Find the first virtual node clockwise from that position
3. Return the caller's node behind that virtual node
"""

from typing import Any, List, Set

from membership import MembershipManager
from ring_errors import EmptyRingError


class LookupEngine:
    """Read-only view over a membership manager's current snapshot."""

    def __init__(self, membership: MembershipManager):
        self.membership = membership
        self.hash_function = membership.mapper.hash_function

    def owner_id(self, key: str) -> str:
        """ID of the node that owns key."""
        ring = self.membership.snapshot().ring
        return ring.successor(self.hash_function(key))

    def get_node(self, key: str) -> Any:
        """
        Node that owns key.

        Raises:
            EmptyRingError: if no nodes are on the ring
        """
        # Ring and registry must come from the same snapshot
        ring, registry = self.membership.snapshot()
        return registry[ring.successor(self.hash_function(key))]

    def get_nodes(self, key: str, count: int = 3) -> List[Any]:
        """
        Get multiple nodes for replication.

        Returns the next `count` distinct physical nodes clockwise from the
        key's position, fewer if the ring has fewer nodes. The first entry is
        always get_node(key).
        """
        ring, registry = self.membership.snapshot()
        if not registry:
            raise EmptyRingError()
        if count <= 0:
            return []

        nodes = []
        seen: Set[str] = set()
        wanted = min(count, len(registry))

        for node_id in ring.walk(self.hash_function(key)):
            if node_id not in seen:
                seen.add(node_id)
                nodes.append(registry[node_id])
                if len(nodes) == wanted:
                    break

        return nodes
