"""
Consistent Hashing Ring

The single object callers use. It ties together the membership manager,
which owns the ring, and the lookup engine, which answers "which node owns
this key?". When nodes are added or removed, only about 1/N of the keys
move to a different node.
"""

from typing import Any, Callable, Dict, Iterable, List, Optional

from hash_functions import HashFunction, md5_hash
from lookup import LookupEngine
from membership import MembershipManager, default_node_id
from ring_config import DEFAULT_MAX_PROBES, DEFAULT_REPLICAS, HASH_SPACE


class ConsistentHashRing:
    """
    Consistent hashing ring for distributed nodes.

    Uses virtual nodes (replicas) to ensure even distribution of keys
    across physical nodes. Lookups are safe to run from many threads while
    another thread adds or removes nodes.
    """

    def __init__(self, nodes: Optional[Iterable[Any]] = None,
                 replicas: int = DEFAULT_REPLICAS,
                 hash_function: HashFunction = md5_hash,
                 node_id: Callable[[Any], str] = default_node_id,
                 max_probes: int = DEFAULT_MAX_PROBES):
        """
        Initialize the hash ring.

        Args:
            nodes: Initial nodes; strings, or objects with an `id` attribute
            replicas: Number of virtual nodes per physical node (higher = more even distribution)
            hash_function: Deterministic str -> 64-bit int hash
            node_id: Extracts a node's ID, overriding default_node_id
            max_probes: Rehash attempts allowed when a virtual node collides
        """
        self.membership = MembershipManager(replicas, hash_function, node_id, max_probes)
        self.lookup = LookupEngine(self.membership)

        if nodes:
            self.init(nodes)

    @property
    def replicas(self) -> int:
        return self.membership.replicas

    @property
    def nodes(self) -> List[Any]:
        """Live nodes in ascending ID order."""
        return self.membership.nodes()

    def init(self, nodes: Iterable[Any]) -> None:
        """Clear the ring and rebuild it from nodes."""
        self.membership.init(nodes)

    def add_node(self, node: Any) -> None:
        """
        Add a new node to the ring.

        Raises DuplicateNodeError if a node with the same ID is present.
        """
        self.membership.add(node)

    def remove_node(self, node: Any) -> None:
        """
        Remove a node (or node ID) from the ring.

        Keys it owned move to their next node clockwise; no other key moves.
        Raises NotFoundError if the node is not on the ring.
        """
        self.membership.remove(node)

    def get_node(self, key: str) -> Any:
        """Find which node owns the given key. Raises EmptyRingError on an empty ring."""
        return self.lookup.get_node(key)

    def get_nodes(self, key: str, count: int = 3) -> List[Any]:
        """Get `count` distinct nodes for replicating key, primary first."""
        return self.lookup.get_nodes(key, count)

    def count(self) -> int:
        return self.membership.count()

    def __len__(self) -> int:
        return self.membership.count()

    def __contains__(self, node: Any) -> bool:
        return node in self.membership

    def get_node_load_distribution(self) -> Dict[str, float]:
        """
        Analyze how evenly keys would be distributed across nodes.

        Returns a dictionary mapping node ID to the percentage of the hash
        space that node is responsible for. Useful for debugging and monitoring.
        """
        arcs = self.membership.snapshot().ring.arc_lengths()
        return {node_id: (size / HASH_SPACE) * 100 for node_id, size in arcs.items()}

    def __str__(self) -> str:
        """String representation showing ring status."""
        if not self.count():
            return "Empty hash ring"

        distribution = self.get_node_load_distribution()
        lines = [f"Hash ring with {self.count()} nodes ({self.replicas} virtual nodes each):"]
        for node_id in sorted(distribution):
            lines.append(f"  {node_id}: {distribution[node_id]:.2f}% of hash space")

        return "\n".join(lines)
