"""
Virtual Node Mapper

Expands a physical node into its virtual nodes (replicas) on the ring.
More replicas give a more even share of the hash space per node.
"""

from typing import Container, List, Set

from hash_functions import HashFunction, md5_hash
from ring_config import DEFAULT_MAX_PROBES, DEFAULT_REPLICAS, VIRTUAL_NODE_SEPARATOR
from ring_errors import CollisionExhaustedError


class VirtualNodeMapper:
    """
    Computes the ring positions of a node's virtual nodes.

    Replica i of node "a" is placed at hash("a#i"). If that position is
    already taken, "a#i#1", "a#i#2", ... are tried in turn, so the outcome
    depends only on the node ID, the replica count and what is already on
    the ring.
    """

    def __init__(self, replicas: int = DEFAULT_REPLICAS,
                 hash_function: HashFunction = md5_hash,
                 max_probes: int = DEFAULT_MAX_PROBES):
        if replicas < 1:
            raise ValueError(f"replicas must be at least 1, got {replicas}")
        if max_probes < 1:
            raise ValueError(f"max_probes must be at least 1, got {max_probes}")

        self.replicas = replicas
        self.hash_function = hash_function
        self.max_probes = max_probes

    def virtual_key(self, node_id: str, replica: int, salt: int = 0) -> str:
        key = f"{node_id}{VIRTUAL_NODE_SEPARATOR}{replica}"
        if salt:
            key = f"{key}{VIRTUAL_NODE_SEPARATOR}{salt}"
        return key

    def positions_for(self, node_id: str, taken: Container[int] = ()) -> List[int]:
        """
        Ring positions for every replica of node_id.

        Args:
            node_id: ID of the physical node
            taken: positions already on the ring (anything supporting `in`)

        Raises:
            CollisionExhaustedError: if a replica cannot be placed
        """
        positions: List[int] = []
        chosen: Set[int] = set()

        for replica in range(self.replicas):
            position = self._place(node_id, replica, taken, chosen)
            chosen.add(position)
            positions.append(position)

        return positions

    def _place(self, node_id: str, replica: int, taken: Container[int], chosen: Set[int]) -> int:
        for salt in range(self.max_probes):
            position = self.hash_function(self.virtual_key(node_id, replica, salt))
            if position not in taken and position not in chosen:
                return position

        raise CollisionExhaustedError(node_id, replica, self.max_probes)
