"""
Sorted Ring

The ring itself: virtual node positions kept in ascending order and treated
as circular, so the successor of the largest position is the smallest one.

A node -> positions index sits next to the sorted list so that removing a
node touches only its own virtual nodes instead of scanning the whole ring.
"""

import bisect
from typing import Dict, Iterator, List, Tuple

from ring_config import HASH_SPACE
from ring_errors import EmptyRingError


class Ring:
    """
    Sorted, circular collection of (position, node_id) virtual nodes.

    Not thread-safe on its own. The membership manager only ever mutates a
    private copy and publishes it once it is complete.
    """

    def __init__(self):
        self.sorted_keys: List[int] = []  # Sorted positions for bisect lookups
        self.owners: Dict[int, str] = {}  # position -> node_id
        self.positions: Dict[str, List[int]] = {}  # node_id -> its positions

    @classmethod
    def from_points(cls, points: Dict[int, str]) -> "Ring":
        """Build a ring from a position -> node_id mapping with a single sort."""
        ring = cls()
        ring.owners = dict(points)
        ring.sorted_keys = sorted(ring.owners)
        for position, node_id in ring.owners.items():
            ring.positions.setdefault(node_id, []).append(position)
        return ring

    def copy(self) -> "Ring":
        ring = Ring()
        ring.sorted_keys = list(self.sorted_keys)
        ring.owners = dict(self.owners)
        ring.positions = {node_id: list(points) for node_id, points in self.positions.items()}
        return ring

    def __len__(self) -> int:
        return len(self.sorted_keys)

    def __contains__(self, position: int) -> bool:
        return position in self.owners

    def nodes(self) -> List[str]:
        """Node IDs that currently own at least one virtual node."""
        return list(self.positions)

    def has_node(self, node_id: str) -> bool:
        return node_id in self.positions

    def positions_of(self, node_id: str) -> List[int]:
        return sorted(self.positions.get(node_id, []))

    def entries(self) -> Iterator[Tuple[int, str]]:
        for position in self.sorted_keys:
            yield position, self.owners[position]

    def insert(self, position: int, node_id: str) -> None:
        """
        Add one virtual node, keeping the positions sorted.

        Raises:
            ValueError: if the position is already owned
        """
        if position in self.owners:
            raise ValueError(f"Position {position} is already owned by {self.owners[position]!r}")

        bisect.insort(self.sorted_keys, position)
        self.owners[position] = node_id
        self.positions.setdefault(node_id, []).append(position)

    def remove_all_for(self, node_id: str) -> List[int]:
        """
        Remove every virtual node owned by node_id.

        Returns the removed positions (empty if the node had none).
        """
        removed = self.positions.pop(node_id, [])
        for position in removed:
            idx = bisect.bisect_left(self.sorted_keys, position)
            del self.sorted_keys[idx]
            del self.owners[position]
        return removed

    def successor_index(self, position: int) -> int:
        """
        Index of the smallest stored position >= position.

        Wraps around to index 0 past the largest position.
        """
        if not self.sorted_keys:
            raise EmptyRingError()

        idx = bisect.bisect_left(self.sorted_keys, position)
        if idx == len(self.sorted_keys):
            # Wrap around to the beginning of the ring
            idx = 0
        return idx

    def successor(self, position: int) -> str:
        """Node ID owning the first virtual node clockwise from position."""
        return self.owners[self.sorted_keys[self.successor_index(position)]]

    def walk(self, position: int) -> Iterator[str]:
        """Owners of every virtual node, clockwise from position, once around."""
        start = self.successor_index(position)
        total = len(self.sorted_keys)
        for i in range(total):
            yield self.owners[self.sorted_keys[(start + i) % total]]

    def arc_lengths(self) -> Dict[str, int]:
        """
        How much of the hash space each node is responsible for.

        A virtual node owns the arc from its predecessor (exclusive) up to
        itself, so the first position also owns the wrap-around arc.
        """
        arcs: Dict[str, int] = {}
        for i, position in enumerate(self.sorted_keys):
            previous = self.sorted_keys[i - 1]  # i == 0 wraps to the last position
            arc = (position - previous) % HASH_SPACE
            if len(self.sorted_keys) == 1:
                arc = HASH_SPACE
            node_id = self.owners[position]
            arcs[node_id] = arcs.get(node_id, 0) + arc
        return arcs

