"""
Membership Manager

Owns the ring's lifecycle: building it from a node set, adding nodes and
removing them.

Lookups vastly outnumber membership changes, so readers never lock. Every
change is made on a private copy of the ring and published by swapping a
single snapshot reference. A lookup that grabbed the old snapshot finishes
against it; the next lookup sees the new one. Writers are serialized with a
lock so two concurrent changes cannot lose each other's edits.

Membership changes are logged at DEBUG level on this module's logger. They
are silent unless the caller configures logging; errors are always raised,
never only logged.
"""

import logging
import threading
from typing import Any, Callable, Dict, Iterable, List, NamedTuple, Optional

from hash_functions import HashFunction, md5_hash
from ring_config import DEFAULT_MAX_PROBES, DEFAULT_REPLICAS
from ring_errors import DuplicateNodeError, NotFoundError
from sorted_ring import Ring
from virtual_nodes import VirtualNodeMapper

logger = logging.getLogger(__name__)


def default_node_id(node: Any) -> str:
    """
    ID of a caller-supplied node.

    Strings are their own ID and integers are used as their decimal string.
    Anything else must expose an `id` or `node_id` attribute; the value is
    converted to str so it can be hashed.
    """
    if isinstance(node, str):
        return node
    if isinstance(node, int):
        return str(node)
    for attr in ("id", "node_id"):
        if hasattr(node, attr):
            return str(getattr(node, attr))
    raise TypeError(f"Cannot determine the ID of node {node!r}")


class RingSnapshot(NamedTuple):
    """A ring and the nodes it refers to. Never mutated once published."""
    ring: Ring
    registry: Dict[str, Any]  # node_id -> caller's node


EMPTY_SNAPSHOT = RingSnapshot(Ring(), {})


class MembershipManager:
    """Keeps the ring and the node registry in lockstep."""

    def __init__(self, replicas: int = DEFAULT_REPLICAS,
                 hash_function: HashFunction = md5_hash,
                 node_id: Callable[[Any], str] = default_node_id,
                 max_probes: int = DEFAULT_MAX_PROBES):
        self.mapper = VirtualNodeMapper(replicas, hash_function, max_probes)
        self.node_id = node_id
        self._lock = threading.Lock()  # Serializes writers only
        self._snapshot = EMPTY_SNAPSHOT

    @property
    def replicas(self) -> int:
        return self.mapper.replicas

    def snapshot(self) -> RingSnapshot:
        return self._snapshot

    def init(self, nodes: Optional[Iterable[Any]] = None) -> None:
        """
        Replace the whole ring with one built from nodes.

        Nodes are placed in ascending ID order so the same node set always
        produces the same ring, collisions included. On error the previous
        ring stays in place.
        """
        registry: Dict[str, Any] = {}
        for node in nodes or []:
            node_id = self.node_id(node)
            if node_id in registry:
                raise DuplicateNodeError(node_id)
            registry[node_id] = node

        with self._lock:
            points: Dict[int, str] = {}
            for node_id in sorted(registry):
                for position in self.mapper.positions_for(node_id, points):
                    points[position] = node_id

            self._snapshot = RingSnapshot(Ring.from_points(points), registry)

        logger.debug("Rebuilt ring with %d nodes and %d virtual nodes", len(registry), len(points))

    def add(self, node: Any) -> None:
        """
        Add a node with all of its virtual nodes.

        Raises:
            DuplicateNodeError: if a node with the same ID is already present
        """
        node_id = self.node_id(node)

        with self._lock:
            current = self._snapshot
            if node_id in current.registry:
                raise DuplicateNodeError(node_id)

            ring = current.ring.copy()
            for position in self.mapper.positions_for(node_id, ring):
                ring.insert(position, node_id)

            registry = dict(current.registry)
            registry[node_id] = node
            self._snapshot = RingSnapshot(ring, registry)

        logger.debug("Added node %s with %d virtual nodes", node_id, self.replicas)

    def remove(self, node: Any) -> None:
        """
        Remove a node, given either the node itself or its ID.

        Raises:
            NotFoundError: if the node is not on the ring
        """
        with self._lock:
            current = self._snapshot
            node_id = self._resolve_id(node, current.registry)
            if node_id not in current.registry:
                raise NotFoundError(node_id)

            ring = current.ring.copy()
            removed = ring.remove_all_for(node_id)

            registry = dict(current.registry)
            del registry[node_id]
            self._snapshot = RingSnapshot(ring, registry)

        logger.debug("Removed node %s (cleaned %d virtual nodes)", node_id, len(removed))

    def count(self) -> int:
        return len(self._snapshot.registry)

    def nodes(self) -> List[Any]:
        """Live nodes in ascending ID order."""
        registry = self._snapshot.registry
        return [registry[node_id] for node_id in sorted(registry)]

    def __contains__(self, node: Any) -> bool:
        registry = self._snapshot.registry
        return self._resolve_id(node, registry) in registry

    def _resolve_id(self, node: Any, registry: Dict[str, Any]) -> str:
        """ID of node, which may be the node itself or an ID string already on the ring."""
        if isinstance(node, str):
            if node in registry:
                return node
            try:
                return self.node_id(node)
            except (TypeError, KeyError, IndexError, AttributeError):
                # A bare ID the extractor cannot read
                return node
        return self.node_id(node)
