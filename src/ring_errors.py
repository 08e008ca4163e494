"""
Hash Ring Errors

Every failure the ring reports to its caller. Nothing here is fatal to the
process; the caller decides whether to retry, ignore or escalate.
"""

from typing import Any


class HashRingError(Exception):
    """Base class for all hash ring errors."""


class EmptyRingError(HashRingError):
    """A lookup was made while no nodes are on the ring."""

    def __init__(self, message: str = "No nodes available in hash ring"):
        super().__init__(message)


class DuplicateNodeError(HashRingError):
    """A node with the same ID is already on the ring."""

    def __init__(self, node_id: Any):
        self.node_id = node_id
        super().__init__(f"Node {node_id!r} is already in the hash ring")


class NotFoundError(HashRingError):
    """The node to remove has no virtual nodes on the ring."""

    def __init__(self, node_id: Any):
        self.node_id = node_id
        super().__init__(f"Node {node_id!r} is not in the hash ring")


class CollisionExhaustedError(HashRingError):
    """
    No free ring position could be found for a virtual node.

    Only happens when the replica count is far too large for the hash width,
    so it is treated as a configuration error.
    """

    def __init__(self, node_id: Any, replica: int, attempts: int):
        self.node_id = node_id
        self.replica = replica
        self.attempts = attempts
        super().__init__(
            f"Could not place virtual node {replica} of {node_id!r} "
            f"after {attempts} attempts"
        )
