"""
Hash Functions

Deterministic string hashes that map keys and virtual nodes to positions on
the ring. Python's built-in hash() is salted per process, so it can never be
used here: the same node set must give the same ring in every process.
"""

import hashlib
from typing import Callable

from ring_config import HASH_BITS

HashFunction = Callable[[str], int]

_HEX_DIGITS = HASH_BITS // 4


def md5_hash(key: str) -> int:
    """
    Default ring hash.

    Uses MD5 for consistent, well-distributed values and keeps the first
    64 bits of the digest.
    """
    return int(hashlib.md5(key.encode('utf-8')).hexdigest()[:_HEX_DIGITS], 16)


def make_hash_function(algorithm: str) -> HashFunction:
    """
    Build a 64-bit ring hash from any hashlib algorithm.

    Args:
        algorithm: hashlib algorithm name, e.g. "sha1", "sha256", "blake2b"

    Raises:
        ValueError: if hashlib does not know the algorithm
    """
    name = algorithm.lower()
    if name not in hashlib.algorithms_available:
        raise ValueError(f"Unknown hash algorithm: {algorithm}")
    if hashlib.new(name).digest_size * 8 < HASH_BITS:
        raise ValueError(f"Hash algorithm {algorithm} is narrower than {HASH_BITS} bits")

    def ring_hash(key: str) -> int:
        return int(hashlib.new(name, key.encode('utf-8')).hexdigest()[:_HEX_DIGITS], 16)

    ring_hash.__name__ = f"{name}_hash"
    return ring_hash
