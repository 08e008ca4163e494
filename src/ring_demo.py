#!/usr/bin/env python3
"""
Consistent Hashing Demo

Reproduces the classic remapping experiment:
1. Builds a ring of N servers named 0..N-1
2. Looks up keys "0".."K-1" and times the lookups
3. Removes (or adds) one server
4. Looks up the same keys again and counts how many moved

With 1000 servers roughly 1/1000 of the keys should move, where modulo
hashing would move nearly all of them.
"""

import argparse
import logging
import sys
import time
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from consistent_hash import ConsistentHashRing
from ring_errors import HashRingError
from ring_config import DEFAULT_REPLICAS, DEMO_KEYS, DEMO_REMOVED_SERVER, DEMO_SERVERS


class Server:
    """A server as the caller sees it. The ring only keeps a reference."""

    def __init__(self, server_id: int):
        self.id = server_id

    def __repr__(self) -> str:
        return f"Server({self.id})"


@dataclass
class ExperimentResult:
    servers: int
    keys: int
    replicas: int
    lookup_micros: float  # Average time per lookup
    moved: int = 0
    mapped_to_removed: int = 0
    removed: List[int] = field(default_factory=list)
    added: List[int] = field(default_factory=list)

    @property
    def moved_percentage(self) -> float:
        return (self.moved / self.keys) * 100 if self.keys else 0.0


def lookup_all(ring: ConsistentHashRing, keys: int) -> Dict[int, int]:
    return {i: ring.get_node(str(i)).id for i in range(keys)}


def run_experiment(servers: int = DEMO_SERVERS, keys: int = DEMO_KEYS,
                   replicas: int = DEFAULT_REPLICAS,
                   remove: Optional[List[int]] = None,
                   add: Optional[List[int]] = None) -> ExperimentResult:
    """Run the remapping experiment and return its numbers."""
    ring = ConsistentHashRing([Server(i) for i in range(servers)], replicas=replicas)

    start = time.perf_counter()
    before = lookup_all(ring, keys)
    elapsed = time.perf_counter() - start

    remove = remove or []
    add = add or []
    for server_id in add:
        ring.add_node(Server(server_id))
    for server_id in remove:
        ring.remove_node(str(server_id))

    after = lookup_all(ring, keys)
    removed_ids = set(remove)

    return ExperimentResult(
        servers=servers,
        keys=keys,
        replicas=replicas,
        lookup_micros=(elapsed / keys) * 1_000_000 if keys else 0.0,
        moved=sum(1 for i in range(keys) if before[i] != after[i]),
        mapped_to_removed=sum(1 for owner in after.values() if owner in removed_ids),
        removed=list(remove),
        added=list(add),
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Measure key movement when a server leaves or joins the ring")
    parser.add_argument("--servers", type=int, default=DEMO_SERVERS, help="Number of servers on the ring")
    parser.add_argument("--keys", type=int, default=DEMO_KEYS, help="Number of keys to look up")
    parser.add_argument("--replicas", type=int, default=DEFAULT_REPLICAS, help="Virtual nodes per server")
    parser.add_argument("--remove", type=int, action="append", default=None, metavar="ID",
                        help=f"Server ID to remove (repeatable, default {DEMO_REMOVED_SERVER})")
    parser.add_argument("--add", type=int, action="append", default=[], metavar="ID",
                        help="Server ID to add (repeatable)")
    parser.add_argument("--verbose", action="store_true", help="Log ring membership changes")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    remove = args.remove
    if remove is None:
        remove = [] if args.add else [DEMO_REMOVED_SERVER]

    print(f"🔧 Building ring: {args.servers} servers x {args.replicas} virtual nodes")
    try:
        result = run_experiment(args.servers, args.keys, args.replicas, remove, args.add)
    except HashRingError as e:
        print(f"❌ Experiment failed: {e}")
        return 2

    print(f"⏱️  {result.keys} lookups, {result.lookup_micros:.2f} microseconds each")
    for server_id in result.added:
        print(f"  + added server {server_id}")
    for server_id in result.removed:
        print(f"  - removed server {server_id}")

    print(f"\n📊 Keys moved: {result.moved}/{result.keys} ({result.moved_percentage:.3f}%)")
    if result.mapped_to_removed:
        print(f"❌ {result.mapped_to_removed} keys still map to a removed server")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
