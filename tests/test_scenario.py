"""
The 1000 server remapping experiment: build a ring, look up 100,000 keys,
remove server 1 and look them up again.
"""

import pytest

from consistent_hash import ConsistentHashRing

SERVERS = 1000
KEYS = 100000


class Server:
    def __init__(self, server_id):
        self.id = server_id


@pytest.fixture(scope="module")
def servers():
    return [Server(i) for i in range(SERVERS)]


@pytest.fixture(scope="module")
def before(servers):
    ring = ConsistentHashRing(servers)
    return [ring.get_node(str(i)).id for i in range(KEYS)]


@pytest.mark.slow
class TestThousandServers:

    def test_repeatable(self, servers, before):
        ring = ConsistentHashRing(servers)
        assert [ring.get_node(str(i)).id for i in range(0, KEYS, 97)] == before[::97]

    def test_remove_one_server(self, servers, before):
        ring = ConsistentHashRing(servers)
        ring.remove_node(servers[1])
        after = [ring.get_node(str(i)).id for i in range(KEYS)]

        moved = [i for i in range(KEYS) if before[i] != after[i]]

        # ~1/1000 of the keys, never all of them
        assert 0 < len(moved) < KEYS
        assert 50 <= len(moved) <= 150, f"Expected ~100 moved keys, got {len(moved)}"
        assert 1 not in after
        # Only server 1's keys moved
        assert all(before[i] == 1 for i in moved)

    def test_add_one_server(self, servers, before):
        ring = ConsistentHashRing(servers)
        ring.add_node(Server(SERVERS))
        after = [ring.get_node(str(i)).id for i in range(KEYS)]

        moved = [i for i in range(KEYS) if before[i] != after[i]]

        # ~1/1001 of the keys, all to the newcomer
        assert 50 <= len(moved) <= 150, f"Expected ~100 moved keys, got {len(moved)}"
        assert all(after[i] == SERVERS for i in moved)
