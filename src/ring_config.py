# ring_config.py

# Hash ring defaults
DEFAULT_REPLICAS = 150     # Virtual nodes per physical node
DEFAULT_MAX_PROBES = 64    # Rehash attempts before giving up on a collision
VIRTUAL_NODE_SEPARATOR = "#"

# Every hash function returns a position in [0, HASH_SPACE)
HASH_BITS = 64
HASH_SPACE = 2 ** HASH_BITS

# Demo defaults (mirrors the original 1000 server experiment)
DEMO_SERVERS = 1000
DEMO_KEYS = 100000
DEMO_REMOVED_SERVER = 1
