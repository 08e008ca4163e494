"""
Tests for the ring hash functions.
"""

import hashlib

import pytest

from hash_functions import make_hash_function, md5_hash
from ring_config import HASH_SPACE


class TestMd5Hash:

    def test_matches_md5_prefix(self):
        expected = int(hashlib.md5(b"user:123").hexdigest()[:16], 16)
        assert md5_hash("user:123") == expected

    def test_deterministic(self):
        assert md5_hash("svr_1") == md5_hash("svr_1")

    def test_within_hash_space(self):
        for i in range(1000):
            assert 0 <= md5_hash(str(i)) < HASH_SPACE

    def test_spreads_similar_keys(self):
        """Neighbouring keys must not cluster on the ring."""
        positions = sorted(md5_hash(str(i)) for i in range(1000))
        halves = sum(1 for p in positions if p < HASH_SPACE // 2)
        assert 400 < halves < 600

    def test_unicode_keys(self):
        assert md5_hash("ключ") == int(hashlib.md5("ключ".encode('utf-8')).hexdigest()[:16], 16)


class TestMakeHashFunction:

    @pytest.mark.parametrize("algorithm", ["sha1", "sha256", "blake2b", "MD5"])
    def test_known_algorithms(self, algorithm):
        ring_hash = make_hash_function(algorithm)
        expected = int(hashlib.new(algorithm.lower(), b"key").hexdigest()[:16], 16)

        assert ring_hash("key") == expected
        assert 0 <= ring_hash("key") < HASH_SPACE

    def test_md5_matches_default(self):
        assert make_hash_function("md5")("node1#0") == md5_hash("node1#0")

    def test_unknown_algorithm(self):
        with pytest.raises(ValueError):
            make_hash_function("not-a-hash")
