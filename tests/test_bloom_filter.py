import pytest

from seriesdl.bloom_filter import BloomFilter, get_filter, xxhash64


def test_xxhash64_empty_input_reference_value():
    assert xxhash64(b"") == 0xEF46DB3751D8E999


def test_xxhash64_abc_reference_value():
    assert xxhash64(b"abc") == 0x44BC2CF5AD770999


def test_xxhash64_str_and_bytes_agree():
    assert xxhash64("episode/1.mp4") == xxhash64(b"episode/1.mp4")


@pytest.mark.parametrize("length", [0, 3, 4, 7, 8, 15, 31, 32, 33, 64, 100, 257])
def test_xxhash64_is_deterministic_and_64_bit(length):
    data = bytes(range(256)) * 2
    value = data[:length]
    first = xxhash64(value)
    assert first == xxhash64(value)
    assert 0 <= first < 2 ** 64


@pytest.mark.parametrize("length", [5, 12, 40, 96])
def test_xxhash64_changes_with_last_byte(length):
    base = bytearray(b"x" * length)
    changed = bytearray(base)
    changed[-1] = ord("y")
    assert xxhash64(bytes(base)) != xxhash64(bytes(changed))


def test_xxhash64_seed_changes_digest():
    assert xxhash64(b"abc", 1) != xxhash64(b"abc", 0)


def test_hashes_count_and_range():
    bloom = BloomFilter(3)
    positions = bloom.hashes(b"/root/show/1.mp4")
    assert len(positions) == 3
    assert all(0 <= p < 32 for p in positions)


def test_empty_filter_contains_nothing():
    bloom = BloomFilter()
    assert bloom.bits == 0
    assert not bloom.contains(b"/root/show/1.mp4")
    assert "/root/show/1.mp4" not in bloom


def test_added_value_is_contained():
    bloom = BloomFilter()
    bloom.add(b"/root/show/1.mp4")
    assert bloom.contains(b"/root/show/1.mp4")
    assert "/root/show/1.mp4" in bloom


def test_add_sets_exactly_the_hash_bits():
    bloom = BloomFilter()
    value = b"/root/show/2.mp4"
    bloom.add(value)
    expected_bits = 0
    for position in set(bloom.hashes(value)):
        expected_bits |= 1 << position
    assert bloom.bits == expected_bits
    assert bin(bloom.bits).count("1") <= 3


def test_adding_is_idempotent():
    bloom = BloomFilter()
    bloom.add("a")
    once = bloom.bits
    bloom.add("a")
    assert bloom.bits == once


def test_non_string_is_never_contained():
    bloom = BloomFilter()
    bloom.add("a")
    assert 12 not in bloom


def test_get_filter_is_shared():
    assert get_filter() is get_filter()
    assert get_filter().k == 3