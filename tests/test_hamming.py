"""Parity construction and single-change location."""

from __future__ import annotations

import math

import pytest

from infohash import MalformedFingerprintError, encode_parity, locate, parity_count
from infohash.hamming import syndrome


@pytest.mark.parametrize(
    "fields, words",
    [(0, 0), (1, 1), (2, 2), (3, 2), (4, 3), (5, 3), (7, 3), (8, 4), (12, 4), (127, 7), (128, 8)],
)
def test_parity_count(fields, words):
    assert parity_count(fields) == words


def test_parity_count_matches_log2():
    for n in range(1, 600):
        assert parity_count(n) == math.ceil(math.log2(n + 1))


def test_parity_count_rejects_negative():
    with pytest.raises(ValueError):
        parity_count(-1)


class TestEncodeParity:
    def test_empty(self):
        assert encode_parity([]) == []

    def test_single_field(self):
        assert encode_parity([0xDEADBEEF]) == [0xDEADBEEF]

    def test_five_fields(self):
        # positions: bit0 -> 1,3,5  bit1 -> 2,3  bit2 -> 4,5
        assert encode_parity([1, 2, 4, 8, 16]) == [1 ^ 4 ^ 16, 2 ^ 4, 8 ^ 16]

    def test_words_stay_32_bit(self):
        words = encode_parity([0xFFFFFFFF] * 9)
        assert all(0 <= word <= 0xFFFFFFFF for word in words)


class TestLocate:
    CHECKSUMS = [0x11111111, 0x22222222, 0x33333333, 0x44444444, 0x55555555]

    def test_no_change(self):
        parity = encode_parity(self.CHECKSUMS)
        assert locate(self.CHECKSUMS, parity) is None

    @pytest.mark.parametrize("index", range(5))
    def test_single_change(self, index):
        parity = encode_parity(self.CHECKSUMS)
        changed = list(self.CHECKSUMS)
        changed[index] ^= 0x0BADF00D
        assert locate(changed, parity) == index

    def test_two_changes_beyond_field_count(self):
        parity = encode_parity(self.CHECKSUMS)
        changed = list(self.CHECKSUMS)
        changed[3] ^= 0x1  # position 4
        changed[2] ^= 0x2  # position 3, 4 | 3 = 7 > 5
        assert locate(changed, parity) is None

    def test_two_changes_that_alias_a_valid_position(self):
        # positions 1 and 2 OR to 3; differing deltas expose the double change
        parity = encode_parity(self.CHECKSUMS)
        changed = list(self.CHECKSUMS)
        changed[0] ^= 0x10
        changed[1] ^= 0x20
        assert locate(changed, parity) is None

    def test_nested_positions_are_not_mistaken_for_one(self):
        # position 1 is a bit-subset of position 3
        parity = encode_parity(self.CHECKSUMS)
        changed = list(self.CHECKSUMS)
        changed[0] ^= 0x10
        changed[2] ^= 0x30
        assert locate(changed, parity) is None

    def test_parity_of_other_size_is_rejected(self):
        parity = encode_parity(self.CHECKSUMS)
        with pytest.raises(MalformedFingerprintError, match="expected 4"):
            locate(self.CHECKSUMS + [0x66666666] * 3, parity)


def test_syndrome_is_zero_without_change():
    checksums = [5, 6, 7]
    assert syndrome(checksums, encode_parity(checksums)) == [0, 0]
