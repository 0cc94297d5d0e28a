"""Tests for 32-bit word arithmetic."""

import random

import pytest

from babyvm.isa.word import WORD_MASK, is_negative, line_bits, line_mask, negate, to_signed, to_word


class TestNegate:
    """Test two's-complement negation."""

    def test_zero_is_fixed_point(self):
        """negate(0) wraps back to 0."""
        assert negate(0) == 0

    def test_small_values(self):
        """Test negation of small positive and negative values."""
        assert negate(1) == 0xFFFFFFFF
        assert negate(0xFFFFFFFF) == 1
        assert negate(5) == 0xFFFFFFFB

    def test_most_negative_value(self):
        """-2**31 has no positive counterpart and negates to itself."""
        assert negate(0x80000000) == 0x80000000

    def test_double_negation(self):
        """negate(negate(x)) == x over edge values and random words."""
        rng = random.Random(1948)
        values = [0, 1, 2, 0x7FFFFFFF, 0x80000000, 0x80000001, 0xFFFFFFFE, 0xFFFFFFFF]
        values += [rng.getrandbits(32) for _ in range(1000)]
        for x in values:
            assert negate(negate(x)) == x

    def test_result_fits_word(self):
        """Negation never leaves the 32-bit range."""
        for x in (0, 1, 0xFFFFFFFF, 0x12345678):
            assert 0 <= negate(x) <= WORD_MASK


class TestWordHelpers:
    """Test masking and sign helpers."""

    def test_to_word_wraps(self):
        assert to_word(-1) == 0xFFFFFFFF
        assert to_word(1 << 32) == 0
        assert to_word((1 << 32) + 7) == 7

    def test_is_negative(self):
        assert is_negative(0x80000000)
        assert is_negative(0xFFFFFFFF)
        assert not is_negative(0x7FFFFFFF)
        assert not is_negative(0)

    def test_to_signed(self):
        assert to_signed(0xFFFFFFFF) == -1
        assert to_signed(0x80000000) == -(1 << 31)
        assert to_signed(42) == 42


class TestLineField:
    """Test the width of the line field for various store sizes."""

    @pytest.mark.parametrize(
        'store_size,bits,mask',
        [
            (32, 5, 0b11111),
            (24, 5, 0b11111),
            (33, 6, 0b111111),
            (16, 4, 0b1111),
            (2, 1, 0b1),
            (1, 1, 0b1),
            (8192, 13, 0x1FFF),
        ],
    )
    def test_width(self, store_size, bits, mask):
        """The field is the minimal width addressing every line."""
        assert line_bits(store_size) == bits
        assert line_mask(store_size) == mask

    def test_empty_store_rejected(self):
        with pytest.raises(ValueError):
            line_bits(0)
