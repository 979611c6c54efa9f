"""Tests for the 256-bit Word type."""

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from tinyevm.vm.word import (
    Endian,
    Side,
    Word,
    pad,
    UINT256_MAX,
    UINT256_CEIL,
    ZERO,
    ONE,
)

uint256 = st.integers(min_value=0, max_value=UINT256_MAX)
words = uint256.map(Word)
short_buffers = st.binary(min_size=0, max_size=32)


# ---------------------------------------------------------------------------
# Construction and equality
# ---------------------------------------------------------------------------

class TestWord:
    def test_reduces_modulo(self):
        assert Word(UINT256_CEIL) == Word(0)
        assert Word(UINT256_CEIL + 5) == Word(5)
        assert Word(-1) == Word(UINT256_MAX)

    def test_equality_by_value(self):
        assert Word(7) == Word.from_bytes(b"\x07", Endian.BIG)
        assert Word(7) == Word.from_bytes(b"\x07", Endian.LITTLE)
        assert Word(7) != Word(8)

    def test_not_equal_to_int(self):
        assert Word(7) != 7

    def test_hashable(self):
        assert len({Word(1), Word(1), Word(2)}) == 2

    def test_immutable(self):
        w = Word(1)
        with pytest.raises(AttributeError):
            w._value = 2

    def test_int_conversion(self):
        assert int(Word(0xABC)) == 0xABC
        assert Word(0xABC).value == 0xABC

    def test_hex(self):
        assert Word(1).hex() == "0x" + "00" * 31 + "01"

    def test_repr(self):
        assert repr(Word(255)) == "Word(0xff)"

    def test_constants(self):
        assert ZERO == Word(0)
        assert ONE == Word(1)
        assert not ZERO
        assert ONE


# ---------------------------------------------------------------------------
# Arithmetic
# ---------------------------------------------------------------------------

class TestArithmetic:
    def test_add_wraps(self):
        assert Word(UINT256_MAX).add(Word(1)) == Word(0)

    def test_sub_wraps(self):
        assert Word(0).sub(Word(1)) == Word(UINT256_MAX)

    def test_mul_wraps(self):
        assert Word(1 << 255).mul(Word(2)) == Word(0)

    def test_operators(self):
        assert Word(2) + Word(3) == Word(5)
        assert Word(2) - Word(3) == Word(UINT256_MAX)
        assert Word(2) * Word(3) == Word(6)

    def test_iszero(self):
        assert Word(0).iszero() == Word(1)
        assert Word(5).iszero() == Word(0)
        assert Word(UINT256_CEIL).iszero() == Word(1)


# ---------------------------------------------------------------------------
# Padding and byte order
# ---------------------------------------------------------------------------

class TestBytes:
    def test_pad_left(self):
        assert pad(b"\x02") == b"\x00" * 31 + b"\x02"

    def test_pad_right(self):
        assert pad(b"\x02", 0x00, Side.RIGHT) == b"\x02" + b"\x00" * 31

    def test_pad_byte(self):
        assert pad(b"\x01", 0xFF, Side.LEFT) == b"\xff" * 31 + b"\x01"

    def test_pad_full_word_unchanged(self):
        data = bytes(range(32))
        assert pad(data, 0xFF, Side.LEFT) == data

    def test_pad_too_long(self):
        with pytest.raises(ValueError):
            pad(b"\x00" * 33)

    def test_to_bytes_big(self):
        assert Word(1).to_bytes(Endian.BIG) == b"\x00" * 31 + b"\x01"

    def test_to_bytes_little(self):
        assert Word(1).to_bytes(Endian.LITTLE) == b"\x01" + b"\x00" * 31

    def test_from_bytes_short_little(self):
        # Least significant byte first
        assert Word.from_bytes(b"\x00\x01", Endian.LITTLE) == Word(0x0100)

    def test_from_bytes_short_big(self):
        assert Word.from_bytes(b"\x00\x01", Endian.BIG) == Word(0x0001)

    def test_mismatched_padding_reads_reversed(self):
        # Big-endian padding read back as little-endian is NOT the same value:
        # the 0x02 ends up in the most significant byte.
        data = pad(b"\x02", 0x00, Side.LEFT)
        assert Word.from_bytes(data, Endian.LITTLE) == Word(2 << 248)
        # Right padding is the layout that matches a little-endian read.
        data = pad(b"\x02", 0x00, Side.RIGHT)
        assert Word.from_bytes(data, Endian.LITTLE) == Word(2)


# ---------------------------------------------------------------------------
# Properties
# ---------------------------------------------------------------------------

@given(a=words, b=words)
def test_add_commutative(a, b):
    assert a.add(b) == b.add(a)


@given(a=words)
def test_add_zero_identity(a):
    assert a.add(Word(0)) == a


@given(a=words, b=words)
def test_sub_inverts_add(a, b):
    assert a.add(b).sub(b) == a


@given(a=uint256, b=uint256)
def test_mul_matches_modular_product(a, b):
    assert Word(a).mul(Word(b)) == Word((a * b) % UINT256_CEIL)


@given(a=words)
def test_iszero_is_boolean(a):
    assert a.iszero() in (Word(0), Word(1))
    assert (a.iszero() == Word(1)) == (a == Word(0))


@settings(max_examples=200)
@given(buf=short_buffers)
def test_big_endian_bytes_read_little_are_reversed(buf):
    """to_bytes(from_bytes(pad(buf), BIG), LITTLE) is the byte-reversed padding.

    Reinterpreting the same value under the opposite byte order reverses the
    32-byte buffer; it does not reproduce the input bytes.
    """
    padded = pad(buf, 0x00, Side.LEFT)
    word = Word.from_bytes(padded, Endian.BIG)
    assert word.to_bytes(Endian.BIG) == padded
    assert word.to_bytes(Endian.LITTLE) == padded[::-1]
    assert Word.from_bytes(padded[::-1], Endian.LITTLE) == word


@given(a=words, endian=st.sampled_from(list(Endian)))
def test_bytes_round_trip(a, endian):
    assert Word.from_bytes(a.to_bytes(endian), endian) == a
