"""
256-bit machine word.

Word: unsigned uint256 value; add/sub/mul wrap modulo 2**256.
Byte conversion always names its byte order explicitly (Endian.BIG / Endian.LITTLE).
"""

from __future__ import annotations

from enum import Enum

from eth_utils import encode_hex

# Max uint256
UINT256_MAX = (1 << 256) - 1
UINT256_CEIL = 1 << 256

WORD_SIZE = 32


class Endian(Enum):
    BIG = "big"
    LITTLE = "little"


class Side(Enum):
    """Where padding bytes go when widening a short buffer to 32 bytes."""
    LEFT = "left"
    RIGHT = "right"


def pad(data: bytes, pad_byte: int = 0x00, side: Side = Side.LEFT) -> bytes:
    """Widen `data` to exactly 32 bytes by filling `side` with `pad_byte`.

    Big-endian values are padded on the LEFT, little-endian values on the RIGHT,
    so that the numeric value is unchanged.
    """
    if len(data) > WORD_SIZE:
        raise ValueError(f"Cannot pad {len(data)} bytes into a {WORD_SIZE}-byte word")
    fill = bytes([pad_byte & 0xFF])
    if side is Side.LEFT:
        return bytes(data).rjust(WORD_SIZE, fill)
    return bytes(data).ljust(WORD_SIZE, fill)


def _significant_side(endian: Endian) -> Side:
    return Side.LEFT if endian is Endian.BIG else Side.RIGHT


class Word:
    """Immutable uint256. Any int is reduced modulo 2**256 on construction."""

    __slots__ = ("_value",)

    def __init__(self, value: int = 0) -> None:
        object.__setattr__(self, "_value", int(value) & UINT256_MAX)

    def __setattr__(self, name, value):
        raise AttributeError("Word is immutable")

    # -- Conversion --

    @classmethod
    def from_bytes(cls, data: bytes, endian: Endian = Endian.BIG) -> Word:
        """Read up to 32 bytes as an unsigned integer in the given byte order.

        Short buffers are zero-padded on their most-significant side first.
        """
        return cls(int.from_bytes(pad(data, 0x00, _significant_side(endian)), endian.value))

    def to_bytes(self, endian: Endian = Endian.BIG) -> bytes:
        return self._value.to_bytes(WORD_SIZE, endian.value)

    @property
    def value(self) -> int:
        return self._value

    def __int__(self) -> int:
        return self._value

    def __index__(self) -> int:
        return self._value

    def hex(self) -> str:
        return encode_hex(self.to_bytes(Endian.BIG))

    # -- Arithmetic (wraps mod 2**256) --

    def add(self, other: Word) -> Word:
        return Word(self._value + int(other))

    def sub(self, other: Word) -> Word:
        return Word(self._value - int(other))

    def mul(self, other: Word) -> Word:
        return Word(self._value * int(other))

    def iszero(self) -> Word:
        return Word(1) if self._value == 0 else Word(0)

    __add__ = add
    __sub__ = sub
    __mul__ = mul

    # -- Comparison --

    def __eq__(self, other) -> bool:
        if isinstance(other, Word):
            return self._value == other._value
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._value)

    def __bool__(self) -> bool:
        return self._value != 0

    def __repr__(self) -> str:
        return f"Word({self._value:#x})"


ZERO = Word(0)
ONE = Word(1)
