"""
Stack and Memory implementations, plus the VM error hierarchy.

Stack: last-in-first-out Words, bounded at 1024 items by default.
Memory: byte-addressable, auto-expanding in 32-byte words, never shrinks.
"""

from __future__ import annotations

from typing import Iterable, Iterator, Optional

from tinyevm.vm.word import UINT256_CEIL, WORD_SIZE, Endian, Word


class EvmError(Exception):
    """Base class for every error raised while decoding or executing."""

    # Program counter of the failing instruction, set by the interpreter.
    pc: Optional[int] = None


class DecodeError(EvmError):
    """Malformed hex, unknown token or truncated PUSH operand."""

    def __init__(self, message: str, position: Optional[int] = None):
        self.position = position
        if position is not None:
            message = f"{message} (at {position})"
        super().__init__(message)


class StackUnderflow(EvmError):
    pass


class StackOverflow(EvmError):
    pass


class UnknownOpcode(EvmError):
    def __init__(self, opcode: int):
        self.opcode = opcode
        super().__init__(f"Unknown opcode: 0x{opcode:02x}")


class MemoryAccessError(EvmError):
    pass


MAX_STACK_DEPTH = 1024


class Stack:
    """Word stack. `limit=None` makes it unbounded."""

    __slots__ = ("_data", "_limit")

    EMPTY: Stack

    def __init__(self, items: Iterable[Word] = (), limit: Optional[int] = MAX_STACK_DEPTH) -> None:
        self._data: list[Word] = []
        self._limit = limit
        for item in items:
            self.push(item)

    def push(self, value: Word) -> None:
        if self._limit is not None and len(self._data) >= self._limit:
            raise StackOverflow(f"Stack overflow (max {self._limit})")
        self._data.append(value)

    def pop(self) -> Word:
        if not self._data:
            raise StackUnderflow("Stack underflow")
        return self._data.pop()

    def peek(self, depth: int = 0) -> Word:
        if depth >= len(self._data):
            raise StackUnderflow(f"Stack underflow: peek({depth})")
        return self._data[-(depth + 1)]

    def swap(self, depth: int) -> None:
        """Swap top with item at depth (1-indexed: SWAP1 uses depth=1)."""
        if depth >= len(self._data):
            raise StackUnderflow(f"Stack underflow: swap({depth})")
        idx = -(depth + 1)
        self._data[-1], self._data[idx] = self._data[idx], self._data[-1]

    def dup(self, depth: int) -> None:
        """Duplicate item at depth (1-indexed: DUP1 uses depth=1)."""
        if depth > len(self._data):
            raise StackUnderflow(f"Stack underflow: dup({depth})")
        self.push(self._data[-depth])

    @property
    def limit(self) -> Optional[int]:
        return self._limit

    @property
    def size(self) -> int:
        return len(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __iter__(self) -> Iterator[Word]:
        """Iterate from top to bottom."""
        return reversed(self._data)

    def __eq__(self, other) -> bool:
        if isinstance(other, Stack):
            return self._data == other._data
        return NotImplemented

    __hash__ = None

    def __repr__(self) -> str:
        return f"Stack({self._data!r})"


class _EmptyStack(Stack):
    """Shared zero-length stack; refuses mutation."""

    __slots__ = ()

    def push(self, value: Word) -> None:
        raise TypeError("Stack.EMPTY cannot be modified")


Stack.EMPTY = _EmptyStack()


DEFAULT_MEMORY_LIMIT = 1 << 24


class Memory:
    """VM memory: byte-addressable, expands in 32-byte word increments."""

    __slots__ = ("_data", "_limit", "on_expand")

    def __init__(self, limit: int = DEFAULT_MEMORY_LIMIT) -> None:
        self._data = bytearray()
        self._limit = limit
        # Called as on_expand(old_size, new_size) after every growth.
        self.on_expand = None

    def _expand(self, offset: int, size: int) -> None:
        """Expand memory to cover [offset, offset+size)."""
        if size == 0:
            return
        end = offset + size
        if end > UINT256_CEIL:
            raise MemoryAccessError(f"Memory range [{offset}, {end}) overflows uint256")
        if end > len(self._data):
            # Expand to next 32-byte boundary
            new_size = ((end + WORD_SIZE - 1) // WORD_SIZE) * WORD_SIZE
            if new_size > self._limit:
                raise MemoryAccessError(
                    f"Memory expansion to {new_size} bytes exceeds limit of {self._limit}"
                )
            old_size = len(self._data)
            self._data.extend(b"\x00" * (new_size - old_size))
            if self.on_expand is not None:
                self.on_expand(old_size, new_size)

    def load(self, offset: int, size: int) -> bytes:
        """Read `size` bytes starting at `offset`; bytes past the end read as zero."""
        if size == 0:
            return b""
        chunk = bytes(self._data[offset : offset + size])
        return chunk.ljust(size, b"\x00")

    def load_word(self, offset: int) -> Word:
        """Load a 32-byte big-endian word."""
        return Word.from_bytes(self.load(offset, WORD_SIZE), Endian.BIG)

    def store(self, offset: int, data: bytes) -> None:
        """Write bytes to memory at offset."""
        if len(data) == 0:
            return
        self._expand(offset, len(data))
        self._data[offset : offset + len(data)] = data

    def store_word(self, offset: int, value: Word) -> None:
        """Store a Word as 32 big-endian bytes at offset."""
        self.store(offset, value.to_bytes(Endian.BIG))

    @property
    def size(self) -> int:
        return len(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __bytes__(self) -> bytes:
        return bytes(self._data)

    def __eq__(self, other) -> bool:
        if isinstance(other, Memory):
            return self._data == other._data
        return NotImplemented

    __hash__ = None

    def __repr__(self) -> str:
        return f"Memory(size={len(self._data)})"
