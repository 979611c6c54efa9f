"""
Opcode definitions and handlers.

Each handler takes the ExecutionState and the Instruction being executed and
mutates the state's stack, memory or storage.
Handlers are registered in the OPCODE_TABLE dict, keyed by byte value.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import TYPE_CHECKING, Callable, Optional

from tinyevm.vm.word import Endian, Side, Word, pad

if TYPE_CHECKING:
    from tinyevm.vm.evm import ExecutionState


# ---------------------------------------------------------------------------
# Opcode enum / names
# ---------------------------------------------------------------------------

# fmt: off
class Op(IntEnum):
    ADD             = 0x01
    MUL             = 0x02
    SUB             = 0x03
    ISZERO          = 0x15
    POP             = 0x50
    MSTORE          = 0x52
    SSTORE          = 0x55
    PUSH1           = 0x60
    PUSH2           = 0x61
    DUP1            = 0x80
    DUP2            = 0x81
    SWAP1           = 0x90
# fmt: on

    @classmethod
    def lookup(cls, value: int) -> Optional[Op]:
        """Return the known opcode for a byte value, or None."""
        try:
            return cls(value)
        except ValueError:
            return None


# Number of immediate operand bytes following each PUSH opcode
PUSH_SIZES: dict[int, int] = {
    Op.PUSH1: 1,
    Op.PUSH2: 2,
}


@dataclass(frozen=True)
class Instruction:
    """One decoded opcode plus its immediate operand bytes (PUSH only)."""

    opcode: int
    operand: bytes = b""

    def __post_init__(self) -> None:
        if not 0 <= self.opcode <= 0xFF:
            raise ValueError(f"Opcode out of byte range: {self.opcode}")
        expected = PUSH_SIZES.get(self.opcode, 0)
        if len(self.operand) != expected:
            raise ValueError(
                f"0x{self.opcode:02x} takes {expected} operand bytes, got {len(self.operand)}"
            )

    @property
    def op(self) -> Optional[Op]:
        return Op.lookup(self.opcode)

    @property
    def name(self) -> str:
        op = self.op
        return op.name if op is not None else f"0x{self.opcode:02x}"

    @property
    def size(self) -> int:
        """Encoded length in bytes."""
        return 1 + len(self.operand)

    def to_bytes(self) -> bytes:
        return bytes([self.opcode]) + self.operand

    def __str__(self) -> str:
        if self.operand:
            return f"{self.name} 0x{self.operand.hex()}"
        return self.name


# ---------------------------------------------------------------------------
# Opcode handlers
# ---------------------------------------------------------------------------

# -- Arithmetic --

def op_add(state, instr):
    a, b = state.stack.pop(), state.stack.pop()
    state.stack.push(a.add(b))


def op_mul(state, instr):
    a, b = state.stack.pop(), state.stack.pop()
    state.stack.push(a.mul(b))


def op_sub(state, instr):
    # Second-from-top minus top.
    top, second = state.stack.pop(), state.stack.pop()
    state.stack.push(second.sub(top))


def op_iszero(state, instr):
    a = state.stack.pop()
    state.stack.push(a.iszero())


# -- Stack, Memory, Storage --

def op_pop(state, instr):
    state.stack.pop()


def op_mstore(state, instr):
    offset = state.stack.pop()
    value = state.stack.pop()
    state.memory.store_word(int(offset), value)


def op_sstore(state, instr):
    key = state.stack.pop()
    value = state.stack.pop()
    state.storage.set(key, value)


# -- PUSH --

def _make_push(n: int):
    def op_push(state, instr):
        data = pad(instr.operand[:n], 0x00, Side.LEFT)
        state.stack.push(Word.from_bytes(data, Endian.BIG))
    return op_push


# -- DUP --

def _make_dup(n: int):
    def op_dup(state, instr):
        state.stack.dup(n)
    return op_dup


# -- SWAP --

def _make_swap(n: int):
    def op_swap(state, instr):
        state.stack.swap(n)
    return op_swap


# ---------------------------------------------------------------------------
# Opcode table
# ---------------------------------------------------------------------------

Handler = Callable[["ExecutionState", Instruction], None]

OPCODE_TABLE: dict[int, Handler] = {}


def _register() -> None:
    t = OPCODE_TABLE

    t[Op.ADD] = op_add
    t[Op.MUL] = op_mul
    t[Op.SUB] = op_sub
    t[Op.ISZERO] = op_iszero

    t[Op.POP] = op_pop
    t[Op.MSTORE] = op_mstore
    t[Op.SSTORE] = op_sstore

    for op, n in PUSH_SIZES.items():
        t[op] = _make_push(n)

    t[Op.DUP1] = _make_dup(1)
    t[Op.DUP2] = _make_dup(2)

    t[Op.SWAP1] = _make_swap(1)


_register()
