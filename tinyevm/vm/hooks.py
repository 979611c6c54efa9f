"""
Interpreter hook system.

Provides extension points for tracing and inspection without modifying the
dispatch loop. The loop uses DefaultHook (all no-ops) unless told otherwise;
TracingHook records a step per executed instruction.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from tinyevm.vm.word import Word

if TYPE_CHECKING:
    from tinyevm.vm.evm import ExecutionState
    from tinyevm.vm.opcodes import Instruction

logger = logging.getLogger(__name__)


class ExecutionHook:
    """Base hook interface. Override methods to observe execution."""

    def before_instruction(self, state: ExecutionState, instr: Instruction) -> None:
        """Called before an instruction's handler runs."""
        pass

    def after_instruction(self, state: ExecutionState, instr: Instruction) -> None:
        """Called after an instruction's handler returns."""
        pass

    def on_storage_change(self, key: Word, old_value: Word, new_value: Word) -> None:
        """Called when a storage slot is written."""
        pass

    def on_memory_expand(self, old_size: int, new_size: int) -> None:
        """Called when memory grows."""
        pass


class DefaultHook(ExecutionHook):
    """All operations are no-ops."""
    pass


@dataclass(frozen=True)
class TraceStep:
    pc: int
    instruction: str
    stack: tuple[Word, ...]  # top first, after the instruction ran
    memory_size: int


class TracingHook(ExecutionHook):
    """Records one TraceStep per executed instruction and logs it at DEBUG."""

    def __init__(self) -> None:
        self.steps: list[TraceStep] = []
        self.storage_writes: list[tuple[Word, Word, Word]] = []

    def after_instruction(self, state: ExecutionState, instr: Instruction) -> None:
        step = TraceStep(
            pc=state.pc,
            instruction=str(instr),
            stack=tuple(state.stack),
            memory_size=state.memory.size,
        )
        self.steps.append(step)
        logger.debug(
            "pc=%d %-16s depth=%d msize=%d",
            step.pc, step.instruction, len(step.stack), step.memory_size,
        )

    def on_storage_change(self, key: Word, old_value: Word, new_value: Word) -> None:
        self.storage_writes.append((key, old_value, new_value))
        logger.debug("sstore %s: %s -> %s", key.hex(), old_value.hex(), new_value.hex())
