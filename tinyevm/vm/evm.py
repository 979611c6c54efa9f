"""
Interpreter main loop.

ExecutionState holds the instruction list, program counter and the
Stack / Memory / Storage owned by one run.
run_instructions() is the fetch-dispatch loop.
eval_instructions() builds a fresh state, runs it and returns the final
(stack, storage, memory); execute() does the same starting from source text.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, NamedTuple, Optional

from tinyevm.common.config import DEFAULT_CONFIG, ExecutionConfig
from tinyevm.vm.hooks import DefaultHook, ExecutionHook, TracingHook
from tinyevm.vm.lexer import lex
from tinyevm.vm.memory import EvmError, Memory, Stack, UnknownOpcode
from tinyevm.vm.opcodes import OPCODE_TABLE, Instruction
from tinyevm.vm.storage import Storage

logger = logging.getLogger(__name__)


@dataclass
class ExecutionState:
    """State of a single run. Never shared between runs."""

    instructions: list[Instruction] = field(default_factory=list)
    pc: int = 0

    stack: Stack = field(default_factory=Stack)
    memory: Memory = field(default_factory=Memory)
    storage: Storage = field(default_factory=Storage)

    @classmethod
    def create(
        cls,
        instructions: Iterable[Instruction],
        config: ExecutionConfig = DEFAULT_CONFIG,
    ) -> ExecutionState:
        return cls(
            instructions=list(instructions),
            stack=Stack(limit=config.stack_limit),
            memory=Memory(limit=config.memory_limit),
        )

    @property
    def finished(self) -> bool:
        return self.pc >= len(self.instructions)


class ExecutionResult(NamedTuple):
    stack: Stack
    storage: Storage
    memory: Memory


def run_instructions(state: ExecutionState, hook: Optional[ExecutionHook] = None) -> None:
    """Execute the state's instructions in order until they run out.

    Any EvmError propagates with `pc` set to the failing instruction. The
    hook is detached from storage and memory once the loop ends.
    """
    hook = hook or DefaultHook()
    state.storage.on_change = hook.on_storage_change
    state.memory.on_expand = hook.on_memory_expand

    try:
        while not state.finished:
            instr = state.instructions[state.pc]
            handler = OPCODE_TABLE.get(instr.opcode)
            try:
                if handler is None:
                    raise UnknownOpcode(instr.opcode)
                hook.before_instruction(state, instr)
                handler(state, instr)
            except EvmError as e:
                e.pc = state.pc
                logger.debug("Execution failed at pc=%d (%s): %s", state.pc, instr, e)
                raise
            hook.after_instruction(state, instr)
            state.pc += 1
    finally:
        state.storage.on_change = None
        state.memory.on_expand = None


def eval_instructions(
    instructions: Iterable[Instruction],
    config: Optional[ExecutionConfig] = None,
    hook: Optional[ExecutionHook] = None,
) -> ExecutionResult:
    """Run instructions against a fresh stack, memory and storage.

    Returns the final (stack, storage, memory). On failure the exception
    propagates and the partially mutated state is discarded.
    """
    config = config or DEFAULT_CONFIG
    if hook is None and config.trace:
        hook = TracingHook()

    state = ExecutionState.create(instructions, config)
    logger.debug("Running %d instructions", len(state.instructions))
    run_instructions(state, hook)
    logger.debug(
        "Finished: stack depth=%d, storage slots=%d, memory=%d bytes",
        len(state.stack), len(state.storage), state.memory.size,
    )
    return ExecutionResult(state.stack, state.storage, state.memory)


def execute(
    source: str,
    config: Optional[ExecutionConfig] = None,
    hook: Optional[ExecutionHook] = None,
) -> ExecutionResult:
    """Decode `source` (hex bytecode or opcode listing) and run it."""
    return eval_instructions(lex(source), config=config, hook=hook)
