"""
Execution configuration.

Limits applied to each interpreter run. There is no environment-variable or
config-file surface; callers build an ExecutionConfig (or use a preset).
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional

from tinyevm.vm.memory import DEFAULT_MEMORY_LIMIT, MAX_STACK_DEPTH


@dataclass(frozen=True)
class ExecutionConfig:
    # Max stack items; None means unbounded
    stack_limit: Optional[int] = MAX_STACK_DEPTH

    # Max memory size in bytes
    memory_limit: int = DEFAULT_MEMORY_LIMIT

    # Record and log every step when no explicit hook is supplied
    trace: bool = False

    def __post_init__(self) -> None:
        if self.stack_limit is not None and self.stack_limit < 0:
            raise ValueError(f"stack_limit must be >= 0, got {self.stack_limit}")
        if self.memory_limit < 0:
            raise ValueError(f"memory_limit must be >= 0, got {self.memory_limit}")

    def with_overrides(self, **changes) -> ExecutionConfig:
        return replace(self, **changes)


DEFAULT_CONFIG = ExecutionConfig()

UNBOUNDED_CONFIG = ExecutionConfig(stack_limit=None)
