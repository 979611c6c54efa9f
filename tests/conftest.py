"""Pytest configuration and shared fixtures for all tests."""

import pytest

from tinyevm.common.config import ExecutionConfig
from tinyevm.vm.evm import ExecutionState
from tinyevm.vm.hooks import TracingHook

from tests.fixtures import EXAMPLE_OPCODE_FILE


# =============================================================================
# Interpreter Fixtures
# =============================================================================

@pytest.fixture
def config():
    """Default execution limits."""
    return ExecutionConfig()


@pytest.fixture
def state(config):
    """Fresh, empty execution state."""
    return ExecutionState.create([], config)


@pytest.fixture
def tracer():
    """Hook that records every executed step."""
    return TracingHook()


# =============================================================================
# File Fixtures
# =============================================================================

@pytest.fixture
def example_opcode_file():
    """Listing in `solc --opcodes` form."""
    return EXAMPLE_OPCODE_FILE


@pytest.fixture
def opcode_file(tmp_path):
    """Factory writing a listing to a temporary file."""
    def _write(text: str, name: str = "program.opcode"):
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return path
    return _write
