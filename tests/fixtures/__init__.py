"""Test fixtures for interpreter tests."""

from pathlib import Path

from .programs import (
    ONE_PLUS_ONE_HEX,
    ONE_PLUS_ONE_LISTING,
    TWO_PLUS_ONE_HEX,
    MSTORE_42_HEX,
    SSTORE_7_9_HEX,
    ARITHMETIC_TO_STORAGE_HEX,
    SOLC_PROLOGUE_LISTING,
    UNDERFLOW_HEX,
    UNKNOWN_OPCODE_HEX,
)

FIXTURES_DIR = Path(__file__).parent

EXAMPLE_OPCODE_FILE = FIXTURES_DIR / "Example.opcode"
