"""
tinyevm: run EVM-style bytecode from the command line.

  1. Parse CLI arguments
  2. Read the program (hex argument or opcode file)
  3. Decode and execute it
  4. Print the final stack, storage and memory
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Optional

from eth_utils import encode_hex

from tinyevm.common.config import DEFAULT_CONFIG, ExecutionConfig
from tinyevm.vm.evm import ExecutionResult, eval_instructions
from tinyevm.vm.hooks import TracingHook
from tinyevm.vm.lexer import disassemble, lex, lex_opcodes
from tinyevm.vm.memory import DecodeError, EvmError

logger = logging.getLogger("tinyevm")

EXIT_OK = 0
EXIT_EXECUTION_ERROR = 1
EXIT_INPUT_ERROR = 2


# ---------------------------------------------------------------------------
# Input
# ---------------------------------------------------------------------------

def load_opcode_file(path: str | Path) -> str:
    """Read an opcode listing (e.g. `solc --opcodes` output) as text.

    Raises DecodeError if the file is not UTF-8 text.
    """
    try:
        return Path(path).read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise DecodeError(f"Opcode file is not UTF-8 text: {e.reason}", e.start) from e


def non_negative_int(value: str) -> int:
    n = int(value)
    if n < 0:
        raise argparse.ArgumentTypeError(f"must be >= 0, got {n}")
    return n


# ---------------------------------------------------------------------------
# Output
# ---------------------------------------------------------------------------

def result_to_dict(result: ExecutionResult) -> dict:
    stack, storage, memory = result
    return {
        "stack": [word.hex() for word in stack],
        "storage": {key.hex(): value.hex() for key, value in storage.items()},
        "memory": encode_hex(bytes(memory)),
    }


def format_result(result: ExecutionResult) -> str:
    stack, storage, memory = result
    lines = [f"Stack ({len(stack)} items, top first):"]
    for depth, word in enumerate(stack):
        lines.append(f"  [{depth}] {word.hex()}")
    lines.append(f"Storage ({len(storage)} slots):")
    for key, value in storage.items():
        lines.append(f"  {key.hex()} => {value.hex()}")
    lines.append(f"Memory ({memory.size} bytes):")
    raw = bytes(memory)
    for offset in range(0, len(raw), 32):
        lines.append(f"  {offset:#06x}: {raw[offset:offset + 32].hex()}")
    return "\n".join(lines)


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tinyevm",
        description="Minimal EVM-style bytecode interpreter",
    )
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument(
        "bytecode",
        nargs="?",
        help="Hex bytecode (optionally 0x-prefixed) or a quoted opcode listing",
    )
    source.add_argument(
        "--file", "-f",
        type=str,
        default=None,
        help="Path to an opcode listing (whitespace-separated bytes and mnemonics)",
    )
    parser.add_argument(
        "--unbounded-stack",
        action="store_true",
        help="Disable the 1024-item stack limit",
    )
    parser.add_argument(
        "--memory-limit",
        type=non_negative_int,
        default=DEFAULT_CONFIG.memory_limit,
        help=f"Maximum memory size in bytes (default: {DEFAULT_CONFIG.memory_limit})",
    )
    parser.add_argument(
        "--trace",
        action="store_true",
        help="Print every executed instruction with the resulting stack",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the final state as JSON",
    )
    parser.add_argument(
        "--disassemble",
        action="store_true",
        help="Print the decoded instruction listing and exit",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="WARNING",
        help="Logging level (default: WARNING)",
    )
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    # Setup logging
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    config = ExecutionConfig(
        stack_limit=None if args.unbounded_stack else DEFAULT_CONFIG.stack_limit,
        memory_limit=args.memory_limit,
    )
    hook = TracingHook() if args.trace else None

    try:
        if args.file:
            instructions = lex_opcodes(load_opcode_file(args.file))
            logger.info("Loaded %d instructions from %s", len(instructions), args.file)
        else:
            instructions = lex(args.bytecode)
    except OSError as e:
        print(f"error: {e}", file=sys.stderr)
        return EXIT_INPUT_ERROR
    except EvmError as e:
        print(f"error: {e}", file=sys.stderr)
        return EXIT_INPUT_ERROR

    if args.disassemble:
        print(disassemble(instructions))
        return EXIT_OK

    try:
        result = eval_instructions(instructions, config=config, hook=hook)
    except EvmError as e:
        print(f"error: {type(e).__name__} at pc={e.pc}: {e}", file=sys.stderr)
        return EXIT_EXECUTION_ERROR

    if hook is not None:
        for step in hook.steps:
            top = step.stack[0].hex() if step.stack else "-"
            print(f"{step.pc:4d}  {step.instruction:<16} depth={len(step.stack)} top={top}")

    if args.json:
        print(json.dumps(result_to_dict(result), indent=2))
    else:
        print(format_result(result))
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
