"""
Bytecode and opcode-listing decoder.

lex_bytecode() decodes a hex string ("0x6001600101").
lex_opcodes() decodes whitespace-separated tokens ("PUSH1 0x01 PUSH1 0x01 ADD").
lex() picks one of the two from the shape of the input.

Decoding is all-or-nothing: any malformed input raises DecodeError and no
partial instruction list is returned.
"""

from __future__ import annotations

import logging
import re
from typing import Iterable, Optional

from eth_utils import decode_hex, remove_0x_prefix

from tinyevm.vm.memory import DecodeError
from tinyevm.vm.opcodes import PUSH_SIZES, Instruction, Op

logger = logging.getLogger(__name__)

_BARE_BYTE_RE = re.compile(r"^[0-9a-fA-F]{2}$")
_PREFIXED_HEX_RE = re.compile(r"^0[xX][0-9a-fA-F]+$")


# ---------------------------------------------------------------------------
# Byte stream -> instructions
# ---------------------------------------------------------------------------

def decode_instructions(code: bytes) -> list[Instruction]:
    """Split raw bytecode into instructions.

    PUSH operands are consumed verbatim and never decoded as opcodes.
    """
    instructions: list[Instruction] = []
    i = 0
    while i < len(code):
        opcode = code[i]
        n = PUSH_SIZES.get(opcode, 0)
        if i + 1 + n > len(code):
            raise DecodeError(
                f"{Op(opcode).name} needs {n} operand bytes, only {len(code) - i - 1} left",
                position=i,
            )
        instructions.append(Instruction(opcode, bytes(code[i + 1 : i + 1 + n])))
        i += 1 + n
    return instructions


# ---------------------------------------------------------------------------
# Hex string input
# ---------------------------------------------------------------------------

def lex_bytecode(source: str) -> list[Instruction]:
    """Decode a hex string, optionally 0x-prefixed, two digits per byte."""
    digits = remove_0x_prefix(source.strip())
    if len(digits) % 2:
        raise DecodeError(f"Odd-length hex string ({len(digits)} digits)")
    try:
        code = decode_hex(digits)
    except ValueError as e:
        raise DecodeError(f"Invalid hex string: {e}") from e
    instructions = decode_instructions(code)
    logger.debug("Decoded %d bytes into %d instructions", len(code), len(instructions))
    return instructions


# ---------------------------------------------------------------------------
# Opcode listing input
# ---------------------------------------------------------------------------

def parse_byte_literal(token: str) -> Optional[bytes]:
    """First parse attempt: a hex byte literal.

    Accepts exactly two bare hex digits ("60"), or a 0x-prefixed literal of
    any length ("0x80", "0x0100", "0x0"), odd digit counts padded on the left.
    Returns None if the token is not a byte literal.
    """
    if _BARE_BYTE_RE.match(token):
        return bytes.fromhex(token)
    if _PREFIXED_HEX_RE.match(token):
        digits = remove_0x_prefix(token)
        if len(digits) % 2:
            digits = "0" + digits
        return bytes.fromhex(digits)
    return None


def parse_mnemonic(token: str) -> Optional[bytes]:
    """Second parse attempt: an uppercase mnemonic such as "PUSH1"."""
    op = Op.__members__.get(token)
    if op is None:
        return None
    return bytes([op])


def parse_token(token: str, position: Optional[int] = None) -> bytes:
    """Parse one listing token into the bytes it stands for.

    Byte literals take precedence over mnemonics.
    """
    data = parse_byte_literal(token)
    if data is None:
        data = parse_mnemonic(token)
    if data is None:
        raise DecodeError(f"Unknown token {token!r}", position=position)
    return data


def lex_opcodes(source: str) -> list[Instruction]:
    """Decode whitespace-separated byte literals and mnemonics."""
    code = bytearray()
    for index, token in enumerate(source.split()):
        code.extend(parse_token(token, position=index))
    instructions = decode_instructions(bytes(code))
    logger.debug("Decoded listing into %d instructions", len(instructions))
    return instructions


def lex(source: str) -> list[Instruction]:
    """Decode either a hex string or an opcode listing."""
    tokens = source.split()
    if not tokens:
        return []
    if len(tokens) == 1 and parse_mnemonic(tokens[0]) is None:
        return lex_bytecode(tokens[0])
    return lex_opcodes(source)


# ---------------------------------------------------------------------------
# Instructions -> text / bytes
# ---------------------------------------------------------------------------

def disassemble(instructions: Iterable[Instruction]) -> str:
    """Render instructions as a listing that lex_opcodes() reads back."""
    return " ".join(str(instr) for instr in instructions)


def assemble(instructions: Iterable[Instruction]) -> bytes:
    return b"".join(instr.to_bytes() for instr in instructions)
