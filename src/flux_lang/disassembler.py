"""
Flux Bytecode Listing
=====================

Turns a compiled Program back into a human-readable listing. This is a
read-only projection of the Program used by `flux compile` and by the
shell's `:bytecode` command.

Listing format:

    Addr  Opcode    Argument
    0000  INC
    0001  LOOP      -> 4
    0002  DEC
    0003  END       -> 1

Only LOOP and END show an argument.

Copyright (c) 2026 Flux Language Project & Contributors
"""

from dataclasses import dataclass
from typing import List, Optional

from flux_lang.bytecode import OPCODE_TABLE, Opcode, Program


LISTING_HEADER = "Addr  Opcode    Argument"


@dataclass(frozen=True)
class ListingEntry:
    """
    One line of a bytecode listing.

    Attributes:
        address: Instruction index
        opcode: The opcode
        mnemonic: Human-readable mnemonic
        arg: Jump target for LOOP/END, None otherwise
        comment: Additional context (source symbol, nesting depth)
    """
    address: int
    opcode: Opcode
    mnemonic: str
    arg: Optional[int] = None
    comment: str = ""

    def __str__(self) -> str:
        if self.arg is not None:
            line = f"{self.address:04d}  {self.mnemonic:<8}  -> {self.arg}"
        else:
            line = f"{self.address:04d}  {self.mnemonic}"
        if self.comment:
            line = f"{line:<26}; {self.comment}"
        return line

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "address": self.address,
            "opcode": int(self.opcode),
            "mnemonic": self.mnemonic,
            "arg": self.arg,
            "comment": self.comment,
        }


class FluxDisassembler:
    """
    Produces listings from compiled programs.

    Example:
        disasm = FluxDisassembler()
        for entry in disasm.disassemble(program):
            print(entry)
    """

    def disassemble(self, program: Program, count: Optional[int] = None) -> List[ListingEntry]:
        """
        List the instructions of a program.

        Args:
            program: Compiled program
            count: Maximum number of entries (None = all)
        """
        result = []
        for address, inst in enumerate(program):
            if count is not None and address >= count:
                break
            result.append(ListingEntry(
                address=address,
                opcode=inst.opcode,
                mnemonic=OPCODE_TABLE[inst.opcode].mnemonic,
                arg=inst.arg if inst.is_jump else None,
            ))
        return result

    def annotate(self, program: Program) -> List[ListingEntry]:
        """List the program with each entry's source symbol and loop depth."""
        result = []
        depth = 0
        for entry in self.disassemble(program):
            if entry.opcode == Opcode.END:
                depth -= 1
            symbol = OPCODE_TABLE[entry.opcode].symbol
            comment = f"'{symbol}' depth {depth}" if depth else f"'{symbol}'"
            result.append(ListingEntry(
                entry.address, entry.opcode, entry.mnemonic, entry.arg, comment
            ))
            if entry.opcode == Opcode.LOOP:
                depth += 1
        return result

    def disassemble_to_text(self, program: Program, annotate: bool = False) -> str:
        """Render the full listing, header included."""
        entries = self.annotate(program) if annotate else self.disassemble(program)
        lines = [LISTING_HEADER, ""]
        lines.extend(str(entry) for entry in entries)
        return "\n".join(lines)


def disassemble(program: Program) -> List[ListingEntry]:
    """List the instructions of a program."""
    return FluxDisassembler().disassemble(program)


def format_listing(program: Program, annotate: bool = False) -> str:
    """Render a program as a bytecode listing."""
    return FluxDisassembler().disassemble_to_text(program, annotate=annotate)
