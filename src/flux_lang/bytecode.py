"""
Flux Bytecode Model
===================

Opcodes, instructions and compiled programs.

Flux has exactly nine operations. The compiler turns each significant source
character into one Instruction; loop brackets carry pre-computed jump
targets so the interpreter never has to search for a matching bracket.

Jump arguments:
    LOOP  arg = index just past the matching END (forward skip target)
    END   arg = index of the matching LOOP (backward repeat target)

Every other opcode has arg 0.
"""

from dataclasses import dataclass
from enum import Enum, IntEnum, auto
from typing import Dict, Iterator, List, Sequence, Tuple, Union, overload


class Opcode(IntEnum):
    """The nine Flux operations, numbered as the bytecode encodes them."""
    INC = 0      # + : Increment accumulator
    DEC = 1      # - : Decrement accumulator
    PUSH = 2     # * : Push accumulator to stack
    POP = 3      # / : Pop stack to accumulator
    LOOP = 4     # [ : Begin loop
    END = 5      # ] : End loop
    OUT = 6      # . : Output as ASCII
    IN = 7       # , : Input character
    OUTNUM = 8   # # : Output as number


class OpcodeCategory(Enum):
    """Categories of Flux operations for documentation."""
    ARITHMETIC = auto()
    STACK = auto()
    CONTROL = auto()
    IO = auto()


@dataclass(frozen=True)
class OpcodeInfo:
    """Information about a Flux opcode."""
    opcode: Opcode
    mnemonic: str
    symbol: str
    category: OpcodeCategory
    description: str


# =============================================================================
# Opcode Table
# =============================================================================

OPCODE_TABLE: Dict[Opcode, OpcodeInfo] = {
    Opcode.INC: OpcodeInfo(Opcode.INC, "INC", "+", OpcodeCategory.ARITHMETIC,
                           "Increment accumulator"),
    Opcode.DEC: OpcodeInfo(Opcode.DEC, "DEC", "-", OpcodeCategory.ARITHMETIC,
                           "Decrement accumulator"),
    Opcode.PUSH: OpcodeInfo(Opcode.PUSH, "PUSH", "*", OpcodeCategory.STACK,
                            "Push a copy of the accumulator onto the stack"),
    Opcode.POP: OpcodeInfo(Opcode.POP, "POP", "/", OpcodeCategory.STACK,
                           "Pop stack into accumulator (0 if stack is empty)"),
    Opcode.LOOP: OpcodeInfo(Opcode.LOOP, "LOOP", "[", OpcodeCategory.CONTROL,
                            "Skip past matching ']' if accumulator is 0"),
    Opcode.END: OpcodeInfo(Opcode.END, "END", "]", OpcodeCategory.CONTROL,
                           "Jump back to matching '[' if accumulator is not 0"),
    Opcode.OUT: OpcodeInfo(Opcode.OUT, "OUT", ".", OpcodeCategory.IO,
                           "Output accumulator mod 256 as a byte"),
    Opcode.IN: OpcodeInfo(Opcode.IN, "IN", ",", OpcodeCategory.IO,
                          "Read one byte into accumulator (0 on end of input)"),
    Opcode.OUTNUM: OpcodeInfo(Opcode.OUTNUM, "OUTNUM", "#", OpcodeCategory.IO,
                              "Output accumulator as a decimal number"),
}

SYMBOL_TO_OPCODE: Dict[str, Opcode] = {
    info.symbol: op for op, info in OPCODE_TABLE.items()
}

WHITESPACE = frozenset(" \t\n\r")

JUMP_OPCODES = frozenset({Opcode.LOOP, Opcode.END})


# =============================================================================
# Instructions and Programs
# =============================================================================

@dataclass(frozen=True)
class Instruction:
    """A single bytecode instruction with its optional jump argument."""
    opcode: Opcode
    arg: int = 0

    @property
    def mnemonic(self) -> str:
        return OPCODE_TABLE[self.opcode].mnemonic

    @property
    def is_jump(self) -> bool:
        return self.opcode in JUMP_OPCODES

    def __str__(self) -> str:
        if self.is_jump:
            return f"{self.mnemonic} -> {self.arg}"
        return self.mnemonic


class Program:
    """
    A compiled Flux program.

    Programs are immutable once built. The compiler is the only producer, so
    every LOOP has exactly one matching END and both carry resolved targets.

    Example:
        >>> program = compile_flux("+[-]")
        >>> [str(i) for i in program]
        ['INC', 'LOOP -> 4', 'DEC', 'END -> 1']
    """

    __slots__ = ("_instructions", "source_name")

    def __init__(self, instructions: Sequence[Instruction], source_name: str = "<input>"):
        self._instructions: Tuple[Instruction, ...] = tuple(instructions)
        self.source_name = source_name

    @property
    def instructions(self) -> Tuple[Instruction, ...]:
        return self._instructions

    def __len__(self) -> int:
        return len(self._instructions)

    def __iter__(self) -> Iterator[Instruction]:
        return iter(self._instructions)

    @overload
    def __getitem__(self, index: int) -> Instruction: ...

    @overload
    def __getitem__(self, index: slice) -> Tuple[Instruction, ...]: ...

    def __getitem__(self, index: Union[int, slice]):
        return self._instructions[index]

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Program):
            return self._instructions == other._instructions
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._instructions)

    def __repr__(self) -> str:
        return f"Program({len(self)} instructions, source={self.source_name!r})"

    def opcodes(self) -> List[Opcode]:
        """Return the opcode sequence, without arguments."""
        return [inst.opcode for inst in self._instructions]

    def loop_pairs(self) -> List[Tuple[int, int]]:
        """
        Return (loop_index, end_index) for every loop, ordered by end index.

        Pairs are read straight from the END arguments; no bracket search
        is needed because targets were resolved at compile time.
        """
        return [
            (inst.arg, index)
            for index, inst in enumerate(self._instructions)
            if inst.opcode == Opcode.END
        ]
