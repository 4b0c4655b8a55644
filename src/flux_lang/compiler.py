"""
Flux Compiler
=============

Single-pass compiler from Flux source text to bytecode.

    Source → Scan (one pass) → Program

Usage
-----
Command line:
    $ flux compile countdown.flux

Programmatic:
    >>> from flux_lang import compile_flux
    >>> program = compile_flux("+++++[#-]")
    >>> len(program)
    5

Bracket Resolution
------------------
Each '[' is emitted as LOOP with a placeholder argument and its index is
pushed on a pending-loop stack. When the matching ']' arrives, END is
emitted pointing back at the LOOP, and the LOOP is patched in place to point
just past the END. Both jumps are therefore O(1) at run time.

Any character that is not one of the nine operations is a comment, unless
strict mode is enabled.

Copyright (c) 2026 Flux Language Project & Contributors
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Union

from flux_lang.bytecode import (
    Instruction,
    Opcode,
    Program,
    SYMBOL_TO_OPCODE,
    WHITESPACE,
)
from flux_lang.errors import (
    InvalidCharacterError,
    SourceLocation,
    UnmatchedCloseBracketError,
    UnmatchedOpenBracketError,
    source_line_at,
)

logger = logging.getLogger(__name__)


@dataclass
class CompilerOptions:
    """
    Compiler configuration options.

    Attributes:
        strict: Reject comment characters instead of skipping them
    """
    strict: bool = False


class FluxCompiler:
    """
    Flux compiler.

    Example:
        compiler = FluxCompiler()
        program = compiler.compile_file("hello.flux")
        print(format_listing(program))

    A compiler instance holds no state between calls; every compile starts
    with an empty instruction list and an empty pending-loop stack.
    """

    def __init__(self, options: Optional[CompilerOptions] = None):
        self.options = options or CompilerOptions()

    def compile_source(self, source: str, filename: str = "<input>") -> Program:
        """
        Compile Flux source code to a Program.

        Args:
            source: Flux source text
            filename: Source filename for error messages

        Returns:
            The compiled Program

        Raises:
            UnmatchedCloseBracketError: ']' with no pending '['
            UnmatchedOpenBracketError: '[' still open at end of source
            InvalidCharacterError: comment character in strict mode
        """
        instructions: List[Instruction] = []
        loop_stack: List[int] = []
        # Source offsets of pending '[' for error reporting
        open_positions: List[int] = []

        for position, char in enumerate(source):
            opcode = SYMBOL_TO_OPCODE.get(char)

            if opcode is None:
                if self.options.strict and char not in WHITESPACE:
                    raise InvalidCharacterError(
                        char,
                        position,
                        location=SourceLocation.from_offset(source, position, filename),
                        source_line=source_line_at(source, position),
                    )
                continue

            if opcode == Opcode.LOOP:
                loop_stack.append(len(instructions))
                open_positions.append(position)
                instructions.append(Instruction(Opcode.LOOP, 0))

            elif opcode == Opcode.END:
                if not loop_stack:
                    raise UnmatchedCloseBracketError(
                        position,
                        location=SourceLocation.from_offset(source, position, filename),
                        source_line=source_line_at(source, position),
                    )
                loop_start = loop_stack.pop()
                open_positions.pop()
                loop_end = len(instructions)
                instructions.append(Instruction(Opcode.END, loop_start))
                instructions[loop_start] = Instruction(Opcode.LOOP, loop_end + 1)

            else:
                instructions.append(Instruction(opcode))

        if loop_stack:
            outermost = open_positions[0]
            raise UnmatchedOpenBracketError(
                len(loop_stack),
                positions=list(open_positions),
                location=SourceLocation.from_offset(source, outermost, filename),
                source_line=source_line_at(source, outermost),
            )

        logger.debug(
            f"Compiled {filename}: {len(source)} chars -> {len(instructions)} instructions"
        )
        return Program(instructions, source_name=filename)

    def compile_file(self, filepath: Union[str, Path]) -> Program:
        """
        Compile a Flux source file.

        Raises:
            FileNotFoundError: If the source file does not exist
            FluxCompileError: If compilation fails
        """
        path = Path(filepath)
        if not path.exists():
            raise FileNotFoundError(f"Source file not found: {filepath}")

        # Undecodable bytes can only be comments
        source = path.read_bytes().decode("utf-8", errors="replace")
        return self.compile_source(source, str(filepath))


def compile_flux(source: str, filename: str = "<input>", strict: bool = False) -> Program:
    """Compile Flux source with default options."""
    return FluxCompiler(CompilerOptions(strict=strict)).compile_source(source, filename)
