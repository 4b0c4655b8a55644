"""
Flux Error Hierarchy
====================

This module defines the exception hierarchy for the Flux toolchain.
All exceptions inherit from FluxError, allowing callers to catch every
toolchain error with a single except clause if desired.

Exception Hierarchy
-------------------
FluxError (base)
├── FluxCompileError (compiler-related)
│   ├── UnmatchedCloseBracketError - ']' with no pending '['
│   ├── UnmatchedOpenBracketError - '[' left open at end of source
│   └── InvalidCharacterError - comment character in strict mode
└── FluxRuntimeError (interpreter-related)
    ├── FluxIOError - input source or output sink failed
    └── FluxInternalError - corrupted program reached the interpreter

Only bracket nesting and I/O can fail. Popping an empty stack, unbounded
stack growth and loops that never terminate are defined behaviour, not
errors.

Compile errors follow this format:
    filename:line:column: error: description
        source_line_text
        ^ (pointer to error location)
    hint: suggestion for fixing (when available)

Copyright (c) 2026 Flux Language Project & Contributors
"""

from dataclasses import dataclass
from typing import Optional


# =============================================================================
# Base Exception Class
# =============================================================================

class FluxError(Exception):
    """
    Base exception for all Flux errors.

        try:
            execute_source(source)
        except FluxError as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Source Location Tracking
# =============================================================================

@dataclass(frozen=True)
class SourceLocation:
    """
    A location in Flux source code, for error reporting.

    Attributes:
        filename: Name of the source file (or "<input>" for string input)
        line: Line number (1-indexed)
        column: Column number (1-indexed)
    """
    filename: str
    line: int
    column: int

    def __str__(self) -> str:
        return f"{self.filename}:{self.line}:{self.column}"

    @classmethod
    def from_offset(cls, source: str, offset: int, filename: str = "<input>") -> "SourceLocation":
        """Convert a 0-based character offset into a line/column location."""
        line = source.count("\n", 0, offset) + 1
        line_start = source.rfind("\n", 0, offset) + 1
        return cls(filename, line, offset - line_start + 1)


def source_line_at(source: str, offset: int) -> str:
    """Return the text of the line containing `offset`, without its newline."""
    start = source.rfind("\n", 0, offset) + 1
    end = source.find("\n", offset)
    if end < 0:
        end = len(source)
    return source[start:end].rstrip("\r")


# =============================================================================
# Compiler Exceptions
# =============================================================================

class FluxCompileError(FluxError):
    """
    Base exception for all compilation errors.

    Attributes:
        message: The error description
        location: Where in the source the error occurred (optional)
        hint: A suggestion for fixing the error (optional)
        source_line: The actual source text at the error location (optional)
    """

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
    ):
        self.message = message
        self.location = location
        self.hint = hint
        self.source_line = source_line
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """
        Format the error message with location, source context, and hint.

        Example output:
            loop.flux:2:7: error: unmatched ']'
                +++-]]
                     ^
            hint: remove the ']' or add a matching '[' before it
        """
        parts = []

        if self.location:
            parts.append(f"{self.location}: error: {self.message}")
        else:
            parts.append(f"error: {self.message}")

        if self.source_line is not None and self.location is not None:
            parts.append(f"    {self.source_line}")
            if self.location.column > 0:
                padding = " " * (4 + self.location.column - 1)
                parts.append(f"{padding}^")

        if self.hint:
            parts.append(f"hint: {self.hint}")

        return "\n".join(parts)


class UnmatchedCloseBracketError(FluxCompileError):
    """
    A ']' was found while no '[' was pending.

    Attributes:
        position: 0-based character offset of the offending ']'
    """

    def __init__(
        self,
        position: int,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.position = position
        super().__init__(
            f"unmatched ']' at position {position}",
            location=location,
            hint="remove the ']' or add a matching '[' before it",
            source_line=source_line,
        )


class UnmatchedOpenBracketError(FluxCompileError):
    """
    One or more '[' were still open when the source ended.

    Attributes:
        count: Number of unclosed brackets
        positions: 0-based offsets of the unclosed '[' characters, outermost first
    """

    def __init__(
        self,
        count: int,
        positions: Optional[list[int]] = None,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.count = count
        self.positions = positions or []
        word = "bracket" if count == 1 else "brackets"
        super().__init__(
            f"{count} unmatched '[' {word} in source code",
            location=location,
            hint=f"add {count} closing ']' to balance the loops",
            source_line=source_line,
        )


class InvalidCharacterError(FluxCompileError):
    """
    A non-operation, non-whitespace character was found in strict mode.

    Attributes:
        char: The rejected character
        position: 0-based character offset
    """

    def __init__(
        self,
        char: str,
        position: int,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.char = char
        self.position = position
        super().__init__(
            f"invalid character {char!r} at position {position}",
            location=location,
            hint="strict mode only accepts + - * / [ ] . , # and whitespace",
            source_line=source_line,
        )


# =============================================================================
# Runtime Exceptions
# =============================================================================

class FluxRuntimeError(FluxError):
    """Base exception for errors raised while a program runs."""
    pass


class FluxIOError(FluxRuntimeError):
    """
    The input source or output sink failed during execution.

    Output written before the failure is not retracted. End-of-input is not
    a failure; it loads 0 into the accumulator.

    Attributes:
        cause: The underlying exception
        pc: Program counter of the instruction that failed
    """

    def __init__(self, operation: str, cause: BaseException, pc: int = -1):
        self.operation = operation
        self.cause = cause
        self.pc = pc
        super().__init__(f"{operation} error: {cause}")


class FluxInternalError(FluxRuntimeError):
    """
    The interpreter met an instruction the compiler can never emit.

    Programs only come from the compiler, so this signals a corrupted
    Program rather than a user mistake.
    """
    pass
