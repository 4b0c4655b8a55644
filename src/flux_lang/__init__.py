"""
Flux - Compiler and Virtual Machine for the Flux Language
=========================================================

Flux is a minimal, stack-based esoteric language with exactly nine
operations, one accumulator register and one unbounded integer stack.

Main Components
---------------
- **compiler**: single-pass compiler from source text to bytecode
    Resolves loop brackets once, so jumps cost O(1) at run time

- **vm**: bytecode interpreter
    Runs a Program against a binary input source and output sink

- **disassembler**: bytecode listings for `flux compile`

- **repl**: interactive shell for `flux interactive`

Quick Start
-----------
Compile and run a program:
    >>> import io
    >>> from flux_lang import compile_flux, FluxVM
    >>> out = io.BytesIO()
    >>> FluxVM(compile_flux("+++++[#-]"), io.BytesIO(), out).run()
    >>> out.getvalue()
    b'54321'

Show the bytecode:
    from flux_lang import format_listing
    print(format_listing(compile_flux("+[-]")))

Or use the command-line tool:
    $ flux run countdown.flux
    $ flux compile countdown.flux
    $ flux repl

Version History
---------------
1.0.0 - Initial release with compiler, VM, listing and interactive shell

Copyright (c) 2026 Flux Language Project & Contributors
"""

__version__ = "1.0.0"

# =============================================================================
# Public API Exports
# =============================================================================

from flux_lang.bytecode import (
    Instruction,
    Opcode,
    OpcodeCategory,
    OpcodeInfo,
    OPCODE_TABLE,
    Program,
    SYMBOL_TO_OPCODE,
)
from flux_lang.compiler import CompilerOptions, FluxCompiler, compile_flux
from flux_lang.config import RuntimeOptions
from flux_lang.disassembler import (
    FluxDisassembler,
    ListingEntry,
    disassemble,
    format_listing,
)
from flux_lang.errors import (
    FluxError,
    FluxCompileError,
    UnmatchedCloseBracketError,
    UnmatchedOpenBracketError,
    InvalidCharacterError,
    FluxRuntimeError,
    FluxIOError,
    FluxInternalError,
    SourceLocation,
)
from flux_lang.vm import FluxVM, VMState, execute_source, run_program

__all__ = [
    # Version info
    "__version__",
    # Bytecode model
    "Instruction",
    "Opcode",
    "OpcodeCategory",
    "OpcodeInfo",
    "OPCODE_TABLE",
    "Program",
    "SYMBOL_TO_OPCODE",
    # Compiler
    "CompilerOptions",
    "FluxCompiler",
    "compile_flux",
    # Interpreter
    "FluxVM",
    "VMState",
    "RuntimeOptions",
    "execute_source",
    "run_program",
    # Listing
    "FluxDisassembler",
    "ListingEntry",
    "disassemble",
    "format_listing",
    # Exception hierarchy
    "FluxError",
    "FluxCompileError",
    "UnmatchedCloseBracketError",
    "UnmatchedOpenBracketError",
    "InvalidCharacterError",
    "FluxRuntimeError",
    "FluxIOError",
    "FluxInternalError",
    "SourceLocation",
]
