"""
Flux Virtual Machine
====================

Bytecode interpreter for compiled Flux programs.

Machine model:
- Accumulator: one signed integer register, starts at 0
- Stack: unbounded LIFO of signed integers, starts empty
- PC: index of the next instruction, starts at 0

The machine has two states, running and halted. It halts when the PC runs
off the end of the program. An I/O failure raises FluxIOError immediately;
there is no resumable error state.

Every run needs a fresh FluxVM. Nothing is kept at module level, so
repeated runs (for example in the interactive shell) never share state.

Example:
    >>> import io
    >>> out = io.BytesIO()
    >>> FluxVM(compile_flux("+++++[#-]"), io.BytesIO(), out).run()
    >>> out.getvalue()
    b'54321'

Copyright (c) 2026 Flux Language Project & Contributors
"""

import logging
import sys
from dataclasses import dataclass
from typing import List, Optional, Protocol, Tuple

from flux_lang.bytecode import Opcode, Program
from flux_lang.compiler import compile_flux
from flux_lang.config import RuntimeOptions
from flux_lang.errors import FluxInternalError, FluxIOError

logger = logging.getLogger(__name__)


class InputProtocol(Protocol):
    """Byte source read by the ',' operation."""
    def read(self, size: int = -1) -> bytes:
        ...


class OutputProtocol(Protocol):
    """Byte sink written by the '.' and '#' operations."""
    def write(self, data: bytes) -> int:
        ...


@dataclass(frozen=True)
class VMState:
    """
    Snapshot of the machine state.

    Attributes:
        accumulator: Current accumulator value
        stack: Stack contents, bottom first
        pc: Program counter
        halted: True once the PC has passed the last instruction
        steps: Number of instructions executed so far
    """
    accumulator: int = 0
    stack: Tuple[int, ...] = ()
    pc: int = 0
    halted: bool = False
    steps: int = 0


class FluxVM:
    """
    Interpreter for one run of a compiled Flux program.

    Args:
        program: Program produced by the compiler
        input_stream: Binary reader for ',' (default: stdin)
        output_stream: Binary writer for '.' and '#' (default: stdout)
        options: Runtime options (integer width, flushing)
    """

    def __init__(
        self,
        program: Program,
        input_stream: Optional[InputProtocol] = None,
        output_stream: Optional[OutputProtocol] = None,
        options: Optional[RuntimeOptions] = None,
    ):
        self.program = program
        self.options = options or RuntimeOptions()
        self._input = input_stream if input_stream is not None else sys.stdin.buffer
        self._output = output_stream if output_stream is not None else sys.stdout.buffer

        self._accumulator = 0
        self._stack: List[int] = []
        self._pc = 0
        self._steps = 0

    # ========================================
    # State Accessors
    # ========================================

    @property
    def accumulator(self) -> int:
        return self._accumulator

    @property
    def stack(self) -> List[int]:
        """Copy of the stack, bottom first."""
        return list(self._stack)

    @property
    def pc(self) -> int:
        return self._pc

    @property
    def steps(self) -> int:
        return self._steps

    @property
    def halted(self) -> bool:
        return self._pc >= len(self.program)

    def snapshot(self) -> VMState:
        return VMState(
            accumulator=self._accumulator,
            stack=tuple(self._stack),
            pc=self._pc,
            halted=self.halted,
            steps=self._steps,
        )

    # ========================================
    # Execution
    # ========================================

    def run(self) -> None:
        """
        Execute until the program halts.

        There is no step limit: a loop whose body never clears the
        accumulator runs forever. Callers that need a bound can drive
        step() themselves.

        Raises:
            FluxIOError: If the input source or output sink fails
        """
        while self.step():
            pass
        logger.debug(
            f"Run of {self.program.source_name} halted after {self._steps} steps "
            f"(acc={self._accumulator}, stack depth={len(self._stack)})"
        )

    def step(self) -> bool:
        """
        Execute exactly one instruction.

        Returns:
            True if an instruction was executed, False if already halted
        """
        if self.halted:
            return False

        inst = self.program[self._pc]
        op = inst.opcode
        next_pc = self._pc + 1

        if op == Opcode.INC:
            self._accumulator = self.options.wrap(self._accumulator + 1)

        elif op == Opcode.DEC:
            self._accumulator = self.options.wrap(self._accumulator - 1)

        elif op == Opcode.PUSH:
            self._stack.append(self._accumulator)

        elif op == Opcode.POP:
            self._accumulator = self._stack.pop() if self._stack else 0

        elif op == Opcode.LOOP:
            if self._accumulator == 0:
                next_pc = inst.arg

        elif op == Opcode.END:
            if self._accumulator != 0:
                next_pc = inst.arg

        elif op == Opcode.OUT:
            self._write(bytes([self._accumulator % 256]))

        elif op == Opcode.IN:
            self._accumulator = self._read_byte()

        elif op == Opcode.OUTNUM:
            self._write(str(self._accumulator).encode("ascii"))

        else:
            raise FluxInternalError(f"invalid opcode {op!r} at position {self._pc}")

        self._pc = next_pc
        self._steps += 1
        return True

    # ========================================
    # I/O Helpers
    # ========================================

    def _write(self, data: bytes) -> None:
        try:
            self._output.write(data)
            if self.options.flush_output:
                flush = getattr(self._output, "flush", None)
                if flush is not None:
                    flush()
        except (OSError, ValueError) as e:
            raise FluxIOError("output", e, pc=self._pc) from e

    def _read_byte(self) -> int:
        """Read one byte; end of input yields 0."""
        try:
            data = self._input.read(1)
        except (OSError, ValueError) as e:
            raise FluxIOError("input", e, pc=self._pc) from e

        if not data:
            logger.debug(f"End of input at pc={self._pc}")
            return 0
        return data[0]


# =============================================================================
# Convenience Functions
# =============================================================================

def run_program(
    program: Program,
    input_stream: Optional[InputProtocol] = None,
    output_stream: Optional[OutputProtocol] = None,
    options: Optional[RuntimeOptions] = None,
) -> VMState:
    """Run a compiled program on a fresh VM and return its final state."""
    vm = FluxVM(program, input_stream, output_stream, options)
    vm.run()
    return vm.snapshot()


def execute_source(
    source: str,
    input_stream: Optional[InputProtocol] = None,
    output_stream: Optional[OutputProtocol] = None,
    options: Optional[RuntimeOptions] = None,
    filename: str = "<input>",
) -> VMState:
    """Compile and run Flux source on a fresh VM."""
    program = compile_flux(source, filename)
    return run_program(program, input_stream, output_stream, options)
