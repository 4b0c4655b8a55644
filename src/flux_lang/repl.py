"""
Flux Interactive Shell
======================

Line-based REPL used by `flux interactive`. Each line is compiled and run on
a fresh VM, so nothing carries over between lines.

Shell commands:
    exit, quit          Leave the shell
    help                Show the quick reference
    :bytecode <code>    Show the bytecode listing for <code>

The shell reads its command lines from the same binary input the programs
read with ',', and writes its messages to the same binary output the
programs write to, so program output and shell messages stay in order.
"""

import logging
import sys
from typing import BinaryIO, Optional

from flux_lang.compiler import compile_flux
from flux_lang.config import RuntimeOptions
from flux_lang.disassembler import format_listing
from flux_lang.docs import QUICK_REFERENCE
from flux_lang.errors import FluxCompileError, FluxRuntimeError
from flux_lang.vm import FluxVM

logger = logging.getLogger(__name__)

BANNER = """
                   FLUX INTERACTIVE MODE (REPL)

Enter Flux code and press Enter to execute.
Type 'exit' or 'quit' to leave, 'help' for quick reference.
"""

EXIT_COMMANDS = frozenset({"exit", "quit"})
BYTECODE_COMMAND = ":bytecode"


class FluxShell:
    """
    Interactive read-eval-print loop.

    Args:
        input_stream: Binary stream supplying command lines and program input
        output_stream: Binary stream receiving prompts and program output
        options: Runtime options (prompt, integer width)
    """

    def __init__(
        self,
        input_stream: Optional[BinaryIO] = None,
        output_stream: Optional[BinaryIO] = None,
        options: Optional[RuntimeOptions] = None,
    ):
        self.input = input_stream if input_stream is not None else sys.stdin.buffer
        self.output = output_stream if output_stream is not None else sys.stdout.buffer
        self.options = options or RuntimeOptions()
        self.evaluated = 0

    def _print(self, text: str = "", end: str = "\n") -> None:
        self.output.write((text + end).encode("utf-8"))
        self.output.flush()

    def run(self) -> None:
        """Run the shell until exit/quit or end of input."""
        self._print(BANNER)

        while True:
            self._print(self.options.prompt, end="")
            raw = self.input.readline()
            if not raw:
                self._print()
                break

            line = raw.decode("utf-8", errors="replace").strip()
            if not self.process_line(line):
                break

        logger.debug(f"Shell finished after {self.evaluated} evaluations")

    def process_line(self, line: str) -> bool:
        """
        Handle one input line.

        Returns:
            False if the shell should stop, True otherwise
        """
        if not line:
            return True

        if line in EXIT_COMMANDS:
            self._print("Goodbye!")
            return False

        if line == "help":
            self._print(QUICK_REFERENCE)
            return True

        if line.startswith(BYTECODE_COMMAND):
            self.show_bytecode(line[len(BYTECODE_COMMAND):])
            return True

        self.evaluate(line)
        return True

    def show_bytecode(self, code: str) -> None:
        try:
            program = compile_flux(code)
        except FluxCompileError as e:
            self._print(f"Compilation error: {e}")
            return
        self._print(format_listing(program))

    def evaluate(self, code: str) -> None:
        """Compile and run one snippet on a fresh VM, reporting any error."""
        self.evaluated += 1
        try:
            program = compile_flux(code)
        except FluxCompileError as e:
            self._print(f"Compilation error: {e}")
            return

        vm = FluxVM(program, self.input, self.output, self.options)
        try:
            vm.run()
        except FluxRuntimeError as e:
            self._print()
            self._print(f"Runtime error: {e}")
            return
        self._print()
