"""
Flux Virtual Machine Unit Tests
===============================

Tests for the bytecode interpreter, covering:
- Arithmetic and integer wraparound
- Stack operations, including popping an empty stack
- Loop control flow
- Character, number and input I/O
- I/O failures
- Stepping, snapshots and run isolation
"""

import io

import pytest

from flux_lang.bytecode import Instruction, Program
from flux_lang.compiler import compile_flux
from flux_lang.config import RuntimeOptions
from flux_lang.errors import FluxInternalError, FluxIOError
from flux_lang.vm import FluxVM, VMState, execute_source, run_program


# =============================================================================
# Mock Streams for VM Testing
# =============================================================================

class FailingWriter:
    """
    Output sink that accepts `limit` writes and then fails.

    Tracks accepted writes for verification.
    """

    def __init__(self, limit: int = 0):
        self.limit = limit
        self.written: list[bytes] = []

    def write(self, data: bytes) -> int:
        if len(self.written) >= self.limit:
            raise OSError("broken pipe")
        self.written.append(bytes(data))
        return len(data)


class FailingReader:
    """Input source whose reads always fail."""

    def read(self, size: int = -1) -> bytes:
        raise OSError("device not ready")


class CountingWriter(io.BytesIO):
    """BytesIO that counts flush calls."""

    def __init__(self):
        super().__init__()
        self.flushes = 0

    def flush(self):
        self.flushes += 1
        super().flush()


def run(source: str, stdin: bytes = b"", options: RuntimeOptions | None = None) -> tuple[bytes, FluxVM]:
    """Compile and run `source`, returning output bytes and the finished VM."""
    out = io.BytesIO()
    vm = FluxVM(compile_flux(source), io.BytesIO(stdin), out, options)
    vm.run()
    return out.getvalue(), vm


# =============================================================================
# Scenario Tests
# =============================================================================

class TestScenarios:
    """End-to-end programs with known output."""

    def test_countdown(self):
        """'+++++[#-]' prints 54321."""
        output, vm = run("+++++[#-]")
        assert output == b"54321"
        assert vm.accumulator == 0

    def test_stack_reversal(self):
        """'+++*++*/#/#' prints 5 then 3."""
        output, vm = run("+++*++*/#/#")
        assert output == b"53"
        assert vm.stack == []

    def test_output_character_a(self):
        """65 increments then '.' prints A."""
        output, _ = run("+" * 65 + ".")
        assert output == b"A"

    def test_exhausted_input_reads_zero(self):
        """Every ',' after end of input loads 0 without error."""
        output, vm = run("+++,#+++,#+++,")
        assert output == b"00"
        assert vm.accumulator == 0

    def test_hello(self):
        """Incremental ASCII building prints Hello."""
        source = "+" * 72 + "." + "+" * 29 + "." + "+" * 7 + ".." + "+++."
        output, _ = run(source)
        assert output == b"Hello"


# =============================================================================
# Arithmetic Tests
# =============================================================================

class TestArithmetic:
    """Tests for INC/DEC and integer width."""

    def test_increment_decrement(self):
        """INC and DEC move the accumulator by one."""
        _, vm = run("+++-")
        assert vm.accumulator == 2

    def test_negative_accumulator(self):
        """The accumulator can go negative."""
        output, vm = run("--#")
        assert output == b"-2"
        assert vm.accumulator == -2

    def test_8bit_wraps_up(self):
        """With 8 bits, 127 + 1 wraps to -128."""
        output, _ = run("+" * 128 + "#", options=RuntimeOptions(int_bits=8))
        assert output == b"-128"

    def test_8bit_wraps_down(self):
        """With 8 bits, -128 - 1 wraps to 127."""
        output, _ = run("-" * 129 + "#", options=RuntimeOptions(int_bits=8))
        assert output == b"127"

    def test_16bit_wraps(self):
        """With 16 bits, 32767 + 1 wraps to -32768."""
        output, _ = run("+" * 32768 + "#", options=RuntimeOptions(int_bits=16))
        assert output == b"-32768"

    def test_unbounded_does_not_wrap(self):
        """int_bits=0 never wraps."""
        output, _ = run("+" * 300 + "#", options=RuntimeOptions(int_bits=0))
        assert output == b"300"


# =============================================================================
# Stack Tests
# =============================================================================

class TestStack:
    """Tests for PUSH/POP."""

    def test_push_copies_accumulator(self):
        """PUSH leaves the accumulator unchanged."""
        _, vm = run("++*")
        assert vm.accumulator == 2
        assert vm.stack == [2]

    def test_pop_restores_value(self):
        """POP loads the top of the stack."""
        _, vm = run("+*+*+/")
        assert vm.accumulator == 2
        assert vm.stack == [1]

    def test_pop_empty_stack_yields_zero(self):
        """Popping an empty stack loads 0 and raises nothing."""
        _, vm = run("+++/")
        assert vm.accumulator == 0

    def test_pop_empty_stack_repeatedly(self):
        """Popping an empty stack is repeatable indefinitely."""
        output, vm = run("+/#+/#" + "/" * 100 + "#")
        assert output == b"000"
        assert vm.stack == []

    def test_stack_grows_unbounded(self):
        """Large stacks are allowed."""
        _, vm = run("+" + "*" * 10000)
        assert len(vm.stack) == 10000


# =============================================================================
# Control Flow Tests
# =============================================================================

class TestControlFlow:
    """Tests for LOOP/END."""

    def test_loop_skipped_when_zero(self):
        """A loop is skipped entirely when the accumulator is 0."""
        output, vm = run("[+++#]#")
        assert output == b"0"
        assert vm.accumulator == 0

    def test_skip_lands_after_end(self):
        """Skipping a loop continues with the instruction after END."""
        output, _ = run("[-]+#")
        assert output == b"1"

    def test_nested_loops(self):
        """Inner loops run to completion on each outer iteration."""
        output, _ = run("+++[*[-]/-#]")
        assert output == b"210"

    def test_clear_idiom(self):
        """'[-]' clears a positive accumulator."""
        _, vm = run("+++++++[-]")
        assert vm.accumulator == 0

    def test_loop_condition_checked_at_boundaries_only(self):
        """The body runs fully even if the accumulator passes through 0."""
        # acc=1; body: '-' (acc 0) then '+' (acc 1) then '-' (acc 0) -> exit
        output, _ = run("+[-+-#]")
        assert output == b"0"


# =============================================================================
# I/O Tests
# =============================================================================

class TestIO:
    """Tests for OUT, IN and OUTNUM."""

    def test_output_character_modulo(self):
        """OUT writes accumulator mod 256."""
        output, _ = run("+" * 321 + ".")
        assert output == b"A"

    def test_output_negative_character(self):
        """A negative accumulator still yields a byte in 0-255."""
        output, _ = run("-.")
        assert output == b"\xff"

    def test_output_number_no_separators(self):
        """OUTNUM writes digits only, with no separators."""
        output, _ = run("+#+#+#")
        assert output == b"123"

    def test_input_byte(self):
        """IN loads the byte value."""
        output, _ = run(",#", stdin=b"A")
        assert output == b"65"

    def test_input_high_byte(self):
        """Bytes above 127 load as 128-255."""
        _, vm = run(",", stdin=b"\xfe")
        assert vm.accumulator == 254

    def test_echo(self):
        """',[.,]' echoes its input."""
        output, _ = run(",[.,]", stdin=b"hello")
        assert output == b"hello"

    def test_output_flushed(self):
        """Each write is flushed when flush_output is on."""
        out = CountingWriter()
        FluxVM(compile_flux("+.#"), io.BytesIO(), out).run()
        assert out.flushes == 2

    def test_output_not_flushed_when_disabled(self):
        """flush_output=False leaves flushing to the caller."""
        out = CountingWriter()
        FluxVM(compile_flux("+.#"), io.BytesIO(), out, RuntimeOptions(flush_output=False)).run()
        assert out.flushes == 0


# =============================================================================
# I/O Failure Tests
# =============================================================================

class TestIOFailures:
    """Tests for fatal I/O errors."""

    def test_output_failure_raises(self):
        """A failing sink raises FluxIOError with the cause chained."""
        vm = FluxVM(compile_flux("+."), io.BytesIO(), FailingWriter())
        with pytest.raises(FluxIOError) as excinfo:
            vm.run()
        assert isinstance(excinfo.value.__cause__, OSError)
        assert excinfo.value.operation == "output"
        assert excinfo.value.pc == 1

    def test_partial_output_kept(self):
        """Bytes written before the failure are not retracted."""
        sink = FailingWriter(limit=2)
        vm = FluxVM(compile_flux("+#+#+#+#"), io.BytesIO(), sink)
        with pytest.raises(FluxIOError):
            vm.run()
        assert sink.written == [b"1", b"2"]
        assert vm.accumulator == 3

    def test_number_output_failure(self):
        """OUTNUM failures are fatal too."""
        vm = FluxVM(compile_flux("#"), io.BytesIO(), FailingWriter())
        with pytest.raises(FluxIOError):
            vm.run()

    def test_input_failure_raises(self):
        """A failing source raises FluxIOError."""
        vm = FluxVM(compile_flux(","), FailingReader(), io.BytesIO())
        with pytest.raises(FluxIOError) as excinfo:
            vm.run()
        assert excinfo.value.operation == "input"

    def test_closed_output_stream(self):
        """Writing to a closed stream is an I/O failure."""
        out = io.BytesIO()
        out.close()
        with pytest.raises(FluxIOError):
            FluxVM(compile_flux("."), io.BytesIO(), out).run()

    def test_execution_stops_at_failure(self):
        """No instruction after the failing one runs."""
        vm = FluxVM(compile_flux(".+++"), io.BytesIO(), FailingWriter())
        with pytest.raises(FluxIOError):
            vm.run()
        assert vm.accumulator == 0
        assert vm.pc == 0

    def test_invalid_opcode_is_internal_error(self):
        """A corrupted program is an internal error, not a user error."""
        program = Program([Instruction(99)])
        with pytest.raises(FluxInternalError):
            FluxVM(program, io.BytesIO(), io.BytesIO()).run()


# =============================================================================
# Stepping and State Tests
# =============================================================================

class TestStepping:
    """Tests for step(), snapshot() and run isolation."""

    def test_step_until_halt(self):
        """step() returns False once the program is exhausted."""
        vm = FluxVM(compile_flux("++"), io.BytesIO(), io.BytesIO())
        assert vm.step() is True
        assert vm.step() is True
        assert vm.step() is False
        assert vm.halted
        assert vm.steps == 2

    def test_empty_program_is_halted(self):
        """An empty program halts immediately."""
        vm = FluxVM(compile_flux(""), io.BytesIO(), io.BytesIO())
        assert vm.halted
        vm.run()
        assert vm.steps == 0

    def test_taken_jump_does_not_advance(self):
        """A taken LOOP jump lands exactly on its target."""
        vm = FluxVM(compile_flux("[-]+"), io.BytesIO(), io.BytesIO())
        vm.step()
        assert vm.pc == 3

    def test_bounding_infinite_loop(self):
        """Callers can bound a non-terminating program with step()."""
        vm = FluxVM(compile_flux("+[]"), io.BytesIO(), io.BytesIO())
        for _ in range(1000):
            vm.step()
        assert not vm.halted
        assert vm.steps == 1000

    def test_snapshot(self):
        """snapshot() captures the full machine state."""
        _, vm = run("+++*")
        assert vm.snapshot() == VMState(accumulator=3, stack=(3,), pc=4, halted=True, steps=4)

    def test_stack_property_is_a_copy(self):
        """Mutating the returned stack does not affect the VM."""
        _, vm = run("+*")
        vm.stack.append(99)
        assert vm.stack == [1]

    def test_runs_are_isolated(self):
        """Each VM starts with accumulator 0 and an empty stack."""
        program = compile_flux("/#+*")
        first = io.BytesIO()
        second = io.BytesIO()
        FluxVM(program, io.BytesIO(), first).run()
        FluxVM(program, io.BytesIO(), second).run()
        assert first.getvalue() == second.getvalue() == b"0"


# =============================================================================
# Convenience Function Tests
# =============================================================================

class TestConvenience:
    """Tests for run_program() and execute_source()."""

    def test_run_program(self):
        """run_program returns the final state."""
        out = io.BytesIO()
        state = run_program(compile_flux("++#"), io.BytesIO(), out)
        assert out.getvalue() == b"2"
        assert state.accumulator == 2
        assert state.halted

    def test_execute_source(self):
        """execute_source compiles and runs in one call."""
        out = io.BytesIO()
        state = execute_source("+++++[#-]", io.BytesIO(), out)
        assert out.getvalue() == b"54321"
        assert state.steps > 0
