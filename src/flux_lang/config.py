"""
Flux Runtime Configuration
==========================

Settings shared by the interpreter, the interactive shell and the CLI.
Configuration can come from:
- Default values (defined here)
- Environment variables
- Command-line options (applied by the CLI on top of the environment)

Integer width:
    The accumulator and stack hold signed two's-complement integers of
    `int_bits` bits and wrap on overflow. The default of 64 bits matches the
    native integer of the reference toolchain. `int_bits=0` selects Python's
    unbounded integers instead.

Copyright (c) 2026 Flux Language Project & Contributors
"""

from dataclasses import dataclass
import os


DEFAULT_INT_BITS = 64
MIN_INT_BITS = 8
MAX_INT_BITS = 64


@dataclass
class RuntimeOptions:
    """
    Configuration for Flux program execution.

    Attributes:
        int_bits: Accumulator width in bits (8-64), or 0 for unbounded
        prompt: Prompt shown by the interactive shell
        flush_output: Flush the output sink after every write
    """
    int_bits: int = DEFAULT_INT_BITS
    prompt: str = "flux> "
    flush_output: bool = True

    def __post_init__(self):
        if self.int_bits != 0 and not MIN_INT_BITS <= self.int_bits <= MAX_INT_BITS:
            raise ValueError(
                f"int_bits must be 0 or between {MIN_INT_BITS} and {MAX_INT_BITS}, "
                f"got {self.int_bits}"
            )

    @property
    def min_value(self) -> int | None:
        if self.int_bits == 0:
            return None
        return -(1 << (self.int_bits - 1))

    @property
    def max_value(self) -> int | None:
        if self.int_bits == 0:
            return None
        return (1 << (self.int_bits - 1)) - 1

    def wrap(self, value: int) -> int:
        """Reduce `value` into the signed range of the configured width."""
        if self.int_bits == 0:
            return value
        mask = (1 << self.int_bits) - 1
        value &= mask
        if value >> (self.int_bits - 1):
            value -= 1 << self.int_bits
        return value

    @classmethod
    def from_env(cls) -> "RuntimeOptions":
        """
        Create RuntimeOptions from environment variables.

        Environment variables (all optional):
            FLUX_INT_BITS: Accumulator width (integer, 0 for unbounded)
            FLUX_PROMPT: Interactive shell prompt

        Invalid values are ignored and the default is kept.
        """
        config = cls()

        if bits := os.environ.get("FLUX_INT_BITS"):
            try:
                candidate = int(bits)
            except ValueError:
                candidate = None
            if candidate is not None and (
                candidate == 0 or MIN_INT_BITS <= candidate <= MAX_INT_BITS
            ):
                config.int_bits = candidate

        if prompt := os.environ.get("FLUX_PROMPT"):
            config.prompt = prompt

        return config
