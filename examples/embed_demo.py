#!/usr/bin/env python3
"""
Flux Embedding Demo
===================

This script demonstrates how to use flux_lang from Python to:
1. Compile source text into a Program
2. Inspect the bytecode listing
3. Run the program against in-memory streams
4. Bound a run by driving the VM one step at a time

Usage:
    python examples/embed_demo.py
"""

import io

from flux_lang import FluxVM, RuntimeOptions, compile_flux, format_listing


def main():
    # ==========================================================================
    # 1. Compile
    # ==========================================================================
    program = compile_flux("+++++[#-]", "countdown")
    print(f"Compiled {program.source_name}: {len(program)} instructions")

    # ==========================================================================
    # 2. Show the bytecode
    # ==========================================================================
    print(format_listing(program))

    # ==========================================================================
    # 3. Run against in-memory streams
    # ==========================================================================
    out = io.BytesIO()
    FluxVM(program, io.BytesIO(), out).run()
    print(f"\nOutput: {out.getvalue().decode('ascii')}")

    # Each run gets a fresh VM; 8-bit arithmetic wraps at 127
    out = io.BytesIO()
    vm = FluxVM(compile_flux("+" * 128 + "#"), io.BytesIO(), out, RuntimeOptions(int_bits=8))
    vm.run()
    print(f"128 increments in 8 bits: {out.getvalue().decode('ascii')}")

    # ==========================================================================
    # 4. Bound a run that never halts
    # ==========================================================================
    vm = FluxVM(compile_flux("+[]"), io.BytesIO(), io.BytesIO())
    for _ in range(1000):
        if not vm.step():
            break
    print(f"Stopped after {vm.steps} steps, halted={vm.halted}")


if __name__ == "__main__":
    main()
