"""
flux - Flux Language Command-Line Interface
===========================================

Compiles, runs and inspects Flux programs.

Commands
--------
- **help**: Show the help overview (also shown with no command)
- **guide**: Beginner's tutorial
- **reference** / **ref**: Complete language reference
- **examples**: Annotated example programs
- **demo**: Run the demonstration programs
- **run**: Compile and execute a Flux program
- **compile**: Compile a program and show its bytecode
- **interactive** / **repl**: Start the interactive shell

Usage Examples
--------------
Run a program:
    $ flux run countdown.flux

Run with input taken from a file:
    $ flux run echo.flux -i message.txt

Show bytecode:
    $ flux compile countdown.flux

Use 16-bit arithmetic:
    $ flux --int-bits 16 run wrap.flux

Copyright (c) 2026 Flux Language Project & Contributors
"""

import io
import logging
import sys
from pathlib import Path
from typing import Optional

import click

from flux_lang import __version__
from flux_lang.cli.errors import handle_cli_exception
from flux_lang.compiler import CompilerOptions, FluxCompiler, compile_flux
from flux_lang.config import MAX_INT_BITS, MIN_INT_BITS, RuntimeOptions
from flux_lang.demos import DEMOS, get_demo
from flux_lang.disassembler import format_listing
from flux_lang.docs import EXAMPLES_TEXT, GUIDE_TEXT, HELP_TEXT, reference_text
from flux_lang.errors import FluxError
from flux_lang.repl import FluxShell
from flux_lang.vm import FluxVM

logger = logging.getLogger(__name__)


# =============================================================================
# CLI Context
# =============================================================================

class Context:
    """
    Shared context for CLI commands.

    Stores verbosity and the runtime options resolved from the environment
    and the command line.
    """

    def __init__(self) -> None:
        self.verbose: bool = False
        self.options: RuntimeOptions = RuntimeOptions()

    def setup_logging(self) -> None:
        """Configure logging based on verbosity."""
        level = logging.DEBUG if self.verbose else logging.WARNING
        logging.basicConfig(
            level=level,
            format="%(levelname)s: %(message)s" if self.verbose else "%(message)s",
        )


pass_context = click.make_pass_decorator(Context, ensure=True)


def validate_int_bits(ctx: click.Context, param: click.Parameter,
                      value: Optional[int]) -> Optional[int]:
    """Accept 0 (unbounded) or a width between 8 and 64 bits."""
    if value is None or value == 0 or MIN_INT_BITS <= value <= MAX_INT_BITS:
        return value
    raise click.BadParameter(
        f"must be 0 or between {MIN_INT_BITS} and {MAX_INT_BITS}", ctx=ctx, param=param
    )


# =============================================================================
# Main CLI Group
# =============================================================================

@click.group(invoke_without_command=True)
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.option(
    "--int-bits",
    type=int,
    default=None,
    callback=validate_int_bits,
    help="Accumulator width in bits (8-64, 0 = unbounded). "
         "Default: $FLUX_INT_BITS or 64.",
)
@click.version_option(__version__, "--version", "-V", prog_name="flux")
@click.pass_context
def main(click_ctx: click.Context, verbose: bool, int_bits: Optional[int]) -> None:
    """
    Flux - a minimal, stack-based, Turing-complete language.

    \b
    Examples:
      flux run hello.flux
      flux compile hello.flux
      flux repl
    """
    ctx = click_ctx.ensure_object(Context)
    ctx.verbose = verbose
    ctx.options = RuntimeOptions.from_env()
    if int_bits is not None:
        ctx.options.int_bits = int_bits
    ctx.setup_logging()

    if click_ctx.invoked_subcommand is None:
        click.echo(HELP_TEXT)


# =============================================================================
# Documentation Commands
# =============================================================================

@main.command("help")
def cmd_help() -> None:
    """Show the help overview."""
    click.echo(HELP_TEXT)


@main.command("guide")
def cmd_guide() -> None:
    """Show the beginner's guide."""
    click.echo(GUIDE_TEXT)


@main.command("reference")
def cmd_reference() -> None:
    """Show the complete language reference."""
    click.echo(reference_text())


main.add_command(cmd_reference, "ref")


@main.command("examples")
def cmd_examples() -> None:
    """Show example programs with explanations."""
    click.echo(EXAMPLES_TEXT)


# =============================================================================
# Demo Command
# =============================================================================

@main.command("demo")
@click.argument("name", required=False)
@pass_context
def cmd_demo(ctx: Context, name: Optional[str]) -> None:
    """
    Run the demonstration programs.

    NAME runs a single demo, e.g. flux demo "Count Down from 5".
    """
    if name is not None:
        try:
            demos = (get_demo(name),)
        except KeyError:
            handle_cli_exception(
                click.BadParameter(f"unknown demo '{name}'", param_hint="NAME"),
                ctx.verbose,
            )
    else:
        demos = DEMOS

    stdout = sys.stdout.buffer

    click.echo("")
    click.echo("                       FLUX DEMONSTRATION")
    click.echo("")

    try:
        for index, demo in enumerate(demos, start=1):
            click.echo(f"Demo {index}: {demo.name}")
            click.echo(f"Description: {demo.description}")
            click.echo(f"Code: {demo.code}")
            click.echo("Output: ", nl=False)
            # Demos never read input; an empty source keeps them from blocking
            FluxVM(compile_flux(demo.code), io.BytesIO(), stdout, ctx.options).run()
            click.echo("\n")
    except FluxError as e:
        handle_cli_exception(e, ctx.verbose)

    click.echo("Try writing your own programs using these patterns!")


# =============================================================================
# Run Command
# =============================================================================

@main.command("run")
@click.argument(
    "input_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-i", "--input", "program_input",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Read program input from a file instead of stdin",
)
@click.option("--strict", is_flag=True, help="Reject comment characters")
@pass_context
def cmd_run(ctx: Context, input_file: Path, program_input: Optional[Path], strict: bool) -> None:
    """
    Compile and execute a Flux program.

    INPUT_FILE is the Flux source file to run. Program output goes to
    stdout, followed by a newline; ',' reads from stdin unless --input
    is given.
    """
    try:
        program = FluxCompiler(CompilerOptions(strict=strict)).compile_file(input_file)
        logger.info(f"Executing {input_file} ({len(program)} instructions)")

        stdout = sys.stdout.buffer
        if program_input is not None:
            with program_input.open("rb") as source:
                FluxVM(program, source, stdout, ctx.options).run()
        else:
            stdin = sys.stdin.buffer
            FluxVM(program, stdin, stdout, ctx.options).run()
        click.echo()
    except Exception as e:
        handle_cli_exception(e, ctx.verbose)


# =============================================================================
# Compile Command
# =============================================================================

@main.command("compile")
@click.argument(
    "input_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-o", "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write the listing to a file (default: stdout)",
)
@click.option("--annotate", is_flag=True, help="Show source symbol and loop depth")
@click.option("--strict", is_flag=True, help="Reject comment characters")
@pass_context
def cmd_compile(ctx: Context, input_file: Path, output: Optional[Path],
                annotate: bool, strict: bool) -> None:
    """
    Compile a Flux program and show its bytecode.

    INPUT_FILE is the Flux source file to compile.
    """
    try:
        program = FluxCompiler(CompilerOptions(strict=strict)).compile_file(input_file)
        listing = format_listing(program, annotate=annotate)

        if output is not None:
            output.write_text(listing + "\n", encoding="utf-8")
            click.echo(f"Compiled {input_file} -> {output} ({len(program)} instructions)")
            return

        click.echo(f"Successfully compiled {input_file}")
        click.echo(f"Total instructions: {len(program)}")
        click.echo("")
        click.echo("Bytecode Listing:")
        click.echo("")
        click.echo(listing)
    except Exception as e:
        handle_cli_exception(e, ctx.verbose)


# =============================================================================
# Interactive Command
# =============================================================================

@main.command("interactive")
@pass_context
def cmd_interactive(ctx: Context) -> None:
    """Start the interactive shell."""
    shell = FluxShell(
        sys.stdin.buffer,
        sys.stdout.buffer,
        ctx.options,
    )
    try:
        shell.run()
    except Exception as e:
        handle_cli_exception(e, ctx.verbose)


main.add_command(cmd_interactive, "repl")


# =============================================================================
# Entry Point
# =============================================================================

if __name__ == "__main__":
    main()
