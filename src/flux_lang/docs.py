"""
Flux Documentation Text
=======================

Static help, guide and example text printed by the `flux` command, plus a
language reference generated from the opcode table so it never drifts from
what the compiler accepts.
"""

from flux_lang.bytecode import OPCODE_TABLE, OpcodeCategory


HELP_TEXT = f"""\
                   FLUX PROGRAMMING LANGUAGE
              Minimal, Stack Based, Turing Complete

USAGE
    flux <command> [arguments]

COMMANDS
    help              Show this help message
    guide             Show beginner's tutorial and user guide
    reference         Show complete language reference (also: ref)
    examples          Show example programs with explanations
    demo              Run demonstration programs
    run <file>        Compile and execute a Flux program
    compile <file>    Compile program and show bytecode
    interactive       Start interactive REPL (also: repl)

QUICK REFERENCE
    +    Increment accumulator       *    Push to stack
    -    Decrement accumulator       /    Pop from stack
    [    Start loop (skip if acc 0)  ]    End loop (jump if acc != 0)
    .    Output as ASCII             ,    Input character
    #    Output as number

GETTING STARTED
    1. Run 'flux guide' for a beginner-friendly tutorial
    2. Try 'flux demo' to see example programs in action
    3. View 'flux examples' for commented program samples
    4. Read 'flux reference' for complete documentation

EXAMPLE
    Create a file 'hi.flux':
        {"+" * 72}.
        {"+" * 33}.

    Run it:
        flux run hi.flux

    Output:
        Hi
"""


QUICK_REFERENCE = """\
Quick Reference:
  +  Increment    *  Push      [  Loop start
  -  Decrement    /  Pop       ]  Loop end
  .  Output char  ,  Input     #  Output number"""


GUIDE_TEXT = """\
                     FLUX BEGINNER'S GUIDE

1. THE MACHINE
   A Flux program drives two things: the accumulator, a single integer
   that starts at 0, and the stack, a pile of integers that starts empty.
   Every operation is one character. Everything else in the file is a
   comment, so you can write notes freely between operations.

2. COUNTING
   '+' adds one to the accumulator and '-' subtracts one. '#' prints the
   accumulator as a number:

       +++#        prints 3
       +++--#      prints 1

3. PRINTING CHARACTERS
   '.' prints the accumulator as a character (its value mod 256):

       +++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++.
                   prints A (65 increments)

4. LOOPS
   '[' skips to just after its matching ']' when the accumulator is 0.
   ']' jumps back to its '[' when the accumulator is not 0. Together they
   form "while accumulator is not zero":

       +++++[#-]   prints 54321

5. THE STACK
   '*' pushes a copy of the accumulator. '/' pops the top value back into
   the accumulator; popping an empty stack gives 0.

       +++*++*/#/#   prints 53

6. INPUT
   ',' reads one byte of input into the accumulator, or 0 at end of input.
   A simple echo of one line:

       ,[.,]

7. NEXT STEPS
   Run 'flux compile <file>' to see the bytecode your program becomes, and
   'flux repl' to experiment line by line.
"""


EXAMPLES_TEXT = """\
                       FLUX EXAMPLE PROGRAMS

Count down from 5
    +++++[#-]
    Output: 54321
    The loop body prints, then decrements, until the accumulator is 0.

Reverse two numbers with the stack
    +++*++*/#/#
    Output: 53
    3 is pushed, then 5 is pushed; popping returns them in reverse order.

Echo input until end of file
    ,[.,]
    Reads a byte, and while it is not 0, prints it and reads the next one.

Clear the accumulator
    [-]
    Decrements until 0. Works for any positive starting value.

Copy the accumulator
    **//
    Pushes two copies, pops them back; the stack is left as it was.
"""


_CATEGORY_TITLES = {
    OpcodeCategory.ARITHMETIC: "ARITHMETIC OPERATIONS",
    OpcodeCategory.STACK: "STACK OPERATIONS",
    OpcodeCategory.CONTROL: "CONTROL FLOW OPERATIONS",
    OpcodeCategory.IO: "INPUT/OUTPUT OPERATIONS",
}


def reference_text() -> str:
    """Build the complete language reference from the opcode table."""
    lines = [
        "                   FLUX COMPLETE LANGUAGE REFERENCE",
        "",
        "COMPUTATIONAL MODEL",
        "    Accumulator: one signed integer register, starts at 0.",
        "    Stack: unbounded LIFO of integers; popping when empty yields 0.",
        "",
    ]
    for category, title in _CATEGORY_TITLES.items():
        lines.append(title)
        for info in OPCODE_TABLE.values():
            if info.category is category:
                lines.append(f"    {info.symbol}    {info.mnemonic:<7} {info.description}")
        lines.append("")
    lines.extend([
        "WHITESPACE AND COMMENTS",
        "    Spaces, tabs, newlines and carriage returns are ignored.",
        "    Any character that is not one of the 9 operations is a comment.",
    ])
    return "\n".join(lines)
