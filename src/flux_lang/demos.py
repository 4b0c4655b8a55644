"""
Canned demonstration programs for `flux demo`.
"""

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class Demo:
    """A demonstration program with its expected output."""
    name: str
    code: str
    description: str
    expected: bytes


DEMOS: Tuple[Demo, ...] = (
    Demo(
        "Output Character 'A'",
        "+" * 65 + ".",
        "Builds ASCII value 65 and outputs 'A'",
        b"A",
    ),
    Demo(
        "Output Number 42",
        "+" * 42 + "#",
        "Builds value 42 and outputs it as a number",
        b"42",
    ),
    Demo(
        "Count Down from 5",
        "+++++[#-]",
        "Loops 5 times, printing and decrementing",
        b"54321",
    ),
    Demo(
        "Simple Stack Test",
        "+++*++*/#/#",
        "Pushes 3 and 5, then pops and prints both",
        b"53",
    ),
    Demo(
        "Hello (short)",
        "+" * 72 + "." + "+" * 29 + "." + "+" * 7 + ".." + "+++.",
        "Prints 'Hello' using ASCII values",
        b"Hello",
    ),
)


def get_demo(name: str) -> Demo:
    """Look up a demo by name, case-insensitively."""
    for demo in DEMOS:
        if demo.name.lower() == name.lower():
            return demo
    raise KeyError(name)
