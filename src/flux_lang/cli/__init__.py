"""
Flux Command-Line Interface
===========================

This package provides the `flux` command, a Click-based CLI that compiles,
runs and inspects Flux programs and hosts the interactive shell.
"""

__all__ = ["flux"]
