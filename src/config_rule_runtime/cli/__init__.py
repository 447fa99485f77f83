"""Command-line interface package for the rule runtime."""

from .app import InvocationReport, build_parser, main, render_table, run

__all__ = [
    "InvocationReport",
    "build_parser",
    "main",
    "render_table",
    "run",
]
