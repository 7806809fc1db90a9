"""King's Escape CLI module.

Provides an argparse-based command-line interface for playing King's Escape.

Usage:
    kings-escape new
    kings-escape move 2 2

Or directly:
    python -m kings_escape.cli.app
"""

from kings_escape.cli.app import build_parser, format_board, main

__all__ = ["build_parser", "format_board", "main"]
