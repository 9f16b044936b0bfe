"""
CLI module for Groupix - contains command-line interface components.
"""

from groupix.cli.main import main

__all__ = ["main"]
