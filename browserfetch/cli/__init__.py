"""
browserfetch command-line interface.
"""

from browserfetch.cli.parser import CLI, main

__all__ = ["CLI", "main"]
