"""
Entry point for running the browserfetch CLI as a module.

Usage: python -m browserfetch [command] [options]
"""

from browserfetch.cli.parser import main

if __name__ == "__main__":
    main()
