"""
Entry point for running the browserfetch CLI package as a module.
"""

from browserfetch.cli.parser import main

if __name__ == "__main__":
    main()
