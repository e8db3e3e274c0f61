"""
Entry point for running the dotkit CLI as a module.

Usage: python -m dotkit.cli [command] [options]
"""

from .parser import main

if __name__ == "__main__":
    main()
