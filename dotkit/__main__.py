"""
Entry point for running dotkit as a module.

Usage: python -m dotkit [command] [options]
"""

from dotkit.cli.parser import main

if __name__ == "__main__":
    main()
