"""
Main entry point for the conceptlab package when executed as a module.

This allows running the package with `python -m conceptlab`.
"""

from conceptlab.cli import main

if __name__ == '__main__':
    main()
