"""
Main entry point for Muse Bridge package

This allows running the package with: python -m muse_bridge
"""

import sys

from .cli.main import main

if __name__ == "__main__":
    sys.exit(main())
