"""
Soko Link - Main Entry Point

Marketplace directory for local businesses and Soko Mtaani listings.
"""

import sys

from sokolink.cli import main

if __name__ == "__main__":
    sys.exit(main())
