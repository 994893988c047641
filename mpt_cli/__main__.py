"""
Module execution entry point.

Allows running with: python -m mpt_cli
"""

import sys
from mpt_cli.main import main

if __name__ == "__main__":
    sys.exit(main())
