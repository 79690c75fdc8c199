"""
Module execution entry point.

Allows running with: python -m picopak_cli
"""

import sys
from picopak_cli.main import main

if __name__ == "__main__":
    sys.exit(main())
