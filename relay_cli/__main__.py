"""
Module execution entry point.

Allows running with: python -m relay_cli
"""

import sys
from relay_cli.main import main

if __name__ == "__main__":
    sys.exit(main())
