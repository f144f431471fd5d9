"""Entry point for running smartrefs directly.

Usage:
    python -m smartrefs
"""

import sys

from smartrefs.cli import main

if __name__ == "__main__":
    sys.exit(main())
