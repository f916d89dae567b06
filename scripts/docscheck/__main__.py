"""Entry point for running docscheck as a module.

Usage:
    python -m docscheck
    python -m docscheck --sdk-root ../mtn-drive-sdk
"""

import sys

from .cli import main

if __name__ == "__main__":
    sys.exit(main())
