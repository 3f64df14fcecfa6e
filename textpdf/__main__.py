"""
Entry point for running textpdf as a module.

Usage:
    python -m textpdf render template.xml --data data.json --format pdf
"""

import sys

from .cli import main

if __name__ == "__main__":
    sys.exit(main())
