"""
Test suite for the textpdf project.

Unit tests mirror the package layout; end-to-end tests drive whole
templates through the API and the command line.
"""

import sys
from pathlib import Path

# Add the project root to the Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))
