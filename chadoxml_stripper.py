#!/usr/bin/env python3
"""Feature stripper entry point, runnable from a source checkout."""

import sys
import os

# Add src to path
sys.path.insert(0, os.path.join(os.path.dirname(os.path.abspath(__file__)), "src"))

from chadoclean.cli import strip_main

if __name__ == "__main__":
    strip_main()
