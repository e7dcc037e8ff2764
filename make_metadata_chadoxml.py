#!/usr/bin/env python3
"""Metadata extractor entry point, runnable from a source checkout.

usage: ./make_metadata_chadoxml.py <sourcechado> <destchado>
"""

import sys
import os

# Add src to path
sys.path.insert(0, os.path.join(os.path.dirname(os.path.abspath(__file__)), "src"))

from chadoclean.cli import extract_main

if __name__ == "__main__":
    extract_main()
