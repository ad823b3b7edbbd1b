"""Command-line interface module for Simple XML Tree.

This module provides CLI tools for parsing, validating, searching and merging
XML files.
"""

from .main import main

__all__ = ["main"]
