#!/usr/bin/env python3
"""
Auxiliary utility functions for Elenchos

Size conversion and path formatting shared by the scanner and the console.
"""

import pathlib
from typing import Optional


def bytes_to_megabytes(size_bytes: int) -> float:
    """Convert bytes to decimal megabytes (1 MB = 1,000,000 bytes)"""
    return size_bytes / 1000 / 1000


def format_path_for_display(path: str, home_path: Optional[str] = None) -> str:
    """Format file path for display by replacing home directory with ~

    Args:
        path: File path to format
        home_path: Home directory path (defaults to platform home)

    Returns:
        Path with home directory replaced by ~ if applicable
    """
    if home_path is None:
        home_path = str(pathlib.Path.home())

    if home_path and path.startswith(home_path):
        return "~" + path[len(home_path) :]
    return path
