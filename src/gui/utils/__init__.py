"""
GUI-specific utilities for the Heic2JPG application.
"""

from .fs import open_in_file_manager
from .styling import AccessiblePalette, StyleSheets, apply_status_dot_style, get_status_indicator_color

__all__ = [
    "AccessiblePalette",
    "StyleSheets",
    "apply_status_dot_style",
    "get_status_indicator_color",
    "open_in_file_manager",
]
