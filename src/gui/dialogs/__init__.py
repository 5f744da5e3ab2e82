"""
Dialog components for the Heic2JPG GUI.
"""

from .about_dialog import build_about_text, show_about_dialog

__all__ = ["build_about_text", "show_about_dialog"]
