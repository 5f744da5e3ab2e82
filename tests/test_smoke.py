"""
Smoke tests for the Heic2JPG application.
These tests verify basic functionality and environment setup.
"""

import os
import sys

# Set offscreen platform to prevent display errors on headless systems
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")


def test_pyside6_imports():
    """Test that PySide6 can be imported successfully."""
    import PySide6  # noqa: F401
    from PySide6.QtWidgets import QApplication  # noqa: F401


def test_image_stack_imports():
    """Test that Pillow and pillow_heif can be imported successfully."""
    import pillow_heif  # noqa: F401
    from PIL import Image  # noqa: F401


def test_main_module_components():
    """Test that the entry point is importable and callable."""
    from PySide6.QtWidgets import QApplication

    from gui import main

    # Ensure QApplication exists
    app = QApplication.instance() or QApplication(sys.argv)  # noqa: F841

    assert hasattr(main, "main")
    assert callable(main.main)


def test_main_window_constructs(qtbot, tmp_path):
    """Test that the main window can be constructed without errors."""
    from unittest.mock import Mock

    from core.codec import initialize_codec
    from gui.main_window import MainWindow

    config_manager = Mock()
    config_manager.get.return_value = str(tmp_path)
    config_manager.jpeg_quality.return_value = 90
    config_manager.load_window_geometry.return_value = (600, 420, False)

    window = MainWindow(initialize_codec(), config_manager)
    qtbot.addWidget(window)

    assert window.windowTitle() == "Convert Heic to JPG"
    assert window.centralWidget() is window.stack
