"""
Configuration manager for Heic2JPG.

Provides QSettings-backed configuration management with default fallbacks
and type safety.
"""

import logging
from typing import Any

from PySide6.QtCore import QSettings

from .config import DEFAULT_CONFIG, MAX_JPEG_QUALITY, MIN_JPEG_QUALITY, get_default_folder, setup_qsettings

logger = logging.getLogger(__name__)


class ConfigManager:
    """
    QSettings-backed configuration manager with robust defaults.

    Provides type-safe access to configuration values with automatic
    fallback to defaults when keys are missing or have invalid types.
    """

    def __init__(self) -> None:
        setup_qsettings()
        self._settings = QSettings()

        # Folder defaults depend on the user's system paths
        self._runtime_defaults = DEFAULT_CONFIG.copy()
        default_folder = get_default_folder()
        for key in ("last_input_dir", "last_output_dir"):
            if not self._runtime_defaults[key]:
                self._runtime_defaults[key] = default_folder

    def get(self, key: str, default: Any | None = None) -> Any:
        """
        Get a configuration value with fallback to defaults.

        Args:
            key: Configuration key (can use "/" for nested keys)
            default: Override default value (if None, uses DEFAULT_CONFIG)

        Returns:
            Configuration value coerced to the type of its default
        """
        fallback = default if default is not None else self._runtime_defaults.get(key)
        value = self._settings.value(key, fallback)

        if fallback is None:
            return value

        try:
            expected_type = type(fallback)
            if expected_type is bool:
                # QSettings returns strings for booleans on some backends
                return value.lower() in ("true", "1", "yes", "on") if isinstance(value, str) else bool(value)
            if expected_type in (int, float, str):
                return expected_type(value)
        except (ValueError, TypeError) as e:
            logger.warning(f"Failed to coerce config key '{key}': {e}, using default")
            return fallback

        if not isinstance(value, expected_type):
            logger.warning(f"Config key '{key}' has unexpected type, using default")
            return fallback
        return value

    def set(self, key: str, value: Any) -> None:
        """
        Set a configuration value and persist it immediately.

        Args:
            key: Configuration key (can use "/" for nested keys)
            value: Value to store
        """
        self._settings.setValue(key, value)
        self._settings.sync()

    def load_all(self) -> dict[str, Any]:
        """
        Load all configuration values merged with defaults.

        Returns:
            Dictionary with every known key
        """
        return {key: self.get(key) for key in self._runtime_defaults}

    def reset_to_defaults(self) -> None:
        """Clear all stored settings so that defaults apply again."""
        self._settings.clear()
        self._settings.sync()
        logger.info("Configuration reset to defaults")

    def jpeg_quality(self) -> int:
        """Get the JPEG quality clamped to the range Pillow recommends."""
        quality = self.get("jpeg_quality")
        return max(MIN_JPEG_QUALITY, min(MAX_JPEG_QUALITY, quality))

    def save_window_geometry(self, width: int, height: int, maximized: bool) -> None:
        """
        Persist the main window geometry.

        Args:
            width: Window width in pixels
            height: Window height in pixels
            maximized: Whether the window is maximized
        """
        self._settings.setValue("window/width", int(width))
        self._settings.setValue("window/height", int(height))
        self._settings.setValue("window/maximized", bool(maximized))
        self._settings.sync()

    def load_window_geometry(self) -> tuple[int, int, bool]:
        """
        Load the main window geometry.

        Returns:
            Tuple of (width, height, maximized)
        """
        return self.get("window/width"), self.get("window/height"), self.get("window/maximized")
