"""
One-time initialization of the HEIC codec.

Pillow only learns to open HEIC files after ``pillow_heif`` registers its
opener. ``initialize_codec`` does that once per process and hands back a
CodecToken; the conversion engine refuses to run without one.
"""

from __future__ import annotations

import logging
import threading

from .errors import CodecInitError

logger = logging.getLogger(__name__)

_init_lock = threading.Lock()
_token: CodecToken | None = None
_CONSTRUCTION_KEY = object()


class CodecToken:
    """Proof that the codec has been initialized in this process."""

    __slots__ = ("libheif_version", "pillow_heif_version")

    def __init__(self, key: object, libheif_version: str, pillow_heif_version: str) -> None:
        if key is not _CONSTRUCTION_KEY:
            raise TypeError("CodecToken instances are created by initialize_codec()")
        self.libheif_version = libheif_version
        self.pillow_heif_version = pillow_heif_version

    def __repr__(self) -> str:
        return f"CodecToken(libheif={self.libheif_version}, pillow_heif={self.pillow_heif_version})"


def initialize_codec() -> CodecToken:
    """
    Register the HEIF opener with Pillow.

    Safe to call from any thread and any number of times; only the first
    call does work, later calls return the same token.

    Returns:
        The process-wide CodecToken

    Raises:
        CodecInitError: If pillow_heif cannot be imported or registered
    """
    global _token

    with _init_lock:
        if _token is not None:
            return _token

        try:
            import pillow_heif

            pillow_heif.register_heif_opener()
            libheif_version = pillow_heif.libheif_version()
            pillow_heif_version = getattr(pillow_heif, "__version__", "unknown")
        except Exception as e:
            logger.error(f"HEIC codec initialization failed: {e}")
            raise CodecInitError(f"{type(e).__name__}: {e}") from e

        _token = CodecToken(_CONSTRUCTION_KEY, libheif_version, pillow_heif_version)
        logger.info(f"HEIC codec initialized (libheif {libheif_version}, pillow_heif {pillow_heif_version})")
        return _token


def is_codec_initialized() -> bool:
    """Check whether initialize_codec() has succeeded in this process."""
    return _token is not None
