"""
Conversion engine: decode one HEIC file and write it back out as JPEG.

The engine is not safe for concurrent use. The worker calls it strictly one
file at a time, so there is no internal locking.
"""

from __future__ import annotations

import contextlib
import errno
import logging
import os
import stat
import tempfile
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from .codec import CodecToken
from .config import DEFAULT_JPEG_QUALITY, TARGET_EXTENSION, TARGET_FORMAT
from .conversion_job import ConversionOutcome, FileCandidate
from .errors import DecodeError, EncodeError, ErrorCode

logger = logging.getLogger(__name__)

# Pillow modes that JPEG can store without conversion
_JPEG_MODES = {"RGB", "L", "CMYK"}


class ConversionEngine:
    """
    Converts single files from HEIC to JPEG.

    Construction requires the CodecToken returned by initialize_codec(),
    which guarantees Pillow can open HEIC files.
    """

    def __init__(self, token: CodecToken, *, jpeg_quality: int = DEFAULT_JPEG_QUALITY) -> None:
        """
        Initialize the engine.

        Args:
            token: Proof of codec initialization
            jpeg_quality: JPEG quality passed to Pillow (1-95)
        """
        if not isinstance(token, CodecToken):
            raise TypeError("ConversionEngine requires a CodecToken from initialize_codec()")
        self._token = token
        self.jpeg_quality = jpeg_quality

    @staticmethod
    def destination_for(source: Path, output_root: Path) -> Path:
        """
        Build the output path for a source file.

        Subdirectories are flattened: only the stem of the source survives.

        Args:
            source: Source file path
            output_root: Batch output folder

        Returns:
            ``output_root / (stem + ".jpg")``
        """
        return Path(output_root) / f"{Path(source).stem}.{TARGET_EXTENSION}"

    def convert(self, source: Path, destination: Path) -> Path:
        """
        Convert ``source`` into a JPEG at ``destination``.

        The JPEG is written to a temporary file next to the destination and
        renamed into place, so a partial file never appears under the final
        name.

        Args:
            source: HEIC file to read
            destination: JPEG file to write (its directory must exist)

        Returns:
            The destination path

        Raises:
            DecodeError: If the source is not a readable image
            EncodeError: If the destination cannot be written
        """
        source = Path(source)
        destination = Path(destination)
        logger.debug(f"Converting {source} -> {destination}")

        image = self._decode(source)
        try:
            self._encode(image, destination)
        finally:
            image.close()
        return destination

    def convert_candidate(self, candidate: FileCandidate, output_root: Path) -> ConversionOutcome:
        """
        Convert one discovered candidate into the batch output folder.

        Args:
            candidate: File found by the scanner
            output_root: Batch output folder

        Returns:
            Converted(output_path) or Failed(reason)
        """
        destination = self.destination_for(candidate.path, output_root)
        try:
            self.convert(candidate.path, destination)
        except (DecodeError, EncodeError) as e:
            logger.error(f"{e.user_message}: {e.technical_message}")
            return ConversionOutcome.failed(candidate.path, e)
        return ConversionOutcome.converted(candidate.path, destination)

    def _decode(self, source: Path) -> Image.Image:
        image: Image.Image | None = None
        try:
            image = Image.open(source)
            image.load()
        except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError, SyntaxError) as e:
            if image is not None:
                image.close()
            raise DecodeError(source, f"{type(e).__name__}: {e}") from e
        return image

    def _encode(self, image: Image.Image, destination: Path) -> None:
        save_kwargs: dict[str, object] = {"quality": self.jpeg_quality}
        for key in ("exif", "icc_profile"):
            if image.info.get(key):
                save_kwargs[key] = image.info[key]

        directory = destination.parent
        if not directory.is_dir():
            raise EncodeError(
                destination, f"Output folder does not exist: {directory}", code=ErrorCode.FILE_NOT_FOUND
            )

        converted: Image.Image | None = None
        tmp_path: str | None = None
        try:
            converted = image if image.mode in _JPEG_MODES else image.convert("RGB")
            fd, tmp_path = tempfile.mkstemp(prefix=f".{destination.stem}.", suffix=".part", dir=directory)
            with os.fdopen(fd, "wb") as tmp_file:
                converted.save(tmp_file, TARGET_FORMAT, **save_kwargs)
                tmp_file.flush()
                os.fsync(tmp_file.fileno())
            # mkstemp creates the file as 0600
            os.chmod(tmp_path, _output_mode(destination))
            os.replace(tmp_path, destination)
            tmp_path = None
        except (OSError, ValueError) as e:
            raise EncodeError(destination, f"{type(e).__name__}: {e}", code=_encode_error_code(e)) from e
        finally:
            if tmp_path is not None:
                with contextlib.suppress(OSError):
                    os.unlink(tmp_path)
            if converted is not None and converted is not image:
                converted.close()


def _read_umask() -> int:
    mask = os.umask(0)
    os.umask(mask)
    return mask


# Read once at import; os.umask can only be queried by setting it
_UMASK = _read_umask()


def _output_mode(destination: Path) -> int:
    """Permissions for a new output file: the replaced file's, else 0666 minus the umask."""
    try:
        return stat.S_IMODE(destination.stat().st_mode)
    except OSError:
        return 0o666 & ~_UMASK


def _encode_error_code(error: Exception) -> ErrorCode:
    if isinstance(error, PermissionError):
        return ErrorCode.PERMISSION_DENIED
    if getattr(error, "errno", None) == errno.ENOSPC:
        return ErrorCode.DISK_FULL
    return ErrorCode.ENCODE_FAILED
