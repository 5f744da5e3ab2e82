"""
Shared fixtures for the Heic2JPG test suite.
"""

import os
import time
from pathlib import Path

import pytest
from PIL import Image

# Set offscreen platform to prevent display errors on headless systems
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from core.codec import initialize_codec  # noqa: E402
from core.conversion_job import ConversionOutcome, FileCandidate  # noqa: E402
from core.engine import ConversionEngine  # noqa: E402
from core.errors import DecodeError  # noqa: E402


def write_image(path: Path, color: tuple[int, int, int] = (200, 30, 30), size: tuple[int, int] = (8, 6)) -> Path:
    """
    Write a small real image under ``path``.

    The payload is PNG; Pillow picks the decoder from the file content, so the
    file opens fine under a ``.heic`` name.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    Image.new("RGB", size, color).save(path, "PNG")
    return path


def write_heic(
    path: Path, color: tuple[int, int, int] = (200, 30, 30), size: tuple[int, int] = (64, 48), **info: bytes
) -> Path:
    """
    Write a real HEIC file under ``path``.

    Needs the HEIF codec to be registered. ``info`` accepts ``exif`` and
    ``icc_profile`` bytes to embed in the file.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    Image.new("RGB", size, color).save(path, "HEIF", **info)
    return path


class CountingEngine:
    """Stub engine that records every call, fails on chosen file names and can be slowed down."""

    def __init__(
        self, fail_on: set[str] | None = None, raise_on: set[str] | None = None, delay: float = 0.0
    ) -> None:
        self.fail_on = fail_on or set()
        self.raise_on = raise_on or set()
        self.delay = delay
        self.calls: list[Path] = []

    @staticmethod
    def destination_for(source: Path, output_root: Path) -> Path:
        return ConversionEngine.destination_for(source, output_root)

    def convert_candidate(self, candidate: FileCandidate, output_root: Path) -> ConversionOutcome:
        self.calls.append(candidate.path)
        if self.delay:
            time.sleep(self.delay)
        if candidate.path.name in self.raise_on:
            raise RuntimeError(f"engine exploded on {candidate.path.name}")
        if candidate.path.name in self.fail_on:
            return ConversionOutcome.failed(candidate.path, DecodeError(candidate.path, "stub failure"))
        return ConversionOutcome.converted(candidate.path, self.destination_for(candidate.path, output_root))


@pytest.fixture(scope="session")
def codec_token():
    """Process-wide codec token."""
    return initialize_codec()


@pytest.fixture
def engine(codec_token):
    """Real conversion engine."""
    return ConversionEngine(codec_token)


@pytest.fixture
def folders(tmp_path):
    """Fresh input and output folders."""
    input_root = tmp_path / "input"
    output_root = tmp_path / "output"
    input_root.mkdir()
    output_root.mkdir()
    return input_root, output_root


@pytest.fixture
def make_image():
    """Factory writing small real images, see write_image()."""
    return write_image


@pytest.fixture
def make_heic(codec_token):
    """Factory writing small real HEIC files, see write_heic()."""
    return write_heic


@pytest.fixture
def counting_engine():
    """Factory for stub engines, see CountingEngine."""
    return CountingEngine
