"""
Tests for the single-file conversion engine.
"""

import os
import stat
from pathlib import Path

import pytest
from PIL import Image, ImageCms

from core.conversion_job import FileCandidate
from core.engine import ConversionEngine
from core.errors import DecodeError, EncodeError, ErrorCode


class TestConversionEngine:
    """Test ConversionEngine."""

    def test_requires_codec_token(self):
        with pytest.raises(TypeError):
            ConversionEngine(object())  # type: ignore[arg-type]

    def test_destination_flattens_subdirectories(self):
        destination = ConversionEngine.destination_for(Path("/photos/a/b/IMG_0001.HEIC"), Path("/out"))
        assert destination == Path("/out/IMG_0001.jpg")

    def test_convert_writes_jpeg(self, engine, folders, make_image):
        input_root, output_root = folders
        source = make_image(input_root / "red.heic", color=(255, 0, 0), size=(10, 7))

        result = engine.convert(source, output_root / "red.jpg")

        assert result == output_root / "red.jpg"
        with Image.open(result) as image:
            assert image.format == "JPEG"
            assert image.size == (10, 7)

    def test_convert_rgba_source(self, engine, folders):
        input_root, output_root = folders
        source = input_root / "alpha.heic"
        Image.new("RGBA", (4, 4), (0, 255, 0, 128)).save(source, "PNG")

        engine.convert(source, output_root / "alpha.jpg")

        with Image.open(output_root / "alpha.jpg") as image:
            assert image.mode == "RGB"

    def test_convert_replaces_existing_file(self, engine, folders, make_image):
        input_root, output_root = folders
        destination = output_root / "img.jpg"
        destination.write_bytes(b"stale")
        source = make_image(input_root / "img.heic")

        engine.convert(source, destination)

        with Image.open(destination) as image:
            assert image.format == "JPEG"

    def test_corrupt_source_raises_decode_error(self, engine, folders):
        input_root, output_root = folders
        source = input_root / "broken.heic"
        source.write_bytes(b"definitely not an image")

        with pytest.raises(DecodeError) as exc_info:
            engine.convert(source, output_root / "broken.jpg")

        assert "broken.heic" in exc_info.value.user_message
        assert not (output_root / "broken.jpg").exists()

    def test_missing_source_raises_decode_error(self, engine, folders):
        _, output_root = folders
        with pytest.raises(DecodeError):
            engine.convert(output_root / "nothing.heic", output_root / "nothing.jpg")

    def test_missing_output_folder_raises_encode_error(self, engine, folders, tmp_path, make_image):
        input_root, _ = folders
        source = make_image(input_root / "img.heic")

        with pytest.raises(EncodeError) as exc_info:
            engine.convert(source, tmp_path / "missing" / "img.jpg")

        assert exc_info.value.code == ErrorCode.FILE_NOT_FOUND

    def test_save_failure_leaves_no_partial_file(self, engine, folders, monkeypatch, make_image):
        input_root, output_root = folders
        source = make_image(input_root / "img.heic")

        def fail_save(self, fp, format=None, **params):
            fp.write(b"partial")
            raise OSError(28, "No space left on device")

        monkeypatch.setattr(Image.Image, "save", fail_save)

        with pytest.raises(EncodeError) as exc_info:
            engine.convert(source, output_root / "img.jpg")

        assert exc_info.value.code == ErrorCode.DISK_FULL
        assert list(output_root.iterdir()) == []

    def test_convert_candidate_success(self, engine, folders, make_image):
        input_root, output_root = folders
        source = make_image(input_root / "sub" / "IMG.HEIC")

        outcome = engine.convert_candidate(FileCandidate(source), output_root)

        assert outcome.succeeded
        assert outcome.output_path == output_root / "IMG.jpg"
        assert outcome.output_path.is_file()

    def test_convert_candidate_failure(self, engine, folders):
        input_root, output_root = folders
        source = input_root / "bad.heic"
        source.write_bytes(b"garbage")

        outcome = engine.convert_candidate(FileCandidate(source), output_root)

        assert not outcome.succeeded
        assert outcome.reason == "Could not read image bad.heic"
        assert isinstance(outcome.error, DecodeError)

    def test_jpeg_quality_is_used(self, codec_token, folders, make_image):
        input_root, output_root = folders
        source = make_image(input_root / "img.heic", size=(64, 64))

        ConversionEngine(codec_token, jpeg_quality=10).convert(source, output_root / "low.jpg")
        ConversionEngine(codec_token, jpeg_quality=95).convert(source, output_root / "high.jpg")

        assert (output_root / "low.jpg").stat().st_size <= (output_root / "high.jpg").stat().st_size

    def test_oversized_source_raises_decode_error(self, engine, folders, monkeypatch, make_image):
        input_root, output_root = folders
        source = make_image(input_root / "huge.heic", size=(10, 10))
        monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 10)

        with pytest.raises(DecodeError) as exc_info:
            engine.convert(source, output_root / "huge.jpg")

        assert "DecompressionBombError" in exc_info.value.technical_message
        assert not (output_root / "huge.jpg").exists()

    def test_mode_conversion_failure_raises_encode_error(self, engine, folders, monkeypatch):
        input_root, output_root = folders
        source = input_root / "alpha.heic"
        Image.new("RGBA", (4, 4), (0, 255, 0, 128)).save(source, "PNG")

        def fail_convert(self, mode=None, *args, **kwargs):
            raise ValueError(f"conversion from {self.mode} to {mode} not supported")

        monkeypatch.setattr(Image.Image, "convert", fail_convert)

        with pytest.raises(EncodeError) as exc_info:
            engine.convert(source, output_root / "alpha.jpg")

        assert "alpha.jpg" in exc_info.value.user_message
        assert list(output_root.iterdir()) == []


@pytest.mark.skipif(os.name == "nt", reason="POSIX permission bits")
class TestOutputPermissions:
    """Test the permission bits of written JPEGs."""

    def test_new_file_follows_umask(self, engine, folders, make_image):
        input_root, output_root = folders
        source = make_image(input_root / "img.heic")
        sibling = output_root / "sibling.txt"
        sibling.write_bytes(b"")

        engine.convert(source, output_root / "img.jpg")

        mode = stat.S_IMODE((output_root / "img.jpg").stat().st_mode)
        assert mode == stat.S_IMODE(sibling.stat().st_mode)
        assert mode & stat.S_IRUSR

    def test_replaced_file_keeps_its_mode(self, engine, folders, make_image):
        input_root, output_root = folders
        source = make_image(input_root / "img.heic")
        destination = output_root / "img.jpg"
        destination.write_bytes(b"stale")
        destination.chmod(0o640)

        engine.convert(source, destination)

        assert stat.S_IMODE(destination.stat().st_mode) == 0o640


class TestRealHeic:
    """Test the engine on files written by the HEIF encoder."""

    def test_converts_heic(self, engine, folders, make_heic):
        input_root, output_root = folders
        source = make_heic(input_root / "IMG_0001.heic", color=(0, 0, 255))
        with Image.open(source) as heic:
            assert heic.format == "HEIF"

        engine.convert(source, output_root / "IMG_0001.jpg")

        with Image.open(output_root / "IMG_0001.jpg") as image:
            assert image.format == "JPEG"
            assert image.size == (64, 48)
            red, _, blue = image.convert("RGB").getpixel((32, 24))
            assert blue > 180
            assert red < 80

    def test_exif_is_copied(self, engine, folders, make_heic):
        input_root, output_root = folders
        exif = Image.Exif()
        exif[0x010F] = "Heic2JPG Camera"  # Make
        source = make_heic(input_root / "tagged.heic", exif=exif.tobytes())

        engine.convert(source, output_root / "tagged.jpg")

        with Image.open(output_root / "tagged.jpg") as image:
            assert image.getexif()[0x010F] == "Heic2JPG Camera"

    def test_icc_profile_is_copied(self, engine, folders, make_heic):
        input_root, output_root = folders
        profile = ImageCms.ImageCmsProfile(ImageCms.createProfile("sRGB")).tobytes()
        source = make_heic(input_root / "profiled.heic", icc_profile=profile)
        with Image.open(source) as heic:
            embedded = heic.info.get("icc_profile")
        if not embedded:
            pytest.skip("HEIF encoder did not embed the ICC profile")

        engine.convert(source, output_root / "profiled.jpg")

        with Image.open(output_root / "profiled.jpg") as image:
            assert image.info["icc_profile"] == embedded
