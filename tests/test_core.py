"""
Tests for imgpipe core: buffers, codec, settings and build info.
"""

import pytest
import numpy as np


class TestPixelKind:
    """Tests for PixelKind lookup."""

    def test_from_serialized_name(self):
        """Test lookup by serialized type name."""
        from imgpipe.core import PixelKind

        assert PixelKind.from_name("RgbaImage") is PixelKind.RGBA8
        assert PixelKind.from_name("Rgb32FImage") is PixelKind.RGB32F

    def test_from_short_name(self):
        """Test lookup by member name, case-insensitive."""
        from imgpipe.core import PixelKind

        assert PixelKind.from_name("l8") is PixelKind.L8

    def test_unknown_name(self):
        """Test that unknown type names are rejected."""
        from imgpipe.core import PixelKind, InvalidImageTypeError

        with pytest.raises(InvalidImageTypeError):
            PixelKind.from_name("Bogus")

    def test_layout(self):
        """Test channel layout properties."""
        from imgpipe.core import PixelKind

        assert PixelKind.LA8.channels == 2
        assert PixelKind.LA8.color_channels == 1
        assert PixelKind.LA8.has_alpha is True
        assert PixelKind.RGBA32F.is_float is True
        assert PixelKind.RGB8.max_value == 255


class TestPixelBuffer:
    """Tests for PixelBuffer and buffer helpers."""

    def test_new_buffer(self):
        """Test zero-initialized allocation."""
        from imgpipe.core import new_buffer, PixelKind

        buffer = new_buffer(3, 5, "RgbaImage")
        assert buffer.size == (5, 3)
        assert buffer.kind is PixelKind.RGBA8
        assert buffer.pixels.shape == (3, 5, 4)
        assert not buffer.pixels.any()

    def test_two_dimensional_array(self):
        """Test that a 2D array is accepted for single-channel kinds."""
        from imgpipe.core import PixelBuffer, PixelKind

        buffer = PixelBuffer(np.zeros((4, 6), dtype=np.uint8), PixelKind.L8)
        assert buffer.pixels.shape == (4, 6, 1)

    def test_channel_mismatch(self):
        """Test that a mismatched channel count raises."""
        from imgpipe.core import PixelBuffer, PixelKind

        with pytest.raises(ValueError):
            PixelBuffer(np.zeros((4, 4, 3), dtype=np.uint8), PixelKind.RGBA8)

    @pytest.mark.parametrize("h, w", [(0, 0), (0, 5), (5, 0), (-1, 3)])
    def test_new_buffer_rejects_empty(self, h, w):
        """Test zero or negative dimensions are rejected."""
        from imgpipe.core import new_buffer, InvalidGeometryError

        with pytest.raises(InvalidGeometryError):
            new_buffer(h, w, "RgbImage")

    def test_empty_array_rejected(self):
        """Test a buffer cannot wrap an array with no pixels."""
        from imgpipe.core import PixelBuffer, PixelKind, InvalidGeometryError

        with pytest.raises(InvalidGeometryError):
            PixelBuffer(np.zeros((0, 4, 3), dtype=np.uint8), PixelKind.RGB8)

    def test_fill_color_rejects_empty(self):
        """Test a zero-sized solid color is rejected."""
        from imgpipe.core import fill_color, InvalidGeometryError

        with pytest.raises(InvalidGeometryError):
            fill_color((1, 2, 3), (0, 4))

    def test_fill_color(self):
        """Test solid color fill is RGB8 with (width, height) size."""
        from imgpipe.core import fill_color, PixelKind

        buffer = fill_color((10, 20, 30), (8, 2))
        assert buffer.kind is PixelKind.RGB8
        assert buffer.size == (8, 2)
        assert (buffer.pixels == [10, 20, 30]).all()

    def test_convert_adds_opaque_alpha(self):
        """Test RGB8 -> RGBA8 adds full alpha."""
        from imgpipe.core import fill_color, convert, PixelKind

        rgba = convert(fill_color((1, 2, 3), (2, 2)), PixelKind.RGBA8)
        assert (rgba.pixels == [1, 2, 3, 255]).all()

    def test_convert_to_gray(self):
        """Test color -> gray uses luma."""
        from imgpipe.core import fill_color, convert, PixelKind

        gray = convert(fill_color((255, 255, 255), (2, 2)), PixelKind.L8)
        assert gray.pixels.shape == (2, 2, 1)
        assert (gray.pixels == 255).all()

    def test_convert_same_kind(self):
        """Test converting to the current kind returns the buffer."""
        from imgpipe.core import fill_color, convert, PixelKind

        buffer = fill_color((1, 2, 3), (2, 2))
        assert convert(buffer, PixelKind.RGB8) is buffer


class TestCodec:
    """Tests for encoding and decoding."""

    def test_png_round_trip(self, red_png):
        """Test a 4x4 red image survives PNG encode/decode."""
        from imgpipe.core import decode, PixelKind

        buffer = decode(red_png)
        assert buffer.kind is PixelKind.RGB8
        assert buffer.size == (4, 4)
        assert (buffer.pixels == [255, 0, 0]).all()

    def test_sniff_format(self, red_png):
        """Test format detection from content."""
        from imgpipe.core.codec import sniff_format

        assert sniff_format(red_png) == "PNG"
        assert sniff_format(b"\xff\xd8\xff\xe0rest") == "JPEG"
        assert sniff_format(b"nothing") is None

    def test_alpha_round_trip(self):
        """Test RGBA survives PNG."""
        from imgpipe.core import new_buffer, encode, decode, PixelKind

        buffer = new_buffer(2, 2, PixelKind.RGBA8)
        buffer.pixels[0, 0] = [0, 0, 255, 128]
        decoded = decode(encode(buffer, "png"))
        assert decoded.kind is PixelKind.RGBA8
        assert list(decoded.pixels[0, 0]) == [0, 0, 255, 128]

    def test_jpeg_drops_alpha(self):
        """Test JPEG output of an RGBA buffer decodes as RGB."""
        from imgpipe.core import new_buffer, encode, decode, PixelKind

        data = encode(new_buffer(8, 8, PixelKind.RGBA8), "JPEG", quality=80)
        assert decode(data).kind is PixelKind.RGB8

    def test_float_buffer_encodes(self):
        """Test float buffers are quantized to 8-bit on output."""
        from imgpipe.core import PixelBuffer, PixelKind, encode, decode

        buffer = PixelBuffer(np.ones((2, 2, 3), dtype=np.float32), PixelKind.RGB32F)
        decoded = decode(encode(buffer, "PNG"))
        assert (decoded.pixels == 255).all()

    def test_decode_garbage(self):
        """Test that undecodable bytes raise CodecError."""
        from imgpipe.core import decode, CodecError

        with pytest.raises(CodecError):
            decode(b"definitely not an image")

    def test_decode_empty(self):
        """Test that empty input raises CodecError."""
        from imgpipe.core import decode, CodecError

        with pytest.raises(CodecError):
            decode(b"")

    def test_default_format_from_settings(self):
        """Test encode() without a format uses settings.output_format."""
        from imgpipe.core import fill_color, encode, configure, settings
        from imgpipe.core.codec import sniff_format

        original = settings.output_format
        configure(output_format="BMP")
        try:
            assert sniff_format(encode(fill_color((0, 0, 0), (2, 2)))) == "BMP"
        finally:
            configure(output_format=original)

    def test_unknown_output_format(self):
        """Test that unknown containers are rejected."""
        from imgpipe.core import fill_color, encode, CodecError

        with pytest.raises(CodecError):
            encode(fill_color((0, 0, 0), (1, 1)), "XYZ")

    def test_save_infers_format(self, tmp_path):
        """Test save() picks the format from the suffix."""
        from imgpipe.core import fill_color, save
        from imgpipe.core.codec import sniff_format

        path = save(fill_color((0, 255, 0), (3, 3)), tmp_path / "out.png")
        assert sniff_format(path.read_bytes()) == "PNG"

    def test_save_unknown_suffix(self, tmp_path):
        """Test save() without a format and an unknown suffix."""
        from imgpipe.core import fill_color, save, CodecError

        with pytest.raises(CodecError):
            save(fill_color((0, 0, 0), (1, 1)), tmp_path / "out.unknown")

    def test_load_missing_file(self, tmp_path):
        """Test that a missing file raises ImageIOError."""
        from imgpipe.core import load_image_file
        from imgpipe.core.errors import ImageIOError

        with pytest.raises(ImageIOError):
            load_image_file(tmp_path / "missing.png")


class TestSettings:
    """Tests for package settings."""

    def test_defaults(self):
        """Test default settings."""
        from imgpipe.core import Settings

        s = Settings()
        assert s.http_timeout == 30.0
        assert s.output_format == "PNG"
        assert s.to_dict()["jpeg_quality"] == 90

    def test_env_config(self, monkeypatch):
        """Test environment variables override defaults."""
        from imgpipe.core.config import load_settings

        monkeypatch.setenv("IMGPIPE_HTTP_TIMEOUT", "5")
        monkeypatch.setenv("IMGPIPE_JPEG_QUALITY", "70")
        monkeypatch.setenv("IMGPIPE_UNRELATED", "ignored")

        s = load_settings()
        assert s.http_timeout == 5.0
        assert s.jpeg_quality == 70

    def test_env_config_invalid(self, monkeypatch):
        """Test that non-numeric values are rejected."""
        from imgpipe.core import ConfigError
        from imgpipe.core.config import load_settings

        monkeypatch.setenv("IMGPIPE_HTTP_TIMEOUT", "soon")
        with pytest.raises(ConfigError):
            load_settings()

    def test_configure(self):
        """Test runtime configuration."""
        from imgpipe.core import configure, settings

        original = settings.http_timeout
        configure(http_timeout="12")
        assert settings.http_timeout == 12.0

        # Restore
        configure(http_timeout=original)

    def test_configure_unknown(self):
        """Test that unknown settings are rejected."""
        from imgpipe.core import configure, ConfigError

        with pytest.raises(ConfigError):
            configure(bogus=1)

    def test_load_json(self, tmp_path):
        """Test JSON loading errors."""
        from imgpipe.core import ConfigError
        from imgpipe.core.config import load_json

        with pytest.raises(FileNotFoundError):
            load_json(tmp_path / "missing.json")

        bad = tmp_path / "bad.json"
        bad.write_text("{not json")
        with pytest.raises(ConfigError):
            load_json(bad)


class TestBuildInfo:
    """Tests for version information."""

    def test_version_str(self):
        """Test version string contents."""
        import imgpipe
        from imgpipe.core.build_info import version_str

        text = version_str()
        assert text.startswith(f"Version {imgpipe.__version__} (python ")
        assert "opencv" in text
        assert "-bit" in text

    def test_package_level_import(self):
        """Test convenience names at package level."""
        import imgpipe
        assert hasattr(imgpipe, 'Pipeline')
        assert hasattr(imgpipe, 'encode')
        assert hasattr(imgpipe, 'configure')


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
