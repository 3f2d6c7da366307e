"""
Tests for image and font sources and their resolution.
"""

import base64

import pytest


class TestResolve:
    """Tests for image source resolution."""

    def test_color_source(self):
        """Test a solid color resolves to an RGB8 buffer of (w, h)."""
        from imgpipe.inputs import ColorSource, resolve
        from imgpipe.core import PixelKind

        buffer = resolve(ColorSource(255, 0, 0, (4, 3)))
        assert buffer.kind is PixelKind.RGB8
        assert buffer.size == (4, 3)
        assert (buffer.pixels == [255, 0, 0]).all()

    def test_new_source(self):
        """Test a new buffer is zero-filled with the requested kind."""
        from imgpipe.inputs import NewSource, resolve
        from imgpipe.core import PixelKind

        buffer = resolve(NewSource(h=2, w=5, kind="GrayAlphaImage"))
        assert buffer.kind is PixelKind.LA8
        assert buffer.size == (5, 2)
        assert not buffer.pixels.any()

    def test_new_source_unknown_type(self):
        """Test an unknown buffer type is rejected."""
        from imgpipe.inputs import NewSource, resolve
        from imgpipe.core import InvalidImageTypeError

        with pytest.raises(InvalidImageTypeError):
            resolve(NewSource(h=2, w=2, kind="Bogus"))

    def test_bytes_source(self, red_png):
        """Test encoded bytes are decoded."""
        from imgpipe.inputs import BytesSource, resolve

        buffer = resolve(BytesSource(red_png))
        assert buffer.size == (4, 4)
        assert (buffer.pixels == [255, 0, 0]).all()

    def test_bytes_source_garbage(self):
        """Test undecodable bytes raise CodecError."""
        from imgpipe.inputs import BytesSource, resolve
        from imgpipe.core import CodecError

        with pytest.raises(CodecError):
            resolve(BytesSource(b"\x00\x01\x02"))

    def test_file_source(self, tmp_path, red_png):
        """Test file sources decode by content, not extension."""
        from imgpipe.inputs import FileSource, resolve

        path = tmp_path / "image.dat"
        path.write_bytes(red_png)
        assert resolve(FileSource(path)).size == (4, 4)

    def test_missing_file(self, tmp_path):
        """Test a missing file raises ImageIOError."""
        from imgpipe.inputs import FileSource, resolve
        from imgpipe.core import ImageIOError

        with pytest.raises(ImageIOError):
            resolve(FileSource(tmp_path / "nope.png"))

    def test_buffer_source(self):
        """Test an in-memory buffer passes through."""
        from imgpipe.inputs import BufferSource, resolve
        from imgpipe.core import fill_color

        buffer = fill_color((1, 2, 3), (2, 2))
        assert resolve(BufferSource(buffer)) is buffer

    def test_single_use(self):
        """Test a source resolves only once."""
        from imgpipe.inputs import ColorSource, resolve
        from imgpipe.core import InputAlreadyUsedError

        source = ColorSource(0, 0, 0, (1, 1))
        resolve(source)
        assert source.consumed is True
        with pytest.raises(InputAlreadyUsedError):
            resolve(source)

    def test_unregistered_source(self):
        """Test an unknown source type raises TypeError."""
        from dataclasses import dataclass
        from imgpipe.inputs import ImageSource, resolve

        @dataclass
        class Unknown(ImageSource):
            pass

        with pytest.raises(TypeError):
            resolve(Unknown())

    def test_source_types(self):
        """Test built-in and optional source types are registered."""
        from imgpipe.inputs import get_source_types

        types = get_source_types()
        for name in ("ColorSource", "FileSource", "BytesSource", "NewSource",
                     "Base64Source", "UrlSource"):
            assert name in types


class TestImageInput:
    """Tests for ImageInput."""

    def test_operations_applied_in_order(self):
        """Test an input applies its own operations after resolving."""
        from imgpipe.inputs import ImageInput, ColorSource
        from imgpipe.pipeline import Rotate90, Crop

        image_input = ImageInput(ColorSource(9, 9, 9, (6, 2)), [Rotate90(), Crop(0, 0, 2, 3)])
        buffer = image_input.get_image()
        assert buffer.size == (2, 3)

    def test_single_use(self):
        """Test an input cannot be resolved twice."""
        from imgpipe.inputs import ImageInput, ColorSource
        from imgpipe.core import InputAlreadyUsedError

        image_input = ImageInput(ColorSource(0, 0, 0, (1, 1)))
        image_input.get_image()
        with pytest.raises(InputAlreadyUsedError):
            image_input.get_image()


class TestRemoteSources:
    """Tests for base64 and url sources."""

    def test_base64(self, red_png):
        """Test a base64 payload decodes, whitespace allowed."""
        from imgpipe.inputs import Base64Source, resolve

        payload = base64.b64encode(red_png).decode("ascii")
        wrapped = "\n".join(payload[i:i + 16] for i in range(0, len(payload), 16))
        assert resolve(Base64Source(wrapped)).size == (4, 4)

    def test_base64_malformed(self):
        """Test malformed base64 raises DecodeError."""
        from imgpipe.inputs import Base64Source, resolve
        from imgpipe.core import DecodeError

        with pytest.raises(DecodeError):
            resolve(Base64Source("not*base64!"))

    def test_url(self, monkeypatch, red_png):
        """Test a url is fetched with the configured timeout."""
        import requests
        from imgpipe.inputs import UrlSource, resolve
        from imgpipe.core import settings

        calls = []

        class FakeResponse:
            content = red_png

            def raise_for_status(self):
                pass

        def fake_get(url, timeout=None):
            calls.append((url, timeout))
            return FakeResponse()

        monkeypatch.setattr(requests, "get", fake_get)
        buffer = resolve(UrlSource("https://example.com/red.png"))

        assert buffer.size == (4, 4)
        assert calls == [("https://example.com/red.png", settings.http_timeout)]

    def test_url_http_error(self, monkeypatch):
        """Test a non-2xx response raises TransportError."""
        import requests
        from imgpipe.inputs import UrlSource, resolve
        from imgpipe.core import TransportError

        class FakeResponse:
            content = b""

            def raise_for_status(self):
                raise requests.HTTPError("404 Client Error")

        monkeypatch.setattr(requests, "get", lambda url, timeout=None: FakeResponse())
        with pytest.raises(TransportError):
            resolve(UrlSource("https://example.com/missing.png"))

    def test_url_connection_error(self, monkeypatch):
        """Test connection failures raise TransportError."""
        import requests
        from imgpipe.inputs import fetch_bytes
        from imgpipe.core import TransportError

        def fail(url, timeout=None):
            raise requests.ConnectionError("refused")

        monkeypatch.setattr(requests, "get", fail)
        with pytest.raises(TransportError):
            fetch_bytes("https://example.invalid/")


class TestFontSources:
    """Tests for font sources."""

    def test_invalid_font_bytes(self):
        """Test non-font data raises InvalidFontError."""
        from imgpipe.inputs import FontBytesSource, resolve_font
        from imgpipe.core import InvalidFontError

        with pytest.raises(InvalidFontError):
            resolve_font(FontBytesSource(b"this is not a font"))

    def test_font_bytes(self, font_data):
        """Test valid font data resolves to a Font."""
        from imgpipe.inputs import FontBytesSource, resolve_font
        from imgpipe.text import Font

        assert isinstance(resolve_font(FontBytesSource(font_data)), Font)

    def test_font_base64(self, font_data):
        """Test base64 font data resolves to a Font."""
        from imgpipe.inputs import FontBase64Source, resolve_font
        from imgpipe.text import Font

        encoded = base64.b64encode(font_data).decode("ascii")
        assert isinstance(resolve_font(FontBase64Source(encoded)), Font)

    def test_font_file(self, tmp_path, font_data):
        """Test a font file resolves to a Font."""
        from imgpipe.inputs import FontFileSource, resolve_font

        path = tmp_path / "font.ttf"
        path.write_bytes(font_data)
        font = resolve_font(FontFileSource(path))
        assert font.data == font_data

    def test_font_handle_single_use(self, font):
        """Test font sources are single-use too."""
        from imgpipe.inputs import FontHandleSource, resolve_font
        from imgpipe.core import InputAlreadyUsedError

        source = FontHandleSource(font)
        assert resolve_font(source) is font
        with pytest.raises(InputAlreadyUsedError):
            resolve_font(source)


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
