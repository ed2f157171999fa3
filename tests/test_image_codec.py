"""
Tests for the Pillow-backed RGB8 PNG adapter.
"""

import io

import pytest
from PIL import Image

from imagefy.errors import ImageAlreadyExists, ImageDecodeError, PathNotFound
from imagefy.image_codec import decode_rgb8_image, encode_rgb8_image, read_image, write_image


@pytest.fixture
def pixels() -> bytes:
    return bytes((i * 7) % 256 for i in range(4 * 3 * 3))


def test_encode_produces_rgb_png(pixels):
    data = encode_rgb8_image(4, 3, pixels)
    assert data.startswith(b"\x89PNG\r\n\x1a\n")
    with Image.open(io.BytesIO(data)) as img:
        assert img.mode == "RGB"
        assert img.size == (4, 3)


def test_decode_recovers_pixels(pixels):
    width, height, decoded = decode_rgb8_image(encode_rgb8_image(4, 3, pixels))
    assert (width, height) == (4, 3)
    assert decoded == pixels


def test_compression_flag_does_not_change_pixels(pixels):
    fast = decode_rgb8_image(encode_rgb8_image(4, 3, pixels, compress=False))
    best = decode_rgb8_image(encode_rgb8_image(4, 3, pixels, compress=True))
    assert fast == best


def test_encode_rejects_wrong_length():
    with pytest.raises(ValueError):
        encode_rgb8_image(2, 2, bytes(11))


def test_decode_garbage():
    with pytest.raises(ImageDecodeError):
        decode_rgb8_image(b"definitely not a png")


def test_decode_converts_other_modes():
    buffer = io.BytesIO()
    Image.new("RGBA", (2, 2), (1, 2, 3, 4)).save(buffer, format="PNG")
    width, height, decoded = decode_rgb8_image(buffer.getvalue())
    assert (width, height) == (2, 2)
    assert decoded == bytes([1, 2, 3]) * 4


def test_write_image_pads_and_refuses_overwrite(tmp_path):
    image_path = str(tmp_path / "00000.png")
    write_image(image_path, 2, 2, b"abc")
    width, height, decoded = read_image(image_path)
    assert (width, height) == (2, 2)
    assert decoded == b"abc" + bytes(9)

    with pytest.raises(ImageAlreadyExists):
        write_image(image_path, 2, 2, b"xyz")


def test_read_image_missing(tmp_path):
    with pytest.raises(PathNotFound):
        read_image(str(tmp_path / "missing.png"))


def test_read_image_not_png(tmp_path):
    bogus = tmp_path / "bogus.png"
    bogus.write_bytes(b"plain text")
    with pytest.raises(ImageDecodeError):
        read_image(str(bogus))


def test_pixel_limit_lifted_for_large_images():
    assert Image.MAX_IMAGE_PIXELS is None


def test_decode_over_pixel_limit(pixels, monkeypatch):
    """A limit put back on Pillow surfaces as a decode error, not a crash."""
    data = encode_rgb8_image(4, 3, pixels)
    monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 2)
    with pytest.raises(ImageDecodeError):
        decode_rgb8_image(data)
