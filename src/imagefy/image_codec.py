"""
Thin adapter over Pillow for lossless 8-bit RGB PNG images.

The container code only ever sees raw pixel bytes; this module turns them
into PNG files and back.
"""

import io
import os
from typing import Tuple

import numpy as np
from loguru import logger
from PIL import Image, UnidentifiedImageError

from .container import BYTES_PER_PIXEL, pad_chunk
from .errors import ImageAlreadyExists, ImageDecodeError, ImageEncodeError, ImagefyIOError, PathNotFound

# Image size is bounded only by the --width and --height used to encode
Image.MAX_IMAGE_PIXELS = None

# zlib levels handed to the PNG writer
BEST_COMPRESSION = 9
FAST_COMPRESSION = 1


def encode_rgb8_image(width: int, height: int, pixels: bytes, compress: bool = False) -> bytes:
    """
    Encode ``width * height * 3`` bytes of RGB pixel data as a PNG.

    Parameters
    ----------
    width, height : int
        Image dimensions in pixels.
    pixels : bytes
        Row-major RGB bytes, exactly ``width * height * 3`` long.
    compress : bool, optional
        Spend more effort on PNG compression. The decoded pixels are the same
        either way.

    Returns
    -------
    bytes
        The PNG file content.
    """
    expected = width * height * BYTES_PER_PIXEL
    if len(pixels) != expected:
        raise ValueError(f"Expected {expected} pixel bytes for {width}x{height}, got {len(pixels)}.")
    frame = np.frombuffer(pixels, dtype=np.uint8).reshape((height, width, BYTES_PER_PIXEL))
    buffer = io.BytesIO()
    try:
        Image.fromarray(frame).save(
            buffer,
            format="PNG",
            compress_level=BEST_COMPRESSION if compress else FAST_COMPRESSION,
        )
    except (OSError, ValueError) as e:
        raise ImageEncodeError(f"Could not encode {width}x{height} PNG: {e}") from e
    return buffer.getvalue()


def decode_rgb8_image(data: bytes) -> Tuple[int, int, bytes]:
    """
    Decode PNG content into ``(width, height, pixel_bytes)``.

    Images stored in another mode are converted to RGB, which only round-trips
    for images that were RGB to begin with.
    """
    try:
        with Image.open(io.BytesIO(data)) as img:
            if img.mode != "RGB":
                logger.warning(f"Converting {img.mode} image to RGB, payload may not match the original.")
                img = img.convert("RGB")
            width, height = img.size
            pixels = np.asarray(img, dtype=np.uint8).tobytes()
    except Image.DecompressionBombError as e:
        raise ImageDecodeError(f"PNG exceeds the pixel limit set on Pillow: {e}") from e
    except (UnidentifiedImageError, OSError, ValueError) as e:
        raise ImageDecodeError(f"Could not decode PNG data: {e}") from e
    return width, height, pixels


def write_image(image_path: str, width: int, height: int, pixels: bytes, compress: bool = False) -> None:
    """
    Write ``pixels``, zero padded to full capacity, as a PNG at ``image_path``.

    Raises
    ------
    ImageAlreadyExists
        If ``image_path`` already exists; existing images are never overwritten.
    """
    png = encode_rgb8_image(width, height, pad_chunk(pixels, width * height * BYTES_PER_PIXEL), compress)
    try:
        with open(image_path, "xb") as f:
            f.write(png)
    except FileExistsError as e:
        raise ImageAlreadyExists(f"Image \"{image_path}\" already exists.") from e
    except OSError as e:
        raise ImagefyIOError(f"Error creating image \"{image_path}\": {e}") from e
    logger.debug(f"Wrote {width}x{height} image '{image_path}' ({len(png)} bytes, compress={compress})")


def read_image(image_path: str) -> Tuple[int, int, bytes]:
    """Read the PNG at ``image_path`` and return ``(width, height, pixel_bytes)``."""
    if not os.path.exists(image_path):
        raise PathNotFound(f"Image \"{image_path}\" doesn't exist.")
    try:
        with open(image_path, "rb") as f:
            data = f.read()
    except OSError as e:
        raise ImagefyIOError(f"Error reading image \"{image_path}\": {e}") from e
    try:
        return decode_rgb8_image(data)
    except ImageDecodeError as e:
        raise ImageDecodeError(f"Image \"{image_path}\": {e}") from e
