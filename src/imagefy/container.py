"""
Container framing shared by the encoder and the decoder.

An encoded file is one byte stream split over fixed-capacity images:

    image 0:   [name_length:u64 LE][file_name][file_size:u64 LE][content...][zeros]
    image i>0: [content...][zeros]

where the capacity of every image is ``width * height * 3`` bytes.
"""

import math
import struct
from dataclasses import dataclass
from typing import BinaryIO, Iterator, Tuple

from .errors import HeaderTooLarge, InvalidHeader

BYTES_PER_PIXEL = 3
SIZE_FIELD = struct.Struct("<Q")
# name_length and file_size fields
HEADER_OVERHEAD = 2 * SIZE_FIELD.size


def image_capacity(width: int, height: int) -> int:
    """
    Number of payload bytes a ``width`` x ``height`` RGB image holds.

    Raises
    ------
    ValueError
        If either dimension is not a positive integer.
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Image dimensions must be positive, got {width}x{height}.")
    return width * height * BYTES_PER_PIXEL


def image_count(file_size: int, header_size: int, capacity: int) -> int:
    """
    Number of images needed to hold the header followed by ``file_size`` bytes.

    At least one image is always produced, so an empty file still carries its
    header.
    """
    return max(1, math.ceil((header_size + file_size) / capacity))


@dataclass(frozen=True)
class ContainerHeader:
    """Identity and size of the original file, stored at the start of image 0."""

    file_name: str
    file_size: int

    @property
    def name_bytes(self) -> bytes:
        return self.file_name.encode("utf-8", errors="surrogateescape")

    @property
    def size(self) -> int:
        return HEADER_OVERHEAD + len(self.name_bytes)

    def pack(self) -> bytes:
        name = self.name_bytes
        return SIZE_FIELD.pack(len(name)) + name + SIZE_FIELD.pack(self.file_size)

    def check_fits(self, capacity: int) -> None:
        """Raise ``HeaderTooLarge`` unless the header leaves room in an image of ``capacity`` bytes."""
        if capacity <= self.size:
            raise HeaderTooLarge(
                f"Header of {self.size} bytes does not fit in an image of {capacity} bytes, "
                f"use larger image dimensions."
            )

    @classmethod
    def unpack(cls, payload: bytes) -> Tuple["ContainerHeader", int]:
        """
        Parse the header at the start of the first image's payload.

        Parameters
        ----------
        payload : bytes
            Raw pixel bytes of image 0.

        Returns
        -------
        tuple
            The header and the offset of the first content byte in ``payload``.

        Raises
        ------
        InvalidHeader
            If the payload is too short, the name is not UTF-8, or the
            declared name does not fit the payload.
        """
        if len(payload) < HEADER_OVERHEAD:
            raise InvalidHeader(f"Image payload of {len(payload)} bytes is too short for a header.")
        (name_length,) = SIZE_FIELD.unpack_from(payload, 0)
        name_end = SIZE_FIELD.size + name_length
        if name_end + SIZE_FIELD.size > len(payload):
            raise InvalidHeader(
                f"Declared name length {name_length} exceeds the first image's capacity."
            )
        try:
            file_name = bytes(payload[SIZE_FIELD.size:name_end]).decode("utf-8")
        except UnicodeDecodeError as e:
            raise InvalidHeader(f"File name in header is not valid UTF-8: {e}") from e
        (file_size,) = SIZE_FIELD.unpack_from(payload, name_end)
        return cls(file_name, file_size), name_end + SIZE_FIELD.size


def _read_up_to(stream: BinaryIO, size: int) -> bytes:
    # read() may return short counts before EOF on pipes and some file systems
    parts = []
    while size > 0:
        data = stream.read(size)
        if not data:
            break
        parts.append(data)
        size -= len(data)
    return b"".join(parts)


def pad_chunk(data: bytes, capacity: int) -> bytes:
    """Right-pad ``data`` with zero bytes to exactly ``capacity`` bytes."""
    if len(data) > capacity:
        raise ValueError(f"Chunk of {len(data)} bytes exceeds capacity {capacity}.")
    return data + bytes(capacity - len(data))


def iter_chunks(stream: BinaryIO, header: ContainerHeader, capacity: int) -> Iterator[bytes]:
    """
    Yield the fixed-size chunks of ``header`` followed by the content of ``stream``.

    Exactly ``image_count(header.file_size, header.size, capacity)`` chunks of
    ``capacity`` bytes are produced; the first starts with the packed header
    and the last is zero padded.
    """
    header.check_fits(capacity)
    count = image_count(header.file_size, header.size, capacity)
    first = header.pack() + _read_up_to(stream, capacity - header.size)
    yield pad_chunk(first, capacity)
    for _ in range(1, count):
        yield pad_chunk(_read_up_to(stream, capacity), capacity)
