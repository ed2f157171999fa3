"""
Module for rebuilding the original file from its PNG image sequence.
"""

import os
from dataclasses import dataclass
from typing import BinaryIO, Sequence

from loguru import logger
from tqdm import tqdm

from .container import ContainerHeader
from .errors import EmptyImageSequence, ImagefyIOError, InvalidHeader, OutputAlreadyExists
from .image_codec import read_image


def safe_file_name(name: str) -> bool:
    """True if ``name`` is a bare file name that stays inside the directory it is joined to."""
    if name in ("", ".", "..") or "\x00" in name:
        return False
    return os.path.basename(name) == name and not any(
        sep in name for sep in (os.sep, os.altsep) if sep
    )


@dataclass
class DecodeResult:
    output_path: str
    file_name: str
    file_size: int
    bytes_written: int
    images_read: int


class ImageToFileDecoder:
    """
    Reads images in the order given, strips the header from the first one and
    writes the concatenated payloads, truncated to the declared file size.
    """

    def __init__(self, progress: bool = True) -> None:
        self.progress = progress

    @staticmethod
    def resolve_output_path(output_path: str, file_name: str) -> str:
        if os.path.isdir(output_path):
            if not safe_file_name(file_name):
                raise InvalidHeader(
                    f"Stored file name {file_name!r} cannot be used inside a directory, pass a file path with -o."
                )
            return os.path.join(output_path, file_name)
        return output_path

    def decode_images(self, image_paths: Sequence[str], output_path: str) -> DecodeResult:
        """
        Decode ``image_paths`` (in encode order) into a file.

        Parameters
        ----------
        image_paths : sequence of str
            PNG files produced by the encoder, first image first.
        output_path : str
            Existing directory (the stored file name is used inside it) or the
            path of the file to create.

        Returns
        -------
        DecodeResult
            Where the file went and how much of it was recovered.
        """
        if not image_paths:
            raise EmptyImageSequence("No images to decode.")

        _, _, payload = read_image(image_paths[0])
        capacity = len(payload)
        header, offset = ContainerHeader.unpack(payload)
        logger.info(f"Header: file name '{header.file_name}', file size {header.file_size} bytes")

        file_path = self.resolve_output_path(output_path, header.file_name)
        try:
            with open(file_path, "xb") as out:
                remaining = self._write_slice(out, payload[offset:], header.file_size)
                for image_path in tqdm(image_paths[1:], desc="Reading images", disable=not self.progress):
                    _, _, payload = read_image(image_path)
                    if len(payload) != capacity:
                        logger.warning(
                            f"Image '{image_path}' holds {len(payload)} bytes, first image holds {capacity}; "
                            f"images of different sizes do not come from one encoding."
                        )
                    remaining = self._write_slice(out, payload, remaining)
        except FileExistsError as e:
            raise OutputAlreadyExists(f"File \"{file_path}\" already exists, try -o [PATH].") from e
        except OSError as e:
            raise ImagefyIOError(f"Error writing \"{file_path}\": {e}") from e

        if remaining > 0:
            logger.warning(
                f"Images ran out {remaining} bytes short of the declared {header.file_size} bytes, "
                f"output is truncated."
            )
        result = DecodeResult(
            output_path=file_path,
            file_name=header.file_name,
            file_size=header.file_size,
            bytes_written=header.file_size - remaining,
            images_read=len(image_paths),
        )
        logger.info(f"Decoded => wrote {result.bytes_written} bytes to '{file_path}' from {len(image_paths)} images")
        return result

    @staticmethod
    def _write_slice(out: BinaryIO, data: bytes, remaining: int) -> int:
        # Anything past the declared size is padding
        if len(data) > remaining:
            data = data[:remaining]
        out.write(data)
        return remaining - len(data)


def image_to_file(image_paths: Sequence[str], output_path: str, progress: bool = True) -> DecodeResult:
    """Decode ``image_paths`` into ``output_path`` (a directory or a file path)."""
    return ImageToFileDecoder(progress=progress).decode_images(image_paths, output_path)
