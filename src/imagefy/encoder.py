"""
Module for turning a file into a sequence of PNG images, independent of storage specifics.
"""

import os
from dataclasses import dataclass, field
from typing import List

from loguru import logger
from tqdm import tqdm

from .base_storage import BaseImageStorage
from .container import ContainerHeader, image_capacity, image_count, iter_chunks
from .errors import ImagefyIOError, PathNotFound, PathTypeMismatch
from .local_storage import LocalImageStorage


@dataclass
class EncodeResult:
    file_name: str
    file_size: int
    capacity: int
    image_paths: List[str] = field(default_factory=list)

    @property
    def image_count(self) -> int:
        return len(self.image_paths)


class FileToImageEncoder:
    """
    Splits a file into fixed-size RGB images: header and content go into
    image 0, the rest of the content follows in order, the last image is
    zero padded.
    """

    def __init__(self, width: int, height: int, compress_last: bool = True, progress: bool = True) -> None:
        self.width = width
        self.height = height
        self.capacity = image_capacity(width, height)
        self.compress_last = compress_last
        self.progress = progress
        logger.debug(f"Encoder set up for {width}x{height} images ({self.capacity} bytes each)")

    def encode_file(self, input_file: str, storage: BaseImageStorage) -> EncodeResult:
        """
        Encode ``input_file`` and hand each image to ``storage``.

        Images already written are left in place if a later one fails.
        """
        if not os.path.exists(input_file):
            raise PathNotFound(f"Path \"{input_file}\" doesn't exist.")
        if not os.path.isfile(input_file):
            raise PathTypeMismatch(f"Path \"{input_file}\" is not a file.")

        try:
            file_size = os.path.getsize(input_file)
        except OSError as e:
            raise ImagefyIOError(f"Could not stat \"{input_file}\": {e}") from e
        header = ContainerHeader(os.path.basename(os.path.normpath(input_file)), file_size)
        header.check_fits(self.capacity)
        count = image_count(file_size, header.size, self.capacity)
        logger.info(f"'{header.file_name}': {file_size} bytes, header {header.size} bytes => {count} images")

        result = EncodeResult(header.file_name, file_size, self.capacity)
        try:
            with open(input_file, "rb") as f:
                chunks = iter_chunks(f, header, self.capacity)
                for index, chunk in enumerate(tqdm(chunks, total=count, desc="Writing images", disable=not self.progress)):
                    compress = self.compress_last and index == count - 1
                    result.image_paths.append(
                        storage.store_image(index, self.width, self.height, chunk, compress)
                    )
        except OSError as e:
            raise ImagefyIOError(f"Error reading \"{input_file}\": {e}") from e
        logger.info(f"Encoded '{header.file_name}' into {result.image_count} images")
        return result


def file_to_image(
    width: int,
    height: int,
    input_file: str,
    output_dir: str,
    compress_last: bool = True,
    progress: bool = True,
) -> EncodeResult:
    """
    Encode ``input_file`` into ``NNNNN.png`` images inside the existing ``output_dir``.
    """
    storage = LocalImageStorage(output_dir)
    encoder = FileToImageEncoder(width, height, compress_last=compress_last, progress=progress)
    return encoder.encode_file(input_file, storage)
