import os
from typing import List

from loguru import logger

from .base_storage import BaseImageStorage
from .errors import PathNotFound, PathTypeMismatch
from .image_codec import write_image

IMAGE_SUFFIX = ".png"


def image_file_name(index: int) -> str:
    return f"{index:05d}{IMAGE_SUFFIX}"


class LocalImageStorage(BaseImageStorage):
    def __init__(self, directory: str):
        if not os.path.exists(directory):
            raise PathNotFound(f"Directory \"{directory}\" doesn't exist.")
        if not os.path.isdir(directory):
            raise PathTypeMismatch(f"Path \"{directory}\" is not a directory.")
        self.directory = directory

    def store_image(self, index: int, width: int, height: int, pixels: bytes, compress: bool = False) -> str:
        image_path = os.path.join(self.directory, image_file_name(index))
        write_image(image_path, width, height, pixels, compress)
        return image_path

    def retrieve_image_paths(self) -> List[str]:
        # Zero-padded names sort into encode order
        names = sorted(
            entry.name
            for entry in os.scandir(self.directory)
            if entry.is_file() and entry.name.lower().endswith(IMAGE_SUFFIX)
        )
        logger.info(f"Found {len(names)} images in {self.directory}")
        return [os.path.join(self.directory, name) for name in names]
