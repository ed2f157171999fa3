from abc import ABC, abstractmethod
from typing import List


class BaseImageStorage(ABC):
    @abstractmethod
    def store_image(self, index: int, width: int, height: int, pixels: bytes, compress: bool = False) -> str:
        """
        Store the image at position ``index`` of the sequence.
        Returns:
            str: Location of the stored image.
        """
        pass

    @abstractmethod
    def retrieve_image_paths(self) -> List[str]:
        """
        Retrieve stored images.
        Returns:
            list: Image locations in sequence order.
        """
        pass
