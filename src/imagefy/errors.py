"""
Exception types raised by the imagefy encoder, decoder and image codec.

Every failure of the core is reported as a subclass of ``ImagefyError``; the
command-line layer is the only place that turns them into user messages.
"""


class ImagefyError(Exception):
    """Base class for all imagefy failures."""


class PathNotFound(ImagefyError):
    """A required input path does not exist."""


class PathTypeMismatch(ImagefyError):
    """A path exists but is a file where a directory was expected, or the reverse."""


class OutputCollision(ImagefyError):
    """The target of a write already exists."""


class ImageAlreadyExists(OutputCollision):
    pass


class OutputAlreadyExists(OutputCollision):
    pass


class HeaderTooLarge(ImagefyError):
    """The container header does not fit into the first image."""


class InvalidHeader(ImagefyError):
    """The first image does not start with a well-formed container header."""


class EmptyImageSequence(ImagefyError):
    """No images were supplied to the decoder."""


class ImageCodecError(ImagefyError):
    """The underlying PNG library failed."""


class ImageEncodeError(ImageCodecError):
    pass


class ImageDecodeError(ImageCodecError):
    pass


class ImagefyIOError(ImagefyError):
    """Reading or writing a file failed."""


class ConfirmationDeclined(ImagefyError):
    """The user answered no to a confirmation prompt."""


class UsageError(ImagefyError):
    """The command-line arguments do not describe a valid operation."""
