"""Exceptions raised by cl_image_tools.

Every error carries a human readable ``message`` and derives from
:class:`ImageError`. Kinds that have a natural builtin counterpart also
derive from it, so callers may catch ``FileNotFoundError`` or ``ValueError``
without importing this module.
"""

from typing_extensions import override


class ImageError(Exception):
    """Base class for all image handling errors."""

    def __init__(self, message: str = "An unknown image error occurred."):
        self.message: str = message
        super().__init__(self.message)

    @override
    def __str__(self):
        return f"{type(self).__name__}: {self.message}"


class InvalidInputError(ImageError, ValueError):
    """Empty or malformed path, or an out of range parameter."""


class ImageNotFoundError(ImageError, FileNotFoundError):
    """The referenced file does not exist."""


class ImageIOError(ImageError, OSError):
    """File could not be read, written or moved."""


class DecodeError(ImageError):
    """Header or pixel data could not be decoded."""


class TransformError(ImageError):
    """Crop or resample of the pixel buffer failed."""


class EncodeError(ImageError):
    """The encoder failed to write the image."""


class UnsupportedFormatError(ImageError, ValueError):
    """Requested encode target is not JPEG or PNG."""
