"""cl_image_tools - Image handle on top of Pillow: metadata, crop, resize and CDN saves."""

from .cdn_storage import CdnStorage
from .errors import (
    DecodeError,
    EncodeError,
    ImageError,
    ImageIOError,
    ImageNotFoundError,
    InvalidInputError,
    TransformError,
    UnsupportedFormatError,
)
from .image import Image, open_image
from .image_types import ImageType, get_pil_format
from .schemas import CdnOptions, JpegOptions, PngOptions, ResizeOptions

__version__ = "0.1.0"

__all__ = [
    "Image",
    "open_image",
    "ImageType",
    "get_pil_format",
    "CdnStorage",
    "CdnOptions",
    "JpegOptions",
    "PngOptions",
    "ResizeOptions",
    "ImageError",
    "InvalidInputError",
    "ImageNotFoundError",
    "ImageIOError",
    "DecodeError",
    "TransformError",
    "EncodeError",
    "UnsupportedFormatError",
    "__version__",
]
