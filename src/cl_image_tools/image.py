"""Image handle: one raster file, its header metadata and lazily decoded pixels."""

from __future__ import annotations

import os
from os import PathLike
from pathlib import Path
from types import TracebackType
from typing import Self

from loguru import logger
from PIL import Image as PILImage
from PIL import UnidentifiedImageError

from .cdn_storage import CdnStorage
from .errors import (
    DecodeError,
    EncodeError,
    ImageIOError,
    ImageNotFoundError,
    InvalidInputError,
    TransformError,
    UnsupportedFormatError,
)
from .image_types import ImageType
from .schemas import CdnOptions, JpegOptions, PngOptions, ResizeOptions, build_options
from .utils.md5 import get_file_md5
from .utils.profiling import timed

DEFAULT_MIME_TYPE = "application/octet-stream"


def _as_path(path: str | PathLike[str] | None) -> Path:
    if path is None:
        raise InvalidInputError("File cannot be empty !")
    try:
        raw = os.fsdecode(path)
    except TypeError as exc:
        raise InvalidInputError(f"Not a file path: {path!r}") from exc
    if not raw:
        raise InvalidInputError("File cannot be empty !")
    return Path(raw)


def _to_truecolor(img: PILImage.Image) -> PILImage.Image:
    """Copy ``img`` into an RGB or RGBA buffer detached from its file."""
    if img.mode in ("RGB", "RGBA"):
        return img.copy()

    has_alpha = img.mode in ("LA", "La", "PA", "RGBa") or "transparency" in img.info
    return img.convert("RGBA" if has_alpha else "RGB")


class Image:
    """
    Handle on one image file.

    Header metadata (size, type, mime type) is read on construction. The
    pixel buffer is decoded on the first crop, resize or save and is owned
    exclusively by this handle. Transforms replace the buffer in place and
    return ``self``; saves write a file and return a new ``Image`` for it.

    Raises:
        InvalidInputError: If the path is empty
        ImageNotFoundError: If the path is not an existing file
        ImageIOError: If the file cannot be read
        DecodeError: If the file header is not a recognised image
    """

    def __init__(self, path: str | PathLike[str]):
        self._path: Path = _as_path(path)

        if not self._path.is_file():
            raise ImageNotFoundError(f"File does not exist ! (file: {str(self._path)!r})")
        if not os.access(self._path, os.R_OK):
            raise ImageIOError(f"File cannot be read ! (file: {str(self._path)!r})")

        self._width: int = 0
        self._height: int = 0
        self._header_size: tuple[int, int] = (0, 0)
        self._format: str | None = None
        self._type: ImageType | None = None
        self._mime_type: str = DEFAULT_MIME_TYPE

        self._buffer: PILImage.Image | None = None
        self._decoded: bool = False

        self._read_header()

    def __repr__(self) -> str:
        return (
            f"Image(path={str(self._path)!r}, size={self._width}x{self._height}, "
            f"type={self._type}, decoded={self._decoded})"
        )

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def close(self) -> None:
        """Release the decoded pixel buffer.

        Unsaved crops and resizes are discarded; the next operation decodes
        the file again. Width and height revert to the header values.
        """
        if self._buffer is not None:
            self._buffer.close()
            self._buffer = None
        self._decoded = False
        self._width, self._height = self._header_size

    # ------------------------------------------------------------------
    # Metadata
    # ------------------------------------------------------------------

    @property
    def path(self) -> Path:
        return self._path

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def type(self) -> ImageType | None:
        return self._type

    @property
    def format(self) -> str | None:
        """Format name reported by Pillow, also for types this package cannot decode."""
        return self._format

    @property
    def mime_type(self) -> str:
        return self._mime_type

    @property
    def extension(self) -> str:
        return self._type.extension if self._type is not None else ""

    @property
    def is_decoded(self) -> bool:
        return self._decoded

    def get_filename(self, with_extension: bool = True) -> str:
        name = self._path.name
        if with_extension or not self.extension:
            return name

        suffix = f".{self.extension}"
        if name.endswith(suffix) and name != suffix:
            return name[: -len(suffix)]
        return name

    def get_file_md5(self) -> str:
        return get_file_md5(self._path)

    @property
    def ratio(self) -> float:
        return self._width / self._height

    @property
    def is_landscape(self) -> bool:
        return self.ratio > 1

    @property
    def is_portrait(self) -> bool:
        return self.ratio < 1

    @property
    def is_square(self) -> bool:
        # Exact comparison; 1000x999 is not square.
        return self.ratio == 1

    def _read_header(self) -> None:
        try:
            with PILImage.open(self._path) as img:
                width, height = img.size
                pil_format = img.format
                mime_type = img.get_format_mimetype()
        except (UnidentifiedImageError, PILImage.DecompressionBombError) as exc:
            raise DecodeError(
                f"Unable to read image information ! (file: {str(self._path)!r})"
            ) from exc
        except OSError as exc:
            raise ImageIOError(f"File cannot be read ! (file: {str(self._path)!r})") from exc

        if width <= 0 or height <= 0:
            raise DecodeError(f"Invalid image size {width}x{height} (file: {str(self._path)!r})")

        self._width = width
        self._height = height
        self._header_size = (width, height)
        self._format = pil_format
        self._type = ImageType.from_pil_format(pil_format)
        self._mime_type = mime_type or DEFAULT_MIME_TYPE
        logger.debug(f"Read header of {self._path}: {width}x{height} {pil_format}")

    # ------------------------------------------------------------------
    # Pixel buffer
    # ------------------------------------------------------------------

    @timed
    def _decode(self) -> PILImage.Image:
        if self._decoded and self._buffer is not None:
            return self._buffer

        if self._type is None:
            raise DecodeError(
                "The format of the image is not currently supported by the library ! "
                + f"(format: {self._format}, file: {str(self._path)!r})"
            )

        try:
            with PILImage.open(self._path, formats=[self._type.pil_format]) as img:
                img.load()
                buffer = _to_truecolor(img)
        except (OSError, ValueError, SyntaxError, PILImage.DecompressionBombError) as exc:
            raise DecodeError(
                f"Cannot decode the current file ! (file: {str(self._path)!r})"
            ) from exc

        self._buffer = buffer
        self._decoded = True
        self._width, self._height = buffer.size
        logger.debug(f"Decoded {self._path} as {buffer.mode} {buffer.width}x{buffer.height}")
        return buffer

    def _swap_buffer(self, buffer: PILImage.Image) -> None:
        old, self._buffer = self._buffer, buffer
        if old is not None and old is not buffer:
            old.close()
        self._width, self._height = buffer.size

    # ------------------------------------------------------------------
    # Transforms
    # ------------------------------------------------------------------

    @timed
    def crop_square(self) -> Self:
        """Crop to the largest centered square. No-op if already square."""
        buffer = self._decode()

        if self._width == self._height:
            return self

        side = min(self._width, self._height)
        x = y = 0
        diff = abs(self._width - self._height) // 2
        if self._width > self._height:
            x = diff
        else:
            y = diff

        try:
            cropped = buffer.crop((x, y, x + side, y + side))
        except (MemoryError, ValueError, OSError) as exc:
            raise TransformError(
                "Unable to copy cropped image into new image buffer !"
            ) from exc

        self._swap_buffer(cropped)
        logger.debug(f"Cropped {self._path} to {side}x{side} at ({x}, {y})")
        return self

    @timed
    def resize(self, width: int, height: int, keep_ratio: bool = True) -> Self:
        """
        Resample the image to ``width`` x ``height``.

        With ``keep_ratio`` the image is fitted inside the box. Landscape
        images take the height computed for ``width`` when it fits, otherwise
        the width computed for ``height``; portrait and square images apply
        the symmetric rule. Fractional sizes are truncated.
        """
        options = build_options(ResizeOptions, width=width, height=height, keep_ratio=keep_ratio)
        buffer = self._decode()

        width, height = options.width, options.height
        if self._width == width and self._height == height:
            return self

        if options.keep_ratio:
            width, height = self._fit_box(width, height)

        try:
            resized = buffer.resize((width, height), PILImage.Resampling.LANCZOS)
        except (MemoryError, ValueError, OSError) as exc:
            raise TransformError("Unable to resize the image !") from exc

        self._swap_buffer(resized)
        logger.debug(f"Resized {self._path} to {width}x{height}")
        return self

    def _fit_box(self, width: int, height: int) -> tuple[int, int]:
        calc_height = self._height / (self._width / width)
        calc_width = self._width / (self._height / height)

        target_width: float = width
        target_height: float = height
        if self.is_landscape:
            if calc_height <= height:
                target_height = calc_height
            else:
                target_width = calc_width
        else:
            if calc_width <= width:
                target_width = calc_width
            else:
                target_height = calc_height

        return max(1, int(target_width)), max(1, int(target_height))

    # ------------------------------------------------------------------
    # Saving
    # ------------------------------------------------------------------

    @timed
    def save_as_jpeg(self, path: str | PathLike[str], quality: int = 100) -> Image:
        """Encode as JPEG (alpha dropped) and return a handle on the new file."""
        options = build_options(JpegOptions, quality=quality)
        dst = _as_path(path)
        self._encode(dst, ImageType.JPEG, mode="RGB", quality=options.quality)
        return Image(dst)

    @timed
    def save_as_png(self, path: str | PathLike[str], compression_level: int = 0) -> Image:
        """Encode as PNG keeping the alpha channel and return a handle on the new file."""
        options = build_options(PngOptions, compression_level=compression_level)
        dst = _as_path(path)
        self._encode(dst, ImageType.PNG, compress_level=options.compression_level)
        return Image(dst)

    @timed
    def save_for_cdn(
        self,
        base_path: str | PathLike[str],
        format: ImageType | str = ImageType.JPEG,
    ) -> Image:
        """
        Save into a content addressed tree under ``base_path``.

        The file lands at ``<base_path>/<m0>/<m1>/<m2>/<md5>.<ext>`` where md5
        is the digest of the encoded file. The temporary file is removed on
        any failure.

        Raises:
            UnsupportedFormatError: If ``format`` is not JPEG or PNG
            ImageIOError: If the encoded file cannot be moved into place
        """
        image_type = ImageType.parse(format)
        if not image_type.is_encodable:
            raise UnsupportedFormatError(f"Output format is not supported ! (format: {image_type})")

        options = build_options(CdnOptions, base_path=base_path)
        storage = CdnStorage(options.base_path, shard_depth=options.shard_depth)

        temp_path = storage.allocate_temp(prefix=options.temp_prefix)
        try:
            if image_type is ImageType.JPEG:
                saved = self.save_as_jpeg(temp_path)
            else:
                saved = self.save_as_png(temp_path)
            saved.close()
        except BaseException:
            temp_path.unlink(missing_ok=True)
            raise

        return Image(storage.store(temp_path, image_type.extension))

    def _encode(
        self,
        dst: Path,
        image_type: ImageType,
        mode: str | None = None,
        **save_kwargs: object,
    ) -> None:
        buffer = self._decode()

        try:
            fh = open(dst, "wb")
        except OSError as exc:
            raise ImageIOError(f"Unable to open file for writing ! (file: {str(dst)!r})") from exc

        to_save = buffer
        try:
            with fh:
                if mode is not None and buffer.mode != mode:
                    to_save = buffer.convert(mode)
                to_save.save(fh, format=image_type.pil_format, **save_kwargs)
        except (OSError, ValueError, KeyError) as exc:
            dst.unlink(missing_ok=True)
            raise EncodeError(
                f"Unable to save the image into {image_type.value} format ! (file: {str(dst)!r})"
            ) from exc
        except BaseException:
            dst.unlink(missing_ok=True)
            raise
        finally:
            if to_save is not buffer:
                to_save.close()

        logger.debug(f"Saved {self._path} as {image_type.value} to {dst}")


def open_image(path: str | PathLike[str]) -> Image:
    """Open ``path`` and read its header. Same as ``Image(path)``."""
    return Image(path)
