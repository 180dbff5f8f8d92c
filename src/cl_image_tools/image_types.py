from enum import StrEnum

from .errors import UnsupportedFormatError


class ImageType(StrEnum):
    GIF = "gif"
    JPEG = "jpeg"
    PNG = "png"
    WBMP = "wbmp"
    XBM = "xbm"

    @classmethod
    def from_pil_format(cls, pil_format: str | None) -> "ImageType | None":
        """Map a Pillow format name (``img.format``) to a supported type."""
        if not pil_format:
            return None
        # Multi-picture JPEGs from cameras are reported as MPO.
        pil_format = _PIL_ALIASES.get(pil_format.upper(), pil_format.upper())
        for image_type in cls:
            if image_type.pil_format == pil_format:
                return image_type
        return None

    @classmethod
    def parse(cls, value: "ImageType | str") -> "ImageType":
        if isinstance(value, ImageType):
            return value
        fmt = str(value).strip().lower().lstrip(".")
        if fmt == "jpg":
            return ImageType.JPEG
        try:
            return cls(fmt)
        except ValueError as exc:
            raise UnsupportedFormatError(f"Unknown image format: {value!r}") from exc

    @property
    def pil_format(self) -> str:
        return get_pil_format(self.value)

    @property
    def extension(self) -> str:
        # WBMP and XBM decode but have no file extension mapping.
        return _EXTENSIONS.get(self, "")

    @property
    def is_encodable(self) -> bool:
        return self in (ImageType.JPEG, ImageType.PNG)


_PIL_ALIASES: dict[str, str] = {"MPO": "JPEG"}

_EXTENSIONS: dict[ImageType, str] = {
    ImageType.GIF: "gif",
    ImageType.JPEG: "jpg",
    ImageType.PNG: "png",
}


def get_pil_format(format_str: str) -> str:
    """Convert format string to PIL format name."""
    format_map = {
        "jpg": "JPEG",
        "jpeg": "JPEG",
        "png": "PNG",
        "gif": "GIF",
        "wbmp": "WBMP",
        "xbm": "XBM",
    }
    return format_map.get(format_str.lower(), format_str.upper())
