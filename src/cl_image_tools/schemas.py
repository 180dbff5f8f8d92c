"""Pydantic schemas for operation parameters."""

from os import PathLike, fspath
from typing import TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import InvalidInputError

# ─────────────────────────────────────────────────────────────
# Base options
# ─────────────────────────────────────────────────────────────


class BaseOptions(BaseModel):
    """Base class for all operation parameters."""

    model_config = ConfigDict(extra="forbid", frozen=True)


OptionsT = TypeVar("OptionsT", bound=BaseOptions)


def build_options(options_cls: type[OptionsT], **values: object) -> OptionsT:
    """Validate ``values`` into ``options_cls``.

    Raises:
        InvalidInputError: If any value is missing, of the wrong type or out of range
    """
    try:
        return options_cls.model_validate(values)
    except ValidationError as exc:
        details = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in exc.errors()
        )
        raise InvalidInputError(f"Invalid {options_cls.__name__}: {details}") from exc


# ─────────────────────────────────────────────────────────────
# Transform options
# ─────────────────────────────────────────────────────────────


class ResizeOptions(BaseOptions):
    """Parameters for :meth:`Image.resize`.

    Attributes:
        width: Target width in pixels
        height: Target height in pixels
        keep_ratio: Fit inside the width x height box keeping the aspect ratio
    """

    width: int = Field(..., gt=0, description="Target width in pixels")
    height: int = Field(..., gt=0, description="Target height in pixels")
    keep_ratio: bool = True


# ─────────────────────────────────────────────────────────────
# Save options
# ─────────────────────────────────────────────────────────────


class JpegOptions(BaseOptions):
    quality: int = Field(default=100, ge=0, le=100, description="JPEG quality (0-100)")


class PngOptions(BaseOptions):
    compression_level: int = Field(
        default=0, ge=0, le=9, description="zlib compression, 0 (none) to 9"
    )


class CdnOptions(BaseOptions):
    """Layout of the content addressed store.

    Attributes:
        base_path: Root directory of the store
        shard_depth: Number of one-character directory levels above each file
        temp_prefix: Prefix of the temporary file written before the move
    """

    base_path: str = Field(..., min_length=1)
    shard_depth: int = Field(default=3, ge=1, le=32)
    temp_prefix: str = Field(default="IMAGE_", min_length=1)

    @field_validator("base_path", mode="before")
    @classmethod
    def validate_base_path(cls, v: object) -> object:
        if isinstance(v, PathLike):
            return fspath(v)
        return v

    @field_validator("temp_prefix")
    @classmethod
    def validate_temp_prefix(cls, v: str) -> str:
        if "/" in v or "\\" in v:
            raise ValueError("temp_prefix must not contain path separators")
        return v
