from __future__ import annotations

import os
import re
import tempfile
from os import PathLike
from pathlib import Path
from typing import Final

from loguru import logger

from .errors import ImageError, ImageIOError, InvalidInputError
from .utils.md5 import get_file_md5

_MD5_RE: Final = re.compile(r"^[0-9a-f]{32}$")
TEMP_DIR_NAME: Final = ".tmp"


class CdnStorage:
    """
    Content addressed local store for encoded images.

    Layout (shard_depth=3):
        base_dir/
            .tmp/                 (files being written)
            <md5[0]>/<md5[1]>/<md5[2]>/
                <md5>.<extension>
    """

    def __init__(self, base_dir: str | PathLike[str], shard_depth: int = 3):
        if shard_depth < 1:
            raise InvalidInputError(f"shard_depth must be >= 1 (got {shard_depth})")

        self._base_dir: Path = Path(base_dir).expanduser().resolve()
        self._shard_depth: int = shard_depth
        try:
            self._base_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise ImageIOError(f"Unable to create cdn directory: {self._base_dir}") from exc

    @property
    def base_dir(self) -> Path:
        return self._base_dir

    @property
    def temp_dir(self) -> Path:
        return self._base_dir / TEMP_DIR_NAME

    @property
    def shard_depth(self) -> int:
        return self._shard_depth

    # ------------------------------------------------------------------
    # Paths
    # ------------------------------------------------------------------

    def shard_path(self, md5: str, extension: str) -> Path:
        if not _MD5_RE.match(md5):
            raise InvalidInputError(f"Not a lowercase hex md5 digest: {md5!r}")

        shards = list(md5[: self._shard_depth])
        filename = f"{md5}.{extension}" if extension else md5
        return self._base_dir.joinpath(*shards, filename)

    def allocate_temp(self, prefix: str = "IMAGE_") -> Path:
        """
        Create an empty temporary file in base_dir/.tmp.
        Keeping it on the same filesystem makes the final move atomic.
        """
        try:
            self.temp_dir.mkdir(exist_ok=True)
            fd, name = tempfile.mkstemp(prefix=prefix, dir=self.temp_dir)
        except OSError as exc:
            raise ImageIOError(f"Unable to create temporary file in {self.temp_dir}") from exc
        os.close(fd)
        return Path(name)

    # ------------------------------------------------------------------
    # Writing
    # ------------------------------------------------------------------

    def store(self, temp_path: str | PathLike[str], extension: str) -> Path:
        """Move ``temp_path`` to its content addressed location.

        The temporary file is removed if hashing or the move fails.

        Returns:
            The final path of the stored file

        Raises:
            ImageIOError: If the file cannot be hashed or moved
        """
        src = Path(temp_path)
        try:
            dst = self.shard_path(get_file_md5(src), extension)
            dst.parent.mkdir(parents=True, exist_ok=True)
            _ = src.replace(dst)
        except ImageError:
            src.unlink(missing_ok=True)
            raise
        except OSError as exc:
            src.unlink(missing_ok=True)
            raise ImageIOError(
                f"Unable to move tmp file to final destination (src: {str(src)!r})"
            ) from exc

        logger.debug(f"Stored {src.name} as {dst}")
        return dst
