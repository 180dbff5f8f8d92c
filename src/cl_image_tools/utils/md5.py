import hashlib
from os import PathLike
from pathlib import Path

from ..errors import ImageIOError

_CHUNK_SIZE = 4096


def get_file_md5(file_path: str | PathLike[str]) -> str:
    """Lowercase hex MD5 of the raw bytes of ``file_path``.

    Raises:
        ImageIOError: If the file cannot be opened or read
    """
    hash_md5 = hashlib.md5()
    try:
        with open(Path(file_path), "rb") as f:
            for chunk in iter(lambda: f.read(_CHUNK_SIZE), b""):
                hash_md5.update(chunk)
    except OSError as exc:
        raise ImageIOError(
            f"Unable to calculate md5 on the image file (file: {str(file_path)!r})"
        ) from exc

    return hash_md5.hexdigest()
