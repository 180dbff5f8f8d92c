"""Unit tests for file hashing."""

import hashlib
import os
from pathlib import Path

import pytest

from cl_image_tools import ImageIOError
from cl_image_tools.utils.md5 import get_file_md5


def test_get_file_md5(tmp_path: Path):
    path = tmp_path / "data.bin"
    _ = path.write_bytes(b"hello world")

    assert get_file_md5(path) == hashlib.md5(b"hello world").hexdigest()


def test_get_file_md5_multiple_chunks(tmp_path: Path):
    data = os.urandom(3 * 4096 + 17)
    path = tmp_path / "large.bin"
    _ = path.write_bytes(data)

    assert get_file_md5(str(path)) == hashlib.md5(data).hexdigest()


def test_get_file_md5_empty_file(tmp_path: Path):
    path = tmp_path / "empty.bin"
    path.touch()

    assert get_file_md5(path) == "d41d8cd98f00b204e9800998ecf8427e"


def test_get_file_md5_missing(tmp_path: Path):
    with pytest.raises(ImageIOError, match="Unable to calculate md5"):
        _ = get_file_md5(tmp_path / "missing.bin")
