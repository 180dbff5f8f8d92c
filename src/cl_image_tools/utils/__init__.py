from .md5 import get_file_md5
from .profiling import timed

__all__ = ["get_file_md5", "timed"]
