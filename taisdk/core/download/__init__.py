"""Download module - byte-range reads of chunked objects."""
from .reconstructor import RangeReconstructor
from .models import DownloadRangeResult

__all__ = [
    'RangeReconstructor',
    'DownloadRangeResult',
]
