"""Download models."""
from dataclasses import dataclass

from ..manifest import Manifest


@dataclass(frozen=True)
class DownloadRangeResult:
    """
    Result of a range read.

    Attributes:
        data: Requested plaintext bytes
        manifest: Manifest the range was read from
        chunks_used: Number of chunks fetched (0 for empty ranges)
    """
    data: bytes
    manifest: Manifest
    chunks_used: int
