"""
Chunking strategies for uploads.

Implements the ChunkingStrategy protocol.
"""
from typing import List, Tuple

from ...manifest import DEFAULT_CHUNK_SIZE, bounds_of, total_chunks
from ...exceptions import InvalidConfigurationError


class FixedSizeChunkingStrategy:
    """
    Fixed-size chunking strategy.

    Every chunk is chunk_size bytes except possibly the last one.
    """

    def __init__(self, chunk_size: int = DEFAULT_CHUNK_SIZE):
        """
        Initialize with chunk size.

        Args:
            chunk_size: Size of each chunk in bytes
        """
        if isinstance(chunk_size, bool) or not isinstance(chunk_size, int) or chunk_size <= 0:
            raise InvalidConfigurationError(f"Chunk size must be a positive integer, got {chunk_size!r}")
        self._chunk_size = chunk_size

    @property
    def chunk_size(self) -> int:
        return self._chunk_size

    def count(self, total_size: int) -> int:
        """Number of chunks for an object of total_size bytes."""
        return total_chunks(total_size, self._chunk_size)

    def bounds(self, index: int, total_size: int) -> Tuple[int, int]:
        """(start, end) of chunk index."""
        return bounds_of(index, total_size, self._chunk_size)

    def calculate_chunks(self, total_size: int) -> List[Tuple[int, int]]:
        """
        Calculate fixed-size chunk boundaries.

        Args:
            total_size: Total size in bytes

        Returns:
            List of (start, end) tuples
        """
        return [self.bounds(i, total_size) for i in range(self.count(total_size))]
