"""
Protocol definitions for upload module.

Defines interfaces (protocols) for dependency injection and strategy pattern.
"""
from typing import Protocol, List, Tuple, Optional

from ..api.models import BlobUploadResult


class ChunkingStrategy(Protocol):
    """Protocol for chunking strategies."""

    @property
    def chunk_size(self) -> int:
        ...

    def calculate_chunks(self, total_size: int) -> List[Tuple[int, int]]:
        """
        Calculate chunk boundaries for an object.

        Args:
            total_size: Total size in bytes

        Returns:
            List of (start, end) tuples, position i holding chunk i
        """
        ...


class EncryptionStrategy(Protocol):
    """Protocol for per-chunk encryption strategies."""

    def encrypt_chunk(self, chunk_index: int, data: bytes) -> bytes:
        """
        Encrypt a chunk of data.

        Args:
            chunk_index: Index of the chunk
            data: Plaintext chunk

        Returns:
            Bytes to upload in place of the plaintext
        """
        ...

    @property
    def key(self) -> bytes:
        """Returns the encryption key."""
        ...


class ByteSourceProtocol(Protocol):
    """Protocol for random-access byte sources of known length."""

    @property
    def size(self) -> int:
        ...

    async def read(self, start: int, end: int) -> bytes:
        """Read the half-open range [start, end)."""
        ...

    async def close(self) -> None:
        ...


class BlobStoreProtocol(Protocol):
    """Protocol for the remote blob store."""

    async def put_blob(
        self,
        data: bytes,
        *,
        epochs: Optional[int] = None,
        media_type: str = 'application/octet-stream'
    ) -> BlobUploadResult:
        ...

    async def get_blob(self, blob_id: str) -> bytes:
        ...

    async def blob_exists(self, blob_id: str) -> bool:
        ...

    def get_url(self, blob_id: str) -> str:
        ...
