"""
Data models for upload module.

Uses dataclasses for type-safe data structures.
"""
from dataclasses import dataclass, field
from typing import Optional, List, Callable, Set, Tuple

from ...manifest import ChunkRecord, Manifest, DEFAULT_CHUNK_SIZE
from ...api.models import BlobUploadResult

DEFAULT_CONCURRENCY = 3


@dataclass(frozen=True)
class UploadProgress:
    """
    Progress notification.

    Attributes:
        chunk_index: Chunk that was just completed (or replayed)
        total_chunks: Number of chunks of the object
        bytes_uploaded: Cumulative plaintext bytes stored so far
    """
    chunk_index: int
    total_chunks: int
    bytes_uploaded: int


@dataclass(frozen=True)
class ChunkUploadedInfo:
    """Per-chunk completion notification."""
    index: int
    total_chunks: int
    blob_id: str
    size: int
    bytes_uploaded: int


@dataclass
class UploadVideoConfig:
    """
    Configuration for a chunked upload.

    Attributes:
        title: Title stored in the manifest
        mime_type: Media type (guessed from the source when omitted)
        duration_ms: Media duration stored in the manifest
        chunk_size: Bytes per chunk
        concurrency: Maximum chunk uploads in flight
        encrypt: Encrypt every chunk with AES-256-GCM
        encryption_key: Optional 32-byte key (generated when encrypt is set and omitted)
        existing_chunks: Chunks stored by a previous, interrupted attempt
        epochs: Storage duration (defaults to the store's configured epochs)
        on_progress: Called with UploadProgress after every chunk
        on_chunk_uploaded: Called with ChunkUploadedInfo after every uploaded chunk

    Example:
        >>> config = UploadVideoConfig(title="clip", concurrency=5, encrypt=True)
    """
    title: str
    mime_type: Optional[str] = None
    duration_ms: int = 0
    chunk_size: int = DEFAULT_CHUNK_SIZE
    concurrency: int = DEFAULT_CONCURRENCY
    encrypt: bool = False
    encryption_key: Optional[bytes] = None
    existing_chunks: List[ChunkRecord] = field(default_factory=list)
    epochs: Optional[int] = None
    on_progress: Optional[Callable[[UploadProgress], None]] = None
    on_chunk_uploaded: Optional[Callable[[ChunkUploadedInfo], None]] = None


@dataclass(frozen=True)
class UploadResult:
    """
    Result of a chunked upload.

    Attributes:
        manifest_blob: Store result of the manifest blob (the object's handle)
        manifest: The uploaded manifest
        encryption_key: Key the chunks were encrypted with, if any
    """
    manifest_blob: BlobUploadResult
    manifest: Manifest
    encryption_key: Optional[bytes] = None

    @property
    def blob_id(self) -> str:
        """Manifest blob id."""
        return self.manifest_blob.blob_id

    @property
    def url(self) -> str:
        return self.manifest_blob.url


@dataclass
class UploadSession:
    """
    Scheduler state shared by the chunk workers of one upload.

    Workers only append through add(); the running byte counter is updated
    in the same step, so it always equals the sum of recorded sizes.
    """
    total_chunks: int
    existing_chunks: List[ChunkRecord] = field(default_factory=list)
    pending_indices: List[int] = field(default_factory=list)
    uploaded_chunks: List[ChunkRecord] = field(default_factory=list)
    bytes_uploaded: int = 0
    _indices: Set[int] = field(default_factory=set, repr=False)

    @classmethod
    def start(
        cls,
        total_chunks: int,
        existing_chunks: List[ChunkRecord],
        chunk_bounds: Optional[Callable[[int], Tuple[int, int]]] = None
    ) -> 'UploadSession':
        """
        Seed a session with resumed chunks and compute the pending indices.

        A record is resumed only if its index is in range and not repeated.
        When chunk_bounds is given its offsets must also equal
        chunk_bounds(index); any other record is uploaded again.
        """
        session = cls(total_chunks=total_chunks)
        for chunk in sorted(existing_chunks, key=lambda c: c.index):
            if not 0 <= chunk.index < total_chunks or chunk.index in session._indices:
                continue
            if chunk_bounds and (chunk.offset_start, chunk.offset_end) != tuple(chunk_bounds(chunk.index)):
                continue
            session.existing_chunks.append(chunk)
            session.add(chunk)
        session.pending_indices = [
            i for i in range(total_chunks) if i not in session._indices
        ]
        return session

    def add(self, chunk: ChunkRecord) -> int:
        """Record a stored chunk and return the new cumulative byte count."""
        if chunk.index in self._indices:
            raise ValueError(f"Chunk {chunk.index} already recorded")
        self._indices.add(chunk.index)
        self.uploaded_chunks.append(chunk)
        self.bytes_uploaded += chunk.size
        return self.bytes_uploaded

    def snapshot(self) -> List[ChunkRecord]:
        """Index-sorted copy of the recorded chunks."""
        return sorted(self.uploaded_chunks, key=lambda c: c.index)

    @property
    def is_complete(self) -> bool:
        return len(self._indices) == self.total_chunks
