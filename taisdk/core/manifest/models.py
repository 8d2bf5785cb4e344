"""
Manifest data model.

A manifest describes one chunked object: its metadata plus the ordered list
of chunk records mapping plaintext byte ranges to blob store identifiers.
Uses frozen dataclasses; once built a manifest is a value.
"""
import json
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Tuple, Union

from ..exceptions import InvalidConfigurationError, StoreProtocolError
from ..utils import now_ms

SCHEMA_VERSION = '1.0'
DEFAULT_CHUNK_SIZE = 10 * 1024 * 1024  # 10 MiB


def total_chunks(total_size: int, chunk_size: int) -> int:
    """
    Number of chunks needed to cover an object.

    Args:
        total_size: Object size in bytes (>= 0)
        chunk_size: Bytes per chunk (> 0)

    Returns:
        ceil(total_size / chunk_size)
    """
    _check_geometry(total_size, chunk_size)
    return -(-total_size // chunk_size)


def bounds_of(index: int, total_size: int, chunk_size: int) -> Tuple[int, int]:
    """
    Half-open plaintext byte range of a chunk.

    Args:
        index: Chunk index
        total_size: Object size in bytes
        chunk_size: Bytes per chunk

    Returns:
        (offset_start, offset_end) tuple
    """
    _check_geometry(total_size, chunk_size)
    if index < 0:
        raise InvalidConfigurationError(f"Chunk index must be non-negative, got {index}")
    start = index * chunk_size
    return start, min(start + chunk_size, total_size)


def _check_geometry(total_size: int, chunk_size: int) -> None:
    if chunk_size <= 0:
        raise InvalidConfigurationError(f"Chunk size must be positive, got {chunk_size}")
    if total_size < 0:
        raise InvalidConfigurationError(f"Total size must be non-negative, got {total_size}")


@dataclass(frozen=True)
class ChunkRecord:
    """
    One uploaded segment of the original object.

    Attributes:
        index: Ordinal position of the segment
        remote_id: Blob id assigned by the store
        offset_start: First plaintext byte (inclusive)
        offset_end: Last plaintext byte (exclusive)
    """
    index: int
    remote_id: str
    offset_start: int
    offset_end: int

    @property
    def size(self) -> int:
        """Plaintext size, also for encrypted chunks."""
        return self.offset_end - self.offset_start

    def overlaps(self, start: int, end: int) -> bool:
        """True if this chunk intersects the half-open range [start, end)."""
        return self.offset_end > start and self.offset_start < end

    def to_dict(self) -> Dict[str, Any]:
        """Convert to wire format."""
        return {
            'index': self.index,
            'remoteId': self.remote_id,
            'offsetStart': self.offset_start,
            'offsetEnd': self.offset_end,
            'size': self.size,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ChunkRecord':
        """Create from wire format (accepts the legacy 'blobId' key)."""
        try:
            remote_id = data['remoteId'] if 'remoteId' in data else data['blobId']
            return cls(
                index=int(data['index']),
                remote_id=str(remote_id),
                offset_start=int(data['offsetStart']),
                offset_end=int(data['offsetEnd']),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise StoreProtocolError(f"Malformed chunk record: {e}", payload=data) from e


@dataclass(frozen=True)
class Manifest:
    """
    Durable description of a chunked object.

    Attributes:
        title: Human readable title
        mime_type: Media type of the reassembled object
        total_size: Object size in bytes
        chunks: Chunk records sorted by index
        duration_ms: Media duration (0 if not applicable)
        created_at: Creation time in epoch millis
        schema_version: Manifest format version

    Example:
        >>> manifest = Manifest(title="clip", mime_type="video/mp4", total_size=0)
        >>> manifest.to_dict()['schemaVersion']
        '1.0'
    """
    title: str
    mime_type: str
    total_size: int
    chunks: Tuple[ChunkRecord, ...] = ()
    duration_ms: int = 0
    created_at: int = field(default_factory=now_ms)
    schema_version: str = SCHEMA_VERSION

    def __post_init__(self):
        # Normalize to an index-sorted tuple
        ordered = tuple(sorted(self.chunks, key=lambda c: c.index))
        object.__setattr__(self, 'chunks', ordered)

    @property
    def chunk_count(self) -> int:
        return len(self.chunks)

    def overlapping(self, start: int, end: int) -> List[ChunkRecord]:
        """Chunks intersecting [start, end), in index order."""
        return [chunk for chunk in self.chunks if chunk.overlaps(start, end)]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to wire format."""
        return {
            'schemaVersion': self.schema_version,
            'title': self.title,
            'durationMs': self.duration_ms,
            'mimeType': self.mime_type,
            'totalSize': self.total_size,
            'createdAt': self.created_at,
            'chunks': [chunk.to_dict() for chunk in self.chunks],
        }

    def to_json(self) -> bytes:
        """Serialize to UTF-8 JSON bytes."""
        return json.dumps(self.to_dict(), indent=2).encode('utf-8')

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Manifest':
        """Create from wire format (accepts the legacy 'version' key)."""
        if not isinstance(data, dict):
            raise StoreProtocolError("Manifest must be a JSON object", payload=data)
        try:
            chunks = [ChunkRecord.from_dict(item) for item in data.get('chunks', [])]
            return cls(
                title=str(data.get('title', '')),
                mime_type=str(data.get('mimeType', 'application/octet-stream')),
                total_size=int(data['totalSize']),
                chunks=tuple(chunks),
                duration_ms=int(data.get('durationMs', 0)),
                created_at=int(data.get('createdAt', 0)),
                schema_version=str(data.get('schemaVersion', data.get('version', SCHEMA_VERSION))),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise StoreProtocolError(f"Malformed manifest: {e}", payload=data) from e

    @classmethod
    def from_json(cls, payload: Union[bytes, str]) -> 'Manifest':
        """Parse a manifest blob."""
        try:
            data = json.loads(payload)
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise StoreProtocolError(f"Manifest is not valid JSON: {e}", payload=payload) from e
        return cls.from_dict(data)

    @classmethod
    def build(
        cls,
        title: str,
        mime_type: str,
        total_size: int,
        chunks: Iterable[ChunkRecord],
        duration_ms: int = 0
    ) -> 'Manifest':
        """Assemble a manifest stamped with the current time."""
        return cls(
            title=title,
            mime_type=mime_type,
            total_size=total_size,
            chunks=tuple(chunks),
            duration_ms=duration_ms,
        )
