"""
Range reconstructor.

Maps a byte range of a chunked object onto the minimal ordered set of
chunk downloads and slices the exact bytes out of their concatenation.
"""
import math
import time
from typing import Optional, Union

from .models import DownloadRangeResult
from ..api.events import EventEmitter, ERROR
from ..crypto import decrypt, validate_key
from ..exceptions import (
    InvalidConfigurationError,
    ChunkTransferError,
    ManifestTransferError,
    StoreProtocolError,
    TransportError,
)
from ..manifest import ChunkRecord, Manifest
from ..logging import get_logger
from ..upload.protocols import BlobStoreProtocol

logger = get_logger('taisdk.download')


def _coerce_offset(name: str, value: Union[int, float]) -> int:
    """Validate a byte offset: finite, integral, non-negative."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidConfigurationError(f"{name} must be a number, got {value!r}")
    if isinstance(value, float):
        if not math.isfinite(value):
            raise InvalidConfigurationError(f"{name} must be finite, got {value!r}")
        if not value.is_integer():
            raise InvalidConfigurationError(f"{name} must be a whole byte offset, got {value!r}")
        value = int(value)
    if value < 0:
        raise InvalidConfigurationError(f"{name} must be non-negative, got {value}")
    return value


class RangeReconstructor:
    """
    Reads byte ranges of chunked objects.

    Chunks are fetched one after another in index order; only chunks that
    intersect the requested range are downloaded.

    Example:
        >>> reader = RangeReconstructor(store)
        >>> result = await reader.download_range(manifest_id, 9_000_000, 11_000_000)
        >>> len(result.data), result.chunks_used
        (2000000, 2)
    """

    def __init__(self, store: BlobStoreProtocol, events: Optional[EventEmitter] = None):
        self._store = store
        self._events = events or EventEmitter()

    async def fetch_manifest(self, blob_id: str) -> Manifest:
        """
        Download and parse a manifest blob.

        Raises:
            ManifestTransferError: If the download failed
            StoreProtocolError: If the blob is not a valid manifest
        """
        try:
            payload = await self._store.get_blob(blob_id)
        except TransportError as e:
            logger.error(f"Manifest {blob_id} download failed: {e}")
            self._events.emit(ERROR, operation='download_manifest', error=e)
            raise ManifestTransferError(f"Manifest download failed: {e}") from e
        return Manifest.from_json(payload)

    async def download_range(
        self,
        manifest: Union[Manifest, str],
        start_byte: Union[int, float],
        end_byte: Union[int, float],
        encryption_key: Optional[bytes] = None
    ) -> DownloadRangeResult:
        """
        Return plaintext bytes [start_byte, end_byte) of a chunked object.

        Args:
            manifest: Manifest or manifest blob id
            start_byte: First byte (inclusive)
            end_byte: Last byte (exclusive); clamped to the object size
            encryption_key: Key for objects uploaded with encryption

        Returns:
            DownloadRangeResult; empty with chunks_used == 0 when the range
            is empty or lies beyond the object

        Raises:
            InvalidConfigurationError: For malformed ranges, before any network call
            ChunkTransferError: If a chunk download failed
            DecryptionError: If a chunk does not decrypt under the key
        """
        start = _coerce_offset('start_byte', start_byte)
        end = _coerce_offset('end_byte', end_byte)
        if end < start:
            raise InvalidConfigurationError(
                f"end_byte must be >= start_byte (got start_byte={start}, end_byte={end})"
            )
        if encryption_key is not None:
            encryption_key = validate_key(encryption_key)

        if not isinstance(manifest, Manifest):
            manifest = await self.fetch_manifest(manifest)

        clamped_end = min(end, manifest.total_size)
        if start >= clamped_end:
            logger.debug(f"Empty range {start}-{end} of {manifest.total_size} bytes, nothing to fetch")
            return DownloadRangeResult(data=b'', manifest=manifest, chunks_used=0)

        chunks = manifest.overlapping(start, clamped_end)
        if not chunks:
            raise StoreProtocolError(
                f"Manifest has no chunk covering bytes {start}-{clamped_end}", payload=manifest.to_dict()
            )

        started = time.time()
        logger.info(f"Reading bytes {start}-{clamped_end} from {len(chunks)} chunks")

        buffer = bytearray()
        for chunk in chunks:
            buffer += await self._fetch_chunk(chunk, encryption_key)

        slice_start = start - chunks[0].offset_start
        slice_end = slice_start + (clamped_end - start)

        elapsed = time.time() - started
        logger.debug(f"Range assembled in {elapsed:.2f}s ({len(buffer)} bytes fetched)")

        return DownloadRangeResult(
            data=bytes(buffer[slice_start:slice_end]),
            manifest=manifest,
            chunks_used=len(chunks)
        )

    async def download_all(
        self,
        manifest: Union[Manifest, str],
        encryption_key: Optional[bytes] = None
    ) -> DownloadRangeResult:
        """Reassemble the whole object."""
        if not isinstance(manifest, Manifest):
            manifest = await self.fetch_manifest(manifest)
        return await self.download_range(manifest, 0, manifest.total_size, encryption_key)

    async def _fetch_chunk(self, chunk: ChunkRecord, encryption_key: Optional[bytes]) -> bytes:
        """Download (and decrypt) one chunk."""
        try:
            data = await self._store.get_blob(chunk.remote_id)
        except TransportError as e:
            logger.error(f"Chunk {chunk.index} download failed: {e}")
            self._events.emit(ERROR, operation='download_chunk', error=e)
            raise ChunkTransferError(
                f"Chunk {chunk.index} download failed: {e}",
                chunk_index=chunk.index
            ) from e

        if encryption_key is not None:
            data = decrypt(data, encryption_key)

        if len(data) != chunk.size:
            hint = '' if encryption_key is not None else ' (encrypted object? pass encryption_key)'
            raise StoreProtocolError(
                f"Chunk {chunk.index} has {len(data)} bytes, manifest says {chunk.size}{hint}"
            )
        return data
