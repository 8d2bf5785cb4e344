"""
Chunk upload service.

Handles reading, encrypting and storing individual chunks.
"""
from typing import Optional
import time

from ..protocols import BlobStoreProtocol, ByteSourceProtocol, EncryptionStrategy
from ...manifest import ChunkRecord
from ...logging import get_logger


class ChunkUploader:
    """
    Uploads single chunks to the blob store.

    Responsibilities:
    - Slice the source to the chunk's plaintext range
    - Encrypt the slice when an encryption strategy is set
    - Store the bytes and describe them with a ChunkRecord
    """

    def __init__(
        self,
        store: BlobStoreProtocol,
        source: ByteSourceProtocol,
        encryption: Optional[EncryptionStrategy] = None,
        epochs: Optional[int] = None
    ):
        """
        Initialize chunk uploader.

        Args:
            store: Blob store
            source: Byte source of the whole object
            encryption: Optional per-chunk encryption
            epochs: Storage duration passed to the store
        """
        self._store = store
        self._source = source
        self._encryption = encryption
        self._epochs = epochs
        self._logger = get_logger('taisdk.upload.chunk')

    async def upload_chunk(self, index: int, start: int, end: int) -> ChunkRecord:
        """
        Upload chunk index covering plaintext bytes [start, end).

        Returns:
            ChunkRecord with plaintext offsets and the store-assigned id

        Raises:
            ValueError: If the source returned fewer bytes than expected
            TransportError: If the store request failed
        """
        data = await self._source.read(start, end)
        if len(data) != end - start:
            raise ValueError(
                f"Short read for chunk {index}: expected {end - start} bytes, got {len(data)}"
            )

        payload = self._encryption.encrypt_chunk(index, data) if self._encryption else data
        del data

        chunk_size_kb = len(payload) / 1024
        upload_start = time.time()
        self._logger.debug(f"Uploading chunk {index} at position {start} ({chunk_size_kb:.1f} KB)")

        result = await self._store.put_blob(payload, epochs=self._epochs)

        upload_time = time.time() - upload_start
        speed_kbps = (chunk_size_kb / upload_time) if upload_time > 0 else 0
        self._logger.debug(
            f"Chunk {index} uploaded in {upload_time:.2f}s ({speed_kbps:.1f} KB/s): {result.blob_id}"
        )

        return ChunkRecord(
            index=index,
            remote_id=result.blob_id,
            offset_start=start,
            offset_end=end
        )
