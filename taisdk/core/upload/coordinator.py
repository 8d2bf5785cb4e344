"""
Upload coordinator.

Orchestrates a chunked upload: resumption, bounded concurrent chunk
uploads, optional encryption and the final manifest upload.
"""
import asyncio
import time
from typing import Dict, List, Optional, Tuple, Union

from .protocols import BlobStoreProtocol, ByteSourceProtocol, ChunkingStrategy, EncryptionStrategy
from .models import (
    UploadVideoConfig,
    UploadResult,
    UploadProgress,
    ChunkUploadedInfo,
    UploadSession,
)
from .strategies import FixedSizeChunkingStrategy, AesGcmEncryptionStrategy
from .services import ChunkUploader, open_source, UploadInput, DEFAULT_MEDIA_TYPE
from ..api.events import EventEmitter, UPLOAD_START, CHUNK_UPLOADED, UPLOAD_COMPLETE, ERROR
from ..crypto import validate_key
from ..exceptions import (
    InvalidConfigurationError,
    TransportError,
    ChunkTransferError,
    ManifestTransferError,
)
from ..manifest import Manifest
from ..logging import get_logger
from ..utils import format_mb

logger = get_logger('taisdk.upload.coordinator')


class UploadCoordinator:
    """
    Coordinates the chunked upload process.

    Chunks are uploaded by a worker pool of at most `concurrency` tasks;
    a new chunk is admitted as soon as any in-flight chunk settles. The
    first failing chunk cancels and drains its siblings. A transport failure
    then surfaces as a ChunkTransferError carrying every chunk stored so far
    and the upload key; any other error propagates unchanged.

    Example:
        >>> coordinator = UploadCoordinator(store)
        >>> result = await coordinator.upload(Path("movie.mp4"), UploadVideoConfig(title="Movie"))
        >>> print(result.blob_id)
    """

    def __init__(
        self,
        store: BlobStoreProtocol,
        events: Optional[EventEmitter] = None
    ):
        """
        Initialize upload coordinator.

        Args:
            store: Blob store receiving chunks and the manifest
            events: Optional emitter for lifecycle events
        """
        self._store = store
        self._events = events or EventEmitter()

    async def upload(
        self,
        source: Union[UploadInput, ByteSourceProtocol],
        config: UploadVideoConfig
    ) -> UploadResult:
        """
        Execute the complete upload process.

        Args:
            source: Object to upload (bytes, str, Path or a byte source)
            config: Upload configuration

        Returns:
            UploadResult whose handle is the manifest blob

        Raises:
            InvalidConfigurationError: Before any network call, for bad options
            ChunkTransferError: If a chunk exhausted its transport retries;
                resumable via existing_chunks and encryption_key
            ManifestTransferError: If the manifest upload exhausted its retries
            StoreProtocolError: If the store answered with an unexpected payload
        """
        chunking = self._validate(config)
        if hasattr(source, 'read') and hasattr(source, 'size'):
            # Caller keeps ownership of its source
            return await self._upload(source, chunking, config)

        reader = open_source(source)
        try:
            return await self._upload(reader, chunking, config)
        finally:
            await reader.close()

    def _validate(self, config: UploadVideoConfig) -> ChunkingStrategy:
        """Reject bad options before any network activity."""
        concurrency = config.concurrency
        if isinstance(concurrency, bool) or not isinstance(concurrency, int) or concurrency < 1:
            raise InvalidConfigurationError(
                f"Invalid concurrency value: {concurrency!r}. Must be a positive integer."
            )
        if config.encryption_key is not None:
            validate_key(config.encryption_key)
        if config.duration_ms < 0:
            raise InvalidConfigurationError(f"Duration must be non-negative, got {config.duration_ms}")
        if config.epochs is not None and config.epochs < 1:
            raise InvalidConfigurationError(f"Epochs must be positive, got {config.epochs}")
        return FixedSizeChunkingStrategy(config.chunk_size)

    async def _upload(
        self,
        reader: ByteSourceProtocol,
        chunking: ChunkingStrategy,
        config: UploadVideoConfig
    ) -> UploadResult:
        started = time.time()
        total_size = reader.size
        layout = chunking.calculate_chunks(total_size)
        count = len(layout)

        session = UploadSession.start(
            count,
            config.existing_chunks,
            lambda index: layout[index]
        )
        dropped = len(config.existing_chunks) - len(session.existing_chunks)
        if dropped:
            logger.warning(
                f"Ignoring {dropped} resume records outside 0..{count - 1}, duplicated "
                f"or not matching chunk size {chunking.chunk_size}"
            )

        logger.info(
            f"Starting upload: {config.title} ({format_mb(total_size)} in {count} chunks, "
            f"{len(session.pending_indices)} pending, concurrency {config.concurrency})"
        )
        self._events.emit(UPLOAD_START, total_size=total_size, total_chunks=count)

        # Resumed chunks report cumulative progress in index order before any I/O
        replayed = 0
        for chunk in session.existing_chunks:
            replayed += chunk.size
            self._notify_progress(config, UploadProgress(chunk.index, count, replayed))

        # One key for the whole upload, fixed before any worker starts
        encryption = self._create_encryption(config)

        uploader = ChunkUploader(self._store, reader, encryption, config.epochs)
        await self._upload_chunks(session, uploader, encryption, layout, config)

        manifest = Manifest.build(
            title=config.title,
            mime_type=config.mime_type or getattr(reader, 'media_type', None) or DEFAULT_MEDIA_TYPE,
            total_size=total_size,
            chunks=session.snapshot(),
            duration_ms=config.duration_ms
        )

        logger.info("Uploading manifest")
        key = encryption.key if encryption else None
        try:
            manifest_blob = await self._store.put_blob(
                manifest.to_json(),
                epochs=config.epochs,
                media_type='application/json'
            )
        except Exception as e:
            logger.error(f"Manifest upload failed: {e}")
            self._events.emit(ERROR, operation='upload_manifest', error=e)
            if not isinstance(e, TransportError):
                raise
            raise ManifestTransferError(
                f"Manifest upload failed: {e}",
                uploaded_chunks=session.snapshot(),
                encryption_key=key
            ) from e

        total_ms = int((time.time() - started) * 1000)
        logger.info(f"Upload complete in {total_ms / 1000:.2f}s: manifest {manifest_blob.blob_id}")
        self._events.emit(
            UPLOAD_COMPLETE,
            manifest_blob_id=manifest_blob.blob_id,
            total_ms=total_ms,
            total_bytes=total_size
        )

        return UploadResult(
            manifest_blob=manifest_blob,
            manifest=manifest,
            encryption_key=key
        )

    def _create_encryption(self, config: UploadVideoConfig) -> Optional[EncryptionStrategy]:
        """A supplied key implies encryption."""
        if config.encrypt or config.encryption_key is not None:
            return AesGcmEncryptionStrategy(config.encryption_key)
        return None

    async def _upload_chunks(
        self,
        session: UploadSession,
        uploader: ChunkUploader,
        encryption: Optional[EncryptionStrategy],
        layout: List[Tuple[int, int]],
        config: UploadVideoConfig
    ) -> None:
        """
        Upload every pending chunk with at most config.concurrency in flight.

        Raises:
            ChunkTransferError: On the first chunk failing with a transport
                error, after in-flight siblings were cancelled and awaited
        """
        active: Dict[asyncio.Task, int] = {}
        failure: Optional[Tuple[int, BaseException]] = None

        try:
            for index in session.pending_indices:
                if len(active) >= config.concurrency:
                    failure = await self._wait_first(active)
                    if failure:
            index, error = failure
            uploaded = session.snapshot()
            logger.error(f"Chunk {index} failed, {len(uploaded)}/{session.total_chunks} chunks stored: {error}")
            self._events.emit(ERROR, operation='upload_chunk', error=error)
            if not isinstance(error, TransportError):
                raise error
            raise ChunkTransferError(
                f"Chunk {index} upload failed: {error}",
                uploaded_chunks=uploaded,
                chunk_index=index,
                encryption_key=encryption.key if encryption else None
            ) from error

        logger.info(f"All chunks uploaded: {session.total_chunks} chunks, {format_mb(session.bytes_uploaded)}")

    async def _wait_first(self, active: Dict[asyncio.Task, int]) -> Optional[Tuple[int, BaseException]]:
        """Wait until at least one task settles; return the first failure, if any."""
        done, _ = await asyncio.wait(set(active), return_when=asyncio.FIRST_COMPLETED)
        failure = None
        for task in sorted(done, key=active.get):
            index = active.pop(task)
            if task.cancelled():
                continue
            error = task.exception()
            if error is not None and failure is None:
                failure = (index, error)
        return failure

    async def _drain(self, active: Dict[asyncio.Task, int]) -> None:
        """Cancel in-flight chunk tasks and wait for them to finish."""
        logger.debug(f"Cancelling {len(active)} in-flight chunk uploads")
        for task in active:
            task.cancel()
        await asyncio.gather(*active, return_exceptions=True)
        active.clear()

    async def _upload_chunk_task(
        self,
        session: UploadSession,
        uploader: ChunkUploader,
        index: int,
        start: int,
        end: int,
        config: UploadVideoConfig
    ) -> None:
        """Upload one chunk, record it and fire the notifications."""
        chunk_start = time.time()
        chunk = await uploader.upload_chunk(index, start, end)

        bytes_uploaded = session.add(chunk)
        duration_ms = int((time.time() - chunk_start) * 1000)

        self._notify_progress(config, UploadProgress(index, session.total_chunks, bytes_uploaded))
        if config.on_chunk_uploaded:
            config.on_chunk_uploaded(ChunkUploadedInfo(
                index=index,
                total_chunks=session.total_chunks,
                blob_id=chunk.remote_id,
                size=chunk.size,
                bytes_uploaded=bytes_uploaded
            ))
        self._events.emit(
            CHUNK_UPLOADED,
            index=index,
            total_chunks=session.total_chunks,
            blob_id=chunk.remote_id,
            duration_ms=duration_ms
        )

    @staticmethod
    def _notify_progress(config: UploadVideoConfig, progress: UploadProgress) -> None:
        if config.on_progress:
            config.on_progress(progress)
