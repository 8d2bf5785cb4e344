"""
TaiClient - High-level async client for chunked video transfers.

Example:
    >>> async with TaiClient() as tai:
    ...     result = await tai.upload_video(Path("movie.mp4"), UploadVideoConfig(title="Movie"))
    ...     clip = await tai.download_range(result.blob_id, 0, 1024 * 1024)
"""
from pathlib import Path
from typing import Optional, Union, Callable

from .core.api import (
    BlobStoreClient,
    BlobUploadResult,
    StoreConfig,
    TimeoutConfig,
    RetryConfig,
    EventEmitter,
)
from .core.download import RangeReconstructor, DownloadRangeResult
from .core.manifest import Manifest
from .core.upload import UploadCoordinator, UploadVideoConfig, UploadResult
from .core.upload.protocols import BlobStoreProtocol
from .core.upload.services import open_source, UploadInput, DEFAULT_MEDIA_TYPE
from .core.logging import get_logger


class TaiClient:
    """
    High-level async client for the Tai network.

    Wires the blob store transport, the chunked upload coordinator and the
    range reconstructor together and exposes their lifecycle events.

    Events (register with on()):
        upload_start(total_size, total_chunks)
        chunk_uploaded(index, total_chunks, blob_id, duration_ms)
        upload_complete(manifest_blob_id, total_ms, total_bytes)
        retry(info: RetryInfo)
        error(operation, error)

    With custom configuration:
        >>> config = TaiClient.create_config(network="mainnet", epochs=10)
        >>> client = TaiClient(config)
    """

    def __init__(
        self,
        config: Optional[StoreConfig] = None,
        *,
        store: Optional[BlobStoreProtocol] = None
    ):
        """
        Initialize Tai client.

        Args:
            config: Store configuration (testnet defaults if omitted)
            store: Optional blob store replacing the HTTP client
        """
        self._config = config or StoreConfig.default()
        self._events = EventEmitter()
        self._store = store or BlobStoreClient(self._config, events=self._events)
        self._uploader = UploadCoordinator(self._store, events=self._events)
        self._reader = RangeReconstructor(self._store, events=self._events)
        self._logger = get_logger('taisdk.client')

    @staticmethod
    def create_config(
        network: str = 'testnet',
        epochs: int = 5,
        publisher_url: Optional[str] = None,
        aggregator_url: Optional[str] = None,
        timeout: float = 30,
        max_retries: int = 3,
        retry_delay: float = 1.0
    ) -> StoreConfig:
        """
        Create store configuration with common options.

        Args:
            network: 'testnet' or 'mainnet'
            epochs: Storage duration for uploaded blobs
            publisher_url: Custom publisher (e.g. a Tai node)
            aggregator_url: Custom aggregator
            timeout: Per-request timeout in seconds
            max_retries: Retries per request
            retry_delay: Base delay of the exponential backoff

        Returns:
            StoreConfig instance
        """
        return StoreConfig(
            network=network,
            epochs=epochs,
            publisher_url=publisher_url,
            aggregator_url=aggregator_url,
            timeout=TimeoutConfig(total=timeout),
            retry=RetryConfig(max_retries=max_retries, base_delay=retry_delay)
        )

    @property
    def config(self) -> StoreConfig:
        return self._config

    def on(self, event: str, callback: Callable) -> 'TaiClient':
        """Register an event handler."""
        self._events.on(event, callback)
        return self

    def off(self, event: str, callback: Optional[Callable] = None) -> 'TaiClient':
        """Remove an event handler."""
        self._events.off(event, callback)
        return self

    async def __aenter__(self) -> 'TaiClient':
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def close(self):
        """Release HTTP resources."""
        close = getattr(self._store, 'close', None)
        if close is not None:
            await close()

    # =========================================================================
    # Single blobs
    # =========================================================================

    async def upload_blob(
        self,
        data: UploadInput,
        media_type: Optional[str] = None,
        epochs: Optional[int] = None
    ) -> BlobUploadResult:
        """
        Upload one object as a single blob.

        Args:
            data: bytes, str or Path
            media_type: Content type (guessed for paths)
            epochs: Storage duration

        Returns:
            BlobUploadResult
        """
        source = open_source(data)
        try:
            payload = await source.read(0, source.size)
        finally:
            await source.close()
        media_type = media_type or getattr(source, 'media_type', None) or DEFAULT_MEDIA_TYPE
        return await self._store.put_blob(payload, epochs=epochs, media_type=media_type)

    async def download_blob(self, blob_id: str) -> bytes:
        """Download one blob."""
        return await self._store.get_blob(blob_id)

    async def blob_exists(self, blob_id: str) -> bool:
        """Best-effort existence check."""
        return await self._store.blob_exists(blob_id)

    def get_url(self, blob_id: str) -> str:
        """Aggregator URL of a blob."""
        return self._store.get_url(blob_id)

    # =========================================================================
    # Chunked objects
    # =========================================================================

    async def upload_video(
        self,
        source: UploadInput,
        options: UploadVideoConfig
    ) -> UploadResult:
        """
        Upload a large object in chunks and store its manifest.

        Args:
            source: bytes, str or Path
            options: Upload configuration

        Returns:
            UploadResult; its blob_id is the manifest blob id

        Raises:
            InvalidConfigurationError: For bad options (no network call made)
            ChunkTransferError: Resumable; retry with
                options.existing_chunks = error.uploaded_chunks and
                options.encryption_key = error.encryption_key
            ManifestTransferError: Manifest upload failed; chunks are reusable
            StoreProtocolError: Unexpected store response; not resumable
        """
        if isinstance(source, Path):
            self._logger.info(f"Uploading {source.name} as '{options.title}'")
        return await self._uploader.upload(source, options)

    async def download_manifest(self, manifest_id: str) -> Manifest:
        """Download and parse a manifest."""
        return await self._reader.fetch_manifest(manifest_id)

    async def download_range(
        self,
        manifest: Union[Manifest, str],
        start_byte: int,
        end_byte: int,
        encryption_key: Optional[bytes] = None
    ) -> DownloadRangeResult:
        """Read plaintext bytes [start_byte, end_byte) of a chunked object."""
        return await self._reader.download_range(manifest, start_byte, end_byte, encryption_key)

    async def download_video(
        self,
        manifest: Union[Manifest, str],
        encryption_key: Optional[bytes] = None
    ) -> bytes:
        """Reassemble a whole chunked object."""
        result = await self._reader.download_all(manifest, encryption_key)
        return result.data
