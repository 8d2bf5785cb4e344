"""
Async blob store client.

Talks to the Walrus publisher (writes) and aggregator (reads) over HTTP,
with per-request timeouts and exponential-backoff retries.
"""
import json
import asyncio
import time
from typing import Optional, Tuple, Dict, Any, Callable
import aiohttp

from .config import StoreConfig
from .models import BlobUploadResult, RetryInfo
from .events import EventEmitter, RETRY
from .retry import RetryStrategy, ExponentialBackoffStrategy
from ..exceptions import TransportError, StoreProtocolError
from ..logging import get_logger


class BlobStoreClient:
    """
    Asynchronous blob store client.

    Features:
    - Full async/await support
    - Connection pooling (one shared aiohttp session)
    - Automatic retry with exponential backoff, reported via 'retry' events

    Example:
        >>> async with BlobStoreClient(StoreConfig.default()) as store:
        ...     result = await store.put_blob(b"hello")
        ...     data = await store.get_blob(result.blob_id)
    """

    def __init__(
        self,
        config: Optional[StoreConfig] = None,
        session: Optional[aiohttp.ClientSession] = None,
        retry_strategy: Optional[RetryStrategy] = None,
        events: Optional[EventEmitter] = None
    ):
        """
        Initialize blob store client.

        Args:
            config: Store configuration (uses defaults if not provided)
            session: Optional shared aiohttp session (not closed by this client)
            retry_strategy: Retry strategy (exponential backoff by default)
            events: Event emitter receiving 'retry' events
        """
        self._config = config or StoreConfig.default()
        self._session = session
        self._owns_session = session is None
        self._retry = retry_strategy or ExponentialBackoffStrategy(self._config.retry)
        self._events = events or EventEmitter()
        self._logger = get_logger('taisdk.api')

    @property
    def config(self) -> StoreConfig:
        return self._config

    @property
    def events(self) -> EventEmitter:
        return self._events

    def on(self, event: str, callback: Callable) -> 'BlobStoreClient':
        """Register an event handler."""
        self._events.on(event, callback)
        return self

    async def __aenter__(self) -> 'BlobStoreClient':
        await self._ensure_session()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def _ensure_session(self) -> aiohttp.ClientSession:
        """Ensure session is created and open."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                connector=aiohttp.TCPConnector(**self._config.get_connector_kwargs()),
                **self._config.get_session_kwargs()
            )
            self._owns_session = True
        return self._session

    async def close(self):
        """Close session if we own it."""
        if self._owns_session and self._session and not self._session.closed:
            await self._session.close()
        if self._owns_session:
            self._session = None

    def get_url(self, blob_id: str) -> str:
        """Aggregator URL of a blob."""
        return f"{self._config.endpoints.aggregator}/v1/blobs/{blob_id}"

    async def put_blob(
        self,
        data: bytes,
        *,
        epochs: Optional[int] = None,
        media_type: str = 'application/octet-stream'
    ) -> BlobUploadResult:
        """
        Upload a single blob through the publisher.

        Args:
            data: Blob contents
            epochs: Storage duration (defaults to config.epochs)
            media_type: Content type to send

        Returns:
            BlobUploadResult for the stored blob

        Raises:
            TransportError: If the request failed after all retries
            StoreProtocolError: If the response carries no blob id
        """
        epochs = epochs or self._config.epochs
        url = f"{self._config.endpoints.publisher}/v1/blobs?epochs={epochs}"
        size_kb = len(data) / 1024
        self._logger.debug(f"PUT blob ({size_kb:.1f} KB, epochs={epochs})")

        _, body = await self._request(
            'PUT', url, 'put_blob',
            data=data,
            headers={'Content-Type': media_type}
        )

        blob_id, object_id = self._parse_put_response(body)
        return BlobUploadResult(
            blob_id=blob_id,
            url=self.get_url(blob_id),
            size=len(data),
            media_type=media_type,
            sui_object_id=object_id
        )

    async def get_blob(self, blob_id: str) -> bytes:
        """
        Download a blob from the aggregator.

        Raises:
            TransportError: If the request failed after all retries
        """
        _, body = await self._request('GET', self.get_url(blob_id), f"get_blob {blob_id}")
        return body

    async def blob_exists(self, blob_id: str) -> bool:
        """Best-effort existence check; any failure means not found."""
        session = await self._ensure_session()
        try:
            async with session.head(
                self.get_url(blob_id),
                timeout=self._config.timeout.to_aiohttp_timeout()
            ) as response:
                return response.status < 400
        except Exception as e:
            self._logger.debug(f"HEAD {blob_id} failed: {e}")
            return False

    async def _request(
        self,
        method: str,
        url: str,
        operation: str,
        data: Optional[bytes] = None,
        headers: Optional[Dict[str, str]] = None
    ) -> Tuple[int, bytes]:
        """Perform a request with timeout and retry. Returns (status, body)."""
        session = await self._ensure_session()
        max_retries = self._config.retry.max_retries
        retry_count = 0

        while True:
            status: Optional[int] = None
            cause: Optional[BaseException] = None
            started = time.time()
            try:
                async with session.request(
                    method,
                    url,
                    data=data,
                    headers=headers,
                    timeout=self._config.timeout.to_aiohttp_timeout()
                ) as response:
                    status = response.status
                    body = await response.read()
                if status < 400:
                    elapsed = time.time() - started
                    self._logger.debug(f"{method} {url} -> {status} in {elapsed:.2f}s")
                    return status, body
                detail = body[:200].decode('utf-8', errors='replace')
                error = TransportError(
                    f"{operation} failed: HTTP {status} {detail}", url=url, status=status
                )
            except asyncio.TimeoutError as e:
                cause = e
                error = TransportError(
                    f"{operation} timed out after {self._config.timeout.total}s: {url}", url=url
                )
            except aiohttp.ClientError as e:
                cause = e
                error = TransportError(f"{operation} failed: {e}", url=url)

            if not self._retry.should_retry(status, retry_count, max_retries):
                self._logger.error(f"{operation} failed after {retry_count} retries: {error}")
                raise error from cause

            retry_count += 1
            self._logger.warning(f"{operation} attempt {retry_count}/{max_retries} retrying: {error}")
            self._events.emit(RETRY, RetryInfo(
                operation=operation,
                attempt=retry_count,
                max_retries=max_retries,
                error=error
            ))
            await self._retry.wait_async(retry_count - 1)

    def _parse_put_response(self, body: bytes) -> Tuple[str, Optional[str]]:
        """Extract (blob_id, object_id) from a publisher response."""
        try:
            payload: Dict[str, Any] = json.loads(body)
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise StoreProtocolError(f"Publisher response is not JSON: {e}", payload=body) from e

        if not isinstance(payload, dict):
            raise StoreProtocolError("Publisher response is not an object", payload=payload)

        newly_created = payload.get('newlyCreated') or {}
        already_certified = payload.get('alreadyCertified') or {}
        blob_info = newly_created.get('blobObject') or already_certified.get('blobObject') or {}
        blob_id = (
            blob_info.get('blobId')
            or already_certified.get('blobId')
            or payload.get('blobId')
        )

        if not blob_id:
            raise StoreProtocolError("No blob ID in response", payload=payload)

        return blob_id, blob_info.get('id')
