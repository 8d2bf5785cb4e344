"""Pytest fixtures for taisdk tests."""
import asyncio
import hashlib
from typing import Callable, Dict, List, Optional

import pytest
from Crypto.Random import get_random_bytes

from taisdk.core.api.models import BlobUploadResult
from taisdk.core.exceptions import TransportError


class FakeBlobStore:
    """
    In-memory content-addressed blob store.

    Records every call and the peak number of concurrent puts. Simulated
    failures raise fail_with, or a 503 TransportError by default.
    """

    def __init__(
        self,
        delay: float = 0.0,
        delay_for: Optional[Callable[[bytes], float]] = None,
        fail_if: Optional[Callable[[bytes], bool]] = None,
        fail_manifest: bool = False,
        fail_with: Optional[Exception] = None
    ):
        self.blobs: Dict[str, bytes] = {}
        self.puts: List[bytes] = []
        self.gets: List[str] = []
        self.media_types: List[str] = []
        self.epochs: List[Optional[int]] = []
        self.in_flight = 0
        self.max_in_flight = 0
        self.cancelled = 0
        self._delay = delay
        self._delay_for = delay_for
        self._fail_if = fail_if
        self._fail_manifest = fail_manifest
        self._fail_with = fail_with

    @property
    def calls(self) -> int:
        return len(self.puts) + len(self.gets)

    async def put_blob(self, data, *, epochs=None, media_type='application/octet-stream'):
        self.puts.append(bytes(data))
        self.media_types.append(media_type)
        self.epochs.append(epochs)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            delay = self._delay_for(data) if self._delay_for else self._delay
            await asyncio.sleep(delay)
            if self._fail_if and self._fail_if(data):
                raise self._fail_with or TransportError("simulated chunk failure", url="fake://put", status=503)
            if self._fail_manifest and media_type == 'application/json':
                raise self._fail_with or TransportError("simulated manifest failure", url="fake://put", status=503)
        except asyncio.CancelledError:
            self.cancelled += 1
            raise
        finally:
            self.in_flight -= 1

        blob_id = hashlib.sha256(data).hexdigest()
        self.blobs[blob_id] = bytes(data)
        return BlobUploadResult(
            blob_id=blob_id,
            url=self.get_url(blob_id),
            size=len(data),
            media_type=media_type
        )

    async def get_blob(self, blob_id):
        self.gets.append(blob_id)
        await asyncio.sleep(0)
        if blob_id not in self.blobs:
            raise TransportError(f"blob {blob_id} not found", url=self.get_url(blob_id), status=404)
        return self.blobs[blob_id]

    async def blob_exists(self, blob_id):
        return blob_id in self.blobs

    def get_url(self, blob_id):
        return f"fake://aggregator/v1/blobs/{blob_id}"


@pytest.fixture
def store():
    """Empty in-memory blob store."""
    return FakeBlobStore()


@pytest.fixture
def sample_data():
    """25,000 bytes of non-repeating content."""
    return bytes((i * 7 + i // 256) % 256 for i in range(25_000))


@pytest.fixture
def encryption_key():
    """Generates a 32-byte AES-256 key for testing."""
    return get_random_bytes(32)


@pytest.fixture
def sample_manifest_data():
    """Returns a manifest in wire format."""
    return {
        'schemaVersion': '1.0',
        'title': 'clip.mp4',
        'durationMs': 120000,
        'mimeType': 'video/mp4',
        'totalSize': 25,
        'createdAt': 1700000000000,
        'chunks': [
            {'index': 0, 'remoteId': 'a', 'offsetStart': 0, 'offsetEnd': 10, 'size': 10},
            {'index': 1, 'remoteId': 'b', 'offsetStart': 10, 'offsetEnd': 20, 'size': 10},
            {'index': 2, 'remoteId': 'c', 'offsetStart': 20, 'offsetEnd': 25, 'size': 5},
        ]
    }


@pytest.fixture
def make_store():
    """Factory for stores with delays or injected failures."""
    return FakeBlobStore
