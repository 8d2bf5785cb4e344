"""Blob store API module."""
from .async_client import BlobStoreClient
from .config import StoreConfig, TimeoutConfig, RetryConfig, Endpoints
from .models import BlobUploadResult, RetryInfo
from .events import EventEmitter
from .retry import RetryStrategy, ExponentialBackoffStrategy

__all__ = [
    'BlobStoreClient',

    # Configuration
    'StoreConfig',
    'TimeoutConfig',
    'RetryConfig',
    'Endpoints',

    # Models
    'BlobUploadResult',
    'RetryInfo',

    # Events
    'EventEmitter',

    # Retry
    'RetryStrategy',
    'ExponentialBackoffStrategy',
]
