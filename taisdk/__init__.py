"""
taisdk - Async Python client for chunked video storage on Walrus.

Usage:
    >>> from taisdk import TaiClient, UploadVideoConfig
    >>>
    >>> async with TaiClient() as tai:
    ...     result = await tai.upload_video(Path("movie.mp4"), UploadVideoConfig(title="Movie"))
    ...     print(result.blob_id)
"""
import logging
from .client import TaiClient

# Configuration
from .core.api import (
    StoreConfig,
    TimeoutConfig,
    RetryConfig,
    BlobStoreClient,
    BlobUploadResult,
    RetryInfo,
)

# Transfer engine
from .core.manifest import ChunkRecord, Manifest, total_chunks, bounds_of
from .core.upload import (
    UploadCoordinator,
    UploadVideoConfig,
    UploadResult,
    UploadProgress,
    ChunkUploadedInfo,
)
from .core.download import RangeReconstructor, DownloadRangeResult
from .core.crypto import encrypt, decrypt, generate_key
from .core.logging import configure as configure_logging

# Errors
from .core.exceptions import (
    TaiException,
    InvalidConfigurationError,
    TransportError,
    ChunkTransferError,
    ManifestTransferError,
    DecryptionError,
    StoreProtocolError,
    UploadError,
)

__version__ = '1.0.0'


def setup_logging(level=logging.INFO):
    """
    Configure logging for taisdk modules.

    Args:
        level: Logging level (default: logging.INFO)
    """
    configure_logging(level)


__all__ = [
    'TaiClient',
    'StoreConfig',
    'TimeoutConfig',
    'RetryConfig',
    'BlobStoreClient',
    'BlobUploadResult',
    'RetryInfo',
    'ChunkRecord',
    'Manifest',
    'total_chunks',
    'bounds_of',
    'UploadCoordinator',
    'UploadVideoConfig',
    'UploadResult',
    'UploadProgress',
    'ChunkUploadedInfo',
    'RangeReconstructor',
    'DownloadRangeResult',
    'encrypt',
    'decrypt',
    'generate_key',
    'TaiException',
    'InvalidConfigurationError',
    'TransportError',
    'ChunkTransferError',
    'ManifestTransferError',
    'DecryptionError',
    'StoreProtocolError',
    'UploadError',
    'setup_logging',
]
