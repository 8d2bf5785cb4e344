"""
Upload module for chunked blob store uploads.

Splits an object into fixed-size chunks, uploads them with bounded
concurrency and optional AES-256-GCM encryption, and stores a manifest.
"""
from .coordinator import UploadCoordinator
from .models import (
    UploadVideoConfig,
    UploadResult,
    UploadProgress,
    ChunkUploadedInfo,
    UploadSession,
)
from .protocols import (
    ChunkingStrategy,
    EncryptionStrategy,
    ByteSourceProtocol,
    BlobStoreProtocol,
)

__all__ = [
    # Main classes
    'UploadCoordinator',

    # Models
    'UploadVideoConfig',
    'UploadResult',
    'UploadProgress',
    'ChunkUploadedInfo',
    'UploadSession',

    # Protocols
    'ChunkingStrategy',
    'EncryptionStrategy',
    'ByteSourceProtocol',
    'BlobStoreProtocol',
]
