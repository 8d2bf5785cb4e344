"""Upload models."""
from .upload_models import (
    UploadVideoConfig,
    UploadResult,
    UploadProgress,
    ChunkUploadedInfo,
    UploadSession,
    DEFAULT_CONCURRENCY,
)

__all__ = [
    'UploadVideoConfig',
    'UploadResult',
    'UploadProgress',
    'ChunkUploadedInfo',
    'UploadSession',
    'DEFAULT_CONCURRENCY',
]
