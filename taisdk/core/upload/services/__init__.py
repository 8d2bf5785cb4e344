"""Upload services module."""
from .source_service import MemorySource, FileSource, open_source, UploadInput, DEFAULT_MEDIA_TYPE
from .chunk_service import ChunkUploader

__all__ = [
    'MemorySource',
    'FileSource',
    'open_source',
    'UploadInput',
    'DEFAULT_MEDIA_TYPE',
    'ChunkUploader',
]
