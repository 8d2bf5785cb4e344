"""Manifest model module."""
from .models import (
    ChunkRecord,
    Manifest,
    SCHEMA_VERSION,
    DEFAULT_CHUNK_SIZE,
    total_chunks,
    bounds_of,
)

__all__ = [
    'ChunkRecord',
    'Manifest',
    'SCHEMA_VERSION',
    'DEFAULT_CHUNK_SIZE',
    'total_chunks',
    'bounds_of',
]
