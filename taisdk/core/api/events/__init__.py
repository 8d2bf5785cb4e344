"""Event emitter using Observer Pattern."""
from .event_emitter import (
    EventEmitter,
    UPLOAD_START,
    CHUNK_UPLOADED,
    UPLOAD_COMPLETE,
    RETRY,
    ERROR,
)

__all__ = [
    'EventEmitter',
    'UPLOAD_START',
    'CHUNK_UPLOADED',
    'UPLOAD_COMPLETE',
    'RETRY',
    'ERROR',
]
