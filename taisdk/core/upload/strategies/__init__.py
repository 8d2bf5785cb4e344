"""Upload strategies module."""
from .chunking import FixedSizeChunkingStrategy
from .encryption import AesGcmEncryptionStrategy

__all__ = [
    'FixedSizeChunkingStrategy',
    'AesGcmEncryptionStrategy',
]
