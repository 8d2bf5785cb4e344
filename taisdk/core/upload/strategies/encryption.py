"""
Encryption strategies for uploads.

Implements the EncryptionStrategy protocol.
"""
from typing import Optional

from ...crypto import encrypt, generate_key, validate_key
from ...logging import get_logger

logger = get_logger('taisdk.upload.encryption')


class AesGcmEncryptionStrategy:
    """
    AES-256-GCM with one key per upload.

    The key is fixed at construction, so chunks encrypted by concurrent
    workers all share it. Every chunk gets its own random nonce; chunks can
    be encrypted in any order.
    """

    def __init__(self, encryption_key: Optional[bytes] = None):
        """
        Initialize encryption strategy.

        Args:
            encryption_key: Optional 32-byte key. If not provided, a random
                key is generated.
        """
        if encryption_key is None:
            self._key = generate_key()
            logger.debug("Generated new 256-bit upload key")
        else:
            self._key = validate_key(encryption_key)

    @property
    def key(self) -> bytes:
        """Returns the encryption key."""
        return self._key

    def encrypt_chunk(self, chunk_index: int, data: bytes) -> bytes:
        """
        Encrypt a chunk.

        Args:
            chunk_index: Index of the chunk
            data: Plaintext chunk

        Returns:
            Packed nonce + ciphertext + tag
        """
        result = encrypt(data, self._key)
        logger.debug(f"Chunk {chunk_index} encrypted ({len(data)} -> {len(result.ciphertext)} bytes)")
        return result.ciphertext
