"""
AES-256-GCM authenticated encryption.

Packed ciphertext layout: [12-byte nonce][ciphertext][16-byte tag].
"""
from dataclasses import dataclass
from typing import Optional

from Crypto.Cipher import AES
from Crypto.Random import get_random_bytes

from ..exceptions import DecryptionError, InvalidConfigurationError

KEY_SIZE = 32
NONCE_SIZE = 12
TAG_SIZE = 16


@dataclass(frozen=True)
class EncryptionResult:
    """
    Output of encrypt().

    Attributes:
        ciphertext: Packed nonce + ciphertext + tag
        key: 32-byte key used
        nonce: 12-byte nonce used
    """
    ciphertext: bytes
    key: bytes
    nonce: bytes


def generate_key() -> bytes:
    """Generates a random 256-bit key."""
    return get_random_bytes(KEY_SIZE)


def validate_key(key: bytes) -> bytes:
    """Returns the key as bytes or raises if its length is wrong."""
    if len(key) != KEY_SIZE:
        raise InvalidConfigurationError(
            f"Encryption key must be {KEY_SIZE} bytes, got {len(key)}"
        )
    return bytes(key)


def encrypt(plaintext: bytes, key: Optional[bytes] = None) -> EncryptionResult:
    """
    Encrypt data with AES-256-GCM.

    Args:
        plaintext: Data to encrypt
        key: Optional 32-byte key; a random key is generated if omitted

    Returns:
        EncryptionResult with packed ciphertext and the key
    """
    key = validate_key(key) if key is not None else generate_key()
    nonce = get_random_bytes(NONCE_SIZE)
    cipher = AES.new(key, AES.MODE_GCM, nonce=nonce, mac_len=TAG_SIZE)
    encrypted, tag = cipher.encrypt_and_digest(bytes(plaintext))
    return EncryptionResult(ciphertext=nonce + encrypted + tag, key=key, nonce=nonce)


def decrypt(packed: bytes, key: bytes) -> bytes:
    """
    Decrypt data produced by encrypt().

    Args:
        packed: Packed nonce + ciphertext + tag
        key: 32-byte key

    Returns:
        Plaintext bytes

    Raises:
        DecryptionError: On wrong key, tampering or truncated input
    """
    key = validate_key(key)
    if len(packed) < NONCE_SIZE + TAG_SIZE:
        raise DecryptionError(
            f"Ciphertext too short: {len(packed)} bytes"
        )
    nonce = packed[:NONCE_SIZE]
    encrypted = packed[NONCE_SIZE:-TAG_SIZE]
    tag = packed[-TAG_SIZE:]
    cipher = AES.new(key, AES.MODE_GCM, nonce=nonce, mac_len=TAG_SIZE)
    try:
        return cipher.decrypt_and_verify(encrypted, tag)
    except ValueError as e:
        raise DecryptionError("Authentication failed: wrong key or corrupted data") from e
