"""Crypto module - AES-256-GCM helpers."""
from .aead import (
    EncryptionResult,
    encrypt,
    decrypt,
    generate_key,
    validate_key,
    KEY_SIZE,
    NONCE_SIZE,
    TAG_SIZE,
)

__all__ = [
    'EncryptionResult',
    'encrypt',
    'decrypt',
    'generate_key',
    'validate_key',
    'KEY_SIZE',
    'NONCE_SIZE',
    'TAG_SIZE',
]
