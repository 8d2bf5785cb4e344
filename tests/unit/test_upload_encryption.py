"""Tests for encryption strategies."""
import pytest

from taisdk.core.upload.strategies.encryption import AesGcmEncryptionStrategy
from taisdk.core.crypto import decrypt, NONCE_SIZE, TAG_SIZE
from taisdk.core.exceptions import InvalidConfigurationError


class TestAesGcmEncryptionStrategy:
    """Test suite for AesGcmEncryptionStrategy."""

    def test_generates_key(self):
        """Test key is generated when not provided."""
        strategy = AesGcmEncryptionStrategy()
        assert len(strategy.key) == 32

    def test_uses_provided_key(self, encryption_key):
        strategy = AesGcmEncryptionStrategy(encryption_key)
        assert strategy.key == encryption_key

    def test_invalid_key(self):
        with pytest.raises(InvalidConfigurationError):
            AesGcmEncryptionStrategy(b"short")

    def test_key_is_stable(self):
        """Test the key does not change between chunks."""
        strategy = AesGcmEncryptionStrategy()
        key = strategy.key

        strategy.encrypt_chunk(0, b"a")
        strategy.encrypt_chunk(1, b"b")

        assert strategy.key == key

    def test_chunks_decrypt_independently(self):
        """Test every chunk decrypts on its own, in any order."""
        strategy = AesGcmEncryptionStrategy()
        payloads = {i: strategy.encrypt_chunk(i, bytes([i]) * 100) for i in (2, 0, 1)}

        for i, payload in payloads.items():
            assert len(payload) == NONCE_SIZE + 100 + TAG_SIZE
            assert decrypt(payload, strategy.key) == bytes([i]) * 100
