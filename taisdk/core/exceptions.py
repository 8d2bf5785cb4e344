"""
Custom exceptions for chunked transfer operations.

This module defines exception classes raised by the transfer engine, the
blob store transport and the encryption layer.
"""
from typing import Optional, Any, List, TYPE_CHECKING

if TYPE_CHECKING:
    from .manifest import ChunkRecord


class TaiException(Exception):
    """Base exception for all Tai SDK errors."""

    def __init__(self, message: str, error_code: Optional[int] = None) -> None:
        """
        Initialize the exception.

        Args:
            message: Error message
            error_code: Numeric error code (if available)
        """
        self.error_code = error_code
        super().__init__(message)


class InvalidConfigurationError(TaiException, ValueError):
    """
    Raised for invalid options or arguments.

    Always raised before any network activity and never retried.
    """
    pass


class TransportError(TaiException):
    """Raised when a blob store request fails after all retries."""

    def __init__(
        self,
        message: str,
        url: Optional[str] = None,
        status: Optional[int] = None
    ) -> None:
        """
        Initialize the exception.

        Args:
            message: Error message
            url: Request URL
            status: HTTP status of the last response (None for network errors)
        """
        self.url = url
        self.status = status
        super().__init__(message, status)


class StoreProtocolError(TaiException):
    """Raised when the blob store answers with an unexpected payload."""

    def __init__(self, message: str, payload: Any = None) -> None:
        self.payload = payload
        super().__init__(message)


class _ResumableTransferError(TaiException):
    """Transfer failure carrying what a retry needs to resume."""

    def __init__(
        self,
        message: str,
        uploaded_chunks: Optional[List['ChunkRecord']] = None,
        error_code: Optional[int] = None,
        encryption_key: Optional[bytes] = None
    ) -> None:
        """
        Initialize the exception.

        Args:
            message: Error message
            uploaded_chunks: Chunks already stored; pass them back as
                existing_chunks to resume the upload
            error_code: Numeric error code (if available)
            encryption_key: Key the uploaded chunks were encrypted with;
                pass it back as encryption_key when resuming
        """
        self.uploaded_chunks: List['ChunkRecord'] = list(uploaded_chunks or [])
        self.encryption_key = encryption_key
        super().__init__(message, error_code)


class ChunkTransferError(_ResumableTransferError):
    """Raised when a chunk upload or download exhausted its retries."""

    def __init__(
        self,
        message: str,
        uploaded_chunks: Optional[List['ChunkRecord']] = None,
        chunk_index: Optional[int] = None,
        encryption_key: Optional[bytes] = None
    ) -> None:
        self.chunk_index = chunk_index
        super().__init__(message, uploaded_chunks, encryption_key=encryption_key)


class ManifestTransferError(_ResumableTransferError):
    """Raised when the manifest upload or download failed."""
    pass


class DecryptionError(TaiException):
    """Raised on key mismatch or corrupted ciphertext."""
    pass


# Name used by earlier releases
UploadError = ChunkTransferError
