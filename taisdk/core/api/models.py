"""Blob store result models."""
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class BlobUploadResult:
    """
    Result of a single blob upload.

    Attributes:
        blob_id: Content-addressed blob id
        url: Aggregator URL for reading the blob
        size: Uploaded size in bytes
        media_type: Content type sent with the blob
        sui_object_id: On-chain object id, when the store reports one
    """
    blob_id: str
    url: str
    size: int
    media_type: str = 'application/octet-stream'
    sui_object_id: Optional[str] = None


@dataclass(frozen=True)
class RetryInfo:
    """Payload of the 'retry' event."""
    operation: str
    attempt: int
    max_retries: int
    error: BaseException
