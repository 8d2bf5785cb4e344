"""Tests for upload services."""
import pytest
from pathlib import Path
from unittest.mock import AsyncMock, Mock
import tempfile
import os

from taisdk.core.api.models import BlobUploadResult
from taisdk.core.crypto import decrypt
from taisdk.core.upload.services import (
    MemorySource,
    FileSource,
    open_source,
    ChunkUploader,
)
from taisdk.core.upload.strategies import AesGcmEncryptionStrategy


class TestMemorySource:
    """Test suite for MemorySource."""

    @pytest.mark.asyncio
    async def test_read_range(self):
        source = MemorySource(b"0123456789")

        assert source.size == 10
        assert await source.read(3, 6) == b"345"

    @pytest.mark.asyncio
    async def test_copies_mutable_input(self):
        """Test later changes to a bytearray are not seen."""
        data = bytearray(b"abc")
        source = MemorySource(data)
        data[0] = ord("z")

        assert await source.read(0, 3) == b"abc"

    def test_no_media_type(self):
        assert MemorySource(b"").media_type is None


class TestFileSource:
    """Test suite for FileSource."""

    @pytest.fixture
    def temp_file(self):
        """Create temporary file with known content."""
        fd, path = tempfile.mkstemp(suffix=".mp4")
        os.write(fd, b"0123456789" * 10)
        os.close(fd)
        yield Path(path)
        os.unlink(path)

    def test_size(self, temp_file):
        assert FileSource(temp_file).size == 100

    def test_media_type_from_name(self, temp_file):
        assert FileSource(temp_file).media_type == "video/mp4"

    def test_nonexistent_file(self):
        with pytest.raises(FileNotFoundError):
            FileSource(Path("/nonexistent/file.bin"))

    def test_directory(self):
        """Test directory raises error."""
        with pytest.raises(ValueError):
            FileSource(Path(tempfile.gettempdir()))

    @pytest.mark.asyncio
    async def test_read_ranges(self, temp_file):
        """Test random-access reads."""
        source = FileSource(temp_file)
        try:
            assert await source.read(95, 100) == b"56789"
            assert await source.read(0, 4) == b"0123"
        finally:
            await source.close()

    @pytest.mark.asyncio
    async def test_close_idempotent(self, temp_file):
        source = FileSource(temp_file)
        await source.read(0, 1)
        await source.close()
        await source.close()


class TestOpenSource:
    """Test suite for open_source."""

    def test_bytes(self):
        assert isinstance(open_source(b"abc"), MemorySource)

    def test_str_is_utf8(self):
        """Test strings are encoded, not treated as paths."""
        source = open_source("héllo")
        assert source.size == len("héllo".encode("utf-8"))

    def test_path(self, tmp_path):
        path = tmp_path / "clip.bin"
        path.write_bytes(b"xyz")

        source = open_source(path)

        assert isinstance(source, FileSource)
        assert source.size == 3

    def test_unsupported_type(self):
        with pytest.raises(TypeError, match="Unsupported input type"):
            open_source(12345)


class TestChunkUploader:
    """Test suite for ChunkUploader."""

    @pytest.fixture
    def mock_store(self):
        """Create mock blob store."""
        store = Mock()
        store.put_blob = AsyncMock(return_value=BlobUploadResult(
            blob_id="blob-1", url="https://agg/v1/blobs/blob-1", size=4
        ))
        return store

    @pytest.mark.asyncio
    async def test_upload_chunk(self, mock_store):
        """Test a plain chunk is stored as-is."""
        uploader = ChunkUploader(mock_store, MemorySource(b"0123456789"), epochs=7)

        chunk = await uploader.upload_chunk(1, 4, 8)

        mock_store.put_blob.assert_awaited_once_with(b"4567", epochs=7)
        assert chunk.index == 1
        assert chunk.remote_id == "blob-1"
        assert (chunk.offset_start, chunk.offset_end) == (4, 8)

    @pytest.mark.asyncio
    async def test_upload_encrypted_chunk(self, mock_store):
        """Test plaintext offsets are recorded for encrypted chunks."""
        encryption = AesGcmEncryptionStrategy()
        uploader = ChunkUploader(mock_store, MemorySource(b"0123456789"), encryption)

        chunk = await uploader.upload_chunk(0, 0, 10)

        payload = mock_store.put_blob.await_args.args[0]
        assert decrypt(payload, encryption.key) == b"0123456789"
        assert chunk.size == 10

    @pytest.mark.asyncio
    async def test_short_read(self, mock_store):
        """Test a truncated source is reported."""
        uploader = ChunkUploader(mock_store, MemorySource(b"0123"))

        with pytest.raises(ValueError, match="Short read"):
            await uploader.upload_chunk(0, 0, 10)

        mock_store.put_blob.assert_not_awaited()
