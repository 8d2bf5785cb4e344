"""Tests for upload models."""
import pytest

from taisdk.core.manifest import ChunkRecord, Manifest
from taisdk.core.api.models import BlobUploadResult
from taisdk.core.upload.models import (
    UploadVideoConfig,
    UploadResult,
    UploadSession,
    DEFAULT_CONCURRENCY,
)


def record(index, size=10):
    return ChunkRecord(index=index, remote_id=f"blob-{index}", offset_start=index * 10, offset_end=index * 10 + size)


class TestUploadVideoConfig:
    """Test suite for UploadVideoConfig."""

    def test_defaults(self):
        """Test default options."""
        config = UploadVideoConfig(title="clip")

        assert config.chunk_size == 10 * 1024 * 1024
        assert config.concurrency == DEFAULT_CONCURRENCY == 3
        assert config.encrypt is False
        assert config.encryption_key is None
        assert config.existing_chunks == []
        assert config.duration_ms == 0

    def test_existing_chunks_not_shared(self):
        """Test each config gets its own list."""
        first = UploadVideoConfig(title="a")
        first.existing_chunks.append(record(0))

        assert UploadVideoConfig(title="b").existing_chunks == []


class TestUploadResult:
    """Test suite for UploadResult."""

    def test_handle_is_manifest_blob(self):
        blob = BlobUploadResult(blob_id="m", url="https://agg/v1/blobs/m", size=100)
        manifest = Manifest(title="t", mime_type="video/mp4", total_size=0)
        result = UploadResult(manifest_blob=blob, manifest=manifest)

        assert result.blob_id == "m"
        assert result.url == "https://agg/v1/blobs/m"
        assert result.encryption_key is None


class TestUploadSession:
    """Test suite for UploadSession."""

    def test_fresh_session(self):
        """Test every chunk is pending without resume records."""
        session = UploadSession.start(3, [])

        assert session.pending_indices == [0, 1, 2]
        assert session.bytes_uploaded == 0
        assert not session.is_complete

    def test_resumed_chunks_skip_pending(self):
        """Test resumed indices are excluded from pending work."""
        session = UploadSession.start(4, [record(2), record(0)])

        assert session.pending_indices == [1, 3]
        assert [c.index for c in session.existing_chunks] == [0, 2]
        assert session.bytes_uploaded == 20

    def test_out_of_range_and_duplicates_dropped(self):
        session = UploadSession.start(2, [record(0), record(0), record(5)])

        assert [c.index for c in session.existing_chunks] == [0]
        assert session.pending_indices == [1]

    def test_records_with_other_bounds_dropped(self):
        """Test records are resumed only where their offsets match the chunk grid."""
        def bounds(index):
            return index * 10, min((index + 1) * 10, 25)

        session = UploadSession.start(3, [record(0), record(1, size=5), record(2, size=5)], bounds)

        assert [c.index for c in session.existing_chunks] == [0, 2]
        assert session.pending_indices == [1]
        assert session.bytes_uploaded == 15

    def test_add_updates_bytes(self):
        """Test add() returns the cumulative byte count."""
        session = UploadSession.start(2, [])

        assert session.add(record(1, size=7)) == 7
        assert session.add(record(0)) == 17
        assert session.is_complete

    def test_add_duplicate_rejected(self):
        session = UploadSession.start(2, [])
        session.add(record(0))

        with pytest.raises(ValueError):
            session.add(record(0))

    def test_snapshot_sorted(self):
        """Test snapshot is index ordered regardless of completion order."""
        session = UploadSession.start(3, [record(1)])
        session.add(record(2))
        session.add(record(0))

        snapshot = session.snapshot()

        assert [c.index for c in snapshot] == [0, 1, 2]
        snapshot.clear()
        assert len(session.uploaded_chunks) == 3
