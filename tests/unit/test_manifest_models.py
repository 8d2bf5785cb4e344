"""Tests for manifest models."""
import json
import pytest

from taisdk.core.manifest import (
    ChunkRecord,
    Manifest,
    SCHEMA_VERSION,
    DEFAULT_CHUNK_SIZE,
    total_chunks,
    bounds_of,
)
from taisdk.core.exceptions import InvalidConfigurationError, StoreProtocolError


class TestChunkGeometry:
    """Test suite for total_chunks and bounds_of."""

    def test_default_chunk_size(self):
        """Default chunk size is 10 MiB."""
        assert DEFAULT_CHUNK_SIZE == 10 * 1024 * 1024

    @pytest.mark.parametrize("size,chunk,expected", [
        (0, 10, 0),
        (1, 10, 1),
        (10, 10, 1),
        (11, 10, 2),
        (25, 10, 3),
        (25_000_000, 10_000_000, 3),
    ])
    def test_total_chunks(self, size, chunk, expected):
        assert total_chunks(size, chunk) == expected

    def test_bounds_last_chunk_is_short(self):
        """Test last chunk ends at the object size."""
        assert bounds_of(0, 25, 10) == (0, 10)
        assert bounds_of(1, 25, 10) == (10, 20)
        assert bounds_of(2, 25, 10) == (20, 25)

    def test_zero_chunk_size_rejected(self):
        with pytest.raises(InvalidConfigurationError):
            total_chunks(10, 0)

    def test_negative_size_rejected(self):
        with pytest.raises(InvalidConfigurationError):
            bounds_of(0, -1, 10)

    def test_negative_index_rejected(self):
        with pytest.raises(InvalidConfigurationError):
            bounds_of(-1, 10, 10)


class TestChunkRecord:
    """Test suite for ChunkRecord."""

    def test_size(self):
        """Test size is derived from offsets."""
        chunk = ChunkRecord(index=1, remote_id="b", offset_start=10, offset_end=20)
        assert chunk.size == 10

    def test_overlaps_half_open(self):
        """Test overlap uses half-open intervals."""
        chunk = ChunkRecord(index=1, remote_id="b", offset_start=10, offset_end=20)

        assert chunk.overlaps(9, 11)
        assert chunk.overlaps(19, 30)
        assert not chunk.overlaps(0, 10)
        assert not chunk.overlaps(20, 30)

    def test_to_dict(self):
        """Test wire format keys."""
        chunk = ChunkRecord(index=2, remote_id="c", offset_start=20, offset_end=25)

        assert chunk.to_dict() == {
            'index': 2,
            'remoteId': 'c',
            'offsetStart': 20,
            'offsetEnd': 25,
            'size': 5,
        }

    def test_from_dict_legacy_blob_id(self):
        """Test legacy 'blobId' key is accepted."""
        chunk = ChunkRecord.from_dict({'index': 0, 'blobId': 'x', 'offsetStart': 0, 'offsetEnd': 4})
        assert chunk.remote_id == 'x'

    def test_from_dict_missing_field(self):
        with pytest.raises(StoreProtocolError):
            ChunkRecord.from_dict({'index': 0, 'remoteId': 'x'})

    def test_frozen(self):
        """Test records are immutable."""
        chunk = ChunkRecord(index=0, remote_id="a", offset_start=0, offset_end=1)
        with pytest.raises(AttributeError):
            chunk.index = 5


class TestManifest:
    """Test suite for Manifest."""

    @pytest.fixture
    def manifest(self, sample_manifest_data):
        """Parsed sample manifest."""
        return Manifest.from_dict(sample_manifest_data)

    def test_from_dict(self, manifest):
        """Test parsing wire format."""
        assert manifest.title == 'clip.mp4'
        assert manifest.mime_type == 'video/mp4'
        assert manifest.total_size == 25
        assert manifest.duration_ms == 120000
        assert manifest.created_at == 1700000000000
        assert manifest.schema_version == SCHEMA_VERSION
        assert manifest.chunk_count == 3

    def test_to_dict_matches_wire_format(self, manifest, sample_manifest_data):
        assert manifest.to_dict() == sample_manifest_data

    def test_json_round_trip(self, manifest):
        """Test serialized manifest parses back to an equal value."""
        payload = manifest.to_json()

        assert isinstance(payload, bytes)
        assert Manifest.from_json(payload) == manifest

    def test_chunks_sorted_by_index(self):
        """Test chunks are normalized to index order."""
        manifest = Manifest(
            title="t",
            mime_type="video/mp4",
            total_size=20,
            chunks=(
                ChunkRecord(1, "b", 10, 20),
                ChunkRecord(0, "a", 0, 10),
            )
        )
        assert [c.index for c in manifest.chunks] == [0, 1]

    def test_overlapping(self, manifest):
        """Test only intersecting chunks are selected."""
        assert [c.index for c in manifest.overlapping(9, 11)] == [0, 1]
        assert [c.index for c in manifest.overlapping(10, 20)] == [1]
        assert [c.index for c in manifest.overlapping(24, 25)] == [2]

    def test_legacy_version_key(self, sample_manifest_data):
        """Test legacy 'version' key is accepted."""
        data = dict(sample_manifest_data)
        del data['schemaVersion']
        data['version'] = '0.9'

        assert Manifest.from_dict(data).schema_version == '0.9'

    def test_from_json_invalid(self):
        with pytest.raises(StoreProtocolError):
            Manifest.from_json(b"not json")

    def test_from_json_not_object(self):
        with pytest.raises(StoreProtocolError):
            Manifest.from_json(json.dumps([1, 2, 3]))

    def test_missing_total_size(self, sample_manifest_data):
        data = dict(sample_manifest_data)
        del data['totalSize']
        with pytest.raises(StoreProtocolError):
            Manifest.from_dict(data)

    def test_build_stamps_creation_time(self):
        """Test build() sets created_at."""
        manifest = Manifest.build(title="t", mime_type="video/mp4", total_size=0, chunks=[])

        assert manifest.created_at > 0
        assert manifest.chunks == ()
        assert manifest.schema_version == SCHEMA_VERSION
