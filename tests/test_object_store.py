"""
Test compressed object persistence.

Verifies the sharded layout, compression, round-trips and idempotency.
"""

import zlib

import pytest

from minvcs import Blob, IntegrityError, ObjectNotFoundError, Snapshot, Tree, compute_hash


def _sample_objects():
    blob = Blob(b"hello")
    tree = Tree([(blob.compute_hash(), "a.txt"), (Blob(b"").compute_hash(), "empty file")])
    snapshot = Snapshot(tree.compute_hash(), [Blob(b"p").compute_hash()], author="alice", comment="multi\n\nline")
    return [blob, Blob(bytes(range(256))), tree, Tree([]), snapshot]


class TestObjectPersistence:
    """Test put/get behaviour of the object store."""

    @pytest.mark.parametrize("obj", _sample_objects(), ids=repr)
    def test_round_trip(self, engine, obj):
        """get(put(o)) returns an equal object under the same digest."""
        digest = engine.object_store.put_object(obj)

        loaded = engine.get_object(digest)

        assert loaded == obj
        assert loaded.kind == obj.kind
        assert loaded.compute_hash() == digest

    def test_sharded_path(self, engine):
        """Objects live at objects/<first two hex chars>/<remaining chars>."""
        digest = engine.object_store.put_object(Blob(b"hello"))

        path = engine.root / ".minvcs" / "objects" / digest[:2] / digest[2:]
        assert path.is_file()
        assert engine.layout.get_object_path(digest) == path

    def test_stored_bytes_are_zlib_compressed(self, engine):
        """The file holds the compressed canonical encoding."""
        digest = engine.object_store.put_object(Blob(b"hello"))

        raw = engine.layout.get_object_path(digest).read_bytes()
        assert zlib.decompress(raw) == b"file 5\x00hello"

    def test_put_is_idempotent(self, engine):
        """Storing the same object twice leaves one unchanged file."""
        digest = engine.object_store.put_object(Blob(b"same"))
        path = engine.layout.get_object_path(digest)
        mtime = path.stat().st_mtime_ns

        assert engine.object_store.put_object(Blob(b"same")) == digest
        assert path.stat().st_mtime_ns == mtime
        assert engine.list_all_objects() == [digest]

    def test_put_repairs_damaged_object(self, engine):
        """A damaged file under a digest is replaced by a fresh write."""
        digest = engine.object_store.put_object(Blob(b"repair me"))
        path = engine.layout.get_object_path(digest)
        path.write_bytes(b"garbage")

        engine.object_store.put_object(Blob(b"repair me"))

        assert engine.get_object(digest) == Blob(b"repair me")

    def test_put_rejects_mismatched_digest(self, engine):
        """Bytes cannot be filed under a digest they do not hash to."""
        wrong = compute_hash(b"something else")

        with pytest.raises(IntegrityError):
            engine.object_store.put(wrong, Blob(b"data").encode())

        assert not engine.has_object(wrong)

    def test_no_temporary_files_left(self, engine):
        digest = engine.object_store.put_object(Blob(b"tidy"))

        shard = engine.layout.get_object_path(digest).parent
        assert [p.name for p in shard.iterdir()] == [digest[2:]]

    def test_compression_level_is_configurable(self, tmp_path):
        from minvcs import MinvcsConfig, MinvcsEngine, initialize_repository

        root = initialize_repository(tmp_path / "repo")
        stored = MinvcsEngine(root, MinvcsConfig(compression_level=0))
        data = b"a" * 4096

        digest = stored.object_store.put_object(Blob(data))

        raw = stored.layout.get_object_path(digest).read_bytes()
        assert len(raw) > len(data)
        assert stored.get_object(digest) == Blob(data)

    def test_list_all_objects(self, engine):
        digests = {engine.object_store.put_object(Blob(bytes([i]))) for i in range(20)}

        assert set(engine.list_all_objects()) == digests


class TestMissingObjects:
    """Test retrieval of digests that were never stored."""

    def test_get_nonexistent_digest(self, engine):
        """A missing digest raises ObjectNotFoundError, never empty content."""
        digest = compute_hash(b"never stored")

        with pytest.raises(ObjectNotFoundError) as exc_info:
            engine.get_object(digest)

        assert exc_info.value.digest == digest
        assert not engine.has_object(digest)

    @pytest.mark.parametrize("digest", ["", "ab", "not a digest", "../" * 30])
    def test_get_malformed_digest(self, engine, digest):
        with pytest.raises(ObjectNotFoundError):
            engine.get_object(digest)

    def test_find_returns_none_for_missing_digest(self, engine):
        """Probing for an absent object is not an error."""
        assert engine.find_object(compute_hash(b"never stored")) is None
        assert engine.find_object("not a digest") is None

    def test_find_returns_stored_object(self, engine):
        digest = engine.object_store.put_object(Blob(b"present"))

        assert engine.find_object(digest) == Blob(b"present")

    def test_find_still_raises_on_damage(self, engine):
        digest = engine.object_store.put_object(Blob(b"damaged"))
        engine.layout.get_object_path(digest).write_bytes(b"junk")

        with pytest.raises(IntegrityError):
            engine.find_object(digest)
