"""
Unit tests for record serialization and storage.
"""

import pytest
import struct
import tempfile
import shutil
from datetime import date, datetime
from pathlib import Path
from types import SimpleNamespace

from objectquery.core.exceptions import SerializationError, StorageError
from objectquery.storage.serialization import (
    HEADER_FORMAT,
    MAGIC_NUMBER,
    FileFlags,
    deserialize_records,
    load_records,
    save_records,
    serialize_records,
)


@pytest.fixture
def temp_dir():
    """Create a temporary directory."""
    path = tempfile.mkdtemp(prefix="objectquery_storage_test_")
    yield Path(path)
    shutil.rmtree(path, ignore_errors=True)


class TestSerialization:
    """In-memory serialization."""

    def test_scalars_and_dates(self):
        """Test mixed value types survive."""
        records = [
            {"id": 1, "name": "clinton", "score": 1.5, "active": True, "note": None,
             "createdAt": datetime(2004, 12, 6, 3, 34, 6), "birthday": date(1990, 1, 2),
             "tags": ["a", "b"], "owner": {"id": 9}},
        ]

        restored = deserialize_records(serialize_records(records))

        assert restored == records
        assert type(restored[0]["createdAt"]) is datetime
        assert type(restored[0]["birthday"]) is date

    def test_non_mapping_rejected(self):
        with pytest.raises(SerializationError):
            serialize_records([SimpleNamespace(id=1)])

    def test_unencodable_value(self):
        with pytest.raises(SerializationError):
            serialize_records([{"value": object()}])

    def test_garbage(self):
        with pytest.raises(SerializationError):
            deserialize_records(b"\xc1")

    def test_not_a_list(self):
        import msgpack

        with pytest.raises(SerializationError):
            deserialize_records(msgpack.packb({"a": 1}))


class TestFiles:
    """File persistence."""

    @pytest.mark.parametrize("compress", [False, True])
    def test_save_load(self, temp_dir, compress):
        records = [{"id": i, "name": f"n{i}"} for i in range(10)]
        path = temp_dir / "people.oqc"

        written = save_records(path, records, compress=compress)

        assert written == path.stat().st_size
        assert load_records(path) == records

    def test_header(self, temp_dir):
        path = temp_dir / "people.oqc"
        save_records(path, [{"id": 1}], compress=True)

        magic, version, flags = struct.unpack(
            HEADER_FORMAT, path.read_bytes()[:struct.calcsize(HEADER_FORMAT)]
        )

        assert magic == MAGIC_NUMBER
        assert version == 1
        assert flags & FileFlags.COMPRESSED

    def test_creates_parent_dirs(self, temp_dir):
        path = temp_dir / "nested" / "dir" / "c.oqc"
        save_records(path, [])

        assert load_records(path) == []

    def test_missing_file(self, temp_dir):
        with pytest.raises(StorageError):
            load_records(temp_dir / "nope.oqc")

    def test_bad_magic(self, temp_dir):
        path = temp_dir / "bad.oqc"
        path.write_bytes(b"NOTMAGIC" + b"\x00" * 16)

        with pytest.raises(SerializationError):
            load_records(path)

    def test_truncated(self, temp_dir):
        path = temp_dir / "short.oqc"
        path.write_bytes(b"OBJ")

        with pytest.raises(SerializationError):
            load_records(path)
