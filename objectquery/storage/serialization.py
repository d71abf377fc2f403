"""
Serialization utilities for persisted collections.

Records are stored as a msgpack array after a fixed header:

    0-7:   Magic number (8 bytes)
    8-11:  Version (4 bytes, uint32)
    12-15: Flags (4 bytes, uint32)

Dates and datetimes travel as msgpack extension types carrying their ISO
8601 text, so they load back as the same Python types.
"""

from __future__ import annotations

import struct
import zlib
from collections.abc import Mapping
from datetime import date, datetime
from enum import IntFlag
from pathlib import Path
from typing import Any, Dict, List, Union

import msgpack

from ..core.exceptions import SerializationError, StorageError


# Magic number: "OBJQRY\x00\x00"
MAGIC_NUMBER = b'OBJQRY\x00\x00'

# File format version
VERSION = 1

HEADER_FORMAT = '<8sII'
HEADER_SIZE = struct.calcsize(HEADER_FORMAT)

# msgpack extension type codes
EXT_DATETIME = 1
EXT_DATE = 2


class FileFlags(IntFlag):
    """File format flags."""
    NONE = 0
    COMPRESSED = 1 << 0      # Body is zlib-compressed


def _encode_default(obj: Any) -> Any:
    # datetime first, it is a subclass of date
    if isinstance(obj, datetime):
        return msgpack.ExtType(EXT_DATETIME, obj.isoformat().encode("utf-8"))
    if isinstance(obj, date):
        return msgpack.ExtType(EXT_DATE, obj.isoformat().encode("utf-8"))
    if isinstance(obj, (set, frozenset)):
        return list(obj)
    raise TypeError(f"Cannot serialize object of type {type(obj).__name__}")


def _decode_ext(code: int, data: bytes) -> Any:
    if code == EXT_DATETIME:
        return datetime.fromisoformat(data.decode("utf-8"))
    if code == EXT_DATE:
        return date.fromisoformat(data.decode("utf-8"))
    return msgpack.ExtType(code, data)


def serialize_records(records: List[Any]) -> bytes:
    """
    Serialize a list of mapping records.

    Raises:
        SerializationError: If a record is not a mapping or holds a value
            msgpack cannot encode
    """
    payload = []
    for position, record in enumerate(records):
        if not isinstance(record, Mapping):
            raise SerializationError(
                f"Record {position} is a {type(record).__name__}; only mappings can be persisted"
            )
        payload.append(dict(record))

    try:
        return msgpack.packb(payload, default=_encode_default, use_bin_type=True)
    except (TypeError, ValueError, OverflowError) as e:
        raise SerializationError(f"Failed to serialize records: {e}") from e


def deserialize_records(data: bytes) -> List[Dict[str, Any]]:
    """Deserialize records produced by ``serialize_records``."""
    try:
        records = msgpack.unpackb(data, raw=False, ext_hook=_decode_ext)
    except (msgpack.UnpackException, ValueError) as e:
        raise SerializationError(f"Failed to deserialize records: {e}") from e

    if not isinstance(records, list):
        raise SerializationError("Serialized data does not contain a record list")
    return records


def save_records(
    path: Union[str, Path],
    records: List[Any],
    compress: bool = False,
) -> int:
    """
    Write records to a file.

    Args:
        path: Destination file
        records: Mapping records to store
        compress: zlib-compress the body

    Returns:
        Number of bytes written
    """
    body = serialize_records(records)
    flags = FileFlags.NONE
    if compress:
        body = zlib.compress(body, level=1)
        flags |= FileFlags.COMPRESSED

    header = struct.pack(HEADER_FORMAT, MAGIC_NUMBER, VERSION, int(flags))

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "wb") as f:
        f.write(header)
        f.write(body)

    return len(header) + len(body)


def load_records(path: Union[str, Path]) -> List[Dict[str, Any]]:
    """Read records written by ``save_records``."""
    path = Path(path)
    if not path.exists():
        raise StorageError(f"No collection file at {path}")

    with open(path, "rb") as f:
        data = f.read()

    if len(data) < HEADER_SIZE:
        raise SerializationError(f"{path} is too short for a collection header")

    magic, version, flags = struct.unpack(HEADER_FORMAT, data[:HEADER_SIZE])
    if magic != MAGIC_NUMBER:
        raise SerializationError(f"Invalid magic number: {magic!r}")
    if version > VERSION:
        raise SerializationError(f"Unsupported version: {version}")

    body = data[HEADER_SIZE:]
    if flags & FileFlags.COMPRESSED:
        try:
            body = zlib.decompress(body)
        except zlib.error as e:
            raise SerializationError(f"Corrupt compressed body in {path}: {e}") from e

    return deserialize_records(body)
