"""
Persistence for objectquery collections.
"""

from .serialization import (
    serialize_records,
    deserialize_records,
    save_records,
    load_records,
    FileFlags,
    MAGIC_NUMBER,
    VERSION,
)

__all__ = [
    "serialize_records",
    "deserialize_records",
    "save_records",
    "load_records",
    "FileFlags",
    "MAGIC_NUMBER",
    "VERSION",
]
