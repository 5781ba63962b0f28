"""Wire primitives: varints, length-prefixed strings and fixed-size scalars."""

from __future__ import annotations

import struct
from functools import lru_cache

from chnative.errors import DriverError, IncompleteData, OtherError

DBMS_MIN_REVISION_WITH_QUOTA_KEY_IN_CLIENT_INFO = 54060
DBMS_MIN_REVISION_WITH_SETTINGS_SERIALIZED_AS_STRINGS = 54429

CLIENT_HELLO = 0
CLIENT_QUERY = 1
CLIENT_DATA = 2
CLIENT_CANCEL = 3
CLIENT_PING = 4

COMPRESS_ENABLE = 1
COMPRESS_DISABLE = 0

STATE_COMPLETE = 2

SERVER_HELLO = 0
SERVER_DATA = 1
SERVER_EXCEPTION = 2
SERVER_PROGRESS = 3
SERVER_PONG = 4
SERVER_END_OF_STREAM = 5
SERVER_PROFILE_INFO = 6
SERVER_TOTALS = 7
SERVER_EXTREMES = 8

_MAX_UINT64 = (1 << 64) - 1


@lru_cache(maxsize=None)
def _struct(fmt: str) -> struct.Struct:
    if fmt[:1] not in ("<", ">", "!", "=", "@"):
        fmt = "<" + fmt
    return struct.Struct(fmt)


def put_uvarint(value: int) -> bytes:
    """Encode an unsigned 64-bit integer as a LEB128 varint."""
    if not 0 <= value <= _MAX_UINT64:
        raise ValueError(f"value {value} does not fit in an unsigned 64-bit integer")
    out = bytearray()
    while value >= 0x80:
        out.append((value & 0x7F) | 0x80)
        value >>= 7
    out.append(value)
    return bytes(out)


class Encoder:
    """Accumulates encoded values in memory."""

    def __init__(self) -> None:
        self._buffer = bytearray()

    def uvarint(self, value: int) -> None:
        self._buffer += put_uvarint(value)

    def string(self, text: str) -> None:
        self.byte_string(text.encode("utf-8"))

    def byte_string(self, data: bytes) -> None:
        self.uvarint(len(data))
        self._buffer += data

    def write_scalar(self, fmt: str, value) -> None:
        """Write a value packed with a struct format; little-endian by default."""
        self._buffer += _struct(fmt).pack(value)

    def write_bytes(self, data: bytes) -> None:
        self._buffer += data

    def getvalue(self) -> bytes:
        return bytes(self._buffer)


class Reader:
    """Decodes values from a byte buffer, tracking the read position."""

    def __init__(self, data: bytes, offset: int = 0) -> None:
        self._data = memoryview(bytes(data))
        self._pos = offset

    def position(self) -> int:
        return self._pos

    def read_bytes(self, size: int) -> bytes:
        """Read exactly ``size`` bytes or raise IncompleteData."""
        end = self._pos + size
        if end > len(self._data):
            raise IncompleteData()
        chunk = self._data[self._pos:end].tobytes()
        self._pos = end
        return chunk

    def read_scalar(self, fmt: str):
        """Read a value unpacked with a struct format; little-endian by default."""
        packer = _struct(fmt)
        (value,) = packer.unpack(self.read_bytes(packer.size))
        return value

    def read_string(self) -> str:
        raw = self.read_bytes(self.read_uvarint())
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise OtherError(str(exc)) from exc

    def skip_string(self) -> None:
        self.read_bytes(self.read_uvarint())

    def read_uvarint(self) -> int:
        result = 0
        shift = 0
        index = 0
        while True:
            byte = self.read_scalar("B")
            if byte < 0x80:
                if index > 9 or (index == 9 and byte > 1):
                    raise DriverError("Varint overflows a 64-bit integer.")
                return result | (byte << shift)
            result |= (byte & 0x7F) << shift
            shift += 7
            index += 1