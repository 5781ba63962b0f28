"""Per-block metadata header."""

from __future__ import annotations

from dataclasses import dataclass

from chnative.binary import Encoder, Reader
from chnative.errors import DriverError

_BLOCK_INFO_OVERFLOWS = 1
_BLOCK_INFO_BUCKET_NUM = 2
_END_FIELD = 0


@dataclass
class BlockInfo:
    """Overflow flag and bucket number that precede every block."""

    is_overflows: bool = False
    bucket_num: int = -1

    @classmethod
    def read(cls, reader: Reader) -> BlockInfo:
        info = cls()
        while True:
            field = reader.read_uvarint()
            if field == _BLOCK_INFO_OVERFLOWS:
                info.is_overflows = reader.read_scalar("?")
            elif field == _BLOCK_INFO_BUCKET_NUM:
                info.bucket_num = reader.read_scalar("i")
            elif field == _END_FIELD:
                return info
            else:
                raise DriverError(f"Unknown packet 0x{field:x}.", packet=field)

    def write(self, encoder: Encoder) -> None:
        encoder.uvarint(_BLOCK_INFO_OVERFLOWS)
        encoder.write_scalar("?", self.is_overflows)
        encoder.uvarint(_BLOCK_INFO_BUCKET_NUM)
        encoder.write_scalar("i", self.bucket_num)
        encoder.uvarint(_END_FIELD)