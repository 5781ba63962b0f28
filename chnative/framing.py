"""Splitting a stream of received bytes into server packets."""

from __future__ import annotations

from datetime import tzinfo
from typing import Iterator, Optional

from chnative.binary import Reader
from chnative.errors import Error, IncompleteData
from chnative.parser import BlockLoader, Hello, Packet, Parser


class PacketBuffer:
    """Buffers incoming bytes and yields complete packets as they arrive.

    The server time zone is learned from the hello packet and used to
    decode the blocks that follow it.
    """

    def __init__(
        self,
        timezone: Optional[tzinfo] = None,
        compress: bool = False,
        load_block: Optional[BlockLoader] = None,
    ) -> None:
        self._buffer = bytearray()
        self._timezone = timezone
        self._compress = compress
        self._load_block = load_block

    @property
    def timezone(self) -> Optional[tzinfo]:
        return self._timezone

    @property
    def pending(self) -> int:
        """Number of buffered bytes not yet consumed by a packet."""
        return len(self._buffer)

    def feed(self, data: bytes) -> None:
        """Append received bytes to the buffer."""
        self._buffer += data

    def next_packet(self) -> Optional[Packet]:
        """Return the next complete packet, or None if more data is needed.

        A packet that fails to decode is dropped from the buffer and its
        error is raised.
        """
        if not self._buffer:
            return None
        reader = Reader(self._buffer)
        parser = Parser(reader, self._timezone, self._compress, self._load_block)
        try:
            packet = parser.parse_packet()
        except IncompleteData:
            return None
        except Error:
            del self._buffer[: reader.position()]
            raise
        del self._buffer[: reader.position()]
        if isinstance(packet, Hello):
            self._timezone = packet.server_info.timezone
        return packet

    def packets(self) -> Iterator[Packet]:
        """Yield every complete packet currently buffered."""
        while True:
            packet = self.next_packet()
            if packet is None:
                return
            yield packet