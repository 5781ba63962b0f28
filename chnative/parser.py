"""Decoding of packets sent by the server."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import timezone as _timezone
from datetime import tzinfo
from typing import Any, Callable, Optional, Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from chnative.binary import (
    SERVER_DATA,
    SERVER_END_OF_STREAM,
    SERVER_EXCEPTION,
    SERVER_EXTREMES,
    SERVER_HELLO,
    SERVER_PONG,
    SERVER_PROFILE_INFO,
    SERVER_PROGRESS,
    SERVER_TOTALS,
    Reader,
)
from chnative.block_info import BlockInfo
from chnative.errors import DriverError, OtherError, ServerError

log = logging.getLogger(__name__)

BlockLoader = Callable[[Reader, tzinfo, bool], Any]

_UTC_NAMES = frozenset({"UTC", "Etc/UTC", "Zulu", "Etc/Zulu"})


def _resolve_timezone(name: str) -> tzinfo:
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        if name in _UTC_NAMES:
            return _timezone.utc
        raise OtherError(f"'{name}' is not a valid timezone") from exc


@dataclass(frozen=True)
class ServerInfo:
    """Server name, version and time zone announced in its hello."""

    name: str
    major_version: int
    minor_version: int
    revision: int
    timezone: tzinfo


@dataclass(frozen=True)
class Progress:
    """Query progress counters."""

    rows: int
    bytes: int
    total_rows: int


@dataclass(frozen=True)
class ProfileInfo:
    """Query profiling summary."""

    rows: int
    blocks: int
    bytes: int
    applied_limit: bool
    rows_before_limit: int
    calculated_rows_before_limit: bool


@dataclass(frozen=True)
class Hello:
    """The server's answer to the client hello."""

    server_info: ServerInfo


@dataclass(frozen=True)
class Pong:
    """The server's answer to a ping."""


@dataclass(frozen=True)
class EndOfStream:
    """The server has finished answering the current request."""


@dataclass(frozen=True)
class BlockPacket:
    """A data, totals or extremes block; ``kind`` is the packet code."""

    kind: int
    block: Any = field(compare=False)


@dataclass(frozen=True)
class ExceptionPacket:
    """An exception raised on the server side."""

    error: ServerError


Packet = Union[Hello, Pong, EndOfStream, BlockPacket, ExceptionPacket, Progress, ProfileInfo]


def _load_header_only(reader: Reader, timezone: tzinfo, compress: bool) -> BlockInfo:
    """Load a block that has no columns, returning its header."""
    if compress:
        raise OtherError("compressed blocks require a block loader")
    info = BlockInfo.read(reader)
    num_columns = reader.read_uvarint()
    reader.read_uvarint()
    if num_columns:
        raise OtherError("column data requires a block loader")
    return info


class Parser:
    """Parses server packets out of a reader, one at a time."""

    def __init__(
        self,
        reader: Reader,
        timezone: Optional[tzinfo] = None,
        compress: bool = False,
        load_block: Optional[BlockLoader] = None,
    ) -> None:
        self._reader = reader
        self._timezone = timezone
        self._compress = compress
        self._load_block = load_block or _load_header_only

    def parse_packet(self) -> Packet:
        """Decode the next packet, raising IncompleteData if it is not all there."""
        code = self._reader.read_uvarint()
        if code == SERVER_HELLO:
            return self._parse_server_info()
        if code == SERVER_PONG:
            log.debug("[process]      <- pong")
            return Pong()
        if code == SERVER_PROGRESS:
            return self._parse_progress()
        if code == SERVER_PROFILE_INFO:
            return self._parse_profile_info()
        if code == SERVER_EXCEPTION:
            return self._parse_exception()
        if code in (SERVER_DATA, SERVER_TOTALS, SERVER_EXTREMES):
            return self._parse_block(code)
        if code == SERVER_END_OF_STREAM:
            return EndOfStream()
        raise DriverError(f"Unknown packet 0x{code:x}.", packet=code)

    def _parse_block(self, code: int) -> BlockPacket:
        if self._timezone is None:
            raise DriverError("Unexpected packet.")
        self._reader.skip_string()
        block = self._load_block(self._reader, self._timezone, self._compress)
        return BlockPacket(code, block)

    def _parse_server_info(self) -> Hello:
        reader = self._reader
        name = reader.read_string()
        major = reader.read_uvarint()
        minor = reader.read_uvarint()
        revision = reader.read_uvarint()
        tz = _resolve_timezone(reader.read_string())
        info = ServerInfo(name, major, minor, revision, tz)
        log.debug("[hello]        <- %r", info)
        return Hello(info)

    def _parse_progress(self) -> Progress:
        reader = self._reader
        progress = Progress(
            rows=reader.read_uvarint(),
            bytes=reader.read_uvarint(),
            total_rows=reader.read_uvarint(),
        )
        log.debug(
            "[process] <- Progress: rows=%d, bytes=%d, total rows=%d",
            progress.rows,
            progress.bytes,
            progress.total_rows,
        )
        return progress

    def _parse_profile_info(self) -> ProfileInfo:
        reader = self._reader
        info = ProfileInfo(
            rows=reader.read_uvarint(),
            blocks=reader.read_uvarint(),
            bytes=reader.read_uvarint(),
            applied_limit=reader.read_scalar("?"),
            rows_before_limit=reader.read_uvarint(),
            calculated_rows_before_limit=reader.read_scalar("?"),
        )
        log.debug("profile_info: %r", info)
        return info

    def _parse_exception(self) -> ExceptionPacket:
        reader = self._reader
        code = reader.read_scalar("I")
        name = reader.read_string()
        message = reader.read_string()
        stack_trace = reader.read_string()
        error = ServerError(code, name, message, stack_trace)
        log.warning("server exception: %s", error)
        return ExceptionPacket(error)