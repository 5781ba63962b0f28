import pytest

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
    Encoder,
    Reader,
)
from chnative.block_info import BlockInfo
from chnative.errors import DriverError, IncompleteData, OtherError, ServerError
from chnative.parser import (
    BlockPacket,
    EndOfStream,
    ExceptionPacket,
    Hello,
    Parser,
    ProfileInfo,
    Progress,
    Pong,
)

EMPTY_BLOCK = bytes([1, 0, 2, 255, 255, 255, 255, 0, 0, 0])


def hello_bytes(tz_name="UTC"):
    enc = Encoder()
    enc.uvarint(SERVER_HELLO)
    enc.string("ClickHouse")
    enc.uvarint(20)
    enc.uvarint(3)
    enc.uvarint(54441)
    enc.string(tz_name)
    return enc.getvalue()


def parse(data, **kwargs):
    reader = Reader(data)
    packet = Parser(reader, **kwargs).parse_packet()
    return packet, reader


def utc():
    packet, _ = parse(hello_bytes())
    return packet.server_info.timezone


def test_hello():
    packet, reader = parse(hello_bytes())
    assert isinstance(packet, Hello)
    info = packet.server_info
    assert info.name == "ClickHouse"
    assert (info.major_version, info.minor_version, info.revision) == (20, 3, 54441)
    assert str(info.timezone) == "UTC"
    assert reader.position() == len(hello_bytes())


def test_hello_invalid_timezone():
    with pytest.raises(OtherError):
        parse(hello_bytes("Not/AZone"))


def test_pong_and_eof():
    assert parse(bytes([SERVER_PONG]))[0] == Pong()
    assert parse(bytes([SERVER_END_OF_STREAM]))[0] == EndOfStream()


def test_progress():
    enc = Encoder()
    enc.uvarint(SERVER_PROGRESS)
    for v in (10, 2000, 300):
        enc.uvarint(v)
    packet, _ = parse(enc.getvalue())
    assert packet == Progress(rows=10, bytes=2000, total_rows=300)


def test_profile_info():
    enc = Encoder()
    enc.uvarint(SERVER_PROFILE_INFO)
    enc.uvarint(5)
    enc.uvarint(1)
    enc.uvarint(64)
    enc.write_scalar("?", True)
    enc.uvarint(7)
    enc.write_scalar("?", False)
    packet, _ = parse(enc.getvalue())
    assert packet == ProfileInfo(5, 1, 64, True, 7, False)


def test_exception():
    enc = Encoder()
    enc.uvarint(SERVER_EXCEPTION)
    enc.write_scalar("I", 60)
    enc.string("DB::Exception")
    enc.string("Table default.unexisting doesn't exist.")
    enc.string("trace")
    packet, _ = parse(enc.getvalue())
    assert isinstance(packet, ExceptionPacket)
    assert packet.error == ServerError(
        60, "DB::Exception", "Table default.unexisting doesn't exist.", "trace"
    )


def test_unknown_packet():
    with pytest.raises(DriverError) as info:
        parse(bytes([42]))
    assert info.value.packet == 42
    assert str(info.value) == "Driver error: `Unknown packet 0x2a.`"


def test_block_without_timezone_is_unexpected():
    with pytest.raises(DriverError):
        parse(bytes([SERVER_DATA, 0]) + EMPTY_BLOCK)


@pytest.mark.parametrize("kind", [SERVER_DATA, SERVER_TOTALS, SERVER_EXTREMES])
def test_empty_block(kind):
    data = bytes([kind, 0]) + EMPTY_BLOCK
    packet, reader = parse(data, timezone=utc())
    assert isinstance(packet, BlockPacket)
    assert packet.kind == kind
    assert packet.block == BlockInfo(False, -1)
    assert reader.position() == len(data)


def test_block_with_columns_needs_loader():
    enc = Encoder()
    enc.uvarint(SERVER_DATA)
    enc.string("")
    BlockInfo().write(enc)
    enc.uvarint(1)
    enc.uvarint(1)
    with pytest.raises(OtherError):
        parse(enc.getvalue(), timezone=utc())


def test_custom_block_loader():
    calls = []

    def loader(reader, tz, compress):
        calls.append((tz, compress))
        return reader.read_bytes(3)

    tz = utc()
    packet, _ = parse(bytes([SERVER_DATA, 0]) + b"xyz", timezone=tz, compress=True, load_block=loader)
    assert packet.block == b"xyz"
    assert calls == [(tz, True)]


def test_truncated_packet():
    with pytest.raises(IncompleteData):
        parse(hello_bytes()[:-2])
    with pytest.raises(IncompleteData):
        parse(b"")