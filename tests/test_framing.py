import pytest

from chnative.binary import SERVER_DATA, SERVER_END_OF_STREAM, SERVER_HELLO, SERVER_PONG, Encoder
from chnative.block_info import BlockInfo
from chnative.errors import DriverError
from chnative.framing import PacketBuffer
from chnative.parser import BlockPacket, EndOfStream, Hello, Pong

EMPTY_BLOCK = bytes([1, 0, 2, 255, 255, 255, 255, 0, 0, 0])


def hello_bytes():
    enc = Encoder()
    enc.uvarint(SERVER_HELLO)
    enc.string("ClickHouse")
    enc.uvarint(20)
    enc.uvarint(3)
    enc.uvarint(54441)
    enc.string("UTC")
    return enc.getvalue()


def test_empty_buffer_yields_nothing():
    buf = PacketBuffer()
    assert buf.next_packet() is None
    assert list(buf.packets()) == []


def test_several_packets_at_once():
    buf = PacketBuffer()
    buf.feed(bytes([SERVER_PONG, SERVER_END_OF_STREAM]))
    assert list(buf.packets()) == [Pong(), EndOfStream()]
    assert buf.pending == 0


def test_byte_by_byte_feed():
    data = hello_bytes()
    buf = PacketBuffer()
    for byte in data[:-1]:
        buf.feed(bytes([byte]))
        assert buf.next_packet() is None
    assert buf.pending == len(data) - 1
    buf.feed(data[-1:])
    packet = buf.next_packet()
    assert isinstance(packet, Hello)
    assert packet.server_info.name == "ClickHouse"
    assert buf.pending == 0


def test_hello_sets_timezone_for_blocks():
    buf = PacketBuffer()
    assert buf.timezone is None
    buf.feed(hello_bytes() + bytes([SERVER_DATA, 0]) + EMPTY_BLOCK + bytes([SERVER_END_OF_STREAM]))
    packets = list(buf.packets())
    assert str(buf.timezone) == "UTC"
    assert isinstance(packets[1], BlockPacket)
    assert packets[1].block == BlockInfo()
    assert packets[2] == EndOfStream()


def test_block_before_hello_fails_and_is_consumed():
    buf = PacketBuffer()
    buf.feed(bytes([SERVER_DATA, 0]) + EMPTY_BLOCK)
    with pytest.raises(DriverError):
        buf.next_packet()
    assert buf.pending == len(EMPTY_BLOCK) + 1


def test_unknown_packet_is_dropped_then_stream_continues():
    buf = PacketBuffer()
    buf.feed(bytes([99, SERVER_PONG]))
    with pytest.raises(DriverError):
        buf.next_packet()
    assert buf.next_packet() == Pong()
    assert buf.pending == 0


def test_partial_packet_stays_buffered():
    buf = PacketBuffer()
    data = hello_bytes()
    buf.feed(bytes([SERVER_PONG]) + data[:4])
    assert list(buf.packets()) == [Pong()]
    assert buf.pending == 4
    buf.feed(data[4:])
    assert isinstance(buf.next_packet(), Hello)