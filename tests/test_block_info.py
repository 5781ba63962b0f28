import pytest

from chnative.binary import Encoder, Reader
from chnative.block_info import BlockInfo
from chnative.errors import DriverError, IncompleteData


def test_read_write_blockinfo():
    b1 = BlockInfo(is_overflows=True, bucket_num=3)
    enc = Encoder()
    b1.write(enc)
    b2 = BlockInfo.read(Reader(enc.getvalue()))
    assert b2.is_overflows == b1.is_overflows
    assert b2.bucket_num == b1.bucket_num


def test_default_encoding():
    enc = Encoder()
    BlockInfo().write(enc)
    assert enc.getvalue() == bytes([1, 0, 2, 255, 255, 255, 255, 0])


def test_read_only_end_field_gives_defaults():
    info = BlockInfo.read(Reader(bytes([0])))
    assert info == BlockInfo(is_overflows=False, bucket_num=-1)


def test_unknown_field():
    with pytest.raises(DriverError) as exc:
        BlockInfo.read(Reader(bytes([9])))
    assert exc.value.packet == 9


def test_truncated_input():
    with pytest.raises(IncompleteData):
        BlockInfo.read(Reader(bytes([1, 0, 2, 255])))