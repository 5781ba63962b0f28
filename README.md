# chnative

Pure-Python building blocks for the ClickHouse native (binary TCP) protocol.
It has no third-party runtime dependencies.

## Modules

- `chnative.binary` handles wire encoding.
  - `put_uvarint(value)` encodes an unsigned 64-bit integer as a varint. It
    raises `ValueError` if the value is out of range.
  - `Encoder` writes into memory. Its methods are `uvarint`, `string`,
    `byte_string`, `write_scalar(fmt, value)` and `write_bytes`. Scalars use
    `struct` format codes and are little-endian unless the format says
    otherwise. `getvalue()` returns the bytes written so far.
  - `Reader` reads the same values back. Its methods are `read_bytes`,
    `read_scalar`, `read_string`, `skip_string` and `read_uvarint`.
    `position()` reports the current offset. Reading past the end raises
    `IncompleteData`. A varint longer than 64 bits raises `DriverError`.
  - The module also defines the packet code constants (`CLIENT_*`,
    `SERVER_*`, `COMPRESS_*`, `STATE_COMPLETE`) and the revision thresholds.
- `chnative.client_info` covers the client identification sent in the
  handshake. `write(encoder)` encodes it. `description()` returns the readable
  form, `"Python SQLDriver 1.1.54213"`.
- `chnative.block_info` provides `BlockInfo`, the header that precedes every
  block. It has two fields, `is_overflows` (default `False`) and `bucket_num`
  (default `-1`). Use `BlockInfo.read(reader)` and `write(encoder)`.
- `chnative.parser` provides `Parser(reader, timezone=None, compress=False,
  load_block=None)`. Its `parse_packet()` method returns one of these objects:
  - `Hello`, which carries a `ServerInfo`. The server time zone is resolved
    with `zoneinfo`.
  - `Pong`
  - `Progress`
  - `ProfileInfo`
  - `ExceptionPacket`, which carries a `ServerError`.
  - `BlockPacket`, for data, totals and extremes.
  - `EndOfStream`
  
  An unknown packet code raises `DriverError`. A block that arrives before
  the time zone is known also raises `DriverError`.
- `chnative.framing` provides `PacketBuffer`, which collects bytes as they
  arrive.
  - `feed(data)` appends bytes.
  - `next_packet()` returns a complete packet, or `None` while one is still
    partial.
  - `packets()` yields every packet that is complete.
  - It learns the server time zone from the hello packet. The `timezone` and
    `pending` properties expose its state.
- `chnative.errors` holds the exception hierarchy. `Error` is the base class.
  The subclasses are `DriverError`, `ConnectError`, `OtherError`,
  `ServerError`, `UrlError`, `FromSqlError` and `IncompleteData`. The module
  also provides `is_would_block(error)`.
- `chnative.codes` provides `ErrorCode`, an `IntEnum` of the server error
  codes.
- `chnative.sql`
  - `column_name_to_string(name)` leaves numeric names as they are and
    backtick-quotes any other name. It raises `OtherError` if the name
    already contains a backtick.
  - `insert_query(table, column_names)` builds an `INSERT INTO ... VALUES`
    header.
- `chnative.retry` provides `retry_guard(check, reconnect, max_attempt,
  delay)`. This coroutine awaits `check()`. If the check fails, it awaits
  `reconnect()` and then checks again. A failed reconnect is retried after
  `delay` seconds. After `max_attempt` attempts the last error is raised.
- `chnative.hosts` provides `HostRotator(primary, alt_hosts=())`, which hands
  out hosts round-robin through `next_host()`. It is thread-safe.

## Examples

```python
from chnative.binary import Encoder, Reader

enc = Encoder()
enc.uvarint(100_500)
enc.string("hello")
reader = Reader(enc.getvalue())
assert reader.read_uvarint() == 100_500
assert reader.read_string() == "hello"
```

```python
from chnative.binary import Encoder, SERVER_PONG, SERVER_END_OF_STREAM
from chnative.framing import PacketBuffer

enc = Encoder()
enc.uvarint(SERVER_PONG)
enc.uvarint(SERVER_END_OF_STREAM)

buffer = PacketBuffer()
buffer.feed(enc.getvalue())
print(list(buffer.packets()))  # [Pong(), EndOfStream()]
```

```python
from chnative.sql import insert_query

insert_query("payment", ["customer_id", "amount"])
# 'INSERT INTO payment (`customer_id`, `amount`) VALUES'
```

```python
from chnative.hosts import HostRotator

hosts = HostRotator("host1:9000", ["host2:9000", "host3:9000"])
hosts.next_host()  # 'host1:9000'
hosts.next_host()  # 'host2:9000'
```

## What it does not do

This package is not a complete client. It contains none of the following:

- Socket handling
- A connection pool
- Query or insert commands
- Connection-URL parsing

It also does not encode or decode column data, and it does not implement
compressed blocks. By default `Parser` accepts only blocks without columns.
To decode real data, pass a `load_block(reader, timezone, compress)` callable
to `Parser` or `PacketBuffer`.

## Running the tests

```
pip install -e ".[test]"
pytest
```