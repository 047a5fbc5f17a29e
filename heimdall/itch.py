"""Reading order events from NASDAQ TotalView-ITCH 5.0 files."""

from __future__ import annotations

import struct
from collections.abc import Iterator
from typing import BinaryIO

from heimdall.arbiter import CancelOrder, NewOrder, OrderEvent, ReplaceOrder, Side

_LENGTH = struct.Struct(">H")
_HEADER_SIZE = 11  # type, stock locate, tracking number, 6-byte timestamp
_ADD = struct.Struct(">Qc I8sI".replace(" ", ""))
_CANCEL = struct.Struct(">QI")
_REPLACE = struct.Struct(">QQII")

_SIDES = {b"B": Side.BUY, b"S": Side.SELL}

_SIZES = {
    b"A": _HEADER_SIZE + _ADD.size,
    b"F": _HEADER_SIZE + _ADD.size + 4,
    b"X": _HEADER_SIZE + _CANCEL.size,
    b"U": _HEADER_SIZE + _REPLACE.size,
}


class ItchFileError(OSError):
    """An ITCH file could not be opened."""


def _decode(body: bytes) -> OrderEvent | None:
    kind = body[:1]
    if _SIZES.get(kind) != len(body):
        return None
    timestamp = int.from_bytes(body[5:_HEADER_SIZE], "big")
    payload = body[_HEADER_SIZE:]
    if kind in (b"A", b"F"):
        reference, side, shares, stock, price = _ADD.unpack_from(payload)
        if side not in _SIDES:
            return None
        return NewOrder(
            timestamp=timestamp,
            order_id=reference,
            symbol=stock.decode("ascii").rstrip(" "),
            side=_SIDES[side],
            price=price,
            size=shares,
        )
    if kind == b"X":
        reference, cancelled = _CANCEL.unpack(payload)
        return CancelOrder(timestamp=timestamp, order_id=reference, size=cancelled)
    old_reference, new_reference, shares, price = _REPLACE.unpack(payload)
    return ReplaceOrder(
        timestamp=timestamp,
        old_id=old_reference,
        new_id=new_reference,
        new_size=shares,
        new_price=price,
    )


def iter_events(stream: BinaryIO) -> Iterator[OrderEvent]:
    """Yield order events from a length-prefixed ITCH stream.

    Messages of other types, and malformed ones, are skipped. A truncated
    final message ends the stream.
    """
    while True:
        prefix = stream.read(_LENGTH.size)
        if len(prefix) < _LENGTH.size:
            return
        (length,) = _LENGTH.unpack(prefix)
        body = stream.read(length)
        if len(body) < length:
            return
        try:
            event = _decode(body)
        except (struct.error, UnicodeDecodeError):
            continue
        if event is not None:
            yield event


def _events_from_open_file(handle: BinaryIO) -> Iterator[OrderEvent]:
    with handle:
        yield from iter_events(handle)


def parse_file(path: str) -> Iterator[OrderEvent]:
    """Open an ITCH file and return an iterator over its order events."""
    try:
        handle = open(path, "rb")
    except OSError as exc:
        raise ItchFileError(f"failed to open ITCH file '{path}'") from exc
    return _events_from_open_file(handle)