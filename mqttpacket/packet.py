"""Core MQTT 3.1/3.1.1 wire primitives: fixed header, lengths, strings and packet reading."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Callable, Optional, Tuple, Union

MAX_REMAINING_LENGTH_BYTES = 4

StringLike = Union[str, bytes, bytearray, None]


class PacketType(IntEnum):
    """MQTT control packet types."""

    CONNECT = 1
    CONNACK = 2
    PUBLISH = 3
    PUBACK = 4
    PUBREC = 5
    PUBREL = 6
    PUBCOMP = 7
    SUBSCRIBE = 8
    SUBACK = 9
    UNSUBSCRIBE = 10
    UNSUBACK = 11
    PINGREQ = 12
    PINGRESP = 13
    DISCONNECT = 14


class PacketError(Exception):
    """Base class for packet encoding and decoding errors."""


class BufferTooShortError(PacketError):
    """The packet does not fit in the space allowed for it."""


class ReadError(PacketError):
    """The data could not be read or is malformed."""


@dataclass
class FixedHeader:
    """The first byte of every MQTT packet."""

    type: int = 0
    dup: int = 0
    qos: int = 0
    retain: int = 0

    @classmethod
    def from_byte(cls, value: int) -> "FixedHeader":
        """Split a header byte into its fields."""
        if not 0 <= value <= 0xFF:
            raise ValueError(f"header byte out of range: {value}")
        return cls(
            type=(value >> 4) & 0x0F,
            dup=(value >> 3) & 0x01,
            qos=(value >> 1) & 0x03,
            retain=value & 0x01,
        )

    def to_byte(self) -> int:
        """Pack the fields into a header byte."""
        return (
            ((self.type & 0x0F) << 4)
            | ((self.dup & 0x01) << 3)
            | ((self.qos & 0x03) << 1)
            | (self.retain & 0x01)
        )


class PacketReader:
    """Sequential reader over packet bytes, bounded by an end offset."""

    def __init__(self, data: bytes, pos: int = 0, end: Optional[int] = None):
        self.data = bytes(data)
        self.pos = pos
        self.end = len(self.data) if end is None else end

    def _take(self, count: int) -> bytes:
        if count < 0 or self.pos + count > self.end:
            raise ReadError("not enough data in packet")
        chunk = self.data[self.pos:self.pos + count]
        if len(chunk) != count:
            raise ReadError("not enough data in buffer")
        self.pos += count
        return chunk

    def read_byte(self) -> int:
        """Read one byte."""
        return self._take(1)[0]

    def read_int(self) -> int:
        """Read a two-byte big-endian integer."""
        return int.from_bytes(self._take(2), "big")

    def read_string(self) -> bytes:
        """Read a length-prefixed string and return its raw bytes."""
        if self.remaining() < 2:
            raise ReadError("not enough data for string length")
        length = self.read_int()
        return self._take(length)

    def remaining(self) -> int:
        """Number of bytes left before the end offset."""
        return self.end - self.pos


def encode_length(length: int) -> bytes:
    """Encode a remaining length with the MQTT variable-length scheme."""
    if length < 0:
        raise ValueError(f"length must not be negative: {length}")
    out = bytearray()
    while True:
        digit = length % 128
        length //= 128
        if length > 0:
            digit |= 0x80
        out.append(digit)
        if length == 0:
            return bytes(out)


def decode_length(getbyte: Callable[[], bytes]) -> Tuple[int, int]:
    """Decode a remaining length, pulling one byte at a time from ``getbyte``.

    Returns the decoded value and the number of bytes consumed.
    """
    value = 0
    multiplier = 1
    count = 0
    while True:
        count += 1
        if count > MAX_REMAINING_LENGTH_BYTES:
            raise ReadError("remaining length uses too many bytes")
        chunk = getbyte()
        if not chunk or len(chunk) != 1:
            raise ReadError("could not read remaining length")
        c = chunk[0]
        value += (c & 127) * multiplier
        multiplier *= 128
        if not c & 128:
            return value, count


def decode_length_bytes(data: bytes, offset: int = 0) -> Tuple[int, int]:
    """Decode a remaining length stored in ``data`` starting at ``offset``."""
    position = offset

    def getbyte() -> bytes:
        nonlocal position
        chunk = data[position:position + 1]
        position += 1
        return bytes(chunk)

    return decode_length(getbyte)


def packet_length(remaining_length: int) -> int:
    """Total packet size for a given remaining length, header included."""
    total = remaining_length + 1
    if total < 128:
        total += 1
    elif total < 16384:
        total += 2
    elif total < 2097151:
        total += 3
    else:
        total += 4
    return total


def encode_int(value: int) -> bytes:
    """Encode a two-byte big-endian integer."""
    if not 0 <= value <= 0xFFFF:
        raise ValueError(f"value does not fit in two bytes: {value}")
    return value.to_bytes(2, "big")


def _as_bytes(value: StringLike) -> bytes:
    if value is None:
        return b""
    if isinstance(value, str):
        return value.encode("utf-8")
    return bytes(value)


def encode_string(value: StringLike) -> bytes:
    """Encode a string as a two-byte length followed by its bytes."""
    raw = _as_bytes(value)
    return encode_int(len(raw)) + raw


def string_length(value: StringLike) -> int:
    """Length in bytes of a string as it goes on the wire, without prefix."""
    return len(_as_bytes(value))


def read_packet(getdata: Callable[[int], bytes], buflen: int) -> Tuple[int, bytes]:
    """Read one whole packet through ``getdata(count)``.

    Returns the packet type and the complete packet bytes.
    """
    first = getdata(1)
    if not first or len(first) != 1:
        raise ReadError("could not read header byte")
    remaining, _ = decode_length(lambda: getdata(1))
    head = bytes(first) + encode_length(remaining)
    if remaining + len(head) > buflen:
        raise BufferTooShortError("packet does not fit in buffer")
    body = b""
    if remaining:
        body = bytes(getdata(remaining))
        if len(body) != remaining:
            raise ReadError("could not read packet body")
    return FixedHeader.from_byte(head[0]).type, head + body


class NonBlockingReader:
    """Incremental packet reader over a source that may have no data ready.

    ``getdata(count)`` returns up to ``count`` bytes, an empty result when
    nothing is available yet, and raises on error.
    """

    def __init__(self, getdata: Callable[[int], bytes], buflen: int):
        self.getdata = getdata
        self.buflen = buflen
        self._reset()

    def _reset(self) -> None:
        self._state = 0
        self._buffer = bytearray()
        self._length_bytes = 0
        self._multiplier = 1
        self._remaining = 0

    def poll(self) -> Optional[Tuple[int, bytes]]:
        """Advance the read; return (type, packet) when complete, else None."""
        try:
            return self._advance()
        except BaseException:
            self._reset()
            raise

    def _advance(self) -> Optional[Tuple[int, bytes]]:
        if self._state == 0:
            chunk = self.getdata(1)
            if not chunk:
                return None
            self._buffer = bytearray(chunk[:1])
            self._length_bytes = 0
            self._multiplier = 1
            self._remaining = 0
            self._state = 1

        if self._state == 1:
            while True:
                if self._length_bytes >= MAX_REMAINING_LENGTH_BYTES:
                    raise ReadError("remaining length uses too many bytes")
                chunk = self.getdata(1)
                if not chunk:
                    return None
                c = chunk[0]
                self._length_bytes += 1
                self._remaining += (c & 127) * self._multiplier
                self._multiplier *= 128
                if not c & 128:
                    break
            self._buffer += encode_length(self._remaining)
            if self._remaining + len(self._buffer) > self.buflen:
                raise BufferTooShortError("packet does not fit in buffer")
            self._state = 2

        if self._remaining:
            chunk = self.getdata(self._remaining)
            if not chunk:
                return None
            chunk = bytes(chunk[:self._remaining])
            self._buffer += chunk
            self._remaining -= len(chunk)
            if self._remaining:
                return None

        packet = bytes(self._buffer)
        self._reset()
        return FixedHeader.from_byte(packet[0]).type, packet