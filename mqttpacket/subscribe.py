"""SUBSCRIBE and SUBACK packets."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Sequence

from .packet import (
    FixedHeader,
    PacketReader,
    PacketType,
    ReadError,
    StringLike,
    decode_length_bytes,
    encode_int,
    encode_length,
    encode_string,
    string_length,
)


@dataclass
class Subscribe:
    """Contents of a SUBSCRIBE packet."""

    dup: bool
    packet_id: int
    topic_filters: list[bytes] = field(default_factory=list)
    requested_qos: list[int] = field(default_factory=list)


@dataclass
class Suback:
    """Contents of a SUBACK packet."""

    packet_id: int
    granted_qos: list[int] = field(default_factory=list)


def _body_reader(data: bytes) -> tuple[FixedHeader, PacketReader]:
    reader = PacketReader(data)
    header = FixedHeader.from_byte(reader.read_byte())
    remaining, used = decode_length_bytes(reader.data, reader.pos)
    reader.pos += used
    reader.end = reader.pos + remaining
    return header, reader


def subscribe_length(topic_filters: Sequence[StringLike]) -> int:
    """Remaining length of a SUBSCRIBE packet for these topic filters."""
    return 2 + sum(2 + string_length(topic) + 1 for topic in topic_filters)


def serialize_subscribe(
    dup: bool,
    packet_id: int,
    topic_filters: Sequence[StringLike],
    requested_qos: Sequence[int],
) -> bytes:
    """Build a SUBSCRIBE packet; one requested QoS per topic filter."""
    if len(topic_filters) != len(requested_qos):
        raise ValueError("topic_filters and requested_qos differ in length")
    header = FixedHeader(type=PacketType.SUBSCRIBE, dup=int(bool(dup)), qos=1)
    out = bytearray()
    out.append(header.to_byte())
    out += encode_length(subscribe_length(topic_filters))
    out += encode_int(packet_id)
    for topic, qos in zip(topic_filters, requested_qos):
        out += encode_string(topic)
        out.append(qos & 0xFF)
    return bytes(out)


def deserialize_subscribe(data: bytes, max_count: Optional[int] = None) -> Subscribe:
    """Parse a SUBSCRIBE packet holding at most ``max_count`` filters (None: no limit)."""
    header, reader = _body_reader(data)
    if header.type != PacketType.SUBSCRIBE:
        raise ReadError("not a SUBSCRIBE packet")
    result = Subscribe(dup=bool(header.dup), packet_id=reader.read_int())
    while reader.remaining() > 0:
        if max_count is not None and len(result.topic_filters) == max_count:
            raise ReadError(f"more than {max_count} topic filters")
        topic = reader.read_string()
        if reader.remaining() <= 0:
            raise ReadError("topic filter without requested QoS")
        result.topic_filters.append(topic)
        result.requested_qos.append(reader.read_byte())
    return result


def serialize_suback(packet_id: int, granted_qos: Sequence[int]) -> bytes:
    """Build a SUBACK packet."""
    header = FixedHeader(type=PacketType.SUBACK).to_byte()
    body = encode_int(packet_id) + bytes(qos & 0xFF for qos in granted_qos)
    return bytes([header]) + encode_length(len(body)) + body


def deserialize_suback(data: bytes, max_count: Optional[int] = None) -> Suback:
    """Parse a SUBACK packet holding at most ``max_count`` codes (None: no limit)."""
    header, reader = _body_reader(data)
    if header.type != PacketType.SUBACK:
        raise ReadError("not a SUBACK packet")
    if reader.remaining() < 2:
        raise ReadError("SUBACK too short")
    result = Suback(packet_id=reader.read_int())
    while reader.remaining() > 0:
        if max_count is not None and len(result.granted_qos) >= max_count:
            raise ReadError(f"more than {max_count} granted QoS values")
        result.granted_qos.append(reader.read_byte())
    return result