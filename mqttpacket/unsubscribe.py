"""UNSUBSCRIBE and UNSUBACK packets."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

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
from .publish import deserialize_ack, serialize_ack


@dataclass
class Unsubscribe:
    """Contents of an UNSUBSCRIBE packet."""

    dup: bool
    packet_id: int
    topic_filters: list[bytes] = field(default_factory=list)


def _body_reader(data: bytes) -> tuple[FixedHeader, PacketReader]:
    reader = PacketReader(data)
    header = FixedHeader.from_byte(reader.read_byte())
    remaining, used = decode_length_bytes(reader.data, reader.pos)
    reader.pos += used
    reader.end = reader.pos + remaining
    return header, reader


def unsubscribe_length(topic_filters: Sequence[StringLike]) -> int:
    """Remaining length of an UNSUBSCRIBE packet for these topic filters."""
    return 2 + sum(2 + string_length(topic) for topic in topic_filters)


def serialize_unsubscribe(
    dup: bool, packet_id: int, topic_filters: Sequence[StringLike]
) -> bytes:
    """Build an UNSUBSCRIBE packet."""
    header = FixedHeader(type=PacketType.UNSUBSCRIBE, dup=int(bool(dup)), qos=1)
    out = bytearray()
    out.append(header.to_byte())
    out += encode_length(unsubscribe_length(topic_filters))
    out += encode_int(packet_id)
    for topic in topic_filters:
        out += encode_string(topic)
    return bytes(out)


def deserialize_unsubscribe(data: bytes) -> Unsubscribe:
    """Parse an UNSUBSCRIBE packet; raise ReadError if it is not valid."""
    header, reader = _body_reader(data)
    if header.type != PacketType.UNSUBSCRIBE:
        raise ReadError("not an UNSUBSCRIBE packet")
    result = Unsubscribe(dup=bool(header.dup), packet_id=reader.read_int())
    while reader.remaining() > 0:
        result.topic_filters.append(reader.read_string())
    return result


def serialize_unsuback(packet_id: int) -> bytes:
    """Build an UNSUBACK packet."""
    return serialize_ack(PacketType.UNSUBACK, False, packet_id)


def deserialize_unsuback(data: bytes) -> int:
    """Parse an UNSUBACK packet and return its packet id."""
    ack = deserialize_ack(data)
    if ack.packet_type != PacketType.UNSUBACK:
        raise ReadError("not an UNSUBACK packet")
    return ack.packet_id