"""PUBLISH packets and the two-byte acknowledgements that follow them."""

from __future__ import annotations

from dataclasses import dataclass

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
class Publish:
    """Contents of a PUBLISH packet."""

    dup: bool
    qos: int
    retained: bool
    packet_id: int
    topic: bytes
    payload: bytes


@dataclass
class Ack:
    """Contents of a PUBACK, PUBREC, PUBREL, PUBCOMP or UNSUBACK packet."""

    packet_type: int
    dup: bool
    packet_id: int


def _body_reader(data: bytes) -> tuple[FixedHeader, PacketReader]:
    """Read the fixed header and bound the reader to the remaining length."""
    reader = PacketReader(data)
    header = FixedHeader.from_byte(reader.read_byte())
    remaining, used = decode_length_bytes(reader.data, reader.pos)
    reader.pos += used
    reader.end = reader.pos + remaining
    return header, reader


def publish_length(qos: int, topic: StringLike, payload_length: int) -> int:
    """Remaining length of a PUBLISH packet; the packet id is counted for QoS > 0."""
    length = 2 + string_length(topic) + payload_length
    if qos > 0:
        length += 2
    return length


def serialize_publish(
    dup: bool,
    qos: int,
    retained: bool,
    packet_id: int,
    topic: StringLike,
    payload: bytes,
) -> bytes:
    """Build a PUBLISH packet."""
    payload = bytes(payload)
    header = FixedHeader(
        type=PacketType.PUBLISH, dup=int(bool(dup)), qos=qos, retain=int(bool(retained))
    )
    out = bytearray()
    out.append(header.to_byte())
    out += encode_length(publish_length(qos, topic, len(payload)))
    out += encode_string(topic)
    if qos > 0:
        out += encode_int(packet_id)
    out += payload
    return bytes(out)


def deserialize_publish(data: bytes) -> Publish:
    """Parse a PUBLISH packet; raise ReadError if it is not valid."""
    header, reader = _body_reader(data)
    if header.type != PacketType.PUBLISH:
        raise ReadError("not a PUBLISH packet")
    topic = reader.read_string()
    packet_id = reader.read_int() if header.qos > 0 else 0
    payload = reader._take(reader.remaining())
    return Publish(
        dup=bool(header.dup),
        qos=header.qos,
        retained=bool(header.retain),
        packet_id=packet_id,
        topic=topic,
        payload=payload,
    )


def serialize_ack(packet_type: int, dup: bool, packet_id: int) -> bytes:
    """Build an acknowledgement carrying only a packet id.

    PUBREL packets get QoS 1 in their header, as the protocol requires.
    """
    header = FixedHeader(
        type=packet_type,
        dup=int(bool(dup)),
        qos=1 if packet_type == PacketType.PUBREL else 0,
    )
    return bytes([header.to_byte()]) + encode_length(2) + encode_int(packet_id)


def deserialize_ack(data: bytes) -> Ack:
    """Parse any acknowledgement carrying a packet id; the type is not checked."""
    header, reader = _body_reader(data)
    if reader.remaining() < 2:
        raise ReadError("acknowledgement too short")
    packet_id = reader.read_int()
    return Ack(packet_type=header.type, dup=bool(header.dup), packet_id=packet_id)


def serialize_puback(packet_id: int) -> bytes:
    """Build a PUBACK packet."""
    return serialize_ack(PacketType.PUBACK, False, packet_id)


def serialize_pubrel(dup: bool, packet_id: int) -> bytes:
    """Build a PUBREL packet."""
    return serialize_ack(PacketType.PUBREL, dup, packet_id)


def serialize_pubcomp(packet_id: int) -> bytes:
    """Build a PUBCOMP packet."""
    return serialize_ack(PacketType.PUBCOMP, False, packet_id)