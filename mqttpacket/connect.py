"""CONNECT, CONNACK, DISCONNECT and PINGREQ packets."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Optional

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

_PROTOCOL_NAMES = {3: b"MQIsdp", 4: b"MQTT"}

_FLAG_CLEAN_SESSION = 0x02
_FLAG_WILL = 0x04
_FLAG_WILL_QOS_SHIFT = 3
_FLAG_WILL_RETAIN = 0x20
_FLAG_PASSWORD = 0x40
_FLAG_USERNAME = 0x80


class ConnackReturnCode(IntEnum):
    """Return codes carried in a CONNACK packet."""

    CONNECTION_ACCEPTED = 0
    UNACCEPTABLE_PROTOCOL = 1
    CLIENTID_REJECTED = 2
    SERVER_UNAVAILABLE = 3
    BAD_USERNAME_OR_PASSWORD = 4
    NOT_AUTHORIZED = 5


@dataclass
class Will:
    """Last Will and Testament settings for a connection."""

    topic: StringLike = ""
    message: StringLike = ""
    retained: bool = False
    qos: int = 0


@dataclass
class ConnectOptions:
    """Contents of a CONNECT packet.

    ``username`` and ``password`` are sent when they are not None, even if
    empty. ``will`` is sent when it is not None.
    """

    client_id: StringLike = ""
    mqtt_version: int = 4
    keep_alive: int = 60
    clean_session: bool = True
    will: Optional[Will] = None
    username: StringLike = None
    password: StringLike = None


@dataclass
class Connack:
    """Contents of a CONNACK packet."""

    session_present: bool
    return_code: int


def connect_length(options: ConnectOptions) -> int:
    """Remaining length of the CONNECT packet built from ``options``."""
    if options.mqtt_version == 3:
        length = 12
    elif options.mqtt_version == 4:
        length = 10
    else:
        length = 0
    length += string_length(options.client_id) + 2
    if options.will is not None:
        length += string_length(options.will.topic) + 2
        length += string_length(options.will.message) + 2
    if options.username is not None:
        length += string_length(options.username) + 2
    if options.password is not None:
        length += string_length(options.password) + 2
    return length


def _connect_flags(options: ConnectOptions) -> int:
    flags = 0
    if options.clean_session:
        flags |= _FLAG_CLEAN_SESSION
    if options.will is not None:
        flags |= _FLAG_WILL
        flags |= (options.will.qos & 0x03) << _FLAG_WILL_QOS_SHIFT
        if options.will.retained:
            flags |= _FLAG_WILL_RETAIN
    if options.username is not None:
        flags |= _FLAG_USERNAME
    if options.password is not None:
        flags |= _FLAG_PASSWORD
    return flags


def serialize_connect(options: ConnectOptions) -> bytes:
    """Build a CONNECT packet."""
    protocol = _PROTOCOL_NAMES.get(options.mqtt_version)
    if protocol is None:
        raise ValueError(f"unsupported MQTT version: {options.mqtt_version}")

    out = bytearray()
    out.append(FixedHeader(type=PacketType.CONNECT).to_byte())
    out += encode_length(connect_length(options))
    out += encode_string(protocol)
    out.append(options.mqtt_version)
    out.append(_connect_flags(options))
    out += encode_int(options.keep_alive)
    out += encode_string(options.client_id)
    if options.will is not None:
        out += encode_string(options.will.topic)
        out += encode_string(options.will.message)
    if options.username is not None:
        out += encode_string(options.username)
    if options.password is not None:
        out += encode_string(options.password)
    return bytes(out)


def check_version(protocol: StringLike, version: int) -> bool:
    """Whether the protocol name and version form a known combination.

    The name is compared over at most its own length, so a shorter name
    that is a prefix of the expected one is accepted.
    """
    expected = _PROTOCOL_NAMES.get(version)
    if expected is None:
        return False
    if isinstance(protocol, str):
        name = protocol.encode("utf-8")
    else:
        name = bytes(protocol or b"")
    size = min(len(expected), len(name))
    return name[:size] == expected[:size]


def _skip_remaining_length(reader: PacketReader) -> int:
    value, used = decode_length_bytes(reader.data, reader.pos)
    reader.pos += used
    return value


def deserialize_connect(data: bytes) -> ConnectOptions:
    """Parse a CONNECT packet; raise ReadError if it is not valid."""
    reader = PacketReader(data)
    header = FixedHeader.from_byte(reader.read_byte())
    if header.type != PacketType.CONNECT:
        raise ReadError("not a CONNECT packet")
    _skip_remaining_length(reader)

    protocol = reader.read_string()
    version = reader.read_byte()
    if not check_version(protocol, version):
        raise ReadError(f"unrecognised protocol {protocol!r} version {version}")

    flags = reader.read_byte()
    options = ConnectOptions(
        mqtt_version=version,
        clean_session=bool(flags & _FLAG_CLEAN_SESSION),
    )
    options.keep_alive = reader.read_int()
    options.client_id = reader.read_string()

    if flags & _FLAG_WILL:
        qos = (flags >> _FLAG_WILL_QOS_SHIFT) & 0x03
        retained = bool(flags & _FLAG_WILL_RETAIN)
        topic = reader.read_string()
        message = reader.read_string()
        options.will = Will(topic=topic, message=message, retained=retained, qos=qos)

    if flags & _FLAG_USERNAME:
        if reader.remaining() < 3:
            raise ReadError("username flag set but no username supplied")
        options.username = reader.read_string()
        if flags & _FLAG_PASSWORD:
            if reader.remaining() < 3:
                raise ReadError("password flag set but no password supplied")
            options.password = reader.read_string()
    elif flags & _FLAG_PASSWORD:
        raise ReadError("password flag set without username")
    return options


def serialize_connack(return_code: int, session_present: bool) -> bytes:
    """Build a CONNACK packet."""
    header = FixedHeader(type=PacketType.CONNACK).to_byte()
    flags = 0x01 if session_present else 0x00
    return bytes([header]) + encode_length(2) + bytes([flags, int(return_code) & 0xFF])


def deserialize_connack(data: bytes) -> Connack:
    """Parse a CONNACK packet; raise ReadError if it is not valid."""
    reader = PacketReader(data)
    header = FixedHeader.from_byte(reader.read_byte())
    if header.type != PacketType.CONNACK:
        raise ReadError("not a CONNACK packet")
    remaining = _skip_remaining_length(reader)
    if remaining < 2:
        raise ReadError("CONNACK too short")
    reader.end = min(reader.end, reader.pos + remaining)
    flags = reader.read_byte()
    return_code = reader.read_byte()
    return Connack(session_present=bool(flags & 0x01), return_code=return_code)


def serialize_zero(packet_type: int) -> bytes:
    """Build a packet that consists of a header and a zero remaining length."""
    return bytes([FixedHeader(type=packet_type).to_byte()]) + encode_length(0)


def serialize_disconnect() -> bytes:
    """Build a DISCONNECT packet."""
    return serialize_zero(PacketType.DISCONNECT)


def serialize_pingreq() -> bytes:
    """Build a PINGREQ packet."""
    return serialize_zero(PacketType.PINGREQ)