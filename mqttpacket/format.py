"""Human-readable descriptions of MQTT packets."""

from __future__ import annotations

from .connect import ConnectOptions, deserialize_connack, deserialize_connect
from .packet import FixedHeader, PacketError, PacketType, StringLike
from .publish import Publish, deserialize_ack, deserialize_publish
from .subscribe import Suback, Subscribe, deserialize_suback, deserialize_subscribe
from .unsubscribe import Unsubscribe, deserialize_unsuback, deserialize_unsubscribe

_PACKET_NAMES = (
    "RESERVED", "CONNECT", "CONNACK", "PUBLISH", "PUBACK", "PUBREC", "PUBREL",
    "PUBCOMP", "SUBSCRIBE", "SUBACK", "UNSUBSCRIBE", "UNSUBACK",
    "PINGREQ", "PINGRESP", "DISCONNECT",
)

_SHOWN_BYTES = 20

_ACK_TYPES = (PacketType.PUBACK, PacketType.PUBREC, PacketType.PUBREL, PacketType.PUBCOMP)
_EMPTY_TYPES = (PacketType.PINGREQ, PacketType.PINGRESP, PacketType.DISCONNECT)


def _text(value: StringLike, limit: int | None = None) -> str:
    if value is None:
        return ""
    raw = value.encode("utf-8") if isinstance(value, str) else bytes(value)
    if limit is not None:
        raw = raw[:limit]
    return raw.decode("utf-8", errors="replace")


def packet_name(packet_type: int) -> str:
    """Name of a packet type; type 0 is RESERVED."""
    if not 0 <= packet_type < len(_PACKET_NAMES):
        raise ValueError(f"unknown packet type: {packet_type}")
    return _PACKET_NAMES[packet_type]


def format_connect(options: ConnectOptions) -> str:
    """Describe a CONNECT packet."""
    parts = [
        f"CONNECT MQTT version {options.mqtt_version}, client id {_text(options.client_id)}, "
        f"clean session {int(bool(options.clean_session))}, keep alive {options.keep_alive}"
    ]
    if options.will is not None:
        will = options.will
        parts.append(
            f", will QoS {will.qos}, will retain {int(bool(will.retained))}, "
            f"will topic {_text(will.topic)}, will message {_text(will.message)}"
        )
    if options.username:
        parts.append(f", user name {_text(options.username)}")
    if options.password:
        parts.append(f", password {_text(options.password)}")
    return "".join(parts)


def format_connack(return_code: int, session_present: bool) -> str:
    """Describe a CONNACK packet."""
    return f"CONNACK session present {int(bool(session_present))}, rc {int(return_code)}"


def format_publish(publish: Publish) -> str:
    """Describe a PUBLISH packet, showing at most 20 bytes of topic and payload."""
    return (
        f"PUBLISH dup {int(bool(publish.dup))}, QoS {publish.qos}, "
        f"retained {int(bool(publish.retained))}, packet id {publish.packet_id}, "
        f"topic {_text(publish.topic, _SHOWN_BYTES)}, "
        f"payload length {len(publish.payload)}, "
        f"payload {_text(publish.payload, _SHOWN_BYTES)}"
    )


def format_ack(packet_type: int, dup: bool, packet_id: int) -> str:
    """Describe an acknowledgement carrying a packet id."""
    text = f"{packet_name(packet_type)}, packet id {packet_id}"
    if dup:
        text += f", dup {int(bool(dup))}"
    return text


def format_subscribe(subscribe: Subscribe) -> str:
    """Describe a SUBSCRIBE packet by its first topic filter."""
    topic = subscribe.topic_filters[0] if subscribe.topic_filters else b""
    qos = subscribe.requested_qos[0] if subscribe.requested_qos else 0
    return (
        f"SUBSCRIBE dup {int(bool(subscribe.dup))}, packet id {subscribe.packet_id} "
        f"count {len(subscribe.topic_filters)} topic {_text(topic)} qos {qos}"
    )


def format_suback(suback: Suback) -> str:
    """Describe a SUBACK packet by its first granted QoS."""
    granted = suback.granted_qos[0] if suback.granted_qos else 0
    return (
        f"SUBACK packet id {suback.packet_id} count {len(suback.granted_qos)} "
        f"granted qos {granted}"
    )


def format_unsubscribe(unsubscribe: Unsubscribe) -> str:
    """Describe an UNSUBSCRIBE packet by its first topic filter."""
    topic = unsubscribe.topic_filters[0] if unsubscribe.topic_filters else b""
    return (
        f"UNSUBSCRIBE dup {int(bool(unsubscribe.dup))}, packet id {unsubscribe.packet_id} "
        f"count {len(unsubscribe.topic_filters)} topic {_text(topic)}"
    )


def _packet_type(data: bytes) -> int:
    if not data:
        raise ValueError("empty packet")
    return FixedHeader.from_byte(data[0]).type


def to_client_string(data: bytes) -> str:
    """Describe a packet a client receives; empty if it cannot be parsed."""
    try:
        packet_type = _packet_type(data)
        if packet_type == PacketType.CONNACK:
            connack = deserialize_connack(data)
            return format_connack(connack.return_code, connack.session_present)
        if packet_type == PacketType.PUBLISH:
            return format_publish(deserialize_publish(data))
        if packet_type in _ACK_TYPES:
            ack = deserialize_ack(data)
            return format_ack(ack.packet_type, ack.dup, ack.packet_id)
        if packet_type == PacketType.SUBACK:
            return format_suback(deserialize_suback(data))
        if packet_type == PacketType.UNSUBACK:
            return format_ack(PacketType.UNSUBACK, False, deserialize_unsuback(data))
        if packet_type in _EMPTY_TYPES:
            return packet_name(packet_type)
    except (PacketError, ValueError):
        return ""
    return ""


def to_server_string(data: bytes) -> str:
    """Describe a packet a server receives; empty if it cannot be parsed."""
    try:
        packet_type = _packet_type(data)
        if packet_type == PacketType.CONNECT:
            return format_connect(deserialize_connect(data))
        if packet_type == PacketType.PUBLISH:
            return format_publish(deserialize_publish(data))
        if packet_type in _ACK_TYPES:
            ack = deserialize_ack(data)
            return format_ack(ack.packet_type, ack.dup, ack.packet_id)
        if packet_type == PacketType.SUBSCRIBE:
            return format_subscribe(deserialize_subscribe(data, 1))
        if packet_type == PacketType.UNSUBSCRIBE:
            return format_unsubscribe(deserialize_unsubscribe(data))
        if packet_type in _EMPTY_TYPES:
            return packet_name(packet_type)
    except (PacketError, ValueError):
        return ""
    return ""