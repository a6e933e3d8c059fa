import pytest

from mqttpacket.packet import PacketType, ReadError, FixedHeader
from mqttpacket.publish import serialize_puback
from mqttpacket.subscribe import serialize_subscribe
from mqttpacket.unsubscribe import (
    Unsubscribe,
    deserialize_unsuback,
    deserialize_unsubscribe,
    serialize_unsuback,
    serialize_unsubscribe,
    unsubscribe_length,
)


def test_unsubscribe_wire_bytes():
    assert serialize_unsubscribe(False, 1, ["a"]) == b"\xa2\x05\x00\x01\x00\x01a"


def test_unsuback_wire_bytes():
    assert serialize_unsuback(7) == b"\xb0\x02\x00\x07"


def test_unsubscribe_header_fields():
    packet = serialize_unsubscribe(True, 3, ["x/y"])
    header = FixedHeader.from_byte(packet[0])
    assert header.type == PacketType.UNSUBSCRIBE
    assert header.qos == 1
    assert header.dup == 1


def test_length_matches_serialized_size():
    topics = ["a/b", "c", "long/topic/name"]
    packet = serialize_unsubscribe(False, 10, topics)
    assert len(packet) == 2 + unsubscribe_length(topics)
    assert packet[1] == unsubscribe_length(topics)


def test_round_trip():
    topics = ["sensors/+/temp", "home/#"]
    result = deserialize_unsubscribe(serialize_unsubscribe(True, 513, topics))
    assert result == Unsubscribe(
        dup=True, packet_id=513, topic_filters=[t.encode() for t in topics]
    )


def test_round_trip_no_topics():
    result = deserialize_unsubscribe(serialize_unsubscribe(False, 42, []))
    assert result.packet_id == 42
    assert result.topic_filters == []


def test_deserialize_wrong_type():
    with pytest.raises(ReadError):
        deserialize_unsubscribe(serialize_subscribe(False, 1, ["a"], [0]))


def test_deserialize_truncated_topic():
    packet = serialize_unsubscribe(False, 1, ["abcdef"])
    damaged = packet[:1] + bytes([packet[1] - 2]) + packet[2:-2]
    with pytest.raises(ReadError):
        deserialize_unsubscribe(damaged)


def test_unsuback_round_trip():
    assert deserialize_unsuback(serialize_unsuback(65535)) == 65535


def test_unsuback_rejects_other_ack():
    with pytest.raises(ReadError):
        deserialize_unsuback(serialize_puback(5))