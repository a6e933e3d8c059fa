import pytest

from mqttpacket.packet import FixedHeader, PacketType, ReadError, packet_length
from mqttpacket.subscribe import (
    Suback,
    Subscribe,
    deserialize_suback,
    deserialize_subscribe,
    serialize_suback,
    serialize_subscribe,
    subscribe_length,
)


def test_subscribe_wire_bytes():
    assert serialize_subscribe(False, 1, ["a"], [0]) == b"\x82\x06\x00\x01\x00\x01a\x00"


def test_suback_wire_bytes():
    assert serialize_suback(1, [0, 1]) == b"\x90\x04\x00\x01\x00\x01"


def test_subscribe_header_fields():
    header = FixedHeader.from_byte(serialize_subscribe(True, 5, ["x"], [1])[0])
    assert (header.type, header.dup, header.qos) == (PacketType.SUBSCRIBE, 1, 1)


def test_subscribe_round_trip():
    packet = serialize_subscribe(False, 77, ["a/b", "c/#", "+/d"], [0, 1, 2])
    assert deserialize_subscribe(packet, 3) == Subscribe(
        dup=False,
        packet_id=77,
        topic_filters=[b"a/b", b"c/#", b"+/d"],
        requested_qos=[0, 1, 2],
    )


def test_subscribe_size_matches_length():
    topics = ["one", "two/three", ""]
    packet = serialize_subscribe(False, 2, topics, [0, 0, 0])
    assert len(packet) == packet_length(subscribe_length(topics))


def test_subscribe_too_many_filters():
    packet = serialize_subscribe(False, 1, ["a", "b"], [0, 0])
    with pytest.raises(ReadError):
        deserialize_subscribe(packet, 1)


def test_subscribe_missing_qos_byte():
    packet = bytes([0x82, 5, 0, 1, 0, 1]) + b"a"
    with pytest.raises(ReadError):
        deserialize_subscribe(packet)


def test_subscribe_wrong_type():
    with pytest.raises(ReadError):
        deserialize_subscribe(serialize_suback(1, [0]))


def test_subscribe_mismatched_lists():
    with pytest.raises(ValueError):
        serialize_subscribe(False, 1, ["a", "b"], [0])


def test_suback_round_trip_with_failure_code():
    packet = serialize_suback(9, [0, 2, 0x80])
    assert deserialize_suback(packet, 3) == Suback(packet_id=9, granted_qos=[0, 2, 0x80])


def test_suback_too_many_codes():
    with pytest.raises(ReadError):
        deserialize_suback(serialize_suback(9, [0, 1, 2]), 2)


def test_suback_wrong_type():
    with pytest.raises(ReadError):
        deserialize_suback(serialize_subscribe(False, 1, ["a"], [0]))


def test_suback_too_short():
    with pytest.raises(ReadError):
        deserialize_suback(bytes([0x90, 0x01, 0x00]))