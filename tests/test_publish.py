import pytest

from mqttpacket.packet import PacketType, ReadError, packet_length
from mqttpacket.publish import (
    Ack,
    Publish,
    deserialize_ack,
    deserialize_publish,
    publish_length,
    serialize_ack,
    serialize_puback,
    serialize_pubcomp,
    serialize_publish,
    serialize_pubrel,
)


def test_puback_wire_bytes():
    assert serialize_puback(1) == bytes([0x40, 0x02, 0x00, 0x01])


def test_pubrel_header_has_qos_one():
    assert serialize_pubrel(False, 10)[0] == 0x62


def test_qos0_publish_wire_bytes():
    assert serialize_publish(False, 0, False, 0, "a/b", b"hi") == b"\x30\x07\x00\x03a/bhi"


def test_publish_round_trip_qos1():
    packet = serialize_publish(False, 1, False, 23, "sensors/temp", b"21.5")
    assert deserialize_publish(packet) == Publish(
        dup=False, qos=1, retained=False, packet_id=23, topic=b"sensors/temp", payload=b"21.5"
    )


def test_publish_flags_round_trip():
    packet = serialize_publish(True, 2, True, 7, "t", b"")
    result = deserialize_publish(packet)
    assert (result.dup, result.qos, result.retained, result.packet_id) == (True, 2, True, 7)
    assert result.payload == b""


@pytest.mark.parametrize("qos", [0, 1, 2])
@pytest.mark.parametrize("payload", [b"", b"x", b"y" * 200])
def test_serialized_size_matches_length(qos, payload):
    packet = serialize_publish(False, qos, False, 5, "topic", payload)
    assert len(packet) == packet_length(publish_length(qos, "topic", len(payload)))


def test_qos0_omits_packet_id():
    result = deserialize_publish(serialize_publish(False, 0, False, 99, "t", b"abc"))
    assert result.packet_id == 0
    assert result.payload == b"abc"


def test_deserialize_publish_rejects_other_type():
    with pytest.raises(ReadError):
        deserialize_publish(serialize_puback(3))


def test_deserialize_publish_truncated_topic():
    packet = serialize_publish(False, 0, False, 0, "abcdef", b"")
    with pytest.raises(ReadError):
        deserialize_publish(packet[:5])


def test_ack_round_trip_pubcomp():
    assert deserialize_ack(serialize_pubcomp(300)) == Ack(
        packet_type=PacketType.PUBCOMP, dup=False, packet_id=300
    )


def test_pubrel_dup_round_trip():
    result = deserialize_ack(serialize_pubrel(True, 65535))
    assert result.packet_type == PacketType.PUBREL
    assert result.dup is True
    assert result.packet_id == 65535


def test_serialize_ack_generic_type():
    result = deserialize_ack(serialize_ack(PacketType.PUBREC, False, 42))
    assert result.packet_type == PacketType.PUBREC
    assert result.packet_id == 42


def test_deserialize_ack_too_short():
    with pytest.raises(ReadError):
        deserialize_ack(bytes([0x40, 0x01, 0x00]))