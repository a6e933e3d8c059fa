import socket

import pytest

from mqttpacket.connect import serialize_pingreq
from mqttpacket.packet import PacketType, read_packet
from mqttpacket.publish import serialize_publish
from mqttpacket.transport import SocketTransport


@pytest.fixture
def server():
    listener = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    listener.bind(("127.0.0.1", 0))
    listener.listen(1)
    yield listener
    listener.close()


def _accept(listener):
    conn, _ = listener.accept()
    conn.settimeout(2)
    return conn


def test_send_reaches_peer(server):
    port = server.getsockname()[1]
    with SocketTransport("127.0.0.1", port, 2) as transport:
        conn = _accept(server)
        packet = serialize_pingreq()
        assert transport.send(packet) == len(packet)
        assert conn.recv(16) == b"\xc0\x00"
        conn.close()


def test_getdata_reads_requested_bytes(server):
    port = server.getsockname()[1]
    with SocketTransport("127.0.0.1", port, 2) as transport:
        conn = _accept(server)
        conn.sendall(b"abcdef")
        assert transport.getdata(4) == b"abcd"
        assert transport.getdata(2) == b"ef"
        conn.close()


def test_read_packet_over_socket(server):
    port = server.getsockname()[1]
    with SocketTransport("127.0.0.1", port, 2) as transport:
        conn = _accept(server)
        packet = serialize_publish(False, 1, False, 7, "a/b", b"hello")
        conn.sendall(packet)
        packet_type, data = read_packet(transport.getdata, 100)
        assert packet_type == PacketType.PUBLISH
        assert data == packet
        conn.close()


def test_getdata_nb_returns_empty_on_timeout(server):
    port = server.getsockname()[1]
    with SocketTransport("127.0.0.1", port, 0.05) as transport:
        conn = _accept(server)
        assert transport.getdata_nb(10) == b""
        conn.sendall(b"xy")
        received = b""
        for _ in range(50):
            received += transport.getdata_nb(10)
            if len(received) == 2:
                break
        assert received == b"xy"
        conn.close()


def test_close_shuts_down_write_side(server):
    port = server.getsockname()[1]
    transport = SocketTransport("127.0.0.1", port, 2)
    conn = _accept(server)
    transport.close()
    assert conn.recv(10) == b""
    conn.close()
    with pytest.raises(OSError):
        transport.send(b"x")


def test_close_twice_is_harmless(server):
    port = server.getsockname()[1]
    transport = SocketTransport("127.0.0.1", port, 2)
    conn = _accept(server)
    transport.close()
    transport.close()
    with pytest.raises(OSError):
        transport.getdata(1)
    conn.close()


def test_bracketed_address_is_accepted(server):
    port = server.getsockname()[1]
    with SocketTransport("[127.0.0.1]", port, 2) as transport:
        conn = _accept(server)
        assert transport.send(b"z") == 1
        assert conn.recv(1) == b"z"
        conn.close()


def test_connection_refused():
    probe = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    probe.bind(("127.0.0.1", 0))
    port = probe.getsockname()[1]
    probe.close()
    with pytest.raises(OSError):
        SocketTransport("127.0.0.1", port, 1)