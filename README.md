# mqttpacket

A small library with no dependencies for building and parsing MQTT control
packets for protocol versions 3.1 and 3.1.1. It converts packets to bytes
and bytes back to packets, and it includes a simple TCP transport to carry
those bytes.

## Installation

```
pip install mqttpacket
```

To run the tests, install the `test` extra and then run `pytest`:

```
pip install "mqttpacket[test]"
pytest
```

## Modules

| Module | What it covers |
| --- | --- |
| `mqttpacket.packet` | The fixed header (`FixedHeader`, `PacketType`). Remaining-length encoding (`encode_length`, `decode_length`, `decode_length_bytes`, `packet_length`). Length-prefixed fields (`encode_int`, `encode_string`, `string_length`, `PacketReader`). Reading whole packets from a byte source (`read_packet`, `NonBlockingReader`). |
| `mqttpacket.connect` | CONNECT, CONNACK, DISCONNECT and PINGREQ (`ConnectOptions`, `Will`, `Connack`, `ConnackReturnCode`, `check_version`). |
| `mqttpacket.publish` | PUBLISH and its acknowledgements PUBACK, PUBREC, PUBREL and PUBCOMP (`Publish`, `Ack`). |
| `mqttpacket.subscribe` | SUBSCRIBE and SUBACK (`Subscribe`, `Suback`). |
| `mqttpacket.unsubscribe` | UNSUBSCRIBE and UNSUBACK (`Unsubscribe`). |
| `mqttpacket.format` | One-line, human-readable descriptions of packets (`to_client_string`, `to_server_string`, `packet_name` and the `format_*` functions). |
| `mqttpacket.transport` | A TCP transport with a receive timeout (`SocketTransport`). |

Errors are raised as exceptions, and `PacketError` is the base class for all of them:

- `BufferTooShortError` is raised when a packet does not fit in the space allowed for it.
- `ReadError` is raised when incoming data is malformed or cannot be read.

## Building packets

Every `serialize_*` function returns the complete packet as `bytes`:

```python
from mqttpacket.connect import ConnectOptions, Will, serialize_connect, serialize_pingreq
from mqttpacket.publish import serialize_publish, serialize_puback

connect = serialize_connect(ConnectOptions(client_id="sensor-1"))  # 3.1.1, keep alive 60, clean session
with_will = serialize_connect(
    ConnectOptions(client_id="sensor-1", will=Will(topic="status", message="offline"))
)
ping = serialize_pingreq()                       # b"\xc0\x00"
message = serialize_publish(False, 1, False, 10, "sensors/temperature", b"21.5")
ack = serialize_puback(10)                       # b"\x40\x02\x00\x0a"
```

`ConnectOptions` sends a user name or password when that field is not `None`.
Set `mqtt_version=3` to produce an MQTT 3.1 (`MQIsdp`) CONNECT packet.

## Parsing packets

The `deserialize_*` functions each take the bytes of one whole packet and
return the result. Most of them return a small dataclass:

```python
from mqttpacket.connect import deserialize_connack
from mqttpacket.publish import deserialize_ack, deserialize_publish

connack = deserialize_connack(b"\x20\x02\x00\x00")   # Connack(session_present=False, return_code=0)
ack = deserialize_ack(b"\x40\x02\x00\x0a")           # Ack(packet_type=4, dup=False, packet_id=10)
```

Strings in parsed packets, such as topics and client ids, come back as `bytes`.
`deserialize_unsuback` returns the packet id as an integer.

## Describing packets

Use `to_client_string` for packets that a client receives and
`to_server_string` for packets that a server receives. When a packet cannot
be parsed, both return an empty string:

```python
from mqttpacket.format import to_client_string

print(to_client_string(b"\x40\x02\x00\x0a"))   # PUBACK, packet id 10
```

## Carrying packets over TCP

`SocketTransport(host, port, timeout)` opens a TCP connection. When the host
name resolves to several addresses, it prefers an IPv4 one. The receive
timeout is given in seconds. You can use the transport as a context manager,
which closes it on exit.

`read_packet(getdata, buflen)` reads exactly one packet from any callable that
returns a requested number of bytes. It returns the packet type together with
the complete packet bytes:

```python
from mqttpacket.connect import ConnectOptions, serialize_connect, serialize_disconnect
from mqttpacket.packet import read_packet
from mqttpacket.transport import SocketTransport

with SocketTransport("localhost", 1883, 1.0) as transport:
    transport.send(serialize_connect(ConnectOptions(client_id="example")))
    packet_type, reply = read_packet(transport.getdata, 1024)
    transport.send(serialize_disconnect())
```

When bytes arrive a few at a time, use `NonBlockingReader(getdata, buflen)`.
Call `poll()` repeatedly. Until a whole packet has arrived, it returns `None`
and keeps its place between calls. Once the packet is complete, it returns
`(type, packet)`. Its source must return an empty result when nothing is
ready. `SocketTransport.getdata_nb` behaves this way: it returns whatever
bytes arrive within the timeout, or `b""` if none do.

## What this package does not do

This package is a codec, not an MQTT client or broker. It does not:

- manage sessions, keep-alive pings, retries or packet-id allocation;
- provide a command-line program;
- provide a ready-made transport for serial lines or other non-socket links.

To use such a link, pass your own `getdata(count)` callable to `read_packet`
or `NonBlockingReader`.