"""Blocking and polling TCP transport for a single MQTT connection."""

from __future__ import annotations

import socket
from typing import Optional

_WAITALL = getattr(socket, "MSG_WAITALL", 0)


def _resolve(host: str, port: int) -> tuple[int, tuple]:
    """Resolve ``host``, preferring an IPv4 address over an IPv6 one."""
    if host.startswith("["):
        host = host[1:]
    if host.endswith("]"):
        host = host[:-1]
    results = socket.getaddrinfo(
        host, port, socket.AF_UNSPEC, socket.SOCK_STREAM, socket.IPPROTO_TCP
    )
    if not results:
        raise OSError(f"no address found for {host!r}")
    chosen = next((r for r in results if r[0] == socket.AF_INET), results[0])
    family, _, _, _, address = chosen
    if family not in (socket.AF_INET, getattr(socket, "AF_INET6", None)):
        raise OSError(f"unsupported address family for {host!r}")
    return family, address


class SocketTransport:
    """A TCP connection with a receive timeout, used to move packet bytes."""

    def __init__(self, host: str, port: int, timeout: Optional[float] = 1.0):
        family, address = _resolve(host, port)
        sock = socket.socket(family, socket.SOCK_STREAM)
        try:
            sock.connect(address)
        except BaseException:
            sock.close()
            raise
        sock.settimeout(timeout)
        self._sock: Optional[socket.socket] = sock

    def _socket(self) -> socket.socket:
        if self._sock is None:
            raise OSError("transport is closed")
        return self._sock

    def send(self, data: bytes) -> int:
        """Write ``data`` to the connection and return the number of bytes sent."""
        return self._socket().send(bytes(data))

    def getdata(self, count: int) -> bytes:
        """Block until ``count`` bytes arrive, the peer closes, or the timeout expires."""
        return self._socket().recv(count, _WAITALL)

    def getdata_nb(self, count: int) -> bytes:
        """Return whatever bytes are ready, up to ``count``; empty if none arrived."""
        try:
            return self._socket().recv(count)
        except OSError:
            return b""

    def close(self) -> None:
        """Shut down the write side, drain, and close the connection."""
        sock, self._sock = self._sock, None
        if sock is None:
            return
        try:
            sock.shutdown(socket.SHUT_WR)
            sock.recv(0)
        except OSError:
            pass
        finally:
            sock.close()

    def __enter__(self) -> "SocketTransport":
        return self

    def __exit__(self, *args) -> None:
        self.close()