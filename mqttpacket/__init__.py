"""Serialize and deserialize MQTT 3.1 and 3.1.1 control packets, with a TCP transport."""

__version__ = "1.0.0"

__all__ = [
    "packet",
    "connect",
    "publish",
    "subscribe",
    "unsubscribe",
    "format",
    "transport",
]