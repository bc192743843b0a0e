"""IPv4 endpoints written as ``host:port``."""

from __future__ import annotations

import socket
from dataclasses import dataclass

BROADCAST_HOST = "255.255.255.255"

# Longest "host:port" text that is looked at: an IPv4 address, a colon, 5 digits.
_TUPLE_MAX = 21


def _atoi(text: str) -> int:
    """Parse a leading decimal integer the lenient way: junk after it is ignored."""
    text = text.lstrip()
    sign = 1
    if text[:1] in ("+", "-"):
        sign = -1 if text[0] == "-" else 1
        text = text[1:]
    digits = ""
    for char in text:
        if not char.isdigit() or not char.isascii():
            break
        digits += char
    return sign * int(digits) if digits else 0


def _normalise_host(host: str) -> str:
    """Return the dotted-quad form of ``host``, or the broadcast address if invalid."""
    try:
        return socket.inet_ntoa(socket.inet_aton(host))
    except (OSError, UnicodeError, ValueError):
        return BROADCAST_HOST


@dataclass(frozen=True)
class Endpoint:
    """An IPv4 address and UDP port."""

    host: str
    port: int

    def __post_init__(self) -> None:
        object.__setattr__(self, "host", _normalise_host(self.host))
        object.__setattr__(self, "port", self.port & 0xFFFF)

    @classmethod
    def from_string(cls, text: str) -> Endpoint:
        """Parse ``host:port``; a text lacking either part gives ``255.255.255.255:0``."""
        parts = [part for part in text[:_TUPLE_MAX].split(":") if part]
        if len(parts) < 2:
            return cls(BROADCAST_HOST, 0)
        return cls(parts[0], _atoi(parts[1]))

    @classmethod
    def from_address(cls, address: tuple) -> Endpoint:
        """Build an endpoint from a socket address tuple."""
        host, port = address[0], address[1]
        return cls(host, port)

    def to_address(self) -> tuple[str, int]:
        """Return the socket address tuple for this endpoint."""
        return (self.host, self.port)

    def __str__(self) -> str:
        return f"{self.host}:{self.port}"