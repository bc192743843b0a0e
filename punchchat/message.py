"""Datagram messages: a 2-byte magic, 2-byte type, 4-byte length and a body."""

from __future__ import annotations

import socket
import struct
from dataclasses import dataclass
from enum import IntEnum

from punchchat import logger
from punchchat.endpoint import Endpoint

MAGIC = 0x7853
HEAD_FORMAT = ">HHI"
HEAD_LEN = struct.calcsize(HEAD_FORMAT)
SEND_BUFSIZE = 1024
RECV_BUFSIZE = 1024


class MessageType(IntEnum):
    LOGIN = 0
    LOGOUT = 1
    LIST = 2
    PUNCH = 3
    PING = 4
    PONG = 5
    REPLY = 6
    TEXT = 7
    ADDRESS = 8
    GAME_INVITE = 9
    GAME_ACCEPT = 10
    GAME_REFUSE = 11
    GAME_SET = 12
    GAME_WIN = 13
    GAME_LOSE = 14
    GAME_TIE = 15
    END = 16


_TYPE_NAMES = {
    MessageType.LOGIN: "LOGIN",
    MessageType.LOGOUT: "LOGOUT",
    MessageType.LIST: "LIST",
    MessageType.PUNCH: "PUNCH",
    MessageType.PING: "PING",
    MessageType.PONG: "PONG",
    MessageType.REPLY: "REPLY",
    MessageType.TEXT: "TEXT",
    MessageType.ADDRESS: "ADDRESS",
    MessageType.GAME_INVITE: "INVITE",
    MessageType.GAME_ACCEPT: "ACCEPT",
    MessageType.GAME_REFUSE: "REFUSE",
    MessageType.GAME_SET: "SERT",
    MessageType.GAME_WIN: "WIN",
    MessageType.GAME_LOSE: "LOSE",
    MessageType.GAME_TIE: "TIE",
}


class MessageError(ValueError):
    """A message could not be packed or unpacked."""


def type_name(mtype: int) -> str:
    """Return the display name of a message type, ``UNKNOW`` if it has none."""
    try:
        return _TYPE_NAMES.get(MessageType(mtype), "UNKNOW")
    except ValueError:
        return "UNKNOW"


def _as_type(value: int) -> int:
    try:
        return MessageType(value)
    except ValueError:
        return value


@dataclass(frozen=True)
class Message:
    """One datagram: a type and a body of bytes."""

    mtype: int
    body: bytes = b""

    def pack(self, bufsize: int = SEND_BUFSIZE) -> bytes:
        """Serialise the message; raise MessageError if it exceeds ``bufsize``."""
        if bufsize < HEAD_LEN + len(self.body):
            raise MessageError("buf too small")
        return struct.pack(HEAD_FORMAT, MAGIC, int(self.mtype) & 0xFFFF, len(self.body)) + self.body

    @classmethod
    def unpack(cls, data: bytes) -> Message:
        """Parse a datagram; a body shorter than declared is truncated to what arrived."""
        if len(data) < HEAD_LEN:
            raise MessageError(f"datagram of {len(data)} bytes is shorter than the header")
        magic, mtype, length = struct.unpack_from(HEAD_FORMAT, data)
        if magic != MAGIC:
            raise MessageError(f"bad magic 0x{magic:x}")
        available = len(data) - HEAD_LEN
        if length > available:
            logger.warn(
                "message declared body size(%d) is larger than what's received (%d), truncating",
                length,
                available,
            )
            length = available
        return cls(_as_type(mtype), bytes(data[HEAD_LEN:HEAD_LEN + length]))

    def text(self) -> str:
        """The body as text, up to the first NUL byte."""
        return self.body.split(b"\0", 1)[0].decode("utf-8", errors="replace")


def send_message(sock: socket.socket, peer: Endpoint, message: Message) -> int:
    """Send ``message`` to ``peer`` without blocking; return the bytes sent.

    Raises MessageError if the message is too large and OSError if sending fails.
    """
    flags = getattr(socket, "MSG_DONTWAIT", 0)
    return sock.sendto(message.pack(), flags, peer.to_address())


def send_text(sock: socket.socket, peer: Endpoint, mtype: int, text: str | bytes | None = None) -> int:
    """Send a message whose body is ``text`` (empty when None)."""
    if text is None:
        body = b""
    elif isinstance(text, str):
        body = text.encode("utf-8")
    else:
        body = bytes(text)
    return send_message(sock, peer, Message(mtype, body))